"""
Creature class for EvoSim.

Each creature has:
  - (x, y) position in the toroidal world
  - a heading (rotation, radians) and a scalar speed
  - an Eye and a NeuralNetwork brain built from its genome
  - fitness: how much food it has eaten this generation

Every simulation step the creature:
  1. Looks at the food through its eye
  2. Runs its neural network
  3. Turns, accelerates/brakes and moves forward
"""

import math

import numpy as np

from config import (
    BRAIN_TOPOLOGY, ROTATION_ACCEL, SPEED_ACCEL,
    SPEED_INITIAL, SPEED_MAX, SPEED_MIN,
)
from exceptions import InvalidConfiguration
from eye import Eye
from neural_network import NeuralNetwork


class Creature:
    """
    A single agent in the foraging simulation.
    """
    __slots__ = ("position", "rotation", "speed", "eye", "brain", "fitness")

    def __init__(self, position, rotation: float, brain: NeuralNetwork,
                 eye: Eye = None, speed: float = SPEED_INITIAL):
        self.position = np.array(position, dtype=np.float64)
        self.rotation = float(rotation)
        self.speed    = float(speed)
        self.eye      = eye if eye is not None else Eye()
        self.brain    = brain
        self.fitness  = 0

        if self.brain.topology[0] != self.eye.cells:
            raise InvalidConfiguration(
                f"brain takes {self.brain.topology[0]} inputs but the eye "
                f"has {self.eye.cells} cells")
        if self.brain.topology[-1] != 2:
            raise InvalidConfiguration(
                f"brain must have 2 outputs (rotation, speed), "
                f"got {self.brain.topology[-1]}")

    # ──────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_genome(cls, genome, rng: np.random.Generator, bounds,
                    topology=BRAIN_TOPOLOGY, eye: Eye = None) -> "Creature":
        """
        Place a creature uniformly at random with a random heading.
        A genome of None gives a freshly randomised brain.
        """
        position = rng.random(2) * np.asarray(bounds, dtype=np.float64)
        rotation = rng.uniform(-math.pi, math.pi)
        if genome is None:
            brain = NeuralNetwork.random(rng, topology)
        else:
            brain = NeuralNetwork.from_weights(topology, genome)
        return cls(position, rotation, brain, eye)

    def as_genome(self) -> np.ndarray:
        return self.brain.weights()

    @property
    def heading(self) -> np.ndarray:
        return np.array([math.cos(self.rotation), math.sin(self.rotation)])

    # ──────────────────────────────────────────────────────────────────────────

    def think(self, food_positions, bounds):
        """
        Sense → think. Returns (rotation_delta, speed_delta).

        The brain's ReLU outputs are clamped to [0, 1] and re-centred on
        0.5 so a creature can turn either way and brake as well as speed up.
        """
        vision = self.eye.process_vision(self.position, self.rotation,
                                         food_positions, bounds)
        response = np.clip(self.brain.propagate(vision), 0.0, 1.0) - 0.5
        rotation_delta = float(response[0]) * 2 * ROTATION_ACCEL
        speed_delta    = float(response[1]) * 2 * SPEED_ACCEL
        return rotation_delta, speed_delta

    def act(self, rotation_delta: float, speed_delta: float, bounds):
        """Turn, change speed, then move forward and wrap around the edges."""
        self.rotation = (self.rotation + rotation_delta) % (2 * math.pi)
        self.speed    = min(SPEED_MAX, max(SPEED_MIN, self.speed + speed_delta))
        self.position = (self.position + self.heading * self.speed) \
            % np.asarray(bounds, dtype=np.float64)

    def step(self, food_positions, bounds):
        """Execute one simulation step: sense → think → act."""
        self.act(*self.think(food_positions, bounds), bounds)
