"""
World for EvoSim.

The world is a continuous width × height torus holding a fixed number
of creatures and food items. Each tick every creature moves, then every
food item checks whether a creature is close enough to eat it. Eaten
food is relocated, never destroyed, so the food count stays constant.
"""

import numpy as np

from config import (
    BRAIN_TOPOLOGY, FOOD_RADIUS, NUM_CREATURES, NUM_FOODS,
    WORLD_HEIGHT, WORLD_WIDTH,
)
from creature import Creature
from exceptions import InvalidConfiguration, ShapeMismatch
from eye import Eye, wrapped_delta
from genome import genome_length, validate_topology


class Food:
    __slots__ = ("position",)

    def __init__(self, position):
        self.position = np.array(position, dtype=np.float64)

    @classmethod
    def random(cls, rng: np.random.Generator, bounds) -> "Food":
        food = cls((0.0, 0.0))
        food.relocate(rng, bounds)
        return food

    def relocate(self, rng: np.random.Generator, bounds):
        self.position = rng.random(2) * np.asarray(bounds, dtype=np.float64)


class World:
    """
    Owns every creature and food item of one generation.
    """

    def __init__(self, creatures: list, foods: list,
                 width: float = WORLD_WIDTH, height: float = WORLD_HEIGHT,
                 food_radius: float = FOOD_RADIUS):
        if not creatures:
            raise InvalidConfiguration("a world needs at least one creature")
        if not foods:
            raise InvalidConfiguration("a world needs at least one food item")
        if width <= 0 or height <= 0:
            raise InvalidConfiguration(
                f"world bounds must be positive, got {width} × {height}")
        if food_radius <= 0:
            raise InvalidConfiguration(f"food_radius must be > 0, got {food_radius}")
        self.creatures   = list(creatures)
        self.foods       = list(foods)
        self.width       = float(width)
        self.height      = float(height)
        self.food_radius = float(food_radius)

    # ──────────────────────────────────────────────────────────────────────────
    # Spawning
    # ──────────────────────────────────────────────────────────────────────────

    @classmethod
    def random(cls, rng: np.random.Generator,
               num_creatures: int = NUM_CREATURES, num_foods: int = NUM_FOODS,
               width: float = WORLD_WIDTH, height: float = WORLD_HEIGHT,
               topology=BRAIN_TOPOLOGY, eye: Eye = None,
               food_radius: float = FOOD_RADIUS) -> "World":
        """First generation: every creature gets a random brain."""
        return cls.from_genomes(rng, [None] * num_creatures, num_foods,
                                width, height, topology, eye, food_radius)

    @classmethod
    def from_genomes(cls, rng: np.random.Generator, genomes: list,
                     num_foods: int = NUM_FOODS,
                     width: float = WORLD_WIDTH, height: float = WORLD_HEIGHT,
                     topology=BRAIN_TOPOLOGY, eye: Eye = None,
                     food_radius: float = FOOD_RADIUS) -> "World":
        """
        Spawn one creature per genome (None = random brain) at random
        positions, plus `num_foods` randomly placed food items.
        """
        topology = validate_topology(topology)
        if not genomes:
            raise InvalidConfiguration("a world needs at least one creature")
        if num_foods < 1:
            raise InvalidConfiguration("a world needs at least one food item")
        if width <= 0 or height <= 0:
            raise InvalidConfiguration(
                f"world bounds must be positive, got {width} × {height}")
        expected = genome_length(topology)
        for g in genomes:
            if g is not None and len(g) != expected:
                raise ShapeMismatch(
                    f"topology {topology} needs {expected} genes, got {len(g)}")

        eye = eye if eye is not None else Eye(cells=topology[0])
        bounds = (width, height)
        creatures = [Creature.from_genome(g, rng, bounds, topology, eye)
                     for g in genomes]
        foods = [Food.random(rng, bounds) for _ in range(num_foods)]
        return cls(creatures, foods, width, height, food_radius)

    # ──────────────────────────────────────────────────────────────────────────
    # Ticking
    # ──────────────────────────────────────────────────────────────────────────

    def tick(self, rng: np.random.Generator):
        """Advance the world by one time step."""
        self.process_movements()
        self.process_collisions(rng)

    def process_movements(self):
        bounds = self.bounds
        food_positions = self.food_positions()
        for creature in self.creatures:
            creature.step(food_positions, bounds)

    def process_collisions(self, rng: np.random.Generator):
        """
        Each food item within `food_radius` of a creature is eaten by the
        first such creature (in creature order) and relocated.
        """
        bounds = self.bounds
        positions = self.creature_positions()
        for food in self.foods:
            delta = wrapped_delta(food.position, positions, bounds)
            close = np.hypot(delta[:, 0], delta[:, 1]) < self.food_radius
            if np.any(close):
                self.creatures[int(np.argmax(close))].fitness += 1
                food.relocate(rng, bounds)

    # ──────────────────────────────────────────────────────────────────────────
    # Read accessors
    # ──────────────────────────────────────────────────────────────────────────

    @property
    def bounds(self) -> tuple:
        return (self.width, self.height)

    def creature_positions(self) -> np.ndarray:
        return np.array([c.position for c in self.creatures]).reshape(-1, 2)

    def creature_rotations(self) -> np.ndarray:
        return np.array([c.rotation for c in self.creatures])

    def food_positions(self) -> np.ndarray:
        return np.array([f.position for f in self.foods]).reshape(-1, 2)

    def fitnesses(self) -> list:
        return [c.fitness for c in self.creatures]

    def snapshot(self) -> dict:
        """
        Copies of everything a renderer needs:
          creatures: (n, 2) positions, rotations: (n,), foods: (m, 2) positions
        """
        return {
            "creatures": self.creature_positions(),
            "rotations": self.creature_rotations(),
            "foods":     self.food_positions(),
        }
