"""
Simulation Engine for EvoSim.

Orchestrates the full evolutionary loop:
  for each generation:
    1. (Re)spawn the world from the current genomes
    2. Tick it steps_per_gen times
    3. Collect (genome, fitness) for every creature
    4. Breed the next generation with the genetic algorithm
    5. Log stats
"""

import time

import numpy as np

from config import (
    BRAIN_TOPOLOGY, CROSSOVER_METHOD, FOOD_RADIUS, MUTATION_CHANCE,
    MUTATION_COEFF, NUM_CREATURES, NUM_FOODS, SELECTION_METHOD,
    STEPS_PER_GEN, TOURNAMENT_SIZE, WORLD_HEIGHT, WORLD_WIDTH,
)
from exceptions import InvalidConfiguration
from eye import Eye
from genetic_algorithm import (
    CROSSOVER_METHODS, SELECTION_METHODS, GaussianMutation,
    GeneticAlgorithm, Individual, Statistics, TournamentSelection,
)
from genome import genetic_diversity, validate_topology
from world import World


def build_genetic_algorithm(selection: str = SELECTION_METHOD,
                            crossover: str = CROSSOVER_METHOD,
                            mutation_chance: float = MUTATION_CHANCE,
                            mutation_coeff: float = MUTATION_COEFF,
                            tournament_size: int = TOURNAMENT_SIZE) -> GeneticAlgorithm:
    """Assemble a GeneticAlgorithm from strategy names."""
    if selection not in SELECTION_METHODS:
        raise InvalidConfiguration(
            f"unknown selection method {selection!r}, "
            f"expected one of {sorted(SELECTION_METHODS)}")
    if crossover not in CROSSOVER_METHODS:
        raise InvalidConfiguration(
            f"unknown crossover method {crossover!r}, "
            f"expected one of {sorted(CROSSOVER_METHODS)}")
    if selection == "tournament":
        selection_method = TournamentSelection(tournament_size)
    else:
        selection_method = SELECTION_METHODS[selection]()
    return GeneticAlgorithm(
        selection_method,
        CROSSOVER_METHODS[crossover](),
        GaussianMutation(mutation_chance, mutation_coeff),
    )


class Simulation:
    """
    Main simulation controller.

    Every method that consumes randomness takes the generator explicitly;
    the same seed and configuration always replay the same run.
    """

    def __init__(
        self,
        rng:              np.random.Generator,
        num_creatures:    int   = NUM_CREATURES,
        num_foods:        int   = NUM_FOODS,
        steps_per_gen:    int   = STEPS_PER_GEN,
        world_width:      float = WORLD_WIDTH,
        world_height:     float = WORLD_HEIGHT,
        topology                = BRAIN_TOPOLOGY,
        food_radius:      float = FOOD_RADIUS,
        eye:              Eye   = None,
        genetic_algorithm: GeneticAlgorithm = None,
        verbose:          bool  = True,
    ):
        if steps_per_gen < 1:
            raise InvalidConfiguration(
                f"steps_per_gen must be at least 1, got {steps_per_gen}")
        if num_creatures < 1:
            raise InvalidConfiguration("a world needs at least one creature")
        if num_foods < 1:
            raise InvalidConfiguration("a world needs at least one food item")

        self.num_foods     = num_foods
        self.steps_per_gen = steps_per_gen
        self.world_width   = world_width
        self.world_height  = world_height
        self.topology      = validate_topology(topology)
        self.food_radius   = food_radius
        self.eye           = eye if eye is not None else Eye(cells=self.topology[0])
        self.ga            = (genetic_algorithm if genetic_algorithm is not None
                              else build_genetic_algorithm())
        self.verbose       = verbose

        self.world = World.random(
            rng, num_creatures, num_foods, world_width, world_height,
            self.topology, self.eye, food_radius)

        # History
        self.generation = 0
        self.age        = 0            # ticks into the current generation
        self.stats      = []           # list of dicts, one per generation

    # ──────────────────────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────────────────────

    def step(self, rng: np.random.Generator):
        """
        Advance the world by one tick. Returns the generation's stats when
        this tick completes it, else None.
        """
        self.world.tick(rng)
        self.age += 1
        if self.age >= self.steps_per_gen:
            return self.evolve(rng)
        return None

    def train(self, rng: np.random.Generator) -> dict:
        """Tick until the current generation ends; return its stats."""
        while True:
            stats = self.step(rng)
            if stats is not None:
                return stats

    def evolve(self, rng: np.random.Generator) -> dict:
        """
        Generation boundary: score every creature, breed the next
        generation and re-spawn the world with it.
        """
        population = [Individual(c.as_genome(), c.fitness)
                      for c in self.world.creatures]

        genomes = self.ga.evolve(rng, population)

        stats = {"generation": self.generation}
        stats.update(Statistics.from_population(population).as_dict())
        stats["diversity"] = round(
            genetic_diversity([ind.genome for ind in population], rng), 4)
        self.stats.append(stats)

        self.world = World.from_genomes(
            rng, genomes, self.num_foods, self.world_width, self.world_height,
            self.topology, self.eye, self.food_radius)
        self.generation += 1
        self.age = 0
        return stats

    def run(self, rng: np.random.Generator, generations: int,
            on_gen_callback=None) -> list:
        """Run `generations` full generations; returns their stats."""
        completed = []
        for gen_idx in range(generations):
            t0 = time.time()
            stats = self.train(rng)
            elapsed = round(time.time() - t0, 3)
            completed.append(stats)

            if self.verbose:
                self._print_stats(gen_idx, stats, elapsed)

            if on_gen_callback:
                on_gen_callback(gen_idx, stats, self.world)

        if self.verbose:
            print("\n=== Simulation complete ===")
        return completed

    # ──────────────────────────────────────────────────────────────────────────

    def _print_stats(self, gen_idx: int, stats: dict, elapsed: float):
        if gen_idx % 10 == 0 or gen_idx < 5:
            print(
                f"Gen {stats['generation']:>5}  |  "
                f"fitness min {stats['min_fitness']:>4.0f} "
                f"avg {stats['avg_fitness']:>6.2f} "
                f"max {stats['max_fitness']:>4.0f}  |  "
                f"diversity {stats['diversity']:.3f}  |  "
                f"{elapsed:.2f}s"
            )
