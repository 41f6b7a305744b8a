"""
Genetic Algorithm engine for EvoSim.

One generation step:
  for every slot in the population:
    1. select two parents (the same individual may be picked twice)
    2. cross their genomes over into a child
    3. mutate the child in place

Selection, crossover and mutation are independent strategy objects
injected into GeneticAlgorithm, so any of them can be swapped without
touching the engine. Every method takes the random generator explicitly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from exceptions import DegenerateSelection, InvalidConfiguration, ShapeMismatch


class Individual(NamedTuple):
    """A genome together with the fitness it earned."""

    genome: np.ndarray
    fitness: float


def _fitnesses(population) -> np.ndarray:
    if len(population) == 0:
        raise InvalidConfiguration("cannot select from an empty population")
    fitness = np.array([float(ind[1]) for ind in population], dtype=np.float64)
    if np.any(fitness < 0):
        raise InvalidConfiguration("fitness values must be non-negative")
    return fitness


# ──────────────────────────────────────────────────────────────────────────────
# Selection
# ──────────────────────────────────────────────────────────────────────────────

class SelectionMethod(ABC):
    """Picks one individual from a scored population."""

    @abstractmethod
    def select(self, rng: np.random.Generator, population):
        """Return one member of `population`."""


class RouletteWheelSelection(SelectionMethod):
    """
    Fitness-proportionate selection: an individual is drawn with
    probability fitness / Σ fitness.

    When every fitness is zero the wheel has no area. `zero_fitness`
    decides what happens then: "uniform" picks uniformly at random,
    "raise" raises DegenerateSelection.
    """

    POLICIES = ("uniform", "raise")

    def __init__(self, zero_fitness: str = "uniform"):
        if zero_fitness not in self.POLICIES:
            raise InvalidConfiguration(
                f"zero_fitness must be one of {self.POLICIES}, got {zero_fitness!r}")
        self.zero_fitness = zero_fitness

    def select(self, rng: np.random.Generator, population):
        fitness = _fitnesses(population)
        total = fitness.sum()
        if total == 0:
            if self.zero_fitness == "raise":
                raise DegenerateSelection(
                    f"all {len(population)} individuals have zero fitness")
            return population[int(rng.integers(0, len(population)))]
        return population[int(rng.choice(len(population), p=fitness / total))]


class RankSelection(SelectionMethod):
    """
    Probability proportional to rank (worst = 1, best = N). Equal
    fitnesses get equal (averaged) ranks, so list order never matters.
    """

    def select(self, rng: np.random.Generator, population):
        fitness = _fitnesses(population)
        ordinal = np.empty(len(fitness), dtype=np.float64)
        ordinal[np.argsort(fitness, kind="stable")] = np.arange(1, len(fitness) + 1)
        # tied fitnesses share their mean rank
        _, group = np.unique(fitness, return_inverse=True)
        group = group.ravel()
        ranks = (np.bincount(group, weights=ordinal) / np.bincount(group))[group]
        return population[int(rng.choice(len(population), p=ranks / ranks.sum()))]


class TournamentSelection(SelectionMethod):
    """Best of `size` individuals drawn without replacement."""

    def __init__(self, size: int = 3):
        if size < 1:
            raise InvalidConfiguration(f"tournament size must be at least 1, got {size}")
        self.size = size

    def select(self, rng: np.random.Generator, population):
        fitness = _fitnesses(population)
        contenders = rng.choice(len(population), min(self.size, len(population)),
                                replace=False)
        # first contender wins ties
        best = contenders[int(np.argmax(fitness[contenders]))]
        return population[int(best)]


# ──────────────────────────────────────────────────────────────────────────────
# Crossover
# ──────────────────────────────────────────────────────────────────────────────

def _parents(parent_a, parent_b):
    a = np.asarray(parent_a, dtype=np.float64)
    b = np.asarray(parent_b, dtype=np.float64)
    if a.shape != b.shape:
        raise ShapeMismatch(
            f"parents differ in length: {a.size} vs {b.size}")
    return a, b


class CrossoverMethod(ABC):
    """Combines two parent genomes into one child genome."""

    @abstractmethod
    def crossover(self, rng: np.random.Generator, parent_a, parent_b) -> np.ndarray:
        """Return a new genome of the parents' length."""


class UniformCrossover(CrossoverMethod):
    """Each gene independently taken from parent A or B with probability 0.5."""

    def crossover(self, rng: np.random.Generator, parent_a, parent_b) -> np.ndarray:
        a, b = _parents(parent_a, parent_b)
        return np.where(rng.random(a.size) < 0.5, a, b)


class SinglePointCrossover(CrossoverMethod):
    """
    Pick a random split point, take genes [0:split] from parent A and
    [split:] from parent B.
    """

    def crossover(self, rng: np.random.Generator, parent_a, parent_b) -> np.ndarray:
        a, b = _parents(parent_a, parent_b)
        split = int(rng.integers(0, a.size + 1))
        return np.concatenate([a[:split], b[split:]])


# ──────────────────────────────────────────────────────────────────────────────
# Mutation
# ──────────────────────────────────────────────────────────────────────────────

class MutationMethod(ABC):
    """Perturbs a genome in place."""

    @abstractmethod
    def mutate(self, rng: np.random.Generator, genome) -> None:
        """Modify `genome` without changing its length."""


class GaussianMutation(MutationMethod):
    """
    For each gene: pick a sign (±1, even odds), then with probability
    `chance` add sign * coeff * u with u ~ U[0, 1).

    Despite the name this is a bounded random walk, not a normal draw.
    """

    def __init__(self, chance: float, coeff: float):
        if not 0.0 <= chance <= 1.0:
            raise InvalidConfiguration(f"mutation chance must be in [0, 1], got {chance}")
        if coeff < 0:
            raise InvalidConfiguration(f"mutation coeff must be >= 0, got {coeff}")
        self.chance = float(chance)
        self.coeff  = float(coeff)

    def mutate(self, rng: np.random.Generator, genome) -> None:
        n = len(genome)
        sign = np.where(rng.random(n) < 0.5, -1.0, 1.0)
        hit  = rng.random(n) < self.chance
        step = rng.random(n)
        genome[:] = np.asarray(genome, dtype=np.float64) + hit * sign * self.coeff * step


# ──────────────────────────────────────────────────────────────────────────────
# Engine
# ──────────────────────────────────────────────────────────────────────────────

class GeneticAlgorithm:
    """Runs one generation step with the injected strategies."""

    def __init__(self, selection_method: SelectionMethod,
                 crossover_method: CrossoverMethod,
                 mutation_method: MutationMethod):
        self.selection_method = selection_method
        self.crossover_method = crossover_method
        self.mutation_method  = mutation_method

    def evolve(self, rng: np.random.Generator, population) -> list:
        """
        Produce exactly len(population) child genomes. No elitism: every
        child is bred fresh from two selected parents.
        """
        children = []
        for _ in range(len(population)):
            parent_a = self.selection_method.select(rng, population)[0]
            parent_b = self.selection_method.select(rng, population)[0]
            child = self.crossover_method.crossover(rng, parent_a, parent_b)
            self.mutation_method.mutate(rng, child)
            children.append(child)
        return children


# ──────────────────────────────────────────────────────────────────────────────
# Stats
# ──────────────────────────────────────────────────────────────────────────────

@dataclass
class Statistics:
    size: int
    min_fitness: float
    max_fitness: float
    avg_fitness: float
    median_fitness: float
    fitnesses: list = field(default_factory=list)

    @classmethod
    def from_population(cls, population) -> "Statistics":
        fitnesses = [float(ind[1]) for ind in population]
        if not fitnesses:
            return cls(0, 0.0, 0.0, 0.0, 0.0, [])
        return cls(
            size           = len(fitnesses),
            min_fitness    = min(fitnesses),
            max_fitness    = max(fitnesses),
            avg_fitness    = float(np.mean(fitnesses)),
            median_fitness = float(np.median(fitnesses)),
            fitnesses      = fitnesses,
        )

    def as_dict(self) -> dict:
        return {
            "population":     self.size,
            "min_fitness":    self.min_fitness,
            "max_fitness":    self.max_fitness,
            "avg_fitness":    round(self.avg_fitness, 4),
            "median_fitness": self.median_fitness,
            "fitnesses":      list(self.fitnesses),
        }


SELECTION_METHODS = {
    "roulette":   RouletteWheelSelection,
    "rank":       RankSelection,
    "tournament": TournamentSelection,
}

CROSSOVER_METHODS = {
    "uniform":      UniformCrossover,
    "single_point": SinglePointCrossover,
}
