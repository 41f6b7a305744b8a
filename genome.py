"""
Genome helpers for EvoSim.

A genome is a flat 1-D float array holding every bias and weight of a
creature's brain. Its layout is fixed by the brain topology:

  for each pair of adjacent layers (inputs → outputs):
      for each neuron of the output layer:
          bias, weight_0, weight_1, …, weight_{inputs-1}

so its length is Σ (inputs × outputs + outputs). The genetic algorithm
treats positions as opaque; only neural_network.py decodes them.
"""

import numpy as np

from exceptions import InvalidConfiguration

# ──────────────────────────────────────────────────────────────────────────────
# Topology
# ──────────────────────────────────────────────────────────────────────────────

def validate_topology(topology) -> tuple:
    """Return the topology as a tuple of ints, raising if it is unusable."""
    topology = tuple(topology)
    if len(topology) < 2:
        raise InvalidConfiguration(
            f"topology needs an input and an output layer, got {topology!r}")
    for width in topology:
        try:
            whole = int(width) == width
        except (TypeError, ValueError, OverflowError):
            whole = False
        if not whole or width < 1:
            raise InvalidConfiguration(
                f"layer widths must be positive integers, got {topology!r}")
    return tuple(int(w) for w in topology)


def genome_length(topology) -> int:
    """Number of genes needed to encode a network of this topology."""
    topology = validate_topology(topology)
    return sum(n_in * n_out + n_out
               for n_in, n_out in zip(topology[:-1], topology[1:]))


# ──────────────────────────────────────────────────────────────────────────────
# Population-level operations
# ──────────────────────────────────────────────────────────────────────────────

def random_genome(topology, rng: np.random.Generator) -> np.ndarray:
    """Every gene drawn independently and uniformly from [-1, 1]."""
    return rng.uniform(-1.0, 1.0, size=genome_length(topology))


def genome_distance(genome_a, genome_b) -> float:
    """Euclidean distance between two genomes of equal length."""
    a = np.asarray(genome_a, dtype=np.float64)
    b = np.asarray(genome_b, dtype=np.float64)
    return float(np.linalg.norm(a - b))


def genetic_diversity(genomes: list, rng: np.random.Generator,
                      sample: int = 50) -> float:
    """
    Estimate genetic diversity as the average pairwise distance over a
    random sample of genomes. 0 means every sampled genome is identical.
    """
    if len(genomes) < 2:
        return 0.0
    sample_size = min(sample, len(genomes))
    idx = rng.choice(len(genomes), sample_size, replace=False)
    sampled = [genomes[i] for i in idx]
    total, count = 0.0, 0
    for i in range(len(sampled)):
        for j in range(i + 1, len(sampled)):
            total += genome_distance(sampled[i], sampled[j])
            count += 1
    return total / count if count else 0.0
