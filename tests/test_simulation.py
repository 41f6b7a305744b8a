import numpy as np
import pytest

from exceptions import InvalidConfiguration
from genetic_algorithm import (
    GaussianMutation, GeneticAlgorithm, RouletteWheelSelection,
    SinglePointCrossover, TournamentSelection, UniformCrossover,
)
from simulation import Simulation, build_genetic_algorithm

SMALL = dict(num_creatures=6, num_foods=20, steps_per_gen=40, verbose=False)


def _run(seed, generations=3, **overrides):
    rng = np.random.default_rng(seed)
    sim = Simulation(rng, **{**SMALL, **overrides})
    stats = sim.run(rng, generations)
    genomes = [c.as_genome() for c in sim.world.creatures]
    return sim, stats, genomes


def test_same_seed_replays_identically():
    _, stats_a, genomes_a = _run(7)
    _, stats_b, genomes_b = _run(7)
    assert stats_a == stats_b
    for a, b in zip(genomes_a, genomes_b):
        np.testing.assert_array_equal(a, b)


def test_different_seeds_diverge():
    _, _, genomes_a = _run(1, generations=1)
    _, _, genomes_b = _run(2, generations=1)
    assert not all(np.array_equal(a, b) for a, b in zip(genomes_a, genomes_b))


def test_step_reports_stats_only_at_generation_boundary():
    rng = np.random.default_rng(0)
    sim = Simulation(rng, **SMALL)
    for _ in range(SMALL["steps_per_gen"] - 1):
        assert sim.step(rng) is None
    stats = sim.step(rng)
    assert stats is not None
    assert stats["generation"] == 0
    assert sim.generation == 1
    assert sim.age == 0


def test_evolve_reports_population_and_respawns():
    rng = np.random.default_rng(3)
    sim = Simulation(rng, **SMALL)
    for _ in range(10):
        sim.world.tick(rng)
    fitnesses = sim.world.fitnesses()
    old_world = sim.world

    stats = sim.evolve(rng)

    assert stats["population"] == SMALL["num_creatures"]
    assert stats["fitnesses"] == [float(f) for f in fitnesses]
    assert stats["avg_fitness"] == pytest.approx(np.mean(fitnesses), abs=1e-4)
    assert sim.world is not old_world
    assert len(sim.world.creatures) == SMALL["num_creatures"]
    assert len(sim.world.foods) == SMALL["num_foods"]
    assert all(c.fitness == 0 for c in sim.world.creatures)


def test_train_returns_one_generation():
    rng = np.random.default_rng(4)
    sim = Simulation(rng, **SMALL)
    first = sim.train(rng)
    second = sim.train(rng)
    assert (first["generation"], second["generation"]) == (0, 1)
    assert len(sim.stats) == 2


def test_run_invokes_callback_each_generation():
    seen = []
    rng = np.random.default_rng(5)
    sim = Simulation(rng, **SMALL)
    sim.run(rng, 2, on_gen_callback=lambda idx, stats, world: seen.append(idx))
    assert seen == [0, 1]


def test_run_prints_progress(capsys):
    rng = np.random.default_rng(6)
    sim = Simulation(rng, **{**SMALL, "verbose": True})
    sim.run(rng, 1)
    out = capsys.readouterr().out
    assert "Gen     0" in out
    assert "Simulation complete" in out


def test_custom_strategies_are_used():
    ga = GeneticAlgorithm(TournamentSelection(2), SinglePointCrossover(),
                          GaussianMutation(0.0, 0.0))
    rng = np.random.default_rng(8)
    sim = Simulation(rng, genetic_algorithm=ga, **SMALL)
    assert sim.ga is ga
    assert sim.train(rng)["population"] == SMALL["num_creatures"]


@pytest.mark.parametrize("overrides", [
    {"num_creatures": 0}, {"num_foods": 0}, {"steps_per_gen": 0},
    {"topology": (9,)},
])
def test_bad_configuration_is_rejected(overrides):
    with pytest.raises(InvalidConfiguration):
        Simulation(np.random.default_rng(0), **{**SMALL, **overrides})


def test_build_genetic_algorithm():
    ga = build_genetic_algorithm("roulette", "uniform", 0.1, 0.2)
    assert isinstance(ga.selection_method, RouletteWheelSelection)
    assert isinstance(ga.crossover_method, UniformCrossover)
    assert ga.mutation_method.chance == 0.1
    assert build_genetic_algorithm("tournament", tournament_size=5).selection_method.size == 5
    with pytest.raises(InvalidConfiguration):
        build_genetic_algorithm("lottery")
    with pytest.raises(InvalidConfiguration):
        build_genetic_algorithm(crossover="two_point")
    with pytest.raises(InvalidConfiguration):
        build_genetic_algorithm(mutation_chance=2.0)
