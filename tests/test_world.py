import math

import numpy as np
import pytest

from config import BRAIN_TOPOLOGY, SPEED_MAX, SPEED_MIN
from creature import Creature
from exceptions import InvalidConfiguration, ShapeMismatch
from genome import genome_length
from neural_network import NeuralNetwork
from world import Food, World


def _creature(rng, position, rotation=0.0):
    return Creature(position, rotation, NeuralNetwork.random(rng, BRAIN_TOPOLOGY))


def test_random_world_has_requested_counts():
    rng = np.random.default_rng(0)
    world = World.random(rng, num_creatures=7, num_foods=13)
    assert len(world.creatures) == 7
    assert len(world.foods) == 13
    snap = world.snapshot()
    assert snap["creatures"].shape == (7, 2)
    assert snap["rotations"].shape == (7,)
    assert snap["foods"].shape == (13, 2)
    assert np.all((snap["creatures"] >= 0) & (snap["creatures"] < 1))


@pytest.mark.parametrize("kwargs", [{"num_creatures": 0}, {"num_foods": 0},
                                    {"width": 0.0}])
def test_empty_or_degenerate_world_is_configuration_error(kwargs):
    with pytest.raises(InvalidConfiguration):
        World.random(np.random.default_rng(0), **kwargs)


def test_genome_length_mismatch_is_fatal():
    rng = np.random.default_rng(0)
    with pytest.raises(ShapeMismatch):
        World.from_genomes(rng, [np.zeros(genome_length(BRAIN_TOPOLOGY) - 1)])


def test_from_genomes_builds_brains_from_given_genomes():
    rng = np.random.default_rng(0)
    genomes = [rng.uniform(-1, 1, genome_length(BRAIN_TOPOLOGY)) for _ in range(3)]
    world = World.from_genomes(rng, genomes, num_foods=5)
    for creature, genome in zip(world.creatures, genomes):
        np.testing.assert_array_equal(creature.as_genome(), genome)
        assert creature.fitness == 0


def test_eye_must_match_brain_inputs():
    rng = np.random.default_rng(0)
    with pytest.raises(InvalidConfiguration):
        Creature((0.5, 0.5), 0.0, NeuralNetwork.random(rng, (4, 2)))


def test_movement_wraps_around_the_edges():
    rng = np.random.default_rng(0)
    creature = _creature(rng, (0.999, 0.0005), rotation=0.0)
    creature.speed = 0.004
    creature.act(0.0, 0.0, (1.0, 1.0))
    assert creature.position[0] == pytest.approx(0.003)

    creature.rotation = -math.pi / 2
    creature.act(0.0, 0.0, (1.0, 1.0))
    assert creature.position[1] == pytest.approx(1.0 - 0.0035)


def test_speed_is_clamped():
    rng = np.random.default_rng(0)
    creature = _creature(rng, (0.5, 0.5))
    creature.act(0.0, 1.0, (1.0, 1.0))
    assert creature.speed == SPEED_MAX
    creature.act(0.0, -1.0, (1.0, 1.0))
    assert creature.speed == SPEED_MIN


def test_eating_relocates_food_and_scores_once():
    rng = np.random.default_rng(1)
    creature = _creature(rng, (0.5, 0.5))
    food = Food((0.505, 0.5))
    world = World([creature], [food])

    world.process_collisions(rng)

    assert creature.fitness == 1
    assert not np.allclose(food.position, (0.505, 0.5))
    assert len(world.foods) == 1


def test_simultaneous_captures_are_independent():
    rng = np.random.default_rng(2)
    first = _creature(rng, (0.2, 0.2))
    second = _creature(rng, (0.2, 0.2))
    loner = _creature(rng, (0.8, 0.8))
    foods = [Food((0.2, 0.2)), Food((0.201, 0.2)), Food((0.8, 0.801))]
    world = World([first, second, loner], foods)

    world.process_collisions(rng)

    # shared food goes to the first creature in order
    assert first.fitness == 2
    assert second.fitness == 0
    assert loner.fitness == 1


def test_capture_works_across_the_wrap():
    rng = np.random.default_rng(3)
    creature = _creature(rng, (0.998, 0.5))
    world = World([creature], [Food((0.002, 0.5))])
    world.process_collisions(rng)
    assert creature.fitness == 1


def test_far_food_is_not_eaten():
    rng = np.random.default_rng(3)
    creature = _creature(rng, (0.1, 0.1))
    food = Food((0.5, 0.5))
    world = World([creature], [food])
    world.process_collisions(rng)
    assert creature.fitness == 0
    np.testing.assert_array_equal(food.position, (0.5, 0.5))


def test_tick_keeps_counts_and_fitness_is_monotonic():
    rng = np.random.default_rng(4)
    world = World.random(rng, num_creatures=10, num_foods=40)
    previous = world.fitnesses()
    for _ in range(100):
        world.tick(rng)
        current = world.fitnesses()
        assert all(c >= p for c, p in zip(current, previous))
        previous = current
    assert len(world.creatures) == 10
    assert len(world.foods) == 40
    positions = world.creature_positions()
    assert np.all((positions >= 0) & (positions < 1))


def test_read_accessors_do_not_mutate():
    rng = np.random.default_rng(5)
    world = World.random(rng, num_creatures=3, num_foods=3)
    snap = world.snapshot()
    snap["creatures"][:] = -1
    assert np.all(world.creature_positions() >= 0)


def test_food_relocate_stays_in_bounds():
    rng = np.random.default_rng(6)
    food = Food((0.5, 0.5))
    for _ in range(50):
        food.relocate(rng, (2.0, 0.5))
        assert 0 <= food.position[0] < 2.0
        assert 0 <= food.position[1] < 0.5
