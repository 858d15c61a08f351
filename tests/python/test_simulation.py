from __future__ import annotations

import dataclasses
import math

import numpy as np
import pytest
from pygame.math import Vector2

from evoflock.sim.core.animal import Animal, AnimalIndividual, Food
from evoflock.sim.core.brain import Brain, brain_topology
from evoflock.sim.core.config import AnimalConfig, EyeConfig, SimulationConfig
from evoflock.sim.core.eye import Eye
from evoflock.sim.core.rng import DeterministicRng
from evoflock.sim.core.simulation import Simulation
from evoflock.sim.core.world import World
from evoflock.sim.systems import behaviour
from evoflock.sim.types.statistics import Statistics


def _snapshot(simulation: Simulation):
    return dataclasses.asdict(simulation.world.snapshot())


def test_step_reports_statistics_only_on_generation_boundary(small_config):
    rng = DeterministicRng(small_config.seed)
    simulation = Simulation.random(rng, small_config)

    results = [simulation.step(rng, small_config) for _ in range(small_config.max_generation)]
    assert results == [None] * small_config.max_generation
    assert simulation.age == small_config.max_generation

    stats = simulation.step(rng, small_config)

    assert isinstance(stats, Statistics)
    assert simulation.age == 0
    assert simulation.generation == 1


def test_fast_forward_replaces_population(small_config):
    rng = DeterministicRng(small_config.seed)
    simulation = Simulation.random(rng, small_config)
    old_animals = list(simulation.world.animals)

    stats = simulation.fast_forward(rng, small_config)

    animals = simulation.world.animals
    assert len(animals) == small_config.world.num_animals
    assert len(simulation.world.foods) == small_config.world.num_foods
    assert all(animal.hunger == 0 for animal in animals)
    assert all(animal.speed == small_config.world.animal.speed for animal in animals)
    assert not any(animal is old for animal in animals for old in old_animals)
    assert stats.population == small_config.world.num_animals
    assert stats.min_fitness <= stats.avg_fitness <= stats.max_fitness
    assert simulation.generation == 1


def test_runs_are_reproducible_for_a_seed(small_config):
    def run():
        rng = DeterministicRng(small_config.seed)
        simulation = Simulation.random(rng, small_config)
        stats = [simulation.fast_forward(rng, small_config) for _ in range(2)]
        for _ in range(3):
            simulation.step(rng, small_config)
        return stats, _snapshot(simulation)

    assert run() == run()


def test_different_seeds_diverge(small_config):
    first = Simulation.random(DeterministicRng(1), small_config)
    second = Simulation.random(DeterministicRng(2), small_config)
    assert _snapshot(first) != _snapshot(second)


def test_fitness_statistics_reflect_hunger_before_replacement(small_config):
    config = dataclasses.replace(small_config, max_generation=1)
    rng = DeterministicRng(3)
    simulation = Simulation.random(rng, config)
    # Strip food so hunger only changes through the values set here.
    simulation.world.foods = []
    for index, animal in enumerate(simulation.world.animals):
        animal.hunger = index

    assert simulation.step(rng, config) is None
    stats = simulation.step(rng, config)

    count = config.world.num_animals
    assert stats.min_fitness == 0.0
    assert stats.max_fitness == float(count - 1)
    assert stats.best_index == count - 1
    assert stats.avg_fitness == pytest.approx((count - 1) / 2.0)


def test_invalid_config_is_rejected_before_building(small_config):
    config = dataclasses.replace(small_config, mutation_chance=2.0)
    with pytest.raises(ValueError):
        Simulation.random(DeterministicRng(0), config)


def test_brains_keep_speed_within_bounds(small_config):
    rng = DeterministicRng(8)
    simulation = Simulation.random(rng, small_config)

    for _ in range(small_config.max_generation):
        simulation.step(rng, small_config)
        for animal in simulation.world.animals:
            assert small_config.speed_min <= animal.speed <= small_config.speed_max
            assert 0.0 <= animal.position.x <= 1.0
            assert 0.0 <= animal.position.y <= 1.0


def test_rotation_change_is_clamped_to_rotation_accel():
    rng = DeterministicRng(4)
    eye = Eye(1.0, 2.0 * math.pi, 3)
    brain = Brain.random(rng, eye)
    for layer in brain.network.layers:
        for neuron in layer.neurons:
            neuron.bias = np.float32(100.0)
            neuron.weights[:] = 0.0
    animal = Animal(eye=eye, brain=brain, position=Vector2(0.5, 0.5), rotation=0.0, speed=0.001)
    world = World([animal], [Food(Vector2(0.5, 0.6))])
    config = SimulationConfig()

    behaviour.apply_brains(world, config)

    assert animal.rotation == pytest.approx(config.rotation_accel)
    assert animal.speed == pytest.approx(config.speed_max)


def test_animal_individual_round_trip(rng):
    config = AnimalConfig(eye=EyeConfig(cells=3))
    animal = Animal.random(rng, config)
    animal.hunger = 4

    individual = AnimalIndividual.from_animal(animal)
    offspring = individual.into_animal(rng, config)

    assert individual.fitness == 4.0
    assert len(individual.genome) == (1 + 3) * 6 + (1 + 6) * 2
    assert offspring.brain.network == animal.brain.network
    assert offspring.hunger == 0
    assert AnimalIndividual.create(individual.genome).fitness == 0.0


def test_brain_topology_follows_eye():
    assert brain_topology(Eye(1.0, 1.0, 7)) == [7, 14, 2]


def test_rotation_stays_wrapped_after_many_turns():
    rng = DeterministicRng(4)
    eye = Eye(1.0, 2.0 * math.pi, 3)
    brain = Brain.random(rng, eye)
    for layer in brain.network.layers:
        for neuron in layer.neurons:
            neuron.bias = np.float32(100.0)
            neuron.weights[:] = 0.0
    animal = Animal(eye=eye, brain=brain, position=Vector2(0.5, 0.5), rotation=3.0, speed=0.001)
    world = World([animal], [])
    config = SimulationConfig()

    for _ in range(50):
        behaviour.apply_brains(world, config)
        assert -math.pi < animal.rotation <= math.pi

    expected = math.remainder(3.0 + 50 * config.rotation_accel, 2.0 * math.pi)
    assert animal.rotation == pytest.approx(expected, abs=1e-9)
