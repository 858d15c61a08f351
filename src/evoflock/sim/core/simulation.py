from __future__ import annotations

import logging
from typing import Optional

from .animal import AnimalIndividual
from .config import SimulationConfig
from .genetics import GaussianMutation, GeneticAlgorithm, RouletteWheelSelection, UniformCrossover
from .rng import DeterministicRng
from .world import World
from ..systems import behaviour, collisions, flocking
from ..types.statistics import Statistics

logger = logging.getLogger(__name__)


class Simulation:
    """Tick-by-tick driver: move, sense and think, eat, age, and evolve.

    The random source and config are passed into every call rather than held,
    so the host decides exactly which stream each step consumes.
    """

    def __init__(self, world: World, ga: GeneticAlgorithm):
        self._world = world
        self._ga = ga
        self._age = 0
        self._generation = 0

    @classmethod
    def random(cls, rng: DeterministicRng, config: SimulationConfig) -> "Simulation":
        config.validate()
        world = World.random(rng, config.world)
        ga = GeneticAlgorithm(
            RouletteWheelSelection(),
            UniformCrossover(),
            GaussianMutation(config.mutation_chance, config.mutation_weight),
        )
        logger.debug(
            "created simulation with %d animals and %d foods",
            len(world.animals),
            len(world.foods),
        )
        return cls(world, ga)

    @property
    def world(self) -> World:
        return self._world

    @property
    def age(self) -> int:
        return self._age

    @property
    def generation(self) -> int:
        return self._generation

    def step(self, rng: DeterministicRng, config: SimulationConfig) -> Optional[Statistics]:
        flocking.apply_movement(self._world, config.flocking)
        behaviour.apply_brains(self._world, config)
        collisions.resolve_collisions(self._world, rng, config.flocking.collision_radius)
        self._age += 1
        if self._age > config.max_generation:
            return self._evolve(rng, config)
        return None

    def fast_forward(self, rng: DeterministicRng, config: SimulationConfig) -> Statistics:
        while True:
            stats = self.step(rng, config)
            if stats is not None:
                return stats

    def _evolve(self, rng: DeterministicRng, config: SimulationConfig) -> Statistics:
        self._age = 0
        population = [AnimalIndividual.from_animal(animal) for animal in self._world.animals]
        new_population, stats = self._ga.evolve(rng, population)
        self._world.animals = [
            individual.into_animal(rng, config.world.animal) for individual in new_population
        ]
        self._world.respawn_foods(rng)
        self._generation += 1
        logger.info(
            "generation %d: min %.2f, max %.2f, avg %.2f",
            self._generation,
            stats.min_fitness,
            stats.max_fitness,
            stats.avg_fitness,
        )
        return stats
