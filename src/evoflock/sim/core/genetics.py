"""Genetic algorithm built from substitutable selection, crossover and mutation.

``GeneticAlgorithm`` only talks to the three abstract roles, so any of them can
be swapped without touching ``evolve``. The defaults are roulette-wheel
selection, uniform crossover and Gaussian-style mutation.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Callable, List, Sequence, Tuple, TypeVar

from .genome import Genome
from .rng import DeterministicRng
from ..types.statistics import Statistics


class Individual(ABC):
    @classmethod
    @abstractmethod
    def create(cls, genome: Genome) -> "Individual":
        ...

    @property
    @abstractmethod
    def fitness(self) -> float:
        ...

    @property
    @abstractmethod
    def genome(self) -> Genome:
        ...


IndividualT = TypeVar("IndividualT", bound=Individual)


class SelectionMethod(ABC):
    @abstractmethod
    def select(self, rng: DeterministicRng, population: Sequence[IndividualT]) -> IndividualT:
        ...


class RouletteWheelSelection(SelectionMethod):
    """Fitness-proportionate pick; the chosen individual stays in the pool.

    A population where nobody scored falls back to a uniform pick.
    """

    def select(self, rng: DeterministicRng, population: Sequence[IndividualT]) -> IndividualT:
        if not population:
            raise ValueError("cannot select from an empty population")
        weights = [individual.fitness for individual in population]
        if all(weight == 0.0 for weight in weights):
            return population[rng.next_index(len(population))]
        return rng.choose_weighted(population, weights)


class CrossoverMethod(ABC):
    @abstractmethod
    def crossover(self, rng: DeterministicRng, parent_a: Genome, parent_b: Genome) -> Genome:
        ...


class UniformCrossover(CrossoverMethod):
    def crossover(self, rng: DeterministicRng, parent_a: Genome, parent_b: Genome) -> Genome:
        if len(parent_a) != len(parent_b):
            raise ValueError(f"parent genomes differ in length: {len(parent_a)} != {len(parent_b)}")
        return Genome(a if rng.next_bool(0.5) else b for a, b in zip(parent_a, parent_b))


class MutationMethod(ABC):
    @abstractmethod
    def mutate(self, rng: DeterministicRng, child: Genome) -> None:
        ...


class GaussianMutation(MutationMethod):
    def __init__(self, chance: float, magnitude: float):
        if not 0.0 <= chance <= 1.0:
            raise ValueError(f"mutation chance must be within [0, 1], got {chance}")
        self.chance = chance
        self.magnitude = magnitude

    def mutate(self, rng: DeterministicRng, child: Genome) -> None:
        for index in range(len(child)):
            # Sign, decision and amount are drawn for every gene so the stream
            # position never depends on which genes mutated.
            sign = -1.0 if rng.next_bool(0.5) else 1.0
            should_mutate = rng.next_bool(self.chance)
            amount = rng.next_float()
            if should_mutate:
                child[index] = child[index] + self.magnitude * sign * amount


def compute_statistics(population: Sequence[Individual]) -> Statistics:
    if not population:
        raise ValueError("cannot compute statistics of an empty population")
    fitnesses = [float(individual.fitness) for individual in population]
    count = len(fitnesses)
    min_fitness = min(fitnesses)
    max_fitness = max(fitnesses)
    avg_fitness = sum(fitnesses) / count
    variance = sum((fitness - avg_fitness) ** 2 for fitness in fitnesses) / count
    return Statistics(
        min_fitness=min_fitness,
        max_fitness=max_fitness,
        avg_fitness=avg_fitness,
        fitness_std=math.sqrt(variance),
        best_index=fitnesses.index(max_fitness),
        population=count,
    )


class GeneticAlgorithm:
    def __init__(
        self,
        selection_method: SelectionMethod,
        crossover_method: CrossoverMethod,
        mutation_method: MutationMethod,
    ):
        self.selection_method = selection_method
        self.crossover_method = crossover_method
        self.mutation_method = mutation_method

    def evolve(
        self,
        rng: DeterministicRng,
        population: Sequence[IndividualT],
        create: Callable[[Genome], IndividualT] | None = None,
    ) -> Tuple[List[IndividualT], Statistics]:
        if not population:
            raise ValueError("cannot evolve an empty population")
        if create is None:
            create = type(population[0]).create

        stats = compute_statistics(population)
        new_population: List[IndividualT] = []
        for _ in range(len(population)):
            parent_a = self.selection_method.select(rng, population).genome
            parent_b = self.selection_method.select(rng, population).genome
            child = self.crossover_method.crossover(rng, parent_a, parent_b)
            self.mutation_method.mutate(rng, child)
            new_population.append(create(child))
        return new_population, stats
