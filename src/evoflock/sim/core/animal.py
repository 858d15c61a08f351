from __future__ import annotations

from dataclasses import dataclass

from pygame.math import Vector2

from .brain import Brain
from .config import AnimalConfig
from .eye import Eye
from .genetics import Individual
from .genome import Genome
from .rng import DeterministicRng
from ..utils.math2d import _forward


@dataclass(slots=True)
class Food:
    position: Vector2

    @classmethod
    def random(cls, rng: DeterministicRng) -> "Food":
        return cls(position=rng.next_point())


@dataclass(slots=True, eq=False)
class Animal:
    eye: Eye
    brain: Brain
    position: Vector2
    rotation: float
    speed: float
    hunger: int = 0

    @classmethod
    def random(cls, rng: DeterministicRng, config: AnimalConfig) -> "Animal":
        eye = Eye.from_config(config.eye)
        brain = Brain.random(rng, eye)
        return cls._spawn(rng, config, eye, brain)

    @classmethod
    def from_genome(cls, rng: DeterministicRng, config: AnimalConfig, genome: Genome) -> "Animal":
        eye = Eye.from_config(config.eye)
        brain = Brain.from_genome(genome, eye)
        return cls._spawn(rng, config, eye, brain)

    @classmethod
    def _spawn(cls, rng: DeterministicRng, config: AnimalConfig, eye: Eye, brain: Brain) -> "Animal":
        position = rng.next_point()
        rotation = rng.next_angle()
        return cls(eye=eye, brain=brain, position=position, rotation=rotation, speed=config.speed)

    @property
    def velocity(self) -> Vector2:
        return _forward(self.rotation, self.speed)

    def as_genome(self) -> Genome:
        return self.brain.as_genome()


class AnimalIndividual(Individual):
    """An animal reduced to what the genetic algorithm sees: fitness and genome."""

    def __init__(self, fitness: float, genome: Genome):
        self._fitness = fitness
        self._genome = genome

    @classmethod
    def create(cls, genome: Genome) -> "AnimalIndividual":
        return cls(0.0, genome)

    @classmethod
    def from_animal(cls, animal: Animal) -> "AnimalIndividual":
        return cls(float(animal.hunger), animal.as_genome())

    @property
    def fitness(self) -> float:
        return self._fitness

    @property
    def genome(self) -> Genome:
        return self._genome

    def into_animal(self, rng: DeterministicRng, config: AnimalConfig) -> Animal:
        return Animal.from_genome(rng, config, self._genome)
