from __future__ import annotations

from typing import List

from .animal import Animal, Food
from .config import WorldConfig
from .rng import DeterministicRng
from ..types.snapshot import AnimalSnapshot, FoodSnapshot, WorldSnapshot


class World:
    """Live animals and foods of one simulation, in a stable order.

    Animals are identified by their slot in ``animals``; two animals may share
    a position without being confused for one another.
    """

    def __init__(self, animals: List[Animal], foods: List[Food]):
        self.animals = animals
        self.foods = foods

    @classmethod
    def random(cls, rng: DeterministicRng, config: WorldConfig) -> "World":
        animals = [Animal.random(rng, config.animal) for _ in range(config.num_animals)]
        foods = [Food.random(rng) for _ in range(config.num_foods)]
        return cls(animals, foods)

    def respawn_foods(self, rng: DeterministicRng) -> None:
        for food in self.foods:
            food.position = rng.next_point()

    def snapshot(self) -> WorldSnapshot:
        return WorldSnapshot(
            animals=[
                AnimalSnapshot(
                    x=animal.position.x,
                    y=animal.position.y,
                    rotation=animal.rotation,
                    speed=animal.speed,
                    hunger=animal.hunger,
                )
                for animal in self.animals
            ],
            foods=[FoodSnapshot(x=food.position.x, y=food.position.y) for food in self.foods],
        )
