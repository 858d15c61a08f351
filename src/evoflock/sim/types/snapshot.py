from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(slots=True)
class AnimalSnapshot:
    x: float
    y: float
    rotation: float
    speed: float
    hunger: int


@dataclass(slots=True)
class FoodSnapshot:
    x: float
    y: float


@dataclass(slots=True)
class WorldSnapshot:
    animals: List[AnimalSnapshot]
    foods: List[FoodSnapshot]
