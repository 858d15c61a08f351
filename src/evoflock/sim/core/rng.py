from __future__ import annotations

import math
import random
from typing import Sequence, TypeVar

from pygame.math import Vector2

T = TypeVar("T")


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_bool(self, probability: float) -> bool:
        return self._random.random() < probability

    def next_index(self, size: int) -> int:
        return self._random.randrange(size)

    def next_point(self) -> Vector2:
        x = self._random.random()
        y = self._random.random()
        return Vector2(x, y)

    def next_angle(self) -> float:
        return self._random.uniform(-math.pi, math.pi)

    def choose_weighted(self, items: Sequence[T], weights: Sequence[float]) -> T:
        if not items:
            raise ValueError("cannot choose from an empty population")
        if len(items) != len(weights):
            raise ValueError(f"got {len(weights)} weights for {len(items)} items")
        total = 0.0
        for weight in weights:
            if weight < 0.0:
                raise ValueError(f"weights must be non-negative, got {weight}")
            total += weight
        if total <= 0.0:
            raise ValueError("total weight must be greater than zero")
        return self._random.choices(items, weights=weights, k=1)[0]
