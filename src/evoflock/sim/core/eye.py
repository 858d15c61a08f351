from __future__ import annotations

from typing import Iterable, TYPE_CHECKING

import numpy as np
from pygame.math import Vector2

from .config import EyeConfig
from ..utils.math2d import _angle_from_forward, _wrap_angle

if TYPE_CHECKING:
    from .animal import Food


class Eye:
    """Field-of-view sensor splitting the visible arc into equal cells.

    Each food in range adds ``(fov_range - distance) / fov_range`` to the cell
    covering its bearing, so nearer food reads brighter and several foods in
    one cell accumulate.
    """

    __slots__ = ("_fov_range", "_fov_angle", "_cells")

    def __init__(self, fov_range: float, fov_angle: float, cells: int):
        if fov_range <= 0.0:
            raise ValueError(f"fov_range must be positive, got {fov_range}")
        if fov_angle <= 0.0:
            raise ValueError(f"fov_angle must be positive, got {fov_angle}")
        if cells < 1:
            raise ValueError(f"cells must be at least 1, got {cells}")
        self._fov_range = float(fov_range)
        self._fov_angle = float(fov_angle)
        self._cells = int(cells)

    @classmethod
    def from_config(cls, config: EyeConfig) -> "Eye":
        return cls(config.fov_range, config.fov_angle, config.cells)

    @property
    def fov_range(self) -> float:
        return self._fov_range

    @property
    def fov_angle(self) -> float:
        return self._fov_angle

    @property
    def cells(self) -> int:
        return self._cells

    def sense(self, position: Vector2, rotation: float, foods: Iterable["Food"]) -> np.ndarray:
        vision = np.zeros(self._cells, dtype=np.float32)
        half_angle = self._fov_angle / 2.0

        for food in foods:
            offset = food.position - position
            distance = offset.length()
            if distance >= self._fov_range:
                continue

            angle = _wrap_angle(_angle_from_forward(offset) - rotation)
            if angle < -half_angle or angle > half_angle:
                continue

            cell_fraction = (angle + half_angle) / self._fov_angle
            # A bearing exactly on the upper edge would index one past the end.
            cell = min(int(cell_fraction * self._cells), self._cells - 1)
            vision[cell] += (self._fov_range - distance) / self._fov_range

        return vision
