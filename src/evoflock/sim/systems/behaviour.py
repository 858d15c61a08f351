from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.config import SimulationConfig
from ..utils.math2d import _clamp_value, _wrap_angle

if TYPE_CHECKING:
    from ..core.world import World


def apply_brains(world: World, config: SimulationConfig) -> None:
    foods = world.foods
    for animal in world.animals:
        vision = animal.eye.sense(animal.position, animal.rotation, foods)
        output = animal.brain.network.propagate(vision)
        speed_change = _clamp_value(float(output[0]), -config.speed_accel, config.speed_accel)
        rotation_change = _clamp_value(float(output[1]), -config.rotation_accel, config.rotation_accel)
        animal.speed = _clamp_value(animal.speed + speed_change, config.speed_min, config.speed_max)
        animal.rotation = _wrap_angle(animal.rotation + rotation_change)
