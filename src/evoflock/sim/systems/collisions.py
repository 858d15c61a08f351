from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.rng import DeterministicRng

if TYPE_CHECKING:
    from ..core.world import World


def resolve_collisions(world: World, rng: DeterministicRng, radius: float) -> int:
    """Feed animals touching food; returns the number of meals this tick.

    Animals are visited in order and each eaten food respawns immediately, so
    a later animal can no longer reach a food an earlier one just ate.
    """
    meals = 0
    for animal in world.animals:
        for food in world.foods:
            if animal.position.distance_to(food.position) <= radius:
                animal.hunger += 1
                food.position = rng.next_point()
                meals += 1
    return meals
