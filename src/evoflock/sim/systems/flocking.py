from __future__ import annotations

from typing import List, TYPE_CHECKING

from pygame.math import Vector2

from ..core.config import FlockingConfig
from ..utils.math2d import _clamp_length, _forward, _wrap

if TYPE_CHECKING:
    from ..core.world import World


def coherence(world: World, index: int, attenuation: float) -> Vector2:
    animals = world.animals
    position = animals[index].position
    others = len(animals) - 1
    if others <= 0:
        return Vector2()
    center_x = 0.0
    center_y = 0.0
    for other_index, other in enumerate(animals):
        if other_index == index:
            continue
        center_x += other.position.x
        center_y += other.position.y
    center = Vector2(center_x / others, center_y / others)
    return (center - position) * attenuation


def separation(world: World, index: int, distance: float) -> Vector2:
    animals = world.animals
    position = animals[index].position
    distance_sq = distance * distance
    push = Vector2()
    for other_index, other in enumerate(animals):
        if other_index == index:
            continue
        offset = position - other.position
        if offset.length_squared() < distance_sq:
            push += offset
    return push


def alignment(world: World, index: int) -> Vector2:
    animals = world.animals
    others = len(animals) - 1
    if others <= 0:
        return Vector2()
    heading = Vector2()
    for other_index, other in enumerate(animals):
        if other_index == index:
            continue
        heading += other.velocity
    return heading / others


def compute_deltas(world: World, config: FlockingConfig) -> List[Vector2]:
    """Flocking displacement for every animal, from positions before any move."""
    deltas: List[Vector2] = []
    for index in range(len(world.animals)):
        delta = (
            coherence(world, index, config.coherence_attenuation) * config.coherence_weight
            + separation(world, index, config.separation_distance) * config.separation_weight
            + alignment(world, index) * config.alignment_weight
        )
        deltas.append(delta)
    return deltas


def apply_movement(world: World, config: FlockingConfig) -> None:
    deltas = compute_deltas(world, config)
    for animal, delta in zip(world.animals, deltas):
        velocity = _clamp_length(delta + _forward(animal.rotation, animal.speed), animal.speed)
        position = animal.position + velocity
        animal.position = Vector2(_wrap(position.x, 0.0, 1.0), _wrap(position.y, 0.0, 1.0))
