from __future__ import annotations

import math

from pygame.math import Vector2

TAU = 2.0 * math.pi


def _wrap(value: float, low: float, high: float) -> float:
    width = high - low
    while value < low:
        value += width
    while value > high:
        value -= width
    return value


def _wrap_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    angle = math.fmod(angle, TAU)
    if angle <= -math.pi:
        angle += TAU
    elif angle > math.pi:
        angle -= TAU
    return angle


def _forward(rotation: float, length: float = 1.0) -> Vector2:
    # rotation 0 faces +y
    return Vector2(-length * math.sin(rotation), length * math.cos(rotation))


def _angle_from_forward(offset: Vector2) -> float:
    return math.atan2(-offset.x, offset.y)


def _clamp_length(vector: Vector2, max_length: float) -> Vector2:
    if max_length <= 0:
        return Vector2()
    magnitude_sq = vector.length_squared()
    if magnitude_sq <= max_length * max_length:
        return vector
    if magnitude_sq == 0:
        return Vector2()
    return vector.normalize() * max_length


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))
