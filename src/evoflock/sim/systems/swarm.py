from __future__ import annotations

MAX_INERTIA = 0.4
MIN_INERTIA = 0.7


def adaptive_inertia(max_fitness: float, fitness_std: float) -> float:
    # Spread in fitness lowers inertia (exploit); a uniform population raises it (explore).
    if max_fitness == 0.0:
        max_fitness = 1.0
    return MAX_INERTIA - (fitness_std / max_fitness) * (MAX_INERTIA - MIN_INERTIA)
