from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Statistics:
    min_fitness: float
    max_fitness: float
    avg_fitness: float
    fitness_std: float
    best_index: int
    population: int

    def summary(self) -> str:
        return (
            f"Fitness : min {self.min_fitness:.4f}, max {self.max_fitness:.4f}, "
            f"average {self.avg_fitness:.4f}, std {self.fitness_std:.4f}"
        )
