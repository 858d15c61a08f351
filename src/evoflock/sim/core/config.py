from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class EyeConfig:
    fov_range: float = 0.5
    fov_angle: float = math.pi * math.pi / 4.0
    cells: int = 10


@dataclass(frozen=True)
class AnimalConfig:
    speed: float = 0.002
    eye: EyeConfig = field(default_factory=EyeConfig)


@dataclass(frozen=True)
class FlockingConfig:
    coherence_weight: float = 0.5
    separation_weight: float = 0.55
    alignment_weight: float = 0.1
    # Keeps animals from jumping straight onto the flock centre.
    coherence_attenuation: float = 0.01
    separation_distance: float = 0.02
    collision_radius: float = 0.01


@dataclass(frozen=True)
class WorldConfig:
    num_animals: int = 40
    num_foods: int = 60
    animal: AnimalConfig = field(default_factory=AnimalConfig)


@dataclass(frozen=True)
class SimulationConfig:
    speed_max: float = 0.0025
    speed_min: float = 0.0001
    speed_accel: float = 0.05
    rotation_accel: float = math.pi / 4.0
    mutation_chance: float = 0.01
    mutation_weight: float = 0.3
    max_generation: int = 2000
    seed: int = 42
    world: WorldConfig = field(default_factory=WorldConfig)
    flocking: FlockingConfig = field(default_factory=FlockingConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)

    def validate(self) -> None:
        positive = {
            "speed_max": self.speed_max,
            "speed_min": self.speed_min,
            "speed_accel": self.speed_accel,
            "rotation_accel": self.rotation_accel,
            "max_generation": self.max_generation,
            "world.num_animals": self.world.num_animals,
            "world.num_foods": self.world.num_foods,
            "world.animal.speed": self.world.animal.speed,
            "world.animal.eye.fov_range": self.world.animal.eye.fov_range,
            "world.animal.eye.fov_angle": self.world.animal.eye.fov_angle,
            "world.animal.eye.cells": self.world.animal.eye.cells,
            "flocking.coherence_attenuation": self.flocking.coherence_attenuation,
            "flocking.separation_distance": self.flocking.separation_distance,
            "flocking.collision_radius": self.flocking.collision_radius,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.speed_min > self.speed_max:
            raise ValueError(f"speed_min ({self.speed_min}) exceeds speed_max ({self.speed_max})")
        if not 0.0 <= self.mutation_chance <= 1.0:
            raise ValueError(f"mutation_chance must be within [0, 1], got {self.mutation_chance}")
        if self.mutation_weight < 0.0:
            raise ValueError(f"mutation_weight must be non-negative, got {self.mutation_weight}")


def load_config(raw: dict) -> SimulationConfig:
    world_raw = dict(raw.get("world", {}))
    animal_raw = dict(world_raw.pop("animal", {}))
    eye = EyeConfig(**animal_raw.pop("eye", {}))
    animal = AnimalConfig(eye=eye, **animal_raw)
    world = WorldConfig(animal=animal, **world_raw)
    flocking = FlockingConfig(**raw.get("flocking", {}))
    sim_values = {k: v for k, v in raw.items() if k not in {"world", "flocking"}}
    return SimulationConfig(world=world, flocking=flocking, **sim_values)
