from __future__ import annotations

import argparse
import csv
import dataclasses
import json
import logging
from pathlib import Path
from typing import List, Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.rng import DeterministicRng
from ..sim.core.simulation import Simulation
from ..sim.systems.swarm import adaptive_inertia
from ..sim.types.statistics import Statistics

logger = logging.getLogger(__name__)

_HEADER = [
    "generation",
    "min_fitness",
    "max_fitness",
    "avg_fitness",
    "fitness_std",
    "best_index",
    "inertia",
]


def _format_row(generation: int, stats: Statistics) -> list[object]:
    return [
        generation,
        f"{stats.min_fitness:.4f}",
        f"{stats.max_fitness:.4f}",
        f"{stats.avg_fitness:.4f}",
        f"{stats.fitness_std:.4f}",
        stats.best_index,
        f"{adaptive_inertia(stats.max_fitness, stats.fitness_std):.4f}",
    ]


def run_headless(
    generations: int,
    seed: Optional[int],
    log_path: Optional[Path],
    config_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
    config: Optional[SimulationConfig] = None,
) -> List[Statistics]:
    if config is None:
        config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config = dataclasses.replace(config, seed=seed)
    rng = DeterministicRng(config.seed)
    simulation = Simulation.random(rng, config)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    history: List[Statistics] = []
    try:
        for _ in range(generations):
            stats = simulation.fast_forward(rng, config)
            history.append(stats)
            logger.debug("%d: %s", simulation.generation, stats.summary())
            if writer:
                writer.writerow(_format_row(simulation.generation, stats))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        summary = {
            "generations": generations,
            "seed": config.seed,
            "best_avg_fitness": max((stats.avg_fitness for stats in history), default=0.0),
            "final": dataclasses.asdict(history[-1]) if history else None,
            "history": [stats.avg_fitness for stats in history],
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    return history


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless evolution run")
    parser.add_argument("--generations", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-generation statistics")
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_headless(
        args.generations,
        args.seed,
        args.log,
        config_path=args.config,
        summary_path=args.summary,
    )


if __name__ == "__main__":
    main()
