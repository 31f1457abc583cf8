from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import SimulationConfig
from .errors import DataFormatError
from .metrics import CycleMetrics
from .world import World, save_location

logger = logging.getLogger(__name__)

LOG_HEADER = ["tick", "population", "births", "deaths", "avg_energy", "units_consumed", "units_available"]


def run_headless(
    steps: Optional[int] = None,
    seed: Optional[int] = None,
    log_path: Optional[Path] = None,
    config: Optional[SimulationConfig] = None,
    location_path: Optional[Path] = None,
    output_path: Optional[Path] = None,
) -> List[CycleMetrics]:
    config = config if config is not None else SimulationConfig()
    if seed is not None:
        config.seed = seed
    if location_path is not None:
        config.location_file = str(location_path)
    steps = config.cycles if steps is None else steps

    world = World(config)
    history: List[CycleMetrics] = []
    logger.info("Running %d cycles with seed %d", steps, config.seed)
    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(LOG_HEADER)

    try:
        for tick in range(steps):
            metrics = world.step(tick)
            history.append(metrics)
            if writer:
                writer.writerow(
                    [
                        metrics.tick,
                        metrics.population,
                        metrics.births,
                        metrics.deaths,
                        f"{metrics.average_energy:.4f}",
                        metrics.units_consumed,
                        metrics.units_available,
                    ]
                )
            if metrics.population == 0 and metrics.deaths > 0:
                logger.info("Population went extinct at tick %d", tick)
    finally:
        if csv_file:
            csv_file.close()

    if output_path:
        save_location(world.location, output_path)
    logger.info("Finished after %d cycles, population %d", len(history), len(world.location.individuals))
    return history


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Headless biotope simulation")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--location", type=Path, default=None, help="XML file with the initial location")
    parser.add_argument("--steps", type=int, default=None, help="Number of cycles (defaults to the config value)")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument("--output", type=Path, default=None, help="XML file to save the final location")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    try:
        config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
        run_headless(
            steps=args.steps,
            seed=args.seed,
            log_path=args.log,
            config=config,
            location_path=args.location,
            output_path=args.output,
        )
    except DataFormatError as exc:
        logger.error("Cannot load simulation data: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
