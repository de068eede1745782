from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.world import World
from ..sim.types.metrics import TickMetrics
from .render import save_frame

_HEADER = [
    "tick",
    "population",
    "normal",
    "panicked",
    "sick",
    "zombies",
    "tick_ms",
]


def configure_logging(level: str = "WARNING") -> None:
    level_name = level.upper()
    if level_name not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logging.getLogger("outbreak").setLevel(getattr(logging, level_name))


def _format_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.normal,
        metrics.panicked,
        metrics.sick,
        metrics.zombies,
        f"{tick_ms:.3f}",
    ]


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0}
    return {
        "min": float(min(values)),
        "max": float(max(values)),
        "avg": float(sum(values) / len(values)),
    }


def run_headless(
    steps: int,
    map_seed: Optional[str],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    summary_path: Optional[Path] = None,
    frame_path: Optional[Path] = None,
    scale: int = 4,
    config: Optional[SimulationConfig] = None,
) -> World:
    config = config if config is not None else SimulationConfig()
    if map_seed is not None:
        config.map_seed = str(map_seed)
    world = World(config)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    zombie_series: list[int] = []
    peak_zombies = (world.metrics.zombies if world.metrics else 0, 0)
    humans_gone_tick: Optional[int] = None

    try:
        for _ in range(steps):
            metrics = world.step()
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            tick_ms_series.append(tick_ms)
            zombie_series.append(metrics.zombies)
            if metrics.zombies > peak_zombies[0]:
                peak_zombies = (metrics.zombies, metrics.tick)
            if humans_gone_tick is None and metrics.humans == 0:
                humans_gone_tick = metrics.tick
            if writer:
                writer.writerow(_format_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        final = world.metrics
        summary = {
            "steps": steps,
            "map_seed": world.map_seed,
            "deterministic_log": deterministic_log,
            "width": config.width,
            "height": config.height,
            "components": sum(1 for _ in world.city.walk()),
            "tick_ms": _summary_stats(tick_ms_series),
            "zombies": _summary_stats([float(v) for v in zombie_series]),
            "peaks": {"zombies": {"value": peak_zombies[0], "tick": peak_zombies[1]}},
            "humans_gone_tick": humans_gone_tick,
            "final": {
                "population": final.population if final else 0,
                "normal": final.normal if final else 0,
                "panicked": final.panicked if final else 0,
                "sick": final.sick if final else 0,
                "zombies": final.zombies if final else 0,
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    if frame_path:
        save_frame(world, Path(frame_path), scale=scale)

    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless zombie outbreak simulation")
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--map-seed", type=str, default=None, help="Map seed; omit for a random city")
    parser.add_argument("--config", type=Path, default=None, help="YAML simulation config")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write summary stats")
    parser.add_argument("--frame", type=Path, default=None, help="Optional PNG of the final tick")
    parser.add_argument("--scale", type=int, default=4, help="Pixels per cell for --frame")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()
    configure_logging(args.log_level)
    config = SimulationConfig.from_yaml(args.config) if args.config else None
    run_headless(
        args.steps,
        args.map_seed,
        args.log,
        deterministic_log=args.deterministic_log,
        summary_path=args.summary,
        frame_path=args.frame,
        scale=args.scale,
        config=config,
    )


if __name__ == "__main__":
    main()
