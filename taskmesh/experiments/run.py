"""CLI entrypoint for scenario runs.

This module owns CLI argument parsing, config resolution and the printed
summary. Simulation logic lives in ``taskmesh.simulation.engine`` and the
post-run statistics in ``taskmesh.metrics.tasks``.
"""

from __future__ import annotations

import argparse
import json
import logging
import math
from dataclasses import asdict, replace
from pathlib import Path

from taskmesh.config.types import ScenarioConfig, SimulationResult
from taskmesh.io.paths import record_log_path
from taskmesh.metrics.tasks import load_task_records, summarize_tasks
from taskmesh.simulation.engine import run_seed_batch, run_simulation

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
"""Accepted ``--log-level`` values."""

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Coerce raw value to float; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _coerce_str(raw: object, key: str) -> str:
    """Coerce raw value to str; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_float(
    cli_val: float | None, key: str, file_cfg: dict[str, object], default: float
) -> float:
    return _coerce_float(_get_val(cli_val, key, file_cfg, default), key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    return _coerce_str(_get_val(cli_val, key, file_cfg, default), key)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Run mobile-fleet task scheduling scenarios")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--duration", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--n-runs", type=int, default=None)
    parser.add_argument("--n-workers", type=int, default=None)
    parser.add_argument("--n-publishers", type=int, default=None)
    parser.add_argument("--radius", type=float, default=None, help="Neighbor query radius")
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None)
    return parser


def _result_summary(result: SimulationResult, run_dir: Path) -> dict[str, object]:
    """Result counters plus task statistics read back from ``tasks.parquet``."""
    summary: dict[str, object] = asdict(result)
    rows = load_task_records(record_log_path(run_dir, "tasks"))
    jobs = load_task_records(record_log_path(run_dir, "jobs"))
    stats = asdict(summarize_tasks(rows, result.tasks_total, jobs))
    # JSON has no NaN; report missing statistics as null.
    summary["stats"] = {
        k: (None if isinstance(v, float) and math.isnan(v) else v) for k, v in stats.items()
    }
    return summary


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for scenario runs.

    Supports ``--config path/to/config.json`` for reproducibility. CLI
    arguments override config-file values; config-file values override
    built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")

    defaults = ScenarioConfig()
    try:
        log_level = _get_str(args.log_level, "log_level", file_cfg, "WARNING").upper()
        duration = _get_float(args.duration, "duration", file_cfg, defaults.duration)
        seed = _get_int(args.seed, "seed", file_cfg, defaults.seed)
        n_runs = _get_int(args.n_runs, "n_runs", file_cfg, 1)
        n_workers = _get_int(args.n_workers, "n_workers", file_cfg, defaults.fleet.n_workers)
        n_publishers = _get_int(
            args.n_publishers, "n_publishers", file_cfg, defaults.fleet.n_publishers
        )
        radius = _get_float(args.radius, "radius", file_cfg, defaults.publish.neighbor_radius)
        out_dir = Path(_get_str(args.out_dir, "out_dir", file_cfg, "data"))
    except ValueError as exc:
        parser.error(str(exc))
    if log_level not in LOG_LEVELS:
        parser.error(f"log_level must be one of {', '.join(LOG_LEVELS)}")
    if n_runs < 1:
        parser.error("n_runs must be >= 1")

    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = replace(
            defaults,
            duration=duration,
            seed=seed,
            fleet=replace(defaults.fleet, n_workers=n_workers, n_publishers=n_publishers),
            publish=replace(defaults.publish, neighbor_radius=radius),
        )
    except ValueError as exc:
        parser.error(str(exc))

    if n_runs == 1:
        result = run_simulation(config, out_dir)
        summary: dict[str, object] = {"batch": False, **_result_summary(result, out_dir)}
    else:
        results = run_seed_batch(n_runs, out_dir, base_seed=seed, config=config)
        summary = {
            "batch": True,
            "total_runs": len(results),
            "tasks_total": sum(r.tasks_total for r in results),
            "tasks_matched": sum(r.tasks_matched for r in results),
            "tasks_pending": sum(r.tasks_pending for r in results),
            "publish_attempts": sum(r.publish_attempts for r in results),
        }
    logger.info("wrote outputs under %s", out_dir)
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
