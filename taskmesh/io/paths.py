"""Path construction helpers for simulation output directories.

Centralises the directory/file naming conventions used by the engine, the
batch runner and the offline analysis helpers.
"""

from __future__ import annotations

from pathlib import Path


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def runs_dir(out_dir: Path) -> Path:
    """Return path to the per-run JSON summaries."""
    return out_dir / "runs"


def event_lines_path(out_dir: Path) -> Path:
    """Return path to the line-oriented event log."""
    return logs_dir(out_dir) / "events.log"


def record_log_path(out_dir: Path, kind_name: str) -> Path:
    """Return path to the Parquet file of one record kind (``tasks``, ``jobs``...)."""
    return logs_dir(out_dir) / f"{kind_name}.parquet"


def batch_summary_path(out_dir: Path) -> Path:
    """Return path to the seed-batch summary Parquet file."""
    return logs_dir(out_dir) / "batch_summary.parquet"


def seed_out_dir(out_dir: Path, seed: int) -> Path:
    """Return path to the per-seed output subdirectory of a batch."""
    return out_dir / f"seed_{seed}"
