"""Offline analysis of task-lifecycle and job records."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from pathlib import Path

import networkx as nx
import numpy as np
import pyarrow.parquet as pq

Row = dict[str, object]


@dataclass(frozen=True)
class TaskSummary:
    """Aggregate statistics over the ``[TASKS]`` records of one run."""

    tasks_total: int
    tasks_matched: int
    match_rate: float
    mean_wait: float
    median_wait: float
    mean_thread_coverage: float
    mean_ram_coverage: float
    mean_group_size: float = float("nan")


def load_task_records(path: Path) -> list[Row]:
    """Read one record-kind Parquet file into a list of row dicts."""
    return pq.read_table(path).to_pylist()


def _column(rows: list[Row], key: str) -> np.ndarray:
    return np.array([row[key] for row in rows], dtype=np.float64)


def summarize_tasks(
    rows: list[Row],
    tasks_total: int,
    job_rows: list[Row] | None = None,
) -> TaskSummary:
    """Summarise matched-task rows.

    Wait is ``match_start_time - publish_time``; coverage is covered over
    required capacity, per dimension. Statistics over zero matched tasks are
    NaN. With ``job_rows`` the mean group size (publisher included) is filled.
    """
    if tasks_total < len(rows):
        raise ValueError("tasks_total must be >= number of matched rows")
    nan = float("nan")
    match_rate = len(rows) / tasks_total if tasks_total else nan
    if not rows:
        return TaskSummary(tasks_total, 0, match_rate, nan, nan, nan, nan)

    waits = _column(rows, "match_start_time") - _column(rows, "publish_time")
    thread_cov = _column(rows, "covered_threads") / _column(rows, "threads")
    ram_cov = _column(rows, "covered_ram") / _column(rows, "ram")
    return TaskSummary(
        tasks_total=tasks_total,
        tasks_matched=len(rows),
        match_rate=match_rate,
        mean_wait=float(np.mean(waits)),
        median_wait=float(np.median(waits)),
        mean_thread_coverage=float(np.mean(thread_cov)),
        mean_ram_coverage=float(np.mean(ram_cov)),
        mean_group_size=_mean_group_size(job_rows),
    )


def _meshes(job_rows: list[Row]) -> dict[tuple[object, object], nx.Graph]:
    # One graph per (publisher_id, task_id); nodes are the group members.
    meshes: dict[tuple[object, object], nx.Graph] = defaultdict(nx.Graph)
    for row in job_rows:
        meshes[(row["publisher_id"], row["task_id"])].add_edge(row["member_i"], row["member_j"])
    return meshes


def group_size_histogram(job_rows: list[Row]) -> dict[int, int]:
    """Histogram of collaboration-group sizes (publisher included) from ``[JOBS]`` rows."""
    sizes = Counter(graph.number_of_nodes() for graph in _meshes(job_rows).values())
    return dict(sorted(sizes.items()))


def _mean_group_size(job_rows: list[Row] | None) -> float:
    if not job_rows:
        return float("nan")
    sizes = [graph.number_of_nodes() for graph in _meshes(job_rows).values()]
    return float(np.mean(sizes))


def is_full_mesh(job_rows: list[Row]) -> bool:
    """True when every ``(publisher_id, task_id)`` group is a complete graph."""
    for graph in _meshes(job_rows).values():
        n = graph.number_of_nodes()
        if graph.number_of_edges() != n * (n - 1) // 2:
            return False
    return True
