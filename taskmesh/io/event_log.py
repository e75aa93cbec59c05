"""Structured event log: stable line records plus columnar Parquet output.

Record shapes (field order is a contract with offline analysis tooling)::

    [NODES]      : layer, id, ram, threads, initial_queue_length
    [POSITIONS]  : layer, id, x, y, timestamp
    [CANDIDATES] : publisherId, taskId, addrA, addrB, neighborId
    [JOBS]       : publisherId, taskId, addrA, addrB, memberI, memberJ
    [TASKS]      : layer, publisherId, taskId, ram, threads, duration,
                   publishTime, matchStartTime, matchEndTime, coveredRam,
                   coveredThreads
"""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from pathlib import Path
from typing import IO

import pyarrow as pa
import pyarrow.parquet as pq

from taskmesh.config.constants import FLOAT_PRECISION, FLUSH_THRESHOLD
from taskmesh.io.paths import event_lines_path, logs_dir, record_log_path
from taskmesh.io.persistence import flush_columns
from taskmesh.io.schemas import (
    CANDIDATES_SCHEMA,
    JOBS_SCHEMA,
    NODES_SCHEMA,
    POSITIONS_SCHEMA,
    TASKS_SCHEMA,
)

logger = logging.getLogger(__name__)

Value = int | float


class RecordKind(Enum):
    """Record kinds with their line tag and Arrow schema."""

    NODES = ("[NODES]", NODES_SCHEMA)
    POSITIONS = ("[POSITIONS]", POSITIONS_SCHEMA)
    CANDIDATES = ("[CANDIDATES]", CANDIDATES_SCHEMA)
    JOBS = ("[JOBS]", JOBS_SCHEMA)
    TASKS = ("[TASKS]", TASKS_SCHEMA)

    @property
    def tag(self) -> str:
        return self.value[0]

    @property
    def schema(self) -> pa.Schema:
        return self.value[1]

    @property
    def file_stem(self) -> str:
        return self.name.lower()


def format_value(value: Value) -> str:
    if isinstance(value, float):
        return f"{value:.{FLOAT_PRECISION}f}"
    return str(value)


def format_record(kind: RecordKind, values: tuple[Value, ...]) -> str:
    """Render one record as ``"<TAG> : v1, v2, ..."``."""
    return f"{kind.tag} : " + ", ".join(format_value(v) for v in values)


class EventLog:
    """Emit event records to a line file, the logger and Parquet buffers.

    With ``out_dir=None`` nothing is written to disk and every row is kept in
    memory (``rows``), which is what unit tests and embedded callers use.
    """

    def __init__(
        self,
        out_dir: Path | None = None,
        flush_threshold: int = FLUSH_THRESHOLD,
        keep_rows: bool | None = None,
    ) -> None:
        if flush_threshold < 1:
            raise ValueError("flush_threshold must be >= 1")
        self.out_dir = Path(out_dir) if out_dir is not None else None
        self.flush_threshold = flush_threshold
        self.keep_rows = self.out_dir is None if keep_rows is None else keep_rows
        self.counts: Counter[RecordKind] = Counter()
        self.rows: dict[RecordKind, list[tuple[Value, ...]]] = {k: [] for k in RecordKind}
        self._columns: dict[RecordKind, dict[str, list[int | float | str]]] = {
            k: {name: [] for name in k.schema.names} for k in RecordKind
        }
        self._writers: dict[RecordKind, pq.ParquetWriter | None] = {k: None for k in RecordKind}
        self._lines: IO[str] | None = None
        self._closed = False
        if self.out_dir is not None:
            logs_dir(self.out_dir).mkdir(parents=True, exist_ok=True)
            self._lines = event_lines_path(self.out_dir).open("w", encoding="utf-8")

    def __enter__(self) -> EventLog:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- record emitters -----------------------------------------------------

    def node(self, layer: int, agent_id: int, ram: int, threads: int, queue_length: int) -> None:
        self.emit(RecordKind.NODES, (layer, agent_id, ram, threads, queue_length))

    def position(self, layer: int, agent_id: int, x: float, y: float, timestamp: float) -> None:
        self.emit(RecordKind.POSITIONS, (layer, agent_id, float(x), float(y), float(timestamp)))

    def candidate(
        self, publisher_id: int, task_id: int, addr_a: int, addr_b: int, neighbor_id: int
    ) -> None:
        self.emit(RecordKind.CANDIDATES, (publisher_id, task_id, addr_a, addr_b, neighbor_id))

    def job(
        self,
        publisher_id: int,
        task_id: int,
        addr_a: int,
        addr_b: int,
        member_i: int,
        member_j: int,
    ) -> None:
        self.emit(RecordKind.JOBS, (publisher_id, task_id, addr_a, addr_b, member_i, member_j))

    def task(
        self,
        layer: int,
        publisher_id: int,
        task_id: int,
        ram: int,
        threads: int,
        duration: float,
        publish_time: float,
        match_start_time: float,
        match_end_time: float,
        covered_ram: int,
        covered_threads: int,
    ) -> None:
        self.emit(
            RecordKind.TASKS,
            (
                layer,
                publisher_id,
                task_id,
                ram,
                threads,
                float(duration),
                float(publish_time),
                float(match_start_time),
                float(match_end_time),
                covered_ram,
                covered_threads,
            ),
        )

    # -- plumbing --------------------------------------------------------------

    def emit(self, kind: RecordKind, values: tuple[Value, ...]) -> None:
        names = kind.schema.names
        if len(values) != len(names):
            raise ValueError(f"{kind.tag} expects {len(names)} fields, got {len(values)}")
        line = format_record(kind, values)
        logger.debug(line)
        if self._lines is not None:
            self._lines.write(line + "\n")
        self.counts[kind] += 1
        if self.keep_rows:
            self.rows[kind].append(values)
        out_dir = self.out_dir
        if out_dir is None:
            return
        columns = self._columns[kind]
        for name, value in zip(names, values, strict=True):
            columns[name].append(value)
        if len(columns[names[0]]) >= self.flush_threshold:
            self._flush(kind, out_dir)

    def _flush(self, kind: RecordKind, out_dir: Path) -> None:
        self._writers[kind] = flush_columns(
            self._columns[kind],
            kind.schema,
            record_log_path(out_dir, kind.file_stem),
            self._writers[kind],
        )

    def close(self) -> None:
        """Flush every buffer and close all open files. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        if self.out_dir is not None:
            for kind in RecordKind:
                self._flush(kind, self.out_dir)
                writer = self._writers[kind]
                if writer is None:
                    # Empty streams still get a file so readers see the columns.
                    pq.write_table(
                        kind.schema.empty_table(),
                        record_log_path(self.out_dir, kind.file_stem),
                    )
                else:
                    writer.close()
        if self._lines is not None:
            self._lines.close()
            self._lines = None
