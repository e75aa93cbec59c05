"""Parquet schema definitions for event-log and run-summary artifacts.

Column order mirrors the field order of the line-oriented records, which
downstream analysis tooling depends on. Do not reorder without bumping
``EVENT_LOG_SCHEMA_VERSION``.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Schema version constants
# ---------------------------------------------------------------------------

EVENT_LOG_SCHEMA_VERSION = 1
BATCH_SUMMARY_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Event-log schemas (one per record kind)
# ---------------------------------------------------------------------------

NODES_SCHEMA = pa.schema(
    [
        ("layer", pa.int64()),
        ("agent_id", pa.int64()),
        ("ram", pa.int64()),
        ("threads", pa.int64()),
        ("initial_queue_length", pa.int64()),
    ]
)

POSITIONS_SCHEMA = pa.schema(
    [
        ("layer", pa.int64()),
        ("agent_id", pa.int64()),
        ("x", pa.float64()),
        ("y", pa.float64()),
        ("timestamp", pa.float64()),
    ]
)

CANDIDATES_SCHEMA = pa.schema(
    [
        ("publisher_id", pa.int64()),
        ("task_id", pa.int64()),
        ("addr_a", pa.int64()),
        ("addr_b", pa.int64()),
        ("neighbor_id", pa.int64()),
    ]
)

JOBS_SCHEMA = pa.schema(
    [
        ("publisher_id", pa.int64()),
        ("task_id", pa.int64()),
        ("addr_a", pa.int64()),
        ("addr_b", pa.int64()),
        ("member_i", pa.int64()),
        ("member_j", pa.int64()),
    ]
)

TASKS_SCHEMA = pa.schema(
    [
        ("layer", pa.int64()),
        ("publisher_id", pa.int64()),
        ("task_id", pa.int64()),
        ("ram", pa.int64()),
        ("threads", pa.int64()),
        ("duration", pa.float64()),
        ("publish_time", pa.float64()),
        ("match_start_time", pa.float64()),
        ("match_end_time", pa.float64()),
        ("covered_ram", pa.int64()),
        ("covered_threads", pa.int64()),
    ]
)

# ---------------------------------------------------------------------------
# Run summary schemas
# ---------------------------------------------------------------------------

BATCH_SUMMARY_SCHEMA = pa.schema(
    [
        ("schema_version", pa.int64()),
        ("run_id", pa.string()),
        ("seed", pa.int64()),
        ("horizon", pa.float64()),
        ("tasks_total", pa.int64()),
        ("tasks_matched", pa.int64()),
        ("tasks_pending", pa.int64()),
        ("publish_attempts", pa.int64()),
        ("links_created", pa.int64()),
    ]
)
