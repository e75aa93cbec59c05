"""Parquet persistence helpers for column-buffered record streams."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq


def flush_columns(
    columns: dict[str, list[int | float | str]],
    schema: pa.Schema,
    path: Path,
    writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated rows to Parquet and clear in-memory buffers.

    The writer is opened lazily on the first non-empty flush and returned so
    the caller can keep appending row groups to the same file.
    """
    first = schema.names[0]
    if not columns[first]:
        return writer
    table = pa.Table.from_pydict(columns, schema=schema)
    if writer is None:
        writer = pq.ParquetWriter(path, schema)
    writer.write_table(table)
    for values in columns.values():
        values.clear()
    return writer
