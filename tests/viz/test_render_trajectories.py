"""Tests for taskmesh.viz.render."""

from __future__ import annotations

from pathlib import Path

import matplotlib
import pyarrow as pa
import pyarrow.parquet as pq

from taskmesh.config.types import ScenarioConfig
from taskmesh.io.schemas import POSITIONS_SCHEMA
from taskmesh.simulation.engine import run_simulation
from taskmesh.viz.render import render_trajectories


class TestRenderTrajectories:
    def test_module_selects_headless_backend(self) -> None:
        assert matplotlib.get_backend().lower() == "agg"

    def test_renders_simulation_output(self, tmp_path: Path) -> None:
        run_simulation(ScenarioConfig(duration=8.0, seed=1), tmp_path)
        out = tmp_path / "plots" / "trajectories.png"
        drawn = render_trajectories(tmp_path / "logs" / "positions.parquet", out)
        assert drawn == 6
        assert out.exists()
        assert out.stat().st_size > 0

    def test_empty_positions(self, tmp_path: Path) -> None:
        path = tmp_path / "positions.parquet"
        pq.write_table(POSITIONS_SCHEMA.empty_table(), path)
        out = tmp_path / "empty.png"
        assert render_trajectories(path, out) == 0
        assert out.exists()

    def test_unordered_rows(self, tmp_path: Path) -> None:
        rows = [
            {"layer": 1, "agent_id": 0, "x": 3.0, "y": 3.0, "timestamp": 2.0},
            {"layer": 1, "agent_id": 0, "x": 1.0, "y": 1.0, "timestamp": 1.0},
            {"layer": 2, "agent_id": 1, "x": 9.0, "y": 9.0, "timestamp": 1.0},
        ]
        path = tmp_path / "positions.parquet"
        pq.write_table(pa.Table.from_pylist(rows, schema=POSITIONS_SCHEMA), path)
        assert render_trajectories(path, tmp_path / "out.png") == 2
