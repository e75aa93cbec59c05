"""Tests for the taskmesh-run CLI entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pyarrow.parquet as pq
import pytest

from taskmesh.experiments.run import _coerce_float, _coerce_int, _get_val, main


class TestCoercion:
    def test_int_rejects_bool_and_fraction(self) -> None:
        with pytest.raises(ValueError):
            _coerce_int(True, "seed")
        with pytest.raises(ValueError):
            _coerce_int(1.5, "seed")
        assert _coerce_int("7", "seed") == 7
        assert _coerce_int(3.0, "seed") == 3

    def test_float_rejects_bool(self) -> None:
        with pytest.raises(ValueError):
            _coerce_float(False, "duration")
        assert _coerce_float("2.5", "duration") == 2.5

    def test_cli_overrides_file(self) -> None:
        assert _get_val(3, "seed", {"seed": 9}, 0) == 3
        assert _get_val(None, "seed", {"seed": 9}, 0) == 9
        assert _get_val(None, "seed", {}, 0) == 0


class TestMain:
    def test_single_run_prints_summary(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["--duration", "10", "--seed", "2", "--out-dir", str(tmp_path)])
        summary = json.loads(capsys.readouterr().out)
        assert summary["batch"] is False
        assert summary["seed"] == 2
        assert summary["tasks_matched"] + summary["tasks_pending"] == summary["tasks_total"]
        assert "match_rate" in summary["stats"]
        assert (tmp_path / "logs" / "tasks.parquet").exists()

    def test_config_file_values_used(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"duration": 5, "n_workers": 2, "n_publishers": 1}))
        main(["--config", str(cfg), "--out-dir", str(tmp_path / "out")])
        capsys.readouterr()
        nodes = pq.read_table(tmp_path / "out" / "logs" / "nodes.parquet")
        assert nodes.num_rows == 3

    def test_batch_mode(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--duration", "5", "--n-runs", "2", "--seed", "10", "--out-dir", str(tmp_path)])
        summary = json.loads(capsys.readouterr().out)
        assert summary["batch"] is True
        assert summary["total_runs"] == 2
        assert (tmp_path / "seed_11").is_dir()

    def test_missing_config_file_errors(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            main(["--config", str(tmp_path / "missing.json")])

    def test_invalid_json_errors(self, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.json"
        cfg.write_text("{not json")
        with pytest.raises(SystemExit):
            main(["--config", str(cfg)])

    def test_invalid_scenario_errors(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            main(["--duration", "0", "--out-dir", str(tmp_path)])

    def test_zero_runs_errors(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            main(["--n-runs", "0", "--out-dir", str(tmp_path)])
