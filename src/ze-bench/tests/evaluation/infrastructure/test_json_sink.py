"""Tests for JsonFileRunSink."""

import json
from pathlib import Path

import pytest

from ze_bench.evaluation.domain.result import EvaluatorResult
from ze_bench.evaluation.domain.run_record import RunRecord, Telemetry
from ze_bench.evaluation.infrastructure.errors import RunPersistenceError
from ze_bench.evaluation.infrastructure.json_sink import JsonFileRunSink


def _make_record(status: str = "completed") -> RunRecord:
    return RunRecord(
        run_id="run-42",
        status=status,
        total_score=0.5,
        weighted_score=6.25,
        metadata={"scenario": "npm-upgrade"},
        evaluations=[EvaluatorResult(name="install_success", score=1.0, details="Install succeeded")],
        telemetry=Telemetry(tool_calls=3, tokens_in=100, tokens_out=20, cost_usd=0.01, duration_ms=900),
    )


class TestJsonFileRunSink:
    def test_writes_record_named_after_run(self, tmp_path: Path) -> None:
        location = JsonFileRunSink(output_dir=tmp_path / "runs").save(_make_record())

        assert location == str(tmp_path / "runs" / "run-42.json")
        data = json.loads(Path(location).read_text())
        assert data["status"] == "completed"
        assert data["evaluations"][0]["name"] == "install_success"
        assert data["telemetry"]["tool_calls"] == 3

    def test_second_save_replaces_first(self, tmp_path: Path) -> None:
        sink = JsonFileRunSink(output_dir=tmp_path)

        sink.save(_make_record(status="running"))
        location = sink.save(_make_record(status="failed"))

        assert json.loads(Path(location).read_text())["status"] == "failed"
        assert sorted(path.name for path in tmp_path.iterdir()) == ["run-42.json"]

    def test_unwritable_directory_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        with pytest.raises(RunPersistenceError, match="Failed to persist run 'run-42'"):
            JsonFileRunSink(output_dir=blocker / "runs").save(_make_record())
