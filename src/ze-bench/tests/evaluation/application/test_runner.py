"""Tests for BenchmarkRunner end to end against in-memory collaborators."""

from pathlib import Path

import pytest

from ze_bench.agent.domain.message import Message
from ze_bench.agent.domain.request import AgentRequest
from ze_bench.agent.infrastructure.errors import ProviderTransportError
from ze_bench.config.domain.scenario import (
    CommandCheck,
    FileCheck,
    HeuristicChecksConfig,
    LlmJudgeConfig,
    ScenarioConfig,
    ValidationCommands,
    ValidationConfig,
)
from ze_bench.core.run_context import RunContext
from ze_bench.evaluation.application.engine import EvaluationEngine
from ze_bench.evaluation.application.runner import BenchmarkRunner
from ze_bench.evaluation.domain.diff import DiffArtifacts, FileDiff
from ze_bench.evaluation.infrastructure.heuristic_checks import HeuristicChecksEvaluator
from ze_bench.evaluation.infrastructure.llm_judge import LlmJudgeEvaluator
from ze_bench.validation.application.runner import ValidationCommandRunner
from tests.agent.fake_adapter import FakeProviderAdapter
from tests.evaluation.fake_observer import FakeEvaluationObserver
from tests.evaluation.fake_sink import FakeRunSink
from tests.judge.fake_judge import FakeJudge
from tests.validation.fake_observer import FakeValidationObserver


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_scenario(**overrides: object) -> ScenarioConfig:
    fields: dict[str, object] = {
        "id": "checks-only",
        "heuristic_checks": HeuristicChecksConfig(
            enabled=True,
            files=[FileCheck(name="readme", path="README.md")],
            commands=[CommandCheck(name="always-fails", command="exit 1")],
        ),
        "llm_judge": LlmJudgeConfig(enabled=False),
    }
    fields.update(overrides)
    return ScenarioConfig(**fields)


def _make_request() -> AgentRequest:
    return AgentRequest(messages=[Message(role="user", content="Do the migration.")])


def _make_runner(
    adapter: FakeProviderAdapter,
    diffs: DiffArtifacts | None = None,
) -> tuple[BenchmarkRunner, FakeRunSink, FakeEvaluationObserver, list[tuple[Path, Path]]]:
    context = RunContext(run_id="run-e2e", scenario="checks-only")
    observer = FakeEvaluationObserver()
    sink = FakeRunSink()
    diff_calls: list[tuple[Path, Path]] = []

    def diff_builder(baseline: Path, workspace: Path) -> DiffArtifacts:
        diff_calls.append((baseline, workspace))
        return diffs or DiffArtifacts()

    runner = BenchmarkRunner(
        adapter=adapter,
        validation=ValidationCommandRunner(observer=FakeValidationObserver(), context=context, timeout_s=30),
        engine=EvaluationEngine(
            evaluators=[HeuristicChecksEvaluator(timeout_s=30), LlmJudgeEvaluator(judge=FakeJudge())],
            observer=observer,
            reported=(),
        ),
        sink=sink,
        diff_builder=diff_builder,
        observer=observer,
        context=context,
    )
    return runner, sink, observer, diff_calls


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestCompletedRun:
    async def test_score_card_for_checks_only_scenario(self, tmp_path: Path) -> None:
        (tmp_path / "README.md").write_text("# Project\n")
        runner, sink, observer, _ = _make_runner(FakeProviderAdapter())

        record = await runner.run(scenario=_make_scenario(), workspace_dir=tmp_path, request=_make_request())

        assert record.status == "completed"
        assert record.metadata["score_card"] == {"heuristic_checks": 0.5, "llm_judge": 0.0}
        assert record.total_score == pytest.approx(0.25)
        assert observer.runs_completed[0].run_id == "run-e2e"

    async def test_running_record_saved_before_final(self, tmp_path: Path) -> None:
        runner, sink, observer, _ = _make_runner(FakeProviderAdapter())

        await runner.run(scenario=_make_scenario(), workspace_dir=tmp_path, request=_make_request())

        assert [record.status for record in sink.records] == ["running", "completed"]
        assert {record.run_id for record in sink.records} == {"run-e2e"}
        assert [event.status for event in observer.records_saved] == ["running", "completed"]

    async def test_telemetry_comes_from_agent_response(self, tmp_path: Path) -> None:
        runner, _, _, _ = _make_runner(FakeProviderAdapter())

        record = await runner.run(scenario=_make_scenario(), workspace_dir=tmp_path, request=_make_request())

        assert record.telemetry.tool_calls == 4
        assert (record.telemetry.tokens_in, record.telemetry.tokens_out) == (1200, 300)
        assert record.telemetry.cost_usd == pytest.approx(0.02)

    async def test_validation_results_are_recorded(self, tmp_path: Path) -> None:
        scenario = _make_scenario(
            validation=ValidationConfig(commands=ValidationCommands(install="true", test="exit 3"))
        )
        runner, _, _, _ = _make_runner(FakeProviderAdapter())

        record = await runner.run(scenario=scenario, workspace_dir=tmp_path, request=_make_request())

        assert [(command["kind"], command["exit_code"]) for command in record.metadata["commands"]] == [
            ("install", 0),
            ("test", 3),
        ]
        assert record.metadata["success"]["successful"] is False

    async def test_judge_sees_agent_response_and_diffs(self, tmp_path: Path) -> None:
        scenario = _make_scenario(llm_judge=LlmJudgeConfig(enabled=True, categories=["Correctness"]))
        diffs = DiffArtifacts(files=[FileDiff(file="package.json", change_type="modified")])
        runner, _, _, diff_calls = _make_runner(FakeProviderAdapter(), diffs=diffs)
        baseline = tmp_path / "baseline"

        record = await runner.run(
            scenario=scenario, workspace_dir=tmp_path, request=_make_request(), baseline_dir=baseline
        )

        assert diff_calls == [(baseline, tmp_path)]
        assert record.metadata["diff"] == {"files": 1, "dependencies": 0}
        assert record.metadata["score_card"]["llm_judge"] == pytest.approx(0.75)

    async def test_no_baseline_skips_diff(self, tmp_path: Path) -> None:
        runner, _, _, diff_calls = _make_runner(FakeProviderAdapter())

        await runner.run(scenario=_make_scenario(), workspace_dir=tmp_path, request=_make_request())

        assert diff_calls == []


class TestAgentFailures:
    """A failed or timed-out agent still gets its workspace validated and scored."""

    async def test_transport_error_marks_run_failed(self, tmp_path: Path) -> None:
        (tmp_path / "README.md").write_text("# Project\n")
        error = ProviderTransportError(provider="fake", reason="connection reset")
        runner, sink, observer, _ = _make_runner(FakeProviderAdapter(error=error))

        record = await runner.run(scenario=_make_scenario(), workspace_dir=tmp_path, request=_make_request())

        assert record.status == "failed"
        assert "connection reset" in record.metadata["failure"]
        assert record.metadata["score_card"]["heuristic_checks"] == 0.5
        assert observer.runs_failed == [str(error)]
        assert sink.records[-1].status == "failed"

    async def test_timeout_marks_run_incomplete(self, tmp_path: Path) -> None:
        scenario = _make_scenario(timeout_minutes=0.001)
        runner, _, observer, _ = _make_runner(FakeProviderAdapter(delay_s=5))

        record = await runner.run(scenario=scenario, workspace_dir=tmp_path, request=_make_request())

        assert record.status == "incomplete"
        assert "scenario timeout" in record.metadata["failure"]
        assert observer.runs_timed_out == [0.001]
        assert record.telemetry.tool_calls == 0

    async def test_unexpected_agent_error_marks_run_failed(self, tmp_path: Path) -> None:
        (tmp_path / "README.md").write_text("# Project\n")
        runner, sink, observer, _ = _make_runner(FakeProviderAdapter(error=RuntimeError("boom")))

        record = await runner.run(scenario=_make_scenario(), workspace_dir=tmp_path, request=_make_request())

        assert record.status == "failed"
        assert record.metadata["failure"] == "Agent raised RuntimeError: boom"
        assert record.metadata["score_card"]["heuristic_checks"] == 0.5
        assert observer.runs_failed == ["boom"]
        assert [saved.status for saved in sink.records] == ["running", "failed"]
