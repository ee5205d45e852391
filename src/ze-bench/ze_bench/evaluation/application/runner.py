"""BenchmarkRunner — drives one scenario run from agent request to persisted record."""

import asyncio
import time
from pathlib import Path
from typing import Any

from ze_bench.agent.domain.provider import ProviderAdapter
from ze_bench.agent.domain.request import AgentRequest
from ze_bench.agent.domain.response import AgentResponse
from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.core.errors import ZeBenchError
from ze_bench.core.run_context import RunContext
from ze_bench.evaluation.application.engine import EvaluationEngine
from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.diff import DiffArtifacts, DiffBuilder
from ze_bench.evaluation.domain.observer import EvaluationObserver
from ze_bench.evaluation.domain.run_record import RunRecord, RunSink, RunStatus, Telemetry
from ze_bench.evaluation.domain.scoring import calculate_success, compute_weighted_totals
from ze_bench.validation.application.runner import ValidationCommandRunner
from ze_bench.validation.domain.command import CommandResult


class BenchmarkRunner:
    """Runs the agent, validates and scores its workspace, and persists the record.

    The runner is free of infrastructure dependencies: it receives the
    adapter, the sink and the diff builder so that tests can swap each one.
    A ``running`` record is saved before the agent starts and replaced by the
    final record at the end. The agent's transport failure marks the run
    ``failed`` and the scenario timeout marks it ``incomplete``; the workspace
    is still validated and scored in both cases.
    """

    def __init__(
        self,
        adapter: ProviderAdapter,
        validation: ValidationCommandRunner,
        engine: EvaluationEngine,
        sink: RunSink,
        diff_builder: DiffBuilder,
        observer: EvaluationObserver,
        context: RunContext,
    ) -> None:
        self._adapter = adapter
        self._validation = validation
        self._engine = engine
        self._sink = sink
        self._diff_builder = diff_builder
        self._observer = observer
        self._context = context

    async def run(
        self,
        scenario: ScenarioConfig,
        workspace_dir: Path,
        request: AgentRequest,
        baseline_dir: Path | None = None,
    ) -> RunRecord:
        metadata: dict[str, Any] = {
            **self._context.log_fields(),
            "workspace_dir": str(workspace_dir),
            "timeout_minutes": scenario.timeout_minutes,
        }
        self._observer.run_started(context=self._context)
        self._save(RunRecord(run_id=self._context.run_id, status="running", metadata=metadata))
        started_at = time.monotonic()

        status: RunStatus = "completed"
        response: AgentResponse | None = None
        try:
            async with asyncio.timeout(scenario.timeout_minutes * 60):
                response = await self._adapter.send(request)
        except TimeoutError:
            status = "incomplete"
            metadata["failure"] = f"Agent exceeded the {scenario.timeout_minutes:g} minute scenario timeout"
            self._observer.run_timed_out(context=self._context, timeout_minutes=scenario.timeout_minutes)
        except ZeBenchError as exc:
            status = "failed"
            metadata["failure"] = str(exc)
            self._observer.run_failed(context=self._context, reason=str(exc))
        except Exception as exc:
            # Errors the adapter did not wrap still end the run as failed.
            reason = str(exc) or type(exc).__name__
            status = "failed"
            metadata["failure"] = f"Agent raised {type(exc).__name__}: {reason}"
            self._observer.run_failed(context=self._context, reason=reason)

        command_results = await self._validation.run(workspace_dir, scenario.validation.commands)
        diffs = self._diff_builder(baseline_dir, workspace_dir) if baseline_dir is not None else DiffArtifacts()
        results, card = await self._engine.run(
            EvaluationContext(
                scenario=scenario,
                workspace_dir=workspace_dir,
                run=self._context,
                agent_response=response.content if response is not None else None,
                command_results=command_results,
                diffs=diffs,
            )
        )

        totals = compute_weighted_totals(card.scores, scenario.rubric_overrides.weights)
        success = calculate_success(
            command_results=command_results,
            scores=card.scores,
            weights=scenario.success_weights,
            configured=scenario.validation.commands.configured(),
        )
        elapsed_seconds = time.monotonic() - started_at
        metadata.update(
            {
                "score_card": card.scores,
                "weighted": totals.model_dump(),
                "success": success.model_dump(),
                "commands": [_command_summary(result) for result in command_results],
                "diff": {"files": len(diffs.files), "dependencies": len(diffs.dependencies)},
            }
        )

        record = RunRecord(
            run_id=self._context.run_id,
            status=status,
            total_score=card.total_score,
            weighted_score=totals.weighted,
            metadata=metadata,
            evaluations=results,
            telemetry=_telemetry(response, elapsed_seconds),
        )
        self._save(record)
        self._observer.run_completed(
            context=self._context,
            total_score=card.total_score,
            weighted_score=totals.weighted,
            successful=success.successful,
            elapsed_seconds=elapsed_seconds,
        )
        return record

    def _save(self, record: RunRecord) -> None:
        location = self._sink.save(record)
        self._observer.run_record_saved(context=self._context, status=record.status, location=location)


def _command_summary(result: CommandResult) -> dict[str, Any]:
    return {
        "kind": result.kind,
        "command": result.command,
        "exit_code": result.exit_code,
        "timed_out": result.timed_out,
        "duration_ms": result.duration_ms,
    }


def _telemetry(response: AgentResponse | None, elapsed_seconds: float) -> Telemetry:
    duration_ms = int(elapsed_seconds * 1000)
    if response is None:
        return Telemetry(duration_ms=duration_ms)
    return Telemetry(
        tool_calls=response.tool_calls,
        tokens_in=response.tokens_in or 0,
        tokens_out=response.tokens_out or 0,
        cost_usd=response.cost_usd,
        duration_ms=duration_ms,
    )
