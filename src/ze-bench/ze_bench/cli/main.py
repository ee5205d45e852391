"""CLI entrypoint for ze-bench — typer app with `run` and `validate` commands."""

import asyncio
import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.table import Table

from ze_bench.agent.domain.message import Message
from ze_bench.agent.domain.request import AgentRequest
from ze_bench.agent.infrastructure.observer import StructlogAgentObserver, StructlogPricingObserver
from ze_bench.agent.infrastructure.pricing import PricingCatalog
from ze_bench.agent.infrastructure.registry import create_provider_adapter
from ze_bench.cache.domain.result_cache import ResultCache
from ze_bench.config.domain.agent import AgentConfig
from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.config.domain.settings import HarnessSettings
from ze_bench.config.infrastructure.observer import StructlogScenarioObserver
from ze_bench.config.infrastructure.yaml_loader import YamlScenarioLoader, load_settings
from ze_bench.core.errors import ZeBenchError
from ze_bench.core.run_context import RunContext
from ze_bench.evaluation.application.engine import EvaluationEngine
from ze_bench.evaluation.application.runner import BenchmarkRunner
from ze_bench.evaluation.domain.run_record import RunRecord
from ze_bench.evaluation.domain.scoring import WEIGHTED_MAX
from ze_bench.evaluation.infrastructure.diff import build_diff_artifacts
from ze_bench.evaluation.infrastructure.json_sink import JsonFileRunSink
from ze_bench.evaluation.infrastructure.observer import StructlogEvaluationObserver
from ze_bench.evaluation.infrastructure.registry import build_default_evaluators
from ze_bench.judge.infrastructure.observer import StructlogJudgeObserver
from ze_bench.tools.infrastructure.workspace import WorkspaceTools
from ze_bench.validation.application.runner import ValidationCommandRunner
from ze_bench.validation.infrastructure.observer import StructlogValidationObserver

app = typer.Typer(add_completion=False)

_console = Console()


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def _load_scenario(scenario_path: Path) -> ScenarioConfig:
    loader = YamlScenarioLoader(observer=StructlogScenarioObserver())
    return loader.load(path=scenario_path)


def _default_prompt(scenario: ScenarioConfig) -> str:
    return "\n\n".join(part for part in (scenario.title, scenario.description) if part)


async def _run_scenario(
    scenario: ScenarioConfig,
    settings: HarnessSettings,
    agent_config: AgentConfig,
    workspace_dir: Path,
    prompt: str,
    baseline_dir: Path | None,
    output_dir: Path,
) -> RunRecord:
    context = RunContext(
        suite=scenario.suite,
        scenario=scenario.id,
        agent=agent_config.type,
        model=agent_config.model or "",
    )
    cache = ResultCache()
    pricing = PricingCatalog(cache=cache, observer=StructlogPricingObserver())
    pricing.schedule_refresh()

    adapter = create_provider_adapter(
        config=agent_config,
        settings=settings,
        pricing=pricing,
        observer=StructlogAgentObserver(),
        context=context,
    )
    tools = WorkspaceTools(workspace_dir=workspace_dir)
    request = AgentRequest(
        messages=[Message(role="user", content=prompt)],
        workspace_dir=workspace_dir,
        max_turns=agent_config.max_turns,
        tools=tools.definitions(),
        tool_handlers=tools.handlers(),
    )

    evaluation_observer = StructlogEvaluationObserver()
    runner = BenchmarkRunner(
        adapter=adapter,
        validation=ValidationCommandRunner(observer=StructlogValidationObserver(), context=context),
        engine=EvaluationEngine(
            evaluators=build_default_evaluators(
                scenario=scenario,
                settings=settings,
                cache=cache,
                judge_observer=StructlogJudgeObserver(),
            ),
            observer=evaluation_observer,
        ),
        sink=JsonFileRunSink(output_dir=output_dir),
        diff_builder=build_diff_artifacts,
        observer=evaluation_observer,
        context=context,
    )
    return await runner.run(
        scenario=scenario,
        workspace_dir=workspace_dir,
        request=request,
        baseline_dir=baseline_dir,
    )


def _score_style(score: float) -> str:
    if score >= 0.8:
        return "green"
    if score >= 0.5:
        return "yellow"
    return "red"


def _print_score_card(record: RunRecord, output_dir: Path) -> None:
    scores: dict[str, float] = record.metadata.get("score_card", {})
    details = {result.name: result.details for result in record.evaluations}

    table = Table(title=f"ze-bench · {record.metadata.get('scenario', '')} · {record.status}")
    table.add_column("Metric", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Details", overflow="fold")
    for metric, score in scores.items():
        first_line = (details.get(metric) or "skipped").strip().splitlines()
        table.add_row(
            metric,
            f"[{_score_style(score)}]{score:.2f}[/]",
            first_line[0] if first_line else "",
        )
    _console.print(table)

    success = record.metadata.get("success", {})
    telemetry = record.telemetry
    _console.print(
        f"Weighted: [bold]{record.weighted_score or 0.0:.2f}[/] / {WEIGHTED_MAX:g}   "
        f"Success: [bold]{'yes' if success.get('successful') else 'no'}[/] "
        f"(metric {success.get('metric', 0.0):.2f})"
    )
    _console.print(
        f"Tool calls: {telemetry.tool_calls}   Tokens: {telemetry.tokens_in} in / "
        f"{telemetry.tokens_out} out   Cost: ${telemetry.cost_usd:.4f}   "
        f"Duration: {telemetry.duration_ms / 1000:.1f}s"
    )
    _console.print(f"Record: {output_dir / f'{record.run_id}.json'}")


@app.command()
def run(
    scenario_path: Path = typer.Argument(..., help="Path to scenario YAML"),
    workspace: Path = typer.Argument(..., help="Workspace directory the agent works in"),
    agent: str = typer.Option("openrouter", "--agent", help="openrouter | anthropic | claude-cli | claude-sdk"),
    model: str | None = typer.Option(None, "--model", help="Model override for the agent"),
    fallback_model: list[str] = typer.Option([], "--fallback-model", help="OpenRouter fallback model (repeatable)"),
    max_turns: int | None = typer.Option(None, "--max-turns", min=1, help="Turn budget override"),
    baseline: Path | None = typer.Option(None, "--baseline", help="Untouched copy of the workspace to diff against"),
    output_dir: Path = typer.Option(Path("./results"), "--output-dir", "-o", help="Directory for run records"),
    prompt: str | None = typer.Option(None, "--prompt", help="Prompt text (defaults to the scenario description)"),
    log_format: str = typer.Option("console", "--log-format", help="Log format: 'console' or 'json'"),
) -> None:
    """Run one scenario against an agent and score the resulting workspace."""
    try:
        _configure_structlog(log_format=log_format)
        scenario = _load_scenario(scenario_path)
        settings = load_settings()
        agent_config = AgentConfig.model_validate(
            {
                "type": agent,
                "model": model,
                "fallback_models": fallback_model,
                "max_turns": max_turns,
            }
        )
        record = asyncio.run(
            _run_scenario(
                scenario=scenario,
                settings=settings,
                agent_config=agent_config,
                workspace_dir=workspace.resolve(),
                prompt=prompt or _default_prompt(scenario),
                baseline_dir=baseline.resolve() if baseline is not None else None,
                output_dir=output_dir,
            )
        )
        _print_score_card(record, output_dir=output_dir)
    except KeyboardInterrupt:
        typer.echo("Run interrupted.")
        sys.exit(1)
    except ZeBenchError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except ValueError as exc:
        typer.echo(f"Invalid option: {exc}")
        sys.exit(1)


@app.command()
def validate(
    scenario_path: Path = typer.Argument(..., help="Path to scenario YAML"),
) -> None:
    """Load a scenario file and report whether it is valid."""
    _configure_structlog(log_format="console")
    try:
        scenario = _load_scenario(scenario_path)
    except ZeBenchError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    typer.echo(f"{scenario.id}: OK")


if __name__ == "__main__":
    app()
