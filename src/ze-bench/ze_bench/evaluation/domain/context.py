"""EvaluationContext — everything an evaluator may look at for one finished run."""

from pathlib import Path

from pydantic import BaseModel

from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.core.run_context import RunContext
from ze_bench.evaluation.domain.diff import DiffArtifacts
from ze_bench.validation.domain.command import CommandKind, CommandResult


class EvaluationContext(BaseModel, frozen=True):
    scenario: ScenarioConfig
    workspace_dir: Path
    run: RunContext
    agent_response: str | None = None
    command_results: list[CommandResult] = []
    diffs: DiffArtifacts = DiffArtifacts()

    def command(self, kind: CommandKind) -> CommandResult | None:
        """The result for *kind*, or None if that command did not run."""
        return next((result for result in self.command_results if result.kind == kind), None)
