"""HeuristicChecksEvaluator — the scenario's weighted deterministic checks."""

import json
import re
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel

from ze_bench.config.domain.scenario import (
    CommandCheck,
    FileCheck,
    PatternCheck,
    ScenarioConfig,
    ScriptCheck,
    StructuredCheck,
)
from ze_bench.core.process import ProcessOutcome, run_exec, run_shell
from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.result import EvaluatorResult

CHECK_TIMEOUT_S = 5 * 60.0

_PNPM_PREFIX = re.compile(r"^\s*pnpm\b")


class CheckResult(BaseModel, frozen=True):
    name: str
    passed: bool
    weight: float
    description: str | None = None
    error: str | None = None


class HeuristicChecksEvaluator:
    """Runs command, file, pattern, structured and script checks against the workspace.

    Score is the passed weight over the total weight. A failing or timed-out
    check only fails itself; nothing here raises for a check's own failure.
    """

    name = "heuristic_checks"

    def __init__(self, timeout_s: float = CHECK_TIMEOUT_S) -> None:
        self._timeout_s = timeout_s

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        checks = context.scenario.heuristic_checks
        if not checks.enabled:
            return EvaluatorResult(name=self.name, score=0.0, details="Heuristic checks not enabled")

        workspace = context.workspace_dir
        results: list[CheckResult] = []
        for command in checks.commands:
            results.append(await self._run_command(command, workspace))
        results.extend(_run_file(check, workspace) for check in checks.files)
        results.extend(_run_pattern(check, workspace) for check in checks.patterns)
        results.extend(_run_structured(check, workspace) for check in checks.structured)
        for script in checks.scripts:
            results.append(await self._run_script(script, workspace, context.scenario))

        total = sum(result.weight for result in results)
        passed = sum(result.weight for result in results if result.passed)
        score = passed / total if total > 0 else 0.0
        return EvaluatorResult(name=self.name, score=score, details=format_check_details(results))

    async def _run_command(self, check: CommandCheck, workspace: Path) -> CheckResult:
        outcome = await run_shell(
            normalize_pnpm_command(check.command), cwd=workspace, timeout_s=self._timeout_s
        )
        return _from_outcome(check.name, check.weight, check.description, outcome, "Command failed")

    async def _run_script(self, check: ScriptCheck, workspace: Path, scenario: ScenarioConfig) -> CheckResult:
        script = Path(check.script)
        script_path = script if script.is_absolute() else workspace / script
        if not script_path.exists():
            return _failed(check.name, check.weight, check.description, f"Script not found: {check.script}")

        args = [interpolate_arg(arg, scenario) for arg in check.args]
        outcome = await run_exec([str(script_path), *args], cwd=workspace, timeout_s=self._timeout_s)
        return _from_outcome(check.name, check.weight, check.description, outcome, "Script failed")


def normalize_pnpm_command(command: str) -> str:
    """Pin a leading ``pnpm`` to the workspace so it never walks up into an enclosing monorepo."""
    if not _PNPM_PREFIX.match(command) or "--ignore-workspace" in command:
        return command
    return _PNPM_PREFIX.sub("pnpm --ignore-workspace", command, count=1)


def interpolate_arg(arg: str, scenario: ScenarioConfig) -> str:
    replacements: dict[str, Callable[[], str]] = {
        "${artifact.figma_file_id}": lambda: scenario.artifact.get("figma_file_id", ""),
        "${artifact.figma_file_key}": lambda: scenario.artifact.get("figma_file_key", ""),
        "${scenario.id}": lambda: scenario.id,
        "${scenario.suite}": lambda: scenario.suite,
    }
    for placeholder, value in replacements.items():
        if placeholder in arg:
            arg = arg.replace(placeholder, value())
    return arg


def evaluate_json_path(data: object, path: str) -> bool:
    """``$.a.b`` lookup through nested objects; the final value must be non-null."""
    if not path.startswith("$."):
        return False
    current = data
    for part in path[2:].split("."):
        if not isinstance(current, dict) or part not in current:
            return False
        current = current[part]
    return current is not None


def format_check_details(results: list[CheckResult]) -> str:
    passed = sum(1 for result in results if result.passed)
    lines = [f"Passed: {passed}/{len(results)} checks", ""]
    for result in results:
        status = "✓" if result.passed else "✗"
        description = f" - {result.description}" if result.description else ""
        lines.append(f"{status} {result.name} (weight: {result.weight:.1f}){description}")
        if not result.passed and result.error:
            lines.append(f"  Error: {result.error.splitlines()[0]}")
    return "\n".join(lines)


def _run_file(check: FileCheck, workspace: Path) -> CheckResult:
    if (workspace / check.path).exists():
        return _passed(check.name, check.weight, check.description)
    return _failed(check.name, check.weight, check.description, f"File not found: {check.path}")


def _run_pattern(check: PatternCheck, workspace: Path) -> CheckResult:
    try:
        regex = re.compile(check.pattern)
    except re.error as exc:
        return _failed(check.name, check.weight, check.description, f"Invalid pattern: {exc}")

    try:
        files = sorted(
            path
            for path in workspace.glob(check.file)
            if path.is_file() and not _is_hidden(path.relative_to(workspace), check.file)
        )
    except (ValueError, NotImplementedError) as exc:
        return _failed(check.name, check.weight, check.description, f"Invalid file glob: {exc}")
    if not files:
        return _failed(check.name, check.weight, check.description, f"No files matched pattern: {check.file}")

    for path in files:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        if regex.search(content):
            return _passed(check.name, check.weight, check.description)
    return _failed(check.name, check.weight, check.description, "Pattern not found in any matching files")


def _is_hidden(relative: Path, pattern: str) -> bool:
    # Dot segments only match when the glob names them literally.
    named = {part for part in Path(pattern).parts if part.startswith(".")}
    return any(part.startswith(".") and part not in named for part in relative.parts)


def _run_structured(check: StructuredCheck, workspace: Path) -> CheckResult:
    path = workspace / check.file
    if not path.is_file():
        return _failed(check.name, check.weight, check.description, f"File not found: {check.file}")
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return _failed(check.name, check.weight, check.description, str(exc))

    if check.json_path:
        try:
            data = json.loads(content)
        except ValueError as exc:
            return _failed(check.name, check.weight, check.description, f"Failed to parse JSON: {exc}")
        if evaluate_json_path(data, check.json_path):
            return _passed(check.name, check.weight, check.description)
        return _failed(check.name, check.weight, check.description, f"JSON path not found: {check.json_path}")

    if check.section_header:
        if check.section_header in content:
            return _passed(check.name, check.weight, check.description)
        return _failed(
            check.name, check.weight, check.description, f"Section header not found: {check.section_header}"
        )

    return _passed(check.name, check.weight, check.description)


def _from_outcome(
    name: str, weight: float, description: str | None, outcome: ProcessOutcome, fallback: str
) -> CheckResult:
    if outcome.succeeded:
        return _passed(name, weight, description)
    error = outcome.stderr.strip() or outcome.stdout.strip() or fallback
    return _failed(name, weight, description, error)


def _passed(name: str, weight: float, description: str | None) -> CheckResult:
    return CheckResult(name=name, passed=True, weight=weight, description=description)


def _failed(name: str, weight: float, description: str | None, error: str) -> CheckResult:
    return CheckResult(name=name, passed=False, weight=weight, description=description, error=error)
