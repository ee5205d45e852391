"""ConfigAccuracyEvaluator — Vite, Tailwind, tsconfig and shadcn setup of the generated project."""

import json
import re
from pathlib import Path

from pydantic import BaseModel

from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.result import EvaluatorResult
from ze_bench.evaluation.infrastructure.dependencies import find_project_dir

_REACT_PLUGIN = re.compile(r"react\(\)|@vitejs/plugin-react")
_TAILWIND_PLUGIN = re.compile(r"tailwindcss\(\)|@tailwindcss/vite")
_PATH_ALIAS = re.compile(r"@.*path\.resolve|resolve:")
_TAILWIND_IMPORT = re.compile(r"""@import\s+["']tailwindcss["']|@tailwind\s+(base|components|utilities)""")
_TSCONFIG_PATHS = re.compile(r'"paths"\s*:\s*\{|@/\*')


class ConfigCheck(BaseModel, frozen=True):
    name: str
    score: float
    reason: str


class ConfigAccuracyEvaluator:
    """``config_accuracy``: mean of four setup checks on the generated project.

    Only runs against a scenario with a reference implementation; the project
    directory is the workspace or its first subproject with a package.json.
    """

    name = "config_accuracy"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        reference = context.scenario.reference_path
        if reference is None or not reference.exists():
            return EvaluatorResult(name=self.name, score=0.0, details="Reference implementation not found")
        project_dir = find_project_dir(context.workspace_dir)
        if project_dir is None:
            return EvaluatorResult(
                name=self.name, score=0.0, details="Generated project directory not found in workspace"
            )

        checks = [
            check_vite_config(project_dir),
            check_tailwind_setup(project_dir),
            check_tsconfig(project_dir),
            check_components_json(project_dir),
        ]
        score = sum(check.score for check in checks) / len(checks)
        summary = {
            "score": round(score, 2),
            "checks": [check.model_dump() for check in checks],
        }
        return EvaluatorResult(name=self.name, score=score, details=json.dumps(summary))


def check_vite_config(project_dir: Path) -> ConfigCheck:
    path = project_dir / "vite.config.ts"
    if not path.is_file():
        return ConfigCheck(name="vite.config.ts", score=0.0, reason="File does not exist")
    content = path.read_text(encoding="utf-8", errors="replace")
    return _partial(
        "vite.config.ts",
        [
            (bool(_REACT_PLUGIN.search(content)), "missing React plugin"),
            (bool(_TAILWIND_PLUGIN.search(content)), "missing Tailwind plugin"),
            (bool(_PATH_ALIAS.search(content)), "missing path alias config"),
        ],
        passed_reason="All checks passed",
    )


def check_tailwind_setup(project_dir: Path) -> ConfigCheck:
    path = project_dir / "src" / "index.css"
    if not path.is_file():
        return ConfigCheck(name="tailwind-setup", score=0.0, reason="src/index.css does not exist")
    if _TAILWIND_IMPORT.search(path.read_text(encoding="utf-8", errors="replace")):
        return ConfigCheck(name="tailwind-setup", score=1.0, reason="Tailwind properly configured")
    return ConfigCheck(name="tailwind-setup", score=0.0, reason="No Tailwind imports found")


def check_tsconfig(project_dir: Path) -> ConfigCheck:
    path = project_dir / "tsconfig.json"
    if not path.is_file():
        return ConfigCheck(name="tsconfig", score=0.0, reason="tsconfig.json does not exist")

    score = 0.5
    reasons = ["tsconfig.json exists"]
    if (project_dir / "tsconfig.app.json").is_file():
        score += 0.25
        reasons.append("tsconfig.app.json exists")
    else:
        reasons.append("missing tsconfig.app.json")
    if _TSCONFIG_PATHS.search(path.read_text(encoding="utf-8", errors="replace")):
        score += 0.25
        reasons.append("path aliases configured")
    else:
        reasons.append("missing path aliases")
    return ConfigCheck(name="tsconfig", score=score, reason=", ".join(reasons))


def check_components_json(project_dir: Path) -> ConfigCheck:
    path = project_dir / "components.json"
    if not path.is_file():
        return ConfigCheck(
            name="components.json",
            score=0.0,
            reason="components.json does not exist (shadcn not initialized)",
        )
    try:
        content = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ConfigCheck(name="components.json", score=0.0, reason="Invalid JSON")
    if not isinstance(content, dict):
        return ConfigCheck(name="components.json", score=0.0, reason="Invalid JSON")

    aliases = content.get("aliases")
    return _partial(
        "components.json",
        [
            ("style" in content, "missing style config"),
            (aliases is not None, "missing aliases"),
            ("tsx" in content or (isinstance(aliases, dict) and "components" in aliases), "missing component paths"),
        ],
        passed_reason="Properly configured",
    )


def _partial(name: str, parts: list[tuple[bool, str]], passed_reason: str) -> ConfigCheck:
    missing = [reason for passed, reason in parts if not passed]
    score = round((len(parts) - len(missing)) / len(parts), 4)
    return ConfigCheck(name=name, score=score, reason=", ".join(missing) or passed_reason)
