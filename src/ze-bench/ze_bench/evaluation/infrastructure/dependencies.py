"""Evaluators that read the workspace's package.json manifests and lockfiles."""

import json
import re
from pathlib import Path

from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.result import EvaluatorResult
from ze_bench.evaluation.domain.semver import major_of, parse_version, satisfies
from ze_bench.evaluation.infrastructure.package_json import (
    dependency_version,
    package_json_paths,
    read_package_json,
    relative_label,
)

LOCKFILES: dict[str, str] = {
    "pnpm-lock.yaml": "pnpm",
    "package-lock.json": "npm",
    "npm-shrinkwrap.json": "npm",
    "yarn.lock": "yarn",
    "bun.lockb": "bun",
    "bun.lock": "bun",
}

MIGRATION_PENALTY = 0.33

_DIRECT_SECTIONS = ("dependencies", "devDependencies")


class PackageManagerEvaluator:
    """``manager_correctness``: the lockfiles left behind must come from an allowed manager."""

    name = "manager_correctness"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        allowed = context.scenario.constraints.managers_allowed
        if not allowed:
            return EvaluatorResult(name=self.name, score=1.0, details="No package manager constraint")

        project_dir = find_project_dir(context.workspace_dir)
        if project_dir is None:
            return EvaluatorResult(
                name=self.name, score=0.0, details="Generated project directory not found in workspace"
            )

        used = sorted({manager for lockfile, manager in LOCKFILES.items() if (project_dir / lockfile).exists()})
        if not used:
            return EvaluatorResult(name=self.name, score=0.0, details="No lockfile found")
        disallowed = [manager for manager in used if manager not in allowed]
        if disallowed:
            return EvaluatorResult(
                name=self.name,
                score=0.0,
                details=f"Lockfile mismatch: found {', '.join(disallowed)}, allowed {', '.join(allowed)}",
            )
        return EvaluatorResult(name=self.name, score=1.0, details="Correct manager artifacts")


class DependencyTargetsEvaluator:
    """``dependency_targets``: every manifest must satisfy every required version target."""

    name = "dependency_targets"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        targets = context.scenario.targets.required
        if not targets:
            return EvaluatorResult(name=self.name, score=1.0, details="No required targets")

        total = 0
        satisfied = 0
        misses: list[str] = []
        for path in package_json_paths(context.workspace_dir):
            package = read_package_json(path)
            label = relative_label(context.workspace_dir, path)
            for target in targets:
                total += 1
                current = dependency_version(package, target.name, sections=_DIRECT_SECTIONS)
                if satisfies(target.to, current):
                    satisfied += 1
                else:
                    misses.append(f"{label}:{target.name}@{current or 'missing'} !-> {target.to}")

        if total == 0:
            return EvaluatorResult(name=self.name, score=0.0, details="No package.json found in workspace")
        return EvaluatorResult(
            name=self.name,
            score=satisfied / total,
            details="; ".join(misses) or "All dependency targets met",
        )


class NamespaceMigrationEvaluator:
    """``namespace_migration``: renamed packages must be fully swapped, imports included."""

    name = "namespace_migration"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        migrations = context.scenario.constraints.namespace_migrations
        if not migrations:
            return EvaluatorResult(name=self.name, score=1.0, details="No namespace migrations defined")

        issues: list[str] = []
        manifests = {
            relative_label(context.workspace_dir, path): read_package_json(path)
            for path in package_json_paths(context.workspace_dir)
        }

        for label, package in manifests.items():
            for migration in migrations:
                if dependency_version(package, migration.source, sections=_DIRECT_SECTIONS):
                    issues.append(
                        f"{label}: Still has old package '{migration.source}' "
                        f"(should migrate to '{migration.target}')"
                    )

        for change in context.diffs.dependencies:
            for migration in migrations:
                if change.name != migration.source or change.after is not None:
                    continue
                package = manifests.get(change.package_path)
                if package is not None and not dependency_version(
                    package, migration.target, sections=_DIRECT_SECTIONS
                ):
                    issues.append(
                        f"{change.package_path}: Removed '{migration.source}' but didn't add '{migration.target}'"
                    )

        for diff in context.diffs.files:
            if diff.change_type == "deleted" or not diff.text_patch:
                continue
            added = "\n".join(line for line in diff.text_patch.splitlines() if line.startswith("+"))
            for migration in migrations:
                if _imports(migration.source).search(added):
                    issues.append(f"{diff.file}: Still imports old package '{migration.source}'")

        score = max(0.0, 1.0 - MIGRATION_PENALTY * len(issues))
        return EvaluatorResult(
            name=self.name,
            score=score,
            details="; ".join(issues) or "All namespace migrations completed",
        )


class CompanionAlignmentEvaluator:
    """``companion_alignment``: companion packages must share the main package's major version."""

    name = "companion_alignment"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        rules = context.scenario.constraints.companion_versions
        if not rules:
            return EvaluatorResult(name=self.name, score=1.0, details="No companion version rules defined")

        total = 0
        aligned = 0
        misalignments: list[str] = []
        for path in package_json_paths(context.workspace_dir):
            package = read_package_json(path)
            label = relative_label(context.workspace_dir, path)
            for rule in rules:
                main_version = dependency_version(package, rule.main)
                if not main_version:
                    continue
                main_major = major_of(main_version)
                for companion in rule.companions:
                    total += 1
                    companion_version = dependency_version(package, companion.name)
                    companion_major = major_of(companion_version)
                    if main_major is not None and main_major == companion_major:
                        aligned += 1
                    else:
                        misalignments.append(
                            f"{label}: {rule.main}@{main_version} vs "
                            f"{companion.name}@{companion_version or 'missing'} (major mismatch)"
                        )

        score = aligned / total if total else 1.0
        return EvaluatorResult(
            name=self.name,
            score=score,
            details="; ".join(misalignments) or "All companions aligned",
        )


class DependencyProximityEvaluator:
    """``dependency_proximity``: how close the workspace's versions are to a reference solution.

    Per reference dependency: same version 1.0, same major.minor 0.9, same
    major 0.7, otherwise 0.3; missing from the workspace 0. The score is the
    mean over the reference's direct dependencies.
    """

    name = "dependency_proximity"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        reference = context.scenario.reference_path
        if reference is None or not (reference / "package.json").is_file():
            return EvaluatorResult(name=self.name, score=0.0, details="Reference implementation not found")
        workspace_manifest = context.workspace_dir / "package.json"
        if not workspace_manifest.is_file():
            return EvaluatorResult(name=self.name, score=0.0, details="package.json not found in workspace")

        reference_package = read_package_json(reference / "package.json")
        workspace_package = read_package_json(workspace_manifest)

        names = sorted(
            {
                name
                for section in _DIRECT_SECTIONS
                for name in (reference_package.get(section) or {})
            }
        )
        comparisons = []
        for name in names:
            expected = dependency_version(reference_package, name, sections=_DIRECT_SECTIONS)
            if expected is None:
                continue
            actual = dependency_version(workspace_package, name, sections=_DIRECT_SECTIONS)
            comparisons.append(
                {
                    "name": name,
                    "score": version_proximity(actual, expected),
                    "workspace": actual or "missing",
                    "reference": expected,
                }
            )

        if not comparisons:
            return EvaluatorResult(name=self.name, score=0.0, details="No reference dependencies found")
        score = sum(item["score"] for item in comparisons) / len(comparisons)
        return EvaluatorResult(
            name=self.name,
            score=score,
            details=json.dumps({"score": round(score, 2), "dependencies": comparisons}),
        )


def version_proximity(actual: str | None, expected: str) -> float:
    if actual is None:
        return 0.0
    actual_version = parse_version(actual)
    expected_version = parse_version(expected)
    if actual_version is None or expected_version is None:
        return 1.0 if actual == expected else 0.0
    if actual_version == expected_version:
        return 1.0
    if actual_version.major == expected_version.major:
        return 0.9 if actual_version.minor == expected_version.minor else 0.7
    return 0.3


def find_project_dir(workspace_dir: Path) -> Path | None:
    """The workspace itself when it holds a package.json, else the first subproject that does.

    A ``control`` directory holds the reference copy and is never the project.
    """
    if (workspace_dir / "package.json").is_file():
        return workspace_dir
    if not workspace_dir.is_dir():
        return None
    for child in sorted(workspace_dir.iterdir()):
        if child.is_dir() and child.name != "control" and (child / "package.json").is_file():
            return child
    return None


def _imports(package: str) -> re.Pattern[str]:
    return re.compile(rf"""(import|require)\b.*['"`]{re.escape(package)}['"`]""")
