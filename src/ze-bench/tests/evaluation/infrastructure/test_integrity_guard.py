"""Tests for IntegrityGuardEvaluator."""

from pathlib import Path

import pytest

from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.core.run_context import RunContext
from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.diff import DiffArtifacts, FileDiff
from ze_bench.evaluation.infrastructure.integrity_guard import IntegrityGuardEvaluator


def _diff(file: str, patch: str, change_type: str = "modified") -> FileDiff:
    return FileDiff(file=file, change_type=change_type, text_patch=patch)


async def _evaluate(*files: FileDiff) -> tuple[float, str]:
    context = EvaluationContext(
        scenario=ScenarioConfig(id="guard"),
        workspace_dir=Path("/tmp/ws"),
        run=RunContext(),
        diffs=DiffArtifacts(files=list(files)),
    )
    result = await IntegrityGuardEvaluator().evaluate(context)
    return result.score, result.details


_ESLINT_WIDENED = "--- a/.eslintignore\n+++ b/.eslintignore\n dist\n+**/*\n"
_SKIP_LIB_CHECK = (
    "--- a/tsconfig.json\n+++ b/tsconfig.json\n"
    '-    "skipLibCheck": false,\n'
    '+    "skipLibCheck": true,\n'
)
_SKIPPED_TEST = "--- a/src/app.test.ts\n+++ b/src/app.test.ts\n+describe.skip('app', () => {\n"
_FOCUSED_TEST = "--- a/src/app.spec.tsx\n+++ b/src/app.spec.tsx\n+it.only('renders', () => {\n"


class TestFindings:
    async def test_clean_diff(self) -> None:
        score, details = await _evaluate(_diff("src/index.ts", "+export const x = 1;\n"))

        assert (score, details) == (1.0, "No integrity issues detected")

    async def test_widened_eslintignore(self) -> None:
        score, details = await _evaluate(_diff(".eslintignore", _ESLINT_WIDENED))

        assert score == pytest.approx(0.8)
        assert details == "Widened .eslintignore (.eslintignore)"

    async def test_relaxed_skip_lib_check(self) -> None:
        score, details = await _evaluate(_diff("packages/web/tsconfig.build.json", _SKIP_LIB_CHECK))

        assert score == pytest.approx(0.8)
        assert "Relaxed tsconfig skipLibCheck" in details

    async def test_skipped_and_focused_tests(self) -> None:
        score, details = await _evaluate(
            _diff("src/app.test.ts", _SKIPPED_TEST), _diff("src/app.spec.tsx", _FOCUSED_TEST)
        )

        assert score == pytest.approx(0.6)
        assert "Introduced skipped tests (src/app.test.ts)" in details
        assert "Introduced focused tests (src/app.spec.tsx)" in details

    async def test_removed_skip_is_not_a_finding(self) -> None:
        patch = "--- a/src/app.test.ts\n+++ b/src/app.test.ts\n-describe.skip('app', () => {\n+describe('app', () => {\n"

        score, _ = await _evaluate(_diff("src/app.test.ts", patch))

        assert score == 1.0

    async def test_deleted_files_are_ignored(self) -> None:
        score, _ = await _evaluate(_diff(".eslintignore", _ESLINT_WIDENED, change_type="deleted"))

        assert score == 1.0

    async def test_score_floors_at_zero(self) -> None:
        diffs = [_diff(f"src/t{index}.test.js", _SKIPPED_TEST) for index in range(6)]

        score, _ = await _evaluate(*diffs)

        assert score == 0.0
