"""Evaluators scoring the validation commands: install, test, lint, typecheck."""

from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.result import EvaluatorResult


class InstallEvaluator:
    name = "install_success"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        result = context.command("install")
        if result is None:
            return EvaluatorResult(name=self.name, score=0.0, details="No install attempt recorded")
        if result.succeeded:
            return EvaluatorResult(name=self.name, score=1.0, details="Install succeeded")
        return EvaluatorResult(name=self.name, score=0.0, details=f"Install failed: {_exit(result.exit_code, result.timed_out)}")


class NonRegressionEvaluator:
    """``tests_nonregression``: a configured test command must have run and passed.

    Without a configured test command the metric is 1 unless a test result
    exists anyway, in which case that result decides.
    """

    name = "tests_nonregression"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        configured = context.scenario.validation.commands.test is not None
        result = context.command("test")

        if not configured:
            if result is None:
                return EvaluatorResult(
                    name=self.name, score=1.0, details="No test script configured - skipping tests"
                )
            passed = result.succeeded
            return EvaluatorResult(
                name=self.name,
                score=1.0 if passed else 0.0,
                details="Tests passed (optional)" if passed else "Tests failed (optional)",
            )

        if result is None:
            return EvaluatorResult(
                name=self.name, score=0.0, details="Test command was configured but not executed"
            )
        if result.succeeded:
            return EvaluatorResult(name=self.name, score=1.0, details="Tests passed")
        return EvaluatorResult(name=self.name, score=0.0, details=f"Tests failed: {_exit(result.exit_code, result.timed_out)}")


class LintEvaluator:
    name = "lint_success"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        result = context.command("lint")
        if result is None:
            return EvaluatorResult(name=self.name, score=1.0, details="No lint command configured")
        if result.succeeded:
            return EvaluatorResult(name=self.name, score=1.0, details="Lint passed")
        return EvaluatorResult(name=self.name, score=0.0, details=f"Lint failed: {_exit(result.exit_code, result.timed_out)}")


class TypecheckEvaluator:
    name = "typecheck_success"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        result = context.command("typecheck")
        if result is None:
            return EvaluatorResult(name=self.name, score=1.0, details="No typecheck command configured")
        if result.succeeded:
            return EvaluatorResult(name=self.name, score=1.0, details="Typecheck passed")
        return EvaluatorResult(
            name=self.name, score=0.0, details=f"Typecheck failed: {_exit(result.exit_code, result.timed_out)}"
        )


def _exit(exit_code: int, timed_out: bool) -> str:
    return "timed out" if timed_out else f"exit={exit_code}"
