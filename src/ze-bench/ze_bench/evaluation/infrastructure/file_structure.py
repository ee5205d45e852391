"""FileStructureEvaluator — the share of expected files present in the workspace."""

import json

from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.result import EvaluatorResult


class FileStructureEvaluator:
    name = "file_structure"

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        expected = context.scenario.targets.files
        if not expected:
            return EvaluatorResult(name=self.name, score=1.0, details="No expected files")

        missing = [path for path in expected if not (context.workspace_dir / path).exists()]
        present = len(expected) - len(missing)
        score = present / len(expected)
        summary: dict[str, object] = {
            "score": round(score, 2),
            "total": len(expected),
            "present": present,
            "missing": len(missing),
        }
        if missing:
            summary["missing_files"] = missing
        return EvaluatorResult(name=self.name, score=score, details=json.dumps(summary))
