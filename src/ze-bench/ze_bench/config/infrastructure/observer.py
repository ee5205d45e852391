"""Structlog implementation of the ScenarioObserver port."""

from pathlib import Path

import structlog


class StructlogScenarioObserver:
    """Delegates scenario config events to structlog.

    Satisfies the ScenarioObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def scenario_loaded(self, scenario_id: str, suite: str, path: Path) -> None:
        self._log.info("scenario.loaded", scenario_id=scenario_id, suite=suite, path=str(path))

    def scenario_judge_without_categories(self, scenario_id: str) -> None:
        self._log.warning(
            "scenario.judge_without_categories",
            scenario_id=scenario_id,
            message="llm_judge is enabled but declares no rubric categories; it will score 0",
        )
