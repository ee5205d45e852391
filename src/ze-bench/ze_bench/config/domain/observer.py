"""Observer port for the config domain — defines events in domain language."""

from pathlib import Path
from typing import Protocol


class ScenarioObserver(Protocol):
    def scenario_loaded(self, scenario_id: str, suite: str, path: Path) -> None: ...

    def scenario_judge_without_categories(self, scenario_id: str) -> None: ...
