"""YAML scenario loader — parses, interpolates env vars, validates, and emits observer events."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ze_bench.config.domain.observer import ScenarioObserver
from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.config.domain.settings import HarnessSettings
from ze_bench.config.infrastructure.env_interpolation import collect_missing_vars, interpolate
from ze_bench.config.infrastructure.errors import (
    MissingEnvVarsError,
    ScenarioLoadError,
    ScenarioValidationError,
    SettingsValidationError,
)


class YamlScenarioLoader:
    """Loads, interpolates, validates, and returns a ScenarioConfig from a YAML file."""

    def __init__(
        self,
        observer: ScenarioObserver,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._observer = observer
        self._environ = environ if environ is not None else os.environ

    def load(self, path: Path) -> ScenarioConfig:
        """
        Load, interpolate, validate, and return a ScenarioConfig.

        Relative ``reference_path`` values are resolved against the scenario
        file's directory.

        Raises:
            ScenarioLoadError: if the file is missing or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ScenarioValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        missing = collect_missing_vars(raw, self._environ)
        if missing:
            raise MissingEnvVarsError(missing)
        interpolated = interpolate(raw, self._environ)
        scenario = _build_scenario(resolved=interpolated, base_dir=path.parent)
        if scenario.llm_judge.enabled and not scenario.llm_judge.categories:
            self._observer.scenario_judge_without_categories(scenario_id=scenario.id)
        self._observer.scenario_loaded(scenario_id=scenario.id, suite=scenario.suite, path=path)
        return scenario


def load_settings(environ: Mapping[str, str] | None = None) -> HarnessSettings:
    """Read HarnessSettings from *environ* (defaults to the process environment)."""
    try:
        return HarnessSettings.from_env(environ if environ is not None else os.environ)
    except ValidationError as exc:
        raise SettingsValidationError(_format_validation_error(exc)) from exc


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ScenarioLoadError(path=path, reason="file not found") from exc
    except yaml.YAMLError as exc:
        raise ScenarioLoadError(path=path, reason=f"invalid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ScenarioLoadError(path=path, reason="top-level value must be a mapping")
    return raw


def _build_scenario(resolved: Any, base_dir: Path) -> ScenarioConfig:
    try:
        scenario = ScenarioConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ScenarioValidationError(_format_validation_error(exc)) from exc
    if scenario.reference_path is not None and not scenario.reference_path.is_absolute():
        scenario = scenario.model_copy(
            update={"reference_path": (base_dir / scenario.reference_path).resolve()}
        )
    return scenario


def _format_validation_error(exc: ValidationError) -> str:
    problems = [
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    ]
    return "; ".join(problems)
