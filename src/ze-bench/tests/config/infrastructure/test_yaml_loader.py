"""Tests for YAML scenario loading infrastructure."""

from pathlib import Path

import pytest

from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.config.infrastructure.errors import (
    MissingEnvVarsError,
    ScenarioLoadError,
    ScenarioValidationError,
    SettingsValidationError,
)
from ze_bench.config.infrastructure.yaml_loader import YamlScenarioLoader, load_settings
from tests.config.fake_observer import FakeScenarioObserver

# __file__ is tests/config/infrastructure/test_yaml_loader.py
FIXTURES = Path(__file__).parent.parent.parent / "fixtures"

_ENV = {"FIGMA_FILE_KEY": "abc123"}


def _load(name: str, environ: dict[str, str] | None = None) -> tuple[ScenarioConfig, FakeScenarioObserver]:
    observer = FakeScenarioObserver()
    loader = YamlScenarioLoader(observer=observer, environ=_ENV if environ is None else environ)
    return loader.load(FIXTURES / name), observer


class TestValidScenario:
    """A valid YAML scenario loads with every section populated."""

    def test_identity(self) -> None:
        scenario, observer = _load("valid_scenario.yaml")

        assert scenario.id == "npm-react-18-upgrade"
        assert scenario.suite == "npm"
        assert scenario.timeout_minutes == 30
        assert observer.loaded[0].scenario_id == "npm-react-18-upgrade"

    def test_constraints(self) -> None:
        scenario, _ = _load("valid_scenario.yaml")
        constraints = scenario.constraints

        assert constraints.managers_allowed == ["pnpm"]
        assert (constraints.namespace_migrations[0].source, constraints.namespace_migrations[0].target) == (
            "request",
            "got",
        )
        assert [c.name for c in constraints.companion_versions[0].companions] == ["react-dom", "@types/react"]
        assert constraints.model_extra == {"breaking_changes_documented": True}

    def test_checks_and_judge(self) -> None:
        scenario, _ = _load("valid_scenario.yaml")

        assert scenario.heuristic_checks.enabled is True
        assert scenario.heuristic_checks.patterns[0].weight == 2.0
        assert scenario.llm_judge.categories == ["Correctness: the upgrade works", "Code Quality"]
        assert scenario.rubric_overrides.weights == {"tests_nonregression": 3.0}

    def test_env_vars_and_defaults_are_interpolated(self) -> None:
        scenario, _ = _load("valid_scenario.yaml")

        assert scenario.artifact == {"figma_file_key": "abc123"}
        assert scenario.llm_judge.model == "openrouter/openai/gpt-4o-mini"

    def test_dotted_placeholders_are_left_alone(self) -> None:
        scenario, _ = _load("valid_scenario.yaml")

        assert scenario.heuristic_checks.scripts[0].args == ["${artifact.figma_file_key}"]

    def test_relative_reference_path_resolved_against_file(self) -> None:
        scenario, _ = _load("valid_scenario.yaml")

        assert scenario.reference_path == (FIXTURES / "references" / "react-18").resolve()


class TestErrors:
    def test_missing_file(self) -> None:
        with pytest.raises(ScenarioLoadError, match="file not found"):
            _load("does_not_exist.yaml")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ScenarioLoadError, match="invalid YAML"):
            _load("invalid_yaml.yaml")

    def test_top_level_must_be_mapping(self) -> None:
        with pytest.raises(ScenarioLoadError, match="must be a mapping"):
            _load("not_a_mapping.yaml")

    def test_all_missing_env_vars_reported_together(self) -> None:
        with pytest.raises(MissingEnvVarsError) as exc_info:
            _load("missing_env_vars.yaml", environ={})

        assert sorted(exc_info.value.missing_vars) == ["FIGMA_FILE_ID", "FIGMA_FILE_KEY"]

    def test_schema_violation(self) -> None:
        with pytest.raises(ScenarioValidationError, match="timeout_minutes"):
            _load("schema_error.yaml")


def test_judge_without_categories_is_reported() -> None:
    _, observer = _load("judge_without_categories.yaml")

    assert observer.judge_without_categories == ["judge-no-categories"]


class TestLoadSettings:
    def test_reads_environment_mapping(self) -> None:
        settings = load_settings({"OPENROUTER_API_KEY": "or-key", "LLM_JUDGE_TEMPERATURE": "0.3"})

        assert settings.openrouter_api_key == "or-key"
        assert settings.judge_temperature == 0.3

    def test_malformed_value(self) -> None:
        with pytest.raises(SettingsValidationError, match="judge_temperature"):
            load_settings({"LLM_JUDGE_TEMPERATURE": "hot"})
