"""Scenario descriptor models — what the agent is asked to do and how the result is judged."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIMEOUT_MINUTES = 60.0


class ValidationCommands(BaseModel, frozen=True):
    install: str | None = None
    test: str | None = None
    lint: str | None = None
    typecheck: str | None = None

    def configured(self) -> list[str]:
        return [kind for kind in ("install", "test", "lint", "typecheck") if getattr(self, kind)]


class ValidationConfig(BaseModel, frozen=True):
    commands: ValidationCommands = ValidationCommands()


class CommandCheck(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    command: str = Field(min_length=1)
    weight: float = Field(default=1.0, ge=0.0)
    description: str | None = None


class FileCheck(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    path: str = Field(min_length=1)
    weight: float = Field(default=1.0, ge=0.0)
    description: str | None = None


class PatternCheck(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    file: str = Field(min_length=1)
    pattern: str = Field(min_length=1)
    weight: float = Field(default=1.0, ge=0.0)
    description: str | None = None


class StructuredCheck(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    file: str = Field(min_length=1)
    json_path: str | None = None
    section_header: str | None = None
    weight: float = Field(default=1.0, ge=0.0)
    description: str | None = None


class ScriptCheck(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    script: str = Field(min_length=1)
    args: list[str] = []
    weight: float = Field(default=1.0, ge=0.0)
    description: str | None = None


class HeuristicChecksConfig(BaseModel, frozen=True):
    enabled: bool = False
    commands: list[CommandCheck] = []
    files: list[FileCheck] = []
    patterns: list[PatternCheck] = []
    structured: list[StructuredCheck] = []
    scripts: list[ScriptCheck] = []


class LlmJudgeConfig(BaseModel, frozen=True):
    enabled: bool = False
    model: str | None = None
    categories: list[str] = []


class DependencyTarget(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    to: str = Field(min_length=1)


class Targets(BaseModel, frozen=True):
    model_config = ConfigDict(extra="allow")

    required: list[DependencyTarget] = []
    files: list[str] = []


class NamespaceMigration(BaseModel, frozen=True):
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="from", min_length=1)
    target: str = Field(alias="to", min_length=1)


class Companion(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    rule: str = "major must match"


class CompanionRule(BaseModel, frozen=True):
    main: str = Field(min_length=1)
    companions: list[Companion] = []


class Constraints(BaseModel, frozen=True):
    """Scenario constraints. Unknown keys are kept so the judge prompt can show them."""

    model_config = ConfigDict(extra="allow")

    managers_allowed: list[str] = []
    namespace_migrations: list[NamespaceMigration] = []
    companion_versions: list[CompanionRule] = []


class SuccessWeights(BaseModel, frozen=True):
    validation: float = Field(default=0.4, ge=0.0)
    evaluators: float = Field(default=0.3, ge=0.0)
    llm_judge: float = Field(default=0.3, ge=0.0)


class RubricOverrides(BaseModel, frozen=True):
    weights: dict[str, float] = {}


class ScenarioConfig(BaseModel, frozen=True):
    id: str = Field(min_length=1)
    suite: str = ""
    title: str = ""
    description: str = ""
    constraints: Constraints = Constraints()
    targets: Targets = Targets()
    validation: ValidationConfig = ValidationConfig()
    heuristic_checks: HeuristicChecksConfig = HeuristicChecksConfig()
    llm_judge: LlmJudgeConfig = LlmJudgeConfig()
    rubric_overrides: RubricOverrides = RubricOverrides()
    success_weights: SuccessWeights = SuccessWeights()
    artifact: dict[str, str] = {}
    reference_path: Path | None = None
    timeout_minutes: float = Field(default=DEFAULT_TIMEOUT_MINUTES, gt=0)
