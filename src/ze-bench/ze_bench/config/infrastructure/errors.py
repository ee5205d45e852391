"""Error types raised by config infrastructure."""

from pathlib import Path

from ze_bench.core.errors import ZeBenchError


class MissingEnvVarsError(ZeBenchError):
    """Raised when one or more referenced environment variables are not set."""

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = missing_vars
        var_list = ", ".join(sorted(missing_vars))
        super().__init__(
            f"Failed to load scenario: missing environment variables: {var_list}"
        )


class ScenarioLoadError(ZeBenchError):
    """Raised when the scenario file cannot be opened or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to load scenario: {path}: {reason}")


class ScenarioValidationError(ZeBenchError):
    """Raised when the scenario file does not match the scenario schema."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate scenario: {reason}")


class SettingsValidationError(ZeBenchError):
    """Raised when environment-provided settings are malformed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to read settings: {reason}")
