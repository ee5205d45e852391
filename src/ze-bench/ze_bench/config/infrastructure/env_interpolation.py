"""Recursive ${ENV_VAR} / ${ENV_VAR:-default} interpolation for raw scenario data.

Dotted placeholders such as ``${scenario.id}`` or ``${artifact.figma_file_key}``
never match and are left for the heuristic script runner to fill in.
"""

import re
from collections.abc import Mapping

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def collect_missing_vars(data: RawValue, environ: Mapping[str, str]) -> list[str]:
    """
    Walk the data tree and return the names of all referenced env vars that
    are neither set nor given a default.  Every missing var is collected before
    returning.
    """
    missing: list[str] = []
    _collect(data, environ, missing)
    return missing


def _collect(data: RawValue, environ: Mapping[str, str], missing: list[str]) -> None:
    if isinstance(data, str):
        for match in _ENV_VAR_PATTERN.finditer(data):
            var_name, default = match.group(1), match.group(2)
            if var_name not in environ and default is None and var_name not in missing:
                missing.append(var_name)
    elif isinstance(data, list):
        for item in data:
            _collect(item, environ, missing)
    elif isinstance(data, dict):
        for value in data.values():
            _collect(value, environ, missing)


def interpolate(data: RawValue, environ: Mapping[str, str]) -> RawValue:
    """
    Recursively substitute every ${ENV_VAR} occurrence with its value.

    Assumes all referenced variables without a default are present — call
    `collect_missing_vars` first and raise `MissingEnvVarsError` if any are absent.
    """
    if isinstance(data, str):
        return _ENV_VAR_PATTERN.sub(
            lambda m: environ.get(m.group(1), m.group(2) or ""), data
        )
    if isinstance(data, list):
        return [interpolate(item, environ) for item in data]
    if isinstance(data, dict):
        return {key: interpolate(value, environ) for key, value in data.items()}
    return data
