"""WorkspaceTools — the file and shell tools an agent gets inside its workspace."""

from pathlib import Path
from typing import Any

from ze_bench.agent.domain.tool import ToolDefinition, ToolHandler, ToolInput
from ze_bench.core.process import run_shell
from ze_bench.tools.infrastructure.errors import ToolPathError

DEFAULT_COMMAND_TIMEOUT_S = 60.0

_BLOCKED_PARTS = frozenset({"node_modules"})
_LISTING_SKIPPED = frozenset({"node_modules", ".git"})
_MAX_LISTED_ENTRIES = 2000


def _schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


class WorkspaceTools:
    """readFile / writeFile / runCommand / listFiles confined to one directory.

    Paths are resolved against the workspace; anything that escapes it or
    reaches into ``node_modules`` raises ToolPathError, which the driver hands
    back to the model as an ``Error: ...`` result.
    """

    def __init__(
        self, workspace_dir: Path, command_timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S
    ) -> None:
        self._root = workspace_dir.resolve()
        self._command_timeout_s = command_timeout_s

    def definitions(self) -> list[ToolDefinition]:
        path_property = {"type": "string", "description": "Path relative to the workspace root"}
        return [
            ToolDefinition(
                name="readFile",
                description="Read a UTF-8 text file from the workspace.",
                input_schema=_schema({"path": path_property}, ["path"]),
            ),
            ToolDefinition(
                name="writeFile",
                description="Create or overwrite a text file in the workspace.",
                input_schema=_schema(
                    {"path": path_property, "content": {"type": "string"}}, ["path", "content"]
                ),
            ),
            ToolDefinition(
                name="runCommand",
                description=(
                    "Run a shell command in the workspace root and return its exit code, "
                    f"stdout and stderr. Commands are killed after {self._command_timeout_s:g}s."
                ),
                input_schema=_schema({"command": {"type": "string"}}, ["command"]),
            ),
            ToolDefinition(
                name="listFiles",
                description="List files under a workspace directory, skipping node_modules and .git.",
                input_schema=_schema({"path": path_property}, []),
            ),
        ]

    def handlers(self) -> dict[str, ToolHandler]:
        return {
            "readFile": self.read_file,
            "writeFile": self.write_file,
            "runCommand": self.run_command,
            "listFiles": self.list_files,
        }

    async def read_file(self, arguments: ToolInput) -> str:
        path = self._resolve(_required(arguments, "path"))
        if not path.is_file():
            raise ToolPathError(path=str(arguments["path"]), reason="file not found")
        return path.read_text(encoding="utf-8", errors="replace")

    async def write_file(self, arguments: ToolInput) -> str:
        path = self._resolve(_required(arguments, "path"))
        content = arguments.get("content", "")
        if not isinstance(content, str):
            raise ValueError("'content' must be a string")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return f"Wrote {len(content.encode('utf-8'))} bytes to {path.relative_to(self._root)}"

    async def run_command(self, arguments: ToolInput) -> str:
        command = _required(arguments, "command")
        outcome = await run_shell(command, cwd=self._root, timeout_s=self._command_timeout_s)
        return (
            f"exit code: {outcome.exit_code}\n"
            f"stdout:\n{outcome.stdout}\n"
            f"stderr:\n{outcome.stderr}"
        )

    async def list_files(self, arguments: ToolInput) -> str:
        base = self._resolve(str(arguments.get("path") or "."))
        if not base.is_dir():
            raise ToolPathError(path=str(arguments.get("path")), reason="not a directory")
        entries: list[str] = []
        for candidate in sorted(base.rglob("*")):
            relative = candidate.relative_to(self._root)
            if _LISTING_SKIPPED.intersection(relative.parts):
                continue
            entries.append(f"{relative}/" if candidate.is_dir() else str(relative))
            if len(entries) >= _MAX_LISTED_ENTRIES:
                entries.append(f"... listing stopped after {_MAX_LISTED_ENTRIES} entries")
                break
        return "\n".join(entries) if entries else "(empty)"

    def _resolve(self, raw_path: str) -> Path:
        resolved = (self._root / raw_path).resolve()
        if not resolved.is_relative_to(self._root):
            raise ToolPathError(path=raw_path, reason="path is outside the workspace")
        if _BLOCKED_PARTS.intersection(resolved.relative_to(self._root).parts):
            raise ToolPathError(path=raw_path, reason="node_modules is not accessible")
        return resolved


def _required(arguments: ToolInput, key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"missing required string argument '{key}'")
    return value
