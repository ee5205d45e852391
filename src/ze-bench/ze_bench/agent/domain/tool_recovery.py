"""Fallback extraction of tool calls from plain-text model output.

Some models describe the tool they want in prose-wrapped JSON instead of using
native tool calling. This is a compatibility shim, not a protocol: a missed
call is acceptable, a spurious one is not, so only objects with exactly the
expected shape (``name`` plus ``parameters`` or ``arguments``) naming a
declared tool are accepted.
"""

import json
import re
import secrets
import time
from collections.abc import Set
from typing import Any

from ze_bench.agent.domain.tool import RecoveredToolCall

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def recover_tool_calls(text: str, declared: Set[str]) -> list[RecoveredToolCall]:
    """Return the tool calls *text* describes, or [] if it describes none."""
    if not declared:
        return []
    payload = _parse_payload(text.strip())
    if payload is None:
        return []

    candidates = payload if isinstance(payload, list) else [payload]
    calls: list[RecoveredToolCall] = []
    for candidate in candidates:
        call = _to_call(candidate, declared)
        if call is None:
            # One malformed entry means the text was not a tool-call list after all.
            return []
        calls.append(call)
    return calls


def new_call_id() -> str:
    return f"call_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


def _parse_payload(text: str) -> Any:
    if not text:
        return None
    for candidate in (text, *_fenced_blocks(text)):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    return None


def _fenced_blocks(text: str) -> list[str]:
    return [block.strip() for block in _FENCED_JSON.findall(text)]


def _to_call(candidate: Any, declared: Set[str]) -> RecoveredToolCall | None:
    if not isinstance(candidate, dict):
        return None
    name = candidate.get("name")
    if not isinstance(name, str) or name not in declared:
        return None
    if "parameters" in candidate:
        arguments = candidate["parameters"]
    elif "arguments" in candidate:
        arguments = candidate["arguments"]
    else:
        return None
    if not isinstance(arguments, (dict, str)):
        return None
    return RecoveredToolCall(id=new_call_id(), name=name, raw_arguments=arguments)
