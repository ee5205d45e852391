"""Best-effort recovery of truncated or malformed JSON emitted by language models.

Models asked for JSON routinely run out of output tokens mid-document, wrap the
payload in markdown fences, or add a sentence of prose around it. ``repair_json``
undoes the common cases:

1. the trimmed text parses as-is;
2. the payload is cut out of a fenced block or surrounding prose;
3. the text is sliced at the last point where nesting returns to zero;
4. any open string is closed and the missing ``}`` / ``]`` are appended,
   backing off to earlier safe cut points until the candidate parses.

There is no grammar behind step 4. The output for deeply nested truncation is
best effort, but any input that starts with an object or array opener yields
*some* valid value (at worst ``{}`` or ``[]``).
"""

import json
import re
from typing import Any, NamedTuple

from ze_bench.core.errors import UnparseableJsonError

type JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*(.*?)(?:```|$)", re.DOTALL)
_CLOSERS = {"{": "}", "[": "]"}
_MAX_BACKOFF_ATTEMPTS = 256
_FAILED = object()


class _Scan(NamedTuple):
    balanced_end: int | None
    cut_points: list[tuple[int, tuple[str, ...]]]
    open_stack: list[str]
    in_string: bool
    dangling_escape: bool


def repair_json(text: str) -> JsonValue:
    """Parse *text* as JSON, repairing truncation where possible.

    Raises:
        UnparseableJsonError: if no JSON value can be recovered.
    """
    stripped = text.strip()
    if not stripped:
        raise UnparseableJsonError("output is empty")

    parsed = _try_parse(stripped)
    if parsed is not _FAILED:
        return parsed

    body = _extract_body(stripped)
    if body is None:
        raise UnparseableJsonError("no JSON object or array found")

    parsed = _try_parse(body)
    if parsed is not _FAILED:
        return parsed

    scan = _scan(body)
    if scan.balanced_end is not None and scan.balanced_end < len(body):
        parsed = _try_parse(body[: scan.balanced_end])
        if parsed is not _FAILED:
            return parsed

    parsed = _close_truncated(body=body, scan=scan)
    if parsed is not _FAILED:
        return parsed

    raise UnparseableJsonError(f"could not repair output ending in {body[-40:]!r}")


def looks_truncated(text: str) -> bool:
    """Return True if *text* does not end the way a complete JSON object does."""
    return not text.rstrip().rstrip("`").rstrip().endswith("}")


def _try_parse(candidate: str) -> Any:
    try:
        return json.loads(candidate, strict=False)
    except json.JSONDecodeError:
        return _FAILED


def _extract_body(text: str) -> str | None:
    """Return the text from the first object/array opener onwards, unfenced."""
    fenced = _FENCE_PATTERN.search(text)
    if fenced is not None and fenced.group(1).strip():
        text = fenced.group(1).strip()

    starts = [index for index in (text.find("{"), text.find("[")) if index >= 0]
    if not starts:
        return None
    return text[min(starts) :]


def _scan(body: str) -> _Scan:
    """Walk *body* once, tracking nesting and every position where a cut is safe."""
    stack: list[str] = []
    cut_points: list[tuple[int, tuple[str, ...]]] = []
    balanced_end: int | None = None
    in_string = False
    escaped = False

    for index, char in enumerate(body):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
                cut_points.append((index + 1, tuple(stack)))
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(char)
            cut_points.append((index + 1, tuple(stack)))
        elif char in "}]":
            if stack:
                stack.pop()
            cut_points.append((index + 1, tuple(stack)))
            if not stack:
                balanced_end = index + 1
        elif char == ",":
            cut_points.append((index, tuple(stack)))

    return _Scan(
        balanced_end=balanced_end,
        cut_points=cut_points,
        open_stack=stack,
        in_string=in_string,
        dangling_escape=in_string and escaped,
    )


def _close_truncated(body: str, scan: _Scan) -> Any:
    tail = body[:-1] if scan.dangling_escape else body
    if scan.in_string:
        tail += '"'
    parsed = _try_parse(_with_closers(prefix=tail, stack=scan.open_stack))
    if parsed is not _FAILED:
        return parsed

    for position, stack in reversed(scan.cut_points[-_MAX_BACKOFF_ATTEMPTS:]):
        parsed = _try_parse(_with_closers(prefix=body[:position], stack=list(stack)))
        if parsed is not _FAILED:
            return parsed
    return _FAILED


def _with_closers(prefix: str, stack: list[str]) -> str:
    trimmed = prefix.rstrip().rstrip(",").rstrip()
    return trimmed + "".join(_CLOSERS[opener] for opener in reversed(stack))
