"""Compaction of oversized tool output before it re-enters conversation history."""

import json
from typing import Any

DEFAULT_MAX_TOOL_OUTPUT_CHARS = 500_000

_SAMPLE_ITEMS = 10
_SAMPLE_KEYS = 20
_JSON_TRUNCATION_MARGIN = 500
_TEXT_TRUNCATION_MARGIN = 200


def compact_tool_output(content: str, limit: int = DEFAULT_MAX_TOOL_OUTPUT_CHARS) -> str:
    """Return *content* unchanged if it fits in *limit* characters.

    Oversized JSON is replaced by a structural summary (counts, sample
    elements, key lists, original size). Non-JSON output, and JSON whose
    summary is still too large, is truncated with an explicit marker.
    """
    if len(content) <= limit:
        return content

    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return _truncate(content, keep=limit - _TEXT_TRUNCATION_MARGIN)

    summary = json.dumps(_summarize(data, original_size=len(content)), indent=2, default=str)
    if len(summary) <= limit:
        return summary
    return _truncate(content, keep=limit - _JSON_TRUNCATION_MARGIN)


def _summarize(data: Any, original_size: int) -> dict[str, Any]:
    if isinstance(data, dict):
        shape: Any = {key: _shape(value) for key, value in data.items()}
    else:
        shape = _shape(data)
    return {
        "_summary": True,
        "_original_size": original_size,
        "_data": shape,
        "_note": (
            f"Response was too large ({original_size} characters) and has been summarized. "
            "Request specific fields or narrower ranges for full detail."
        ),
    }


def _shape(value: Any) -> Any:
    if isinstance(value, list):
        return {"_count": len(value), "_samples": value[:_SAMPLE_ITEMS]}
    if isinstance(value, dict):
        return {"_keys": list(value)[:_SAMPLE_KEYS], "_count": len(value)}
    return value


def _truncate(content: str, keep: int) -> str:
    keep = max(0, keep)
    return (
        f"{content[:keep]}\n\n... [Response truncated: original size was {len(content)} "
        f"characters. Showing first {keep} characters.]"
    )
