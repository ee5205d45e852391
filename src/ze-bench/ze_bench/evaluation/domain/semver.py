"""Loose npm-style version parsing and range matching.

Only what dependency constraints in scenarios use: ``^`` and ``~`` ranges,
``>= <= > <`` comparators, bare versions (exact match), space-separated
comparator sets, ``||`` alternatives and ``x``/``*`` wildcards. Prefixes such
as ``v`` or ``workspace:`` are ignored when parsing.
"""

import re
from typing import NamedTuple

_LEADING_NON_DIGITS = re.compile(r"^[^0-9]*")
_VERSION = re.compile(r"^(\d+)(?:\.(\d+|[xX*]))?(?:\.(\d+|[xX*]))?")
_COMPARATOR = re.compile(r"^(>=|<=|>|<|=)?\s*(\S+)$")


class Version(NamedTuple):
    major: int
    minor: int
    patch: int


def parse_version(raw: str | None) -> Version | None:
    """Coerce the first ``major[.minor[.patch]]`` in *raw*; wildcards read as 0."""
    if not raw:
        return None
    cleaned = _LEADING_NON_DIGITS.sub("", raw.strip())
    match = _VERSION.match(cleaned)
    if match is None:
        return None
    return Version(*(_component(group) for group in match.groups()))


def major_of(raw: str | None) -> int | None:
    version = parse_version(raw)
    return version.major if version is not None else None


def satisfies(version_range: str | None, current: str | None) -> bool:
    """True if *current* falls inside *version_range*; an empty range accepts anything."""
    if not version_range or not version_range.strip() or version_range.strip() in {"*", "x", "latest"}:
        return True
    version = parse_version(current)
    if version is None:
        return False
    return any(
        all(_satisfies_comparator(part, version) for part in alternative.split())
        for alternative in version_range.split("||")
        if alternative.strip()
    )


def _satisfies_comparator(comparator: str, current: Version) -> bool:
    if comparator in {"*", "x", "X"}:
        return True
    if comparator[0] in "^~":
        base = parse_version(comparator[1:])
        if base is None:
            return False
        if comparator[0] == "^":
            upper = Version(base.major + 1, 0, 0)
        else:
            upper = Version(base.major, base.minor + 1, 0)
        return base <= current < upper

    match = _COMPARATOR.match(comparator)
    if match is None:
        return False
    operator, raw_version = match.group(1) or "=", match.group(2)
    base = parse_version(raw_version)
    if base is None:
        return False

    if operator == "=" and _has_wildcard(raw_version):
        return _wildcard_matches(raw_version, current)
    return {
        ">": current > base,
        ">=": current >= base,
        "<": current < base,
        "<=": current <= base,
        "=": current == base,
    }[operator]


def _has_wildcard(raw: str) -> bool:
    parts = raw.split(".")
    return len(parts) < 3 or any(part.lower() in {"x", "*"} for part in parts)


def _wildcard_matches(raw: str, current: Version) -> bool:
    for part, value in zip(raw.split("."), current):
        if part.lower() in {"x", "*"}:
            return True
        if not part.isdigit() or int(part) != value:
            return False
    return True


def _component(group: str | None) -> int:
    return int(group) if group is not None and group.isdigit() else 0
