"""Tests for loose npm-style version parsing and range matching."""

import pytest

from ze_bench.evaluation.domain.semver import Version, major_of, parse_version, satisfies


class TestParseVersion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("1.2.3", Version(1, 2, 3)),
            ("^18.2.0", Version(18, 2, 0)),
            ("~4.17", Version(4, 17, 0)),
            ("v2", Version(2, 0, 0)),
            ("5.x", Version(5, 0, 0)),
            ("1.2.3-beta.1", Version(1, 2, 3)),
        ],
    )
    def test_coerces(self, raw: str, expected: Version) -> None:
        assert parse_version(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "latest", "workspace:*"])
    def test_unparseable(self, raw: str | None) -> None:
        assert parse_version(raw) is None

    def test_major_of(self) -> None:
        assert major_of("^7.1.0") == 7
        assert major_of("next") is None


class TestSatisfies:
    @pytest.mark.parametrize(
        ("version_range", "current", "expected"),
        [
            ("^1.2.0", "1.5.0", True),
            ("^1.2.0", "1.1.9", False),
            ("^1.2.0", "2.0.0", False),
            ("~1.2.0", "1.2.9", True),
            ("~1.2.0", "1.3.0", False),
            (">=2.0.0 <3.0.0", "2.5.1", True),
            (">=2.0.0 <3.0.0", "3.0.0", False),
            (">2", "2.0.1", True),
            ("<=1.0.0", "1.0.0", True),
            ("1.2.3", "1.2.3", True),
            ("1.2.3", "^1.2.3", True),
            ("1.2.3", "1.2.4", False),
            ("1.x", "1.9.0", True),
            ("1.x", "2.0.0", False),
            ("18", "18.2.0", True),
            ("^1.0.0 || ^2.0.0", "2.3.0", True),
            ("^1.0.0 || ^2.0.0", "3.0.0", False),
        ],
    )
    def test_ranges(self, version_range: str, current: str, expected: bool) -> None:
        assert satisfies(version_range, current) is expected

    @pytest.mark.parametrize("version_range", [None, "", "  ", "*", "latest"])
    def test_open_ranges_accept_anything(self, version_range: str | None) -> None:
        assert satisfies(version_range, "0.0.1") is True

    def test_unparseable_current_fails(self) -> None:
        assert satisfies("^1.0.0", None) is False
        assert satisfies("^1.0.0", "workspace:*") is False
