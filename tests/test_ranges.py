"""Tests for monobump.ranges."""

from __future__ import annotations

import nodesemver
import pytest

from monobump.errors import MalformedRangeError
from monobump.ranges import min_version, parse_range, satisfies

RANGES = [
    "^1.0.0",
    "^0.2.3",
    "^0.0.3",
    "~1.2.3",
    "~1.2",
    "1.x",
    "*",
    ">=1.0.0 <3.0.0",
    "1.2.3 - 2.3.4",
    "^1.0.0 || ^3.0.0",
    ">1.2.3",
    "<=1.2",
    "^1.2.3-beta.1",
]
VERSIONS = [
    "0.0.3",
    "0.2.5",
    "1.0.0",
    "1.2.3",
    "1.2.3-beta.2",
    "1.2.9",
    "1.5.0-beta.1",
    "2.0.0",
    "2.0.0-rc.1",
    "3.1.0",
]


class TestSatisfies:
    """Tests for satisfies()."""

    @pytest.mark.parametrize(
        "version,range_str",
        [
            ("1.2.0", "^1.0.0"),
            ("0.2.5", "^0.2.3"),
            ("1.2.9", "~1.2.3"),
            ("1.4.2", "1.x"),
            ("5.0.0", "*"),
            ("2.0.0", ">= 1.0.0"),
            ("1.2.3", "v1.2.3"),
            ("2.3.9", "1.2.3 - 2.3"),
            ("3.1.0", "^1.0.0 || ^3.0.0"),
            ("1.2.9", "<=1.2"),
        ],
    )
    def test_accepted(self, version: str, range_str: str) -> None:
        """Common npm range forms accept versions inside them."""
        assert satisfies(version, range_str)

    @pytest.mark.parametrize(
        "version,range_str",
        [
            ("2.0.0", "^1.0.0"),
            ("0.3.0", "^0.2.3"),
            ("0.0.4", "^0.0.3"),
            ("1.3.0", "~1.2.3"),
            ("3.0.0", ">=1.0.0 <3.0.0"),
            ("2.3.5", "1.2.3 - 2.3.4"),
            ("1.2.3", ">1.2.3"),
            ("1.0.0", ">*"),
        ],
    )
    def test_rejected(self, version: str, range_str: str) -> None:
        """Versions outside the range are rejected."""
        assert not satisfies(version, range_str)

    @pytest.mark.parametrize("range_str", RANGES)
    def test_agrees_with_npm(self, range_str: str) -> None:
        """Every answer matches node-semver's strict satisfies()."""
        for version in VERSIONS:
            expected = nodesemver.satisfies(version, range_str, loose=False)
            assert satisfies(version, range_str) == expected, version

    def test_prerelease_excluded_from_plain_range(self) -> None:
        """Prereleases only match ranges that opt in for the same release."""
        assert not satisfies("1.5.0-beta.1", "^1.0.0")
        assert not satisfies("2.0.0-rc.1", "^1.0.0")

    def test_prerelease_allowed_on_same_tuple(self) -> None:
        """A prerelease range admits later prereleases of the same release."""
        assert satisfies("1.2.3-beta.2", "^1.2.3-beta.1")
        assert not satisfies("1.2.4-beta.2", "^1.2.3-beta.1")

    def test_invalid_version_never_satisfies(self) -> None:
        """A version that does not parse satisfies nothing, even "*"."""
        assert not satisfies("not-a-version", "*")

    @pytest.mark.parametrize(
        "range_str", ["workspace:*", "file:../lib", "^1.0.0 || garbage"]
    )
    def test_malformed_range(self, range_str: str) -> None:
        """Ranges npm cannot evaluate raise instead of returning False."""
        with pytest.raises(MalformedRangeError):
            satisfies("1.0.0", range_str)


class TestParseRange:
    """Tests for parse_range()."""

    def test_alternatives_become_comparator_sets(self) -> None:
        """Each "||" alternative is one set of comparators."""
        rng = parse_range(">=1.2.3 <2 || ^3")
        assert [[c.operator for c in s] for s in rng.set] == [[">=", "<"], [">=", "<"]]

    def test_non_string_range(self) -> None:
        """Non-string ranges from a manifest are malformed."""
        with pytest.raises(MalformedRangeError, match="must be a string"):
            parse_range(1)  # type: ignore[arg-type]


class TestMinVersion:
    """Tests for min_version()."""

    @pytest.mark.parametrize(
        "range_str,expected",
        [
            ("^1.0.0", "1.0.0"),
            ("^1.2.3", "1.2.3"),
            ("~0.5", "0.5.0"),
            (">1.2.3", "1.2.4"),
            (">=2.0.0 <3.0.0", "2.0.0"),
            ("1.x", "1.0.0"),
            ("*", "0.0.0"),
            ("<2.0.0", "0.0.0"),
            ("^2.0.0 || ^1.0.0", "1.0.0"),
            ("1.2.3 - 2.0.0", "1.2.3"),
            (">1.2.3-beta.1", "1.2.3-beta.1.0"),
            ("^1.0.0-rc.2", "1.0.0-rc.2"),
        ],
    )
    def test_min_version(self, range_str: str, expected: str) -> None:
        """The lowest accepted version, as npm's minVersion reports it."""
        assert min_version(range_str) == expected

    def test_result_satisfies_range(self) -> None:
        """The minimum of every range is itself inside the range."""
        for range_str in RANGES:
            assert satisfies(min_version(range_str), range_str), range_str

    def test_unsatisfiable_range(self) -> None:
        """A range no version can meet has no minimum."""
        with pytest.raises(MalformedRangeError, match="no version"):
            min_version("<0.0.0-0")

    def test_malformed_range(self) -> None:
        """Unparseable ranges have no minimum."""
        with pytest.raises(MalformedRangeError, match="workspace"):
            min_version("workspace:^1.0.0")
