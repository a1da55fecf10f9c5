"""npm version range evaluation.

package.json files declare dependency ranges in node-semver syntax
("^1.2.3", "~1.2", "1.x", "1.2.3 - 2.3.4", "||" alternatives, ...). Range
parsing and matching are delegated to node-semver, the Python port of the
library npm itself uses, so prerelease handling matches npm exactly.
"""

from __future__ import annotations

from functools import lru_cache

import nodesemver
import semver

from .errors import MalformedRangeError
from .versions import is_valid_version, parse_version


def parse_range(range_str: str) -> nodesemver.Range:
    """Parse an npm range.

    Raises:
        MalformedRangeError: If any part of the range is not valid syntax.
    """
    if not isinstance(range_str, str):
        raise MalformedRangeError(repr(range_str), "range must be a string")
    return _parse_range(range_str)


@lru_cache(maxsize=1024)
def _parse_range(range_str: str) -> nodesemver.Range:
    try:
        return nodesemver.make_range(range_str, loose=False)
    except (ValueError, TypeError) as exc:
        raise MalformedRangeError(range_str, str(exc)) from exc


def satisfies(version_str: str, range_str: str) -> bool:
    """Return True if the version is accepted by the npm range.

    Versions that do not parse never satisfy anything, as in npm.

    Examples:
        satisfies("1.2.0", "^1.0.0") → True
        satisfies("2.0.0", "^1.0.0") → False
        satisfies("1.5.0", ">=1.0.0 <2.0.0 || ^3") → True

    Raises:
        MalformedRangeError: If the range cannot be parsed.
    """
    parse_range(range_str)
    if not is_valid_version(version_str):
        return False
    version = str(parse_version(version_str))
    return nodesemver.satisfies(version, range_str, loose=False)


def _comparator_floor(comparator: nodesemver.Comparator) -> semver.Version | None:
    """Lowest version a single lower-bound comparator admits, if it has one."""
    bound = getattr(comparator.semver, "version", None)
    if bound is None or comparator.operator in ("<", "<="):
        return None
    floor = semver.Version.parse(bound)
    if comparator.operator == ">":
        if floor.prerelease:
            return floor.replace(prerelease=f"{floor.prerelease}.0")
        return floor.bump_patch()
    return floor


def min_version(range_str: str) -> str:
    """Return the lowest version the npm range accepts.

    Follows node-semver's minVersion: try 0.0.0 and 0.0.0-0, otherwise take
    the highest lower bound of each comparator set and keep the lowest of
    those that the range actually accepts.

    Examples:
        min_version("^1.0.0") → "1.0.0"
        min_version(">1.2.3") → "1.2.4"
        min_version("~0.5") → "0.5.0"

    Raises:
        MalformedRangeError: If the range cannot be parsed or accepts no
            version at all.
    """
    rng = parse_range(range_str)
    for candidate in ("0.0.0", "0.0.0-0"):
        if nodesemver.satisfies(candidate, range_str, loose=False):
            return candidate

    lowest: semver.Version | None = None
    for comparators in rng.set:
        set_min: semver.Version | None = None
        for comparator in comparators:
            floor = _comparator_floor(comparator)
            if floor is not None and (set_min is None or floor > set_min):
                set_min = floor
        if set_min is not None and (lowest is None or set_min < lowest):
            lowest = set_min

    if lowest is None or not nodesemver.satisfies(
        str(lowest), range_str, loose=False
    ):
        raise MalformedRangeError(range_str, "no version satisfies it")
    return str(lowest)
