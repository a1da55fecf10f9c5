"""Version reports printed before and after a bump."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel

NAME_WIDTH = 40
VERSION_WIDTH = 10


class ChangeKind(str, Enum):
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    ADDED = "added"


class VersionChange(BaseModel):
    """How one release unit's version moved between two snapshots.

    Attributes:
        unit: Package name or mono-repo kind.
        kind: Whether the version changed.
        old: Version in the earlier snapshot (None when newly added).
        new: Version in the later snapshot.
    """

    unit: str
    kind: ChangeKind
    old: str | None
    new: str


def diff_versions(
    old: Mapping[str, str], new: Mapping[str, str]
) -> list[VersionChange]:
    """Compare two snapshots, one entry per unit of the newer snapshot.

    Units are listed in the newer snapshot's order. Units that only exist in
    the older snapshot are not reported.
    """
    changes: list[VersionChange] = []
    for unit, version in new.items():
        previous = old.get(unit)
        if previous is None:
            kind = ChangeKind.ADDED
        elif previous == version:
            kind = ChangeKind.UNCHANGED
        else:
            kind = ChangeKind.CHANGED
        changes.append(VersionChange(unit=unit, kind=kind, old=previous, new=version))
    return changes


def format_release_versions(
    current: Mapping[str, str], dep_versions: Mapping[str, str]
) -> list[str]:
    """Lines of the "Release Versions" table.

    For each unit of the current snapshot, shows the version its dependents
    will reference. "(old)" marks units referenced at a version other than
    their current one; "(new)" marks units referenced at their current
    version, which the bump moves forward. Units nothing references show
    "-".
    """
    lines: list[str] = []
    for unit, version in current.items():
        name = unit.rjust(NAME_WIDTH)
        referenced = dep_versions.get(unit)
        if referenced is None:
            lines.append(f"{name}: {'-'.rjust(VERSION_WIDTH)} (unreferenced)")
            continue
        label = "(new)" if referenced == version else "(old)"
        lines.append(f"{name}: {referenced.rjust(VERSION_WIDTH)} {label}")
    return lines


def format_repo_versions(changes: list[VersionChange]) -> list[str]:
    """Lines of the "Repo Versions" table printed after the bump."""
    lines: list[str] = []
    for change in changes:
        name = change.unit.rjust(NAME_WIDTH)
        if change.kind is ChangeKind.CHANGED:
            old = (change.old or "").rjust(VERSION_WIDTH)
            lines.append(f"{name}: {old} -> {change.new.ljust(VERSION_WIDTH)}")
        else:
            lines.append(
                f"{name}: {change.new.rjust(VERSION_WIDTH)} ({change.kind.value})"
            )
    return lines
