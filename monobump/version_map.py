"""Version maps: the version each release unit carries.

A release unit is either a standalone package (keyed by its name) or a
whole mono-repo (keyed by the group's kind, e.g. "Client"). Once a unit is
recorded its version is fixed; seeing a second, different version for it
means the repository is not in a releasable state.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .config import DEFAULT_EXCLUDE
from .errors import InconsistentVersionError
from .models import MonoRepoKind, Package, name_matches


class VersionMap(Mapping[str, str]):
    """Write-once map of unit key → version.

    Args:
        exclude: fnmatch patterns; mono-repo members whose name matches are
            never recorded.
    """

    def __init__(self, exclude: Iterable[str] | None = None) -> None:
        self.exclude = list(DEFAULT_EXCLUDE if exclude is None else exclude)
        self._versions: dict[str, str] = {}

    def is_excluded(self, name: str) -> bool:
        return name_matches(name, self.exclude)

    def record(
        self, name: str, version: str, group: MonoRepoKind | None = None
    ) -> None:
        """Record the version of a package's release unit.

        Standalone packages are keyed by name. Mono-repo members are keyed by
        their group; the first member recorded sets the group's version and
        every later member must match it. Members matching an exclusion
        pattern are skipped. Recording the same version again is a no-op.

        Raises:
            InconsistentVersionError: If the unit already has a different
                version.
        """
        if group is None:
            key = name
        elif self.is_excluded(name):
            return
        else:
            key = group.value

        existing = self._versions.get(key)
        if existing is None:
            self._versions[key] = version
        elif existing != version:
            raise InconsistentVersionError(key, name, existing, version)

    def record_package(self, pkg: Package) -> None:
        self.record(pkg.name, pkg.version, pkg.mono_repo)

    def __getitem__(self, key: str) -> str:
        return self._versions[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __repr__(self) -> str:
        return f"VersionMap({self._versions!r})"


def collect_snapshot(
    packages: Iterable[Package],
    extra_packages: Iterable[Package] = (),
    exclude: Iterable[str] | None = None,
) -> VersionMap:
    """Record the current version of every release unit.

    Registry packages are recorded with their group; extra packages (the
    generator and its template, which live outside the graph) are recorded
    as standalone units after them.

    Args:
        packages: Registry packages, in registry order.
        extra_packages: Packages outside the graph to include.
        exclude: Exclusion patterns for mono-repo members.

    Raises:
        InconsistentVersionError: If two members of one group disagree.
    """
    versions = VersionMap(exclude)
    for pkg in packages:
        versions.record_package(pkg)
    for pkg in extra_packages:
        versions.record(pkg.name, pkg.version)
    return versions
