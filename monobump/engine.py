"""Bump decision engine.

Decides which packages must be bumped when a mono-repo cuts a release.

Starting from every member of the releasing mono-repo, each dependency
edge is checked: if the dependency's current version already satisfies the
declared range, the dependent was built against the version about to be
released, so the dependency has to move with it. Standalone dependencies
join the bump set and their own edges are followed in turn; a Server
dependency flags the whole Server mono-repo instead. Edges whose range is
not satisfied record the lowest version the range accepts, which is what
a fresh install of the dependent resolves to.

Example:
    client-app (Client) depends on tool "^1.0.0", tool is at 1.3.0
    → tool is bumped, and tool's own satisfied dependencies after it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from . import ranges
from .models import MonoRepoKind, Package
from .registry import PackageRegistry
from .shell import verbose
from .version_map import VersionMap


@dataclass
class TraversalResult:
    """Everything a traversal accumulates.

    Attributes:
        bump: Standalone packages that need a bump, by name, in the order
            they were found.
        server_needs_bump: True when a satisfied edge reached the Server
            mono-repo.
        dep_versions: Version each dependency will be referenced at.
    """

    bump: dict[str, Package] = field(default_factory=dict)
    server_needs_bump: bool = False
    dep_versions: VersionMap = field(default_factory=VersionMap)

    def add(self, pkg: Package) -> bool:
        """Add a package to the bump set; return False if it was already there."""
        if pkg.name in self.bump:
            return False
        self.bump[pkg.name] = pkg
        return True

    @property
    def bump_names(self) -> set[str]:
        return set(self.bump)


def _scan_edges(
    registry: PackageRegistry,
    pkg: Package,
    result: TraversalResult,
    start: MonoRepoKind,
) -> list[Package]:
    """Check every dependency edge of one package.

    Returns the standalone packages newly added to the bump set, whose own
    edges still need scanning.
    """
    added: list[Package] = []
    server = MonoRepoKind.SERVER
    for dep in pkg.dependencies:
        dep_pkg = registry.package_by_name(dep.name)
        if dep_pkg is None:
            # external dependency, not released from this repository
            continue

        if ranges.satisfies(dep_pkg.version, dep.range):
            dep_version = dep_pkg.version
            if dep_pkg.mono_repo is None:
                if result.add(dep_pkg):
                    verbose(f"{dep_pkg.name}: Add from {pkg.name} {dep.range}")
                    added.append(dep_pkg)
            elif dep_pkg.mono_repo is server and start is not server:
                if not result.server_needs_bump:
                    verbose(f"{server.value}: Add from {pkg.name} {dep.range}")
                result.server_needs_bump = True
        else:
            dep_version = ranges.min_version(dep.range)

        result.dep_versions.record(dep_pkg.name, dep_version, dep_pkg.mono_repo)
    return added


def check_needs_bump(
    registry: PackageRegistry,
    pkg: Package,
    result: TraversalResult,
    start: MonoRepoKind = MonoRepoKind.CLIENT,
) -> None:
    """Scan a package's edges and follow them through standalone packages.

    Uses an explicit stack. A package is only pushed when it first enters
    the bump set, so each package's edges are scanned at most once per
    result and dependency cycles terminate.

    Raises:
        MalformedRangeError: If a declared range cannot be evaluated.
        InconsistentVersionError: If two edges imply different versions for
            one unit.
    """
    stack = [pkg]
    while stack:
        current = stack.pop()
        # reversed so siblings are visited in declaration order
        stack.extend(reversed(_scan_edges(registry, current, result, start)))


def check_mono_repo_needs_bump(
    registry: PackageRegistry,
    kind: MonoRepoKind,
    result: TraversalResult,
    start: MonoRepoKind = MonoRepoKind.CLIENT,
) -> None:
    """Run check_needs_bump for every member of a mono-repo."""
    for pkg in registry.members_of(kind):
        check_needs_bump(registry, pkg, result, start)


def decide_bumps(
    registry: PackageRegistry,
    start: MonoRepoKind = MonoRepoKind.CLIENT,
    exclude: Iterable[str] | None = None,
) -> TraversalResult:
    """Compute everything that must be bumped along with a mono-repo.

    The releasing mono-repo is always bumped as a whole, so its members
    never appear in the bump set. If any edge reached the Server mono-repo,
    a second wave scans the Server members too, so that standalone packages
    the server depends on are found as well.

    Args:
        registry: The loaded package registry.
        start: The mono-repo cutting the release.
        exclude: Exclusion patterns for the dependency-versions map.

    Returns:
        The bump set, the server flag and the dependency-versions map.

    Raises:
        MalformedRangeError: If a declared range cannot be evaluated. No
            part of the result is usable in that case.
    """
    result = TraversalResult(dep_versions=VersionMap(exclude))
    check_mono_repo_needs_bump(registry, start, result, start)
    if result.server_needs_bump:
        check_mono_repo_needs_bump(registry, MonoRepoKind.SERVER, result, start)
    return result
