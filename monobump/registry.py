"""Package registry.

Scans the repository once, keeps one Package record per name, and can
re-read every manifest in place after external commands have bumped
versions on disk.
"""

from __future__ import annotations

import glob
from collections.abc import Iterable, Iterator
from pathlib import Path

from .config import DEFAULT_EXCLUDE, RepoConfig
from .errors import LoadError
from .manifest import MANIFEST_NAME, load_package, refresh_package
from .models import MonoRepoKind, Package
from .monorepo import MonoRepoGrouping
from .shell import verbose


def find_package_dirs(root: Path, patterns: Iterable[str]) -> list[Path]:
    """Expand workspace globs into directories holding a package.json.

    Each pattern's matches are sorted for deterministic output; a directory
    matched by several patterns is only returned once.
    """
    dirs: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if p in seen or not (p / MANIFEST_NAME).is_file():
                continue
            seen.add(p)
            dirs.append(p)
    return dirs


class PackageRegistry:
    """All packages of a repository, indexed by name.

    The registry owns its Package records. Other components hold references
    to them; reload() refreshes the records without replacing them.
    """

    def __init__(self, packages: Iterable[Package], grouping: MonoRepoGrouping) -> None:
        self.packages: list[Package] = []
        self._by_name: dict[str, Package] = {}
        for pkg in packages:
            if pkg.name in self._by_name:
                other = self._by_name[pkg.name]
                raise LoadError(
                    f"Duplicate package name {pkg.name} in {other.directory} "
                    f"and {pkg.directory}"
                )
            self._by_name[pkg.name] = pkg
            self.packages.append(pkg)
        self.grouping = grouping
        self.grouping.partition(self.packages)
        self.grouping.check_consistency()

    @classmethod
    def load(cls, root: Path, config: RepoConfig) -> PackageRegistry:
        """Discover and load every package under root.

        Raises:
            LoadError: If a manifest is missing or malformed, two packages
                share a name, or a mono-repo's members disagree on version.
        """
        grouping = MonoRepoGrouping.from_config(root, config)
        dirs = find_package_dirs(root, config.workspace.packages)
        if not dirs:
            raise LoadError(
                f"No packages found under {root} matching {config.workspace.packages}"
            )
        packages = [load_package(d, grouping.classify(d)) for d in dirs]
        registry = cls(packages, grouping)
        for pkg in registry.packages:
            group = f" [{pkg.mono_repo.value}]" if pkg.mono_repo else ""
            verbose(f"{pkg.name} {pkg.version}{group}")
        return registry

    @classmethod
    def from_packages(
        cls,
        packages: Iterable[Package],
        repo_paths: dict[MonoRepoKind, Path] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> PackageRegistry:
        """Build a registry from records that are already in memory.

        Packages keep their own mono_repo field. Groups without a given
        repo path get a placeholder path named after the group. exclude
        defaults to the configuration default.
        """
        packages = list(packages)
        paths = dict(repo_paths or {})
        for pkg in packages:
            if pkg.mono_repo is not None and pkg.mono_repo not in paths:
                paths[pkg.mono_repo] = Path(pkg.mono_repo.value.lower())
        if exclude is None:
            exclude = DEFAULT_EXCLUDE
        return cls(packages, MonoRepoGrouping(paths, exclude))

    def package_by_name(self, name: str) -> Package | None:
        return self._by_name.get(name)

    def members_of(self, kind: MonoRepoKind) -> list[Package]:
        return self.grouping.members_of(kind)

    def repo_path_of(self, kind: MonoRepoKind) -> Path:
        return self.grouping.repo_path_of(kind)

    def reload(self) -> None:
        """Re-read every manifest, refreshing the existing records in place.

        Raises:
            LoadError: If a manifest became unreadable or a mono-repo's
                members no longer agree on version.
        """
        for pkg in self.packages:
            refresh_package(pkg)
        self.grouping.check_consistency()

    def __iter__(self) -> Iterator[Package]:
        return iter(self.packages)

    def __len__(self) -> int:
        return len(self.packages)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name
