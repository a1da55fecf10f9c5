"""Mono-repository grouping.

Some packages are released together: every member of the Client or Server
mono-repository carries the same version and is bumped by one lerna
command. A package belongs to a group when its directory lies under the
group's configured repo path.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from .config import RepoConfig
from .errors import LoadError
from .models import MonoRepoGroup, MonoRepoKind, Package


class MonoRepoGrouping:
    """Partitions packages into mono-repo groups.

    Args:
        repo_paths: Map of group kind → mono-repository root directory.
        exclude: fnmatch patterns of members left out of version checks.
    """

    def __init__(
        self,
        repo_paths: Mapping[MonoRepoKind, Path] | None = None,
        exclude: Iterable[str] = (),
    ) -> None:
        self.repo_paths: dict[MonoRepoKind, Path] = dict(repo_paths or {})
        self.exclude = list(exclude)
        self.groups: dict[MonoRepoKind, MonoRepoGroup] = {}

    @classmethod
    def from_config(cls, root: Path, config: RepoConfig) -> MonoRepoGrouping:
        return cls(
            {kind: root / path for kind, path in config.groups.items()},
            config.workspace.exclude,
        )

    def classify(self, directory: Path) -> MonoRepoKind | None:
        """Return the group a package directory belongs to, if any.

        Groups are tried in configuration order; the first whose repo path
        contains the directory wins.
        """
        for kind, repo_path in self.repo_paths.items():
            if directory == repo_path or repo_path in directory.parents:
                return kind
        return None

    def partition(self, packages: Iterable[Package]) -> None:
        """Rebuild the groups from each package's mono_repo field.

        Every configured kind gets a group, even when it has no members.
        """
        groups = {
            kind: MonoRepoGroup(kind=kind, repo_path=path)
            for kind, path in self.repo_paths.items()
        }
        for pkg in packages:
            if pkg.mono_repo is None:
                continue
            if pkg.mono_repo not in groups:
                raise LoadError(
                    f"{pkg.name} belongs to the {pkg.mono_repo.value} mono-repo, "
                    f"which has no configured path"
                )
            groups[pkg.mono_repo].packages.append(pkg)
        self.groups = groups

    def check_consistency(self) -> None:
        """Fail if members of any group disagree on their version.

        Members matching an exclude pattern may carry any version.

        Raises:
            LoadError: Naming the group, its expected version and every
                divergent member.
        """
        for kind, group in self.groups.items():
            divergent = group.divergent_versions(self.exclude)
            if divergent:
                details = ", ".join(f"{n}@{v}" for n, v in divergent.items())
                raise LoadError(
                    f"Inconsistent versions in {kind.value} mono-repo: expected "
                    f"{group.shared_version(self.exclude)}, found {details}"
                )

    def members_of(self, kind: MonoRepoKind) -> list[Package]:
        group = self.groups.get(kind)
        return list(group.packages) if group else []

    def repo_path_of(self, kind: MonoRepoKind) -> Path:
        """Directory the group's bump command runs in.

        Raises:
            LoadError: If the group has no configured path.
        """
        if kind not in self.repo_paths:
            raise LoadError(f"No path configured for the {kind.value} mono-repo")
        return self.repo_paths[kind]
