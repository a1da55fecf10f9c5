"""Data models for monobump.

These Pydantic models represent the package graph the bump engine walks.
Package records are mutable: a reload refreshes their fields in place so
references held by groups and traversal results stay valid.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from fnmatch import fnmatchcase
from pathlib import Path

from pydantic import BaseModel, Field


class MonoRepoKind(str, Enum):
    """The mono-repositories whose members always share one version.

    The value doubles as the unit key the group's version is tracked under.
    """

    CLIENT = "Client"
    SERVER = "Server"

    @classmethod
    def from_key(cls, key: str) -> MonoRepoKind:
        """Look up a kind by case-insensitive name ("client", "Server", ...)."""
        for kind in cls:
            if kind.value.lower() == key.lower():
                return kind
        raise ValueError(f"Unknown mono-repo kind: {key!r}")


class Dependency(BaseModel):
    """A single dependency edge declared in package.json.

    Attributes:
        name: Name of the package depended upon.
        range: Declared npm version range (e.g. "^1.2.0").
        dev: True when declared under devDependencies.
    """

    name: str
    range: str
    dev: bool = False


class Package(BaseModel):
    """A package discovered in the repository.

    Attributes:
        name: Package name from package.json (e.g. "@fluidframework/core").
        version: Current version string from package.json.
        directory: Directory holding the package's package.json.
        dependencies: Runtime dependencies followed by devDependencies, each
            in manifest order.
        scripts: The manifest's "scripts" table.
        mono_repo: The group this package belongs to, or None when it is
            versioned on its own.
    """

    name: str
    version: str
    directory: Path
    dependencies: list[Dependency] = Field(default_factory=list)
    scripts: dict[str, str] = Field(default_factory=dict)
    mono_repo: MonoRepoKind | None = None

    @property
    def manifest_path(self) -> Path:
        return self.directory / "package.json"

    def has_script(self, name: str) -> bool:
        return name in self.scripts


class MonoRepoGroup(BaseModel):
    """A set of packages released together under one shared version.

    Attributes:
        kind: Which mono-repository this is.
        repo_path: Root directory of the mono-repository; bump commands run
            here.
        packages: Members, in registry discovery order.
    """

    kind: MonoRepoKind
    repo_path: Path
    packages: list[Package] = Field(default_factory=list)

    def shared_version(self, exclude: Iterable[str] = ()) -> str | None:
        """Version of the first member not matching an exclude pattern."""
        for pkg in self.packages:
            if not name_matches(pkg.name, exclude):
                return pkg.version
        return None

    def divergent_versions(self, exclude: Iterable[str] = ()) -> dict[str, str]:
        """Members whose version differs from the shared version.

        Members matching an exclude pattern are not checked.
        """
        expected = self.shared_version(exclude)
        return {
            p.name: p.version
            for p in self.packages
            if p.version != expected and not name_matches(p.name, exclude)
        }


def name_matches(name: str, patterns: Iterable[str]) -> bool:
    """True if name matches any of the fnmatch patterns (case-sensitive)."""
    return any(fnmatchcase(name, pattern) for pattern in patterns)
