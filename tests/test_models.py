"""Tests for monobump.models."""

from __future__ import annotations

from pathlib import Path

import pytest

from monobump.models import (
    Dependency,
    MonoRepoGroup,
    MonoRepoKind,
    Package,
    name_matches,
)


class TestMonoRepoKind:
    """Tests for MonoRepoKind."""

    def test_value_is_unit_key(self) -> None:
        """A kind's value is the key its group's version is tracked under."""
        assert MonoRepoKind.CLIENT.value == "Client"
        assert MonoRepoKind.SERVER.value == "Server"

    def test_from_key_is_case_insensitive(self) -> None:
        """Config keys may use any case."""
        assert MonoRepoKind.from_key("client") is MonoRepoKind.CLIENT
        assert MonoRepoKind.from_key("SERVER") is MonoRepoKind.SERVER

    def test_from_key_unknown(self) -> None:
        """Unknown kinds are rejected by name."""
        with pytest.raises(ValueError, match="tools"):
            MonoRepoKind.from_key("tools")


class TestPackage:
    """Tests for Package and Dependency."""

    def test_create_with_required_fields(self) -> None:
        """Optional fields default to empty and standalone."""
        pkg = Package(name="foo", version="1.0.0", directory=Path("packages/foo"))
        assert pkg.dependencies == []
        assert pkg.scripts == {}
        assert pkg.mono_repo is None
        assert pkg.manifest_path == Path("packages/foo/package.json")

    def test_has_script(self) -> None:
        """has_script looks up the manifest's scripts table."""
        pkg = Package(
            name="foo",
            version="1.0.0",
            directory=Path("foo"),
            scripts={"build:genver": "gen-version"},
        )
        assert pkg.has_script("build:genver")
        assert not pkg.has_script("build")

    def test_dependency_defaults_to_runtime(self) -> None:
        """Dependencies are runtime unless marked dev."""
        assert Dependency(name="bar", range="^1.0.0").dev is False


class TestMonoRepoGroup:
    """Tests for MonoRepoGroup version checks."""

    def _group(self, *versions: str) -> MonoRepoGroup:
        packages = [
            Package(name=f"pkg-{i}", version=v, directory=Path(f"pkg-{i}"))
            for i, v in enumerate(versions)
        ]
        return MonoRepoGroup(
            kind=MonoRepoKind.CLIENT, repo_path=Path("packages"), packages=packages
        )

    def test_empty_group_has_no_version(self) -> None:
        """An empty group has no shared version."""
        assert self._group().shared_version() is None

    def test_shared_version(self) -> None:
        """Members that agree share their version."""
        group = self._group("0.5.0", "0.5.0")
        assert group.shared_version() == "0.5.0"
        assert group.divergent_versions() == {}

    def test_divergent_versions(self) -> None:
        """Members that differ from the first are reported."""
        group = self._group("0.5.0", "0.5.0", "0.4.0")
        assert group.divergent_versions() == {"pkg-2": "0.4.0"}

    def test_excluded_members_are_ignored(self) -> None:
        """Excluded members neither set nor break the shared version."""
        group = self._group("0.1.0", "0.5.0", "0.5.0")
        assert group.shared_version(["pkg-0"]) == "0.5.0"
        assert group.divergent_versions(["pkg-0"]) == {}

    def test_members_are_not_copied(self) -> None:
        """Groups hold the registry's records, not copies."""
        pkg = Package(name="a", version="1.0.0", directory=Path("a"))
        group = MonoRepoGroup(
            kind=MonoRepoKind.SERVER, repo_path=Path("server"), packages=[pkg]
        )
        assert group.packages[0] is pkg


class TestNameMatches:
    """Tests for name_matches()."""

    def test_glob_pattern(self) -> None:
        """Patterns use fnmatch syntax against the full scoped name."""
        patterns = ["@fluid-example/version-test*"]
        assert name_matches("@fluid-example/version-test-2", patterns)
        assert not name_matches("@fluid-example/other", patterns)

    def test_case_sensitive(self) -> None:
        """Name matching respects case."""
        assert not name_matches("@Fluid-Example/version-test", ["@fluid-example/*"])
