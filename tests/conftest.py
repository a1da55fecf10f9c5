"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from monobump.models import Dependency, MonoRepoKind, Package

CONFIG = """\
[workspace]
packages = ["packages/*", "server/routerlicious/packages/*", "common/*"]

[groups]
client = "packages"
server = "server/routerlicious"

[generator]
path = "tools/generator-fluid"
template = "tools/generator-fluid/app/templates"
"""


def _make_package(
    name: str,
    version: str = "1.0.0",
    deps: dict[str, str] | None = None,
    dev_deps: dict[str, str] | None = None,
    group: MonoRepoKind | None = None,
) -> Package:
    """Build an in-memory Package record."""
    dependencies = [Dependency(name=n, range=r) for n, r in (deps or {}).items()]
    dependencies += [
        Dependency(name=n, range=r, dev=True) for n, r in (dev_deps or {}).items()
    ]
    return Package(
        name=name,
        version=version,
        directory=Path("packages") / name,
        dependencies=dependencies,
        mono_repo=group,
    )


@pytest.fixture
def make_package() -> Callable[..., Package]:
    """Return a helper that builds in-memory Package records."""
    return _make_package


@pytest.fixture
def write_package(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes a package.json under tmp_path."""

    def _write(
        rel: str,
        name: str,
        version: str,
        dependencies: dict[str, str] | None = None,
        dev_dependencies: dict[str, str] | None = None,
        scripts: dict[str, str] | None = None,
    ) -> Path:
        directory = tmp_path / rel
        directory.mkdir(parents=True, exist_ok=True)
        data: dict[str, object] = {"name": name, "version": version}
        if scripts:
            data["scripts"] = scripts
        if dependencies:
            data["dependencies"] = dependencies
        if dev_dependencies:
            data["devDependencies"] = dev_dependencies
        (directory / "package.json").write_text(json.dumps(data, indent=2) + "\n")
        return directory

    return _write


@pytest.fixture
def sample_repo(tmp_path: Path, write_package: Callable[..., Path]) -> Path:
    """A small repository with Client and Server mono-repos and a generator.

    client-a → tool (^1.0.0, satisfied) → common-util (~0.2.0, satisfied)
    client-a → server-lib (^0.5.0, satisfied, Server)
    server-lib → helper (^2.0.0, satisfied)
    client-b → client-a (same mono-repo)
    legacy is not referenced by anything.
    """
    (tmp_path / "monobump.toml").write_text(CONFIG)
    write_package(
        "packages/client-a",
        "@fluid/client-a",
        "0.5.0",
        {"tool": "^1.0.0", "server-lib": "^0.5.0", "react": "^16.0.0"},
    )
    write_package(
        "packages/client-b",
        "@fluid/client-b",
        "0.5.0",
        {"@fluid/client-a": "^0.5.0"},
        scripts={"build:genver": "gen-version"},
    )
    write_package(
        "server/routerlicious/packages/server-lib",
        "server-lib",
        "0.5.0",
        {"helper": "^2.0.0"},
    )
    write_package(
        "common/tool",
        "tool",
        "1.3.0",
        {"common-util": "~0.2.0"},
        scripts={"build:genver": "gen-version"},
    )
    write_package("common/common-util", "common-util", "0.2.1")
    write_package("common/helper", "helper", "2.1.0")
    write_package("common/legacy", "legacy", "3.0.0")
    write_package("tools/generator-fluid", "generator-fluid", "0.5.0")
    write_package(
        "tools/generator-fluid/app/templates",
        "app-template",
        "0.5.0",
        {"@fluid/client-a": "^0.4.0", "react": "^16.0.0"},
        {"tool": "^1.0.0"},
    )
    return tmp_path
