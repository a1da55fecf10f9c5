"""Repository configuration.

A repository opts in by placing a ``monobump.toml`` at its root:

    [workspace]
    packages = ["packages/*/*", "server/routerlicious/packages/*"]
    exclude = ["@fluid-example/version-test*"]

    [groups]
    client = "packages"
    server = "server/routerlicious"

    [generator]
    path = "tools/generator-fluid"
    template = "tools/generator-fluid/app/templates"

The file is read with tomlkit and validated with Pydantic.
"""

from __future__ import annotations

import os
from pathlib import Path

import tomlkit
from pydantic import BaseModel, Field, ValidationError, field_validator
from tomlkit.exceptions import TOMLKitError

from .errors import LoadError
from .models import MonoRepoKind

CONFIG_NAME = "monobump.toml"
ROOT_ENV_VAR = "MONOBUMP_ROOT"
DEFAULT_EXCLUDE = ["@fluid-example/version-test*"]


class WorkspaceConfig(BaseModel):
    """Where packages live and which names never take part in version checks.

    Attributes:
        packages: Glob patterns, relative to the root, of directories that
            may hold a package.json.
        exclude: fnmatch patterns of group member names left out of version
            maps (example packages used to exercise bumps).
    """

    packages: list[str] = Field(default_factory=lambda: ["packages/*"])
    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE))


class GeneratorConfig(BaseModel):
    """The project generator and the app template it ships.

    Both live outside the package graph but are bumped along with it.
    """

    path: str
    template: str


class RepoConfig(BaseModel):
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    groups: dict[MonoRepoKind, str] = Field(default_factory=dict)
    generator: GeneratorConfig | None = None

    @field_validator("groups", mode="before")
    @classmethod
    def _group_kinds(cls, value: object) -> object:
        if isinstance(value, dict):
            return {MonoRepoKind.from_key(str(k)): v for k, v in value.items()}
        return value


def load_config(root: Path) -> RepoConfig:
    """Load monobump.toml from the repository root.

    A missing file yields the defaults: packages under ``packages/*``, no
    groups, no generator.

    Raises:
        LoadError: If the file cannot be parsed or fails validation.
    """
    path = root / CONFIG_NAME
    if not path.exists():
        return RepoConfig()
    try:
        doc = tomlkit.parse(path.read_text())
    except (OSError, TOMLKitError) as exc:
        raise LoadError(f"Cannot read {path}: {exc}") from exc
    try:
        return RepoConfig.model_validate(doc.unwrap())
    except ValidationError as exc:
        raise LoadError(f"Invalid configuration in {path}:\n{exc}") from exc


def find_root(start: Path | None = None, explicit: Path | None = None) -> Path:
    """Resolve the repository root.

    Order of precedence: an explicit path (the --root option), the
    MONOBUMP_ROOT environment variable, then the nearest ancestor of start
    (default: the working directory) that contains monobump.toml.

    Raises:
        LoadError: If no root can be found.
    """
    if explicit is not None:
        root = explicit.resolve()
        if not root.is_dir():
            raise LoadError(f"Root directory {root} does not exist")
        return root

    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        root = Path(env_root).resolve()
        if not root.is_dir():
            raise LoadError(f"{ROOT_ENV_VAR} points at missing directory {root}")
        return root

    here = (start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if (candidate / CONFIG_NAME).exists():
            return candidate
    raise LoadError(
        f"No {CONFIG_NAME} found in {here} or any parent directory. "
        f"Run from inside the repository or pass --root."
    )
