"""package.json reading and writing utilities.

Manifests are plain JSON. Writes keep npm's formatting (two-space indent,
trailing newline) so a bump produces a minimal, diff-friendly change.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import LoadError
from .models import Dependency, MonoRepoKind, Package

MANIFEST_NAME = "package.json"
DEPENDENCY_TABLES = ("dependencies", "devDependencies")


def load_manifest(path: Path) -> dict[str, Any]:
    """Load and parse a package.json file.

    Raises:
        LoadError: If the file is missing, unreadable, or not a JSON object.
    """
    try:
        data = json.loads(path.read_text())
    except OSError as exc:
        raise LoadError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LoadError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise LoadError(f"{path} does not contain a JSON object")
    return data


def save_manifest(path: Path, data: dict[str, Any]) -> None:
    """Write a manifest back to disk the way npm formats it."""
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def get_dependencies(data: dict[str, Any]) -> list[Dependency]:
    """Collect every dependency edge declared in a manifest.

    Runtime dependencies come first, then devDependencies, each in the order
    they appear in the file.
    """
    deps: list[Dependency] = []
    for table in DEPENDENCY_TABLES:
        entries = data.get(table) or {}
        if not isinstance(entries, dict):
            raise ValueError(f'"{table}" must be an object')
        for name, range_str in entries.items():
            deps.append(
                Dependency(name=name, range=range_str, dev=table == "devDependencies")
            )
    return deps


def _package_fields(directory: Path) -> dict[str, Any]:
    path = directory / MANIFEST_NAME
    data = load_manifest(path)
    try:
        return {
            "name": data["name"],
            "version": data["version"],
            "dependencies": get_dependencies(data),
            "scripts": data.get("scripts") or {},
        }
    except KeyError as exc:
        raise LoadError(f"{path} is missing required field {exc}") from exc
    except (ValueError, ValidationError) as exc:
        raise LoadError(f"Malformed manifest {path}: {exc}") from exc


def load_package(directory: Path, mono_repo: MonoRepoKind | None = None) -> Package:
    """Build a Package record from the package.json in directory.

    Raises:
        LoadError: If the manifest is missing, unparseable, or lacks a name
            or version.
    """
    fields = _package_fields(directory)
    try:
        return Package(directory=directory, mono_repo=mono_repo, **fields)
    except ValidationError as exc:
        path = directory / MANIFEST_NAME
        raise LoadError(f"Malformed manifest {path}: {exc}") from exc


def refresh_package(package: Package) -> None:
    """Re-read a package's manifest, updating the record in place.

    Only version, dependencies and scripts change; the object itself (and
    every reference to it) stays the same.
    """
    fields = _package_fields(package.directory)
    if fields["name"] != package.name:
        raise LoadError(
            f"{package.manifest_path} was renamed from {package.name} to "
            f"{fields['name']} while the tool was running"
        )
    if not isinstance(fields["version"], str):
        raise LoadError(f"{package.manifest_path} has a non-string version")
    package.version = fields["version"]
    package.dependencies = fields["dependencies"]
    package.scripts = fields["scripts"]


def caret_range(version: str) -> str:
    """Range a template uses to follow a package: "1.2.0" → "^1.2.0"."""
    return f"^{version}"


def pin_dependencies(data: dict[str, Any], versions: dict[str, str]) -> list[str]:
    """Point manifest dependencies at the given package versions, in place.

    Every dependency (runtime or dev) whose name is in ``versions`` is
    rewritten to a caret range on that version. Other entries are untouched.

    Args:
        data: Parsed package.json (modified in place).
        versions: Map of package name → version to depend on.

    Returns:
        Names of the dependencies that were rewritten.
    """
    pinned: list[str] = []
    for table in DEPENDENCY_TABLES:
        entries = data.get(table)
        if not isinstance(entries, dict):
            continue
        for name in entries:
            if name in versions:
                entries[name] = caret_range(versions[name])
                pinned.append(name)
    return pinned
