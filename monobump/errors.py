"""Exception types raised by monobump.

Every error is fatal: the CLI reports it and exits. Errors raised while
deciding bumps (load, traversal, snapshot) surface before any external
command has touched the repository.
"""

from __future__ import annotations

from pathlib import Path


class BumpError(Exception):
    """Base class for all monobump errors."""


class LoadError(BumpError):
    """Configuration or package manifest could not be loaded consistently."""


class InconsistentVersionError(BumpError):
    """Two different versions were recorded for the same unit key."""

    def __init__(self, unit: str, name: str, existing: str, version: str) -> None:
        self.unit = unit
        self.name = name
        self.existing = existing
        self.version = version
        if unit == name:
            where = name
        else:
            where = f"{unit} (from {name})"
        super().__init__(f"Inconsistent version for {where}: {existing} != {version}")


class MalformedRangeError(BumpError):
    """A declared dependency range cannot be evaluated."""

    def __init__(self, range_str: str, reason: str = "") -> None:
        self.range = range_str
        msg = f"Malformed version range {range_str!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CommandError(BumpError):
    """An external command exited with a non-zero status."""

    def __init__(
        self, command: tuple[str, ...], cwd: Path | None, returncode: int
    ) -> None:
        self.command = command
        self.cwd = cwd
        self.returncode = returncode
        location = f" in {cwd}" if cwd else ""
        super().__init__(
            f"Command failed{location} (exit {returncode}): {' '.join(command)}"
        )
