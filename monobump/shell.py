"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running external
commands and git queries, plus the console output helpers used by every
phase of a bump.
"""

from __future__ import annotations

import subprocess
import sys
import time
from pathlib import Path

from .errors import CommandError

_verbose = False


def set_verbose(enabled: bool) -> None:
    """Turn verbose() output on or off for the rest of the run."""
    global _verbose
    _verbose = enabled


def git(*args: str, cwd: Path | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "rev-parse", "HEAD").
        cwd: Directory to run in; defaults to the current directory.
        check: If True (default), raise CommandError on non-zero exit.

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True)
    if check and result.returncode != 0:
        raise CommandError(("git", *args), cwd, result.returncode)
    return result.stdout.strip()


def run(*args: str, cwd: Path | None = None, check: bool = True) -> int:
    """Run an external command, streaming its output to the terminal.

    Unlike git(), this doesn't capture output so users can follow what
    npm and lerna are doing.

    Args:
        *args: Command and arguments (e.g., "npm", "version", "minor").
        cwd: Directory to run in.
        check: If True (default), raise CommandError on non-zero exit.

    Returns:
        The command's exit status.
    """
    verbose(f"$ {' '.join(args)}" + (f"  ({cwd})" if cwd else ""))
    result = subprocess.run(args, cwd=cwd)
    if check and result.returncode != 0:
        raise CommandError(args, cwd, result.returncode)
    return result.returncode


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def verbose(msg: str) -> None:
    """Print a detail line, only when running with --verbose."""
    if _verbose:
        print(f"  {msg}")


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the bump.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


class Timer:
    """Prints the time spent since the previous checkpoint.

    Disabled timers are silent, so callers can sprinkle ``time()`` calls
    without checking the --timer flag themselves.
    """

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self._last = time.perf_counter()

    def time(self, msg: str) -> None:
        now = time.perf_counter()
        if self.enabled:
            print(f"{msg}: {now - self._last:.3f}s")
        self._last = now
