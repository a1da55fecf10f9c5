"""Version parsing and bump-type utilities.

Handles conversion between npm version strings and semver objects, and the
branch convention that decides whether a release bumps minor or patch.
"""

from __future__ import annotations

from typing import Literal

import semver

BumpType = Literal["minor", "patch"]

RELEASE_BRANCH_PREFIX = "release/"
MAIN_BRANCH = "master"


def parse_version(version_str: str) -> semver.Version:
    """Parse an npm version string into a semver.Version object.

    A leading "v" or "=" and surrounding whitespace are tolerated, as npm
    does for versions in package.json:
    - "1.2.3" → 1.2.3
    - "v1.2.3-beta.1" → 1.2.3-beta.1

    Raises:
        ValueError: If the string is not a complete semantic version.
    """
    text = version_str.strip().lstrip("=v").strip()
    return semver.Version.parse(text)


def is_valid_version(version_str: str) -> bool:
    """Return True if version_str parses as a semantic version."""
    try:
        parse_version(version_str)
    except (ValueError, TypeError):
        return False
    return True


def is_release_branch(branch: str) -> bool:
    """Releases are only cut from master or a release/* branch."""
    return branch == MAIN_BRANCH or branch.startswith(RELEASE_BRANCH_PREFIX)


def bump_type_for_branch(branch: str) -> BumpType:
    """Pick the bump applied to every package on this branch.

    master moves to the next minor; release branches only take patches.

    Examples:
        "master" → "minor"
        "release/0.12" → "patch"
    """
    return "minor" if branch == MAIN_BRANCH else "patch"


def bump_version(version_str: str, bump: BumpType) -> str:
    """Return the version npm would produce for ``npm version <bump>``.

    Examples:
        bump_version("1.2.3", "minor") → "1.3.0"
        bump_version("1.2.3", "patch") → "1.2.4"
        bump_version("1.3.0-rc.1", "minor") → "1.3.0"
    """
    version = parse_version(version_str)
    # npm releases a prerelease in place when it already sits on the target
    if version.prerelease and (bump == "patch" or version.patch == 0):
        return str(version.finalize_version())
    if bump == "minor":
        return str(version.bump_minor())
    return str(version.bump_patch())
