"""monobump - decide and apply release version bumps across a monorepo."""

from monobump.engine import TraversalResult, check_needs_bump, decide_bumps
from monobump.errors import (
    BumpError,
    CommandError,
    InconsistentVersionError,
    LoadError,
    MalformedRangeError,
)
from monobump.models import Dependency, MonoRepoGroup, MonoRepoKind, Package
from monobump.registry import PackageRegistry
from monobump.report import ChangeKind, VersionChange, diff_versions
from monobump.version_map import VersionMap, collect_snapshot

__all__ = [
    "BumpError",
    "ChangeKind",
    "CommandError",
    "Dependency",
    "InconsistentVersionError",
    "LoadError",
    "MalformedRangeError",
    "MonoRepoGroup",
    "MonoRepoKind",
    "Package",
    "PackageRegistry",
    "TraversalResult",
    "VersionChange",
    "VersionMap",
    "check_needs_bump",
    "collect_snapshot",
    "decide_bumps",
    "diff_versions",
]
