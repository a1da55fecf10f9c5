"""Release bump pipeline: plan → report → bump → reload → report.

This module orchestrates one version bump of the repository:
1. Load the package registry and check mono-repo consistency
2. Decide which standalone packages and mono-repos must be bumped
3. Print the versions dependents will reference for this release
4. Bump the Client mono-repo, then Server if needed, then every standalone
   package in the bump set
5. Reload manifests, then bump the generator and its app template
6. Print how every release unit's version moved

Everything up to step 3 only reads the repository, so configuration,
manifest, range and consistency errors abort before anything is changed.
Bumps that already ran are not rolled back if a later step fails.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .config import RepoConfig, load_config
from .engine import TraversalResult, decide_bumps
from .errors import LoadError
from .manifest import (
    load_manifest,
    load_package,
    pin_dependencies,
    refresh_package,
    save_manifest,
)
from .models import MonoRepoKind, Package
from .registry import PackageRegistry
from .report import diff_versions, format_release_versions, format_repo_versions
from .shell import Timer, git, run, step, verbose
from .version_map import VersionMap, collect_snapshot
from .versions import BumpType, bump_version

GENVER_SCRIPT = "build:genver"


@dataclass
class GeneratorPackages:
    """The project generator and its app template."""

    generator: Package
    template: Package

    def __iter__(self) -> Iterator[Package]:
        return iter((self.generator, self.template))


@dataclass
class BumpPlan:
    """Outcome of the read-only decision phase.

    Attributes:
        root: Repository root.
        config: Loaded monobump.toml.
        registry: Every package of the repository.
        result: Bump set, server flag and dependency versions.
        generator: Generator packages, when configured.
        before: Snapshot of every release unit's current version.
    """

    root: Path
    config: RepoConfig
    registry: PackageRegistry
    result: TraversalResult
    generator: GeneratorPackages | None = None
    before: VersionMap = field(default_factory=VersionMap)

    @property
    def extra_packages(self) -> list[Package]:
        return list(self.generator) if self.generator else []


def current_branch(root: Path) -> str:
    """Name of the checked-out branch.

    Raises:
        CommandError: If git cannot tell (not a repository, detached, ...).
    """
    output = git("rev-parse", "--abbrev-ref", "HEAD", cwd=root)
    return output.splitlines()[0] if output else ""


def load_generator(root: Path, config: RepoConfig) -> GeneratorPackages | None:
    """Load the generator packages named in the configuration, if any."""
    if config.generator is None:
        return None
    return GeneratorPackages(
        generator=load_package(root / config.generator.path),
        template=load_package(root / config.generator.template),
    )


def plan_bump(
    root: Path,
    config: RepoConfig | None = None,
    start: MonoRepoKind = MonoRepoKind.CLIENT,
    timer: Timer | None = None,
) -> BumpPlan:
    """Load the repository and decide what the bump touches.

    Reads only; nothing on disk changes.

    Raises:
        LoadError: If configuration or manifests are inconsistent.
        MalformedRangeError: If a declared range cannot be evaluated.
        InconsistentVersionError: If a release unit has two versions.
    """
    timer = timer or Timer()
    config = config or load_config(root)

    step("Scanning packages")
    registry = PackageRegistry.load(root, config)
    print(f"  {len(registry)} packages")
    timer.time("Package scan completed")

    step(f"Checking which packages need to be bumped with {start.value}")
    result = decide_bumps(registry, start, config.workspace.exclude)
    for name in result.bump:
        print(f"  {name}")
    if result.server_needs_bump:
        print(f"  {MonoRepoKind.SERVER.value} mono-repo")
    if not result.bump and not result.server_needs_bump:
        print("  No other packages")

    generator = load_generator(root, config)
    extras = list(generator) if generator else []
    for pkg in extras:
        result.dep_versions.record(pkg.name, pkg.version)

    before = collect_snapshot(registry, extras, config.workspace.exclude)
    timer.time("Bump check completed")
    return BumpPlan(
        root=root,
        config=config,
        registry=registry,
        result=result,
        generator=generator,
        before=before,
    )


def print_release_versions(plan: BumpPlan) -> None:
    print("Release Versions:")
    for line in format_release_versions(plan.before, plan.result.dep_versions):
        print(line)
    print()


def bump_mono_repo(
    registry: PackageRegistry, kind: MonoRepoKind, bump: BumpType
) -> None:
    """Bump every member of a mono-repo with lerna and regenerate versions."""
    repo_path = registry.repo_path_of(kind)
    print(f"Bumping {kind.value.lower()} version")
    run(
        "npx",
        "lerna",
        "version",
        bump,
        "--no-push",
        "--no-git-tag-version",
        "-y",
        cwd=repo_path,
    )
    run("npm", "run", GENVER_SCRIPT, cwd=repo_path)


def bump_package(pkg: Package, bump: BumpType) -> None:
    """Bump one standalone package, regenerating its version file if it has one."""
    print(f"Bumping {pkg.name} ({pkg.version} → {bump_version(pkg.version, bump)})")
    run("npm", "version", bump, cwd=pkg.directory)
    if pkg.has_script(GENVER_SCRIPT):
        run("npm", "run", GENVER_SCRIPT, cwd=pkg.directory)


def bump_generator(
    registry: PackageRegistry, generator: GeneratorPackages, bump: BumpType
) -> None:
    """Point the app template at the new package versions, then bump both.

    Every template dependency on a registry package is rewritten to a caret
    range on that package's (already bumped) version.
    """
    print("Bumping generator version")
    template = generator.template
    versions: dict[str, str] = {}
    for dep in template.dependencies:
        pkg = registry.package_by_name(dep.name)
        if pkg is not None:
            versions[dep.name] = pkg.version

    data = load_manifest(template.manifest_path)
    for name in pin_dependencies(data, versions):
        verbose(f"{template.name}: {name} → ^{versions[name]}")
    save_manifest(template.manifest_path, data)

    run("npm", "version", bump, cwd=template.directory)
    run("npm", "version", bump, cwd=generator.generator.directory)


def apply_bump(plan: BumpPlan, bump: BumpType) -> VersionMap:
    """Run the external bump commands the plan calls for.

    Returns:
        Snapshot of every release unit's version after the bump.

    Raises:
        CommandError: If any command fails; later steps are not run.
    """
    registry = plan.registry

    step(f"Bumping {bump} version")
    bump_mono_repo(registry, MonoRepoKind.CLIENT, bump)
    if plan.result.server_needs_bump:
        bump_mono_repo(registry, MonoRepoKind.SERVER, bump)
    for pkg in plan.result.bump.values():
        bump_package(pkg, bump)

    # package.json files changed on disk
    registry.reload()

    if plan.generator is not None:
        bump_generator(registry, plan.generator, bump)
        for pkg in plan.generator:
            refresh_package(pkg)

    exclude = plan.config.workspace.exclude
    return collect_snapshot(registry, plan.extra_packages, exclude)


def print_repo_versions(before: VersionMap, after: VersionMap) -> None:
    print("\nRepo Versions:")
    for line in format_repo_versions(diff_versions(before, after)):
        print(line)


def run_bump(root: Path, bump: BumpType, *, timer: Timer | None = None) -> VersionMap:
    """Execute the full bump.

    Args:
        root: Repository root.
        bump: "minor" or "patch".
        timer: Optional phase timer (--timer).

    Returns:
        Snapshot of versions after the bump.
    """
    timer = timer or Timer()
    plan = plan_bump(root, timer=timer)
    if not plan.registry.members_of(MonoRepoKind.CLIENT):
        raise LoadError(f"No {MonoRepoKind.CLIENT.value} mono-repo packages found")
    print_release_versions(plan)

    after = apply_bump(plan, bump)
    timer.time("Bump completed")

    print_repo_versions(plan.before, after)
    return after
