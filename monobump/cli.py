"""CLI entry point for monobump."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from monobump.config import find_root
from monobump.errors import BumpError, CommandError
from monobump.pipeline import current_branch, run_bump
from monobump.shell import Timer, fatal, set_verbose
from monobump.versions import bump_type_for_branch, is_release_branch

EXIT_USAGE = -1
EXIT_GIT_FAILED = 1
EXIT_BAD_BRANCH = 2


@click.command(context_settings={"help_option_names": ["-?", "--help"]})
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository root. (default: nearest directory with monobump.toml)",
)
@click.option("-v", "--verbose", is_flag=True, help="Print detailed progress.")
@click.option("--timer", is_flag=True, help="Print time spent in each phase.")
@click.pass_context
def cli(ctx: click.Context, root: Path | None, verbose: bool, timer: bool) -> None:
    """Bump the client release and everything that has to move with it.

    The bump type follows the branch: minor on master, patch on release/*.
    """
    set_verbose(verbose)
    clock = Timer(timer)

    try:
        resolved_root = find_root(explicit=root)
    except BumpError as exc:
        fatal(str(exc))

    # Determine the line of bump
    try:
        branch = current_branch(resolved_root)
    except CommandError as exc:
        click.echo(f"ERROR: {exc}", err=True)
        ctx.exit(EXIT_GIT_FAILED)

    if not is_release_branch(branch):
        click.echo(f"ERROR: Unrecognized branch '{branch}'", err=True)
        ctx.exit(EXIT_BAD_BRANCH)

    bump = bump_type_for_branch(branch)
    click.echo(f"Bumping {bump} version")

    try:
        run_bump(resolved_root, bump, timer=clock)
    except BumpError as exc:
        fatal(str(exc))


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit status.

    Usage errors print the usage text and return -1.
    """
    try:
        rv = cli.main(args=argv, prog_name="monobump", standalone_mode=False)
    except click.UsageError as exc:
        click.echo(f"ERROR: {exc.format_message()}", err=True)
        click.echo(cli.get_usage(click.Context(cli, info_name="monobump")), err=True)
        return EXIT_USAGE
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    sys.exit(main())
