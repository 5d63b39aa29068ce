"""Add command implementation."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from devboot import setup_logging
from devboot.capabilities import default_registry
from devboot.config import PACKAGE_MANAGER_NAMES, is_non_interactive
from devboot.errors import ProjectError, format_install_error, format_suggestion
from devboot.installer import ConflictDetector, InstallOptions, ModuleInstaller
from devboot.commands.utils import echo_result, load_settings_or_exit

_logging = logging.getLogger(__name__)


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configurations")
@click.option("--dry-run", is_flag=True, help="Show the plan without writing anything")
@click.option("--no-install", "skip_install", is_flag=True, help="Skip package installation")
@click.option(
    "--non-interactive", is_flag=True, help="Use default configurations without prompting"
)
@click.option(
    "--package-manager",
    type=click.Choice(PACKAGE_MANAGER_NAMES),
    default=None,
    help="Override package manager detection",
)
@click.option("--verbose", "-v", is_flag=True, help="List every file and package")
@click.option(
    "--path",
    "project_path",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project directory (default: current directory)",
)
@click.pass_context
def add(
    ctx,
    names: tuple[str, ...],
    force: bool,
    dry_run: bool,
    skip_install: bool,
    non_interactive: bool,
    package_manager: str | None,
    verbose: bool,
    project_path: Path,
):
    """Add one or more tooling configurations to the project."""
    debug = ctx.obj.get("debug", False)
    settings = load_settings_or_exit()

    options = InstallOptions(
        force=force,
        dry_run=dry_run,
        verbose=verbose or settings.verbose,
        skip_install=skip_install or settings.skip_install,
        non_interactive=is_non_interactive(non_interactive or settings.non_interactive),
        package_manager=package_manager or settings.package_manager,
    )

    if not asyncio.run(run_add(list(names), project_path, options, debug)):
        sys.exit(1)


async def run_add(
    names: list[str], project_path: Path, options: InstallOptions, debug: bool
) -> bool:
    """Install the named capabilities; returns False when any of them failed."""
    setup_logging(debug)
    registry = default_registry()

    try:
        report = await ConflictDetector(registry).find_conflicts(project_path, names)
    except ProjectError as e:
        click.echo(format_install_error(e.error), err=True)
        return False

    if report.has_conflicts and not options.force and not options.dry_run:
        for conflict in report.conflicts:
            click.echo(
                f"⚠️  {conflict.capability} conflicts with installed {conflict.conflicts_with}"
            )
        if options.non_interactive:
            click.echo(
                format_suggestion(
                    "Conflicting configurations found", "use --force to install anyway"
                ),
                err=True,
            )
            return False
        if not click.confirm("Continue anyway?", default=False):
            click.echo("Cancelled.")
            return True

    _logging.debug(f"Installing {', '.join(names)} into {project_path}")
    results = await ModuleInstaller(registry).install_many(names, project_path, options)
    for result in results:
        echo_result(result, options.verbose)

    return all(result.success or result.cancelled for result in results)
