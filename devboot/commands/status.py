"""Status command implementation."""

import asyncio
import sys
from pathlib import Path

import click

from devboot import setup_logging
from devboot.capabilities import default_registry
from devboot.errors import ProjectError, format_install_error
from devboot.installer import ConflictDetector, categorize_configs


@click.command()
@click.option(
    "--path",
    "project_path",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project directory (default: current directory)",
)
@click.pass_context
def status(ctx, project_path: Path):
    """Show tooling configurations detected in the project."""
    debug = ctx.obj.get("debug", False)
    if not asyncio.run(run_status(project_path, debug)):
        sys.exit(1)


async def run_status(project_path: Path, debug: bool) -> bool:
    setup_logging(debug)

    try:
        detected = await ConflictDetector(default_registry()).detect_installed(project_path)
    except ProjectError as e:
        click.echo(format_install_error(e.error), err=True)
        return False

    if not detected:
        click.echo("No tooling configurations detected.")
        return True

    files = {config.name: config.detected_files for config in detected}
    for category, names in categorize_configs(detected).items():
        if not names:
            continue
        click.echo(f"{category.capitalize()}:")
        for name in names:
            suffix = f" ({', '.join(files[name])})" if files[name] else ""
            click.echo(f"  • {name}{suffix}")
    return True
