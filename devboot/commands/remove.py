"""Remove command implementation."""

import asyncio
import sys
from pathlib import Path

import click

from devboot import setup_logging
from devboot.capabilities import default_registry
from devboot.installer import InstallOptions, ModuleInstaller
from devboot.commands.utils import echo_result, load_settings_or_exit


@click.command()
@click.argument("name")
@click.option(
    "--packages", is_flag=True, help="Also uninstall the configuration's packages"
)
@click.option(
    "--path",
    "project_path",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project directory (default: current directory)",
)
@click.pass_context
def remove(ctx, name: str, packages: bool, project_path: Path):
    """Remove a configuration's files from the project."""
    debug = ctx.obj.get("debug", False)
    settings = load_settings_or_exit()
    options = InstallOptions(non_interactive=True, package_manager=settings.package_manager)

    if not asyncio.run(run_remove(name, project_path, options, packages, debug)):
        sys.exit(1)


async def run_remove(
    name: str, project_path: Path, options: InstallOptions, packages: bool, debug: bool
) -> bool:
    setup_logging(debug)
    installer = ModuleInstaller(default_registry())
    result = await installer.uninstall_capability(
        name, project_path, options, remove_packages=packages
    )

    if result.success:
        click.echo(f"✅ {result.message}")
        for path in result.removed_files:
            click.echo(f"  🗑️  {path}")
        return True

    echo_result(result)
    return False
