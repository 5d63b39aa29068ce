"""List command implementation."""

import asyncio
from pathlib import Path

import click

from devboot import setup_logging
from devboot.capabilities import default_registry


@click.command(name="list")
@click.option(
    "--path",
    "project_path",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project directory (default: current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show descriptions and conflicts")
@click.pass_context
def list_capabilities(ctx, project_path: Path, verbose: bool):
    """List available configurations and whether they are installed."""
    debug = ctx.obj.get("debug", False)
    asyncio.run(run_list(project_path, verbose, debug))


async def run_list(project_path: Path, verbose: bool, debug: bool):
    setup_logging(debug)
    registry = default_registry()

    for capability in registry.all():
        installed = await capability.is_installed(project_path)
        status = "installed" if installed else "not installed"

        if verbose:
            click.echo(f"• {capability.name} ({capability.display_name})")
            click.echo(f"  Description: {capability.description}")
            click.echo(f"  Status: {status}")
            if capability.conflicts_with:
                click.echo(f"  Conflicts with: {', '.join(capability.conflicts_with)}")
            click.echo("")
        else:
            click.echo(f"{capability.name}: {status}")
