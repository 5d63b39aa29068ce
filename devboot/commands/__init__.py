"""CLI command definitions for devboot."""

import click

from devboot import __version__
from devboot.commands.add import add
from devboot.commands.list import list_capabilities
from devboot.commands.remove import remove
from devboot.commands.status import status


@click.group()
@click.version_option(__version__, prog_name="devboot")
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.pass_context
def cli(ctx, debug):
    """Scaffold developer-tooling configuration into a project."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


cli.add_command(add)
cli.add_command(list_capabilities, name="list")
cli.add_command(status)
cli.add_command(remove)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
