"""Shared helpers for commands."""

import sys

import click

from devboot.config import ConfigError, Settings, load_settings
from devboot.errors import format_error, format_install_error
from devboot.installer import InstallResult


def load_settings_or_exit() -> Settings:
    try:
        return load_settings()
    except ConfigError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)


def echo_result(result: InstallResult, verbose: bool = False) -> None:
    """Print one result record: files, packages, errors and hints."""
    if result.dry_run:
        click.echo(result.message)
        click.echo("")
        return

    if result.cancelled:
        click.echo(f"⏭️  {result.capability}: cancelled")
        return

    for warning in result.warnings:
        click.echo(f"⚠️  {warning}")

    if result.success:
        click.echo(f"✅ {result.message}")
        if verbose:
            for path in result.created_files:
                click.echo(f"  ✨ {path}")
            for path in result.modified_files:
                click.echo(f"  ✏️  {path}")
            for package in result.applied_packages:
                click.echo(f"  📦 {package}")
        return

    click.echo(f"❌ {result.capability} failed", err=True)
    if result.created_files or result.modified_files:
        attempted = [*result.created_files, *result.modified_files]
        click.echo(f"  Attempted: {', '.join(attempted)}", err=True)
    for error in result.errors:
        click.echo(f"  {format_install_error(error)}", err=True)
    if result.rollback_incomplete:
        click.secho("  Rollback was incomplete; check the files above by hand.", fg="red", err=True)
    elif result.rolled_back:
        click.echo("  All file changes were rolled back.", err=True)
    for hint in result.hints:
        click.echo(f"💡 {hint}")
