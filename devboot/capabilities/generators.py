"""Content generation for capabilities.

A generator turns a project context into a finished configuration: the main
config file, any extra files, and the dev packages that config needs. In
interactive mode the user sees a preview and confirms it; declining raises
``UserCancelledError``. Non-interactive mode returns the defaults unchanged,
which is what dry runs and CI use.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import click

from devboot.errors import UserCancelledError
from devboot.project import ProjectContext


@dataclass
class GeneratedConfig:
    config: str
    config_file_name: str
    dependencies: dict[str, str] = field(default_factory=dict)
    additional_files: dict[str, str] = field(default_factory=dict)
    preset_name: str | None = None


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2) + "\n"


class ConfigGenerator(ABC):
    title: str = ""

    @abstractmethod
    def default_config(self, context: ProjectContext) -> GeneratedConfig:
        """Deterministic configuration for the given project."""

    def build(self, context: ProjectContext, non_interactive: bool) -> GeneratedConfig:
        generated = self.default_config(context)
        if non_interactive:
            return generated
        return confirm_generated(self.title, generated)


def confirm_generated(title: str, generated: GeneratedConfig) -> GeneratedConfig:
    click.secho(f"\n🔧 {title} setup", fg="blue", bold=True)
    if generated.preset_name:
        click.echo(f"  Preset: {generated.preset_name}")
    click.echo(f"\n📄 {generated.config_file_name}")
    click.secho(generated.config, dim=True)
    for file_name in generated.additional_files:
        click.echo(f"  + {file_name}")

    if not click.confirm("Apply this configuration?", default=True):
        raise UserCancelledError(f"{title} setup cancelled by user")
    return generated


__all__ = ["GeneratedConfig", "ConfigGenerator", "confirm_generated", "to_json"]
