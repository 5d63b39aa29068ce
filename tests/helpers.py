"""Test doubles shared across test modules."""

import json
from pathlib import Path

from devboot.capabilities import Capability, ConfigGenerator, GeneratedConfig
from devboot.installer import DependencyManifest


class EmptyGenerator(ConfigGenerator):
    title = "Plan"

    def default_config(self, context):
        return GeneratedConfig(config="", config_file_name="")


class PlanCapability(Capability):
    """Capability with a fixed plan, for driving the orchestrator directly."""

    name = "x"
    display_name = "X"
    description = "Fixed-plan test capability"

    def __init__(self, create=None, modify=None, dependencies=None, installed=False):
        super().__init__()
        self.create = create or {}
        self.modify = modify or {}
        self.dependencies = dependencies or DependencyManifest()
        self.installed = installed

    def default_generator(self):
        return EmptyGenerator()

    async def is_installed(self, root_path):
        return self.installed

    async def get_dependencies(self, context):
        return self.dependencies

    async def get_files_to_create(self, context, options):
        return dict(self.create)

    async def get_files_to_modify(self, context, options):
        return dict(self.modify)


def write_package_json(root: Path, data: dict) -> Path:
    path = root / "package.json"
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def snapshot(root: Path) -> dict[str, bytes | None]:
    """Every path under root mapped to its bytes (None for directories)."""
    return {
        str(path.relative_to(root)): path.read_bytes() if path.is_file() else None
        for path in sorted(root.rglob("*"))
    }
