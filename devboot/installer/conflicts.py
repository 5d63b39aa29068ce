"""Detection of existing tooling configs and conflicts with a requested set.

Installed configs come from two sources: every registered capability's
probe, then a table of well-known file patterns for tools that are not
wrapped as capabilities. A name found by both keeps the registry entry.
Conflict checking is advisory; it runs before anything is installed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from devboot.errors import ProjectError

if TYPE_CHECKING:
    from devboot.capabilities import CapabilityRegistry

_logging = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigPattern:
    name: str
    files: tuple[str, ...] = ()
    directories: tuple[str, ...] = ()


CONFIG_PATTERNS = (
    ConfigPattern(
        "eslint",
        files=(
            ".eslintrc.js",
            ".eslintrc.cjs",
            ".eslintrc.json",
            ".eslintrc.yml",
            ".eslintrc.yaml",
            "eslint.config.js",
            "eslint.config.mjs",
            "eslint.config.ts",
        ),
    ),
    ConfigPattern(
        "prettier",
        files=(
            ".prettierrc",
            ".prettierrc.json",
            ".prettierrc.yml",
            ".prettierrc.yaml",
            ".prettierrc.js",
            ".prettierrc.cjs",
            ".prettierrc.mjs",
            "prettier.config.js",
            "prettier.config.cjs",
            "prettier.config.mjs",
            "prettier.config.ts",
        ),
    ),
    ConfigPattern("typescript", files=("tsconfig.json", "tsconfig.node.json")),
    ConfigPattern("husky", directories=(".husky",)),
    ConfigPattern("editorconfig", files=(".editorconfig",)),
    ConfigPattern("vitest", files=("vitest.config.ts", "vitest.config.js", "vitest.config.mjs")),
    ConfigPattern(
        "jest",
        files=("jest.config.js", "jest.config.ts", "jest.config.mjs", "jest.config.json"),
    ),
    ConfigPattern("biome", files=("biome.json", "biome.jsonc")),
)

CATEGORIES = {
    "linting": ("eslint", "prettier", "biome"),
    "testing": ("vitest", "jest", "cypress"),
    "building": ("typescript", "vite", "webpack"),
    "git": ("husky", "commitlint"),
    "editor": ("editorconfig", "vscode"),
}


@dataclass
class DetectedConfig:
    name: str
    detected_files: list[str] = field(default_factory=list)
    from_registry: bool = False


@dataclass(frozen=True)
class Conflict:
    capability: str
    conflicts_with: str


@dataclass
class ConflictReport:
    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def conflicting_with(self, capability: str) -> list[str]:
        return [c.conflicts_with for c in self.conflicts if c.capability == capability]


def check_pattern(root_path: Path, pattern: ConfigPattern) -> list[str]:
    """Relative paths from the pattern that exist under root_path."""
    found = [name for name in pattern.files if (root_path / name).is_file()]
    found.extend(name for name in pattern.directories if (root_path / name).is_dir())
    return found


def categorize_configs(configs: list[DetectedConfig]) -> dict[str, list[str]]:
    categorized: dict[str, list[str]] = {category: [] for category in CATEGORIES}
    categorized["other"] = []
    for config in configs:
        for category, members in CATEGORIES.items():
            if config.name in members:
                categorized[category].append(config.name)
                break
        else:
            categorized["other"].append(config.name)
    return categorized


class ConflictDetector:
    def __init__(self, registry: "CapabilityRegistry"):
        self.registry = registry

    async def detect_installed(self, root_path: Path) -> list[DetectedConfig]:
        root_path = Path(root_path)
        if not (root_path / "package.json").is_file():
            raise ProjectError(
                "No package.json found in project directory",
                root_path / "package.json",
                remediation="Run this command from the root of a JavaScript project",
            )

        detected: dict[str, DetectedConfig] = {}

        for capability in self.registry.all():
            if await capability.is_installed(root_path):
                detected[capability.name] = DetectedConfig(
                    capability.name,
                    [name for name in capability.detect_files if (root_path / name).exists()],
                    from_registry=True,
                )

        for pattern in CONFIG_PATTERNS:
            if pattern.name in detected:
                continue
            try:
                found = check_pattern(root_path, pattern)
            except OSError as e:
                _logging.debug(f"Failed to check pattern '{pattern.name}': {e}")
                continue
            if found:
                detected[pattern.name] = DetectedConfig(pattern.name, found)

        _logging.debug(f"Detected configs: {', '.join(detected) or 'none'}")
        return list(detected.values())

    def check_conflicts(self, installed: list[str], requested: list[str]) -> ConflictReport:
        """Pair each requested capability with the installed configs it conflicts with."""
        report = ConflictReport()
        installed_names = set(installed)
        for name in requested:
            capability = self.registry.get(name)
            if capability is None:
                continue
            for peer in capability.conflicts_with:
                if peer in installed_names:
                    report.conflicts.append(Conflict(name, peer))
        return report

    async def find_conflicts(self, root_path: Path, requested: list[str]) -> ConflictReport:
        installed = await self.detect_installed(root_path)
        return self.check_conflicts([config.name for config in installed], requested)


__all__ = [
    "CONFIG_PATTERNS",
    "ConfigPattern",
    "DetectedConfig",
    "Conflict",
    "ConflictReport",
    "ConflictDetector",
    "categorize_configs",
    "check_pattern",
]
