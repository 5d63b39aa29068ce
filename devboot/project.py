"""Project context resolution.

Reads ``package.json``, lockfiles and the source tree of a project directory
and produces an immutable ``ProjectContext``. Nothing here is cached: every
call reflects what is on disk at that moment.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .errors import ProjectError

_logging = logging.getLogger(__name__)


class PackageManager(Enum):
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"


class ProjectKind(Enum):
    NEXT = "next"
    VITE = "vite"
    REACT = "react"
    NODE = "node"


# First match wins.
LOCKFILES = [
    ("bun.lockb", PackageManager.BUN),
    ("bun.lock", PackageManager.BUN),
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
    ("package-lock.json", PackageManager.NPM),
]

_PACKAGE_MANAGER_FIELD = re.compile(r"^(npm|pnpm|yarn|bun)@")
_TEST_DIRECTORIES = ("test", "tests", "__tests__")


@dataclass(frozen=True)
class Manifest:
    name: str
    version: str
    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)
    raw: Mapping[str, Any] = field(default_factory=dict)

    def has_dependency(self, name: str) -> bool:
        return name in self.dependencies or name in self.dev_dependencies

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)


@dataclass(frozen=True)
class ProjectContext:
    root_path: Path
    manifest: Manifest
    package_manager: PackageManager
    project_kind: ProjectKind
    has_typescript: bool
    has_src_directory: bool = False
    has_test_directory: bool = False

    @property
    def is_react_based(self) -> bool:
        return self.project_kind in (ProjectKind.NEXT, ProjectKind.VITE, ProjectKind.REACT)


def _dependency_table(data: dict, key: str, manifest_path: Path) -> MappingProxyType:
    table = data.get(key) or {}
    if not isinstance(table, dict):
        raise ProjectError(
            f"package.json field '{key}' must be an object",
            manifest_path,
            "Check the syntax of package.json",
        )
    return MappingProxyType(dict(table))


def read_manifest(root_path: Path) -> Manifest:
    """Parse package.json into a read-only Manifest.

    Raises:
        ProjectError: If package.json is missing, unreadable or not an object
    """
    manifest_path = root_path / "package.json"
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ProjectError(
            f"No package.json found in {root_path}",
            root_path,
            "Run this command in a Node.js project directory with package.json",
        )
    except json.JSONDecodeError as e:
        raise ProjectError(
            f"Failed to parse package.json: {e.msg} (line {e.lineno})",
            manifest_path,
            "Check the syntax of package.json",
        )
    except UnicodeDecodeError as e:
        raise ProjectError(
            f"package.json is not valid UTF-8 (byte {e.start})",
            manifest_path,
            "Re-save package.json as UTF-8",
        )
    except OSError as e:
        raise ProjectError(f"Cannot read package.json: {e}", manifest_path)

    if not isinstance(data, dict):
        raise ProjectError("package.json must contain a JSON object", manifest_path)

    return Manifest(
        name=data.get("name") or "unnamed-project",
        version=data.get("version") or "0.0.0",
        dependencies=_dependency_table(data, "dependencies", manifest_path),
        dev_dependencies=_dependency_table(data, "devDependencies", manifest_path),
        raw=MappingProxyType(data),
    )


def detect_project_kind(manifest: Manifest) -> ProjectKind:
    if manifest.has_dependency("next"):
        return ProjectKind.NEXT
    if manifest.has_dependency("vite") and manifest.has_dependency("react"):
        return ProjectKind.VITE
    if manifest.has_dependency("react"):
        return ProjectKind.REACT
    return ProjectKind.NODE


def detect_package_manager(root_path: Path, manifest: Manifest) -> PackageManager:
    for lockfile, manager in LOCKFILES:
        if (root_path / lockfile).exists():
            return manager

    declared = manifest.get("packageManager")
    if isinstance(declared, str):
        match = _PACKAGE_MANAGER_FIELD.match(declared)
        if match:
            return PackageManager(match.group(1))

    return PackageManager.NPM


def detect_typescript(root_path: Path) -> bool:
    if (root_path / "tsconfig.json").exists():
        return True

    src = root_path / "src"
    if not src.is_dir():
        return False

    try:
        return any(
            entry.suffix in (".ts", ".tsx") for entry in src.iterdir() if entry.is_file()
        )
    except OSError:
        return False


def resolve_context(
    root_path: Path | str, package_manager: str | None = None
) -> ProjectContext:
    """Resolve the context of the project at root_path.

    Args:
        root_path: Project directory
        package_manager: Optional override of lockfile-based detection

    Raises:
        ProjectError: If the directory does not exist or has no valid package.json
    """
    root = Path(root_path).resolve()
    if not root.is_dir():
        raise ProjectError(
            f"Project path does not exist: {root}",
            root,
            "Please check the project path and try again.",
        )

    manifest = read_manifest(root)
    manager = (
        PackageManager(package_manager)
        if package_manager
        else detect_package_manager(root, manifest)
    )

    context = ProjectContext(
        root_path=root,
        manifest=manifest,
        package_manager=manager,
        project_kind=detect_project_kind(manifest),
        has_typescript=detect_typescript(root),
        has_src_directory=(root / "src").is_dir(),
        has_test_directory=any((root / d).is_dir() for d in _TEST_DIRECTORIES),
    )
    _logging.debug(
        f"Resolved project '{manifest.name}': kind={context.project_kind.value}, "
        f"manager={manager.value}, typescript={context.has_typescript}"
    )
    return context


__all__ = [
    "PackageManager",
    "ProjectKind",
    "Manifest",
    "ProjectContext",
    "read_manifest",
    "detect_project_kind",
    "detect_package_manager",
    "detect_typescript",
    "resolve_context",
]
