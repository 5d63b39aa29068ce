"""Capability contract.

A capability is a named unit that knows how to detect, validate and plan one
tooling configuration. It never writes to disk during planning; the
orchestrator applies its plan. ``uninstall`` is the one method that removes
files itself.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from devboot.errors import ErrorKind, InstallError, classify_os_error
from devboot.installer.models import (
    DependencyManifest,
    FileTransform,
    InstallOptions,
    InstallResult,
    ValidationResult,
)
from devboot.project import ProjectContext

from .generators import ConfigGenerator, GeneratedConfig

_logging = logging.getLogger(__name__)


def dump_package_json(data: dict, original: str) -> str:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    return text + "\n" if original.endswith("\n") else text


def add_package_scripts(scripts: dict[str, str]) -> FileTransform:
    """Transform that adds scripts to package.json, keeping existing ones.

    Every other key passes through unchanged. Content that is not a JSON
    object raises ValueError rather than being rewritten.
    """

    def transform(content: str) -> str:
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError("package.json must contain a JSON object")

        existing = data.setdefault("scripts", {})
        if not isinstance(existing, dict):
            raise ValueError("package.json 'scripts' must be an object")

        for name, command in scripts.items():
            existing.setdefault(name, command)
        return dump_package_json(data, content)

    return transform


class Capability(ABC):
    name: str = ""
    display_name: str = ""
    description: str = ""
    # Files whose presence means the capability is installed.
    detect_files: tuple[str, ...] = ()
    # package.json key that also counts as an installation (e.g. "prettier").
    manifest_key: str | None = None
    conflicts_with: tuple[str, ...] = ()

    def __init__(self, generator: ConfigGenerator | None = None):
        self.generator = generator or self.default_generator()
        self._generated: GeneratedConfig | None = None

    @abstractmethod
    def default_generator(self) -> ConfigGenerator: ...

    @property
    def removable_files(self) -> tuple[str, ...]:
        return self.detect_files

    async def is_installed(self, root_path: Path) -> bool:
        try:
            return self._detect(Path(root_path))
        except Exception as e:
            _logging.debug(f"Probe for '{self.name}' failed: {e}")
            return False

    def _detect(self, root_path: Path) -> bool:
        if any((root_path / name).exists() for name in self.detect_files):
            return True

        if self.manifest_key:
            package_json = root_path / "package.json"
            if package_json.exists():
                data = json.loads(package_json.read_text(encoding="utf-8"))
                return bool(data.get(self.manifest_key))

        return False

    async def validate(
        self, context: ProjectContext, options: InstallOptions
    ) -> ValidationResult:
        result = ValidationResult()
        installed = await self.is_installed(context.root_path)

        if installed and not options.force:
            result.valid = False
            result.errors.append(
                f"{self.display_name} configuration already exists. "
                "Use --force to overwrite."
            )
            result.conflicting_capabilities.append(self.name)
        elif installed:
            result.warnings.append(
                f"Existing {self.display_name} configuration will be overwritten"
            )
        return result

    def generate(self, context: ProjectContext, options: InstallOptions) -> GeneratedConfig:
        """Generated content, memoized for the life of this instance.

        Dry runs always use the non-interactive defaults and are not memoized,
        so a later real run still asks.
        """
        if self._generated is not None:
            return self._generated
        if options.dry_run:
            return self.generator.default_config(context)

        self._generated = self.generator.build(context, options.non_interactive)
        return self._generated

    async def get_dependencies(self, context: ProjectContext) -> DependencyManifest:
        generated = self._generated or self.generator.default_config(context)
        return DependencyManifest(development=dict(generated.dependencies))

    async def get_files_to_create(
        self, context: ProjectContext, options: InstallOptions
    ) -> dict[str, str]:
        generated = self.generate(context, options)
        files = {generated.config_file_name: generated.config}
        files.update(generated.additional_files)
        return files

    async def get_files_to_modify(
        self, context: ProjectContext, options: InstallOptions
    ) -> dict[str, FileTransform]:
        return {}

    async def uninstall(
        self, context: ProjectContext, options: InstallOptions
    ) -> InstallResult:
        result = InstallResult(capability=self.name)
        root = context.root_path
        targets = [name for name in self.removable_files if (root / name).is_file()]

        if not targets:
            result.errors.append(
                InstallError(
                    ErrorKind.FILE_SYSTEM_FAILURE,
                    f"No {self.display_name} configuration files found",
                    reason="not-found",
                    context={"path": str(root), "operation": "delete"},
                )
            )
            return result

        for name in targets:
            try:
                (root / name).unlink()
            except OSError as e:
                result.errors.append(classify_os_error(e, root / name, "delete"))
                return result
            result.removed_files.append(name)
            _logging.debug(f"Removed: {name}")

        result.success = True
        result.message = f"{self.display_name} configuration removed successfully"
        return result

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


__all__ = ["Capability", "add_package_scripts", "dump_package_json"]
