"""Top-level entry point: look a capability up by name and install it."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from devboot.errors import ErrorKind, InstallError, ProjectError
from devboot.project import ProjectContext, resolve_context
from devboot.suggestions import find_similar

from .dependencies import DependencyInstaller, manual_install_commands
from .installation import InstallationOrchestrator
from .models import InstallOptions, InstallResult

if TYPE_CHECKING:
    from devboot.capabilities import Capability, CapabilityRegistry

_logging = logging.getLogger(__name__)

MANUAL_INSTALL_HINT = (
    "Configuration files are in place, but packages must be installed manually:"
)


class ModuleInstaller:
    """Resolves the project, runs the orchestrator, then installs packages.

    The project context is resolved again for every call so each install
    sees the files left by the previous one.
    """

    def __init__(
        self,
        registry: "CapabilityRegistry",
        orchestrator: InstallationOrchestrator | None = None,
        dependency_installer: DependencyInstaller | None = None,
    ):
        self.registry = registry
        self.orchestrator = orchestrator or InstallationOrchestrator()
        self.dependency_installer = dependency_installer or DependencyInstaller()

    def _lookup(self, name: str, result: InstallResult) -> "Capability | None":
        capability = self.registry.get(name)
        if capability is not None:
            return capability

        suggestions = find_similar(name, self.registry.names())
        remediation = None
        if suggestions:
            remediation = f"Did you mean: {', '.join(suggestions)}?"
        result.errors.append(
            InstallError(
                ErrorKind.CAPABILITY_NOT_FOUND,
                f"Unknown capability: {name}",
                context={
                    "name": name,
                    "suggestions": suggestions,
                    "available": self.registry.names(),
                },
                remediation=remediation,
            )
        )
        return None

    def _resolve(
        self, root_path: Path | str, options: InstallOptions, result: InstallResult
    ) -> ProjectContext | None:
        try:
            return resolve_context(root_path, options.package_manager)
        except ProjectError as e:
            result.errors.append(e.error)
            return None

    async def install_capability(
        self, name: str, root_path: Path | str, options: InstallOptions
    ) -> InstallResult:
        result = InstallResult(capability=name)

        context = self._resolve(root_path, options, result)
        if context is None:
            return result

        capability = self._lookup(name, result)
        if capability is None:
            return result

        result = await self.orchestrator.install(capability, context, options)
        if not result.success or result.dry_run or options.skip_install:
            return result

        await self._install_dependencies(capability, context, result)
        return result

    async def _install_dependencies(
        self, capability: "Capability", context: ProjectContext, result: InstallResult
    ) -> None:
        manifest = await capability.get_dependencies(context)
        outcome = await self.dependency_installer.install(manifest, context)
        result.applied_packages.extend(outcome.installed)

        if outcome.success:
            return

        # Written files stay; rerunning is safe because validation reports them.
        result.success = False
        if outcome.error is not None:
            result.errors.append(outcome.error)
        result.hints.append(MANUAL_INSTALL_HINT)
        result.hints.extend(
            f"  {line}" for line in manual_install_commands(manifest, context.package_manager)
        )
        _logging.warning(
            f"[{capability.name}] files written but package installation failed"
        )

    async def install_many(
        self, names: list[str], root_path: Path | str, options: InstallOptions
    ) -> list[InstallResult]:
        """Install capabilities one after another; a failure does not stop the rest."""
        results = []
        for name in names:
            result = await self.install_capability(name, root_path, options)
            results.append(result)
            if result.cancelled:
                break
        return results

    async def uninstall_capability(
        self,
        name: str,
        root_path: Path | str,
        options: InstallOptions,
        remove_packages: bool = False,
    ) -> InstallResult:
        result = InstallResult(capability=name)

        context = self._resolve(root_path, options, result)
        if context is None:
            return result

        capability = self._lookup(name, result)
        if capability is None:
            return result

        result = await capability.uninstall(context, options)
        if not result.success or not remove_packages:
            return result

        manifest = await capability.get_dependencies(context)
        packages = [*manifest.runtime, *manifest.development]
        outcome = await self.dependency_installer.uninstall(packages, context)
        if not outcome.success:
            result.success = False
            if outcome.error is not None:
                result.errors.append(outcome.error)
        return result


__all__ = ["ModuleInstaller", "MANUAL_INSTALL_HINT"]
