"""Package installation through the project's package manager.

Runtime packages are installed first, then development packages, each in its
own subprocess; the second never starts before the first has exited. A
failing subprocess is classified by errno or stderr content into one of the
dependency failure reasons, each with a remediation hint.
"""

import errno
import logging
import shlex
from dataclasses import dataclass

from devboot.errors import ErrorKind, InstallError
from devboot.execution import CommandResult, run_command_async
from devboot.project import PackageManager, ProjectContext

from .models import DependencyInstallResult, DependencyManifest

_logging = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagerCommands:
    install: tuple[str, ...]
    install_dev: tuple[str, ...]
    uninstall: tuple[str, ...]


MANAGER_COMMANDS = {
    PackageManager.NPM: ManagerCommands(("install", "--save"), ("install", "--save-dev"), ("uninstall",)),
    PackageManager.PNPM: ManagerCommands(("add",), ("add", "-D"), ("remove",)),
    PackageManager.YARN: ManagerCommands(("add",), ("add", "-D"), ("remove",)),
    PackageManager.BUN: ManagerCommands(("add",), ("add", "-d"), ("remove",)),
}

NETWORK_ERRNOS = {
    errno.ECONNREFUSED,
    errno.ECONNRESET,
    errno.ETIMEDOUT,
    errno.ENETUNREACH,
    errno.EHOSTUNREACH,
}

PERMISSION_MARKERS = ("EACCES", "EPERM", "permission denied", "Permission denied")
NOT_FOUND_MARKERS = (
    "E404",
    "404 Not Found",
    "ERR_PNPM_FETCH_404",
    "Couldn't find package",
    "is not in this registry",
)
RESOLUTION_MARKERS = (
    "ERESOLVE",
    "ERR_PNPM_PEER_DEP_ISSUES",
    "unable to resolve dependency tree",
    "Conflicting peer dependency",
)
NETWORK_MARKERS = (
    "ENOTFOUND",
    "ECONNREFUSED",
    "ECONNRESET",
    "ETIMEDOUT",
    "ENETUNREACH",
    "EAI_AGAIN",
    "network",
)
EXECUTABLE_MISSING_MARKERS = ("command not found", "not recognized as an internal")

STDERR_LIMIT = 2000


def build_install_command(
    packages: list[str], dev: bool, manager: PackageManager
) -> list[str]:
    commands = MANAGER_COMMANDS[manager]
    verb = commands.install_dev if dev else commands.install
    return [manager.value, *verb, *packages]


def build_uninstall_command(packages: list[str], manager: PackageManager) -> list[str]:
    return [manager.value, *MANAGER_COMMANDS[manager].uninstall, *packages]


def manual_install_commands(manifest: DependencyManifest, manager: PackageManager) -> list[str]:
    """Shell lines a user can run to install the manifest by hand."""
    lines = []
    if manifest.runtime:
        lines.append(shlex.join(build_install_command(manifest.runtime_specs(), False, manager)))
    if manifest.development:
        lines.append(
            shlex.join(build_install_command(manifest.development_specs(), True, manager))
        )
    return lines


def _executable_remediation(manager: PackageManager) -> str:
    if manager == PackageManager.NPM:
        return "Install Node.js from https://nodejs.org"
    return f"Install {manager.value}: npm install -g {manager.value}"


def _failure(
    reason: str,
    message: str,
    remediation: str,
    manager: PackageManager,
    command: str,
    packages: list[str],
    **extra,
) -> InstallError:
    return InstallError(
        ErrorKind.DEPENDENCY_INSTALL_FAILURE,
        message,
        reason=reason,
        context={
            "package_manager": manager.value,
            "command": command,
            "packages": list(packages),
            **extra,
        },
        remediation=remediation,
    )


def classify_spawn_error(
    exc: OSError, manager: PackageManager, command: str, packages: list[str]
) -> InstallError:
    """Classify an error raised while starting the package manager."""
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return _failure(
            "executable-not-found",
            f"{manager.value} is not installed",
            _executable_remediation(manager),
            manager,
            command,
            packages,
        )
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return _failure(
            "permission-denied",
            "Permission denied while installing packages",
            "Check the permissions of the project directory and the package manager cache",
            manager,
            command,
            packages,
        )
    if exc.errno in NETWORK_ERRNOS:
        return _failure(
            "network-unreachable",
            "Network error while installing packages",
            "Check your internet connection and try again",
            manager,
            command,
            packages,
        )
    return _failure(
        "other",
        f"Failed to run {manager.value}: {exc}",
        f"Try running '{command}' manually",
        manager,
        command,
        packages,
    )


def classify_command_failure(
    result: CommandResult, manager: PackageManager, packages: list[str]
) -> InstallError:
    """Classify a package manager run that exited non-zero or reported errors."""
    stderr = result.stderr
    extra = {"returncode": result.returncode, "stderr": stderr[:STDERR_LIMIT]}

    def failure(reason: str, message: str, remediation: str) -> InstallError:
        return _failure(reason, message, remediation, manager, result.command, packages, **extra)

    if result.returncode == 127 or any(m in stderr for m in EXECUTABLE_MISSING_MARKERS):
        return failure(
            "executable-not-found",
            f"{manager.value} is not installed",
            _executable_remediation(manager),
        )
    if any(m in stderr for m in PERMISSION_MARKERS):
        return failure(
            "permission-denied",
            "Permission denied while installing packages",
            "Check the permissions of the project directory and the package manager cache",
        )
    if any(m in stderr for m in NOT_FOUND_MARKERS):
        return failure(
            "package-not-found",
            "One or more packages not found",
            "Check the package names and versions, then retry",
        )
    if any(m in stderr for m in RESOLUTION_MARKERS):
        remediation = "Align the conflicting peer dependency versions and retry"
        if manager == PackageManager.NPM:
            remediation += " (or rerun with 'npm install --legacy-peer-deps')"
        return failure(
            "resolution-conflict", "Dependency resolution conflict", remediation
        )
    if any(m in stderr for m in NETWORK_MARKERS):
        return failure(
            "network-unreachable",
            "Network error while installing packages",
            "Check your internet connection and try again",
        )
    return failure(
        "other",
        f"Package manager reported errors: {stderr or f'exit code {result.returncode}'}",
        f"Try running '{result.command}' manually",
    )


def _is_failure(result: CommandResult) -> bool:
    # A non-empty stderr counts as failure unless it is only warnings.
    if result.returncode != 0:
        return True
    return bool(result.stderr) and "warning" not in result.stderr


class DependencyInstaller:
    async def install(
        self, manifest: DependencyManifest, context: ProjectContext
    ) -> DependencyInstallResult:
        runtime = manifest.runtime_specs()
        development = manifest.development_specs()

        if not runtime and not development:
            _logging.debug("No packages to install")
            return DependencyInstallResult(success=True, skipped=True)

        installed: list[str] = []
        for packages, dev in ((runtime, False), (development, True)):
            if not packages:
                continue
            argv = build_install_command(packages, dev, context.package_manager)
            error = await self._run(argv, packages, context)
            if error:
                return DependencyInstallResult(success=False, installed=installed, error=error)
            installed.extend(packages)

        return DependencyInstallResult(success=True, installed=installed)

    async def uninstall(
        self, packages: list[str], context: ProjectContext
    ) -> DependencyInstallResult:
        if not packages:
            return DependencyInstallResult(success=True, skipped=True)

        argv = build_uninstall_command(packages, context.package_manager)
        error = await self._run(argv, packages, context)
        if error:
            return DependencyInstallResult(success=False, error=error)
        return DependencyInstallResult(success=True, installed=list(packages))

    async def _run(
        self, argv: list[str], packages: list[str], context: ProjectContext
    ) -> InstallError | None:
        manager = context.package_manager
        command = shlex.join(argv)
        _logging.info(f"Running: {command}")

        try:
            result = await run_command_async(argv, cwd=context.root_path)
        except OSError as e:
            error = classify_spawn_error(e, manager, command, packages)
            _logging.error(f"{error.message} ({error.reason})")
            return error

        if result.stdout:
            _logging.debug(result.stdout)
        if _is_failure(result):
            error = classify_command_failure(result, manager, packages)
            _logging.error(f"{error.message} ({error.reason})")
            return error
        return None


__all__ = [
    "MANAGER_COMMANDS",
    "DependencyInstaller",
    "build_install_command",
    "build_uninstall_command",
    "manual_install_commands",
    "classify_spawn_error",
    "classify_command_failure",
]
