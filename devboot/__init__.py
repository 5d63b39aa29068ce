"""Scaffold developer-tooling configuration into JavaScript projects."""

import logging
import sys

from devboot.capabilities import Capability, CapabilityRegistry, default_registry
from devboot.config import ConfigError, Settings, is_non_interactive, load_settings
from devboot.errors import (
    ErrorKind,
    InstallError,
    InstallFailure,
    ProjectError,
    UserCancelledError,
    format_error,
    format_install_error,
    format_suggestion,
)
from devboot.installer import (
    ConflictDetector,
    DependencyInstaller,
    InstallationOrchestrator,
    InstallOptions,
    InstallResult,
    ModuleInstaller,
)
from devboot.project import PackageManager, ProjectContext, ProjectKind, resolve_context

__version__ = "0.1.0"

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Configure the devboot logger; repeated calls only adjust the level."""
    logger = logging.getLogger("devboot")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


__all__ = [
    "__version__",
    "setup_logging",
    "Capability",
    "CapabilityRegistry",
    "default_registry",
    "ConfigError",
    "Settings",
    "is_non_interactive",
    "load_settings",
    "ErrorKind",
    "InstallError",
    "InstallFailure",
    "ProjectError",
    "UserCancelledError",
    "format_error",
    "format_install_error",
    "format_suggestion",
    "ConflictDetector",
    "DependencyInstaller",
    "InstallationOrchestrator",
    "InstallOptions",
    "InstallResult",
    "ModuleInstaller",
    "PackageManager",
    "ProjectContext",
    "ProjectKind",
    "resolve_context",
]
