"""Transactional installation pipeline for capabilities."""

from .conflicts import (
    CONFIG_PATTERNS,
    Conflict,
    ConflictDetector,
    ConflictReport,
    DetectedConfig,
    categorize_configs,
)
from .dependencies import DependencyInstaller, build_install_command
from .installation import InstallationOrchestrator, Phase
from .models import (
    DependencyInstallResult,
    DependencyManifest,
    InstallOptions,
    InstallPlan,
    InstallResult,
    LedgerAction,
    LedgerEntry,
    RollbackLedger,
    ValidationResult,
)
from .module_installer import ModuleInstaller
from .planning import plan_install, render_plan

__all__ = [
    "CONFIG_PATTERNS",
    "Conflict",
    "ConflictDetector",
    "ConflictReport",
    "DetectedConfig",
    "categorize_configs",
    "DependencyInstaller",
    "build_install_command",
    "InstallationOrchestrator",
    "Phase",
    "DependencyInstallResult",
    "DependencyManifest",
    "InstallOptions",
    "InstallPlan",
    "InstallResult",
    "LedgerAction",
    "LedgerEntry",
    "RollbackLedger",
    "ValidationResult",
    "ModuleInstaller",
    "plan_install",
    "render_plan",
]
