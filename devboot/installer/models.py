"""Data models for the installation pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Iterator

from devboot.errors import ErrorKind, InstallError

FileTransform = Callable[[str], "str | Awaitable[str]"]


@dataclass
class InstallOptions:
    force: bool = False
    dry_run: bool = False
    verbose: bool = False
    skip_install: bool = False
    non_interactive: bool = False
    package_manager: str | None = None


@dataclass
class DependencyManifest:
    runtime: dict[str, str] = field(default_factory=dict)
    development: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.runtime and not self.development

    def runtime_specs(self) -> list[str]:
        return [f"{name}@{version}" for name, version in self.runtime.items()]

    def development_specs(self) -> list[str]:
        return [f"{name}@{version}" for name, version in self.development.items()]


@dataclass
class InstallPlan:
    capability: str
    files_to_create: dict[str, str]
    files_to_modify: dict[str, FileTransform]
    dependencies: DependencyManifest


class LedgerAction(Enum):
    DELETE_PATH = "delete-path"
    RESTORE_CONTENT = "restore-content"


@dataclass(frozen=True)
class LedgerEntry:
    action: LedgerAction
    path: Path
    original_content: bytes | None = None
    is_directory: bool = False


class RollbackLedger:
    """Append-only stack of compensating actions, unwound in reverse."""

    def __init__(self) -> None:
        self._entries: list[LedgerEntry] = []

    def record_created(self, path: Path, is_directory: bool = False) -> None:
        self._entries.append(
            LedgerEntry(LedgerAction.DELETE_PATH, path, is_directory=is_directory)
        )

    def record_overwritten(self, path: Path, original_content: bytes) -> None:
        self._entries.append(
            LedgerEntry(LedgerAction.RESTORE_CONTENT, path, original_content)
        )

    @property
    def entries(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def unwind(self) -> Iterator[LedgerEntry]:
        """Pop entries newest-first until the ledger is empty."""
        while self._entries:
            yield self._entries.pop()


@dataclass
class ValidationResult:
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    conflicting_capabilities: list[str] = field(default_factory=list)


@dataclass
class InstallResult:
    capability: str
    success: bool = False
    message: str | None = None
    created_files: list[str] = field(default_factory=list)
    modified_files: list[str] = field(default_factory=list)
    removed_files: list[str] = field(default_factory=list)
    applied_packages: list[str] = field(default_factory=list)
    errors: list[InstallError] = field(default_factory=list)
    hints: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False
    rolled_back: bool = False

    @property
    def cancelled(self) -> bool:
        return any(e.kind == ErrorKind.USER_CANCELLED for e in self.errors)

    @property
    def rollback_incomplete(self) -> bool:
        return any(e.kind == ErrorKind.ROLLBACK_INCOMPLETE for e in self.errors)

    def errors_of(self, kind: ErrorKind) -> list[InstallError]:
        return [e for e in self.errors if e.kind == kind]


@dataclass
class DependencyInstallResult:
    success: bool
    installed: list[str] = field(default_factory=list)
    error: InstallError | None = None
    skipped: bool = False


__all__ = [
    "FileTransform",
    "InstallOptions",
    "DependencyManifest",
    "InstallPlan",
    "LedgerAction",
    "LedgerEntry",
    "RollbackLedger",
    "ValidationResult",
    "InstallResult",
    "DependencyInstallResult",
]
