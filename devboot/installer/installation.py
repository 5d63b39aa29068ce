"""Transactional execution of a capability's install plan.

The orchestrator walks a capability through

    validating -> (invalid | dry-run | creating -> modifying -> success)

and, when any file operation fails, through ``rolling back -> failed``.
Every successful write pushes one compensating entry onto a
``RollbackLedger``; rollback pops them newest-first so undo order is the
exact reverse of forward order. A failing compensation is logged and the
unwind continues, and the result then carries a ROLLBACK_INCOMPLETE error.

Originals are captured as raw bytes, so a restored file matches its
pre-run state byte for byte whatever its line endings or encoding.
"""

import errno
import inspect
import logging
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from devboot.errors import (
    ErrorKind,
    InstallError,
    InstallFailure,
    classify_decode_error,
    classify_os_error,
)
from devboot.project import ProjectContext

from .models import (
    FileTransform,
    InstallOptions,
    InstallResult,
    LedgerAction,
    LedgerEntry,
    RollbackLedger,
    ValidationResult,
)
from .planning import plan_install, render_plan

if TYPE_CHECKING:
    from devboot.capabilities import Capability

_logging = logging.getLogger(__name__)

FORCE_HINT = "Use --force to override existing configurations"


class Phase(Enum):
    VALIDATING = "validating"
    DRY_RUN = "dry-run"
    CREATING = "creating"
    MODIFYING = "modifying"
    ROLLING_BACK = "rolling-back"


def _make_directory(path: Path) -> None:
    path.mkdir()


def _read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def _write_bytes(path: Path, data: bytes) -> None:
    path.write_bytes(data)


def _write_file(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8", newline="")


def _delete_file(path: Path) -> None:
    path.unlink(missing_ok=True)


def _delete_directory(path: Path) -> None:
    try:
        path.rmdir()
    except FileNotFoundError:
        pass
    except OSError as e:
        if e.errno != errno.ENOTEMPTY:
            raise
        _logging.debug(f"Rollback: leaving non-empty directory {path}")


def _resolve_target(root: Path, relative_path: str) -> Path:
    target = (root / relative_path).resolve()
    if target != root and root not in target.parents:
        raise ValueError(f"Plan path escapes the project root: {relative_path}")
    return target


class InstallationOrchestrator:
    """Applies one capability's plan with rollback on failure.

    Package installation is not part of this class; the caller runs it after
    a successful, non-dry-run result.
    """

    async def install(
        self,
        capability: "Capability",
        context: ProjectContext,
        options: InstallOptions,
    ) -> InstallResult:
        result = InstallResult(capability=capability.name)
        _logging.debug(f"[{capability.name}] {Phase.VALIDATING.value}")

        validation = await capability.validate(context, options)
        if not validation.valid:
            return self._reject(capability, validation, result)

        result.warnings.extend(validation.warnings)
        for warning in validation.warnings:
            _logging.warning(warning)

        if options.dry_run:
            _logging.debug(f"[{capability.name}] {Phase.DRY_RUN.value}")
            try:
                plan = await plan_install(capability, context, options)
            except InstallFailure as e:
                result.errors.append(e.error)
                return result
            result.success = True
            result.dry_run = True
            result.message = render_plan(plan)
            return result

        root = context.root_path.resolve()
        ledger = RollbackLedger()
        phase = Phase.CREATING
        try:
            _logging.debug(f"[{capability.name}] {phase.value}")
            files_to_create = await capability.get_files_to_create(context, options)
            for relative_path, content in files_to_create.items():
                self._create_file(root, relative_path, content, ledger)
                result.created_files.append(relative_path)

            phase = Phase.MODIFYING
            _logging.debug(f"[{capability.name}] {phase.value}")
            files_to_modify = await capability.get_files_to_modify(context, options)
            for relative_path, transform in files_to_modify.items():
                await self._modify_file(root, relative_path, transform, ledger)
                result.modified_files.append(relative_path)
        except InstallFailure as e:
            error_context = {
                **e.error.context,
                "capability": capability.name,
                "phase": phase.value,
            }
            result.errors.append(replace(e.error, context=error_context))
            self.rollback(ledger, result)
            return result
        except Exception:
            self.rollback(ledger, result)
            raise

        result.success = True
        result.message = f"{capability.display_name} configured successfully"
        return result

    def _reject(
        self,
        capability: "Capability",
        validation: ValidationResult,
        result: InstallResult,
    ) -> InstallResult:
        remediation = FORCE_HINT if validation.conflicting_capabilities else None
        for message in validation.errors:
            result.errors.append(
                InstallError(
                    ErrorKind.VALIDATION_FAILURE,
                    message,
                    context={
                        "capability": capability.name,
                        "conflicting_capabilities": list(validation.conflicting_capabilities),
                    },
                    remediation=remediation,
                )
            )
        if remediation:
            result.hints.append(remediation)
        result.warnings.extend(validation.warnings)
        return result

    def _create_file(
        self, root: Path, relative_path: str, content: str, ledger: RollbackLedger
    ) -> None:
        target = _resolve_target(root, relative_path)

        for directory in reversed(target.parents):
            if directory == root or root not in directory.parents or directory.exists():
                continue
            try:
                _make_directory(directory)
            except OSError as e:
                raise InstallFailure(classify_os_error(e, directory, "mkdir"))
            ledger.record_created(directory, is_directory=True)

        original = None
        if target.exists():
            try:
                original = _read_bytes(target)
            except OSError as e:
                raise InstallFailure(classify_os_error(e, relative_path, "read"))

        try:
            _write_file(target, content)
        except OSError as e:
            self._discard_partial_write(target, original)
            raise InstallFailure(classify_os_error(e, relative_path, "write"))

        if original is None:
            ledger.record_created(target)
        else:
            ledger.record_overwritten(target, original)
        _logging.debug(f"Created: {relative_path}")

    async def _modify_file(
        self,
        root: Path,
        relative_path: str,
        transform: FileTransform,
        ledger: RollbackLedger,
    ) -> None:
        target = _resolve_target(root, relative_path)

        try:
            original = _read_bytes(target)
        except OSError as e:
            raise InstallFailure(classify_os_error(e, relative_path, "read"))

        try:
            text = original.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InstallFailure(classify_decode_error(e, relative_path))

        try:
            updated = transform(text)
            if inspect.isawaitable(updated):
                updated = await updated
        except Exception as e:
            raise InstallFailure(
                InstallError(
                    ErrorKind.FILE_SYSTEM_FAILURE,
                    f"Failed to modify file content: {relative_path}: {e}",
                    reason="transform-failed",
                    context={"path": relative_path, "operation": "modify"},
                    remediation=f"Check the syntax of {relative_path}",
                )
            ) from e

        try:
            _write_file(target, updated)
        except OSError as e:
            self._discard_partial_write(target, original)
            raise InstallFailure(classify_os_error(e, relative_path, "write"))

        ledger.record_overwritten(target, original)
        _logging.debug(f"Modified: {relative_path}")

    def _discard_partial_write(self, target: Path, original: bytes | None) -> None:
        """Undo a write that failed midway; it never reached the ledger."""
        try:
            if original is None:
                _delete_file(target)
            else:
                _write_bytes(target, original)
        except OSError as e:
            _logging.error(f"Could not clean up partial write to {target}: {e}")

    def rollback(self, ledger: RollbackLedger, result: InstallResult) -> None:
        """Unwind the ledger newest-first, continuing past individual failures."""
        if not len(ledger):
            return

        _logging.info(
            f"[{result.capability}] {Phase.ROLLING_BACK.value}: "
            f"undoing {len(ledger)} change(s)"
        )
        failures = []
        for entry in ledger.unwind():
            try:
                self._compensate(entry)
            except OSError as e:
                _logging.error(f"Rollback of {entry.path} failed: {e}")
                failures.append(
                    {"path": str(entry.path), "action": entry.action.value, "error": str(e)}
                )

        result.rolled_back = True
        if failures:
            result.errors.append(
                InstallError(
                    ErrorKind.ROLLBACK_INCOMPLETE,
                    "Failed to roll back all changes; project files may be inconsistent",
                    context={"capability": result.capability, "failures": failures},
                    remediation="Review the listed files and restore them manually",
                )
            )

    def _compensate(self, entry: LedgerEntry) -> None:
        if entry.action == LedgerAction.RESTORE_CONTENT:
            _write_bytes(entry.path, entry.original_content or b"")
        elif entry.is_directory:
            _delete_directory(entry.path)
        else:
            _delete_file(entry.path)
        _logging.debug(f"Rollback: {entry.action.value} {entry.path}")


__all__ = ["InstallationOrchestrator", "Phase", "FORCE_HINT"]
