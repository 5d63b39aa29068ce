"""Error values and formatting utilities.

Every operational failure the pipeline can hit is turned into an
``InstallError`` before it reaches an ``InstallResult``. Callers branch on
``InstallError.kind``; the ``reason`` field narrows filesystem and package
manager failures further.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Field errors use structured format: '<entity> field '<field>' <issue>'
- Use present tense: 'must be', 'is required'
- Include actionable hints where helpful
"""

import errno
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class ErrorKind(Enum):
    VALIDATION_FAILURE = "validation_failure"
    FILE_SYSTEM_FAILURE = "file_system_failure"
    ROLLBACK_INCOMPLETE = "rollback_incomplete"
    DEPENDENCY_INSTALL_FAILURE = "dependency_install_failure"
    CAPABILITY_NOT_FOUND = "capability_not_found"
    PROJECT_INVALID = "project_invalid"
    USER_CANCELLED = "user_cancelled"


RECOVERABLE_KINDS = frozenset(
    {
        ErrorKind.VALIDATION_FAILURE,
        ErrorKind.DEPENDENCY_INSTALL_FAILURE,
        ErrorKind.CAPABILITY_NOT_FOUND,
        ErrorKind.USER_CANCELLED,
    }
)


@dataclass(frozen=True)
class InstallError:
    kind: ErrorKind
    message: str
    reason: str | None = None
    context: dict[str, Any] = field(default_factory=dict)
    remediation: str | None = None

    @property
    def is_recoverable(self) -> bool:
        return self.kind in RECOVERABLE_KINDS

    def __str__(self) -> str:
        return self.message


class InstallFailure(Exception):
    """Carries a classified error across an internal raise/catch seam."""

    def __init__(self, error: InstallError):
        super().__init__(error.message)
        self.error = error


class UserCancelledError(InstallFailure):
    def __init__(self, message: str = "Configuration cancelled"):
        super().__init__(InstallError(ErrorKind.USER_CANCELLED, message))


class ProjectError(InstallFailure):
    def __init__(self, message: str, path: Path, remediation: str | None = None):
        super().__init__(
            InstallError(
                ErrorKind.PROJECT_INVALID,
                message,
                context={"path": str(path)},
                remediation=remediation,
            )
        )


_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM, errno.EROFS}


def classify_os_error(exc: OSError, path: Path | str, operation: str) -> InstallError:
    """Classify an OSError raised by a file operation.

    Args:
        exc: The error raised by the filesystem call
        path: Path the operation was applied to
        operation: Short verb for the failed call ("write", "read", "mkdir", ...)

    Returns:
        A FILE_SYSTEM_FAILURE error with a permission-denied, disk-full,
        not-found or other reason
    """
    context = {"path": str(path), "operation": operation, "errno": exc.errno}

    if isinstance(exc, PermissionError) or exc.errno in _PERMISSION_ERRNOS:
        return InstallError(
            ErrorKind.FILE_SYSTEM_FAILURE,
            f"Permission denied during {operation}: {path}",
            reason="permission-denied",
            context=context,
            remediation="Check the permissions of the project directory",
        )
    if exc.errno in (errno.ENOSPC, errno.EDQUOT):
        return InstallError(
            ErrorKind.FILE_SYSTEM_FAILURE,
            "Not enough disk space",
            reason="disk-full",
            context=context,
            remediation="Free up disk space and try again",
        )
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return InstallError(
            ErrorKind.FILE_SYSTEM_FAILURE,
            f"File not found: {path}",
            reason="not-found",
            context=context,
        )
    return InstallError(
        ErrorKind.FILE_SYSTEM_FAILURE,
        f"Failed to {operation} {path}: {exc.strerror or exc}",
        reason="other",
        context=context,
    )


def classify_decode_error(
    exc: UnicodeDecodeError, path: Path | str
) -> InstallError:
    return InstallError(
        ErrorKind.FILE_SYSTEM_FAILURE,
        f"{path} is not valid UTF-8 (byte {exc.start}: {exc.reason})",
        reason="invalid-encoding",
        context={"path": str(path), "operation": "decode"},
        remediation=f"Re-save {path} as UTF-8",
    )


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Examples:
        >>> format_error("file not found")
        'Error: file not found'
    """
    return f"Error: {message}"


def format_field_error(entity: str, field: str, issue: str) -> str:
    """Format a field validation error with structured format.

    Examples:
        >>> format_field_error("Settings", "package_manager", "must be a string")
        "Settings field 'package_manager' must be a string"
    """
    return f"{entity} field '{field}' {issue}"


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Examples:
        >>> format_suggestion("module 'eslnt' not found", "did you mean: eslint?")
        "Error: module 'eslnt' not found. Hint: did you mean: eslint?"
    """
    return f"{format_error(message)}. Hint: {suggestion}"


def format_install_error(error: InstallError) -> str:
    """Render a classified error for the terminal, with its remediation."""
    if error.remediation:
        return format_suggestion(error.message, error.remediation)
    return format_error(error.message)


__all__ = [
    "ErrorKind",
    "InstallError",
    "InstallFailure",
    "UserCancelledError",
    "ProjectError",
    "classify_decode_error",
    "classify_os_error",
    "format_error",
    "format_field_error",
    "format_suggestion",
    "format_install_error",
]
