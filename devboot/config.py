"""Settings loading and JSON-ish file parsing."""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from .errors import format_field_error
from .json_parser import preprocess_jsonish
from .paths import get_config_path


class ConfigError(Exception):
    """Raised when a settings or JSON-ish file cannot be loaded.

    Syntax errors carry the line number, the offending line and a caret.
    """

    pass


PACKAGE_MANAGER_NAMES = ("npm", "pnpm", "yarn", "bun")


@dataclass(frozen=True)
class Settings:
    """User-level defaults applied to every install."""

    package_manager: str | None = None
    skip_install: bool = False
    non_interactive: bool = False
    verbose: bool = False

    def __post_init__(self):
        if (
            self.package_manager is not None
            and self.package_manager not in PACKAGE_MANAGER_NAMES
        ):
            raise ValueError(
                f"package_manager must be one of: {', '.join(PACKAGE_MANAGER_NAMES)}"
            )


_BOOL_FIELDS = ("skip_install", "non_interactive", "verbose")


def validate_settings(data: dict) -> Settings:
    """Validate and convert a raw dict into Settings.

    Raises:
        ConfigError: If an unknown key is present or a field has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Settings must be a JSON object, got {type(data).__name__}")

    known = {"package_manager", *_BOOL_FIELDS}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

    package_manager = data.get("package_manager")
    if package_manager is not None and not isinstance(package_manager, str):
        raise ConfigError(
            format_field_error("Settings", "package_manager", "must be a string or null")
        )

    for field_name in _BOOL_FIELDS:
        if field_name in data and not isinstance(data[field_name], bool):
            raise ConfigError(format_field_error("Settings", field_name, "must be a boolean"))

    try:
        return Settings(
            package_manager=package_manager,
            **{name: data[name] for name in _BOOL_FIELDS if name in data},
        )
    except ValueError as e:
        raise ConfigError(f"Settings: {e}") from e


def _format_syntax_error(original_text: str, error: json.JSONDecodeError) -> str:
    lines = original_text.split("\n")
    msg_parts = [f"Syntax error at line {error.lineno}, col {error.colno}: {error.msg}"]

    if 1 <= error.lineno <= len(lines):
        msg_parts.append(lines[error.lineno - 1])
        msg_parts.append(" " * (error.colno - 1) + "^")

    return "\n".join(msg_parts)


def load_jsonish(path_or_text: Path | str) -> dict:
    """Load a JSON object from a file path or raw text.

    Comments and trailing commas are tolerated.

    Raises:
        ConfigError: If the file cannot be read, contains syntax errors, or
            does not hold a JSON object.
        TypeError: If path_or_text is neither Path nor str.
    """
    if isinstance(path_or_text, Path):
        try:
            original_text = path_or_text.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigError(f"File not found: {path_or_text}")
        except PermissionError:
            raise ConfigError(f"Permission denied reading file: {path_or_text}")
        except UnicodeDecodeError:
            raise ConfigError(f"File is not valid UTF-8: {path_or_text}")
        except OSError as e:
            raise ConfigError(f"Error reading file {path_or_text}: {e}")
    elif isinstance(path_or_text, str):
        original_text = path_or_text
    else:
        raise TypeError(
            f"path_or_text must be Path or str, got {type(path_or_text).__name__}"
        )

    try:
        result = json.loads(preprocess_jsonish(original_text))
    except json.JSONDecodeError as e:
        raise ConfigError(_format_syntax_error(original_text, e)) from e

    if not isinstance(result, dict):
        raise ConfigError(f"Expected a JSON object, got {type(result).__name__}")

    return result


def load_settings(path: Path | None = None) -> Settings:
    """Load user settings; a missing file means defaults."""
    settings_path = path or get_config_path()
    if not settings_path.exists():
        return Settings()
    return validate_settings(load_jsonish(settings_path))


def is_non_interactive(requested: bool = False) -> bool:
    """Whether content generation must run without prompting."""
    if requested:
        return True
    if os.environ.get("CI", "").lower() == "true":
        return True
    return not sys.stdin.isatty()


__all__ = [
    "ConfigError",
    "Settings",
    "PACKAGE_MANAGER_NAMES",
    "validate_settings",
    "load_jsonish",
    "load_settings",
    "is_non_interactive",
]
