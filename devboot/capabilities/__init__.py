"""Built-in capabilities and the registry that holds them."""

from .base import Capability, add_package_scripts
from .editorconfig import EditorConfigCapability
from .eslint import ESLintCapability
from .generators import ConfigGenerator, GeneratedConfig
from .prettier import PrettierCapability
from .registry import CapabilityRegistry, default_registry
from .typescript import TypeScriptCapability

__all__ = [
    "Capability",
    "ConfigGenerator",
    "GeneratedConfig",
    "CapabilityRegistry",
    "default_registry",
    "add_package_scripts",
    "EditorConfigCapability",
    "ESLintCapability",
    "PrettierCapability",
    "TypeScriptCapability",
]
