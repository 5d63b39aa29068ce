"""Name-keyed capability registry."""

from .base import Capability
from .editorconfig import EditorConfigCapability
from .eslint import ESLintCapability
from .prettier import PrettierCapability
from .typescript import TypeScriptCapability


class CapabilityRegistry:
    """Capabilities by unique name, in registration order."""

    def __init__(self, capabilities: list[Capability] | None = None):
        self._capabilities: dict[str, Capability] = {}
        for capability in capabilities or []:
            self.register(capability)

    def register(self, capability: Capability) -> None:
        if not capability.name:
            raise ValueError(f"{type(capability).__name__} has no name")
        if capability.name in self._capabilities:
            raise ValueError(f"Capability '{capability.name}' is already registered")
        self._capabilities[capability.name] = capability

    def get(self, name: str) -> Capability | None:
        return self._capabilities.get(name)

    def names(self) -> list[str]:
        return list(self._capabilities)

    def all(self) -> list[Capability]:
        return list(self._capabilities.values())

    def __contains__(self, name: object) -> bool:
        return name in self._capabilities

    def __len__(self) -> int:
        return len(self._capabilities)


def default_registry() -> CapabilityRegistry:
    return CapabilityRegistry(
        [
            EditorConfigCapability(),
            ESLintCapability(),
            PrettierCapability(),
            TypeScriptCapability(),
        ]
    )


__all__ = ["CapabilityRegistry", "default_registry"]
