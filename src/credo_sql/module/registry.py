"""
Capability registry - maps named capabilities to exactly one provider.

The host owns the registry and hands it to modules at startup; there is
no global instance. Providers are classes or zero-argument factories.
"""

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from credo_sql.core.config import get_logger
from credo_sql.core.errors import CapabilityNotRegisteredError

logger = get_logger("module.registry")

Provider = Callable[[], Any]


class Capability(str, Enum):
    """Capabilities a module can provide."""
    STORAGE_SERVICE = "storage_service"
    WALLET = "wallet"


class Lifetime(str, Enum):
    """How often a provider is instantiated."""
    SINGLETON = "singleton"          # Once, cached for every resolve
    CONTEXT_SCOPED = "context_scoped"  # Once per resolve


def _key(name: Capability | str) -> str:
    return name.value if isinstance(name, Capability) else name


class CapabilityRegistry:
    """Registry of capability providers."""

    def __init__(self):
        self._providers: dict[str, tuple[Provider, Lifetime]] = {}
        self._instances: dict[str, Any] = {}

    def is_registered(self, name: Capability | str) -> bool:
        return _key(name) in self._providers

    def registered(self) -> list[str]:
        """Names of all registered capabilities, in registration order."""
        return list(self._providers)

    def register_singleton(self, name: Capability | str, provider: Provider) -> None:
        self._register(name, provider, Lifetime.SINGLETON)

    def register_context_scoped(self, name: Capability | str, provider: Provider) -> None:
        self._register(name, provider, Lifetime.CONTEXT_SCOPED)

    def _register(self, name: Capability | str, provider: Provider, lifetime: Lifetime) -> None:
        key = _key(name)
        self._providers[key] = (provider, lifetime)
        self._instances.pop(key, None)
        logger.debug(f"Registered {lifetime.value} provider for {key}")

    def resolve(self, name: Capability | str) -> Any:
        """
        Instantiate (or return the cached) provider for a capability.

        Raises:
            CapabilityNotRegisteredError: If nothing provides the capability.
        """
        key = _key(name)
        if key not in self._providers:
            raise CapabilityNotRegisteredError(f"No provider registered for {key}")

        provider, lifetime = self._providers[key]
        if lifetime is Lifetime.CONTEXT_SCOPED:
            return provider()
        if key not in self._instances:
            self._instances[key] = provider()
        return self._instances[key]


def find_conflicts(registry: CapabilityRegistry, names: Iterable[Capability | str]) -> list[str]:
    """Which of ``names`` already have a provider in ``registry``."""
    return [_key(name) for name in names if registry.is_registered(name)]
