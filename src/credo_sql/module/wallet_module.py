"""
SQL wallet module - registers the SQLite storage service with a host.

The module is the sole provider of the storage service and wallet
capabilities. Registering into a registry that already provides either
one fails before anything is registered.
"""

from credo_sql.core.config import get_logger
from credo_sql.core.errors import CapabilityAlreadyRegisteredError
from credo_sql.module.registry import (
    Capability,
    CapabilityRegistry,
    Provider,
    find_conflicts,
)
from credo_sql.storage.service import SQLiteStorageService

logger = get_logger("module.wallet")


class SQLWalletModule:
    """
    Host module wiring a wallet and the SQLite storage service.

    Args:
        wallet_provider: Factory for the wallet. Wallets are built per
            resolve (context scoped).
        storage_provider: Factory for the storage service, built once
            (singleton). Defaults to SQLiteStorageService on the
            configured database.
    """

    def __init__(
        self,
        wallet_provider: Provider,
        storage_provider: Provider = SQLiteStorageService,
    ):
        self.wallet_provider = wallet_provider
        self.storage_provider = storage_provider

    def register(self, registry: CapabilityRegistry) -> None:
        """
        Register both capabilities.

        Raises:
            CapabilityAlreadyRegisteredError: If either capability already
                has a provider. The registry is left unchanged.
        """
        conflicts = find_conflicts(registry, [Capability.WALLET, Capability.STORAGE_SERVICE])
        if conflicts:
            raise CapabilityAlreadyRegisteredError(conflicts[0])

        registry.register_context_scoped(Capability.WALLET, self.wallet_provider)
        registry.register_singleton(Capability.STORAGE_SERVICE, self.storage_provider)
        logger.info("Registered SQL wallet and SQLite storage service")
