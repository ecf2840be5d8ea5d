"""
Host integration - capability registry and the SQL wallet module.
"""

from credo_sql.module.registry import Capability, CapabilityRegistry, find_conflicts
from credo_sql.module.wallet_module import SQLWalletModule

__all__ = [
    "Capability",
    "CapabilityRegistry",
    "find_conflicts",
    "SQLWalletModule",
]
