"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.sync import (
    SyncBackend,
    SyncSettings,
    get_sync_settings,
)

__all__ = [
    # Core
    "BaseSettings",
    # Types
    "Environment",
    "SyncBackend",
    # Sync
    "SyncSettings",
    "get_base_settings",
    "get_sync_settings",
]
