"""Agregador de settings do painel Nexa.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    SyncBackend,
    SyncSettings,
    get_base_settings,
    get_sync_settings,
)
from config.settings.infra import (
    SupabaseSettings,
    get_supabase_settings,
)

__all__ = [
    # Base
    "BaseSettings",
    "Environment",
    # Infrastructure
    "SupabaseSettings",
    "SyncBackend",
    "SyncSettings",
    "get_base_settings",
    "get_supabase_settings",
    "get_sync_settings",
    "validate_all",
]


def validate_all() -> list[str]:
    """Valida todas as settings carregadas do ambiente.

    Settings do Supabase só são exigidas quando o backend é supabase.

    Returns:
        Lista consolidada de erros (vazia = OK).
    """
    base = get_base_settings()
    sync = get_sync_settings()
    errors = [*base.validate(), *sync.validate(base)]
    if sync.backend == "supabase":
        errors.extend(get_supabase_settings().validate())
    return errors
