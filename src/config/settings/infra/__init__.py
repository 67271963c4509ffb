"""Agregador de settings de infraestrutura.

Re-exporta as settings da plataforma hospedada.
"""

from __future__ import annotations

from config.settings.infra.supabase import (
    SupabaseSettings,
    get_supabase_settings,
)

__all__ = [
    "SupabaseSettings",
    "get_supabase_settings",
]
