"""Settings da camada de sincronização de coleções.

Define o backend de dados (memória para dev/test, Supabase nos demais)
e o comportamento do feed de mudanças.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

SyncBackend = Literal["memory", "supabase"]


@dataclass(frozen=True)
class SyncSettings:
    """Configurações de sincronização.

    Attributes:
        backend: Backend de dados (memory|supabase)
        realtime_enabled: Assinar feed de mudanças em tempo real
        db_schema: Schema das tabelas observadas
        channel_prefix: Prefixo dos canais de realtime
    """

    backend: SyncBackend = "memory"
    realtime_enabled: bool = True
    db_schema: str = "public"
    channel_prefix: str = "nexa"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de sincronização.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "supabase"):
            errors.append(f"SYNC_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append("SYNC_BACKEND=memory proibido em staging/production")

        if not self.db_schema:
            errors.append("SYNC_DB_SCHEMA não pode ser vazio")

        if not self.channel_prefix:
            errors.append("SYNC_CHANNEL_PREFIX não pode ser vazio")

        return errors


def _load_sync_from_env() -> SyncSettings:
    """Carrega SyncSettings de variáveis de ambiente."""
    backend_str = os.getenv("SYNC_BACKEND", "memory").lower()
    backend: SyncBackend = backend_str if backend_str in ("memory", "supabase") else "memory"
    return SyncSettings(
        backend=backend,
        realtime_enabled=os.getenv("SYNC_REALTIME_ENABLED", "true").lower() in ("true", "1"),
        db_schema=os.getenv("SYNC_DB_SCHEMA", "public"),
        channel_prefix=os.getenv("SYNC_CHANNEL_PREFIX", "nexa"),
    )


@lru_cache(maxsize=1)
def get_sync_settings() -> SyncSettings:
    """Retorna instância cacheada de SyncSettings."""
    return _load_sync_from_env()
