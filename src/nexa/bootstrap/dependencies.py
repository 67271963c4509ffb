"""Factories da camada de sincronização com as implementações concretas.

Centraliza a criação de remote query, feed de mudanças, endpoint
privilegiado e registro de stores a partir das configurações.

Backends (SYNC_BACKEND):
- "memory": MemoryRemoteQuery + MemoryChangeFeed (dev only)
- "supabase": PostgREST + realtime + edge functions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from config.logging import configure_logging
from config.settings import (
    BaseSettings,
    SupabaseSettings,
    SyncSettings,
    get_base_settings,
    get_supabase_settings,
    get_sync_settings,
)
from nexa.bootstrap.clients import create_supabase_async_client
from nexa.infra.memory import MemoryChangeFeed, MemoryPrivilegedEndpoint, MemoryRemoteQuery
from nexa.infra.supabase import PostgrestRemoteQuery, SupabaseChangeFeed, SupabaseFunctionsClient
from nexa.observability import get_correlation_id
from nexa.services import NotificationCenter
from nexa.sync import StoreRegistry

if TYPE_CHECKING:
    from nexa.protocols import ChangeFeedProtocol, PrivilegedEndpointProtocol, RemoteQueryProtocol

logger = logging.getLogger(__name__)


@dataclass
class SyncContainer:
    """Dependências montadas para uma sessão do painel."""

    remote: RemoteQueryProtocol
    feed: ChangeFeedProtocol | None
    privileged: PrivilegedEndpointProtocol
    registry: StoreRegistry
    notifications: NotificationCenter = field(default_factory=NotificationCenter)

    async def aclose(self) -> None:
        """Encerra todos os stores e desanexa notificações."""
        self.notifications.detach_all()
        await self.registry.close_all()


def setup_logging(settings: BaseSettings | None = None) -> None:
    """Configura logging JSON com correlation_id do contexto."""
    settings = settings or get_base_settings()
    configure_logging(
        level=settings.log_level,
        service_name=settings.service_name,
        correlation_id_getter=get_correlation_id,
        environment=settings.environment,
    )


def validate_settings(
    base: BaseSettings,
    sync: SyncSettings,
    supabase: SupabaseSettings,
) -> list[str]:
    errors = base.validate() + sync.validate(base)
    if sync.backend == "supabase":
        errors += supabase.validate()
    return errors


def create_memory_backend(
    *,
    realtime: bool = True,
    schema: str = "public",
    admin_tokens: tuple[str, ...] = (),
) -> tuple[MemoryRemoteQuery, MemoryChangeFeed | None, MemoryPrivilegedEndpoint]:
    """Backend em memória interligado (escritas publicam no feed)."""
    feed = MemoryChangeFeed() if realtime else None
    remote = MemoryRemoteQuery(feed, schema=schema)
    return remote, feed, MemoryPrivilegedEndpoint(remote, admin_tokens)


async def build_container(
    base: BaseSettings | None = None,
    sync: SyncSettings | None = None,
    supabase: SupabaseSettings | None = None,
) -> SyncContainer:
    """Monta as dependências conforme SYNC_BACKEND.

    Raises:
        ValueError: Se as configurações forem inválidas.
    """
    base = base or get_base_settings()
    sync = sync or get_sync_settings()
    supabase = supabase or get_supabase_settings()

    errors = validate_settings(base, sync, supabase)
    if errors:
        msg = f"Configuração inválida: {'; '.join(errors)}"
        raise ValueError(msg)

    remote: RemoteQueryProtocol
    feed: ChangeFeedProtocol | None
    privileged: PrivilegedEndpointProtocol

    if sync.backend == "memory":
        remote, feed, privileged = create_memory_backend(
            realtime=sync.realtime_enabled,
            schema=sync.db_schema,
        )
    else:
        client = await create_supabase_async_client(supabase)
        remote = PostgrestRemoteQuery(client)
        privileged = SupabaseFunctionsClient(client)
        feed = SupabaseChangeFeed(client, schema=sync.db_schema) if sync.realtime_enabled else None

    registry = StoreRegistry(remote, feed, channel_prefix=sync.channel_prefix)
    logger.info(
        "sync_container_created",
        extra={
            "backend": sync.backend,
            "realtime": feed is not None,
            "environment": base.environment,
        },
    )
    return SyncContainer(remote=remote, feed=feed, privileged=privileged, registry=registry)
