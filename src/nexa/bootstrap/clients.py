"""Factory do cliente assíncrono do Supabase.

Um único cliente atende PostgREST, realtime e edge functions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.settings import SupabaseSettings, get_supabase_settings

if TYPE_CHECKING:
    from supabase import AsyncClient

logger = logging.getLogger(__name__)


async def create_supabase_async_client(settings: SupabaseSettings | None = None) -> AsyncClient:
    """Cria cliente assíncrono do Supabase com os timeouts configurados.

    Raises:
        ValueError: Se URL/chave não configuradas
    """
    settings = settings or get_supabase_settings()
    if not settings.url or not settings.anon_key:
        msg = "SUPABASE_URL/SUPABASE_ANON_KEY não configurados"
        raise ValueError(msg)

    from supabase import AsyncClientOptions, acreate_client

    options = AsyncClientOptions(
        postgrest_client_timeout=settings.request_timeout_seconds,
        function_client_timeout=int(settings.request_timeout_seconds),
    )
    client = await acreate_client(settings.url, settings.anon_key, options=options)
    logger.info("supabase_client_created", extra={"url_host": settings.url.split("//")[-1].split("/")[0]})
    return client
