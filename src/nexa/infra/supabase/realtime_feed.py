"""Feed de mudanças sobre o realtime do Supabase (postgres_changes).

Um canal por store, com uma inscrição `postgres_changes` por tabela
observada. O payload do evento é usado apenas para identificar tabela e
tipo; o conteúdo da linha é ignorado.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nexa.protocols.change_feed import ChangeFeedProtocol, FeedSubscription
from nexa.protocols.models import ChangeNotification, EventKind
from utils.errors import ChangeFeedError

if TYPE_CHECKING:
    from collections.abc import Callable

    from supabase import AsyncClient

    from nexa.protocols.change_feed import ChangeHandler

logger = logging.getLogger(__name__)


def parse_change_payload(
    payload: Any,
    default_table: str,
    default_schema: str,
) -> ChangeNotification:
    """Extrai tabela/schema/tipo de um payload de postgres_changes.

    Aceita o formato aninhado ({"data": {...}}) e o plano; campos ausentes
    caem nos valores da inscrição.
    """
    data: Any = payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        data = payload["data"]
    if not isinstance(data, dict):
        return ChangeNotification(table=default_table, schema=default_schema)

    raw_kind = data.get("type") or data.get("eventType")
    return ChangeNotification(
        table=str(data.get("table") or default_table),
        event_kind=EventKind.parse(str(raw_kind) if raw_kind else None),
        schema=str(data.get("schema") or default_schema),
    )


class _RealtimeSubscription(FeedSubscription):
    def __init__(self, client: AsyncClient, channel: Any, name: str) -> None:
        self._client = client
        self._channel = channel
        self._name = name
        self._active = True

    async def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        try:
            await self._client.remove_channel(self._channel)
        except Exception as exc:
            raise ChangeFeedError(f"Falha ao remover canal {self._name}") from exc
        logger.info("realtime_channel_removed", extra={"channel": self._name})


class SupabaseChangeFeed(ChangeFeedProtocol):
    """Assina postgres_changes das tabelas informadas.

    Args:
        client: Cliente assíncrono do Supabase (supabase.acreate_client)
        schema: Schema das tabelas observadas
    """

    def __init__(self, client: AsyncClient, *, schema: str = "public") -> None:
        self._client = client
        self._schema = schema

    def _callback_for(self, table: str, channel: str, handler: ChangeHandler) -> Callable[[Any], None]:
        def on_change(payload: Any) -> None:
            notification = parse_change_payload(payload, table, self._schema)
            logger.debug(
                "realtime_change_received",
                extra={
                    "channel": channel,
                    "table": notification.table,
                    "event_kind": notification.event_kind,
                },
            )
            handler(notification)

        return on_change

    async def subscribe(
        self,
        channel: str,
        tables: frozenset[str],
        handler: ChangeHandler,
    ) -> FeedSubscription:
        try:
            realtime_channel = self._client.channel(channel)
            for table in sorted(tables):
                realtime_channel.on_postgres_changes(
                    "*",
                    schema=self._schema,
                    table=table,
                    callback=self._callback_for(table, channel, handler),
                )
            await realtime_channel.subscribe()
        except Exception as exc:
            raise ChangeFeedError(f"Falha ao assinar canal {channel}") from exc

        logger.info(
            "realtime_channel_subscribed",
            extra={"channel": channel, "tables": sorted(tables), "schema": self._schema},
        )
        return _RealtimeSubscription(self._client, realtime_channel, channel)
