"""Registro de stores compartilhados.

Uma instância de store por (coleção, filtros), com contagem de
referências. Montar duas views da mesma coleção com os mesmos filtros
reaproveita o snapshot e a assinatura do feed; a última a desmontar
encerra o store. Remontar depois disso cria instância nova.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nexa.protocols.models import QueryCriteria
from nexa.sync.store import SynchronizedCollectionStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from nexa.protocols.change_feed import ChangeFeedProtocol
    from nexa.protocols.change_policy import ChangePolicyProtocol
    from nexa.protocols.remote_query import RemoteQueryProtocol
    from nexa.sync.collection import CollectionDefinition

logger = logging.getLogger(__name__)

StoreKey = tuple[str, QueryCriteria]


@dataclass
class _Entry:
    store: SynchronizedCollectionStore
    refcount: int = 0


class StoreRegistry:
    """Fábrica e dono dos stores ativos.

    Args:
        remote: Interface de consulta remota compartilhada
        feed: Feed de mudanças (None desativa realtime)
        policy_factory: Cria a política de cada store (padrão: refetch)
        channel_prefix: Prefixo dos canais de realtime
    """

    def __init__(
        self,
        remote: RemoteQueryProtocol,
        feed: ChangeFeedProtocol | None = None,
        *,
        policy_factory: Callable[[], ChangePolicyProtocol] | None = None,
        channel_prefix: str = "nexa",
    ) -> None:
        self._remote = remote
        self._feed = feed
        self._policy_factory = policy_factory
        self._channel_prefix = channel_prefix
        self._entries: dict[StoreKey, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def key_for(
        definition: CollectionDefinition,
        criteria: QueryCriteria | None = None,
    ) -> StoreKey:
        return (definition.name, criteria or QueryCriteria())

    def refcount(
        self,
        definition: CollectionDefinition,
        criteria: QueryCriteria | None = None,
    ) -> int:
        entry = self._entries.get(self.key_for(definition, criteria))
        return entry.refcount if entry else 0

    async def acquire(
        self,
        definition: CollectionDefinition,
        criteria: QueryCriteria | None = None,
    ) -> SynchronizedCollectionStore:
        """Obtém (ou cria e abre) o store da coleção.

        Raises:
            FetchError: Se a carga inicial falhar (a referência é liberada).
        """
        key = self.key_for(definition, criteria)
        entry = self._entries.get(key)
        if entry is None:
            store = SynchronizedCollectionStore(
                definition,
                self._remote,
                self._feed,
                criteria=key[1],
                policy=self._policy_factory() if self._policy_factory else None,
                channel_prefix=self._channel_prefix,
            )
            entry = _Entry(store=store)
            self._entries[key] = entry
            logger.info(
                "store_created",
                extra={"collection": definition.name, "criteria": key[1].describe()},
            )

        entry.refcount += 1
        try:
            await entry.store.open()
        except BaseException:
            await self.release(entry.store)
            raise
        return entry.store

    async def release(self, store: SynchronizedCollectionStore) -> None:
        """Libera uma referência; encerra o store na última."""
        for key, entry in self._entries.items():
            if entry.store is store:
                break
        else:
            logger.debug("release_unknown_store", extra={"collection": store.name})
            return

        entry.refcount -= 1
        if entry.refcount > 0:
            return
        del self._entries[key]
        await store.close()
        logger.info("store_released", extra={"collection": store.name})

    @asynccontextmanager
    async def use(
        self,
        definition: CollectionDefinition,
        criteria: QueryCriteria | None = None,
    ) -> AsyncIterator[SynchronizedCollectionStore]:
        """Monta o store durante o bloco (equivalente a montar uma view)."""
        store = await self.acquire(definition, criteria)
        try:
            yield store
        finally:
            await self.release(store)

    async def close_all(self) -> None:
        """Encerra todos os stores, independente das referências."""
        entries = list(self._entries.values())
        self._entries.clear()
        for entry in entries:
            await entry.store.close()
