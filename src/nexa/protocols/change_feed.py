"""Protocolo do feed de notificações de mudança (realtime)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nexa.protocols.models import ChangeNotification

ChangeHandler = Callable[["ChangeNotification"], None]


class FeedSubscription(ABC):
    """Assinatura ativa de um canal."""

    @abstractmethod
    async def unsubscribe(self) -> None:
        """Cancela a assinatura. Chamadas repetidas não têm efeito."""


class ChangeFeedProtocol(ABC):
    """Contrato de assinatura do feed de mudanças.

    Entrega é at-least-once e sem ordem entre tabelas; eventos não trazem
    a linha alterada. O handler é chamado no loop de eventos do consumidor.
    """

    @abstractmethod
    async def subscribe(
        self,
        channel: str,
        tables: frozenset[str],
        handler: ChangeHandler,
    ) -> FeedSubscription:
        """Assina mudanças das tabelas informadas.

        Args:
            channel: Nome do canal (único por consumidor)
            tables: Tabelas observadas
            handler: Callback síncrono chamado a cada evento

        Returns:
            FeedSubscription para cancelamento
        """
