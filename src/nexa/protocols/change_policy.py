"""Protocolo da política de reação a notificações de mudança."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nexa.protocols.models import ChangeNotification
    from nexa.sync.store import SynchronizedCollectionStore


class ChangePolicyProtocol(ABC):
    """Decide como um store reage a uma notificação relevante.

    O store já descartou notificações de tabelas que não observa; a
    política só decide a forma de reconciliação (ex: refetch completo).
    """

    @abstractmethod
    def handle(
        self,
        store: SynchronizedCollectionStore,
        notification: ChangeNotification,
    ) -> None:
        """Reage à notificação sem bloquear o loop."""
