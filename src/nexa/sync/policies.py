"""Políticas de reação a notificações de mudança."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nexa.protocols.change_policy import ChangePolicyProtocol

if TYPE_CHECKING:
    from nexa.protocols.models import ChangeNotification
    from nexa.sync.store import SynchronizedCollectionStore


class RefetchOnSignalPolicy(ChangePolicyProtocol):
    """Qualquer notificação relevante dispara refetch completo.

    O feed não traz o conteúdo da linha alterada: o store relê a coleção
    inteira. Refetches concorrentes são agrupados pelo store.
    """

    def handle(
        self,
        store: SynchronizedCollectionStore,
        notification: ChangeNotification,
    ) -> None:
        store.schedule_refetch(table=notification.table)
