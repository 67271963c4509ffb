"""Notificações legíveis e log de atividades recentes.

Converte erros do canal lateral dos stores em avisos discretos (título,
descrição e variante) no padrão dos toasts do painel.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

from nexa.sync.listeners import ListenerSet, Unsubscribe
from utils.errors import (
    AuthorizationError,
    FetchError,
    NotFoundError,
    SyncError,
    ValidationError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from nexa.sync.store import SynchronizedCollectionStore

logger = logging.getLogger(__name__)

NotificationVariant = Literal["default", "destructive"]
ActivityType = Literal["completed", "pending", "alert", "success"]

DEFAULT_MAX_ACTIVITIES = 20
DEFAULT_MAX_NOTIFICATIONS = 50

_OPERATION_TITLES = {
    "load": "Erro ao carregar dados",
    "create": "Erro ao criar item",
    "update": "Erro ao atualizar item",
    "remove": "Erro ao excluir item",
    "record_value": "Erro ao registrar valor",
    "create_user": "Erro ao criar usuário",
}


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    description: str = ""
    variant: NotificationVariant = "default"
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True, slots=True)
class Activity:
    """Entrada do log de atividades (painel "Atividade Recente")."""

    kind: ActivityType
    title: str
    actor: str = ""
    created_at: datetime = field(default_factory=_now)


def title_for(error: SyncError) -> str:
    if isinstance(error, AuthorizationError):
        return "Acesso negado"
    if isinstance(error, ValidationError):
        return "Dados inválidos"
    if isinstance(error, NotFoundError):
        return "Registro não encontrado"
    if isinstance(error, FetchError):
        return _OPERATION_TITLES["load"]
    return _OPERATION_TITLES.get(error.operation, "Erro")


class NotificationCenter:
    """Central de notificações do painel.

    Args:
        max_activities: Tamanho do log de atividades
        max_notifications: Quantas notificações manter em memória
    """

    def __init__(
        self,
        max_activities: int = DEFAULT_MAX_ACTIVITIES,
        max_notifications: int = DEFAULT_MAX_NOTIFICATIONS,
    ) -> None:
        if max_activities <= 0 or max_notifications <= 0:
            raise ValueError("limites devem ser > 0")
        self._notifications: deque[Notification] = deque(maxlen=max_notifications)
        self._activities: deque[Activity] = deque(maxlen=max_activities)
        self._listeners = ListenerSet("notifications")
        self._detach: list[Unsubscribe] = []

    @property
    def notifications(self) -> tuple[Notification, ...]:
        """Mais recentes primeiro."""
        return tuple(reversed(self._notifications))

    @property
    def activities(self) -> tuple[Activity, ...]:
        """Mais recentes primeiro."""
        return tuple(reversed(self._activities))

    def subscribe(self, callback: Callable[[Notification], object]) -> Unsubscribe:
        return self._listeners.add(callback)

    def attach(self, store: SynchronizedCollectionStore) -> Unsubscribe:
        """Passa a notificar os erros do store."""
        unsubscribe = store.subscribe_errors(self.notify_error)
        self._detach.append(unsubscribe)
        return unsubscribe

    def detach_all(self) -> None:
        for unsubscribe in self._detach:
            unsubscribe()
        self._detach.clear()

    def notify(
        self,
        title: str,
        description: str = "",
        variant: NotificationVariant = "default",
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self._notifications.append(notification)
        self._listeners.notify(notification)
        return notification

    def notify_error(self, error: SyncError) -> Notification:
        """Notificação destrutiva para um erro de sincronização."""
        logger.debug("notification_for_error", extra=error.to_log_dict())
        return self.notify(title_for(error), error.user_message, "destructive")

    def notify_success(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description)

    def record_activity(self, kind: ActivityType, title: str, actor: str = "") -> Activity:
        activity = Activity(kind=kind, title=title, actor=actor)
        self._activities.append(activity)
        return activity
