"""Testes da central de notificações e do log de atividades."""

from __future__ import annotations

import pytest

from nexa.collections import TRAININGS
from nexa.services.notifications import Notification, NotificationCenter, title_for
from nexa.sync.store import SynchronizedCollectionStore
from tests.fakes.fake_remote import FakeRemoteQuery
from utils.errors import (
    AuthorizationError,
    FetchError,
    MutationError,
    NotFoundError,
    ValidationError,
)


class TestTitleFor:
    """Título de acordo com o tipo de erro."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (AuthorizationError("x"), "Acesso negado"),
            (ValidationError("x"), "Dados inválidos"),
            (NotFoundError("x"), "Registro não encontrado"),
            (FetchError("x", operation="load"), "Erro ao carregar dados"),
            (MutationError("x", operation="remove"), "Erro ao excluir item"),
            (MutationError("x", operation="desconhecida"), "Erro"),
        ],
    )
    def test_titles(self, error: Exception, expected: str) -> None:
        assert title_for(error) == expected  # type: ignore[arg-type]


class TestNotificationCenter:
    """Notificações e atividades."""

    def test_notify_keeps_newest_first_and_bounded(self) -> None:
        center = NotificationCenter(max_notifications=2)
        center.notify("a")
        center.notify("b")
        center.notify("c")

        assert [n.title for n in center.notifications] == ["c", "b"]

    def test_subscribers_receive_notifications(self) -> None:
        center = NotificationCenter()
        received: list[Notification] = []
        unsubscribe = center.subscribe(received.append)

        center.notify_success("KPI salvo")
        unsubscribe()
        center.notify_success("ignorado")

        assert [n.title for n in received] == ["KPI salvo"]
        assert received[0].variant == "default"

    def test_activity_log_is_bounded(self) -> None:
        center = NotificationCenter(max_activities=2)
        center.record_activity("completed", "Treinamento concluído", "Ana")
        center.record_activity("alert", "KPI fora da meta")
        center.record_activity("success", "Processo aprovado", "Bruno")

        assert [a.title for a in center.activities] == ["Processo aprovado", "KPI fora da meta"]
        assert center.activities[0].actor == "Bruno"

    def test_invalid_limits(self) -> None:
        with pytest.raises(ValueError):
            NotificationCenter(max_activities=0)

    @pytest.mark.asyncio
    async def test_attached_store_errors_become_destructive_notifications(self) -> None:
        remote = FakeRemoteQuery({"trainings": [{"id": "t1", "title": "Segurança"}]})
        store = SynchronizedCollectionStore(TRAININGS, remote)
        await store.load()
        center = NotificationCenter()
        center.attach(store)
        remote.fail_on("delete")

        with pytest.raises(MutationError):
            await store.remove("t1")

        notification = center.notifications[0]
        assert notification.variant == "destructive"
        assert notification.title == "Erro ao excluir item"
        assert "Treinamentos" in notification.description

        center.detach_all()
        remote.fail_on("delete")
        with pytest.raises(MutationError):
            await store.remove("t1")
        assert len(center.notifications) == 1
