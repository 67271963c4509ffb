"""Testes de reação a mudanças externas (feed de realtime)."""

from __future__ import annotations

import asyncio

import pytest

from fsm import CollectionState
from nexa.collections import KPIS, TRAININGS
from nexa.protocols.models import EventKind
from nexa.sync.store import SynchronizedCollectionStore
from tests.fakes.fake_remote import FakeChangeFeed, FakeRemoteQuery
from utils.errors import SyncError


@pytest.fixture
def remote() -> FakeRemoteQuery:
    return FakeRemoteQuery({
        "trainings": [{"id": "t1", "title": "Segurança", "participants": 2}],
        "kpis": [{"id": "1", "name": "Produtividade", "current": 87, "target": 90, "kpi_history": []}],
    })


@pytest.fixture
def feed() -> FakeChangeFeed:
    return FakeChangeFeed()


class TestRefetchOnSignal:
    """Sinal do feed dispara refetch completo."""

    @pytest.mark.asyncio
    async def test_change_on_watched_table_refetches(
        self,
        remote: FakeRemoteQuery,
        feed: FakeChangeFeed,
    ) -> None:
        store = SynchronizedCollectionStore(TRAININGS, remote, feed)
        await store.open()
        remote.tables["trainings"].append({"id": "t2", "title": "Liderança"})

        assert feed.emit("trainings", EventKind.INSERT) == 1
        await store.wait_idle()

        assert [r.id for r in store.snapshot] == ["t1", "t2"]
        assert len(remote.calls_for("select")) == 2

    @pytest.mark.asyncio
    async def test_related_table_triggers_refetch(
        self,
        remote: FakeRemoteQuery,
        feed: FakeChangeFeed,
    ) -> None:
        """Nova medição em kpi_history recarrega KPIs."""
        store = SynchronizedCollectionStore(KPIS, remote, feed)
        await store.open()
        remote.tables["kpis"][0]["kpi_history"] = [{"recorded_at": "2026-03-01", "value": 91}]

        feed.emit("kpi_history", EventKind.INSERT)
        await store.wait_idle()

        kpi = store.get("1")
        assert kpi is not None
        assert [p.value for p in kpi.history] == [91]  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_unwatched_table_is_ignored(self, remote: FakeRemoteQuery) -> None:
        """Notificação de outra tabela não causa carga."""
        store = SynchronizedCollectionStore(TRAININGS, remote)
        await store.load()

        store.on_external_change("kpis", EventKind.UPDATE)
        await store.wait_idle()

        assert len(remote.calls_for("select")) == 1

    @pytest.mark.asyncio
    async def test_other_schema_is_ignored(
        self,
        remote: FakeRemoteQuery,
        feed: FakeChangeFeed,
    ) -> None:
        store = SynchronizedCollectionStore(TRAININGS, remote, feed)
        await store.open()

        feed.emit("trainings", EventKind.UPDATE, schema="audit")
        await store.wait_idle()

        assert len(remote.calls_for("select")) == 1


class TestCoalescing:
    """Sinais durante um refetch são agrupados em uma carga seguinte."""

    @pytest.mark.asyncio
    async def test_burst_of_signals_results_in_two_loads(
        self,
        remote: FakeRemoteQuery,
        feed: FakeChangeFeed,
    ) -> None:
        store = SynchronizedCollectionStore(TRAININGS, remote, feed)
        await store.open()

        gate = remote.hold("select")
        feed.emit("trainings")
        await asyncio.sleep(0)
        feed.emit("trainings")
        feed.emit("trainings")
        feed.emit("trainings")
        gate.set()
        await store.wait_idle()

        # carga inicial + refetch em andamento + um refetch agrupado
        assert len(remote.calls_for("select")) == 3
        assert store.state == CollectionState.READY


class TestConvergence:
    """Snapshot converge para o servidor mesmo com respostas fora de ordem."""

    @pytest.mark.asyncio
    async def test_slow_manual_load_does_not_overwrite_newer_refetch(
        self,
        remote: FakeRemoteQuery,
        feed: FakeChangeFeed,
    ) -> None:
        store = SynchronizedCollectionStore(TRAININGS, remote, feed)
        await store.open()

        gate = remote.hold("select")
        manual = asyncio.create_task(store.load())
        await asyncio.sleep(0)

        remote.tables["trainings"] = [
            {"id": "t1", "title": "Segurança", "participants": 2, "completed": 2},
            {"id": "t5", "title": "Ergonomia"},
        ]
        feed.emit("trainings", EventKind.UPDATE)
        feed.emit("trainings", EventKind.INSERT)
        await store.wait_idle()

        gate.set()
        await manual
        await store.wait_idle()

        assert [(r.id, r.completed) for r in store.snapshot] == [("t1", 2), ("t5", 0)]  # type: ignore[attr-defined]
        assert store.state == CollectionState.READY


class TestRefetchFailure:
    """Falha em refetch disparado pelo feed mantém o snapshot."""

    @pytest.mark.asyncio
    async def test_failed_background_refetch_keeps_snapshot(
        self,
        remote: FakeRemoteQuery,
        feed: FakeChangeFeed,
    ) -> None:
        store = SynchronizedCollectionStore(TRAININGS, remote, feed)
        await store.open()
        before = store.snapshot
        errors: list[SyncError] = []
        store.subscribe_errors(errors.append)
        remote.fail_on("select")

        feed.emit("trainings")
        await store.wait_idle()

        assert store.snapshot == before
        assert store.state == CollectionState.ERRORED
        assert store.last_error is not None
        # Sem notificação ao usuário para cargas em background
        assert errors == []

        feed.emit("trainings")
        await store.wait_idle()
        assert store.state == CollectionState.READY
        assert store.last_error is None
