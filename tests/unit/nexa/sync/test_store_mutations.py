"""Testes de mutações otimistas: create, update, remove e rollback."""

from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio

from nexa.collections import KPIS, PARETO, TRAININGS
from nexa.domain.base import is_temp_id
from nexa.sync.store import SynchronizedCollectionStore
from tests.fakes.fake_remote import FakeRemoteQuery
from utils.errors import MutationError, NotFoundError, SyncError, ValidationError


@pytest.fixture
def remote() -> FakeRemoteQuery:
    return FakeRemoteQuery({
        "trainings": [
            {"id": "t1", "title": "Segurança", "participants": 10, "completed": 4},
            {"id": "t2", "title": "Liderança", "participants": 5, "completed": 1},
            {"id": "t3", "title": "Qualidade", "participants": 8, "completed": 8},
        ],
        "kpis": [{"id": "1", "name": "Produtividade", "current": 87, "target": 90}],
    })


@pytest_asyncio.fixture
async def store(remote: FakeRemoteQuery) -> SynchronizedCollectionStore:
    store = SynchronizedCollectionStore(TRAININGS, remote)
    await store.load()
    return store


def _ids(store: SynchronizedCollectionStore) -> list[str]:
    return [r.id for r in store.snapshot]


class TestCreate:
    """Criação otimista com id temporário."""

    @pytest.mark.asyncio
    async def test_optimistic_record_visible_before_confirmation(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Registro temporário aparece antes do servidor responder."""
        gate = remote.hold("insert")
        task = asyncio.create_task(store.create({"title": "Novo", "participants": 3}))
        await asyncio.sleep(0)

        temp = [r for r in store.snapshot if is_temp_id(r.id)]
        assert len(temp) == 1
        assert temp[0].title == "Novo"  # type: ignore[attr-defined]
        assert store.pending_count == 1

        # Listener adicionado agora recebe o snapshot com o otimista
        seen: list[int] = []
        store.subscribe(lambda: seen.append(len(store.snapshot)), replay=True)
        assert seen == [4]

        gate.set()
        confirmed = await task

        assert confirmed.id == "srv-1"
        # Ordenação por título, como o servidor devolveria
        assert confirmed.participants == 3  # type: ignore[attr-defined]
        assert _ids(store) == ["t2", "srv-1", "t3", "t1"]
        assert store.pending_count == 0
        assert not any(is_temp_id(r.id) for r in store.snapshot)
        assert seen[-1] == 4

    @pytest.mark.asyncio
    async def test_only_payload_fields_are_sent(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Id temporário e defaults não vão para o servidor."""
        await store.create({"title": "Novo"})

        sent = remote.calls_for("insert")[0].args["row"]
        assert sent == {"title": "Novo"}

    @pytest.mark.asyncio
    async def test_rejected_create_removes_optimistic_record(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Falha remota: otimista removido e MutationError."""
        before = store.snapshot
        errors: list[SyncError] = []
        store.subscribe_errors(errors.append)
        remote.fail_on("insert")

        with pytest.raises(MutationError) as exc_info:
            await store.create({"title": "Novo"})

        assert store.snapshot == before
        assert store.pending_count == 0
        assert exc_info.value.operation == "create"
        assert errors == [exc_info.value]

    @pytest.mark.asyncio
    async def test_invalid_payload_makes_no_remote_call(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Violação de esquema é detectada localmente."""
        with pytest.raises(ValidationError) as exc_info:
            await store.create({"title": "Novo", "participants": 1, "completed": 5})

        assert remote.calls_for("insert") == []
        assert store.pending_count == 0
        assert exc_info.value.errors

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await store.create({"title": "Novo", "id": "forjado"})

        assert exc_info.value.errors == ["id: campo não gravável"]
        assert remote.calls_for("insert") == []


    @pytest.mark.asyncio
    async def test_confirmed_record_takes_its_ordered_position(self, remote: FakeRemoteQuery) -> None:
        """Pareto ordena por frequência decrescente; o confirmado entra no lugar certo."""
        remote.tables["visual_pareto_items"] = [
            {"id": "p1", "cause": "Atraso de fornecedor", "frequency": 10},
            {"id": "p2", "cause": "Falha de máquina", "frequency": 3},
        ]
        store = SynchronizedCollectionStore(PARETO, remote)
        await store.load()

        await store.create({"cause": "Retrabalho", "frequency": 7})

        assert _ids(store) == ["p1", "srv-1", "p2"]


class TestUpdate:
    """Atualização otimista e rollback exato."""

    @pytest.mark.asyncio
    async def test_update_applies_immediately_and_confirms(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        gate = remote.hold("update")
        task = asyncio.create_task(store.update("t1", {"completed": 9}))
        await asyncio.sleep(0)

        assert store.get("t1").completed == 9  # type: ignore[union-attr]
        gate.set()
        await task

        assert store.get("t1").completed == 9  # type: ignore[union-attr]
        assert store.pending_count == 0
        assert remote.calls_for("update")[0].args == {"id": "t1", "delta": {"completed": 9}}

    @pytest.mark.asyncio
    async def test_failed_update_restores_previous_snapshot(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Snapshot volta a ser exatamente o anterior."""
        before = store.snapshot
        remote.fail_on("update")

        with pytest.raises(MutationError) as exc_info:
            await store.update("t2", {"title": "Liderança 2"})

        assert store.snapshot == before
        assert exc_info.value.target_id == "t2"
        assert isinstance(exc_info.value.__cause__, Exception)

    @pytest.mark.asyncio
    async def test_failure_reverts_only_its_own_effect(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Mutações concorrentes: a que falha não desfaz a outra."""
        first_gate = remote.hold("update")
        remote.fail_on("update")
        failing = asyncio.create_task(store.update("t1", {"completed": 7}))
        await asyncio.sleep(0)

        await store.update("t1", {"title": "Segurança 2"})
        first_gate.set()
        with pytest.raises(MutationError):
            await failing

        record = store.get("t1")
        assert record is not None
        assert record.title == "Segurança 2"  # type: ignore[attr-defined]
        assert record.completed == 4  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_missing_id_raises_not_found(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Id ausente: NotFoundError sem chamada remota."""
        with pytest.raises(NotFoundError) as exc_info:
            await store.update("nope", {"title": "x"})

        assert exc_info.value.target_id == "nope"
        assert remote.calls_for("update") == []

    @pytest.mark.asyncio
    async def test_unconfirmed_record_cannot_be_updated(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Registro com id temporário recusa update."""
        gate = remote.hold("insert")
        task = asyncio.create_task(store.create({"title": "Novo"}))
        await asyncio.sleep(0)
        temp_id = next(r.id for r in store.snapshot if is_temp_id(r.id))

        with pytest.raises(MutationError):
            await store.update(temp_id, {"title": "Outro"})
        assert remote.calls_for("update") == []

        gate.set()
        await task

    @pytest.mark.asyncio
    async def test_empty_delta_rejected(self, store: SynchronizedCollectionStore) -> None:
        with pytest.raises(ValidationError):
            await store.update("t1", {})

    @pytest.mark.asyncio
    async def test_invalid_merge_rejected_locally(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Delta que torna o registro inválido não chega ao servidor."""
        before = store.snapshot
        with pytest.raises(ValidationError):
            await store.update("t2", {"completed": 50})

        assert store.snapshot == before
        assert remote.calls_for("update") == []


class TestRemove:
    """Remoção otimista e re-inserção em falha."""

    @pytest.mark.asyncio
    async def test_remove_hides_record_until_confirmed(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        gate = remote.hold("delete")
        task = asyncio.create_task(store.remove("t2"))
        await asyncio.sleep(0)
        assert _ids(store) == ["t1", "t3"]

        gate.set()
        await task
        assert _ids(store) == ["t1", "t3"]
        assert store.pending_count == 0

    @pytest.mark.asyncio
    async def test_failed_remove_restores_record_in_place(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        """Registro volta na mesma posição."""
        before = store.snapshot
        remote.fail_on("delete")

        with pytest.raises(MutationError) as exc_info:
            await store.remove("t2")

        assert store.snapshot == before
        assert _ids(store) == ["t1", "t2", "t3"]
        assert exc_info.value.operation == "remove"

    @pytest.mark.asyncio
    async def test_remove_missing_id(
        self,
        store: SynchronizedCollectionStore,
        remote: FakeRemoteQuery,
    ) -> None:
        with pytest.raises(NotFoundError):
            await store.remove("nope")
        assert remote.calls_for("delete") == []


class TestKpiUpdate:
    """Atualização de KPI reflete no snapshot."""

    @pytest.mark.asyncio
    async def test_current_and_target_updated(self, remote: FakeRemoteQuery) -> None:
        store = SynchronizedCollectionStore(KPIS, remote)
        await store.load()

        await store.update("1", {"current": 92, "target": 95})

        kpi = store.get("1")
        assert kpi is not None
        assert (kpi.current, kpi.target) == (92, 95)  # type: ignore[attr-defined]
        assert remote.tables["kpis"][0]["current"] == 92

    @pytest.mark.asyncio
    async def test_history_is_not_writable(self, remote: FakeRemoteQuery) -> None:
        store = SynchronizedCollectionStore(KPIS, remote)
        await store.load()

        with pytest.raises(ValidationError) as exc_info:
            await store.update("1", {"history": []})
        assert exc_info.value.errors == ["history: campo não gravável"]

    @pytest.mark.asyncio
    async def test_rejected_update_reverts_and_reload_agrees(self, remote: FakeRemoteQuery) -> None:
        """92 aparece antes da resposta; a rejeição volta para 87 e o reload confirma."""
        store = SynchronizedCollectionStore(KPIS, remote)
        await store.load()
        seen: list[int] = []
        errors: list[SyncError] = []
        store.subscribe(lambda: seen.append(store.get("1").current))  # type: ignore[union-attr]
        store.subscribe_errors(errors.append)

        gate = remote.hold("update")
        remote.fail_on("update")
        task = asyncio.create_task(store.update("1", {"current": 92}))
        await asyncio.sleep(0)
        assert seen == [92]

        gate.set()
        with pytest.raises(MutationError):
            await task

        assert seen == [92, 87]
        assert len(errors) == 1
        assert isinstance(errors[0], MutationError)
        assert errors[0].target_id == "1"

        await store.load()
        assert store.get("1").current == 87  # type: ignore[union-attr]
