"""Store sincronizado de uma coleção remota.

Mantém snapshot local observável, consistente com o servidor:
- Carga completa com filtros (load/refetch)
- Mutações otimistas com rollback exato em falha
- Refetch disparado pelo feed de mudanças (agrupado)
- Canal lateral de erros para a camada de notificação

O snapshot é sempre "linhas conhecidas do servidor" com as mutações
pendentes reaplicadas em ordem (ver nexa.sync.mutations).
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, NoReturn
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from config.logging import log_fallback
from fsm import CollectionState, create_fsm
from nexa.domain.base import is_temp_id, new_temp_id
from nexa.observability import correlation_scope, record_latency, record_refetch, record_rollback
from nexa.protocols.models import ChangeNotification, EventKind, QueryCriteria
from nexa.sync.collection import R
from nexa.sync.listeners import ListenerSet, Unsubscribe
from nexa.sync.mutations import MutationKind, PendingLog, PendingMutation, materialize, merge_record
from nexa.sync.policies import RefetchOnSignalPolicy
from utils.errors import (
    FetchError,
    InfrastructureError,
    MutationError,
    NotFoundError,
    SyncError,
    ValidationError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from nexa.protocols.change_feed import ChangeFeedProtocol, FeedSubscription
    from nexa.protocols.change_policy import ChangePolicyProtocol
    from nexa.protocols.remote_query import RemoteQueryProtocol, Row
    from nexa.sync.collection import CollectionDefinition

logger = logging.getLogger(__name__)

_OPERATION_VERBS = {
    MutationKind.CREATE: "criar",
    MutationKind.UPDATE: "atualizar",
    MutationKind.DELETE: "remover",
}

_OPERATION_NAMES = {
    MutationKind.CREATE: "create",
    MutationKind.UPDATE: "update",
    MutationKind.DELETE: "remove",
}


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _describe_pydantic_errors(exc: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'registro'}: {err['msg']}"
        for err in exc.errors()
    ]


class SynchronizedCollectionStore(Generic[R]):
    """Snapshot observável de uma coleção remota.

    Args:
        definition: Metadados da coleção
        remote: Interface de consulta remota
        feed: Feed de mudanças (None desativa realtime)
        criteria: Filtros iniciais
        policy: Política de reação a mudanças externas
        channel_prefix: Prefixo do nome do canal de realtime
    """

    def __init__(
        self,
        definition: CollectionDefinition[R],
        remote: RemoteQueryProtocol,
        feed: ChangeFeedProtocol | None = None,
        *,
        criteria: QueryCriteria | None = None,
        policy: ChangePolicyProtocol | None = None,
        channel_prefix: str = "nexa",
    ) -> None:
        self._definition = definition
        self._remote = remote
        self._feed = feed
        self._criteria = criteria or QueryCriteria()
        self._policy = policy or RefetchOnSignalPolicy()
        self._channel = f"{channel_prefix}_{definition.name}_{uuid4().hex[:8]}"

        self._fsm = create_fsm(definition.name)
        self._server_rows: dict[str, R] = {}
        self._pending = PendingLog()
        self._snapshot: tuple[R, ...] = ()
        self._listeners = ListenerSet(f"{definition.name}:data")
        self._error_listeners = ListenerSet(f"{definition.name}:errors")

        self._feed_subscription: FeedSubscription | None = None
        self._opened = False
        self._closed = False
        self._last_error: SyncError | None = None

        # Ordenação de cargas: resposta mais antiga que a última aplicada é descartada
        self._load_seq = 0
        self._applied_seq = 0
        self._inflight_loads = 0
        self._load_failed = False

        self._refetch_task: asyncio.Task[None] | None = None
        self._refetch_requested = False

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------

    @property
    def definition(self) -> CollectionDefinition[R]:
        return self._definition

    @property
    def name(self) -> str:
        return self._definition.name

    @property
    def channel_name(self) -> str:
        return self._channel

    @property
    def snapshot(self) -> tuple[R, ...]:
        """Registros visíveis (servidor + mutações pendentes)."""
        return self._snapshot

    @property
    def state(self) -> CollectionState:
        return self._fsm.current_state

    @property
    def criteria(self) -> QueryCriteria:
        """Filtros usados na última carga (e nos refetches)."""
        return self._criteria

    @property
    def last_error(self) -> SyncError | None:
        return self._last_error

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def is_active(self) -> bool:
        """False depois de close(); resoluções tardias não têm efeito."""
        return not self._closed

    @property
    def is_loading(self) -> bool:
        return self.state == CollectionState.LOADING

    def get(self, record_id: str) -> R | None:
        for record in self._snapshot:
            if record.id == record_id:
                return record
        return None

    def state_summary(self) -> dict[str, Any]:
        """Resumo seguro para logs/diagnóstico."""
        return {
            **self._fsm.get_state_summary(),
            "rows": len(self._snapshot),
            "pending": len(self._pending),
            "criteria": self._criteria.describe(),
            "active": self.is_active,
        }

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------

    async def open(self) -> tuple[R, ...]:
        """Assina o feed e faz a carga inicial. Idempotente.

        Raises:
            FetchError: Se a carga inicial falhar.
        """
        self._ensure_active()
        if self._opened:
            return self._snapshot
        self._opened = True

        if self._feed is not None:
            try:
                subscription = await self._feed.subscribe(
                    self._channel,
                    self._definition.watched_tables,
                    self._on_feed_event,
                )
            except InfrastructureError:
                logger.warning(
                    "change_feed_unavailable",
                    extra={"collection": self.name, "channel": self._channel},
                    exc_info=True,
                )
                log_fallback(logger, self.name, reason="realtime_unavailable")
            else:
                if self._closed:
                    # close() chegou durante a assinatura
                    await self._unsubscribe_feed(subscription)
                    return self._snapshot
                self._feed_subscription = subscription

        return await self.load()

    async def close(self) -> None:
        """Encerra o store: cancela feed e listeners e invalida a instância."""
        if self._closed:
            return
        self._closed = True
        self._listeners.clear()
        self._error_listeners.clear()

        subscription, self._feed_subscription = self._feed_subscription, None
        if subscription is not None:
            await self._unsubscribe_feed(subscription)

        logger.info(
            "store_closed",
            extra={"collection": self.name, "pending": len(self._pending)},
        )

    async def _unsubscribe_feed(self, subscription: FeedSubscription) -> None:
        try:
            await subscription.unsubscribe()
        except InfrastructureError:
            logger.warning(
                "change_feed_unsubscribe_failed",
                extra={"collection": self.name, "channel": self._channel},
                exc_info=True,
            )

    def _ensure_active(self) -> None:
        if self._closed:
            raise RuntimeError(f"Store '{self.name}' já foi encerrado")

    # ------------------------------------------------------------------
    # Inscrições
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[], Any], *, replay: bool = False) -> Unsubscribe:
        """Registra callback chamado após toda mudança do snapshot.

        Args:
            callback: Função sem argumentos; lê `snapshot` ao ser chamada
            replay: Chama o callback imediatamente com o snapshot atual
                (inclui mutações otimistas ainda pendentes)
        """
        self._ensure_active()
        unsubscribe = self._listeners.add(callback)
        if replay:
            callback()
        return unsubscribe

    def subscribe_errors(self, callback: Callable[[SyncError], Any]) -> Unsubscribe:
        """Registra callback do canal lateral de erros."""
        self._ensure_active()
        return self._error_listeners.add(callback)

    def _publish(self, reason: str) -> None:
        self._snapshot = materialize(self._server_rows, self._pending)  # type: ignore[assignment]
        failures = self._listeners.notify()
        logger.debug(
            "snapshot_published",
            extra={
                "collection": self.name,
                "reason": reason,
                "rows": len(self._snapshot),
                "listener_failures": failures,
            },
        )

    def _report(self, error: SyncError) -> None:
        self._last_error = error
        self._error_listeners.notify(error)

    # ------------------------------------------------------------------
    # Carga
    # ------------------------------------------------------------------

    async def load(self, criteria: QueryCriteria | None = None) -> tuple[R, ...]:
        """Carga completa; substitui o estado do servidor.

        Args:
            criteria: Novos filtros (None reaproveita os atuais)

        Raises:
            FetchError: Falha remota; snapshot anterior é mantido.
        """
        self._ensure_active()
        if criteria is not None:
            self._criteria = criteria
        with correlation_scope():
            return await self._load(trigger="manual", user_initiated=True)

    async def refetch(self) -> tuple[R, ...]:
        """Recarrega com os últimos filtros (iniciado pelo usuário)."""
        return await self.load()

    async def _load(self, *, trigger: str, user_initiated: bool) -> tuple[R, ...]:
        definition = self._definition
        criteria = self._criteria
        self._load_seq += 1
        seq = self._load_seq
        self._inflight_loads += 1
        if self.state != CollectionState.LOADING:
            self._fsm.transition(CollectionState.LOADING, trigger, {"seq": seq})

        start = time.perf_counter()
        try:
            rows = await self._remote.select(
                definition.table,
                columns=definition.columns,
                criteria=criteria,
                order=definition.order,
            )
            if definition.enrich is not None:
                rows = await definition.enrich(rows, self._remote)
        except Exception as exc:
            self._inflight_loads -= 1
            record_latency(self.name, "load", _elapsed_ms(start), success=False)
            error = FetchError(
                f"Falha ao carregar {definition.table}: {exc}",
                collection=self.name,
                operation="load",
                user_message=f"Não foi possível carregar {definition.display_label}.",
            )
            if self._closed:
                raise error from exc

            if seq >= self._applied_seq:
                self._load_failed = True
            self._settle()
            logger.warning(
                "store_load_failed",
                extra={**error.to_log_dict(), "seq": seq, "trigger": trigger},
            )
            if user_initiated:
                self._report(error)
            else:
                self._last_error = error
            raise error from exc

        self._inflight_loads -= 1
        record_latency(self.name, "load", _elapsed_ms(start))

        if self._closed:
            logger.debug("stale_load_discarded", extra={"collection": self.name, "seq": seq})
            return self._snapshot

        if seq < self._applied_seq:
            logger.info(
                "out_of_order_load_discarded",
                extra={"collection": self.name, "seq": seq, "applied_seq": self._applied_seq},
            )
            self._settle()
            return self._snapshot

        self._server_rows = self._parse_rows(rows)
        self._applied_seq = seq
        self._load_failed = False
        self._last_error = None
        self._settle()
        self._publish("loaded")

        logger.info(
            "store_loaded",
            extra={
                "collection": self.name,
                "rows": len(self._server_rows),
                "criteria": criteria.describe(),
                "trigger": trigger,
            },
        )
        return self._snapshot

    def _settle(self) -> None:
        """Sai de LOADING quando não há mais cargas em voo."""
        if self._inflight_loads > 0 or self.state != CollectionState.LOADING:
            return
        target = CollectionState.ERRORED if self._load_failed else CollectionState.READY
        self._fsm.transition(target, "load_settled")

    def _parse_rows(self, rows: list[Row]) -> dict[str, R]:
        parsed: dict[str, R] = {}
        for row in rows:
            try:
                record = self._definition.parse_row(row)
            except PydanticValidationError as exc:
                logger.warning(
                    "row_rejected",
                    extra={
                        "collection": self.name,
                        "row_id": str(row.get("id", "")),
                        "errors": _describe_pydantic_errors(exc),
                    },
                )
                continue
            parsed[record.id] = record
        return parsed

    # ------------------------------------------------------------------
    # Mudanças externas
    # ------------------------------------------------------------------

    def _on_feed_event(self, notification: ChangeNotification) -> None:
        if notification.schema and notification.schema != self._definition.db_schema:
            return
        self.on_external_change(notification.table, notification.event_kind)

    def on_external_change(self, table: str, event_hint: EventKind | None = None) -> None:
        """Reage a uma notificação do feed.

        Tabelas fora do conjunto observado são ignoradas.
        """
        if self._closed:
            return
        if not self._definition.watches(table):
            logger.debug(
                "change_ignored",
                extra={"collection": self.name, "table": table},
            )
            return
        self._policy.handle(
            self,
            ChangeNotification(table=table, event_kind=event_hint, schema=self._definition.db_schema),
        )

    def schedule_refetch(self, table: str | None = None) -> None:
        """Agenda refetch em background.

        Enquanto um refetch agendado está em andamento, novos pedidos são
        agrupados em uma única carga seguinte.
        """
        if self._closed:
            return
        record_refetch(self.name, "change_feed", table)
        if self._refetch_task is not None and not self._refetch_task.done():
            self._refetch_requested = True
            return
        self._refetch_requested = False
        self._refetch_task = asyncio.get_running_loop().create_task(self._run_scheduled_refetch())

    async def _run_scheduled_refetch(self) -> None:
        while not self._closed:
            self._refetch_requested = False
            start = time.perf_counter()
            try:
                await self._load(trigger="change_feed", user_initiated=False)
            except FetchError:
                # Mantém o snapshot anterior; o próximo sinal tenta de novo
                log_fallback(logger, self.name, reason="refetch_failed", elapsed_ms=_elapsed_ms(start))
            if not self._refetch_requested:
                break

    async def wait_idle(self) -> None:
        """Aguarda o término de refetches agendados."""
        while self._refetch_task is not None and not self._refetch_task.done():
            await self._refetch_task

    # ------------------------------------------------------------------
    # Mutações
    # ------------------------------------------------------------------

    async def create(self, payload: Mapping[str, Any]) -> R:
        """Cria registro com aplicação otimista.

        Returns:
            Registro confirmado pelo servidor (id definitivo).

        Raises:
            ValidationError: Payload inválido (nenhuma chamada remota).
            MutationError: Servidor rejeitou; registro otimista removido.
        """
        self._ensure_active()
        with correlation_scope():
            self._check_writable(payload, "create")
            temp_id = new_temp_id()
            optimistic = self._validate({**payload, "id": temp_id}, "create")
            row = optimistic.model_dump(mode="json", include=set(payload))

            mutation = self._pending.add(MutationKind.CREATE, temp_id, row, record=optimistic)
            self._publish("optimistic_create")

            start = time.perf_counter()
            try:
                confirmed_row = await self._remote.insert(self._definition.table, row)
            except Exception as exc:
                self._rollback(mutation, exc, start)

            record_latency(self.name, "create", _elapsed_ms(start))
            confirmed = self._parse_confirmed(confirmed_row, optimistic)
            if self._closed:
                return confirmed

            self._pending.discard(mutation)
            self._server_rows[confirmed.id] = confirmed
            if self._definition.order:
                self._server_rows = {r.id: r for r in self._definition.sort_records(self._server_rows.values())}
            self._publish("create_confirmed")
            logger.info(
                "mutation_confirmed",
                extra={"collection": self.name, "kind": "create", "record_id": confirmed.id},
            )
            return confirmed

    async def update(self, record_id: str, delta: Mapping[str, Any]) -> None:
        """Atualiza campos com aplicação otimista.

        Raises:
            NotFoundError: Id ausente do snapshot (nenhuma chamada remota).
            ValidationError: Campo não gravável ou resultado inválido.
            MutationError: Id temporário ou servidor rejeitou (rollback).
        """
        self._ensure_active()
        with correlation_scope():
            current = self._require(record_id, MutationKind.UPDATE)
            self._check_writable(delta, "update")
            try:
                merged = merge_record(current, delta)
            except PydanticValidationError as exc:
                self._raise_validation(_describe_pydantic_errors(exc), "update")
            row_delta = merged.model_dump(mode="json", include=set(delta))

            mutation = self._pending.add(MutationKind.UPDATE, record_id, delta)
            self._publish("optimistic_update")

            start = time.perf_counter()
            try:
                await self._remote.update(self._definition.table, record_id, row_delta)
            except Exception as exc:
                self._rollback(mutation, exc, start)

            record_latency(self.name, "update", _elapsed_ms(start))
            if self._closed:
                return

            self._pending.discard(mutation)
            server_current = self._server_rows.get(record_id)
            if server_current is not None:
                try:
                    self._server_rows[record_id] = merge_record(server_current, delta)
                except PydanticValidationError:
                    # Servidor mudou no meio do caminho; o próximo refetch corrige
                    logger.warning(
                        "confirmed_update_not_applicable",
                        extra={"collection": self.name, "record_id": record_id},
                    )
            self._publish("update_confirmed")
            logger.info(
                "mutation_confirmed",
                extra={"collection": self.name, "kind": "update", "record_id": record_id},
            )

    async def remove(self, record_id: str) -> None:
        """Remove registro com aplicação otimista.

        Raises:
            NotFoundError: Id ausente do snapshot (nenhuma chamada remota).
            MutationError: Id temporário ou servidor rejeitou (re-inserido).
        """
        self._ensure_active()
        with correlation_scope():
            self._require(record_id, MutationKind.DELETE)

            mutation = self._pending.add(MutationKind.DELETE, record_id)
            self._publish("optimistic_remove")

            start = time.perf_counter()
            try:
                await self._remote.delete(self._definition.table, record_id)
            except Exception as exc:
                self._rollback(mutation, exc, start)

            record_latency(self.name, "remove", _elapsed_ms(start))
            if self._closed:
                return

            self._pending.discard(mutation)
            self._server_rows.pop(record_id, None)
            self._publish("remove_confirmed")
            logger.info(
                "mutation_confirmed",
                extra={"collection": self.name, "kind": "remove", "record_id": record_id},
            )

    # ------------------------------------------------------------------
    # Auxiliares de mutação
    # ------------------------------------------------------------------

    def _require(self, record_id: str, kind: MutationKind) -> R:
        operation = _OPERATION_NAMES[kind]
        current = self.get(record_id)
        if current is None:
            error = NotFoundError(
                f"Registro {record_id} não encontrado em {self.name}",
                collection=self.name,
                operation=operation,
                target_id=record_id,
            )
            logger.info("mutation_target_missing", extra={**error.to_log_dict(), "record_id": record_id})
            self._report(error)
            raise error
        if is_temp_id(record_id):
            error = MutationError(
                f"Registro {record_id} ainda não foi confirmado pelo servidor",
                collection=self.name,
                operation=operation,
                target_id=record_id,
                user_message="Aguarde a confirmação do registro antes de alterá-lo.",
            )
            logger.info("mutation_on_unconfirmed_record", extra=error.to_log_dict())
            self._report(error)
            raise error
        return current

    def _check_writable(self, payload: Mapping[str, Any], operation: str) -> None:
        if not payload:
            self._raise_validation(["payload vazio"], operation)
        forbidden = sorted(set(payload) - self._definition.editable_fields)
        if forbidden:
            self._raise_validation([f"{name}: campo não gravável" for name in forbidden], operation)

    def _validate(self, data: Mapping[str, Any], operation: str) -> R:
        try:
            return self._definition.record_type.model_validate(dict(data))
        except PydanticValidationError as exc:
            self._raise_validation(_describe_pydantic_errors(exc), operation)

    def _raise_validation(self, errors: list[str], operation: str) -> NoReturn:
        error = ValidationError(
            f"Dados inválidos para {self.name}: {'; '.join(errors)}",
            errors=errors,
            collection=self.name,
            operation=operation,
        )
        logger.info("mutation_rejected_locally", extra={**error.to_log_dict(), "errors": errors})
        self._report(error)
        raise error

    def _parse_confirmed(self, row: Row, optimistic: R) -> R:
        """Registro confirmado; campos não devolvidos mantêm o valor otimista."""
        base = optimistic.model_dump(mode="json", exclude={"id"})
        try:
            return self._definition.parse_row({**base, **row})
        except PydanticValidationError as exc:
            logger.warning(
                "confirmed_row_invalid",
                extra={"collection": self.name, "errors": _describe_pydantic_errors(exc)},
            )
            # Sem id do servidor o registro segue temporário até o próximo refetch
            return optimistic.model_copy(update={"id": str(row.get("id") or optimistic.id)})

    def _rollback(self, mutation: PendingMutation, exc: Exception, start: float) -> NoReturn:
        """Desfaz mutação otimista e levanta MutationError."""
        record_latency(self.name, _OPERATION_NAMES[mutation.kind], _elapsed_ms(start), success=False)
        error = MutationError(
            f"Falha ao {_OPERATION_VERBS[mutation.kind]} em {self._definition.table}: {exc}",
            collection=self.name,
            operation=_OPERATION_NAMES[mutation.kind],
            target_id=mutation.target_id,
            user_message=(
                f"Não foi possível {_OPERATION_VERBS[mutation.kind]} o registro "
                f"em {self._definition.display_label}."
            ),
        )
        if self._closed:
            raise error from exc

        self._pending.discard(mutation)
        self._publish(f"rollback_{mutation.kind.value}")
        record_rollback(self.name, mutation.kind.value, type(exc).__name__)
        logger.warning(
            "mutation_rolled_back",
            extra={**error.to_log_dict(), "target_id": mutation.target_id},
        )
        self._report(error)
        raise error from exc


__all__ = ["SynchronizedCollectionStore"]
