"""Backend em memória, apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.

Reproduz o que as telas esperam da plataforma hospedada: filtros,
ordenação, relações embutidas (`*, kpi_history(*)`) e notificação de
mudança a cada escrita.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime
from itertools import count
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from nexa.protocols.change_feed import ChangeFeedProtocol, FeedSubscription
from nexa.protocols.models import ChangeNotification, EventKind, FilterOp
from nexa.protocols.privileged import PrivilegedEndpointProtocol
from nexa.protocols.remote_query import RemoteQueryProtocol, Row
from utils.errors import PrivilegedCallError, RemoteQueryError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from nexa.protocols.change_feed import ChangeHandler
    from nexa.protocols.models import Filter, OrderBy, QueryCriteria

logger = logging.getLogger(__name__)

_EMBED_RE = re.compile(r"^(\w+)\((.*)\)$")


def parse_columns(columns: str) -> tuple[list[str], list[str]]:
    """Separa colunas simples de relações embutidas.

    "*, kpi_history(*)" -> (["*"], ["kpi_history"])
    """
    plain: list[str] = []
    embedded: list[str] = []
    for part in (p.strip() for p in columns.split(",")):
        if not part:
            continue
        match = _EMBED_RE.match(part)
        if match:
            embedded.append(match.group(1))
        else:
            plain.append(part)
    return plain or ["*"], embedded


def foreign_key_for(table: str) -> str:
    """Convenção de chave estrangeira: kpis -> kpi_id, okrs -> okr_id."""
    singular = table[:-1] if table.endswith("s") else table
    return f"{singular}_id"


def _comparable(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def matches(row: Mapping[str, Any], flt: Filter) -> bool:
    """Avalia um filtro sobre a linha (semântica de PostgREST)."""
    actual = _comparable(row.get(flt.column))
    expected = _comparable(flt.value)

    if flt.op == FilterOp.IS:
        return actual is expected or actual == expected
    if flt.op == FilterOp.IN:
        return actual in tuple(_comparable(v) for v in expected)
    if flt.op == FilterOp.EQ:
        return actual == expected
    if flt.op == FilterOp.NEQ:
        return actual != expected
    if actual is None or expected is None:
        return False
    try:
        if flt.op == FilterOp.GT:
            return actual > expected
        if flt.op == FilterOp.GTE:
            return actual >= expected
        if flt.op == FilterOp.LT:
            return actual < expected
        return actual <= expected
    except TypeError:
        return False


def sort_rows(rows: list[Row], order: Sequence[OrderBy]) -> list[Row]:
    """Ordena de forma estável; nulos por último (padrão do Postgres em ASC)."""
    for spec in reversed(order):
        present = [r for r in rows if r.get(spec.column) is not None]
        missing = [r for r in rows if r.get(spec.column) is None]
        present.sort(key=lambda r: _comparable(r[spec.column]), reverse=not spec.ascending)
        rows = present + missing if spec.ascending else missing + present
    return rows


class MemoryRemoteQuery(RemoteQueryProtocol):
    """Tabelas em memória com a interface de consulta remota.

    Args:
        feed: Feed que recebe uma notificação por escrita (opcional)
        schema: Schema informado nas notificações
    """

    def __init__(self, feed: MemoryChangeFeed | None = None, *, schema: str = "public") -> None:
        self._tables: dict[str, dict[str, Row]] = {}
        self._feed = feed
        self._schema = schema
        self._failures: dict[str, Exception] = {}

    def seed(self, table: str, rows: Iterable[Mapping[str, Any]]) -> list[Row]:
        """Carrega linhas iniciais sem publicar notificações."""
        stored = [self._store(table, row) for row in rows]
        return [dict(r) for r in stored]

    def rows(self, table: str) -> list[Row]:
        """Cópia das linhas da tabela (ordem de inserção)."""
        return [dict(r) for r in self._tables.get(table, {}).values()]

    def fail_next(self, operation: str, exc: Exception | None = None) -> None:
        """Faz a próxima chamada `operation` (select/insert/update/delete) falhar."""
        self._failures[operation] = exc or RemoteQueryError(f"falha simulada em {operation}", status_code=500)

    def _raise_if_failing(self, operation: str) -> None:
        exc = self._failures.pop(operation, None)
        if exc is not None:
            raise exc

    def _store(self, table: str, row: Mapping[str, Any]) -> Row:
        data = dict(row)
        data["id"] = str(data.get("id") or uuid4())
        data.setdefault("created_at", datetime.now(UTC).isoformat())
        self._tables.setdefault(table, {})[data["id"]] = data
        return data

    def _publish(self, table: str, kind: EventKind) -> None:
        if self._feed is not None:
            self._feed.publish(ChangeNotification(table=table, event_kind=kind, schema=self._schema))

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        criteria: QueryCriteria | None = None,
        order: Sequence[OrderBy] = (),
    ) -> list[Row]:
        self._raise_if_failing("select")
        plain, embedded = parse_columns(columns)
        filters = criteria.filters if criteria else ()
        rows = [
            dict(row)
            for row in self._tables.get(table, {}).values()
            if all(matches(row, f) for f in filters)
        ]
        rows = sort_rows(rows, order)

        fk = foreign_key_for(table)
        result: list[Row] = []
        for row in rows:
            projected = dict(row) if "*" in plain else {c: row.get(c) for c in plain}
            for relation in embedded:
                projected[relation] = [
                    dict(child)
                    for child in self._tables.get(relation, {}).values()
                    if str(child.get(fk)) == row["id"]
                ]
            result.append(projected)
        return result

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        self._raise_if_failing("insert")
        stored = self._store(table, row)
        self._publish(table, EventKind.INSERT)
        return dict(stored)

    async def update(self, table: str, record_id: str, delta: Mapping[str, Any]) -> None:
        self._raise_if_failing("update")
        current = self._tables.get(table, {}).get(record_id)
        if current is None:
            # PostgREST responde sucesso sem linhas afetadas
            return
        current.update(delta)
        current["id"] = record_id
        self._publish(table, EventKind.UPDATE)

    async def delete(self, table: str, record_id: str) -> None:
        self._raise_if_failing("delete")
        if self._tables.get(table, {}).pop(record_id, None) is not None:
            self._publish(table, EventKind.DELETE)


@dataclass
class _Channel:
    channel_id: int
    name: str
    tables: frozenset[str]
    handler: ChangeHandler


class _MemorySubscription(FeedSubscription):
    def __init__(self, feed: MemoryChangeFeed, channel_id: int) -> None:
        self._feed = feed
        self._channel_id = channel_id

    async def unsubscribe(self) -> None:
        self._feed.remove_channel(self._channel_id)


class MemoryChangeFeed(ChangeFeedProtocol):
    """Feed síncrono: publish() entrega a todos os canais interessados."""

    def __init__(self) -> None:
        self._channels: dict[int, _Channel] = {}
        self._ids = count(1)

    @property
    def channel_names(self) -> list[str]:
        return [c.name for c in self._channels.values()]

    async def subscribe(
        self,
        channel: str,
        tables: frozenset[str],
        handler: ChangeHandler,
    ) -> FeedSubscription:
        channel_id = next(self._ids)
        self._channels[channel_id] = _Channel(channel_id, channel, frozenset(tables), handler)
        logger.debug("memory_channel_subscribed", extra={"channel": channel, "tables": sorted(tables)})
        return _MemorySubscription(self, channel_id)

    def remove_channel(self, channel_id: int) -> None:
        self._channels.pop(channel_id, None)

    def publish(self, notification: ChangeNotification) -> int:
        """Entrega a notificação; retorna quantos canais a receberam."""
        delivered = 0
        for channel in tuple(self._channels.values()):
            if notification.table not in channel.tables:
                continue
            delivered += 1
            try:
                channel.handler(notification)
            except Exception:
                logger.exception(
                    "memory_channel_handler_failed",
                    extra={"channel": channel.name, "table": notification.table},
                )
        return delivered


class MemoryPrivilegedEndpoint(PrivilegedEndpointProtocol):
    """Edge functions simuladas sobre o backend em memória.

    Implementa `create-user`: apenas tokens de admin podem criar usuários;
    o perfil é gravado em `profiles` (publicando notificação).

    Args:
        remote: Backend em memória onde os perfis são gravados
        admin_tokens: Tokens aceitos como administradores
    """

    def __init__(self, remote: MemoryRemoteQuery, admin_tokens: Iterable[str] = ()) -> None:
        self._remote = remote
        self._admin_tokens = frozenset(admin_tokens)

    async def invoke(
        self,
        function: str,
        payload: dict[str, Any],
        *,
        access_token: str,
    ) -> dict[str, Any]:
        if function != "create-user":
            raise PrivilegedCallError(f"Função desconhecida: {function}", status_code=404)
        if not access_token:
            raise PrivilegedCallError("Missing authorization header", status_code=400)
        if access_token not in self._admin_tokens:
            raise PrivilegedCallError("Only admins can create users", status_code=400)

        email = payload.get("email")
        password = payload.get("password") or ""
        if not all(payload.get(k) for k in ("email", "password", "name", "role")):
            raise PrivilegedCallError("Missing required fields: email, password, name, role", status_code=400)
        if len(password) < 6:
            raise PrivilegedCallError("Password must be at least 6 characters", status_code=400)
        if any(p.get("email") == email for p in self._remote.rows("profiles")):
            raise PrivilegedCallError("User already registered", status_code=400)

        user_id = str(uuid4())
        await self._remote.insert(
            "profiles",
            {
                "user_id": user_id,
                "name": payload["name"],
                "email": email,
                "role": payload["role"],
                "department_id": payload.get("department_id") or None,
                "sector_id": payload.get("sector_id") or None,
            },
        )
        return {"success": True, "user": {"id": user_id, "email": email}}
