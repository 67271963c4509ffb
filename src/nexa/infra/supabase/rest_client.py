"""Interface de consulta remota sobre o PostgREST do Supabase.

Usa o query builder do cliente assíncrono (`client.table(...)`); a
codificação dos filtros na query string fica a cargo da biblioteca.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from supabase import PostgrestAPIError

from nexa.protocols.models import FilterOp
from nexa.protocols.remote_query import RemoteQueryProtocol, Row
from utils.errors import RemoteQueryError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from supabase import AsyncClient

    from nexa.protocols.models import Filter, OrderBy, QueryCriteria

logger = logging.getLogger(__name__)

# Operadores com método homônimo no builder
_BUILDER_METHODS: dict[FilterOp, str] = {
    FilterOp.EQ: "eq",
    FilterOp.NEQ: "neq",
    FilterOp.GT: "gt",
    FilterOp.GTE: "gte",
    FilterOp.LT: "lt",
    FilterOp.LTE: "lte",
}


def _plain(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _is_literal(value: Any) -> str:
    if value is None:
        return "null"
    return "true" if value else "false"


def apply_filter(query: Any, flt: Filter) -> Any:
    """Aplica um filtro ao builder e devolve o builder resultante."""
    if flt.op == FilterOp.IN:
        return query.in_(flt.column, [_plain(v) for v in flt.value])
    if flt.op == FilterOp.IS or (flt.op == FilterOp.EQ and flt.value is None):
        return query.is_(flt.column, _is_literal(flt.value))
    method = getattr(query, _BUILDER_METHODS[flt.op])
    return method(flt.column, _plain(flt.value))


class PostgrestRemoteQuery(RemoteQueryProtocol):
    """CRUD por tabela via PostgREST.

    Args:
        client: Cliente assíncrono do Supabase (compartilhado com realtime
            e edge functions)
    """

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        criteria: QueryCriteria | None = None,
        order: Sequence[OrderBy] = (),
    ) -> list[Row]:
        query = self._client.table(table).select(columns)
        if criteria is not None:
            for flt in criteria.filters:
                query = apply_filter(query, flt)
        for spec in order:
            query = query.order(spec.column, desc=not spec.ascending)

        data = await self._execute(query, table, "select")
        if not isinstance(data, list):
            raise RemoteQueryError(f"Resposta inesperada ao consultar {table}")
        return [dict(row) for row in data]

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        query = self._client.table(table).insert(dict(row))
        data = await self._execute(query, table, "insert")
        if isinstance(data, list):
            if not data:
                raise RemoteQueryError(f"Insert em {table} não retornou a linha criada")
            return dict(data[0])
        if isinstance(data, dict):
            return dict(data)
        raise RemoteQueryError(f"Resposta inesperada ao inserir em {table}")

    async def update(self, table: str, record_id: str, delta: Mapping[str, Any]) -> None:
        query = self._client.table(table).update(dict(delta)).eq("id", record_id)
        await self._execute(query, table, "update")

    async def delete(self, table: str, record_id: str) -> None:
        query = self._client.table(table).delete().eq("id", record_id)
        await self._execute(query, table, "delete")

    async def _execute(self, query: Any, table: str, operation: str) -> Any:
        try:
            response = await query.execute()
        except PostgrestAPIError as exc:
            logger.warning(
                "postgrest_error",
                extra={"table": table, "operation": operation, "code": exc.code},
            )
            raise RemoteQueryError(exc.message or str(exc), code=exc.code) from exc
        except httpx.TimeoutException as exc:
            raise RemoteQueryError(f"Timeout em {operation} de {table}") from exc
        except httpx.HTTPError as exc:
            raise RemoteQueryError(f"Falha de conexão em {operation} de {table}") from exc
        return response.data
