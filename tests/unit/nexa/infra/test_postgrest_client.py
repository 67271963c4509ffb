"""Testes do cliente PostgREST (query builder do supabase simulado)."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock, call

import httpx
import pytest
from supabase import PostgrestAPIError

from nexa.infra.supabase import PostgrestRemoteQuery, apply_filter
from nexa.protocols.models import Filter, FilterOp, OrderBy, QueryCriteria
from utils.errors import RemoteQueryError

_BUILDER_METHODS = ("select", "insert", "update", "delete", "eq", "neq", "gt", "gte", "lt", "lte", "in_", "is_", "order")


def _client(data: object = None, error: Exception | None = None) -> tuple[MagicMock, MagicMock]:
    """Cliente cujo builder encadeia em si mesmo e resolve em execute()."""
    builder = MagicMock()
    for name in _BUILDER_METHODS:
        getattr(builder, name).return_value = builder
    builder.execute = AsyncMock(return_value=MagicMock(data=data), side_effect=error)
    client = MagicMock()
    client.table.return_value = builder
    return client, builder


class TestApplyFilter:
    """Tradução de filtros para o builder."""

    def test_eq_and_range(self) -> None:
        _, builder = _client()

        apply_filter(builder, Filter.eq("department_id", "d1"))
        apply_filter(builder, Filter.gte("event_date", date(2026, 10, 1)))

        builder.eq.assert_called_once_with("department_id", "d1")
        builder.gte.assert_called_once_with("event_date", "2026-10-01")

    def test_eq_none_becomes_is_null(self) -> None:
        _, builder = _client()

        apply_filter(builder, Filter.eq("department_id", None))

        builder.is_.assert_called_once_with("department_id", "null")
        builder.eq.assert_not_called()

    def test_is_boolean(self) -> None:
        _, builder = _client()

        apply_filter(builder, Filter("is_global", FilterOp.IS, True))

        builder.is_.assert_called_once_with("is_global", "true")

    def test_in_passes_values_to_library(self) -> None:
        _, builder = _client()

        apply_filter(builder, Filter.in_("name", ["Ana", "Silva, J."]))

        builder.in_.assert_called_once_with("name", ["Ana", "Silva, J."])


class TestPostgrestRemoteQuery:
    """Operações por tabela e tratamento de erro."""

    @pytest.mark.asyncio
    async def test_select_chains_filters_and_order(self) -> None:
        client, builder = _client(data=[{"id": "1", "name": "NPS"}])
        remote = PostgrestRemoteQuery(client)

        rows = await remote.select(
            "kpis",
            columns="*, kpi_history(*)",
            criteria=QueryCriteria.where(Filter.in_("id", ["1", "2"])),
            order=(OrderBy("name"), OrderBy("created_at", ascending=False)),
        )

        assert rows == [{"id": "1", "name": "NPS"}]
        client.table.assert_called_once_with("kpis")
        builder.select.assert_called_once_with("*, kpi_history(*)")
        builder.in_.assert_called_once_with("id", ["1", "2"])
        assert builder.order.call_args_list == [call("name", desc=False), call("created_at", desc=True)]
        builder.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_insert_returns_created_row(self) -> None:
        client, builder = _client(data=[{"id": "srv-1", "title": "Novo"}])

        row = await PostgrestRemoteQuery(client).insert("trainings", {"title": "Novo"})

        assert row == {"id": "srv-1", "title": "Novo"}
        builder.insert.assert_called_once_with({"title": "Novo"})

    @pytest.mark.asyncio
    async def test_insert_without_returned_row(self) -> None:
        client, _ = _client(data=[])

        with pytest.raises(RemoteQueryError, match="não retornou"):
            await PostgrestRemoteQuery(client).insert("trainings", {"title": "Novo"})

    @pytest.mark.asyncio
    async def test_update_and_delete_filter_by_id(self) -> None:
        client, builder = _client(data=[])
        remote = PostgrestRemoteQuery(client)

        await remote.update("trainings", "t1", {"title": "x"})
        await remote.delete("trainings", "t1")

        builder.update.assert_called_once_with({"title": "x"})
        builder.delete.assert_called_once_with()
        assert [c.args for c in builder.eq.call_args_list] == [("id", "t1"), ("id", "t1")]
        assert builder.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_api_error_maps_to_remote_query_error(self) -> None:
        error = PostgrestAPIError(
            {"code": "42501", "message": "new row violates row-level security policy", "hint": None, "details": None}
        )
        client, _ = _client(error=error)

        with pytest.raises(RemoteQueryError) as exc_info:
            await PostgrestRemoteQuery(client).insert("kpis", {"name": "x"})

        assert exc_info.value.code == "42501"
        assert "row-level security" in str(exc_info.value)
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        client, _ = _client(error=httpx.ConnectError("recusado"))

        with pytest.raises(RemoteQueryError) as exc_info:
            await PostgrestRemoteQuery(client).select("kpis")
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_unexpected_select_body(self) -> None:
        client, _ = _client(data={"id": "1"})

        with pytest.raises(RemoteQueryError):
            await PostgrestRemoteQuery(client).select("kpis")
