"""Protocolo da interface de consulta remota (CRUD por tabela)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from nexa.protocols.models import OrderBy, QueryCriteria

Row = dict[str, Any]


class RemoteQueryProtocol(ABC):
    """Contrato assíncrono de acesso às tabelas remotas.

    Implementações devem levantar subclasses de InfrastructureError
    (ex: RemoteQueryError) em falhas; nenhuma tentativa automática é feita.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        criteria: QueryCriteria | None = None,
        order: Sequence[OrderBy] = (),
    ) -> list[Row]:
        """Lista linhas que satisfazem os filtros.

        Args:
            table: Nome da tabela
            columns: Colunas a selecionar; aceita relações embutidas
                (ex: "*, kpi_history(*)")
            criteria: Filtros combinados com AND
            order: Ordenação aplicada no servidor

        Returns:
            Linhas como dicts
        """

    @abstractmethod
    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        """Insere linha e retorna a versão confirmada (com id do servidor)."""

    @abstractmethod
    async def update(self, table: str, record_id: str, delta: Mapping[str, Any]) -> None:
        """Aplica delta na linha identificada por id."""

    @abstractmethod
    async def delete(self, table: str, record_id: str) -> None:
        """Remove linha identificada por id."""
