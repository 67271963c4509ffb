"""Definição declarativa de uma coleção sincronizada.

Descreve de onde vêm as linhas (tabela, colunas com relações embutidas,
ordenação), quais tabelas disparam refetch, quais campos o cliente pode
gravar e como a linha bruta vira um registro validado.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from nexa.domain.base import Record

if TYPE_CHECKING:
    from nexa.protocols.models import OrderBy
    from nexa.protocols.remote_query import RemoteQueryProtocol, Row

R = TypeVar("R", bound=Record)

Denormalizer = Callable[[dict[str, Any]], dict[str, Any]]
Enricher = Callable[[list[dict[str, Any]], "RemoteQueryProtocol"], Awaitable[list[dict[str, Any]]]]


@dataclass(frozen=True)
class CollectionDefinition(Generic[R]):
    """Metadados de uma coleção.

    Attributes:
        name: Nome lógico (chave de compartilhamento de stores)
        table: Tabela principal
        record_type: Modelo Pydantic do registro
        label: Nome exibido em notificações (ex: "KPIs")
        columns: Seleção PostgREST; aceita relações embutidas
        order: Ordenação do servidor
        related_tables: Outras tabelas cujas mudanças exigem refetch
        writable_fields: Campos aceitos em create/update (None = todos menos id)
        denormalize: Transforma linha bruta antes da validação
        enrich: Consultas secundárias sobre o lote de linhas carregado
        db_schema: Schema das tabelas
    """

    name: str
    table: str
    record_type: type[R]
    label: str = ""
    columns: str = "*"
    order: tuple[OrderBy, ...] = ()
    related_tables: frozenset[str] = field(default_factory=frozenset)
    writable_fields: frozenset[str] | None = None
    denormalize: Denormalizer | None = None
    enrich: Enricher | None = None
    db_schema: str = "public"

    @property
    def display_label(self) -> str:
        return self.label or self.name

    @property
    def watched_tables(self) -> frozenset[str]:
        """Tabela principal mais relacionadas."""
        return frozenset({self.table}) | self.related_tables

    @property
    def editable_fields(self) -> frozenset[str]:
        if self.writable_fields is not None:
            return self.writable_fields
        return frozenset(self.record_type.model_fields) - {"id"}

    def watches(self, table: str, schema: str | None = None) -> bool:
        """True se mudança em `table` afeta esta coleção."""
        if schema and schema != self.db_schema:
            return False
        return table in self.watched_tables

    def parse_row(self, row: Row) -> R:
        """Converte linha bruta em registro validado.

        Raises:
            pydantic.ValidationError: Se a linha não respeita o esquema.
        """
        data = dict(row)
        if self.denormalize is not None:
            data = self.denormalize(data)
        return self.record_type.model_validate(data)

    def sort_records(self, records: Iterable[R]) -> list[R]:
        """Ordena como o servidor: estável, nulos por último em ASC e primeiro em DESC."""
        ordered = list(records)
        for spec in reversed(self.order):
            present = [r for r in ordered if getattr(r, spec.column, None) is not None]
            missing = [r for r in ordered if getattr(r, spec.column, None) is None]
            present.sort(key=lambda r, column=spec.column: _sort_key(getattr(r, column)), reverse=not spec.ascending)
            ordered = present + missing if spec.ascending else missing + present
        return ordered


def _sort_key(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


__all__ = ["CollectionDefinition", "Denormalizer", "Enricher", "R"]
