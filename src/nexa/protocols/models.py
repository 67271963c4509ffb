"""Modelos compartilhados pelas interfaces externas.

Filtros, ordenação e notificações de mudança são valores imutáveis e
hasheáveis: QueryCriteria compõe a chave de compartilhamento de stores.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class FilterOp(StrEnum):
    """Operadores de filtro suportados (igualdade/intervalo)."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    IS = "is"


@dataclass(frozen=True, slots=True)
class Filter:
    """Predicado simples sobre uma coluna.

    Attributes:
        column: Nome da coluna
        op: Operador
        value: Valor comparado (tupla para IN; None/True/False para IS)
    """

    column: str
    op: FilterOp
    value: Any

    def __post_init__(self) -> None:
        if not self.column:
            raise ValueError("column não pode ser vazio")
        if self.op == FilterOp.IN:
            if isinstance(self.value, (str, bytes)) or not hasattr(self.value, "__iter__"):
                raise ValueError("Filtro IN exige uma sequência de valores")
            object.__setattr__(self, "value", tuple(self.value))
        if self.op == FilterOp.IS and self.value not in (None, True, False):
            raise ValueError("Filtro IS aceita apenas None, True ou False")

    @classmethod
    def eq(cls, column: str, value: Any) -> Filter:
        return cls(column, FilterOp.EQ, value)

    @classmethod
    def gte(cls, column: str, value: Any) -> Filter:
        return cls(column, FilterOp.GTE, value)

    @classmethod
    def lte(cls, column: str, value: Any) -> Filter:
        return cls(column, FilterOp.LTE, value)

    @classmethod
    def in_(cls, column: str, values: Any) -> Filter:
        return cls(column, FilterOp.IN, values)


@dataclass(frozen=True, slots=True)
class QueryCriteria:
    """Conjunto de filtros combinados com AND.

    Vazio significa "todas as linhas que a política de acesso permitir".
    """

    filters: tuple[Filter, ...] = ()

    @classmethod
    def where(cls, *filters: Filter) -> QueryCriteria:
        return cls(filters=tuple(filters))

    @property
    def is_empty(self) -> bool:
        return not self.filters

    def and_(self, *filters: Filter) -> QueryCriteria:
        """Retorna novo critério com filtros adicionais."""
        return QueryCriteria(filters=(*self.filters, *filters))

    def describe(self) -> str:
        """Representação estável e curta (logs, nomes de canal)."""
        if not self.filters:
            return "all"
        parts = []
        for f in self.filters:
            value = ",".join(map(str, f.value)) if f.op == FilterOp.IN else str(f.value)
            parts.append(f"{f.column}.{f.op.value}.{value}")
        return "&".join(parts)


@dataclass(frozen=True, slots=True)
class OrderBy:
    """Ordenação por coluna."""

    column: str
    ascending: bool = True


class EventKind(StrEnum):
    """Tipos de evento do feed de mudanças."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: str | None) -> EventKind | None:
        """Converte valor bruto do feed; desconhecidos viram None."""
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class ChangeNotification:
    """Sinal de que uma linha de uma tabela mudou.

    Não carrega o conteúdo da linha: serve apenas para justificar um refetch.
    """

    table: str
    event_kind: EventKind | None = None
    schema: str = "public"
