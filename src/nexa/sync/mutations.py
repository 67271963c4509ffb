"""Mutações pendentes e materialização do snapshot.

O snapshot visível é sempre "linhas conhecidas do servidor" com as
mutações pendentes reaplicadas em ordem. Confirmar move o efeito para as
linhas do servidor; falhar apenas descarta a mutação pendente.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from itertools import count
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from nexa.domain.base import Record

logger = logging.getLogger(__name__)


class MutationKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class PendingMutation:
    """Mutação local ainda não confirmada pelo servidor.

    Attributes:
        mutation_id: Sequencial local (ordem de aplicação)
        kind: create, update ou delete
        target_id: Id alvo (temporário para create)
        delta: Campos alterados (payload para create)
        record: Registro otimista (apenas create)
    """

    mutation_id: int
    kind: MutationKind
    target_id: str
    delta: Mapping[str, Any] = field(default_factory=dict)
    record: Record | None = None


def merge_record(record: Record, delta: Mapping[str, Any]) -> Record:
    """Aplica delta revalidando o registro inteiro.

    Raises:
        pydantic.ValidationError: Se o resultado viola o esquema.
    """
    return type(record).model_validate({**record.model_dump(), **delta})


def apply_mutation(rows: dict[str, Record], mutation: PendingMutation) -> None:
    """Aplica a mutação sobre `rows` (in place).

    Update e delete de ids ausentes não têm efeito: o registro pode ter
    sido removido por um refetch ou por outra mutação confirmada.
    """
    if mutation.kind == MutationKind.CREATE:
        if mutation.record is not None:
            rows[mutation.record.id] = mutation.record
        return

    if mutation.kind == MutationKind.DELETE:
        rows.pop(mutation.target_id, None)
        return

    current = rows.get(mutation.target_id)
    if current is None:
        return
    try:
        rows[mutation.target_id] = merge_record(current, mutation.delta)
    except PydanticValidationError:
        # Estado do servidor mudou e o delta não se aplica mais
        logger.warning(
            "pending_update_not_applicable",
            extra={"target_id": mutation.target_id, "mutation_id": mutation.mutation_id},
        )


class PendingLog:
    """Fila ordenada de mutações pendentes."""

    __slots__ = ("_ids", "_items")

    def __init__(self) -> None:
        self._items: list[PendingMutation] = []
        self._ids = count(1)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PendingMutation]:
        return iter(tuple(self._items))

    def add(
        self,
        kind: MutationKind,
        target_id: str,
        delta: Mapping[str, Any] | None = None,
        record: Record | None = None,
    ) -> PendingMutation:
        mutation = PendingMutation(
            mutation_id=next(self._ids),
            kind=kind,
            target_id=target_id,
            delta=dict(delta or {}),
            record=record,
        )
        self._items.append(mutation)
        return mutation

    def discard(self, mutation: PendingMutation) -> bool:
        """Remove a mutação; False se já havia sido removida."""
        try:
            self._items.remove(mutation)
        except ValueError:
            return False
        return True

    def targets(self) -> frozenset[str]:
        return frozenset(m.target_id for m in self._items)


def materialize(
    server_rows: Mapping[str, Record],
    pending: PendingLog,
) -> tuple[Record, ...]:
    """Calcula o snapshot visível."""
    rows = dict(server_rows)
    for mutation in pending:
        apply_mutation(rows, mutation)
    return tuple(rows.values())
