"""Gerenciamento de correlation_id para rastreamento de operações.

Cada ação do usuário (criar, atualizar, remover, recarregar) recebe um
correlation_id; os logs da aplicação otimista, da confirmação e do
rollback compartilham o mesmo valor. Usa ContextVar, portanto é
propagado para tasks asyncio criadas dentro do escopo.

Uso:
    from nexa.observability import correlation_scope, get_correlation_id

    with correlation_scope():
        ...  # logs aqui carregam o mesmo correlation_id
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual.

    Returns:
        correlation_id ou string vazia se não definido.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior.

    Args:
        token: Token retornado por set_correlation_id().
    """
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Escopo com correlation_id próprio.

    Reaproveita o correlation_id já ativo (ex: ação composta que chama
    várias operações do store) e só gera um novo quando não há nenhum.

    Args:
        correlation_id: ID explícito (opcional).

    Yields:
        correlation_id efetivo do escopo.
    """
    value = correlation_id or get_correlation_id() or generate_correlation_id()
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)
