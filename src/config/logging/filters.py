"""Filters de logging para contexto e proteção de dados.

Campos injetados:
- correlation_id: ID da ação do usuário (create/update/remove/load)
- service: Nome do serviço (ex: nexa_painel)
- environment: Ambiente de execução

Campos sensíveis passados via `extra` são mascarados antes da
formatação (senhas, tokens, e-mails).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[redacted]"

SENSITIVE_FIELDS = frozenset(
    {
        "password",
        "access_token",
        "anon_key",
        "authorization",
        "email",
    }
)


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id, service e environment em cada record.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia.
        environment: Ambiente (development|staging|production).
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
        environment: str = "",
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")
        self._environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        """Enriquece o record; nunca descarta.

        correlation_id passado explicitamente via `extra` é preservado.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        record.environment = self._environment
        return True


class SensitiveFieldFilter(logging.Filter):
    """Mascara atributos sensíveis adicionados via `extra`.

    Args:
        fields: Nomes de atributos a mascarar.
    """

    def __init__(self, fields: frozenset[str] = SENSITIVE_FIELDS) -> None:
        super().__init__()
        self._fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for name in self._fields:
            if getattr(record, name, None):
                setattr(record, name, REDACTED)
        return True
