"""Formatter JSON dos logs estruturados.

Campos de todo log: asctime, level, logger, message, correlation_id,
service e environment. Campos de `extra` (collection, operation, rows...)
são acrescentados pelo JsonFormatter.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem estável dos campos fixos no JSON
LOG_FIELD_ORDER: tuple[str, ...] = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
    "environment",
)

REQUIRED_LOG_FIELDS = frozenset(LOG_FIELD_ORDER)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {"asctime": "2026-02-02 10:30:00,120", "level": "INFO",
         "logger": "nexa.sync.store", "message": "store_loaded",
         "correlation_id": "abc-123", "service": "nexa_painel",
         "environment": "development", "collection": "kpis", "rows": 3}
    """
    return JsonFormatter(
        " ".join(f"%({name})s" for name in LOG_FIELD_ORDER),
        rename_fields=FIELD_RENAME_MAP,
    )
