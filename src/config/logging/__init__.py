"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="nexa_painel")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("store_loaded", extra={"collection": "kpis", "rows": 3})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime
- environment
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import REDACTED, SENSITIVE_FIELDS, CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    LOG_FIELD_ORDER,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "LOG_FIELD_ORDER",
    "REDACTED",
    "REQUIRED_LOG_FIELDS",
    "SENSITIVE_FIELDS",
    # Filters
    "CorrelationIdFilter",
    "SensitiveFieldFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
    "log_fallback",
]
