"""Observabilidade: correlation_id e métricas via logs estruturados.

Uso:
    from nexa.observability import correlation_scope, get_correlation_id
    from nexa.observability import record_latency, record_refetch, record_rollback
"""

from nexa.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from nexa.observability.metrics import (
    record_latency,
    record_refetch,
    record_rollback,
)

__all__ = [
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "record_latency",
    "record_refetch",
    "record_rollback",
    "reset_correlation_id",
    "set_correlation_id",
]
