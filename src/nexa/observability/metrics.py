"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente pela ferramenta de logs.

Métricas suportadas:
- Latência: tempo de cada chamada remota por coleção/operação
- Rollback: contador de mutações otimistas desfeitas
- Refetch: contador de recargas completas por gatilho

Uso:
    from nexa.observability.metrics import record_latency, record_rollback

    start = time.perf_counter()
    # ... chamada remota ...
    record_latency("kpis", "update", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    success: bool = True,
) -> None:
    """Registra latência de operação remota.

    Args:
        component: Nome da coleção/componente (ex: "kpis", "create-user")
        operation: Nome da operação (ex: "load", "create")
        latency_ms: Latência em milissegundos
        success: Se a chamada remota terminou sem erro
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "success": success,
        },
    )


def record_rollback(
    component: str,
    mutation_kind: str,
    reason: str,
) -> None:
    """Registra mutação otimista desfeita.

    Args:
        component: Nome da coleção
        mutation_kind: create, update ou delete
        reason: Classe do erro remoto (sem mensagem, que pode conter PII)
    """
    logger.info(
        "metric_rollback",
        extra={
            "metric_type": "rollback",
            "component": component,
            "mutation_kind": mutation_kind,
            "reason": reason,
        },
    )


def record_refetch(
    component: str,
    trigger: str,
    table: str | None = None,
) -> None:
    """Registra recarga completa da coleção.

    Args:
        component: Nome da coleção
        trigger: Origem da recarga (ex: "change_feed", "manual")
        table: Tabela que originou a notificação (quando houver)
    """
    extra: dict[str, str] = {
        "metric_type": "refetch",
        "component": component,
        "trigger": trigger,
    }
    if table:
        extra["table"] = table
    logger.info("metric_refetch", extra=extra)
