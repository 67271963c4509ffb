"""Registro de medições de KPI.

Recalcula current/previous/trend/status a partir do histórico com o novo
ponto, aplica pelo store (otimista) e grava o ponto em `kpi_history`.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from nexa.collections.kpis import KPI_HISTORY_TABLE
from nexa.domain.kpi import KPIHistoryPoint, KPIStatus, KPITrend
from nexa.observability import correlation_scope, record_latency
from utils.errors import MutationError

if TYPE_CHECKING:
    from nexa.domain.kpi import KPI
    from nexa.protocols.remote_query import RemoteQueryProtocol
    from nexa.sync.store import SynchronizedCollectionStore

logger = logging.getLogger(__name__)

ON_TRACK_RATIO = 0.95
AT_RISK_RATIO = 0.8


def kpi_trend(latest: float, previous: float) -> KPITrend:
    if latest > previous:
        return "up"
    if latest < previous:
        return "down"
    return "stable"


def kpi_status(value: float, target: float) -> KPIStatus:
    """Status pela razão valor/meta (>=95% no prazo, >=80% em risco).

    Meta zero: qualquer valor positivo conta como atingido.
    """
    if target == 0:
        return "on-track" if value > 0 else "off-track"
    ratio = value / target
    if ratio >= ON_TRACK_RATIO:
        return "on-track"
    if ratio >= AT_RISK_RATIO:
        return "at-risk"
    return "off-track"


def merge_history(
    history: tuple[KPIHistoryPoint, ...],
    value: float,
    recorded_on: str,
) -> list[KPIHistoryPoint]:
    """Histórico com o novo ponto (substitui medição da mesma data)."""
    points = [p for p in history if p.date != recorded_on]
    points.append(KPIHistoryPoint(date=recorded_on, value=value))
    return sorted(points, key=lambda p: p.date)


def compute_kpi_progress(kpi: KPI, value: float, recorded_on: str) -> dict[str, Any]:
    """Delta de update para o KPI após registrar `value` em `recorded_on`."""
    history = merge_history(kpi.history, value, recorded_on)
    latest = history[-1].value
    previous = history[-2].value if len(history) > 1 else kpi.previous
    return {
        "current": latest,
        "previous": previous,
        "trend": kpi_trend(latest, previous),
        "status": kpi_status(latest, kpi.target),
    }


class KPIRecorder:
    """Registra valores de KPI.

    Args:
        store: Store da coleção de KPIs
        remote: Interface remota (grava o ponto de histórico)
    """

    def __init__(
        self,
        store: SynchronizedCollectionStore[KPI],
        remote: RemoteQueryProtocol,
    ) -> None:
        self._store = store
        self._remote = remote

    async def record_value(
        self,
        kpi_id: str,
        value: float,
        date: str | None = None,
    ) -> KPI | None:
        """Registra medição e atualiza o KPI.

        Args:
            kpi_id: Id do KPI
            value: Valor medido
            date: Data YYYY-MM-DD (padrão: hoje, UTC)

        Returns:
            KPI como está no snapshot após a confirmação.

        Raises:
            NotFoundError: KPI ausente do snapshot.
            MutationError: Falha ao atualizar o KPI ou gravar o histórico.
        """
        recorded_on = date or datetime.now(UTC).date().isoformat()
        with correlation_scope():
            kpi = self._store.get(kpi_id)
            # update() levanta NotFoundError quando kpi é None
            delta = compute_kpi_progress(kpi, value, recorded_on) if kpi is not None else {"current": value}
            await self._store.update(kpi_id, delta)

            start = time.perf_counter()
            try:
                await self._remote.insert(
                    KPI_HISTORY_TABLE,
                    {"kpi_id": kpi_id, "value": value, "recorded_at": recorded_on},
                )
            except Exception as exc:
                record_latency(KPI_HISTORY_TABLE, "create", (time.perf_counter() - start) * 1000, success=False)
                logger.warning(
                    "kpi_history_insert_failed",
                    extra={"kpi_id": kpi_id, "error_type": type(exc).__name__},
                )
                raise MutationError(
                    f"Falha ao gravar histórico do KPI {kpi_id}: {exc}",
                    collection=self._store.name,
                    operation="record_value",
                    target_id=kpi_id,
                    user_message="O valor foi aplicado, mas o histórico não pôde ser salvo.",
                ) from exc
            record_latency(KPI_HISTORY_TABLE, "create", (time.perf_counter() - start) * 1000)

            logger.info(
                "kpi_value_recorded",
                extra={"kpi_id": kpi_id, "recorded_on": recorded_on, "status": delta.get("status")},
            )
            return self._store.get(kpi_id)
