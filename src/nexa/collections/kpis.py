"""Coleção de KPIs com histórico embutido."""

from __future__ import annotations

from typing import Any

from nexa.domain.kpi import KPI
from nexa.sync.collection import CollectionDefinition

KPI_TABLE = "kpis"
KPI_HISTORY_TABLE = "kpi_history"


def denormalize_kpi(row: dict[str, Any]) -> dict[str, Any]:
    """Converte `kpi_history` embutido em `history` ordenado por data."""
    if KPI_HISTORY_TABLE not in row:
        return row
    raw_history = row.pop(KPI_HISTORY_TABLE) or []
    ordered = sorted(raw_history, key=lambda point: str(point.get("recorded_at", "")))
    row["history"] = [
        {"date": point.get("recorded_at", ""), "value": point.get("value", 0)}
        for point in ordered
    ]
    return row


KPIS: CollectionDefinition[KPI] = CollectionDefinition(
    name="kpis",
    table=KPI_TABLE,
    record_type=KPI,
    label="KPIs",
    columns=f"*, {KPI_HISTORY_TABLE}(*)",
    related_tables=frozenset({KPI_HISTORY_TABLE}),
    writable_fields=frozenset({
        "name",
        "category",
        "current",
        "target",
        "previous",
        "unit",
        "trend",
        "status",
        "department_id",
    }),
    denormalize=denormalize_kpi,
)
