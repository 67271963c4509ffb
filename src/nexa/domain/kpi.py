"""Indicadores (KPIs) e seu histórico de medições."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from nexa.domain.base import Record

KPITrend = Literal["up", "down", "stable"]
KPIStatus = Literal["on-track", "at-risk", "off-track"]


class KPIHistoryPoint(BaseModel):
    """Medição registrada de um KPI."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    date: str = Field(..., description="Data da medição (YYYY-MM-DD ou ISO).")
    value: float = Field(..., description="Valor medido.")


class KPI(Record):
    """Indicador de desempenho com meta e histórico."""

    name: str = Field(..., min_length=1)
    category: str = ""
    current: float = 0.0
    target: float = 0.0
    previous: float = 0.0
    unit: str = ""
    trend: KPITrend = "stable"
    status: KPIStatus = "on-track"
    history: tuple[KPIHistoryPoint, ...] = ()
    department_id: str | None = None


__all__ = ["KPI", "KPIHistoryPoint", "KPIStatus", "KPITrend"]
