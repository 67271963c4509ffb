"""Registro de processos (POPs) com ciclo de revisão."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from nexa.domain.base import Record

ProcessStatus = Literal["active", "review", "draft"]
ProcessRisk = Literal["low", "medium", "high"]


class Process(Record):
    """Processo documentado."""

    name: str = Field(..., min_length=1)
    department: str = ""
    owner: str = ""
    version: str = "1.0"
    status: ProcessStatus = "draft"
    risk: ProcessRisk = "low"
    last_review: str | None = None
    next_review: str | None = None
    description: str | None = None
    content: str | None = None


__all__ = ["Process", "ProcessRisk", "ProcessStatus"]
