"""Objetivos e resultados-chave (OKRs)."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from nexa.domain.base import Record

KeyResultStatus = Literal["completed", "on-track", "at-risk", "not-started"]


class KeyResult(Record):
    """Resultado-chave vinculado a um objetivo."""

    title: str = Field(..., min_length=1)
    current: float = 0.0
    target: float = 0.0
    unit: str = ""
    status: KeyResultStatus = "not-started"
    okr_id: str | None = None


class OKR(Record):
    """Objetivo com seus resultados-chave embutidos."""

    objective: str = Field(..., min_length=1)
    owner: str = ""
    deadline: str | None = None
    description: str | None = None
    department_id: str | None = None
    owner_id: str | None = None
    key_results: tuple[KeyResult, ...] = ()


__all__ = ["OKR", "KeyResult", "KeyResultStatus"]
