"""Itens dos quadros de gestão visual (Kanban, GUT, Eisenhower, 5W2H, Pareto)."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from nexa.domain.base import Record

EisenhowerQuadrant = Literal["do", "schedule", "delegate", "eliminate"]


class KanbanItem(Record):
    title: str = Field(..., min_length=1)
    description: str = ""
    assignee: str | None = None
    column_id: str = "todo"
    position: int = 0
    user_id: str | None = None


class GUTItem(Record):
    """Problema priorizado por gravidade, urgência e tendência (1 a 5)."""

    problem: str = Field(..., min_length=1)
    gravity: int = Field(default=1, ge=1, le=5)
    urgency: int = Field(default=1, ge=1, le=5)
    trend: int = Field(default=1, ge=1, le=5)
    score: int | None = None
    user_id: str | None = None


class EisenhowerItem(Record):
    task: str = Field(..., min_length=1)
    quadrant: EisenhowerQuadrant = "do"
    user_id: str | None = None


class W5H2Item(Record):
    """Plano de ação 5W2H."""

    what: str = Field(..., min_length=1)
    why: str = ""
    where: str = ""
    when: str = ""
    who: str = ""
    how: str = ""
    how_much: str = ""
    user_id: str | None = None


class ParetoItem(Record):
    cause: str = Field(..., min_length=1)
    frequency: int = Field(default=0, ge=0)
    user_id: str | None = None


__all__ = [
    "EisenhowerItem",
    "EisenhowerQuadrant",
    "GUTItem",
    "KanbanItem",
    "ParetoItem",
    "W5H2Item",
]
