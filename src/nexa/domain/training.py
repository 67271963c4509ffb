"""Treinamentos e acompanhamento de conclusão."""

from __future__ import annotations

from typing import Literal, Self

from pydantic import Field, model_validator

from nexa.domain.base import Record

TrainingCategory = Literal["Obrigatório", "Desenvolvimento", "Técnico"]
TrainingStatus = Literal["active", "completed", "pending"]


class Training(Record):
    """Treinamento com participantes e concluintes."""

    title: str = Field(..., min_length=1)
    category: TrainingCategory = "Obrigatório"
    participants: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    duration: str = ""
    status: TrainingStatus = "pending"
    deadline: str | None = None

    @model_validator(mode="after")
    def _completed_within_participants(self) -> Self:
        if self.completed > self.participants:
            raise ValueError("completed não pode exceder participants")
        return self


__all__ = ["Training", "TrainingCategory", "TrainingStatus"]
