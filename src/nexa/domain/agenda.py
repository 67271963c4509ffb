"""Eventos da agenda."""

from __future__ import annotations

from datetime import date  # noqa: TC003 - usado em runtime pelo schema do Pydantic

from pydantic import Field

from nexa.domain.base import Record


class AgendaEvent(Record):
    """Evento de agenda de um usuário."""

    user_id: str | None = None
    title: str = Field(..., min_length=1)
    description: str | None = None
    event_date: date
    event_time: str | None = Field(
        default=None,
        pattern=r"^\d{2}:\d{2}(:\d{2})?$",
        description="Horário HH:MM ou HH:MM:SS.",
    )


__all__ = ["AgendaEvent"]
