"""Agenda de eventos (consultada por mês)."""

from __future__ import annotations

from nexa.domain.agenda import AgendaEvent
from nexa.protocols.models import OrderBy
from nexa.sync.collection import CollectionDefinition

AGENDA: CollectionDefinition[AgendaEvent] = CollectionDefinition(
    name="agenda",
    table="agenda_events",
    record_type=AgendaEvent,
    label="Agenda",
    order=(OrderBy("event_date"), OrderBy("event_time")),
)
