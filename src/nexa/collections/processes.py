"""Cadastro de processos."""

from __future__ import annotations

from nexa.domain.process import Process
from nexa.protocols.models import OrderBy
from nexa.sync.collection import CollectionDefinition

PROCESSES: CollectionDefinition[Process] = CollectionDefinition(
    name="processes",
    table="processes",
    record_type=Process,
    label="Processos",
    order=(OrderBy("name"),),
)
