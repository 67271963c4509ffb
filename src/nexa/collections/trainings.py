"""Treinamentos."""

from __future__ import annotations

from nexa.domain.training import Training
from nexa.protocols.models import OrderBy
from nexa.sync.collection import CollectionDefinition

TRAININGS: CollectionDefinition[Training] = CollectionDefinition(
    name="trainings",
    table="trainings",
    record_type=Training,
    label="Treinamentos",
    order=(OrderBy("title"),),
)
