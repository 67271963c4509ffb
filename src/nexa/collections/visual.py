"""Quadros de gestão visual: Kanban, GUT, Eisenhower, 5W2H e Pareto."""

from __future__ import annotations

from nexa.domain.visual import EisenhowerItem, GUTItem, KanbanItem, ParetoItem, W5H2Item
from nexa.protocols.models import OrderBy
from nexa.sync.collection import CollectionDefinition

_BY_CREATED_AT = (OrderBy("created_at"),)

KANBAN: CollectionDefinition[KanbanItem] = CollectionDefinition(
    name="visual_kanban",
    table="visual_kanban_items",
    record_type=KanbanItem,
    label="Kanban",
    order=(OrderBy("position"),),
)

GUT: CollectionDefinition[GUTItem] = CollectionDefinition(
    name="visual_gut",
    table="visual_gut_items",
    record_type=GUTItem,
    label="Matriz GUT",
    order=_BY_CREATED_AT,
    # score é calculado pelo banco
    writable_fields=frozenset({"problem", "gravity", "urgency", "trend", "user_id"}),
)

EISENHOWER: CollectionDefinition[EisenhowerItem] = CollectionDefinition(
    name="visual_eisenhower",
    table="visual_eisenhower_items",
    record_type=EisenhowerItem,
    label="Matriz de Eisenhower",
    order=_BY_CREATED_AT,
)

W5H2: CollectionDefinition[W5H2Item] = CollectionDefinition(
    name="visual_5w2h",
    table="visual_5w2h_items",
    record_type=W5H2Item,
    label="5W2H",
    order=_BY_CREATED_AT,
)

PARETO: CollectionDefinition[ParetoItem] = CollectionDefinition(
    name="visual_pareto",
    table="visual_pareto_items",
    record_type=ParetoItem,
    label="Pareto",
    order=(OrderBy("frequency", ascending=False),),
)

VISUAL_BOARDS: tuple[CollectionDefinition, ...] = (KANBAN, GUT, EISENHOWER, W5H2, PARETO)
