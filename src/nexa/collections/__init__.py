"""Definições das coleções do painel e filtros de escopo."""

from nexa.collections.agenda import AGENDA
from nexa.collections.kpis import KPI_HISTORY_TABLE, KPIS, denormalize_kpi
from nexa.collections.mural import MURAL, enrich_mural_posts
from nexa.collections.okrs import OKRS
from nexa.collections.organization import DEPARTMENTS, PROFILES, SECTORS
from nexa.collections.processes import PROCESSES
from nexa.collections.scopes import department_scope, month_range
from nexa.collections.trainings import TRAININGS
from nexa.collections.visual import EISENHOWER, GUT, KANBAN, PARETO, VISUAL_BOARDS, W5H2

ALL_COLLECTIONS = (
    KPIS,
    OKRS,
    *VISUAL_BOARDS,
    MURAL,
    AGENDA,
    TRAININGS,
    PROCESSES,
    PROFILES,
    DEPARTMENTS,
    SECTORS,
)

__all__ = [
    "AGENDA",
    "ALL_COLLECTIONS",
    "DEPARTMENTS",
    "EISENHOWER",
    "GUT",
    "KANBAN",
    "KPIS",
    "KPI_HISTORY_TABLE",
    "MURAL",
    "OKRS",
    "PARETO",
    "PROCESSES",
    "PROFILES",
    "SECTORS",
    "TRAININGS",
    "VISUAL_BOARDS",
    "W5H2",
    "department_scope",
    "denormalize_kpi",
    "enrich_mural_posts",
    "month_range",
]
