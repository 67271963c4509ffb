"""Esquemas de registro por coleção (um formato por coleção)."""

from nexa.domain.agenda import AgendaEvent
from nexa.domain.base import Record, is_temp_id, new_temp_id
from nexa.domain.kpi import KPI, KPIHistoryPoint
from nexa.domain.mural import MuralPost
from nexa.domain.okr import OKR, KeyResult
from nexa.domain.organization import APP_ROLES, AppRole, Department, Profile, Sector, Viewer
from nexa.domain.process import Process
from nexa.domain.training import Training
from nexa.domain.visual import EisenhowerItem, GUTItem, KanbanItem, ParetoItem, W5H2Item

__all__ = [
    "APP_ROLES",
    "KPI",
    "OKR",
    "AgendaEvent",
    "AppRole",
    "Department",
    "EisenhowerItem",
    "GUTItem",
    "KPIHistoryPoint",
    "KanbanItem",
    "KeyResult",
    "MuralPost",
    "ParetoItem",
    "Process",
    "Profile",
    "Record",
    "Sector",
    "Training",
    "Viewer",
    "W5H2Item",
    "is_temp_id",
    "new_temp_id",
]
