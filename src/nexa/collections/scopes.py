"""Filtros de escopo reutilizados pelas telas."""

from __future__ import annotations

import calendar
from datetime import date
from typing import TYPE_CHECKING

from nexa.protocols.models import Filter, QueryCriteria

if TYPE_CHECKING:
    from nexa.domain.organization import Viewer


def department_scope(viewer: Viewer, column: str = "department_id") -> QueryCriteria:
    """Admins veem tudo; demais usuários veem apenas o seu departamento.

    Usuário sem departamento também recebe critério vazio; a política de
    acesso do servidor decide o que ele enxerga.
    """
    if viewer.is_admin or not viewer.department_id:
        return QueryCriteria()
    return QueryCriteria.where(Filter.eq(column, viewer.department_id))


def month_range(year: int, month: int, column: str = "event_date") -> QueryCriteria:
    """Intervalo fechado do primeiro ao último dia do mês.

    Raises:
        ValueError: Se o mês for inválido.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Mês inválido: {month}")
    last_day = calendar.monthrange(year, month)[1]
    return QueryCriteria.where(
        Filter.gte(column, date(year, month, 1).isoformat()),
        Filter.lte(column, date(year, month, last_day).isoformat()),
    )
