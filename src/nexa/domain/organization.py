"""Usuários, departamentos, setores e o contexto de quem está vendo."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import Field

from nexa.domain.base import Record

AppRole = Literal["admin", "gerente", "coordenador", "analista", "operador"]

APP_ROLES: tuple[AppRole, ...] = ("admin", "gerente", "coordenador", "analista", "operador")


class Profile(Record):
    """Perfil de usuário (criado por trigger ao cadastrar o usuário)."""

    user_id: str
    name: str = Field(..., min_length=1)
    email: str | None = None
    role: AppRole = "operador"
    department_id: str | None = None
    sector_id: str | None = None


class Department(Record):
    name: str = Field(..., min_length=1)


class Sector(Record):
    name: str = Field(..., min_length=1)
    department_id: str | None = None


@dataclass(frozen=True, slots=True)
class Viewer:
    """Usuário autenticado que consome as coleções.

    Attributes:
        user_id: Id do usuário autenticado
        name: Nome para exibição (log de atividades)
        role: Papel do usuário
        department_id: Departamento do usuário (None se não vinculado)
    """

    user_id: str
    name: str = ""
    role: AppRole = "operador"
    department_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def can_manage_posts(self) -> bool:
        """Admins e gerentes publicam no mural."""
        return self.role in ("admin", "gerente")


__all__ = ["APP_ROLES", "AppRole", "Department", "Profile", "Sector", "Viewer"]
