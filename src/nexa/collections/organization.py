"""Perfis, departamentos e setores (tela de configurações)."""

from __future__ import annotations

from nexa.domain.organization import Department, Profile, Sector
from nexa.protocols.models import OrderBy
from nexa.sync.collection import CollectionDefinition

_BY_NAME = (OrderBy("name"),)

PROFILES: CollectionDefinition[Profile] = CollectionDefinition(
    name="profiles",
    table="profiles",
    record_type=Profile,
    label="Usuários",
    order=_BY_NAME,
    # user_id e email vêm do cadastro de autenticação
    writable_fields=frozenset({"name", "role", "department_id", "sector_id"}),
)

DEPARTMENTS: CollectionDefinition[Department] = CollectionDefinition(
    name="departments",
    table="departments",
    record_type=Department,
    label="Departamentos",
    order=_BY_NAME,
)

SECTORS: CollectionDefinition[Sector] = CollectionDefinition(
    name="sectors",
    table="sectors",
    record_type=Sector,
    label="Setores",
    order=_BY_NAME,
)
