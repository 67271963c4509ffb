"""Mural de publicações, enriquecido com nomes de autor e departamento."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nexa.domain.mural import DEFAULT_AUTHOR_NAME, MuralPost
from nexa.protocols.models import Filter, OrderBy, QueryCriteria
from nexa.sync.collection import CollectionDefinition

if TYPE_CHECKING:
    from nexa.protocols.remote_query import RemoteQueryProtocol


async def enrich_mural_posts(
    rows: list[dict[str, Any]],
    remote: RemoteQueryProtocol,
) -> list[dict[str, Any]]:
    """Adiciona author_name e department_name em lote.

    Uma consulta a `profiles` e uma a `departments` para todo o lote.
    Autor sem perfil recebe o nome padrão.
    """
    if not rows:
        return rows

    author_ids = sorted({str(r["author_id"]) for r in rows if r.get("author_id")})
    department_ids = sorted({str(r["department_id"]) for r in rows if r.get("department_id")})

    author_names: dict[str, str] = {}
    if author_ids:
        profiles = await remote.select(
            "profiles",
            columns="user_id, name",
            criteria=QueryCriteria.where(Filter.in_("user_id", author_ids)),
        )
        author_names = {str(p["user_id"]): p["name"] for p in profiles if p.get("name")}

    department_names: dict[str, str] = {}
    if department_ids:
        departments = await remote.select(
            "departments",
            columns="id, name",
            criteria=QueryCriteria.where(Filter.in_("id", department_ids)),
        )
        department_names = {str(d["id"]): d["name"] for d in departments}

    return [
        {
            **row,
            "author_name": author_names.get(str(row.get("author_id")), DEFAULT_AUTHOR_NAME),
            "department_name": department_names.get(str(row.get("department_id"))),
        }
        for row in rows
    ]


MURAL: CollectionDefinition[MuralPost] = CollectionDefinition(
    name="mural",
    table="mural_posts",
    record_type=MuralPost,
    label="Mural",
    order=(OrderBy("created_at", ascending=False),),
    writable_fields=frozenset({"author_id", "department_id", "title", "content", "is_global"}),
    enrich=enrich_mural_posts,
)
