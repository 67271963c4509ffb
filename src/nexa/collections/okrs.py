"""Coleção de OKRs com resultados-chave embutidos."""

from __future__ import annotations

from typing import Any

from nexa.domain.okr import OKR
from nexa.sync.collection import CollectionDefinition


def denormalize_okr(row: dict[str, Any]) -> dict[str, Any]:
    if "key_results" in row and row["key_results"] is None:
        row["key_results"] = []
    return row


OKRS: CollectionDefinition[OKR] = CollectionDefinition(
    name="okrs",
    table="okrs",
    record_type=OKR,
    label="OKRs",
    columns="*, key_results(*)",
    related_tables=frozenset({"key_results"}),
    writable_fields=frozenset({
        "objective",
        "owner",
        "deadline",
        "description",
        "department_id",
        "owner_id",
    }),
    denormalize=denormalize_okr,
)
