"""Registro base das coleções sincronizadas.

Todo registro tem id estável (atribuído pelo servidor) ou temporário
(gerado no cliente até a confirmação). Registros são imutáveis: views
nunca alteram um registro no lugar, apenas pelo store.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

TEMP_ID_PREFIX = "temp-"


def new_temp_id() -> str:
    """Gera id temporário para criação otimista."""
    return f"{TEMP_ID_PREFIX}{uuid4().hex}"


def is_temp_id(record_id: str) -> bool:
    """True se o id ainda não foi confirmado pelo servidor."""
    return record_id.startswith(TEMP_ID_PREFIX)


class Record(BaseModel):
    """Base de todos os registros de coleção."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1, description="Identificador único do registro.")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # ids numéricos (serial) chegam como int do PostgREST
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


__all__ = ["TEMP_ID_PREFIX", "Record", "is_temp_id", "new_temp_id"]
