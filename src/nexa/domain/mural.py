"""Publicações do mural."""

from __future__ import annotations

from typing import Self

from pydantic import Field, model_validator

from nexa.domain.base import Record

DEFAULT_AUTHOR_NAME = "Usuário"


class MuralPost(Record):
    """Publicação global ou de um departamento.

    author_name e department_name são desnormalizados no cliente.
    """

    author_id: str
    department_id: str | None = None
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    is_global: bool = False
    created_at: str | None = None
    updated_at: str | None = None
    author_name: str = DEFAULT_AUTHOR_NAME
    department_name: str | None = None

    @model_validator(mode="after")
    def _global_posts_have_no_department(self) -> Self:
        if self.is_global and self.department_id is not None:
            raise ValueError("publicação global não pode ter department_id")
        return self


__all__ = ["DEFAULT_AUTHOR_NAME", "MuralPost"]
