"""Settings do Supabase.

Configurações de acesso a PostgREST, realtime e edge functions.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class SupabaseSettings:
    """Configurações do Supabase.

    Attributes:
        url: URL do projeto (ex: https://xyz.supabase.co)
        anon_key: Chave pública (anon) do projeto
        request_timeout_seconds: Timeout das chamadas HTTP
        create_user_function: Nome da função privilegiada de criação de usuário
    """

    url: str = ""
    anon_key: str = ""
    request_timeout_seconds: float = 15.0
    create_user_function: str = "create-user"

    def validate(self) -> list[str]:
        """Valida configurações do Supabase.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.url:
            errors.append("SUPABASE_URL não configurado")
        elif not self.url.startswith(("https://", "http://")):
            errors.append("SUPABASE_URL deve começar com http:// ou https://")

        if not self.anon_key:
            errors.append("SUPABASE_ANON_KEY não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("SUPABASE_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_supabase_from_env() -> SupabaseSettings:
    """Carrega SupabaseSettings de variáveis de ambiente."""
    return SupabaseSettings(
        url=os.getenv("SUPABASE_URL", ""),
        anon_key=os.getenv("SUPABASE_ANON_KEY", ""),
        request_timeout_seconds=float(os.getenv("SUPABASE_TIMEOUT_SECONDS", "15")),
        create_user_function=os.getenv("SUPABASE_CREATE_USER_FUNCTION", "create-user"),
    )


@lru_cache(maxsize=1)
def get_supabase_settings() -> SupabaseSettings:
    """Retorna instância cacheada de SupabaseSettings."""
    return _load_supabase_from_env()
