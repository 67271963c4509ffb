"""Protocolo do endpoint de operações privilegiadas (edge functions)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class PrivilegedEndpointProtocol(ABC):
    """Chamada request/response executada com credenciais elevadas.

    O servidor reverifica o privilégio do chamador a partir do token.
    Implementações levantam PrivilegedCallError em falhas; o status HTTP
    fica disponível em `status_code`.
    """

    @abstractmethod
    async def invoke(
        self,
        function: str,
        payload: dict[str, Any],
        *,
        access_token: str,
    ) -> dict[str, Any]:
        """Invoca a função e retorna o corpo JSON de sucesso."""
