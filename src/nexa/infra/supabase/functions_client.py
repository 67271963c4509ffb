"""Cliente de edge functions (operações privilegiadas)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from supabase import FunctionsError

from nexa.protocols.privileged import PrivilegedEndpointProtocol
from utils.errors import PrivilegedCallError

if TYPE_CHECKING:
    from supabase import AsyncClient

logger = logging.getLogger(__name__)


class SupabaseFunctionsClient(PrivilegedEndpointProtocol):
    """Invoca edge functions com o token do usuário.

    Args:
        client: Cliente assíncrono do Supabase
    """

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def invoke(
        self,
        function: str,
        payload: dict[str, Any],
        *,
        access_token: str,
    ) -> dict[str, Any]:
        if not access_token or not access_token.strip():
            raise PrivilegedCallError("access_token é obrigatório", status_code=401)

        options = {
            "body": payload,
            "headers": {"Authorization": f"Bearer {access_token}"},
            "responseType": "json",
        }
        try:
            body = await self._client.functions.invoke(function, invoke_options=options)
        except FunctionsError as exc:
            raise PrivilegedCallError(exc.message or str(exc), status_code=exc.status) from exc
        except httpx.HTTPError as exc:
            raise PrivilegedCallError(f"Falha de conexão ao chamar {function}") from exc
        except ValueError as exc:
            raise PrivilegedCallError(f"Resposta inválida de {function}") from exc

        if not isinstance(body, dict):
            raise PrivilegedCallError(f"Resposta inesperada de {function}")
        if body.get("error"):
            # Algumas funções respondem 200 com corpo de erro
            raise PrivilegedCallError(str(body["error"]))

        logger.info("privileged_call_ok", extra={"function": function})
        return body
