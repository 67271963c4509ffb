"""Criação de usuários pela função privilegiada `create-user`.

Somente administradores podem criar usuários; a verificação final é do
servidor. Aqui validamos o payload antes da chamada e traduzimos as
rejeições para a taxonomia de erros do painel.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from nexa.domain.organization import AppRole  # noqa: TC001 - usado em runtime pelo Pydantic
from nexa.observability import correlation_scope, record_latency
from utils.errors import AuthorizationError, MutationError, PrivilegedCallError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from nexa.protocols.privileged import PrivilegedEndpointProtocol

logger = logging.getLogger(__name__)

CREATE_USER_FUNCTION = "create-user"
MIN_PASSWORD_LENGTH = 6

# Mensagens do servidor que indicam rejeição do chamador
_AUTH_REJECTION_MARKERS = (
    "unauthorized",
    "missing authorization",
    "only admins",
)


class CreateUserRequest(BaseModel):
    """Payload de criação de usuário."""

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(..., min_length=1)
    role: AppRole
    department_id: str | None = None
    sector_id: str | None = None


def _is_authorization_rejection(exc: PrivilegedCallError) -> bool:
    if exc.status_code in (401, 403):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _AUTH_REJECTION_MARKERS)


class UserAdminService:
    """Administração de usuários via endpoint privilegiado.

    Args:
        endpoint: Cliente de funções privilegiadas
        function_name: Nome da função de criação
    """

    def __init__(
        self,
        endpoint: PrivilegedEndpointProtocol,
        function_name: str = CREATE_USER_FUNCTION,
    ) -> None:
        self._endpoint = endpoint
        self._function_name = function_name

    @staticmethod
    def build_request(data: Mapping[str, Any]) -> CreateUserRequest:
        """Valida dados de formulário.

        Raises:
            ValidationError: Campos ausentes ou inválidos.
        """
        try:
            return CreateUserRequest.model_validate(dict(data))
        except PydanticValidationError as exc:
            errors = [f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()]
            raise ValidationError(
                "Dados de usuário inválidos",
                errors=errors,
                collection="profiles",
                operation="create_user",
            ) from exc

    async def create_user(
        self,
        request: CreateUserRequest | Mapping[str, Any],
        *,
        access_token: str,
    ) -> dict[str, Any]:
        """Cria usuário.

        Returns:
            Dados do usuário criado ({"id", "email"}).

        Raises:
            ValidationError: Payload inválido (nenhuma chamada remota).
            AuthorizationError: Sem sessão ou chamador não é admin.
            MutationError: Demais falhas do endpoint.
        """
        if not isinstance(request, CreateUserRequest):
            request = self.build_request(request)
        if not access_token:
            raise AuthorizationError(
                "Sessão ausente para criar usuário",
                collection="profiles",
                operation="create_user",
            )

        with correlation_scope():
            start = time.perf_counter()
            try:
                response = await self._endpoint.invoke(
                    self._function_name,
                    request.model_dump(),
                    access_token=access_token,
                )
            except PrivilegedCallError as exc:
                elapsed = (time.perf_counter() - start) * 1000
                record_latency(self._function_name, "invoke", elapsed, success=False)
                logger.warning(
                    "create_user_rejected",
                    extra={"status_code": exc.status_code, "role": request.role},
                )
                if _is_authorization_rejection(exc):
                    raise AuthorizationError(
                        str(exc),
                        collection="profiles",
                        operation="create_user",
                    ) from exc
                raise MutationError(
                    str(exc),
                    collection="profiles",
                    operation="create_user",
                    user_message=f"Erro ao criar usuário: {exc}",
                ) from exc

            record_latency(self._function_name, "invoke", (time.perf_counter() - start) * 1000)

        user = response.get("user") or {}
        logger.info("user_created", extra={"user_id": user.get("id"), "role": request.role})
        return dict(user)
