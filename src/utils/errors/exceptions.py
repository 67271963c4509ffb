"""Exceções compartilhadas: falhas de infraestrutura e taxonomia de sincronização."""

from __future__ import annotations

from typing import Any


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura (rede, plataforma hospedada)."""


class RemoteQueryError(InfrastructureError):
    """Falha ao consultar ou gravar tabelas remotas.

    Attributes:
        status_code: Status HTTP retornado (None para falhas de rede)
        code: Código de erro da plataforma (ex: "42501" para permissão)
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class ChangeFeedError(InfrastructureError):
    """Falha ao assinar ou cancelar canal de notificações em tempo real."""


class PrivilegedCallError(InfrastructureError):
    """Falha ao chamar função privilegiada (edge function)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SyncError(RuntimeError):
    """Base da taxonomia de erros visíveis ao usuário.

    Args:
        message: Mensagem técnica (logs).
        collection: Nome lógico da coleção afetada.
        operation: Operação que falhou (load, create, update, remove...).
        user_message: Texto legível para notificação na interface.
    """

    default_user_message = "Ocorreu um erro inesperado."

    def __init__(
        self,
        message: str,
        *,
        collection: str = "",
        operation: str = "",
        user_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.collection = collection
        self.operation = operation
        self.user_message = user_message or self.default_user_message

    def to_log_dict(self) -> dict[str, Any]:
        """Representação segura para logs estruturados."""
        return {
            "error_type": type(self).__name__,
            "collection": self.collection,
            "operation": self.operation,
        }


class FetchError(SyncError):
    """Carga inicial ou refetch falhou; snapshot anterior é mantido."""

    default_user_message = "Não foi possível carregar os dados atualizados."


class MutationError(SyncError):
    """Criação/atualização/remoção rejeitada; alteração otimista desfeita."""

    default_user_message = "Não foi possível salvar a alteração."

    def __init__(
        self,
        message: str,
        *,
        collection: str = "",
        operation: str = "",
        target_id: str | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(
            message,
            collection=collection,
            operation=operation,
            user_message=user_message,
        )
        self.target_id = target_id


class NotFoundError(SyncError):
    """Mutação aponta para registro que não existe mais localmente."""

    default_user_message = "O registro não existe mais."

    def __init__(
        self,
        message: str,
        *,
        collection: str = "",
        operation: str = "",
        target_id: str | None = None,
    ) -> None:
        super().__init__(message, collection=collection, operation=operation)
        self.target_id = target_id


class AuthorizationError(SyncError):
    """Endpoint privilegiado rejeitou o chamador."""

    default_user_message = "Você não tem permissão para esta ação."


class ValidationError(SyncError):
    """Payload inválido, detectado antes de qualquer chamada remota.

    Attributes:
        errors: Lista de problemas encontrados (campo: motivo).
    """

    default_user_message = "Dados inválidos. Revise os campos e tente novamente."

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        collection: str = "",
        operation: str = "",
    ) -> None:
        super().__init__(message, collection=collection, operation=operation)
        self.errors = list(errors or [])
