"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AuthorizationError,
    ChangeFeedError,
    FetchError,
    InfrastructureError,
    MutationError,
    NotFoundError,
    PrivilegedCallError,
    RemoteQueryError,
    SyncError,
    ValidationError,
)

__all__ = [
    "AuthorizationError",
    "ChangeFeedError",
    "FetchError",
    "InfrastructureError",
    "MutationError",
    "NotFoundError",
    "PrivilegedCallError",
    "RemoteQueryError",
    "SyncError",
    "ValidationError",
]
