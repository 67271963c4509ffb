"""Composição das dependências a partir das configurações."""

from nexa.bootstrap.dependencies import (
    SyncContainer,
    build_container,
    create_memory_backend,
    setup_logging,
    validate_settings,
)

__all__ = [
    "SyncContainer",
    "build_container",
    "create_memory_backend",
    "setup_logging",
    "validate_settings",
]
