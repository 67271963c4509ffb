"""Backend em memória (dev/test)."""

from nexa.infra.memory.memory_backend import (
    MemoryChangeFeed,
    MemoryPrivilegedEndpoint,
    MemoryRemoteQuery,
)

__all__ = ["MemoryChangeFeed", "MemoryPrivilegedEndpoint", "MemoryRemoteQuery"]
