"""
Exports públicos do módulo fsm/manager.

Máquina de estados (CollectionStateMachine) do ciclo de vida de coleções.
"""

from fsm.manager.machine import (
    DEFAULT_HISTORY_LIMIT,
    CollectionStateMachine,
    create_fsm,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "CollectionStateMachine",
    "create_fsm",
]
