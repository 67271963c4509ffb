"""
Exports públicos do módulo fsm/states.

Estados do ciclo de vida de uma coleção sincronizada.
"""

from fsm.states.collection import (
    DEFAULT_INITIAL_STATE,
    SETTLED_STATES,
    CollectionState,
    is_settled,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "SETTLED_STATES",
    "CollectionState",
    "is_settled",
    "is_valid_state",
]
