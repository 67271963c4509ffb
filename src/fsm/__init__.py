"""
Módulo FSM: máquina de estados do ciclo de vida de coleções sincronizadas.

Estrutura:
    - states/: Definições dos estados (CollectionState enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards
    - manager/: Máquina de estados (CollectionStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

from fsm.manager import (
    CollectionStateMachine,
    create_fsm,
)
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    SETTLED_STATES,
    CollectionState,
    is_settled,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "SETTLED_STATES",
    "VALID_TRANSITIONS",
    "CollectionState",
    "CollectionStateMachine",
    "GuardResult",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_settled",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
