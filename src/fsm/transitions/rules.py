"""
Regras de transição válidas entre estados de uma coleção.

Grafo:
    UNINITIALIZED -> LOADING -> READY | ERRORED
    READY -> LOADING (refetch)
    ERRORED -> LOADING (nova tentativa)
"""

from fsm.states.collection import CollectionState

# Tipagem explícita do mapa de transições
TransitionMap = dict[CollectionState, frozenset[CollectionState]]

# Chave: estado de origem
# Valor: conjunto de estados de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    CollectionState.UNINITIALIZED: frozenset({
        CollectionState.LOADING,
    }),

    # LOADING: termina com sucesso ou erro
    CollectionState.LOADING: frozenset({
        CollectionState.READY,
        CollectionState.ERRORED,
    }),

    CollectionState.READY: frozenset({
        CollectionState.LOADING,
    }),

    # ERRORED não é terminal: a próxima carga pode recuperar
    CollectionState.ERRORED: frozenset({
        CollectionState.LOADING,
    }),
}


def get_valid_targets(state: CollectionState) -> frozenset[CollectionState]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(
    from_state: CollectionState,
    to_state: CollectionState,
) -> bool:
    """
    Verifica se uma transição é válida segundo as regras definidas.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        True se a transição é permitida, False caso contrário
    """
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Todo estado tem ao menos uma saída (não há estado terminal)
    - Nenhuma transição aponta para estado inexistente
    - Nenhum estado transita para UNINITIALIZED

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in CollectionState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")
        elif not VALID_TRANSITIONS[state]:
            errors.append(f"Estado {state.name} não possui transições de saída")

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, CollectionState):
                errors.append(
                    f"Transição {from_state.name} → {target}: destino inválido"
                )
            elif target == CollectionState.UNINITIALIZED:
                errors.append(
                    f"Transição {from_state.name} → UNINITIALIZED não permitida"
                )

    return errors
