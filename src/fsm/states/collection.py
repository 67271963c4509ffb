"""
Estados do ciclo de vida de uma coleção sincronizada.

Uma coleção nasce não inicializada, entra em carga quando o primeiro
consumidor a abre e alterna entre pronta/erro a cada refetch. Não existe
estado terminal: a instância é descartada pelo dono quando o último
assinante sai, sem transição.
"""

from enum import StrEnum


class CollectionState(StrEnum):
    """
    Estados canônicos de uma coleção sincronizada.

    Estados:
        - UNINITIALIZED: Instância criada, nenhuma carga feita
        - LOADING: Consulta remota em andamento (carga inicial ou refetch)
        - READY: Snapshot reconciliado com o servidor
        - ERRORED: Última carga falhou; snapshot anterior mantido
    """

    UNINITIALIZED = "UNINITIALIZED"
    LOADING = "LOADING"
    READY = "READY"
    ERRORED = "ERRORED"

    def __str__(self) -> str:
        return self.value


# Estado inicial padrão para novas coleções
DEFAULT_INITIAL_STATE: CollectionState = CollectionState.UNINITIALIZED

# Estados em que o snapshot pode ser exibido (mesmo que desatualizado)
SETTLED_STATES: frozenset[CollectionState] = frozenset({
    CollectionState.READY,
    CollectionState.ERRORED,
})


def is_settled(state: CollectionState) -> bool:
    """
    Verifica se nenhuma carga está em andamento.

    Args:
        state: Estado a ser verificado

    Returns:
        True se READY ou ERRORED
    """
    return state in SETTLED_STATES


def is_valid_state(state: CollectionState) -> bool:
    """
    Verifica se o valor é um estado válido do enum.

    Args:
        state: Estado a ser verificado

    Returns:
        True se é um CollectionState válido
    """
    return isinstance(state, CollectionState)
