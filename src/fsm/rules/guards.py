"""
Guards para transições de estado de coleções.

Guards são regras adicionais avaliadas depois do mapa de transições;
qualquer guard que negue bloqueia a transição.
"""

from collections.abc import Callable

from fsm.states.collection import CollectionState


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[CollectionState, CollectionState], GuardResult]


def guard_valid_state(
    from_state: CollectionState,
    to_state: CollectionState,
) -> GuardResult:
    """
    Guard: Verifica se ambos os estados são válidos.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        GuardResult indicando se transição é permitida
    """
    if not isinstance(from_state, CollectionState):
        return GuardResult.deny(f"Estado de origem inválido: {from_state}")

    if not isinstance(to_state, CollectionState):
        return GuardResult.deny(f"Estado de destino inválido: {to_state}")

    return GuardResult.allow()


def guard_same_state(
    from_state: CollectionState,
    to_state: CollectionState,
) -> GuardResult:
    """
    Guard: Previne transição reflexiva.

    Uma segunda carga iniciada durante LOADING não gera nova transição;
    o chamador deve apenas verificar o estado atual.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        GuardResult indicando se transição é permitida
    """
    if from_state == to_state:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


# Todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
    guard_same_state,
]


def evaluate_guards(
    from_state: CollectionState,
    to_state: CollectionState,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        Primeiro GuardResult negado ou allow() se todos permitirem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result

    return GuardResult.allow()
