"""
Máquina de estados do ciclo de vida de uma coleção sincronizada.

Controla transições UNINITIALIZED/LOADING/READY/ERRORED e mantém um
histórico limitado para diagnóstico.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.collection import (
    DEFAULT_INITIAL_STATE,
    CollectionState,
    is_settled,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

# Refetches acontecem a cada notificação; o histórico não pode crescer sem limite
DEFAULT_HISTORY_LIMIT = 50


class CollectionStateMachine:
    """
    Máquina de estados de uma coleção.

    Attributes:
        current_state: Estado atual da máquina
        history: Últimas transições realizadas
    """

    __slots__ = ("_collection", "_current_state", "_history", "_history_limit")

    def __init__(
        self,
        collection: str = "",
        initial_state: CollectionState | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            collection: Nome lógico da coleção (para logs)
            initial_state: Estado inicial (usa DEFAULT_INITIAL_STATE se None)
            history_limit: Quantidade máxima de transições mantidas
        """
        self._collection = collection
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._history_limit = history_limit

    @property
    def current_state(self) -> CollectionState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def collection(self) -> str:
        """Nome lógico da coleção."""
        return self._collection

    @property
    def is_settled(self) -> bool:
        """True se nenhuma carga está em andamento."""
        return is_settled(self._current_state)

    def can_transition_to(self, target: CollectionState) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[CollectionState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: CollectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'load_started')
            metadata: Dados adicionais para auditoria

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit:]

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        return {
            "collection": self._collection,
            "current_state": self._current_state.name,
            "is_settled": self.is_settled,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Retorna histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_fsm(
    collection: str,
    initial_state: CollectionState | None = None,
) -> CollectionStateMachine:
    """
    Factory function para criar uma FSM de coleção.

    Args:
        collection: Nome lógico da coleção
        initial_state: Estado inicial (opcional)

    Returns:
        CollectionStateMachine configurada
    """
    return CollectionStateMachine(
        collection=collection,
        initial_state=initial_state,
    )
