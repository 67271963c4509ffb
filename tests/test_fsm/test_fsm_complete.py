"""
Testes do módulo FSM do ciclo de vida de coleções.

- Testamos comportamento e contrato público
- Um teste cobre múltiplos componentes relacionados
- Foco em cenários válidos + inválidos + bordas
"""

from datetime import datetime

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    SETTLED_STATES,
    VALID_TRANSITIONS,
    CollectionState,
    CollectionStateMachine,
    GuardResult,
    StateTransition,
    TransitionResult,
    create_fsm,
    evaluate_guards,
    get_valid_targets,
    is_settled,
    is_transition_valid,
    is_valid_state,
    validate_transition_map,
)
from fsm.manager.machine import DEFAULT_HISTORY_LIMIT
from fsm.rules.guards import DEFAULT_GUARDS, guard_same_state, guard_valid_state
from fsm.states.collection import CollectionState as DirectCollectionState


class TestCollectionStates:
    """Testa CollectionState, SETTLED_STATES, is_settled e is_valid_state."""

    def test_enum_has_four_states_and_settled_states_are_correct(self) -> None:
        """
        Verifica estrutura do enum e estados assentados.
        Cobre: CollectionState, SETTLED_STATES, is_settled, is_valid_state
        """
        assert len(list(CollectionState)) == 4
        assert frozenset({CollectionState.READY, CollectionState.ERRORED}) == SETTLED_STATES

        assert is_settled(CollectionState.READY) is True
        assert is_settled(CollectionState.ERRORED) is True
        assert is_settled(CollectionState.LOADING) is False
        assert is_settled(CollectionState.UNINITIALIZED) is False

        for state in CollectionState:
            assert is_valid_state(state) is True
        assert is_valid_state("READY") is False  # type: ignore[arg-type]

        assert DEFAULT_INITIAL_STATE == CollectionState.UNINITIALIZED

    def test_direct_import_matches_reexport(self) -> None:
        """Import direto e re-export são o mesmo objeto."""
        assert DirectCollectionState is CollectionState

    def test_state_values_are_explicit_strings(self) -> None:
        """Valores string estáveis (usados em logs)."""
        for state in CollectionState:
            assert state.value == state.name
            assert str(state) == state.name


class TestValidTransitionsAndRules:
    """Testa VALID_TRANSITIONS, get_valid_targets, is_transition_valid e validate_transition_map."""

    def test_transition_map_is_complete_and_has_no_terminal_state(self) -> None:
        """
        Todo estado está no mapa e tem ao menos uma saída.
        Cobre: VALID_TRANSITIONS, validate_transition_map
        """
        for state in CollectionState:
            assert state in VALID_TRANSITIONS
            assert len(VALID_TRANSITIONS[state]) > 0

        for targets in VALID_TRANSITIONS.values():
            assert CollectionState.UNINITIALIZED not in targets

        assert validate_transition_map() == []

    def test_get_valid_targets_and_is_transition_valid_consistency(self) -> None:
        """get_valid_targets e is_transition_valid concordam para todos os pares."""
        for from_state in CollectionState:
            valid_targets = get_valid_targets(from_state)
            for to_state in CollectionState:
                assert is_transition_valid(from_state, to_state) == (to_state in valid_targets)

    def test_lifecycle_paths(self) -> None:
        """
        Caminhos do ciclo de vida.
        Cobre: carga inicial, refetch, recuperação de erro
        """
        assert is_transition_valid(CollectionState.UNINITIALIZED, CollectionState.LOADING)
        assert is_transition_valid(CollectionState.LOADING, CollectionState.READY)
        assert is_transition_valid(CollectionState.LOADING, CollectionState.ERRORED)
        assert is_transition_valid(CollectionState.READY, CollectionState.LOADING)
        assert is_transition_valid(CollectionState.ERRORED, CollectionState.LOADING)

        assert not is_transition_valid(CollectionState.UNINITIALIZED, CollectionState.READY)
        assert not is_transition_valid(CollectionState.READY, CollectionState.ERRORED)
        assert not is_transition_valid(CollectionState.ERRORED, CollectionState.READY)
        assert not is_transition_valid(CollectionState.LOADING, CollectionState.LOADING)


class TestGuardsAndEvaluation:
    """Testa guards individuais, GuardResult e evaluate_guards."""

    def test_guard_result_creation(self) -> None:
        """GuardResult.allow() e GuardResult.deny()."""
        result = GuardResult.allow()
        assert result.allowed is True
        assert result.reason is None

        result = GuardResult.deny("motivo do bloqueio")
        assert result.allowed is False
        assert result.reason == "motivo do bloqueio"

    def test_individual_guards(self) -> None:
        """
        Cobre: guard_same_state, guard_valid_state
        """
        assert guard_same_state(CollectionState.LOADING, CollectionState.LOADING).allowed is False
        assert guard_same_state(CollectionState.READY, CollectionState.LOADING).allowed is True

        assert guard_valid_state(CollectionState.READY, CollectionState.LOADING).allowed is True
        result = guard_valid_state("READY", CollectionState.LOADING)  # type: ignore[arg-type]
        assert result.allowed is False
        assert "origem" in (result.reason or "")

    def test_evaluate_guards_returns_first_denial(self) -> None:
        """
        Cobre: evaluate_guards, DEFAULT_GUARDS, guards customizados
        """
        assert evaluate_guards(CollectionState.READY, CollectionState.LOADING).allowed is True

        result = evaluate_guards(CollectionState.READY, CollectionState.READY)
        assert result.allowed is False
        assert "reflexiva" in (result.reason or "")

        assert len(DEFAULT_GUARDS) == 2

        calls: list[str] = []

        def first(_f: CollectionState, _t: CollectionState) -> GuardResult:
            calls.append("first")
            return GuardResult.deny("primeiro")

        def second(_f: CollectionState, _t: CollectionState) -> GuardResult:
            calls.append("second")
            return GuardResult.allow()

        result = evaluate_guards(CollectionState.READY, CollectionState.LOADING, [first, second])
        assert result.reason == "primeiro"
        assert calls == ["first"]


class TestStateTransitionAndTransitionResult:
    """Testa StateTransition e TransitionResult."""

    def test_state_transition_creation_and_log_dict(self) -> None:
        """
        Cobre: StateTransition, to_log_dict
        """
        transition = StateTransition(
            from_state=CollectionState.UNINITIALIZED,
            to_state=CollectionState.LOADING,
            trigger="manual",
            metadata={"seq": 1},
        )
        assert isinstance(transition.timestamp, datetime)

        log = transition.to_log_dict()
        assert log["from_state"] == "UNINITIALIZED"
        assert log["to_state"] == "LOADING"
        assert log["trigger"] == "manual"
        assert log["metadata"] == {"seq": 1}
        assert "timestamp" in log

    @pytest.mark.parametrize("trigger", ["", "   "])
    def test_state_transition_rejects_empty_trigger(self, trigger: str) -> None:
        """trigger vazio é inválido."""
        with pytest.raises(ValueError, match="trigger"):
            StateTransition(
                from_state=CollectionState.READY,
                to_state=CollectionState.LOADING,
                trigger=trigger,
            )

    def test_transition_result_validation(self) -> None:
        """
        Cobre: TransitionResult sucesso e falha
        """
        transition = StateTransition(
            from_state=CollectionState.READY,
            to_state=CollectionState.LOADING,
            trigger="change_feed",
        )
        result = TransitionResult(success=True, transition=transition)
        assert result.error_reason is None

        result = TransitionResult(success=False, error_reason="Transição inválida")
        assert result.transition is None

        with pytest.raises(ValueError, match="deve incluir transition"):
            TransitionResult(success=True, transition=None)

        with pytest.raises(ValueError, match="deve incluir error_reason"):
            TransitionResult(success=False, error_reason=None)


class TestCollectionStateMachineFlow:
    """Testa CollectionStateMachine e create_fsm com fluxos completos."""

    def test_load_refetch_and_recovery_flow(self) -> None:
        """
        Fluxo: carga inicial, erro em refetch, recuperação.
        Cobre: transition, history, is_settled, get_history_summary
        """
        machine = create_fsm("kpis")
        assert machine.current_state == CollectionState.UNINITIALIZED
        assert machine.collection == "kpis"
        assert machine.is_settled is False

        assert machine.transition(CollectionState.LOADING, "manual").success
        assert machine.transition(CollectionState.READY, "load_settled").success
        assert machine.is_settled is True

        assert machine.transition(CollectionState.LOADING, "change_feed").success
        assert machine.transition(CollectionState.ERRORED, "load_settled").success
        assert machine.transition(CollectionState.LOADING, "change_feed").success
        assert machine.transition(CollectionState.READY, "load_settled").success

        assert len(machine.history) == 6
        summary = machine.get_history_summary()
        assert summary[0]["from_state"] == "UNINITIALIZED"
        assert summary[-1]["to_state"] == "READY"

    def test_invalid_and_reflexive_transitions_fail_without_state_change(self) -> None:
        """
        Cobre: transição fora do mapa e reflexiva
        """
        machine = CollectionStateMachine(collection="okrs")
        result = machine.transition(CollectionState.READY, "skip")
        assert result.success is False
        assert "inválida" in (result.error_reason or "")
        assert machine.current_state == CollectionState.UNINITIALIZED

        machine.transition(CollectionState.LOADING, "manual")
        result = machine.transition(CollectionState.LOADING, "manual")
        assert result.success is False
        assert machine.current_state == CollectionState.LOADING
        assert len(machine.history) == 1

    def test_history_is_bounded(self) -> None:
        """Histórico mantém apenas as últimas transições."""
        machine = CollectionStateMachine(collection="mural", history_limit=4)
        machine.transition(CollectionState.LOADING, "manual")
        for _ in range(5):
            machine.transition(CollectionState.READY, "load_settled")
            machine.transition(CollectionState.LOADING, "change_feed")

        assert len(machine.history) == 4
        assert machine.history[-1].to_state == CollectionState.LOADING
        assert DEFAULT_HISTORY_LIMIT == 50

    def test_history_is_a_copy(self) -> None:
        """Alterar a lista retornada não afeta a máquina."""
        machine = create_fsm("agenda")
        machine.transition(CollectionState.LOADING, "manual")
        machine.history.clear()
        assert len(machine.history) == 1

    def test_state_summary_and_valid_targets(self) -> None:
        """
        Cobre: get_state_summary, get_valid_targets, can_transition_to
        """
        machine = create_fsm("trainings", CollectionState.READY)
        summary = machine.get_state_summary()
        assert summary == {
            "collection": "trainings",
            "current_state": "READY",
            "is_settled": True,
            "transition_count": 0,
            "valid_targets": ["LOADING"],
        }
        assert machine.get_valid_targets() == frozenset({CollectionState.LOADING})
        assert machine.can_transition_to(CollectionState.LOADING) is True
        assert machine.can_transition_to(CollectionState.ERRORED) is False
