"""Tests for the phase state machine and the legal event table."""

import pytest

from core.constants import ACTION_PHASE_SET, ActionKind, IndustryType, Phase, Step
from core.errors import ErrorKind, RuleViolation
from core.game_state import GameState, Selection
from engine.events import ActionEvent, EventType
from engine.game_engine import initial_state
from engine.phase_machine import (
    PHASE_TRANSITIONS,
    PhaseMachine,
    enter_phase,
    legal_event_types,
)


@pytest.fixture
def game_state() -> GameState:
    """Create a fresh 2-player game."""
    return initial_state(["Ada", "Brunel"])


# =============================================================================
# PhaseMachine Tests
# =============================================================================


class TestPhaseMachine:
    """Test PhaseMachine transitions."""

    def test_initial_phase(self):
        machine = PhaseMachine()
        assert machine.phase == Phase.SETUP
        assert not machine.is_game_over()

    def test_setup_to_selecting_action(self):
        machine = PhaseMachine()
        result = machine.transition_to(Phase.SELECTING_ACTION)
        assert result.success
        assert result.new_phase == Phase.SELECTING_ACTION
        assert machine.phase == Phase.SELECTING_ACTION

    def test_invalid_transition(self):
        """An invalid transition leaves the phase unchanged and explains why."""
        machine = PhaseMachine(Phase.SELECTING_ACTION)
        result = machine.transition_to(Phase.GAME_OVER)
        assert not result.success
        assert result.new_phase is None
        assert "Cannot transition" in result.reason
        assert machine.phase == Phase.SELECTING_ACTION

    def test_every_action_phase_reachable(self):
        machine = PhaseMachine(Phase.SELECTING_ACTION)
        for phase in ACTION_PHASE_SET:
            assert machine.can_transition_to(phase)

    def test_action_phases_return_or_end_turn(self):
        for phase in ACTION_PHASE_SET:
            machine = PhaseMachine(phase)
            assert machine.is_action_phase()
            assert set(machine.get_valid_transitions()) == {
                Phase.SELECTING_ACTION,
                Phase.CHECKING_GAME_STATE,
            }

    def test_action_phases_not_interchangeable(self):
        machine = PhaseMachine(Phase.BUILDING)
        assert not machine.can_transition_to(Phase.SELLING)

    def test_game_over_is_terminal(self):
        machine = PhaseMachine(Phase.GAME_OVER)
        assert machine.is_game_over()
        assert machine.get_valid_transitions() == []
        assert PHASE_TRANSITIONS[Phase.GAME_OVER] == []

    def test_checking_leads_to_selection_or_game_over(self):
        assert set(PHASE_TRANSITIONS[Phase.CHECKING_GAME_STATE]) == {
            Phase.SELECTING_ACTION,
            Phase.GAME_OVER,
        }

    def test_every_phase_has_an_entry(self):
        assert set(PHASE_TRANSITIONS) == set(Phase)


class TestEnterPhase:
    """Test enter_phase on a game state."""

    def test_enter_valid_phase(self, game_state: GameState):
        enter_phase(game_state, Phase.BUILDING)
        assert game_state.phase == Phase.BUILDING

    def test_enter_invalid_phase_raises(self, game_state: GameState):
        with pytest.raises(RuleViolation) as exc_info:
            enter_phase(game_state, Phase.GAME_OVER)
        assert exc_info.value.kind == ErrorKind.INVALID_PHASE
        assert game_state.phase == Phase.SELECTING_ACTION


# =============================================================================
# Legal Event Tests
# =============================================================================


class TestLegalEventTypes:
    """Test the events accepted at each position."""

    def test_selecting_action(self, game_state: GameState):
        assert legal_event_types(game_state) == [EventType.SELECT_ACTION, EventType.END_TURN]

    def test_no_actions_left(self, game_state: GameState):
        game_state.global_state.actions_remaining = 0
        assert legal_event_types(game_state) == [EventType.END_TURN]

    def test_waiting_for_card(self, game_state: GameState):
        game_state.phase = Phase.BUILDING
        game_state.selection = Selection(action=ActionKind.BUILD)
        assert legal_event_types(game_state) == [
            EventType.SELECT_CARD,
            EventType.CONFIRM_ACTION,
            EventType.CANCEL_ACTION,
        ]

    def test_build_targets_after_card(self, game_state: GameState):
        game_state.phase = Phase.BUILDING
        game_state.selection = Selection(action=ActionKind.BUILD, step=Step.SELECTING_TARGET)
        events = legal_event_types(game_state)
        assert EventType.SELECT_LOCATION in events
        assert EventType.SELECT_INDUSTRY in events
        assert EventType.SELECT_LINK not in events

    def test_network_targets(self, game_state: GameState):
        game_state.phase = Phase.NETWORKING
        game_state.selection = Selection(action=ActionKind.NETWORK, step=Step.SELECTING_TARGET)
        events = legal_event_types(game_state)
        assert EventType.SELECT_LINK in events
        assert EventType.SELECT_LOCATION not in events

    def test_loan_has_no_targets(self, game_state: GameState):
        game_state.phase = Phase.TAKING_LOAN
        game_state.selection = Selection(action=ActionKind.LOAN, step=Step.CONFIRMING)
        assert legal_event_types(game_state) == [
            EventType.SELECT_CARD,
            EventType.CONFIRM_ACTION,
            EventType.CANCEL_ACTION,
        ]

    def test_end_turn_not_allowed_mid_action(self, game_state: GameState):
        game_state.phase = Phase.SELLING
        game_state.selection = Selection(action=ActionKind.SELL)
        assert EventType.END_TURN not in legal_event_types(game_state)

    def test_game_over(self, game_state: GameState):
        game_state.phase = Phase.GAME_OVER
        assert legal_event_types(game_state) == []


class TestActionEvent:
    """Test event construction and parameter parsing."""

    def test_action_kind_from_string(self):
        assert ActionEvent.select_action("develop").action_kind() == ActionKind.DEVELOP

    def test_unknown_action(self):
        with pytest.raises(RuleViolation) as exc_info:
            ActionEvent.select_action("juggle").action_kind()
        assert exc_info.value.kind == ErrorKind.INVALID_TARGET

    def test_missing_parameter(self):
        with pytest.raises(RuleViolation) as exc_info:
            ActionEvent(EventType.SELECT_CARD).require("card_id")
        assert exc_info.value.kind == ErrorKind.SELECTION_MISSING

    def test_round_trip(self):
        event = ActionEvent.select_industry(IndustryType.COTTON)
        restored = ActionEvent.from_dict(event.to_dict())
        assert restored.event_type == EventType.SELECT_INDUSTRY
        assert restored.industry_type() == IndustryType.COTTON

    def test_select_link_params(self):
        event = ActionEvent.select_link("birmingham", "dudley")
        assert event.params == {"from": "birmingham", "to": "dudley"}
