"""Phase state machine for the Brass Birmingham engine.

The game flow is two orthogonal machines:

- The turn-phase machine (Phase): selecting an action, one sub-state per
  action in progress, the transient end-of-turn check and game over.
- The selection wizard (Step) nested in every action phase: select a
  card, select targets, confirm.

This module holds the transition table, the PhaseMachine that enforces
it and the table of events accepted at each position.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from core.constants import ACTION_PHASE_SET, ActionKind, Phase, Step
from core.errors import ErrorKind, RuleViolation

from .events import EventType

if TYPE_CHECKING:
    from core.game_state import GameState


# Valid phase transitions
PHASE_TRANSITIONS: dict[Phase, list[Phase]] = {
    Phase.SETUP: [Phase.SELECTING_ACTION],
    Phase.SELECTING_ACTION: sorted(ACTION_PHASE_SET, key=lambda p: p.value)
    + [Phase.CHECKING_GAME_STATE],
    # Every action phase returns to selection, or ends the turn when actions run out
    **{phase: [Phase.SELECTING_ACTION, Phase.CHECKING_GAME_STATE] for phase in ACTION_PHASE_SET},
    Phase.CHECKING_GAME_STATE: [Phase.SELECTING_ACTION, Phase.GAME_OVER],
    # Terminal
    Phase.GAME_OVER: [],
}

# Target-selection events accepted by each action once a card is selected
TARGET_EVENTS: dict[ActionKind, list[EventType]] = {
    ActionKind.BUILD: [EventType.SELECT_LOCATION, EventType.SELECT_INDUSTRY],
    ActionKind.DEVELOP: [EventType.SELECT_INDUSTRY],
    ActionKind.SELL: [EventType.SELECT_LOCATION, EventType.SELECT_INDUSTRY],
    ActionKind.NETWORK: [EventType.SELECT_LINK],
    ActionKind.LOAN: [],
    ActionKind.SCOUT: [],
    ActionKind.PASS: [],
}


@dataclass
class PhaseTransitionResult:
    """Result of a phase transition attempt.

    Attributes:
        success: Whether the transition was successful.
        new_phase: The new phase if successful, None otherwise.
        reason: Description of why the transition failed (if it did).
    """

    success: bool
    new_phase: Optional[Phase]
    reason: Optional[str] = None


class PhaseMachine:
    """State machine for managing game phase transitions.

    Phases:
        - SETUP: Game being created; left as soon as hands are dealt
        - SELECTING_ACTION: Current player picks an action or ends the turn
        - BUILDING .. PASSING: An action is being assembled (card, targets, confirm)
        - CHECKING_GAME_STATE: End-of-turn bookkeeping (next player, round, era)
        - GAME_OVER: Terminal state
    """

    def __init__(self, initial_phase: Phase = Phase.SETUP):
        """Initialize the phase machine.

        Args:
            initial_phase: The starting phase (default: SETUP).
        """
        self._phase = initial_phase

    @property
    def phase(self) -> Phase:
        """Get the current phase."""
        return self._phase

    def get_valid_transitions(self) -> list[Phase]:
        """Get the list of valid next phases from the current phase."""
        return PHASE_TRANSITIONS.get(self._phase, [])

    def can_transition_to(self, target_phase: Phase) -> bool:
        """Check if a transition to the target phase is valid."""
        return target_phase in self.get_valid_transitions()

    def transition_to(self, target_phase: Phase) -> PhaseTransitionResult:
        """Attempt to transition to a new phase.

        Args:
            target_phase: The phase to transition to.

        Returns:
            PhaseTransitionResult indicating success or failure.
        """
        if not self.can_transition_to(target_phase):
            valid = self.get_valid_transitions()
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason=f"Cannot transition from {self._phase.value} to {target_phase.value}. "
                f"Valid transitions: {[p.value for p in valid]}",
            )

        self._phase = target_phase
        return PhaseTransitionResult(success=True, new_phase=target_phase)

    def is_game_over(self) -> bool:
        """Check if the game has ended."""
        return self._phase == Phase.GAME_OVER

    def is_action_phase(self) -> bool:
        """Check if an action is being assembled."""
        return self._phase in ACTION_PHASE_SET

    # -------------------------------------------------------------------------
    # String representation
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return f"PhaseMachine(phase={self._phase.value})"

    def __repr__(self) -> str:
        return f"PhaseMachine(phase={self._phase!r})"


def enter_phase(state: GameState, target_phase: Phase) -> None:
    """Move a state to a new phase, enforcing the transition table.

    Raises:
        RuleViolation: InvalidPhase if the transition is not allowed.
    """
    machine = PhaseMachine(state.phase)
    result = machine.transition_to(target_phase)
    if not result.success:
        raise RuleViolation(ErrorKind.INVALID_PHASE, result.reason or "Invalid transition")
    state.phase = machine.phase


def legal_event_types(state: GameState) -> list[EventType]:
    """Event types accepted at the current state-machine position.

    An accepted event can still be rejected by the rules of the action
    (for example CONFIRM_ACTION with an incomplete selection). Events not
    listed are rejected with InvalidPhase, or GameOver once the game ended.
    """
    if state.is_game_over():
        return []

    if state.phase == Phase.SELECTING_ACTION:
        events = [EventType.END_TURN]
        if state.global_state.actions_remaining > 0:
            events.insert(0, EventType.SELECT_ACTION)
        return events

    if state.phase not in ACTION_PHASE_SET or state.selection.action is None:
        return []

    events = [EventType.SELECT_CARD]
    if state.selection.step != Step.SELECTING_CARD:
        events.extend(TARGET_EVENTS[state.selection.action])
    events.extend([EventType.CONFIRM_ACTION, EventType.CANCEL_ACTION])
    return events
