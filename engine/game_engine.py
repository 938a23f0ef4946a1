"""Main game engine for the Brass Birmingham board game.

The engine is a pure state-transition function over GameState:
- initial_state(): Create a started game
- dispatch(): Apply one event, returning a new state or a rejection
- can_dispatch(): Check an event without keeping the result
- legal_event_types(): Events accepted at the current position

dispatch never mutates the state it is given. It works on a clone, and
on any rule violation the original state is returned with the error.

GameEngine wraps these functions with a history for hosts that prefer a
stateful object with undo and replay.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from core.board import BoardTopology
from core.config import DEFAULT_RULES, RulesConfig
from core.constants import MAX_PLAYERS, MIN_PLAYERS, LogKind
from core.errors import EngineError, ErrorKind, RuleViolation
from core.game_state import GameState, PlayerSetup
from core.logging_config import get_logger
from core.tiles import TileCatalog
from data.loader import Deck, load_default_board, load_default_catalog, load_default_deck

from .action_resolver import ActionOutcome
from .events import ActionEvent, EventType
from .phase_machine import legal_event_types
from .selection import SelectionWizard
from .turn_manager import TurnAdvanceResult

logger = get_logger(__name__)


@dataclass
class DispatchResult:
    """Result of dispatching an event.

    Attributes:
        success: Whether the event was applied.
        state: The new state on success, the unchanged input state otherwise.
        error: The rejection, if the event was not applied.
        outcome: The resolved action, if the event confirmed one.
        turn: What happened at the end of the turn, if the turn ended.
    """

    success: bool
    state: GameState
    error: Optional[EngineError] = None
    outcome: Optional[ActionOutcome] = None
    turn: Optional[TurnAdvanceResult] = None


def initial_state(
    players: Sequence[PlayerSetup | str],
    seed: int = 0,
    config: Optional[RulesConfig] = None,
    board: Optional[BoardTopology] = None,
    catalog: Optional[TileCatalog] = None,
    deck: Optional[Deck] = None,
) -> GameState:
    """Create a started game.

    Args:
        players: Player identities (or names) in seat order.
        seed: Seed for deck shuffling.
        config: Rule constants (default rules if None).
        board: Board topology (standard board if None).
        catalog: Tile catalog (standard tiles if None).
        deck: Cards for the game (standard deck for the player count if None).

    Returns:
        A GameState with hands dealt and the first player selecting an action.

    Raises:
        RuleViolation: InvalidPlayerCount if there are not 2-4 players.
    """
    setups = [p if isinstance(p, PlayerSetup) else PlayerSetup(name=p) for p in players]
    if not MIN_PLAYERS <= len(setups) <= MAX_PLAYERS:
        raise RuleViolation(
            ErrorKind.INVALID_PLAYER_COUNT,
            f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, "
            f"got {len(setups)}",
        )

    board = board if board is not None else load_default_board()
    catalog = catalog if catalog is not None else load_default_catalog()
    deck = deck if deck is not None else load_default_deck(len(setups), board)

    state = GameState.create_initial_state(
        board=board,
        catalog=catalog,
        players=setups,
        regular_cards=deck.regular_cards,
        wild_location_cards=deck.wild_location_cards,
        wild_industry_cards=deck.wild_industry_cards,
        config=config or DEFAULT_RULES,
        seed=seed,
    )
    logger.info("Started %d-player game with seed %d", len(setups), seed)
    return state


def dispatch(state: GameState, event: ActionEvent) -> DispatchResult:
    """Apply an event to a state.

    Args:
        state: The current state (never mutated).
        event: The event to apply.

    Returns:
        DispatchResult with the new state, or the original state and an error.
    """
    if state.is_game_over():
        error = EngineError(ErrorKind.GAME_OVER, "The game has ended")
        return DispatchResult(success=False, state=state, error=error)

    if event.event_type not in legal_event_types(state):
        error = EngineError(
            ErrorKind.INVALID_PHASE,
            f"{event.event_type.value} is not allowed while {state.phase.value} "
            f"({state.selection.step.value})",
            state.selection.action,
        )
        logger.debug("Rejected %s: %s", event, error)
        return DispatchResult(success=False, state=state, error=error)

    working = state.clone()
    wizard = SelectionWizard(working)
    try:
        wizard.handle(event)
    except RuleViolation as violation:
        logger.debug("Rejected %s: %s", event, violation.error)
        return DispatchResult(success=False, state=state, error=violation.error)

    return DispatchResult(
        success=True,
        state=working,
        outcome=wizard.action_outcome,
        turn=wizard.turn_result,
    )


def can_dispatch(state: GameState, event: ActionEvent) -> bool:
    """Check whether an event would be accepted, without changing the state."""
    return dispatch(state, event).success


def replay(state: GameState, events: Sequence[ActionEvent]) -> GameState:
    """Apply a sequence of events in order.

    Raises:
        RuleViolation: If any event is rejected.
    """
    for event in events:
        result = dispatch(state, event)
        if not result.success:
            raise RuleViolation(result.error.kind, result.error.detail, result.error.action)
        state = result.state
    return state


@dataclass
class StepResult:
    """Result of executing a step in the game.

    Attributes:
        success: Whether the event was applied.
        state: The game state after the step.
        error: The rejection, if any.
        done: Whether the game has ended.
        info: Additional information about the step.
    """

    success: bool
    state: GameState
    error: Optional[EngineError]
    done: bool
    info: dict[str, Any] = field(default_factory=dict)


class GameEngine:
    """Stateful wrapper around dispatch with undo and replay.

    Usage:
        engine = GameEngine()
        engine.reset(["Ada", "Brunel"])

        while not engine.is_game_over():
            event = choose_event(engine.state, engine.get_legal_event_types())
            result = engine.step(event)
    """

    def __init__(self):
        """Initialize the game engine."""
        self._initial: Optional[GameState] = None
        self._history: list[GameState] = []
        self._events: list[ActionEvent] = []

    @property
    def state(self) -> GameState:
        """Get the current game state.

        Raises:
            RuntimeError: If the game has not been initialized.
        """
        if not self._history:
            raise RuntimeError("Game not initialized. Call reset() first.")
        return self._history[-1]

    @property
    def events(self) -> list[ActionEvent]:
        """Events applied since reset, oldest first."""
        return list(self._events)

    def is_game_over(self) -> bool:
        return bool(self._history) and self.state.is_game_over()

    # -------------------------------------------------------------------------
    # Game Initialization
    # -------------------------------------------------------------------------

    def reset(
        self,
        players: Sequence[PlayerSetup | str],
        seed: int = 0,
        config: Optional[RulesConfig] = None,
        board: Optional[BoardTopology] = None,
        catalog: Optional[TileCatalog] = None,
    ) -> GameState:
        """Start a new game, discarding any history."""
        state = initial_state(players, seed=seed, config=config, board=board, catalog=catalog)
        self._initial = state
        self._history = [state]
        self._events = []
        return state

    # -------------------------------------------------------------------------
    # Event Execution
    # -------------------------------------------------------------------------

    def step(self, event: ActionEvent) -> StepResult:
        """Dispatch an event against the current state.

        Returns:
            StepResult with the outcome of the event.
        """
        result = dispatch(self.state, event)
        info: dict[str, Any] = {}
        if result.success:
            self._history.append(result.state)
            self._events.append(event)
            if result.outcome is not None:
                info["action"] = result.outcome.action.value
            if result.turn is not None:
                info["round_ended"] = result.turn.round_ended
                info["era_ended"] = result.turn.era_transition is not None
        else:
            info["error"] = result.error.to_dict()

        return StepResult(
            success=result.success,
            state=self.state,
            error=result.error,
            done=self.is_game_over(),
            info=info,
        )

    def can_step(self, event: ActionEvent) -> bool:
        return can_dispatch(self.state, event)

    def get_legal_event_types(self) -> list[EventType]:
        return legal_event_types(self.state)

    def undo(self) -> GameState:
        """Return to the state before the last successful step.

        Raises:
            RuntimeError: If there is nothing to undo.
        """
        if len(self._history) <= 1:
            raise RuntimeError("Nothing to undo")
        self._history.pop()
        self._events.pop()
        return self.state

    def replay(self) -> GameState:
        """Re-run every recorded event from the initial state.

        Returns:
            The replayed final state, whose hash matches the current state's.
        """
        if self._initial is None:
            raise RuntimeError("Game not initialized. Call reset() first.")
        return replay(self._initial, self._events)

    def recent_log(self, count: int = 10, kind: Optional[LogKind] = None) -> list[str]:
        """The last log messages, optionally filtered by kind."""
        entries = [e for e in self.state.log if kind is None or e.kind == kind]
        return [e.message for e in entries[-count:]]
