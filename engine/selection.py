"""Selection wizard for the Brass Birmingham engine.

Applies one phase-legal event to a working state: choosing an action,
picking cards and targets, confirming, cancelling or ending the turn.
Confirmation hands over to the ActionResolver, and the turn ends
automatically once the player has no actions left.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from core.cards import IndustryCard, LocationCard, is_wild
from core.constants import ACTION_PHASES, ActionKind, Era, LogKind, Phase, Step
from core.errors import ErrorKind, RuleViolation
from core.game_state import Selection
from core.board import make_connection_id

from .action_resolver import ActionOutcome, ActionResolver
from .events import ActionEvent, EventType
from .phase_machine import enter_phase
from .turn_manager import TurnAdvanceResult, TurnManager

if TYPE_CHECKING:
    from core.game_state import GameState


def selection_complete(state: GameState) -> bool:
    """Check if every selection the action needs has been made."""
    selection = state.selection
    action = selection.action
    if action is None:
        return False
    if action == ActionKind.SCOUT:
        return len(selection.card_ids) == state.config.scout_discard_count
    if selection.card_id is None:
        return False
    if action in (ActionKind.BUILD, ActionKind.SELL):
        return selection.location is not None and bool(selection.industry_types)
    if action == ActionKind.DEVELOP:
        return bool(selection.industry_types)
    if action == ActionKind.NETWORK:
        return bool(selection.links)
    return True


class SelectionWizard:
    """Applies events to a working state.

    Attributes:
        state: The state being mutated (a clone owned by dispatch).
        action_outcome: Set when a confirmed action was resolved.
        turn_result: Set when the turn ended.
    """

    def __init__(self, state: GameState):
        self.state = state
        self.action_outcome: Optional[ActionOutcome] = None
        self.turn_result: Optional[TurnAdvanceResult] = None

    def handle(self, event: ActionEvent) -> None:
        """Apply an event.

        Raises:
            RuleViolation: If the event is rejected.
        """
        handlers = {
            EventType.SELECT_ACTION: self._select_action,
            EventType.SELECT_CARD: self._select_card,
            EventType.SELECT_LOCATION: self._select_location,
            EventType.SELECT_INDUSTRY: self._select_industry,
            EventType.SELECT_LINK: self._select_link,
            EventType.CONFIRM_ACTION: self._confirm,
            EventType.CANCEL_ACTION: self._cancel,
            EventType.END_TURN: self._end_turn,
        }
        try:
            handlers[event.event_type](event)
        except RuleViolation as violation:
            raise violation.with_action(self.state.selection.action) from None

    def _advance_step(self) -> None:
        selection = self.state.selection
        if selection.action == ActionKind.SCOUT:
            selection.step = Step.CONFIRMING if selection_complete(self.state) else Step.SELECTING_CARD
        elif selection.card_id is None:
            selection.step = Step.SELECTING_CARD
        else:
            selection.step = Step.CONFIRMING if selection_complete(self.state) else Step.SELECTING_TARGET

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    def _select_action(self, event: ActionEvent) -> None:
        action = event.action_kind()
        enter_phase(self.state, ACTION_PHASES[action])
        self.state.selection = Selection(action=action)

    def _select_card(self, event: ActionEvent) -> None:
        card_id = event.require("card_id")
        player = self.state.get_current_player()
        card = player.find_card(card_id)
        if card is None:
            raise RuleViolation(
                ErrorKind.INVALID_TARGET, f"Card {card_id} is not in {player.name}'s hand"
            )

        selection = self.state.selection
        if selection.action == ActionKind.SCOUT:
            if card_id in selection.card_ids:
                selection.card_ids.remove(card_id)
            else:
                if is_wild(card):
                    raise RuleViolation(ErrorKind.CARD_TYPE_MISMATCH, "Wild cards cannot be scouted")
                if len(selection.card_ids) >= self.state.config.scout_discard_count:
                    raise RuleViolation(
                        ErrorKind.INVALID_TARGET,
                        f"Scout discards exactly {self.state.config.scout_discard_count} cards",
                    )
                selection.card_ids.append(card_id)
            selection.card_id = selection.card_ids[0] if selection.card_ids else None
        else:
            selection.card_id = card_id
            self._check_build_card()
        self._advance_step()

    def _check_build_card(self) -> None:
        """Reject a build card that cannot match the targets already chosen."""
        selection = self.state.selection
        if selection.action != ActionKind.BUILD or selection.card_id is None:
            return
        card = self.state.get_current_player().find_card(selection.card_id)
        if (
            isinstance(card, LocationCard)
            and selection.location is not None
            and card.location != selection.location
        ):
            raise RuleViolation(
                ErrorKind.CARD_TYPE_MISMATCH,
                f"Location card is for {card.location}, not {selection.location}",
            )
        if (
            isinstance(card, IndustryCard)
            and selection.industry_types
            and selection.industry_types[0] not in card.industry_types
        ):
            raise RuleViolation(
                ErrorKind.CARD_TYPE_MISMATCH,
                f"Industry card cannot build {selection.industry_types[0].value}",
            )

    def _select_location(self, event: ActionEvent) -> None:
        location = event.require("location")
        if not self.state.board.has_location(location):
            raise RuleViolation(ErrorKind.INVALID_TARGET, f"Unknown location: {location}")
        self.state.selection.location = location
        self._check_build_card()
        self._advance_step()

    def _select_industry(self, event: ActionEvent) -> None:
        industry_type = event.industry_type()
        selection = self.state.selection
        if selection.action == ActionKind.DEVELOP:
            if len(selection.industry_types) >= self.state.config.max_develop:
                raise RuleViolation(
                    ErrorKind.INVALID_TARGET,
                    f"Develop removes at most {self.state.config.max_develop} tiles",
                )
            selection.industry_types.append(industry_type)
        else:
            selection.industry_types = [industry_type]
            self._check_build_card()
        self._advance_step()

    def _select_link(self, event: ActionEvent) -> None:
        location_a = event.require("from")
        location_b = event.require("to")
        selection = self.state.selection
        connection_id = make_connection_id(location_a, location_b)

        existing = [link for link in selection.links if make_connection_id(*link) == connection_id]
        if existing:
            selection.links.remove(existing[0])
        else:
            max_links = 1 if self.state.era == Era.CANAL else 2
            if len(selection.links) >= max_links:
                raise RuleViolation(
                    ErrorKind.INVALID_TARGET,
                    f"At most {max_links} link(s) may be built in the {self.state.era.value} era",
                )
            selection.links.append((location_a, location_b))
        self._advance_step()

    def _confirm(self, event: ActionEvent) -> None:
        if not selection_complete(self.state):
            raise RuleViolation(
                ErrorKind.SELECTION_MISSING,
                f"Selections for {self.state.selection.action.value} are incomplete",
            )
        self.action_outcome = ActionResolver(self.state).resolve()
        self.state.selection = Selection()

        if self.state.global_state.actions_remaining <= 0:
            self.turn_result = TurnManager(self.state).end_turn()
        else:
            enter_phase(self.state, Phase.SELECTING_ACTION)

    def _cancel(self, event: ActionEvent) -> None:
        enter_phase(self.state, Phase.SELECTING_ACTION)
        self.state.selection = Selection()

    def _end_turn(self, event: ActionEvent) -> None:
        player = self.state.get_current_player()
        remaining = self.state.global_state.actions_remaining
        if remaining > 0:
            self.state.add_log(
                f"{player.name} ended their turn with {remaining} action(s) unused",
                LogKind.INFO,
            )
        self.turn_result = TurnManager(self.state).end_turn()
