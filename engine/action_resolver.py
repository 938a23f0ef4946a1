"""Action resolver dispatcher for the Brass Birmingham engine.

The ActionResolver runs the confirmed action of the current player. It
performs the steps shared by every action and delegates the
action-specific rules to the resolver for that action:

1. Check that the player has an action left.
2. Check that the selected card(s) are in the player's hand.
3. Run the action resolver (validation, then mutation).
4. Discard the played card(s) and decrement the actions remaining.
5. Append the action's log entry and refill the player's hand.

The state passed in is a working clone. Any RuleViolation raised along
the way leaves the caller to discard the clone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from core.constants import ActionKind, LogKind
from core.errors import ErrorKind, RuleViolation
from core.logging_config import get_logger

from .resolvers import (
    BuildResolver,
    DevelopResolver,
    LoanResolver,
    NetworkResolver,
    PassResolver,
    ScoutResolver,
    SellResolver,
)

if TYPE_CHECKING:
    from core.game_state import GameState

logger = get_logger(__name__)


RESOLVERS: dict[ActionKind, type] = {
    ActionKind.BUILD: BuildResolver,
    ActionKind.DEVELOP: DevelopResolver,
    ActionKind.SELL: SellResolver,
    ActionKind.NETWORK: NetworkResolver,
    ActionKind.LOAN: LoanResolver,
    ActionKind.SCOUT: ScoutResolver,
    ActionKind.PASS: PassResolver,
}


@dataclass
class ActionOutcome:
    """Result of resolving one confirmed action.

    Attributes:
        action: The action resolved.
        player_id: The acting player.
        cards_played: IDs of the cards discarded.
        result: The action-specific result object.
        actions_remaining: Actions left in the turn afterwards.
    """

    action: ActionKind
    player_id: int
    cards_played: list[str]
    result: Any
    actions_remaining: int


class ActionResolver:
    """Coordinates resolution of the current player's confirmed action."""

    def __init__(self, state: GameState):
        """Initialize with the working game state.

        Args:
            state: The state to mutate (a clone owned by dispatch).
        """
        self.state = state

    def played_card_ids(self) -> list[str]:
        """Cards consumed by the action in progress."""
        selection = self.state.selection
        if selection.action == ActionKind.SCOUT:
            return list(selection.card_ids)
        if selection.card_id is None:
            raise RuleViolation(ErrorKind.SELECTION_MISSING, "No card selected", selection.action)
        return [selection.card_id]

    def resolve(self) -> ActionOutcome:
        """Resolve the selected action.

        Returns:
            ActionOutcome with the resolver's result.

        Raises:
            RuleViolation: If any rule is broken, tagged with the action.
        """
        state = self.state
        action = state.selection.action
        if action is None:
            raise RuleViolation(ErrorKind.SELECTION_MISSING, "No action selected")

        try:
            if state.global_state.actions_remaining <= 0:
                raise RuleViolation(ErrorKind.INVALID_PHASE, "No actions remaining this turn")

            player = state.get_current_player()
            card_ids = self.played_card_ids()
            for card_id in card_ids:
                if player.find_card(card_id) is None:
                    raise RuleViolation(
                        ErrorKind.INVALID_TARGET, f"Card {card_id} is not in {player.name}'s hand"
                    )

            result = RESOLVERS[action](state).resolve()
        except RuleViolation as violation:
            raise violation.with_action(action) from None

        for card_id in card_ids:
            state.piles.return_card(player.remove_card(card_id))

        state.global_state.actions_remaining -= 1
        state.add_log(result.log_message, LogKind.ACTION)
        state.refill_hand(player)

        logger.debug("Player %d resolved %s", player.player_id, action.value)
        return ActionOutcome(
            action=action,
            player_id=player.player_id,
            cards_played=card_ids,
            result=result,
            actions_remaining=state.global_state.actions_remaining,
        )
