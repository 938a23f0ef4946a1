"""Scout action resolver for the Brass Birmingham engine.

Scout discards a fixed number of non-wild cards (the action card
included) to take one wild location and one wild industry card. It is
not allowed while the player already holds a wild card.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.cards import Card, is_wild
from core.constants import ActionKind
from core.errors import ErrorKind, RuleViolation

if TYPE_CHECKING:
    from core.game_state import GameState


@dataclass
class ScoutResult:
    """Result of resolving a Scout action."""

    discarded: list[str] = field(default_factory=list)
    drawn: list[Card] = field(default_factory=list)
    log_message: str = ""


class ScoutResolver:
    """Resolves the Scout action for the current player."""

    action = ActionKind.SCOUT

    def __init__(self, state: GameState):
        self.state = state
        self.player = state.get_current_player()

    def validate(self) -> list[Card]:
        """Check the selected cards and the wild piles.

        Returns:
            The cards to discard.
        """
        card_ids = list(self.state.selection.card_ids)
        required = self.state.config.scout_discard_count
        if len(card_ids) != required:
            raise RuleViolation(
                ErrorKind.SELECTION_MISSING,
                f"Scout needs {required} cards, {len(card_ids)} selected",
            )

        if self.player.has_wild_card():
            raise RuleViolation(
                ErrorKind.CARD_TYPE_MISMATCH, f"{self.player.name} already holds a wild card"
            )

        cards = []
        for card_id in card_ids:
            card = self.player.find_card(card_id)
            if card is None:
                raise RuleViolation(
                    ErrorKind.INVALID_TARGET, f"Card {card_id} is not in {self.player.name}'s hand"
                )
            if is_wild(card):
                raise RuleViolation(ErrorKind.CARD_TYPE_MISMATCH, "Wild cards cannot be scouted")
            cards.append(card)

        piles = self.state.piles
        if not piles.wild_location_pile or not piles.wild_industry_pile:
            raise RuleViolation(ErrorKind.RESOURCE_EXHAUSTED, "No wild cards left to take")
        return cards

    def resolve(self) -> ScoutResult:
        cards = self.validate()
        piles = self.state.piles

        drawn = [piles.wild_location_pile.pop(0), piles.wild_industry_pile.pop(0)]
        self.player.hand.extend(drawn)

        return ScoutResult(
            discarded=[card.card_id for card in cards],
            drawn=drawn,
            log_message=(
                f"{self.player.name} scouted, discarding {len(cards)} cards "
                f"for a wild location and a wild industry card"
            ),
        )
