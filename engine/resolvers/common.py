"""Helpers shared by the action resolvers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.cards import Card
from core.errors import ErrorKind, RuleViolation

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player


def selected_card(state: GameState, player: Player) -> Card:
    """The card selected for the action in progress.

    Raises:
        RuleViolation: SelectionMissing if no card is selected, InvalidTarget
            if the selected card is not in the player's hand.
    """
    card_id = state.selection.card_id
    if card_id is None:
        raise RuleViolation(ErrorKind.SELECTION_MISSING, "No card selected")
    card = player.find_card(card_id)
    if card is None:
        raise RuleViolation(
            ErrorKind.INVALID_TARGET, f"Card {card_id} is not in {player.name}'s hand"
        )
    return card


def pay(player: Player, amount: int, what: str) -> None:
    """Charge a player, raising InsufficientFunds if they cannot afford it."""
    if not player.can_afford(amount):
        raise RuleViolation(
            ErrorKind.INSUFFICIENT_FUNDS,
            f"{what} costs £{amount}, {player.name} has £{player.money}",
        )
    player.spend(amount)
