"""Pass action resolver: discard the selected card and do nothing else."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.cards import describe_card
from core.constants import ActionKind

from .common import selected_card

if TYPE_CHECKING:
    from core.game_state import GameState


@dataclass
class PassResult:
    card_id: str
    log_message: str = ""


class PassResolver:
    action = ActionKind.PASS

    def __init__(self, state: GameState):
        self.state = state
        self.player = state.get_current_player()

    def resolve(self) -> PassResult:
        card = selected_card(self.state, self.player)
        return PassResult(
            card_id=card.card_id,
            log_message=f"{self.player.name} passed, discarding {describe_card(card)}",
        )
