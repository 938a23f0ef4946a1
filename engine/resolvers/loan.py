"""Loan action resolver for the Brass Birmingham engine.

Taking a loan gives a flat amount of money and costs income levels.
Income never drops below the configured floor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.constants import ActionKind

from .common import selected_card

if TYPE_CHECKING:
    from core.game_state import GameState


@dataclass
class LoanResult:
    """Result of resolving a Loan action."""

    money_gained: int
    income_before: int
    income_after: int
    log_message: str = ""


class LoanResolver:
    """Resolves the Loan action for the current player."""

    action = ActionKind.LOAN

    def __init__(self, state: GameState):
        self.state = state
        self.player = state.get_current_player()

    def resolve(self) -> LoanResult:
        selected_card(self.state, self.player)
        config = self.state.config

        income_before = self.player.income
        self.player.gain_money(config.loan_amount)
        income_after = self.player.adjust_income(
            -config.loan_income_penalty, config.income_floor, config.income_cap
        )

        return LoanResult(
            money_gained=config.loan_amount,
            income_before=income_before,
            income_after=income_after,
            log_message=(
                f"{self.player.name} took a loan of £{config.loan_amount} "
                f"(income {income_before} -> {income_after})"
            ),
        )
