"""Sell action resolver for the Brass Birmingham engine.

A Sell flips one of the player's cotton mills, manufacturers or potteries.
The tile's location must reach a merchant that buys its type over the
current era's links, and the tile's beer requirement must be met. If the
merchant's own beer is used, the merchant's bonus is granted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from core.board import LocationId
from core.constants import (
    ActionKind,
    BONUS_DEVELOP,
    BONUS_INCOME,
    BONUS_MONEY,
    BONUS_VICTORY_POINTS,
    IndustryType,
    SELLABLE_INDUSTRIES,
)
from core.errors import ErrorKind, RuleViolation
from core.player import IndustryInstance

from ..network import reachable_merchants
from ..sourcing import BeerResult, consume_beer, flip_industry
from .common import selected_card

if TYPE_CHECKING:
    from core.game_state import GameState


@dataclass
class SellResult:
    """Result of resolving a Sell action.

    Attributes:
        industry: The flipped industry.
        merchant: The merchant sold to.
        beer: Beer sourcing details.
        bonus: Description of the merchant bonus applied, if any.
        log_message: Game log line for the action.
    """

    industry: IndustryInstance
    merchant: LocationId
    beer: BeerResult
    bonus: Optional[str] = None
    log_message: str = ""


class SellResolver:
    """Resolves the Sell action for the current player."""

    action = ActionKind.SELL

    def __init__(self, state: GameState):
        self.state = state
        self.player = state.get_current_player()

    def find_industry(self, location: LocationId, industry_type: IndustryType) -> IndustryInstance:
        """The player's first unflipped tile of the type at the location."""
        if industry_type not in SELLABLE_INDUSTRIES:
            raise RuleViolation(
                ErrorKind.INVALID_TARGET, f"{industry_type.value} cannot be sold"
            )
        for industry in self.player.industries_at(location):
            if industry.industry_type == industry_type and not industry.flipped:
                return industry
        raise RuleViolation(
            ErrorKind.INVALID_TARGET,
            f"{self.player.name} has no unflipped {industry_type.value} at {location}",
        )

    def choose_merchant(self, industry: IndustryInstance) -> LocationId:
        """Pick the merchant to sell to.

        Merchants still holding beer are preferred, then the nearest, then
        the lowest ID.
        """
        merchants = reachable_merchants(
            self.state, industry.location, industry_type=industry.industry_type
        )
        if not merchants:
            raise RuleViolation(
                ErrorKind.NETWORK_VIOLATION,
                f"{industry.location} is not connected to a merchant buying "
                f"{industry.industry_type.value}",
            )
        with_beer = [m for m in merchants if self.state.merchant_beer.get(m[0], 0) > 0]
        return (with_beer or merchants)[0][0]

    def apply_bonus(self, merchant_id: LocationId, industry_type: IndustryType) -> str:
        """Grant the merchant's bonus to the player and describe it."""
        spec = self.state.board.get_location(merchant_id).merchant
        config = self.state.config
        if spec.bonus_kind == BONUS_MONEY:
            self.player.gain_money(spec.bonus_value)
            return f"+£{spec.bonus_value}"
        if spec.bonus_kind == BONUS_INCOME:
            self.player.adjust_income(spec.bonus_value, config.income_floor, config.income_cap)
            return f"+{spec.bonus_value} income"
        if spec.bonus_kind == BONUS_VICTORY_POINTS:
            self.player.add_victory_points(spec.bonus_value)
            return f"+{spec.bonus_value} VP"
        if spec.bonus_kind == BONUS_DEVELOP:
            developed = []
            for _ in range(spec.bonus_value):
                level = self.player.lowest_tile(industry_type)
                if level is None or self.state.catalog.get(industry_type, level).lightbulb:
                    break
                self.player.remove_lowest_tile(industry_type)
                developed.append(f"{industry_type.value} level {level}")
            return f"free develop of {', '.join(developed)}" if developed else "no tile to develop"
        raise ValueError(f"Unknown merchant bonus: {spec.bonus_kind}")

    def resolve(self) -> SellResult:
        """Resolve the Sell action.

        Raises:
            RuleViolation: If the tile cannot be sold or beer runs out.
        """
        selected_card(self.state, self.player)
        selection = self.state.selection
        if selection.location is None or not selection.industry_types:
            raise RuleViolation(ErrorKind.SELECTION_MISSING, "No tile selected to sell")

        industry = self.find_industry(selection.location, selection.industry_types[0])
        merchant = self.choose_merchant(industry)
        spec = self.state.catalog.get(industry.industry_type, industry.level)

        beer = consume_beer(
            self.state, self.player, industry.location, spec.beer_required, merchant=merchant
        )
        bonus = None
        if beer.merchant_used is not None:
            bonus = self.apply_bonus(merchant, industry.industry_type)

        flip_industry(self.state, industry)

        message = (
            f"{self.player.name} sold {industry.industry_type.value} level {industry.level} "
            f"at {industry.location} to {merchant}"
        )
        if beer.details:
            message += f" (consumed {', '.join(beer.details)})"
        if bonus:
            message += f" (merchant bonus: {bonus})"

        return SellResult(
            industry=industry, merchant=merchant, beer=beer, bonus=bonus, log_message=message
        )
