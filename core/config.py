"""Rules configuration for the Brass Birmingham engine.

Every tunable rule constant lives here so that house-rule variants can be
played by constructing a different RulesConfig. The config travels inside
GameState and survives serialization.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class RulesConfig:
    """Rule constants for a single game.

    Attributes:
        starting_money: Money each player starts with.
        starting_income: Income each player starts with.
        income_floor: Lowest income a player can drop to (loans clamp here).
        income_cap: Highest income a player can reach (flips clamp here).
        hand_size: Cards held after refilling.
        loan_amount: Money gained by a loan.
        loan_income_penalty: Income lost by a loan.
        canal_link_cost: Cost of a canal link.
        rail_link_cost: Cost of a single rail link (plus one coal).
        double_rail_link_cost: Total cost of two rail links in one action.
        scout_discard_count: Cards discarded by Scout, including the action card.
        max_develop: Industry tiles removed by a single Develop action.
        actions_per_turn: Actions per turn outside the first canal round.
        first_round_actions: Actions per turn in the first round of the canal era.
        rounds_per_era: Rounds in each era keyed by player count.
        general_beer_supply: Beer barrels available from the general supply.
        canal_brewery_beer: Beer placed on a brewery built in the canal era.
        rail_brewery_beer: Beer placed on a brewery built in the rail era.
        merchant_beer: Beer barrels on each merchant at the start of an era.
        vp_per_link: Victory points scored per link at era end.
        shortfall_sale_divisor: Divisor applied to tile cost when selling for a shortfall.
    """

    starting_money: int = 17
    starting_income: int = 10
    income_floor: int = -10
    income_cap: int = 30
    hand_size: int = 8
    loan_amount: int = 30
    loan_income_penalty: int = 3
    canal_link_cost: int = 3
    rail_link_cost: int = 5
    double_rail_link_cost: int = 15
    scout_discard_count: int = 3
    max_develop: int = 2
    actions_per_turn: int = 2
    first_round_actions: int = 1
    rounds_per_era: dict[int, int] = field(
        default_factory=lambda: {2: 10, 3: 9, 4: 8}
    )
    general_beer_supply: int = 24
    canal_brewery_beer: int = 1
    rail_brewery_beer: int = 2
    merchant_beer: int = 1
    vp_per_link: int = 1
    shortfall_sale_divisor: int = 2

    def rounds_for(self, num_players: int) -> int:
        """Return the number of rounds in an era for the given player count."""
        if num_players in self.rounds_per_era:
            return self.rounds_per_era[num_players]
        return min(self.rounds_per_era.values())

    def to_dict(self) -> dict[str, Any]:
        """Serialize the config (JSON-safe keys)."""
        data = asdict(self)
        data["rounds_per_era"] = {str(k): v for k, v in self.rounds_per_era.items()}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RulesConfig:
        """Rebuild a config from its serialized form."""
        values = dict(data)
        if "rounds_per_era" in values:
            values["rounds_per_era"] = {
                int(k): int(v) for k, v in values["rounds_per_era"].items()
            }
        return cls(**values)


DEFAULT_RULES = RulesConfig()
