"""Coal and iron market ladders.

A ladder is an ordered list of price levels (cheapest first), each holding
between 0 and max_cubes cubes. Buying drains the cheapest occupied level;
when the ladder is empty, units are bought at the fallback price, which has
unlimited capacity. Selling fills the most expensive level with free space
first and has no fallback: unsold cubes stay where they came from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .constants import ResourceType


@dataclass
class MarketLevel:
    """One price level of a market ladder."""

    price: int
    cubes: int
    max_cubes: int

    def free_space(self) -> int:
        return self.max_cubes - self.cubes


@dataclass
class MarketSale:
    """Result of selling cubes into a ladder.

    Attributes:
        cubes_sold: Cubes placed on the ladder.
        income: Money earned.
        details: Per-level log fragments.
    """

    cubes_sold: int = 0
    income: int = 0
    details: list[str] = field(default_factory=list)


@dataclass
class MarketPurchase:
    """Result of buying units from a ladder."""

    units: int = 0
    cost: int = 0
    fallback_units: int = 0
    details: list[str] = field(default_factory=list)


@dataclass
class Market:
    """A resource market ladder.

    Attributes:
        resource: Coal or iron.
        levels: Price levels, cheapest first.
        fallback_price: Price paid per unit once every level is empty.
    """

    resource: ResourceType
    levels: list[MarketLevel]
    fallback_price: int

    @classmethod
    def create(
        cls,
        resource: ResourceType,
        prices: list[int],
        max_cubes: int,
        initial_cubes: list[int],
        fallback_price: int,
    ) -> Market:
        """Build a ladder from parallel price and starting-cube lists."""
        if len(prices) != len(initial_cubes):
            raise ValueError("prices and initial_cubes must have the same length")
        levels = [
            MarketLevel(price=price, cubes=cubes, max_cubes=max_cubes)
            for price, cubes in zip(prices, initial_cubes)
        ]
        return cls(resource=resource, levels=levels, fallback_price=fallback_price)

    def total_cubes(self) -> int:
        return sum(level.cubes for level in self.levels)

    def capacity(self) -> int:
        return sum(level.max_cubes for level in self.levels)

    def is_empty(self) -> bool:
        return self.total_cubes() == 0

    def next_price(self) -> int:
        """Price of the next unit bought."""
        for level in self.levels:
            if level.cubes > 0:
                return level.price
        return self.fallback_price

    def quote(self, amount: int) -> int:
        """Cost of buying amount units without changing the ladder."""
        cost = 0
        remaining = amount
        for level in self.levels:
            take = min(level.cubes, remaining)
            cost += take * level.price
            remaining -= take
        return cost + remaining * self.fallback_price

    def buy(self, amount: int) -> MarketPurchase:
        """Buy units one at a time, cheapest occupied level first."""
        purchase = MarketPurchase()
        for _ in range(amount):
            level = next((lvl for lvl in self.levels if lvl.cubes > 0), None)
            if level is None:
                price = self.fallback_price
                purchase.fallback_units += 1
                purchase.details.append(
                    f"1 {self.resource.value} from general supply for £{price}"
                )
            else:
                level.cubes -= 1
                price = level.price
                purchase.details.append(f"1 {self.resource.value} from market for £{price}")
            purchase.units += 1
            purchase.cost += price
        return purchase

    def sell(self, cubes: int) -> MarketSale:
        """Sell cubes into the ladder, most expensive free space first."""
        sale = MarketSale()
        for level in reversed(self.levels):
            if sale.cubes_sold >= cubes:
                break
            take = min(level.free_space(), cubes - sale.cubes_sold)
            if take <= 0:
                continue
            level.cubes += take
            sale.cubes_sold += take
            sale.income += take * level.price
            sale.details.append(
                f"sold {take} {self.resource.value} to market for £{take * level.price}"
            )
        return sale

    def validate(self) -> list[str]:
        """Check ladder invariants."""
        errors: list[str] = []
        for level in self.levels:
            if not 0 <= level.cubes <= level.max_cubes:
                errors.append(
                    f"{self.resource.value} market level £{level.price} holds "
                    f"{level.cubes} cubes (max {level.max_cubes})"
                )
        return errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource": self.resource.value,
            "fallback_price": self.fallback_price,
            "levels": [
                {"price": lvl.price, "cubes": lvl.cubes, "max_cubes": lvl.max_cubes}
                for lvl in self.levels
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Market:
        return cls(
            resource=ResourceType(data["resource"]),
            fallback_price=data["fallback_price"],
            levels=[
                MarketLevel(price=lvl["price"], cubes=lvl["cubes"], max_cubes=lvl["max_cubes"])
                for lvl in data["levels"]
            ],
        )


def create_coal_market() -> Market:
    """Standard coal ladder: £1..£7, two spaces each, £1 half full, £8 fallback."""
    return Market.create(
        ResourceType.COAL,
        prices=[1, 2, 3, 4, 5, 6, 7],
        max_cubes=2,
        initial_cubes=[1, 2, 2, 2, 2, 2, 2],
        fallback_price=8,
    )


def create_iron_market() -> Market:
    """Standard iron ladder: £1..£5, two spaces each, £1 empty, £6 fallback."""
    return Market.create(
        ResourceType.IRON,
        prices=[1, 2, 3, 4, 5],
        max_cubes=2,
        initial_cubes=[0, 2, 2, 2, 2],
        fallback_price=6,
    )
