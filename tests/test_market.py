"""Tests for the coal and iron market ladders."""

import pytest

from core.constants import ResourceType
from core.market import Market, create_coal_market, create_iron_market


@pytest.fixture
def coal_market() -> Market:
    return create_coal_market()


@pytest.fixture
def iron_market() -> Market:
    return create_iron_market()


class TestMarketSetup:
    """Test the standard ladders."""

    def test_coal_market(self, coal_market: Market):
        assert coal_market.resource == ResourceType.COAL
        assert coal_market.total_cubes() == 13
        assert coal_market.capacity() == 14
        assert coal_market.next_price() == 1

    def test_iron_market(self, iron_market: Market):
        assert iron_market.total_cubes() == 8
        assert iron_market.next_price() == 2

    def test_mismatched_lists_rejected(self):
        with pytest.raises(ValueError):
            Market.create(ResourceType.COAL, [1, 2], 2, [1], 8)


class TestMarketBuy:
    """Test buying from a ladder."""

    def test_buy_cheapest_first(self, coal_market: Market):
        purchase = coal_market.buy(3)
        assert purchase.units == 3
        assert purchase.cost == 1 + 2 + 2
        assert purchase.fallback_units == 0
        assert coal_market.total_cubes() == 10

    def test_quote_does_not_change_ladder(self, coal_market: Market):
        assert coal_market.quote(3) == 5
        assert coal_market.total_cubes() == 13

    def test_fallback_when_empty(self, iron_market: Market):
        """Units beyond the ladder are bought at the fallback price."""
        purchase = iron_market.buy(10)
        assert purchase.fallback_units == 2
        assert purchase.cost == 2 * (2 + 3 + 4 + 5) + 2 * 6
        assert iron_market.is_empty()
        assert iron_market.next_price() == 6

    def test_quote_matches_buy(self, iron_market: Market):
        quote = iron_market.quote(9)
        assert iron_market.buy(9).cost == quote


class TestMarketSell:
    """Test selling into a ladder."""

    def test_sell_fills_most_expensive_free_space(self, coal_market: Market):
        coal_market.buy(4)
        sale = coal_market.sell(2)
        assert sale.cubes_sold == 2
        assert sale.income == 3 + 2

    def test_sell_stops_when_full(self, iron_market: Market):
        """Only free spaces are filled; the rest are not sold."""
        sale = iron_market.sell(5)
        assert sale.cubes_sold == 2
        assert sale.income == 2
        assert iron_market.total_cubes() == iron_market.capacity()

    def test_sell_to_full_market(self, iron_market: Market):
        iron_market.sell(2)
        assert iron_market.sell(1).cubes_sold == 0


class TestMarketSerialization:
    """Test ladder serialization and validation."""

    def test_round_trip(self, coal_market: Market):
        coal_market.buy(2)
        assert Market.from_dict(coal_market.to_dict()) == coal_market

    def test_validate(self, coal_market: Market):
        assert coal_market.validate() == []
        coal_market.levels[0].cubes = 5
        assert len(coal_market.validate()) == 1
