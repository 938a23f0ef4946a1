"""Tests for action resolvers.

This module tests the resolvers:
- BuildResolver
- DevelopResolver
- SellResolver
- NetworkResolver
- LoanResolver
- ScoutResolver
- PassResolver

And the ActionResolver dispatcher.
"""

import pytest

from core.cards import WildLocationCard
from core.constants import ActionKind, Era, IndustryType, LogKind
from core.errors import ErrorKind, RuleViolation
from core.game_state import GameState, Selection
from core.player import IndustryInstance, Link
from engine.action_resolver import ActionResolver
from engine.game_engine import initial_state
from engine.resolvers import (
    BuildResolver,
    DevelopResolver,
    LoanResolver,
    NetworkResolver,
    PassResolver,
    ScoutResolver,
    SellResolver,
)
from engine.slots import assign_slots


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def game_state() -> GameState:
    """Create a fresh 2-player game with player 0 to act."""
    return initial_state(["Ada", "Brunel"], seed=42)


@pytest.fixture
def player(game_state: GameState):
    return game_state.players[0]


def give_card(state: GameState, player_id: int, card_id: str):
    """Move a card from wherever it is into a player's hand."""
    holders = [p.hand for p in state.players] + [
        state.piles.draw_pile,
        state.piles.discard_pile,
        state.piles.wild_location_pile,
        state.piles.wild_industry_pile,
    ]
    for cards in holders:
        for card in cards:
            if card.card_id == card_id:
                cards.remove(card)
                state.players[player_id].hand.append(card)
                return card
    raise KeyError(card_id)


def add_industry(state, owner_id, location, industry_type, level=1, **cubes) -> IndustryInstance:
    industry = IndustryInstance(
        instance_id=state.next_industry_id(),
        owner_id=owner_id,
        location=location,
        industry_type=industry_type,
        level=level,
        **cubes,
    )
    state.players[owner_id].industries.append(industry)
    return industry


def add_link(state, owner_id, location_a, location_b, era=Era.CANAL) -> None:
    state.players[owner_id].links.append(Link(location_a, location_b, era, owner_id))


def select_build(state, card_id, location, industry_type) -> None:
    give_card(state, 0, card_id)
    state.selection = Selection(
        action=ActionKind.BUILD,
        card_id=card_id,
        location=location,
        industry_types=[industry_type],
    )


def expect_violation(kind: ErrorKind, resolver) -> RuleViolation:
    with pytest.raises(RuleViolation) as exc_info:
        resolver.resolve()
    assert exc_info.value.kind == kind
    return exc_info.value


# =============================================================================
# BuildResolver Tests
# =============================================================================


class TestBuildResolver:
    """Test BuildResolver."""

    def test_first_build_with_location_card(self, game_state: GameState, player):
        """A player with nothing on the board builds at the card's location."""
        select_build(game_state, "birmingham_1", "birmingham", IndustryType.COTTON)

        result = BuildResolver(game_state).resolve()

        assert result.industry.location == "birmingham"
        assert result.industry.level == 1
        assert result.total_cost == 12
        assert player.money == 5
        assert player.money_spent == 12
        assert player.tiles_on_mat[IndustryType.COTTON] == [1, 1, 2, 2, 3, 3, 3, 4, 4, 4]
        assert "birmingham location card" in result.log_message

    def test_location_card_mismatch(self, game_state: GameState):
        select_build(game_state, "birmingham_1", "dudley", IndustryType.COAL)
        expect_violation(ErrorKind.CARD_TYPE_MISMATCH, BuildResolver(game_state))

    def test_industry_card_wrong_type(self, game_state: GameState):
        select_build(game_state, "iron_1", "birmingham", IndustryType.COTTON)
        expect_violation(ErrorKind.CARD_TYPE_MISMATCH, BuildResolver(game_state))

    def test_industry_card_outside_network(self, game_state: GameState):
        add_industry(game_state, 0, "stoke", IndustryType.COAL, coal=1)
        select_build(game_state, "iron_1", "birmingham", IndustryType.IRON)
        expect_violation(ErrorKind.NETWORK_VIOLATION, BuildResolver(game_state))

    def test_wild_industry_card_first_build(self, game_state: GameState, player):
        select_build(game_state, "wild_industry_1", "burton", IndustryType.BREWERY)
        result = BuildResolver(game_state).resolve()
        assert result.industry.beer == 1
        assert player.money == 12

    def test_no_compatible_slot(self, game_state: GameState):
        select_build(game_state, "wild_location_1", "worcester", IndustryType.IRON)
        expect_violation(ErrorKind.SLOT_UNAVAILABLE, BuildResolver(game_state))

    def test_level_one_not_buildable_in_rail(self, game_state: GameState):
        game_state.global_state.era = Era.RAIL
        select_build(game_state, "birmingham_1", "birmingham", IndustryType.COTTON)
        expect_violation(ErrorKind.INVALID_TARGET, BuildResolver(game_state))

    def test_insufficient_funds(self, game_state: GameState, player):
        player.money = 11
        select_build(game_state, "birmingham_1", "birmingham", IndustryType.COTTON)
        expect_violation(ErrorKind.INSUFFICIENT_FUNDS, BuildResolver(game_state))

    def test_iron_works_sells_to_market(self, game_state: GameState, player):
        """Iron works buy coal from the market and always sell iron."""
        select_build(game_state, "dudley_1", "dudley", IndustryType.IRON)

        result = BuildResolver(game_state).resolve()

        assert result.total_cost == 5 + 1
        assert result.market_sale.cubes_sold == 2
        assert result.industry.iron == 2
        assert not result.industry.flipped
        assert player.money == 17 - 6 + 2

    def test_coal_mine_sells_when_connected(self, game_state: GameState, player):
        add_link(game_state, 1, "stoke", "warrington")
        select_build(game_state, "wild_location_1", "stoke", IndustryType.COAL)

        result = BuildResolver(game_state).resolve()

        assert result.market_sale.cubes_sold == 1
        assert result.industry.coal == 1
        assert player.money == 17 - 5 + 1

    def test_coal_mine_keeps_coal_when_unconnected(self, game_state: GameState):
        select_build(game_state, "dudley_1", "dudley", IndustryType.COAL)
        result = BuildResolver(game_state).resolve()
        assert result.market_sale.cubes_sold == 0
        assert result.industry.coal == 2

    def test_rail_brewery_gets_two_beer(self, game_state: GameState, player):
        game_state.global_state.era = Era.RAIL
        player.tiles_on_mat[IndustryType.BREWERY] = [2, 2, 3, 3, 4]
        select_build(game_state, "burton_1", "burton", IndustryType.BREWERY)
        result = BuildResolver(game_state).resolve()
        assert result.industry.beer == 2
        assert result.total_cost == 7 + 1

    def test_overbuild_own_tile(self, game_state: GameState, player):
        """A full location can be overbuilt with a higher level of the same type."""
        first = add_industry(game_state, 0, "worcester", IndustryType.COTTON)
        add_industry(game_state, 0, "worcester", IndustryType.COTTON)
        player.tiles_on_mat[IndustryType.COTTON] = [2, 2, 3]
        player.money = 30
        select_build(game_state, "worcester_1", "worcester", IndustryType.COTTON)

        result = BuildResolver(game_state).resolve()

        assert result.overbuilt is first
        assert all(i is not first for i in player.industries)
        assert result.industry.instance_id == first.instance_id
        assert result.industry.level == 2
        assert "overbuilt own level 1" in result.log_message

    def test_overbuild_keeps_slot_at_shared_location(self, game_state: GameState, player):
        """The replacement keeps the replaced tile's slot when other industries share the location."""
        pottery = add_industry(game_state, 0, "birmingham", IndustryType.POTTERY)
        manufacturer = add_industry(game_state, 0, "birmingham", IndustryType.MANUFACTURER)
        assert assign_slots(
            game_state.board, "birmingham", game_state.industries_at("birmingham")
        ) == {pottery.instance_id: 1, manufacturer.instance_id: 3}
        player.tiles_on_mat[IndustryType.POTTERY] = [2, 3, 3, 4, 4]
        select_build(game_state, "birmingham_1", "birmingham", IndustryType.POTTERY)

        result = BuildResolver(game_state).resolve()

        assert result.overbuilt is pottery
        assert result.industry.level == 2
        assignment = assign_slots(
            game_state.board, "birmingham", game_state.industries_at("birmingham")
        )
        assert assignment == {result.industry.instance_id: 1, manufacturer.instance_id: 3}
        assert game_state.validate() == []

    def test_overbuild_prefers_own_tile_over_opponent(self, game_state: GameState, player):
        """An opponent's older cotton mill does not block overbuilding an own one."""
        theirs = add_industry(game_state, 1, "worcester", IndustryType.COTTON)
        mine = add_industry(game_state, 0, "worcester", IndustryType.COTTON)
        player.tiles_on_mat[IndustryType.COTTON] = [2, 2, 3]
        player.money = 30
        select_build(game_state, "worcester_1", "worcester", IndustryType.COTTON)

        result = BuildResolver(game_state).resolve()

        assert result.overbuilt is mine
        assert game_state.players[1].industries == [theirs]
        assignment = assign_slots(
            game_state.board, "worcester", game_state.industries_at("worcester")
        )
        assert assignment == {theirs.instance_id: 0, mine.instance_id: 1}

    def test_overbuild_skips_tiles_at_same_level(self, game_state: GameState, player):
        """Only a lower-level tile is replaced, even when an equal-level one is older."""
        level_two = add_industry(game_state, 0, "worcester", IndustryType.COTTON, level=2)
        level_one = add_industry(game_state, 0, "worcester", IndustryType.COTTON)
        player.tiles_on_mat[IndustryType.COTTON] = [2, 3]
        player.money = 30
        select_build(game_state, "worcester_1", "worcester", IndustryType.COTTON)

        result = BuildResolver(game_state).resolve()

        assert result.overbuilt is level_one
        assert level_two in player.industries
        assert sorted(i.level for i in player.industries) == [2, 2]

    def test_overbuild_requires_higher_level(self, game_state: GameState):
        add_industry(game_state, 0, "worcester", IndustryType.COTTON)
        add_industry(game_state, 0, "worcester", IndustryType.COTTON)
        select_build(game_state, "worcester_1", "worcester", IndustryType.COTTON)
        expect_violation(ErrorKind.OVERBUILD_DENIED, BuildResolver(game_state))

    def test_overbuild_opponent_cotton_denied(self, game_state: GameState, player):
        add_industry(game_state, 1, "worcester", IndustryType.COTTON)
        add_industry(game_state, 1, "worcester", IndustryType.COTTON)
        player.tiles_on_mat[IndustryType.COTTON] = [2, 2, 3]
        select_build(game_state, "worcester_1", "worcester", IndustryType.COTTON)
        expect_violation(ErrorKind.OVERBUILD_DENIED, BuildResolver(game_state))

    def test_overbuild_opponent_mine_when_coal_exhausted(self, game_state: GameState, player):
        """An opponent's mine can be replaced once no coal is left anywhere."""
        for level in game_state.coal_market.levels:
            level.cubes = 0
        theirs = add_industry(game_state, 1, "dudley", IndustryType.COAL, flipped=True)
        player.tiles_on_mat[IndustryType.COAL] = [2, 2, 3, 3, 4, 4]
        select_build(game_state, "dudley_1", "dudley", IndustryType.COAL)

        result = BuildResolver(game_state).resolve()

        assert result.overbuilt.instance_id == theirs.instance_id
        assert game_state.players[1].industries == []
        assert result.industry.coal == 3
        assert "opponent's" in result.log_message


# =============================================================================
# DevelopResolver Tests
# =============================================================================


class TestDevelopResolver:
    """Test DevelopResolver."""

    def select_develop(self, state, *industry_types):
        card_id = state.players[0].hand[0].card_id
        state.selection = Selection(
            action=ActionKind.DEVELOP, card_id=card_id, industry_types=list(industry_types)
        )

    def test_free_iron_from_own_works(self, game_state: GameState, player):
        """Iron on the board is used for free and the works flips when emptied."""
        works = add_industry(game_state, 0, "dudley", IndustryType.IRON, iron=1)
        self.select_develop(game_state, IndustryType.COTTON)

        result = DevelopResolver(game_state).resolve()

        assert player.money == 17
        assert works.flipped
        assert player.income == 11
        assert result.removed == [(IndustryType.COTTON, 1)]

    def test_two_tiles_of_same_type(self, game_state: GameState, player):
        self.select_develop(game_state, IndustryType.COTTON, IndustryType.COTTON)
        result = DevelopResolver(game_state).resolve()
        assert result.iron.cost == 2 + 2
        assert player.money == 13
        assert player.tiles_on_mat[IndustryType.COTTON][:2] == [1, 2]

    def test_lightbulb_tile(self, game_state: GameState):
        self.select_develop(game_state, IndustryType.POTTERY)
        expect_violation(ErrorKind.INVALID_TARGET, DevelopResolver(game_state))

    def test_too_many_tiles(self, game_state: GameState):
        self.select_develop(
            game_state, IndustryType.COTTON, IndustryType.COAL, IndustryType.IRON
        )
        expect_violation(ErrorKind.INVALID_TARGET, DevelopResolver(game_state))

    def test_empty_mat(self, game_state: GameState, player):
        player.tiles_on_mat[IndustryType.IRON] = []
        self.select_develop(game_state, IndustryType.IRON)
        expect_violation(ErrorKind.INVALID_TARGET, DevelopResolver(game_state))

    def test_cannot_afford_iron(self, game_state: GameState, player):
        player.money = 1
        self.select_develop(game_state, IndustryType.COTTON)
        expect_violation(ErrorKind.INSUFFICIENT_FUNDS, DevelopResolver(game_state))


# =============================================================================
# SellResolver Tests
# =============================================================================


class TestSellResolver:
    """Test SellResolver."""

    def select_sell(self, state, location, industry_type=IndustryType.COTTON):
        card_id = state.players[0].hand[0].card_id
        state.selection = Selection(
            action=ActionKind.SELL,
            card_id=card_id,
            location=location,
            industry_types=[industry_type],
        )

    def test_sell_with_merchant_beer(self, game_state: GameState, player):
        """Merchant beer grants the merchant's bonus."""
        mill = add_industry(game_state, 0, "coventry", IndustryType.COTTON)
        add_link(game_state, 0, "coventry", "oxford")
        self.select_sell(game_state, "coventry")

        result = SellResolver(game_state).resolve()

        assert result.merchant == "oxford"
        assert mill.flipped
        assert game_state.merchant_beer["oxford"] == 0
        # +2 income bonus from Oxford, +2 from flipping a level 1 cotton mill
        assert player.income == 14
        assert result.bonus == "+2 income"

    def test_own_brewery_beer_gives_no_bonus(self, game_state: GameState, player):
        add_industry(game_state, 0, "burton", IndustryType.BREWERY, beer=1)
        add_industry(game_state, 0, "coventry", IndustryType.COTTON)
        add_link(game_state, 0, "coventry", "oxford")
        self.select_sell(game_state, "coventry")

        result = SellResolver(game_state).resolve()

        assert result.bonus is None
        assert game_state.merchant_beer["oxford"] == 1
        assert player.income == 12

    def test_prefers_merchant_with_beer(self, game_state: GameState, player):
        game_state.merchant_beer["oxford"] = 0
        add_industry(game_state, 0, "coventry", IndustryType.COTTON)
        for a, b in [
            ("coventry", "oxford"),
            ("coventry", "birmingham"),
            ("birmingham", "dudley"),
            ("dudley", "kidderminster"),
            ("kidderminster", "worcester"),
            ("worcester", "gloucester"),
        ]:
            add_link(game_state, 0, a, b)
        self.select_sell(game_state, "coventry")
        tiles_before = len(player.tiles_on_mat[IndustryType.COTTON])

        result = SellResolver(game_state).resolve()

        assert result.merchant == "gloucester"
        assert result.bonus.startswith("free develop")
        assert len(player.tiles_on_mat[IndustryType.COTTON]) == tiles_before - 1

    def test_not_connected_to_merchant(self, game_state: GameState):
        add_industry(game_state, 0, "coventry", IndustryType.COTTON)
        self.select_sell(game_state, "coventry")
        expect_violation(ErrorKind.NETWORK_VIOLATION, SellResolver(game_state))

    def test_unsellable_type(self, game_state: GameState):
        add_industry(game_state, 0, "dudley", IndustryType.COAL, coal=2)
        self.select_sell(game_state, "dudley", IndustryType.COAL)
        expect_violation(ErrorKind.INVALID_TARGET, SellResolver(game_state))

    def test_already_flipped(self, game_state: GameState):
        add_industry(game_state, 0, "coventry", IndustryType.COTTON, flipped=True)
        add_link(game_state, 0, "coventry", "oxford")
        self.select_sell(game_state, "coventry")
        expect_violation(ErrorKind.INVALID_TARGET, SellResolver(game_state))

    def test_no_beer_anywhere(self, game_state: GameState):
        game_state.merchant_beer["oxford"] = 0
        game_state.global_state.beer_supply = 0
        add_industry(game_state, 0, "coventry", IndustryType.COTTON)
        add_link(game_state, 0, "coventry", "oxford")
        self.select_sell(game_state, "coventry")
        expect_violation(ErrorKind.RESOURCE_EXHAUSTED, SellResolver(game_state))


# =============================================================================
# NetworkResolver Tests
# =============================================================================


class TestNetworkResolver:
    """Test NetworkResolver."""

    def select_links(self, state, *links):
        card_id = state.players[0].hand[0].card_id
        state.selection = Selection(action=ActionKind.NETWORK, card_id=card_id, links=list(links))

    def test_canal_link(self, game_state: GameState, player):
        self.select_links(game_state, ("birmingham", "dudley"))
        result = NetworkResolver(game_state).resolve()
        assert result.total_cost == 3
        assert player.money == 14
        assert player.links[0].era == Era.CANAL

    def test_must_touch_network(self, game_state: GameState):
        add_industry(game_state, 0, "stoke", IndustryType.COAL, coal=1)
        self.select_links(game_state, ("birmingham", "dudley"))
        expect_violation(ErrorKind.NETWORK_VIOLATION, NetworkResolver(game_state))

    def test_no_such_connection(self, game_state: GameState):
        self.select_links(game_state, ("birmingham", "belper"))
        expect_violation(ErrorKind.NETWORK_VIOLATION, NetworkResolver(game_state))

    def test_rail_only_connection_in_canal(self, game_state: GameState):
        self.select_links(game_state, ("wolverhampton", "coalbrookdale"))
        expect_violation(ErrorKind.NETWORK_VIOLATION, NetworkResolver(game_state))

    def test_already_built(self, game_state: GameState):
        add_link(game_state, 1, "dudley", "birmingham")
        self.select_links(game_state, ("birmingham", "dudley"))
        expect_violation(ErrorKind.NETWORK_VIOLATION, NetworkResolver(game_state))

    def test_one_link_in_canal(self, game_state: GameState):
        self.select_links(game_state, ("birmingham", "dudley"), ("dudley", "wolverhampton"))
        expect_violation(ErrorKind.INVALID_TARGET, NetworkResolver(game_state))

    def test_single_rail_link(self, game_state: GameState, player):
        game_state.global_state.era = Era.RAIL
        self.select_links(game_state, ("wolverhampton", "coalbrookdale"))
        result = NetworkResolver(game_state).resolve()
        assert result.total_cost == 5 + 1
        assert player.money == 11
        assert result.beer is None

    def test_double_rail_link(self, game_state: GameState, player):
        """Two rail links cost more and take another coal plus one beer."""
        game_state.global_state.era = Era.RAIL
        player.money = 30
        self.select_links(game_state, ("birmingham", "dudley"), ("dudley", "wolverhampton"))

        result = NetworkResolver(game_state).resolve()

        assert result.total_cost == 15 + 1 + 2
        assert player.money == 12
        assert result.beer.supply_units == 1
        assert game_state.global_state.beer_supply == 23
        assert len(player.links) == 2

    def test_double_rail_link_uses_own_brewery(self, game_state: GameState, player):
        game_state.global_state.era = Era.RAIL
        player.money = 30
        brewery = add_industry(game_state, 0, "dudley", IndustryType.BREWERY, level=2, beer=2)
        self.select_links(game_state, ("birmingham", "dudley"), ("dudley", "wolverhampton"))

        result = NetworkResolver(game_state).resolve()

        assert result.beer.own_units == 1
        assert brewery.beer == 1


# =============================================================================
# Loan, Scout and Pass Tests
# =============================================================================


class TestLoanResolver:
    """Test LoanResolver."""

    def test_loan(self, game_state: GameState, player):
        game_state.selection = Selection(action=ActionKind.LOAN, card_id=player.hand[0].card_id)
        result = LoanResolver(game_state).resolve()
        assert result.money_gained == 30
        assert player.money == 47
        assert (result.income_before, result.income_after) == (10, 7)

    def test_income_floor(self, game_state: GameState, player):
        player.income = -9
        game_state.selection = Selection(action=ActionKind.LOAN, card_id=player.hand[0].card_id)
        result = LoanResolver(game_state).resolve()
        assert result.income_after == -10

    def test_requires_card(self, game_state: GameState):
        game_state.selection = Selection(action=ActionKind.LOAN)
        expect_violation(ErrorKind.SELECTION_MISSING, LoanResolver(game_state))


class TestScoutResolver:
    """Test ScoutResolver."""

    def select_scout(self, state, count=3):
        card_ids = [card.card_id for card in state.players[0].hand[:count]]
        state.selection = Selection(
            action=ActionKind.SCOUT, card_id=card_ids[0] if card_ids else None, card_ids=card_ids
        )

    def test_scout(self, game_state: GameState, player):
        self.select_scout(game_state)
        result = ScoutResolver(game_state).resolve()
        assert len(result.discarded) == 3
        assert sum(isinstance(card, WildLocationCard) for card in player.hand) == 1
        assert player.has_wild_card()
        assert len(game_state.piles.wild_location_pile) == 3
        assert len(game_state.piles.wild_industry_pile) == 3

    def test_wrong_card_count(self, game_state: GameState):
        self.select_scout(game_state, count=2)
        expect_violation(ErrorKind.SELECTION_MISSING, ScoutResolver(game_state))

    def test_already_holding_wild(self, game_state: GameState):
        give_card(game_state, 0, "wild_industry_1")
        self.select_scout(game_state)
        expect_violation(ErrorKind.CARD_TYPE_MISMATCH, ScoutResolver(game_state))

    def test_wild_piles_empty(self, game_state: GameState):
        game_state.piles.draw_pile.extend(game_state.piles.wild_industry_pile)
        game_state.piles.wild_industry_pile = []
        self.select_scout(game_state)
        expect_violation(ErrorKind.RESOURCE_EXHAUSTED, ScoutResolver(game_state))


class TestPassResolver:
    """Test PassResolver."""

    def test_pass(self, game_state: GameState, player):
        card_id = player.hand[0].card_id
        game_state.selection = Selection(action=ActionKind.PASS, card_id=card_id)
        result = PassResolver(game_state).resolve()
        assert result.card_id == card_id
        assert player.money == 17


# =============================================================================
# ActionResolver Tests
# =============================================================================


class TestActionResolver:
    """Test the ActionResolver dispatcher."""

    def test_discards_and_refills(self, game_state: GameState, player):
        card_id = player.hand[0].card_id
        draw_before = len(game_state.piles.draw_pile)
        game_state.selection = Selection(action=ActionKind.LOAN, card_id=card_id)

        outcome = ActionResolver(game_state).resolve()

        assert outcome.action == ActionKind.LOAN
        assert outcome.cards_played == [card_id]
        assert outcome.actions_remaining == 0
        assert [c.card_id for c in game_state.piles.discard_pile] == [card_id]
        assert len(player.hand) == 8
        assert len(game_state.piles.draw_pile) == draw_before - 1
        assert game_state.log[-1].kind == LogKind.ACTION

    def test_wild_card_returns_to_its_pile(self, game_state: GameState):
        select_build(game_state, "wild_location_1", "birmingham", IndustryType.COTTON)
        ActionResolver(game_state).resolve()
        assert len(game_state.piles.wild_location_pile) == 4
        assert game_state.piles.discard_pile == []

    def test_scout_discards_all_selected(self, game_state: GameState, player):
        card_ids = [card.card_id for card in player.hand[:3]]
        game_state.selection = Selection(
            action=ActionKind.SCOUT, card_id=card_ids[0], card_ids=card_ids
        )
        outcome = ActionResolver(game_state).resolve()
        assert outcome.cards_played == card_ids
        assert len(game_state.piles.discard_pile) == 3
        assert len(player.hand) == 8

    def test_no_actions_remaining(self, game_state: GameState, player):
        game_state.global_state.actions_remaining = 0
        game_state.selection = Selection(action=ActionKind.LOAN, card_id=player.hand[0].card_id)
        violation = expect_violation(ErrorKind.INVALID_PHASE, ActionResolver(game_state))
        assert violation.error.action == ActionKind.LOAN

    def test_card_not_in_hand(self, game_state: GameState):
        card_id = game_state.players[1].hand[0].card_id
        game_state.selection = Selection(action=ActionKind.PASS, card_id=card_id)
        expect_violation(ErrorKind.INVALID_TARGET, ActionResolver(game_state))

    def test_violation_tagged_with_action(self, game_state: GameState, player):
        player.money = 0
        select_build(game_state, "birmingham_1", "birmingham", IndustryType.COTTON)
        violation = expect_violation(ErrorKind.INSUFFICIENT_FUNDS, ActionResolver(game_state))
        assert violation.error.action == ActionKind.BUILD
