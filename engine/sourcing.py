"""Resource sourcing for the Brass Birmingham engine.

Coal, iron and beer are always taken from free sources on the board
before anything is bought:

- Coal: connected unflipped coal mines, nearest distance group first,
  then the coal market, then the market's fallback price.
- Iron: any unflipped iron works anywhere on the board, then the iron
  market, then the fallback price.
- Beer: the player's own breweries, then connected opponent breweries,
  then the merchant's beer, then the general supply. Beer is the only
  resource that can run out.

Functions here mutate the state they are given. Callers work on a clone
and check affordability against the returned cost before committing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from core.board import LocationId
from core.constants import IndustryType, LogKind, ResourceType
from core.errors import ErrorKind, RuleViolation
from core.logging_config import get_logger
from core.market import Market, MarketSale

from .network import distances_from

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import IndustryInstance, Player

logger = get_logger(__name__)


@dataclass
class ConsumptionResult:
    """Result of consuming coal or iron.

    Attributes:
        resource: The resource consumed.
        requested: Units requested.
        cost: Money owed for market and fallback units.
        free_units: Units taken from industries on the board.
        market_units: Units bought from the market ladder.
        fallback_units: Units bought at the fallback price.
        details: Log fragments describing each source.
        flipped: Instance IDs of industries flipped by the consumption.
    """

    resource: ResourceType
    requested: int
    cost: int = 0
    free_units: int = 0
    market_units: int = 0
    fallback_units: int = 0
    details: list[str] = field(default_factory=list)
    flipped: list[int] = field(default_factory=list)


@dataclass
class BeerResult:
    """Result of consuming beer."""

    requested: int
    own_units: int = 0
    opponent_units: int = 0
    merchant_used: Optional[LocationId] = None
    supply_units: int = 0
    details: list[str] = field(default_factory=list)
    flipped: list[int] = field(default_factory=list)


def market_for(state: GameState, resource: ResourceType) -> Market:
    if resource == ResourceType.COAL:
        return state.coal_market
    if resource == ResourceType.IRON:
        return state.iron_market
    raise ValueError(f"No market for {resource.value}")


# -----------------------------------------------------------------------------
# Flipping
# -----------------------------------------------------------------------------


def flip_industry(state: GameState, industry: IndustryInstance) -> bool:
    """Flip an industry and pay its income to the owner.

    Returns:
        False if the industry was already flipped.
    """
    if industry.flipped:
        return False
    industry.flipped = True
    spec = state.catalog.get(industry.industry_type, industry.level)
    owner = state.get_player(industry.owner_id)
    owner.adjust_income(spec.income, state.config.income_floor, state.config.income_cap)
    state.add_log(
        f"{owner.name}'s {industry.industry_type.value} level {industry.level} "
        f"at {industry.location} flipped (+{spec.income} income)",
        LogKind.INFO,
    )
    return True


def _take_from(
    state: GameState,
    industry: IndustryInstance,
    resource: ResourceType,
    amount: int,
    flipped: list[int],
) -> int:
    take = min(industry.resource_count(resource), amount)
    if take <= 0:
        return 0
    industry.take(resource, take)
    if industry.resource_count(resource) == 0 and flip_industry(state, industry):
        flipped.append(industry.instance_id)
    return take


# -----------------------------------------------------------------------------
# Coal and iron
# -----------------------------------------------------------------------------


def _coal_sources(state: GameState, location: LocationId) -> list[IndustryInstance]:
    reach = distances_from(state, location)
    candidates = []
    for player in state.players:
        for industry in player.industries:
            if (
                industry.industry_type == IndustryType.COAL
                and not industry.flipped
                and industry.coal > 0
                and industry.location in reach
            ):
                candidates.append(industry)
    # Stable sort keeps seat order then construction order within a distance
    return sorted(candidates, key=lambda i: reach[i.location])


def _iron_sources(state: GameState) -> list[IndustryInstance]:
    return [
        industry
        for player in state.players
        for industry in player.industries
        if industry.industry_type == IndustryType.IRON
        and not industry.flipped
        and industry.iron > 0
    ]


def consume_resource(
    state: GameState,
    location: Optional[LocationId],
    resource: ResourceType,
    amount: int,
) -> ConsumptionResult:
    """Consume coal or iron for an action at a location.

    Never fails: the market fallback price has unlimited capacity. The
    caller must check that the acting player can afford result.cost.

    Args:
        state: The working state (mutated).
        location: Where the resource is needed (coal connectivity origin;
            unused for iron).
        resource: COAL or IRON.
        amount: Units needed.

    Returns:
        ConsumptionResult describing sources and cost.
    """
    if resource not in (ResourceType.COAL, ResourceType.IRON):
        raise ValueError(f"consume_resource handles coal and iron, not {resource.value}")
    if resource == ResourceType.COAL and location is None:
        raise ValueError("Coal must be consumed at a location")

    result = ConsumptionResult(resource=resource, requested=amount)
    if amount <= 0:
        return result

    sources = (
        _coal_sources(state, location)
        if resource == ResourceType.COAL
        else _iron_sources(state)
    )

    remaining = amount
    for industry in sources:
        if remaining == 0:
            break
        taken = _take_from(state, industry, resource, remaining, result.flipped)
        if taken:
            remaining -= taken
            result.free_units += taken
            result.details.append(
                f"{taken} {resource.value} from {industry.location} "
                f"({state.players[industry.owner_id].name})"
            )

    if remaining > 0:
        purchase = market_for(state, resource).buy(remaining)
        result.cost += purchase.cost
        result.fallback_units += purchase.fallback_units
        result.market_units += purchase.units - purchase.fallback_units
        result.details.append(f"{purchase.units} {resource.value} bought for £{purchase.cost}")

    logger.debug(
        "Consumed %d %s at %s: free=%d market=%d fallback=%d cost=%d",
        amount, resource.value, location, result.free_units,
        result.market_units, result.fallback_units, result.cost,
    )
    return result


def total_cubes(state: GameState, resource: ResourceType) -> int:
    """Cubes of a resource on the board plus those in its market."""
    on_board = sum(i.resource_count(resource) for i in state.all_industries())
    return on_board + market_for(state, resource).total_cubes()


def sell_to_market(state: GameState, industry: IndustryInstance) -> MarketSale:
    """Sell a freshly built coal mine or iron works' cubes to its market.

    Income goes to the owner. The industry flips if it is emptied.
    """
    resource = ResourceType.COAL if industry.industry_type == IndustryType.COAL else ResourceType.IRON
    cubes = industry.resource_count(resource)
    if cubes == 0:
        return MarketSale()

    sale = market_for(state, resource).sell(cubes)
    if sale.cubes_sold:
        industry.take(resource, sale.cubes_sold)
        state.get_player(industry.owner_id).gain_money(sale.income)
        if industry.resource_count(resource) == 0:
            flip_industry(state, industry)
    return sale


# -----------------------------------------------------------------------------
# Beer
# -----------------------------------------------------------------------------


def consume_beer(
    state: GameState,
    player: Player,
    location: LocationId,
    amount: int,
    merchant: Optional[LocationId] = None,
) -> BeerResult:
    """Consume beer for an action at a location.

    Args:
        state: The working state (mutated).
        player: The acting player.
        location: Where the beer is needed (connectivity origin for
            opponent breweries).
        amount: Barrels needed.
        merchant: Merchant whose beer may be used, if any.

    Raises:
        RuleViolation: ResourceExhausted if every source is empty.
    """
    result = BeerResult(requested=amount)
    remaining = amount

    own = [
        i for i in player.industries
        if i.industry_type == IndustryType.BREWERY and not i.flipped and i.beer > 0
    ]
    for industry in sorted(own, key=lambda i: i.instance_id):
        if remaining == 0:
            break
        taken = _take_from(state, industry, ResourceType.BEER, remaining, result.flipped)
        remaining -= taken
        result.own_units += taken
        if taken:
            result.details.append(f"{taken} beer from own brewery at {industry.location}")

    if remaining > 0:
        reach = distances_from(state, location)
        opponents = [
            i for i in state.all_industries()
            if i.owner_id != player.player_id
            and i.industry_type == IndustryType.BREWERY
            and not i.flipped
            and i.beer > 0
            and i.location in reach
        ]
        opponents.sort(key=lambda i: (reach[i.location], i.owner_id, i.instance_id))
        for industry in opponents:
            if remaining == 0:
                break
            taken = _take_from(state, industry, ResourceType.BEER, remaining, result.flipped)
            remaining -= taken
            result.opponent_units += taken
            if taken:
                result.details.append(
                    f"{taken} beer from {state.players[industry.owner_id].name}'s "
                    f"brewery at {industry.location}"
                )

    if remaining > 0 and merchant is not None and state.merchant_beer.get(merchant, 0) > 0:
        state.merchant_beer[merchant] -= 1
        remaining -= 1
        result.merchant_used = merchant
        result.details.append(f"1 beer from {merchant} merchant")

    if remaining > 0:
        if state.global_state.beer_supply < remaining:
            raise RuleViolation(
                ErrorKind.RESOURCE_EXHAUSTED,
                f"Not enough beer: need {remaining} more, general supply has "
                f"{state.global_state.beer_supply}",
            )
        state.global_state.beer_supply -= remaining
        result.supply_units = remaining
        result.details.append(f"{remaining} beer from general supply")

    return result
