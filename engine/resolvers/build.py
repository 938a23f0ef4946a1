"""Build action resolver for the Brass Birmingham engine.

A Build places the player's lowest remaining tile of an industry type at
a location. Validation runs in a fixed order:

1. The card matches the target (location cards bind the location,
   industry cards list the type, wild cards match anything).
2. Industry and wild industry cards require the location to be in the
   player's network, unless the player has nothing on the board yet.
3. The lowest tile of the type is on the mat and buildable this era.
4. A free compatible slot exists, or an existing tile of the same type
   may be overbuilt.
5. Coal and iron are sourced and the total cost is affordable.

Coal mines sell their cubes to the market if connected to a merchant.
Iron works always sell to the market.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from core.board import LocationId
from core.cards import Card, IndustryCard, LocationCard, WildIndustryCard, WildLocationCard, describe_card
from core.constants import ActionKind, Era, IndustryType, ResourceType
from core.errors import ErrorKind, RuleViolation
from core.market import MarketSale
from core.player import IndustryInstance
from core.tiles import IndustryTileSpec

from ..network import is_connected_to_merchant, is_in_network
from ..slots import assign_slots, can_place
from ..sourcing import ConsumptionResult, consume_resource, sell_to_market, total_cubes
from .common import pay, selected_card

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player


OVERBUILDABLE_BY_OPPONENTS = {
    IndustryType.COAL: ResourceType.COAL,
    IndustryType.IRON: ResourceType.IRON,
}


@dataclass
class BuildResult:
    """Result of resolving a Build action.

    Attributes:
        industry: The new industry.
        tile_cost: Cost of the tile itself.
        total_cost: Tile cost plus coal and iron bought.
        coal: Coal sourcing details.
        iron: Iron sourcing details.
        overbuilt: The tile replaced by this build, if any.
        market_sale: Cubes sold to the market on build, if any.
        log_message: Game log line for the action.
    """

    industry: IndustryInstance
    tile_cost: int
    total_cost: int
    coal: ConsumptionResult
    iron: ConsumptionResult
    overbuilt: Optional[IndustryInstance] = None
    market_sale: MarketSale = field(default_factory=MarketSale)
    log_message: str = ""


class BuildResolver:
    """Resolves the Build action for the current player."""

    action = ActionKind.BUILD

    def __init__(self, state: GameState):
        """Initialize the resolver with the working game state.

        Args:
            state: The state to mutate (a clone owned by dispatch).
        """
        self.state = state
        self.player = state.get_current_player()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _targets(self) -> tuple[LocationId, IndustryType]:
        selection = self.state.selection
        if selection.location is None:
            raise RuleViolation(ErrorKind.SELECTION_MISSING, "No location selected")
        if not selection.industry_types:
            raise RuleViolation(ErrorKind.SELECTION_MISSING, "No industry type selected")
        if not self.state.board.has_location(selection.location):
            raise RuleViolation(
                ErrorKind.INVALID_TARGET, f"Unknown location: {selection.location}"
            )
        return selection.location, selection.industry_types[0]

    def validate_card(self, card: Card, location: LocationId, industry_type: IndustryType) -> None:
        """Check the card against the chosen location and industry type."""
        if isinstance(card, LocationCard):
            if card.location != location:
                raise RuleViolation(
                    ErrorKind.CARD_TYPE_MISMATCH,
                    f"Location card is for {card.location}, not {location}",
                )
        elif isinstance(card, IndustryCard):
            if industry_type not in card.industry_types:
                allowed = ", ".join(t.value for t in card.industry_types)
                raise RuleViolation(
                    ErrorKind.CARD_TYPE_MISMATCH,
                    f"Industry card allows {allowed}, not {industry_type.value}",
                )
        elif isinstance(card, (WildLocationCard, WildIndustryCard)):
            pass
        else:
            raise TypeError(f"Unknown card variant: {card!r}")

    def validate_network(self, card: Card, location: LocationId) -> None:
        if isinstance(card, (IndustryCard, WildIndustryCard)) and not is_in_network(
            self.state, self.player, location
        ):
            raise RuleViolation(
                ErrorKind.NETWORK_VIOLATION,
                f"{location} is not in {self.player.name}'s network",
            )

    def tile_to_build(self, industry_type: IndustryType) -> IndustryTileSpec:
        """The lowest tile of a type on the player's mat, if buildable this era."""
        level = self.player.lowest_tile(industry_type)
        if level is None:
            raise RuleViolation(
                ErrorKind.INVALID_TARGET, f"No {industry_type.value} tiles left on the mat"
            )
        spec = self.state.catalog.get(industry_type, level)
        if not spec.buildable_in(self.state.era):
            raise RuleViolation(
                ErrorKind.INVALID_TARGET,
                f"{industry_type.value} level {level} cannot be built in the "
                f"{self.state.era.value} era",
            )
        return spec

    def find_overbuild_target(
        self, location: LocationId, industry_type: IndustryType, level: int
    ) -> Optional[IndustryInstance]:
        """Find the tile replaced by this build, or None for a plain build.

        Every tile of the same type at the location is a candidate. The
        player's own lower-level tiles are preferred, oldest first. An
        opponent's tile is only taken when it is a coal mine or iron works
        and no cube of that resource is left anywhere.

        Raises:
            RuleViolation: SlotUnavailable if no slot is free and nothing of
                the same type can be replaced, OverbuildDenied if the
                overbuild rules forbid replacing any existing tile.
        """
        if can_place(self.state, location, industry_type):
            return None

        candidates = [
            i for i in self.state.industries_at(location) if i.industry_type == industry_type
        ]
        if not candidates:
            raise RuleViolation(
                ErrorKind.SLOT_UNAVAILABLE,
                f"No free slot for {industry_type.value} at {location}",
            )

        lower = [i for i in candidates if i.level < level]
        if not lower:
            lowest = min(i.level for i in candidates)
            raise RuleViolation(
                ErrorKind.OVERBUILD_DENIED,
                f"Cannot overbuild level {lowest} with level {level}",
            )

        own = [i for i in lower if i.owner_id == self.player.player_id]
        if own:
            return own[0]

        resource = OVERBUILDABLE_BY_OPPONENTS.get(industry_type)
        if resource is None:
            raise RuleViolation(
                ErrorKind.OVERBUILD_DENIED,
                f"Cannot overbuild an opponent's {industry_type.value}",
            )
        if total_cubes(self.state, resource) > 0:
            raise RuleViolation(
                ErrorKind.OVERBUILD_DENIED,
                f"Cannot overbuild an opponent's {industry_type.value} while "
                f"{resource.value} remains on the board or in the market",
            )
        return lower[0]

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _initial_cubes(self, spec: IndustryTileSpec) -> dict[str, int]:
        if spec.industry_type == IndustryType.COAL:
            return {"coal": spec.produces}
        if spec.industry_type == IndustryType.IRON:
            return {"iron": spec.produces}
        if spec.industry_type == IndustryType.BREWERY:
            config = self.state.config
            beer = config.canal_brewery_beer if self.state.era == Era.CANAL else config.rail_brewery_beer
            return {"beer": beer}
        return {}

    def _remove_overbuilt(self, industry: IndustryInstance) -> None:
        owner = self.state.get_player(industry.owner_id)
        owner.remove_industry(industry.instance_id)
        # Cubes on the replaced tile go back to the supply
        industry.clear_resources()

    def _check_slot(self, industry: IndustryInstance) -> None:
        assignment = assign_slots(
            self.state.board, industry.location, self.state.industries_at(industry.location)
        )
        if industry.instance_id not in assignment:
            raise RuleViolation(
                ErrorKind.SLOT_UNAVAILABLE,
                f"No slot left for {industry.industry_type.value} at {industry.location}",
            )

    def resolve(self) -> BuildResult:
        """Resolve the Build action.

        Returns:
            BuildResult with the new industry and costs.

        Raises:
            RuleViolation: If any build rule is broken.
        """
        card = selected_card(self.state, self.player)
        location, industry_type = self._targets()

        self.validate_card(card, location, industry_type)
        self.validate_network(card, location)
        spec = self.tile_to_build(industry_type)
        overbuilt = self.find_overbuild_target(location, industry_type, spec.level)

        if overbuilt is not None:
            self._remove_overbuilt(overbuilt)

        coal = consume_resource(self.state, location, ResourceType.COAL, spec.coal_required)
        iron = consume_resource(self.state, location, ResourceType.IRON, spec.iron_required)
        total_cost = spec.cost + coal.cost + iron.cost
        pay(self.player, total_cost, f"Building {industry_type.value} level {spec.level}")

        self.player.remove_lowest_tile(industry_type)
        # A replacement takes over the replaced tile's place in construction order
        instance_id = (
            overbuilt.instance_id if overbuilt is not None else self.state.next_industry_id()
        )
        industry = IndustryInstance(
            instance_id=instance_id,
            owner_id=self.player.player_id,
            location=location,
            industry_type=industry_type,
            level=spec.level,
            **self._initial_cubes(spec),
        )
        self.player.industries.append(industry)
        self._check_slot(industry)

        sale = MarketSale()
        if industry_type == IndustryType.IRON or (
            industry_type == IndustryType.COAL
            and is_connected_to_merchant(self.state, location)
        ):
            sale = sell_to_market(self.state, industry)

        return BuildResult(
            industry=industry,
            tile_cost=spec.cost,
            total_cost=total_cost,
            coal=coal,
            iron=iron,
            overbuilt=overbuilt,
            market_sale=sale,
            log_message=self._log_message(card, industry, total_cost, coal, iron, overbuilt, sale),
        )

    def _log_message(
        self,
        card: Card,
        industry: IndustryInstance,
        total_cost: int,
        coal: ConsumptionResult,
        iron: ConsumptionResult,
        overbuilt: Optional[IndustryInstance],
        sale: MarketSale,
    ) -> str:
        message = (
            f"{self.player.name} built {industry.industry_type.value} level {industry.level} "
            f"at {industry.location} for £{total_cost}"
        )
        consumed = coal.details + iron.details
        if consumed:
            message += f" (consumed {', '.join(consumed)})"
        if sale.cubes_sold:
            message += f" ({', '.join(sale.details)})"
        if industry.flipped:
            message += " (tile flipped)"
        if overbuilt is not None:
            whose = "own" if overbuilt.owner_id == self.player.player_id else "opponent's"
            message += f" (overbuilt {whose} level {overbuilt.level})"
        return f"{message} using {describe_card(card)}"
