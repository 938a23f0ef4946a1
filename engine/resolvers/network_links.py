"""Network action resolver for the Brass Birmingham engine.

Builds canal or rail links on board connections. In the canal era one
link costs a fixed price. In the rail era a single link costs a fixed
price plus one coal; a second link in the same action raises the total
price and needs another coal plus one beer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.board import LocationId, make_connection_id
from core.constants import ActionKind, Era, ResourceType
from core.errors import ErrorKind, RuleViolation
from core.player import Link

from ..network import touches_network
from ..sourcing import BeerResult, ConsumptionResult, consume_beer, consume_resource
from .common import pay, selected_card

if TYPE_CHECKING:
    from core.game_state import GameState


@dataclass
class NetworkResult:
    """Result of resolving a Network action.

    Attributes:
        links: Links built.
        total_cost: Money paid, including coal bought.
        coal: Coal sourcing per rail link.
        beer: Beer sourcing for a double rail link, if any.
        log_message: Game log line for the action.
    """

    links: list[Link] = field(default_factory=list)
    total_cost: int = 0
    coal: list[ConsumptionResult] = field(default_factory=list)
    beer: BeerResult | None = None
    log_message: str = ""


class NetworkResolver:
    """Resolves the Network action for the current player."""

    action = ActionKind.NETWORK

    def __init__(self, state: GameState):
        self.state = state
        self.player = state.get_current_player()

    def max_links(self) -> int:
        return 1 if self.state.era == Era.CANAL else 2

    def _built_connections(self) -> set[tuple[str, str]]:
        return {link.connection_id for p in self.state.players for link in p.links}

    def validate_link(self, location_a: LocationId, location_b: LocationId) -> None:
        """Check one link against the board, existing links and the player's network."""
        connection = self.state.board.get_connection(location_a, location_b)
        if connection is None:
            raise RuleViolation(
                ErrorKind.NETWORK_VIOLATION, f"No connection between {location_a} and {location_b}"
            )
        if not connection.supports(self.state.era):
            raise RuleViolation(
                ErrorKind.NETWORK_VIOLATION,
                f"{location_a}-{location_b} does not support {self.state.era.value} links",
            )
        if make_connection_id(location_a, location_b) in self._built_connections():
            raise RuleViolation(
                ErrorKind.NETWORK_VIOLATION, f"{location_a}-{location_b} is already built"
            )
        if not touches_network(self.player, location_a, location_b):
            raise RuleViolation(
                ErrorKind.NETWORK_VIOLATION,
                f"{location_a}-{location_b} does not touch {self.player.name}'s network",
            )

    def resolve(self) -> NetworkResult:
        """Resolve the Network action.

        Links are placed one at a time, so a second link may extend from
        the first. Coal for a rail link is sourced from its first endpoint.

        Raises:
            RuleViolation: If a link is illegal or the cost is unaffordable.
        """
        selected_card(self.state, self.player)
        requested = list(self.state.selection.links)
        if not requested:
            raise RuleViolation(ErrorKind.SELECTION_MISSING, "No link selected")
        if len(requested) > self.max_links():
            raise RuleViolation(
                ErrorKind.INVALID_TARGET,
                f"At most {self.max_links()} link(s) may be built in the "
                f"{self.state.era.value} era",
            )

        result = NetworkResult()
        for location_a, location_b in requested:
            self.validate_link(location_a, location_b)
            link = Link(location_a, location_b, self.state.era, self.player.player_id)
            self.player.links.append(link)
            result.links.append(link)

        config = self.state.config
        if self.state.era == Era.CANAL:
            result.total_cost = config.canal_link_cost
        else:
            for link in result.links:
                coal = consume_resource(self.state, link.location_a, ResourceType.COAL, 1)
                result.coal.append(coal)
                result.total_cost += coal.cost
            if len(result.links) == 1:
                result.total_cost += config.rail_link_cost
            else:
                result.total_cost += config.double_rail_link_cost
                second = result.links[1]
                result.beer = consume_beer(self.state, self.player, second.location_a, 1)

        pay(self.player, result.total_cost, f"Building {len(result.links)} link(s)")

        built = ", ".join(f"{link.location_a}-{link.location_b}" for link in result.links)
        details = [d for coal in result.coal for d in coal.details]
        if result.beer is not None:
            details.extend(result.beer.details)
        result.log_message = (
            f"{self.player.name} built {self.state.era.value} link(s) {built} "
            f"for £{result.total_cost}"
        )
        if details:
            result.log_message += f" (consumed {', '.join(details)})"
        return result
