"""Network connectivity for the Brass Birmingham engine.

Distances are hop counts over the links built by any player in a given
era. The graph is rebuilt on every call because links change between
actions; nothing is cached across mutations.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

import networkx as nx

from core.board import LocationId
from core.constants import Era, IndustryType

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player


def build_link_graph(state: GameState, era: Optional[Era] = None) -> nx.Graph:
    """Build an undirected graph of all links matching the era.

    Every board location is a node, so isolated locations are present
    but unreachable.
    """
    era = era or state.era
    graph = nx.Graph()
    graph.add_nodes_from(state.board.locations)
    for player in state.players:
        for link in player.links:
            if link.era == era:
                graph.add_edge(link.location_a, link.location_b)
    return graph


def distance(
    state: GameState,
    source: LocationId,
    target: LocationId,
    era: Optional[Era] = None,
) -> Optional[int]:
    """Hop count between two locations over era-matching links.

    Returns:
        0 when source == target, the shortest hop count otherwise, or
        None if the locations are not connected.
    """
    if source == target:
        return 0
    graph = build_link_graph(state, era)
    try:
        return nx.shortest_path_length(graph, source, target)
    except (nx.NetworkXNoPath, nx.NodeNotFound):
        return None


def distances_from(
    state: GameState, source: LocationId, era: Optional[Era] = None
) -> dict[LocationId, int]:
    """Hop counts from source to every reachable location (source included)."""
    graph = build_link_graph(state, era)
    if source not in graph:
        return {source: 0}
    return dict(nx.single_source_shortest_path_length(graph, source))


def is_in_network(state: GameState, player: Player, location: LocationId) -> bool:
    """Check if a location is in a player's network.

    A player with nothing on the board may build anywhere.
    """
    if not player.has_presence():
        return True
    return location in player.network_locations()


def touches_network(player: Player, location_a: LocationId, location_b: LocationId) -> bool:
    """Check if a new link between two locations would touch the player's network."""
    if not player.has_presence():
        return True
    network = player.network_locations()
    return location_a in network or location_b in network


def reachable_merchants(
    state: GameState,
    location: LocationId,
    era: Optional[Era] = None,
    industry_type: Optional[IndustryType] = None,
) -> list[tuple[LocationId, int]]:
    """Merchants reachable from a location, nearest first.

    Args:
        state: The game state.
        location: Starting location.
        era: Era of links to follow (defaults to the current era).
        industry_type: If given, only merchants buying this type are returned.

    Returns:
        (merchant ID, distance) pairs ordered by distance then ID.
    """
    reach = distances_from(state, location, era)
    merchants = []
    for merchant in state.board.merchants():
        if merchant.location_id not in reach:
            continue
        if industry_type is not None and (
            merchant.merchant is None or industry_type not in merchant.merchant.buys
        ):
            continue
        merchants.append((merchant.location_id, reach[merchant.location_id]))
    return sorted(merchants, key=lambda item: (item[1], item[0]))


def is_connected_to_merchant(
    state: GameState,
    location: LocationId,
    era: Optional[Era] = None,
    industry_type: Optional[IndustryType] = None,
) -> bool:
    return bool(reachable_merchants(state, location, era, industry_type))
