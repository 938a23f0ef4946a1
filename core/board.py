"""Board topology model for the Brass Birmingham engine.

The board is a static attributed graph:
- Locations are cities (with ordered industry slots) or merchants (no slots)
- Connections join two locations and support the canal era, the rail era, or both
- Topology is immutable; built industries and links live on the players
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .constants import Era, IndustryType, LocationKind


# Type aliases for clarity
LocationId = str
ConnectionId = tuple[str, str]  # Canonical form: (min_id, max_id)


def make_connection_id(location_a: LocationId, location_b: LocationId) -> ConnectionId:
    """Create a canonical connection ID from two location IDs.

    Connection IDs are always stored with the lexically smaller location
    first so lookups do not depend on direction.
    """
    return (min(location_a, location_b), max(location_a, location_b))


@dataclass(frozen=True)
class IndustrySlot:
    """A single build position at a city.

    Attributes:
        accepts: The industry types this slot may hold.
    """

    accepts: frozenset[IndustryType]

    def accepts_type(self, industry_type: IndustryType) -> bool:
        """Check if this slot can hold the given industry type."""
        return industry_type in self.accepts


@dataclass(frozen=True)
class MerchantSpec:
    """Static merchant data.

    Attributes:
        buys: Industry types this merchant buys.
        bonus_kind: Bonus granted when its beer is consumed.
        bonus_value: Size of the bonus.
    """

    buys: frozenset[IndustryType]
    bonus_kind: str
    bonus_value: int


@dataclass(frozen=True)
class Location:
    """A board location.

    Attributes:
        location_id: Unique identifier (lowercase name).
        name: Display name.
        kind: City or merchant.
        slots: Ordered industry slots (empty for merchants).
        merchant: Merchant data, only for merchant locations.
    """

    location_id: LocationId
    name: str
    kind: LocationKind
    slots: tuple[IndustrySlot, ...] = ()
    merchant: Optional[MerchantSpec] = None

    @property
    def is_merchant(self) -> bool:
        return self.kind == LocationKind.MERCHANT


@dataclass(frozen=True)
class Connection:
    """An unordered pair of locations and the eras it supports."""

    connection_id: ConnectionId
    eras: frozenset[Era]

    @property
    def endpoints(self) -> tuple[LocationId, LocationId]:
        return self.connection_id

    def supports(self, era: Era) -> bool:
        """Check if a link may be built on this connection in the given era."""
        return era in self.eras

    def other_end(self, location_id: LocationId) -> LocationId:
        """Return the endpoint opposite to location_id."""
        a, b = self.connection_id
        return b if location_id == a else a


@dataclass
class BoardTopology:
    """Immutable board topology.

    Attributes:
        locations: Location ID -> Location.
        connections: Canonical connection ID -> Connection.
        adjacency: Location ID -> set of adjacent location IDs (any era).
    """

    locations: dict[LocationId, Location] = field(default_factory=dict)
    connections: dict[ConnectionId, Connection] = field(default_factory=dict)
    adjacency: dict[LocationId, set[LocationId]] = field(default_factory=dict)

    def __deepcopy__(self, memo: dict) -> BoardTopology:
        # Topology never changes after loading, so clones share it
        return self

    def get_location(self, location_id: LocationId) -> Location:
        """Get a location by ID.

        Raises:
            KeyError: If location_id is not on the board.
        """
        if location_id not in self.locations:
            raise KeyError(f"Location {location_id} does not exist")
        return self.locations[location_id]

    def has_location(self, location_id: LocationId) -> bool:
        return location_id in self.locations

    def get_connection(
        self, location_a: LocationId, location_b: LocationId
    ) -> Optional[Connection]:
        """Get the connection between two locations, or None."""
        return self.connections.get(make_connection_id(location_a, location_b))

    def get_slots(self, location_id: LocationId) -> tuple[IndustrySlot, ...]:
        """Get the ordered slot list of a location (empty if unknown)."""
        location = self.locations.get(location_id)
        if location is None:
            return ()
        return location.slots

    def get_neighbors(self, location_id: LocationId) -> set[LocationId]:
        """Get locations adjacent to a location in any era."""
        return self.adjacency.get(location_id, set())

    def cities(self) -> list[Location]:
        """Return all city locations."""
        return [loc for loc in self.locations.values() if loc.kind == LocationKind.CITY]

    def merchants(self) -> list[Location]:
        """Return all merchant locations in ID order."""
        return sorted(
            (loc for loc in self.locations.values() if loc.is_merchant),
            key=lambda loc: loc.location_id,
        )

    def connections_for_era(self, era: Era) -> list[Connection]:
        """Return connections that support the given era."""
        return [conn for conn in self.connections.values() if conn.supports(era)]
