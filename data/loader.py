"""Static data loaders for the Brass Birmingham engine.

Loads and validates the board topology, the industry tile catalog and the
card decks from JSON files, converting them into core model instances.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import networkx as nx

from core.board import (
    BoardTopology,
    Connection,
    IndustrySlot,
    Location,
    MerchantSpec,
    make_connection_id,
)
from core.cards import Card, IndustryCard, LocationCard, WildIndustryCard, WildLocationCard
from core.constants import (
    Era,
    IndustryType,
    LocationKind,
    MIN_PLAYERS,
    MAX_PLAYERS,
    MERCHANT_BONUS_KINDS,
)
from core.errors import BoardLoadError
from core.logging_config import get_logger
from core.tiles import IndustryTileSpec, TileCatalog

logger = get_logger(__name__)


def resource_path(relative_path: str) -> Path:
    """Get the absolute path of a data file shipped with this package."""
    return Path(__file__).parent / relative_path


def _read_json(file_path: str | Path) -> Any:
    path = Path(file_path)

    if not path.exists():
        raise BoardLoadError(f"Data file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise BoardLoadError(f"Invalid JSON in {path.name}: {e}") from e
    except OSError as e:
        raise BoardLoadError(f"Error reading {path.name}: {e}") from e


# =============================================================================
# Board
# =============================================================================


class BoardLoader:
    """Loads and validates board topology from JSON data."""

    def __init__(self, strict: bool = True):
        """Initialize the loader.

        Args:
            strict: If True, require the board to be a single connected graph.
                    Set to False for partial test boards.
        """
        self.strict = strict

    def load_from_file(self, file_path: str | Path) -> BoardTopology:
        """Load a board from a JSON file.

        Raises:
            BoardLoadError: If the file cannot be read, parsed or validated.
        """
        return self.load_from_dict(_read_json(file_path))

    def load_from_dict(self, data: dict[str, Any]) -> BoardTopology:
        """Load a board from a dictionary with 'locations' and 'connections' keys.

        Raises:
            BoardLoadError: If validation fails.
        """
        self._validate_structure(data)

        board = BoardTopology()

        for location_data in data["locations"]:
            location = self._create_location(location_data)
            if location.location_id in board.locations:
                raise BoardLoadError(f"Duplicate location ID: {location.location_id}")
            board.locations[location.location_id] = location

        for connection_data in data["connections"]:
            connection = self._create_connection(connection_data, board)
            if connection.connection_id in board.connections:
                raise BoardLoadError(f"Duplicate connection: {connection.connection_id}")
            board.connections[connection.connection_id] = connection

            a, b = connection.connection_id
            board.adjacency.setdefault(a, set()).add(b)
            board.adjacency.setdefault(b, set()).add(a)

        for location_id in board.locations:
            board.adjacency.setdefault(location_id, set())

        self._validate_board(board)
        return board

    def _validate_structure(self, data: dict[str, Any]) -> None:
        if not isinstance(data, dict):
            raise BoardLoadError("Board data must be a dictionary")
        for key in ("locations", "connections"):
            if key not in data:
                raise BoardLoadError(f"Board data missing '{key}' key")
            if not isinstance(data[key], list):
                raise BoardLoadError(f"'{key}' must be a list")
        if not data["locations"]:
            raise BoardLoadError("Board must have at least one location")

    def _create_location(self, data: dict[str, Any]) -> Location:
        for required in ("id", "kind"):
            if required not in data:
                raise BoardLoadError(f"Location missing required field: {required}")

        location_id = data["id"]
        try:
            kind = LocationKind(data["kind"])
        except ValueError:
            raise BoardLoadError(f"Invalid kind '{data['kind']}' for {location_id}")

        slots = tuple(
            IndustrySlot(accepts=frozenset(self._parse_industries(slot, location_id)))
            for slot in data.get("slots", [])
        )

        merchant = None
        if kind == LocationKind.MERCHANT:
            if slots:
                raise BoardLoadError(f"Merchant {location_id} cannot have industry slots")
            merchant_data = data.get("merchant")
            if merchant_data is None:
                raise BoardLoadError(f"Merchant {location_id} missing merchant data")
            if merchant_data["bonus"] not in MERCHANT_BONUS_KINDS:
                raise BoardLoadError(
                    f"Invalid bonus '{merchant_data['bonus']}' for merchant {location_id}"
                )
            merchant = MerchantSpec(
                buys=frozenset(self._parse_industries(merchant_data["buys"], location_id)),
                bonus_kind=merchant_data["bonus"],
                bonus_value=int(merchant_data["value"]),
            )

        return Location(
            location_id=location_id,
            name=data.get("name", location_id.title()),
            kind=kind,
            slots=slots,
            merchant=merchant,
        )

    def _parse_industries(self, values: list[str], location_id: str) -> list[IndustryType]:
        try:
            return [IndustryType(value) for value in values]
        except ValueError:
            raise BoardLoadError(f"Invalid industry type in {location_id}: {values}")

    def _create_connection(self, data: dict[str, Any], board: BoardTopology) -> Connection:
        between = data.get("between")
        if not isinstance(between, list) or len(between) != 2:
            raise BoardLoadError(f"Connection must join exactly two locations: {between}")
        a, b = between
        for location_id in (a, b):
            if location_id not in board.locations:
                raise BoardLoadError(f"Connection references unknown location: {location_id}")
        if a == b:
            raise BoardLoadError(f"Self-loop connection not allowed: {a}")

        try:
            eras = frozenset(Era(era) for era in data.get("eras", []))
        except ValueError:
            raise BoardLoadError(f"Invalid era in connection {a}-{b}")
        if not eras:
            raise BoardLoadError(f"Connection {a}-{b} supports no era")

        return Connection(connection_id=make_connection_id(a, b), eras=eras)

    def _validate_board(self, board: BoardTopology) -> None:
        if not self.strict or len(board.locations) <= 1:
            return

        graph = nx.Graph()
        graph.add_nodes_from(board.locations)
        graph.add_edges_from(board.connections)
        if not nx.is_connected(graph):
            components = list(nx.connected_components(graph))
            largest = max(components, key=len)
            unreachable = sorted(set(board.locations) - largest)
            raise BoardLoadError(f"Board is not connected. Unreachable locations: {unreachable}")


# =============================================================================
# Tiles
# =============================================================================


class CatalogLoader:
    """Loads the industry tile catalog."""

    def load_from_file(self, file_path: str | Path) -> TileCatalog:
        return self.load_from_dict(_read_json(file_path))

    def load_from_dict(self, data: dict[str, Any]) -> TileCatalog:
        if not isinstance(data, dict) or not isinstance(data.get("tiles"), list):
            raise BoardLoadError("Tile data must contain a 'tiles' list")

        catalog = TileCatalog()
        for tile_data in data["tiles"]:
            spec = self._create_spec(tile_data)
            if spec.key in catalog.specs:
                raise BoardLoadError(
                    f"Duplicate tile: {spec.industry_type.value} level {spec.level}"
                )
            catalog.specs[spec.key] = spec

        for industry_type in IndustryType:
            if not catalog.levels(industry_type):
                raise BoardLoadError(f"No tiles defined for {industry_type.value}")
        return catalog

    def _create_spec(self, data: dict[str, Any]) -> IndustryTileSpec:
        for required in ("type", "level", "cost"):
            if required not in data:
                raise BoardLoadError(f"Tile missing required field: {required}")
        try:
            industry_type = IndustryType(data["type"])
        except ValueError:
            raise BoardLoadError(f"Invalid tile type: {data['type']}")

        spec = IndustryTileSpec(
            industry_type=industry_type,
            level=int(data["level"]),
            cost=int(data["cost"]),
            coal_required=int(data.get("coal", 0)),
            iron_required=int(data.get("iron", 0)),
            beer_required=int(data.get("beer", 0)),
            produces=int(data.get("produces", 0)),
            victory_points=int(data.get("vp", 0)),
            income=int(data.get("income", 0)),
            canal=bool(data.get("canal", True)),
            rail=bool(data.get("rail", True)),
            lightbulb=bool(data.get("lightbulb", False)),
            count=int(data.get("count", 1)),
        )
        if spec.level < 1 or spec.count < 1:
            raise BoardLoadError(
                f"Tile {industry_type.value} level {spec.level} has invalid level or count"
            )
        return spec


# =============================================================================
# Cards
# =============================================================================


@dataclass
class Deck:
    """Cards for a game of a given player count."""

    regular_cards: list[Card] = field(default_factory=list)
    wild_location_cards: list[Card] = field(default_factory=list)
    wild_industry_cards: list[Card] = field(default_factory=list)


class DeckLoader:
    """Builds card decks from the card definitions."""

    def __init__(self, board: BoardTopology | None = None):
        """Initialize the loader.

        Args:
            board: If given, location cards are checked against it.
        """
        self.board = board

    def load_from_file(self, file_path: str | Path, num_players: int) -> Deck:
        return self.load_from_dict(_read_json(file_path), num_players)

    def load_from_dict(self, data: dict[str, Any], num_players: int) -> Deck:
        if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
            raise BoardLoadError(f"No deck for {num_players} players")
        count_idx = num_players - MIN_PLAYERS

        deck = Deck()
        for entry in data.get("locations", []):
            location = entry["location"]
            if self.board is not None and not self.board.has_location(location):
                raise BoardLoadError(f"Card references unknown location: {location}")
            for i in range(entry["counts"][count_idx]):
                deck.regular_cards.append(
                    LocationCard(
                        card_id=f"{location}_{i + 1}",
                        location=location,
                        color=entry.get("color", "other"),
                    )
                )

        for entry in data.get("industries", []):
            try:
                types = tuple(IndustryType(t) for t in entry["industries"])
            except ValueError:
                raise BoardLoadError(f"Invalid industry card: {entry}")
            for i in range(entry["counts"][count_idx]):
                deck.regular_cards.append(
                    IndustryCard(card_id=f"{entry['name']}_{i + 1}", industry_types=types)
                )

        for i in range(int(data.get("wild_location", 0))):
            deck.wild_location_cards.append(WildLocationCard(card_id=f"wild_location_{i + 1}"))
        for i in range(int(data.get("wild_industry", 0))):
            deck.wild_industry_cards.append(WildIndustryCard(card_id=f"wild_industry_{i + 1}"))

        logger.debug(
            "Built %d-player deck with %d regular cards", num_players, len(deck.regular_cards)
        )
        return deck


# =============================================================================
# Convenience functions
# =============================================================================


def load_board(file_path: str | Path, strict: bool = True) -> BoardTopology:
    """Convenience function to load a board from a file."""
    return BoardLoader(strict=strict).load_from_file(file_path)


def load_default_board() -> BoardTopology:
    """Load the standard Brass Birmingham board.

    Raises:
        BoardLoadError: If the default board file is missing or invalid.
    """
    return load_board(resource_path("board.json"), strict=True)


def load_default_catalog() -> TileCatalog:
    """Load the standard industry tile catalog."""
    return CatalogLoader().load_from_file(resource_path("tiles.json"))


def load_default_deck(num_players: int, board: BoardTopology | None = None) -> Deck:
    """Build the standard deck for a player count."""
    return DeckLoader(board=board).load_from_file(resource_path("cards.json"), num_players)


def get_board_stats(board: BoardTopology) -> dict[str, Any]:
    """Get statistics about a board topology."""
    slots_by_type = {t.value: 0 for t in IndustryType}
    total_slots = 0
    for location in board.locations.values():
        for slot in location.slots:
            total_slots += 1
            for industry_type in slot.accepts:
                slots_by_type[industry_type.value] += 1

    return {
        "num_locations": len(board.locations),
        "num_cities": len(board.cities()),
        "num_merchants": len(board.merchants()),
        "num_connections": len(board.connections),
        "num_canal_connections": len(board.connections_for_era(Era.CANAL)),
        "num_rail_connections": len(board.connections_for_era(Era.RAIL)),
        "total_slots": total_slots,
        "slots_accepting_type": slots_by_type,
    }
