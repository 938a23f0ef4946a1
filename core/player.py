"""Player model for the Brass Birmingham engine.

Each player owns money, an income level, victory points, a hand of cards,
the industries and links they have built, and the tiles still on their mat.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .board import LocationId, make_connection_id
from .cards import Card, card_from_dict, card_to_dict, is_wild
from .constants import Era, IndustryType, ResourceType


@dataclass
class IndustryInstance:
    """An industry tile placed on the board.

    Attributes:
        instance_id: Global construction counter; lower IDs were built earlier.
        owner_id: Owning player.
        location: Location ID.
        industry_type: Industry type.
        level: Tile level (look up the spec in the TileCatalog).
        flipped: Whether the tile has been flipped.
        coal: Coal cubes on the tile.
        iron: Iron cubes on the tile.
        beer: Beer barrels on the tile.
    """

    instance_id: int
    owner_id: int
    location: LocationId
    industry_type: IndustryType
    level: int
    flipped: bool = False
    coal: int = 0
    iron: int = 0
    beer: int = 0

    def resource_count(self, resource: ResourceType) -> int:
        """Cubes of the given resource currently on the tile."""
        if resource == ResourceType.COAL:
            return self.coal
        if resource == ResourceType.IRON:
            return self.iron
        return self.beer

    def take(self, resource: ResourceType, amount: int) -> None:
        """Remove resource cubes from the tile.

        Raises:
            ValueError: If the tile holds fewer cubes than requested.
        """
        available = self.resource_count(resource)
        if amount > available:
            raise ValueError(
                f"Industry {self.instance_id} holds {available} {resource.value}, "
                f"cannot take {amount}"
            )
        if resource == ResourceType.COAL:
            self.coal -= amount
        elif resource == ResourceType.IRON:
            self.iron -= amount
        else:
            self.beer -= amount

    def clear_resources(self) -> None:
        self.coal = 0
        self.iron = 0
        self.beer = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "owner_id": self.owner_id,
            "location": self.location,
            "industry_type": self.industry_type.value,
            "level": self.level,
            "flipped": self.flipped,
            "coal": self.coal,
            "iron": self.iron,
            "beer": self.beer,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IndustryInstance:
        return cls(
            instance_id=data["instance_id"],
            owner_id=data["owner_id"],
            location=data["location"],
            industry_type=IndustryType(data["industry_type"]),
            level=data["level"],
            flipped=data["flipped"],
            coal=data["coal"],
            iron=data["iron"],
            beer=data["beer"],
        )


@dataclass(frozen=True)
class Link:
    """A canal or rail link built by a player."""

    location_a: LocationId
    location_b: LocationId
    era: Era
    owner_id: int

    @property
    def connection_id(self) -> tuple[str, str]:
        return make_connection_id(self.location_a, self.location_b)

    def touches(self, location: LocationId) -> bool:
        return location in (self.location_a, self.location_b)

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.location_a,
            "to": self.location_b,
            "era": self.era.value,
            "owner_id": self.owner_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Link:
        return cls(
            location_a=data["from"],
            location_b=data["to"],
            era=Era(data["era"]),
            owner_id=data["owner_id"],
        )


@dataclass
class Player:
    """Represents a player in the game.

    Attributes:
        player_id: Seat index (0-indexed).
        name: Display name.
        color: Display colour.
        money: Money on hand (never negative).
        income: Income level paid out each round (may be negative).
        victory_points: Victory points.
        hand: Cards held.
        industries: Industries on the board, in construction order.
        links: Links on the board.
        tiles_on_mat: Industry type -> remaining tile levels, lowest first.
        money_spent: Money spent this round (drives turn order).
    """

    player_id: int
    name: str = ""
    color: Optional[str] = None
    money: int = 0
    income: int = 0
    victory_points: int = 0
    hand: list[Card] = field(default_factory=list)
    industries: list[IndustryInstance] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    tiles_on_mat: dict[IndustryType, list[int]] = field(default_factory=dict)
    money_spent: int = 0

    # -------------------------------------------------------------------------
    # Money, income and points
    # -------------------------------------------------------------------------

    def can_afford(self, amount: int) -> bool:
        return self.money >= amount

    def spend(self, amount: int) -> None:
        """Pay money to the bank and record it as spent this round.

        Raises:
            ValueError: If the player cannot afford the amount.
        """
        if not self.can_afford(amount):
            raise ValueError(
                f"Player {self.player_id} cannot afford £{amount} (has £{self.money})"
            )
        self.money -= amount
        self.money_spent += amount

    def gain_money(self, amount: int) -> None:
        self.money += amount

    def adjust_income(self, delta: int, floor: int, cap: int) -> int:
        """Move the income level, clamped to [floor, cap].

        Returns:
            The new income level.
        """
        self.income = max(floor, min(cap, self.income + delta))
        return self.income

    def add_victory_points(self, points: int) -> None:
        self.victory_points += points

    def lose_victory_points(self, points: int) -> int:
        """Lose up to points VP (never below zero).

        Returns:
            The number of VP actually lost.
        """
        lost = min(points, self.victory_points)
        self.victory_points -= lost
        return lost

    # -------------------------------------------------------------------------
    # Hand
    # -------------------------------------------------------------------------

    def find_card(self, card_id: str) -> Optional[Card]:
        return next((card for card in self.hand if card.card_id == card_id), None)

    def remove_card(self, card_id: str) -> Card:
        """Remove a card from the hand and return it.

        Raises:
            ValueError: If the card is not in hand.
        """
        for idx, card in enumerate(self.hand):
            if card.card_id == card_id:
                return self.hand.pop(idx)
        raise ValueError(f"Player {self.player_id} does not hold card {card_id}")

    def has_wild_card(self) -> bool:
        return any(is_wild(card) for card in self.hand)

    # -------------------------------------------------------------------------
    # Mat
    # -------------------------------------------------------------------------

    def lowest_tile(self, industry_type: IndustryType) -> Optional[int]:
        """Level of the lowest tile of a type still on the mat, or None."""
        tiles = self.tiles_on_mat.get(industry_type, [])
        return tiles[0] if tiles else None

    def remove_lowest_tile(self, industry_type: IndustryType) -> int:
        """Take the lowest tile of a type off the mat.

        Raises:
            ValueError: If no tiles of that type remain.
        """
        tiles = self.tiles_on_mat.get(industry_type, [])
        if not tiles:
            raise ValueError(
                f"Player {self.player_id} has no {industry_type.value} tiles left"
            )
        return tiles.pop(0)

    # -------------------------------------------------------------------------
    # Board presence
    # -------------------------------------------------------------------------

    def has_presence(self) -> bool:
        """Check if the player has any industry or link on the board."""
        return bool(self.industries) or bool(self.links)

    def network_locations(self) -> set[LocationId]:
        """Locations holding one of the player's industries or touched by their links."""
        locations = {industry.location for industry in self.industries}
        for link in self.links:
            locations.add(link.location_a)
            locations.add(link.location_b)
        return locations

    def industries_at(self, location: LocationId) -> list[IndustryInstance]:
        return [i for i in self.industries if i.location == location]

    def remove_industry(self, instance_id: int) -> IndustryInstance:
        """Remove an industry from the board.

        Raises:
            ValueError: If the player does not own that industry.
        """
        for idx, industry in enumerate(self.industries):
            if industry.instance_id == instance_id:
                return self.industries.pop(idx)
        raise ValueError(f"Player {self.player_id} does not own industry {instance_id}")

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "color": self.color,
            "money": self.money,
            "income": self.income,
            "victory_points": self.victory_points,
            "hand": [card_to_dict(card) for card in self.hand],
            "industries": [industry.to_dict() for industry in self.industries],
            "links": [link.to_dict() for link in self.links],
            "tiles_on_mat": {t.value: list(levels) for t, levels in self.tiles_on_mat.items()},
            "money_spent": self.money_spent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Player:
        return cls(
            player_id=data["player_id"],
            name=data["name"],
            color=data["color"],
            money=data["money"],
            income=data["income"],
            victory_points=data["victory_points"],
            hand=[card_from_dict(card) for card in data["hand"]],
            industries=[IndustryInstance.from_dict(i) for i in data["industries"]],
            links=[Link.from_dict(link) for link in data["links"]],
            tiles_on_mat={
                IndustryType(t): list(levels) for t, levels in data["tiles_on_mat"].items()
            },
            money_spent=data["money_spent"],
        )
