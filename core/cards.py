"""Card variants for the Brass Birmingham engine.

A card is one of four tagged variants. Cards are immutable value objects
identified by card_id; ownership is tracked by which pile or hand holds them.
Every consumer matches all four variants and raises TypeError otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from .constants import CardType, IndustryType


@dataclass(frozen=True)
class LocationCard:
    """Allows building at one specific location.

    Attributes:
        card_id: Unique card identifier.
        location: The bound location ID.
        color: Network colour tier of the location (blue, teal or other).
    """

    card_type: ClassVar[CardType] = CardType.LOCATION

    card_id: str
    location: str
    color: str = "other"


@dataclass(frozen=True)
class IndustryCard:
    """Allows building one of the listed industry types within the player's network."""

    card_type: ClassVar[CardType] = CardType.INDUSTRY

    card_id: str
    industry_types: tuple[IndustryType, ...]


@dataclass(frozen=True)
class WildLocationCard:
    """Acts as a location card for any location."""

    card_type: ClassVar[CardType] = CardType.WILD_LOCATION

    card_id: str


@dataclass(frozen=True)
class WildIndustryCard:
    """Acts as an industry card for any industry type."""

    card_type: ClassVar[CardType] = CardType.WILD_INDUSTRY

    card_id: str


Card = Union[LocationCard, IndustryCard, WildLocationCard, WildIndustryCard]


def is_wild(card: Card) -> bool:
    """Check if a card is one of the wild variants."""
    return isinstance(card, (WildLocationCard, WildIndustryCard))


def describe_card(card: Card) -> str:
    """Return a short human-readable description used in log messages."""
    if isinstance(card, LocationCard):
        return f"{card.location} location card"
    if isinstance(card, IndustryCard):
        types = "/".join(t.value for t in card.industry_types)
        return f"{types} industry card"
    if isinstance(card, WildLocationCard):
        return "wild location card"
    if isinstance(card, WildIndustryCard):
        return "wild industry card"
    raise TypeError(f"Unknown card variant: {card!r}")


def card_to_dict(card: Card) -> dict[str, Any]:
    """Serialize a card to a dictionary."""
    if isinstance(card, LocationCard):
        return {
            "type": card.card_type.value,
            "id": card.card_id,
            "location": card.location,
            "color": card.color,
        }
    if isinstance(card, IndustryCard):
        return {
            "type": card.card_type.value,
            "id": card.card_id,
            "industries": [t.value for t in card.industry_types],
        }
    if isinstance(card, (WildLocationCard, WildIndustryCard)):
        return {"type": card.card_type.value, "id": card.card_id}
    raise TypeError(f"Unknown card variant: {card!r}")


def card_from_dict(data: dict[str, Any]) -> Card:
    """Rebuild a card from its serialized form.

    Raises:
        ValueError: If the card type is unknown.
    """
    card_type = CardType(data["type"])
    if card_type == CardType.LOCATION:
        return LocationCard(
            card_id=data["id"],
            location=data["location"],
            color=data.get("color", "other"),
        )
    if card_type == CardType.INDUSTRY:
        return IndustryCard(
            card_id=data["id"],
            industry_types=tuple(IndustryType(t) for t in data["industries"]),
        )
    if card_type == CardType.WILD_LOCATION:
        return WildLocationCard(card_id=data["id"])
    if card_type == CardType.WILD_INDUSTRY:
        return WildIndustryCard(card_id=data["id"])
    raise ValueError(f"Unknown card type: {card_type}")
