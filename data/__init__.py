"""Static game data and loaders for the Brass Birmingham engine."""

from .loader import (
    BoardLoader,
    CatalogLoader,
    Deck,
    DeckLoader,
    load_board,
    load_default_board,
    load_default_catalog,
    load_default_deck,
    get_board_stats,
)

__all__ = [
    "BoardLoader",
    "CatalogLoader",
    "Deck",
    "DeckLoader",
    "load_board",
    "load_default_board",
    "load_default_catalog",
    "load_default_deck",
    "get_board_stats",
]
