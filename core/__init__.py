"""Core data models for the Brass Birmingham engine."""

from .constants import (
    Era,
    LocationKind,
    IndustryType,
    ResourceType,
    CardType,
    ActionKind,
    Phase,
    Step,
    LogKind,
    MIN_PLAYERS,
    MAX_PLAYERS,
    SELLABLE_INDUSTRIES,
)

from .config import RulesConfig, DEFAULT_RULES

from .errors import (
    ErrorKind,
    EngineError,
    BrassEngineError,
    RuleViolation,
    BoardLoadError,
)

from .board import (
    LocationId,
    ConnectionId,
    make_connection_id,
    IndustrySlot,
    MerchantSpec,
    Location,
    Connection,
    BoardTopology,
)

from .cards import (
    Card,
    LocationCard,
    IndustryCard,
    WildLocationCard,
    WildIndustryCard,
    is_wild,
)

from .tiles import IndustryTileSpec, TileCatalog

from .market import Market, MarketLevel, create_coal_market, create_iron_market

from .player import IndustryInstance, Link, Player

from .game_state import PlayerSetup, LogEntry, Selection, CardPiles, GlobalState, GameState

__all__ = [
    # Constants
    "Era",
    "LocationKind",
    "IndustryType",
    "ResourceType",
    "CardType",
    "ActionKind",
    "Phase",
    "Step",
    "LogKind",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "SELLABLE_INDUSTRIES",
    # Config
    "RulesConfig",
    "DEFAULT_RULES",
    # Errors
    "ErrorKind",
    "EngineError",
    "BrassEngineError",
    "RuleViolation",
    "BoardLoadError",
    # Board
    "LocationId",
    "ConnectionId",
    "make_connection_id",
    "IndustrySlot",
    "MerchantSpec",
    "Location",
    "Connection",
    "BoardTopology",
    # Cards
    "Card",
    "LocationCard",
    "IndustryCard",
    "WildLocationCard",
    "WildIndustryCard",
    "is_wild",
    # Tiles
    "IndustryTileSpec",
    "TileCatalog",
    # Markets
    "Market",
    "MarketLevel",
    "create_coal_market",
    "create_iron_market",
    # Player
    "IndustryInstance",
    "Link",
    "Player",
    # Game State
    "PlayerSetup",
    "LogEntry",
    "Selection",
    "CardPiles",
    "GlobalState",
    "GameState",
]
