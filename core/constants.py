"""Constants and enums for the Brass Birmingham rules engine."""

from enum import Enum


class Era(Enum):
    """The two eras of the game."""

    CANAL = "canal"
    RAIL = "rail"


class LocationKind(Enum):
    """Kinds of board locations."""

    CITY = "city"
    MERCHANT = "merchant"


class IndustryType(Enum):
    """Industry types that can be built on the board."""

    COTTON = "cotton"
    COAL = "coal"
    IRON = "iron"
    MANUFACTURER = "manufacturer"
    POTTERY = "pottery"
    BREWERY = "brewery"


class ResourceType(Enum):
    """Resources consumed by builds, links and sales."""

    COAL = "coal"
    IRON = "iron"
    BEER = "beer"


class CardType(Enum):
    """Card variants."""

    LOCATION = "location"
    INDUSTRY = "industry"
    WILD_LOCATION = "wild_location"
    WILD_INDUSTRY = "wild_industry"


class ActionKind(Enum):
    """Actions a player may take on their turn."""

    BUILD = "build"
    DEVELOP = "develop"
    SELL = "sell"
    NETWORK = "network"
    LOAN = "loan"
    SCOUT = "scout"
    PASS = "pass"


class Phase(Enum):
    """Turn/phase state machine states."""

    SETUP = "setup"

    # Playing: waiting for the current player to pick an action
    SELECTING_ACTION = "selecting_action"

    # Playing: one sub-state per in-progress action
    BUILDING = "building"
    DEVELOPING = "developing"
    SELLING = "selling"
    NETWORKING = "networking"
    TAKING_LOAN = "taking_loan"
    SCOUTING = "scouting"
    PASSING = "passing"

    # Transient: end-of-turn bookkeeping (never observed between dispatches)
    CHECKING_GAME_STATE = "checking_game_state"

    GAME_OVER = "game_over"


class Step(Enum):
    """Selection wizard steps nested inside each action phase."""

    SELECTING_CARD = "selecting_card"
    SELECTING_TARGET = "selecting_target"
    CONFIRMING = "confirming"


class LogKind(Enum):
    """Kinds of game log entries."""

    SYSTEM = "system"
    ACTION = "action"
    INFO = "info"


# Player limits
MIN_PLAYERS = 2
MAX_PLAYERS = 4

# Industry types that are flipped by the Sell action
SELLABLE_INDUSTRIES = (
    IndustryType.COTTON,
    IndustryType.MANUFACTURER,
    IndustryType.POTTERY,
)

# Industry types whose on-tile resource drives auto-flip
PRODUCING_INDUSTRIES = {
    IndustryType.COAL: ResourceType.COAL,
    IndustryType.IRON: ResourceType.IRON,
    IndustryType.BREWERY: ResourceType.BEER,
}

# Action kind -> phase entered when the action is selected
ACTION_PHASES = {
    ActionKind.BUILD: Phase.BUILDING,
    ActionKind.DEVELOP: Phase.DEVELOPING,
    ActionKind.SELL: Phase.SELLING,
    ActionKind.NETWORK: Phase.NETWORKING,
    ActionKind.LOAN: Phase.TAKING_LOAN,
    ActionKind.SCOUT: Phase.SCOUTING,
    ActionKind.PASS: Phase.PASSING,
}

ACTION_PHASE_SET = frozenset(ACTION_PHASES.values())

# Merchant bonus kinds
BONUS_MONEY = "money"
BONUS_DEVELOP = "develop"
BONUS_INCOME = "income"
BONUS_VICTORY_POINTS = "victory_points"
MERCHANT_BONUS_KINDS = (BONUS_MONEY, BONUS_DEVELOP, BONUS_INCOME, BONUS_VICTORY_POINTS)
