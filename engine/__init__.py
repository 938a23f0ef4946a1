"""Game engine for the Brass Birmingham board game.

This module provides the game logic including:
- Events and the dispatch entry point
- Phase state machine and selection wizard
- Market sourcing, network connectivity and slot allocation
- Action resolvers for each player action
- Turn advancement, scoring and era transitions
"""

from .events import (
    ActionEvent,
    EventType,
)

from .phase_machine import (
    PhaseMachine,
    PhaseTransitionResult,
    PHASE_TRANSITIONS,
    legal_event_types,
)

from .network import (
    distance,
    is_in_network,
    reachable_merchants,
)

from .slots import (
    assign_slots,
    can_place,
)

from .sourcing import (
    ConsumptionResult,
    consume_resource,
    consume_beer,
)

from .action_resolver import (
    ActionOutcome,
    ActionResolver,
)

from .turn_manager import (
    TurnAdvanceResult,
    TurnManager,
)

from .game_engine import (
    DispatchResult,
    GameEngine,
    StepResult,
    can_dispatch,
    dispatch,
    initial_state,
    replay,
)

__all__ = [
    # Events
    "ActionEvent",
    "EventType",
    # Phase machine
    "PhaseMachine",
    "PhaseTransitionResult",
    "PHASE_TRANSITIONS",
    "legal_event_types",
    # Network
    "distance",
    "is_in_network",
    "reachable_merchants",
    # Slots
    "assign_slots",
    "can_place",
    # Sourcing
    "ConsumptionResult",
    "consume_resource",
    "consume_beer",
    # Actions
    "ActionOutcome",
    "ActionResolver",
    # Turns
    "TurnAdvanceResult",
    "TurnManager",
    # Game engine
    "DispatchResult",
    "GameEngine",
    "StepResult",
    "can_dispatch",
    "dispatch",
    "initial_state",
    "replay",
]
