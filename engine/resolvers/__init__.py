"""Action resolvers for the Brass Birmingham engine.

This module contains one resolver per player action. Each resolver:
- Takes the working game state as input
- Validates the action-specific rules, raising RuleViolation on failure
- Provides resolve() to apply the action to the state
- Returns a result dataclass carrying the log line for the action

Card discarding, action counting and hand refills are common to every
action and are handled by engine.action_resolver.
"""

from .build import (
    BuildResolver,
    BuildResult,
)

from .develop import (
    DevelopResolver,
    DevelopResult,
)

from .sell import (
    SellResolver,
    SellResult,
)

from .network_links import (
    NetworkResolver,
    NetworkResult,
)

from .loan import (
    LoanResolver,
    LoanResult,
)

from .scout import (
    ScoutResolver,
    ScoutResult,
)

from .pass_turn import (
    PassResolver,
    PassResult,
)

__all__ = [
    # Build
    "BuildResolver",
    "BuildResult",
    # Develop
    "DevelopResolver",
    "DevelopResult",
    # Sell
    "SellResolver",
    "SellResult",
    # Network
    "NetworkResolver",
    "NetworkResult",
    # Loan
    "LoanResolver",
    "LoanResult",
    # Scout
    "ScoutResolver",
    "ScoutResult",
    # Pass
    "PassResolver",
    "PassResult",
]
