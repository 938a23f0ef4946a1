"""Error taxonomy for the Brass Birmingham engine.

Rule violations are raised inside resolvers as RuleViolation and converted
into EngineError values at the dispatch boundary. Callers of dispatch never
see an exception for an illegal move, only a rejected result.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .constants import ActionKind


class ErrorKind(Enum):
    """Kinds of rejected-dispatch outcomes."""

    INVALID_PHASE = "InvalidPhase"
    SELECTION_MISSING = "SelectionMissing"
    CARD_TYPE_MISMATCH = "CardTypeMismatch"
    NETWORK_VIOLATION = "NetworkViolation"
    SLOT_UNAVAILABLE = "SlotUnavailable"
    OVERBUILD_DENIED = "OverbuildDenied"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    RESOURCE_EXHAUSTED = "ResourceExhausted"
    INVALID_PLAYER_COUNT = "InvalidPlayerCount"
    INVALID_TARGET = "InvalidTarget"
    GAME_OVER = "GameOver"


@dataclass(frozen=True)
class EngineError:
    """A rejected dispatch.

    Attributes:
        kind: The error kind.
        detail: Human-readable explanation.
        action: The action being attempted, if any.
    """

    kind: ErrorKind
    detail: str
    action: Optional[ActionKind] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "detail": self.detail,
            "action": self.action.value if self.action else None,
        }

    def __str__(self) -> str:
        prefix = f"[{self.action.value}] " if self.action else ""
        return f"{prefix}{self.kind.value}: {self.detail}"


class BrassEngineError(Exception):
    """Base exception for all engine errors."""


class RuleViolation(BrassEngineError, ValueError):
    """Raised when an event or action breaks a game rule."""

    def __init__(
        self,
        kind: ErrorKind,
        detail: str,
        action: Optional[ActionKind] = None,
    ) -> None:
        self.error = EngineError(kind=kind, detail=detail, action=action)
        super().__init__(str(self.error))

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def with_action(self, action: Optional[ActionKind]) -> RuleViolation:
        """Return a copy tagged with the action being attempted."""
        if self.error.action is not None or action is None:
            return self
        return RuleViolation(self.error.kind, self.error.detail, action)


class BoardLoadError(BrassEngineError):
    """Raised when board or catalog data fails to load or validate."""


__all__ = [
    "BoardLoadError",
    "BrassEngineError",
    "EngineError",
    "ErrorKind",
    "RuleViolation",
]
