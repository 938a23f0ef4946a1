"""Intent events dispatched by a host into the engine.

Every player-visible interaction is an ActionEvent. Events carry raw
parameters; the engine parses and validates them on dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.constants import ActionKind, IndustryType
from core.errors import ErrorKind, RuleViolation


class EventType(Enum):
    """Types of events a host can dispatch."""

    SELECT_ACTION = "select_action"
    SELECT_CARD = "select_card"
    SELECT_LOCATION = "select_location"
    SELECT_INDUSTRY = "select_industry"
    SELECT_LINK = "select_link"
    CONFIRM_ACTION = "confirm_action"
    CANCEL_ACTION = "cancel_action"
    END_TURN = "end_turn"


@dataclass
class ActionEvent:
    """An event to be dispatched.

    Attributes:
        event_type: The type of event.
        params: Event parameters (context-dependent):
            SELECT_ACTION: {"action": ActionKind or its value}
            SELECT_CARD: {"card_id": str}
            SELECT_LOCATION: {"location": str}
            SELECT_INDUSTRY: {"industry": IndustryType or its value}
            SELECT_LINK: {"from": str, "to": str}
    """

    event_type: EventType
    params: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"ActionEvent({self.event_type.value}, params={self.params})"

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def select_action(cls, action: ActionKind | str) -> ActionEvent:
        return cls(EventType.SELECT_ACTION, {"action": action})

    @classmethod
    def select_card(cls, card_id: str) -> ActionEvent:
        return cls(EventType.SELECT_CARD, {"card_id": card_id})

    @classmethod
    def select_location(cls, location: str) -> ActionEvent:
        return cls(EventType.SELECT_LOCATION, {"location": location})

    @classmethod
    def select_industry(cls, industry: IndustryType | str) -> ActionEvent:
        return cls(EventType.SELECT_INDUSTRY, {"industry": industry})

    @classmethod
    def select_link(cls, location_a: str, location_b: str) -> ActionEvent:
        return cls(EventType.SELECT_LINK, {"from": location_a, "to": location_b})

    @classmethod
    def confirm(cls) -> ActionEvent:
        return cls(EventType.CONFIRM_ACTION)

    @classmethod
    def cancel(cls) -> ActionEvent:
        return cls(EventType.CANCEL_ACTION)

    @classmethod
    def end_turn(cls) -> ActionEvent:
        return cls(EventType.END_TURN)

    # -------------------------------------------------------------------------
    # Parameter access
    # -------------------------------------------------------------------------

    def require(self, key: str) -> Any:
        """Get a required parameter.

        Raises:
            RuleViolation: If the parameter is missing.
        """
        if self.params.get(key) is None:
            raise RuleViolation(
                ErrorKind.SELECTION_MISSING,
                f"{self.event_type.value} requires parameter '{key}'",
            )
        return self.params[key]

    def action_kind(self) -> ActionKind:
        value = self.require("action")
        try:
            return value if isinstance(value, ActionKind) else ActionKind(value)
        except ValueError:
            raise RuleViolation(ErrorKind.INVALID_TARGET, f"Unknown action: {value}")

    def industry_type(self) -> IndustryType:
        value = self.require("industry")
        try:
            return value if isinstance(value, IndustryType) else IndustryType(value)
        except ValueError:
            raise RuleViolation(ErrorKind.INVALID_TARGET, f"Unknown industry type: {value}")

    def to_dict(self) -> dict[str, Any]:
        params = {k: v.value if isinstance(v, Enum) else v for k, v in self.params.items()}
        return {"event_type": self.event_type.value, "params": params}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActionEvent:
        return cls(EventType(data["event_type"]), dict(data.get("params", {})))
