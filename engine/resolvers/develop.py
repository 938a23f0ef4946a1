"""Develop action resolver for the Brass Birmingham engine.

Develop removes the lowest tile of one or two industry types from the
player's mat, exposing higher levels. Each removed tile costs one iron,
taken free from any iron works on the board before the market is used.
Tiles marked with a lightbulb cannot be developed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.constants import ActionKind, IndustryType, ResourceType
from core.errors import ErrorKind, RuleViolation

from ..sourcing import ConsumptionResult, consume_resource
from .common import pay, selected_card

if TYPE_CHECKING:
    from core.game_state import GameState


@dataclass
class DevelopResult:
    """Result of resolving a Develop action.

    Attributes:
        removed: (industry type, level) of each tile removed from the mat.
        iron: Iron sourcing details.
        log_message: Game log line for the action.
    """

    removed: list[tuple[IndustryType, int]] = field(default_factory=list)
    iron: ConsumptionResult = field(
        default_factory=lambda: ConsumptionResult(resource=ResourceType.IRON, requested=0)
    )
    log_message: str = ""


class DevelopResolver:
    """Resolves the Develop action for the current player."""

    action = ActionKind.DEVELOP

    def __init__(self, state: GameState):
        self.state = state
        self.player = state.get_current_player()

    def validate_types(self, industry_types: list[IndustryType]) -> None:
        """Check that each selected tile exists and can be developed.

        Two selections of the same type remove that type's two lowest tiles.
        """
        if not industry_types:
            raise RuleViolation(ErrorKind.SELECTION_MISSING, "No industry type selected")
        if len(industry_types) > self.state.config.max_develop:
            raise RuleViolation(
                ErrorKind.INVALID_TARGET,
                f"Develop removes at most {self.state.config.max_develop} tiles",
            )

        for industry_type in set(industry_types):
            wanted = industry_types.count(industry_type)
            tiles = self.player.tiles_on_mat.get(industry_type, [])
            if len(tiles) < wanted:
                raise RuleViolation(
                    ErrorKind.INVALID_TARGET,
                    f"Not enough {industry_type.value} tiles left on the mat",
                )
            for level in tiles[:wanted]:
                if self.state.catalog.get(industry_type, level).lightbulb:
                    raise RuleViolation(
                        ErrorKind.INVALID_TARGET,
                        f"{industry_type.value} level {level} cannot be developed",
                    )

    def resolve(self) -> DevelopResult:
        """Resolve the Develop action.

        Raises:
            RuleViolation: If a tile cannot be developed or the iron is unaffordable.
        """
        selected_card(self.state, self.player)
        industry_types = list(self.state.selection.industry_types)
        self.validate_types(industry_types)

        iron = consume_resource(self.state, None, ResourceType.IRON, len(industry_types))
        pay(self.player, iron.cost, f"Developing {len(industry_types)} tile(s)")

        result = DevelopResult(iron=iron)
        for industry_type in industry_types:
            level = self.player.remove_lowest_tile(industry_type)
            result.removed.append((industry_type, level))

        removed = ", ".join(f"{t.value} level {level}" for t, level in result.removed)
        source = ", ".join(iron.details)
        result.log_message = (
            f"{self.player.name} developed {removed} for £{iron.cost} ({source})"
        )
        return result
