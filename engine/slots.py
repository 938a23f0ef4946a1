"""Industry slot allocator.

Industries never store a slot index. Slot occupancy is derived on every
query by walking the industries at a location in construction order and
giving each one the first unclaimed slot that accepts its type. The
result depends on construction order, and a later industry can be
blocked from an early shared slot even when another assignment would fit.
"""

from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

from core.board import BoardTopology, LocationId
from core.constants import IndustryType

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import IndustryInstance


def assign_slots(
    board: BoardTopology,
    location: LocationId,
    industries: Sequence[IndustryInstance],
) -> dict[int, int]:
    """First-fit assignment of industries to slots.

    Args:
        board: The board topology.
        location: The location to assign.
        industries: Industries at the location (any order; sorted by construction).

    Returns:
        Industry instance ID -> slot index. Industries that found no slot
        are absent.
    """
    slots = board.get_slots(location)
    claimed: set[int] = set()
    assignment: dict[int, int] = {}

    for industry in sorted(industries, key=lambda i: i.instance_id):
        for idx, slot in enumerate(slots):
            if idx not in claimed and slot.accepts_type(industry.industry_type):
                claimed.add(idx)
                assignment[industry.instance_id] = idx
                break

    return assignment


def first_free_slot(
    board: BoardTopology,
    location: LocationId,
    industries: Sequence[IndustryInstance],
    industry_type: IndustryType,
) -> Optional[int]:
    """Index of the first unclaimed slot accepting the type, or None."""
    claimed = set(assign_slots(board, location, industries).values())
    for idx, slot in enumerate(board.get_slots(location)):
        if idx not in claimed and slot.accepts_type(industry_type):
            return idx
    return None


def can_place(state: GameState, location: LocationId, industry_type: IndustryType) -> bool:
    """Check if a new industry of the given type fits at a location.

    Unknown locations and merchants have no slots and always return False.
    """
    return (
        first_free_slot(state.board, location, state.industries_at(location), industry_type)
        is not None
    )
