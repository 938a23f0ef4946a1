"""Turn and round advancement for the Brass Birmingham engine.

When a turn ends the state passes through CHECKING_GAME_STATE, which:
- moves to the next player in turn order, or
- at the end of a round, pays income and recomputes turn order, or
- at the end of the last round of an era, ends the era (canal) or the
  game (rail).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from core.constants import Era, LogKind, Phase
from core.game_state import Selection
from core.logging_config import get_logger

from .phase_machine import enter_phase
from .scoring import EraTransitionResult, GameEndResult, end_canal_era, end_game

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player

logger = get_logger(__name__)


@dataclass
class TurnAdvanceResult:
    """Result of ending a turn.

    Attributes:
        next_player: Seat index of the player to act next (None at game end).
        round_ended: Whether the turn closed a round.
        era_transition: Canal-era cleanup results, if the canal era ended.
        game_end: Final results, if the game ended.
        income_log: Income phase log lines, if income was paid.
    """

    next_player: Optional[int]
    round_ended: bool = False
    era_transition: Optional[EraTransitionResult] = None
    game_end: Optional[GameEndResult] = None
    income_log: list[str] = field(default_factory=list)

    @property
    def game_over(self) -> bool:
        return self.game_end is not None


class TurnManager:
    """Advances turns, rounds and eras on a working state."""

    def __init__(self, state: GameState):
        self.state = state

    def actions_for_turn(self) -> int:
        gs = self.state.global_state
        if gs.era == Era.CANAL and gs.round_number == 1:
            return self.state.config.first_round_actions
        return self.state.config.actions_per_turn

    # -------------------------------------------------------------------------
    # Income
    # -------------------------------------------------------------------------

    def _cover_shortfall(self, player: Player, shortfall: int) -> list[str]:
        """Sell tiles, then lose VP, to cover money a player cannot pay."""
        config = self.state.config
        lines = []
        for industry in sorted(player.industries, key=lambda i: i.instance_id):
            if shortfall <= 0:
                break
            spec = self.state.catalog.get(industry.industry_type, industry.level)
            proceeds = spec.cost // config.shortfall_sale_divisor
            player.remove_industry(industry.instance_id)
            covered = min(proceeds, shortfall)
            shortfall -= covered
            player.gain_money(proceeds - covered)
            lines.append(
                f"{player.name} sold {industry.industry_type.value} level {industry.level} "
                f"at {industry.location} for £{proceeds} to cover income"
            )
        if shortfall > 0:
            lost = player.lose_victory_points(shortfall)
            lines.append(f"{player.name} lost {lost} VP for an unpaid £{shortfall}")
        return lines

    def collect_income(self) -> list[str]:
        """Pay each player's income, in turn order.

        Negative income is paid from money; a shortfall is covered by
        selling tiles for part of their cost and then by losing VP.
        """
        lines = []
        for player_id in self.state.global_state.turn_order:
            player = self.state.players[player_id]
            if player.income >= 0:
                player.gain_money(player.income)
                lines.append(f"{player.name} collected £{player.income} income")
                continue
            owed = -player.income
            paid = min(owed, player.money)
            player.money -= paid
            lines.append(f"{player.name} paid £{paid} of £{owed} negative income")
            if paid < owed:
                lines.extend(self._cover_shortfall(player, owed - paid))

        for line in lines:
            self.state.add_log(line, LogKind.INFO)
        return lines

    def recompute_turn_order(self) -> list[int]:
        """Order players by money spent this round, least first.

        Ties keep their previous relative order. Money spent is reset.
        """
        gs = self.state.global_state
        gs.turn_order = sorted(gs.turn_order, key=lambda pid: self.state.players[pid].money_spent)
        for player in self.state.players:
            player.money_spent = 0
        return gs.turn_order

    # -------------------------------------------------------------------------
    # Turn advancement
    # -------------------------------------------------------------------------

    def end_turn(self) -> TurnAdvanceResult:
        """End the current player's turn and advance the game.

        Returns:
            TurnAdvanceResult describing what happened.
        """
        state = self.state
        gs = state.global_state
        enter_phase(state, Phase.CHECKING_GAME_STATE)
        state.selection = Selection()

        gs.turn_position += 1
        if gs.turn_position < len(gs.turn_order):
            gs.actions_remaining = self.actions_for_turn()
            enter_phase(state, Phase.SELECTING_ACTION)
            return TurnAdvanceResult(next_player=state.current_player_idx)

        result = TurnAdvanceResult(next_player=None, round_ended=True)
        if gs.round_number >= state.config.rounds_for(len(state.players)):
            if gs.era == Era.RAIL:
                gs.turn_position = 0
                result.game_end = end_game(state)
                enter_phase(state, Phase.GAME_OVER)
                return result
            self.recompute_turn_order()
            result.era_transition = end_canal_era(state)
        else:
            result.income_log = self.collect_income()
            self.recompute_turn_order()
            gs.round_number += 1
            gs.turn_position = 0
            gs.actions_remaining = self.actions_for_turn()
            state.add_log(f"Round {gs.round_number} of the {gs.era.value} era", LogKind.SYSTEM)

        enter_phase(state, Phase.SELECTING_ACTION)
        result.next_player = state.current_player_idx
        logger.debug("Round ended; player %d to act", result.next_player)
        return result
