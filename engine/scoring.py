"""Scoring and era transitions for the Brass Birmingham engine.

At the end of each era every player scores their links and flipped
industries. The canal era is then cleaned up (level 1 tiles and canal
links removed, merchant beer restored, deck rebuilt and hands redealt)
and the rail era begins. At the end of the rail era the game is over and
players are ranked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.cards import Card, is_wild
from core.constants import Era, LogKind
from core.logging_config import get_logger

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player

logger = get_logger(__name__)


@dataclass
class EraScore:
    """Points scored by one player at the end of an era."""

    player_id: int
    link_points: int
    industry_points: int

    @property
    def total(self) -> int:
        return self.link_points + self.industry_points


@dataclass
class EraTransitionResult:
    """Result of ending the canal era.

    Attributes:
        scores: Points scored by each player.
        removed_industries: Instance IDs of level 1 tiles removed.
        removed_links: Number of canal links removed.
    """

    scores: list[EraScore] = field(default_factory=list)
    removed_industries: list[int] = field(default_factory=list)
    removed_links: int = 0


@dataclass
class GameEndResult:
    """Result of ending the game."""

    scores: list[EraScore] = field(default_factory=list)
    ranking: list[int] = field(default_factory=list)
    winner_idx: int = 0


def score_player(state: GameState, player: Player) -> EraScore:
    """Points a player would score if the era ended now."""
    link_points = len(player.links) * state.config.vp_per_link
    industry_points = sum(
        state.catalog.get(i.industry_type, i.level).victory_points
        for i in player.industries
        if i.flipped
    )
    return EraScore(player.player_id, link_points, industry_points)


def score_era(state: GameState) -> list[EraScore]:
    """Score every player's links and flipped industries."""
    scores = []
    for player in state.players:
        score = score_player(state, player)
        player.add_victory_points(score.total)
        state.add_log(
            f"{player.name} scored {score.total} VP ({score.link_points} from links, "
            f"{score.industry_points} from industries)",
            LogKind.SYSTEM,
        )
        scores.append(score)
    return scores


def rank_players(state: GameState) -> list[int]:
    """Seat indices from first to last.

    Ordered by victory points, then income, then money, then seat
    (lowest seat wins a complete tie).
    """
    return sorted(
        range(len(state.players)),
        key=lambda pid: (
            -state.players[pid].victory_points,
            -state.players[pid].income,
            -state.players[pid].money,
            pid,
        ),
    )


def _rebuild_deck(state: GameState) -> None:
    piles = state.piles
    regular: list[Card] = []
    gathered = [card for player in state.players for card in player.hand]
    gathered.extend(piles.draw_pile)
    gathered.extend(piles.discard_pile)
    for player in state.players:
        player.hand = []
    piles.draw_pile = []
    piles.discard_pile = []

    for card in gathered:
        if is_wild(card):
            piles.return_card(card)
        else:
            regular.append(card)

    # Sort first so the new deck depends only on the seed, not on where cards were
    regular.sort(key=lambda card: card.card_id)
    piles.draw_pile = state.shuffle(regular)
    for player in state.players:
        state.draw_cards(player, state.config.hand_size)


def end_canal_era(state: GameState) -> EraTransitionResult:
    """Score the canal era and set up the rail era.

    The caller is responsible for the phase transition around this call.
    """
    result = EraTransitionResult(scores=score_era(state))

    for player in state.players:
        for industry in list(player.industries):
            if industry.level == 1:
                player.remove_industry(industry.instance_id)
                result.removed_industries.append(industry.instance_id)
        canal_links = [link for link in player.links if link.era == Era.CANAL]
        result.removed_links += len(canal_links)
        player.links = [link for link in player.links if link.era != Era.CANAL]

    for merchant_id in state.merchant_beer:
        state.merchant_beer[merchant_id] = state.config.merchant_beer

    _rebuild_deck(state)

    gs = state.global_state
    gs.era = Era.RAIL
    gs.round_number = 1
    gs.turn_position = 0
    gs.actions_remaining = state.config.actions_per_turn

    state.add_log("Canal Era ended", LogKind.SYSTEM)
    state.add_log("Rail Era started", LogKind.SYSTEM)
    logger.info(
        "Canal era ended: removed %d level 1 tiles and %d canal links",
        len(result.removed_industries), result.removed_links,
    )
    return result


def end_game(state: GameState) -> GameEndResult:
    """Score the rail era and determine the final ranking."""
    scores = score_era(state)
    ranking = rank_players(state)

    gs = state.global_state
    gs.game_ended = True
    gs.final_ranking = ranking
    gs.winner_idx = ranking[0]
    gs.actions_remaining = 0

    winner = state.players[ranking[0]]
    state.add_log(
        f"Game Over! {winner.name} wins with {winner.victory_points} VP", LogKind.SYSTEM
    )
    logger.info("Game over: winner is player %d", winner.player_id)
    return GameEndResult(scores=scores, ranking=ranking, winner_idx=ranking[0])
