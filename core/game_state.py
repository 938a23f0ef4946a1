"""Game state for the Brass Birmingham engine.

GameState is the single source of truth for the entire game. The engine
never mutates a state it was handed: dispatch clones, mutates the clone and
returns it. GameState provides cloning, serialization, state hashing and
invariant validation.
"""

from __future__ import annotations

import copy
import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

import numpy as np

from .board import BoardTopology, LocationId
from .cards import (
    Card,
    LocationCard,
    IndustryCard,
    WildIndustryCard,
    WildLocationCard,
    card_from_dict,
    card_to_dict,
)
from .config import DEFAULT_RULES, RulesConfig
from .constants import (
    ActionKind,
    Era,
    IndustryType,
    LogKind,
    Phase,
    Step,
    MIN_PLAYERS,
    MAX_PLAYERS,
)
from .errors import ErrorKind, RuleViolation
from .market import Market, create_coal_market, create_iron_market
from .player import IndustryInstance, Player
from .tiles import TileCatalog


@dataclass(frozen=True)
class PlayerSetup:
    """Host-supplied identity of a player joining a game."""

    name: str
    color: Optional[str] = None


@dataclass
class LogEntry:
    """One line of the append-only game log."""

    message: str
    kind: LogKind
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self, include_timestamp: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message, "kind": self.kind.value}
        if include_timestamp:
            data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogEntry:
        timestamp = (
            datetime.fromisoformat(data["timestamp"])
            if "timestamp" in data
            else datetime.now(timezone.utc)
        )
        return cls(message=data["message"], kind=LogKind(data["kind"]), timestamp=timestamp)


@dataclass
class Selection:
    """Transient selections of the action currently being assembled.

    Attributes:
        action: The action selected, or None while choosing.
        step: Wizard step within the action.
        card_id: The card played for the action.
        card_ids: All cards picked for a Scout action (action card first).
        location: Selected location.
        industry_types: Selected industry types (one for build/sell, up to two for develop).
        links: Selected links as (from, to) pairs.
    """

    action: Optional[ActionKind] = None
    step: Step = Step.SELECTING_CARD
    card_id: Optional[str] = None
    card_ids: list[str] = field(default_factory=list)
    location: Optional[LocationId] = None
    industry_types: list[IndustryType] = field(default_factory=list)
    links: list[tuple[LocationId, LocationId]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value if self.action else None,
            "step": self.step.value,
            "card_id": self.card_id,
            "card_ids": list(self.card_ids),
            "location": self.location,
            "industry_types": [t.value for t in self.industry_types],
            "links": [list(link) for link in self.links],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Selection:
        return cls(
            action=ActionKind(data["action"]) if data["action"] else None,
            step=Step(data["step"]),
            card_id=data["card_id"],
            card_ids=list(data["card_ids"]),
            location=data["location"],
            industry_types=[IndustryType(t) for t in data["industry_types"]],
            links=[(a, b) for a, b in data["links"]],
        )


@dataclass
class CardPiles:
    """Cards not held by any player."""

    draw_pile: list[Card] = field(default_factory=list)
    discard_pile: list[Card] = field(default_factory=list)
    wild_location_pile: list[Card] = field(default_factory=list)
    wild_industry_pile: list[Card] = field(default_factory=list)

    def return_card(self, card: Card) -> None:
        """Put a played card back where it belongs."""
        if isinstance(card, WildLocationCard):
            self.wild_location_pile.append(card)
        elif isinstance(card, WildIndustryCard):
            self.wild_industry_pile.append(card)
        elif isinstance(card, (LocationCard, IndustryCard)):
            self.discard_pile.append(card)
        else:
            raise TypeError(f"Unknown card variant: {card!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "draw_pile": [card_to_dict(c) for c in self.draw_pile],
            "discard_pile": [card_to_dict(c) for c in self.discard_pile],
            "wild_location_pile": [card_to_dict(c) for c in self.wild_location_pile],
            "wild_industry_pile": [card_to_dict(c) for c in self.wild_industry_pile],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardPiles:
        return cls(
            draw_pile=[card_from_dict(c) for c in data["draw_pile"]],
            discard_pile=[card_from_dict(c) for c in data["discard_pile"]],
            wild_location_pile=[card_from_dict(c) for c in data["wild_location_pile"]],
            wild_industry_pile=[card_from_dict(c) for c in data["wild_industry_pile"]],
        )


@dataclass
class GlobalState:
    """Global game state not tied to specific players.

    Attributes:
        era: Current era.
        round_number: Current round within the era (1-indexed).
        turn_order: Seat indices in the order they act this round.
        turn_position: Index into turn_order of the acting player.
        actions_remaining: Actions left in the current turn.
        next_industry_id: Construction counter for new industries.
        beer_supply: Beer left in the general supply.
        seed: Seed for deck shuffling.
        shuffle_count: Number of shuffles performed so far.
        game_ended: Whether the game has ended.
        winner_idx: Seat index of the winner once the game has ended.
        final_ranking: Seat indices from first to last once the game has ended.
    """

    era: Era = Era.CANAL
    round_number: int = 1
    turn_order: list[int] = field(default_factory=list)
    turn_position: int = 0
    actions_remaining: int = 1
    next_industry_id: int = 0
    beer_supply: int = 0
    seed: int = 0
    shuffle_count: int = 0
    game_ended: bool = False
    winner_idx: Optional[int] = None
    final_ranking: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "era": self.era.value,
            "round_number": self.round_number,
            "turn_order": list(self.turn_order),
            "turn_position": self.turn_position,
            "actions_remaining": self.actions_remaining,
            "next_industry_id": self.next_industry_id,
            "beer_supply": self.beer_supply,
            "seed": self.seed,
            "shuffle_count": self.shuffle_count,
            "game_ended": self.game_ended,
            "winner_idx": self.winner_idx,
            "final_ranking": list(self.final_ranking),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GlobalState:
        values = dict(data)
        values["era"] = Era(data["era"])
        values["turn_order"] = list(data["turn_order"])
        values["final_ranking"] = list(data["final_ranking"])
        return cls(**values)


@dataclass
class GameState:
    """The complete game state - single source of truth.

    Attributes:
        board: Immutable board topology (shared between clones).
        catalog: Immutable tile catalog (shared between clones).
        config: Rule constants.
        players: All players in seat order.
        global_state: Era, round, turn order and counters.
        phase: Current state-machine phase.
        selection: In-progress action selections.
        coal_market: Coal ladder.
        iron_market: Iron ladder.
        merchant_beer: Merchant location ID -> beer barrels available.
        piles: Draw, discard and wild piles.
        log: Append-only game log.
    """

    board: BoardTopology
    catalog: TileCatalog
    config: RulesConfig
    players: list[Player]
    global_state: GlobalState
    phase: Phase = Phase.SETUP
    selection: Selection = field(default_factory=Selection)
    coal_market: Market = field(default_factory=create_coal_market)
    iron_market: Market = field(default_factory=create_iron_market)
    merchant_beer: dict[LocationId, int] = field(default_factory=dict)
    piles: CardPiles = field(default_factory=CardPiles)
    log: list[LogEntry] = field(default_factory=list)

    @classmethod
    def create_initial_state(
        cls,
        board: BoardTopology,
        catalog: TileCatalog,
        players: list[PlayerSetup],
        regular_cards: list[Card],
        wild_location_cards: list[Card],
        wild_industry_cards: list[Card],
        config: RulesConfig = DEFAULT_RULES,
        seed: int = 0,
    ) -> GameState:
        """Create a started game: shuffled deck, dealt hands, first player to act.

        Args:
            board: The board topology.
            catalog: The tile catalog.
            players: Player identities in seat order (2-4).
            regular_cards: Location and industry cards for this player count.
            wild_location_cards: Wild location pile.
            wild_industry_cards: Wild industry pile.
            config: Rule constants.
            seed: Seed for deck shuffling.

        Returns:
            A new GameState in the SELECTING_ACTION phase.

        Raises:
            RuleViolation: If the player count is out of range.
        """
        if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
            raise RuleViolation(
                ErrorKind.INVALID_PLAYER_COUNT,
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, "
                f"got {len(players)}",
            )

        global_state = GlobalState(
            era=Era.CANAL,
            round_number=1,
            turn_order=list(range(len(players))),
            turn_position=0,
            actions_remaining=config.first_round_actions,
            beer_supply=config.general_beer_supply,
            seed=seed,
        )

        state = cls(
            board=board,
            catalog=catalog,
            config=config,
            players=[
                Player(
                    player_id=i,
                    name=setup.name,
                    color=setup.color,
                    money=config.starting_money,
                    income=config.starting_income,
                    tiles_on_mat=catalog.initial_mat(),
                )
                for i, setup in enumerate(players)
            ],
            global_state=global_state,
            phase=Phase.SETUP,
            merchant_beer={m.location_id: config.merchant_beer for m in board.merchants()},
            piles=CardPiles(
                wild_location_pile=list(wild_location_cards),
                wild_industry_pile=list(wild_industry_cards),
            ),
        )

        state.piles.draw_pile = state.shuffle(regular_cards)
        for player in state.players:
            state.draw_cards(player, config.hand_size)

        state.add_log("Game started", LogKind.SYSTEM)
        state.phase = Phase.SELECTING_ACTION
        return state

    # -------------------------------------------------------------------------
    # Player access methods
    # -------------------------------------------------------------------------

    @property
    def current_player_idx(self) -> int:
        """Seat index of the player whose turn it is."""
        return self.global_state.turn_order[self.global_state.turn_position]

    def get_current_player(self) -> Player:
        """Get the current player."""
        return self.players[self.current_player_idx]

    def get_player(self, player_id: int) -> Player:
        """Get a player by ID.

        Raises:
            ValueError: If player_id is invalid.
        """
        if not 0 <= player_id < len(self.players):
            raise ValueError(f"Invalid player ID: {player_id}")
        return self.players[player_id]

    def num_players(self) -> int:
        """Return the number of players."""
        return len(self.players)

    @property
    def era(self) -> Era:
        return self.global_state.era

    def is_game_over(self) -> bool:
        """Check if the game has ended."""
        return self.phase == Phase.GAME_OVER or self.global_state.game_ended

    # -------------------------------------------------------------------------
    # Board queries
    # -------------------------------------------------------------------------

    def all_industries(self) -> list[IndustryInstance]:
        """All industries on the board in construction order."""
        industries = [i for player in self.players for i in player.industries]
        return sorted(industries, key=lambda i: i.instance_id)

    def industries_at(self, location: LocationId) -> list[IndustryInstance]:
        """Industries at a location in construction order."""
        return [i for i in self.all_industries() if i.location == location]

    def find_industry(self, instance_id: int) -> Optional[IndustryInstance]:
        for player in self.players:
            for industry in player.industries:
                if industry.instance_id == instance_id:
                    return industry
        return None

    def next_industry_id(self) -> int:
        """Allocate a construction counter value."""
        value = self.global_state.next_industry_id
        self.global_state.next_industry_id += 1
        return value

    # -------------------------------------------------------------------------
    # Cards
    # -------------------------------------------------------------------------

    def shuffle(self, cards: list[Card]) -> list[Card]:
        """Return cards in a deterministic shuffled order.

        Each call uses a fresh generator seeded by (seed, shuffle_count) so a
        serialized state replays identical shuffles.
        """
        rng = np.random.default_rng([self.global_state.seed, self.global_state.shuffle_count])
        self.global_state.shuffle_count += 1
        order = rng.permutation(len(cards))
        return [cards[int(i)] for i in order]

    def draw_cards(self, player: Player, count: int) -> int:
        """Move up to count cards from the draw pile into a player's hand.

        Returns:
            The number of cards drawn.
        """
        drawn = 0
        while drawn < count and self.piles.draw_pile:
            player.hand.append(self.piles.draw_pile.pop(0))
            drawn += 1
        return drawn

    def refill_hand(self, player: Player) -> int:
        """Draw until the player holds a full hand or the draw pile is empty."""
        missing = self.config.hand_size - len(player.hand)
        if missing <= 0:
            return 0
        return self.draw_cards(player, missing)

    # -------------------------------------------------------------------------
    # Log
    # -------------------------------------------------------------------------

    def add_log(self, message: str, kind: LogKind = LogKind.INFO) -> LogEntry:
        entry = LogEntry(message=message, kind=kind)
        self.log.append(entry)
        return entry

    # -------------------------------------------------------------------------
    # Cloning and serialization
    # -------------------------------------------------------------------------

    def clone(self) -> GameState:
        """Create a deep copy of the game state.

        BoardTopology and TileCatalog return themselves from __deepcopy__, so
        clones share them. Everything else is copied.

        Returns:
            A complete deep copy of this GameState.
        """
        return copy.deepcopy(self)

    def to_dict(self, include_timestamps: bool = True) -> dict[str, Any]:
        """Serialize the game state to a dictionary.

        The board topology and tile catalog are static data and are not
        included; pass them back to from_dict when restoring.

        Returns:
            Dictionary representation of the game state.
        """
        return {
            "config": self.config.to_dict(),
            "phase": self.phase.value,
            "global_state": self.global_state.to_dict(),
            "players": [player.to_dict() for player in self.players],
            "selection": self.selection.to_dict(),
            "coal_market": self.coal_market.to_dict(),
            "iron_market": self.iron_market.to_dict(),
            "merchant_beer": dict(self.merchant_beer),
            "piles": self.piles.to_dict(),
            "log": [entry.to_dict(include_timestamps) for entry in self.log],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        board: BoardTopology,
        catalog: TileCatalog,
    ) -> GameState:
        """Restore a game state serialized with to_dict."""
        return cls(
            board=board,
            catalog=catalog,
            config=RulesConfig.from_dict(data["config"]),
            players=[Player.from_dict(p) for p in data["players"]],
            global_state=GlobalState.from_dict(data["global_state"]),
            phase=Phase(data["phase"]),
            selection=Selection.from_dict(data["selection"]),
            coal_market=Market.from_dict(data["coal_market"]),
            iron_market=Market.from_dict(data["iron_market"]),
            merchant_beer=dict(data["merchant_beer"]),
            piles=CardPiles.from_dict(data["piles"]),
            log=[LogEntry.from_dict(entry) for entry in data["log"]],
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_json(
        cls, payload: str, board: BoardTopology, catalog: TileCatalog
    ) -> GameState:
        return cls.from_dict(json.loads(payload), board, catalog)

    def state_hash(self) -> str:
        """Compute a hash of the game state.

        Log timestamps are excluded so that two states reached by the same
        events hash identically.

        Returns:
            A hex string hash of the serialized state.
        """
        state_json = json.dumps(self.to_dict(include_timestamps=False), sort_keys=True)
        return hashlib.sha256(state_json.encode()).hexdigest()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate the game state for consistency.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []

        if not MIN_PLAYERS <= len(self.players) <= MAX_PLAYERS:
            errors.append(
                f"Invalid player count: {len(self.players)} "
                f"(must be {MIN_PLAYERS}-{MAX_PLAYERS})"
            )

        for i, player in enumerate(self.players):
            if player.player_id != i:
                errors.append(f"Player at index {i} has ID {player.player_id} (expected {i})")
            if player.money < 0:
                errors.append(f"Player {i} has negative money: {player.money}")
            if not self.config.income_floor <= player.income <= self.config.income_cap:
                errors.append(f"Player {i} income out of bounds: {player.income}")
            if player.victory_points < 0:
                errors.append(f"Player {i} has negative victory points")

        if sorted(self.global_state.turn_order) != list(range(len(self.players))):
            errors.append(f"Invalid turn order: {self.global_state.turn_order}")
        elif not 0 <= self.global_state.turn_position < len(self.players):
            errors.append(f"Invalid turn position: {self.global_state.turn_position}")

        if self.global_state.actions_remaining < 0:
            errors.append("Negative actions remaining")

        errors.extend(self.coal_market.validate())
        errors.extend(self.iron_market.validate())

        # Every card lives in exactly one place
        seen: dict[str, str] = {}
        holders: list[tuple[str, list[Card]]] = [
            (f"player {p.player_id} hand", p.hand) for p in self.players
        ]
        holders.extend([
            ("draw pile", self.piles.draw_pile),
            ("discard pile", self.piles.discard_pile),
            ("wild location pile", self.piles.wild_location_pile),
            ("wild industry pile", self.piles.wild_industry_pile),
        ])
        for holder, cards in holders:
            for card in cards:
                if card.card_id in seen:
                    errors.append(
                        f"Card {card.card_id} held by both {seen[card.card_id]} and {holder}"
                    )
                seen[card.card_id] = holder

        # Industry invariants
        ids: set[int] = set()
        for industry in self.all_industries():
            if industry.instance_id in ids:
                errors.append(f"Duplicate industry id {industry.instance_id}")
            ids.add(industry.instance_id)
            if min(industry.coal, industry.iron, industry.beer) < 0:
                errors.append(f"Industry {industry.instance_id} holds negative resources")
            if not self.board.has_location(industry.location):
                errors.append(
                    f"Industry {industry.instance_id} at unknown location {industry.location}"
                )

        return errors

    # -------------------------------------------------------------------------
    # String representation
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        gs = self.global_state
        lines = [
            f"GameState(phase={self.phase.value}, era={gs.era.value}, round={gs.round_number})",
            f"  Current player: {self.current_player_idx} "
            f"(actions remaining: {gs.actions_remaining})",
            f"  Turn order: {gs.turn_order}",
            f"  Coal market: {self.coal_market.total_cubes()} cubes, "
            f"iron market: {self.iron_market.total_cubes()} cubes",
            f"  Players ({len(self.players)}):",
        ]
        for p in self.players:
            lines.append(
                f"    P{p.player_id} {p.name}: £{p.money}, income={p.income}, "
                f"vp={p.victory_points}, hand={len(p.hand)}, "
                f"industries={len(p.industries)}, links={len(p.links)}"
            )
        lines.append(f"  Draw pile: {len(self.piles.draw_pile)} cards")
        return "\n".join(lines)
