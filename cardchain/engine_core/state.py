"""
Game State - The canonical snapshot of a two-player match.

Design principles:
- Plain values: the engine never mutates a caller's snapshot, it clones first
- Serializable: to_dict()/game_from_dict() round-trip through JSON
- Fixed geometry: every board has exactly BOARD_SLOTS slots, a slot is
  either None or one UnitInstance, and the slot index is the combat lane
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from copy import deepcopy
from enum import Enum

from ..config import BOARD_SLOTS, HAND_LIMIT, OPENING_HAND_SIZE, STARTING_HP


class GameStatus(Enum):
    """Match status as stored by the ledger."""
    WAITING_FOR_PLAYERS = "WaitingForPlayers"
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"


@dataclass
class UnitInstance:
    """
    A card on a board.

    card_id references the catalog. current_hp starts at the card's base
    health and only goes down in combat; the unit leaves the board as soon
    as it reaches zero or below.
    """
    card_id: int
    current_hp: int
    acted_this_turn: bool = False


def empty_board() -> list[UnitInstance | None]:
    return [None] * BOARD_SLOTS


@dataclass
class PlayerState:
    """State for one seat of the match."""
    addr: str
    hp: int = STARTING_HP
    energy: int = 0
    max_energy: int = 0
    deck: list[int] = field(default_factory=list)
    hand: list[int] = field(default_factory=list)
    board: list[UnitInstance | None] = field(default_factory=empty_board)

    def unit_at(self, slot: int) -> UnitInstance | None:
        return self.board[slot]

    def occupied_slots(self) -> list[int]:
        return [slot for slot, unit in enumerate(self.board) if unit is not None]

    def validate(self, label: str = "player") -> None:
        if len(self.board) != BOARD_SLOTS:
            raise ValueError(f"{label}: board must have {BOARD_SLOTS} slots, got {len(self.board)}")
        if self.energy < 0 or self.max_energy < 0:
            raise ValueError(f"{label}: energy must be non-negative")
        if self.energy > self.max_energy:
            raise ValueError(
                f"{label}: energy {self.energy} exceeds max_energy {self.max_energy}"
            )
        if len(self.hand) > HAND_LIMIT:
            raise ValueError(f"{label}: hand holds {len(self.hand)} cards, limit is {HAND_LIMIT}")
        for slot, unit in enumerate(self.board):
            if unit is not None and not isinstance(unit, UnitInstance):
                raise ValueError(f"{label}: slot {slot} holds {type(unit).__name__}, not a unit")
            if unit is not None and unit.current_hp <= 0:
                raise ValueError(f"{label}: unit in slot {slot} has {unit.current_hp} hp")


@dataclass
class Game:
    """
    Complete match state at a point in time.

    winner_idx is set when the match finishes with a winner. A finished
    match with winner_idx None is a draw.
    """
    id: int
    players: list[PlayerState]
    active_idx: int = 0
    turn: int = 1
    status: GameStatus = GameStatus.IN_PROGRESS
    winner_idx: int | None = None

    def __post_init__(self):
        self.validate()

    @property
    def opponent_idx(self) -> int:
        return 1 - self.active_idx

    @property
    def is_finished(self) -> bool:
        return self.status == GameStatus.FINISHED

    def active(self) -> PlayerState:
        return self.players[self.active_idx]

    def opponent(self) -> PlayerState:
        return self.players[self.opponent_idx]

    def validate(self) -> None:
        """Raise ValueError if the snapshot is malformed."""
        if len(self.players) != 2:
            raise ValueError(f"Game {self.id}: expected 2 players, got {len(self.players)}")
        if self.active_idx not in (0, 1):
            raise ValueError(f"Game {self.id}: active_idx must be 0 or 1, got {self.active_idx}")
        if self.winner_idx not in (None, 0, 1):
            raise ValueError(f"Game {self.id}: invalid winner_idx {self.winner_idx}")
        for idx, player in enumerate(self.players):
            player.validate(label=f"Game {self.id} player {idx}")

    def clone(self) -> Game:
        """Deep copy the state."""
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "players": [_player_to_dict(p) for p in self.players],
            "active_idx": self.active_idx,
            "turn": self.turn,
            "status": self.status.value,
            "winner_idx": self.winner_idx,
        }


def _player_to_dict(player: PlayerState) -> dict[str, Any]:
    return {
        "addr": player.addr,
        "hp": player.hp,
        "energy": player.energy,
        "max_energy": player.max_energy,
        "deck": list(player.deck),
        "hand": list(player.hand),
        "board": [
            None if unit is None else {
                "card_id": unit.card_id,
                "current_hp": unit.current_hp,
                "acted_this_turn": unit.acted_this_turn,
            }
            for unit in player.board
        ],
    }


def _player_from_dict(data: dict[str, Any]) -> PlayerState:
    return PlayerState(
        addr=data["addr"],
        hp=data.get("hp", STARTING_HP),
        energy=data.get("energy", 0),
        max_energy=data.get("max_energy", 0),
        deck=list(data.get("deck", [])),
        hand=list(data.get("hand", [])),
        board=[
            None if raw is None else UnitInstance(
                card_id=raw["card_id"],
                current_hp=raw["current_hp"],
                acted_this_turn=raw.get("acted_this_turn", False),
            )
            for raw in data.get("board", empty_board())
        ],
    )


def game_from_dict(data: dict[str, Any]) -> Game:
    """Build a Game from its to_dict() form. Raises ValueError/KeyError on bad input."""
    return Game(
        id=data["id"],
        players=[_player_from_dict(p) for p in data["players"]],
        active_idx=data.get("active_idx", 0),
        turn=data.get("turn", 1),
        status=GameStatus(data.get("status", GameStatus.IN_PROGRESS.value)),
        winner_idx=data.get("winner_idx"),
    )


def new_game(
    game_id: int,
    accounts: tuple[str, str],
    decks: tuple[list[int], list[int]],
) -> Game:
    """
    Create the ledger's opening position.

    Player 0 opens with 1 energy, player 1 with 0 (both max 1). Each player
    draws OPENING_HAND_SIZE cards from the front of their deck.
    """
    players = []
    for idx, (addr, deck) in enumerate(zip(accounts, decks)):
        deck = list(deck)
        hand = deck[:OPENING_HAND_SIZE]
        players.append(PlayerState(
            addr=addr,
            hp=STARTING_HP,
            energy=1 if idx == 0 else 0,
            max_energy=1,
            deck=deck[OPENING_HAND_SIZE:],
            hand=hand,
        ))
    return Game(id=game_id, players=players, active_idx=0, turn=1, status=GameStatus.IN_PROGRESS)
