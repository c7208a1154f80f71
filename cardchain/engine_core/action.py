"""
Action System - Queued player actions, error codes, and turn results.

Actions are value objects queued by the client in submission order:
1. PlayCard  - place a unit from hand onto an empty board slot
2. UseSpell  - cast a spell from hand at a board slot
3. EndTurn   - stop taking actions, run combat, hand the turn over
4. Concede   - forfeit the match immediately

The engine consumes each queued action exactly once, in order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ActionKind(Enum):
    """Tags for the closed set of action variants."""
    PLAY_CARD = "PlayCard"
    USE_SPELL = "UseSpell"
    END_TURN = "EndTurn"
    CONCEDE = "Concede"


@dataclass(frozen=True)
class PlayCard:
    hand_index: int
    slot_index: int
    kind = ActionKind.PLAY_CARD


@dataclass(frozen=True)
class UseSpell:
    hand_index: int
    target_slot: int
    kind = ActionKind.USE_SPELL


@dataclass(frozen=True)
class EndTurn:
    kind = ActionKind.END_TURN


@dataclass(frozen=True)
class Concede:
    kind = ActionKind.CONCEDE


ActionType = Union[PlayCard, UseSpell, EndTurn, Concede]


def action_to_dict(action: ActionType) -> dict[str, Any] | str:
    """
    Encode an action the way the ledger client submits it.

    Unit variants become bare strings ("EndTurn"), struct variants become
    single-key dicts ({"PlayCard": {"hand_index": 0, "slot_index": 2}}).
    """
    match action:
        case PlayCard(hand_index=h, slot_index=s):
            return {"PlayCard": {"hand_index": h, "slot_index": s}}
        case UseSpell(hand_index=h, target_slot=t):
            return {"UseSpell": {"hand_index": h, "target_slot": t}}
        case EndTurn():
            return "EndTurn"
        case Concede():
            return "Concede"
        case _:
            raise ValueError(f"Unknown action: {action!r}")


def action_from_dict(data: dict[str, Any] | str) -> ActionType:
    """Decode an action from its action_to_dict() form."""
    if isinstance(data, str):
        if data == ActionKind.END_TURN.value:
            return EndTurn()
        if data == ActionKind.CONCEDE.value:
            return Concede()
        raise ValueError(f"Unknown action: {data}")

    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"Action must be a string or a single-key object, got {data!r}")

    (tag, body), = data.items()
    body = body or {}
    if tag == ActionKind.PLAY_CARD.value:
        return PlayCard(hand_index=int(body["hand_index"]), slot_index=int(body["slot_index"]))
    if tag == ActionKind.USE_SPELL.value:
        return UseSpell(hand_index=int(body["hand_index"]), target_slot=int(body["target_slot"]))
    if tag == ActionKind.END_TURN.value:
        return EndTurn()
    if tag == ActionKind.CONCEDE.value:
        return Concede()
    raise ValueError(f"Unknown action: {tag}")


class ErrorCode(Enum):
    """Why an action (or a whole submission) was rejected."""
    INVALID_HAND_INDEX = "InvalidHandIndex"
    INVALID_SLOT = "InvalidSlot"
    SLOT_OCCUPIED = "SlotOccupied"
    NOT_ENOUGH_ENERGY = "NotEnoughEnergy"
    GAME_ALREADY_FINISHED = "GameAlreadyFinished"
    NOT_YOUR_TURN = "NotYourTurn"
    INVALID_ACTION = "InvalidAction"
    GAME_NOT_FOUND = "GameNotFound"


class ActionError(Exception):
    """
    A rejected action.

    action_index is the position of the offending action in the submitted
    queue, or None when the whole submission was rejected up front.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        action_index: int | None = None,
        action: ActionType | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.action_index = action_index
        self.action = action

    def at(self, action_index: int, action: ActionType) -> ActionError:
        """Return a copy pinned to a queue position."""
        return ActionError(self.code, self.message, action_index=action_index, action=action)

    def __str__(self) -> str:
        if self.action_index is None:
            return f"{self.code.value}: {self.message}"
        return f"{self.code.value} at action {self.action_index}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.code.value,
            "error": self.message,
            "action_index": self.action_index,
            "action": action_to_dict(self.action) if self.action is not None else None,
        }


@dataclass
class TurnResult:
    """
    Result of resolving a queued turn.

    On failure, new_state is the working copy as it stood before the
    failing action (so a failure on the first action yields a state equal
    to the input snapshot).
    """
    success: bool
    new_state: Any | None = None  # Game
    error: ActionError | None = None
    applied: int = 0

    combat: Any | None = None  # CombatReport, if combat ran
    changes: list[str] = field(default_factory=list)  # Human-readable changes

    @property
    def error_code(self) -> ErrorCode | None:
        return self.error.code if self.error else None

    @property
    def failed_index(self) -> int | None:
        return self.error.action_index if self.error else None

    @classmethod
    def failure(
        cls,
        state: Any,
        error: ActionError,
        applied: int = 0,
        changes: list[str] | None = None,
    ) -> TurnResult:
        """Create a failure result."""
        return cls(
            success=False,
            new_state=state,
            error=error,
            applied=applied,
            changes=changes or [],
        )

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        applied: int,
        combat: Any | None = None,
        changes: list[str] | None = None,
    ) -> TurnResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            applied=applied,
            combat=combat,
            changes=changes or [],
        )
