"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models mirror the engine's value structures so clients can send a
ledger snapshot plus queued actions and receive plain JSON back.

Error Codes:
- InvalidHandIndex, InvalidSlot, SlotOccupied, NotEnoughEnergy: bad action
- GameAlreadyFinished, NotYourTurn: submission rejected up front
- InvalidAction: unknown card, wrong card type, or action after EndTurn
- GameNotFound: session does not exist
- VALIDATION_ERROR: malformed snapshot
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class GameStatus(str, Enum):
    WAITING_FOR_PLAYERS = "WaitingForPlayers"
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_HAND_INDEX = "InvalidHandIndex"
    INVALID_SLOT = "InvalidSlot"
    SLOT_OCCUPIED = "SlotOccupied"
    NOT_ENOUGH_ENERGY = "NotEnoughEnergy"
    GAME_ALREADY_FINISHED = "GameAlreadyFinished"
    NOT_YOUR_TURN = "NotYourTurn"
    INVALID_ACTION = "InvalidAction"
    GAME_NOT_FOUND = "GameNotFound"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class AnimationType(str, Enum):
    UNIT_ATTACK = "unit-attack"
    UNIT_DAMAGE = "unit-damage"
    PLAYER_DAMAGE = "player-damage"
    UNIT_DEATH = "unit-death"


# =============================================================================
# Game snapshot
# =============================================================================

class UnitModel(BaseModel):
    card_id: int
    current_hp: int
    acted_this_turn: bool = False


class PlayerStateModel(BaseModel):
    addr: str
    hp: int = 20
    energy: int = Field(0, ge=0)
    max_energy: int = Field(0, ge=0)
    deck: list[int] = Field(default_factory=list)
    hand: list[int] = Field(default_factory=list, max_length=10)
    board: list[Optional[UnitModel]] = Field(
        default_factory=lambda: [None, None, None, None],
        min_length=4,
        max_length=4,
        description="Exactly 4 slots; null for an empty slot",
    )


class GameModel(BaseModel):
    id: int
    players: list[PlayerStateModel] = Field(..., min_length=2, max_length=2)
    active_idx: int = Field(0, ge=0, le=1)
    turn: int = 1
    status: GameStatus = GameStatus.IN_PROGRESS
    winner_idx: Optional[int] = Field(None, ge=0, le=1)


# =============================================================================
# Actions (tagged by "type")
# =============================================================================

class PlayCardModel(BaseModel):
    type: Literal["PlayCard"] = "PlayCard"
    hand_index: int
    slot_index: int


class UseSpellModel(BaseModel):
    type: Literal["UseSpell"] = "UseSpell"
    hand_index: int
    target_slot: int


class EndTurnModel(BaseModel):
    type: Literal["EndTurn"] = "EndTurn"


class ConcedeModel(BaseModel):
    type: Literal["Concede"] = "Concede"


ActionModel = Annotated[
    Union[PlayCardModel, UseSpellModel, EndTurnModel, ConcedeModel],
    Field(discriminator="type"),
]


# =============================================================================
# Requests
# =============================================================================

class ResolveTurnRequest(BaseModel):
    """A snapshot and the active player's queued actions."""
    game: GameModel
    actions: list[ActionModel] = Field(default_factory=list)
    player_idx: Optional[int] = Field(None, ge=0, le=1, description="Submitting seat")


class GameRequest(BaseModel):
    """A pre-combat snapshot."""
    game: GameModel


class CreateSessionRequest(BaseModel):
    game: GameModel
    player_idx: int = Field(..., ge=0, le=1)


class QueueActionRequest(BaseModel):
    action: ActionModel


class ConfirmRequest(BaseModel):
    game: GameModel = Field(..., description="Authoritative game returned by the ledger")


# =============================================================================
# Responses
# =============================================================================

class CardInfo(BaseModel):
    id: int
    key: str
    name: str
    cost: int
    attack: int
    health: int
    attack_direction: str
    card_type: str
    special_effect: Optional[str] = None
    effect: Optional[str] = None
    effect_amount: int = 0
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class CardListResponse(BaseModel):
    cards: list[CardInfo]
    count: int


class ActionErrorInfo(BaseModel):
    error: str
    error_code: ErrorCode
    action_index: Optional[int] = None


class ResolveTurnResponse(BaseModel):
    success: bool
    game: GameModel
    applied: int = 0
    error: Optional[ActionErrorInfo] = None
    destroyed_units: list[tuple[int, int]] = Field(default_factory=list)
    changes: list[str] = Field(default_factory=list)
    api_version: str = "v1"


class OutcomeResponse(BaseModel):
    destroyed_units: list[tuple[int, int]] = Field(
        default_factory=list, description="(player_idx, slot) of units combat removes"
    )
    player_damage: list[tuple[int, int]] = Field(
        default_factory=list, description="(player_idx, damage) for players who lose hp"
    )
    winner_idx: Optional[int] = None
    is_draw: bool = False
    game_over: bool = False
    api_version: str = "v1"


class AnimationModel(BaseModel):
    id: str
    type: AnimationType
    source_slot: Optional[int] = None
    source_player: Optional[int] = None
    target_slot: Optional[int] = None
    target_player: Optional[int] = None
    damage: Optional[int] = None
    unit_name: Optional[str] = None
    delay: int
    duration: int


class CombatSequenceResponse(BaseModel):
    animations: list[AnimationModel] = Field(default_factory=list)
    total_duration: int = 0
    api_version: str = "v1"


class SessionResponse(BaseModel):
    session_id: str
    state: str
    player_idx: int
    is_my_turn: bool
    game: GameModel
    pending_actions: list[ActionModel] = Field(default_factory=list)


class PredictionResponse(BaseModel):
    session_id: str
    turn: ResolveTurnResponse
    outcome: Optional[OutcomeResponse] = None
    animations: Optional[CombatSequenceResponse] = None


class ConfirmResponse(BaseModel):
    session_id: str
    diverged: bool
    session: SessionResponse


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
