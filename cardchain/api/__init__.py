"""
API Module - Client interface to the engine.

Exposes turn resolution, combat prediction and prediction sessions over
REST. Clients:
1. Resolve a queued turn before submitting it to the ledger
2. Preview combat outcome and animation timelines
3. Keep a prediction session per match and confirm it with ledger state

All state is session-scoped. Nothing is persisted.
"""

from .schemas import (
    # Requests
    ResolveTurnRequest,
    GameRequest,
    CreateSessionRequest,
    QueueActionRequest,
    ConfirmRequest,
    # Responses
    ResolveTurnResponse,
    OutcomeResponse,
    CombatSequenceResponse,
    SessionResponse,
    PredictionResponse,
    ConfirmResponse,
    ErrorResponse,
    # Shared
    GameModel,
    ActionModel,
    CardInfo,
    ErrorCode,
)
from .service import EngineService
from .app import create_app

__all__ = [
    # Requests
    "ResolveTurnRequest",
    "GameRequest",
    "CreateSessionRequest",
    "QueueActionRequest",
    "ConfirmRequest",
    # Responses
    "ResolveTurnResponse",
    "OutcomeResponse",
    "CombatSequenceResponse",
    "SessionResponse",
    "PredictionResponse",
    "ConfirmResponse",
    "ErrorResponse",
    # Shared
    "GameModel",
    "ActionModel",
    "CardInfo",
    "ErrorCode",
    # Service
    "EngineService",
    "create_app",
]
