"""
FastAPI Application - REST API for game clients.

Endpoints:
    GET    /health                              Liveness check
    GET    /api/v1/cards                        Card catalog
    POST   /api/v1/turns/resolve                Resolve a queued turn
    POST   /api/v1/combat/outcome               Predict combat outcome
    POST   /api/v1/combat/animations            Build combat animation timeline
    POST   /api/v1/sessions                     Open a prediction session
    GET    /api/v1/sessions/{id}                Get session status
    POST   /api/v1/sessions/{id}/actions        Queue an action
    GET    /api/v1/sessions/{id}/prediction     Speculative end of turn
    POST   /api/v1/sessions/{id}/confirm        Install the ledger's game
    DELETE /api/v1/sessions/{id}                End session

The API only computes. Submitting turns to the ledger and reading games
back from it is the client's job.
"""

from typing import Optional, Union
import logging

from .. import __version__
from ..config import ALLOWED_ORIGINS, CARDCHAIN_ENV

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional EngineService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install 'cardchain[server]'"
        )

    from .service import EngineService
    from .schemas import (
        # Request models
        ResolveTurnRequest,
        GameRequest,
        CreateSessionRequest,
        QueueActionRequest,
        ConfirmRequest,
        # Response models
        CardListResponse,
        ResolveTurnResponse,
        OutcomeResponse,
        CombatSequenceResponse,
        SessionResponse,
        PredictionResponse,
        ConfirmResponse,
        EndSessionResponse,
        SessionListResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Cardchain Engine API",
        description="""
Turn resolution, combat prediction and animation timelines for the
lane-based card game.

## Error Codes

| Code | Description |
|------|-------------|
| `InvalidHandIndex` | Hand index out of range |
| `InvalidSlot` | Board slot out of range 0-3 |
| `SlotOccupied` | Target slot already holds a unit |
| `NotEnoughEnergy` | Card costs more than the player's energy |
| `GameAlreadyFinished` | The match is over |
| `NotYourTurn` | Submitting seat is not the active player |
| `InvalidAction` | Action not allowed here |
| `GameNotFound` | Session does not exist |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or EngineService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 422,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_status(response: ErrorResponse) -> int:
        return 404 if response.error_code == ErrorCode.GAME_NOT_FOUND else 422

    def from_error(response: ErrorResponse) -> JSONResponse:
        return make_error_response(
            response.error_code,
            response.error,
            status_code=error_status(response),
            details=response.details,
        )

    def from_failed_turn(response: ResolveTurnResponse) -> JSONResponse:
        """A rejected turn is a 422; details carry the full response."""
        return make_error_response(
            response.error.error_code,
            response.error.error,
            details=response.model_dump(mode="json"),
        )

    # =========================================================================
    # Health / catalog
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
    )
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            service=f"cardchain-engine ({CARDCHAIN_ENV})",
            version=__version__,
        )

    @app.get(
        "/api/v1/cards",
        response_model=CardListResponse,
        tags=["Catalog"],
        summary="List the card catalog",
    )
    async def list_cards() -> CardListResponse:
        return api_service.list_cards()

    # =========================================================================
    # Stateless engine endpoints
    # =========================================================================

    @app.post(
        "/api/v1/turns/resolve",
        response_model=ResolveTurnResponse,
        responses={422: {"model": ErrorResponse, "description": "Turn rejected"}},
        tags=["Engine"],
        summary="Resolve a queued turn",
    )
    async def resolve_turn(request: ResolveTurnRequest) -> Union[ResolveTurnResponse, JSONResponse]:
        """
        Apply the actions to a private copy of the game.

        On rejection the `details` field holds the game as it stood before
        the failing action, with the number of actions applied.
        """
        response = api_service.resolve_turn(request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        if not response.success:
            return from_failed_turn(response)
        return response

    @app.post(
        "/api/v1/combat/outcome",
        response_model=OutcomeResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Engine"],
        summary="Predict what combat would do",
    )
    async def combat_outcome(request: GameRequest) -> Union[OutcomeResponse, JSONResponse]:
        response = api_service.analyze(request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/combat/animations",
        response_model=CombatSequenceResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Engine"],
        summary="Build the combat animation timeline",
    )
    async def combat_animations(request: GameRequest) -> Union[CombatSequenceResponse, JSONResponse]:
        response = api_service.animate(request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    # =========================================================================
    # Session endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Open a prediction session",
    )
    async def create_session(request: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        response = api_service.create_session(request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ResolveTurnResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Session not found"},
            422: {"model": ErrorResponse, "description": "Action rejected"},
        },
        tags=["Sessions"],
        summary="Queue an action",
    )
    async def queue_action(
        session_id: str,
        request: QueueActionRequest,
    ) -> Union[ResolveTurnResponse, JSONResponse]:
        """Queue an action. A rejected action leaves the queue unchanged."""
        response = api_service.queue_action(session_id, request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        if not response.success:
            return from_failed_turn(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/prediction",
        response_model=PredictionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Speculatively end the turn",
    )
    async def predict(session_id: str) -> Union[PredictionResponse, JSONResponse]:
        response = api_service.predict(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/confirm",
        response_model=ConfirmResponse,
        responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Install the ledger's authoritative game",
    )
    async def confirm(session_id: str, request: ConfirmRequest) -> Union[ConfirmResponse, JSONResponse]:
        response = api_service.confirm(session_id, request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    return app


# For running directly: uvicorn cardchain.api.app:app, or python -m cardchain.api.app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass


if __name__ == "__main__":
    import uvicorn

    from ..config import configure_logging

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
