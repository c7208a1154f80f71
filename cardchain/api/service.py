"""
API Service - Business logic layer between API and engine.

The service:
1. Translates pydantic request models into engine values
2. Runs the resolver, analyzer and sequencer
3. Manages prediction sessions
4. Formats engine results as response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Errors are returned as ErrorResponse values, not raised.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    ResolveTurnRequest,
    GameRequest,
    CreateSessionRequest,
    QueueActionRequest,
    ConfirmRequest,
    # Responses
    CardInfo,
    CardListResponse,
    ActionErrorInfo,
    ResolveTurnResponse,
    OutcomeResponse,
    AnimationModel,
    CombatSequenceResponse,
    SessionResponse,
    PredictionResponse,
    ConfirmResponse,
    ErrorResponse,
    # Nested
    GameModel,
    PlayCardModel,
    UseSpellModel,
    EndTurnModel,
    ConcedeModel,
    ErrorCode,
)
from ..catalog import CardCatalog, default_catalog, load_catalog
from ..config import CARDCHAIN_CATALOG, RulesConfig
from ..engine_core.state import Game, game_from_dict
from ..engine_core.action import (
    ActionError, ActionType, Concede, EndTurn, PlayCard, TurnResult, UseSpell,
)
from ..engine_core.reducer import TurnResolver
from ..engine_core.analysis import OutcomeAnalyzer, OutcomeReport
from ..engine_core.animation import AnimationSequencer, CombatSequence
from ..session import SessionManager, PredictionSession

logger = logging.getLogger(__name__)


def _default_catalog() -> CardCatalog:
    if CARDCHAIN_CATALOG:
        return load_catalog(CARDCHAIN_CATALOG)
    return default_catalog()


# =============================================================================
# Conversion helpers
# =============================================================================

def game_from_model(model: GameModel) -> Game:
    """Raises ValueError for snapshots the engine considers malformed."""
    return game_from_dict(model.model_dump(mode="json"))


def game_to_model(game: Game) -> GameModel:
    return GameModel.model_validate(game.to_dict())


def action_from_model(model) -> ActionType:
    if isinstance(model, PlayCardModel):
        return PlayCard(hand_index=model.hand_index, slot_index=model.slot_index)
    if isinstance(model, UseSpellModel):
        return UseSpell(hand_index=model.hand_index, target_slot=model.target_slot)
    if isinstance(model, EndTurnModel):
        return EndTurn()
    if isinstance(model, ConcedeModel):
        return Concede()
    raise ValueError(f"Unknown action model: {model!r}")


def action_to_model(action: ActionType):
    match action:
        case PlayCard(hand_index=h, slot_index=s):
            return PlayCardModel(hand_index=h, slot_index=s)
        case UseSpell(hand_index=h, target_slot=t):
            return UseSpellModel(hand_index=h, target_slot=t)
        case EndTurn():
            return EndTurnModel()
        case Concede():
            return ConcedeModel()
        case _:
            raise ValueError(f"Unknown action: {action!r}")


def error_to_info(error: ActionError) -> ActionErrorInfo:
    return ActionErrorInfo(
        error=error.message,
        error_code=ErrorCode(error.code.value),
        action_index=error.action_index,
    )


def turn_to_response(result: TurnResult) -> ResolveTurnResponse:
    return ResolveTurnResponse(
        success=result.success,
        game=game_to_model(result.new_state),
        applied=result.applied,
        error=error_to_info(result.error) if result.error else None,
        destroyed_units=list(result.combat.destroyed) if result.combat else [],
        changes=result.changes,
    )


def outcome_to_response(report: OutcomeReport) -> OutcomeResponse:
    return OutcomeResponse(
        destroyed_units=report.destroyed_units,
        player_damage=report.player_damage,
        winner_idx=report.winner_idx,
        is_draw=report.is_draw,
        game_over=report.game_over,
    )


def sequence_to_response(sequence: CombatSequence) -> CombatSequenceResponse:
    return CombatSequenceResponse(
        animations=[AnimationModel(**anim.to_dict()) for anim in sequence.animations],
        total_duration=sequence.total_duration,
    )


def _validation_error(e: Exception) -> ErrorResponse:
    return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)


# =============================================================================
# Service
# =============================================================================

@dataclass
class EngineService:
    """
    Main API service.

    Usage:
        service = EngineService()

        # One-shot prediction
        response = service.resolve_turn(request)

        # Combat preview
        outcome = service.analyze(GameRequest(game=...))
        timeline = service.animate(GameRequest(game=...))
    """
    catalog: CardCatalog = field(default_factory=_default_catalog)
    rules: RulesConfig = field(default_factory=RulesConfig)
    session_manager: SessionManager | None = None

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(catalog=self.catalog, rules=self.rules)

    # -------------------------------------------------------------------------
    # Stateless engine calls
    # -------------------------------------------------------------------------

    def list_cards(self) -> CardListResponse:
        cards = [
            CardInfo(
                id=card.id,
                key=card.key,
                name=card.name,
                cost=card.cost,
                attack=card.attack,
                health=card.health,
                attack_direction=card.attack_direction.value,
                card_type=card.card_type.value,
                special_effect=card.special_effect,
                effect=card.effect,
                effect_amount=card.effect_amount,
                image=card.image,
            )
            for card in self.catalog.values()
        ]
        return CardListResponse(cards=cards, count=len(cards))

    def resolve_turn(self, request: ResolveTurnRequest) -> ResolveTurnResponse | ErrorResponse:
        try:
            game = game_from_model(request.game)
        except ValueError as e:
            return _validation_error(e)

        actions = [action_from_model(a) for a in request.actions]
        resolver = TurnResolver(catalog=self.catalog, rules=self.rules)
        result = resolver.resolve(game, actions, player_idx=request.player_idx)
        return turn_to_response(result)

    def analyze(self, request: GameRequest) -> OutcomeResponse | ErrorResponse:
        try:
            game = game_from_model(request.game)
            report = OutcomeAnalyzer(self.catalog).analyze(game)
        except ValueError as e:
            return _validation_error(e)
        return outcome_to_response(report)

    def animate(self, request: GameRequest) -> CombatSequenceResponse | ErrorResponse:
        try:
            game = game_from_model(request.game)
            sequence = AnimationSequencer(self.catalog).build(game)
        except ValueError as e:
            return _validation_error(e)
        return sequence_to_response(sequence)

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def _session_to_response(self, session: PredictionSession) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            state=session.state.value,
            player_idx=session.player_idx,
            is_my_turn=session.is_my_turn(),
            game=game_to_model(session.game),
            pending_actions=[action_to_model(a) for a in session.pending_actions],
        )

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.GAME_NOT_FOUND,
        )

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        try:
            game = game_from_model(request.game)
            session = self.session_manager.create_session(game, request.player_idx)
        except ValueError as e:
            return _validation_error(e)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_to_response(session)

    def queue_action(
        self,
        session_id: str,
        request: QueueActionRequest,
    ) -> ResolveTurnResponse | ErrorResponse:
        """Queue an action; the response is the dry-run of the new queue."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        result = session.queue(action_from_model(request.action))
        return turn_to_response(result)

    def clear_queue(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        session.clear_queue()
        return self._session_to_response(session)

    def predict(self, session_id: str) -> PredictionResponse | ErrorResponse:
        """Speculative end of turn, with the combat preview for the animation layer."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)

        turn = session.predict()
        outcome = None
        animations = None
        if turn.success and not session.preview().new_state.is_finished:
            outcome = outcome_to_response(session.outcome())
            animations = sequence_to_response(session.animations())
        return PredictionResponse(
            session_id=session_id,
            turn=turn_to_response(turn),
            outcome=outcome,
            animations=animations,
        )

    def confirm(self, session_id: str, request: ConfirmRequest) -> ConfirmResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        try:
            game = game_from_model(request.game)
        except ValueError as e:
            return _validation_error(e)
        diverged = session.confirm(game)
        return ConfirmResponse(
            session_id=session_id,
            diverged=diverged,
            session=self._session_to_response(session),
        )

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_sessions()
