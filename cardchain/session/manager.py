"""
Session Manager - Speculative turn prediction against an authoritative game.

LIFECYCLE:
1. The caller fetches the authoritative Game from the ledger and opens a session
2. The local player queues actions; each is dry-run before it is accepted
3. predict() resolves the queue plus EndTurn on a private copy; the result
   is shown optimistically while the ledger confirms
4. confirm() installs the ledger's new Game, drops the queue and the
   speculative state, and reports whether the prediction diverged

PERSISTENCE RULES:
- Sessions are in-memory only
- No ledger I/O happens here; the caller owns submission and confirmation
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import time
import uuid

from ..catalog.cards import CardCatalog
from ..config import RulesConfig
from ..engine_core.state import Game
from ..engine_core.action import ActionError, ActionType, EndTurn, ErrorCode, TurnResult
from ..engine_core.reducer import TurnResolver
from ..engine_core.analysis import OutcomeAnalyzer, OutcomeReport
from ..engine_core.animation import AnimationSequencer, CombatSequence

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a prediction session."""
    IDLE = "idle"  # No speculative state
    PREDICTED = "predicted"  # Speculative state waiting for confirmation
    FINISHED = "finished"  # Authoritative game is over


@dataclass
class PredictionSession:
    """
    One player's view of one match.

    The authoritative game is replaced only by confirm(). Everything else
    is derived from it and may be thrown away at any time.
    """
    session_id: str
    game: Game
    player_idx: int
    catalog: CardCatalog
    rules: RulesConfig = field(default_factory=RulesConfig)
    created_at: float = field(default_factory=time.time)

    state: SessionState = SessionState.IDLE
    pending_actions: list[ActionType] = field(default_factory=list)
    speculative: Game | None = None
    last_divergence: bool | None = None

    def __post_init__(self):
        if self.game.is_finished:
            self.state = SessionState.FINISHED

    @property
    def resolver(self) -> TurnResolver:
        return TurnResolver(catalog=self.catalog, rules=self.rules)

    def is_my_turn(self) -> bool:
        return not self.game.is_finished and self.game.active_idx == self.player_idx

    def queue(self, action: ActionType) -> TurnResult:
        """
        Append an action if the queue stays valid.

        Returns the dry-run result; on failure the queue is unchanged.
        """
        candidate = self.pending_actions + [action]
        result = self.resolver.resolve(self.game, candidate, player_idx=self.player_idx)
        if result.success:
            self.pending_actions = candidate
            self.speculative = None
        else:
            logger.info("Session %s rejected %s: %s", self.session_id, action, result.error)
        return result

    def clear_queue(self) -> None:
        self.pending_actions = []
        self.speculative = None
        if self.state == SessionState.PREDICTED:
            self.state = SessionState.IDLE

    def preview(self) -> TurnResult:
        """The queue applied without ending the turn."""
        actions = [a for a in self.pending_actions if not isinstance(a, EndTurn)]
        return self.resolver.resolve(self.game, actions, player_idx=self.player_idx)

    def submission(self) -> list[ActionType]:
        """What the client sends to the ledger: the queue followed by EndTurn."""
        actions = list(self.pending_actions)
        if not actions or not isinstance(actions[-1], EndTurn):
            actions.append(EndTurn())
        return actions

    def predict(self) -> TurnResult:
        """Resolve the full submission speculatively."""
        result = self.resolver.resolve(self.game, self.submission(), player_idx=self.player_idx)
        if result.success:
            self.speculative = result.new_state
            self.state = SessionState.PREDICTED
        return result

    def pre_combat_state(self) -> Game:
        """The queue applied, ready for outcome analysis and animation."""
        result = self.preview()
        if not result.success:
            raise result.error
        return result.new_state

    def outcome(self) -> OutcomeReport:
        return OutcomeAnalyzer(self.catalog).analyze(self.pre_combat_state())

    def animations(self) -> CombatSequence:
        return AnimationSequencer(self.catalog).build(self.pre_combat_state())

    def confirm(self, authoritative: Game) -> bool:
        """
        Install the ledger's game.

        Returns True if a speculative state existed and differs from the
        authoritative one. The speculative state is discarded either way.
        """
        authoritative.validate()
        diverged = self.speculative is not None and self.speculative != authoritative
        if diverged:
            logger.warning(
                "Session %s: prediction for game %s diverged from ledger state",
                self.session_id, authoritative.id,
            )
        self.game = authoritative.clone()
        self.pending_actions = []
        self.speculative = None
        self.last_divergence = diverged
        self.state = SessionState.FINISHED if self.game.is_finished else SessionState.IDLE
        return diverged


class SessionManager:
    """
    Manages prediction sessions.

    No persistence - sessions are in-memory only.
    """

    def __init__(self, catalog: CardCatalog, rules: RulesConfig | None = None):
        self.catalog = catalog
        self.rules = rules or RulesConfig()
        self._sessions: dict[str, PredictionSession] = {}

    def create_session(self, game: Game, player_idx: int) -> PredictionSession:
        if player_idx not in (0, 1):
            raise ValueError(f"player_idx must be 0 or 1, got {player_idx}")
        game.validate()
        session = PredictionSession(
            session_id=str(uuid.uuid4()),
            game=game.clone(),
            player_idx=player_idx,
            catalog=self.catalog,
            rules=self.rules,
        )
        self._sessions[session.session_id] = session
        logger.debug("Created session %s for game %s", session.session_id, game.id)
        return session

    def get_session(self, session_id: str) -> PredictionSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> PredictionSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise ActionError(ErrorCode.GAME_NOT_FOUND, f"Session {session_id} not found")
        return session

    def end_session(self, session_id: str) -> bool:
        """Drop a session. Returns False if it did not exist."""
        return self._sessions.pop(session_id, None) is not None

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """Drop finished sessions older than max_age. Returns how many."""
        now = time.time()
        stale = [
            sid for sid, session in self._sessions.items()
            if now - session.created_at > max_age_seconds
            and session.state == SessionState.FINISHED
        ]
        for sid in stale:
            self.end_session(sid)
        return len(stale)
