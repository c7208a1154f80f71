"""
Session - Speculative prediction sessions and animation playback.

Sessions are ephemeral:
- Created when the client loads an authoritative game
- Hold the locally queued actions and the speculative next state
- Reset whenever the ledger confirms a new game state
"""

from .manager import SessionManager, PredictionSession, SessionState
from .playback import AnimationPlayback

__all__ = [
    "SessionManager",
    "PredictionSession",
    "SessionState",
    "AnimationPlayback",
]
