"""
Engine Core - Deterministic match state and turn resolution.

The engine is the runtime that:
1. Holds the Game snapshot model
2. Resolves queued actions and the combat phase (reducer)
3. Predicts combat outcomes without mutating input (analysis)
4. Builds combat animation timelines (animation)

All three share one combat implementation (combat).
"""

from .state import Game, GameStatus, PlayerState, UnitInstance, game_from_dict, new_game
from .action import (
    ActionKind,
    ActionType,
    PlayCard,
    UseSpell,
    EndTurn,
    Concede,
    ErrorCode,
    ActionError,
    TurnResult,
    action_from_dict,
    action_to_dict,
)
from .combat import CombatReport, UnitHit, PlayerHit, plan_combat, apply_combat, run_combat_phase, match_outcome
from .reducer import TurnResolver, resolve_turn
from .analysis import OutcomeAnalyzer, OutcomeReport, analyze_outcome
from .animation import (
    AnimationType,
    AnimationTimings,
    AttackAnimation,
    CombatSequence,
    AnimationSequencer,
    create_combat_animations,
    active_animations_for_slot,
)

__all__ = [
    "Game",
    "GameStatus",
    "PlayerState",
    "UnitInstance",
    "game_from_dict",
    "new_game",
    "ActionKind",
    "ActionType",
    "PlayCard",
    "UseSpell",
    "EndTurn",
    "Concede",
    "ErrorCode",
    "ActionError",
    "TurnResult",
    "action_from_dict",
    "action_to_dict",
    "CombatReport",
    "UnitHit",
    "PlayerHit",
    "plan_combat",
    "apply_combat",
    "run_combat_phase",
    "match_outcome",
    "TurnResolver",
    "resolve_turn",
    "OutcomeAnalyzer",
    "OutcomeReport",
    "analyze_outcome",
    "AnimationType",
    "AnimationTimings",
    "AttackAnimation",
    "CombatSequence",
    "AnimationSequencer",
    "create_combat_animations",
    "active_animations_for_slot",
]
