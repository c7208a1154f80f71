"""
Reducer - Resolves a queued turn into the next game state.

The reducer is the single point of state mutation. It never touches the
caller's snapshot: resolve() clones the game once and applies every action
to that private copy.

Design principles:
- Pure function: (game, actions) -> TurnResult
- Validates each action fully before mutating anything
- Fail-fast: the first rejected action stops the submission and the copy
  as it stood before that action is returned
- Combat is delegated to the shared combat module
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Sequence
import logging

from ..catalog.cards import CardCatalog, CardConfig
from ..config import BOARD_SLOTS, RulesConfig
from .state import Game, GameStatus, UnitInstance
from .action import (
    ActionError, ActionKind, ActionType, Concede, EndTurn, ErrorCode,
    PlayCard, TurnResult, UseSpell,
)
from .combat import CombatReport, match_outcome, run_combat_phase
from .effect_resolver import EFFECT_REGISTRY, EffectContext, resolve_effect

logger = logging.getLogger(__name__)


@dataclass
class _TurnContext:
    """Working state for one resolve() call."""
    game: Game
    changes: list[str] = field(default_factory=list)
    stopped: bool = False  # Set by EndTurn, Concede or a lethal spell
    end_turn: bool = False


@dataclass
class TurnResolver:
    """
    Applies a player's queued actions, then the combat phase and handover.

    Stateless between calls; safe to run on diverging speculative copies.
    """
    catalog: CardCatalog
    rules: RulesConfig = field(default_factory=RulesConfig)

    def resolve(
        self,
        game: Game,
        actions: Sequence[ActionType],
        player_idx: int | None = None,
    ) -> TurnResult:
        """
        Resolve a submission.

        player_idx, when given, is the submitting seat; it must be the
        active player.
        """
        game.validate()

        precheck = self._validate_submission(game, player_idx)
        if precheck is not None:
            logger.warning("Rejected submission for game %s: %s", game.id, precheck)
            return TurnResult.failure(game.clone(), precheck)

        ctx = _TurnContext(game=game.clone())
        applied = 0

        for index, action in enumerate(actions):
            if ctx.stopped:
                if ctx.end_turn:
                    error = ActionError(
                        ErrorCode.INVALID_ACTION,
                        "No actions may follow EndTurn",
                        action_index=index,
                        action=action,
                    )
                    logger.warning("Rejected action for game %s: %s", game.id, error)
                    return TurnResult.failure(ctx.game, error, applied=index, changes=ctx.changes)
                logger.debug("Game %s finished; skipping queued %s", game.id, action)
                break

            handler = self._get_handler(action)
            if handler is None:
                error = ActionError(
                    ErrorCode.INVALID_ACTION,
                    f"No handler for action {action!r}",
                    action_index=index,
                    action=action,
                )
                return TurnResult.failure(ctx.game, error, applied=index, changes=ctx.changes)

            try:
                handler(ctx, action)
            except ActionError as e:
                error = e.at(index, action)
                logger.warning("Rejected action for game %s: %s", game.id, error)
                return TurnResult.failure(ctx.game, error, applied=index, changes=ctx.changes)

            applied += 1
            logger.debug("Game %s: applied %s", game.id, action)

        combat = None
        if ctx.end_turn and not ctx.game.is_finished:
            combat = self._combat_and_handover(ctx)

        return TurnResult.success_with_state(
            ctx.game,
            applied=applied,
            combat=combat,
            changes=ctx.changes,
        )

    def _validate_submission(self, game: Game, player_idx: int | None) -> ActionError | None:
        """Checks that reject the whole submission before any action runs."""
        if game.status == GameStatus.FINISHED:
            return ActionError(ErrorCode.GAME_ALREADY_FINISHED, f"Game {game.id} is finished")
        if game.status == GameStatus.WAITING_FOR_PLAYERS:
            return ActionError(ErrorCode.INVALID_ACTION, f"Game {game.id} has not started")
        if player_idx is not None and player_idx != game.active_idx:
            return ActionError(
                ErrorCode.NOT_YOUR_TURN,
                f"Player {player_idx} is not the active player ({game.active_idx})",
            )
        return None

    def _get_handler(self, action: ActionType) -> Callable[[_TurnContext, ActionType], None] | None:
        """Get the handler function for an action variant."""
        handlers = {
            ActionKind.PLAY_CARD: self._handle_play_card,
            ActionKind.USE_SPELL: self._handle_use_spell,
            ActionKind.END_TURN: self._handle_end_turn,
            ActionKind.CONCEDE: self._handle_concede,
        }
        kind = getattr(action, "kind", None)
        return handlers.get(kind)

    # =========================================================================
    # Action handlers
    # =========================================================================

    def _check_hand_and_slot(self, game: Game, hand_index: int, slot: int) -> int:
        """Shared index checks. Returns the card id at hand_index."""
        player = game.active()
        if not 0 <= hand_index < len(player.hand):
            raise ActionError(
                ErrorCode.INVALID_HAND_INDEX,
                f"Hand index {hand_index} out of range (hand has {len(player.hand)} cards)",
            )
        if not 0 <= slot < BOARD_SLOTS:
            raise ActionError(ErrorCode.INVALID_SLOT, f"Slot {slot} out of range 0-{BOARD_SLOTS - 1}")
        return player.hand[hand_index]

    def _check_card(self, card_id: int) -> CardConfig:
        card = self.catalog.get(card_id)
        if card is None:
            raise ActionError(ErrorCode.INVALID_ACTION, f"Card {card_id} is not in the catalog")
        return card

    def _check_energy(self, game: Game, card: CardConfig) -> None:
        player = game.active()
        if player.energy < card.cost:
            raise ActionError(
                ErrorCode.NOT_ENOUGH_ENERGY,
                f"{card.name} costs {card.cost}, player has {player.energy} energy",
            )

    def _handle_play_card(self, ctx: _TurnContext, action: PlayCard) -> None:
        """Place a unit from hand onto an empty slot."""
        game = ctx.game
        card_id = self._check_hand_and_slot(game, action.hand_index, action.slot_index)
        player = game.active()
        if player.board[action.slot_index] is not None:
            raise ActionError(ErrorCode.SLOT_OCCUPIED, f"Slot {action.slot_index} is occupied")

        card = self._check_card(card_id)
        if not card.is_unit:
            raise ActionError(ErrorCode.INVALID_ACTION, f"{card.name} is a spell; use UseSpell")
        self._check_energy(game, card)

        player.energy -= card.cost
        player.hand.pop(action.hand_index)
        player.board[action.slot_index] = UnitInstance(
            card_id=card_id,
            current_hp=card.health,
            acted_this_turn=False,
        )
        ctx.changes.append(f"Played {card.name} to slot {action.slot_index + 1}")

    def _handle_use_spell(self, ctx: _TurnContext, action: UseSpell) -> None:
        """Cast a spell from hand; exactly one effect application."""
        game = ctx.game
        card_id = self._check_hand_and_slot(game, action.hand_index, action.target_slot)
        card = self._check_card(card_id)
        if not card.is_spell:
            raise ActionError(ErrorCode.INVALID_ACTION, f"{card.name} is not a spell")
        self._check_energy(game, card)
        if card.effect not in EFFECT_REGISTRY:
            raise ActionError(ErrorCode.INVALID_ACTION, f"{card.name} has no known effect")

        caster_idx = game.active_idx
        player = game.active()
        player.energy -= card.cost
        player.hand.pop(action.hand_index)
        description = resolve_effect(game, EffectContext(
            caster_idx=caster_idx,
            target_slot=action.target_slot,
            card=card,
            catalog=self.catalog,
            max_player_hp=self.rules.starting_hp,
        ))
        ctx.changes.append(description)

        finished, winner = match_outcome(game)
        if finished:
            self._finish(ctx, winner, reason=f"{card.name} was lethal")

    def _handle_end_turn(self, ctx: _TurnContext, action: EndTurn) -> None:
        ctx.end_turn = True
        ctx.stopped = True

    def _handle_concede(self, ctx: _TurnContext, action: Concede) -> None:
        """Forfeit: the opponent wins, no combat."""
        game = ctx.game
        ctx.changes.append(f"Player {game.active_idx} conceded")
        self._finish(ctx, game.opponent_idx, reason="concede")

    # =========================================================================
    # Combat, match end and handover
    # =========================================================================

    def _finish(self, ctx: _TurnContext, winner_idx: int | None, reason: str) -> None:
        game = ctx.game
        game.status = GameStatus.FINISHED
        game.winner_idx = winner_idx
        ctx.stopped = True
        if winner_idx is None:
            ctx.changes.append("Match ended in a draw")
        else:
            ctx.changes.append(f"Player {winner_idx} wins")
        logger.info("Game %s finished (%s), winner=%s", game.id, reason, winner_idx)

    def _combat_and_handover(self, ctx: _TurnContext) -> CombatReport:
        game = ctx.game
        report = run_combat_phase(game, self.catalog)

        for hit in report.player_hits:
            ctx.changes.append(
                f"{self.catalog.name_of(hit.card_id)} hit player {hit.player_idx} for {hit.damage}"
            )
        for player_idx, slot in report.destroyed:
            ctx.changes.append(f"Unit of player {player_idx} in slot {slot + 1} destroyed")

        finished, winner = match_outcome(game)
        if finished:
            self._finish(ctx, winner, reason="combat")
            return report

        self._handover(ctx)
        return report

    def _handover(self, ctx: _TurnContext) -> None:
        """Pass the turn: flip seat, bump turn, refresh energy."""
        game = ctx.game
        rules = self.rules
        game.active_idx = game.opponent_idx
        game.turn += 1

        player = game.active()
        if rules.ramp_max_energy and player.max_energy < rules.max_energy_cap:
            player.max_energy += 1
        player.energy = player.max_energy

        if rules.draw_on_handover and player.deck and len(player.hand) < rules.hand_limit:
            player.hand.append(player.deck.pop(0))
            ctx.changes.append(f"Player {game.active_idx} drew a card")

        for unit in player.board:
            if unit is not None:
                unit.acted_this_turn = False

        ctx.changes.append(f"Turn {game.turn} started")
        ctx.changes.append("Mana refreshed")


def resolve_turn(
    game: Game,
    actions: Sequence[ActionType],
    catalog: CardCatalog,
    player_idx: int | None = None,
    rules: RulesConfig | None = None,
) -> TurnResult:
    """
    Resolve a queued turn.

    Convenience function for single use.
    """
    resolver = TurnResolver(catalog=catalog, rules=rules or RulesConfig())
    return resolver.resolve(game, actions, player_idx=player_idx)
