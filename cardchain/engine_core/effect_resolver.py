"""
Effect Resolver - Catalog-driven spell effects.

A spell card names an effect tag in the catalog. Resolving a UseSpell
action looks the tag up in EFFECT_REGISTRY and applies it exactly once.

Effects mutate the engine's private working copy in place and return a
short description for the turn log.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import logging

from ..catalog.cards import CardCatalog, CardConfig
from ..config import STARTING_HP
from .state import Game

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectContext:
    """Everything an effect handler needs to know about the cast."""
    caster_idx: int
    target_slot: int
    card: CardConfig
    catalog: CardCatalog
    max_player_hp: int = STARTING_HP

    @property
    def opponent_idx(self) -> int:
        return 1 - self.caster_idx

    @property
    def amount(self) -> int:
        return self.card.effect_amount


EffectHandler = Callable[[Game, EffectContext], str]

EFFECT_REGISTRY: dict[str, EffectHandler] = {}


def register_effect(name: str):
    """Decorator to register an effect handler under a catalog tag."""
    def decorator(fn: EffectHandler) -> EffectHandler:
        EFFECT_REGISTRY[name] = fn
        return fn
    return decorator


def resolve_effect(game: Game, ctx: EffectContext) -> str:
    """Apply the card's effect once. Raises KeyError for unknown tags."""
    tag = ctx.card.effect
    handler = EFFECT_REGISTRY.get(tag) if tag else None
    if handler is None:
        raise KeyError(f"Unknown effect tag: {tag}")
    description = handler(game, ctx)
    logger.debug("Effect %s from card %s: %s", tag, ctx.card.id, description)
    return description


# ---------------------------------------------------------------------------
# Unit-targeting effects
# ---------------------------------------------------------------------------

@register_effect("damage_front")
def _damage_front(game: Game, ctx: EffectContext) -> str:
    """Damage the opposing unit in the target lane; it dies at 0 hp."""
    board = game.players[ctx.opponent_idx].board
    unit = board[ctx.target_slot]
    if unit is None:
        return f"{ctx.card.name} hit an empty slot {ctx.target_slot + 1}"

    unit.current_hp -= ctx.amount
    name = ctx.catalog.name_of(unit.card_id)
    if unit.current_hp <= 0:
        board[ctx.target_slot] = None
        return f"{ctx.card.name} destroyed {name} in slot {ctx.target_slot + 1}"
    return f"{ctx.card.name} dealt {ctx.amount} to {name} in slot {ctx.target_slot + 1}"


@register_effect("heal_unit")
def _heal_unit(game: Game, ctx: EffectContext) -> str:
    """Heal the caster's own unit in the target lane, up to its base health."""
    unit = game.players[ctx.caster_idx].board[ctx.target_slot]
    if unit is None:
        return f"{ctx.card.name} found no unit in slot {ctx.target_slot + 1}"

    base = ctx.catalog.get(unit.card_id)
    cap = base.health if base else unit.current_hp
    unit.current_hp = max(unit.current_hp, min(unit.current_hp + ctx.amount, cap))
    return f"{ctx.card.name} healed {ctx.catalog.name_of(unit.card_id)} to {unit.current_hp}"


# ---------------------------------------------------------------------------
# Player-targeting effects
# ---------------------------------------------------------------------------

@register_effect("heal_self")
def _heal_self(game: Game, ctx: EffectContext) -> str:
    player = game.players[ctx.caster_idx]
    player.hp = max(player.hp, min(player.hp + ctx.amount, ctx.max_player_hp))
    return f"{ctx.card.name} healed its caster to {player.hp}"


@register_effect("damage_player")
def _damage_player(game: Game, ctx: EffectContext) -> str:
    opponent = game.players[ctx.opponent_idx]
    opponent.hp -= ctx.amount
    return f"{ctx.card.name} dealt {ctx.amount} to the opponent"
