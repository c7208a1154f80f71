"""
Animation Sequencer - Timed presentation events for the combat phase.

Turns a pre-combat game into a CombatSequence: a static, millisecond
timeline the rendering layer plays back. Three phases:
1. Attacks  - one event per attacking lane, staggered by lane
2. Damage   - defender damage, then counter-damage, per clashing lane
3. Deaths   - every unit that combat leaves at 0 hp or below, all at once

Phase starts are fixed offsets sized for a full board, so the timeline's
shape does not depend on which lanes are occupied.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from ..catalog.cards import CardCatalog
from ..config import BOARD_SLOTS
from .state import Game
from .combat import plan_combat


class AnimationType(Enum):
    UNIT_ATTACK = "unit-attack"
    UNIT_DAMAGE = "unit-damage"
    PLAYER_DAMAGE = "player-damage"
    UNIT_DEATH = "unit-death"


@dataclass(frozen=True)
class AnimationTimings:
    """All durations and offsets, in milliseconds."""
    attack_duration: int = 800
    damage_duration: int = 1200  # Longer so damage numbers stay readable
    death_duration: int = 800
    attack_stagger: int = 150
    damage_stagger: int = 100
    counter_offset: int = 200
    phase_gap: int = 300

    def damage_phase_start(self) -> int:
        return (BOARD_SLOTS - 1) * self.attack_stagger + self.attack_duration + self.phase_gap

    def death_phase_start(self) -> int:
        return (
            self.damage_phase_start()
            + (BOARD_SLOTS - 1) * self.damage_stagger
            + self.counter_offset
            + self.damage_duration
            + self.phase_gap
        )


@dataclass(frozen=True)
class AttackAnimation:
    id: str
    type: AnimationType
    delay: int  # ms from sequence start
    duration: int
    source_slot: int | None = None
    source_player: int | None = None
    target_slot: int | None = None
    target_player: int | None = None
    damage: int | None = None
    unit_name: str | None = None

    @property
    def end(self) -> int:
        return self.delay + self.duration

    def is_active(self, t: float) -> bool:
        return self.delay <= t <= self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "source_slot": self.source_slot,
            "source_player": self.source_player,
            "target_slot": self.target_slot,
            "target_player": self.target_player,
            "damage": self.damage,
            "unit_name": self.unit_name,
            "delay": self.delay,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class CombatSequence:
    animations: tuple[AttackAnimation, ...] = ()
    total_duration: int = 0

    def active_at(self, t: float) -> list[AttackAnimation]:
        return [anim for anim in self.animations if anim.is_active(t)]

    def of_type(self, kind: AnimationType) -> list[AttackAnimation]:
        return [anim for anim in self.animations if anim.type == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "animations": [anim.to_dict() for anim in self.animations],
            "total_duration": self.total_duration,
        }


@dataclass
class AnimationSequencer:
    catalog: CardCatalog
    timings: AnimationTimings = field(default_factory=AnimationTimings)

    def build(self, game: Game) -> CombatSequence:
        game.validate()
        timings = self.timings
        catalog = self.catalog
        active_idx = game.active_idx
        opponent_idx = game.opponent_idx
        attackers = game.players[active_idx].board
        defenders = game.players[opponent_idx].board
        report = plan_combat(game, catalog)

        animations: list[AttackAnimation] = []

        # Phase 1: attacks
        for slot in range(BOARD_SLOTS):
            attacker = attackers[slot]
            if attacker is None:
                continue
            attack_power = catalog.attack_of(attacker.card_id)
            name = catalog.name_of(attacker.card_id)
            delay = slot * timings.attack_stagger

            if defenders[slot] is not None:
                animations.append(AttackAnimation(
                    id=f"attack-{active_idx}-{slot}",
                    type=AnimationType.UNIT_ATTACK,
                    source_slot=slot,
                    source_player=active_idx,
                    target_slot=slot,
                    target_player=opponent_idx,
                    damage=attack_power,
                    unit_name=name,
                    delay=delay,
                    duration=timings.attack_duration,
                ))
            else:
                animations.append(AttackAnimation(
                    id=f"player-attack-{active_idx}-{slot}",
                    type=AnimationType.PLAYER_DAMAGE,
                    source_slot=slot,
                    source_player=active_idx,
                    target_player=opponent_idx,
                    damage=attack_power,
                    unit_name=name,
                    delay=delay,
                    duration=timings.attack_duration,
                ))

        # Phase 2: damage, defender first, counter-damage slightly later
        damage_start = timings.damage_phase_start()
        for slot in report.clashes:
            delay = damage_start + slot * timings.damage_stagger
            animations.append(AttackAnimation(
                id=f"damage-{opponent_idx}-{slot}",
                type=AnimationType.UNIT_DAMAGE,
                target_slot=slot,
                target_player=opponent_idx,
                damage=report.damage_to_unit(opponent_idx, slot),
                delay=delay,
                duration=timings.damage_duration,
            ))
            animations.append(AttackAnimation(
                id=f"counter-damage-{active_idx}-{slot}",
                type=AnimationType.UNIT_DAMAGE,
                target_slot=slot,
                target_player=active_idx,
                damage=report.damage_to_unit(active_idx, slot),
                delay=delay + timings.counter_offset,
                duration=timings.damage_duration,
            ))

        # Phase 3: deaths, no stagger
        death_start = timings.death_phase_start()
        for player_idx in range(2):
            for slot, unit in enumerate(game.players[player_idx].board):
                if unit is None:
                    continue
                if unit.current_hp - report.damage_to_unit(player_idx, slot) <= 0:
                    animations.append(AttackAnimation(
                        id=f"death-{player_idx}-{slot}",
                        type=AnimationType.UNIT_DEATH,
                        target_slot=slot,
                        target_player=player_idx,
                        unit_name=catalog.name_of(unit.card_id),
                        delay=death_start,
                        duration=timings.death_duration,
                    ))

        return CombatSequence(
            animations=tuple(animations),
            total_duration=death_start + timings.death_duration,
        )


def create_combat_animations(
    game: Game,
    catalog: CardCatalog,
    timings: AnimationTimings | None = None,
) -> CombatSequence:
    return AnimationSequencer(catalog, timings or AnimationTimings()).build(game)


def active_animations_for_slot(
    animations: Iterable[AttackAnimation],
    slot: int,
    t: float,
    player_idx: int | None = None,
) -> list[AttackAnimation]:
    """
    Events playing on a board slot at time t.

    Damage and death events match on their target slot, attacks on their
    source slot. Player-damage events never match a slot. With player_idx,
    only events on that player's side of the board match.
    """
    matches = []
    for anim in animations:
        if not anim.is_active(t):
            continue
        if anim.type in (AnimationType.UNIT_DAMAGE, AnimationType.UNIT_DEATH):
            hit = anim.target_slot == slot
            side = anim.target_player
        elif anim.type == AnimationType.UNIT_ATTACK:
            hit = anim.source_slot == slot
            side = anim.source_player
        else:
            continue
        if hit and (player_idx is None or side == player_idx):
            matches.append(anim)
    return matches
