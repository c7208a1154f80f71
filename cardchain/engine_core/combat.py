"""
Combat - The automatic, lane-based combat phase.

This is the single combat implementation shared by the turn resolver, the
outcome analyzer and the animation sequencer.

Rules (per lane, for every slot the active player occupies):
- Opposing unit in the same slot: both units deal their catalog attack to
  each other
- Opposing slot empty: the attacker deals its attack to the opposing player

All damage is planned from the pre-combat board before anything is applied,
so the order in which lanes are visited cannot change the result. Dead units
are removed in one pass: player 0 slots 0..3, then player 1 slots 0..3.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable
import logging

from ..config import BOARD_SLOTS
from ..catalog.cards import CardCatalog
from .state import Game

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnitHit:
    """Damage dealt to the unit at (player_idx, slot)."""
    player_idx: int
    slot: int
    damage: int
    source_player: int
    source_slot: int


@dataclass(frozen=True)
class PlayerHit:
    """Damage dealt to a player by the unit (card_id) in source_slot."""
    player_idx: int
    damage: int
    source_slot: int
    card_id: int


@dataclass
class CombatReport:
    """Planned (and, after apply_combat, applied) combat for one phase."""
    attacker_idx: int
    defender_idx: int
    unit_hits: list[UnitHit] = field(default_factory=list)
    player_hits: list[PlayerHit] = field(default_factory=list)
    clashes: list[int] = field(default_factory=list)  # Slots with units on both sides

    # Filled by apply_combat
    destroyed: list[tuple[int, int]] = field(default_factory=list)

    def damage_to_unit(self, player_idx: int, slot: int) -> int:
        return sum(
            hit.damage for hit in self.unit_hits
            if hit.player_idx == player_idx and hit.slot == slot
        )

    @property
    def is_empty(self) -> bool:
        return not self.unit_hits and not self.player_hits


def plan_combat(
    game: Game,
    catalog: CardCatalog,
    slot_order: Iterable[int] | None = None,
) -> CombatReport:
    """
    Compute the combat phase for the active player without mutating game.

    slot_order lets callers visit lanes in any order; hits are sorted by
    lane afterwards so every order yields the same report.
    """
    active_idx = game.active_idx
    opponent_idx = game.opponent_idx
    attacker_board = game.players[active_idx].board
    defender_board = game.players[opponent_idx].board

    report = CombatReport(attacker_idx=active_idx, defender_idx=opponent_idx)
    order = list(range(BOARD_SLOTS)) if slot_order is None else list(slot_order)
    if sorted(order) != list(range(BOARD_SLOTS)):
        raise ValueError(f"slot_order must be a permutation of 0..{BOARD_SLOTS - 1}")

    for slot in order:
        attacker = attacker_board[slot]
        if attacker is None:
            continue
        attack_power = catalog.attack_of(attacker.card_id)
        defender = defender_board[slot]

        if defender is not None:
            defender_attack = catalog.attack_of(defender.card_id)
            report.unit_hits.append(UnitHit(
                player_idx=active_idx, slot=slot, damage=defender_attack,
                source_player=opponent_idx, source_slot=slot,
            ))
            report.unit_hits.append(UnitHit(
                player_idx=opponent_idx, slot=slot, damage=attack_power,
                source_player=active_idx, source_slot=slot,
            ))
            report.clashes.append(slot)
        else:
            report.player_hits.append(PlayerHit(
                player_idx=opponent_idx, damage=attack_power, source_slot=slot,
                card_id=attacker.card_id,
            ))

    # Canonical order: by lane, attacker's unit before defender's
    report.unit_hits.sort(key=lambda h: (h.slot, h.player_idx != active_idx))
    report.player_hits.sort(key=lambda h: h.source_slot)
    report.clashes.sort()
    return report


def apply_combat(game: Game, report: CombatReport) -> list[tuple[int, int]]:
    """
    Apply a planned combat to game in place.

    Unit damage first, then player damage, then dead-unit removal.
    Returns the (player_idx, slot) pairs removed.
    """
    for hit in report.unit_hits:
        unit = game.players[hit.player_idx].board[hit.slot]
        if unit is not None:
            unit.current_hp -= hit.damage

    for hit in report.player_hits:
        game.players[hit.player_idx].hp -= hit.damage

    destroyed = remove_dead_units(game)
    report.destroyed = destroyed
    return destroyed


def remove_dead_units(game: Game) -> list[tuple[int, int]]:
    """Clear every slot whose unit has current_hp <= 0."""
    destroyed: list[tuple[int, int]] = []
    for player_idx, player in enumerate(game.players):
        for slot in range(BOARD_SLOTS):
            unit = player.board[slot]
            if unit is not None and unit.current_hp <= 0:
                player.board[slot] = None
                destroyed.append((player_idx, slot))
    return destroyed


def run_combat_phase(
    game: Game,
    catalog: CardCatalog,
    slot_order: Iterable[int] | None = None,
) -> CombatReport:
    """Plan and apply combat on game (which must be a private copy)."""
    report = plan_combat(game, catalog, slot_order=slot_order)
    apply_combat(game, report)
    logger.debug(
        "Combat game=%s turn=%s: %d clashes, %d player hits, destroyed=%s",
        game.id, game.turn, len(report.clashes), len(report.player_hits), report.destroyed,
    )
    return report


def match_outcome(game: Game) -> tuple[bool, int | None]:
    """
    Loss check after combat.

    Returns (finished, winner_idx). Both players at or below zero is a
    draw: (True, None).
    """
    p0_dead = game.players[0].hp <= 0
    p1_dead = game.players[1].hp <= 0
    if p0_dead and p1_dead:
        return True, None
    if p0_dead:
        return True, 1
    if p1_dead:
        return True, 0
    return False, None
