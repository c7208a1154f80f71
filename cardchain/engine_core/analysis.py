"""
Outcome Analyzer - Predicts what the next combat phase will do.

Runs the shared combat phase on a private copy (no handover) and diffs it
against the input to report destroyed units, player damage and the winner.
The input game is never mutated.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..catalog.cards import CardCatalog
from .state import Game
from .combat import CombatReport, match_outcome, run_combat_phase


@dataclass
class OutcomeReport:
    """What combat would do to a pre-combat game."""
    destroyed_units: list[tuple[int, int]] = field(default_factory=list)  # (player_idx, slot)
    player_damage: list[tuple[int, int]] = field(default_factory=list)  # (player_idx, damage)
    winner_idx: int | None = None
    is_draw: bool = False
    post_combat: Game | None = None
    combat: CombatReport | None = None

    @property
    def game_over(self) -> bool:
        return self.winner_idx is not None or self.is_draw

    def to_dict(self) -> dict[str, Any]:
        return {
            "destroyed_units": [list(pair) for pair in self.destroyed_units],
            "player_damage": [list(pair) for pair in self.player_damage],
            "winner_idx": self.winner_idx,
            "is_draw": self.is_draw,
            "game_over": self.game_over,
        }


@dataclass
class OutcomeAnalyzer:
    catalog: CardCatalog

    def simulate(self, game: Game) -> tuple[Game, CombatReport]:
        """Combat applied to a deep copy; no handover, no turn increment."""
        game.validate()
        copy = game.clone()
        report = run_combat_phase(copy, self.catalog)
        return copy, report

    def analyze(self, game: Game) -> OutcomeReport:
        simulated, report = self.simulate(game)

        destroyed = []
        for player_idx in range(2):
            before = game.players[player_idx].board
            after = simulated.players[player_idx].board
            for slot, unit in enumerate(before):
                if unit is not None and after[slot] is None:
                    destroyed.append((player_idx, slot))

        damage = []
        for player_idx in range(2):
            lost = game.players[player_idx].hp - simulated.players[player_idx].hp
            if lost > 0:
                damage.append((player_idx, lost))

        finished, winner = match_outcome(simulated)
        return OutcomeReport(
            destroyed_units=destroyed,
            player_damage=damage,
            winner_idx=winner,
            is_draw=finished and winner is None,
            post_combat=simulated,
            combat=report,
        )


def analyze_outcome(game: Game, catalog: CardCatalog) -> OutcomeReport:
    return OutcomeAnalyzer(catalog).analyze(game)


def simulate_combat(game: Game, catalog: CardCatalog) -> Game:
    """The post-combat copy of game."""
    return OutcomeAnalyzer(catalog).simulate(game)[0]


def units_to_be_destroyed(game: Game, catalog: CardCatalog) -> list[tuple[int, int]]:
    return analyze_outcome(game, catalog).destroyed_units


def player_damage(game: Game, catalog: CardCatalog) -> list[tuple[int, int]]:
    return analyze_outcome(game, catalog).player_damage


def winner_after_combat(game: Game, catalog: CardCatalog) -> int | None:
    """Winner index if exactly one player would fall, else None."""
    return analyze_outcome(game, catalog).winner_idx
