"""
Tests for the shared combat phase.

Board (clash_game), player 0 active:
    slot:      0        1        2        3
    p0:     Striker  Duelist    -       Wall
    p1:        -     Duelist  Striker  Duelist(1hp)
"""

from itertools import permutations

import pytest

from ..engine_core.combat import (
    PlayerHit, UnitHit, apply_combat, match_outcome, plan_combat, run_combat_phase,
)
from .conftest import DUELIST, STRIKER, WALL, make_game, unit


class TestPlanCombat:
    """Planning is pure and computed from the pre-combat board."""

    def test_plan_does_not_mutate(self, clash_game, catalog):
        before = clash_game.clone()
        plan_combat(clash_game, catalog)
        assert clash_game == before

    def test_clashes_and_direct_hits(self, clash_game, catalog):
        report = plan_combat(clash_game, catalog)

        assert report.attacker_idx == 0
        assert report.defender_idx == 1
        assert report.clashes == [1, 3]
        # Slot 0 is unopposed; slot 2 has no attacker
        assert report.player_hits == [PlayerHit(player_idx=1, damage=3, source_slot=0, card_id=STRIKER)]

    def test_unit_hits_are_cross_damage(self, clash_game, catalog):
        report = plan_combat(clash_game, catalog)
        assert report.unit_hits == [
            UnitHit(player_idx=0, slot=1, damage=2, source_player=1, source_slot=1),
            UnitHit(player_idx=1, slot=1, damage=2, source_player=0, source_slot=1),
            UnitHit(player_idx=0, slot=3, damage=2, source_player=1, source_slot=3),
            UnitHit(player_idx=1, slot=3, damage=1, source_player=0, source_slot=3),
        ]

    def test_defender_without_attacker_does_nothing(self, catalog):
        game = make_game(boards=([None] * 4, [unit(STRIKER, 4), None, None, None]))
        report = plan_combat(game, catalog)
        assert report.is_empty
        assert report.clashes == []

    def test_slot_order_must_be_permutation(self, clash_game, catalog):
        with pytest.raises(ValueError, match="permutation"):
            plan_combat(clash_game, catalog, slot_order=[0, 1, 1, 3])

    def test_active_player_one(self, catalog):
        game = make_game(
            boards=([None] * 4, [None, None, unit(DUELIST, 2), None]),
            active_idx=1,
        )
        report = plan_combat(game, catalog)
        assert report.player_hits == [PlayerHit(player_idx=0, damage=2, source_slot=2, card_id=DUELIST)]


class TestSimultaneity:

    def test_any_slot_order_gives_same_outcome(self, clash_game, catalog):
        baseline = clash_game.clone()
        baseline_report = run_combat_phase(baseline, catalog)

        for order in permutations(range(4)):
            game = clash_game.clone()
            report = run_combat_phase(game, catalog, slot_order=order)
            assert game == baseline, order
            assert report.destroyed == baseline_report.destroyed

    def test_both_units_lose_opponents_attack(self, catalog):
        game = make_game(boards=(
            [None, None, unit(STRIKER, 4), None],
            [None, None, unit(WALL, 6), None],
        ))
        run_combat_phase(game, catalog)
        assert game.players[0].board[2].current_hp == 4 - 1
        assert game.players[1].board[2].current_hp == 6 - 3

    def test_mutual_kill_uses_pre_combat_attack(self, catalog):
        game = make_game(boards=(
            [None, unit(DUELIST, 2), None, None],
            [None, unit(DUELIST, 2), None, None],
        ))
        report = run_combat_phase(game, catalog)
        assert report.destroyed == [(0, 1), (1, 1)]
        assert game.players[0].board[1] is None
        assert game.players[1].board[1] is None


class TestApplyCombat:

    def test_direct_damage_only_hits_player(self, catalog):
        game = make_game(
            boards=([unit(STRIKER, 4), None, None, None], [None] * 4),
            hp=(20, 10),
        )
        run_combat_phase(game, catalog)
        assert game.players[1].hp == 7
        assert game.players[0].board[0].current_hp == 4
        assert game.players[0].hp == 20

    def test_removal_order_player0_then_player1(self, clash_game, catalog):
        destroyed = apply_combat(clash_game, plan_combat(clash_game, catalog))
        assert destroyed == [(0, 1), (1, 1), (1, 3)]

    def test_survivors_keep_damage(self, clash_game, catalog):
        run_combat_phase(clash_game, catalog)
        assert clash_game.players[0].board[3].current_hp == 4
        assert clash_game.players[1].board[2].current_hp == 4
        assert clash_game.players[1].hp == 12

    def test_unknown_card_attacks_for_one(self, catalog):
        game = make_game(boards=([None, None, None, unit(99, 5)], [None] * 4))
        run_combat_phase(game, catalog)
        assert game.players[1].hp == 19


class TestMatchOutcome:

    def test_in_progress(self):
        assert match_outcome(make_game()) == (False, None)

    def test_player_zero_falls(self):
        assert match_outcome(make_game(hp=(0, 5))) == (True, 1)

    def test_player_one_falls(self):
        assert match_outcome(make_game(hp=(5, -2))) == (True, 0)

    def test_both_fall_is_draw(self):
        assert match_outcome(make_game(hp=(0, -1))) == (True, None)

