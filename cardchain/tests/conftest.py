"""
Pytest fixtures for cardchain tests.

Tests run against a small synthetic catalog so combat arithmetic stays
obvious. The client card set is covered separately in test_catalog.
"""

import pytest

from ..catalog import CardCatalog, CardConfig, CardType
from ..engine_core.state import Game, GameStatus, PlayerState, UnitInstance


STRIKER = 1  # atk 3, hp 4, cost 2
DUELIST = 2  # atk 2, hp 2, cost 1
WALL = 3  # atk 1, hp 6, cost 3
ZAP = 10  # spell, damage_front 3, cost 1
MEND = 11  # spell, heal_unit 2, cost 1
POTION = 12  # spell, heal_self 5, cost 2
FIREBALL = 13  # spell, damage_player 4, cost 2


def _spell(card_id, name, cost, effect, amount):
    return CardConfig(
        id=card_id, key=name, name=name, cost=cost, attack=0, health=0,
        card_type=CardType.SPELL, effect=effect, effect_amount=amount,
    )


@pytest.fixture
def catalog() -> CardCatalog:
    """Synthetic catalog with three units and four spells."""
    return CardCatalog([
        CardConfig(id=STRIKER, key="striker", name="Striker", cost=2, attack=3, health=4),
        CardConfig(id=DUELIST, key="duelist", name="Duelist", cost=1, attack=2, health=2),
        CardConfig(id=WALL, key="wall", name="Wall", cost=3, attack=1, health=6),
        _spell(ZAP, "Zap", 1, "damage_front", 3),
        _spell(MEND, "Mend", 1, "heal_unit", 2),
        _spell(POTION, "Potion", 2, "heal_self", 5),
        _spell(FIREBALL, "Fireball", 2, "damage_player", 4),
    ])


def unit(card_id: int, hp: int) -> UnitInstance:
    return UnitInstance(card_id=card_id, current_hp=hp)


def make_game(
    boards=None,
    hands=None,
    hp=(20, 20),
    energy=(5, 5),
    max_energy=(5, 5),
    active_idx=0,
    turn=1,
    status=GameStatus.IN_PROGRESS,
    decks=None,
) -> Game:
    """Build a game from per-player values; boards are 4-slot lists."""
    boards = boards or ([None] * 4, [None] * 4)
    hands = hands or ([], [])
    decks = decks or ([], [])
    players = [
        PlayerState(
            addr=f"player{i}",
            hp=hp[i],
            energy=energy[i],
            max_energy=max_energy[i],
            deck=list(decks[i]),
            hand=list(hands[i]),
            board=list(boards[i]),
        )
        for i in range(2)
    ]
    return Game(id=7, players=players, active_idx=active_idx, turn=turn, status=status)


@pytest.fixture
def empty_game() -> Game:
    """In-progress game, empty boards, player 0 to act."""
    return make_game()


@pytest.fixture
def clash_game() -> Game:
    """
    Mid-game board for combat tests.

    Player 0 (active): Striker slot 0, Duelist slot 1, Wall slot 3
    Player 1:          Duelist slot 1, Striker slot 2, Duelist slot 3
    """
    return make_game(
        boards=(
            [unit(STRIKER, 4), unit(DUELIST, 2), None, unit(WALL, 6)],
            [None, unit(DUELIST, 2), unit(STRIKER, 4), unit(DUELIST, 1)],
        ),
        hp=(20, 15),
    )


@pytest.fixture
def hand_game() -> Game:
    """Player 0 holds one of each card; player 1 has a Duelist in slot 0."""
    return make_game(
        boards=([None] * 4, [unit(DUELIST, 2), None, None, None]),
        hands=([STRIKER, DUELIST, WALL, ZAP, MEND, POTION, FIREBALL], []),
        energy=(5, 0),
        max_energy=(5, 4),
    )
