"""
Card Catalog - Static card definitions keyed by card id.

The catalog is immutable and injected into the engine, analyzer and
sequencer. Two built-in sets exist:
- The client set (eight cards with art and flavour abilities)
- The ledger fallback set (ids 1-3, used when no card registry is configured)

Special effect text is descriptive only. Spells carry an effect tag that
the effect resolver dispatches on.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping

# Attack used for card ids missing from the catalog (ledger and client agree)
DEFAULT_ATTACK = 1


class AttackDirection(Enum):
    FORWARD = "forward"
    LEFT_RIGHT = "left-right"


class CardType(Enum):
    UNIT = "unit"
    SPELL = "spell"


@dataclass(frozen=True)
class CardConfig:
    """A catalog entry. Base stats only; runtime state lives on UnitInstance."""
    id: int
    key: str
    name: str
    cost: int
    attack: int
    health: int
    attack_direction: AttackDirection = AttackDirection.FORWARD
    special_effect: str | None = None
    card_type: CardType = CardType.UNIT
    effect: str | None = None  # Effect tag for spells
    effect_amount: int = 0
    image: str | None = None

    @property
    def is_unit(self) -> bool:
        return self.card_type == CardType.UNIT

    @property
    def is_spell(self) -> bool:
        return self.card_type == CardType.SPELL


class CardCatalog(Mapping[int, CardConfig]):
    """Read-only lookup from card id to CardConfig."""

    def __init__(self, cards: list[CardConfig] | tuple[CardConfig, ...] = ()):
        table: dict[int, CardConfig] = {}
        for card in cards:
            if card.id in table:
                raise ValueError(f"Duplicate card id {card.id}")
            table[card.id] = card
        self._cards = MappingProxyType(dict(sorted(table.items())))

    def __getitem__(self, card_id: int) -> CardConfig:
        return self._cards[card_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"CardCatalog({len(self)} cards)"

    def require(self, card_id: int) -> CardConfig:
        """Get a card, raising KeyError with a readable message."""
        card = self._cards.get(card_id)
        if card is None:
            raise KeyError(f"Card {card_id} not in catalog")
        return card

    def attack_of(self, card_id: int) -> int:
        card = self._cards.get(card_id)
        return card.attack if card else DEFAULT_ATTACK

    def name_of(self, card_id: int) -> str:
        card = self._cards.get(card_id)
        return card.name if card else f"Card {card_id}"

    def by_key(self, key: str) -> CardConfig | None:
        for card in self._cards.values():
            if card.key == key:
                return card
        return None

    def cards(self) -> list[CardConfig]:
        return list(self._cards.values())


# ============================================================================
# Client card set
# ============================================================================

HACKER = CardConfig(
    id=1,
    key="Hacker",
    name="Hacker",
    cost=3,
    health=5,
    attack=3,
    attack_direction=AttackDirection.LEFT_RIGHT,
    special_effect=(
        "Steals 2 health from the enemy and gets +1 health if at least one "
        "Vibe Coder is on the board"
    ),
    image="/cards/Hacker.png",
)

HEAD_HUNTER = CardConfig(
    id=2,
    key="Head Hunter",
    name="Head Hunter",
    cost=4,
    health=2,
    attack=1,
    special_effect="Steals random opposing unit and places it on the own side",
    image="/cards/HeadHunter.png",
)

MANAGER = CardConfig(
    id=3,
    key="Manager",
    name="Manager",
    cost=5,
    health=5,
    attack=5,
    image="/cards/Manager.png",
)

VIBE_CODER = CardConfig(
    id=4,
    key="Vibe Coder",
    name="Vibe Coder",
    cost=1,
    health=3,
    attack=1,
    special_effect="Reduces the health of the player playing the card by 1 when played",
    image="/cards/VibeCoder.png",
)

TWITTER_DRAMA_QUEEN = CardConfig(
    id=5,
    key="Twitter drama queen",
    name="Twitter drama queen",
    cost=2,
    health=2,
    attack=2,
    image="/cards/TwitterDramaQueen.png",
)

THE_YAPPER = CardConfig(
    id=6,
    key="The Yapper",
    name="The Yapper",
    cost=1,
    health=1,
    attack=1,
    special_effect="+1 Health and Attack for every Twitter drama queen on the board",
    image="/cards/Yapper.png",
)

CODE_PURIST = CardConfig(
    id=7,
    key="Code purist",
    name="Code purist",
    cost=3,
    health=3,
    attack=3,
    image="/cards/CodePurist.png",
)

DEGEN = CardConfig(
    id=8,
    key="Degen",
    name="Degen",
    cost=0,
    health=1,
    attack=2,
    special_effect="Decreases the health by 1 of a random unit on the board",
    image="/cards/Degen.png",
)

CLIENT_CARDS = (
    HACKER,
    HEAD_HUNTER,
    MANAGER,
    VIBE_CODER,
    TWITTER_DRAMA_QUEEN,
    THE_YAPPER,
    CODE_PURIST,
    DEGEN,
)


def default_catalog() -> CardCatalog:
    """The client card set."""
    return CardCatalog(CLIENT_CARDS)


def ledger_fallback_catalog() -> CardCatalog:
    """Cards 1-3 as the ledger defines them when no registry is set."""
    return CardCatalog([
        CardConfig(id=i, key=f"ledger_{i}", name=f"Card {i}", cost=i, attack=i, health=i)
        for i in (1, 2, 3)
    ])
