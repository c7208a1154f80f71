"""
Catalog Loader - Read card catalogs from JSON.

Records are validated with pydantic before they become CardConfig values.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Literal, Optional
import json
import logging

from pydantic import BaseModel, Field, ValidationError, model_validator

from .cards import AttackDirection, CardCatalog, CardConfig, CardType

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when a catalog file or record is invalid."""


class CardRecord(BaseModel):
    """One card as stored in a catalog file."""
    id: int = Field(..., ge=0)
    key: Optional[str] = None
    name: str
    cost: int = Field(..., ge=0)
    attack: int = Field(0, ge=0)
    health: int = Field(0, ge=0)
    attack_direction: Literal["forward", "left-right"] = "forward"
    special_effect: Optional[str] = None
    card_type: Literal["unit", "spell"] = "unit"
    effect: Optional[str] = None
    effect_amount: int = Field(0, ge=0)
    image: Optional[str] = None

    @model_validator(mode="after")
    def _check_kind(self) -> "CardRecord":
        if self.card_type == "unit" and self.health < 1:
            raise ValueError(f"unit card {self.id} must have health >= 1")
        if self.card_type == "spell" and not self.effect:
            raise ValueError(f"spell card {self.id} needs an effect tag")
        return self

    def to_config(self) -> CardConfig:
        return CardConfig(
            id=self.id,
            key=self.key or self.name,
            name=self.name,
            cost=self.cost,
            attack=self.attack,
            health=self.health,
            attack_direction=AttackDirection(self.attack_direction),
            special_effect=self.special_effect,
            card_type=CardType(self.card_type),
            effect=self.effect,
            effect_amount=self.effect_amount,
            image=self.image,
        )


def catalog_from_records(records: list[dict[str, Any]]) -> CardCatalog:
    """Build a catalog from raw dict records."""
    from ..engine_core.effect_resolver import EFFECT_REGISTRY

    cards: list[CardConfig] = []
    seen: set[int] = set()
    for i, raw in enumerate(records):
        try:
            record = CardRecord.model_validate(raw)
        except ValidationError as e:
            raise CatalogError(f"Card record {i}: {e}") from e

        if record.id in seen:
            raise CatalogError(f"Duplicate card id {record.id}")
        if record.effect and record.effect not in EFFECT_REGISTRY:
            raise CatalogError(f"Card {record.id}: unknown effect '{record.effect}'")
        seen.add(record.id)
        cards.append(record.to_config())

    logger.debug("Loaded %d catalog records", len(cards))
    return CardCatalog(cards)


def load_catalog(path: str | Path) -> CardCatalog:
    """Load a catalog from a JSON file containing an array of card records."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"{path}: invalid JSON ({e})") from e

    if not isinstance(raw, list):
        raise CatalogError(f"{path}: expected a JSON array of cards")

    catalog = catalog_from_records(raw)
    logger.info("Loaded catalog with %d cards from %s", len(catalog), path)
    return catalog


def catalog_to_records(catalog: CardCatalog) -> list[dict[str, Any]]:
    """Inverse of catalog_from_records, for export."""
    return [
        CardRecord(
            id=card.id,
            key=card.key,
            name=card.name,
            cost=card.cost,
            attack=card.attack,
            health=card.health,
            attack_direction=card.attack_direction.value,
            special_effect=card.special_effect,
            card_type=card.card_type.value,
            effect=card.effect,
            effect_amount=card.effect_amount,
            image=card.image,
        ).model_dump()
        for card in catalog.values()
    ]
