"""
Tests for the card catalog and catalog loading.
"""

import json

import pytest

from ..catalog import (
    AttackDirection,
    CardCatalog,
    CardConfig,
    CatalogError,
    DEFAULT_ATTACK,
    catalog_from_records,
    catalog_to_records,
    default_catalog,
    ledger_fallback_catalog,
    load_catalog,
)


class TestCardCatalog:
    """Lookup behaviour of the immutable catalog."""

    def test_lookup_by_id(self, catalog):
        assert catalog[1].name == "Striker"
        assert catalog.get(99) is None
        assert 2 in catalog
        assert len(catalog) == 7

    def test_iterates_in_id_order(self):
        cat = CardCatalog([
            CardConfig(id=5, key="e", name="E", cost=1, attack=1, health=1),
            CardConfig(id=2, key="b", name="B", cost=1, attack=1, health=1),
        ])
        assert list(cat) == [2, 5]

    def test_duplicate_ids_rejected(self):
        card = CardConfig(id=1, key="a", name="A", cost=1, attack=1, health=1)
        with pytest.raises(ValueError, match="Duplicate"):
            CardCatalog([card, card])

    def test_require_unknown_raises(self, catalog):
        with pytest.raises(KeyError):
            catalog.require(99)

    def test_unknown_card_attack_defaults_to_one(self, catalog):
        assert catalog.attack_of(99) == DEFAULT_ATTACK == 1
        assert catalog.attack_of(1) == 3

    def test_name_of_unknown(self, catalog):
        assert catalog.name_of(99) == "Card 99"

    def test_by_key(self, catalog):
        assert catalog.by_key("wall").id == 3
        assert catalog.by_key("nope") is None

    def test_catalog_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog[1] = catalog[2]

    def test_card_kinds(self, catalog):
        assert catalog[1].is_unit and not catalog[1].is_spell
        assert catalog[10].is_spell and not catalog[10].is_unit


class TestBuiltInSets:

    def test_client_cards(self):
        cat = default_catalog()
        assert list(cat) == [1, 2, 3, 4, 5, 6, 7, 8]
        manager = cat.by_key("Manager")
        assert (manager.cost, manager.attack, manager.health) == (5, 5, 5)
        assert cat[1].attack_direction == AttackDirection.LEFT_RIGHT
        assert all(card.is_unit for card in cat.values())

    def test_ledger_fallback(self):
        cat = ledger_fallback_catalog()
        assert list(cat) == [1, 2, 3]
        for card_id, card in cat.items():
            assert card.cost == card.attack == card.health == card_id


class TestLoader:
    """JSON catalogs validated with pydantic."""

    def test_records_build_catalog(self):
        cat = catalog_from_records([
            {"id": 1, "name": "Grunt", "cost": 1, "attack": 2, "health": 3},
            {"id": 2, "name": "Bolt", "cost": 1, "card_type": "spell",
             "effect": "damage_front", "effect_amount": 2},
        ])
        assert cat[1].key == "Grunt"
        assert cat[2].is_spell
        assert cat[2].effect_amount == 2

    def test_duplicate_id(self):
        with pytest.raises(CatalogError, match="Duplicate"):
            catalog_from_records([
                {"id": 1, "name": "A", "cost": 1, "attack": 1, "health": 1},
                {"id": 1, "name": "B", "cost": 1, "attack": 1, "health": 1},
            ])

    def test_negative_cost(self):
        with pytest.raises(CatalogError):
            catalog_from_records([{"id": 1, "name": "A", "cost": -1, "attack": 1, "health": 1}])

    def test_unit_needs_health(self):
        with pytest.raises(CatalogError, match="health"):
            catalog_from_records([{"id": 1, "name": "A", "cost": 1, "attack": 1, "health": 0}])

    def test_spell_needs_effect(self):
        with pytest.raises(CatalogError, match="effect"):
            catalog_from_records([{"id": 1, "name": "A", "cost": 1, "card_type": "spell"}])

    def test_unknown_effect(self):
        with pytest.raises(CatalogError, match="unknown effect"):
            catalog_from_records([
                {"id": 1, "name": "A", "cost": 1, "card_type": "spell", "effect": "summon_dragon"},
            ])

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text(json.dumps(catalog_to_records(default_catalog())))

        loaded = load_catalog(path)
        assert loaded.cards() == default_catalog().cards()

    def test_load_rejects_non_array(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text(json.dumps({"id": 1}))
        with pytest.raises(CatalogError, match="array"):
            load_catalog(path)

    def test_load_rejects_bad_json(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text("[{")
        with pytest.raises(CatalogError, match="invalid JSON"):
            load_catalog(path)
