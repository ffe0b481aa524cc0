"""Item inspector + armor coverage + character serialization"""

from __future__ import annotations

import json

import pytest

from gearmanager.config import DATA_DIR
from gearmanager.core.character.encumbrance import EncumbranceLevel
from gearmanager.core.character.inspection import armor_coverage, inspect_item
from gearmanager.core.character.models import Character
from gearmanager.core.character.mutations import equip, stow
from gearmanager.core.character.stats import (
    carried_weight,
    effective_dodge_of,
    effective_move_of,
    encumbrance_of,
)
from gearmanager.core.item.models import HitLocation


@pytest.fixture()
def operator() -> Character:
    with (DATA_DIR / "sample_character.json").open(encoding="utf-8") as f:
        return Character.from_dict(json.load(f))


# ── stats ─────────────────────────────────────────────────────


class TestStats:
    def test_sample_loadout(self, operator, catalog) -> None:
        assert carried_weight(operator, catalog.get) == pytest.approx(23.6)
        assert encumbrance_of(operator, catalog.get).level == EncumbranceLevel.NONE
        assert effective_move_of(operator, catalog.get) == 12
        assert effective_dodge_of(operator, catalog.get) == 9

    def test_stowed_items_still_count(self, operator, catalog) -> None:
        before = carried_weight(operator, catalog.get)
        stow(operator, "item-mag-4", "item-pouch", catalog.get)
        assert carried_weight(operator, catalog.get) == pytest.approx(before)


# ── inspect_item ──────────────────────────────────────────────


class TestInspectItem:
    def test_armor(self, operator, catalog) -> None:
        info = inspect_item(operator, "item-plate-carrier", catalog.get)
        assert info is not None
        assert info.definition.definition_id == "plate-carrier"
        assert info.total_weight == 8.0
        assert info.encumbrance_impact == pytest.approx(8.0 / 23.6 * 100)
        assert info.can_equip is True
        assert info.equip_locations == (HitLocation.TORSO, HitLocation.VITALS)

    def test_non_armor(self, operator, catalog) -> None:
        info = inspect_item(operator, "item-rifle", catalog.get)
        assert info.can_equip is False
        assert info.equip_locations == ()

    def test_host_includes_contents(self, operator, catalog) -> None:
        stow(operator, "item-mag-4", "item-pouch", catalog.get)
        info = inspect_item(operator, "item-pouch", catalog.get)
        assert info.total_weight == pytest.approx(1.0)

    def test_unknown(self, operator, catalog) -> None:
        assert inspect_item(operator, "nope", catalog.get) is None


# ── armor_coverage ────────────────────────────────────────────


class TestArmorCoverage:
    def test_nothing_equipped(self, operator, catalog) -> None:
        coverage = armor_coverage(operator, catalog.get)
        assert set(coverage) == set(HitLocation)
        assert all(dr == 0 for dr in coverage.values())

    def test_piece_covers_all_its_locations(self, operator, catalog) -> None:
        equip(operator, "item-plate-carrier", HitLocation.TORSO, catalog.get)
        equip(operator, "item-helmet", HitLocation.SKULL, catalog.get)
        coverage = armor_coverage(operator, catalog.get)
        assert coverage[HitLocation.TORSO] == 25
        assert coverage[HitLocation.VITALS] == 25
        assert coverage[HitLocation.SKULL] == 12
        assert coverage[HitLocation.LEGS] == 0


# ── serialization ─────────────────────────────────────────────


class TestCharacterDict:
    def test_roundtrip_keeps_equipment(self, operator, catalog) -> None:
        equip(operator, "item-helmet", HitLocation.SKULL, catalog.get)
        restored = Character.from_dict(operator.to_dict())
        assert restored.equipped == {HitLocation.SKULL: "item-helmet"}
        assert restored.find_item("item-helmet").equipped_location == HitLocation.SKULL

    def test_equipped_must_be_owned(self, operator) -> None:
        data = operator.to_dict()
        data["equipped"] = {"skull": "ghost"}
        with pytest.raises(ValueError):
            Character.from_dict(data)

    def test_item_equipped_twice_rejected(self, operator) -> None:
        data = operator.to_dict()
        data["equipped"] = {"torso": "item-plate-carrier", "vitals": "item-plate-carrier"}
        with pytest.raises(ValueError):
            Character.from_dict(data)

    def test_base_stats(self, operator) -> None:
        assert operator.basic_lift == pytest.approx(28.8)
        assert operator.base_move == 12
        assert operator.base_dodge == 9
