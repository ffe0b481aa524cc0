"""Container capacity + nested weight"""

from __future__ import annotations

import pytest

from gearmanager.core.item.containment import (
    can_stow,
    fits_in_container,
    has_weight_capacity,
    item_total_weight,
    total_weight,
)
from gearmanager.core.item.models import ItemCategory, ItemDefinition, ItemInstance
from gearmanager.core.item.registry import DefinitionRegistry


@pytest.fixture()
def registry() -> DefinitionRegistry:
    reg = DefinitionRegistry()
    reg.register(
        ItemDefinition(
            definition_id="pouch",
            name="Pouch",
            category=ItemCategory.CONTAINER,
            weight=0.25,
            grid_width=1,
            grid_height=2,
            is_container=True,
            container_width=1,
            container_height=2,
            container_max_weight=1.0,
        )
    )
    reg.register(
        ItemDefinition(
            definition_id="sack",
            name="Sack",
            category=ItemCategory.CONTAINER,
            weight=0.5,
            grid_width=2,
            grid_height=2,
            is_container=True,
            container_width=3,
            container_height=2,
        )
    )
    reg.register(
        ItemDefinition(
            definition_id="mag", name="Mag", category=ItemCategory.AMMUNITION, weight=0.5
        )
    )
    reg.register(
        ItemDefinition(
            definition_id="rifle",
            name="Rifle",
            category=ItemCategory.WEAPON,
            weight=7.5,
            grid_width=3,
            grid_height=1,
        )
    )
    reg.register(
        ItemDefinition(
            definition_id="medkit",
            name="Medkit",
            category=ItemCategory.MEDICAL,
            weight=2.0,
            grid_width=2,
            grid_height=1,
        )
    )
    return reg


# ── fits_in_container ─────────────────────────────────────────


class TestFitsInContainer:
    @pytest.mark.parametrize(
        "item,interior,expected",
        [
            ((1, 1), (1, 1), True),
            ((2, 1), (1, 2), True),  # turned
            ((3, 1), (2, 2), False),
            ((2, 3), (3, 2), True),
            ((3, 3), (3, 2), False),
        ],
    )
    def test_fits(self, item, interior, expected) -> None:
        assert fits_in_container(item, interior) is expected


# ── has_weight_capacity ───────────────────────────────────────


class TestHasWeightCapacity:
    def test_unlimited(self) -> None:
        assert has_weight_capacity(None, 1000.0, 1000.0) is True

    def test_exactly_full_is_allowed(self) -> None:
        assert has_weight_capacity(20, 19.5, 0.5) is True

    def test_over(self) -> None:
        assert has_weight_capacity(20, 19.5, 0.75) is False


# ── weight ────────────────────────────────────────────────────


class TestWeight:
    def test_quantity_multiplies(self, registry) -> None:
        assert item_total_weight(ItemInstance("m", "mag", quantity=3), registry.get) == 1.5

    def test_nested_weight(self, registry) -> None:
        inner = ItemInstance("p", "pouch", contained_items=[ItemInstance("m", "mag")])
        outer = ItemInstance("s", "sack", contained_items=[inner])
        assert item_total_weight(outer, registry.get) == 1.25

    def test_unknown_definition_weighs_nothing(self, registry) -> None:
        ghost = ItemInstance("g", "nope", contained_items=[ItemInstance("m", "mag")])
        assert item_total_weight(ghost, registry.get) == 0.0

    def test_total_weight(self, registry) -> None:
        items = [ItemInstance("m", "mag"), ItemInstance("k", "medkit")]
        assert total_weight(items, registry.get) == 2.5
        assert total_weight([], registry.get) == 0


# ── can_stow ──────────────────────────────────────────────────


class TestCanStow:
    def test_allowed(self, registry) -> None:
        pouch = ItemInstance("p", "pouch")
        assert can_stow(ItemInstance("m", "mag"), pouch, registry.get) is None

    def test_not_a_container(self, registry) -> None:
        rifle = ItemInstance("r", "rifle")
        assert can_stow(ItemInstance("m", "mag"), rifle, registry.get) == "not_a_container"

    def test_too_large(self, registry) -> None:
        pouch = ItemInstance("p", "pouch")
        assert can_stow(ItemInstance("r", "rifle"), pouch, registry.get) == "too_large"

    def test_turned_item_fits(self, registry) -> None:
        pouch = ItemInstance("p", "pouch")
        assert can_stow(ItemInstance("k", "medkit"), pouch, registry.get) == "too_heavy"
        sack = ItemInstance("s", "sack")
        assert can_stow(ItemInstance("k", "medkit"), sack, registry.get) is None

    def test_too_heavy(self, registry) -> None:
        pouch = ItemInstance(
            "p", "pouch", contained_items=[ItemInstance("m1", "mag")]
        )
        assert can_stow(ItemInstance("m2", "mag"), pouch, registry.get) is None
        pouch.contained_items.append(ItemInstance("m2", "mag"))
        assert can_stow(ItemInstance("m3", "mag"), pouch, registry.get) == "too_heavy"

    def test_unknown_definition(self, registry) -> None:
        pouch = ItemInstance("p", "pouch")
        assert (
            can_stow(ItemInstance("g", "nope"), pouch, registry.get)
            == "unknown_definition"
        )
