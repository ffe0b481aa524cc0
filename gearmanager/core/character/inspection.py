"""Read-only views over a character's gear for the inspector panel and paper doll"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from gearmanager.core.item.containment import item_total_weight
from gearmanager.core.item.models import HitLocation, ItemDefinition, ItemInstance

from .models import Character
from .stats import carried_weight

DefinitionLookup = Callable[[str], Optional[ItemDefinition]]


@dataclass(frozen=True)
class ItemInspection:
    item: ItemInstance
    definition: Optional[ItemDefinition]
    total_weight: float
    encumbrance_impact: float  # percent of carried weight
    can_equip: bool
    equip_locations: tuple[HitLocation, ...]


def equip_locations(definition: Optional[ItemDefinition]) -> tuple[HitLocation, ...]:
    if definition is None or not definition.is_armor:
        return ()
    return definition.locations


def inspect_item(
    character: Character, item_id: str, get_definition: DefinitionLookup
) -> Optional[ItemInspection]:
    item = character.find_item(item_id)
    if item is None:
        return None

    definition = get_definition(item.definition_id)
    weight = item_total_weight(item, get_definition)
    carried = carried_weight(character, get_definition)
    impact = weight / carried * 100 if carried > 0 else 0.0
    locations = equip_locations(definition)

    return ItemInspection(
        item=item,
        definition=definition,
        total_weight=weight,
        encumbrance_impact=impact,
        can_equip=bool(locations),
        equip_locations=locations,
    )


def armor_coverage(
    character: Character, get_definition: DefinitionLookup
) -> dict[HitLocation, int]:
    """DR per hit location from the equipped armor that covers it.

    Every location appears; uncovered ones read 0. An equipped piece adds its
    DR to each location it protects, not only the one it is bound to.
    """
    coverage = {location: 0 for location in HitLocation}
    seen: set[str] = set()
    for item_id in character.equipped.values():
        if item_id in seen:
            continue
        seen.add(item_id)
        item = character.find_item(item_id)
        if item is None:
            continue
        definition = get_definition(item.definition_id)
        if definition is None or not definition.is_armor:
            continue
        for location in definition.locations:
            coverage[location] += definition.damage_resistance
    return coverage
