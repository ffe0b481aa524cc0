"""Mutation protocol - the only code that changes a character's inventory.

Each operation validates first and commits only on success, in one call with
no intermediate state visible to the caller. Rejections leave the character
untouched and say why.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from gearmanager.core.grid.geometry import is_right_angle, normalize_rotation
from gearmanager.core.grid.placement import PlacementResult, try_place
from gearmanager.core.item.containment import (
    can_stow,
    has_weight_capacity,
    item_total_weight,
)
from gearmanager.core.item.models import HitLocation, ItemDefinition, ItemInstance
from gearmanager.core.outcomes import MutationResult, ReasonCode

from .models import HOTBAR_SLOTS, Character, Container
from .stats import container_weight

logger = logging.getLogger(__name__)

DefinitionLookup = Callable[[str], Optional[ItemDefinition]]


class RotationPolicy(str, Enum):
    REVALIDATE = "revalidate"  # rotate in place only if the new footprint fits
    PERMISSIVE = "permissive"  # rotate unconditionally


@dataclass(frozen=True)
class MutationPolicy:
    rotation: RotationPolicy = RotationPolicy.REVALIDATE
    strict_equip: bool = True


DEFAULT_POLICY = MutationPolicy()

_STOW_REASONS = {
    "unknown_definition": ReasonCode.UNKNOWN_ITEM_DEFINITION,
    "not_a_container": ReasonCode.NOT_A_CONTAINER,
    "too_large": ReasonCode.CAPACITY_EXCEEDED,
    "too_heavy": ReasonCode.CAPACITY_EXCEEDED,
}


# === validation ===


def validate_placement(
    character: Character,
    candidate: ItemInstance,
    container_id: str,
    x: int,
    y: int,
    rotation: int,
    get_definition: DefinitionLookup,
) -> PlacementResult:
    """Read-only preview of a placement. The candidate ignores its own cells."""
    container = character.get_container(container_id)
    if container is None:
        return PlacementResult(can_place=False, reason=ReasonCode.UNKNOWN_CONTAINER)
    return try_place(
        container.items,
        candidate,
        x,
        y,
        rotation,
        container.grid_width,
        container.grid_height,
        get_definition,
        exclude_instance_id=candidate.instance_id,
    )


def _check_capacity(
    container: Container,
    item: ItemInstance,
    already_inside: bool,
    get_definition: DefinitionLookup,
) -> Optional[MutationResult]:
    if container.max_weight is None:
        return None
    incoming = item_total_weight(item, get_definition)
    current = container_weight(container, get_definition)
    if already_inside:
        current -= incoming
    if has_weight_capacity(container.max_weight, current, incoming):
        return None
    return MutationResult.fail(
        ReasonCode.CAPACITY_EXCEEDED,
        f"{container.container_id} holds {current:g} of {container.max_weight:g}; "
        f"{item.instance_id} weighs {incoming:g}",
    )


def _place_or_fail(
    container: Container,
    item: ItemInstance,
    x: int,
    y: int,
    rotation: int,
    get_definition: DefinitionLookup,
) -> Optional[MutationResult]:
    result = try_place(
        container.items,
        item,
        x,
        y,
        rotation,
        container.grid_width,
        container.grid_height,
        get_definition,
        exclude_instance_id=item.instance_id,
    )
    if result.can_place:
        return None
    logger.debug(
        "Placement rejected: %s at (%d,%d) r%d in %s - %s",
        item.instance_id,
        x,
        y,
        rotation,
        container.container_id,
        result.reason.value,
    )
    return MutationResult.fail(result.reason, conflicts=result.conflicts)


def _detach(
    item: ItemInstance, host: Optional[ItemInstance], container: Container
) -> None:
    if host is not None:
        host.contained_items.remove(item)
    else:
        container.items.remove(item)


# === grid mutations ===


def add_item(
    character: Character,
    instance: ItemInstance,
    container_id: str,
    x: int,
    y: int,
    rotation: int,
    get_definition: DefinitionLookup,
) -> MutationResult:
    """Insert a new instance onto a container grid."""
    if character.find_item(instance.instance_id) is not None:
        return MutationResult.fail(ReasonCode.DUPLICATE_ITEM, instance.instance_id)

    container = character.get_container(container_id)
    if container is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_CONTAINER, container_id)
    if not is_right_angle(rotation):
        return MutationResult.fail(ReasonCode.INVALID_ROTATION, str(rotation))

    failure = _place_or_fail(container, instance, x, y, rotation, get_definition)
    if failure is None:
        failure = _check_capacity(container, instance, False, get_definition)
    if failure is not None:
        return failure

    instance.grid_x, instance.grid_y = x, y
    instance.rotation = normalize_rotation(rotation)
    instance.equipped_location = None
    instance.hotbar_slot = None
    container.items.append(instance)
    logger.info("Added %s to %s at (%d,%d)", instance.instance_id, container_id, x, y)
    return MutationResult.ok()


def move(
    character: Character,
    item_id: str,
    container_id: str,
    x: int,
    y: int,
    rotation: int,
    get_definition: DefinitionLookup,
) -> MutationResult:
    """Reposition an owned item onto a grid, in the same or another container.

    Works for items currently stowed inside another item too. Equip and
    hotbar tags travel with the item.
    """
    entry = character.locate(item_id)
    if entry is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_ITEM, item_id)
    item, host, source = entry

    target = character.get_container(container_id)
    if target is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_CONTAINER, container_id)
    if not is_right_angle(rotation):
        return MutationResult.fail(ReasonCode.INVALID_ROTATION, str(rotation))

    failure = _place_or_fail(target, item, x, y, rotation, get_definition)
    if failure is None:
        failure = _check_capacity(target, item, source is target, get_definition)
    if failure is not None:
        return failure

    if host is not None or source is not target:
        _detach(item, host, source)
        target.items.append(item)
    item.grid_x, item.grid_y = x, y
    item.rotation = normalize_rotation(rotation)

    logger.debug(
        "Moved %s: %s → %s (%d,%d) r%d",
        item_id,
        source.container_id,
        container_id,
        x,
        y,
        item.rotation,
    )
    return MutationResult.ok()


def rotate(
    character: Character,
    item_id: str,
    rotation: int,
    get_definition: DefinitionLookup,
    policy: MutationPolicy = DEFAULT_POLICY,
) -> MutationResult:
    """Rotate in place, around the item's current origin."""
    entry = character.locate(item_id)
    if entry is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_ITEM, item_id)
    item, host, container = entry
    if not is_right_angle(rotation):
        return MutationResult.fail(ReasonCode.INVALID_ROTATION, str(rotation))

    if (
        policy.rotation == RotationPolicy.REVALIDATE
        and host is None
        and item.is_placed
    ):
        failure = _place_or_fail(
            container, item, item.grid_x, item.grid_y, rotation, get_definition
        )
        if failure is not None:
            return failure

    item.rotation = normalize_rotation(rotation)
    logger.debug("Rotated %s to %d", item_id, item.rotation)
    return MutationResult.ok()


def remove_item(character: Character, item_id: str) -> MutationResult:
    """Delete an item (and anything stowed in it) from the inventory."""
    entry = character.locate(item_id)
    if entry is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_ITEM, item_id)
    item, host, container = entry

    removed_ids = set()
    stack = [item]
    while stack:
        current = stack.pop()
        removed_ids.add(current.instance_id)
        current.equipped_location = None
        current.hotbar_slot = None
        stack.extend(current.contained_items)

    _detach(item, host, container)
    for location in [loc for loc, iid in character.equipped.items() if iid in removed_ids]:
        del character.equipped[location]

    logger.info("Removed %s (%d instances) from inventory", item_id, len(removed_ids))
    return MutationResult.ok()


def stow(
    character: Character,
    item_id: str,
    host_id: str,
    get_definition: DefinitionLookup,
) -> MutationResult:
    """Put an item inside a container-capable item that sits on a grid.

    Nesting is one level deep: the host must be on a grid and the item must
    be empty. Stowed items keep no grid origin.
    """
    entry = character.locate(item_id)
    host_entry = character.locate(host_id)
    if entry is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_ITEM, item_id)
    if host_entry is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_ITEM, host_id)

    item, current_host, source = entry
    host, host_parent, host_container = host_entry
    if item is host:
        return MutationResult.fail(
            ReasonCode.NOT_A_CONTAINER, "an item cannot hold itself"
        )
    if host_parent is not None:
        return MutationResult.fail(
            ReasonCode.NOT_A_CONTAINER, f"{host_id} is not on a container grid"
        )
    if item.contained_items:
        return MutationResult.fail(
            ReasonCode.NOT_A_CONTAINER, f"{item_id} holds items; empty it first"
        )
    if current_host is host:
        return MutationResult.ok()

    problem = can_stow(item, host, get_definition)
    if problem is not None:
        return MutationResult.fail(_STOW_REASONS[problem], problem)
    if host_container is not source:
        failure = _check_capacity(host_container, item, False, get_definition)
        if failure is not None:
            return failure

    _detach(item, current_host, source)
    item.clear_placement()
    host.contained_items.append(item)
    logger.debug("Stowed %s in %s", item_id, host_id)
    return MutationResult.ok()


# === equipment ===


def equip(
    character: Character,
    item_id: str,
    location: HitLocation,
    get_definition: DefinitionLookup,
    policy: MutationPolicy = DEFAULT_POLICY,
) -> MutationResult:
    """Bind an owned item to a body location.

    Strict mode only accepts locations the item's definition protects. The
    item leaves any previous location; a previous occupant of `location`
    is unequipped.
    """
    item = character.find_item(item_id)
    if item is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_ITEM, item_id)

    if policy.strict_equip:
        definition = get_definition(item.definition_id)
        if definition is None:
            return MutationResult.fail(
                ReasonCode.UNKNOWN_ITEM_DEFINITION, item.definition_id
            )
        if not definition.protects(location):
            return MutationResult.fail(
                ReasonCode.INVALID_EQUIP_TARGET,
                f"{definition.definition_id} does not cover {location.value}",
            )

    previous_id = character.equipped.get(location)
    if previous_id is not None and previous_id != item_id:
        previous = character.find_item(previous_id)
        if previous is not None:
            previous.equipped_location = None
    if item.equipped_location is not None:
        character.equipped.pop(item.equipped_location, None)

    character.equipped[location] = item_id
    item.equipped_location = location
    logger.debug("Equipped %s at %s", item_id, location.value)
    return MutationResult.ok()


def unequip(character: Character, location: HitLocation) -> MutationResult:
    """Free a body location. Empty locations are a no-op."""
    item_id = character.equipped.pop(location, None)
    if item_id is None:
        return MutationResult.ok("nothing equipped")
    item = character.find_item(item_id)
    if item is not None:
        item.equipped_location = None
    logger.debug("Unequipped %s from %s", item_id, location.value)
    return MutationResult.ok()


def assign_hotbar(character: Character, item_id: str, slot: int) -> MutationResult:
    """Tag an item with a hotbar slot, evicting whatever held that slot."""
    if slot not in HOTBAR_SLOTS:
        return MutationResult.fail(ReasonCode.INVALID_HOTBAR_SLOT, str(slot))
    item = character.find_item(item_id)
    if item is None:
        return MutationResult.fail(ReasonCode.UNKNOWN_ITEM, item_id)

    holder = character.hotbar().get(slot)
    if holder is not None and holder is not item:
        holder.hotbar_slot = None
    item.hotbar_slot = slot
    return MutationResult.ok()


def clear_hotbar(character: Character, slot: int) -> MutationResult:
    if slot not in HOTBAR_SLOTS:
        return MutationResult.fail(ReasonCode.INVALID_HOTBAR_SLOT, str(slot))
    holder = character.hotbar().get(slot)
    if holder is None:
        return MutationResult.ok("slot empty")
    holder.hotbar_slot = None
    return MutationResult.ok()
