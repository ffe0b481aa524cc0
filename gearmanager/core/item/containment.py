"""Capacity & containment rules for containers and container-capable items"""

import logging
from typing import Callable, Iterable, Optional

from .models import ItemDefinition, ItemInstance

logger = logging.getLogger(__name__)

DefinitionLookup = Callable[[str], Optional[ItemDefinition]]


def fits_in_container(
    item_footprint: tuple[int, int], container_footprint: tuple[int, int]
) -> bool:
    """Does a (w, h) footprint fit the interior, upright or turned 90°?

    180° and 270° cover the same bounding boxes as 0° and 90°.
    """
    w, h = item_footprint
    cw, ch = container_footprint
    return (w <= cw and h <= ch) or (h <= cw and w <= ch)


def has_weight_capacity(
    max_weight: Optional[float], current_weight: float, incoming_weight: float
) -> bool:
    """max_weight None means unlimited."""
    if max_weight is None:
        return True
    return current_weight + incoming_weight <= max_weight


def item_total_weight(instance: ItemInstance, get_definition: DefinitionLookup) -> float:
    """Own weight × quantity plus everything stowed inside, recursively.

    An instance whose definition is missing weighs nothing, and neither does
    anything inside it.
    """
    definition = get_definition(instance.definition_id)
    if definition is None:
        logger.warning("Item definition not found: %s", instance.definition_id)
        return 0.0

    weight = definition.weight * instance.quantity
    for contained in instance.contained_items:
        weight += item_total_weight(contained, get_definition)
    return weight


def total_weight(
    instances: Iterable[ItemInstance], get_definition: DefinitionLookup
) -> float:
    return sum(item_total_weight(inst, get_definition) for inst in instances)


def can_stow(
    item: ItemInstance,
    host: ItemInstance,
    get_definition: DefinitionLookup,
) -> Optional[str]:
    """Check whether `item` may go inside `host`.

    Returns None when allowed, otherwise a short reason:
    "unknown_definition" | "not_a_container" | "too_large" | "too_heavy".
    """
    item_def = get_definition(item.definition_id)
    host_def = get_definition(host.definition_id)
    if item_def is None or host_def is None:
        return "unknown_definition"

    interior = host_def.interior
    if interior is None:
        return "not_a_container"
    if not fits_in_container(item_def.footprint, interior):
        return "too_large"

    current = total_weight(host.contained_items, get_definition)
    incoming = item_total_weight(item, get_definition)
    if not has_weight_capacity(host_def.container_max_weight, current, incoming):
        return "too_heavy"
    return None
