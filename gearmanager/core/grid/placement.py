"""Placement validator - bounds + pairwise occupancy against a container's contents.

Nothing here mutates; committing a placement is the mutation layer's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from gearmanager.core.item.models import ItemDefinition, ItemInstance
from gearmanager.core.outcomes import ReasonCode

from .geometry import Cell, occupied_cells, within_bounds

DefinitionLookup = Callable[[str], Optional[ItemDefinition]]


@dataclass(frozen=True)
class GridRegion:
    """The whole area an item sits on: origin, native footprint, rotation."""

    item_id: str
    x: int
    y: int
    width: int
    height: int
    rotation: int

    @property
    def cells(self) -> set[Cell]:
        return occupied_cells(self.x, self.y, self.width, self.height, self.rotation)


@dataclass(frozen=True)
class PlacementResult:
    can_place: bool
    conflicts: tuple[GridRegion, ...] = field(default_factory=tuple)
    reason: Optional[ReasonCode] = None


@dataclass(frozen=True)
class Overlap:
    """A container invariant violation.

    other_id is None when the item sticks out of the grid instead of
    overlapping a neighbour.
    """

    item_id: str
    other_id: Optional[str]
    cells: frozenset[Cell]


def region_of(
    instance: ItemInstance, get_definition: DefinitionLookup
) -> Optional[GridRegion]:
    """Current grid region of a placed instance, None when unplaced or undefined."""
    if not instance.is_placed:
        return None
    definition = get_definition(instance.definition_id)
    if definition is None:
        return None
    return GridRegion(
        item_id=instance.instance_id,
        x=instance.grid_x,
        y=instance.grid_y,
        width=definition.grid_width,
        height=definition.grid_height,
        rotation=instance.rotation,
    )


def try_place(
    existing: Iterable[ItemInstance],
    candidate: ItemInstance,
    target_x: int,
    target_y: int,
    target_rotation: int,
    container_width: int,
    container_height: int,
    get_definition: DefinitionLookup,
    exclude_instance_id: Optional[str] = None,
) -> PlacementResult:
    """Would `candidate` fit at (target_x, target_y, target_rotation)?

    1. unknown definition  → rejected, no conflicts
    2. off-grid / negative → rejected, no conflicts
    3. every placed instance (except exclude_instance_id) whose cells intersect
       the candidate's is reported as its full region, in iteration order
    """
    definition = get_definition(candidate.definition_id)
    if definition is None:
        return PlacementResult(
            can_place=False, reason=ReasonCode.UNKNOWN_ITEM_DEFINITION
        )

    if not within_bounds(
        target_x,
        target_y,
        definition.grid_width,
        definition.grid_height,
        container_width,
        container_height,
        target_rotation,
    ):
        return PlacementResult(can_place=False, reason=ReasonCode.OUT_OF_BOUNDS)

    candidate_cells = occupied_cells(
        target_x,
        target_y,
        definition.grid_width,
        definition.grid_height,
        target_rotation,
    )

    conflicts: list[GridRegion] = []
    for other in existing:
        if exclude_instance_id is not None and other.instance_id == exclude_instance_id:
            continue
        region = region_of(other, get_definition)
        if region is None:
            continue
        if candidate_cells & region.cells:
            conflicts.append(region)

    if conflicts:
        return PlacementResult(
            can_place=False, conflicts=tuple(conflicts), reason=ReasonCode.COLLISION
        )
    return PlacementResult(can_place=True)


def find_overlaps(
    instances: Iterable[ItemInstance],
    get_definition: DefinitionLookup,
    grid_width: int,
    grid_height: int,
) -> list[Overlap]:
    """Every pairwise overlap and every out-of-bounds instance. Empty = invariant holds."""
    overlaps: list[Overlap] = []
    seen: list[GridRegion] = []

    for inst in instances:
        region = region_of(inst, get_definition)
        if region is None:
            continue

        if not within_bounds(
            region.x,
            region.y,
            region.width,
            region.height,
            grid_width,
            grid_height,
            region.rotation,
        ):
            outside = {
                (x, y)
                for x, y in region.cells
                if not (0 <= x < grid_width and 0 <= y < grid_height)
            }
            overlaps.append(Overlap(region.item_id, None, frozenset(outside)))

        cells = region.cells
        for prior in seen:
            shared = cells & prior.cells
            if shared:
                overlaps.append(Overlap(prior.item_id, region.item_id, frozenset(shared)))
        seen.append(region)

    return overlaps
