"""Typed outcomes for placement and mutation attempts.

Spatial, capacity and equip failures are reported as values so the caller can
present them; none of them is an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from gearmanager.core.grid.placement import GridRegion


class ReasonCode(str, Enum):
    UNKNOWN_ITEM_DEFINITION = "unknown_item_definition"
    OUT_OF_BOUNDS = "out_of_bounds"
    COLLISION = "collision"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INVALID_EQUIP_TARGET = "invalid_equip_target"

    # lookup / argument failures
    UNKNOWN_ITEM = "unknown_item"
    UNKNOWN_CONTAINER = "unknown_container"
    INVALID_ROTATION = "invalid_rotation"
    INVALID_HOTBAR_SLOT = "invalid_hotbar_slot"
    NOT_A_CONTAINER = "not_a_container"
    DUPLICATE_ITEM = "duplicate_item"


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one mutation. On failure the data model is untouched."""

    success: bool
    reason: Optional[ReasonCode] = None
    message: str = ""
    conflicts: tuple[GridRegion, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, message: str = "") -> MutationResult:
        return cls(success=True, message=message)

    @classmethod
    def fail(
        cls,
        reason: ReasonCode,
        message: str = "",
        conflicts: tuple[GridRegion, ...] = (),
    ) -> MutationResult:
        return cls(success=False, reason=reason, message=message, conflicts=conflicts)
