"""Item domain models (no I/O)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ItemCategory(str, Enum):
    WEAPON = "Weapon"
    ARMOR = "Armor"
    TOOL = "Tool"
    CONTAINER = "Container"
    AMMUNITION = "Ammunition"
    MEDICAL = "Medical"
    FOOD = "Food"
    ELECTRONICS = "Electronics"
    OTHER = "Other"


class Quality(str, Enum):
    CHEAP = "Cheap"
    GOOD = "Good"
    FINE = "Fine"
    VERY_FINE = "Very Fine"


class HitLocation(str, Enum):
    """Body locations an armor piece can protect."""

    SKULL = "skull"
    EYES = "eyes"
    FACE = "face"
    NECK = "neck"
    TORSO = "torso"
    VITALS = "vitals"
    GROIN = "groin"
    ARMS = "arms"
    HANDS = "hands"
    LEGS = "legs"
    FEET = "feet"


@dataclass(frozen=True)
class WeaponStats:
    damage: str  # "2d+2 cut"
    reach: str = ""  # "1,2"
    parry: str = ""  # "0F"
    bulk: str = ""  # "-4"


@dataclass(frozen=True)
class ItemDefinition:
    """Catalog entry - immutable, shared by every instance that references it."""

    definition_id: str  # "rifle-m4"
    name: str
    category: ItemCategory

    weight: float  # lbs, per unit
    grid_width: int = 1
    grid_height: int = 1

    cost: float = 0.0
    tech_level: Optional[int] = None
    legality_class: Optional[int] = None
    quality: Optional[Quality] = None
    description: str = ""

    # container capability
    is_container: bool = False
    container_width: Optional[int] = None
    container_height: Optional[int] = None
    container_max_weight: Optional[float] = None  # None = unlimited

    # armor capability
    is_armor: bool = False
    damage_resistance: int = 0
    locations: tuple[HitLocation, ...] = ()  # frozen, so tuple

    weapon: Optional[WeaponStats] = None
    notes: str = ""

    @property
    def footprint(self) -> tuple[int, int]:
        return self.grid_width, self.grid_height

    @property
    def interior(self) -> Optional[tuple[int, int]]:
        """Interior extents when this item can hold others, else None."""
        if not self.is_container or not self.container_width or not self.container_height:
            return None
        return self.container_width, self.container_height

    def protects(self, location: HitLocation) -> bool:
        return location in self.locations


@dataclass
class ItemInstance:
    """A concrete item owned by a character. Stores only per-copy state."""

    instance_id: str
    definition_id: str  # ItemDefinition.definition_id
    quantity: int = 1

    # grid origin, only while sitting on a container grid
    grid_x: Optional[int] = None
    grid_y: Optional[int] = None
    rotation: int = 0  # 0 / 90 / 180 / 270

    # tags layered over the placement
    equipped_location: Optional[HitLocation] = None
    hotbar_slot: Optional[int] = None  # 0-9

    contained_items: list[ItemInstance] = field(default_factory=list)
    notes: str = ""

    @property
    def is_placed(self) -> bool:
        return self.grid_x is not None and self.grid_y is not None

    def clear_placement(self) -> None:
        self.grid_x = None
        self.grid_y = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "definition_id": self.definition_id,
            "quantity": self.quantity,
            "grid_x": self.grid_x,
            "grid_y": self.grid_y,
            "rotation": self.rotation,
            "equipped_location": (
                self.equipped_location.value if self.equipped_location else None
            ),
            "hotbar_slot": self.hotbar_slot,
            "contained_items": [c.to_dict() for c in self.contained_items],
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ItemInstance:
        location = data.get("equipped_location")
        return cls(
            instance_id=data["instance_id"],
            definition_id=data["definition_id"],
            quantity=int(data.get("quantity", 1)),
            grid_x=data.get("grid_x"),
            grid_y=data.get("grid_y"),
            rotation=int(data.get("rotation", 0)) % 360,
            equipped_location=HitLocation(location) if location else None,
            hotbar_slot=data.get("hotbar_slot"),
            contained_items=[
                cls.from_dict(c) for c in data.get("contained_items", [])
            ],
            notes=data.get("notes", ""),
        )
