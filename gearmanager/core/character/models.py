"""Container and character models (no I/O)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from gearmanager.core.grid.geometry import is_right_angle
from gearmanager.core.item.models import HitLocation, ItemInstance

from .encumbrance import base_dodge, basic_lift

HOTBAR_SLOTS = range(10)


class ContainerType(str, Enum):
    PERSON = "person"
    BACKPACK = "backpack"
    VEHICLE = "vehicle"
    LOCKER = "locker"
    OTHER = "other"


@dataclass
class Container:
    """A grid-addressable storage region.

    Invariant: the occupied cells of the placed items are pairwise disjoint
    and inside [0, grid_width) × [0, grid_height).
    """

    container_id: str
    name: str
    grid_width: int
    grid_height: int
    container_type: ContainerType = ContainerType.OTHER
    items: list[ItemInstance] = field(default_factory=list)  # insertion order
    max_weight: Optional[float] = None  # None = unlimited

    def find(self, instance_id: str) -> Optional[ItemInstance]:
        for item in self.items:
            if item.instance_id == instance_id:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "container_id": self.container_id,
            "name": self.name,
            "grid_width": self.grid_width,
            "grid_height": self.grid_height,
            "container_type": self.container_type.value,
            "items": [i.to_dict() for i in self.items],
            "max_weight": self.max_weight,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Container:
        return cls(
            container_id=data["container_id"],
            name=data.get("name", data["container_id"]),
            grid_width=int(data["grid_width"]),
            grid_height=int(data["grid_height"]),
            container_type=ContainerType(data.get("container_type", "other")),
            items=[ItemInstance.from_dict(i) for i in data.get("items", [])],
            max_weight=data.get("max_weight"),
        )


@dataclass
class Character:
    """Owns its containers and its equipment mapping."""

    character_id: str
    name: str

    # base attributes
    strength: int = 10
    dexterity: int = 10
    intelligence: int = 10
    health: int = 10

    containers: list[Container] = field(default_factory=list)
    equipped: dict[HitLocation, str] = field(default_factory=dict)  # location → instance_id

    @property
    def basic_lift(self) -> float:
        return basic_lift(self.strength)

    @property
    def base_move(self) -> int:
        return self.health

    @property
    def base_dodge(self) -> int:
        return base_dodge(self.dexterity, self.health)

    def get_container(self, container_id: str) -> Optional[Container]:
        for container in self.containers:
            if container.container_id == container_id:
                return container
        return None

    def iter_items(self) -> Iterator[tuple[ItemInstance, Optional[ItemInstance], Container]]:
        """Every owned instance as (instance, host item or None, container), depth first."""

        def walk(
            item: ItemInstance, host: Optional[ItemInstance], container: Container
        ) -> Iterator[tuple[ItemInstance, Optional[ItemInstance], Container]]:
            yield item, host, container
            for child in item.contained_items:
                yield from walk(child, item, container)

        for container in self.containers:
            for item in container.items:
                yield from walk(item, None, container)

    def locate(
        self, instance_id: str
    ) -> Optional[tuple[ItemInstance, Optional[ItemInstance], Container]]:
        for entry in self.iter_items():
            if entry[0].instance_id == instance_id:
                return entry
        return None

    def find_item(self, instance_id: str) -> Optional[ItemInstance]:
        entry = self.locate(instance_id)
        return entry[0] if entry else None

    def hotbar(self) -> dict[int, ItemInstance]:
        return {
            item.hotbar_slot: item
            for item, _, _ in self.iter_items()
            if item.hotbar_slot is not None
        }

    def check_integrity(self) -> None:
        """Raise ValueError unless the tree obeys the ownership rules.

        Container and instance ids are unique, each hotbar slot is valid and
        held once, rotations are right angles, and stowed items sit one level
        deep with no grid origin.
        """
        container_ids = [c.container_id for c in self.containers]
        if len(set(container_ids)) != len(container_ids):
            raise ValueError(f"Duplicate container id in {container_ids}")

        seen: set[str] = set()
        slots: dict[int, str] = {}
        for item, host, _ in self.iter_items():
            iid = item.instance_id
            if iid in seen:
                raise ValueError(f"Duplicate item instance: {iid}")
            seen.add(iid)
            if not is_right_angle(item.rotation):
                raise ValueError(
                    f"Rotation of {iid} is not a right angle: {item.rotation}"
                )
            if host is not None and (item.contained_items or item.is_placed):
                raise ValueError(f"Stowed item {iid} must be empty and off the grid")
            slot = item.hotbar_slot
            if slot is None:
                continue
            if slot not in HOTBAR_SLOTS:
                raise ValueError(f"Hotbar slot of {iid} out of range: {slot}")
            if slot in slots:
                raise ValueError(
                    f"Hotbar slot {slot} held by {slots[slot]} and {iid}"
                )
            slots[slot] = iid

    def to_dict(self) -> dict[str, Any]:
        return {
            "character_id": self.character_id,
            "name": self.name,
            "strength": self.strength,
            "dexterity": self.dexterity,
            "intelligence": self.intelligence,
            "health": self.health,
            "containers": [c.to_dict() for c in self.containers],
            "equipped": {loc.value: iid for loc, iid in self.equipped.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Character:
        """The `equipped` mapping wins over per-item tags; tags are rewritten to match.

        Raises ValueError when the data breaks `check_integrity` or names
        equipment the character does not own.
        """
        character = cls(
            character_id=data["character_id"],
            name=data.get("name", data["character_id"]),
            strength=int(data.get("strength", 10)),
            dexterity=int(data.get("dexterity", 10)),
            intelligence=int(data.get("intelligence", 10)),
            health=int(data.get("health", 10)),
            containers=[Container.from_dict(c) for c in data.get("containers", [])],
        )
        character.check_integrity()

        for item, _, _ in character.iter_items():
            item.equipped_location = None
        for loc, iid in data.get("equipped", {}).items():
            item = character.find_item(iid)
            if item is None:
                raise ValueError(f"Equipped item not owned: {iid}")
            if item.equipped_location is not None:
                raise ValueError(f"Item equipped at more than one location: {iid}")
            location = HitLocation(loc)
            character.equipped[location] = iid
            item.equipped_location = location
        return character
