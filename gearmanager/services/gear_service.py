"""Gear Service - character store, locking, EventBus notification

Service → Core allowed. All inventory changes go through core.character.mutations;
this layer adds lookup, serialization of concurrent writers, and events.
"""

import json
import threading
import uuid
from pathlib import Path
from typing import Callable, Optional

from gearmanager.core.character import mutations
from gearmanager.core.character.encumbrance import (
    EncumbranceInfo,
    encumbrance_percentage,
)
from gearmanager.core.character.inspection import (
    ItemInspection,
    armor_coverage,
    inspect_item,
)
from gearmanager.core.character.models import Character
from gearmanager.core.character.mutations import DEFAULT_POLICY, MutationPolicy
from gearmanager.core.character.stats import (
    carried_weight,
    effective_dodge_of,
    effective_move_of,
    encumbrance_of,
)
from gearmanager.core.event_bus import EventBus, GameEvent
from gearmanager.core.event_types import EventTypes
from gearmanager.core.grid.placement import Overlap, PlacementResult, find_overlaps
from gearmanager.core.item.models import HitLocation, ItemDefinition, ItemInstance
from gearmanager.core.item.registry import DefinitionRegistry
from gearmanager.core.logging import get_logger
from gearmanager.core.outcomes import MutationResult, ReasonCode

logger = get_logger(__name__)

SOURCE = "gear_service"
CANDIDATE_ID = "__candidate__"


class CharacterNotFoundError(KeyError):
    pass


class GearService:
    """Character inventory operations + derived stats"""

    def __init__(
        self,
        event_bus: EventBus,
        registry: DefinitionRegistry,
        policy: MutationPolicy = DEFAULT_POLICY,
    ):
        self._bus = event_bus
        self._registry = registry
        self._policy = policy
        self._characters: dict[str, Character] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._store_lock = threading.Lock()
        self._bus_lock = threading.Lock()

    @property
    def policy(self) -> MutationPolicy:
        return self._policy

    # === character store ===

    def register_character(self, character: Character) -> None:
        """Add a character. Its tree must pass `check_integrity` and its
        containers must already satisfy the grid invariant.

        Raises ValueError otherwise.
        """
        character.check_integrity()
        for container in character.containers:
            overlaps = find_overlaps(
                container.items,
                self._registry.get,
                container.grid_width,
                container.grid_height,
            )
            if overlaps:
                raise ValueError(
                    f"Container {container.container_id} violates placement: {overlaps}"
                )

        with self._store_lock:
            if character.character_id in self._characters:
                logger.warning("Replacing character: %s", character.character_id)
            self._characters[character.character_id] = character
            self._locks.setdefault(character.character_id, threading.RLock())
        logger.info(
            "Registered character %s (%d containers)",
            character.character_id,
            len(character.containers),
        )

    def load_character_from_json(self, path: str | Path) -> Character:
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            character = Character.from_dict(json.load(f))
        self.register_character(character)
        return character

    def get_character(self, character_id: str) -> Character:
        character = self._characters.get(character_id)
        if character is None:
            raise CharacterNotFoundError(character_id)
        return character

    def list_characters(self) -> list[Character]:
        return list(self._characters.values())

    def get_definition(self, definition_id: str) -> Optional[ItemDefinition]:
        return self._registry.get(definition_id)

    def _lock(self, character_id: str) -> threading.RLock:
        self.get_character(character_id)
        return self._locks[character_id]

    def locked(self, character_id: str) -> threading.RLock:
        """Hold this while reading several things that must agree with each other."""
        return self._lock(character_id)

    # === read ===

    def validate_placement(
        self,
        character_id: str,
        container_id: str,
        x: int,
        y: int,
        rotation: int,
        item_id: Optional[str] = None,
        definition_id: Optional[str] = None,
    ) -> PlacementResult:
        """Preview for an owned item (item_id) or a catalog entry (definition_id)."""
        with self._lock(character_id):
            character = self.get_character(character_id)
            if item_id is not None:
                candidate = character.find_item(item_id)
                if candidate is None:
                    return PlacementResult(can_place=False, reason=ReasonCode.UNKNOWN_ITEM)
            elif definition_id is not None:
                candidate = ItemInstance(instance_id=CANDIDATE_ID, definition_id=definition_id)
            else:
                raise ValueError("item_id or definition_id is required")
            return mutations.validate_placement(
                character, candidate, container_id, x, y, rotation, self._registry.get
            )

    def get_total_weight(self, character_id: str) -> float:
        with self._lock(character_id):
            return carried_weight(self.get_character(character_id), self._registry.get)

    def get_encumbrance(self, character_id: str) -> EncumbranceInfo:
        with self._lock(character_id):
            return encumbrance_of(self.get_character(character_id), self._registry.get)

    def get_effective_move(self, character_id: str) -> int:
        with self._lock(character_id):
            return effective_move_of(self.get_character(character_id), self._registry.get)

    def get_effective_dodge(self, character_id: str) -> int:
        with self._lock(character_id):
            return effective_dodge_of(self.get_character(character_id), self._registry.get)

    def get_encumbrance_summary(self, character_id: str) -> dict:
        """Everything the encumbrance display needs, read under one lock."""
        with self._lock(character_id):
            character = self.get_character(character_id)
            weight = carried_weight(character, self._registry.get)
            info = encumbrance_of(character, self._registry.get)
            return {
                "total_weight": weight,
                "basic_lift": character.basic_lift,
                "encumbrance": info,
                "percentage": encumbrance_percentage(weight, character.strength),
                "effective_move": effective_move_of(character, self._registry.get),
                "effective_dodge": effective_dodge_of(character, self._registry.get),
            }

    def inspect_item(self, character_id: str, item_id: str) -> Optional[ItemInspection]:
        with self._lock(character_id):
            return inspect_item(
                self.get_character(character_id), item_id, self._registry.get
            )

    def get_armor_coverage(self, character_id: str) -> dict[HitLocation, int]:
        with self._lock(character_id):
            return armor_coverage(self.get_character(character_id), self._registry.get)

    def verify(self, character_id: str) -> dict[str, list[Overlap]]:
        """Grid invariant violations per container; empty lists when healthy."""
        with self._lock(character_id):
            character = self.get_character(character_id)
            return {
                c.container_id: find_overlaps(
                    c.items, self._registry.get, c.grid_width, c.grid_height
                )
                for c in character.containers
            }

    # === mutations ===

    def _commit(
        self,
        character_id: str,
        event_type: str,
        data: dict,
        operation: Callable[[Character], MutationResult],
    ) -> MutationResult:
        """Run one mutation under the character lock, then publish.

        Events go out after the lock is released so listeners may read the
        character again.
        """
        with self._lock(character_id):
            character = self.get_character(character_id)
            before = encumbrance_of(character, self._registry.get)
            result = operation(character)
            after = encumbrance_of(character, self._registry.get) if result.success else before

        if not result.success:
            logger.debug(
                "%s rejected for %s: %s %s",
                event_type,
                character_id,
                result.reason.value,
                result.message,
            )
            return result

        with self._bus_lock, self._bus.chain():
            self._bus.emit(
                GameEvent(
                    event_type=event_type,
                    data={"character_id": character_id, **data},
                    source=SOURCE,
                )
            )
            if after.level != before.level:
                logger.info(
                    "Encumbrance %s: %s → %s",
                    character_id,
                    before.level.value,
                    after.level.value,
                )
                self._bus.emit(
                    GameEvent(
                        event_type=EventTypes.ENCUMBRANCE_CHANGED,
                        data={
                            "character_id": character_id,
                            "from_level": before.level.value,
                            "to_level": after.level.value,
                        },
                        source=SOURCE,
                    )
                )
        return result

    def add_item(
        self,
        character_id: str,
        definition_id: str,
        container_id: str,
        x: int,
        y: int,
        rotation: int = 0,
        quantity: int = 1,
    ) -> tuple[MutationResult, Optional[str]]:
        """Create a new instance from the catalog onto a grid.

        Returns (result, instance_id); instance_id is None on rejection.
        """
        if quantity < 1:
            raise ValueError(f"Quantity must be positive: {quantity}")
        instance = ItemInstance(
            instance_id=str(uuid.uuid4()),
            definition_id=definition_id,
            quantity=quantity,
        )
        result = self._commit(
            character_id,
            EventTypes.ITEM_ADDED,
            {
                "item_id": instance.instance_id,
                "definition_id": definition_id,
                "container_id": container_id,
            },
            lambda c: mutations.add_item(
                c, instance, container_id, x, y, rotation, self._registry.get
            ),
        )
        return result, instance.instance_id if result.success else None

    def remove_item(self, character_id: str, item_id: str) -> MutationResult:
        return self._commit(
            character_id,
            EventTypes.ITEM_REMOVED,
            {"item_id": item_id},
            lambda c: mutations.remove_item(c, item_id),
        )

    def move(
        self,
        character_id: str,
        item_id: str,
        container_id: str,
        x: int,
        y: int,
        rotation: int = 0,
    ) -> MutationResult:
        return self._commit(
            character_id,
            EventTypes.ITEM_MOVED,
            {"item_id": item_id, "container_id": container_id, "x": x, "y": y},
            lambda c: mutations.move(
                c, item_id, container_id, x, y, rotation, self._registry.get
            ),
        )

    def rotate(self, character_id: str, item_id: str, rotation: int) -> MutationResult:
        return self._commit(
            character_id,
            EventTypes.ITEM_ROTATED,
            {"item_id": item_id, "rotation": rotation},
            lambda c: mutations.rotate(
                c, item_id, rotation, self._registry.get, self._policy
            ),
        )

    def stow(self, character_id: str, item_id: str, host_id: str) -> MutationResult:
        return self._commit(
            character_id,
            EventTypes.ITEM_STOWED,
            {"item_id": item_id, "host_id": host_id},
            lambda c: mutations.stow(c, item_id, host_id, self._registry.get),
        )

    def equip(
        self, character_id: str, item_id: str, location: HitLocation
    ) -> MutationResult:
        return self._commit(
            character_id,
            EventTypes.ITEM_EQUIPPED,
            {"item_id": item_id, "location": location.value},
            lambda c: mutations.equip(
                c, item_id, location, self._registry.get, self._policy
            ),
        )

    def unequip(self, character_id: str, location: HitLocation) -> MutationResult:
        return self._commit(
            character_id,
            EventTypes.ITEM_UNEQUIPPED,
            {"location": location.value},
            lambda c: mutations.unequip(c, location),
        )

    def assign_hotbar(
        self, character_id: str, item_id: str, slot: int
    ) -> MutationResult:
        return self._commit(
            character_id,
            EventTypes.HOTBAR_CHANGED,
            {"item_id": item_id, "slot": slot},
            lambda c: mutations.assign_hotbar(c, item_id, slot),
        )

    def clear_hotbar(self, character_id: str, slot: int) -> MutationResult:
        return self._commit(
            character_id,
            EventTypes.HOTBAR_CHANGED,
            {"item_id": None, "slot": slot},
            lambda c: mutations.clear_hotbar(c, slot),
        )
