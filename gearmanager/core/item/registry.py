"""Item definition catalog - JSON load + dynamic registration"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from .models import HitLocation, ItemCategory, ItemDefinition, Quality, WeaponStats

logger = logging.getLogger(__name__)


def definition_from_dict(raw: dict[str, Any]) -> ItemDefinition:
    """Build an ItemDefinition from one catalog JSON object.

    Raises KeyError / ValueError on missing or malformed fields.
    """
    weapon_raw = raw.get("weapon")
    quality = raw.get("quality")
    return ItemDefinition(
        definition_id=raw["id"],
        name=raw["name"],
        category=ItemCategory(raw.get("category", ItemCategory.OTHER.value)),
        weight=float(raw["weight"]),
        grid_width=int(raw.get("grid_width", 1)),
        grid_height=int(raw.get("grid_height", 1)),
        cost=float(raw.get("cost", 0)),
        tech_level=raw.get("tl"),
        legality_class=raw.get("lc"),
        quality=Quality(quality) if quality else None,
        description=raw.get("description", ""),
        is_container=bool(raw.get("is_container", False)),
        container_width=raw.get("container_width"),
        container_height=raw.get("container_height"),
        container_max_weight=raw.get("container_max_weight"),
        is_armor=bool(raw.get("is_armor", False)),
        damage_resistance=int(raw.get("dr", 0)),
        locations=tuple(HitLocation(loc) for loc in raw.get("locations", [])),
        weapon=WeaponStats(**weapon_raw) if weapon_raw else None,
        notes=raw.get("notes", ""),
    )


class DefinitionRegistry:
    """
    Process-wide item catalog.
    Loaded once from JSON; read-only afterwards apart from explicit register().
    """

    def __init__(self) -> None:
        self._definitions: dict[str, ItemDefinition] = {}

    def load_from_json(self, path: str | Path) -> int:
        """Load a catalog JSON array. Returns the number of definitions loaded.

        Malformed entries are skipped with a warning.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw_list: list[dict] = json.load(f)

        count = 0
        for raw in raw_list:
            try:
                definition = definition_from_dict(raw)
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to load item definition: %s - %s", raw.get("id", "?"), e
                )
                continue
            self._definitions[definition.definition_id] = definition
            count += 1

        logger.info("Loaded %d item definitions from %s", count, path)
        return count

    def register(self, definition: ItemDefinition) -> None:
        """Add one definition. An existing id is overwritten with a warning."""
        if definition.definition_id in self._definitions:
            logger.warning(
                "Overwriting existing item definition: %s", definition.definition_id
            )
        self._definitions[definition.definition_id] = definition

    def get(self, definition_id: str) -> Optional[ItemDefinition]:
        return self._definitions.get(definition_id)

    def get_all(self) -> list[ItemDefinition]:
        return list(self._definitions.values())

    def search_by_category(self, category: ItemCategory) -> list[ItemDefinition]:
        return [d for d in self._definitions.values() if d.category == category]

    def count(self) -> int:
        return len(self._definitions)
