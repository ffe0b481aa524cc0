"""Item core - catalog definitions, instances, containment rules"""

from .models import (
    HitLocation,
    ItemCategory,
    ItemDefinition,
    ItemInstance,
    Quality,
    WeaponStats,
)
from .registry import DefinitionRegistry

__all__ = [
    "HitLocation",
    "ItemCategory",
    "ItemDefinition",
    "ItemInstance",
    "Quality",
    "WeaponStats",
    "DefinitionRegistry",
]
