"""Character core - containers, encumbrance, mutation protocol"""

from .encumbrance import (
    EncumbranceInfo,
    EncumbranceLevel,
    basic_lift,
    classify,
    effective_dodge,
    effective_move,
)
from .models import Character, Container, ContainerType
from .mutations import MutationPolicy, RotationPolicy

__all__ = [
    "EncumbranceInfo",
    "EncumbranceLevel",
    "basic_lift",
    "classify",
    "effective_dodge",
    "effective_move",
    "Character",
    "Container",
    "ContainerType",
    "MutationPolicy",
    "RotationPolicy",
]
