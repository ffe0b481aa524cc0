"""Derived character statistics - recomputed on every read, never stored"""

from typing import Callable, Optional

from gearmanager.core.item.containment import total_weight
from gearmanager.core.item.models import ItemDefinition

from .encumbrance import EncumbranceInfo, classify, effective_dodge, effective_move
from .models import Character, Container

DefinitionLookup = Callable[[str], Optional[ItemDefinition]]


def container_weight(container: Container, get_definition: DefinitionLookup) -> float:
    return total_weight(container.items, get_definition)


def carried_weight(character: Character, get_definition: DefinitionLookup) -> float:
    return sum(container_weight(c, get_definition) for c in character.containers)


def encumbrance_of(
    character: Character, get_definition: DefinitionLookup
) -> EncumbranceInfo:
    return classify(carried_weight(character, get_definition), character.strength)


def effective_move_of(character: Character, get_definition: DefinitionLookup) -> int:
    return effective_move(character.base_move, encumbrance_of(character, get_definition))


def effective_dodge_of(character: Character, get_definition: DefinitionLookup) -> int:
    return effective_dodge(
        character.dexterity,
        character.health,
        encumbrance_of(character, get_definition),
    )
