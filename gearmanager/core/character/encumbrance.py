"""Encumbrance engine (GURPS 4e, Basic Set p.17)

Pure functions of carried weight and ST. Nothing is cached.

    BL = ST² / 5

    weight ≤ 1·BL  None         move  0  dodge  0
    weight ≤ 2·BL  Light        move  0  dodge -1
    weight ≤ 3·BL  Medium       move -1  dodge -2
    weight ≤ 6·BL  Heavy        move -2  dodge -3
    otherwise      Extra-Heavy  move -3  dodge -4
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EncumbranceLevel(str, Enum):
    NONE = "None"
    LIGHT = "Light"
    MEDIUM = "Medium"
    HEAVY = "Heavy"
    EXTRA_HEAVY = "Extra-Heavy"


@dataclass(frozen=True)
class EncumbranceInfo:
    level: EncumbranceLevel
    multiplier: float  # BL multiple that bounds this tier
    move_modifier: int
    dodge_modifier: int


# (upper bound as a BL multiple, info); None = unbounded
TIERS: tuple[tuple[Optional[float], EncumbranceInfo], ...] = (
    (1.0, EncumbranceInfo(EncumbranceLevel.NONE, 1.0, 0, 0)),
    (2.0, EncumbranceInfo(EncumbranceLevel.LIGHT, 2.0, 0, -1)),
    (3.0, EncumbranceInfo(EncumbranceLevel.MEDIUM, 3.0, -1, -2)),
    (6.0, EncumbranceInfo(EncumbranceLevel.HEAVY, 6.0, -2, -3)),
    (None, EncumbranceInfo(EncumbranceLevel.EXTRA_HEAVY, 10.0, -3, -4)),
)

METER_MAX_MULTIPLE = 10.0


def basic_lift(strength: float) -> float:
    return (strength * strength) / 5


def classify(carried_weight: float, strength: float) -> EncumbranceInfo:
    """First tier whose upper bound (inclusive) holds the weight."""
    bl = basic_lift(strength)
    for bound, info in TIERS:
        if bound is None or carried_weight <= bl * bound:
            return info
    raise AssertionError("unreachable: last tier is unbounded")


def effective_move(base_move: int, info: EncumbranceInfo) -> int:
    return max(1, base_move + info.move_modifier)


def base_dodge(dexterity: int, health: int) -> int:
    return (dexterity + health) // 4 + 3


def effective_dodge(dexterity: int, health: int, info: EncumbranceInfo) -> int:
    return max(1, base_dodge(dexterity, health) + info.dodge_modifier)


def encumbrance_percentage(carried_weight: float, strength: float) -> float:
    """Fill level of a 0–100 meter whose full scale is 10·BL."""
    max_weight = basic_lift(strength) * METER_MAX_MULTIPLE
    if max_weight <= 0:
        return 100.0
    return min(100.0, carried_weight * 100 / max_weight)


@dataclass(frozen=True)
class MeterSegment:
    level: EncumbranceLevel
    start: float  # percent of meter
    end: float


def meter_segments() -> list[MeterSegment]:
    """Tier bands on the 10·BL meter. Independent of ST since every bound is a BL multiple."""
    segments: list[MeterSegment] = []
    start = 0.0
    for bound, info in TIERS:
        end = 100.0 if bound is None else bound * 100 / METER_MAX_MULTIPLE
        segments.append(MeterSegment(info.level, start, end))
        start = end
    return segments
