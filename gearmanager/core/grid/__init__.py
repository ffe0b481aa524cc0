"""Grid placement core - pure Python, no I/O"""

from .geometry import (
    cell_center,
    normalize_rotation,
    occupied_cells,
    rotate_step,
    rotated_footprint,
    snap_to_grid,
    within_bounds,
)
from .placement import GridRegion, Overlap, PlacementResult, find_overlaps, try_place

__all__ = [
    "cell_center",
    "normalize_rotation",
    "occupied_cells",
    "rotate_step",
    "rotated_footprint",
    "snap_to_grid",
    "within_bounds",
    "GridRegion",
    "Overlap",
    "PlacementResult",
    "find_overlaps",
    "try_place",
]
