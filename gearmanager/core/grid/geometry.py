"""Grid geometry - rotated footprints and occupied cells.

Only axis-aligned 90° steps exist. A footprint is (width, height) in cells;
rotating by 90 or 270 swaps the axes, 0 and 180 leave them as they are.
"""

from typing import Literal

Cell = tuple[int, int]

RIGHT_ANGLES = (0, 90, 180, 270)


def normalize_rotation(rotation: int) -> int:
    """Map any angle onto [0, 360)."""
    return rotation % 360


def is_right_angle(rotation: int) -> bool:
    return normalize_rotation(rotation) in RIGHT_ANGLES


def rotated_footprint(width: int, height: int, rotation: int) -> tuple[int, int]:
    if normalize_rotation(rotation) in (90, 270):
        return height, width
    return width, height


def occupied_cells(
    origin_x: int, origin_y: int, width: int, height: int, rotation: int
) -> set[Cell]:
    """Every cell covered by a footprint anchored at its top-left origin."""
    w, h = rotated_footprint(width, height, rotation)
    return {
        (origin_x + dx, origin_y + dy) for dy in range(h) for dx in range(w)
    }


def within_bounds(
    origin_x: int,
    origin_y: int,
    width: int,
    height: int,
    grid_width: int,
    grid_height: int,
    rotation: int,
) -> bool:
    w, h = rotated_footprint(width, height, rotation)
    return (
        origin_x >= 0
        and origin_y >= 0
        and origin_x + w <= grid_width
        and origin_y + h <= grid_height
    )


def rotate_step(rotation: int, direction: Literal["cw", "ccw"] = "cw") -> int:
    """Next 90° step clockwise or counter-clockwise, normalized."""
    if direction == "cw":
        return normalize_rotation(rotation + 90)
    if direction == "ccw":
        return normalize_rotation(rotation - 90)
    raise ValueError(f"Unknown rotation direction: {direction}")


def snap_to_grid(x: float, y: float, cell_size: float) -> Cell:
    """Pixel position → the cell under it."""
    return int(x // cell_size), int(y // cell_size)


def cell_center(grid_x: int, grid_y: int, cell_size: float) -> tuple[float, float]:
    """Cell → pixel position of its centre."""
    return (
        grid_x * cell_size + cell_size / 2,
        grid_y * cell_size + cell_size / 2,
    )
