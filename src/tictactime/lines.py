"""Catalogue of winning lines on the 3x3x3 cube and across time slices."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

GRID_SIZE = 3
LINE_LENGTH = 3

Coord = Tuple[int, int, int, int]  # (x, y, z, t)
Line = Tuple[Coord, ...]
Vector = Tuple[int, int, int, int]

# (start, step) pairs; the slice index of the start is filled in per slice.
SPACE_DIAGONALS: Tuple[Tuple[Tuple[int, int, int], Tuple[int, int, int]], ...] = (
    ((0, 0, 0), (1, 1, 1)),
    ((2, 0, 0), (-1, 1, 1)),
    ((0, 2, 0), (1, -1, 1)),
    ((0, 0, 2), (1, 1, -1)),
)

# Diagonals through the hypercube: every spatial corner walked while t advances.
SPACETIME_DIAGONALS: Tuple[Tuple[Tuple[int, int, int], Tuple[int, int, int]], ...] = (
    ((0, 0, 0), (1, 1, 1)),
    ((2, 0, 0), (-1, 1, 1)),
    ((0, 2, 0), (1, -1, 1)),
    ((0, 0, 2), (1, 1, -1)),
    ((2, 2, 0), (-1, -1, 1)),
    ((2, 0, 2), (-1, 1, -1)),
    ((0, 2, 2), (1, -1, -1)),
    ((2, 2, 2), (-1, -1, -1)),
)


def _in_bounds(coord: Coord, time_slices: int) -> bool:
    x, y, z, t = coord
    return (
        0 <= x < GRID_SIZE
        and 0 <= y < GRID_SIZE
        and 0 <= z < GRID_SIZE
        and 0 <= t < time_slices
    )


def walk(start: Coord, step: Vector, time_slices: int) -> Optional[Line]:
    """Walk ``LINE_LENGTH`` cells from ``start`` by ``step``.

    Returns ``None`` when any cell of the walk leaves the board.
    """

    if not any(step):
        raise ValueError("Step vector must not be zero")
    cells = []
    for i in range(LINE_LENGTH):
        coord = tuple(s + i * d for s, d in zip(start, step))
        if not _in_bounds(coord, time_slices):  # type: ignore[arg-type]
            return None
        cells.append(coord)
    return tuple(cells)  # type: ignore[return-value]


def _plane_diagonals(t: int, dt: int) -> List[Tuple[Coord, Vector]]:
    directions: List[Tuple[Coord, Vector]] = []
    # XY plane
    for z in range(GRID_SIZE):
        directions.append(((0, 0, z, t), (1, 1, 0, dt)))
        directions.append(((2, 0, z, t), (-1, 1, 0, dt)))
    # XZ plane
    for y in range(GRID_SIZE):
        directions.append(((0, y, 0, t), (1, 0, 1, dt)))
        directions.append(((2, y, 0, t), (-1, 0, 1, dt)))
    # YZ plane
    for x in range(GRID_SIZE):
        directions.append(((x, 0, 0, t), (0, 1, 1, dt)))
        directions.append(((x, 2, 0, t), (0, -1, 1, dt)))
    return directions


def spatial_directions(t: int) -> List[Tuple[Coord, Vector]]:
    """All 49 lines of the cube held at slice ``t``."""

    size = GRID_SIZE
    directions: List[Tuple[Coord, Vector]] = []
    for z in range(size):
        for y in range(size):
            directions.append(((0, y, z, t), (1, 0, 0, 0)))
    for z in range(size):
        for x in range(size):
            directions.append(((x, 0, z, t), (0, 1, 0, 0)))
    for y in range(size):
        for x in range(size):
            directions.append(((x, y, 0, t), (0, 0, 1, 0)))
    for (sx, sy, sz), (dx, dy, dz) in SPACE_DIAGONALS:
        directions.append(((sx, sy, sz, t), (dx, dy, dz, 0)))
    directions.extend(_plane_diagonals(t, 0))
    return directions


def temporal_directions() -> List[Tuple[Coord, Vector]]:
    """Lines that keep (x, y, z) fixed and run Past -> Present -> Future."""

    return [
        ((x, y, z, 0), (0, 0, 0, 1))
        for z in range(GRID_SIZE)
        for y in range(GRID_SIZE)
        for x in range(GRID_SIZE)
    ]


def spacetime_directions() -> List[Tuple[Coord, Vector]]:
    """Diagonals that advance one slice per spatial step, anchored at t=0."""

    directions: List[Tuple[Coord, Vector]] = [
        ((sx, sy, sz, 0), (dx, dy, dz, 1))
        for (sx, sy, sz), (dx, dy, dz) in SPACETIME_DIAGONALS
    ]
    directions.extend(_plane_diagonals(0, 1))
    return directions


@lru_cache(maxsize=None)
def catalogue(time_slices: int) -> Tuple[Line, ...]:
    """Every winning line for a board with ``time_slices`` slices, in scan order."""

    if time_slices == 1:
        directions = spatial_directions(0)
    else:
        directions = []
        for t in range(time_slices):
            directions.extend(spatial_directions(t))
        directions.extend(temporal_directions())
        directions.extend(spacetime_directions())

    lines: List[Line] = []
    for start, step in directions:
        line = walk(start, step, time_slices)
        if line is not None:
            lines.append(line)
    return tuple(lines)


@lru_cache(maxsize=None)
def lines_through(time_slices: int) -> Dict[Coord, Tuple[Line, ...]]:
    """Index of catalogue lines by the cells they pass through."""

    index: Dict[Coord, List[Line]] = {}
    for line in catalogue(time_slices):
        for coord in line:
            index.setdefault(coord, []).append(line)
    return {coord: tuple(lines) for coord, lines in index.items()}


class LineKind(str, Enum):
    SPACE = "space"
    TIME = "time"
    SPACETIME = "spacetime"


def line_kind(line: Line) -> LineKind:
    """Classify a line by the step between its first two cells."""

    (x0, y0, z0, t0), (x1, y1, z1, t1) = line[0], line[1]
    spatial = any(b != a for a, b in ((x0, x1), (y0, y1), (z0, z1)))
    if t1 == t0:
        return LineKind.SPACE
    return LineKind.SPACETIME if spatial else LineKind.TIME
