"""Move rejection reasons reported by the game engine."""

from __future__ import annotations

from typing import Tuple


class MoveError(ValueError):
    """Base class for a move the engine refused to apply."""


class GameOverError(MoveError):
    def __init__(self) -> None:
        super().__init__("Game is over")


class InvalidTimeSliceError(MoveError):
    def __init__(self, time_slice: int) -> None:
        super().__init__(f"Invalid time slice: {time_slice}")
        self.time_slice = time_slice


class InvalidPositionError(MoveError):
    def __init__(self, x: int, y: int, z: int) -> None:
        super().__init__(f"Invalid position: {x},{y},{z}")
        self.position: Tuple[int, int, int] = (x, y, z)


class CellOccupiedError(MoveError):
    def __init__(self, occupant: str) -> None:
        super().__init__(f"Cell already occupied by {occupant}")
        self.occupant = occupant
