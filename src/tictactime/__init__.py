"""Tic-Tac-Time package exposing the 4D game engine and its computer opponent."""

import logging

from .ai import AIPlayer, Difficulty, find_winning_move, select_move
from .config import Settings, configure_logging, load_settings
from .errors import (
    CellOccupiedError,
    GameOverError,
    InvalidPositionError,
    InvalidTimeSliceError,
    MoveError,
)
from .game import (
    DRAW,
    FUTURE,
    PAST,
    PRESENT,
    GameMode,
    GameSnapshot,
    MoveResult,
    TicTacTimeGame,
    WinResult,
    new_game,
    win_lines,
)
from .lines import LineKind, line_kind

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AIPlayer",
    "CellOccupiedError",
    "DRAW",
    "Difficulty",
    "FUTURE",
    "GameMode",
    "GameOverError",
    "GameSnapshot",
    "InvalidPositionError",
    "InvalidTimeSliceError",
    "LineKind",
    "MoveError",
    "MoveResult",
    "PAST",
    "PRESENT",
    "Settings",
    "TicTacTimeGame",
    "WinResult",
    "configure_logging",
    "find_winning_move",
    "line_kind",
    "load_settings",
    "new_game",
    "select_move",
    "win_lines",
]
