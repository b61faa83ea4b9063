"""Core rules and state snapshots for Tic-Tac-Time (4D tic-tac-toe)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import (
    CellOccupiedError,
    GameOverError,
    InvalidPositionError,
    InvalidTimeSliceError,
    MoveError,
)
from .lines import (
    GRID_SIZE,
    Coord,
    Line,
    LineKind,
    catalogue,
    line_kind,
    lines_through,
)

logger = logging.getLogger(__name__)

Player = str  # "X" or "O"
Cell = Optional[Player]  # None for empty
Board = List[List[List[List[Cell]]]]  # board[t][z][y][x]

PLAYERS = ("X", "O")
DRAW = "draw"

# Slice names in time mode
PAST, PRESENT, FUTURE = 0, 1, 2


class GameMode(str, Enum):
    NORMAL = "normal"
    TIME = "time"

    @property
    def time_slices(self) -> int:
        return 3 if self is GameMode.TIME else 1


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


def empty_board(time_slices: int) -> Board:
    return [
        [[[None] * GRID_SIZE for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]
        for _ in range(time_slices)
    ]


def copy_board(board: Board) -> Board:
    return [[[row.copy() for row in layer] for layer in cube] for cube in board]


def win_lines(mode: Union[GameMode, str]) -> Tuple[Line, ...]:
    """Every winning line for ``mode``, in the order the engine scans them."""

    return catalogue(GameMode(mode).time_slices)


def line_winner(board: Board, line: Line) -> Optional[Player]:
    # Catalogue lines are already known to lie on the board
    (ax, ay, az, at), (bx, by, bz, bt), (cx, cy, cz, ct) = line
    v = board[at][az][ay][ax]
    if v is not None and v == board[bt][bz][by][bx] == board[ct][cz][cy][cx]:
        return v
    return None


def find_win(board: Board, time_slices: int) -> "WinResult":
    """First completed line on ``board`` in catalogue order."""

    for line in catalogue(time_slices):
        winner = line_winner(board, line)
        if winner:
            return WinResult(winner=winner, line=line)
    return WinResult()


@dataclass(frozen=True)
class WinResult:
    winner: Optional[Player] = None
    line: Optional[Line] = None

    @property
    def kind(self) -> Optional[LineKind]:
        """Whether the line runs in space, across time, or across both."""
        return line_kind(self.line) if self.line else None


@dataclass(frozen=True)
class MoveResult:
    """Outcome of ``make_move``; inspect ``success`` before trusting the board."""

    success: bool
    error: Optional[MoveError] = None
    winner: Optional[str] = None  # "X", "O" or "draw"
    win_line: Optional[Line] = None

    @property
    def win_kind(self) -> Optional[LineKind]:
        return line_kind(self.win_line) if self.win_line else None


# ---------- Snapshot ----------


CellSymbol = Optional[Literal["X", "O"]]


class GameSnapshot(BaseModel):
    """Structural snapshot of a game, sufficient to rebuild it exactly."""

    model_config = ConfigDict(populate_by_name=True)

    mode: GameMode
    board: List[List[List[List[CellSymbol]]]]
    current_player: Literal["X", "O"] = Field(alias="currentPlayer")
    current_time: int = Field(alias="currentTime", ge=0)
    winner: Optional[Literal["X", "O", "draw"]] = None
    game_over: bool = Field(default=False, alias="gameOver")

    @model_validator(mode="after")
    def check_consistency(self) -> "GameSnapshot":
        slices = self.mode.time_slices
        well_formed = len(self.board) == slices and all(
            len(cube) == GRID_SIZE
            and all(
                len(layer) == GRID_SIZE
                and all(len(row) == GRID_SIZE for row in layer)
                for layer in cube
            )
            for cube in self.board
        )
        if not well_formed:
            raise ValueError(f"Board shape does not match {self.mode.value} mode")
        if self.current_time >= slices:
            raise ValueError(f"Invalid time slice: {self.current_time}")
        if self.game_over != (self.winner is not None):
            raise ValueError("gameOver must be set exactly when there is a winner")
        if self.winner is None and find_win(self.board, slices).winner:
            raise ValueError("Board holds a completed line but no winner is set")
        return self


# ---------- Game ----------


@dataclass
class TicTacTimeGame:
    mode: GameMode = GameMode.NORMAL
    board: Board = field(default=None)  # type: ignore[assignment]
    current_player: Player = "X"
    # None means "start in the Present" (slice 0 in normal mode)
    current_time: Optional[int] = None
    winner: Optional[str] = None
    game_over: bool = False

    def __post_init__(self) -> None:
        self.mode = GameMode(self.mode)
        if self.board is None:
            self.board = empty_board(self.time_slices)
        if self.current_time is None:
            self.current_time = PRESENT if self.mode is GameMode.TIME else 0

    @classmethod
    def new(cls, mode: Union[GameMode, str] = GameMode.NORMAL) -> "TicTacTimeGame":
        return cls(mode=GameMode(mode))

    @property
    def time_slices(self) -> int:
        return self.mode.time_slices

    # ---- API used by callers & AI ----

    def cell(self, x: int, y: int, z: int, t: int) -> Cell:
        return self.board[t][z][y][x]

    def empty_cells(self) -> List[Coord]:
        """All empty cells across every slice, scanned t, z, y, x."""

        moves: List[Coord] = []
        for t, cube in enumerate(self.board):
            for z, layer in enumerate(cube):
                for y, row in enumerate(layer):
                    for x, c in enumerate(row):
                        if c is None:
                            moves.append((x, y, z, t))
        return moves

    def is_full(self) -> bool:
        return all(
            c is not None
            for cube in self.board
            for layer in cube
            for row in layer
            for c in row
        )

    def make_move(
        self, x: int, y: int, z: int, time_slice: Optional[int] = None
    ) -> MoveResult:
        """Place the current player's mark at (x, y, z) in ``time_slice``.

        ``time_slice`` defaults to the slice currently in view. Refused moves
        come back as a failed result and leave the game untouched.
        """
        t = self.current_time if time_slice is None else time_slice

        error = self._validate(x, y, z, t)
        if error is not None:
            logger.debug("Rejected move %s: %s", (x, y, z, t), error)
            return MoveResult(success=False, error=error)

        player = self.current_player
        self.board[t][z][y][x] = player

        if self.mode is GameMode.TIME and t < self.current_time:
            self._resolve_paradox(t)

        result = self.check_win()
        if result.winner:
            self.winner = result.winner
            self.game_over = True
            logger.info("%s wins along %s", result.winner, result.line)
            return MoveResult(success=True, winner=result.winner, win_line=result.line)

        if self.check_draw():
            self.winner = DRAW
            self.game_over = True
            logger.info("Game drawn")
            return MoveResult(success=True, winner=DRAW)

        self.current_player = other_player(player)
        return MoveResult(success=True)

    def play_move(
        self, x: int, y: int, z: int, time_slice: Optional[int] = None
    ) -> MoveResult:
        """Like ``make_move`` but raises the ``MoveError`` on refusal."""
        result = self.make_move(x, y, z, time_slice)
        if result.error is not None:
            raise result.error
        return result

    def check_win(self) -> WinResult:
        return find_win(self.board, self.time_slices)

    def winner_through(self, x: int, y: int, z: int, t: int) -> Optional[Player]:
        """Winner of any line passing through the given cell, if there is one."""
        for line in lines_through(self.time_slices).get((x, y, z, t), ()):
            winner = self._line_winner(line)
            if winner:
                return winner
        return None

    def check_draw(self) -> bool:
        return self.is_full()

    def change_time(self, direction: int) -> bool:
        """Step the viewed slice by ``direction``; returns whether it moved."""
        new_time = self.current_time + direction
        if 0 <= new_time < self.time_slices:
            self.current_time = new_time
            return True
        return False

    def set_time(self, time_slice: int) -> None:
        if not 0 <= time_slice < self.time_slices:
            raise InvalidTimeSliceError(time_slice)
        self.current_time = time_slice

    def forfeit(self, player: Optional[Player] = None) -> MoveResult:
        """End the game in favour of ``player``'s opponent (timeout or resignation)."""
        if self.game_over:
            raise GameOverError()
        loser = self.current_player if player is None else player
        if loser not in PLAYERS:
            raise ValueError(f"Unknown player: {loser!r}")
        self.winner = other_player(loser)
        self.game_over = True
        logger.info("%s forfeits, %s wins", loser, self.winner)
        return MoveResult(success=True, winner=self.winner)

    def clone(self) -> "TicTacTimeGame":
        return TicTacTimeGame(
            mode=self.mode,
            board=copy_board(self.board),
            current_player=self.current_player,
            current_time=self.current_time,
            winner=self.winner,
            game_over=self.game_over,
        )

    # ---- snapshots ----

    def serialize(self) -> GameSnapshot:
        return GameSnapshot(
            mode=self.mode,
            board=copy_board(self.board),
            current_player=self.current_player,
            current_time=self.current_time,
            winner=self.winner,
            game_over=self.game_over,
        )

    @classmethod
    def deserialize(
        cls, data: Union[GameSnapshot, Mapping[str, Any], str, bytes]
    ) -> "TicTacTimeGame":
        if isinstance(data, GameSnapshot):
            snapshot = data
        elif isinstance(data, (str, bytes)):
            snapshot = GameSnapshot.model_validate_json(data)
        else:
            snapshot = GameSnapshot.model_validate(data)
        return cls(
            mode=snapshot.mode,
            board=copy_board(snapshot.board),
            current_player=snapshot.current_player,
            current_time=snapshot.current_time,
            winner=snapshot.winner,
            game_over=snapshot.game_over,
        )

    def to_json(self) -> str:
        return self.serialize().model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "TicTacTimeGame":
        return cls.deserialize(GameSnapshot.model_validate_json(data))

    # ---- helpers ----

    def _validate(self, x: int, y: int, z: int, t: int) -> Optional[MoveError]:
        if self.game_over:
            return GameOverError()
        if not 0 <= t < self.time_slices:
            return InvalidTimeSliceError(t)
        if not all(0 <= v < GRID_SIZE for v in (x, y, z)):
            return InvalidPositionError(x, y, z)
        occupant = self.board[t][z][y][x]
        if occupant is not None:
            return CellOccupiedError(occupant)
        return None

    def _line_winner(self, line: Line) -> Optional[Player]:
        return line_winner(self.board, line)

    def _resolve_paradox(self, changed_time: int) -> None:
        # Later slices keep their marks; editing the past has no ripple effect.
        logger.debug(
            "Move in slice %d behind present %d; later slices unchanged",
            changed_time,
            self.current_time,
        )


def new_game(mode: Union[GameMode, str] = GameMode.NORMAL) -> TicTacTimeGame:
    return TicTacTimeGame.new(mode)
