"""Difficulty-tiered computer opponent with alpha-beta minimax for Tic-Tac-Time."""

from __future__ import annotations

import logging
import math
import random
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Union

from .game import PLAYERS, GameMode, Player, TicTacTimeGame, other_player
from .lines import GRID_SIZE, Coord

logger = logging.getLogger(__name__)

CENTER = GRID_SIZE // 2
# (x, y, z), scanned in this order
CORNERS = (
    (0, 0, 0),
    (0, 0, 2),
    (0, 2, 0),
    (0, 2, 2),
    (2, 0, 0),
    (2, 0, 2),
    (2, 2, 0),
    (2, 2, 2),
)
# Time mode has three times the branching factor, so it searches shallower.
SEARCH_DEPTH: Dict[GameMode, int] = {GameMode.NORMAL: 5, GameMode.TIME: 3}
WIN_SCORE = 10


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    IMPOSSIBLE = "impossible"


@contextmanager
def trial_move(game: TicTacTimeGame, move: Coord, player: Player) -> Iterator[None]:
    """Temporarily mark ``move`` for ``player``; the cell is cleared on exit."""

    x, y, z, t = move
    previous_player = game.current_player
    game.board[t][z][y][x] = player
    game.current_player = other_player(player)
    try:
        yield
    finally:
        game.board[t][z][y][x] = None
        game.current_player = previous_player


def find_winning_move(game: TicTacTimeGame, player: Player) -> Optional[Coord]:
    """First empty cell (t, z, y, x order) that completes a line for ``player``."""

    for move in game.empty_cells():
        with trial_move(game, move, player):
            won = game.check_win().winner == player
        if won:
            return move
    return None


@dataclass
class AIPlayer:
    """Computer opponent choosing moves according to its difficulty tier.

      - AIPlayer(player="O", difficulty="hard")
      - select_move(game) -> (x, y, z, t) or None when the board is full

    The adversary only proposes a move; the caller applies it with
    ``game.make_move``.
    """

    player: Player = "O"
    difficulty: Difficulty = Difficulty.MEDIUM
    rng: random.Random = field(default_factory=random.Random, repr=False)
    # Optional latency bound for the impossible tier
    deadline_ms: Optional[float] = None
    nodes_evaluated: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.player not in PLAYERS:
            raise ValueError(f"Unknown player: {self.player!r}")
        self.difficulty = Difficulty(self.difficulty)

    @property
    def opponent(self) -> Player:
        return other_player(self.player)

    # ---- public API ----

    def select_move(self, game: TicTacTimeGame) -> Optional[Coord]:
        if game.game_over or not game.empty_cells():
            return None
        handler = _TIER_HANDLERS[self.difficulty]
        move = handler(self, game)
        logger.debug("%s (%s) selects %s", self.player, self.difficulty.value, move)
        return move

    # ---- tiers ----

    def random_move(self, game: TicTacTimeGame) -> Optional[Coord]:
        moves = game.empty_cells()
        if not moves:
            return None
        return self.rng.choice(moves)

    def mixed_move(self, game: TicTacTimeGame) -> Optional[Coord]:
        if self.rng.random() < 0.5:
            return self.random_move(game)
        return self.smart_move(game)

    def smart_move(self, game: TicTacTimeGame) -> Optional[Coord]:
        """Win, block, center, corner, then random."""
        move = find_winning_move(game, self.player)
        if move is not None:
            return move

        move = find_winning_move(game, self.opponent)
        if move is not None:
            return move

        t = game.current_time
        if game.cell(CENTER, CENTER, CENTER, t) is None:
            return (CENTER, CENTER, CENTER, t)

        for x, y, z in CORNERS:
            if game.cell(x, y, z, t) is None:
                return (x, y, z, t)

        return self.random_move(game)

    def minimax_move(self, game: TicTacTimeGame) -> Optional[Coord]:
        depth = SEARCH_DEPTH[game.mode]
        self.nodes_evaluated = 0
        started = time.monotonic()

        alpha, beta = -math.inf, math.inf
        best_score = -math.inf
        best_move: Optional[Coord] = None

        for move in game.empty_cells():
            if best_move is not None and self._out_of_time(started):
                logger.debug("Search deadline reached; keeping %s", best_move)
                break
            with trial_move(game, move, self.player):
                score = self._minimax(game, move, depth - 1, alpha, beta, False)
            if score > best_score:
                best_score, best_move = score, move
            alpha = max(alpha, best_score)

        logger.debug(
            "Minimax evaluated %d positions. Best move: %s (score: %s)",
            self.nodes_evaluated,
            best_move,
            best_score,
        )
        if best_move is None:
            return self.random_move(game)
        return best_move

    # ---- core search ----

    def _minimax(
        self,
        game: TicTacTimeGame,
        last_move: Coord,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
    ) -> float:
        self.nodes_evaluated += 1

        # Only lines through the last trial mark can have just been completed
        winner = game.winner_through(*last_move)
        if winner == self.player:
            return WIN_SCORE + depth
        if winner == self.opponent:
            return -WIN_SCORE - depth

        moves = game.empty_cells()
        if depth == 0 or not moves:
            return 0

        if maximizing:
            value = -math.inf
            for move in moves:
                with trial_move(game, move, self.player):
                    score = self._minimax(game, move, depth - 1, alpha, beta, False)
                value = max(value, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return value

        value = math.inf
        for move in moves:
            with trial_move(game, move, self.opponent):
                score = self._minimax(game, move, depth - 1, alpha, beta, True)
            value = min(value, score)
            beta = min(beta, score)
            if beta <= alpha:
                break
        return value

    def _out_of_time(self, started: float) -> bool:
        if self.deadline_ms is None:
            return False
        return (time.monotonic() - started) * 1000.0 >= self.deadline_ms


_TIER_HANDLERS: Dict[Difficulty, Callable[[AIPlayer, TicTacTimeGame], Optional[Coord]]] = {
    Difficulty.EASY: AIPlayer.random_move,
    Difficulty.MEDIUM: AIPlayer.mixed_move,
    Difficulty.HARD: AIPlayer.smart_move,
    Difficulty.IMPOSSIBLE: AIPlayer.minimax_move,
}


def select_move(
    game: TicTacTimeGame,
    difficulty: Union[Difficulty, str],
    rng: Optional[random.Random] = None,
) -> Optional[Coord]:
    """Choose a move for whoever is to play in ``game``."""

    ai = AIPlayer(
        player=game.current_player,
        difficulty=Difficulty(difficulty),
        rng=rng if rng is not None else random.Random(),
    )
    return ai.select_move(game)
