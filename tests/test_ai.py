"""Tests for the Tic-Tac-Time computer opponent."""

import random

import pytest

from tictactime import ai
from tictactime.ai import AIPlayer, Difficulty, find_winning_move, select_move
from tictactime.game import GameMode, new_game


class FixedRandom(random.Random):
    """Random source whose coin flips always land on ``value``."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def _fill(game):
    for t, cube in enumerate(game.board):
        for z, layer in enumerate(cube):
            for y, row in enumerate(layer):
                for x in range(len(row)):
                    row[x] = "X" if (x + y + z + t) % 2 else "O"


def _place(game, player, *cells):
    for x, y, z, t in cells:
        game.board[t][z][y][x] = player


def test_easy_takes_the_only_empty_cell():
    game = new_game("time")
    _fill(game)
    game.board[2][1][0][2] = None

    assert select_move(game, "easy") == (2, 0, 1, 2)


def test_no_move_on_full_board():
    game = new_game()
    _fill(game)
    for difficulty in Difficulty:
        assert select_move(game, difficulty) is None


def test_easy_may_pick_any_slice():
    game = new_game("time")
    rng = random.Random(3)
    ai_player = AIPlayer(difficulty="easy", rng=rng)
    picks = {ai_player.select_move(game)[3] for _ in range(60)}
    assert picks == {0, 1, 2}


def test_find_winning_move_restores_board():
    game = new_game()
    _place(game, "O", (0, 0, 0, 0), (1, 0, 0, 0))
    before = game.serialize()

    assert find_winning_move(game, "O") == (2, 0, 0, 0)
    assert find_winning_move(game, "X") is None
    assert game.serialize() == before


def test_hard_takes_immediate_win():
    game = new_game()
    _place(game, "O", (0, 0, 0, 0), (1, 0, 0, 0))
    _place(game, "X", (0, 1, 0, 0), (0, 2, 2, 0))

    ai_player = AIPlayer(player="O", difficulty=Difficulty.HARD)
    assert ai_player.select_move(game) == (2, 0, 0, 0)


def test_hard_blocks_opponent():
    game = new_game()
    _place(game, "X", (0, 0, 0, 0), (0, 1, 0, 0))
    _place(game, "O", (2, 2, 2, 0))

    ai_player = AIPlayer(player="O", difficulty=Difficulty.HARD)
    assert ai_player.select_move(game) == (0, 2, 0, 0)


def test_hard_prefers_center_of_current_slice():
    game = new_game("time")
    ai_player = AIPlayer(player="O", difficulty="hard")
    assert ai_player.select_move(game) == (1, 1, 1, 1)

    game.set_time(2)
    assert ai_player.select_move(game) == (1, 1, 1, 2)


def test_hard_falls_back_to_corner():
    game = new_game("time")
    game.make_move(1, 1, 1)

    ai_player = AIPlayer(player="O", difficulty="hard")
    assert ai_player.select_move(game) == (0, 0, 0, 1)

    taken = new_game("time")
    _place(taken, "O", (1, 1, 1, 1))
    _place(taken, "X", (0, 0, 0, 1))
    assert ai_player.select_move(taken) == (0, 0, 2, 1)


def test_medium_flips_between_random_and_smart():
    game = new_game()
    _place(game, "X", (0, 0, 0, 0), (0, 1, 0, 0))

    smart = AIPlayer(player="O", difficulty="medium", rng=FixedRandom(0.9))
    assert smart.select_move(game) == (0, 2, 0, 0)

    chaotic = AIPlayer(player="O", difficulty="medium", rng=FixedRandom(0.1))
    assert chaotic.select_move(game) in game.empty_cells()


def test_impossible_takes_immediate_win():
    game = new_game()
    _place(game, "O", (1, 0, 0, 0), (2, 0, 0, 0))
    _place(game, "X", (1, 1, 1, 0), (2, 2, 0, 0), (0, 2, 1, 0))
    game.current_player = "O"

    move = select_move(game, Difficulty.IMPOSSIBLE)

    assert move == (0, 0, 0, 0)
    assert game.make_move(*move).winner == "O"


def test_impossible_blocks_at_shallow_depth(monkeypatch):
    monkeypatch.setitem(ai.SEARCH_DEPTH, GameMode.NORMAL, 2)
    game = new_game()
    _place(game, "X", (0, 0, 2, 0), (1, 1, 2, 0))
    _place(game, "O", (1, 1, 1, 0))

    ai_player = AIPlayer(player="O", difficulty="impossible")
    assert ai_player.select_move(game) == (2, 2, 2, 0)


def test_search_leaves_game_untouched(monkeypatch):
    monkeypatch.setitem(ai.SEARCH_DEPTH, GameMode.TIME, 2)
    game = new_game("time")
    game.make_move(1, 1, 1)
    game.make_move(0, 0, 0, 0)
    before = game.serialize()

    ai_player = AIPlayer(player="X", difficulty="impossible")
    move = ai_player.select_move(game)

    assert move in game.empty_cells()
    assert game.serialize() == before
    assert ai_player.nodes_evaluated > 0


def test_deadline_keeps_first_candidate(monkeypatch):
    monkeypatch.setitem(ai.SEARCH_DEPTH, GameMode.NORMAL, 1)
    game = new_game()
    game.make_move(0, 0, 0)

    ai_player = AIPlayer(player="O", difficulty="impossible", deadline_ms=0.0)
    assert ai_player.select_move(game) == (1, 0, 0, 0)


def test_rejects_unknown_player():
    with pytest.raises(ValueError):
        AIPlayer(player="x")


def test_hard_wins_across_time():
    game = new_game("time")
    _place(game, "O", (2, 2, 0, 0), (2, 2, 0, 2))
    _place(game, "X", (0, 0, 0, 1), (1, 0, 0, 1))

    ai_player = AIPlayer(player="O", difficulty="hard")
    assert ai_player.select_move(game) == (2, 2, 0, 1)


def test_hard_blocks_temporal_line():
    game = new_game("time")
    _place(game, "X", (1, 0, 2, 0), (1, 0, 2, 1))
    _place(game, "O", (0, 0, 0, 1))

    ai_player = AIPlayer(player="O", difficulty="hard")
    assert ai_player.select_move(game) == (1, 0, 2, 2)


def test_impossible_finds_spacetime_win_at_full_depth():
    game = new_game("time")
    _place(game, "O", (0, 1, 0, 0), (1, 1, 1, 1))
    game.current_player = "O"
    before = game.serialize()

    ai_player = AIPlayer(player="O", difficulty="impossible")
    move = ai_player.select_move(game)

    assert move == (2, 1, 2, 2)
    assert game.serialize() == before
    assert game.make_move(*move).winner == "O"
