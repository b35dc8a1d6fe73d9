import random

import pytest

from backgammon.game_core import (
    BoardState,
    Die,
    Player,
    BAR,
    HOME,
    available_pips,
    get_winner,
    has_legal_move,
    make_dice,
    pip_count,
    roll_dice,
    use_pips,
)


def test_roll_dice_values():
    rng = random.Random(1)
    for _ in range(50):
        values = roll_dice(rng)
        assert len(values) == 2
        assert all(1 <= value <= 6 for value in values)


def test_plain_roll_gives_one_use_per_die():
    dice = make_dice([5, 2])
    assert available_pips(dice) == [2, 5]

    use_pips(dice, 5)
    assert available_pips(dice) == [2]
    with pytest.raises(ValueError):
        use_pips(dice, 5)


def test_doubles_give_four_moves():
    dice = make_dice([3, 3])
    for _ in range(4):
        assert available_pips(dice) == [3]
        use_pips(dice, 3)
    assert available_pips(dice) == []
    with pytest.raises(ValueError):
        use_pips(dice, 3)


def test_die_rejects_impossible_values():
    with pytest.raises(ValueError):
        Die(7)
    die = Die(4)
    die.use()
    with pytest.raises(ValueError):
        die.use()


def test_pip_count_at_start(board):
    assert pip_count(board, Player.BLACK) == 167
    assert pip_count(board, Player.RED) == 167


def test_pip_count_counts_the_bar():
    board = BoardState.from_position({
        Player.BLACK: {BAR: 1, HOME: 14},
        Player.RED: {HOME: 15},
    })
    assert pip_count(board, Player.BLACK) == 25
    assert pip_count(board, Player.RED) == 0


def test_winner(board):
    assert get_winner(board) is None

    finished = BoardState.from_position({
        Player.BLACK: {HOME: 15},
        Player.RED: {6: 15},
    })
    assert get_winner(finished) == Player.BLACK


def test_has_legal_move(board):
    assert has_legal_move(board, Player.RED, [5]) is True

    closed_out = BoardState.from_position({
        Player.BLACK: {19: 2, 20: 2, 21: 2, 22: 2, 23: 2, 24: 2, 1: 3},
        Player.RED: {BAR: 1, 6: 14},
    })
    assert has_legal_move(closed_out, Player.RED, range(1, 7)) is False
    assert has_legal_move(closed_out, Player.BLACK, [1]) is True
