import queue

import pytest

from backgammon.game_core import BoardState, BoardObserver, RecordingObserver, QueueNotifier, Player, HOME, BAR


RED = Player.RED
BLACK = Player.BLACK


@pytest.fixture
def recorder(board):
    observer = RecordingObserver()
    board.subscribe(observer)
    return observer


def test_move_reports_both_count_changes(board, recorder):
    board.move(RED, 24, 6)
    assert recorder.events == [
        ('checker_count_changed', {'player': 'red', 'slot': 24, 'count': 1}),
        ('checker_count_changed', {'player': 'red', 'slot': 18, 'count': 1}),
    ]


def test_hit_reports_opponent_changes_first(board, recorder):
    board.move(BLACK, 17, 5)
    recorder.clear()

    board.move(RED, 24, 2)
    assert recorder.events == [
        ('checker_count_changed', {'player': 'black', 'slot': 22, 'count': 0}),
        ('checker_count_changed', {'player': 'black', 'slot': BAR, 'count': 1}),
        ('checker_count_changed', {'player': 'red', 'slot': 24, 'count': 1}),
        ('checker_count_changed', {'player': 'red', 'slot': 22, 'count': 1}),
    ]


def test_illegal_move_is_silent(board, recorder):
    assert board.move(RED, 24, 5) is False
    assert recorder.events == []


def test_valid_destination_highlight(board, recorder):
    assert board.check_if_valid_destination(RED, 24, 6) == 18
    assert board.containers[18].valid_destination is True
    assert recorder.events == [
        ('valid_destination_changed', {'player': 'red', 'slot': 18, 'on': True}),
    ]

    # already highlighted: no duplicate notification
    board.check_if_valid_destination(RED, 24, 6)
    assert len(recorder.events) == 1

    board.remove_all_highlights()
    assert board.containers[18].valid_destination is False
    assert recorder.events[-1] == ('valid_destination_changed', {'player': None, 'slot': 18, 'on': False})


def test_illegal_destination_is_not_highlighted(board, recorder):
    assert board.check_if_valid_destination(RED, 24, 5) is None
    assert board.containers[19].valid_destination is False
    assert recorder.events == []


def test_home_highlight_is_per_player():
    board = BoardState.from_position({BLACK: {19: 15}, RED: {6: 15}})
    assert board.check_if_valid_destination(BLACK, 19, 6) == HOME
    assert board.home.valid_destination == [True, False]

    board.remove_all_highlights()
    assert board.home.valid_destination == [False, False]


def test_valid_sources(board, recorder):
    assert board.mark_valid_sources(RED, [6]) == [8, 13, 24]
    assert board.containers[24].valid_source is True
    assert board.containers[6].valid_source is False
    assert board.bar.valid_source == [False, False]

    board.remove_all_source_highlights()
    assert not any(board.containers[slot].valid_source for slot in range(1, 25))


def test_selection(board, recorder):
    board.set_selected(RED, 24, True)
    board.set_selected(BLACK, BAR, True)
    assert board.containers[24].selected is True
    assert board.bar.selected == [True, False]

    board.clear_selection()
    assert board.containers[24].selected is False
    assert board.bar.selected == [False, False]
    assert ('selected_changed', {'player': 'black', 'slot': BAR, 'on': True}) in recorder.events


def test_home_cannot_be_selected(board):
    with pytest.raises(ValueError):
        board.set_selected(RED, HOME, True)


def test_failing_observer_does_not_break_move(board, recorder):
    class Broken(BoardObserver):
        def on_checker_count_changed(self, player, slot_id, count):
            raise RuntimeError("renderer is gone")

    board.subscribe(Broken())
    assert board.move(RED, 24, 6) is True
    assert board.count(RED, 18) == 1
    assert len(recorder.events) == 2


def test_unsubscribe(board, recorder):
    board.unsubscribe(recorder)
    board.move(RED, 24, 6)
    assert recorder.events == []


def test_decrement_below_zero_is_an_error(board):
    with pytest.raises(ValueError):
        board.containers[2].decrement(RED)


def test_queue_notifier_routes_to_room(board):
    notifications = queue.Queue()
    notifier = QueueNotifier(notifications, room='game-1')
    board.subscribe(notifier)

    board.move(RED, 24, 6)

    assert notifications.get_nowait() == {
        'event': 'checker_count_changed',
        'payload': {'player': 'red', 'slot': 24, 'count': 1},
        'room': 'game-1',
    }
    assert notifications.get_nowait()['payload']['slot'] == 18
    assert notifications.empty()
    assert notifier.events == []
