"""
Tests for the SocketIO event handlers and the notification worker.
"""

import queue

from backgammon.extensions import notification_queue
from backgammon.game_core import Player
from backgammon.workers import dispatch_notification, _notification_queue_consumer


def received_events(socket_client):
    return [(msg['name'], msg['args'][0] if msg['args'] else None) for msg in socket_client.get_received()]


def create_game(client):
    return client.post('/api/games', json={'seed': 5}).get_json()['game']['game_id']


def test_join_game_sends_state(client, socket_client):
    game_id = create_game(client)

    socket_client.emit('join_game', {'game_id': game_id})

    events = received_events(socket_client)
    assert events[-1][0] == 'game_state'
    assert events[-1][1]['game_id'] == game_id
    assert events[-1][1]['state'] == 'PLAYING'


def test_join_unknown_game(socket_client):
    socket_client.emit('join_game', {'game_id': 'missing'})
    assert received_events(socket_client)[-1][0] == 'move_rejection'


def test_actions_require_a_joined_game(socket_client):
    socket_client.emit('request_roll', {'player': 'red'})
    name, payload = received_events(socket_client)[-1]
    assert name == 'move_rejection'
    assert payload['message'] == 'Join a game first.'


def test_invalid_payload_is_rejected(client, socket_client):
    socket_client.emit('join_game', {'game_id': create_game(client)})
    socket_client.get_received()

    socket_client.emit('send_player_step', {'player': 'red', 'source': 24, 'pips': 9})

    name, payload = received_events(socket_client)[-1]
    assert name == 'move_rejection'
    assert 'pips' in payload['errors']


def test_step_is_broadcast_to_the_room(client, socket_client, force_turn):
    game_id = create_game(client)
    socket_client.emit('join_game', {'game_id': game_id})
    socket_client.get_received()
    force_turn(game_id, Player.RED, (6, 1))

    socket_client.emit('send_player_step', {'player': 'red', 'source': 24, 'pips': 6})

    events = received_events(socket_client)
    step = next(payload for name, payload in events if name == 'step_executed')
    assert step['destination'] == 18


def test_select_and_move_by_destination(client, socket_client, force_turn):
    game_id = create_game(client)
    socket_client.emit('join_game', {'game_id': game_id})
    force_turn(game_id, Player.BLACK, (6, 2))

    socket_client.emit('select_point', {'player': 'black', 'source': 1})
    socket_client.emit('send_player_step', {'player': 'black', 'destination': 3})

    names = [name for name, _ in received_events(socket_client)]
    assert 'source_selected' in names
    assert 'step_executed' in names
    assert client.get(f'/api/games/{game_id}').get_json()['game']['board']['points']['3']['black'] == 1


def test_give_up_over_socket(client, socket_client):
    game_id = create_game(client)
    socket_client.emit('join_game', {'game_id': game_id})

    socket_client.emit('give_up', {'player': 'black'})

    game_over = [payload for name, payload in received_events(socket_client) if name == 'game_over']
    assert game_over == [{'winner': 'red', 'reason': 'give_up'}]


def test_board_changes_reach_the_notification_queue(client, force_turn):
    game_id = create_game(client)
    force_turn(game_id, Player.RED, (6, 1))
    while not notification_queue.empty():
        notification_queue.get_nowait()

    client.post(f'/api/games/{game_id}/moves', json={'player': 'red', 'source': 24, 'pips': 6})

    queued = []
    while not notification_queue.empty():
        queued.append(notification_queue.get_nowait())
    counts = [msg['payload'] for msg in queued if msg['event'] == 'checker_count_changed']
    assert {'player': 'red', 'slot': 18, 'count': 1} in counts
    assert all(msg['room'] == game_id for msg in queued)


class FakeSocketIO:

    def __init__(self):
        self.emitted = []

    def emit(self, event, payload, room=None):
        self.emitted.append((event, payload, room))

    def sleep(self, seconds):
        pass


def test_dispatch_skips_invalid_messages():
    socketio = FakeSocketIO()
    assert dispatch_notification(socketio, {'event': 'x', 'payload': {}, 'room': 'r'}) is True
    assert dispatch_notification(socketio, {'event': 'x', 'payload': {}}) is False
    assert socketio.emitted == [('x', {}, 'r')]


def test_consumer_stops_on_none():
    socketio = FakeSocketIO()
    messages = queue.Queue()
    messages.put({'event': 'turn_changed', 'payload': {'turn': 'red'}, 'room': 'g'})
    messages.put(None)

    _notification_queue_consumer(socketio, messages)

    assert socketio.emitted == [('turn_changed', {'turn': 'red'}, 'g')]
