import random

import pytest

from backgammon import create_app
from backgammon.game_core import BoardState, Player, make_dice
from backgammon.services.game_state import GameState, STATE_PLAYING
from backgammon.services.game_turn_manager import GameTurnManager


@pytest.fixture
def board():
    """A fresh board in the standard starting position."""
    return BoardState()


@pytest.fixture
def app(tmp_path):
    """Application with logs written to a temporary instance folder."""
    app, _ = create_app(
        {
            'TESTING': True,
            'RATELIMIT_ENABLED': False,
            'SOCKETIO_ASYNC_MODE': 'threading',
            'START_NOTIFICATION_CONSUMER': False,
            'MAX_ACTIVE_GAMES': 0,
        },
        instance_path=str(tmp_path),
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def socket_client(app):
    from backgammon.extensions import socketio

    client = socketio.test_client(app)
    yield client
    if client.is_connected():
        client.disconnect()


class TurnHarness:
    """A turn manager wired to in-memory event/result sinks."""

    def __init__(self, position=None, turn=Player.RED, dice=(6, 1)):
        self.events = []
        self.results = []
        self.manager = GameTurnManager(
            game_id='game-1',
            log_event=lambda *args, **kwargs: self.events.append(args),
            log_result=self.results.append,
            rng=random.Random(0),
        )
        self.state = GameState(BoardState(position))
        self.state.session_state = STATE_PLAYING
        self.state.turn = turn
        self.state.dice = make_dice(list(dice)) if dice else []

    @property
    def board(self):
        return self.state.board


@pytest.fixture
def harness():
    return TurnHarness


@pytest.fixture
def force_turn(app):
    """Forces a known turn and roll on a running game."""
    def _force_turn(game_id, player, dice):
        game_session = app.game_service.get_game(game_id)
        with game_session.lock:
            game_session.state.turn = player
            game_session.state.dice = make_dice(list(dice))
        return game_session
    return _force_turn
