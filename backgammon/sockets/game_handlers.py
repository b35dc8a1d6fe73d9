# backgammon/sockets/game_handlers.py

import logging
from flask import request, current_app
from flask_socketio import emit, join_room
from marshmallow import ValidationError

from ..extensions import socketio
from ..globals import log_event
from ..api.schemas import (
    DestinationSchema,
    MoveSchema,
    PlayerSchema,
    SelectSourceSchema,
)

logger = logging.getLogger(__name__)

player_schema = PlayerSchema()
select_source_schema = SelectSourceSchema()
move_schema = MoveSchema()
destination_schema = DestinationSchema()


def _emit_all(notifications):
    for msg in notifications:
        emit(msg['event'], msg['payload'], room=msg['room'])


def _load_or_reject(schema, data):
    """Валидирует данные события. При ошибке отправляет отказ и возвращает None."""
    try:
        return schema.load(data or {})
    except ValidationError as e:
        emit('move_rejection', {'message': 'Invalid request.', 'errors': e.messages})
        return None


def _game_for_request(event_name):
    game_session = current_app.game_service.get_game_by_sid(request.sid)
    if not game_session:
        logger.info(f"[SocketHandler] {request.sid} sent '{event_name}' without joining a game.")
        emit('move_rejection', {'message': 'Join a game first.'})
    return game_session


@socketio.on('join_game')
def handle_join_game(data):
    """
    Привязывает клиента к партии: SID -> game_id и комната game_id,
    в которую уходят все уведомления доски.
    """
    game_service = current_app.game_service
    sid = request.sid

    game_id = data.get('game_id') if isinstance(data, dict) else None
    if not game_id:
        emit('move_rejection', {'message': 'game_id was not provided.'})
        return

    game_session = game_service.join_game(sid, game_id)
    if not game_session:
        emit('move_rejection', {'message': f'Game not found. ID: {game_id}'})
        return

    join_room(game_id)
    log_event("GAME_JOIN", "Client joined game.", sid=sid, game_id=game_id)
    emit('game_state', game_session.to_dict())


@socketio.on('request_roll')
def handle_request_roll(data=None):
    data = _load_or_reject(player_schema, data)
    if data is None:
        return
    game_session = _game_for_request('request_roll')
    if not game_session:
        return

    _emit_all(game_session.roll_dice_for_player(data['player']))


@socketio.on('select_point')
def handle_select_point(data=None):
    data = _load_or_reject(select_source_schema, data)
    if data is None:
        return
    game_session = _game_for_request('select_point')
    if not game_session:
        return

    _emit_all(game_session.select_source(data['player'], data['source']))


@socketio.on('send_player_step')
def handle_player_step(data=None):
    """
    Шаг игрока: либо {player, source, pips}, либо {player, destination}
    для ранее выбранной фишки.
    """
    schema = destination_schema if isinstance(data, dict) and 'destination' in data else move_schema
    data = _load_or_reject(schema, data)
    if data is None:
        return
    game_session = _game_for_request('send_player_step')
    if not game_session:
        return

    if 'destination' in data:
        notifications = game_session.move_to_destination(data['player'], data['destination'])
    else:
        notifications = game_session.apply_player_step(data['player'], data['source'], data['pips'])
    _emit_all(notifications)


@socketio.on('give_up')
def handle_give_up(data=None):
    data = _load_or_reject(player_schema, data)
    if data is None:
        return
    game_session = _game_for_request('give_up')
    if not game_session:
        return

    _emit_all(game_session.player_give_up(data['player']))
