# backgammon/api/game_routes.py

from flask import Blueprint, current_app, jsonify, request
from marshmallow import ValidationError

from ..extensions import limiter, notification_queue
from ..services.game_service import TooManyGamesError
from .schemas import (
    CreateGameSchema,
    DestinationSchema,
    MoveSchema,
    PlayerSchema,
    SelectSourceSchema,
)

bp = Blueprint('games', __name__, url_prefix='/api/games')

create_game_schema = CreateGameSchema()
player_schema = PlayerSchema()
select_source_schema = SelectSourceSchema()
move_schema = MoveSchema()
destination_schema = DestinationSchema()


def _load(schema):
    """Валидирует JSON тела запроса. ValidationError -> 400 (см. ниже)."""
    return schema.load(request.get_json(silent=True) or {})


def _publish(notifications):
    """Дублирует уведомления в очередь, чтобы их получили SocketIO-клиенты."""
    for msg in notifications:
        notification_queue.put(msg)


def _game_or_404(game_id):
    game_session = current_app.game_service.get_game(game_id)
    if game_session is None:
        return None, (jsonify({"error": f"Game {game_id} not found"}), 404)
    return game_session, None


def _run_action(game_id, action):
    """
    Общий каркас для действий над партией: ищет игру, выполняет
    действие, публикует уведомления. Отказ по правилам -> 409.
    """
    game_session, error = _game_or_404(game_id)
    if error:
        return error

    try:
        notifications = action(game_session)
    except Exception as e:
        current_app.logger.error(f"Unexpected error in game {game_id}: {e}", exc_info=True)
        return jsonify({"error": "An internal server error occurred"}), 500

    _publish(notifications)
    status = 409 if notifications and notifications[0]['event'] == 'move_rejection' else 200
    return jsonify({'game': game_session.to_dict(), 'notifications': notifications}), status


@bp.errorhandler(ValidationError)
def handle_validation_error(e):
    return jsonify({"errors": e.messages}), 400


@bp.route('', methods=['POST'])
@limiter.limit(lambda: current_app.config['RATELIMIT_CREATE_GAME'])
def create_game():
    data = _load(create_game_schema)
    try:
        game_session, notifications = current_app.game_service.create_new_game(seed=data['seed'])
    except TooManyGamesError as e:
        return jsonify({"error": str(e)}), 503

    current_app.logger.info(f"Game {game_session.id} created via HTTP")
    _publish(notifications)
    return jsonify({'game': game_session.to_dict(), 'notifications': notifications}), 201


@bp.route('/<game_id>', methods=['GET'])
def get_game(game_id):
    game_session, error = _game_or_404(game_id)
    if error:
        return error
    return jsonify({'game': game_session.to_dict()})


@bp.route('/<game_id>', methods=['DELETE'])
def delete_game(game_id):
    if not current_app.game_service.finalize_game(game_id):
        return jsonify({"error": f"Game {game_id} not found"}), 404
    return '', 204


@bp.route('/<game_id>/legal', methods=['POST'])
def check_legal_move(game_id):
    data = _load(move_schema)
    game_session, error = _game_or_404(game_id)
    if error:
        return error

    legal, destination = game_session.is_legal_move(data['player'], data['source'], data['pips'])
    return jsonify({'legal': legal, 'destination': destination})


@bp.route('/<game_id>/roll', methods=['POST'])
def roll(game_id):
    data = _load(player_schema)
    return _run_action(game_id, lambda game: game.roll_dice_for_player(data['player']))


@bp.route('/<game_id>/select', methods=['POST'])
def select(game_id):
    data = _load(select_source_schema)
    return _run_action(game_id, lambda game: game.select_source(data['player'], data['source']))


@bp.route('/<game_id>/moves', methods=['POST'])
def move(game_id):
    data = _load(move_schema)
    return _run_action(
        game_id,
        lambda game: game.apply_player_step(data['player'], data['source'], data['pips'])
    )


@bp.route('/<game_id>/destination', methods=['POST'])
def move_to_destination(game_id):
    data = _load(destination_schema)
    return _run_action(
        game_id,
        lambda game: game.move_to_destination(data['player'], data['destination'])
    )


@bp.route('/<game_id>/give-up', methods=['POST'])
def give_up(game_id):
    data = _load(player_schema)
    return _run_action(game_id, lambda game: game.player_give_up(data['player']))
