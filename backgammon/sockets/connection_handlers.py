# backgammon/sockets/connection_handlers.py

import logging
from flask import request, current_app
from ..extensions import socketio
from ..globals import log_event

logger = logging.getLogger(__name__)


@socketio.on('connect')
def handle_connect(auth=None):
    logger.info(f"Client {request.sid} connected.")
    log_event("SESSION_START", "Client connected.", sid=request.sid)


@socketio.on('disconnect')
def handle_disconnect(*args):
    sid = request.sid
    game_id = current_app.game_service.handle_disconnect(sid)
    log_event("SESSION_END", "Client disconnected.", sid=sid, game_id=game_id)
