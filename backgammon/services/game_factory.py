# backgammon/services/game_factory.py

import uuid
import random
from typing import Any, Callable, Optional

from backgammon.game_core import BoardState, QueueNotifier
from .game_session import GameSession
from .game_state import GameState
from .game_turn_manager import GameTurnManager


class GameFactory:

    def __init__(
        self,
        log_event: Callable,
        log_result: Callable,
        notification_queue: Any
    ):
        self.log_event = log_event
        self.log_result = log_result
        self.notification_queue = notification_queue

    def create_game(self, seed: Optional[int] = None) -> GameSession:
        """
        Создает партию со стандартной расстановкой. Изменения доски
        уходят в notification_queue в комнату game_id.
        """
        game_id = str(uuid.uuid4())

        turn_manager = GameTurnManager(
            game_id=game_id,
            log_event=self.log_event,
            log_result=self.log_result,
            rng=random.Random(seed)
        )

        notifier = None
        if self.notification_queue is not None:
            notifier = QueueNotifier(self.notification_queue, room=game_id)

        session = GameSession(
            game_id=game_id,
            state=GameState(BoardState()),
            turn_manager=turn_manager,
            log_event=self.log_event,
            notifier=notifier
        )

        self.log_event("GAME_CREATED", f"Game {game_id} created", game_id=game_id)
        return session
