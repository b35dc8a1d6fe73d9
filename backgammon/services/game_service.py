# backgammon/services/game_service.py

import logging
from typing import Optional, Dict, Any, List, Tuple
from .game_session import GameSession
from .game_registry import GameRegistry
from .game_factory import GameFactory
from .game_state import STATE_FINISHED

logger = logging.getLogger(__name__)

Notification = Dict[str, Any]


class TooManyGamesError(RuntimeError):
    """Достигнут лимит MAX_ACTIVE_GAMES."""


class GameService:
    """
    Фасад, координирующий высокоуровневые игровые действия.
    Не владеет состоянием, а делегирует его специализированным сервисам.
    """

    def __init__(self,
                 registry: GameRegistry,
                 factory: GameFactory,
                 max_active_games: int = 0):
        self.registry = registry
        self.factory = factory
        self.max_active_games = max_active_games

    ### Публичный API (Прокси к Registry) ###

    def get_game(self, game_id: str) -> Optional[GameSession]:
        return self.registry.get_by_game_id(game_id)

    def get_game_by_sid(self, sid: str) -> Optional[GameSession]:
        """Находит игровую сессию, связанную с SID."""
        return self.registry.get_by_sid(sid)

    def finalize_game(self, game_id: str) -> bool:
        """Завершает и удаляет игру."""
        game_session = self.registry.remove_game_by_id(game_id)
        if game_session is None:
            return False
        game_session.close()
        return True

    ### Управление подключением ###

    def join_game(self, sid: str, game_id: str) -> Optional[GameSession]:
        if not self.registry.associate_sid_to_game(sid, game_id):
            return None
        return self.registry.get_by_game_id(game_id)

    def handle_disconnect(self, sid: str) -> Optional[str]:
        return self.registry.disassociate_sid(sid)

    ### Создание игр ###

    def _evict_finished_games(self):
        finished = self.registry.find_game_ids(
            lambda session: session.state.session_state == STATE_FINISHED
        )
        for game_id in finished:
            self.finalize_game(game_id)

    def create_new_game(self, seed: Optional[int] = None) -> Tuple[GameSession, List[Notification]]:
        """Создает партию и сразу разыгрывает первый ход."""
        if self.max_active_games and len(self.registry) >= self.max_active_games:
            self._evict_finished_games()
            if len(self.registry) >= self.max_active_games:
                logger.warning(f"Active game limit reached ({self.max_active_games})")
                raise TooManyGamesError(f"Active game limit reached ({self.max_active_games})")

        game_session = self.factory.create_game(seed=seed)
        self.registry.add_game(game_session)
        notifications = game_session.start()
        return game_session, notifications
