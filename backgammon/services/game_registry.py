# backgammon/services/game_registry.py

import threading
from typing import Callable, Dict, List, Optional, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from .game_session import GameSession


class GameRegistry:
    """
    Партии в памяти и клиенты (SID), подключенные к каждой из них.
    Один SID смотрит не больше одной партии; у партии может быть
    сколько угодно зрителей. Потокобезопасен.
    """
    def __init__(self, log_event_func=None):
        self._games: Dict[str, 'GameSession'] = {}
        self._watchers: Dict[str, Set[str]] = {}  # game_id -> SIDs
        self._sid_game: Dict[str, str] = {}

        self._lock = threading.RLock()
        self.log_event = log_event_func or (lambda *args, **kwargs: None)

    def __len__(self):
        with self._lock:
            return len(self._games)

    def __contains__(self, game_id):
        with self._lock:
            return game_id in self._games

    def add_game(self, game_session: 'GameSession') -> bool:
        with self._lock:
            if game_session.id in self._games:
                self.log_event("REGISTRY_WARN", "Game id collision, session not added.", game_id=game_session.id)
                return False
            self._games[game_session.id] = game_session
            self._watchers[game_session.id] = set()
            total = len(self._games)
        self.log_event("REGISTRY_ADD", f"Active games: {total}", game_id=game_session.id)
        return True

    def remove_game_by_id(self, game_id: str) -> Optional['GameSession']:
        """Убирает партию и отвязывает всех ее зрителей."""
        with self._lock:
            game_session = self._games.pop(game_id, None)
            if game_session is None:
                return None
            for sid in self._watchers.pop(game_id, ()):
                self._sid_game.pop(sid, None)
            total = len(self._games)
        self.log_event("REGISTRY_REMOVE", f"Active games: {total}", game_id=game_id)
        return game_session

    def get_by_game_id(self, game_id: str) -> Optional['GameSession']:
        with self._lock:
            return self._games.get(game_id)

    def get_by_sid(self, sid: str) -> Optional['GameSession']:
        with self._lock:
            return self._games.get(self._sid_game.get(sid))

    def find_game_ids(self, predicate: Callable[['GameSession'], bool]) -> List[str]:
        with self._lock:
            sessions = list(self._games.values())
        return [session.id for session in sessions if predicate(session)]

    def watchers(self, game_id: str) -> Set[str]:
        with self._lock:
            return set(self._watchers.get(game_id, ()))

    def associate_sid_to_game(self, sid: str, game_id: str) -> bool:
        """Подключает SID к партии; прежняя партия этого SID забывается."""
        with self._lock:
            if game_id not in self._games:
                return False
            previous = self._sid_game.get(sid)
            if previous is not None and previous != game_id:
                self._watchers[previous].discard(sid)
            self._sid_game[sid] = game_id
            self._watchers[game_id].add(sid)
        self.log_event("REGISTRY_JOIN", "Client joined.", sid=sid, game_id=game_id)
        return True

    def disassociate_sid(self, sid: str) -> Optional[str]:
        with self._lock:
            game_id = self._sid_game.pop(sid, None)
            if game_id is None:
                return None
            self._watchers[game_id].discard(sid)
        self.log_event("REGISTRY_LEAVE", "Client left.", sid=sid, game_id=game_id)
        return game_id
