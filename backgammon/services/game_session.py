# --- Стандартная библиотека ---
import threading
import time
import logging
from typing import Callable, Optional

# --- Импорты сервисов (локальные) ---
from .game_state import GameState
from .game_turn_manager import GameTurnManager

# --- Импорты логики ядра ---
from backgammon.game_core import Player, BoardObserver

logger = logging.getLogger(__name__)


class GameSession:
    """
    Представляет ОДНУ партию.
    "Фасад" над GameState и GameTurnManager. Все обращения к доске
    сериализуются через self.lock: ядро правил само не синхронизировано.
    """

    def __init__(
        self,
        game_id: str,
        state: GameState,
        turn_manager: GameTurnManager,
        log_event: Callable,
        notifier: Optional[BoardObserver] = None
    ):
        self.id = game_id
        self.log_event = log_event
        self.lock = threading.RLock()

        self.state = state
        self.turn_manager = turn_manager
        self.turn_manager.set_lock(self.lock)

        # Уведомления доски уходят клиенту через notifier
        self.notifier = notifier
        if notifier is not None:
            self.state.board.subscribe(notifier)

        self.last_activity = time.time()

        self.log_event("SESSION_INIT", f"Session {self.id} created.", game_id=self.id)

    def _touch(self):
        self.last_activity = time.time()

    # --- Жизненный цикл ---

    def start(self) -> list:
        with self.lock:
            self._touch()
            return self.turn_manager.start_first_roll(self.state)

    def close(self):
        with self.lock:
            if self.notifier is not None:
                self.state.board.unsubscribe(self.notifier)
                self.notifier = None

    # --- Запросы ---

    def is_legal_move(self, player: Player, source: int, pips: int) -> tuple[bool, Optional[int]]:
        """Чистый запрос к правилам, без учета очередности и кубиков."""
        with self.lock:
            board = self.state.board
            if not board.is_legal_move(player, source, pips):
                return False, None
            return True, board.get_destination_slot(player, source, pips)

    def to_dict(self) -> dict:
        with self.lock:
            data = self.state.to_dict()
            data['game_id'] = self.id
            return data

    # --- Логика хода (делегируем) ---

    def roll_dice_for_player(self, player: Player) -> list:
        with self.lock:
            self._touch()
            return self.turn_manager.roll_dice_for_player(self.state, player)

    def select_source(self, player: Player, source: int) -> list:
        with self.lock:
            self._touch()
            return self.turn_manager.select_source(self.state, player, source)

    def apply_player_step(self, player: Player, source: int, pips: int) -> list:
        with self.lock:
            self._touch()
            return self.turn_manager.apply_player_step(self.state, player, source, pips)

    def move_to_destination(self, player: Player, destination: int) -> list:
        with self.lock:
            self._touch()
            return self.turn_manager.move_to_destination(self.state, player, destination)

    def player_give_up(self, player: Player) -> list:
        with self.lock:
            self._touch()
            return self.turn_manager.player_give_up(self.state, player)
