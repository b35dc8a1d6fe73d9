# backgammon/services/game_state.py

from typing import List, Optional

from backgammon.game_core import BoardState, Die, Player, available_pips
from backgammon.game_core.constants import PLAYER_NAMES

STATE_CREATED = "CREATED"
# Бросок на очередность (ничья - переброс).
STATE_STARTING_ROLL = "STARTING_ROLL"
# Обычный игровой процесс.
STATE_PLAYING = "PLAYING"
STATE_FINISHED = "FINISHED"


class GameState:
    """
    Простой класс-хранилище (DTO) для состояния одной партии.
    Правила живут в BoardState, очередность - в GameTurnManager.
    """
    def __init__(self, board: Optional[BoardState] = None):
        self.board: BoardState = board if board is not None else BoardState()
        self.dice: List[Die] = []
        self.turn: Optional[Player] = None
        self.selected_source: Optional[int] = None
        self.winner: Optional[Player] = None
        self.session_state: str = STATE_CREATED

    def to_dict(self) -> dict:
        return {
            'state': self.session_state,
            'turn': PLAYER_NAMES.get(self.turn),
            'winner': PLAYER_NAMES.get(self.winner),
            'dice': [die.to_dict() for die in self.dice],
            'available_pips': available_pips(self.dice),
            'selected_source': self.selected_source,
            'board': self.board.to_dict(),
        }
