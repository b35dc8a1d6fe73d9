# backgammon/game_core/utils.py

from typing import Iterable, Optional

from . import constants as c
from .constants import Player


def get_winner(board) -> Optional[Player]:
    """Возвращает игрока, выбросившего все 15 фишек, или None."""
    for player in Player:
        if board.count(player, c.HOME) >= c.CHECKERS_PER_PLAYER:
            return player
    return None


def pip_count(board, player) -> int:
    """Сумма пипсов, которые игроку осталось пройти до выброса всех фишек."""
    player = Player(player)
    total = board.count(player, c.BAR) * 25
    for point_id in range(c.POINT_1, c.POINT_24 + 1):
        distance = (25 - point_id) if player == Player.BLACK else point_id
        total += board.count(player, point_id) * distance
    return total


def has_legal_move(board, player, pips_values: Iterable[int]) -> bool:
    """Есть ли хотя бы один легальный ход одним из кубиков."""
    pips_values = list(pips_values)
    for slot_id in range(c.POINT_1, c.BAR + 1):
        for pips in pips_values:
            if board.is_legal_move(player, slot_id, pips):
                return True
    return False
