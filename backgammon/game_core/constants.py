# backgammon/game_core/constants.py

from enum import IntEnum


class Player(IntEnum):
    """Игроки. Значение используется как индекс в per-player массивах."""
    BLACK = 0
    RED = 1


def other_player(player):
    """Возвращает соперника. Неизвестный игрок - ошибка вызывающего кода."""
    if player == Player.BLACK:
        return Player.RED
    if player == Player.RED:
        return Player.BLACK
    raise ValueError(f"Unknown player: {player!r}")


# === Настройка доски ===
# Нумерация пунктов - с точки зрения черных:
# черные идут 1 -> 24 -> дом, красные 24 -> 1 -> дом.
STANDARD_RED_SETUP = {24: 2, 6: 5, 8: 3, 13: 5}
STANDARD_BLACK_SETUP = {1: 2, 19: 5, 17: 3, 12: 5}
CHECKERS_PER_PLAYER = 15

# === Индексы слотов ===
HOME = 0   # общий слот выброшенных фишек (счетчик на каждого игрока)
BAR = 25   # общий бар (счетчик на каждого игрока)

POINT_1 = 1
POINT_24 = 24
SLOT_COUNT = 26

MIN_PIPS = 1
MAX_PIPS = 6

# Диапазоны "дома" на доске
HOME_BOARD_BLACK = range(19, 25)
HOME_BOARD_RED = range(1, 7)

# "Внешняя" доска (должна быть пустой перед выбросом)
OUTER_BOARD_BLACK = range(1, 19)
OUTER_BOARD_RED = range(7, 25)

# Пункт сразу за домом, с которого начинается поиск "более дальних" фишек
BEAR_OFF_SCAN_START_BLACK = 18
BEAR_OFF_SCAN_START_RED = 6

# Точные "пункты выброса" для невырезанного назначения
BEAR_OFF_EXACT_BLACK = 25
BEAR_OFF_EXACT_RED = 0

PLAYER_NAMES = {
    Player.BLACK: 'black',
    Player.RED: 'red',
}
PLAYERS_BY_NAME = {name: player for player, name in PLAYER_NAMES.items()}
