# backgammon/game_core/board_state.py

import logging
from typing import Dict, Iterable, List, Optional

from . import constants as c
from .constants import Player, other_player
from .containers import Bar, Home, Point
from .events import EventDispatcher

logger = logging.getLogger(__name__)


def _as_player(player) -> Player:
    try:
        return Player(player)
    except ValueError:
        raise ValueError(f"Unknown player: {player!r}") from None


def _check_pips(pips: int):
    if not c.MIN_PIPS <= pips <= c.MAX_PIPS:
        raise ValueError(f"Die value must be between {c.MIN_PIPS} and {c.MAX_PIPS}, got {pips!r}")


def standard_position() -> Dict[Player, Dict[int, int]]:
    """Стандартная начальная расстановка."""
    return {
        Player.RED: dict(c.STANDARD_RED_SETUP),
        Player.BLACK: dict(c.STANDARD_BLACK_SETUP),
    }


class BoardState:
    """
    Позиция на доске: 24 пункта, бар и дом (слоты 0-25),
    плюс проверка легальности и выполнение ходов.

    Доска меняется только через move(). Все изменения рассылаются
    подписчикам (см. events.BoardObserver).
    """

    def __init__(self, position: Optional[Dict[Player, Dict[int, int]]] = None):
        self.events = EventDispatcher()

        self.home = Home(self.events)
        self.bar = Bar(self.events)
        self.containers = [self.home]
        for point_id in range(c.POINT_1, c.POINT_24 + 1):
            self.containers.append(Point(point_id, self.events))
        self.containers.append(self.bar)

        if position is None:
            position = standard_position()
        self._place(position)

    @classmethod
    def from_position(cls, position: Dict[Player, Dict[int, int]]) -> 'BoardState':
        """
        Создает доску из произвольной позиции {Player: {slot: count}}.
        У каждого игрока должно быть ровно 15 фишек.
        """
        return cls(position)

    def _place(self, position):
        for player in Player:
            slots = position.get(player, {})
            total = 0
            for slot_id, count in slots.items():
                if count < 0:
                    raise ValueError(f"Negative checker count {count} at slot {slot_id}")
                total += count
            if total != c.CHECKERS_PER_PLAYER:
                raise ValueError(
                    f"{player.name} must have {c.CHECKERS_PER_PLAYER} checkers, position has {total}"
                )
            for slot_id, count in slots.items():
                if count:
                    self._container(slot_id).increment(player, count)

    # --- Подписка ---

    def subscribe(self, observer):
        self.events.subscribe(observer)

    def unsubscribe(self, observer):
        self.events.unsubscribe(observer)

    # --- Доступ ---

    def _container(self, slot_id: int):
        if not isinstance(slot_id, int) or not c.HOME <= slot_id <= c.BAR:
            raise ValueError(f"Unknown slot: {slot_id!r}")
        return self.containers[slot_id]

    def count(self, player, slot_id: int) -> int:
        return self._container(slot_id).count(_as_player(player))

    def checkers(self, slot_id: int) -> Dict[Player, int]:
        container = self._container(slot_id)
        return {player: container.count(player) for player in Player}

    def total_checkers(self, player) -> int:
        player = _as_player(player)
        return sum(container.count(player) for container in self.containers)

    # --- Правила ---

    @staticmethod
    def get_destination_slot(player, source_slot: int, pips: int) -> int:
        """Куда придет фишка. Без проверки легальности."""
        if player == Player.BLACK:
            if source_slot == c.BAR:
                return pips
            destination = source_slot + pips
            if destination > c.POINT_24:
                # выброс
                return c.HOME
            return destination

        if player == Player.RED:
            if source_slot == c.BAR:
                return c.BAR - pips
            destination = source_slot - pips
            if destination < c.POINT_1:
                # выброс
                return c.HOME
            return destination

        raise ValueError(f"Unknown player: {player!r}")

    def is_legal_move(self, player, source_slot: int, pips: int) -> bool:
        player = _as_player(player)
        source = self._container(source_slot)
        _check_pips(pips)

        # Нет фишки для хода (выброшенные фишки в игре не участвуют)
        if source_slot == c.HOME or source.count(player) == 0:
            logger.debug(f"No {player.name} checker at {source_slot}")
            return False

        # Пока на баре есть фишка, ходить можно только ей
        if source_slot != c.BAR and self.bar.count(player) > 0:
            logger.debug(f"{player.name} must move the checker off the bar first")
            return False

        destination = self.get_destination_slot(player, source_slot, pips)
        if destination == c.HOME:
            return self._can_bear_off(player, source_slot, pips)

        if self.containers[destination].count(other_player(player)) >= 2:
            logger.debug(f"Point {destination} is blocked for {player.name}")
            return False

        return True

    def _can_bear_off(self, player: Player, source_slot: int, pips: int) -> bool:
        if player == Player.BLACK:
            direction = 1
            outer_board = c.OUTER_BOARD_BLACK
            exact_destination = c.BEAR_OFF_EXACT_BLACK
            scan_start = c.BEAR_OFF_SCAN_START_BLACK
        else:
            direction = -1
            outer_board = c.OUTER_BOARD_RED
            exact_destination = c.BEAR_OFF_EXACT_RED
            scan_start = c.BEAR_OFF_SCAN_START_RED

        # Все фишки должны быть в доме (бар уже проверен)
        for point_id in outer_board:
            if self.containers[point_id].count(player) > 0:
                logger.debug(f"{player.name} cannot bear off: checker outside home board at {point_id}")
                return False

        # Точный бросок - всегда можно
        if source_slot + direction * pips == exact_destination:
            return True

        # Больший бросок - только если нет фишек дальше от выхода, чем source_slot
        point_id = scan_start
        while point_id != source_slot:
            if self.containers[point_id].count(player) > 0:
                logger.debug(f"{player.name} has a checker further out at {point_id}, cannot bear off from {source_slot}")
                return False
            point_id += direction
        return True

    def move(self, player, source_slot: int, pips: int) -> bool:
        """
        Выполняет ход, если он легален. Возвращает False без изменений
        доски, если ход нелегален.
        """
        if not self.is_legal_move(player, source_slot, pips):
            return False

        player = Player(player)
        opponent = other_player(player)
        destination = self.get_destination_slot(player, source_slot, pips)
        target = self.containers[destination]

        if destination != c.HOME and target.count(opponent) == 1:
            # блот - фишка соперника уходит на бар
            target.decrement(opponent)
            self.bar.increment(opponent)
            logger.debug(f"{player.name} hit {opponent.name} at {destination}")

        self.containers[source_slot].decrement(player)
        target.increment(player)
        return True

    # --- Подсветка (только для презентации) ---

    def check_if_valid_destination(self, player, source_slot: int, pips: int) -> Optional[int]:
        """Если ход легален, помечает слот назначения. Возвращает его id."""
        if not self.is_legal_move(player, source_slot, pips):
            return None
        player = Player(player)
        destination = self.get_destination_slot(player, source_slot, pips)
        if destination == c.HOME:
            self.home.set_valid_destination(player, True)
        else:
            self.containers[destination].set_valid_destination(True, player)
        return destination

    def remove_all_highlights(self):
        for point_id in range(c.POINT_1, c.POINT_24 + 1):
            self.containers[point_id].set_valid_destination(False)
        self.home.set_valid_destination(Player.BLACK, False)
        self.home.set_valid_destination(Player.RED, False)

    def mark_valid_sources(self, player, pips_values: Iterable[int]) -> List[int]:
        """Помечает все слоты, откуда есть легальный ход хотя бы одним кубиком."""
        player = _as_player(player)
        pips_values = list(pips_values)
        sources = []
        for slot_id in range(c.POINT_1, c.BAR + 1):
            legal = any(self.is_legal_move(player, slot_id, pips) for pips in pips_values)
            if slot_id == c.BAR:
                self.bar.set_valid_source(player, legal)
            else:
                self.containers[slot_id].set_valid_source(legal, player)
            if legal:
                sources.append(slot_id)
        return sources

    def remove_all_source_highlights(self):
        for point_id in range(c.POINT_1, c.POINT_24 + 1):
            self.containers[point_id].set_valid_source(False)
        self.bar.set_valid_source(Player.BLACK, False)
        self.bar.set_valid_source(Player.RED, False)

    def set_selected(self, player, slot_id: int, on: bool):
        player = _as_player(player)
        if slot_id == c.BAR:
            self.bar.set_selected(player, on)
        elif c.POINT_1 <= slot_id <= c.POINT_24:
            self.containers[slot_id].set_selected(on, player)
        else:
            raise ValueError(f"Slot {slot_id!r} cannot be selected")

    def clear_selection(self):
        for point_id in range(c.POINT_1, c.POINT_24 + 1):
            self.containers[point_id].set_selected(False)
        self.bar.set_selected(Player.BLACK, False)
        self.bar.set_selected(Player.RED, False)

    # --- Снимок для клиента ---

    def to_dict(self) -> dict:
        return {
            'home': self.home.to_dict(),
            'bar': self.bar.to_dict(),
            'points': {
                str(point_id): self.containers[point_id].to_dict()
                for point_id in range(c.POINT_1, c.POINT_24 + 1)
            },
        }
