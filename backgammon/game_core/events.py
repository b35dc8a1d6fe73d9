# backgammon/game_core/events.py
"""
Наблюдатели доски.

Доска ничего не знает о рендеринге: любые изменения (количество фишек,
подсветка пунктов, выбор источника) рассылаются подписчикам через
интерфейс BoardObserver. Уведомления - "выстрелил и забыл", правила
от них не зависят.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .constants import PLAYER_NAMES

logger = logging.getLogger(__name__)

EVENT_CHECKER_COUNT_CHANGED = 'checker_count_changed'
EVENT_VALID_DESTINATION_CHANGED = 'valid_destination_changed'
EVENT_SELECTED_CHANGED = 'selected_changed'
EVENT_VALID_SOURCE_CHANGED = 'valid_source_changed'


class BoardObserver:
    """Базовый наблюдатель. Все методы - no-op, переопределяйте нужные."""

    def on_checker_count_changed(self, player, slot_id: int, count: int):
        pass

    def on_valid_destination_changed(self, slot_id: int, player, on: bool):
        pass

    def on_selected_changed(self, slot_id: int, player, on: bool):
        pass

    def on_valid_source_changed(self, slot_id: int, player, on: bool):
        pass


class EventDispatcher:
    """
    Рассылает уведомления списку подписчиков.
    Ошибка в одном наблюдателе логируется и не ломает ход.
    """

    def __init__(self):
        self.observers: List[BoardObserver] = []

    def subscribe(self, observer: BoardObserver):
        if observer not in self.observers:
            self.observers.append(observer)

    def unsubscribe(self, observer: BoardObserver):
        if observer in self.observers:
            self.observers.remove(observer)

    def _dispatch(self, method_name: str, *args):
        for observer in list(self.observers):
            try:
                getattr(observer, method_name)(*args)
            except Exception as e:
                logger.error(f"Observer {observer!r} failed in {method_name}: {e}", exc_info=True)

    def checker_count_changed(self, player, slot_id, count):
        self._dispatch('on_checker_count_changed', player, slot_id, count)

    def valid_destination_changed(self, slot_id, player, on):
        self._dispatch('on_valid_destination_changed', slot_id, player, on)

    def selected_changed(self, slot_id, player, on):
        self._dispatch('on_selected_changed', slot_id, player, on)

    def valid_source_changed(self, slot_id, player, on):
        self._dispatch('on_valid_source_changed', slot_id, player, on)


def _player_name(player) -> Optional[str]:
    return PLAYER_NAMES.get(player) if player is not None else None


class RecordingObserver(BoardObserver):
    """Складывает все уведомления в список (event, payload)."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def on_checker_count_changed(self, player, slot_id, count):
        self.events.append((EVENT_CHECKER_COUNT_CHANGED,
                            {'player': _player_name(player), 'slot': slot_id, 'count': count}))

    def on_valid_destination_changed(self, slot_id, player, on):
        self.events.append((EVENT_VALID_DESTINATION_CHANGED,
                            {'player': _player_name(player), 'slot': slot_id, 'on': on}))

    def on_selected_changed(self, slot_id, player, on):
        self.events.append((EVENT_SELECTED_CHANGED,
                            {'player': _player_name(player), 'slot': slot_id, 'on': on}))

    def on_valid_source_changed(self, slot_id, player, on):
        self.events.append((EVENT_VALID_SOURCE_CHANGED,
                            {'player': _player_name(player), 'slot': slot_id, 'on': on}))

    def clear(self):
        self.events = []


class QueueNotifier(RecordingObserver):
    """
    Превращает уведомления доски в сообщения для notification_queue
    ({'event', 'payload', 'room'}), которые фоновый воркер
    отправляет клиентам через SocketIO.
    """

    def __init__(self, queue_instance, room: str):
        super().__init__()
        self.queue = queue_instance
        self.room = room

    def _put(self):
        event, payload = self.events.pop()
        self.queue.put({'event': event, 'payload': payload, 'room': self.room})

    def on_checker_count_changed(self, player, slot_id, count):
        super().on_checker_count_changed(player, slot_id, count)
        self._put()

    def on_valid_destination_changed(self, slot_id, player, on):
        super().on_valid_destination_changed(slot_id, player, on)
        self._put()

    def on_selected_changed(self, slot_id, player, on):
        super().on_selected_changed(slot_id, player, on)
        self._put()

    def on_valid_source_changed(self, slot_id, player, on):
        super().on_valid_source_changed(slot_id, player, on)
        self._put()
