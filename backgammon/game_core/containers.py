# backgammon/game_core/containers.py

from .constants import Player, HOME, BAR


class CheckerContainer:
    """
    Хранилище фишек: количество фишек каждого игрока в одном слоте.
    Point, Bar и Home отличаются только флагами подсветки.
    """

    def __init__(self, slot_id: int, dispatcher):
        self.slot_id = slot_id
        self.dispatcher = dispatcher
        self.checkers = [0, 0]  # индекс - Player

    def increment(self, player: Player, count: int = 1):
        self.checkers[player] += count
        self.dispatcher.checker_count_changed(player, self.slot_id, self.checkers[player])

    def decrement(self, player: Player, count: int = 1):
        if self.checkers[player] < count:
            raise ValueError(
                f"Slot {self.slot_id} holds {self.checkers[player]} checker(s) of {player.name}, "
                f"cannot remove {count}"
            )
        self.checkers[player] -= count
        self.dispatcher.checker_count_changed(player, self.slot_id, self.checkers[player])

    def count(self, player: Player) -> int:
        return self.checkers[player]

    def to_dict(self) -> dict:
        return {'black': self.checkers[Player.BLACK], 'red': self.checkers[Player.RED]}


class Point(CheckerContainer):
    """Один из 24 пунктов доски."""

    def __init__(self, slot_id: int, dispatcher):
        super().__init__(slot_id, dispatcher)
        self.valid_destination = False
        self.valid_source = False
        self.selected = False

    def set_valid_destination(self, on: bool, player=None):
        if self.valid_destination == on:
            return
        self.valid_destination = on
        self.dispatcher.valid_destination_changed(self.slot_id, player, on)

    def set_valid_source(self, on: bool, player=None):
        if self.valid_source == on:
            return
        self.valid_source = on
        self.dispatcher.valid_source_changed(self.slot_id, player, on)

    def set_selected(self, on: bool, player=None):
        if self.selected == on:
            return
        self.selected = on
        self.dispatcher.selected_changed(self.slot_id, player, on)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'valid_destination': self.valid_destination,
            'valid_source': self.valid_source,
            'selected': self.selected,
        })
        return data


class Bar(CheckerContainer):
    """Бар. Выбор и подсветка источника - отдельно для каждого игрока."""

    def __init__(self, dispatcher):
        super().__init__(BAR, dispatcher)
        self.valid_source = [False, False]
        self.selected = [False, False]

    def set_valid_source(self, player: Player, on: bool):
        if self.valid_source[player] == on:
            return
        self.valid_source[player] = on
        self.dispatcher.valid_source_changed(self.slot_id, player, on)

    def set_selected(self, player: Player, on: bool):
        if self.selected[player] == on:
            return
        self.selected[player] = on
        self.dispatcher.selected_changed(self.slot_id, player, on)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['valid_source'] = {'black': self.valid_source[Player.BLACK], 'red': self.valid_source[Player.RED]}
        data['selected'] = {'black': self.selected[Player.BLACK], 'red': self.selected[Player.RED]}
        return data


class Home(CheckerContainer):
    """Дом (выброшенные фишки). Подсветка назначения - для каждого игрока."""

    def __init__(self, dispatcher):
        super().__init__(HOME, dispatcher)
        self.valid_destination = [False, False]

    def set_valid_destination(self, player: Player, on: bool):
        if self.valid_destination[player] == on:
            return
        self.valid_destination[player] = on
        self.dispatcher.valid_destination_changed(self.slot_id, player, on)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['valid_destination'] = {
            'black': self.valid_destination[Player.BLACK],
            'red': self.valid_destination[Player.RED],
        }
        return data
