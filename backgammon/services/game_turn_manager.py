# backgammon/services/game_turn_manager.py

import random
import threading
from typing import TYPE_CHECKING, Callable, Optional

from backgammon.game_core import (
    Player,
    other_player,
    HOME,
    roll_die,
    roll_dice,
    make_dice,
    available_pips,
    use_pips,
    get_winner,
    has_legal_move,
)
from backgammon.game_core.constants import PLAYER_NAMES

if TYPE_CHECKING:
    from .game_state import GameState

from .game_state import STATE_CREATED, STATE_STARTING_ROLL, STATE_PLAYING, STATE_FINISHED


class GameTurnManager:
    """
    Управляет очередностью: бросок на первый ход, бросок кубиков,
    выбор источника, применение шага, передача хода и проверка победы.

    Все методы возвращают список уведомлений
    {'event', 'payload', 'room'}; нарушения правил - это 'move_rejection',
    а не исключения.
    """
    def __init__(
        self,
        game_id: str,
        log_event: Callable,
        log_result: Callable,
        rng=None
    ):
        self.game_id = game_id
        self.lock = threading.RLock()
        self.log_event = log_event
        self.log_result = log_result
        self.rng = rng or random.Random()

    def set_lock(self, lock: threading.RLock):
        """Устанавливает внешний RLock из GameSession."""
        self.lock = lock

    # --- Хелперы уведомлений ---

    def _notification(self, event: str, payload: dict) -> dict:
        return {'event': event, 'payload': payload, 'room': self.game_id}

    def _rejection(self, message: str) -> dict:
        return self._notification('move_rejection', {'message': message})

    def _guard_turn(self, game_state: 'GameState', player: Player) -> Optional[dict]:
        """Общие проверки: партия идет и сейчас ход этого игрока."""
        if game_state.session_state != STATE_PLAYING:
            self.log_event(
                "STATE_VIOLATION_BLOCKED",
                f"{PLAYER_NAMES[player]} acted in state '{game_state.session_state}'. Expected '{STATE_PLAYING}'.",
                game_id=self.game_id
            )
            return self._rejection('Action impossible: the game is not in progress.')
        if game_state.turn != player:
            return self._rejection('It is not your turn.')
        return None

    # --- Первый ход ---

    def start_first_roll(self, game_state: 'GameState') -> list:
        """
        Каждый бросает по кубику, ничья - переброс. Старший кубик ходит
        первым и играет оба выпавших значения.
        """
        with self.lock:
            if game_state.session_state != STATE_CREATED:
                return [self._rejection('The game has already started.')]

            notifications = []
            game_state.session_state = STATE_STARTING_ROLL
            self.log_event("STATE_CHANGE", f"State -> {STATE_STARTING_ROLL}", game_id=self.game_id)

            while True:
                black_value = roll_die(self.rng)
                red_value = roll_die(self.rng)
                if black_value != red_value:
                    break
                notifications.append(self._notification('first_roll_tie', {'value': black_value}))

            first = Player.BLACK if black_value > red_value else Player.RED
            game_state.turn = first
            game_state.dice = make_dice([black_value, red_value])
            game_state.session_state = STATE_PLAYING
            self.log_event(
                "STATE_CHANGE",
                f"State -> {STATE_PLAYING}. First turn: {PLAYER_NAMES[first]}",
                game_id=self.game_id,
                extra_data={'black': black_value, 'red': red_value}
            )

            notifications.append(self._notification('first_roll_result', {
                'black': black_value,
                'red': red_value,
                'turn': PLAYER_NAMES[first],
            }))
            notifications.extend(self._after_dice_changed(game_state))
            return notifications

    # --- Бросок ---

    def roll_dice_for_player(self, game_state: 'GameState', player: Player) -> list:
        with self.lock:
            rejection = self._guard_turn(game_state, player)
            if rejection:
                return [rejection]

            if available_pips(game_state.dice):
                return [self._rejection('Dice have already been rolled.')]

            values = roll_dice(self.rng)
            game_state.dice = make_dice(values)
            self.log_event("DICE_ROLL", f"{PLAYER_NAMES[player]} rolled {values}", game_id=self.game_id)

            notifications = [self._notification('dice_roll_result', {
                'player': PLAYER_NAMES[player],
                'dice': values,
            })]
            notifications.extend(self._after_dice_changed(game_state))
            return notifications

    # --- Выбор источника ---

    def select_source(self, game_state: 'GameState', player: Player, source: int) -> list:
        with self.lock:
            rejection = self._guard_turn(game_state, player)
            if rejection:
                return [rejection]

            pips_values = available_pips(game_state.dice)
            if not pips_values:
                return [self._rejection('Roll the dice first.')]

            board = game_state.board
            if source == HOME or not any(board.is_legal_move(player, source, pips) for pips in pips_values):
                return [self._rejection(f'No legal move from {source}.')]

            board.clear_selection()
            board.remove_all_highlights()
            board.set_selected(player, source, True)
            game_state.selected_source = source

            destinations = []
            for pips in pips_values:
                destination = board.check_if_valid_destination(player, source, pips)
                if destination is not None:
                    destinations.append({'pips': pips, 'destination': destination})

            return [self._notification('source_selected', {
                'player': PLAYER_NAMES[player],
                'source': source,
                'destinations': destinations,
            })]

    # --- Шаг ---

    def apply_player_step(self, game_state: 'GameState', player: Player, source: int, pips: int) -> list:
        with self.lock:
            rejection = self._guard_turn(game_state, player)
            if rejection:
                return [rejection]

            if pips not in available_pips(game_state.dice):
                return [self._rejection(f'No unused die with value {pips}.')]

            board = game_state.board
            opponent = other_player(player)
            destination = board.get_destination_slot(player, source, pips)
            was_blot = destination != HOME and board.count(opponent, destination) == 1

            if not board.move(player, source, pips):
                self.log_event(
                    "ILLEGAL_MOVE",
                    f"{PLAYER_NAMES[player]} tried {source} by {pips}",
                    game_id=self.game_id
                )
                return [self._rejection(f'Illegal move: {source} by {pips}.')]

            use_pips(game_state.dice, pips)
            board.clear_selection()
            board.remove_all_highlights()
            game_state.selected_source = None

            notifications = [self._notification('step_executed', {
                'player': PLAYER_NAMES[player],
                'source': source,
                'pips': pips,
                'destination': destination,
                'hit': was_blot,
            })]

            winner = get_winner(board)
            if winner is not None:
                notifications.extend(self._finish_game(game_state, winner, 'bore_off'))
                return notifications

            notifications.extend(self._after_dice_changed(game_state))
            return notifications

    def move_to_destination(self, game_state: 'GameState', player: Player, destination: int) -> list:
        """Ход выбранной фишкой в указанный слот (подбирает подходящий кубик)."""
        with self.lock:
            rejection = self._guard_turn(game_state, player)
            if rejection:
                return [rejection]

            source = game_state.selected_source
            if source is None:
                return [self._rejection('Select a checker first.')]

            board = game_state.board
            for pips in available_pips(game_state.dice):
                if board.get_destination_slot(player, source, pips) != destination:
                    continue
                if board.is_legal_move(player, source, pips):
                    return self.apply_player_step(game_state, player, source, pips)

            return [self._rejection(f'{destination} is not a valid destination from {source}.')]

    # --- Сдача ---

    def player_give_up(self, game_state: 'GameState', player: Player) -> list:
        with self.lock:
            if game_state.session_state != STATE_PLAYING:
                return [self._rejection('Action impossible: the game is not in progress.')]

            winner = other_player(player)
            self.log_event(
                "GAME_END_GIVE_UP",
                f"{PLAYER_NAMES[player]} gave up. Winner: {PLAYER_NAMES[winner]}",
                game_id=self.game_id
            )
            return self._finish_game(game_state, winner, 'give_up')

    # --- Внутреннее ---

    def _after_dice_changed(self, game_state: 'GameState') -> list:
        """
        После броска или шага: если ходов больше нет - ход переходит
        сопернику, иначе подсвечиваем возможные источники.
        """
        board = game_state.board
        player = game_state.turn
        pips_values = available_pips(game_state.dice)

        if not pips_values:
            return self._pass_turn(game_state, 'dice_used')

        if not has_legal_move(board, player, pips_values):
            self.log_event(
                "NO_MOVES",
                f"{PLAYER_NAMES[player]} has no legal move with {pips_values}",
                game_id=self.game_id
            )
            return self._pass_turn(game_state, 'no_moves')

        sources = board.mark_valid_sources(player, pips_values)
        return [self._notification('valid_sources', {
            'player': PLAYER_NAMES[player],
            'sources': sources,
            'available_pips': pips_values,
        })]

    def _pass_turn(self, game_state: 'GameState', reason: str) -> list:
        board = game_state.board
        previous = game_state.turn
        game_state.turn = other_player(previous)
        game_state.dice = []
        game_state.selected_source = None
        board.clear_selection()
        board.remove_all_highlights()
        board.remove_all_source_highlights()

        return [self._notification('turn_changed', {
            'previous': PLAYER_NAMES[previous],
            'turn': PLAYER_NAMES[game_state.turn],
            'reason': reason,
        })]

    def _finish_game(self, game_state: 'GameState', winner: Player, reason: str) -> list:
        board = game_state.board
        game_state.winner = winner
        game_state.session_state = STATE_FINISHED
        game_state.dice = []
        game_state.selected_source = None
        board.clear_selection()
        board.remove_all_highlights()
        board.remove_all_source_highlights()

        self.log_event("STATE_CHANGE", f"State -> {STATE_FINISHED}. Winner: {PLAYER_NAMES[winner]}", game_id=self.game_id)
        self.log_result({
            'game_id': self.game_id,
            'winner': PLAYER_NAMES[winner],
            'reason': reason,
            'borne_off': {
                PLAYER_NAMES[player]: board.count(player, HOME) for player in Player
            },
        })

        return [self._notification('game_over', {
            'winner': PLAYER_NAMES[winner],
            'reason': reason,
        })]
