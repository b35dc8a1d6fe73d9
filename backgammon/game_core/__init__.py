# backgammon/game_core/__init__.py

# "Публичный API" ядра правил
from .constants import (
    Player, other_player, HOME, BAR, CHECKERS_PER_PLAYER
)

from .board_state import (
    BoardState,
    standard_position
)

from .events import (
    BoardObserver,
    RecordingObserver,
    QueueNotifier
)

from .dice import (
    Die,
    roll_dice,
    roll_die,
    make_dice,
    available_pips,
    use_pips
)

from .utils import (
    get_winner,
    pip_count,
    has_legal_move
)
