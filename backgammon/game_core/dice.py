# backgammon/game_core/dice.py

import random
from typing import List, Sequence

from .constants import MIN_PIPS, MAX_PIPS


class Die:
    """Кубик с оставшимся числом использований (дубль - по 2 на кубик)."""

    def __init__(self, value: int, remaining_uses: int = 1):
        if not MIN_PIPS <= value <= MAX_PIPS:
            raise ValueError(f"Die value must be between {MIN_PIPS} and {MAX_PIPS}, got {value!r}")
        self.value = value
        self.remaining_uses = remaining_uses

    def use(self):
        if self.remaining_uses <= 0:
            raise ValueError(f"Die {self.value} has no remaining uses")
        self.remaining_uses -= 1

    @property
    def is_used(self) -> bool:
        return self.remaining_uses == 0

    def to_dict(self) -> dict:
        return {'value': self.value, 'remaining_uses': self.remaining_uses}

    def __repr__(self):
        return f"Die({self.value}, remaining_uses={self.remaining_uses})"


def roll_die(rng=random) -> int:
    return rng.randint(MIN_PIPS, MAX_PIPS)


def roll_dice(rng=random) -> List[int]:
    """Бросает два кубика."""
    return [roll_die(rng), roll_die(rng)]


def make_dice(values: Sequence[int]) -> List[Die]:
    """Два кубика из броска; дубль дает четыре хода."""
    first, second = values
    uses = 2 if first == second else 1
    return [Die(first, uses), Die(second, uses)]


def available_pips(dice: Sequence[Die]) -> List[int]:
    return sorted({die.value for die in dice if not die.is_used})


def use_pips(dice: Sequence[Die], pips: int):
    """Списывает одно использование кубика со значением pips."""
    for die in dice:
        if die.value == pips and not die.is_used:
            die.use()
            return
    raise ValueError(f"No unused die with value {pips}")
