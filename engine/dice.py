"""Dice rolling utilities for Deepdelve Server."""

import random
from enum import Enum


class Die(str, Enum):
    """The dice the rules know how to roll."""
    D4 = "d4"
    D6 = "d6"
    D8 = "d8"
    D10 = "d10"
    D12 = "d12"
    D20 = "d20"

    @property
    def faces(self) -> int:
        return int(self.value[1:])


def roll(die: Die, rng: random.Random | None = None) -> int:
    """Roll a single die.

    Args:
        die: The die to roll.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        A uniformly distributed value in [1, faces].
    """
    rng = rng or random.Random()
    return rng.randint(1, die.faces)


def roll_dice(dice: list[Die], rng: random.Random | None = None) -> list[int]:
    """Roll every die in a list once, keeping the individual results."""
    rng = rng or random.Random()
    return [roll(die, rng) for die in dice]


def roll_d20(rng: random.Random | None = None) -> int:
    """Roll a d20 for an attack or initiative."""
    return roll(Die.D20, rng)
