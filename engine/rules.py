"""Attack resolution: roll to hit, roll damage, apply it to the target."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from pydantic import BaseModel

from engine.dice import roll_d20, roll_dice
from engine.stats import AttackStats, armor_class

if TYPE_CHECKING:
    from models.characters import Character

logger = logging.getLogger(__name__)

CRITICAL_HIT = 20
CRITICAL_MISS = 1


class Hit(BaseModel):
    """A connecting attack, for reporting."""
    damage: int
    critical_hit: bool
    character_name: str


def roll_initiative(rng: random.Random | None = None) -> int:
    """Roll initiative for a character: a straight d20."""
    return roll_d20(rng)


def roll_damage(attack: AttackStats, critical_hit: bool, rng: random.Random | None = None) -> int:
    """Roll an attack's dice (twice on a critical) and add the flat bonus once.

    Never negative: a big enough penalty deals 0, it does not heal.
    """
    rng = rng or random.Random()
    rolled = sum(roll_dice(attack.attack_dice, rng))
    if critical_hit:
        rolled += sum(roll_dice(attack.attack_dice, rng))
    return max(0, rolled + attack.attack_bonus)


def resolve_attack(
    attack: AttackStats,
    target: Character,
    rng: random.Random | None = None,
) -> Hit | None:
    """Resolve one attack roll against a target, reducing its health on a hit.

    A natural 1 always misses; a natural 20 always hits. Otherwise the
    attack connects when d20 + hit bonus beats the target's armor class.

    Args:
        attack: The attacker's numbers for this attack.
        target: The character being attacked (mutated on a hit).
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        The Hit, or None on a miss.
    """
    rng = rng or random.Random()

    dice_roll = roll_d20(rng)
    if dice_roll == CRITICAL_MISS:
        logger.debug("Critical miss against %s", target.name)
        return None

    critical_hit = dice_roll == CRITICAL_HIT
    hit_value = dice_roll + attack.hit_bonus
    target_armor = armor_class(target)

    if not (hit_value > target_armor or critical_hit):
        logger.debug("Miss against %s: %d vs AC %d", target.name, hit_value, target_armor)
        return None

    damage = roll_damage(attack, critical_hit, rng)
    apply_damage(target, damage)
    logger.debug(
        "Hit %s: %d vs AC %d for %d damage%s",
        target.name, hit_value, target_armor, damage, " (critical)" if critical_hit else "",
    )
    return Hit(damage=damage, critical_hit=critical_hit, character_name=target.name)


def apply_damage(character: Character, damage: int) -> Character:
    """Reduce health. Health may go below zero; death is health <= 0."""
    character.current_health -= damage
    return character


def apply_healing(character: Character, amount: int) -> int:
    """Add a flat amount of health. Item healing is not capped at max health.

    Returns:
        The health restored.
    """
    character.current_health += amount
    return amount
