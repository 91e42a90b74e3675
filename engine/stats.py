"""Derived combat numbers: effective abilities, armor class, attack stats."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel

from config import EXPERIENCE_THRESHOLDS
from engine import catalog
from engine.dice import Die
from models.catalog import AbilityScaling, AbilityType, WeaponAttackStats
from models.characters import AbilityScores

if TYPE_CHECKING:
    from models.characters import Character

UNARMED_DICE = [Die.D4]


class WeaponSlot(str, Enum):
    MAIN_HAND = "main_hand"
    OFF_HAND = "off_hand"


class AttackStats(BaseModel):
    """Numbers for one attack, recomputed every time it is made."""
    attack_dice: list[Die]
    attack_bonus: int               # Flat damage bonus
    hit_bonus: int                  # Added to the d20


def calculate_ability_modifier(score: int) -> int:
    """Calculate ability modifier from a score.

    Args:
        score: The ability score (e.g. 16).

    Returns:
        The modifier (e.g. +3 for 16, -1 for 8 or 9).
    """
    return (score - 10) // 2


def effective_ability_scores(character: Character) -> AbilityScores:
    """Base scores plus level-up increments, active conditions and jewelry."""
    totals = {ability: character.base_ability_scores.get(ability) for ability in AbilityType}

    for choice in character.level_up_choices:
        totals[choice.ability_increment] += 1

    for active in character.active_conditions:
        condition = catalog.condition(active.condition_type)
        totals[AbilityType.STRENGTH] += condition.strength_bonus
        totals[AbilityType.DEXTERITY] += condition.dexterity_bonus
        totals[AbilityType.CONSTITUTION] += condition.constitution_bonus

    for jewelry_type in character.equipped_jewelry:
        jewelry = catalog.jewelry(jewelry_type)
        totals[AbilityType.STRENGTH] += jewelry.strength_bonus
        totals[AbilityType.DEXTERITY] += jewelry.dexterity_bonus
        totals[AbilityType.CONSTITUTION] += jewelry.constitution_bonus

    return AbilityScores(
        strength=totals[AbilityType.STRENGTH],
        dexterity=totals[AbilityType.DEXTERITY],
        constitution=totals[AbilityType.CONSTITUTION],
    )


def max_health_for(constitution: int, level: int) -> int:
    """Maximum health for a constitution score and level. Not clamped."""
    return 12 + 6 * level + calculate_ability_modifier(constitution)


def max_health(character: Character) -> int:
    scores = effective_ability_scores(character)
    return max_health_for(scores.constitution, character.level)


def experience_level(character: Character) -> int:
    """The level a character's experience entitles it to."""
    for level, threshold in enumerate(EXPERIENCE_THRESHOLDS):
        if character.experience < threshold:
            return level
    return len(EXPERIENCE_THRESHOLDS)


def armor_class(character: Character) -> int:
    """10 + armor + capped dexterity + hand-held armor (shields) + jewelry."""
    scores = effective_ability_scores(character)
    dexterity_bonus = calculate_ability_modifier(scores.dexterity)

    armor_bonus = 0
    if character.equipped_armor is not None:
        armor = catalog.armor(character.equipped_armor)
        dexterity_bonus = min(dexterity_bonus, armor.max_dexterity_bonus)
        if armor.strength_requirement <= scores.strength:
            armor_bonus = armor.armor_bonus

    held_bonus = sum(
        catalog.weapon(weapon_type).armor_bonus
        for weapon_type in (character.equipped_weapon, character.equipped_offhand)
        if weapon_type is not None
    )
    jewelry_bonus = sum(
        catalog.jewelry(jewelry_type).armor_bonus for jewelry_type in character.equipped_jewelry
    )

    return 10 + armor_bonus + dexterity_bonus + held_bonus + jewelry_bonus


def _scaling_bonus(scaling: AbilityScaling, scores: AbilityScores) -> int:
    strength = calculate_ability_modifier(scores.strength)
    dexterity = calculate_ability_modifier(scores.dexterity)
    if scaling == AbilityScaling.STRENGTH:
        return strength
    if scaling == AbilityScaling.DEXTERITY:
        return dexterity
    if scaling == AbilityScaling.VERSATILE:
        return strength if scores.dexterity < scores.strength else dexterity
    return 0


def _held_weapon(character: Character, slot: WeaponSlot, scores: AbilityScores):
    weapon_type = (
        character.equipped_weapon if slot == WeaponSlot.MAIN_HAND else character.equipped_offhand
    )
    if weapon_type is None:
        return None
    weapon = catalog.weapon(weapon_type)
    if weapon.strength_requirement > scores.strength:
        return None
    return weapon


def attack_stats(character: Character, weapon: WeaponSlot | WeaponAttackStats) -> AttackStats:
    """Attack numbers for a main-hand, off-hand or thrown attack.

    An empty (or too heavy to wield) hand attacks unarmed for 1d4 using the
    better of strength and dexterity. Both hands scale hit and damage with
    the weapon's primary ability.
    """
    scores = effective_ability_scores(character)

    if isinstance(weapon, WeaponAttackStats):
        bonus = _scaling_bonus(weapon.primary_ability, scores)
        return AttackStats(
            attack_dice=list(weapon.attack_dice),
            attack_bonus=bonus + weapon.attack_bonus,
            hit_bonus=bonus,
        )

    held = _held_weapon(character, weapon, scores)
    if held is None:
        stats = WeaponAttackStats(primary_ability=AbilityScaling.VERSATILE, attack_dice=UNARMED_DICE)
    else:
        stats = held.attack_stats

    bonus = _scaling_bonus(stats.primary_ability, scores)
    dice = stats.attack_dice
    if weapon == WeaponSlot.MAIN_HAND and character.equipped_offhand is None:
        dice = stats.versatile_attack_dice or dice

    return AttackStats(
        attack_dice=list(dice),
        attack_bonus=bonus + stats.attack_bonus,
        hit_bonus=bonus,
    )


def spell_stats(character: Character, spell_attack: WeaponAttackStats) -> AttackStats:
    """Apply the ability scaling rule to a spell's fixed stat block."""
    scores = effective_ability_scores(character)
    bonus = _scaling_bonus(spell_attack.primary_ability, scores)
    return AttackStats(
        attack_dice=list(spell_attack.attack_dice),
        attack_bonus=bonus + spell_attack.attack_bonus,
        hit_bonus=bonus,
    )


def can_attack_with_offhand(character: Character) -> bool:
    """Whether an off-hand attack is possible: a free hand or an off-hand weapon with dice."""
    if character.equipped_weapon is not None and catalog.weapon(character.equipped_weapon).two_handed:
        return False
    if character.equipped_offhand is None:
        return True
    return bool(catalog.weapon(character.equipped_offhand).attack_stats.attack_dice)
