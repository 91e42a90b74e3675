"""Static stat blocks for weapons, armor, jewelry, items, spells and conditions."""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field

from engine.dice import Die


class AbilityType(str, Enum):
    """The three ability scores a character has."""
    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"


class AbilityScaling(str, Enum):
    """Which ability score feeds an attack's hit and damage bonus."""
    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    VERSATILE = "versatile"         # Higher of strength and dexterity
    INTELLIGENCE = "intelligence"   # Spells; characters have no intelligence, so always 0


class ClassType(str, Enum):
    """Classes a level-up can be taken in."""
    MONSTER = "monster"
    FIGHTER = "fighter"


class ActionSlot(str, Enum):
    """Which half of a turn an item occupies."""
    ACTION = "action"
    BONUS_ACTION = "bonus_action"


class WeaponType(str, Enum):
    DAGGER = "dagger"
    SHORTSWORD = "shortsword"
    LONGSWORD = "longsword"
    RAPIER = "rapier"
    GREATSWORD = "greatsword"
    GREATAXE = "greataxe"
    SHIELD = "shield"


class ArmorType(str, Enum):
    LEATHER = "leather"
    STUDDED_LEATHER = "studded_leather"
    CHAIN_SHIRT = "chain_shirt"
    BREASTPLATE = "breastplate"
    HALF_PLATE = "half_plate"
    CHAIN_MAIL = "chain_mail"
    SPLINT = "splint"


class JewelryType(str, Enum):
    BRASS_RING = "brass_ring"
    RING_OF_PROTECTION = "ring_of_protection"
    RING_OF_STRENGTH = "ring_of_strength"
    RING_OF_DEXTERITY = "ring_of_dexterity"
    RING_OF_CONSTITUTION = "ring_of_constitution"


class ItemType(str, Enum):
    STONE = "stone"
    POTION_OF_HEALING = "potion_of_healing"
    SCROLL_OF_WEAKEN = "scroll_of_weaken"
    SCROLL_OF_FIRE_BOLT = "scroll_of_fire_bolt"
    ELIXIR_OF_MIGHT = "elixir_of_might"


class SpellType(str, Enum):
    WEAKEN = "weaken"
    FIRE_BOLT = "fire_bolt"
    EMPOWER = "empower"


class ConditionType(str, Enum):
    WEAKEN = "weaken"
    EMPOWERED = "empowered"


class WeaponAttackStats(BaseModel):
    """Fixed attack numbers of a weapon, projectile or spell."""
    primary_ability: AbilityScaling
    attack_dice: list[Die]
    attack_bonus: int = 0
    versatile_attack_dice: list[Die] | None = None  # Used when the off-hand is free


class Weapon(BaseModel):
    name: str
    cost: int
    attack_stats: WeaponAttackStats
    allow_offhand: bool
    two_handed: bool = False
    armor_bonus: int = 0
    strength_requirement: int = 0


class Armor(BaseModel):
    name: str
    cost: int
    armor_bonus: int
    max_dexterity_bonus: int
    strength_requirement: int


class Jewelry(BaseModel):
    name: str
    cost: int
    armor_bonus: int = 0
    strength_bonus: int = 0
    dexterity_bonus: int = 0
    constitution_bonus: int = 0


class Condition(BaseModel):
    """Ability deltas a condition applies while active."""
    name: str
    strength_bonus: int = 0
    dexterity_bonus: int = 0
    constitution_bonus: int = 0


class ConditionEffect(BaseModel):
    kind: Literal["condition"] = "condition"
    condition_type: ConditionType
    duration: int | None = None     # Turns; None lasts until removed


class ProjectileEffect(BaseModel):
    kind: Literal["projectile"] = "projectile"
    attack_stats: WeaponAttackStats


class HealingEffect(BaseModel):
    kind: Literal["healing"] = "healing"
    amount: int


class SpellEffect(BaseModel):
    kind: Literal["spell"] = "spell"
    spell_type: SpellType


class Spell(BaseModel):
    name: str
    effect: Union[ConditionEffect, ProjectileEffect] = Field(discriminator="kind")


class Item(BaseModel):
    """A consumable. One unit is used up every time it is used."""
    name: str
    cost: int
    slot: ActionSlot
    requires_target: bool
    effect: Union[SpellEffect, ProjectileEffect, HealingEffect] = Field(discriminator="kind")
