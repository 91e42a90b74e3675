"""Human-readable names for every catalog type, parsed at the API boundary.

Each table maps an enum member to exactly one name and back. Parsing is
case-insensitive and treats underscores as spaces, so ``"Chain_Mail"``
and ``"chain mail"`` both parse.
"""

from enum import Enum
from typing import Generic, TypeVar

from engine.errors import (
    UnknownAbility,
    UnknownAction,
    UnknownArmor,
    UnknownClass,
    UnknownItem,
    UnknownJewelry,
    UnknownMonster,
    UnknownName,
    UnknownWeapon,
)
from models.actions import ActionKind
from models.catalog import AbilityType, ArmorType, ClassType, ItemType, JewelryType, WeaponType
from models.characters import MonsterType

E = TypeVar("E", bound=Enum)


def _normalize(text: str) -> str:
    return " ".join(text.strip().lower().replace("_", " ").split())


class NameTable(Generic[E]):
    """Bidirectional enum <-> name mapping."""

    def __init__(self, names: dict[E, str], error: type[UnknownName]) -> None:
        self._names = names
        self._members = {_normalize(name): member for member, name in names.items()}
        if len(self._members) != len(names):
            raise ValueError("Duplicate name in table")
        self._error = error

    def parse(self, text: str) -> E:
        member = self._members.get(_normalize(text))
        if member is None:
            expected = ", ".join(self.all_names())
            raise self._error(f"{self._error.message} Expected one of: {expected}")
        return member

    def all_names(self) -> list[str]:
        return list(self._names.values())


WEAPONS = NameTable({
    WeaponType.DAGGER: "dagger",
    WeaponType.SHORTSWORD: "shortsword",
    WeaponType.LONGSWORD: "longsword",
    WeaponType.RAPIER: "rapier",
    WeaponType.GREATSWORD: "greatsword",
    WeaponType.GREATAXE: "greataxe",
    WeaponType.SHIELD: "shield",
}, UnknownWeapon)

ARMOR = NameTable({
    ArmorType.LEATHER: "leather",
    ArmorType.STUDDED_LEATHER: "studded leather",
    ArmorType.CHAIN_SHIRT: "chain shirt",
    ArmorType.BREASTPLATE: "breastplate",
    ArmorType.HALF_PLATE: "half plate",
    ArmorType.CHAIN_MAIL: "chain mail",
    ArmorType.SPLINT: "splint",
}, UnknownArmor)

JEWELRY = NameTable({
    JewelryType.BRASS_RING: "brass ring",
    JewelryType.RING_OF_PROTECTION: "ring of protection",
    JewelryType.RING_OF_STRENGTH: "ring of strength",
    JewelryType.RING_OF_DEXTERITY: "ring of dexterity",
    JewelryType.RING_OF_CONSTITUTION: "ring of constitution",
}, UnknownJewelry)

ITEMS = NameTable({
    ItemType.STONE: "stone",
    ItemType.POTION_OF_HEALING: "potion of healing",
    ItemType.SCROLL_OF_WEAKEN: "scroll of weaken",
    ItemType.SCROLL_OF_FIRE_BOLT: "scroll of fire bolt",
    ItemType.ELIXIR_OF_MIGHT: "elixir of might",
}, UnknownItem)

# Monster levels are not a player choice
CLASSES = NameTable({
    ClassType.FIGHTER: "fighter",
}, UnknownClass)

ABILITIES = NameTable({
    AbilityType.STRENGTH: "strength",
    AbilityType.DEXTERITY: "dexterity",
    AbilityType.CONSTITUTION: "constitution",
}, UnknownAbility)

MONSTERS = NameTable({
    MonsterType.WOLF: "wolf",
    MonsterType.DIRE_WOLF: "dire wolf",
    MonsterType.GOBLIN: "goblin",
    MonsterType.SKELETON: "skeleton",
    MonsterType.TEST_MONSTER: "test monster",
    MonsterType.TEST_MONSTER_WITH_DAGGER: "test monster with dagger",
    MonsterType.TEST_MONSTER_WITH_LEATHER_ARMOR: "test monster with leather armor",
}, UnknownMonster)

ACTIONS = NameTable({
    ActionKind.ATTACK: "attack",
    ActionKind.ITEM: "item",
}, UnknownAction)
