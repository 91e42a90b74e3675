"""Character creation, equipment, rests and level-ups.

These are the validated mutations outside combat. Every operation that acts
for a player goes through ``validate_player`` first.
"""

import logging
import secrets
from uuid import uuid4

from config import (
    ABILITY_POINTS,
    BASE_ABILITY_SCORE,
    MAX_EQUIPPED_JEWELRY,
    SHORT_RESTS_PER_LONG_REST,
    STARTING_GOLD,
)
from engine import catalog
from engine.errors import (
    AbilitySumError,
    ArmorNotInInventory,
    CannotRestWhileFighting,
    Dead,
    InsufficientExperience,
    InsufficientShortRests,
    InsufficientStrength,
    JewelryNotInInventory,
    NotOffHandWeapon,
    TooManyJewelriesEquipped,
    TwoHandedConflict,
    Unauthorized,
    WeaponNotInInventory,
)
from engine.stats import effective_ability_scores, experience_level, max_health, max_health_for
from engine.storage import Storage
from models.catalog import AbilityType, ArmorType, ClassType, JewelryType, WeaponType
from models.characters import (
    AbilityScores,
    Character,
    CharacterCredentials,
    CharacterStatus,
    LevelUpChoice,
    MonsterType,
)

logger = logging.getLogger(__name__)


def create_character(
    storage: Storage,
    name: str,
    strength: int,
    dexterity: int,
    constitution: int,
) -> CharacterCredentials:
    """Create a player character from a point buy.

    Args:
        storage: Record store to add the character to.
        name: Display name.
        strength: Points added to the base strength score.
        dexterity: Points added to the base dexterity score.
        constitution: Points added to the base constitution score.

    Returns:
        The id and secret needed to act as the new character.

    Raises:
        AbilitySumError: If the points don't add up to exactly 10.
    """
    points = (strength, dexterity, constitution)
    if any(p < 0 for p in points) or sum(points) != ABILITY_POINTS:
        raise AbilitySumError()

    scores = AbilityScores(
        strength=BASE_ABILITY_SCORE + strength,
        dexterity=BASE_ABILITY_SCORE + dexterity,
        constitution=BASE_ABILITY_SCORE + constitution,
    )
    character = Character(
        id=str(uuid4()),
        name=name,
        secret=secrets.token_hex(16),
        current_health=max_health_for(scores.constitution, 0),
        base_ability_scores=scores,
        gold=STARTING_GOLD,
        party_id=storage.create_party(),
        short_rests_available=SHORT_RESTS_PER_LONG_REST,
    )
    storage.add_character(character)
    logger.info("Created character %s (%s)", character.name, character.id)
    return CharacterCredentials(id=character.id, secret=character.secret)


def spawn_monster(storage: Storage, monster_type: MonsterType, party_id: str) -> Character:
    """Create a monster from its catalog definition, at full health."""
    definition = catalog.monster(monster_type)
    monster = Character(
        id=str(uuid4()),
        name=definition.name,
        secret=secrets.token_hex(16),
        monster_type=monster_type,
        current_health=0,
        base_ability_scores=definition.base_ability_scores,
        gold=definition.gold,
        equipped_weapon=definition.equipped_weapon,
        equipped_offhand=definition.equipped_offhand,
        equipped_armor=definition.equipped_armor,
        equipped_jewelry=list(definition.equipped_jewelry),
        weapon_inventory=list(definition.weapon_inventory),
        armor_inventory=list(definition.armor_inventory),
        jewelry_inventory=list(definition.jewelry_inventory),
        item_inventory=list(definition.item_inventory),
        level_up_choices=list(definition.levels),
        party_id=party_id,
    )
    monster.current_health = max_health(monster)
    storage.add_character(monster)
    return monster


def validate_player(storage: Storage, credentials: CharacterCredentials) -> Character:
    """Load a character, checking the secret and that it is alive.

    Raises:
        CharacterNotFound: If no character has this id.
        Unauthorized: If the secret doesn't match.
        Dead: If the character has no health left.
    """
    character = storage.get_character(credentials.id)
    if not secrets.compare_digest(character.secret, credentials.secret):
        raise Unauthorized()
    if not character.is_alive:
        raise Dead()
    return character


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------

def _save_equipment(storage: Storage, character: Character) -> None:
    storage.set_equipment(
        character.id,
        weapon=character.equipped_weapon,
        offhand=character.equipped_offhand,
        armor=character.equipped_armor,
        jewelry=character.equipped_jewelry,
    )


def equip_main_hand(
    storage: Storage, credentials: CharacterCredentials, weapon_type: WeaponType,
) -> Character:
    """Wield a carried weapon in the main hand.

    A two-handed weapon pushes whatever was in the off-hand back to the pack.
    """
    character = validate_player(storage, credentials)
    needed = 2 if character.equipped_offhand == weapon_type else 1
    if character.weapon_inventory.count(weapon_type) < needed:
        raise WeaponNotInInventory()

    character.equipped_weapon = weapon_type
    if catalog.weapon(weapon_type).two_handed:
        character.equipped_offhand = None
    _save_equipment(storage, character)
    return character


def equip_off_hand(
    storage: Storage, credentials: CharacterCredentials, weapon_type: WeaponType,
) -> Character:
    """Wield a carried weapon in the off-hand."""
    character = validate_player(storage, credentials)
    needed = 2 if character.equipped_weapon == weapon_type else 1
    if character.weapon_inventory.count(weapon_type) < needed:
        raise WeaponNotInInventory()
    if not catalog.weapon(weapon_type).allow_offhand:
        raise NotOffHandWeapon()
    if character.equipped_weapon is not None and catalog.weapon(character.equipped_weapon).two_handed:
        raise TwoHandedConflict()

    character.equipped_offhand = weapon_type
    _save_equipment(storage, character)
    return character


def equip_armor(
    storage: Storage, credentials: CharacterCredentials, armor_type: ArmorType,
) -> Character:
    character = validate_player(storage, credentials)
    if armor_type not in character.armor_inventory:
        raise ArmorNotInInventory()
    if effective_ability_scores(character).strength < catalog.armor(armor_type).strength_requirement:
        raise InsufficientStrength()

    character.equipped_armor = armor_type
    _save_equipment(storage, character)
    return character


def equip_jewelry(
    storage: Storage, credentials: CharacterCredentials, jewelry_type: JewelryType,
) -> Character:
    character = validate_player(storage, credentials)
    if character.jewelry_inventory.count(jewelry_type) <= character.equipped_jewelry.count(jewelry_type):
        raise JewelryNotInInventory()
    if len(character.equipped_jewelry) >= MAX_EQUIPPED_JEWELRY:
        raise TooManyJewelriesEquipped()

    character.equipped_jewelry.append(jewelry_type)
    _save_equipment(storage, character)
    return character


def unequip_jewelry(
    storage: Storage, credentials: CharacterCredentials, jewelry_type: JewelryType,
) -> Character:
    character = validate_player(storage, credentials)
    if jewelry_type not in character.equipped_jewelry:
        raise JewelryNotInInventory()

    character.equipped_jewelry.remove(jewelry_type)
    _save_equipment(storage, character)
    return character


# ---------------------------------------------------------------------------
# Rests and levels
# ---------------------------------------------------------------------------

def short_rest(storage: Storage, credentials: CharacterCredentials) -> Character:
    """Spend a short rest to recover half of maximum health.

    Raises:
        CannotRestWhileFighting: If the character is in an encounter.
        InsufficientShortRests: If none are left until the next long rest.
    """
    character = validate_player(storage, credentials)
    if character.status == CharacterStatus.FIGHTING:
        raise CannotRestWhileFighting()
    if character.short_rests_available <= 0:
        raise InsufficientShortRests()

    maximum = max_health(character)
    character.current_health = min(character.current_health + maximum // 2, maximum)
    character.short_rests_available -= 1
    storage.set_health(character.id, character.current_health)
    storage.set_short_rests(character.id, character.short_rests_available)
    logger.debug("%s took a short rest (%d left)", character.name, character.short_rests_available)
    return character


def long_rest(storage: Storage, credentials: CharacterCredentials) -> Character:
    """Recover all health and short rests."""
    character = validate_player(storage, credentials)
    if character.status == CharacterStatus.FIGHTING:
        raise CannotRestWhileFighting()

    character.current_health = max_health(character)
    character.short_rests_available = SHORT_RESTS_PER_LONG_REST
    character.status = CharacterStatus.RESTING
    storage.set_health(character.id, character.current_health)
    storage.set_short_rests(character.id, character.short_rests_available)
    storage.set_status(character.id, CharacterStatus.RESTING)
    return character


def level_up(
    storage: Storage,
    credentials: CharacterCredentials,
    class_type: ClassType,
    ability: AbilityType,
) -> Character:
    """Take a level in a class, incrementing one ability score.

    Raises:
        InsufficientExperience: If experience doesn't reach the next threshold.
    """
    character = validate_player(storage, credentials)
    if experience_level(character) <= character.level:
        raise InsufficientExperience()

    choice = LevelUpChoice(ability_increment=ability, class_type=class_type)
    character.level_up_choices.append(choice)
    storage.add_level_up_choice(character.id, choice)
    logger.info("%s reached level %d", character.name, character.level)
    return character
