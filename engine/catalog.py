"""Static lookup tables: every catalog type tag maps to a fixed stat block."""

from engine.dice import Die
from models.catalog import (
    AbilityScaling,
    AbilityType,
    ActionSlot,
    Armor,
    ArmorType,
    ClassType,
    Condition,
    ConditionEffect,
    ConditionType,
    HealingEffect,
    Item,
    ItemType,
    Jewelry,
    JewelryType,
    ProjectileEffect,
    Spell,
    SpellEffect,
    SpellType,
    Weapon,
    WeaponAttackStats,
    WeaponType,
)
from models.characters import AbilityScores, LevelUpChoice, MonsterDefinition, MonsterType

# ---------------------------------------------------------------------------
# Weapons
# ---------------------------------------------------------------------------

WEAPONS: dict[WeaponType, Weapon] = {
    WeaponType.DAGGER: Weapon(
        name="Dagger",
        cost=5,
        attack_stats=WeaponAttackStats(
            primary_ability=AbilityScaling.DEXTERITY,
            attack_dice=[Die.D4],
        ),
        allow_offhand=True,
    ),
    WeaponType.SHORTSWORD: Weapon(
        name="Shortsword",
        cost=50,
        attack_stats=WeaponAttackStats(
            primary_ability=AbilityScaling.VERSATILE,
            attack_dice=[Die.D6],
        ),
        allow_offhand=True,
    ),
    WeaponType.LONGSWORD: Weapon(
        name="Longsword",
        cost=50,
        attack_stats=WeaponAttackStats(
            primary_ability=AbilityScaling.STRENGTH,
            attack_dice=[Die.D8],
            versatile_attack_dice=[Die.D10],
        ),
        allow_offhand=False,
        strength_requirement=10,
    ),
    WeaponType.RAPIER: Weapon(
        name="Rapier",
        cost=75,
        attack_stats=WeaponAttackStats(
            primary_ability=AbilityScaling.VERSATILE,
            attack_dice=[Die.D8],
        ),
        allow_offhand=False,
    ),
    WeaponType.GREATSWORD: Weapon(
        name="Greatsword",
        cost=150,
        attack_stats=WeaponAttackStats(
            primary_ability=AbilityScaling.STRENGTH,
            attack_dice=[Die.D6, Die.D6],
        ),
        allow_offhand=False,
        two_handed=True,
        strength_requirement=12,
    ),
    WeaponType.GREATAXE: Weapon(
        name="Greataxe",
        cost=150,
        attack_stats=WeaponAttackStats(
            primary_ability=AbilityScaling.STRENGTH,
            attack_dice=[Die.D12],
        ),
        allow_offhand=False,
        two_handed=True,
        strength_requirement=12,
    ),
    WeaponType.SHIELD: Weapon(
        name="Shield",
        cost=30,
        attack_stats=WeaponAttackStats(
            primary_ability=AbilityScaling.STRENGTH,
            attack_dice=[],
        ),
        allow_offhand=True,
        armor_bonus=2,
    ),
}

# ---------------------------------------------------------------------------
# Armor and jewelry
# ---------------------------------------------------------------------------

ARMOR: dict[ArmorType, Armor] = {
    ArmorType.LEATHER: Armor(
        name="Leather", cost=30, armor_bonus=1, max_dexterity_bonus=6, strength_requirement=8,
    ),
    ArmorType.STUDDED_LEATHER: Armor(
        name="Studded leather", cost=150, armor_bonus=2, max_dexterity_bonus=6, strength_requirement=8,
    ),
    ArmorType.CHAIN_SHIRT: Armor(
        name="Chain shirt", cost=100, armor_bonus=3, max_dexterity_bonus=2, strength_requirement=8,
    ),
    ArmorType.BREASTPLATE: Armor(
        name="Breastplate", cost=150, armor_bonus=4, max_dexterity_bonus=2, strength_requirement=10,
    ),
    ArmorType.HALF_PLATE: Armor(
        name="Half plate", cost=250, armor_bonus=5, max_dexterity_bonus=2, strength_requirement=12,
    ),
    ArmorType.CHAIN_MAIL: Armor(
        name="Chain mail", cost=150, armor_bonus=6, max_dexterity_bonus=2, strength_requirement=14,
    ),
    ArmorType.SPLINT: Armor(
        name="Splint", cost=200, armor_bonus=5, max_dexterity_bonus=0, strength_requirement=16,
    ),
}

JEWELRY: dict[JewelryType, Jewelry] = {
    JewelryType.BRASS_RING: Jewelry(name="Brass ring", cost=300),
    JewelryType.RING_OF_PROTECTION: Jewelry(name="Ring of protection", cost=30000, armor_bonus=1),
    JewelryType.RING_OF_STRENGTH: Jewelry(name="Ring of strength", cost=30000, strength_bonus=1),
    JewelryType.RING_OF_DEXTERITY: Jewelry(name="Ring of dexterity", cost=30000, dexterity_bonus=1),
    JewelryType.RING_OF_CONSTITUTION: Jewelry(
        name="Ring of constitution", cost=30000, constitution_bonus=1,
    ),
}

# ---------------------------------------------------------------------------
# Conditions, spells and consumables
# ---------------------------------------------------------------------------

CONDITIONS: dict[ConditionType, Condition] = {
    ConditionType.WEAKEN: Condition(name="Weaken", strength_bonus=-1),
    ConditionType.EMPOWERED: Condition(name="Empowered", strength_bonus=2),
}

SPELLS: dict[SpellType, Spell] = {
    SpellType.WEAKEN: Spell(
        name="Weaken",
        effect=ConditionEffect(condition_type=ConditionType.WEAKEN, duration=2),
    ),
    SpellType.FIRE_BOLT: Spell(
        name="Fire bolt",
        effect=ProjectileEffect(
            attack_stats=WeaponAttackStats(
                primary_ability=AbilityScaling.INTELLIGENCE,
                attack_dice=[Die.D10],
            ),
        ),
    ),
    SpellType.EMPOWER: Spell(
        name="Empower",
        effect=ConditionEffect(condition_type=ConditionType.EMPOWERED, duration=3),
    ),
}

ITEMS: dict[ItemType, Item] = {
    ItemType.STONE: Item(
        name="Stone",
        cost=1,
        slot=ActionSlot.ACTION,
        requires_target=True,
        effect=ProjectileEffect(
            attack_stats=WeaponAttackStats(
                primary_ability=AbilityScaling.STRENGTH,
                attack_dice=[Die.D4],
            ),
        ),
    ),
    ItemType.POTION_OF_HEALING: Item(
        name="Potion of healing",
        cost=50,
        slot=ActionSlot.BONUS_ACTION,
        requires_target=False,
        effect=HealingEffect(amount=5),
    ),
    ItemType.SCROLL_OF_WEAKEN: Item(
        name="Scroll of weaken",
        cost=100,
        slot=ActionSlot.ACTION,
        requires_target=True,
        effect=SpellEffect(spell_type=SpellType.WEAKEN),
    ),
    ItemType.SCROLL_OF_FIRE_BOLT: Item(
        name="Scroll of fire bolt",
        cost=100,
        slot=ActionSlot.ACTION,
        requires_target=True,
        effect=SpellEffect(spell_type=SpellType.FIRE_BOLT),
    ),
    ItemType.ELIXIR_OF_MIGHT: Item(
        name="Elixir of might",
        cost=150,
        slot=ActionSlot.BONUS_ACTION,
        requires_target=False,
        effect=SpellEffect(spell_type=SpellType.EMPOWER),
    ),
}

# ---------------------------------------------------------------------------
# Monsters
# ---------------------------------------------------------------------------


def _monster_levels(*abilities: AbilityType) -> list[LevelUpChoice]:
    return [
        LevelUpChoice(ability_increment=ability, class_type=ClassType.MONSTER)
        for ability in abilities
    ]


MONSTERS: dict[MonsterType, MonsterDefinition] = {
    MonsterType.WOLF: MonsterDefinition(
        name="Wolf",
        base_ability_scores=AbilityScores(strength=8, dexterity=9, constitution=9),
        gold=5,
        levels=_monster_levels(AbilityType.DEXTERITY),
    ),
    MonsterType.DIRE_WOLF: MonsterDefinition(
        name="Dire wolf",
        base_ability_scores=AbilityScores(strength=8, dexterity=9, constitution=9),
        gold=5,
        levels=_monster_levels(AbilityType.DEXTERITY, AbilityType.CONSTITUTION),
    ),
    MonsterType.GOBLIN: MonsterDefinition(
        name="Goblin",
        base_ability_scores=AbilityScores(strength=8, dexterity=12, constitution=9),
        gold=12,
        equipped_weapon=WeaponType.SHORTSWORD,
        equipped_offhand=WeaponType.DAGGER,
        weapon_inventory=[WeaponType.SHORTSWORD, WeaponType.DAGGER],
        item_inventory=[ItemType.POTION_OF_HEALING],
        levels=_monster_levels(AbilityType.DEXTERITY),
    ),
    MonsterType.SKELETON: MonsterDefinition(
        name="Skeleton",
        base_ability_scores=AbilityScores(strength=10, dexterity=12, constitution=10),
        gold=3,
        equipped_weapon=WeaponType.SHORTSWORD,
        equipped_offhand=WeaponType.SHIELD,
        equipped_armor=ArmorType.LEATHER,
        weapon_inventory=[WeaponType.SHORTSWORD, WeaponType.SHIELD],
        armor_inventory=[ArmorType.LEATHER],
        levels=_monster_levels(AbilityType.STRENGTH, AbilityType.CONSTITUTION),
    ),
    MonsterType.TEST_MONSTER: MonsterDefinition(
        name="Test monster",
        base_ability_scores=AbilityScores(strength=8, dexterity=10, constitution=8),
    ),
    MonsterType.TEST_MONSTER_WITH_DAGGER: MonsterDefinition(
        name="Test monster with dagger",
        base_ability_scores=AbilityScores(strength=8, dexterity=10, constitution=8),
        equipped_weapon=WeaponType.DAGGER,
        weapon_inventory=[WeaponType.DAGGER],
    ),
    MonsterType.TEST_MONSTER_WITH_LEATHER_ARMOR: MonsterDefinition(
        name="Test monster with leather armor",
        base_ability_scores=AbilityScores(strength=8, dexterity=10, constitution=8),
        equipped_armor=ArmorType.LEATHER,
        armor_inventory=[ArmorType.LEATHER],
    ),
}

# Experience awarded for killing a character of a given level
EXPERIENCE_GAIN = [10, 30, 50, 100, 300, 500, 750, 1000, 1500, 2000, 2750, 3500, 5000]


def weapon(weapon_type: WeaponType) -> Weapon:
    return WEAPONS[weapon_type]


def armor(armor_type: ArmorType) -> Armor:
    return ARMOR[armor_type]


def jewelry(jewelry_type: JewelryType) -> Jewelry:
    return JEWELRY[jewelry_type]


def condition(condition_type: ConditionType) -> Condition:
    return CONDITIONS[condition_type]


def spell(spell_type: SpellType) -> Spell:
    return SPELLS[spell_type]


def item(item_type: ItemType) -> Item:
    return ITEMS[item_type]


def monster(monster_type: MonsterType) -> MonsterDefinition:
    return MONSTERS[monster_type]


def experience_gain(level: int) -> int:
    """Experience a kill of a character at ``level`` is worth."""
    if 0 <= level < len(EXPERIENCE_GAIN):
        return EXPERIENCE_GAIN[level]
    return 0
