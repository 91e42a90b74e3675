"""Character and creature data models for Deepdelve Server."""

from enum import Enum

from pydantic import BaseModel, model_validator

from models.catalog import (
    AbilityType,
    ArmorType,
    ClassType,
    ConditionType,
    ItemType,
    JewelryType,
    WeaponType,
)


class MonsterType(str, Enum):
    WOLF = "wolf"
    DIRE_WOLF = "dire_wolf"
    GOBLIN = "goblin"
    SKELETON = "skeleton"
    TEST_MONSTER = "test_monster"
    TEST_MONSTER_WITH_DAGGER = "test_monster_with_dagger"
    TEST_MONSTER_WITH_LEATHER_ARMOR = "test_monster_with_leather_armor"


class CharacterStatus(str, Enum):
    """What a character is currently doing."""
    RESTING = "resting"
    QUESTING = "questing"
    FIGHTING = "fighting"


class InventoryKind(str, Enum):
    """The four inventories a character carries."""
    WEAPON = "weapon"
    ARMOR = "armor"
    JEWELRY = "jewelry"
    ITEM = "item"


class AbilityScores(BaseModel):
    """The three core ability scores."""
    strength: int = 10
    dexterity: int = 10
    constitution: int = 10

    def get(self, ability: AbilityType) -> int:
        return getattr(self, ability.value)


class LevelUpChoice(BaseModel):
    """One level: an ability increment taken in a class."""
    ability_increment: AbilityType
    class_type: ClassType


class ActiveCondition(BaseModel):
    """A condition on a character, counting down at the end of its turns."""
    condition_type: ConditionType
    duration: int | None = None     # None = permanent until removed


class CharacterCredentials(BaseModel):
    """What a player needs to act as their character."""
    id: str
    secret: str


class Character(BaseModel):
    """A player character or a monster."""
    id: str
    name: str
    secret: str
    monster_type: MonsterType | None = None     # None for players
    current_health: int
    base_ability_scores: AbilityScores = AbilityScores()
    gold: int = 0
    experience: int = 0
    equipped_weapon: WeaponType | None = None
    equipped_offhand: WeaponType | None = None
    equipped_armor: ArmorType | None = None
    equipped_jewelry: list[JewelryType] = []
    weapon_inventory: list[WeaponType] = []
    armor_inventory: list[ArmorType] = []
    jewelry_inventory: list[JewelryType] = []
    item_inventory: list[ItemType] = []
    level_up_choices: list[LevelUpChoice] = []
    party_id: str
    status: CharacterStatus = CharacterStatus.RESTING
    encounter_id: str | None = None
    short_rests_available: int = 0
    active_conditions: list[ActiveCondition] = []

    @property
    def is_player(self) -> bool:
        return self.monster_type is None

    @property
    def is_alive(self) -> bool:
        return self.current_health > 0

    @property
    def level(self) -> int:
        return len(self.level_up_choices)

    def inventory(self, kind: InventoryKind) -> list:
        """Return the inventory list of the given kind."""
        return getattr(self, f"{kind.value}_inventory")


class MonsterDefinition(BaseModel):
    """Template a monster character is spawned from."""
    name: str
    base_ability_scores: AbilityScores
    gold: int = 0
    equipped_weapon: WeaponType | None = None
    equipped_offhand: WeaponType | None = None
    equipped_armor: ArmorType | None = None
    equipped_jewelry: list[JewelryType] = []
    weapon_inventory: list[WeaponType] = []
    armor_inventory: list[ArmorType] = []
    jewelry_inventory: list[JewelryType] = []
    item_inventory: list[ItemType] = []
    levels: list[LevelUpChoice] = []

    @model_validator(mode="after")
    def _equipment_is_carried(self) -> "MonsterDefinition":
        if self.equipped_weapon is not None and self.equipped_weapon not in self.weapon_inventory:
            raise ValueError("Equipped weapon not in inventory")
        if self.equipped_offhand is not None:
            needed = 2 if self.equipped_offhand == self.equipped_weapon else 1
            if self.weapon_inventory.count(self.equipped_offhand) < needed:
                raise ValueError("Equipped offhand not in inventory")
        if self.equipped_armor is not None and self.equipped_armor not in self.armor_inventory:
            raise ValueError("Equipped armor not in inventory")
        for jewelry in self.equipped_jewelry:
            if jewelry not in self.jewelry_inventory:
                raise ValueError("Equipped jewelry not in inventory")
        return self
