"""Tests for the encounter state machine and action dispatch."""

import random

import pytest

from engine import catalog
from engine.encounter import (
    advance_conditions,
    character_take_turn,
    create_encounter,
    distribute_rewards,
)
from engine.errors import ActionNotAvailable, InvalidTarget, ItemNotAvailable
from engine.stats import effective_ability_scores
from engine.storage import Storage
from models.actions import ActionKind, TurnChoice, TurnStep
from models.catalog import ConditionType, ItemType, WeaponType
from models.characters import (
    AbilityScores,
    ActiveCondition,
    Character,
    CharacterStatus,
    LevelUpChoice,
    MonsterType,
)
from models.game_state import Encounter, EventKind


class _ScriptedRandom(random.Random):
    """Random whose randint returns queued values, in order."""

    def __init__(self, rolls: list[int]) -> None:
        super().__init__(0)
        self.rolls = list(rolls)

    def randint(self, a: int, b: int) -> int:
        value = self.rolls.pop(0)
        assert a <= value <= b
        return value


def _make_character(
    char_id: str,
    party_id: str = "heroes",
    hp: int = 12,
    monster_type: MonsterType | None = None,
    **kwargs,
) -> Character:
    """Helper to create a test character with 10s in every ability (AC 10)."""
    return Character(
        id=char_id,
        name=f"Char_{char_id}",
        secret="secret",
        monster_type=monster_type,
        current_health=hp,
        base_ability_scores=AbilityScores(),
        party_id=party_id,
        **kwargs,
    )


def _make_monster(char_id: str, hp: int = 12, **kwargs) -> Character:
    return _make_character(char_id, "monsters", hp, MonsterType.TEST_MONSTER, **kwargs)


def _start(storage: Storage, *characters: Character) -> Encounter:
    """Put characters into an encounter in the given rotation order."""
    for character in characters:
        storage.add_character(character)
    encounter_id = storage.create_encounter([c.id for c in characters])
    for character in characters:
        storage.set_status(character.id, CharacterStatus.FIGHTING, encounter_id)
    return storage.get_encounter(encounter_id)


def _turn(storage: Storage, encounter: Encounter, char_id: str, choice: TurnChoice, rolls=()):
    actor = storage.get_character(char_id)
    return character_take_turn(storage, encounter.id, actor, choice, _ScriptedRandom(list(rolls)))


def _attack(target_id: str) -> TurnStep:
    return TurnStep(kind=ActionKind.ATTACK, target_id=target_id)


def _item(item: ItemType, target_id: str | None = None) -> TurnStep:
    return TurnStep(kind=ActionKind.ITEM, item=item, target_id=target_id)


# ---------------------------------------------------------------------------
# Creation and rotation
# ---------------------------------------------------------------------------

class TestCreateEncounter:
    """Tests for create_encounter()."""

    def test_sorted_by_initiative(self):
        storage = Storage()
        for character in (_make_character("a"), _make_monster("b"), _make_monster("c")):
            storage.add_character(character)
        encounter = create_encounter(storage, ["a", "b", "c"], _ScriptedRandom([5, 18, 11]))
        assert encounter.rotation == ["b", "c", "a"]

    def test_ties_keep_given_order(self):
        storage = Storage()
        for character in (_make_character("a"), _make_monster("b"), _make_monster("c")):
            storage.add_character(character)
        encounter = create_encounter(storage, ["a", "b", "c"], _ScriptedRandom([7, 7, 7]))
        assert encounter.rotation == ["a", "b", "c"]

    def test_participants_are_fighting(self):
        storage = Storage()
        storage.add_character(_make_character("a"))
        storage.add_character(_make_monster("b"))
        encounter = create_encounter(storage, ["a", "b"], random.Random(1))
        for char_id in ("a", "b"):
            character = storage.get_character(char_id)
            assert character.status == CharacterStatus.FIGHTING
            assert character.encounter_id == encounter.id

    def test_needs_two_parties(self):
        storage = Storage()
        storage.add_character(_make_character("a"))
        storage.add_character(_make_character("b"))
        with pytest.raises(ValueError):
            create_encounter(storage, ["a", "b"], random.Random(1))


class TestRotation:
    """Tests for turn order."""

    def test_round_robin(self):
        storage = Storage()
        encounter = _start(storage, _make_character("a"), _make_monster("b"), _make_monster("c"))
        _turn(storage, encounter, "a", TurnChoice())
        assert storage.get_encounter(encounter.id).rotation == ["b", "c", "a"]

    def test_turn_started_event(self):
        storage = Storage()
        encounter = _start(storage, _make_character("a"), _make_monster("b"))
        events = _turn(storage, encounter, "a", TurnChoice())
        assert [e.kind for e in events] == [EventKind.TURN_STARTED]


# ---------------------------------------------------------------------------
# Attacks, death and resolution
# ---------------------------------------------------------------------------

class TestAttacks:
    """Tests for attack actions and kills."""

    def test_miss(self):
        storage = Storage()
        encounter = _start(storage, _make_character("a"), _make_monster("b"))
        events = _turn(storage, encounter, "a", TurnChoice(action=_attack("b")), rolls=[5])
        assert [e.kind for e in events] == [
            EventKind.TURN_STARTED, EventKind.ATTACK_DECLARED, EventKind.MISS,
        ]
        assert storage.get_character("b").current_health == 12

    def test_hit(self):
        storage = Storage()
        encounter = _start(storage, _make_character("a"), _make_monster("b"))
        events = _turn(storage, encounter, "a", TurnChoice(action=_attack("b")), rolls=[15, 3])
        assert events[-1].kind == EventKind.HIT
        assert events[-1].amount == 3
        assert storage.get_character("b").current_health == 9

    def test_one_on_one_kill_resolves(self):
        storage = Storage()
        encounter = _start(storage, _make_character("a"), _make_monster("b", hp=1))
        events = _turn(storage, encounter, "a", TurnChoice(action=_attack("b")), rolls=[15, 3])

        assert [e.kind for e in events] == [
            EventKind.TURN_STARTED,
            EventKind.ATTACK_DECLARED,
            EventKind.HIT,
            EventKind.DEATH,
            EventKind.EXPERIENCE_GAINED,
            EventKind.GOLD_RECEIVED,
            EventKind.ENCOUNTER_RESOLVED,
        ]
        stored = storage.get_encounter(encounter.id)
        assert stored.resolved
        assert stored.rotation == ["a"]
        assert stored.dead_characters == ["b"]

        player = storage.get_character("a")
        assert player.experience == catalog.experience_gain(0)
        assert player.status == CharacterStatus.QUESTING
        assert player.encounter_id is None

    def test_experience_split_between_surviving_allies(self):
        storage = Storage()
        level_one = [LevelUpChoice(ability_increment="strength", class_type="monster")]
        encounter = _start(
            storage,
            _make_character("a"),
            _make_character("b"),
            _make_monster("m1", hp=1, level_up_choices=level_one),
            _make_monster("m2"),
        )
        events = _turn(storage, encounter, "a", TurnChoice(action=_attack("m1")), rolls=[15, 3])

        share = catalog.experience_gain(1) // 2
        assert storage.get_character("a").experience == share
        assert storage.get_character("b").experience == share
        assert [e.kind for e in events].count(EventKind.EXPERIENCE_GAINED) == 2

        stored = storage.get_encounter(encounter.id)
        assert not stored.resolved
        assert stored.rotation == ["b", "m2", "a"]

    def test_bonus_attack_on_corpse_is_a_no_op(self):
        storage = Storage()
        encounter = _start(
            storage, _make_character("a"), _make_monster("m1", hp=1), _make_monster("m2"),
        )
        choice = TurnChoice(action=_attack("m1"), bonus_action=_attack("m1"))
        events = _turn(storage, encounter, "a", choice, rolls=[15, 3])
        assert events[-1].kind == EventKind.MISS
        assert storage.get_character("m2").current_health == 12

    def test_offhand_attack(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", weapon_inventory=[WeaponType.DAGGER],
                            equipped_offhand=WeaponType.DAGGER),
            _make_monster("b"),
        )
        events = _turn(storage, encounter, "a", TurnChoice(bonus_action=_attack("b")), rolls=[15, 2])
        assert events[-1].kind == EventKind.HIT
        assert storage.get_character("b").current_health == 10


class TestRewards:
    """Tests for distribute_rewards()."""

    def test_gold_and_loot_shared_among_players(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", gold=1),
            _make_character("b"),
            _make_monster("m1", gold=5, weapon_inventory=[WeaponType.DAGGER]),
            _make_monster("m2", gold=6, item_inventory=[ItemType.STONE]),
        )
        encounter.rotation = ["a", "b"]
        encounter.dead_characters = ["m1", "m2"]
        events = []
        distribute_rewards(storage, encounter, events, random.Random(3))

        a, b = storage.get_character("a"), storage.get_character("b")
        assert a.gold == 1 + 5
        assert b.gold == 5
        assert a.weapon_inventory + b.weapon_inventory == [WeaponType.DAGGER]
        assert a.item_inventory + b.item_inventory == [ItemType.STONE]
        assert [e.kind for e in events].count(EventKind.LOOT_RECEIVED) == 2
        assert a.status == b.status == CharacterStatus.QUESTING
        assert encounter.resolved

    def test_monsters_discard_loot(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_monster("m1"),
            _make_character("a", item_inventory=[ItemType.STONE, ItemType.STONE]),
        )
        encounter.rotation = ["m1"]
        encounter.dead_characters = ["a"]
        events = []
        distribute_rewards(storage, encounter, events, random.Random(3))
        assert storage.get_character("m1").item_inventory == []
        assert EventKind.LOOT_RECEIVED not in [e.kind for e in events]


# ---------------------------------------------------------------------------
# Items, spells and conditions
# ---------------------------------------------------------------------------

class TestItems:
    """Tests for item actions."""

    def test_healing_potion(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", hp=5, item_inventory=[ItemType.POTION_OF_HEALING]),
            _make_monster("b"),
        )
        choice = TurnChoice(bonus_action=_item(ItemType.POTION_OF_HEALING))
        events = _turn(storage, encounter, "a", choice)
        player = storage.get_character("a")
        assert player.current_health == 10
        assert player.item_inventory == []
        assert [e.kind for e in events][1:] == [EventKind.ITEM_USED, EventKind.HEALED]
        assert events[-1].amount == 5

    def test_healing_not_capped(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", hp=10, item_inventory=[ItemType.POTION_OF_HEALING]),
            _make_monster("b"),
        )
        events = _turn(storage, encounter, "a", TurnChoice(bonus_action=_item(ItemType.POTION_OF_HEALING)))
        assert storage.get_character("a").current_health == 15
        assert events[-1].amount == 5

    def test_thrown_stone(self):
        storage = Storage()
        encounter = _start(
            storage, _make_character("a", item_inventory=[ItemType.STONE]), _make_monster("b"),
        )
        _turn(storage, encounter, "a", TurnChoice(action=_item(ItemType.STONE, "b")), rolls=[15, 4])
        assert storage.get_character("b").current_health == 8
        assert storage.get_character("a").item_inventory == []

    def test_fire_bolt_scroll(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", item_inventory=[ItemType.SCROLL_OF_FIRE_BOLT]),
            _make_monster("b", hp=20),
        )
        choice = TurnChoice(action=_item(ItemType.SCROLL_OF_FIRE_BOLT, "b"))
        _turn(storage, encounter, "a", choice, rolls=[15, 7])
        assert storage.get_character("b").current_health == 13

    def test_elixir_counts_down_on_own_turn(self):
        storage = Storage()
        encounter = _start(
            storage, _make_character("a", item_inventory=[ItemType.ELIXIR_OF_MIGHT]), _make_monster("b"),
        )
        _turn(storage, encounter, "a", TurnChoice(bonus_action=_item(ItemType.ELIXIR_OF_MIGHT)))
        conditions = storage.get_character("a").active_conditions
        assert conditions == [ActiveCondition(condition_type=ConditionType.EMPOWERED, duration=2)]

    def test_missing_target_leaves_item(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_monster("m1", item_inventory=[ItemType.STONE]),
            _make_character("a"),
        )
        events = _turn(storage, encounter, "m1", TurnChoice(action=_item(ItemType.STONE, "gone")))
        assert events[-1].kind == EventKind.MISS
        assert storage.get_character("m1").item_inventory == [ItemType.STONE]


class TestConditions:
    """Tests for condition application and countdown."""

    def test_weaken_lasts_two_of_its_owners_turns(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", item_inventory=[ItemType.SCROLL_OF_WEAKEN]),
            _make_monster("b"),
        )
        _turn(storage, encounter, "a", TurnChoice(action=_item(ItemType.SCROLL_OF_WEAKEN, "b")))
        monster = storage.get_character("b")
        assert len(monster.active_conditions) == 1
        assert effective_ability_scores(monster).strength == 9

        _turn(storage, encounter, "b", TurnChoice())
        assert storage.get_character("b").active_conditions[0].duration == 1
        _turn(storage, encounter, "a", TurnChoice())
        _turn(storage, encounter, "b", TurnChoice())
        assert storage.get_character("b").active_conditions == []

    def test_same_condition_replaces(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", item_inventory=[ItemType.SCROLL_OF_WEAKEN] * 2),
            _make_monster("b"),
        )
        _turn(storage, encounter, "a", TurnChoice(action=_item(ItemType.SCROLL_OF_WEAKEN, "b")))
        _turn(storage, encounter, "b", TurnChoice())
        _turn(storage, encounter, "a", TurnChoice(action=_item(ItemType.SCROLL_OF_WEAKEN, "b")))
        conditions = storage.get_character("b").active_conditions
        assert conditions == [ActiveCondition(condition_type=ConditionType.WEAKEN, duration=2)]

    def test_advance_conditions(self):
        conditions = [
            ActiveCondition(condition_type=ConditionType.WEAKEN, duration=2),
            ActiveCondition(condition_type=ConditionType.EMPOWERED, duration=None),
        ]
        once = advance_conditions(conditions)
        assert once == [
            ActiveCondition(condition_type=ConditionType.WEAKEN, duration=1),
            ActiveCondition(condition_type=ConditionType.EMPOWERED, duration=None),
        ]
        assert advance_conditions(once) == [
            ActiveCondition(condition_type=ConditionType.EMPOWERED, duration=None),
        ]


# ---------------------------------------------------------------------------
# Validation before mutation
# ---------------------------------------------------------------------------

class TestValidation:
    """Tests for turn validation."""

    def test_player_target_must_be_in_rotation(self):
        storage = Storage()
        encounter = _start(storage, _make_character("a"), _make_monster("b"))
        with pytest.raises(InvalidTarget):
            _turn(storage, encounter, "a", TurnChoice(action=_attack("nobody")))
        assert storage.get_encounter(encounter.id).rotation == ["a", "b"]

    def test_missing_item_aborts_whole_turn(self):
        storage = Storage()
        encounter = _start(storage, _make_character("a"), _make_monster("b"))
        choice = TurnChoice(action=_attack("b"), bonus_action=_item(ItemType.POTION_OF_HEALING))
        with pytest.raises(ItemNotAvailable):
            _turn(storage, encounter, "a", choice, rolls=[20, 4, 4])
        assert storage.get_character("b").current_health == 12
        assert storage.get_encounter(encounter.id).rotation == ["a", "b"]

    def test_item_in_wrong_slot(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", item_inventory=[ItemType.POTION_OF_HEALING]),
            _make_monster("b"),
        )
        with pytest.raises(ActionNotAvailable):
            _turn(storage, encounter, "a", TurnChoice(action=_item(ItemType.POTION_OF_HEALING)))
        assert storage.get_character("a").item_inventory == [ItemType.POTION_OF_HEALING]

    def test_no_offhand_attack_with_two_handed_weapon(self):
        storage = Storage()
        encounter = _start(
            storage,
            _make_character("a", weapon_inventory=[WeaponType.GREATAXE],
                            equipped_weapon=WeaponType.GREATAXE),
            _make_monster("b"),
        )
        with pytest.raises(ActionNotAvailable):
            _turn(storage, encounter, "a", TurnChoice(bonus_action=_attack("b")))
