"""Combat orchestration: starting encounters, player turns and monster turns."""

from __future__ import annotations

import logging
import random

from engine.character import spawn_monster, validate_player
from engine.encounter import character_take_turn, create_encounter, encounter_view
from engine.errors import AlreadyFighting, GameError, NotFighting, NotYourTurn
from engine.npc import MonsterPolicy
from engine.storage import Storage
from models.actions import TurnChoice
from models.characters import Character, CharacterCredentials, CharacterStatus, MonsterType
from models.game_state import CombatEvent, Encounter, EncounterView

logger = logging.getLogger(__name__)


def _fighting_encounter_id(character: Character) -> str:
    if character.status != CharacterStatus.FIGHTING or character.encounter_id is None:
        raise NotFighting()
    return character.encounter_id


def run_monster_turns(
    storage: Storage,
    encounter_id: str,
    rng: random.Random | None = None,
) -> list[CombatEvent]:
    """Play monster turns until a player is up or the encounter is over.

    Callers must hold the encounter's lock.
    """
    rng = rng or random.Random()
    policy = MonsterPolicy(rng)
    events: list[CombatEvent] = []

    while True:
        encounter = storage.get_encounter(encounter_id)
        if encounter.resolved or not encounter.rotation:
            return events
        monster = storage.get_character(encounter.rotation[0])
        if monster.is_player:
            return events
        choice = policy.decide(encounter_view(storage, monster))
        events.extend(character_take_turn(storage, encounter_id, monster, choice, rng))


def take_turn(
    storage: Storage,
    credentials: CharacterCredentials,
    choice: TurnChoice,
    rng: random.Random | None = None,
) -> list[CombatEvent]:
    """Play a player's turn, then every monster turn up to the next player.

    Args:
        storage: Record store.
        credentials: Id and secret of the acting player.
        choice: The player's action and bonus action.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        Events of the player's turn followed by those of the monster turns.

    Raises:
        Unauthorized, Dead, NotFighting, NotYourTurn: Checked in that order.
        InvalidTarget, ItemNotAvailable, ActionNotAvailable: For a bad choice.
    """
    rng = rng or random.Random()
    try:
        character = validate_player(storage, credentials)
        encounter_id = _fighting_encounter_id(character)
        with storage.encounter_lock(encounter_id):
            encounter = storage.get_encounter(encounter_id)
            if encounter.resolved or not encounter.rotation or encounter.rotation[0] != character.id:
                raise NotYourTurn()
            # Reload under the lock
            character = storage.get_character(character.id)
            events = character_take_turn(storage, encounter_id, character, choice, rng)
            events.extend(run_monster_turns(storage, encounter_id, rng))
    except GameError as e:
        logger.warning("Rejected turn for %s: %s", credentials.id, e)
        raise
    return events


def start_encounter(
    storage: Storage,
    credentials: CharacterCredentials,
    monster_types: list[MonsterType],
    rng: random.Random | None = None,
) -> tuple[Encounter, list[CombatEvent]]:
    """Put a player into a fight against freshly spawned monsters.

    Monsters that win initiative act before this returns.

    Raises:
        AlreadyFighting: If the player is already in an encounter.
        ValueError: If no monsters are given.
    """
    rng = rng or random.Random()
    character = validate_player(storage, credentials)
    if character.status == CharacterStatus.FIGHTING:
        raise AlreadyFighting()
    if not monster_types:
        raise ValueError("An encounter needs at least one monster")

    party_id = storage.create_party()
    monsters = [spawn_monster(storage, monster_type, party_id) for monster_type in monster_types]
    encounter = create_encounter(storage, [character.id] + [m.id for m in monsters], rng)

    with storage.encounter_lock(encounter.id):
        events = run_monster_turns(storage, encounter.id, rng)
    return storage.get_encounter(encounter.id), events


def get_encounter_for(storage: Storage, credentials: CharacterCredentials) -> EncounterView:
    """The player's current encounter, from its point of view."""
    character = validate_player(storage, credentials)
    _fighting_encounter_id(character)
    return encounter_view(storage, character)
