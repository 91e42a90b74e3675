"""Character and encounter record stores.

``Storage`` keeps records in memory and hands out deep copies, so engine
code has to write every change back through one of the setters.
``JsonFileStorage`` additionally persists the whole state to a JSON file
after each write.

Every read and every write, including its save, runs under one store-wide
lock, so the store can be shared by the request threads of the server.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from uuid import uuid4

from pydantic import BaseModel

from engine.errors import CharacterNotFound, EncounterNotFound
from models.catalog import ArmorType, JewelryType, WeaponType
from models.characters import (
    ActiveCondition,
    Character,
    CharacterStatus,
    InventoryKind,
    LevelUpChoice,
)
from models.game_state import Encounter

logger = logging.getLogger(__name__)


class StorageState(BaseModel):
    """Everything a store holds, as saved to disk."""
    characters: dict[str, Character] = {}
    encounters: dict[str, Encounter] = {}
    party_counter: int = 0


class Storage:
    """In-memory record store with point get/set operations."""

    def __init__(self, state: StorageState | None = None) -> None:
        self._state = state or StorageState()
        self._lock = threading.RLock()
        self._encounter_locks: dict[str, threading.Lock] = {}

    def _changed(self) -> None:
        """Hook called after every write, with the store lock held."""

    # --- characters --------------------------------------------------------

    def add_character(self, character: Character) -> str:
        with self._lock:
            self._state.characters[character.id] = character.model_copy(deep=True)
            self._changed()
        return character.id

    def get_character(self, character_id: str) -> Character:
        with self._lock:
            return self._character(character_id).model_copy(deep=True)

    def _character(self, character_id: str) -> Character:
        character = self._state.characters.get(character_id)
        if character is None:
            raise CharacterNotFound()
        return character

    def set_health(self, character_id: str, health: int) -> None:
        with self._lock:
            self._character(character_id).current_health = health
            self._changed()

    def set_conditions(self, character_id: str, conditions: list[ActiveCondition]) -> None:
        with self._lock:
            self._character(character_id).active_conditions = [c.model_copy() for c in conditions]
            self._changed()

    def set_experience(self, character_id: str, experience: int) -> None:
        with self._lock:
            self._character(character_id).experience = experience
            self._changed()

    def set_gold(self, character_id: str, gold: int) -> None:
        with self._lock:
            self._character(character_id).gold = gold
            self._changed()

    def set_short_rests(self, character_id: str, short_rests: int) -> None:
        with self._lock:
            self._character(character_id).short_rests_available = short_rests
            self._changed()

    def set_status(
        self,
        character_id: str,
        status: CharacterStatus,
        encounter_id: str | None = None,
    ) -> None:
        """Set a character's status. Leaving FIGHTING clears the encounter id."""
        with self._lock:
            character = self._character(character_id)
            character.status = status
            character.encounter_id = encounter_id if status == CharacterStatus.FIGHTING else None
            self._changed()

    def add_level_up_choice(self, character_id: str, choice: LevelUpChoice) -> None:
        with self._lock:
            self._character(character_id).level_up_choices.append(choice.model_copy())
            self._changed()

    def set_equipment(
        self,
        character_id: str,
        *,
        weapon: WeaponType | None,
        offhand: WeaponType | None,
        armor: ArmorType | None,
        jewelry: list[JewelryType],
    ) -> None:
        with self._lock:
            character = self._character(character_id)
            character.equipped_weapon = weapon
            character.equipped_offhand = offhand
            character.equipped_armor = armor
            character.equipped_jewelry = list(jewelry)
            self._changed()

    def add_inventory_item(self, character_id: str, kind: InventoryKind, item) -> None:
        with self._lock:
            self._character(character_id).inventory(kind).append(item)
            self._changed()

    def remove_inventory_item(self, character_id: str, kind: InventoryKind, item) -> bool:
        """Remove the first slot holding ``item``, in insertion order.

        Returns:
            False if the inventory holds no such item.
        """
        with self._lock:
            inventory = self._character(character_id).inventory(kind)
            for index, held in enumerate(inventory):
                if held == item:
                    del inventory[index]
                    self._changed()
                    return True
            return False

    def create_party(self) -> str:
        with self._lock:
            self._state.party_counter += 1
            self._changed()
            return f"party-{self._state.party_counter}"

    # --- encounters --------------------------------------------------------

    def create_encounter(self, rotation: list[str]) -> str:
        encounter_id = str(uuid4())
        with self._lock:
            self._state.encounters[encounter_id] = Encounter(id=encounter_id, rotation=list(rotation))
            self._changed()
        return encounter_id

    def get_encounter(self, encounter_id: str) -> Encounter:
        with self._lock:
            encounter = self._state.encounters.get(encounter_id)
            if encounter is None:
                raise EncounterNotFound()
            return encounter.model_copy(deep=True)

    def update_encounter(
        self,
        encounter_id: str,
        rotation: list[str],
        dead_characters: list[str],
        resolved: bool = False,
    ) -> None:
        """Write back an encounter. A resolved encounter gives up its turn lock."""
        with self._lock:
            encounter = self._state.encounters.get(encounter_id)
            if encounter is None:
                raise EncounterNotFound()
            encounter.rotation = list(rotation)
            encounter.dead_characters = list(dead_characters)
            encounter.resolved = resolved
            if resolved:
                self._encounter_locks.pop(encounter_id, None)
            self._changed()

    def encounter_lock(self, encounter_id: str) -> threading.Lock:
        """The lock that serializes turns within one encounter."""
        with self._lock:
            return self._encounter_locks.setdefault(encounter_id, threading.Lock())


class JsonFileStorage(Storage):
    """Storage persisted to a JSON file on every write."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(load_state(path))

    def _changed(self) -> None:
        save_state(self._state, self.path)


def save_state(state: StorageState, path: str) -> None:
    """Persist store state to a JSON file.

    Writes to a fresh temporary file next to ``path`` first, then renames
    it over ``path`` for atomicity.

    Args:
        state: The state to save.
        path: File path to write to.
    """
    data = state.model_dump(mode="json")
    directory = os.path.dirname(os.path.abspath(path))
    with tempfile.NamedTemporaryFile(
        "w", dir=directory, prefix=".deepdelve-", suffix=".tmp", delete=False,
    ) as f:
        json.dump(data, f)
        tmp_path = f.name
    try:
        os.replace(tmp_path, path)
    except OSError:
        os.unlink(tmp_path)
        raise


def load_state(path: str) -> StorageState | None:
    """Load store state from a JSON file.

    Returns:
        The loaded state, or None if the file doesn't exist.
    """
    if not Path(path).exists():
        return None
    with open(path) as f:
        data = json.load(f)
    state = StorageState.model_validate(data)
    logger.info(
        "Loaded %d characters and %d encounters from %s",
        len(state.characters), len(state.encounters), path,
    )
    return state
