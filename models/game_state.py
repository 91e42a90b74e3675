"""Encounter and combat event models for Deepdelve Server."""

from enum import Enum

from pydantic import BaseModel

from models.actions import AvailableAction
from models.characters import Character


class Encounter(BaseModel):
    """One running combat between two or more parties."""
    id: str
    rotation: list[str]             # Character IDs; index 0 acts next
    dead_characters: list[str] = []
    resolved: bool = False


class EventKind(str, Enum):
    """Things that happen during a turn, in the order they happen."""
    TURN_STARTED = "turn_started"
    ATTACK_DECLARED = "attack_declared"
    HIT = "hit"
    MISS = "miss"
    DEATH = "death"
    CONDITION_APPLIED = "condition_applied"
    HEALED = "healed"
    ITEM_USED = "item_used"
    EXPERIENCE_GAINED = "experience_gained"
    GOLD_RECEIVED = "gold_received"
    LOOT_RECEIVED = "loot_received"
    ENCOUNTER_RESOLVED = "encounter_resolved"


class CombatEvent(BaseModel):
    """A reportable effect of a turn."""
    kind: EventKind
    character_name: str             # Who the event is about
    target_name: str | None = None
    amount: int | None = None       # Damage, healing, experience or gold
    critical_hit: bool = False
    name: str | None = None         # Condition, item or loot name


class CombatantView(BaseModel):
    """Another participant as the acting character sees it."""
    id: str
    name: str
    party_id: str
    current_health: int
    max_health: int
    armor_class: int
    is_player: bool


class EncounterView(BaseModel):
    """Read-only snapshot handed to whoever decides a character's turn."""
    encounter_id: str
    character: Character
    max_health: int
    your_turn: bool
    rotation: list[str]
    allies: list[CombatantView]
    enemies: list[CombatantView]
    actions: list[AvailableAction]
    bonus_actions: list[AvailableAction]
