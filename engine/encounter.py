"""Encounter state machine: initiative, turn rotation, conditions and rewards."""

import logging
import random

from engine import catalog
from engine.actions import (
    available_actions,
    available_bonus_actions,
    perform_step,
    validate_turn_choice,
)
from engine.rules import roll_initiative
from engine.stats import armor_class, max_health
from engine.storage import Storage
from models.actions import TurnChoice
from models.catalog import ActionSlot
from models.characters import ActiveCondition, Character, CharacterStatus, InventoryKind
from models.game_state import CombatantView, CombatEvent, Encounter, EncounterView, EventKind

logger = logging.getLogger(__name__)


def create_encounter(
    storage: Storage,
    participant_ids: list[str],
    rng: random.Random | None = None,
) -> Encounter:
    """Roll initiative and put every participant into a new encounter.

    Initiative is a d20 per participant, highest first. Equal rolls keep
    the order participants were given in.

    Raises:
        ValueError: If fewer than two parties take part.
    """
    rng = rng or random.Random()
    participants = [storage.get_character(character_id) for character_id in participant_ids]
    if len({character.party_id for character in participants}) < 2:
        raise ValueError("An encounter needs at least two parties")

    rolls = [(roll_initiative(rng), character) for character in participants]
    rolls = sorted(rolls, key=lambda r: r[0], reverse=True)
    rotation = [character.id for _, character in rolls]

    encounter_id = storage.create_encounter(rotation)
    for character in participants:
        storage.set_status(character.id, CharacterStatus.FIGHTING, encounter_id)

    logger.info(
        "Encounter %s started: %s",
        encounter_id, ", ".join(f"{c.name} ({r})" for r, c in rolls),
    )
    return storage.get_encounter(encounter_id)


def advance_conditions(conditions: list[ActiveCondition]) -> list[ActiveCondition]:
    """Count timed conditions down by one turn, dropping the expired ones."""
    remaining = []
    for condition in conditions:
        if condition.duration is None:
            remaining.append(condition)
        elif condition.duration - 1 > 0:
            remaining.append(condition.model_copy(update={"duration": condition.duration - 1}))
    return remaining


def parties_in_rotation(storage: Storage, encounter: Encounter) -> set[str]:
    return {storage.get_character(character_id).party_id for character_id in encounter.rotation}


def _loot_name(kind: InventoryKind, loot) -> str:
    lookup = {
        InventoryKind.WEAPON: catalog.weapon,
        InventoryKind.ARMOR: catalog.armor,
        InventoryKind.JEWELRY: catalog.jewelry,
        InventoryKind.ITEM: catalog.item,
    }[kind]
    return lookup(loot).name


def distribute_rewards(
    storage: Storage,
    encounter: Encounter,
    events: list[CombatEvent],
    rng: random.Random | None = None,
) -> None:
    """Share out the gold and gear of the dead and send survivors questing.

    Gold is pooled and split evenly, any remainder lost. Each piece of loot
    goes to a random survivor; monsters that draw loot discard it.
    """
    rng = rng or random.Random()
    survivors = [storage.get_character(character_id) for character_id in encounter.rotation]
    dead = [storage.get_character(character_id) for character_id in encounter.dead_characters]

    if survivors:
        share = sum(character.gold for character in dead) // len(survivors)
        for survivor in survivors:
            storage.set_gold(survivor.id, survivor.gold + share)
            events.append(CombatEvent(kind=EventKind.GOLD_RECEIVED,
                                      character_name=survivor.name, amount=share))

        for character in dead:
            for kind in InventoryKind:
                for loot in character.inventory(kind):
                    recipient = rng.choice(survivors)
                    if not recipient.is_player:
                        continue
                    storage.add_inventory_item(recipient.id, kind, loot)
                    events.append(CombatEvent(kind=EventKind.LOOT_RECEIVED,
                                              character_name=recipient.name,
                                              name=_loot_name(kind, loot)))

    for survivor in survivors:
        storage.set_status(survivor.id, CharacterStatus.QUESTING)

    encounter.resolved = True
    events.append(CombatEvent(
        kind=EventKind.ENCOUNTER_RESOLVED,
        character_name=", ".join(survivor.name for survivor in survivors),
    ))
    logger.info("Encounter %s resolved", encounter.id)


def character_take_turn(
    storage: Storage,
    encounter_id: str,
    actor: Character,
    choice: TurnChoice,
    rng: random.Random | None = None,
) -> list[CombatEvent]:
    """Play one full turn for the character at the front of the rotation.

    Args:
        storage: Record store; every change is written back through it.
        encounter_id: The encounter being played.
        actor: The acting character, as loaded for this turn.
        choice: Action and bonus action, either may be None.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        Events in the order their effects happened.
    """
    rng = rng or random.Random()
    encounter = storage.get_encounter(encounter_id)
    validate_turn_choice(actor, choice, encounter)

    events = [CombatEvent(kind=EventKind.TURN_STARTED, character_name=actor.name)]
    if choice.action is not None:
        perform_step(storage, encounter, actor, choice.action, ActionSlot.ACTION, events, rng)
    if choice.bonus_action is not None:
        perform_step(storage, encounter, actor, choice.bonus_action, ActionSlot.BONUS_ACTION,
                     events, rng)

    if not encounter.resolved and len(parties_in_rotation(storage, encounter)) <= 1:
        distribute_rewards(storage, encounter, events, rng)

    if encounter.rotation and encounter.rotation[0] == actor.id:
        encounter.rotation.append(encounter.rotation.pop(0))

    actor.active_conditions = advance_conditions(actor.active_conditions)
    storage.set_conditions(actor.id, actor.active_conditions)
    storage.update_encounter(
        encounter.id, encounter.rotation, encounter.dead_characters, encounter.resolved,
    )
    return events


def _combatant(character: Character) -> CombatantView:
    return CombatantView(
        id=character.id,
        name=character.name,
        party_id=character.party_id,
        current_health=character.current_health,
        max_health=max_health(character),
        armor_class=armor_class(character),
        is_player=character.is_player,
    )


def encounter_view(storage: Storage, character: Character) -> EncounterView:
    """Snapshot of a character's encounter from its own point of view.

    Only characters still in the rotation are listed as allies or enemies.
    """
    encounter = storage.get_encounter(character.encounter_id)
    others = [
        storage.get_character(character_id)
        for character_id in encounter.rotation
        if character_id != character.id
    ]
    return EncounterView(
        encounter_id=encounter.id,
        character=character,
        max_health=max_health(character),
        your_turn=bool(encounter.rotation) and encounter.rotation[0] == character.id,
        rotation=list(encounter.rotation),
        allies=[_combatant(c) for c in others if c.party_id == character.party_id],
        enemies=[_combatant(c) for c in others if c.party_id != character.party_id],
        actions=available_actions(character),
        bonus_actions=available_bonus_actions(character),
    )
