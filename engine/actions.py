"""Action and bonus-action dispatch for one combat turn.

A turn is validated as a whole by ``validate_turn_choice`` before anything
is applied; ``perform_step`` then resolves each half in order, appending
events as effects happen.
"""

import logging
import random
from collections import Counter

from engine import catalog
from engine.errors import ActionNotAvailable, InvalidTarget, ItemNotAvailable
from engine.rules import apply_healing, resolve_attack
from engine.stats import AttackStats, WeaponSlot, attack_stats, can_attack_with_offhand, spell_stats
from engine.storage import Storage
from models.actions import ActionKind, AvailableAction, TurnChoice, TurnStep
from models.catalog import (
    ActionSlot,
    ConditionEffect,
    HealingEffect,
    Item,
    ProjectileEffect,
    SpellEffect,
)
from models.characters import ActiveCondition, Character, InventoryKind
from models.game_state import CombatEvent, Encounter, EventKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# What a character can do
# ---------------------------------------------------------------------------

def _item_actions(character: Character, slot: ActionSlot) -> list[AvailableAction]:
    actions = []
    for item_type in dict.fromkeys(character.item_inventory):
        item = catalog.item(item_type)
        if item.slot == slot:
            actions.append(AvailableAction(
                name=item.name,
                kind=ActionKind.ITEM,
                item=item_type,
                requires_target=item.requires_target,
            ))
    return actions


def available_actions(character: Character) -> list[AvailableAction]:
    """Attack with the main hand, or use any carried action item."""
    attack = AvailableAction(name="Attack", kind=ActionKind.ATTACK, requires_target=True)
    return [attack] + _item_actions(character, ActionSlot.ACTION)


def available_bonus_actions(character: Character) -> list[AvailableAction]:
    """Off-hand attack if possible, or use any carried bonus-action item."""
    actions = []
    if can_attack_with_offhand(character):
        actions.append(
            AvailableAction(name="Offhand attack", kind=ActionKind.ATTACK, requires_target=True)
        )
    return actions + _item_actions(character, ActionSlot.BONUS_ACTION)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _validate_step(
    character: Character,
    step: TurnStep,
    slot: ActionSlot,
    rotation: list[str],
) -> None:
    if step.kind == ActionKind.ATTACK:
        if slot == ActionSlot.BONUS_ACTION and not can_attack_with_offhand(character):
            raise ActionNotAvailable()
        needs_target = True
    else:
        if step.item is None:
            raise ActionNotAvailable("Item action needs an item")
        item = catalog.item(step.item)
        if item.slot != slot:
            raise ActionNotAvailable(f"{item.name} cannot be used as {slot.value.replace('_', ' ')}")
        needs_target = item.requires_target

    if not needs_target:
        return
    if step.target_id is None:
        raise InvalidTarget("Target required")
    # Only the player's main action is strict; other targets no-op when gone
    if slot == ActionSlot.ACTION and character.is_player and step.target_id not in rotation:
        raise InvalidTarget()


def validate_turn_choice(character: Character, choice: TurnChoice, encounter: Encounter) -> None:
    """Check a whole turn before any of it is applied.

    Raises:
        ActionNotAvailable: If a step doesn't fit its slot.
        InvalidTarget: If a required target is missing, or the player's
            action targets someone not in the fight.
        ItemNotAvailable: If the items used on this turn aren't all carried.
    """
    steps = [(choice.action, ActionSlot.ACTION), (choice.bonus_action, ActionSlot.BONUS_ACTION)]
    needed = Counter()
    for step, slot in steps:
        if step is None:
            continue
        _validate_step(character, step, slot, encounter.rotation)
        if step.kind == ActionKind.ITEM:
            needed[step.item] += 1

    carried = Counter(character.item_inventory)
    for item_type, count in needed.items():
        if carried[item_type] < count:
            raise ItemNotAvailable()


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def _load(storage: Storage, actor: Character, character_id: str) -> Character:
    """The actor itself, or a fresh copy of someone else."""
    if character_id == actor.id:
        return actor
    return storage.get_character(character_id)


def handle_attack(
    storage: Storage,
    encounter: Encounter,
    attacker: Character,
    target: Character,
    attack: AttackStats,
    events: list[CombatEvent],
    rng: random.Random,
) -> None:
    """Resolve one attack and deal with a death it causes.

    A killed target leaves the rotation for the dead list, and its
    experience value is split between the attacker's surviving party.
    """
    hit = resolve_attack(attack, target, rng)
    if hit is None:
        events.append(CombatEvent(kind=EventKind.MISS, character_name=attacker.name,
                                  target_name=target.name))
        return

    storage.set_health(target.id, target.current_health)
    events.append(CombatEvent(
        kind=EventKind.HIT,
        character_name=attacker.name,
        target_name=target.name,
        amount=hit.damage,
        critical_hit=hit.critical_hit,
    ))
    if target.is_alive or target.id not in encounter.rotation:
        return

    logger.info("%s was killed by %s", target.name, attacker.name)
    events.append(CombatEvent(kind=EventKind.DEATH, character_name=target.name,
                              target_name=attacker.name))
    encounter.rotation.remove(target.id)
    encounter.dead_characters.append(target.id)

    party = [
        _load(storage, attacker, character_id)
        for character_id in encounter.rotation
    ]
    party = [member for member in party if member.party_id == attacker.party_id]
    if not party:
        return
    share = catalog.experience_gain(target.level) // len(party)
    for member in party:
        member.experience += share
        storage.set_experience(member.id, member.experience)
        events.append(CombatEvent(kind=EventKind.EXPERIENCE_GAINED,
                                  character_name=member.name, amount=share))


def _apply_condition(
    storage: Storage,
    actor: Character,
    target: Character,
    effect: ConditionEffect,
    events: list[CombatEvent],
) -> None:
    """Put a condition on the target, replacing any of the same type."""
    conditions = [c for c in target.active_conditions if c.condition_type != effect.condition_type]
    conditions.append(ActiveCondition(condition_type=effect.condition_type, duration=effect.duration))
    target.active_conditions = conditions
    storage.set_conditions(target.id, conditions)
    events.append(CombatEvent(
        kind=EventKind.CONDITION_APPLIED,
        character_name=actor.name,
        target_name=target.name,
        name=catalog.condition(effect.condition_type).name,
    ))


def _use_item(
    storage: Storage,
    encounter: Encounter,
    actor: Character,
    item: Item,
    step: TurnStep,
    events: list[CombatEvent],
    rng: random.Random,
) -> None:
    if item.requires_target and step.target_id not in encounter.rotation:
        events.append(CombatEvent(kind=EventKind.MISS, character_name=actor.name, name=item.name))
        return

    storage.remove_inventory_item(actor.id, InventoryKind.ITEM, step.item)
    actor.item_inventory.remove(step.item)

    target = _load(storage, actor, step.target_id) if item.requires_target else actor
    events.append(CombatEvent(
        kind=EventKind.ITEM_USED,
        character_name=actor.name,
        target_name=target.name if item.requires_target else None,
        name=item.name,
    ))

    effect = item.effect
    if isinstance(effect, HealingEffect):
        restored = apply_healing(target, effect.amount)
        storage.set_health(target.id, target.current_health)
        events.append(CombatEvent(kind=EventKind.HEALED, character_name=target.name,
                                  amount=restored))
    elif isinstance(effect, ProjectileEffect):
        attack = attack_stats(actor, effect.attack_stats)
        handle_attack(storage, encounter, actor, target, attack, events, rng)
    elif isinstance(effect, SpellEffect):
        spell_effect = catalog.spell(effect.spell_type).effect
        if isinstance(spell_effect, ConditionEffect):
            _apply_condition(storage, actor, target, spell_effect, events)
        else:
            attack = spell_stats(actor, spell_effect.attack_stats)
            handle_attack(storage, encounter, actor, target, attack, events, rng)


def perform_step(
    storage: Storage,
    encounter: Encounter,
    actor: Character,
    step: TurnStep,
    slot: ActionSlot,
    events: list[CombatEvent],
    rng: random.Random | None = None,
) -> None:
    """Resolve one already-validated half of a turn.

    Mutates ``encounter`` (rotation and dead list) and ``actor`` in place and
    writes every change to the affected characters through ``storage``.
    """
    rng = rng or random.Random()
    logger.debug("%s: %s %s", actor.name, slot.value, step.kind.value)

    if step.kind == ActionKind.ITEM:
        _use_item(storage, encounter, actor, catalog.item(step.item), step, events, rng)
        return

    if step.target_id not in encounter.rotation:
        events.append(CombatEvent(kind=EventKind.MISS, character_name=actor.name))
        return

    target = _load(storage, actor, step.target_id)
    events.append(CombatEvent(kind=EventKind.ATTACK_DECLARED, character_name=actor.name,
                              target_name=target.name))
    weapon = WeaponSlot.MAIN_HAND if slot == ActionSlot.ACTION else WeaponSlot.OFF_HAND
    handle_attack(storage, encounter, actor, target, attack_stats(actor, weapon), events, rng)
