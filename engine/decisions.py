"""Decision providers: whatever chooses a character's turn from its view."""

from __future__ import annotations

import importlib
import logging
import random
from typing import Callable, Protocol

from engine.combat import take_turn
from engine.encounter import encounter_view
from engine.storage import Storage
from models.actions import ActionKind, TurnChoice, TurnStep
from models.characters import CharacterCredentials, CharacterStatus
from models.game_state import CombatEvent, EncounterView

logger = logging.getLogger(__name__)


class DecisionProvider(Protocol):
    def decide(self, view: EncounterView) -> TurnChoice:
        ...


class LowestHealthFirst:
    """Attack the most wounded enemy with the main hand and, if possible, the off-hand."""

    def decide(self, view: EncounterView) -> TurnChoice:
        enemies = [enemy for enemy in view.enemies if enemy.current_health > 0]
        if not enemies:
            return TurnChoice()
        target = min(enemies, key=lambda e: e.current_health)
        action = TurnStep(kind=ActionKind.ATTACK, target_id=target.id)
        bonus_action = None
        if any(b.kind == ActionKind.ATTACK for b in view.bonus_actions):
            bonus_action = TurnStep(kind=ActionKind.ATTACK, target_id=target.id)
        return TurnChoice(action=action, bonus_action=bonus_action)


class ScriptedProvider:
    """Delegate decisions to a user function named as ``"module:function"``.

    The function receives the EncounterView and returns a TurnChoice or a
    dict in the same shape.
    """

    def __init__(self, reference: str) -> None:
        module_name, _, function_name = reference.partition(":")
        if not module_name or not function_name:
            raise ValueError(f"Expected 'module:function', got '{reference}'")
        module = importlib.import_module(module_name)
        self.function: Callable = getattr(module, function_name)
        self.reference = reference

    def decide(self, view: EncounterView) -> TurnChoice:
        result = self.function(view)
        if isinstance(result, TurnChoice):
            return result
        return TurnChoice.model_validate(result)


def play_encounter(
    storage: Storage,
    credentials: CharacterCredentials,
    provider: DecisionProvider,
    rng: random.Random | None = None,
) -> list[CombatEvent]:
    """Let a provider play the player's turns until it dies or leaves combat.

    Returns:
        Every event of every turn played, in order.
    """
    rng = rng or random.Random()
    events: list[CombatEvent] = []
    while True:
        character = storage.get_character(credentials.id)
        if not character.is_alive or character.status != CharacterStatus.FIGHTING:
            return events
        choice = provider.decide(encounter_view(storage, character))
        logger.debug("%s chose %s", character.name, choice)
        events.extend(take_turn(storage, credentials, choice, rng))
