"""Server-controlled monster AI."""

from __future__ import annotations

import random

from config import LOW_HEALTH_THRESHOLD
from engine import catalog
from models.actions import ActionKind, AvailableAction, TurnChoice, TurnStep
from models.catalog import HealingEffect
from models.game_state import EncounterView


def _healing_item(bonus_actions: list[AvailableAction]) -> AvailableAction | None:
    for action in bonus_actions:
        if action.kind == ActionKind.ITEM and isinstance(catalog.item(action.item).effect, HealingEffect):
            return action
    return None


class MonsterPolicy:
    """Decide a monster's turn.

    - Attack a random living enemy with the main hand.
    - Below LOW_HEALTH_THRESHOLD, drink a healing potion as the bonus
      action if one is carried.
    - Otherwise make an off-hand attack on the same enemy when possible.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def decide(self, view: EncounterView) -> TurnChoice:
        enemies = [enemy for enemy in view.enemies if enemy.current_health > 0]
        if not enemies:
            return TurnChoice()
        target = self.rng.choice(enemies)
        action = TurnStep(kind=ActionKind.ATTACK, target_id=target.id)

        bonus_action = None
        potion = _healing_item(view.bonus_actions)
        if view.character.current_health < LOW_HEALTH_THRESHOLD and potion is not None:
            bonus_action = TurnStep(kind=ActionKind.ITEM, item=potion.item)
        elif any(b.kind == ActionKind.ATTACK for b in view.bonus_actions):
            bonus_action = TurnStep(kind=ActionKind.ATTACK, target_id=target.id)

        return TurnChoice(action=action, bonus_action=bonus_action)
