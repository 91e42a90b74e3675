"""Turn choices a character can make, and their request bodies."""

from enum import Enum

from pydantic import BaseModel

from models.catalog import ItemType


class ActionKind(str, Enum):
    """What fills a turn slot."""
    ATTACK = "attack"               # Main hand as an action, off-hand as a bonus action
    ITEM = "item"


class TurnStep(BaseModel):
    """One action or bonus action."""
    kind: ActionKind
    target_id: str | None = None
    item: ItemType | None = None


class TurnChoice(BaseModel):
    """Everything a character does on one turn; both halves optional."""
    action: TurnStep | None = None
    bonus_action: TurnStep | None = None


class TurnStepRequest(BaseModel):
    """A turn slot as sent over the wire, with names still unparsed."""
    kind: str
    target_id: str | None = None
    item: str | None = None


class TurnRequest(BaseModel):
    """A player's requested turn."""
    action: TurnStepRequest | None = None
    bonus_action: TurnStepRequest | None = None


class AvailableAction(BaseModel):
    """An action the acting character could take right now."""
    name: str
    kind: ActionKind
    item: ItemType | None = None
    requires_target: bool
