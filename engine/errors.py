"""Game errors raised by the engine and surfaced unchanged to callers."""


class GameError(Exception):
    """Base class for every rule violation the engine reports."""

    message = "Game error"
    status_code = 400

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


# ---------------------------------------------------------------------------
# Turn validation
# ---------------------------------------------------------------------------

class Unauthorized(GameError):
    message = "Mismatch in character secret. Is this your character?"
    status_code = 401


class Dead(GameError):
    message = "Character is dead"
    status_code = 409


class NotFighting(GameError):
    message = "Character is not in a fight"
    status_code = 409


class NotYourTurn(GameError):
    message = "It is not your turn!"
    status_code = 409


class InvalidTarget(GameError):
    message = "Target is not part of the encounter"


class ItemNotAvailable(GameError):
    message = "Item not in inventory"


class ActionNotAvailable(GameError):
    message = "That cannot be done with this half of the turn"


# ---------------------------------------------------------------------------
# Character management
# ---------------------------------------------------------------------------

class AbilitySumError(GameError):
    message = "Ability scores must sum to 10"


class NotOffHandWeapon(GameError):
    message = "Weapon cannot be wielded in offhand"


class TwoHandedConflict(GameError):
    message = "Main hand weapon needs both hands"


class InsufficientStrength(GameError):
    message = "Your character is not strong enough"


class InsufficientShortRests(GameError):
    message = "No short rests remaining"


class InsufficientExperience(GameError):
    message = "Insufficient experience for level up"


class WeaponNotInInventory(GameError):
    message = "Weapon not in inventory"


class ArmorNotInInventory(GameError):
    message = "Armor not in inventory"


class JewelryNotInInventory(GameError):
    message = "Jewelry not in inventory"


class TooManyJewelriesEquipped(GameError):
    message = "Too many jewelries equipped. Unequip one first"


class AlreadyFighting(GameError):
    message = "Character is already in a fight"
    status_code = 409


class CannotRestWhileFighting(GameError):
    message = "Cannot rest during a fight"
    status_code = 409


# ---------------------------------------------------------------------------
# Name parsing at the boundary
# ---------------------------------------------------------------------------

class UnknownName(GameError):
    message = "Unknown name. Spelling error?"


class UnknownWeapon(UnknownName):
    message = "Unknown weapon. Spelling error?"


class UnknownArmor(UnknownName):
    message = "Unknown armor. Spelling error?"


class UnknownJewelry(UnknownName):
    message = "Unknown jewelry. Spelling error?"


class UnknownItem(UnknownName):
    message = "Unknown item. Spelling error?"


class UnknownClass(UnknownName):
    message = "Unknown class. Spelling error?"


class UnknownAbility(UnknownName):
    message = "Unknown ability. Spelling error?"


class UnknownMonster(UnknownName):
    message = "Unknown monster. Spelling error?"


class UnknownAction(UnknownName):
    message = "Unknown action. Spelling error?"


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

class CharacterNotFound(GameError):
    message = "Character not found. Did you create one?"
    status_code = 404


class EncounterNotFound(GameError):
    message = "Encounter not found"
    status_code = 404
