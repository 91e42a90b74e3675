"""Character creation, sheet, equipment, rest and level-up endpoints."""

from enum import Enum
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from auth import get_credentials
from engine import character as characters
from engine.stats import armor_class, effective_ability_scores, experience_level, max_health
from engine.storage import Storage
from models import names
from models.characters import Character, CharacterCredentials

router = APIRouter()


class CreateCharacterRequest(BaseModel):
    """Point buy for a new character: the three values must sum to 10."""
    name: str = Field(min_length=1, max_length=40)
    strength: int = 0
    dexterity: int = 0
    constitution: int = 0


class EquipSlot(str, Enum):
    MAIN_HAND = "main_hand"
    OFF_HAND = "off_hand"
    ARMOR = "armor"
    JEWELRY = "jewelry"


class EquipRequest(BaseModel):
    """Equip a carried piece of gear. ``unequip`` only applies to jewelry."""
    slot: EquipSlot
    name: str
    unequip: bool = False


class RestRequest(BaseModel):
    kind: Literal["short", "long"]


class LevelUpRequest(BaseModel):
    ability: str
    class_name: str = "fighter"


def _get_storage(request: Request) -> Storage:
    """Get the record store from app state."""
    return request.app.state.storage


def character_sheet(character: Character) -> dict:
    """A character as its player sees it: stored fields plus derived numbers."""
    sheet = character.model_dump(mode="json", exclude={"secret"})
    sheet.update(
        level=character.level,
        max_health=max_health(character),
        armor_class=armor_class(character),
        ability_scores=effective_ability_scores(character).model_dump(),
        can_level_up=experience_level(character) > character.level,
    )
    return sheet


@router.post("", status_code=201, response_model=CharacterCredentials)
def create_character(body: CreateCharacterRequest, request: Request) -> CharacterCredentials:
    """Create a character. Keep the returned secret: it is shown only once."""
    return characters.create_character(
        _get_storage(request), body.name, body.strength, body.dexterity, body.constitution,
    )


@router.get("/me")
def get_character(
    request: Request,
    credentials: CharacterCredentials = Depends(get_credentials),
) -> dict:
    character = characters.validate_player(_get_storage(request), credentials)
    return character_sheet(character)


@router.post("/me/equip")
def equip(
    body: EquipRequest,
    request: Request,
    credentials: CharacterCredentials = Depends(get_credentials),
) -> dict:
    storage = _get_storage(request)
    if body.unequip and body.slot != EquipSlot.JEWELRY:
        raise HTTPException(status_code=400, detail="Only jewelry can be unequipped")

    if body.slot == EquipSlot.MAIN_HAND:
        character = characters.equip_main_hand(storage, credentials, names.WEAPONS.parse(body.name))
    elif body.slot == EquipSlot.OFF_HAND:
        character = characters.equip_off_hand(storage, credentials, names.WEAPONS.parse(body.name))
    elif body.slot == EquipSlot.ARMOR:
        character = characters.equip_armor(storage, credentials, names.ARMOR.parse(body.name))
    elif body.unequip:
        character = characters.unequip_jewelry(storage, credentials, names.JEWELRY.parse(body.name))
    else:
        character = characters.equip_jewelry(storage, credentials, names.JEWELRY.parse(body.name))
    return character_sheet(character)


@router.post("/me/rest")
def rest(
    body: RestRequest,
    request: Request,
    credentials: CharacterCredentials = Depends(get_credentials),
) -> dict:
    storage = _get_storage(request)
    if body.kind == "short":
        character = characters.short_rest(storage, credentials)
    else:
        character = characters.long_rest(storage, credentials)
    return character_sheet(character)


@router.post("/me/level-up")
def level_up(
    body: LevelUpRequest,
    request: Request,
    credentials: CharacterCredentials = Depends(get_credentials),
) -> dict:
    character = characters.level_up(
        _get_storage(request),
        credentials,
        names.CLASSES.parse(body.class_name),
        names.ABILITIES.parse(body.ability),
    )
    return character_sheet(character)
