"""Encounter start, state, turn submission and auto-play endpoints."""

import random

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from auth import get_credentials
from config import ALLOW_SCRIPTS
from engine import combat
from engine.decisions import LowestHealthFirst, ScriptedProvider, play_encounter
from engine.storage import Storage
from models import names
from models.actions import TurnChoice, TurnRequest, TurnStep, TurnStepRequest
from models.characters import CharacterCredentials
from models.game_state import CombatEvent, EncounterView

router = APIRouter()


class StartEncounterRequest(BaseModel):
    """Monsters to fight, by name."""
    monsters: list[str] = Field(min_length=1)


class AutoPlayRequest(BaseModel):
    """Optional ``"module:function"`` decision script; default is lowest-health-first."""
    script: str | None = None


class TurnResponse(BaseModel):
    """What happened, and where the player stands afterwards."""
    events: list[CombatEvent]
    status: str
    current_health: int


def _get_storage(request: Request) -> Storage:
    """Get the record store from app state."""
    return request.app.state.storage


def _get_rng(request: Request) -> random.Random | None:
    """A Random pinned on app state (tests), else None for fresh entropy."""
    return getattr(request.app.state, "rng", None)


def _parse_step(step: TurnStepRequest | None) -> TurnStep | None:
    if step is None:
        return None
    return TurnStep(
        kind=names.ACTIONS.parse(step.kind),
        target_id=step.target_id,
        item=names.ITEMS.parse(step.item) if step.item is not None else None,
    )


def _turn_response(storage: Storage, credentials: CharacterCredentials,
                   events: list[CombatEvent]) -> TurnResponse:
    character = storage.get_character(credentials.id)
    return TurnResponse(
        events=events,
        status=character.status.value,
        current_health=character.current_health,
    )


@router.post("", status_code=201, response_model=TurnResponse)
def start_encounter(
    body: StartEncounterRequest,
    request: Request,
    credentials: CharacterCredentials = Depends(get_credentials),
) -> TurnResponse:
    """Start a fight. Events are those of monsters that won initiative."""
    storage = _get_storage(request)
    monster_types = [names.MONSTERS.parse(name) for name in body.monsters]
    _, events = combat.start_encounter(storage, credentials, monster_types, _get_rng(request))
    return _turn_response(storage, credentials, events)


@router.get("", response_model=EncounterView)
def get_encounter(
    request: Request,
    credentials: CharacterCredentials = Depends(get_credentials),
) -> EncounterView:
    view = combat.get_encounter_for(_get_storage(request), credentials)
    view.character.secret = ""
    return view


@router.post("/turn", response_model=TurnResponse)
def submit_turn(
    body: TurnRequest,
    request: Request,
    credentials: CharacterCredentials = Depends(get_credentials),
) -> TurnResponse:
    """Take the player's turn; monster turns up to the player's next one follow."""
    storage = _get_storage(request)
    choice = TurnChoice(action=_parse_step(body.action), bonus_action=_parse_step(body.bonus_action))
    events = combat.take_turn(storage, credentials, choice, _get_rng(request))
    return _turn_response(storage, credentials, events)


@router.post("/auto", response_model=TurnResponse)
def auto_play(
    body: AutoPlayRequest,
    request: Request,
    credentials: CharacterCredentials = Depends(get_credentials),
) -> TurnResponse:
    """Play the rest of the encounter with a decision provider."""
    storage = _get_storage(request)
    combat.get_encounter_for(storage, credentials)

    if body.script is None:
        provider = LowestHealthFirst()
    elif not ALLOW_SCRIPTS:
        raise HTTPException(status_code=403, detail="Decision scripts are disabled")
    else:
        try:
            provider = ScriptedProvider(body.script)
        except (ValueError, ImportError, AttributeError) as e:
            raise HTTPException(status_code=400, detail=f"Cannot load script: {e}")

    events = play_encounter(storage, credentials, provider, _get_rng(request))
    return _turn_response(storage, credentials, events)
