"""FastAPI app entry point for Deepdelve Server."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.characters import router as characters_router
from api.encounter import router as encounter_router
from config import LOG_LEVEL, SAVE_FILE
from engine.errors import GameError
from engine.storage import JsonFileStorage

logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(
    title="Deepdelve Server",
    description="Turn-based dungeon combat against server-controlled monsters",
    version="0.1.0",
)

app.state.storage = JsonFileStorage(SAVE_FILE)

app.include_router(characters_router, prefix="/characters", tags=["Characters"])
app.include_router(encounter_router, prefix="/encounter", tags=["Encounter"])


@app.exception_handler(GameError)
def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    """Report a rule violation with its status code and error name."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.get("/")
def root() -> dict:
    """Root endpoint returning server info."""
    return {"name": "Deepdelve Server", "version": "0.1.0", "status": "running"}


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"healthy": True}
