"""Character credentials for Deepdelve Server requests.

A request acts as a character by sending its id in ``X-Character-Id`` and
its secret as a Bearer token. The secret itself is checked by the engine.
"""

from fastapi import HTTPException, Request

from models.characters import CharacterCredentials


def get_credentials(request: Request) -> CharacterCredentials:
    """FastAPI dependency: extract character id and secret from headers.

    Usage:
        @router.post("/endpoint")
        def endpoint(credentials: CharacterCredentials = Depends(get_credentials)):
            ...

    Raises:
        HTTPException 401: If either header is missing or malformed.
    """
    character_id = request.headers.get("X-Character-Id")
    if not character_id:
        raise HTTPException(status_code=401, detail="Missing X-Character-Id header")

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header")

    return CharacterCredentials(id=character_id, secret=auth_header[len("Bearer "):])
