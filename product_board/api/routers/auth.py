"""API endpoints for password login."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Response

from ...models import Role
from ...store.models import LoginRequest, SessionResponse
from ..dependencies import clear_session_cookie, require_session, resolve_login, set_session_cookie

logger = logging.getLogger("product_board.api")

router = APIRouter()


@router.post("/login", response_model=SessionResponse)
async def login(data: LoginRequest, response: Response):
    """
    Log in with one of the shared passwords.

    - admin password grants the admin role
    - login password grants the user role
    """
    role = resolve_login(data.password)
    if role is None:
        logger.info("Rejected login attempt")
        raise HTTPException(status_code=401, detail="Incorrect password")

    set_session_cookie(response, role)
    return SessionResponse(role=role.value)


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie."""
    clear_session_cookie(response)
    return {"success": True}


@router.get("/session", response_model=SessionResponse)
async def session(role: Role = Depends(require_session)):
    """Return the role of the current session."""
    return SessionResponse(role=role.value)
