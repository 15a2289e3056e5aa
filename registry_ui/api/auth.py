"""
Login and logout routes.

Login failures are returned as a 401 carrying the inline error so that the
login form can show it next to its fields.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from registry_ui.core.dependencies import get_session_manager
from registry_ui.domain.models import LoginError
from registry_ui.services.authentication import SessionBusyError, SessionManager


router = APIRouter()


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


@router.post("/login")
async def login_submit(
    body: LoginRequest,
    sessions: SessionManager = Depends(get_session_manager),
):
    """
    Exchange credentials for a session.

    Returns:
        200 with the logged-in user name, 401 with a LoginError body when the
        registry rejected the credentials, 409 if a login is already running.
    """
    try:
        result = await sessions.login(body.username, body.password)
    except SessionBusyError as e:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(e)})

    if isinstance(result, LoginError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": result.model_dump()},
        )
    return {"username": result.username, "is_logged_in": True}


@router.post("/logout")
async def logout(sessions: SessionManager = Depends(get_session_manager)) -> dict:
    await sessions.logout()
    return {"is_logged_in": False}


@router.post("/login/toggle")
async def toggle_login_form(sessions: SessionManager = Depends(get_session_manager)) -> dict:
    """
    Open or close the login form. Any inline error from a previous attempt
    is cleared.
    """
    return {"show_login_form": sessions.toggle_login_form(), "login_error": None}
