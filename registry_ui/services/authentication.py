"""
Session lifecycle for the registry browser.

The persisted session (username + token) is restored at bootstrap, replaced
on login and cleared on logout or when the token turns out to be expired.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol, Union

from registry_ui.domain.models import LoginError, Session
from registry_ui.domain.tokens import is_token_expired
from registry_ui.services.registry_client import RegistryAPIError, RegistryClient
from registry_ui.storage.session_store import TOKEN_KEY, USERNAME_KEY, SessionStorage

logger = logging.getLogger(__name__)

EMPTY_CREDENTIALS_MESSAGE = "Username or password can't be empty!"

# {"username": ..., "token": ...} on success, {"error": LoginError} on failure
LoginResponse = dict


class SessionBusyError(RuntimeError):
    """Raised when a login is started while another one is still running."""


class LoginService(Protocol):
    async def login(self, username: str, password: str) -> LoginResponse:
        ...


class RegistryLoginService:
    """Exchanges credentials for a token against the registry."""

    def __init__(self, client: RegistryClient):
        self.client = client

    async def login(self, username: str, password: str) -> LoginResponse:
        if not username or not password:
            return {"error": LoginError(description=EMPTY_CREDENTIALS_MESSAGE)}

        try:
            response = await self.client.login(username, password)
        except RegistryAPIError as e:
            return {"error": LoginError(description=e.message)}

        if not isinstance(response, dict):
            return {"error": LoginError(description="Unexpected response from the registry")}
        return {"username": response.get("username"), "token": response.get("token")}


class SessionManager:
    """
    Owns the in-memory session and keeps the persisted copy in sync.

    ``session`` is None while anonymous.
    """

    def __init__(
        self,
        storage: SessionStorage,
        login_service: LoginService,
        clock: Callable[[], float] = time.time,
        token_leeway: float = 0,
    ):
        self.storage = storage
        self.login_service = login_service
        self.clock = clock
        self.token_leeway = token_leeway
        self.session: Optional[Session] = None
        self.login_error: Optional[LoginError] = None
        self.show_login_form = False
        self._login_in_flight = False

    @property
    def is_logged_in(self) -> bool:
        return self.session is not None

    def is_token_expired(self, token: Optional[str]) -> bool:
        return is_token_expired(token, now=self.clock(), leeway=self.token_leeway)

    async def restore(self) -> Optional[Session]:
        """
        Rebuild the session from storage.

        A missing username, a missing token or an expired token clears the
        persisted session and leaves the manager anonymous.
        """
        token = await self.storage.get(TOKEN_KEY)
        username = await self.storage.get(USERNAME_KEY)

        if self.is_token_expired(token) or not username:
            if token or username:
                logger.warning("Stored session is expired or incomplete; continuing anonymously")
            await self.logout()
            return None

        self.session = Session(username=username, token=token)
        logger.info(f"Restored session for '{username}'")
        return self.session

    async def login(self, username: str, password: str) -> Union[Session, LoginError]:
        """
        Exchange credentials for a session.

        Failures are returned as ``LoginError`` data and also kept in
        ``login_error`` for the login form.
        """
        if self._login_in_flight:
            raise SessionBusyError("A login is already in progress")

        self._login_in_flight = True
        try:
            self.login_error = None
            response = await self.login_service.login(username, password)
        finally:
            self._login_in_flight = False

        error = response.get("error")
        new_username = response.get("username")
        token = response.get("token")

        if error is None and new_username and token:
            await self.storage.set(USERNAME_KEY, new_username)
            await self.storage.set(TOKEN_KEY, token)
            self.session = Session(username=new_username, token=token)
            self.show_login_form = False
            logger.info(f"User '{new_username}' logged in")
            return self.session

        if not isinstance(error, LoginError):
            error = LoginError(description=str(error) if error else "The registry did not return a token")
        logger.info(f"Login failed for '{username}': {error.description}")
        self.session = None
        self.login_error = error
        return error

    def clear_login_error(self) -> None:
        self.login_error = None

    def toggle_login_form(self) -> bool:
        """Open or close the login form; the previous inline error is discarded."""
        self.show_login_form = not self.show_login_form
        self.clear_login_error()
        return self.show_login_form

    async def logout(self) -> None:
        """Forget the session. Safe to call when already anonymous."""
        await self.storage.remove(USERNAME_KEY)
        await self.storage.remove(TOKEN_KEY)
        self.session = None
