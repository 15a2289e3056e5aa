"""
HTTP client for the registry web API.

Only the contract matters to the rest of the core: ``request`` returns the
decoded body or raises ``RegistryAPIError`` carrying a readable message.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from registry_ui.storage.session_store import TOKEN_KEY, SessionStorage

logger = logging.getLogger(__name__)

PACKAGES_RESOURCE = "packages"
LOGIN_RESOURCE = "login"
LOGO_RESOURCE = "logo"


class RegistryAPIError(Exception):
    """A registry request failed at the transport or HTTP level."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RegistryClient:
    """Client for the registry's web UI API."""

    def __init__(
        self,
        api_url: str,
        storage: Optional[SessionStorage] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.storage = storage
        self.timeout = timeout
        self._transport = transport

    def _url(self, resource: str) -> str:
        return f"{self.api_url}/{resource.lstrip('/')}"

    async def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.storage is not None:
            token = await self.storage.get(TOKEN_KEY)
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "")
        if "json" in content_type:
            return response.json()
        return response.text

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for field in ("error", "message"):
                if isinstance(body.get(field), str) and body[field]:
                    return body[field]
        return f"{response.status_code} {response.reason_phrase}".strip()

    async def request(self, resource: str, method: str = "GET", json: Any = None) -> Any:
        """
        Perform a request against ``<api_url>/<resource>`` and return the
        decoded body.
        """
        url = self._url(resource)
        headers = await self._headers()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as e:
            message = str(e) or type(e).__name__
            logger.debug(f"{method} {url} failed: {message}")
            raise RegistryAPIError(message) from e

        if response.is_error:
            message = self._error_message(response)
            logger.debug(f"{method} {url} returned {response.status_code}: {message}")
            raise RegistryAPIError(message, status_code=response.status_code)

        try:
            return self._decode(response)
        except ValueError as e:
            raise RegistryAPIError(f"Invalid response from {resource}: {e}") from e

    async def get_packages(self) -> Any:
        return await self.request(PACKAGES_RESOURCE, "GET")

    async def login(self, username: str, password: str) -> Any:
        return await self.request(
            LOGIN_RESOURCE,
            "POST",
            json={"username": username, "password": password},
        )

    async def get_logo(self) -> str:
        logo = await self.request(LOGO_RESOURCE, "GET")
        return logo if isinstance(logo, str) else ""
