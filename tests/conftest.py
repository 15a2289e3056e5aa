"""Shared fixtures and fakes for the registry browser tests."""

import base64
import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from registry_ui.domain.models import LoginError
from registry_ui.storage.session_store import MemorySessionStorage

NOW = 1_700_000_000.0


def make_token(exp: Any = None, payload: Optional[dict] = None) -> str:
    """Build an unsigned JWT-shaped token carrying ``exp``."""
    body = dict(payload or {})
    if exp is not None:
        body["exp"] = exp
    segment = base64.urlsafe_b64encode(json.dumps(body).encode("utf-8")).decode("ascii").rstrip("=")
    return f"eyJhbGciOiJIUzI1NiJ9.{segment}.signature"


class RecordingStorage(MemorySessionStorage):
    """In-memory storage that records every call."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        super().__init__(initial)
        self.calls: List[Tuple[str, str]] = []

    async def get(self, key):
        self.calls.append(("get", key))
        return await super().get(key)

    async def set(self, key, value):
        self.calls.append(("set", key))
        await super().set(key, value)

    async def remove(self, key):
        self.calls.append(("remove", key))
        await super().remove(key)


class BrokenStorage(MemorySessionStorage):
    async def get(self, key):
        raise OSError("disk unavailable")


class FakeLoginService:
    def __init__(self, response: Optional[dict] = None):
        self.response = response if response is not None else {"error": LoginError(description="bad credentials")}
        self.calls: List[Tuple[str, str]] = []

    async def login(self, username: str, password: str) -> dict:
        self.calls.append((username, password))
        return self.response


class FakeCatalogClient:
    def __init__(self, packages: Any = None, error: Optional[Exception] = None):
        self.packages = packages if packages is not None else []
        self.error = error
        self.calls = 0

    async def get_packages(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.packages


@pytest.fixture
def valid_token() -> str:
    return make_token(exp=NOW + 3600)


@pytest.fixture
def expired_token() -> str:
    return make_token(exp=NOW - 1)


@pytest.fixture
def clock():
    return lambda: NOW
