"""Unit tests for the session lifecycle."""

import asyncio

import pytest

from conftest import BrokenStorage, FakeLoginService, RecordingStorage, make_token, NOW
from registry_ui.domain.models import LoginError, Session
from registry_ui.services.authentication import SessionBusyError, SessionManager
from registry_ui.storage.session_store import TOKEN_KEY, USERNAME_KEY


def make_manager(storage, login_service=None, clock=lambda: NOW, **kwargs) -> SessionManager:
    return SessionManager(storage, login_service or FakeLoginService(), clock=clock, **kwargs)


@pytest.mark.asyncio
async def test_restore_valid_session(valid_token) -> None:
    storage = RecordingStorage({USERNAME_KEY: "alice", TOKEN_KEY: valid_token})
    manager = make_manager(storage)

    session = await manager.restore()

    assert session == Session(username="alice", token=valid_token)
    assert manager.is_logged_in is True
    assert ("remove", TOKEN_KEY) not in storage.calls


@pytest.mark.asyncio
@pytest.mark.parametrize("username", ["alice", None])
async def test_restore_expired_token_clears_storage(expired_token, username) -> None:
    initial = {TOKEN_KEY: expired_token}
    if username:
        initial[USERNAME_KEY] = username
    storage = RecordingStorage(initial)
    manager = make_manager(storage)

    assert await manager.restore() is None
    assert manager.is_logged_in is False
    assert await storage.get(TOKEN_KEY) is None
    assert await storage.get(USERNAME_KEY) is None


@pytest.mark.asyncio
async def test_restore_without_username_is_anonymous(valid_token) -> None:
    storage = RecordingStorage({TOKEN_KEY: valid_token})
    manager = make_manager(storage)

    assert await manager.restore() is None
    assert await storage.get(TOKEN_KEY) is None


@pytest.mark.asyncio
async def test_restore_with_empty_storage_is_anonymous() -> None:
    storage = RecordingStorage()
    manager = make_manager(storage)

    assert await manager.restore() is None
    assert ("remove", USERNAME_KEY) in storage.calls
    assert ("remove", TOKEN_KEY) in storage.calls


@pytest.mark.asyncio
async def test_restore_honours_leeway() -> None:
    token = make_token(exp=NOW + 10)
    storage = RecordingStorage({USERNAME_KEY: "alice", TOKEN_KEY: token})
    manager = make_manager(storage, token_leeway=30)

    assert await manager.restore() is None


@pytest.mark.asyncio
async def test_restore_propagates_storage_failure() -> None:
    manager = make_manager(BrokenStorage())
    with pytest.raises(OSError):
        await manager.restore()


@pytest.mark.asyncio
async def test_login_success_persists_session(valid_token) -> None:
    storage = RecordingStorage()
    service = FakeLoginService({"username": "bob", "token": valid_token})
    manager = make_manager(storage, service)

    result = await manager.login("bob", "secret")

    assert result == Session(username="bob", token=valid_token)
    assert manager.session == result
    assert manager.login_error is None
    assert await storage.get(USERNAME_KEY) == "bob"
    assert await storage.get(TOKEN_KEY) == valid_token
    assert service.calls == [("bob", "secret")]


@pytest.mark.asyncio
async def test_login_failure_is_returned_as_data(valid_token) -> None:
    storage = RecordingStorage({USERNAME_KEY: "alice", TOKEN_KEY: valid_token})
    manager = make_manager(storage, FakeLoginService({"error": LoginError(description="bad credentials")}))
    await manager.restore()

    result = await manager.login("alice", "wrong")

    assert isinstance(result, LoginError)
    assert result.description == "bad credentials"
    assert manager.login_error == result
    assert manager.session is None
    assert manager.is_logged_in is False


@pytest.mark.asyncio
async def test_login_response_without_token_is_a_failure() -> None:
    manager = make_manager(RecordingStorage(), FakeLoginService({"username": "bob", "token": None}))

    result = await manager.login("bob", "secret")

    assert isinstance(result, LoginError)
    assert manager.session is None


@pytest.mark.asyncio
async def test_login_error_is_cleared_by_next_attempt(valid_token) -> None:
    service = FakeLoginService()
    manager = make_manager(RecordingStorage(), service)
    await manager.login("bob", "wrong")
    assert manager.login_error is not None

    service.response = {"username": "bob", "token": valid_token}
    await manager.login("bob", "secret")
    assert manager.login_error is None


@pytest.mark.asyncio
async def test_concurrent_login_is_rejected(valid_token) -> None:
    release = asyncio.Event()

    class SlowLoginService:
        async def login(self, username, password):
            await release.wait()
            return {"username": username, "token": valid_token}

    manager = make_manager(RecordingStorage(), SlowLoginService())
    first = asyncio.ensure_future(manager.login("bob", "secret"))
    await asyncio.sleep(0)

    with pytest.raises(SessionBusyError):
        await manager.login("bob", "secret")

    release.set()
    assert isinstance(await first, Session)


@pytest.mark.asyncio
async def test_logout_when_anonymous_is_harmless() -> None:
    storage = RecordingStorage()
    manager = make_manager(storage)

    await manager.logout()
    await manager.logout()

    assert storage.calls.count(("remove", USERNAME_KEY)) == 2
    assert storage.calls.count(("remove", TOKEN_KEY)) == 2
    assert manager.session is None


@pytest.mark.asyncio
async def test_logout_clears_session(valid_token) -> None:
    storage = RecordingStorage({USERNAME_KEY: "alice", TOKEN_KEY: valid_token})
    manager = make_manager(storage)
    await manager.restore()

    await manager.logout()

    assert manager.is_logged_in is False
    assert await storage.get(USERNAME_KEY) is None


@pytest.mark.asyncio
async def test_toggling_login_form_clears_error() -> None:
    manager = make_manager(RecordingStorage())
    assert manager.toggle_login_form() is True

    await manager.login("bob", "wrong")
    assert manager.login_error is not None
    assert manager.show_login_form is True

    assert manager.toggle_login_form() is False
    assert manager.login_error is None


@pytest.mark.asyncio
async def test_successful_login_closes_form(valid_token) -> None:
    manager = make_manager(RecordingStorage(), FakeLoginService({"username": "bob", "token": valid_token}))
    manager.toggle_login_form()

    await manager.login("bob", "secret")

    assert manager.show_login_form is False
