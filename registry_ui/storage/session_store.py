from abc import ABC, abstractmethod
from typing import Dict, Optional

USERNAME_KEY = "username"
TOKEN_KEY = "token"


class SessionStorage(ABC):
    """
    Abstract key/value storage for the persisted session.

    Implementations hold plain strings and perform no validation. Errors
    raised here are not recovered by callers.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        pass


class MemorySessionStorage(SessionStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def remove(self, key: str) -> None:
        self._values.pop(key, None)
