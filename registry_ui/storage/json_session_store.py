import json
import logging
from pathlib import Path
from typing import Dict, Optional

import aiofiles

from registry_ui.storage.session_store import SessionStorage

logger = logging.getLogger(__name__)


class JsonSessionStorage(SessionStorage):
    """
    Session storage persisted as a flat JSON object on disk.

    Persisted at: <DATA_DIR>/session.json
    """

    def __init__(self, path: Path):
        self._path = path

    async def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
            content = await f.read()
        if not content.strip():
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"Session file {self._path} does not contain a JSON object")
        return data

    async def _write(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self._path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, indent=2))

    async def get(self, key: str) -> Optional[str]:
        value = (await self._read()).get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        data = await self._read()
        data[key] = value
        await self._write(data)

    async def remove(self, key: str) -> None:
        if not self._path.exists():
            return
        data = await self._read()
        if key not in data:
            return
        del data[key]
        await self._write(data)
        logger.debug(f"Removed '{key}' from {self._path}")
