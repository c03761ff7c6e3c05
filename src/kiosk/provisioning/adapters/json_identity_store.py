"""JSON file identity store adapter.

This adapter implements IClientIdentityStore as a small key-value file, the
local equivalent of a device preferences store. Every set/remove rewrites the
file atomically (temp file + rename), so a crash never leaves a torn file,
but separate calls are separate writes.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import anyio

from ...api.exceptions import PersistenceError
from ...config import DEFAULT_CLIENT_TYPE
from ..domain.ports import IClientIdentityStore

logger = logging.getLogger(__name__)

CLIENT_ID_KEY = "client_id"
CLIENT_NAME_KEY = "client_name"
CLIENT_TYPE_KEY = "client_type"


class JsonFileIdentityStore(IClientIdentityStore):
    """Client identity persisted in a JSON file.

    Example:
        store = JsonFileIdentityStore(".kiosk/identity.json", client_type="KIOSK")
        await store.set_client_id("dev-1")
        assert await store.get_client_id() == "dev-1"
    """

    def __init__(
        self,
        path: Union[str, Path],
        client_type: str = DEFAULT_CLIENT_TYPE,
    ):
        """Initialize the store.

        Args:
            path: Location of the JSON file (created on first write)
            client_type: Ambient client type reported by get_client_type()
        """
        self.path = Path(path)
        self.client_type = client_type
        self._lock = asyncio.Lock()

    def get_client_type(self) -> str:
        return self.client_type

    async def get_client_id(self) -> Optional[str]:
        return await self._get(CLIENT_ID_KEY)

    async def get_client_name(self) -> Optional[str]:
        return await self._get(CLIENT_NAME_KEY)

    async def get_stored_client_type(self) -> Optional[str]:
        return await self._get(CLIENT_TYPE_KEY)

    async def set_client_id(self, value: str) -> None:
        await self._set(CLIENT_ID_KEY, value)

    async def set_client_name(self, value: str) -> None:
        await self._set(CLIENT_NAME_KEY, value)

    async def set_client_type(self, value: str) -> None:
        await self._set(CLIENT_TYPE_KEY, value)

    async def remove_client_id(self) -> None:
        await self._set(CLIENT_ID_KEY, None)

    async def remove_client_name(self) -> None:
        await self._set(CLIENT_NAME_KEY, None)

    async def remove_client_type(self) -> None:
        await self._set(CLIENT_TYPE_KEY, None)

    # ============================================
    # File access
    # ============================================

    async def _get(self, key: str) -> Optional[str]:
        async with self._lock:
            data = await anyio.to_thread.run_sync(self._read)
        value = data.get(key)
        return str(value) if value is not None else None

    async def _set(self, key: str, value: Optional[str]) -> None:
        async with self._lock:
            data = await anyio.to_thread.run_sync(self._read)
            if value is None:
                if key not in data:
                    return
                data.pop(key)
            else:
                data[key] = value
            await anyio.to_thread.run_sync(lambda: self._write(data))
        logger.debug(f"Identity field {key} {'removed' if value is None else 'updated'}")

    def _read(self) -> dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(
                f"Identity file {self.path} is unreadable: {e}",
                cause=e,
            ) from e

        if not isinstance(data, dict):
            raise PersistenceError(f"Identity file {self.path} does not contain an object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".identity-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise PersistenceError(
                f"Failed to write identity file {self.path}: {e}",
                cause=e,
            ) from e
