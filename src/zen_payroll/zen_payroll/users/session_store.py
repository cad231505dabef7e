from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

from ..core.constants import SESSION_KEY
from ..core.exceptions import ConcurrentWriteError
from ..storage.backend import StorageBackend
from ..storage.codec import profile_from_dict, profile_to_dict
from .model import AdminProfile

logger = logging.getLogger(__name__)


class SessionStore:
    """Persisted mirror of the signed-in profile (one slot)."""

    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def _overwrite(self, text: str) -> None:
        # The session slot is last write wins: a competing write is overwritten.
        while True:
            _, revision = self._backend.get_item(SESSION_KEY)
            try:
                self._backend.compare_and_set(SESSION_KEY, text, revision)
                return
            except ConcurrentWriteError:
                logger.debug("Session slot changed while saving; overwriting")

    async def save(self, profile: AdminProfile) -> None:
        text = json.dumps(profile_to_dict(profile), ensure_ascii=False)
        await asyncio.to_thread(self._overwrite, text)

    async def restore(self) -> Optional[AdminProfile]:
        raw, _ = await asyncio.to_thread(self._backend.get_item, SESSION_KEY)
        if raw is None:
            return None
        try:
            profile = profile_from_dict(json.loads(raw))
        except (ValueError, TypeError, KeyError):
            logger.warning("Discarding corrupt session mirror")
            await self.clear()
            return None
        return profile if profile.is_logged_in else None

    async def clear(self) -> None:
        await asyncio.to_thread(self._backend.remove_item, SESSION_KEY)
