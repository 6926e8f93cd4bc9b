"""Per-learner command serialisation.

The journey core assumes one writer per ledger. Requests for the same
learner take that learner's lock, load the ledger, run one command and, if
the ledger changed, save it before the next request gets in. Locks for
learners with no stored journey are dropped so the registry does not grow.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import HTTPException

from journey import Ledger, Storage


class SessionRegistry:
    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def forget(self, user_id: str) -> None:
        self._locks.pop(user_id, None)

    @asynccontextmanager
    async def open(self, storage: Storage, user_id: str) -> AsyncIterator[Ledger]:
        """Yield the learner's ledger and save it if the block changed it."""
        async with self.lock(user_id):
            ledger = storage.load_ledger(user_id)
            if ledger is None:
                self.forget(user_id)
                raise HTTPException(404, "Journey not found")
            before = ledger.to_record()
            if storage.get_config()["calendar_unlocks"]:
                ledger.sync_calendar()
            yield ledger
            if ledger.to_record() != before:
                storage.save_ledger(ledger)
