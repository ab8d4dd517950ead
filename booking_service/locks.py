import asyncio
from contextlib import asynccontextmanager


class SlotLocks:
    """
    Keyed asyncio locks: one writer at a time per (kind, resource_id, date).

    Locks are dropped once nobody holds or waits on them, so the registry only
    grows with the number of slots being written concurrently.
    """

    def __init__(self):
        self._locks: dict[tuple, asyncio.Lock] = {}
        self._users: dict[tuple, int] = {}

    @asynccontextmanager
    async def hold(self, key: tuple):
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def __len__(self):
        return len(self._locks)


slot_locks = SlotLocks()
