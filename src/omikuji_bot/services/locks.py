"""Per-user serialization of webhook handling."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


@dataclass
class IdentityLocks:
    """Hands out one ``asyncio.Lock`` per identity.

    Updates from the same user run one after another; different users never
    wait on each other. Entries are dropped once nobody holds or waits on them.
    Process-local only.
    """

    _entries: dict[int, _LockEntry] = field(default_factory=dict)

    @asynccontextmanager
    async def hold(self, identity: int) -> AsyncIterator[None]:
        """Run the enclosed block exclusively for ``identity``."""
        entry = self._entries.get(identity)
        if entry is None:
            entry = _LockEntry()
            self._entries[identity] = entry
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                self._entries.pop(identity, None)

    def __len__(self) -> int:
        return len(self._entries)
