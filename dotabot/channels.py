from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional, Set

from .config import logger


@dataclass(frozen=True)
class Channel:
    """A broadcast destination: a chat, optionally narrowed to a forum topic."""

    chat_id: int
    thread_id: Optional[int] = None

    @property
    def group_id(self) -> int:
        return self.chat_id


class ReadWriteLock:
    """Many concurrent readers or one writer, for coroutines on one event loop."""

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writing = False

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writing)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writing and self._readers == 0)
            self._writing = True
        try:
            yield
        finally:
            async with self._cond:
                self._writing = False
                self._cond.notify_all()


class ChannelRegistry:
    """The set of channels notifications are broadcast to.

    Membership handlers write to it while the poll loop is broadcasting, so
    every access goes through a reader/writer lock. Hold ``reading()`` for
    the whole fan-out so a group removal waits for in-flight sends.
    """

    def __init__(self) -> None:
        self._channels: Set[Channel] = set()
        self._lock = ReadWriteLock()

    async def add(self, channel: Channel) -> bool:
        async with self._lock.write():
            if channel in self._channels:
                return False
            self._channels.add(channel)
        logger.info(f"Registered channel {channel}")
        return True

    async def remove(self, channel: Channel) -> bool:
        async with self._lock.write():
            if channel not in self._channels:
                return False
            self._channels.discard(channel)
        logger.info(f"Unregistered channel {channel}")
        return True

    async def remove_group(self, group_id: int) -> int:
        async with self._lock.write():
            doomed = {c for c in self._channels if c.group_id == group_id}
            self._channels -= doomed
        if doomed:
            logger.info(f"Unregistered {len(doomed)} channel(s) of group {group_id}")
        return len(doomed)

    @asynccontextmanager
    async def reading(self) -> AsyncIterator[List[Channel]]:
        async with self._lock.read():
            yield sorted(self._channels, key=lambda c: (c.chat_id, c.thread_id or 0))

    async def snapshot(self) -> List[Channel]:
        async with self.reading() as channels:
            return channels

    def __len__(self) -> int:
        return len(self._channels)
