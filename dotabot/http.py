from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import aiohttp

from .config import REQUEST_INTERVAL_SECS, logger


class SteamAPIError(RuntimeError):
    """Raised when a Steam Web API request fails or returns a bad result."""


class RateLimiter:
    """Single-permit gate that hands the permit back ``interval`` seconds after use.

    The holder is free to keep working once its request is done; the permit
    is returned to the pool by the event loop, not by sleeping in the caller.
    """

    def __init__(self, interval: float = REQUEST_INTERVAL_SECS) -> None:
        self.interval = float(interval)
        self._permit = asyncio.Semaphore(1)

    def locked(self) -> bool:
        return self._permit.locked()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        await self._permit.acquire()
        try:
            yield
        finally:
            asyncio.get_running_loop().call_later(self.interval, self._permit.release)


def make_session() -> aiohttp.ClientSession:
    timeout = aiohttp.ClientTimeout(total=25)
    return aiohttp.ClientSession(
        timeout=timeout,
        headers={"accept": "application/json", "user-agent": "dotabot/1.0"},
        trust_env=True,
    )


async def fetch_json(
    session: aiohttp.ClientSession,
    url: str,
    params: Dict[str, str] | None = None,
    limiter: Optional[RateLimiter] = None,
) -> Any:
    """GET ``url`` and decode the JSON body.

    Any transport failure, non-200 status or undecodable body is raised as
    ``SteamAPIError``. Cancellation is left alone.
    """
    if limiter is None:
        return await _get_json(session, url, params)
    async with limiter.slot():
        return await _get_json(session, url, params)


async def _get_json(session: aiohttp.ClientSession, url: str, params: Dict[str, str] | None) -> Any:
    logger.debug(f"API request: {url}")
    try:
        async with session.get(url, params=params) as r:
            if r.status != 200:
                txt = await r.text(errors="replace")
                raise SteamAPIError(f"HTTP {r.status} for {url} :: {txt[:300]}")
            try:
                data = await r.json(content_type=None)
            except ValueError as e:
                raise SteamAPIError(f"Invalid JSON from {url}: {e}") from e
    except aiohttp.ClientError as e:
        raise SteamAPIError(f"Request to {url} failed: {e}") from e
    except asyncio.TimeoutError as e:
        raise SteamAPIError(f"Request to {url} timed out") from e
    logger.debug(f"API success: {url}")
    return data
