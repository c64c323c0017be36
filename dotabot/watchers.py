from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List

from .api import SteamClient
from .config import BACKOFF_MULTIPLIER, MAX_POLL_SECS, POLL_SECS, logger
from .http import SteamAPIError
from .models import FinishedMatch, LiveMatch
from .notifier import Notifier
from .tracker import MatchTracker


@dataclass
class PollResult:
    live_ok: bool
    drafting: List[LiveMatch] = field(default_factory=list)
    started: List[LiveMatch] = field(default_factory=list)
    finished: List[int] = field(default_factory=list)
    outcomes: List[FinishedMatch] = field(default_factory=list)


def get_poll_interval(backoff: float) -> float:
    """Seconds to wait before the next poll for the given backoff factor."""
    if backoff > 1.0:
        interval = min(POLL_SECS * backoff, MAX_POLL_SECS)
        logger.debug(f"Applying backoff {backoff}x: {interval}s (max: {MAX_POLL_SECS}s)")
        return float(interval)
    return float(POLL_SECS)


def update_backoff(backoff: float, live_ok: bool) -> float:
    """Reset the backoff on success, grow it (up to the ceiling) on failure."""
    if live_ok:
        return 1.0
    max_backoff = MAX_POLL_SECS / POLL_SECS
    return min(backoff * BACKOFF_MULTIPLIER, max_backoff)


async def poll_once(tracker: MatchTracker, client: SteamClient, league_id: int) -> PollResult:
    """Fetch the live snapshot, diff it, and drive the finished-details queue.

    A failed live fetch skips finished detection; an empty snapshot we could
    not get is not the same as an empty league.
    """
    result = PollResult(live_ok=False)
    try:
        games = await client.get_live_league_games(league_id)
    except SteamAPIError as e:
        logger.warning(f"Error getting live games for league {league_id}: {e}")
    else:
        result.live_ok = True
        result.drafting, result.started = tracker.ingest_live_snapshot(games)
        result.finished = tracker.detect_finished({g.match_id for g in games})

    result.outcomes = await tracker.drain_finished_queue(client.get_match_details)
    logger.debug(
        f"Poll: live_ok={result.live_ok} drafting={len(result.drafting)} started={len(result.started)} "
        f"finished={len(result.finished)} outcomes={len(result.outcomes)}"
    )
    return result


async def notify_poll_result(notifier: Notifier, result: PollResult) -> None:
    if result.drafting:
        await notifier.notify_drafting(result.drafting)
    if result.started:
        await notifier.notify_started(result.started)
    if result.outcomes:
        await notifier.notify_finished(result.outcomes)


async def watch_loop(
    tracker: MatchTracker,
    client: SteamClient,
    notifier: Notifier,
    league_id: int,
    stop_event: asyncio.Event,
) -> None:
    """Poll the league until ``stop_event`` is set."""
    logger.info(f"Started watch loop for league {league_id}")
    backoff = 1.0
    try:
        while not stop_event.is_set():
            live_ok = False
            try:
                result = await poll_once(tracker, client, league_id)
                live_ok = result.live_ok
                await notify_poll_result(notifier, result)
            except Exception as e:
                logger.error(f"Watch error for league {league_id}: {e}", exc_info=True)

            backoff = update_backoff(backoff, live_ok)
            poll_interval = get_poll_interval(backoff)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=poll_interval)
            except asyncio.TimeoutError:
                pass
    except asyncio.CancelledError:
        logger.info(f"Watch loop for league {league_id} cancelled")
        raise
    finally:
        logger.info(f"Watch loop stopped for league {league_id}")


def start_watcher(
    tracker: MatchTracker,
    client: SteamClient,
    notifier: Notifier,
    league_id: int,
) -> tuple[asyncio.Task, asyncio.Event]:
    """Start the watch loop as a background task. Set the event to stop it."""
    stop_event = asyncio.Event()
    task = asyncio.create_task(watch_loop(tracker, client, notifier, league_id, stop_event))
    logger.info(f"Started watcher for league {league_id}")
    return task, stop_event


async def stop_watcher(task: asyncio.Task, stop_event: asyncio.Event, timeout: float = 10.0) -> None:
    """Stop the watch loop, aborting any request or broadcast still in flight."""
    stop_event.set()
    task.cancel()
    done, _ = await asyncio.wait({task}, timeout=timeout)
    if not done:
        logger.warning(f"Watch loop did not stop within {timeout}s")
