from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Iterable, List, Optional, Set, Tuple

from .config import FINISHED_RETRY_SECS, logger
from .http import SteamAPIError
from .models import FinishedMatch, LiveMatch, MatchDetails
from .state import FinishedQueueEntry, TrackerState

# One short of a full draft (10): better to announce a start slightly early than miss it
STARTED_PICK_THRESHOLD = 9

DetailFetcher = Callable[[int], Awaitable[MatchDetails]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_game_started(match: LiveMatch) -> bool:
    """True once a live match is past its drafting phase."""
    if match.duration > 0:
        return True
    return match.pick_count >= STARTED_PICK_THRESHOLD


class MatchTracker:
    """Turns successive live-game snapshots into drafting/started/finished events.

    Only the poll loop drives a tracker, so it does no locking of its own.
    ``clock`` is injectable so the finished-queue deadline can be tested
    without waiting.
    """

    def __init__(
        self,
        retry_window: timedelta = timedelta(seconds=FINISHED_RETRY_SECS),
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.state = TrackerState()
        self.retry_window = retry_window
        self._clock = clock or _utcnow

    def ingest_live_snapshot(self, matches: Iterable[LiveMatch]) -> Tuple[List[LiveMatch], List[LiveMatch]]:
        """Record game numbers and return (newly drafting, newly started) matches."""
        new_drafting: List[LiveMatch] = []
        new_started: List[LiveMatch] = []
        for match in matches:
            self.state.game_numbers[match.match_id] = match.game_number
            if not is_game_started(match):
                # A match that already started never goes back to drafting
                if match.match_id not in self.state.drafting and match.match_id not in self.state.started:
                    self.state.drafting.add(match.match_id)
                    new_drafting.append(match)
            elif match.match_id not in self.state.started:
                self.state.started.add(match.match_id)
                new_started.append(match)
        return new_drafting, new_started

    def detect_finished(self, live_ids: Set[int]) -> List[int]:
        """Mark started matches missing from ``live_ids`` as finished and queue them.

        Completion is only ever inferred this way; the live feed has no
        "match ended" event.
        """
        now = self._clock()
        newly_finished: List[int] = []
        for match_id in sorted(self.state.started - self.state.finished):
            if match_id in live_ids:
                continue
            self.state.finished.add(match_id)
            self.state.finished_queue.append(FinishedQueueEntry(match_id=match_id, enqueued_at=now))
            newly_finished.append(match_id)
        if newly_finished:
            logger.info(f"Matches finished, queued for details: {newly_finished}")
        return newly_finished

    async def drain_finished_queue(self, fetch_details: DetailFetcher) -> List[FinishedMatch]:
        """Try to fetch details for every queued match.

        Entries that fail stay queued until they are older than
        ``retry_window``, after which they are dropped for good. The details
        endpoint typically lags a few minutes behind the live feed.
        """
        remaining: List[FinishedQueueEntry] = []
        outcomes: List[FinishedMatch] = []
        for entry in self.state.finished_queue:
            try:
                details = await fetch_details(entry.match_id)
            except SteamAPIError as e:
                age = self._clock() - entry.enqueued_at
                if age <= self.retry_window:
                    logger.debug(f"Match details for {entry.match_id} not available yet: {e}")
                    remaining.append(entry)
                else:
                    logger.info(
                        f"Giving up on match details for {entry.match_id} after {age.total_seconds():.0f}s: {e}"
                    )
                continue
            game_number = self.state.game_numbers.get(entry.match_id, 0)
            outcomes.append(FinishedMatch.from_details(entry.match_id, game_number, details))
        self.state.finished_queue = remaining
        return outcomes
