from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Set


class MatchPhase(Enum):
    """Phases a league match goes through, in order"""
    DRAFTING = "drafting"
    STARTED = "started"
    FINISHED = "finished"


@dataclass(frozen=True)
class FinishedQueueEntry:
    match_id: int
    enqueued_at: datetime


@dataclass
class TrackerState:
    """Everything the match tracker remembers between polls.

    The phase sets only ever grow. Nothing here is persisted; a restart
    rebuilds it from the next live snapshot.
    """

    drafting: Set[int] = field(default_factory=set)
    started: Set[int] = field(default_factory=set)
    finished: Set[int] = field(default_factory=set)
    # GetMatchDetails does not return the game number, so keep it from the live feed
    game_numbers: Dict[int, int] = field(default_factory=dict)
    finished_queue: List[FinishedQueueEntry] = field(default_factory=list)

    def seen(self, phase: MatchPhase) -> Set[int]:
        if phase is MatchPhase.DRAFTING:
            return self.drafting
        if phase is MatchPhase.STARTED:
            return self.started
        return self.finished

    def current_phase(self, match_id: int) -> Optional[MatchPhase]:
        for phase in (MatchPhase.FINISHED, MatchPhase.STARTED, MatchPhase.DRAFTING):
            if match_id in self.seen(phase):
                return phase
        return None

    def summary(self) -> Dict[str, int]:
        return {
            "drafting": len(self.drafting),
            "started": len(self.started),
            "finished": len(self.finished),
            "pending_details": len(self.finished_queue),
        }
