"""Dota league match notification bot.

Modules:
- config: environment, logging and constants
- http: aiohttp session, rate limiter and request helper
- models: live match / match details / outcome records
- api: Steam Web API surface
- heroes: cached hero catalog
- state: match phases and tracker state
- tracker: live snapshot diffing and finished-match queue
- channels: broadcast destinations
- formatting: message text
- notifier: broadcast fan-out
- watchers: poll loop
- auth / commands: telegram command handlers
- app: application bootstrap and wiring
"""

from .config import Config, BASE, BOT_TOKEN, STEAM_API_KEY, LEAGUE_ID, POLL_SECS
from .http import SteamAPIError, RateLimiter, make_session, fetch_json
from .models import LiveMatch, MatchDetails, FinishedMatch
from .api import SteamClient
from .heroes import load_hero_catalog, get_hero_names
from .state import MatchPhase, FinishedQueueEntry, TrackerState
from .tracker import MatchTracker, is_game_started, STARTED_PICK_THRESHOLD
from .channels import Channel, ChannelRegistry, ReadWriteLock
from .formatting import (
    fmt_matches_drafting,
    fmt_matches_started,
    fmt_matches_finished,
    fmt_live_games,
    fmt_status,
)
from .notifier import MessageKind, Notifier
from .watchers import (
    PollResult,
    poll_once,
    notify_poll_result,
    get_poll_interval,
    update_backoff,
    watch_loop,
    start_watcher,
    stop_watcher,
)
from .app import main, startup_health_check

__all__ = [
    # Config / HTTP
    "Config", "BASE", "BOT_TOKEN", "STEAM_API_KEY", "LEAGUE_ID", "POLL_SECS",
    "SteamAPIError", "RateLimiter", "make_session", "fetch_json",
    # API / models
    "LiveMatch", "MatchDetails", "FinishedMatch", "SteamClient", "load_hero_catalog", "get_hero_names",
    # Tracking
    "MatchPhase", "FinishedQueueEntry", "TrackerState", "MatchTracker", "is_game_started", "STARTED_PICK_THRESHOLD",
    # Delivery
    "Channel", "ChannelRegistry", "ReadWriteLock", "MessageKind", "Notifier",
    "fmt_matches_drafting", "fmt_matches_started", "fmt_matches_finished", "fmt_live_games", "fmt_status",
    # Watchers / App
    "PollResult", "poll_once", "notify_poll_result", "get_poll_interval", "update_backoff",
    "watch_loop", "start_watcher", "stop_watcher",
    "main", "startup_health_check",
]
