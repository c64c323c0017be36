import os
import logging
from typing import List

from dotenv import load_dotenv


# Load env early
load_dotenv()

# Logging configuration
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, log_level, logging.INFO),
)
logger = logging.getLogger("dotabot")

# Reduce noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
logging.getLogger("telegram.ext.ExtBot").setLevel(logging.WARNING)
logging.getLogger("telegram.ext.Updater").setLevel(logging.WARNING)
logging.getLogger("telegram.ext.Application").setLevel(logging.WARNING)
logging.getLogger("telegram.bot").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)


def _parse_chat_ids(raw: str) -> List[int]:
    chat_ids: List[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            chat_ids.append(int(part))
        except ValueError:
            logger.warning(f"Ignoring invalid chat id in CHAT_IDS: {part!r}")
    return chat_ids


class Config:
    """Application configuration read from the environment."""

    # Telegram Bot Configuration
    BOT_TOKEN: str | None = os.getenv("BOT_TOKEN")
    ALLOWED_USER_ID: int = int(os.getenv("ALLOWED_USER_ID", "0"))
    CHAT_IDS: List[int] = _parse_chat_ids(os.getenv("CHAT_IDS", ""))

    # Steam Web API Configuration
    STEAM_API_KEY: str = os.getenv("STEAM_API_KEY", "").strip()
    STEAM_API_URL: str = os.getenv("STEAM_API_URL", "https://api.steampowered.com").strip()
    REQUEST_INTERVAL_SECS: float = float(os.getenv("REQUEST_INTERVAL_SECS", "1.0"))
    HERO_LANGUAGE: str = os.getenv("HERO_LANGUAGE", "en_us")
    HERO_CACHE_TTL: int = int(os.getenv("HERO_CACHE_TTL", "86400"))  # 24 hours

    # League being tracked
    LEAGUE_ID: int = int(os.getenv("LEAGUE_ID", "0"))

    # Polling configuration
    POLL_SECS: int = int(os.getenv("POLL_SECS", "60"))
    BACKOFF_MULTIPLIER: float = float(os.getenv("BACKOFF_MULTIPLIER", "2.0"))
    MAX_POLL_SECS: int = int(os.getenv("MAX_POLL_SECS", "900"))

    # How long finished matches wait for their details to show up upstream
    FINISHED_RETRY_SECS: int = int(os.getenv("FINISHED_RETRY_SECS", "600"))

    @classmethod
    def validate_config(cls) -> None:
        if not cls.BOT_TOKEN:
            raise ValueError("BOT_TOKEN environment variable is required")
        if not cls.STEAM_API_KEY:
            raise ValueError("STEAM_API_KEY environment variable is required")
        if cls.LEAGUE_ID <= 0:
            raise ValueError("LEAGUE_ID environment variable is required")
        if cls.ALLOWED_USER_ID == 0:
            logger.warning("ALLOWED_USER_ID not configured - /subscribe is disabled in private chats")

    @classmethod
    def get_api_base_url(cls) -> str:
        return cls.STEAM_API_URL.rstrip("/")


# Expose commonly used constants
config = Config()
BASE = config.get_api_base_url()
BOT_TOKEN = config.BOT_TOKEN
STEAM_API_KEY = config.STEAM_API_KEY
LEAGUE_ID = config.LEAGUE_ID
ALLOWED_USER_ID = config.ALLOWED_USER_ID

POLL_SECS = config.POLL_SECS
BACKOFF_MULTIPLIER = config.BACKOFF_MULTIPLIER
MAX_POLL_SECS = config.MAX_POLL_SECS
FINISHED_RETRY_SECS = config.FINISHED_RETRY_SECS
REQUEST_INTERVAL_SECS = config.REQUEST_INTERVAL_SECS
