from __future__ import annotations

from telegram import BotCommand, Update
from telegram.error import TelegramError
from telegram.ext import Application, ChatMemberHandler, CommandHandler
from telegram.request import HTTPXRequest

from .api import SteamClient
from .channels import Channel, ChannelRegistry
from .commands import (
    CLIENT_KEY,
    LEAGUE_ID_KEY,
    REGISTRY_KEY,
    TRACKER_KEY,
    live_cmd,
    my_chat_member_handler,
    start_cmd,
    status_cmd,
    subscribe_cmd,
    unsubscribe_cmd,
)
from .config import Config, logger
from .heroes import load_hero_catalog
from .http import RateLimiter, SteamAPIError, make_session
from .notifier import Notifier
from .tracker import MatchTracker
from .watchers import start_watcher, stop_watcher


async def startup_health_check(client: SteamClient) -> bool:
    """Check the Steam API key by loading the hero catalog (which also warms its cache)."""
    logger.info("🏥 Running startup health check...")
    try:
        heroes = await load_hero_catalog(client)
    except SteamAPIError as e:
        logger.error(f"❌ Steam API health check failed: {e}")
        return False
    logger.info(f"✅ Steam API reachable, {len(heroes)} heroes known")
    return True


def main():
    try:
        Config.validate_config()
    except ValueError as e:
        raise SystemExit(f"❌ {e}. Check your .env file.")

    league_id = Config.LEAGUE_ID

    request = HTTPXRequest(
        connection_pool_size=8,
        connect_timeout=30.0,
        read_timeout=30.0,
        write_timeout=30.0,
        pool_timeout=30.0,
    )

    commands = [
        BotCommand("start", "Show help and tracking status"),
        BotCommand("subscribe", "Post match updates in this chat"),
        BotCommand("unsubscribe", "Stop posting match updates here"),
        BotCommand("live", "Show games currently live"),
        BotCommand("status", "Show what is being tracked"),
    ]

    async def post_init(application: Application) -> None:
        session = make_session()
        client = SteamClient(session, limiter=RateLimiter(Config.REQUEST_INTERVAL_SECS))
        tracker = MatchTracker()
        registry = ChannelRegistry()
        for chat_id in Config.CHAT_IDS:
            await registry.add(Channel(chat_id=chat_id))

        application.bot_data.update({
            REGISTRY_KEY: registry,
            TRACKER_KEY: tracker,
            CLIENT_KEY: client,
            LEAGUE_ID_KEY: league_id,
            "session": session,
        })

        try:
            await application.bot.set_my_commands(commands)
            logger.info("✅ Bot commands configured successfully")
        except TelegramError as e:
            logger.error(f"❌ Failed to set bot commands: {e}")

        await startup_health_check(client)

        notifier = Notifier(application.bot, registry)
        task, stop_event = start_watcher(tracker, client, notifier, league_id)
        application.bot_data["watcher"] = (task, stop_event)

    async def post_shutdown(application: Application) -> None:
        watcher = application.bot_data.pop("watcher", None)
        if watcher:
            await stop_watcher(*watcher)
        session = application.bot_data.pop("session", None)
        if session:
            await session.close()
        logger.info("Shutdown complete")

    app = (
        Application.builder()
        .token(Config.BOT_TOKEN)
        .request(request)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    app.add_handler(CommandHandler("start", start_cmd))
    app.add_handler(CommandHandler("subscribe", subscribe_cmd))
    app.add_handler(CommandHandler("unsubscribe", unsubscribe_cmd))
    app.add_handler(CommandHandler("live", live_cmd))
    app.add_handler(CommandHandler("status", status_cmd))
    app.add_handler(ChatMemberHandler(my_chat_member_handler, ChatMemberHandler.MY_CHAT_MEMBER))

    app.run_polling(drop_pending_updates=True, allowed_updates=[Update.MESSAGE, Update.MY_CHAT_MEMBER])
