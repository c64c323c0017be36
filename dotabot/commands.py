from __future__ import annotations

from typing import Optional

from telegram import ChatMember, Update
from telegram.ext import ContextTypes

from .auth import guard_admin
from .channels import Channel, ChannelRegistry
from .config import logger
from .formatting import fmt_live_games, fmt_status
from .heroes import get_hero_names
from .http import SteamAPIError

# bot_data keys, populated by app.post_init
REGISTRY_KEY = "registry"
TRACKER_KEY = "tracker"
CLIENT_KEY = "client"
LEAGUE_ID_KEY = "league_id"

PRESENT_STATUSES = (ChatMember.MEMBER, ChatMember.ADMINISTRATOR, ChatMember.OWNER)
GROUP_CHAT_TYPES = ("group", "supergroup")


def _is_present(member) -> bool:
    # A restricted bot is still in the chat unless Telegram says otherwise
    if member.status == ChatMember.RESTRICTED:
        return bool(getattr(member, "is_member", False))
    return member.status in PRESENT_STATUSES


def _channel_for(update: Update) -> Optional[Channel]:
    chat = update.effective_chat
    if chat is None:
        return None
    message = update.effective_message
    thread_id = message.message_thread_id if message is not None and message.is_topic_message else None
    return Channel(chat_id=chat.id, thread_id=thread_id)


async def start_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE):
    tracker = context.bot_data[TRACKER_KEY]
    registry: ChannelRegistry = context.bot_data[REGISTRY_KEY]
    await update.effective_message.reply_text(
        "🤖 <b>Dota League Bot</b>\n\n"
        "I post when league games enter drafting, start, and end.\n\n"
        "/subscribe - Post updates in this chat (admins)\n"
        "/unsubscribe - Stop posting here (admins)\n"
        "/live - Show games currently live\n"
        "/status - Show what is being tracked\n\n"
        + fmt_status(context.bot_data[LEAGUE_ID_KEY], tracker.state.summary(), len(registry)),
        parse_mode="HTML",
    )


async def status_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE):
    tracker = context.bot_data[TRACKER_KEY]
    registry: ChannelRegistry = context.bot_data[REGISTRY_KEY]
    await update.effective_message.reply_text(
        fmt_status(context.bot_data[LEAGUE_ID_KEY], tracker.state.summary(), len(registry)),
        parse_mode="HTML",
    )


async def subscribe_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if not await guard_admin(update, context):
        return
    channel = _channel_for(update)
    if channel is None:
        return
    registry: ChannelRegistry = context.bot_data[REGISTRY_KEY]
    if await registry.add(channel):
        await update.effective_message.reply_text("✅ Match updates will be posted here.")
    else:
        await update.effective_message.reply_text("ℹ️ Already subscribed.")


async def unsubscribe_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if not await guard_admin(update, context):
        return
    channel = _channel_for(update)
    if channel is None:
        return
    registry: ChannelRegistry = context.bot_data[REGISTRY_KEY]
    if await registry.remove(channel):
        await update.effective_message.reply_text("🛑 Stopped posting match updates here.")
    else:
        await update.effective_message.reply_text("ℹ️ This chat was not subscribed.")


async def live_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE):
    client = context.bot_data[CLIENT_KEY]
    league_id = context.bot_data[LEAGUE_ID_KEY]
    try:
        games = await client.get_live_league_games(league_id)
    except SteamAPIError as e:
        logger.warning(f"/live failed: {e}")
        await update.effective_message.reply_text(f"❌ Error: {e}")
        return

    rendered = []
    for game in games:
        radiant = await get_hero_names(client, game.radiant_picks)
        dire = await get_hero_names(client, game.dire_picks)
        rendered.append((game, radiant, dire))
    await update.effective_message.reply_text(fmt_live_games(league_id, rendered), parse_mode="HTML")


async def my_chat_member_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Register a group when the bot joins it, drop all its channels when the bot leaves."""
    change = update.my_chat_member
    if change is None:
        return
    registry: ChannelRegistry = context.bot_data[REGISTRY_KEY]
    chat_id = change.chat.id
    was_present = _is_present(change.old_chat_member)
    is_present = _is_present(change.new_chat_member)
    logger.debug(
        f"Membership change in chat {chat_id}: "
        f"{change.old_chat_member.status} -> {change.new_chat_member.status}"
    )

    if was_present and not is_present:
        await registry.remove_group(chat_id)
    elif is_present and not was_present:
        # Private chats only subscribe through /subscribe
        if change.chat.type not in GROUP_CHAT_TYPES:
            return
        await registry.add(Channel(chat_id=chat_id))
