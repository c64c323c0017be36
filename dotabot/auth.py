from __future__ import annotations

from telegram import ChatMember, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from .config import ALLOWED_USER_ID


async def is_group_admin(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    if not update.effective_chat or not update.effective_user:
        return False
    try:
        member = await context.bot.get_chat_member(update.effective_chat.id, update.effective_user.id)
    except TelegramError:
        return False
    return member.status in [ChatMember.ADMINISTRATOR, ChatMember.OWNER]


async def is_authorized_admin(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    """Private chats: only ALLOWED_USER_ID. Groups: chat administrators."""
    if not update.effective_user or not update.effective_chat:
        return False
    chat = update.effective_chat
    if chat.type == "private":
        return ALLOWED_USER_ID != 0 and update.effective_user.id == ALLOWED_USER_ID
    if chat.type in ["group", "supergroup"]:
        return await is_group_admin(update, context)
    return False


async def guard_admin(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    if not await is_authorized_admin(update, context):
        if update.effective_message:
            await update.effective_message.reply_text("❌ Not authorized.")
        return False
    return True
