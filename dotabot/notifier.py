from __future__ import annotations

from enum import Enum
from typing import Sequence

from telegram.error import TelegramError

from .channels import ChannelRegistry
from .config import logger
from .formatting import fmt_matches_drafting, fmt_matches_finished, fmt_matches_started
from .models import FinishedMatch, LiveMatch


class MessageKind(Enum):
    """Notification kinds. Announced kinds ring; the rest are delivered silently."""
    DRAFTING = ("drafting", False)
    STARTED = ("started", True)
    FINISHED = ("finished", True)

    def __init__(self, label: str, announce: bool) -> None:
        self.label = label
        self.announce = announce


class Notifier:
    """Renders match transitions and broadcasts them to every registered channel."""

    def __init__(self, bot, registry: ChannelRegistry) -> None:
        self.bot = bot
        self.registry = registry

    async def broadcast(self, text: str, announce: bool = False) -> int:
        """Send ``text`` to all channels; returns how many sends succeeded.

        A failing channel is logged and skipped.
        """
        delivered = 0
        async with self.registry.reading() as channels:
            for channel in channels:
                try:
                    await self.bot.send_message(
                        channel.chat_id,
                        text,
                        message_thread_id=channel.thread_id,
                        disable_notification=not announce,
                    )
                    delivered += 1
                except TelegramError as e:
                    logger.warning(f"Failed sending message to {channel}: {e}")
        return delivered

    async def send(self, kind: MessageKind, text: str) -> int:
        if not text:
            return 0
        delivered = await self.broadcast(text, announce=kind.announce)
        logger.info(f"Sent {kind.label} notification to {delivered} channel(s)")
        return delivered

    async def notify_drafting(self, matches: Sequence[LiveMatch]) -> int:
        return await self.send(MessageKind.DRAFTING, fmt_matches_drafting(matches))

    async def notify_started(self, matches: Sequence[LiveMatch]) -> int:
        return await self.send(MessageKind.STARTED, fmt_matches_started(matches))

    async def notify_finished(self, outcomes: Sequence[FinishedMatch]) -> int:
        return await self.send(MessageKind.FINISHED, fmt_matches_finished(outcomes))
