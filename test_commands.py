"""Telegram handlers: membership events and subscription commands."""

from types import SimpleNamespace

import pytest
from telegram import ChatMember

from dotabot import auth
from dotabot import heroes as heroes_module
from dotabot.channels import Channel, ChannelRegistry
from dotabot.commands import (
    CLIENT_KEY,
    LEAGUE_ID_KEY,
    REGISTRY_KEY,
    TRACKER_KEY,
    live_cmd,
    my_chat_member_handler,
    status_cmd,
    subscribe_cmd,
    unsubscribe_cmd,
)
from dotabot.models import LiveMatch
from dotabot.tracker import MatchTracker


class FakeMessage:
    def __init__(self, thread_id=None):
        self.message_thread_id = thread_id
        self.is_topic_message = thread_id is not None
        self.replies = []

    async def reply_text(self, text, **kwargs):
        self.replies.append(text)


def membership_update(chat_id, old_status, new_status, chat_type="group", is_member=False):
    return SimpleNamespace(
        my_chat_member=SimpleNamespace(
            chat=SimpleNamespace(id=chat_id, type=chat_type),
            old_chat_member=SimpleNamespace(status=old_status, is_member=False),
            new_chat_member=SimpleNamespace(status=new_status, is_member=is_member),
        )
    )


def command_update(chat_id, chat_type, user_id, thread_id=None):
    return SimpleNamespace(
        effective_chat=SimpleNamespace(id=chat_id, type=chat_type),
        effective_user=SimpleNamespace(id=user_id),
        effective_message=FakeMessage(thread_id),
    )


class FakeBot:
    def __init__(self, status):
        self.status = status

    async def get_chat_member(self, chat_id, user_id):
        return SimpleNamespace(status=self.status)


@pytest.mark.asyncio
async def test_joining_a_group_registers_default_channel():
    registry = ChannelRegistry()
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry})

    await my_chat_member_handler(membership_update(-100, ChatMember.LEFT, ChatMember.MEMBER), context)
    assert await registry.snapshot() == [Channel(-100)]


@pytest.mark.asyncio
async def test_leaving_a_group_removes_all_its_channels():
    registry = ChannelRegistry()
    await registry.add(Channel(-100))
    await registry.add(Channel(-100, thread_id=3))
    await registry.add(Channel(-200))
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry})

    await my_chat_member_handler(membership_update(-100, ChatMember.MEMBER, ChatMember.BANNED), context)
    assert await registry.snapshot() == [Channel(-200)]


@pytest.mark.asyncio
async def test_promotion_does_not_re_register():
    registry = ChannelRegistry()
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry})
    await my_chat_member_handler(
        membership_update(-100, ChatMember.MEMBER, ChatMember.ADMINISTRATOR), context
    )
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_unblocking_in_private_chat_does_not_register():
    registry = ChannelRegistry()
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry})
    await my_chat_member_handler(
        membership_update(555, ChatMember.BANNED, ChatMember.MEMBER, chat_type="private"), context
    )
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_blocking_in_private_chat_drops_subscription():
    registry = ChannelRegistry()
    await registry.add(Channel(555))
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry})
    await my_chat_member_handler(
        membership_update(555, ChatMember.MEMBER, ChatMember.BANNED, chat_type="private"), context
    )
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_joining_restricted_registers_only_when_member():
    registry = ChannelRegistry()
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry})

    await my_chat_member_handler(
        membership_update(-100, ChatMember.LEFT, ChatMember.RESTRICTED, chat_type="supergroup"), context
    )
    assert len(registry) == 0

    await my_chat_member_handler(
        membership_update(-100, ChatMember.LEFT, ChatMember.RESTRICTED, chat_type="supergroup", is_member=True),
        context,
    )
    assert await registry.snapshot() == [Channel(-100)]
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_subscribe_in_private_chat_requires_allowed_user(monkeypatch):
    monkeypatch.setattr(auth, "ALLOWED_USER_ID", 42)
    registry = ChannelRegistry()
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry}, bot=FakeBot(ChatMember.MEMBER))

    stranger = command_update(7, "private", user_id=7)
    await subscribe_cmd(stranger, context)
    assert len(registry) == 0
    assert stranger.effective_message.replies == ["❌ Not authorized."]

    owner = command_update(42, "private", user_id=42)
    await subscribe_cmd(owner, context)
    assert await registry.snapshot() == [Channel(42)]


@pytest.mark.asyncio
async def test_group_admin_subscribes_forum_topic():
    registry = ChannelRegistry()
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry}, bot=FakeBot(ChatMember.ADMINISTRATOR))

    update = command_update(-100, "supergroup", user_id=5, thread_id=12)
    await subscribe_cmd(update, context)
    assert await registry.snapshot() == [Channel(-100, thread_id=12)]

    again = command_update(-100, "supergroup", user_id=5, thread_id=12)
    await subscribe_cmd(again, context)
    assert again.effective_message.replies == ["ℹ️ Already subscribed."]

    leave = command_update(-100, "supergroup", user_id=5, thread_id=12)
    await unsubscribe_cmd(leave, context)
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_group_member_cannot_subscribe():
    registry = ChannelRegistry()
    context = SimpleNamespace(bot_data={REGISTRY_KEY: registry}, bot=FakeBot(ChatMember.MEMBER))
    await subscribe_cmd(command_update(-100, "group", user_id=5), context)
    assert len(registry) == 0


class FakeSteamClient:
    def __init__(self, games):
        self.games = games

    async def get_live_league_games(self, league_id):
        return self.games

    async def get_hero_catalog(self, language):
        return {1: "Anti-Mage", 2: "Axe", 3: "Bane"}


@pytest.mark.asyncio
async def test_live_cmd_renders_hero_names():
    heroes_module.hero_cache.clear()
    match = LiveMatch(
        match_id=9, game_number=2, radiant_name="OG", dire_name="Secret",
        duration=61.0, radiant_picks=(1, 2), dire_picks=(3,),
    )
    context = SimpleNamespace(bot_data={CLIENT_KEY: FakeSteamClient([match]), LEAGUE_ID_KEY: 5401})
    update = command_update(-100, "group", user_id=5)

    await live_cmd(update, context)
    [reply] = update.effective_message.replies
    assert "<b>OG</b> vs. <b>Secret</b>" in reply
    assert "Anti-Mage, Axe" in reply
    assert "Bane" in reply
    heroes_module.hero_cache.clear()


@pytest.mark.asyncio
async def test_status_cmd_reports_tracker_counts():
    tracker = MatchTracker()
    tracker.ingest_live_snapshot([LiveMatch(match_id=1, game_number=1, radiant_name="A", dire_name="B")])
    registry = ChannelRegistry()
    await registry.add(Channel(1))
    context = SimpleNamespace(bot_data={TRACKER_KEY: tracker, REGISTRY_KEY: registry, LEAGUE_ID_KEY: 5401})
    update = command_update(1, "private", user_id=1)

    await status_cmd(update, context)
    [reply] = update.effective_message.replies
    assert "Drafting seen: 1" in reply
    assert "Subscribed channels: 1" in reply
