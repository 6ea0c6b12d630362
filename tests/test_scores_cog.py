"""Tests for the score submission listener."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from coffee_golf_bot.cogs.scores import ScoresCog
from coffee_golf_bot.config import Config

from conftest import NOW, TODAY

SHARE_TEXT = "Coffee Golf - Apr 5\n{strokes} Strokes - Top 12%\n🟨🟩🟥"


def make_message(strokes=13, message_id=1, minute=0, author_id=42, bot=False, channel_id=None, content=None):
    message = MagicMock()
    message.id = message_id
    message.content = content if content is not None else SHARE_TEXT.format(strokes=strokes)
    message.created_at = NOW.replace(minute=minute)
    message.author.id = author_id
    message.author.bot = bot
    message.author.display_name = "Alice"
    message.channel.id = channel_id if channel_id is not None else Config.SCORES_CHANNEL_ID
    message.add_reaction = AsyncMock()
    message.reply = AsyncMock()
    return message


def reactions(message):
    return [call.args[0] for call in message.add_reaction.call_args_list]


@pytest.fixture
def cog(store):
    return ScoresCog(SimpleNamespace(score_store=store), clock=lambda: NOW)


class TestScoresListener:
    async def test_records_and_reacts(self, cog, store):
        message = make_message()

        await cog.on_message(message)

        assert reactions(message) == ["✅", "1️⃣"]
        assert (await store.attempts_for(TODAY))["42"][0].strokes == 13
        message.reply.assert_not_called()

    async def test_ignores_bots(self, cog, store):
        await cog.on_message(make_message(bot=True))

        assert await store.attempts_for(TODAY) == {}

    async def test_ignores_other_channels(self, cog, store):
        await cog.on_message(make_message(channel_id=Config.SCORES_CHANNEL_ID + 1))

        assert await store.attempts_for(TODAY) == {}

    async def test_ignores_non_scores(self, cog):
        message = make_message(content="anyone playing today?")

        await cog.on_message(message)

        message.add_reaction.assert_not_called()
        message.reply.assert_not_called()

    async def test_last_attempt_and_cap(self, cog):
        for index in range(3):
            message = make_message(strokes=10, message_id=index, minute=index)
            await cog.on_message(message)
        assert reactions(message) == ["✅", "3️⃣"]
        assert "last attempt (3/3)" in message.reply.call_args.args[0]

        rejected = make_message(strokes=10, message_id=99, minute=10)
        await cog.on_message(rejected)

        assert reactions(rejected) == ["❌"]
        assert "already used all 3 attempts" in rejected.reply.call_args.args[0]

    async def test_improvement_gets_trophy(self, cog):
        await cog.on_message(make_message(strokes=12, message_id=1, minute=0))
        better = make_message(strokes=8, message_id=2, minute=1)

        await cog.on_message(better)

        assert reactions(better) == ["✅", "2️⃣", "🏆"]
        assert "New best" in better.reply.call_args.args[0]

    async def test_reaction_failure_is_logged_not_raised(self, cog, store):
        message = make_message()
        message.add_reaction.side_effect = discord.HTTPException(MagicMock(status=403, reason="Forbidden"), "Missing Access")

        await cog.on_message(message)

        assert "42" in await store.attempts_for(TODAY)
