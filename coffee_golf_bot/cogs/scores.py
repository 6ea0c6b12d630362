"""
Scores Cog - Score submission listener

Watches the scores channel for shared Coffee Golf results, records them
against the daily attempt cap and acknowledges each submission with
reactions.
"""

import discord
from discord.ext import commands

from coffee_golf_bot.config import Config
from coffee_golf_bot.constants import UIConstants
from coffee_golf_bot.data_models.scores import Attempt, RecordResult
from coffee_golf_bot.utils.logger import setup_logger
from coffee_golf_bot.utils.score_exceptions import AttemptLimitError, StorageError
from coffee_golf_bot.utils.score_parser import parse_score_message

logger = setup_logger(__name__)


class ScoresCog(commands.Cog):
    """Records Coffee Golf scores posted in the scores channel"""

    def __init__(self, bot, clock=discord.utils.utcnow):
        self.bot = bot
        self.store = bot.score_store
        self.logger = logger
        self.clock = clock

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot:
            return
        if message.channel.id != Config.SCORES_CHANNEL_ID:
            return
        await self.handle_score_message(message)

    async def handle_score_message(self, message: discord.Message):
        """Parse, record and acknowledge a single message."""
        attempt = parse_score_message(
            message.content,
            player_id=str(message.author.id),
            player_name=message.author.display_name,
            message_id=str(message.id),
            created_at=message.created_at,
            now=self.clock(),
        )
        if attempt is None:
            return

        self.logger.info(f"Parsed score from {attempt.player_name}: {attempt.strokes} strokes on {attempt.date}")
        cap = Config.MAX_DAILY_ATTEMPTS

        try:
            result = await self.store.record_attempt(attempt, daily_cap=cap)
        except AttemptLimitError as e:
            self.logger.info(f"{attempt.player_name} exceeded the daily cap for {attempt.date}")
            await self._safe_react(message, UIConstants.REJECTED_EMOJI)
            await self._safe_reply(message, e.user_message)
            return
        except StorageError as e:
            self.logger.error(f"Could not record score for {attempt.player_name}: {e}")
            await self._safe_react(message, UIConstants.REJECTED_EMOJI)
            await self._safe_reply(message, e.user_message)
            return

        await self._acknowledge(message, attempt, result, cap)

    async def _acknowledge(self, message: discord.Message, attempt: Attempt, result: RecordResult, cap: int):
        await self._safe_react(message, UIConstants.RECORDED_EMOJI)
        if result.attempt_index <= len(UIConstants.ATTEMPT_EMOJIS):
            await self._safe_react(message, UIConstants.ATTEMPT_EMOJIS[result.attempt_index - 1])

        if await self._improved_on_earlier_attempts(attempt):
            await self._safe_react(message, UIConstants.TROPHY_EMOJI)
            await self._safe_reply(
                message,
                f"{UIConstants.TROPHY_EMOJI} New best for {attempt.date}: {attempt.strokes} strokes! "
                "This one counts under Best and Unlimited scoring."
            )

        if result.attempt_index == cap:
            await self._safe_reply(message, f"This was your last attempt ({cap}/{cap}) for {attempt.date}.")

    async def _improved_on_earlier_attempts(self, attempt: Attempt) -> bool:
        attempts = (await self.store.attempts_for(attempt.date)).get(attempt.player_id, [])
        earlier = [a.strokes for a in attempts if a.message_id != attempt.message_id and a.timestamp <= attempt.timestamp]
        return bool(earlier) and attempt.strokes < min(earlier)

    async def _safe_react(self, message: discord.Message, emoji: str):
        try:
            await message.add_reaction(emoji)
        except discord.HTTPException as e:
            self.logger.warning(f"Failed to add reaction {emoji} to message {message.id}: {e}")

    async def _safe_reply(self, message: discord.Message, content: str):
        try:
            await message.reply(content)
        except discord.HTTPException as e:
            self.logger.warning(f"Failed to reply to message {message.id}: {e}")


async def setup(bot):
    await bot.add_cog(ScoresCog(bot))
