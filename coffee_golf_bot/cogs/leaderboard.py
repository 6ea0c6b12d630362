import discord
from discord import app_commands
from discord.ext import commands
from typing import Optional

from coffee_golf_bot.constants import ScoringConstants
from coffee_golf_bot.services.leaderboard import SCOPE_RECENT, SCOPE_TODAY
from coffee_golf_bot.services.rate_limiter import rate_limit
from coffee_golf_bot.utils.embeds import build_leaderboard_embeds, no_scores_message
from coffee_golf_bot.utils.error_embeds import ErrorEmbeds
from coffee_golf_bot.utils.score_exceptions import ScoreBotException
import logging

logger = logging.getLogger(__name__)

SCORING_CHOICES = [
    app_commands.Choice(name="First Attempt", value="first"),
    app_commands.Choice(name="Best of Attempts", value="best"),
    app_commands.Choice(name="Unlimited", value="unlimited"),
    app_commands.Choice(name="All Scoring Types", value="all"),
]


class LeaderboardCog(commands.Cog):
    """Daily and recent Coffee Golf leaderboards"""

    leaderboard = app_commands.Group(name="leaderboard", description="View Coffee Golf leaderboards")

    def __init__(self, bot):
        self.bot = bot
        self.leaderboard_service = bot.leaderboard_service

    @leaderboard.command(name="today", description="Show today's leaderboard")
    @app_commands.describe(scoring="Scoring method (default: first attempt)")
    @app_commands.choices(scoring=SCORING_CHOICES)
    @rate_limit("leaderboard", limit=5, window=60)
    async def today(
        self,
        interaction: discord.Interaction,
        scoring: Optional[app_commands.Choice[str]] = None
    ):
        """Display today's leaderboard."""
        await self._send_board(interaction, SCOPE_TODAY, None, scoring.value if scoring else None)

    @leaderboard.command(name="recent", description="Show the leaderboard for recent days")
    @app_commands.describe(
        days="Number of days to include (default: 7)",
        scoring="Scoring method (default: first attempt)"
    )
    @app_commands.choices(scoring=SCORING_CHOICES)
    @rate_limit("leaderboard", limit=5, window=60)
    async def recent(
        self,
        interaction: discord.Interaction,
        days: Optional[app_commands.Range[int, ScoringConstants.MIN_RECENT_DAYS, ScoringConstants.MAX_RECENT_DAYS]] = None,
        scoring: Optional[app_commands.Choice[str]] = None
    ):
        """Display cumulative scores over the last few days."""
        await self._send_board(interaction, SCOPE_RECENT, days, scoring.value if scoring else None)

    async def _send_board(self, interaction: discord.Interaction, scope: str, days: Optional[int], scoring: Optional[str]):
        await interaction.response.defer()

        try:
            report = await self.leaderboard_service.build_board(scope=scope, days=days, mode_option=scoring)
        except ScoreBotException as e:
            await interaction.followup.send(embed=ErrorEmbeds.invalid_input(e.user_message))
            return
        except Exception as e:
            logger.error(f"Error in leaderboard {scope} command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("There was an error fetching the leaderboard."))
            return

        if report.empty:
            await interaction.followup.send(no_scores_message(report))
            return

        await interaction.followup.send(embeds=build_leaderboard_embeds(report))


async def setup(bot):
    await bot.add_cog(LeaderboardCog(bot))
