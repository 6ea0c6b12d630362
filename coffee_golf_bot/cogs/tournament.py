"""
Tournament Cog - Tournament lifecycle and standings

Tournaments are date ranges scored under one scoring type. Starting and
ending them is restricted to the bot owner; anyone can view them.
"""

import discord
from discord import app_commands
from discord.ext import commands
from typing import Optional

from coffee_golf_bot.config import Config
from coffee_golf_bot.constants import UIConstants
from coffee_golf_bot.utils.embeds import build_tournament_embed, chunk_lines
from coffee_golf_bot.utils.error_embeds import ErrorEmbeds
from coffee_golf_bot.utils.logger import setup_logger
from coffee_golf_bot.utils.score_exceptions import NoActiveTournamentError, ScoreBotException, StorageError
from coffee_golf_bot.utils.scoring import ScoringMode

logger = setup_logger(__name__)

TOURNAMENT_SCORING_CHOICES = [
    app_commands.Choice(name="First Attempt", value="first"),
    app_commands.Choice(name="Best of Attempts", value="best"),
    app_commands.Choice(name="Unlimited", value="unlimited"),
]


def is_bot_owner(interaction: discord.Interaction) -> bool:
    return interaction.user.id == Config.OWNER_DISCORD_ID


class TournamentCog(commands.Cog):
    """Tournament management commands"""

    tournament = app_commands.Group(name="tournament", description="Coffee Golf tournaments")

    def __init__(self, bot):
        self.bot = bot
        self.manager = bot.tournament_manager

    async def _send_error(self, interaction: discord.Interaction, error: Exception, action: str):
        if isinstance(error, NoActiveTournamentError):
            embed = ErrorEmbeds.no_tournament()
        elif isinstance(error, StorageError):
            logger.error(f"Storage failure while trying to {action}: {error}")
            embed = ErrorEmbeds.storage_error()
        elif isinstance(error, ScoreBotException):
            embed = ErrorEmbeds.invalid_input(error.user_message)
        else:
            logger.error(f"Error while trying to {action}: {error}", exc_info=True)
            embed = ErrorEmbeds.command_error(f"Could not {action}.")
        await interaction.followup.send(embed=embed)

    @tournament.command(name="start", description="Start a new tournament (Owner only)")
    @app_commands.describe(
        name="Tournament name",
        days="How many days the tournament runs after today",
        scoring="Scoring type used for standings"
    )
    @app_commands.choices(scoring=TOURNAMENT_SCORING_CHOICES)
    @app_commands.check(is_bot_owner)
    async def start(
        self,
        interaction: discord.Interaction,
        name: str,
        days: app_commands.Range[int, 1, 365] = 7,
        scoring: Optional[app_commands.Choice[str]] = None
    ):
        await interaction.response.defer()
        mode = ScoringMode.from_option(scoring.value if scoring else None)

        try:
            created = await self.manager.create_tournament(name, days, mode)
        except Exception as e:
            await self._send_error(interaction, e, "start the tournament")
            return

        embed = discord.Embed(
            title=f"{UIConstants.TROPHY_EMOJI} Tournament Started: {created.name}",
            description=(
                f"Runs from **{created.start_date}** to **{created.end_date}**\n"
                f"Scoring: **{mode.display_name}**\n\n"
                "Post your Coffee Golf results in the scores channel to join!"
            ),
            color=UIConstants.SUCCESS_COLOR
        )
        await interaction.followup.send(embed=embed)

    @tournament.command(name="end", description="End the active tournament (Owner only)")
    @app_commands.check(is_bot_owner)
    async def end(self, interaction: discord.Interaction):
        await interaction.response.defer()

        try:
            ended = await self.manager.end_tournament()
            if ended is None:
                await interaction.followup.send(embed=ErrorEmbeds.no_tournament())
                return
            standings = await self.manager.tournament_standings(ended.name)
        except Exception as e:
            await self._send_error(interaction, e, "end the tournament")
            return

        embed = build_tournament_embed(ended, None, standings)
        embed.title = f"{UIConstants.TROPHY_EMOJI} Final Results: {ended.name}"
        await interaction.followup.send(embed=embed)

    @tournament.command(name="status", description="Show the active tournament's progress")
    async def status(self, interaction: discord.Interaction):
        await interaction.response.defer()

        try:
            current = await self.manager.resolve_tournament()
            status = await self.manager.tournament_status(current.name)
            standings = await self.manager.tournament_standings(current.name)
        except Exception as e:
            await self._send_error(interaction, e, "load the tournament status")
            return

        await interaction.followup.send(embed=build_tournament_embed(current, status, standings))

    @tournament.command(name="standings", description="Show standings for a tournament")
    @app_commands.describe(
        name="Tournament name (defaults to the active tournament)",
        scoring="Override the tournament's scoring type"
    )
    @app_commands.choices(scoring=TOURNAMENT_SCORING_CHOICES)
    async def standings(
        self,
        interaction: discord.Interaction,
        name: Optional[str] = None,
        scoring: Optional[app_commands.Choice[str]] = None
    ):
        await interaction.response.defer()
        mode = ScoringMode.from_option(scoring.value) if scoring else None

        try:
            target = await self.manager.resolve_tournament(name)
            standings = await self.manager.tournament_standings(target.name, mode)
        except Exception as e:
            await self._send_error(interaction, e, "load the standings")
            return

        embed = build_tournament_embed(target, None, standings)
        if mode and mode.value != target.scoring_type:
            embed.set_footer(text=f"Showing {mode.display_name} scoring")
        await interaction.followup.send(embed=embed)

    @tournament.command(name="list", description="List all tournaments")
    async def list_tournaments(self, interaction: discord.Interaction):
        await interaction.response.defer()

        try:
            tournaments = await self.manager.all_tournaments()
        except Exception as e:
            await self._send_error(interaction, e, "list tournaments")
            return

        if not tournaments:
            await interaction.followup.send("No tournaments have been held yet.")
            return

        lines = []
        for t in sorted(tournaments, key=lambda t: t.start_date, reverse=True):
            state = "🟢" if t.active else "🔴"
            mode = ScoringMode.from_option(t.scoring_type)
            lines.append(
                f"{state} **{t.name}**: {t.start_date} to {t.end_date} "
                f"({mode.display_name}, {len(t.participants)} players)"
            )

        embed = discord.Embed(title=f"{UIConstants.TROPHY_EMOJI} Tournaments", color=UIConstants.DEFAULT_EMBED_COLOR)
        for index, chunk in enumerate(chunk_lines(lines)):
            embed.add_field(name="Tournaments" if index == 0 else "Tournaments (cont.)", value=chunk, inline=False)
        await interaction.followup.send(embed=embed)


async def setup(bot):
    await bot.add_cog(TournamentCog(bot))
