import discord
from discord import app_commands
from discord.ext import commands
from typing import Optional

from coffee_golf_bot.services.rate_limiter import rate_limit
from coffee_golf_bot.utils.embeds import build_stats_embed
from coffee_golf_bot.utils.error_embeds import ErrorEmbeds
from coffee_golf_bot.utils.logger import setup_logger

logger = setup_logger(__name__)


class PlayerCog(commands.Cog):
    """Player statistics commands"""

    def __init__(self, bot):
        self.bot = bot
        self.store = bot.score_store

    @app_commands.command(name="stats", description="View Coffee Golf stats for yourself or another player")
    @app_commands.describe(member="Player to look up (defaults to you)")
    @rate_limit("stats", limit=5, window=60)
    async def stats(self, interaction: discord.Interaction, member: Optional[discord.Member] = None):
        target = member or interaction.user
        await interaction.response.defer()

        try:
            player = await self.store.player_stats(str(target.id))
        except Exception as e:
            logger.error(f"Error loading stats for {target}: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("There was an error loading player stats."))
            return

        if player is None or player.total_games == 0:
            await interaction.followup.send(embed=ErrorEmbeds.player_not_found(target))
            return

        await interaction.followup.send(embed=build_stats_embed(player, target))


async def setup(bot):
    await bot.add_cog(PlayerCog(bot))
