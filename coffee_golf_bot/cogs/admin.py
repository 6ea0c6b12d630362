import discord
from discord.ext import commands

from coffee_golf_bot.config import Config
from coffee_golf_bot.utils.logger import setup_logger

logger = setup_logger(__name__)

class AdminCog(commands.Cog):
    """Owner-only commands for running the bot"""

    def __init__(self, bot):
        self.bot = bot
        self.logger = logger

    def cog_check(self, ctx):
        """Check if user is the bot owner"""
        return ctx.author.id == Config.OWNER_DISCORD_ID

    @commands.command(name='shutdown')
    async def shutdown_bot(self, ctx):
        """Shutdown the bot (Owner only)"""
        await ctx.send("🔴 Shutting down Coffee Golf Bot...")
        await self.bot.close()

    @commands.command(name='reload')
    async def reload_cog(self, ctx, cog_name: str):
        """Reload a specific cog (Owner only)"""
        try:
            await self.bot.reload_extension(f'coffee_golf_bot.cogs.{cog_name}')
            await ctx.send(f"✅ Reloaded `{cog_name}` cog successfully.")
        except commands.ExtensionError as e:
            self.logger.error(f"Failed to reload cog {cog_name}: {e}", exc_info=True)
            await ctx.send(f"❌ Failed to reload `{cog_name}`: {e}")

    @commands.command(name='storestats')
    async def store_stats(self, ctx):
        """Show score storage statistics (Owner only)"""
        try:
            document = await self.bot.score_store.load()
        except Exception as e:
            self.logger.error(f"Error getting store stats: {e}", exc_info=True)
            await ctx.send(f"❌ Error getting store stats: {e}")
            return

        attempt_total = sum(
            len(attempts)
            for day in document.daily_scores.values()
            for attempts in day.values()
        )
        embed = discord.Embed(
            title="📊 Score Storage Statistics",
            color=discord.Color.blue()
        )
        embed.add_field(name="Backend", value=Config.STORAGE_BACKEND, inline=True)
        embed.add_field(name="Players", value=len(document.players), inline=True)
        embed.add_field(name="Days", value=len(document.daily_scores), inline=True)
        embed.add_field(name="Attempts", value=attempt_total, inline=True)
        embed.add_field(name="Tournaments", value=len(document.tournaments), inline=True)
        embed.add_field(name="Active Tournament", value=document.current_tournament or "None", inline=True)
        await ctx.send(embed=embed)

    @commands.command(name='clearcache')
    async def clear_cache(self, ctx):
        """Drop cached scores and leaderboards (Owner only)"""
        self.bot.score_store.invalidate()
        self.logger.info(f"Score cache cleared by {ctx.author}")
        await ctx.send("✅ Score cache cleared.")

async def setup(bot):
    await bot.add_cog(AdminCog(bot))
