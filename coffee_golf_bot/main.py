import asyncio
import logging
import traceback
from typing import Optional

import discord
from aiohttp import web
from discord.ext import commands
from discord import app_commands

from coffee_golf_bot.config import Config
from coffee_golf_bot.database.document_backend import create_backend
from coffee_golf_bot.services import LeaderboardService, ScoreStore, SimpleRateLimiter, TournamentManager
from coffee_golf_bot.utils.error_embeds import ErrorEmbeds
from coffee_golf_bot.utils.logger import setup_logger
from coffee_golf_bot.utils.score_exceptions import StorageError
from coffee_golf_bot.web.routes import create_app, start_http_server, stop_http_server

class CoffeeGolfBot(commands.Bot):
    def __init__(self):
        # Reading score posts needs the privileged message content intent
        intents = discord.Intents.default()
        intents.message_content = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents,
            help_command=None
        )

        self.tree.on_error = self.on_app_command_error

        self.score_store: Optional[ScoreStore] = None
        self.leaderboard_service: Optional[LeaderboardService] = None
        self.tournament_manager: Optional[TournamentManager] = None
        self.rate_limiter = SimpleRateLimiter()
        self.http_runner: Optional[web.AppRunner] = None
        self.logger = setup_logger(__name__)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up Coffee Golf Bot...")

        # Storage and services
        backend = await create_backend()
        self.score_store = ScoreStore(backend, cache_ttl=Config.CACHE_TTL_SECONDS)
        self.leaderboard_service = LeaderboardService(self.score_store, daily_cap=Config.MAX_DAILY_ATTEMPTS)
        self.tournament_manager = TournamentManager(self.score_store, self.leaderboard_service)

        await self.load_cogs()
        await self._sync_commands()

        if Config.HTTP_PORT:
            app = create_app(self.score_store, self.leaderboard_service, daily_cap=Config.MAX_DAILY_ATTEMPTS)
            self.http_runner = await start_http_server(app, Config.HTTP_HOST, Config.HTTP_PORT)

        self.logger.info("Coffee Golf Bot setup complete!")

    async def load_cogs(self):
        """Load all cogs"""
        cogs_to_load = [
            'coffee_golf_bot.cogs.admin',
            'coffee_golf_bot.cogs.scores',
            'coffee_golf_bot.cogs.leaderboard',
            'coffee_golf_bot.cogs.player',
            'coffee_golf_bot.cogs.tournament',
        ]

        for cog in cogs_to_load:
            try:
                await self.load_extension(cog)
                self.logger.info(f"Loaded cog: {cog}")
            except Exception as e:
                self.logger.error(f"Failed to load cog {cog}: {e}", exc_info=True)

    async def _sync_commands(self):
        """Push slash commands to the configured guilds, or globally with none set"""
        if not self.tree.get_commands():
            self.logger.warning("No application commands registered; skipping sync. Check the cog load errors above.")
            return

        try:
            guild_ids = Config.get_guild_ids()
        except ValueError as e:
            self.logger.error(f"Cannot sync commands: {e}")
            return

        if not guild_ids:
            # Global commands can take up to an hour to show up
            try:
                synced = await self.tree.sync()
                self.logger.info(f"Synced {len(synced)} command(s) globally: {', '.join(cmd.name for cmd in synced)}")
            except discord.HTTPException as e:
                self.logger.error(f"Global command sync failed: {e}", exc_info=True)
            return

        for guild_id in guild_ids:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            try:
                synced = await self.tree.sync(guild=guild)
                self.logger.info(f"Synced {len(synced)} command(s) to guild {guild_id}")
            except discord.Forbidden:
                self.logger.error(f"Missing 'applications.commands' scope or access for guild {guild_id}")
            except discord.HTTPException as e:
                self.logger.error(f"Command sync to guild {guild_id} failed with status {e.status}: {e.text}")

    async def on_ready(self):
        self.logger.info(f'{self.user} connected to {len(self.guilds)} guild(s); watching channel {Config.SCORES_CHANNEL_ID}')
        await self.change_presence(activity=discord.Game(name="Coffee Golf ☕⛳ | /leaderboard"))

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Answer a failed slash command with exactly one error embed"""
        command_name = interaction.command.qualified_name if interaction.command else 'unknown'

        if isinstance(error, app_commands.CommandOnCooldown):
            embed = ErrorEmbeds.cooldown(error.retry_after)
        elif isinstance(error, app_commands.CheckFailure):
            self.logger.info(f"{interaction.user} was denied /{command_name}")
            embed = ErrorEmbeds.permission_denied()
        else:
            original = getattr(error, 'original', error)
            if isinstance(original, StorageError):
                self.logger.error(f"/{command_name} failed on storage: {original}")
                embed = ErrorEmbeds.storage_error()
            else:
                self.logger.error(f"Unhandled error in /{command_name}: {error}", exc_info=error)
                embed = ErrorEmbeds.command_error("An unexpected error occurred while running this command.")

        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException as e:
            self.logger.error(f"Could not deliver error for /{command_name}: {e}")

    async def on_command_error(self, ctx: commands.Context, error: Exception):
        """Prefix commands are owner tools, so keep the replies short"""
        if isinstance(error, commands.CommandNotFound):
            return
        if isinstance(error, commands.CheckFailure):
            self.logger.info(f"{ctx.author} was denied {Config.COMMAND_PREFIX}{ctx.command}")
            await ctx.send(embed=ErrorEmbeds.permission_denied())
            return
        if isinstance(error, commands.UserInputError):
            await ctx.send(embed=ErrorEmbeds.invalid_input(str(error)))
            return

        self.logger.error(
            f"Unhandled error in {Config.COMMAND_PREFIX}{ctx.command}: "
            + ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        )
        await ctx.send(embed=ErrorEmbeds.command_error("An unexpected error occurred while running this command."))

    async def close(self):
        """Cleanup when bot is shutting down"""
        self.logger.info("Shutting down Coffee Golf Bot...")

        await stop_http_server(self.http_runner)
        self.http_runner = None

        if self.score_store:
            await self.score_store.close()
            self.score_store = None

        await super().close()

async def main():
    """Main entry point"""
    Config.validate()

    bot = CoffeeGolfBot()

    try:
        await bot.start(Config.DISCORD_TOKEN)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        traceback.print_exc()
    finally:
        await bot.close()

def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass

if __name__ == "__main__":
    run()
