"""
Error embeds shared by the cogs and the global command error handler.
"""

import discord

from coffee_golf_bot.constants import UIConstants


def _embed(title: str, description: str, color: int = UIConstants.ERROR_COLOR) -> discord.Embed:
    return discord.Embed(title=title, description=description, color=color)


class ErrorEmbeds:
    """Factory for the embeds sent when a command can't complete."""

    @staticmethod
    def command_error(error: str) -> discord.Embed:
        return _embed("❌ Something Went Wrong", f"{error}\nPlease try again in a moment.")

    @staticmethod
    def invalid_input(message: str) -> discord.Embed:
        return _embed("❌ Invalid Input", message)

    @staticmethod
    def storage_error() -> discord.Embed:
        return _embed("❌ Storage Error", "Scores could not be saved or loaded. Please try again later.")

    @staticmethod
    def permission_denied() -> discord.Embed:
        embed = _embed("❌ Permission Denied", "This command is restricted to the bot owner.")
        embed.set_footer(text="Contact the bot owner if you believe you should have access.")
        return embed

    @staticmethod
    def cooldown(retry_after: float) -> discord.Embed:
        return _embed("⏰ Slow Down", f"Try again in {retry_after:.1f} seconds.")

    @staticmethod
    def player_not_found(member: discord.abc.User = None) -> discord.Embed:
        """A player who has never posted a score."""
        who = member.mention if member else "This player"
        return _embed(
            "No Scores Yet",
            f"{who} hasn't posted any Coffee Golf scores yet!",
            discord.Color.orange()
        )

    @staticmethod
    def no_tournament() -> discord.Embed:
        return _embed(
            "No Active Tournament",
            "There is no active tournament right now. The bot owner can start one with `/tournament start`.",
            discord.Color.orange()
        )
