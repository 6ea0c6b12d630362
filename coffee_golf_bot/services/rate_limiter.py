"""
Rate limiting for slash commands.

In-memory sliding windows keyed by user and command name.
"""

import time
import asyncio
from functools import wraps
from collections import defaultdict, deque
import logging

from coffee_golf_bot.config import Config

logger = logging.getLogger(__name__)

class SimpleRateLimiter:
    """In-memory sliding-window rate limiter for Discord commands."""

    def __init__(self, clock=time.monotonic):
        self._requests = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._clock = clock

    async def is_allowed(self, user_id: int, command: str, limit: int, window: int) -> bool:
        """Record a call and report whether it fits within ``limit`` calls per ``window`` seconds."""
        if limit <= 0 or window <= 0:
            return False

        key = f"{user_id}:{command}"
        now = self._clock()

        async with self._lock:
            history = self._requests[key]
            while history and history[0] <= now - window:
                history.popleft()

            if len(history) < limit:
                history.append(now)
                return True

            logger.debug(f"Rate limit hit for {key} ({limit}/{window}s)")
            return False

def rate_limit(command: str, limit: int = 1, window: int = 60):
    """Decorator for rate limiting cog slash commands; the bot owner is exempt."""
    def decorator(func):
        @wraps(func)
        async def wrapper(self, interaction, *args, **kwargs):
            if interaction.user.id != Config.OWNER_DISCORD_ID:
                allowed = await self.bot.rate_limiter.is_allowed(interaction.user.id, command, limit, window)
                if not allowed:
                    await interaction.response.send_message(
                        f"⏰ Slow down! You can use `/{command}` {limit} time(s) every {window} seconds.",
                        ephemeral=True
                    )
                    return
            return await func(self, interaction, *args, **kwargs)
        return wrapper
    return decorator
