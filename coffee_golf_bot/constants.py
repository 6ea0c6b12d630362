"""
Bot-wide constants for the Coffee Golf Discord Bot.

This module contains the magic numbers and display values used throughout
the codebase to improve maintainability and clarity.
"""

class ScoringConstants:
    """Constants related to score parsing and ranking."""

    # Valid stroke range accepted from a message (one or two digits)
    MIN_STROKES = 1
    MAX_STROKES = 99

    # Tolerance when comparing averages for tie detection
    AVERAGE_TOLERANCE = 1e-4

    # Recent leaderboard window bounds (days)
    DEFAULT_RECENT_DAYS = 7
    MIN_RECENT_DAYS = 1
    MAX_RECENT_DAYS = 30

class CacheConstants:
    """Constants for caching behavior."""

    # Default TTL for the cached score document (seconds)
    DEFAULT_CACHE_TTL = 300  # 5 minutes

    # Maximum number of per-date derived entries kept
    DEFAULT_MAX_CACHE_SIZE = 500

class UIConstants:
    """Constants for Discord UI elements."""

    # Embed colors
    DEFAULT_EMBED_COLOR = 0x0099ff  # Blue
    FIRST_MODE_COLOR = 0x3498db     # Blue
    BEST_MODE_COLOR = 0x2ecc71      # Green
    UNLIMITED_MODE_COLOR = 0x9b59b6 # Purple
    ERROR_COLOR = 0xe74c3c          # Red for errors
    SUCCESS_COLOR = 0x2ecc71        # Green for success

    # Emoji for UI elements
    TITLE_EMOJI = "☕⛳"
    RECORDED_EMOJI = "✅"
    REJECTED_EMOJI = "❌"
    TROPHY_EMOJI = "🏆"
    MEDALS = ("🥇", "🥈", "🥉")
    ATTEMPT_EMOJIS = ("1️⃣", "2️⃣", "3️⃣", "4️⃣", "5️⃣", "6️⃣", "7️⃣", "8️⃣", "9️⃣", "🔟")

    # Discord limits
    MAX_FIELD_LENGTH = 1024
    MAX_EMBEDS_PER_MESSAGE = 10
