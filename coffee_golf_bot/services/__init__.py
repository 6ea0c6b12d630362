"""
Services package for the Coffee Golf bot.

Score storage, leaderboard building, tournaments and rate limiting.
"""

from .score_store import ScoreStore
from .leaderboard import LeaderboardService
from .tournament_manager import TournamentManager
from .rate_limiter import SimpleRateLimiter

__all__ = ['ScoreStore', 'LeaderboardService', 'TournamentManager', 'SimpleRateLimiter']
