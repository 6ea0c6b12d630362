"""
Leaderboard service for daily and multi-day Coffee Golf standings.

Reads attempts from the ScoreStore, applies a scoring mode per player and
day, then sorts and labels ranks. Daily boards are cached through the
store's derived cache so they are dropped as soon as a new score is saved.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from datetime import datetime

from coffee_golf_bot.config import Config
from coffee_golf_bot.constants import ScoringConstants, UIConstants
from coffee_golf_bot.data_models.leaderboard import (
    DailyEntry, LeaderboardReport, LeaderboardSection, RangeEntry
)
from coffee_golf_bot.data_models.scores import Attempt, ScoreDocument
from coffee_golf_bot.services.score_store import ScoreStore
from coffee_golf_bot.utils.dates import date_range, parse_date, shift_date, today_string
from coffee_golf_bot.utils.ranking import assign_rank_labels
from coffee_golf_bot.utils.score_exceptions import ScoreValidationError
from coffee_golf_bot.utils.scoring import ScoringMode, effective_score, parse_mode_option

logger = logging.getLogger(__name__)

SCOPE_TODAY = 'today'
SCOPE_RECENT = 'recent'

AttemptsByPlayer = Mapping[str, List[Attempt]]


def rank_daily(
    attempts_by_player: AttemptsByPlayer,
    mode: ScoringMode,
    cap: Optional[int] = None,
    names: Optional[Mapping[str, str]] = None
) -> List[DailyEntry]:
    """Rank one day's effective scores, lowest strokes first."""
    names = names or {}
    scored = []
    for player_id, attempts in attempts_by_player.items():
        effective = effective_score(attempts, mode, cap)
        if effective is None:
            continue
        scored.append((player_id, effective))

    # Earlier submission is listed first among equal scores
    scored.sort(key=lambda item: (item[1].strokes, item[1].attempt.timestamp))
    labels = assign_rank_labels(scored, key=lambda item: item[1].strokes)

    return [
        DailyEntry(
            rank=rank,
            rank_label=label,
            player_id=player_id,
            player_name=names.get(player_id) or effective.attempt.player_name,
            strokes=effective.strokes,
            attempt_index=effective.attempt_index,
            route=effective.route,
        )
        for (player_id, effective), (rank, label) in zip(scored, labels)
    ]


def rank_range(
    days: Iterable[AttemptsByPlayer],
    mode: ScoringMode,
    cap: Optional[int] = None,
    names: Optional[Mapping[str, str]] = None
) -> List[RangeEntry]:
    """
    Rank cumulative results over several days.

    Each player's effective score is taken per day (days they skipped are
    ignored), then players are ordered by average strokes per round. Equal
    averages go to the player with more rounds.
    """
    names = names or {}
    totals: Dict[str, List[int]] = {}  # player_id -> [total_strokes, rounds]
    latest_names: Dict[str, Tuple[int, str]] = {}

    for attempts_by_player in days:
        for player_id, attempts in attempts_by_player.items():
            effective = effective_score(attempts, mode, cap)
            if effective is None:
                continue
            total = totals.setdefault(player_id, [0, 0])
            total[0] += effective.strokes
            total[1] += 1
            seen = latest_names.get(player_id)
            if seen is None or effective.attempt.timestamp > seen[0]:
                latest_names[player_id] = (effective.attempt.timestamp, effective.attempt.player_name)

    rows = []
    for player_id, (total_strokes, rounds) in totals.items():
        name = names.get(player_id) or latest_names[player_id][1]
        rows.append((player_id, name, total_strokes, rounds, total_strokes / rounds))

    rows.sort(key=lambda row: (round(row[4], 4), -row[3], row[1].lower()))
    labels = assign_rank_labels(rows, key=lambda row: (row[4], -row[3]))

    return [
        RangeEntry(
            rank=rank,
            rank_label=label,
            player_id=player_id,
            player_name=name,
            total_strokes=total_strokes,
            rounds=rounds,
            average=average,
        )
        for (player_id, name, total_strokes, rounds, average), (rank, label) in zip(rows, labels)
    ]


def recent_range(days: int, now: Optional[datetime] = None) -> Tuple[str, str]:
    """Date range covering today and the ``days - 1`` days before it."""
    days = max(ScoringConstants.MIN_RECENT_DAYS, min(ScoringConstants.MAX_RECENT_DAYS, days))
    end = today_string(now)
    return shift_date(end, -(days - 1)), end


class LeaderboardService:
    """Builds ranked standings from the score store."""

    def __init__(self, store: ScoreStore, daily_cap: Optional[int] = None):
        self.store = store
        self.daily_cap = daily_cap if daily_cap is not None else Config.MAX_DAILY_ATTEMPTS

    @staticmethod
    def _player_names(document: ScoreDocument) -> Dict[str, str]:
        return {player_id: stats.name for player_id, stats in document.players.items()}

    async def daily_leaderboard(self, date: str, mode: ScoringMode) -> List[DailyEntry]:
        """Ranked effective scores for a single day."""
        cache_key = f"daily:{date}:{mode.value}"
        cached = self.store.get_derived(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {cache_key}")
            return cached

        generation = self.store.generation
        document = await self.store.load()
        entries = rank_daily(
            document.attempts_for(date), mode, self.daily_cap, self._player_names(document)
        )
        self.store.set_derived(cache_key, entries, generation)
        return entries

    async def range_leaderboard(self, start_date: str, end_date: str, mode: ScoringMode) -> List[RangeEntry]:
        """Cumulative standings for every date from start to end inclusive."""
        if parse_date(start_date) > parse_date(end_date):
            raise ScoreValidationError(f"Start date {start_date} is after end date {end_date}")

        cache_key = f"range:{start_date}:{end_date}:{mode.value}"
        cached = self.store.get_derived(cache_key)
        if cached is not None:
            return cached

        generation = self.store.generation
        document = await self.store.load()
        days = [document.attempts_for(date) for date in date_range(start_date, end_date)]
        entries = rank_range(days, mode, self.daily_cap, self._player_names(document))
        self.store.set_derived(cache_key, entries, generation)
        return entries

    async def all_modes_daily(self, date: str) -> Dict[ScoringMode, List[DailyEntry]]:
        """Daily standings for every mode, leaving out modes with no scores."""
        boards = {}
        for mode in ScoringMode:
            entries = await self.daily_leaderboard(date, mode)
            if entries:
                boards[mode] = entries
        return boards

    async def all_modes_range(self, start_date: str, end_date: str) -> Dict[ScoringMode, List[RangeEntry]]:
        boards = {}
        for mode in ScoringMode:
            entries = await self.range_leaderboard(start_date, end_date, mode)
            if entries:
                boards[mode] = entries
        return boards

    async def build_board(
        self,
        scope: str = SCOPE_TODAY,
        days: Optional[int] = None,
        mode_option: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> LeaderboardReport:
        """
        Answer a leaderboard query from a slash command or HTTP request.

        Args:
            scope: "today" or "recent"
            days: Window size for "recent" (1-30, default 7)
            mode_option: "first", "best", "unlimited" or "all"
            now: Reference time, defaults to the current time

        Returns:
            LeaderboardReport with one section per mode that has scores
        """
        scope = (scope or SCOPE_TODAY).strip().lower()
        modes = parse_mode_option(mode_option)

        if scope == SCOPE_TODAY:
            start_date = end_date = today_string(now)
            title = f"{UIConstants.TITLE_EMOJI} Coffee Golf Leaderboard - Today ({end_date})"
        elif scope == SCOPE_RECENT:
            if days is None:
                days = ScoringConstants.DEFAULT_RECENT_DAYS
            if not ScoringConstants.MIN_RECENT_DAYS <= days <= ScoringConstants.MAX_RECENT_DAYS:
                raise ScoreValidationError(
                    f"Days must be between {ScoringConstants.MIN_RECENT_DAYS} and {ScoringConstants.MAX_RECENT_DAYS}"
                )
            start_date, end_date = recent_range(days, now)
            title = f"{UIConstants.TITLE_EMOJI} Coffee Golf Leaderboard - Last {days} Days"
        else:
            raise ScoreValidationError(f"Unknown leaderboard scope '{scope}'. Use 'today' or 'recent'.")

        report = LeaderboardReport(
            title=title,
            scope=scope,
            start_date=start_date,
            end_date=end_date,
            requested_modes=[mode.value for mode in modes],
        )

        for mode in modes:
            if scope == SCOPE_TODAY:
                entries = await self.daily_leaderboard(start_date, mode)
            else:
                entries = await self.range_leaderboard(start_date, end_date, mode)
            if entries:
                report.sections.append(LeaderboardSection(mode=mode.value, title=mode.display_name, entries=entries))

        logger.info(
            f"Built {scope} leaderboard {start_date}..{end_date} for modes "
            f"{report.requested_modes}: {len(report.sections)} non-empty section(s)"
        )
        return report
