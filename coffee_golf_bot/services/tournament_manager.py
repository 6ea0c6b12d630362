"""
Tournament management on top of the score document.

A tournament is a named date range scored under one mode. Only one can be
active at a time; players join implicitly by submitting a score inside
the range (see ScoreStore.record_attempt). Ended tournaments are kept.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from coffee_golf_bot.data_models.leaderboard import RangeEntry
from coffee_golf_bot.data_models.scores import Tournament
from coffee_golf_bot.services.leaderboard import LeaderboardService
from coffee_golf_bot.services.score_store import ScoreStore
from coffee_golf_bot.utils.dates import local_today, parse_date, shift_date, today_string
from coffee_golf_bot.utils.score_exceptions import (
    NoActiveTournamentError, ScoreValidationError,
    TournamentAlreadyActiveError, TournamentNotFoundError
)
from coffee_golf_bot.utils.scoring import ScoringMode

logger = logging.getLogger(__name__)

MAX_TOURNAMENT_DAYS = 365


@dataclass(frozen=True)
class TournamentStatus:
    days_elapsed: int
    days_remaining: int
    total_days: int
    is_active: bool
    scoring_type: str


class TournamentManager:
    """Create, end and report on tournaments."""

    def __init__(self, store: ScoreStore, leaderboard_service: LeaderboardService):
        self.store = store
        self.leaderboard_service = leaderboard_service

    async def create_tournament(
        self,
        name: str,
        duration_days: int,
        mode: ScoringMode,
        now: Optional[datetime] = None
    ) -> Tournament:
        """Start a tournament today, running ``duration_days`` past the start date."""
        name = (name or '').strip()
        if not name:
            raise ScoreValidationError("Tournament name cannot be empty")
        if not 1 <= duration_days <= MAX_TOURNAMENT_DAYS:
            raise ScoreValidationError(f"Duration must be between 1 and {MAX_TOURNAMENT_DAYS} days")

        start_date = today_string(now)
        async with self.store.transaction() as document:
            if document.current_tournament:
                raise TournamentAlreadyActiveError(document.current_tournament)
            if document.find_tournament(name):
                raise ScoreValidationError(f"A tournament named '{name}' already exists")

            tournament = Tournament(
                name=name,
                start_date=start_date,
                end_date=shift_date(start_date, duration_days),
                scoring_type=mode.value,
            )
            document.tournaments.append(tournament)
            document.current_tournament = name

        logger.info(f"Created tournament '{name}' {tournament.start_date}..{tournament.end_date} ({mode.value})")
        return tournament

    async def end_tournament(self) -> Optional[Tournament]:
        """End the active tournament. Returns None if nothing was active."""
        async with self.store.transaction() as document:
            if not document.current_tournament:
                return None
            tournament = document.find_tournament(document.current_tournament)
            document.current_tournament = None
            if tournament is None:
                logger.warning("Current tournament pointer referenced a missing tournament; cleared it")
                return None
            tournament.active = False

        logger.info(f"Ended tournament '{tournament.name}'")
        return tournament

    async def current_tournament(self) -> Optional[Tournament]:
        document = await self.store.load()
        if not document.current_tournament:
            return None
        return document.find_tournament(document.current_tournament)

    async def get_tournament(self, name: str) -> Optional[Tournament]:
        document = await self.store.load()
        return document.find_tournament(name)

    async def all_tournaments(self) -> List[Tournament]:
        document = await self.store.load()
        return list(document.tournaments)

    async def resolve_tournament(self, name: Optional[str] = None) -> Tournament:
        """The named tournament, or the active one when no name is given."""
        if name:
            tournament = await self.get_tournament(name)
            if tournament is None:
                raise TournamentNotFoundError(name)
            return tournament
        tournament = await self.current_tournament()
        if tournament is None:
            raise NoActiveTournamentError()
        return tournament

    async def tournament_standings(
        self,
        name: Optional[str] = None,
        mode: Optional[ScoringMode] = None
    ) -> List[RangeEntry]:
        """Cumulative standings over the tournament's dates (default: the active one)."""
        tournament = await self.resolve_tournament(name)
        scoring_mode = mode or ScoringMode.from_option(tournament.scoring_type)
        return await self.leaderboard_service.range_leaderboard(
            tournament.start_date, tournament.end_date, scoring_mode
        )

    async def tournament_status(self, name: Optional[str] = None, now: Optional[datetime] = None) -> TournamentStatus:
        tournament = await self.resolve_tournament(name)
        start = parse_date(tournament.start_date)
        end = parse_date(tournament.end_date)
        today = local_today(now)

        return TournamentStatus(
            days_elapsed=max(0, (today - start).days),
            days_remaining=max(0, (end - today).days),
            total_days=(end - start).days,
            is_active=tournament.active,
            scoring_type=tournament.scoring_type,
        )
