import os

# Pin settings before coffee_golf_bot.config reads the environment
os.environ['LOG_DIR'] = ''
os.environ['TIMEZONE'] = 'America/New_York'
os.environ['MAX_DAILY_ATTEMPTS'] = '3'
os.environ['CACHE_TTL_SECONDS'] = '300'

import copy
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from coffee_golf_bot.data_models.scores import Attempt
from coffee_golf_bot.database.document_backend import DocumentBackend
from coffee_golf_bot.services.leaderboard import LeaderboardService
from coffee_golf_bot.services.score_store import ScoreStore
from coffee_golf_bot.services.tournament_manager import TournamentManager
from coffee_golf_bot.utils.dates import to_epoch_millis

# 2025-04-05 12:00 in New York
NOW = datetime(2025, 4, 5, 16, 0, tzinfo=timezone.utc)
TODAY = '2025-04-05'


class InMemoryBackend(DocumentBackend):
    """Document backend that keeps a deep copy of the last saved document."""

    def __init__(self, data: Optional[dict] = None):
        self.data = copy.deepcopy(data)
        self.loads = 0
        self.saves = 0
        self.fail_loads = False
        self.fail_saves = False
        self.closed = False

    async def load(self):
        self.loads += 1
        if self.fail_loads:
            raise ConnectionError("storage unavailable")
        return copy.deepcopy(self.data)

    async def save(self, document):
        if self.fail_saves:
            raise ConnectionError("storage unavailable")
        self.saves += 1
        self.data = copy.deepcopy(document)

    async def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_attempt(
    player_id: str,
    strokes: int,
    date: str = TODAY,
    minute: int = 0,
    name: Optional[str] = None,
    message_id: Optional[str] = None,
    route: Optional[str] = None,
) -> Attempt:
    """Build an attempt sent ``minute`` minutes after NOW."""
    timestamp = to_epoch_millis(NOW + timedelta(minutes=minute))
    return Attempt(
        player_id=player_id,
        player_name=name or f"Player {player_id}",
        date=date,
        strokes=strokes,
        message_id=message_id or f"{player_id}-{date}-{minute}",
        timestamp=timestamp,
        route=route,
    )


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(backend, clock):
    return ScoreStore(backend, cache_ttl=300, clock=clock)


@pytest.fixture
def leaderboard_service(store):
    return LeaderboardService(store, daily_cap=3)


@pytest.fixture
def tournament_manager(store, leaderboard_service):
    return TournamentManager(store, leaderboard_service)
