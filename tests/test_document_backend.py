"""Tests for the SQL and Redis document backends."""

import pytest

from coffee_golf_bot.database.database import Database
from coffee_golf_bot.database.document_backend import RedisDocumentBackend, SqlDocumentBackend
from coffee_golf_bot.services.score_store import ScoreStore

from conftest import TODAY, make_attempt


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'scores.db'}")
    await db.initialize()
    yield db
    await db.close()


class FakeRedis:
    def __init__(self):
        self.values = {}
        self.closed = False

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value):
        self.values[key] = value

    async def aclose(self):
        self.closed = True


class TestSqlDocumentBackend:
    async def test_missing_document_loads_as_none(self, database):
        backend = SqlDocumentBackend(database, key="scores")

        assert await backend.load() is None

    async def test_save_then_load(self, database):
        backend = SqlDocumentBackend(database, key="scores")
        document = {"players": {}, "dailyScores": {TODAY: {}}, "tournaments": [], "currentTournament": "Cup"}

        await backend.save(document)

        assert await backend.load() == document

    async def test_save_replaces_existing_row(self, database):
        backend = SqlDocumentBackend(database, key="scores")

        await backend.save({"version": 1})
        await backend.save({"version": 2, "route": "🟦🟥"})

        assert await backend.load() == {"version": 2, "route": "🟦🟥"}

    async def test_keys_are_independent(self, database):
        first = SqlDocumentBackend(database, key="a")
        second = SqlDocumentBackend(database, key="b")

        await first.save({"name": "a"})

        assert await second.load() is None

    async def test_store_round_trip_through_sql(self, database):
        store = ScoreStore(SqlDocumentBackend(database, key="scores"))
        await store.record_attempt(make_attempt("p1", 9, route="🟨🟩"))

        reopened = ScoreStore(SqlDocumentBackend(database, key="scores"))
        attempts = await reopened.attempts_for(TODAY)

        assert attempts["p1"][0].strokes == 9
        assert attempts["p1"][0].route == "🟨🟩"


class TestRedisDocumentBackend:
    async def test_save_then_load(self):
        client = FakeRedis()
        backend = RedisDocumentBackend(client, "coffee-golf:scores")

        assert await backend.load() is None
        await backend.save({"players": {}, "dailyScores": {}, "tournaments": []})

        assert await backend.load() == {"players": {}, "dailyScores": {}, "tournaments": []}
        assert "coffee-golf:scores" in client.values

    async def test_close(self):
        client = FakeRedis()

        await RedisDocumentBackend(client, "key").close()

        assert client.closed is True
