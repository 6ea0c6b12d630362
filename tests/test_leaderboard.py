"""Tests for daily and range leaderboards."""

import pytest

from coffee_golf_bot.services.leaderboard import rank_daily, rank_range, recent_range
from coffee_golf_bot.utils.score_exceptions import ScoreValidationError
from coffee_golf_bot.utils.scoring import ScoringMode

from conftest import NOW, TODAY, make_attempt

YESTERDAY = "2025-04-04"


class TestRankDaily:
    def test_ties_share_rank(self):
        day = {
            "a": [make_attempt("a", 5, minute=0)],
            "b": [make_attempt("b", 5, minute=1)],
            "c": [make_attempt("c", 7, minute=2)],
        }

        entries = rank_daily(day, ScoringMode.FIRST, cap=3)

        assert [e.rank_label for e in entries] == ["T-1", "T-1", "3."]
        assert [e.player_id for e in entries] == ["a", "b", "c"]

    def test_earlier_submission_listed_first_among_ties(self):
        day = {
            "late": [make_attempt("late", 5, minute=9)],
            "early": [make_attempt("early", 5, minute=1)],
        }

        entries = rank_daily(day, ScoringMode.FIRST, cap=3)

        assert [e.player_id for e in entries] == ["early", "late"]

    def test_mode_changes_order(self):
        day = {
            "a": [make_attempt("a", 6, minute=0), make_attempt("a", 2, minute=1)],
            "b": [make_attempt("b", 4, minute=2)],
        }

        first = rank_daily(day, ScoringMode.FIRST, cap=3)
        best = rank_daily(day, ScoringMode.BEST, cap=3)

        assert [e.player_id for e in first] == ["b", "a"]
        assert [e.player_id for e in best] == ["a", "b"]
        assert best[0].attempt_index == 2

    def test_names_override_attempt_names(self):
        day = {"a": [make_attempt("a", 5, name="Old")]}

        entries = rank_daily(day, ScoringMode.FIRST, cap=3, names={"a": "New"})

        assert entries[0].player_name == "New"

    def test_empty_day(self):
        assert rank_daily({}, ScoringMode.FIRST, cap=3) == []


class TestRankRange:
    def test_more_rounds_wins_equal_average(self):
        days = [
            {"x": [make_attempt("x", 5, date=YESTERDAY)]},
            {
                "x": [make_attempt("x", 7)],
                "y": [make_attempt("y", 6)],
            },
        ]

        entries = rank_range(days, ScoringMode.FIRST, cap=3)

        assert [e.player_id for e in entries] == ["x", "y"]
        assert [e.rank_label for e in entries] == ["🥇", "🥈"]
        assert entries[0].rounds == 2
        assert entries[0].total_strokes == 12
        assert entries[0].average == pytest.approx(6.0)

    def test_equal_average_and_rounds_tie(self):
        days = [{
            "x": [make_attempt("x", 6)],
            "y": [make_attempt("y", 6, minute=1)],
        }]

        entries = rank_range(days, ScoringMode.FIRST, cap=3)

        assert [e.rank_label for e in entries] == ["T-1", "T-1"]

    def test_skipped_days_are_ignored(self):
        days = [
            {"x": [make_attempt("x", 4, date=YESTERDAY)]},
            {},
        ]

        entries = rank_range(days, ScoringMode.FIRST, cap=3)

        assert entries[0].rounds == 1
        assert entries[0].average == pytest.approx(4.0)


class TestRecentRange:
    def test_window_includes_today(self):
        assert recent_range(7, NOW) == ("2025-03-30", TODAY)

    def test_single_day(self):
        assert recent_range(1, NOW) == (TODAY, TODAY)


class TestLeaderboardService:
    async def test_daily_reflects_new_attempt_immediately(self, store, leaderboard_service):
        await store.record_attempt(make_attempt("a", 6))
        assert len(await leaderboard_service.daily_leaderboard(TODAY, ScoringMode.FIRST)) == 1

        await store.record_attempt(make_attempt("b", 4, minute=1))
        entries = await leaderboard_service.daily_leaderboard(TODAY, ScoringMode.FIRST)

        assert [e.player_id for e in entries] == ["b", "a"]

    async def test_daily_board_is_cached(self, store, backend, leaderboard_service):
        await store.record_attempt(make_attempt("a", 6))
        await leaderboard_service.daily_leaderboard(TODAY, ScoringMode.FIRST)
        loads = backend.loads

        await leaderboard_service.daily_leaderboard(TODAY, ScoringMode.FIRST)

        assert backend.loads == loads

    async def test_best_mode_uses_service_cap(self, store, leaderboard_service):
        for minute, strokes in enumerate([5, 6, 7, 1]):
            await store.record_attempt(make_attempt("a", strokes, minute=minute))

        best = await leaderboard_service.daily_leaderboard(TODAY, ScoringMode.BEST)
        unlimited = await leaderboard_service.daily_leaderboard(TODAY, ScoringMode.UNLIMITED)

        assert best[0].strokes == 5
        assert unlimited[0].strokes == 1

    async def test_range_rejects_reversed_dates(self, leaderboard_service):
        with pytest.raises(ScoreValidationError):
            await leaderboard_service.range_leaderboard(TODAY, YESTERDAY, ScoringMode.FIRST)

    async def test_range_reflects_new_attempt(self, store, leaderboard_service):
        await store.record_attempt(make_attempt("a", 6, date=YESTERDAY))
        before = await leaderboard_service.range_leaderboard(YESTERDAY, TODAY, ScoringMode.FIRST)

        await store.record_attempt(make_attempt("a", 4))
        after = await leaderboard_service.range_leaderboard(YESTERDAY, TODAY, ScoringMode.FIRST)

        assert before[0].rounds == 1
        assert after[0].rounds == 2
        assert after[0].total_strokes == 10

    async def test_all_modes_daily(self, store, leaderboard_service):
        await store.record_attempt(make_attempt("a", 6))

        boards = await leaderboard_service.all_modes_daily(TODAY)

        assert set(boards) == set(ScoringMode)


class TestBuildBoard:
    async def test_today_board(self, store, leaderboard_service):
        await store.record_attempt(make_attempt("a", 6))

        report = await leaderboard_service.build_board("today", mode_option="first", now=NOW)

        assert report.title == "☕⛳ Coffee Golf Leaderboard - Today (2025-04-05)"
        assert report.start_date == report.end_date == TODAY
        assert not report.is_multi_mode
        assert [s.mode for s in report.sections] == ["first"]

    async def test_recent_board(self, store, leaderboard_service):
        await store.record_attempt(make_attempt("a", 6, date=YESTERDAY))
        await store.record_attempt(make_attempt("a", 4, minute=1))

        report = await leaderboard_service.build_board("recent", days=3, now=NOW)

        assert report.title == "☕⛳ Coffee Golf Leaderboard - Last 3 Days"
        assert report.start_date == "2025-04-03"
        assert report.sections[0].entries[0].rounds == 2

    async def test_all_modes(self, store, leaderboard_service):
        await store.record_attempt(make_attempt("a", 6))

        report = await leaderboard_service.build_board("today", mode_option="all", now=NOW)

        assert report.is_multi_mode
        assert [s.mode for s in report.sections] == ["first", "best", "unlimited"]
        assert report.to_dict()["requestedModes"] == ["first", "best", "unlimited"]

    async def test_empty_board(self, leaderboard_service):
        report = await leaderboard_service.build_board("today", mode_option="all", now=NOW)

        assert report.empty
        assert report.sections == []

    @pytest.mark.parametrize("days", [0, 31])
    async def test_days_out_of_range(self, leaderboard_service, days):
        with pytest.raises(ScoreValidationError):
            await leaderboard_service.build_board("recent", days=days, now=NOW)

    async def test_unknown_scope(self, leaderboard_service):
        with pytest.raises(ScoreValidationError):
            await leaderboard_service.build_board("weekly", now=NOW)
