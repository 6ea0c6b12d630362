"""Tests for parsing Coffee Golf share messages."""

from datetime import date, datetime, timezone

import pytest

from coffee_golf_bot.utils.dates import parse_date, format_date
from coffee_golf_bot.utils.score_parser import extract_route, parse_score_message, resolve_score_date

from conftest import NOW

SHARE_TEXT = "Coffee Golf - Apr 5\n13 Strokes - Top 12%\n🟨🟩🟥🟪🟦"


def parse(content, now=NOW):
    return parse_score_message(
        content,
        player_id="42",
        player_name="Alice",
        message_id="1001",
        created_at=now,
        now=now,
    )


class TestParseScoreMessage:
    def test_parses_share_text(self):
        attempt = parse(SHARE_TEXT)

        assert attempt is not None
        assert attempt.date == "2025-04-05"
        assert attempt.strokes == 13
        assert attempt.player_id == "42"
        assert attempt.player_name == "Alice"
        assert attempt.message_id == "1001"
        assert attempt.route == "🟨🟩🟥🟪🟦"

    def test_timestamp_is_message_creation_in_millis(self):
        attempt = parse(SHARE_TEXT)

        assert attempt.timestamp == int(NOW.timestamp() * 1000)

    @pytest.mark.parametrize("content, expected_date, expected_strokes", [
        ("Coffee Golf - April 5\n9 strokes", "2025-04-05", 9),
        ("coffee golf - apr. 4\n1 stroke - Top 1%", "2025-04-04", 1),
        ("Coffee Golf - MAR 30\n21 STROKES", "2025-03-30", 21),
        ("Coffee Golf - Sept 14\n10 Strokes", "2024-09-14", 10),
        ("Coffee Golf - Apr 5th\n12 Strokes", "2025-04-05", 12),
    ])
    def test_template_variants(self, content, expected_date, expected_strokes):
        attempt = parse(content)

        assert attempt is not None
        assert attempt.date == expected_date
        assert format_date(parse_date(attempt.date)) == attempt.date
        assert attempt.strokes == expected_strokes

    @pytest.mark.parametrize("content", [
        "",
        "good morning everyone",
        "13 Strokes - Top 12%",
        "Coffee Golf - Apr 5",
        "13 strokes on Apr 5",
        "Coffee Golf - Apr 5\n0 Strokes",
        "Coffee Golf - Apr 5\n130 Strokes",
        "Coffee Golf - Foo 5\n13 Strokes",
        "Coffee Golf - Feb 30\n13 Strokes",
    ])
    def test_non_scores_return_none(self, content):
        assert parse(content) is None

    def test_missing_route_is_none(self):
        attempt = parse("Coffee Golf - Apr 5\n13 Strokes - Top 12%")

        assert attempt is not None
        assert attempt.route is None

    def test_date_comes_from_message_not_send_time(self):
        attempt = parse("Coffee Golf - Apr 3\n15 Strokes", now=NOW)

        assert attempt.date == "2025-04-03"

    def test_december_round_posted_in_january_uses_previous_year(self):
        new_year = datetime(2025, 1, 1, 15, 0, tzinfo=timezone.utc)

        attempt = parse("Coffee Golf - Dec 31\n11 Strokes", now=new_year)

        assert attempt.date == "2024-12-31"

    def test_send_time_is_interpreted_in_new_york(self):
        # 02:00 UTC on Apr 6 is still Apr 5 in New York, so Apr 6 is "tomorrow"
        late_evening = datetime(2025, 4, 6, 2, 0, tzinfo=timezone.utc)

        attempt = parse("Coffee Golf - Apr 6\n11 Strokes", now=late_evening)

        assert attempt.date == "2025-04-06"

    def test_year_is_resolved_against_current_time(self):
        # Sent on Apr 3 but processed on Apr 5: Apr 6 is one day ahead, so this year
        attempt = parse_score_message(
            "Coffee Golf - Apr 6\n11 Strokes",
            player_id="42",
            player_name="Alice",
            message_id="1001",
            created_at=datetime(2025, 4, 3, 16, 0, tzinfo=timezone.utc),
            now=NOW,
        )

        assert attempt.date == "2025-04-06"


class TestResolveScoreDate:
    def test_current_year(self):
        assert resolve_score_date(4, 1, NOW) == date(2025, 4, 1)

    def test_one_day_ahead_is_allowed(self):
        assert resolve_score_date(4, 6, NOW) == date(2025, 4, 6)

    def test_further_ahead_rolls_back_a_year(self):
        assert resolve_score_date(4, 7, NOW) == date(2024, 4, 7)

    def test_leap_day_falls_back_to_previous_valid_year(self):
        # 2025-02-29 does not exist; 2024-02-29 does
        assert resolve_score_date(2, 29, NOW) == date(2024, 2, 29)

    def test_impossible_date(self):
        assert resolve_score_date(4, 31, NOW) is None


class TestExtractRoute:
    def test_keeps_symbols_in_order(self):
        assert extract_route("a 🟦 b ⛳ c 🟥") == "🟦⛳🟥"

    def test_drops_variation_selectors(self):
        assert extract_route("☕️⛳") == "☕⛳"

    def test_plain_text_has_no_route(self):
        assert extract_route("13 Strokes - Top 12%") is None
