"""
Score parsing for Coffee Golf share messages.

Supported format (the game's share text):
    Coffee Golf - Apr 5
    13 Strokes - Top 12%
    🟨🟩🟥🟪🟦

A message is a score when it contains a month name followed by a day,
and later a one- or two-digit number followed by "stroke(s)". Every
symbol glyph in the message is kept, in order, as the route. Messages
in any other format are not scores and are ignored.
"""

import re
import unicodedata
from datetime import date, datetime, timedelta
from typing import Optional

from coffee_golf_bot.constants import ScoringConstants
from coffee_golf_bot.data_models.scores import Attempt
from coffee_golf_bot.utils.dates import format_date, local_today, to_epoch_millis

MONTHS = {
    'jan': 1, 'january': 1,
    'feb': 2, 'february': 2,
    'mar': 3, 'march': 3,
    'apr': 4, 'april': 4,
    'may': 5,
    'jun': 6, 'june': 6,
    'jul': 7, 'july': 7,
    'aug': 8, 'august': 8,
    'sep': 9, 'sept': 9, 'september': 9,
    'oct': 10, 'october': 10,
    'nov': 11, 'november': 11,
    'dec': 12, 'december': 12,
}

DATE_RE = re.compile(r'\b(?P<month>[a-z]{3,9})\.?\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?\b', re.IGNORECASE)
STROKES_RE = re.compile(r'(?<!\d)(?P<strokes>\d{1,2})\s*strokes?\b', re.IGNORECASE)


def extract_route(content: str) -> Optional[str]:
    """Concatenate every symbol glyph in the message, in order of appearance."""
    # Variation selectors (Mn) and joiners (Cf) fall outside "So" and drop out
    glyphs = [ch for ch in content if unicodedata.category(ch) == 'So']
    return ''.join(glyphs) or None


def resolve_score_date(month: int, day: int, now: Optional[datetime] = None) -> Optional[date]:
    """Attach a year to a month/day pair.

    The current year in the reference timezone is tried first. If that
    date does not exist or is more than one day ahead of today, the
    previous year is tried (a Dec 31 round posted on Jan 1).
    """
    today = local_today(now)
    for year in (today.year, today.year - 1):
        try:
            candidate = date(year, month, day)
        except ValueError:
            continue
        if candidate - today <= timedelta(days=1):
            return candidate
    return None


def _find_date(content: str):
    for match in DATE_RE.finditer(content):
        month = MONTHS.get(match.group('month').lower())
        if month:
            return match, month
    return None, None


def parse_score_message(
    content: str,
    player_id: str,
    player_name: str,
    message_id: str,
    created_at: datetime,
    now: Optional[datetime] = None
) -> Optional[Attempt]:
    """Turn message text into an Attempt, or None when it is not a score.

    The year is resolved against ``now`` (default: current time), not
    ``created_at``.
    """
    if not content:
        return None

    date_match, month = _find_date(content)
    if not date_match:
        return None

    strokes_match = STROKES_RE.search(content, date_match.end())
    if not strokes_match:
        return None

    strokes = int(strokes_match.group('strokes'))
    if not ScoringConstants.MIN_STROKES <= strokes <= ScoringConstants.MAX_STROKES:
        return None

    score_date = resolve_score_date(month, int(date_match.group('day')), now)
    if score_date is None:
        return None

    return Attempt(
        player_id=str(player_id),
        player_name=player_name,
        date=format_date(score_date),
        strokes=strokes,
        message_id=str(message_id),
        timestamp=to_epoch_millis(created_at),
        route=extract_route(content),
    )
