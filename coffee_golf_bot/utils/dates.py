"""
Date helpers pinned to the bot's reference timezone.

"Today" is always computed in Config.TIMEZONE, never in the host's local
zone, and dates are always formatted as YYYY-MM-DD.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Optional

import pytz

from coffee_golf_bot.config import Config

DATE_FORMAT = '%Y-%m-%d'


def reference_timezone():
    return pytz.timezone(Config.TIMEZONE)


def local_now(now: Optional[datetime] = None) -> datetime:
    """Convert ``now`` (default: current time) to the reference timezone.

    Naive datetimes are assumed to be UTC, matching how discord.py reports
    message timestamps.
    """
    tz = reference_timezone()
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(tz)


def local_today(now: Optional[datetime] = None) -> date:
    return local_now(now).date()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string, raising ValueError on anything else."""
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def today_string(now: Optional[datetime] = None) -> str:
    return format_date(local_today(now))


def shift_date(value: str, days: int) -> str:
    return format_date(parse_date(value) + timedelta(days=days))


def date_range(start: str, end: str) -> Iterator[str]:
    """Yield every date string from ``start`` to ``end`` inclusive."""
    current = parse_date(start)
    last = parse_date(end)
    while current <= last:
        yield format_date(current)
        current += timedelta(days=1)


def to_epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = pytz.utc.localize(moment)
    return int(moment.timestamp() * 1000)
