"""
Leaderboard data models.

Immutable data transfer objects passed from the leaderboard service to the
embed builders and HTTP routes.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class DailyEntry:
    """Single-day leaderboard row."""
    rank: int
    rank_label: str
    player_id: str
    player_name: str
    strokes: int
    attempt_index: int
    route: Optional[str] = None


@dataclass(frozen=True)
class RangeEntry:
    """Cumulative leaderboard row over a date range."""
    rank: int
    rank_label: str
    player_id: str
    player_name: str
    total_strokes: int
    rounds: int
    average: float


@dataclass(frozen=True)
class LeaderboardSection:
    """Ranked entries for one scoring mode."""
    mode: str
    title: str
    entries: list


@dataclass
class LeaderboardReport:
    """Everything a presentation layer needs to render a leaderboard query."""
    title: str
    scope: str
    start_date: str
    end_date: str
    sections: List[LeaderboardSection] = field(default_factory=list)
    requested_modes: List[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not any(section.entries for section in self.sections)

    @property
    def is_multi_mode(self) -> bool:
        return len(self.requested_modes) > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'scope': self.scope,
            'startDate': self.start_date,
            'endDate': self.end_date,
            'requestedModes': list(self.requested_modes),
            'sections': [
                {
                    'mode': section.mode,
                    'title': section.title,
                    'entries': [asdict(entry) for entry in section.entries],
                }
                for section in self.sections
            ],
        }
