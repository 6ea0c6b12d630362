"""
Score data models for the Coffee Golf bot.

Dataclasses for attempts, player aggregates, tournaments and the persisted
score document. Every model converts to and from the camelCase JSON shape
stored by the document backends.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Attempt:
    """One parsed score submission."""
    player_id: str
    player_name: str
    date: str  # YYYY-MM-DD in the reference timezone
    strokes: int
    message_id: str
    timestamp: int  # epoch millis, defines ordering within a day
    route: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'playerId': self.player_id,
            'playerName': self.player_name,
            'date': self.date,
            'strokes': self.strokes,
            'messageId': self.message_id,
            'timestamp': self.timestamp,
        }
        if self.route:
            data['route'] = self.route
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Attempt':
        return cls(
            player_id=str(data['playerId']),
            player_name=data.get('playerName', ''),
            date=data['date'],
            strokes=int(data['strokes']),
            message_id=str(data.get('messageId', '')),
            timestamp=int(data.get('timestamp', 0)),
            route=data.get('route') or None,
        )


@dataclass
class PlayerStats:
    """Aggregate statistics derived from a player's full attempt history."""
    id: str
    name: str
    best_score: int = 0
    average_score: float = 0.0
    total_games: int = 0
    scores: List[Attempt] = field(default_factory=list)

    def add_attempt(self, attempt: Attempt):
        """Append an attempt and recompute best, average and total."""
        self.name = attempt.player_name
        self.scores.append(attempt)
        strokes = [score.strokes for score in self.scores]
        self.total_games = len(strokes)
        self.best_score = min(strokes)
        self.average_score = sum(strokes) / len(strokes)

    @property
    def last_attempt(self) -> Optional[Attempt]:
        if not self.scores:
            return None
        return max(self.scores, key=lambda s: s.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'bestScore': self.best_score,
            'averageScore': self.average_score,
            'totalGames': self.total_games,
            'scores': [score.to_dict() for score in self.scores],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerStats':
        scores = [Attempt.from_dict(s) for s in data.get('scores', [])]
        stats = cls(id=str(data['id']), name=data.get('name', ''), scores=scores)
        if scores:
            # Stored aggregates are derived data, so rebuild them from history
            strokes = [s.strokes for s in scores]
            stats.best_score = min(strokes)
            stats.average_score = sum(strokes) / len(strokes)
            stats.total_games = len(strokes)
        return stats


@dataclass
class Tournament:
    """A named date range scored under a single mode."""
    name: str
    start_date: str
    end_date: str
    scoring_type: str
    participants: List[str] = field(default_factory=list)
    active: bool = True

    def covers(self, date: str) -> bool:
        # ISO dates compare correctly as strings
        return self.start_date <= date <= self.end_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'startDate': self.start_date,
            'endDate': self.end_date,
            'participants': list(self.participants),
            'active': self.active,
            'scoringType': self.scoring_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Tournament':
        return cls(
            name=data['name'],
            start_date=data['startDate'],
            end_date=data['endDate'],
            scoring_type=data.get('scoringType', 'first'),
            participants=[str(p) for p in data.get('participants', [])],
            active=bool(data.get('active', False)),
        )


@dataclass
class ScoreDocument:
    """The whole persisted document: players, daily index and tournaments."""
    players: Dict[str, PlayerStats] = field(default_factory=dict)
    daily_scores: Dict[str, Dict[str, List[Attempt]]] = field(default_factory=dict)
    tournaments: List[Tournament] = field(default_factory=list)
    current_tournament: Optional[str] = None

    def attempts_for(self, date: str) -> Dict[str, List[Attempt]]:
        """Non-empty attempt lists for a date, each in timestamp order."""
        day = self.daily_scores.get(date, {})
        return {
            player_id: sorted(attempts, key=lambda a: a.timestamp)
            for player_id, attempts in day.items()
            if attempts
        }

    def attempt_count(self, player_id: str, date: str) -> int:
        return len(self.daily_scores.get(date, {}).get(player_id, []))

    def find_tournament(self, name: str) -> Optional[Tournament]:
        for tournament in self.tournaments:
            if tournament.name == name:
                return tournament
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'players': {pid: stats.to_dict() for pid, stats in self.players.items()},
            'dailyScores': {
                date: {pid: [a.to_dict() for a in attempts] for pid, attempts in day.items()}
                for date, day in self.daily_scores.items()
            },
            'tournaments': [t.to_dict() for t in self.tournaments],
        }
        if self.current_tournament:
            data['currentTournament'] = self.current_tournament
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ScoreDocument':
        if not data:
            return cls()
        return cls(
            players={
                str(pid): PlayerStats.from_dict(stats)
                for pid, stats in data.get('players', {}).items()
            },
            daily_scores={
                date: {
                    str(pid): [Attempt.from_dict(a) for a in attempts]
                    for pid, attempts in day.items()
                }
                for date, day in data.get('dailyScores', {}).items()
            },
            tournaments=[Tournament.from_dict(t) for t in data.get('tournaments', [])],
            current_tournament=data.get('currentTournament') or None,
        )


@dataclass(frozen=True)
class RecordResult:
    """Outcome of recording an attempt."""
    is_first_of_day: bool
    attempt_index: int


@dataclass(frozen=True)
class EffectiveScore:
    """The single stroke count a scoring mode derives from one player's day."""
    strokes: int
    attempt: Attempt
    attempt_index: int

    @property
    def route(self) -> Optional[str]:
        return self.attempt.route
