"""
Scoring modes for daily Coffee Golf attempts.

Each mode turns one player's ordered attempts for one day into a single
effective score:

- FIRST: the earliest attempt by timestamp
- BEST: the lowest stroke count among the first N attempts (N = daily cap)
- UNLIMITED: the lowest stroke count among every attempt that day

Ties on stroke count always go to the earlier attempt.
"""

from enum import Enum
from typing import List, Optional, Sequence

from coffee_golf_bot.config import Config
from coffee_golf_bot.constants import UIConstants
from coffee_golf_bot.data_models.scores import Attempt, EffectiveScore

ALL_MODES_OPTION = 'all'


class ScoringMode(str, Enum):
    FIRST = 'first'
    BEST = 'best'
    UNLIMITED = 'unlimited'

    @classmethod
    def from_option(cls, value: Optional[str]) -> 'ScoringMode':
        """Normalize user input; anything unrecognized falls back to FIRST."""
        if value:
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.FIRST

    @property
    def display_name(self) -> str:
        if self is ScoringMode.FIRST:
            return 'First Attempt Only'
        if self is ScoringMode.BEST:
            return f'Best of {Config.MAX_DAILY_ATTEMPTS} Attempts'
        return 'Unlimited Attempts'

    @property
    def color(self) -> int:
        return {
            ScoringMode.FIRST: UIConstants.FIRST_MODE_COLOR,
            ScoringMode.BEST: UIConstants.BEST_MODE_COLOR,
            ScoringMode.UNLIMITED: UIConstants.UNLIMITED_MODE_COLOR,
        }[self]


def parse_mode_option(value: Optional[str]) -> List[ScoringMode]:
    """Expand a query option into the modes to render ("all" means every mode)."""
    if value and value.strip().lower() == ALL_MODES_OPTION:
        return list(ScoringMode)
    return [ScoringMode.from_option(value)]


def effective_score(
    attempts: Sequence[Attempt],
    mode: ScoringMode,
    cap: Optional[int] = None
) -> Optional[EffectiveScore]:
    """Derive a player's effective score for one day, or None with no attempts."""
    if not attempts:
        return None

    ordered = sorted(attempts, key=lambda a: a.timestamp)
    indexed = list(enumerate(ordered, start=1))

    if mode is ScoringMode.FIRST:
        index, chosen = indexed[0]
    else:
        if mode is ScoringMode.BEST:
            limit = cap if cap is not None else Config.MAX_DAILY_ATTEMPTS
            indexed = indexed[:limit]
            if not indexed:
                return None
        # min() keeps the first of equal keys, so the earlier attempt wins ties
        index, chosen = min(indexed, key=lambda pair: pair[1].strokes)

    return EffectiveScore(strokes=chosen.strokes, attempt=chosen, attempt_index=index)
