"""
Shared ranking utilities for daily and range leaderboards.

Competition-style ranking: players with the same sort key share the rank
of the first member of their group ("T-1, T-1, 3."). Medals are only
handed out to untied podium places with no tie group ahead of them.
"""

import math
from typing import Any, Callable, List, Sequence, Tuple, TypeVar

from coffee_golf_bot.constants import ScoringConstants, UIConstants

T = TypeVar('T')


def keys_equal(first: Any, second: Any, tolerance: float = ScoringConstants.AVERAGE_TOLERANCE) -> bool:
    """Compare two sort keys, treating floats within ``tolerance`` as equal."""
    if isinstance(first, tuple) and isinstance(second, tuple):
        return len(first) == len(second) and all(
            keys_equal(a, b, tolerance) for a, b in zip(first, second)
        )
    if isinstance(first, float) or isinstance(second, float):
        return math.isclose(first, second, rel_tol=0.0, abs_tol=tolerance)
    return first == second


def format_rank_label(rank: int, tied: bool, tie_ahead: bool) -> str:
    if tied:
        return f"T-{rank}"
    if rank <= len(UIConstants.MEDALS) and not tie_ahead:
        return UIConstants.MEDALS[rank - 1]
    return f"{rank}."


def assign_rank_labels(
    items: Sequence[T],
    key: Callable[[T], Any],
    tolerance: float = ScoringConstants.AVERAGE_TOLERANCE
) -> List[Tuple[int, str]]:
    """
    Compute (rank, label) for each item of an already-sorted sequence.

    Args:
        items: Items sorted best-first by ``key``
        key: Sort key; items with equal keys are tied
        tolerance: Float tolerance used when comparing keys

    Returns:
        One (rank, label) pair per item, in the same order
    """
    groups: List[Tuple[int, int]] = []  # (rank, size)
    previous_key = None
    for position, item in enumerate(items, start=1):
        current_key = key(item)
        if groups and keys_equal(current_key, previous_key, tolerance):
            rank, size = groups[-1]
            groups[-1] = (rank, size + 1)
        else:
            groups.append((position, 1))
        previous_key = current_key

    results: List[Tuple[int, str]] = []
    tie_ahead = False
    for rank, size in groups:
        tied = size > 1
        label = format_rank_label(rank, tied, tie_ahead)
        results.extend([(rank, label)] * size)
        tie_ahead = tie_ahead or tied
    return results
