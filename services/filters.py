"""Filter and sort recommendation lists.

Filters combine with AND; an unset field (or "all") skips its predicate.
Every sort is stable and returns a new list.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from app.exceptions import ValidationError
from app.models import (
    Difficulty,
    FilterState,
    ProjectRecommendation,
    SortKey,
    TimeBucket,
)

DIFFICULTY_ORDER: dict[Difficulty, int] = {
    Difficulty.BEGINNER: 1,
    Difficulty.INTERMEDIATE: 2,
    Difficulty.ADVANCED: 3,
}

TIME_ORDER: dict[TimeBucket, int] = {
    TimeBucket.WEEKEND: 1,
    TimeBucket.WEEK: 2,
    TimeBucket.EXTENDED: 3,
}

# Evaluated in order; first match wins.
TIME_RULES: list[tuple[TimeBucket, re.Pattern[str]]] = [
    (TimeBucket.EXTENDED, re.compile(r"weeks|month|40\+\s*hour")),
    (
        TimeBucket.WEEKEND,
        re.compile(
            r"weekend|1-2\s*day|few\s+hours"
            r"|\b(?:[1-9]|1[0-6])(?:\s*-\s*(?:[1-9]|1[0-6]))?\s*hours?\b"
        ),
    ),
    (
        TimeBucket.WEEK,
        re.compile(r"week|\d+\s*-\s*\d+\s*days?|\bdays?\b|\d+\+?\s*hours?"),
    ),
]


def categorize_time_estimate(time_estimate: str) -> TimeBucket:
    """Bucket a free-text time estimate. Unrecognized text is extended."""
    normalized = time_estimate.lower()
    for bucket, pattern in TIME_RULES:
        if pattern.search(normalized):
            return bucket
    return TimeBucket.EXTENDED


def _teaches_any(item: ProjectRecommendation, skills: Sequence[str]) -> bool:
    taught = [s.lower() for s in item.skills_taught]
    return any(selected.lower() in t for selected in skills for t in taught)


def apply_filters(
    items: Sequence[ProjectRecommendation], state: FilterState
) -> list[ProjectRecommendation]:
    """Keep items that pass every active predicate."""

    def keep(item: ProjectRecommendation) -> bool:
        if state.difficulty is not None and item.difficulty != state.difficulty:
            return False
        if state.category is not None and item.category != state.category:
            return False
        if (
            state.time_commitment is not None
            and categorize_time_estimate(item.time_estimate) != state.time_commitment
        ):
            return False
        if state.skills and not _teaches_any(item, state.skills):
            return False
        if state.priority_level is not None and item.priority != state.priority_level:
            return False
        return True

    return [item for item in items if keep(item)]


# Sort key -> (value extractor, natural ascending direction)
SORTS: dict[SortKey, tuple[Callable[[ProjectRecommendation], int], bool]] = {
    SortKey.PRIORITY: (lambda r: r.priority_score, False),
    SortKey.DIFFICULTY: (lambda r: DIFFICULTY_ORDER[r.difficulty], True),
    SortKey.TIME: (lambda r: TIME_ORDER[categorize_time_estimate(r.time_estimate)], True),
    SortKey.SKILLS: (lambda r: len(r.skills_taught), False),
}


def sort_recommendations(
    items: Sequence[ProjectRecommendation],
    sort_by: SortKey | str,
    ascending: bool | None = None,
) -> list[ProjectRecommendation]:
    """Sort by a key in its natural direction unless `ascending` overrides it.

    Raises:
        ValidationError: Unknown sort key.
    """
    try:
        key = SortKey(sort_by)
    except ValueError:
        raise ValidationError(
            f"Unknown sort key: {sort_by}",
            details={"allowed": [k.value for k in SortKey]},
        ) from None

    extract, natural_ascending = SORTS[key]
    direction = natural_ascending if ascending is None else ascending
    return sorted(items, key=extract, reverse=not direction)


def filter_and_sort(
    items: Sequence[ProjectRecommendation],
    state: FilterState,
    ascending: bool | None = None,
) -> list[ProjectRecommendation]:
    return sort_recommendations(apply_filters(items, state), state.sort_by, ascending)
