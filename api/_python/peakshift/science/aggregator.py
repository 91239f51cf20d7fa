"""
Contextual aggregation of scored samples.

One primitive, three uses:

    group_scores(samples, key)  ->  {key: [scores]}
    rank_groups / best_group    ->  robust center (median) per group, gated by
                                    a minimum sample count, ranked

Configurations:
- Peak window: hours 0-23 merged into circular 2-hour windows; the window
  with the strictly highest median wins, ties keep the earliest start hour.
- Meal recency: three fixed bands by minutes since the last meal, all bands
  reported, best median first.
- Weekday: one group per day of week.

A new context dimension only needs a key function.
"""

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from typing import TypeVar

from ..types import BestWindow, GroupSummary, ScoredSample
from .robust_stats import median

K = TypeVar("K", bound=Hashable)

HOURS_PER_DAY = 24

MEAL_RECENCY_BANDS: tuple[str, ...] = ("≤90m", "90–180m", ">180m")
RECENT_MEAL_MAX_MINUTES = 90
MID_MEAL_MAX_MINUTES = 180

WEEKDAY_NAMES: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


# =============================================================================
# Primitive
# =============================================================================


def group_scores(
    samples: Iterable[ScoredSample],
    key: Callable[[ScoredSample], K | None],
    keys: Iterable[K] = (),
) -> dict[K, list[float]]:
    """
    Group sample scores by context key.

    Samples whose key is None are left out. Groups listed in `keys` are
    created up front (possibly empty) and keep that order; other keys follow
    in order of first appearance.
    """
    groups: dict[K, list[float]] = {k: [] for k in keys}
    for sample in samples:
        k = key(sample)
        if k is None:
            continue
        groups.setdefault(k, []).append(sample.score)
    return groups


def summarize_groups(groups: Mapping[K, Sequence[float]], min_samples: int = 0) -> list[GroupSummary]:
    """Median score per group, in group order, dropping groups below min_samples."""
    return [
        GroupSummary(bucket=k, n=len(scores), median_score=median(scores))
        for k, scores in groups.items()
        if len(scores) >= min_samples
    ]


def rank_groups(groups: Mapping[K, Sequence[float]], min_samples: int = 0) -> list[GroupSummary]:
    """Gated group summaries, best median first. Ties keep group order."""
    return sorted(
        summarize_groups(groups, min_samples), key=lambda g: g.median_score, reverse=True
    )


def best_group(groups: Mapping[K, Sequence[float]], min_samples: int) -> GroupSummary | None:
    """
    The group with the strictly greatest median among those with at least
    min_samples scores. Ties keep the first group encountered. None when no
    group clears the gate.
    """
    best: GroupSummary | None = None
    for summary in summarize_groups(groups, min_samples):
        if best is None or summary.median_score > best.median_score:
            best = summary
    return best


# =============================================================================
# Hour-of-day windows
# =============================================================================


def hour_key(sample: ScoredSample) -> int | None:
    return sample.hour


def circular_windows(
    hour_groups: Mapping[int, Sequence[float]], width: int = 2
) -> dict[int, list[float]]:
    """
    Merge hourly groups into circular windows of `width` hours.

    Window h holds the scores of hours h .. h+width-1 (mod 24), so the window
    starting at 23 spans 23:00-01:00.
    """
    windows: dict[int, list[float]] = {}
    for start in range(HOURS_PER_DAY):
        scores: list[float] = []
        for offset in range(width):
            scores.extend(hour_groups.get((start + offset) % HOURS_PER_DAY, ()))
        windows[start] = scores
    return windows


def find_best_window(
    samples: Iterable[ScoredSample], min_samples: int = 5, width: int = 2
) -> BestWindow | None:
    """
    Sliding peak-window search.

    Args:
        samples: Scored samples; those without an hour are ignored
        min_samples: Samples a window needs before it can win
        width: Window width in hours

    Returns:
        BestWindow for the window with the highest median score, or None if
        no window reaches min_samples
    """
    hourly = group_scores(samples, hour_key, keys=range(HOURS_PER_DAY))
    best = best_group(circular_windows(hourly, width), min_samples)
    if best is None:
        return None
    return BestWindow(
        start_hour=best.bucket,
        end_hour=(best.bucket + width) % HOURS_PER_DAY,
        sample_count=best.n,
        median_score=best.median_score,
    )


# =============================================================================
# Meal recency
# =============================================================================


def meal_recency_band(minutes: float | None) -> str | None:
    """Band label for minutes since the last meal; None when unknown."""
    if minutes is None:
        return None
    if minutes <= RECENT_MEAL_MAX_MINUTES:
        return MEAL_RECENCY_BANDS[0]
    if minutes <= MID_MEAL_MAX_MINUTES:
        return MEAL_RECENCY_BANDS[1]
    return MEAL_RECENCY_BANDS[2]


def meal_recency_key(sample: ScoredSample) -> str | None:
    return meal_recency_band(sample.mins_since_last_meal)


def summarize_meal_recency(samples: Iterable[ScoredSample]) -> list[GroupSummary]:
    """All three recency bands (empty ones included), best median first."""
    groups = group_scores(samples, meal_recency_key, keys=MEAL_RECENCY_BANDS)
    return rank_groups(groups)


# =============================================================================
# Day of week
# =============================================================================


def weekday_key(sample: ScoredSample) -> str | None:
    if sample.taken_at is None:
        return None
    return WEEKDAY_NAMES[sample.taken_at.weekday()]


def summarize_weekdays(samples: Iterable[ScoredSample], min_samples: int = 0) -> list[GroupSummary]:
    """Weekdays with at least min_samples samples, best median first."""
    groups = group_scores(samples, weekday_key, keys=WEEKDAY_NAMES)
    return rank_groups(groups, min_samples)
