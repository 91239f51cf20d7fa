"""
Peak-window and meal-effect estimation.

Both estimators share the same shape: load samples through the two-tier
ingestion, then hand them to one configuration of the contextual aggregator.
Too little evidence is reported through `status` with `available == False`,
never as an exception and never as a low-confidence guess.
"""

import logging
from datetime import datetime, timedelta

import pytz

from .clock_math import format_hour, resolve_timezone
from .config import (
    DEFAULT_MEAL_LOOKBACK_DAYS,
    DEFAULT_MEAL_MAX_SESSIONS,
    DEFAULT_PEAK_LOOKBACK,
    MEAL_EVIDENCE,
    PEAK_EVIDENCE,
    EvidenceConfig,
)
from .ingestion import load_samples
from .science.aggregator import find_best_window, summarize_meal_recency
from .store import SampleStore
from .types import BestWindow, Derived, MealEffectSummary, PeakEstimate, ScoredSample

logger = logging.getLogger(__name__)

NOT_ENOUGH_SESSIONS = (
    "Not enough recent sessions (need ≥ {min_samples}). Play at a few different times of day."
)
NEED_MORE_VARIETY = (
    "Need more variety across the day to estimate a peak (try morning + afternoon sessions)."
)
NO_SESSIONS = "no sessions"
NO_MEAL_TIMING = "No recent sessions with meal timing to compare yet."


async def estimate_peak_window(
    store: SampleStore,
    user_id: str,
    lookback: int = DEFAULT_PEAK_LOOKBACK,
    tz: str = "UTC",
    evidence: EvidenceConfig = PEAK_EVIDENCE,
) -> PeakEstimate:
    """
    Estimate the 2-hour window of the day in which the user performs best.

    Args:
        store: Sample store
        user_id: User to estimate for
        lookback: Most recent documents to consider (capped at 500)
        tz: IANA timezone used to read the hour of timestamped sessions
        evidence: Thresholds (fallback trigger, per-window minimum, width)

    Returns:
        PeakEstimate whose window is None when no window has enough samples
    """
    loaded = await load_samples(
        store, user_id, lookback, evidence.min_precomputed, resolve_timezone(tz)
    )

    if isinstance(loaded, Derived) and loaded.record_count < evidence.min_samples:
        logger.info(f"Peak window for {user_id}: only {loaded.record_count} raw sessions")
        return PeakEstimate(
            window=None,
            source=loaded.source,
            sample_count=len(loaded.samples),
            status=NOT_ENOUGH_SESSIONS.format(min_samples=evidence.min_samples),
        )

    window = find_best_window(
        loaded.samples, min_samples=evidence.min_samples, width=evidence.window_hours
    )
    if window is None:
        logger.info(f"Peak window for {user_id}: no window reached {evidence.min_samples} samples")
        return PeakEstimate(
            window=None,
            source=loaded.source,
            sample_count=len(loaded.samples),
            status=NEED_MORE_VARIETY,
        )

    return PeakEstimate(window=window, source=loaded.source, sample_count=len(loaded.samples))


def _within_lookback(sample: ScoredSample, cutoff: datetime) -> bool:
    if sample.taken_at is None:
        return True
    taken_at = sample.taken_at
    if taken_at.tzinfo is None:
        taken_at = pytz.UTC.localize(taken_at)
    return taken_at >= cutoff


async def summarize_meal_effect(
    store: SampleStore,
    user_id: str,
    lookback_days: int = DEFAULT_MEAL_LOOKBACK_DAYS,
    max_sessions: int = DEFAULT_MEAL_MAX_SESSIONS,
    tz: str = "UTC",
    now: datetime | None = None,
    evidence: EvidenceConfig = MEAL_EVIDENCE,
) -> MealEffectSummary:
    """
    Compare performance across time-since-last-meal bands.

    Samples without minsSinceLastMeal are left out, as are timestamped
    samples older than lookback_days. All three bands are always reported,
    empty ones with n == 0.

    Returns:
        MealEffectSummary with bands ordered best median first. status is
        "no sessions" when the user has no data at all.
    """
    loaded = await load_samples(
        store, user_id, max_sessions, evidence.min_precomputed, resolve_timezone(tz)
    )

    if isinstance(loaded, Derived) and loaded.record_count == 0:
        logger.info(f"Meal effect for {user_id}: no sessions")
        return MealEffectSummary(summary=[], source=loaded.source, sample_count=0, status=NO_SESSIONS)

    if now is None:
        now = datetime.now(pytz.UTC)
    elif now.tzinfo is None:
        now = pytz.UTC.localize(now)
    cutoff = now - timedelta(days=lookback_days)
    samples = [s for s in loaded.samples if _within_lookback(s, cutoff)]

    summary = summarize_meal_recency(samples)
    result = MealEffectSummary(summary=summary, source=loaded.source, sample_count=len(samples))
    if not result.available:
        result.status = NO_MEAL_TIMING
    return result


def format_best_window(window: BestWindow | None) -> str:
    """Chip text for a peak window, e.g. "Best 2h: 14:00–16:00 (12 sessions)"."""
    if window is None:
        return "Peak window unavailable."
    width = (window.end_hour - window.start_hour) % 24
    return (
        f"Best {width}h: {format_hour(window.start_hour)}–{format_hour(window.end_hour)} "
        f"({window.sample_count} sessions)"
    )
