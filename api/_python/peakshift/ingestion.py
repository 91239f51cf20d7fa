"""
Two-tier sample ingestion.

Precomputed feature records are preferred. When fewer than the caller's
threshold are available, raw game sessions are fetched instead and scored
against their own median/MAD. Either way the caller gets the same
ScoredSample shape, tagged Precomputed or Derived.

This is a data-shape fallback, not a fault-tolerance one: a store error on
either read propagates as UpstreamFetchFailure without retry.
"""

import logging

import pytz

from .config import MAX_FETCH_LIMIT
from .errors import UpstreamFetchFailure
from .science.normalizer import (
    features_from_documents,
    normalize_features,
    normalize_sessions,
    sessions_from_documents,
)
from .store import FEATURES_COLLECTION, SESSIONS_COLLECTION, SampleStore
from .types import NormalizedSamples

logger = logging.getLogger(__name__)


def clamp_limit(limit: int) -> int:
    """Fetch limits are capped at MAX_FETCH_LIMIT documents."""
    return max(0, min(int(limit), MAX_FETCH_LIMIT))


async def _fetch(store: SampleStore, collection: str, user_id: str, limit: int) -> list[dict]:
    try:
        if collection == FEATURES_COLLECTION:
            return await store.fetch_features(user_id, limit)
        return await store.fetch_sessions(user_id, limit)
    except Exception as exc:
        raise UpstreamFetchFailure(f"Failed to read {collection} for user {user_id}: {exc}") from exc


async def load_samples(
    store: SampleStore,
    user_id: str,
    limit: int,
    min_precomputed: int,
    tz: pytz.BaseTzInfo = pytz.UTC,
) -> NormalizedSamples:
    """
    Fetch and score a user's samples.

    Args:
        store: Sample store
        user_id: User whose documents to read
        limit: Maximum documents per read (capped at MAX_FETCH_LIMIT)
        min_precomputed: Feature records needed to skip the raw-session read
        tz: Timezone for deriving the hour of timestamped samples

    Returns:
        Precomputed when enough feature records exist, else Derived

    Raises:
        UpstreamFetchFailure: if either store read fails
    """
    limit = clamp_limit(limit)

    feature_docs = await _fetch(store, FEATURES_COLLECTION, user_id, limit)
    if len(feature_docs) >= min_precomputed:
        return normalize_features(features_from_documents(feature_docs, tz))

    logger.info(
        f"Only {len(feature_docs)} feature records for {user_id} "
        f"(need {min_precomputed}); falling back to {SESSIONS_COLLECTION}"
    )
    session_docs = await _fetch(store, SESSIONS_COLLECTION, user_id, limit)
    derived = normalize_sessions(sessions_from_documents(session_docs, tz))
    logger.debug(
        f"Derived baseline for {user_id}: median={derived.baseline_median:.1f}ms "
        f"mad={derived.baseline_mad:.1f}ms over {derived.record_count} sessions"
    )
    return derived
