"""
Estimation layer.

Pure functions over in-memory samples:
- robust_stats: median / MAD helpers
- normalizer: record parsing and robust z-scoring
- aggregator: group -> robust center -> rank, with hour-window and
  meal-recency configurations
"""

from .aggregator import (
    MEAL_RECENCY_BANDS,
    best_group,
    find_best_window,
    group_scores,
    rank_groups,
    summarize_meal_recency,
    summarize_weekdays,
)
from .normalizer import normalize_features, normalize_sessions
from .robust_stats import median, median_absolute_deviation, robust_scale, robust_z

__all__ = [
    "MEAL_RECENCY_BANDS",
    "best_group",
    "find_best_window",
    "group_scores",
    "rank_groups",
    "summarize_meal_recency",
    "summarize_weekdays",
    "normalize_features",
    "normalize_sessions",
    "median",
    "median_absolute_deviation",
    "robust_scale",
    "robust_z",
]
