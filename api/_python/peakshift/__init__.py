"""
Peakshift: wake-time realignment and peak-performance estimation.

Two independent halves:
- Shift planning: ShiftPlanGenerator walks wake time toward a target with
  daily light, meal, exercise and nap windows
- Estimation: robust (median/MAD) scoring of reaction-time samples, grouped
  by hour of day or meal recency to find when the user performs best
"""

from .errors import MalformedInput, MalformedTime, UpstreamFetchFailure
from .estimator import estimate_peak_window, format_best_window, summarize_meal_effect
from .shift_planner import ShiftPlanGenerator, generate_shift_plan
from .store import InMemorySampleStore, SampleStore
from .types import (
    BestWindow,
    Derived,
    GroupSummary,
    MealEffectSummary,
    PeakEstimate,
    Precomputed,
    ScoredSample,
    ShiftPlan,
    ShiftPlanDay,
    ShiftPlanRequest,
)

__all__ = [
    # Errors
    "MalformedInput",
    "MalformedTime",
    "UpstreamFetchFailure",
    # Types
    "ShiftPlanRequest",
    "ShiftPlanDay",
    "ShiftPlan",
    "ScoredSample",
    "Precomputed",
    "Derived",
    "BestWindow",
    "GroupSummary",
    "PeakEstimate",
    "MealEffectSummary",
    # Planner
    "ShiftPlanGenerator",
    "generate_shift_plan",
    # Estimation
    "SampleStore",
    "InMemorySampleStore",
    "estimate_peak_window",
    "summarize_meal_effect",
    "format_best_window",
]
