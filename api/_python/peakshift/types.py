"""
Data structures for plan generation and performance estimation.

Plan types are produced once per request and never mutated. Sample types are
read-only views over documents fetched from the sample store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .clock_math import parse_time
from .config import DEFAULT_PLAN_DAYS, DEFAULT_SLEEP_NEED_MINUTES, MAX_PLAN_DAYS
from .errors import MalformedInput

Direction = Literal["advance", "delay"]
DIRECTIONS: tuple[Direction, ...] = ("advance", "delay")

# =============================================================================
# Plan Types
# =============================================================================


@dataclass(frozen=True)
class ShiftPlanRequest:
    """
    Input for one wake-time migration.

    The timezone label is only used to date the plan days; all clock
    arithmetic works on bare "HH:MM" values.
    """

    tz: str  # IANA timezone label, echoed on every day
    current_wake: str  # "07:30" format
    target_wake: str  # "06:00" format
    direction: Direction
    sleep_need_minutes: int = DEFAULT_SLEEP_NEED_MINUTES
    days: int = DEFAULT_PLAN_DAYS

    def __post_init__(self) -> None:
        parse_time(self.current_wake)
        parse_time(self.target_wake)

        if self.direction not in DIRECTIONS:
            raise MalformedInput(
                f"direction must be 'advance' or 'delay', got {self.direction!r}"
            )
        if not isinstance(self.tz, str) or not self.tz:
            raise MalformedInput("tz must be a non-empty timezone label")
        if (
            isinstance(self.days, bool)
            or not isinstance(self.days, int)
            or not 1 <= self.days <= MAX_PLAN_DAYS
        ):
            raise MalformedInput(f"days must be a number between 1 and {MAX_PLAN_DAYS}")
        if (
            isinstance(self.sleep_need_minutes, bool)
            or not isinstance(self.sleep_need_minutes, int)
            or not 0 < self.sleep_need_minutes < 24 * 60
        ):
            raise MalformedInput("sleep_need_minutes must be a whole number of minutes under 24h")


@dataclass(frozen=True)
class MealGuidance:
    """
    Meal timing for one day.

    Advance plans give a breakfast deadline; delay plans give a fixed
    breakfast window. Exactly one of the two is set.
    """

    lunch: list[str]  # ["12:00", "13:30"]
    dinner_end_by: str
    breakfast_by: str | None = None
    breakfast: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize only the keys of this direction's meal shape."""
        result: dict[str, Any] = {}
        if self.breakfast_by is not None:
            result["breakfast_by"] = self.breakfast_by
        if self.breakfast is not None:
            result["breakfast"] = list(self.breakfast)
        result["lunch"] = list(self.lunch)
        result["dinner_end_by"] = self.dinner_end_by
        return result


@dataclass(frozen=True)
class NapWindow:
    """Nap allowance for one day."""

    allowed: bool
    latest: str  # "HH:MM", latest nap start
    max_minutes: int


@dataclass(frozen=True)
class ShiftPlanDay:
    """One day of a wake-time migration. Invariant: bed == wake - sleep need."""

    date: str  # "2026-01-12" ISO date in the request timezone
    tz: str
    wake: str
    bed: str
    light_seek: list[list[str]]  # [[start, end], ...]
    light_avoid: list[list[str]]
    exercise_window: list[str]  # [start, end]
    meals: MealGuidance
    nap: NapWindow

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "tz": self.tz,
            "wake": self.wake,
            "bed": self.bed,
            "light_seek": [list(window) for window in self.light_seek],
            "light_avoid": [list(window) for window in self.light_avoid],
            "exercise_window": list(self.exercise_window),
            "meals": self.meals.to_dict(),
            "nap": {
                "allowed": self.nap.allowed,
                "latest": self.nap.latest,
                "max_minutes": self.nap.max_minutes,
            },
        }


@dataclass(frozen=True)
class ShiftPlan:
    """Output of the planner."""

    tz: str
    direction: Direction
    target_wake: str
    plan: list[ShiftPlanDay]
    arrival_day: int | None = None  # First day index whose wake equals the target

    def to_dict(self) -> dict[str, Any]:
        return {
            "tz": self.tz,
            "direction": self.direction,
            "target_wake": self.target_wake,
            "arrival_day": self.arrival_day,
            "plan": [day.to_dict() for day in self.plan],
        }


# =============================================================================
# Sample Types
# =============================================================================


@dataclass(frozen=True)
class FeatureRecord:
    """Precomputed per-session features (users/{uid}/features_sessions)."""

    created_at: datetime | None = None
    rt_z: float | None = None
    rt_median_ms: float | None = None
    time_of_day_hour: int | None = None
    mins_since_last_meal: float | None = None
    last_meal_type: str | None = None


@dataclass(frozen=True)
class SessionRecord:
    """Raw game session (users/{uid}/gameSessions)."""

    started_at: datetime | None = None
    rt_median_ms: float | None = None
    hour: int | None = None  # Local hour of started_at
    mins_since_last_meal: float | None = None
    last_meal_type: str | None = None


@dataclass(frozen=True)
class ScoredSample:
    """
    A normalized performance sample.

    score is always higher-is-better (the negated robust z-score of latency),
    regardless of which source produced it.
    """

    score: float
    rt_z: float
    hour: int | None = None  # Local hour of day, 0-23
    mins_since_last_meal: float | None = None
    last_meal_type: str | None = None
    taken_at: datetime | None = None


SourceName = Literal["features", "sessions"]


@dataclass(frozen=True)
class Precomputed:
    """Samples read from precomputed feature records."""

    samples: list[ScoredSample]
    record_count: int  # Documents fetched, before exclusions

    source: SourceName = field(default="features", init=False)


@dataclass(frozen=True)
class Derived:
    """Samples scored from raw sessions against their own median/MAD baseline."""

    samples: list[ScoredSample]
    record_count: int
    baseline_median: float
    baseline_mad: float

    source: SourceName = field(default="sessions", init=False)


NormalizedSamples = Precomputed | Derived


# =============================================================================
# Estimation Results
# =============================================================================


@dataclass(frozen=True)
class BestWindow:
    """Best contiguous window of hours. end_hour wraps past midnight."""

    start_hour: int
    end_hour: int
    sample_count: int
    median_score: float


@dataclass(frozen=True)
class GroupSummary:
    """Robust center of one context group."""

    bucket: Any  # Group key (hour, band label, weekday...)
    n: int
    median_score: float


@dataclass
class PeakEstimate:
    """Peak-window estimate. window is None when evidence is insufficient."""

    window: BestWindow | None
    source: SourceName | None
    sample_count: int
    status: str | None = None

    @property
    def available(self) -> bool:
        return self.window is not None


@dataclass
class MealEffectSummary:
    """Performance by time since last meal, best band first."""

    summary: list[GroupSummary]
    source: SourceName | None
    sample_count: int
    status: str | None = None

    @property
    def available(self) -> bool:
        return any(group.n > 0 for group in self.summary)
