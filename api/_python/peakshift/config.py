"""
Tunable constants for plan generation and performance estimation.

Plan offsets are relative to the day's wake time or bed time, in minutes.
Each direction gets its own template since an advance (earlier wake) relies on
morning light and early meals while a delay (later wake) relies on evening
light and later activity.
"""

from dataclasses import dataclass

# Plan defaults
DEFAULT_SLEEP_NEED_MINUTES = 540  # 9h, teen sleep need
DEFAULT_PLAN_DAYS = 7
MAX_PLAN_DAYS = 30
MAX_DAILY_STEP_MINUTES = 30  # Wake time moves at most 30 min per day

# Nap rules are direction independent
NAP_LATEST_AFTER_WAKE_MINUTES = 480 - 90
NAP_MAX_MINUTES = 20


@dataclass(frozen=True)
class DirectionConfig:
    """Behavioral window template for one shift direction."""

    light_seek_after_wake: tuple[int, int]  # (start, end) minutes after wake
    light_avoid_before_bed: int  # Dim light for this many minutes before bed
    exercise_after_wake: tuple[int, int]
    dinner_end_before_bed: int
    breakfast_by_after_wake: int | None = None  # Advance: relative deadline
    breakfast_window: tuple[str, str] | None = None  # Delay: fixed clock window
    lunch_window: tuple[str, str] = ("12:00", "13:30")


DIRECTION_CONFIGS: dict[str, DirectionConfig] = {
    "advance": DirectionConfig(
        light_seek_after_wake=(15, 60),  # Morning light soon after wake
        light_avoid_before_bed=180,  # Dim the last 3h
        exercise_after_wake=(120, 240),  # Late morning
        dinner_end_before_bed=180,
        breakfast_by_after_wake=90,
        lunch_window=("12:00", "13:30"),
    ),
    "delay": DirectionConfig(
        light_seek_after_wake=(540, 600),  # ~9-10h after wake (evening)
        light_avoid_before_bed=90,  # Shorter dim window
        exercise_after_wake=(540, 660),  # Late afternoon/evening
        dinner_end_before_bed=120,
        breakfast_window=("08:00", "10:00"),
        lunch_window=("12:30", "14:00"),
    ),
}


def get_direction_config(direction: str) -> DirectionConfig:
    """Get the window template for a shift direction."""
    return DIRECTION_CONFIGS[direction]


# Estimation
MAX_FETCH_LIMIT = 500
DEFAULT_PEAK_LOOKBACK = 200
DEFAULT_MEAL_LOOKBACK_DAYS = 60
DEFAULT_MEAL_MAX_SESSIONS = 400


@dataclass(frozen=True)
class EvidenceConfig:
    """Evidence thresholds for one estimator.

    min_precomputed: precomputed feature records needed before raw sessions
        are consulted instead.
    min_samples: scored samples a group (or window) needs before it can win.
    """

    min_precomputed: int
    min_samples: int
    window_hours: int = 2


PEAK_EVIDENCE = EvidenceConfig(min_precomputed=5, min_samples=5, window_hours=2)
MEAL_EVIDENCE = EvidenceConfig(min_precomputed=30, min_samples=0)
