"""
Behavioral windows for one plan day.

Every window is a fixed offset from the day's wake or bed time, taken from
the direction's template in DIRECTION_CONFIGS:

- Advance: morning light right after waking, dim light for the last 3h,
  late-morning exercise, early breakfast, dinner done 3h before bed
- Delay: evening light ~9-10h after waking, a shorter dim window, evening
  exercise, a fixed breakfast window, dinner done 2h before bed

Naps are the same for both: up to 20 minutes, started no later than 6.5h
after waking.
"""

from dataclasses import dataclass

from ..clock_math import add_minutes
from ..config import (
    NAP_LATEST_AFTER_WAKE_MINUTES,
    NAP_MAX_MINUTES,
    DirectionConfig,
    get_direction_config,
)
from ..types import Direction, MealGuidance, NapWindow


@dataclass(frozen=True)
class DayWindows:
    """Windows derived from one wake/bed pair."""

    light_seek: list[list[str]]
    light_avoid: list[list[str]]
    exercise_window: list[str]
    meals: MealGuidance
    nap: NapWindow


def _after(anchor: str, offsets: tuple[int, int]) -> list[str]:
    start, end = offsets
    return [add_minutes(anchor, start), add_minutes(anchor, end)]


def plan_meals(wake: str, bed: str, config: DirectionConfig) -> MealGuidance:
    """Meal timing for the day. Advance templates set breakfast_by, delay ones breakfast."""
    breakfast_by = None
    if config.breakfast_by_after_wake is not None:
        breakfast_by = add_minutes(wake, config.breakfast_by_after_wake)

    return MealGuidance(
        breakfast_by=breakfast_by,
        breakfast=list(config.breakfast_window) if config.breakfast_window else None,
        lunch=list(config.lunch_window),
        dinner_end_by=add_minutes(bed, -config.dinner_end_before_bed),
    )


def plan_nap(wake: str) -> NapWindow:
    return NapWindow(
        allowed=True,
        latest=add_minutes(wake, NAP_LATEST_AFTER_WAKE_MINUTES),
        max_minutes=NAP_MAX_MINUTES,
    )


def plan_day_windows(wake: str, bed: str, direction: Direction) -> DayWindows:
    """
    Derive light, exercise, meal and nap windows for one day.

    Args:
        wake: The day's wake time "HH:MM"
        bed: The day's bed time "HH:MM"
        direction: "advance" or "delay"
    """
    config = get_direction_config(direction)

    return DayWindows(
        light_seek=[_after(wake, config.light_seek_after_wake)],
        light_avoid=[[add_minutes(bed, -config.light_avoid_before_bed), bed]],
        exercise_window=_after(wake, config.exercise_after_wake),
        meals=plan_meals(wake, bed, config),
        nap=plan_nap(wake),
    )
