"""
Scheduling layer for wake-time realignment.

- step_policy: how far wake time moves each day
- window_planner: light, meal, exercise and nap windows for a day
"""

from .step_policy import arc_matches_direction, daily_step, remaining_offset
from .window_planner import DayWindows, plan_day_windows

__all__ = [
    "arc_matches_direction",
    "daily_step",
    "remaining_offset",
    "DayWindows",
    "plan_day_windows",
]
