"""
Wake-time realignment plan generation.

Walks wake time from the current value toward the target, one day at a time:

1. Step wake time toward the target (at most 30 min/day, exact arrival)
2. Bed time = wake time - sleep need
3. Light, meal, exercise and nap windows from the direction's template
4. Date the day in the request timezone

The whole plan is built before it is returned, so a malformed value anywhere
fails the request without a partial plan.
"""

import logging
from datetime import date

from .clock_math import add_minutes, date_labels, get_current_datetime_in_tz
from .config import MAX_DAILY_STEP_MINUTES
from .scheduling.step_policy import arc_matches_direction, daily_step
from .scheduling.window_planner import plan_day_windows
from .types import ShiftPlan, ShiftPlanDay, ShiftPlanRequest

logger = logging.getLogger(__name__)


class ShiftPlanGenerator:
    """
    Day-by-day wake-time migration planner.

    Pure over its inputs: "today" is the only ambient value, and callers can
    pass it in.
    """

    def __init__(self, max_step_minutes: int = MAX_DAILY_STEP_MINUTES):
        """
        Initialize generator.

        Args:
            max_step_minutes: Largest daily wake-time move
        """
        self.max_step_minutes = max_step_minutes

    def generate_plan(self, request: ShiftPlanRequest, today: date | None = None) -> ShiftPlan:
        """
        Generate the plan for a request.

        Args:
            request: Validated ShiftPlanRequest
            today: First plan date (defaults to today in request.tz)

        Returns:
            ShiftPlan with exactly request.days days

        Raises:
            MalformedInput: if today is not given and request.tz is unknown
        """
        if today is None:
            today = get_current_datetime_in_tz(request.tz).date()

        if not arc_matches_direction(request.current_wake, request.target_wake, request.direction):
            logger.warning(
                f"Requested {request.direction} from {request.current_wake} to "
                f"{request.target_wake} runs against the shortest arc; following the shortest arc"
            )

        dates = date_labels(today, request.days)
        plan: list[ShiftPlanDay] = []
        arrival_day = None
        wake = request.current_wake

        for day_index, date_label in enumerate(dates):
            step = daily_step(wake, request.target_wake, request.direction, self.max_step_minutes)
            next_wake = add_minutes(wake, step)
            bed = add_minutes(next_wake, -request.sleep_need_minutes)
            windows = plan_day_windows(next_wake, bed, request.direction)

            plan.append(
                ShiftPlanDay(
                    date=date_label,
                    tz=request.tz,
                    wake=next_wake,
                    bed=bed,
                    light_seek=windows.light_seek,
                    light_avoid=windows.light_avoid,
                    exercise_window=windows.exercise_window,
                    meals=windows.meals,
                    nap=windows.nap,
                )
            )

            if arrival_day is None and next_wake == request.target_wake:
                arrival_day = day_index
            wake = next_wake

        logger.debug(
            f"Planned {len(plan)} days {request.current_wake} -> {request.target_wake} "
            f"({request.direction}), arrival_day={arrival_day}"
        )

        return ShiftPlan(
            tz=request.tz,
            direction=request.direction,
            target_wake=request.target_wake,
            plan=plan,
            arrival_day=arrival_day,
        )


def generate_shift_plan(request: ShiftPlanRequest, today: date | None = None) -> ShiftPlan:
    """Convenience wrapper around ShiftPlanGenerator.generate_plan()."""
    return ShiftPlanGenerator().generate_plan(request, today)
