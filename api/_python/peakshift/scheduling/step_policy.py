"""
Daily wake-time step policy.

Wake time moves toward the target by at most MAX_DAILY_STEP_MINUTES per day
and lands on the target exactly once the remaining distance fits in one step.

The remaining distance is the shortest signed arc on the 24h clock, in
(-720, 720]. Stepping along that arc means the distance to the target never
grows and the plan never overshoots, even when the two wake times straddle
midnight. At exactly 12h apart both arcs are equal and the requested
direction picks the side.
"""

import logging

from ..clock_math import HALF_DAY_MINUTES, signed_offset_minutes
from ..config import MAX_DAILY_STEP_MINUTES
from ..types import Direction

logger = logging.getLogger(__name__)


def direction_sign(direction: Direction) -> int:
    """-1 for advance (earlier), +1 for delay (later)."""
    return -1 if direction == "advance" else 1


def remaining_offset(wake: str, target: str, direction: Direction) -> int:
    """
    Signed minutes from wake to target along the arc the plan will travel.

    Returns:
        Negative to move earlier, positive to move later, 0 when arrived
    """
    diff = signed_offset_minutes(wake, target)
    if abs(diff) == HALF_DAY_MINUTES:
        return direction_sign(direction) * HALF_DAY_MINUTES
    return diff


def daily_step(
    wake: str,
    target: str,
    direction: Direction,
    max_step: int = MAX_DAILY_STEP_MINUTES,
) -> int:
    """
    Minutes to move wake time today.

    Args:
        wake: Today's starting wake time "HH:MM"
        target: Target wake time "HH:MM"
        direction: Requested shift direction
        max_step: Largest allowed move in one day

    Returns:
        Signed step; equals the remaining offset when it is within max_step
    """
    offset = remaining_offset(wake, target, direction)
    if abs(offset) <= max_step:
        return offset
    return max_step if offset > 0 else -max_step


def arc_matches_direction(current: str, target: str, direction: Direction) -> bool:
    """True when the shortest arc from current to target runs the requested way."""
    offset = remaining_offset(current, target, direction)
    return offset == 0 or (offset < 0) == (direction == "advance")
