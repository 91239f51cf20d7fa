"""
Order-statistic helpers.

Latency samples from tap and reaction games are heavy-tailed (a distracted
tap can take ten times the usual), so centers and spreads use the median and
the median absolute deviation rather than mean and standard deviation.

Every function here is total over finite input: an empty list has median 0
and a zero spread is replaced by 1.
"""

from collections.abc import Iterable, Sequence


def median(values: Iterable[float]) -> float:
    """
    Median of the values; 0.0 for an empty input.

    Even-length input averages the two middle values.
    """
    ordered = sorted(values)
    if not ordered:
        return 0.0
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2


def median_absolute_deviation(values: Sequence[float], center: float | None = None) -> float:
    """Median of |x - center|, center defaulting to the median of values. May be 0."""
    if center is None:
        center = median(values)
    return median(abs(v - center) for v in values)


def robust_scale(values: Sequence[float]) -> tuple[float, float]:
    """
    Baseline (median, MAD) for robust z-scores.

    A MAD of 0 (flat or single-valued data) becomes 1 so the z-score is the
    raw deviation instead of a division by zero.
    """
    center = median(values)
    spread = median_absolute_deviation(values, center)
    return center, spread or 1.0


def robust_z(value: float, center: float, spread: float) -> float:
    """(value - center) / spread."""
    return (value - center) / spread
