"""
Test helper functions for plan and estimation tests.

These functions can be imported by test modules for plan analysis and for
building store documents.
"""

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from peakshift.clock_math import signed_offset_minutes
from peakshift.store import InMemorySampleStore
from peakshift.types import ScoredSample, ShiftPlan

PLAN_START = date(2026, 1, 12)
BASE_DAY = datetime(2026, 1, 12, tzinfo=timezone.utc)  # A Monday


def distance_to_target(wake: str, target: str) -> int:
    """Absolute shortest distance in minutes between two HH:MM times."""
    return abs(signed_offset_minutes(wake, target))


def plan_wakes(plan: ShiftPlan) -> list[str]:
    """Wake times of every plan day, in order."""
    return [day.wake for day in plan.plan]


def at_hour(hour: int, minute: int = 0, days_ago: int = 0) -> str:
    """ISO UTC timestamp at the given hour, days_ago days before BASE_DAY."""
    moment = BASE_DAY - timedelta(days=days_ago) + timedelta(hours=hour, minutes=minute)
    return moment.isoformat().replace("+00:00", "Z")


def feature_doc(
    hour: int,
    rt_z: float | None = 0.0,
    mins_since_last_meal: float | None = None,
    days_ago: int = 0,
    **extra,
) -> dict:
    """Precomputed feature document as the store returns it."""
    doc = {"createdAt": at_hour(hour, days_ago=days_ago), "timeOfDayHour": hour}
    if rt_z is not None:
        doc["rtZ"] = rt_z
    if mins_since_last_meal is not None:
        doc["minsSinceLastMeal"] = mins_since_last_meal
    doc.update(extra)
    return doc


def session_doc(
    hour: int,
    rt_median_ms: float | None = 300.0,
    mins_since_last_meal: float | None = None,
    days_ago: int = 0,
    minute: int = 0,
) -> dict:
    """Raw game session document as the store returns it."""
    doc = {"timestamp": at_hour(hour, minute=minute, days_ago=days_ago)}
    if rt_median_ms is not None:
        doc["rtMedianMs"] = rt_median_ms
    if mins_since_last_meal is not None:
        doc["minsSinceLastMeal"] = mins_since_last_meal
    return doc


def scored(score: float, hour: int | None = None, mins: float | None = None) -> ScoredSample:
    """ScoredSample with the given score."""
    return ScoredSample(score=score, rt_z=-score, hour=hour, mins_since_last_meal=mins)


def peak_at_14_features(per_hour: int = 3) -> list[dict]:
    """
    Feature documents with every hour covered and hours 14-15 clearly best.

    Off-peak scores jitter within +/-0.2; peak hours score 2.0.
    """
    docs = []
    for hour in range(24):
        for i in range(per_hour):
            if hour in (14, 15):
                rt_z = -2.0
            else:
                rt_z = (-0.2, 0.0, 0.2)[i % 3]
            docs.append(feature_doc(hour, rt_z=rt_z, days_ago=i))
    return docs


class FailingStore:
    """SampleStore whose reads fail, on features only or on both collections."""

    def __init__(self, fail_on: str = "features"):
        self.fail_on = fail_on
        self.calls: list[str] = []

    async def fetch_features(self, user_id: str, limit: int) -> list[dict]:
        self.calls.append("features")
        if self.fail_on == "features":
            raise ConnectionError("document store unreachable")
        return []

    async def fetch_sessions(self, user_id: str, limit: int) -> list[dict]:
        self.calls.append("sessions")
        raise ConnectionError("document store unreachable")


class RecordingStore(InMemorySampleStore):
    """InMemorySampleStore that records the limits it was asked for."""

    def __init__(self) -> None:
        super().__init__()
        self.limits: list[tuple[str, int]] = []

    async def fetch_features(self, user_id: str, limit: int) -> list[dict]:
        self.limits.append(("features", limit))
        return await super().fetch_features(user_id, limit)

    async def fetch_sessions(self, user_id: str, limit: int) -> list[dict]:
        self.limits.append(("sessions", limit))
        return await super().fetch_sessions(user_id, limit)
