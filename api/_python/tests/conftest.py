"""
Pytest fixtures for plan and estimation tests.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import RecordingStore
from peakshift.shift_planner import ShiftPlanGenerator
from peakshift.types import ShiftPlanRequest

@pytest.fixture
def generator():
    """Default plan generator."""
    return ShiftPlanGenerator()


@pytest.fixture
def make_request():
    """Factory for plan requests with sensible defaults."""

    def _make(
        current_wake: str = "08:30",
        target_wake: str = "06:30",
        direction: str = "advance",
        sleep_need_minutes: int = 540,
        days: int = 7,
        tz: str = "America/Los_Angeles",
    ) -> ShiftPlanRequest:
        return ShiftPlanRequest(
            tz=tz,
            current_wake=current_wake,
            target_wake=target_wake,
            direction=direction,
            sleep_need_minutes=sleep_need_minutes,
            days=days,
        )

    return _make


@pytest.fixture
def store():
    """Empty in-memory sample store."""
    return RecordingStore()
