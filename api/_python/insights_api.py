"""
Request/response glue for the plan and insights endpoints.

Provides three operations over JSON-shaped dicts:
1. generate_plan - wake-time realignment plan
2. peak_window - best 2-hour performance window
3. meals_effect - performance by time since last meal

The client sends camelCase keys; snake_case equivalents are accepted too.
"""

import math
from dataclasses import asdict
from typing import Any

from peakshift.config import (
    DEFAULT_MEAL_LOOKBACK_DAYS,
    DEFAULT_MEAL_MAX_SESSIONS,
    DEFAULT_PEAK_LOOKBACK,
    DEFAULT_PLAN_DAYS,
    DEFAULT_SLEEP_NEED_MINUTES,
)
from peakshift.errors import MalformedInput
from peakshift.estimator import (
    estimate_peak_window,
    format_best_window,
    summarize_meal_effect,
)
from peakshift.shift_planner import ShiftPlanGenerator
from peakshift.store import SampleStore
from peakshift.types import ShiftPlanRequest


def _pick(data: dict[str, Any], *names: str, default: Any = None) -> Any:
    """First present key among names."""
    for name in names:
        if name in data and data[name] is not None:
            return data[name]
    return default


def _require(data: dict[str, Any], *names: str) -> Any:
    value = _pick(data, *names)
    if value is None:
        raise MalformedInput(f"Missing required field: {names[0]}")
    return value


def _whole_number(value: Any, name: str) -> int:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or value != int(value)
    ):
        raise MalformedInput(f"{name} must be a whole number")
    return int(value)


def plan_request_from_dict(data: dict[str, Any]) -> ShiftPlanRequest:
    """
    Build a ShiftPlanRequest from a client payload.

    Raises:
        MalformedInput: on missing fields or invalid values
    """
    if not isinstance(data, dict):
        raise MalformedInput("Request body must be a JSON object")

    return ShiftPlanRequest(
        tz=_pick(data, "tz", "timezone", default="UTC"),
        current_wake=_require(data, "currentWake", "current_wake"),
        target_wake=_require(data, "targetWake", "target_wake"),
        direction=_require(data, "direction"),
        sleep_need_minutes=_whole_number(
            _pick(
                data,
                "sleepNeedMin",
                "sleepNeedMinutes",
                "sleep_need_minutes",
                default=DEFAULT_SLEEP_NEED_MINUTES,
            ),
            "sleepNeedMin",
        ),
        days=_whole_number(_pick(data, "days", default=DEFAULT_PLAN_DAYS), "days"),
    )


def generate_plan(params: dict[str, Any]) -> dict[str, Any]:
    """Plan payload -> {"plan": [...], ...}."""
    request = plan_request_from_dict(params)
    return ShiftPlanGenerator().generate_plan(request).to_dict()


def _user_id(params: dict[str, Any]) -> str:
    uid = _pick(params, "uid", "user_id")
    if not isinstance(uid, str) or not uid:
        raise MalformedInput("uid required")
    return uid


async def peak_window(store: SampleStore, params: dict[str, Any]) -> dict[str, Any]:
    """Peak payload -> {"best": {...} | None, "status": str | None, ...}."""
    estimate = await estimate_peak_window(
        store,
        _user_id(params),
        lookback=_whole_number(_pick(params, "lookback", default=DEFAULT_PEAK_LOOKBACK), "lookback"),
        tz=_pick(params, "tz", default="UTC"),
    )
    return {
        "best": asdict(estimate.window) if estimate.window else None,
        "label": format_best_window(estimate.window),
        "status": estimate.status,
        "source": estimate.source,
        "sample_count": estimate.sample_count,
    }


async def meals_effect(store: SampleStore, params: dict[str, Any]) -> dict[str, Any]:
    """Diet payload -> {"summary": [{bucket, n, medianScore}, ...], ...}."""
    result = await summarize_meal_effect(
        store,
        _user_id(params),
        lookback_days=_whole_number(
            _pick(params, "lookbackDays", "lookback_days", default=DEFAULT_MEAL_LOOKBACK_DAYS),
            "lookbackDays",
        ),
        max_sessions=_whole_number(
            _pick(params, "maxSessions", "max_sessions", default=DEFAULT_MEAL_MAX_SESSIONS),
            "maxSessions",
        ),
        tz=_pick(params, "tz", default="UTC"),
    )
    return {
        "summary": [
            {"bucket": group.bucket, "n": group.n, "medianScore": group.median_score}
            for group in result.summary
        ],
        "status": result.status,
        "source": result.source,
    }
