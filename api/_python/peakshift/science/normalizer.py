"""
Robust sample normalization.

Turns store documents into ScoredSample values whose score is higher-is-better:
score = -(rt - median) / MAD, so a faster reaction time scores higher.

Two sources feed this module:
- Precomputed feature records, which usually already carry rtZ
- Raw game sessions, which only carry a median reaction time and are scored
  against the median/MAD of the fetched set

Fields that are missing or non-finite stay None. A sample without a usable
latency is dropped; a sample without an hour (or meal recency) is kept but
skipped by any grouping that needs that field.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

import pytz

from ..types import Derived, FeatureRecord, Precomputed, ScoredSample, SessionRecord
from .robust_stats import robust_scale, robust_z


def finite_number(value: Any) -> float | None:
    """Return value as a float if it is a finite number (or numeric string), else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a store timestamp.

    Accepts datetime objects, ISO-8601 strings and epoch milliseconds.
    Anything else (including unparseable strings) gives None.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    millis = finite_number(value)
    if millis is None:
        return None
    try:
        return datetime.fromtimestamp(millis / 1000, pytz.UTC)
    except (OverflowError, OSError, ValueError):
        return None


def local_hour(moment: datetime | None, tz: pytz.BaseTzInfo) -> int | None:
    """Hour of day in tz. Naive datetimes are taken as already local."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.hour
    return moment.astimezone(tz).hour


def _hour_of_day(value: Any) -> int | None:
    hour = finite_number(value)
    if hour is None or hour != int(hour) or not 0 <= hour <= 23:
        return None
    return int(hour)


def _meal_type(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def feature_from_dict(data: Mapping[str, Any], tz: pytz.BaseTzInfo = pytz.UTC) -> FeatureRecord:
    """Parse a precomputed feature document."""
    created_at = parse_timestamp(data.get("createdAt"))
    hour = _hour_of_day(data.get("timeOfDayHour"))
    if hour is None:
        started_at = parse_timestamp(data.get("gameStartAt")) or created_at
        hour = local_hour(started_at, tz)

    return FeatureRecord(
        created_at=created_at,
        rt_z=finite_number(data.get("rtZ")),
        rt_median_ms=finite_number(data.get("rtMedianMs")),
        time_of_day_hour=hour,
        mins_since_last_meal=finite_number(data.get("minsSinceLastMeal")),
        last_meal_type=_meal_type(data.get("lastMealType")),
    )


def session_from_dict(data: Mapping[str, Any], tz: pytz.BaseTzInfo = pytz.UTC) -> SessionRecord:
    """Parse a raw game session document. gameStartAt wins over timestamp."""
    started_at = parse_timestamp(data.get("gameStartAt")) or parse_timestamp(
        data.get("timestamp")
    )
    return SessionRecord(
        started_at=started_at,
        rt_median_ms=finite_number(data.get("rtMedianMs")),
        hour=local_hour(started_at, tz),
        mins_since_last_meal=finite_number(data.get("minsSinceLastMeal")),
        last_meal_type=_meal_type(data.get("lastMealType")),
    )


def _scored(
    rt_z: float,
    hour: int | None,
    mins_since_last_meal: float | None,
    last_meal_type: str | None,
    taken_at: datetime | None,
) -> ScoredSample:
    return ScoredSample(
        score=-rt_z,
        rt_z=rt_z,
        hour=hour,
        mins_since_last_meal=mins_since_last_meal,
        last_meal_type=last_meal_type,
        taken_at=taken_at,
    )


def normalize_features(records: Sequence[FeatureRecord]) -> Precomputed:
    """
    Score precomputed feature records.

    Records with rtZ are used as-is. Records missing rtZ but carrying
    rtMedianMs are scored against the median/MAD of the set's latencies.
    Records with neither are excluded.
    """
    latencies = [r.rt_median_ms for r in records if r.rt_median_ms is not None]
    center, spread = robust_scale(latencies)

    samples = []
    for record in records:
        if record.rt_z is not None:
            rt_z = record.rt_z
        elif record.rt_median_ms is not None:
            rt_z = robust_z(record.rt_median_ms, center, spread)
        else:
            continue
        samples.append(
            _scored(
                rt_z,
                record.time_of_day_hour,
                record.mins_since_last_meal,
                record.last_meal_type,
                record.created_at,
            )
        )

    return Precomputed(samples=samples, record_count=len(records))


def normalize_sessions(records: Sequence[SessionRecord]) -> Derived:
    """
    Score raw sessions against their own median/MAD baseline.

    Sessions without a finite rtMedianMs are excluded rather than scored as
    the median, which would pull their hour's bucket toward zero.
    """
    latencies = [r.rt_median_ms for r in records if r.rt_median_ms is not None]
    center, spread = robust_scale(latencies)

    samples = [
        _scored(
            robust_z(record.rt_median_ms, center, spread),
            record.hour,
            record.mins_since_last_meal,
            record.last_meal_type,
            record.started_at,
        )
        for record in records
        if record.rt_median_ms is not None
    ]

    return Derived(
        samples=samples,
        record_count=len(records),
        baseline_median=center,
        baseline_mad=spread,
    )


def features_from_documents(
    documents: Iterable[Mapping[str, Any]], tz: pytz.BaseTzInfo = pytz.UTC
) -> list[FeatureRecord]:
    return [feature_from_dict(doc, tz) for doc in documents]


def sessions_from_documents(
    documents: Iterable[Mapping[str, Any]], tz: pytz.BaseTzInfo = pytz.UTC
) -> list[SessionRecord]:
    return [session_from_dict(doc, tz) for doc in documents]
