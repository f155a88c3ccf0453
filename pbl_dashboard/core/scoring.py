"""Shared numeric and date helpers for the 1-5 scoring functions."""

import math
from datetime import datetime, timezone

from dateutil.parser import isoparse

MIN_SCORE = 1.0
MAX_SCORE = 5.0
NEUTRAL_SCORE = 3.0

SECONDS_PER_DAY = 60 * 60 * 24


def round1(value: float) -> float:
    """Round to one decimal place, halves away from zero for positive values."""
    return math.floor(value * 10 + 0.5) / 10


def clamp_score(value: float, low: float = MIN_SCORE, high: float = MAX_SCORE) -> float:
    """Round to one decimal and clamp into [low, high]."""
    return max(low, min(high, round1(value)))


def weighted_average(components: list[tuple[float, float]]) -> float:
    """
    Combine (value, weight) pairs into a weighted mean.

    Returns NEUTRAL_SCORE when the weights total zero.
    """
    weight_sum = sum(weight for _, weight in components)
    if weight_sum <= 0:
        return NEUTRAL_SCORE
    return sum(value * weight for value, weight in components) / weight_sum


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO-8601 date or datetime string; None for empty input."""
    if not value:
        return None
    return to_utc(isoparse(value))


def days_until(deadline: str | None, reference_date: datetime | None = None) -> float | None:
    """Fractional days from reference_date to deadline (negative when overdue)."""
    due = parse_iso(deadline)
    if due is None:
        return None
    ref = to_utc(reference_date) if reference_date else now_utc()
    return (due - ref).total_seconds() / SECONDS_PER_DAY
