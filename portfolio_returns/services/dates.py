"""Calendar-day helpers. Every day boundary in the service is UTC midnight."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def to_utc_date(value: datetime | date | str) -> date:
    """Truncate ``value`` to its UTC calendar day.

    Naive datetimes are taken to be UTC already (SQLite hands them back that way).
    """

    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def generate_date_range(start: datetime | date, end: datetime | date) -> list[date]:
    """Every UTC day from ``start`` to ``end`` inclusive; empty when end precedes start."""

    first = to_utc_date(start)
    last = to_utc_date(end)
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


__all__ = ["to_utc_date", "as_utc", "utc_today", "generate_date_range"]
