from __future__ import annotations

from datetime import date, datetime, timezone

from ..core.constants import MONTH_ABBREVIATIONS


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_iso_timestamp(value: datetime) -> str:
    """ISO-8601, with a trailing Z for aware values."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat() + "Z"
    return value.isoformat()


def parse_iso_timestamp(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def epoch_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days from start to end, both ends counted."""
    return (end - start).days + 1


def month_abbrev(value: date) -> str:
    return MONTH_ABBREVIATIONS[value.month - 1]


def last_n_month_abbrevs(today: date, n: int) -> list[str]:
    """Short month names for the last n months, oldest first, ending at today's month."""
    idx = today.month - 1
    return [MONTH_ABBREVIATIONS[(idx - i) % 12] for i in range(n - 1, -1, -1)]
