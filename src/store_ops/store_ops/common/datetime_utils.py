from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Protocol

from ..core.exceptions import ValidationError


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Local wall clock."""

    def now(self) -> datetime:
        return now_local()


class FixedClock:
    """Clock frozen at one moment (backfills, tests)."""

    def __init__(self, moment: datetime):
        self._moment = moment

    def now(self) -> datetime:
        return self._moment


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    text = str(value or "").strip()
    try:
        if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", text):
            raise ValueError(text)
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid {field_name}. Please use YYYY-MM-DD")


def parse_iso_datetime(value: str, field_name: str = "timestamp") -> datetime:
    """Parse an ISO-8601 timestamp; timezone-aware values become naive local time."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid {field_name}. Please use ISO format YYYY-MM-DDTHH:MM[:SS]")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def date_range(start: date, end: date) -> list[date]:
    """Every calendar date from start to end, both inclusive."""
    if end < start:
        raise ValidationError("start_date must not be after end_date")
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
