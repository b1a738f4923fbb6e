from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import pytz

from ..core.constants import JST_OFFSET_MS, JST_TIMEZONE

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_JST = pytz.timezone(JST_TIMEZONE)
# Instants whose JST wall clock still fits in a datetime.
_MIN_MS = (datetime.min.replace(tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1)
_MAX_MS = (datetime.max.replace(tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1) - JST_OFFSET_MS


@dataclass(frozen=True)
class UtcRange:
    start_utc_iso: str
    end_utc_iso: str


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_timestamp_ms(value: str) -> Optional[int]:
    """Parse an ISO-8601 instant into epoch milliseconds.

    Naive values are read as UTC. Returns None when the text is not a
    parseable instant or its JST wall clock falls outside the datetime range.
    """
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    ms = (parsed - _EPOCH) // timedelta(milliseconds=1)
    if not _MIN_MS <= ms <= _MAX_MS:
        return None
    return ms


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def minutes_between(start_ms: int, end_ms: int) -> int:
    """Whole minutes between two instants, rounded half up and floored at zero."""
    return max(0, round_half_up((end_ms - start_ms) / 60000))


def _shifted_jst(ms: int) -> datetime:
    # Fixed +9h shift read back as a UTC wall clock.
    return _EPOCH + timedelta(milliseconds=ms + JST_OFFSET_MS)


def jst_day_key(ms: int) -> str:
    return _shifted_jst(ms).strftime("%Y-%m-%d")


def jst_clock(ms: int) -> str:
    return _shifted_jst(ms).strftime("%H:%M")


def format_clock_tokyo(timestamp_ms: Optional[int]) -> Optional[str]:
    """Render an instant as HH:MM in the Asia/Tokyo civil time zone."""
    if timestamp_ms is None:
        return None
    instant = _EPOCH + timedelta(milliseconds=timestamp_ms)
    return instant.astimezone(_JST).strftime("%H:%M")


def format_clock_tokyo_from(value: Optional[str], fallback_ms: Optional[int] = None) -> Optional[str]:
    if fallback_ms is not None:
        return format_clock_tokyo(fallback_ms)
    if not value:
        return None
    return format_clock_tokyo(parse_timestamp_ms(value))


def to_utc_iso(ms: int) -> str:
    instant = _EPOCH + timedelta(milliseconds=ms)
    return instant.strftime("%Y-%m-%dT%H:%M:%S.") + f"{instant.microsecond // 1000:03d}Z"


def utc_range_of_jst_month(year: int, month: int) -> UtcRange:
    """[first day 00:00 JST, first day of next month 00:00 JST) expressed in UTC."""
    next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
    start = datetime(year, month, 1, tzinfo=timezone.utc) - timedelta(milliseconds=JST_OFFSET_MS)
    end = datetime(next_year, next_month, 1, tzinfo=timezone.utc) - timedelta(milliseconds=JST_OFFSET_MS)
    return UtcRange(
        start_utc_iso=to_utc_iso((start - _EPOCH) // timedelta(milliseconds=1)),
        end_utc_iso=to_utc_iso((end - _EPOCH) // timedelta(milliseconds=1)),
    )


def month_date_range(year: int, month: int) -> tuple[str, str]:
    """First day of the month and first day of the next month, as YYYY-MM-DD."""
    next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
    return f"{year:04d}-{month:02d}-01", f"{next_year:04d}-{next_month:02d}-01"


def next_date(value: str) -> str:
    return (parse_iso_date(value) + timedelta(days=1)).strftime("%Y-%m-%d")


def hours_decimal(minutes: int) -> Decimal:
    safe = max(0, int(minutes))
    return (Decimal(safe) / Decimal(60)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def hours_value(minutes: int) -> float:
    return float(hours_decimal(minutes))


def format_hours(minutes: int) -> str:
    """Hours with at most two decimals and no trailing zeros, e.g. ``7.5h``."""
    text = format(hours_decimal(minutes), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}h"
