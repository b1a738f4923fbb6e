from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.datetime_utils import jst_day_key, minutes_between, parse_timestamp_ms, round_half_up
from ..common.lookup import (
    normalize_lookup_text,
    normalize_machine_identifier,
    parse_flag,
    read_lookup,
    unwrap_fields,
)
from ..punches.normalizer import MACHINE_ID_KEYS, MACHINE_NAME_KEYS

START_KEYS = ("start", "start (JST)")
END_KEYS = ("end", "end (JST)")
SITE_NAME_KEYS = ("siteName", "site name", "site")
SITE_RECORD_KEYS = ("siteRecordId", "siteId", "site (record)")
CLIENT_NAME_KEYS = ("clientName", "client name", "clientName (from site)")
WORK_DESCRIPTION_KEYS = ("workDescription", "work description")
USER_NAME_KEYS = ("name (from user)", "userName", "username", "name")

COMPLETED_STATUSES = {"close", "closed", "completed", "complete", "正常"}
OPEN_STATUSES = {"open", "稼働中"}


@dataclass(frozen=True)
class SessionReportRow:
    """Read-model for a pre-built session row (``work_sessions`` table)."""

    id: str
    date: Optional[str]
    year: Optional[int]
    month: Optional[int]
    day: Optional[int]
    start: Optional[str]
    end: Optional[str]
    start_ms: Optional[int]
    end_ms: Optional[int]
    duration_min: Optional[int]
    site_name: Optional[str] = None
    site_record_id: Optional[str] = None
    client_name: Optional[str] = None
    work_description: Optional[str] = None
    user_id: Optional[int] = None
    user_record_id: Optional[str] = None
    user_name: Optional[str] = None
    machine_id: Optional[str] = None
    machine_name: Optional[str] = None
    status: Optional[str] = None
    is_completed: bool = False
    auto_generated: bool = False

    @property
    def hours(self) -> Optional[float]:
        if self.duration_min is None:
            return None
        return round(max(0, self.duration_min) / 60, 2)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value) if value == value and abs(value) != float("inf") else None
    text = normalize_lookup_text(value)
    if text is None:
        return None
    try:
        return int(float(text))
    except ValueError:
        return None


def _as_minutes(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return round_half_up(number)


def _split_date(text: Optional[str]) -> tuple[Optional[int], Optional[int], Optional[int]]:
    if not text:
        return None, None, None
    parts = text[:10].split("-")
    if len(parts) != 3:
        return None, None, None
    try:
        return int(parts[0]), int(parts[1]), int(parts[2])
    except ValueError:
        return None, None, None


def _completed(status: Optional[str], start_ms: Optional[int], end_ms: Optional[int]) -> bool:
    if status:
        lowered = status.lower()
        if lowered in COMPLETED_STATUSES:
            return True
        if lowered in OPEN_STATUSES:
            return False
    return start_ms is not None and end_ms is not None and end_ms > start_ms


def normalize_session_row(payload: Mapping[str, Any]) -> SessionReportRow:
    fields = unwrap_fields(payload)

    start = read_lookup(fields, START_KEYS)
    end = read_lookup(fields, END_KEYS)
    start_ms = parse_timestamp_ms(start) if start else None
    end_ms = parse_timestamp_ms(end) if end else None

    date_text = normalize_lookup_text(fields.get("date"))
    if not date_text and start_ms is not None:
        date_text = jst_day_key(start_ms)
    d_year, d_month, d_day = _split_date(date_text)
    year = _as_int(fields.get("year")) or d_year
    month = _as_int(fields.get("month")) or d_month
    day = _as_int(fields.get("day")) or d_day

    duration = _as_minutes(fields.get("durationMin"))
    if duration is None and start_ms is not None and end_ms is not None and end_ms > start_ms:
        duration = minutes_between(start_ms, end_ms)

    user_field = fields.get("user")
    user_record_id = (
        normalize_lookup_text(user_field[0]) if isinstance(user_field, list) and user_field
        else normalize_lookup_text(fields.get("userRecordId"))
    )
    status = normalize_lookup_text(fields.get("status"))

    return SessionReportRow(
        id=normalize_lookup_text(fields.get("id"))
        or normalize_lookup_text(payload.get("id"))
        or f"{date_text or 'session'}-{start_ms or 0}",
        date=date_text,
        year=year,
        month=month,
        day=day,
        start=start,
        end=end,
        start_ms=start_ms,
        end_ms=end_ms,
        duration_min=duration,
        site_name=read_lookup(fields, SITE_NAME_KEYS),
        site_record_id=read_lookup(fields, SITE_RECORD_KEYS),
        client_name=read_lookup(fields, CLIENT_NAME_KEYS),
        work_description=read_lookup(fields, WORK_DESCRIPTION_KEYS),
        user_id=_as_int(fields.get("userId")),
        user_record_id=user_record_id,
        user_name=read_lookup(fields, USER_NAME_KEYS),
        machine_id=read_lookup(fields, MACHINE_ID_KEYS, normalize_machine_identifier),
        machine_name=read_lookup(fields, MACHINE_NAME_KEYS),
        status=status,
        is_completed=_completed(status, start_ms, end_ms),
        auto_generated=parse_flag(fields.get("autoGenerated")),
    )
