from __future__ import annotations

import re
from typing import Optional

from ..core.enums import ReportSortKey, SortOrder
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def require_date_string(value: Optional[str], field_name: str = "date") -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    text = value.strip()
    if not _DATE_RE.match(text):
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")
    try:
        parse_iso_date(text)
    except ValueError:
        raise ValidationError(f"{field_name} is not a calendar date")
    return text


def require_year_month(year, month) -> tuple[int, int]:
    try:
        y = int(year)
        m = int(month)
    except (TypeError, ValueError):
        raise ValidationError("year and month must be integers")
    if not 1 <= m <= 12:
        raise ValidationError("month must be between 1 and 12")
    if not 1970 <= y <= 9998:
        raise ValidationError("year is out of range")
    return y, m


def optional_sort_key(value: Optional[str]) -> Optional[ReportSortKey]:
    if not value:
        return None
    try:
        return ReportSortKey(value)
    except ValueError:
        raise ValidationError(f"unsupported sort key: {value}")


def require_sort_order(value: Optional[str]) -> SortOrder:
    if not value:
        return SortOrder.ASC
    try:
        return SortOrder(value.lower())
    except ValueError:
        raise ValidationError(f"unsupported sort order: {value}")
