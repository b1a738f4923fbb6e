from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    """Clock event kind."""

    IN = "IN"
    OUT = "OUT"


class SessionStatus(str, Enum):
    """Display status of a reconstructed session."""

    COMPLETED = "正常"
    OPEN = "稼働中"


class PairingPolicy(str, Enum):
    SINGLE_SLOT = "single_slot"
    STACK = "stack"


class ReportSortKey(str, Enum):
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    SITE_NAME = "siteName"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
