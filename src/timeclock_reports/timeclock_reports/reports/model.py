from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional

from ..common.datetime_utils import UtcRange


@dataclass(frozen=True)
class DailySummary:
    """One calendar day of the month view."""

    date: str
    sites: tuple[str, ...]
    punches: int
    sessions: int
    hours: float

    def to_dict(self) -> dict:
        d = asdict(self)
        d["sites"] = list(self.sites)
        return d


@dataclass(frozen=True)
class SessionDetail:
    user_id: Optional[str]
    user_name: str
    site_name: Optional[str]
    start_ms: int
    start_log_id: str
    clock_in_at: str
    status: str
    machine_id: Optional[str]
    machine_name: Optional[str]
    work_description: Optional[str]
    end_ms: Optional[int] = None
    end_log_id: Optional[str] = None
    clock_out_at: Optional[str] = None
    hours: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DayDetail:
    sessions: tuple[SessionDetail, ...]

    def to_dict(self) -> dict:
        return {"sessions": [s.to_dict() for s in self.sessions]}


@dataclass(frozen=True)
class DailyWork:
    """Per-user, per-day payroll totals. Minutes are integers."""

    day: str
    gross_minutes: int
    net_minutes: int
    working_minutes: int
    overtime_minutes: int
    breakdown: dict[str, int] = field(default_factory=dict)
    break_policy_applied: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UserWorkReport:
    user_key: str
    user_name: Optional[str]
    days: tuple[DailyWork, ...]
    unmatched_count: int

    def to_dict(self) -> dict:
        return {
            "user_key": self.user_key,
            "user_name": self.user_name,
            "days": [d.to_dict() for d in self.days],
            "unmatched_count": self.unmatched_count,
        }


@dataclass(frozen=True)
class UnmatchedWarning:
    kind: str
    record_id: str
    user_key: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WorkReport:
    range: UtcRange
    per_user_days: tuple[UserWorkReport, ...]
    warnings: tuple[UnmatchedWarning, ...]

    def to_dict(self) -> dict:
        return {
            "range": {"start_utc_iso": self.range.start_utc_iso, "end_utc_iso": self.range.end_utc_iso},
            "per_user_days": [u.to_dict() for u in self.per_user_days],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class ReportRow:
    """Presentation row for the per-user report listing."""

    record_id: str
    year: int
    month: int
    day: int
    site_name: str
    client_name: Optional[str]
    minutes: int
    start_jst: Optional[str]
    end_jst: Optional[str]
    start_timestamp_ms: Optional[int]
    end_timestamp_ms: Optional[int]
    duration_minutes: int
    overtime_hours: str
    auto_generated: bool
    break_policy_applied: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SearchRecord:
    id: str
    date: Optional[str]
    username: str
    sitename: str
    machinename: str
    workdescription: str
    hours: float

    def to_dict(self) -> dict:
        return asdict(self)
