from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence

from ..breaks.model import BreakPolicy
from ..common.collation import Collator
from ..common.datetime_utils import format_clock_tokyo_from, format_hours
from ..core.enums import ReportSortKey, SortOrder
from ..sessions.report_row import SessionReportRow
from .aggregator import split_overtime
from .model import ReportRow


@dataclass
class DailyAggregate:
    total_minutes: int = 0
    client_name: Optional[str] = None


@dataclass(frozen=True)
class DailySplit:
    working_minutes: int
    overtime_minutes: int


def day_key(row: SessionReportRow) -> Optional[str]:
    if row.date and row.date.strip():
        return row.date.strip()
    if not (row.year and row.month and row.day):
        return None
    return f"{row.year:04d}-{row.month:02d}-{row.day:02d}"


def build_daily_aggregates(rows: Sequence[SessionReportRow]) -> dict[str, DailyAggregate]:
    aggregates: dict[str, DailyAggregate] = {}
    for row in rows:
        key = day_key(row)
        if not key:
            continue
        entry = aggregates.setdefault(key, DailyAggregate())
        if row.duration_min is not None and row.duration_min > 0:
            entry.total_minutes += row.duration_min
        if not entry.client_name and row.client_name:
            entry.client_name = row.client_name
    return aggregates


class ReportRowBuilder:
    """Join daily totals with site/client lookups into presentation rows."""

    def __init__(self, *, net_minutes: Callable[[int], int], collator: Optional[Collator] = None):
        self._net_minutes = net_minutes
        self._collator = collator or Collator()

    def build(
        self,
        rows: Sequence[SessionReportRow],
        *,
        policy: BreakPolicy,
        client_names: Mapping[str, str],
        sort: Optional[ReportSortKey] = None,
        order: SortOrder = SortOrder.ASC,
        break_policy_enabled: bool = True,
    ) -> list[ReportRow]:
        completed = [r for r in rows if r.is_completed and r.year and r.month and r.day]
        if not completed:
            return []

        aggregates = build_daily_aggregates(completed)
        splits: dict[str, DailySplit] = {}
        for key, aggregate in aggregates.items():
            working, overtime = split_overtime(self._net_minutes(max(0, aggregate.total_minutes)))
            splits[key] = DailySplit(working_minutes=working, overtime_minutes=overtime)

        applied = break_policy_enabled and not policy.exclude_break_deduction
        out: list[ReportRow] = []
        for session in completed:
            key = day_key(session)
            aggregate = aggregates.get(key) if key else None
            split = splits.get(key) if key else None

            client_name = (
                session.client_name
                or (aggregate.client_name if aggregate else None)
                or (client_names.get(session.site_record_id) if session.site_record_id else None)
            )
            raw_minutes = max(0, session.duration_min or 0)

            out.append(
                ReportRow(
                    record_id=session.id,
                    year=session.year or 0,
                    month=session.month or 0,
                    day=session.day or 0,
                    site_name=session.site_name or "",
                    client_name=client_name,
                    minutes=split.working_minutes if split else raw_minutes,
                    start_jst=format_clock_tokyo_from(session.start, session.start_ms),
                    end_jst=format_clock_tokyo_from(session.end, session.end_ms),
                    start_timestamp_ms=session.start_ms,
                    end_timestamp_ms=session.end_ms,
                    duration_minutes=raw_minutes,
                    overtime_hours=format_hours(split.overtime_minutes if split else 0),
                    auto_generated=session.auto_generated,
                    break_policy_applied=applied,
                )
            )

        out = [r for r in out if r.year > 0 and r.month > 0 and r.day > 0]
        if sort:
            out = self.sort_rows(out, sort, order)
        return out

    def sort_rows(self, rows: list[ReportRow], sort: ReportSortKey, order: SortOrder) -> list[ReportRow]:
        reverse = order == SortOrder.DESC
        if sort == ReportSortKey.SITE_NAME:
            return self._collator.sorted(rows, key=lambda r: r.site_name, reverse=reverse)
        attr = sort.value
        return sorted(rows, key=lambda r: getattr(r, attr), reverse=reverse)
