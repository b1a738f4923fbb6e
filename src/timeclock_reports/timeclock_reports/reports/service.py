from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..breaks.model import UserIdentity
from ..breaks.service import BreakPolicyResolver
from ..common.collation import Collator
from ..common.datetime_utils import month_date_range, next_date, utc_range_of_jst_month
from ..common.lookup import normalize_machine_identifier, read_lookup
from ..common.validators import optional_sort_key, require_date_string, require_sort_order, require_year_month
from ..punches.model import PunchRecord
from ..punches.normalizer import MACHINE_ID_KEYS, MACHINE_NAME_KEYS, USER_NAME_KEYS, normalize_punches
from ..punches.repository import PunchRepository
from ..sessions.pairer import SessionPairer
from ..sessions.report_row import SessionReportRow, normalize_session_row
from ..sessions.repository import SessionRepository
from ..sites.repository import SiteRepository
from .aggregator import aggregate_work_report, build_day_detail, summarise_month
from .model import DailySummary, DayDetail, ReportRow, SearchRecord, SessionDetail, WorkReport
from .row_builder import ReportRowBuilder

logger = logging.getLogger(__name__)


def _folded(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text.casefold() if text else None


def _includes(value: Optional[str], query: Optional[str]) -> bool:
    if not query:
        return True
    if not value:
        return False
    return query.casefold() in value.casefold()


class ReportService:
    """Use cases behind the calendar and report endpoints.

    Repositories are the only I/O; everything after the fetch is pure
    computation on a private copy of the rows.
    """

    def __init__(
        self,
        punches: PunchRepository,
        sessions: SessionRepository,
        sites: SiteRepository,
        resolver: BreakPolicyResolver,
        *,
        pairer: Optional[SessionPairer] = None,
        collator: Optional[Collator] = None,
    ):
        self._punches = punches
        self._sessions = sessions
        self._sites = sites
        self._resolver = resolver
        self._pairer = pairer or SessionPairer()
        self._collator = collator or Collator()

    def get_logs_between(self, *, from_date: str, to_date_exclusive: str) -> list[PunchRecord]:
        payloads = self._punches.get_payloads_between_dates(from_date=from_date, to_date_exclusive=to_date_exclusive)
        return normalize_punches(payloads)

    def get_month_summary(self, year, month) -> list[DailySummary]:
        y, m = require_year_month(year, month)
        start, end_exclusive = month_date_range(y, m)
        logs = self.get_logs_between(from_date=start, to_date_exclusive=end_exclusive)
        return summarise_month(logs, pairer=self._pairer, deduction=self._resolver.deduction)

    def get_day_detail(self, date: Optional[str]) -> DayDetail:
        day = require_date_string(date)
        logs = self.get_logs_between(from_date=day, to_date_exclusive=next_date(day))
        detail = build_day_detail(logs, pairer=self._pairer)
        by_id = {log.id: log for log in logs}
        return DayDetail(sessions=tuple(self._with_lookups(s, by_id) for s in detail.sessions))

    @staticmethod
    def _with_lookups(entry: SessionDetail, by_id: dict[str, PunchRecord]) -> SessionDetail:
        start = by_id.get(entry.start_log_id)
        end = by_id.get(entry.end_log_id) if entry.end_log_id else None
        start_fields = start.raw_fields if start else None
        end_fields = end.raw_fields if end else None

        user_name = read_lookup(start_fields, USER_NAME_KEYS) or read_lookup(end_fields, USER_NAME_KEYS) or entry.user_name
        machine_id = (
            read_lookup(start_fields, MACHINE_ID_KEYS, normalize_machine_identifier)
            or read_lookup(end_fields, MACHINE_ID_KEYS, normalize_machine_identifier)
            or normalize_machine_identifier(entry.machine_id)
        )
        machine_name = (
            (start.machine_name if start else None)
            or read_lookup(start_fields, MACHINE_NAME_KEYS)
            or read_lookup(end_fields, MACHINE_NAME_KEYS)
            or (end.machine_name if end else None)
        )
        return replace(entry, user_name=user_name, machine_id=machine_id, machine_name=machine_name)

    def get_work_report_by_month(
        self,
        year,
        month,
        *,
        user_key: Optional[str] = None,
        site_name: Optional[str] = None,
        machine_id: Optional[str] = None,
    ) -> WorkReport:
        y, m = require_year_month(year, month)
        utc_range = utc_range_of_jst_month(y, m)
        payloads = self._punches.get_payloads_between_timestamps(
            start_utc_iso=utc_range.start_utc_iso,
            end_utc_iso=utc_range.end_utc_iso,
        )

        logs = normalize_punches(payloads)
        if user_key:
            logs = [p for p in logs if p.user_key == user_key]
        if site_name:
            logs = [p for p in logs if p.site_name == site_name]
        if machine_id:
            logs = [p for p in logs if p.machine_id == str(machine_id)]

        report = aggregate_work_report(
            logs,
            utc_range=utc_range,
            resolver=self._resolver,
            pairer=self._pairer,
            collator=self._collator,
        )
        logger.info(
            "work report %04d-%02d: punches=%d users=%d warnings=%d",
            y,
            m,
            len(logs),
            len(report.per_user_days),
            len(report.warnings),
        )
        return report

    def get_report_rows_by_user_name(
        self,
        name: Optional[str],
        sort: Optional[str] = None,
        order: Optional[str] = None,
    ) -> list[ReportRow]:
        sort_key = optional_sort_key(sort)
        sort_order = require_sort_order(order)
        trimmed = (name or "").strip()
        if not trimmed:
            return []

        rows = [normalize_session_row(p) for p in self._sessions.get_rows_by_user_name(trimmed)]
        completed = [r for r in rows if r.is_completed and r.year and r.month and r.day]
        if not completed:
            return []

        client_names = self._sites.get_client_names(
            sorted({r.site_record_id for r in completed if r.site_record_id})
        )
        completed = [self._with_site_name(r) for r in completed]

        first = completed[0]
        policy = self._resolver.resolve(
            UserIdentity(
                user_record_id=first.user_record_id,
                user_id=str(first.user_id) if first.user_id is not None else None,
                user_name=trimmed,
            )
        )
        builder = ReportRowBuilder(
            net_minutes=lambda gross: self._resolver.net_minutes(gross, policy),
            collator=self._collator,
        )
        return builder.build(
            completed,
            policy=policy,
            client_names=client_names,
            sort=sort_key,
            order=sort_order,
            break_policy_enabled=self._resolver.enabled,
        )

    def _with_site_name(self, row: SessionReportRow) -> SessionReportRow:
        if row.site_name or not row.site_record_id:
            return row
        name = self._sites.get_site_name(row.site_record_id)
        if not name:
            return row
        return replace(row, site_name=name)

    def search_sessions(
        self,
        year,
        month,
        *,
        site_name: Optional[str] = None,
        user_name: Optional[str] = None,
        machine_name: Optional[str] = None,
    ) -> list[SearchRecord]:
        y, m = require_year_month(year, month)
        start, _ = month_date_range(y, m)
        # Inclusive string bound; "-31" sorts after the last day of any month.
        rows = [
            normalize_session_row(p)
            for p in self._sessions.get_rows_between_dates(start_date=start, end_date=f"{y:04d}-{m:02d}-31")
        ]

        site_q, user_q, machine_q = _folded(site_name), _folded(user_name), _folded(machine_name)
        out = []
        for r in rows:
            if r.year != y or r.month != m:
                continue
            if not (
                _includes(r.site_name, site_q)
                and _includes(r.user_name, user_q)
                and _includes(r.machine_name or r.machine_id, machine_q)
            ):
                continue
            out.append(
                SearchRecord(
                    id=r.id,
                    date=r.date,
                    username=r.user_name or "",
                    sitename=r.site_name or "",
                    machinename=r.machine_name or r.machine_id or "",
                    workdescription=r.work_description or "",
                    hours=r.hours or 0,
                )
            )
        return out

