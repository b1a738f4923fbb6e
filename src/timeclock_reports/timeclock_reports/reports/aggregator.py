"""Daily and monthly roll-ups over reconstructed sessions.

Every function here is pure: it receives an already-fetched punch snapshot
and returns fresh report objects, so repeated calls on the same input give
identical output.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..breaks.deduction import BreakDeduction, StandardBreakDeduction
from ..breaks.model import UserIdentity
from ..breaks.service import BreakPolicyResolver
from ..common.collation import Collator
from ..common.datetime_utils import UtcRange, hours_value, jst_clock, jst_day_key
from ..core.constants import (
    BREAKDOWN_PLACEHOLDER,
    BREAKDOWN_SEPARATOR,
    STANDARD_WORK_MINUTES,
    UNREGISTERED_USER_NAME,
)
from ..core.enums import PunchType, SessionStatus
from ..punches.model import PunchRecord
from ..sessions.model import Session
from ..sessions.pairer import SessionPairer, punch_sort_key
from .model import DailySummary, DailyWork, DayDetail, SessionDetail, UnmatchedWarning, UserWorkReport, WorkReport

logger = logging.getLogger(__name__)


def split_overtime(net_minutes: int, threshold: int = STANDARD_WORK_MINUTES) -> tuple[int, int]:
    """(working, overtime) with working capped at the standard daily threshold."""
    net = max(int(net_minutes), 0)
    return min(net, threshold), max(0, net - threshold)


def breakdown_label(session: Session) -> str:
    attrs = session.attrs
    return BREAKDOWN_SEPARATOR.join(
        [
            attrs.site_name or BREAKDOWN_PLACEHOLDER,
            attrs.machine_id or attrs.machine_name or BREAKDOWN_PLACEHOLDER,
        ]
    )


def to_session_detail(session: Session) -> SessionDetail:
    completed = session.is_completed
    return SessionDetail(
        user_id=session.user_id,
        user_name=session.user_name or UNREGISTERED_USER_NAME,
        site_name=session.attrs.site_name,
        start_ms=session.start_ms,
        start_log_id=session.start_id,
        clock_in_at=jst_clock(session.start_ms),
        status=(SessionStatus.COMPLETED if completed else SessionStatus.OPEN).value,
        machine_id=session.attrs.machine_id,
        machine_name=session.attrs.machine_name,
        work_description=session.attrs.work_description,
        end_ms=session.end_ms,
        end_log_id=session.end_id,
        clock_out_at=jst_clock(session.end_ms) if completed else None,
        hours=hours_value(session.duration_minutes or 0) if completed else None,
    )


def summarise_month(
    punches: Iterable[PunchRecord],
    *,
    pairer: Optional[SessionPairer] = None,
    deduction: Optional[BreakDeduction] = None,
) -> list[DailySummary]:
    """Calendar month view: one summary per JST day that has punches.

    Punches are grouped by their own JST day before pairing. Each user's
    completed minutes for the day go through the break deduction and the
    net totals are summed into ``hours``.
    """
    pairer = pairer or SessionPairer()
    deduction = deduction or StandardBreakDeduction()

    grouped: dict[str, list[PunchRecord]] = {}
    for punch in sorted(punches, key=punch_sort_key):
        grouped.setdefault(jst_day_key(punch.timestamp_ms), []).append(punch)

    out: list[DailySummary] = []
    for day in sorted(grouped):
        items = grouped[day]
        completed = pairer.pair(items).completed

        gross_by_user: dict[str, int] = {}
        for s in completed:
            gross_by_user[s.user_key] = gross_by_user.get(s.user_key, 0) + (s.duration_minutes or 0)
        net_total = sum(deduction.net_minutes(m) for m in gross_by_user.values())

        out.append(
            DailySummary(
                date=day,
                sites=tuple(dict.fromkeys(p.site_name for p in items if p.site_name)),
                punches=len(items),
                sessions=len(completed),
                hours=hours_value(net_total),
            )
        )
    return out


def build_day_detail(punches: Iterable[PunchRecord], *, pairer: Optional[SessionPairer] = None) -> DayDetail:
    """All sessions of a day, open ones included."""
    pairer = pairer or SessionPairer()
    result = pairer.pair(punches)
    return DayDetail(sessions=tuple(to_session_detail(s) for s in result.sessions))


def _identity_for(punches: Sequence[PunchRecord]) -> UserIdentity:
    return UserIdentity(
        user_record_id=next((p.user_record_id for p in punches if p.user_record_id), None),
        user_id=next((p.user_id for p in punches if p.user_id), None),
        user_name=next((p.user_name for p in punches if p.user_name), None),
    )


def _daily_work(
    sessions: Sequence[Session],
    *,
    resolver: BreakPolicyResolver,
    identity: UserIdentity,
) -> list[DailyWork]:
    gross: dict[str, int] = {}
    breakdown: dict[str, dict[str, int]] = {}
    for s in sessions:
        day = jst_day_key(s.start_ms)
        minutes = s.duration_minutes or 0
        gross[day] = gross.get(day, 0) + minutes
        labels = breakdown.setdefault(day, {})
        label = breakdown_label(s)
        labels[label] = labels.get(label, 0) + minutes

    if not gross:
        return []

    policy = resolver.resolve(identity)
    days = []
    for day in sorted(gross):
        net = resolver.net_minutes(gross[day], policy)
        working, overtime = split_overtime(net)
        days.append(
            DailyWork(
                day=day,
                gross_minutes=gross[day],
                net_minutes=net,
                working_minutes=working,
                overtime_minutes=overtime,
                breakdown=dict(sorted(breakdown[day].items())),
                break_policy_applied=resolver.enabled and not policy.exclude_break_deduction,
            )
        )
    return days


def aggregate_work_report(
    punches: Iterable[PunchRecord],
    *,
    utc_range: UtcRange,
    resolver: BreakPolicyResolver,
    pairer: Optional[SessionPairer] = None,
    collator: Optional[Collator] = None,
) -> WorkReport:
    """Payroll-style month report: per user, per JST day, regular vs. overtime.

    Completed sessions count toward the day their IN falls on. Unmatched OUTs
    and INs left open at the end of the stream are reported as warnings.
    """
    pairer = pairer or SessionPairer()
    collator = collator or Collator()

    by_user: dict[str, list[PunchRecord]] = {}
    for punch in sorted(punches, key=punch_sort_key):
        by_user.setdefault(punch.user_key, []).append(punch)

    reports: list[UserWorkReport] = []
    warnings_by_user: dict[str, list[UnmatchedWarning]] = {}
    for user_key, user_punches in by_user.items():
        result = pairer.pair(user_punches)
        identity = _identity_for(user_punches)

        pending = sorted(
            [(u.timestamp_ms, u.record_id, u.kind) for u in result.unmatched]
            + [(s.start_ms, s.start_id, PunchType.IN) for s in result.open]
        )
        warnings_by_user[user_key] = [
            UnmatchedWarning(kind=kind.value, record_id=rec_id, user_key=user_key) for _, rec_id, kind in pending
        ]
        if pending:
            logger.debug("user=%s warnings=%d", user_key, len(pending))

        reports.append(
            UserWorkReport(
                user_key=user_key,
                user_name=identity.user_name,
                days=tuple(_daily_work(result.completed, resolver=resolver, identity=identity)),
                unmatched_count=len(pending),
            )
        )

    reports.sort(key=lambda r: (collator.sort_key(r.user_name or r.user_key), r.user_key))
    warnings = [w for r in reports for w in warnings_by_user[r.user_key]]
    return WorkReport(range=utc_range, per_user_days=tuple(reports), warnings=tuple(warnings))
