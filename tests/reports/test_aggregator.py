from __future__ import annotations

from typing import Optional

from timeclock_reports.breaks.deduction import NoBreakDeduction
from timeclock_reports.breaks.service import BreakPolicyResolver
from timeclock_reports.common.datetime_utils import utc_range_of_jst_month
from timeclock_reports.punches.normalizer import normalize_punch
from timeclock_reports.reports.aggregator import (
    aggregate_work_report,
    build_day_detail,
    split_overtime,
    summarise_month,
)


class InMemoryPolicies:
    def __init__(self, excluded_names: set[str] = frozenset()):
        self._excluded = excluded_names

    def find_user_fields(self, *, user_record_id=None, user_id=None, user_name=None) -> Optional[dict]:
        if user_name in self._excluded:
            return {"name": user_name, "excludeBreakDeduction": True}
        return None


def punch(rec_id: str, kind: str, when: str, user: str = "U", **extra):
    return normalize_punch(
        {"id": rec_id, "type": kind, "timestamp": f"{when}:00+09:00", "userName": user, **extra}
    )


MAY = utc_range_of_jst_month(2024, 5)


def test_split_overtime_invariant():
    assert split_overtime(510) == (450, 60)
    assert split_overtime(450) == (450, 0)
    assert split_overtime(0) == (0, 0)
    for net in range(0, 1000, 7):
        working, overtime = split_overtime(net)
        assert working + overtime == net
        assert working <= 450


def test_scenario_full_day_without_deduction():
    punches = [punch("a", "IN", "2024-05-01T09:00"), punch("b", "OUT", "2024-05-01T17:30")]
    resolver = BreakPolicyResolver(InMemoryPolicies({"U"}))

    report = aggregate_work_report(punches, utc_range=MAY, resolver=resolver)

    (user,) = report.per_user_days
    (day,) = user.days
    assert day.day == "2024-05-01"
    assert day.gross_minutes == 510
    assert day.net_minutes == 510
    assert (day.working_minutes, day.overtime_minutes) == (450, 60)
    assert day.break_policy_applied is False
    assert report.warnings == ()


def test_scenario_full_day_with_standard_deduction():
    punches = [punch("a", "IN", "2024-05-01T09:00"), punch("b", "OUT", "2024-05-01T17:30")]
    resolver = BreakPolicyResolver(InMemoryPolicies())

    (day,) = aggregate_work_report(punches, utc_range=MAY, resolver=resolver).per_user_days[0].days

    assert day.net_minutes == 480
    assert (day.working_minutes, day.overtime_minutes) == (450, 30)
    assert day.break_policy_applied is True


def test_work_report_warnings_and_breakdown():
    punches = [
        punch("s-in", "IN", "2024-05-01T08:00", user="さとう", siteName="現場A", machineId="M1"),
        punch("s-out", "OUT", "2024-05-01T11:00", user="さとう"),
        punch("s-stray", "OUT", "2024-05-01T12:00", user="さとう"),
        punch("a-in", "IN", "2024-05-02T08:00", user="あおき"),
        punch("a-out", "OUT", "2024-05-02T10:00", user="あおき"),
        punch("a-open", "IN", "2024-05-03T08:00", user="あおき"),
    ]
    resolver = BreakPolicyResolver(InMemoryPolicies())

    report = aggregate_work_report(punches, utc_range=MAY, resolver=resolver)

    assert [u.user_key for u in report.per_user_days] == ["あおき", "さとう"]
    aoki, sato = report.per_user_days
    assert aoki.days[0].breakdown == {"- / -": 120}
    assert aoki.unmatched_count == 1
    assert sato.days[0].breakdown == {"現場A / M1": 180}
    assert sato.unmatched_count == 1
    assert [(w.kind, w.record_id, w.user_key) for w in report.warnings] == [
        ("IN", "a-open", "あおき"),
        ("OUT", "s-stray", "さとう"),
    ]


def test_session_counts_toward_day_of_its_in_punch():
    punches = [punch("a", "IN", "2024-05-01T22:00"), punch("b", "OUT", "2024-05-02T02:00")]
    resolver = BreakPolicyResolver(InMemoryPolicies())

    (day,) = aggregate_work_report(punches, utc_range=MAY, resolver=resolver).per_user_days[0].days
    assert day.day == "2024-05-01"
    assert day.gross_minutes == 240


def test_work_report_is_idempotent():
    punches = [
        punch("a", "IN", "2024-05-01T09:00"),
        punch("b", "OUT", "2024-05-01T18:00"),
        punch("c", "OUT", "2024-05-02T07:00"),
    ]
    resolver = BreakPolicyResolver(InMemoryPolicies())

    first = aggregate_work_report(punches, utc_range=MAY, resolver=resolver).to_dict()
    second = aggregate_work_report(list(reversed(punches)), utc_range=MAY, resolver=resolver).to_dict()
    assert first == second


def test_summarise_month_groups_by_jst_day():
    punches = [
        punch("1", "IN", "2024-05-01T09:00", user="U1", siteName="現場A"),
        punch("2", "OUT", "2024-05-01T17:30", user="U1", siteName="現場A"),
        punch("3", "IN", "2024-05-01T09:00", user="U2", siteName="現場B"),
        punch("4", "OUT", "2024-05-01T12:00", user="U2"),
        punch("5", "IN", "2024-05-02T09:00", user="U1"),
    ]

    days = summarise_month(punches)

    assert [d.date for d in days] == ["2024-05-01", "2024-05-02"]
    first, second = days
    assert first.sites == ("現場A", "現場B")
    assert first.punches == 4
    assert first.sessions == 2
    assert first.hours == 11.0  # 510 -> 480 net for U1, 180 for U2
    assert (second.punches, second.sessions, second.hours) == (1, 0, 0.0)

    gross = summarise_month(punches, deduction=NoBreakDeduction())
    assert gross[0].hours == 11.5


def test_build_day_detail_includes_open_sessions():
    detail = build_day_detail(
        [
            punch("a", "IN", "2024-05-01T09:00", user="山田", siteName="現場A"),
            punch("b", "OUT", "2024-05-01T17:30", user="山田"),
            normalize_punch({"id": "c", "type": "IN", "timestamp": "2024-05-01T01:00:00Z"}),
        ]
    )

    completed, open_session = detail.sessions
    assert completed.status == "正常"
    assert (completed.clock_in_at, completed.clock_out_at) == ("09:00", "17:30")
    assert completed.hours == 8.5
    assert completed.user_name == "山田"
    assert open_session.status == "稼働中"
    assert open_session.clock_in_at == "10:00"
    assert open_session.clock_out_at is None and open_session.hours is None
    assert open_session.user_name == "未登録ユーザー"


class NoPolicies:
    def find_user_fields(self, **kwargs):
        return None


def test_break_policy_not_applied_when_feature_disabled():
    punches = [punch("a", "IN", "2024-05-01T09:00"), punch("b", "OUT", "2024-05-01T17:30")]
    resolver = BreakPolicyResolver(NoPolicies(), enabled=False)

    report = aggregate_work_report(punches, utc_range=MAY, resolver=resolver)

    (day,) = report.per_user_days[0].days
    assert day.gross_minutes == 510
    assert day.net_minutes == 480
    assert day.break_policy_applied is False


class RecordIdPolicies:
    def __init__(self):
        self.calls = []

    def find_user_fields(self, *, user_record_id=None, user_id=None, user_name=None):
        self.calls.append((user_record_id, user_id, user_name))
        if user_record_id == "rec1":
            return {"excludeBreakDeduction": True}
        return None


def test_policy_lookup_uses_identity_from_any_punch():
    punches = [
        punch("a", "IN", "2024-05-01T09:00", userId="7"),
        punch("b", "OUT", "2024-05-01T17:30", userId="7", user=["rec1"]),
    ]
    policies = RecordIdPolicies()

    report = aggregate_work_report(punches, utc_range=MAY, resolver=BreakPolicyResolver(policies))

    assert policies.calls == [("rec1", "7", "U")]
    (day,) = report.per_user_days[0].days
    assert day.net_minutes == 510
    assert day.break_policy_applied is False
