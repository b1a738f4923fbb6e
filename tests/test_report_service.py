from __future__ import annotations

from typing import Optional

import pytest

from timeclock_reports.breaks.service import BreakPolicyResolver
from timeclock_reports.core.exceptions import ValidationError
from timeclock_reports.reports.service import ReportService


class FakePunchRepo:
    def __init__(self, rows):
        self._rows = rows
        self.last_args = None

    def get_payloads_between_dates(self, *, from_date: str, to_date_exclusive: str):
        self.last_args = {"from_date": from_date, "to_date_exclusive": to_date_exclusive}
        return self._rows

    def get_payloads_between_timestamps(self, *, start_utc_iso: str, end_utc_iso: str):
        self.last_args = {"start_utc_iso": start_utc_iso, "end_utc_iso": end_utc_iso}
        return self._rows


class FakeSessionRepo:
    def __init__(self, rows):
        self._rows = rows
        self.calls = []

    def get_rows_by_user_name(self, user_name: str):
        self.calls.append(("by_name", user_name))
        return self._rows

    def get_rows_between_dates(self, *, start_date: str, end_date: str):
        self.calls.append(("between", start_date, end_date))
        return self._rows


class FakeSiteRepo:
    def __init__(self, clients: Optional[dict] = None, names: Optional[dict] = None):
        self._clients = clients or {}
        self._names = names or {}

    def get_client_names(self, site_ids):
        return {s: self._clients[s] for s in site_ids if s in self._clients}

    def get_site_name(self, site_id: str):
        return self._names.get(site_id)


class InMemoryPolicies:
    def __init__(self, users: Optional[list[dict]] = None):
        self._users = users or []

    def find_user_fields(self, *, user_record_id=None, user_id=None, user_name=None):
        for u in self._users:
            if user_name and u.get("name") == user_name:
                return u
        return None


def make_service(punches=(), sessions=(), sites=None, users=None, enabled=True):
    return ReportService(
        FakePunchRepo(list(punches)),
        FakeSessionRepo(list(sessions)),
        sites or FakeSiteRepo(),
        BreakPolicyResolver(InMemoryPolicies(users), enabled=enabled),
    )


def log(rec_id, kind, ts, **extra):
    return {"fields": {"id": rec_id, "type": kind, "timestamp": ts, **extra}}


def test_month_summary_queries_calendar_month_by_date():
    svc = make_service(
        punches=[
            log("a", "IN", "2024-12-01T00:00:00Z", userName="山田"),
            log("b", "OUT", "2024-12-01T03:00:00Z", userName="山田"),
        ]
    )

    days = svc.get_month_summary("2024", "12")

    assert svc._punches.last_args == {"from_date": "2024-12-01", "to_date_exclusive": "2025-01-01"}
    assert [(d.date, d.sessions, d.hours) for d in days] == [("2024-12-01", 1, 3.0)]


@pytest.mark.parametrize("year,month", [("2024", "13"), ("2024", "0"), ("abc", "5"), (None, "5")])
def test_month_summary_rejects_bad_month(year, month):
    with pytest.raises(ValidationError):
        make_service().get_month_summary(year, month)


def test_day_detail_validates_and_fetches_one_day():
    svc = make_service(
        punches=[
            log("a", "IN", "2024-02-29T00:00:00Z", **{"userName (from user)": ["佐藤"]}),
            log(
                "b",
                "OUT",
                "2024-02-29T02:00:00Z",
                **{"userName (from user)": ["佐藤"], "machinename (from machine)": ["ユンボ"]},
            ),
        ]
    )

    detail = svc.get_day_detail("2024-02-29")

    assert svc._punches.last_args == {"from_date": "2024-02-29", "to_date_exclusive": "2024-03-01"}
    (s,) = detail.sessions
    assert s.user_name == "佐藤"
    assert s.machine_name == "ユンボ"

    for bad in (None, "", "2024-02-30", "2024/02/01"):
        with pytest.raises(ValidationError):
            svc.get_day_detail(bad)


def test_work_report_uses_jst_month_range_and_filters():
    svc = make_service(
        punches=[
            log("a", "IN", "2024-05-01T00:00:00Z", userName="U1", siteName="現場A"),
            log("b", "OUT", "2024-05-01T08:00:00Z", userName="U1", siteName="現場A"),
            log("c", "IN", "2024-05-01T00:00:00Z", userName="U2", siteName="現場B"),
            log("d", "OUT", "2024-05-01T08:00:00Z", userName="U2", siteName="現場B"),
        ]
    )

    report = svc.get_work_report_by_month(2024, 5, site_name="現場A")

    assert svc._punches.last_args == {
        "start_utc_iso": "2024-04-30T15:00:00.000Z",
        "end_utc_iso": "2024-05-31T15:00:00.000Z",
    }
    assert [u.user_key for u in report.per_user_days] == ["U1"]
    assert report.per_user_days[0].days[0].gross_minutes == 480


def test_report_rows_resolve_policy_and_clients():
    sessions = [
        {
            "id": "s1",
            "date": "2024-05-01",
            "start": "2024-05-01T00:00:00Z",
            "end": "2024-05-01T09:00:00Z",
            "status": "close",
            "siteRecordId": "site1",
            "name (from user)": ["山田"],
        }
    ]
    svc = make_service(
        sessions=sessions,
        sites=FakeSiteRepo(clients={"site1": "元請A"}, names={"site1": "現場A"}),
        users=[{"name": "山田", "excludeBreakDeduction": "1"}],
    )

    (row,) = svc.get_report_rows_by_user_name("  山田 ")

    assert svc._sessions.calls == [("by_name", "山田")]
    assert row.client_name == "元請A"
    assert row.site_name == "現場A"
    assert row.minutes == 450
    assert row.overtime_hours == "1.5h"
    assert row.break_policy_applied is False


def test_report_rows_blank_name_and_bad_sort():
    svc = make_service()

    assert svc.get_report_rows_by_user_name("   ") == []
    assert svc._sessions.calls == []
    with pytest.raises(ValidationError):
        svc.get_report_rows_by_user_name("山田", sort="hours")
    with pytest.raises(ValidationError):
        svc.get_report_rows_by_user_name("山田", sort="day", order="sideways")


def test_search_sessions_filters_case_insensitively():
    sessions = [
        {
            "id": "s1",
            "date": "2024-05-01",
            "durationMin": 90,
            "siteName": "Tokyo Site",
            "userName": "Yamada",
            "machineName": "EX-200",
            "workDescription": "掘削",
        },
        {"id": "s2", "date": "2024-05-02", "durationMin": 60, "siteName": "Osaka", "userName": "Sato"},
        {"id": "s3", "date": "2024-06-01", "durationMin": 60, "siteName": "Tokyo Site", "userName": "Yamada"},
    ]
    svc = make_service(sessions=sessions)

    records = svc.search_sessions(2024, 5, site_name=" tokyo ", machine_name="ex")

    assert svc._sessions.calls == [("between", "2024-05-01", "2024-05-31")]
    assert [r.to_dict() for r in records] == [
        {
            "id": "s1",
            "date": "2024-05-01",
            "username": "Yamada",
            "sitename": "Tokyo Site",
            "machinename": "EX-200",
            "workdescription": "掘削",
            "hours": 1.5,
        }
    ]


def test_report_rows_ignore_exclusions_when_break_policy_disabled():
    sessions = [
        {
            "id": "s1",
            "date": "2024-05-01",
            "start": "2024-05-01T00:00:00Z",
            "end": "2024-05-01T09:00:00Z",
            "status": "close",
            "siteName": "現場A",
            "name (from user)": ["山田"],
        }
    ]
    svc = make_service(sessions=sessions, users=[{"name": "山田", "excludeBreakDeduction": "1"}], enabled=False)

    (row,) = svc.get_report_rows_by_user_name("山田")

    assert row.overtime_hours == "0.5h"
    assert row.break_policy_applied is False
