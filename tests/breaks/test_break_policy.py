from __future__ import annotations

from typing import Optional

from timeclock_reports.breaks.deduction import NoBreakDeduction, StandardBreakDeduction
from timeclock_reports.breaks.model import BreakPolicy, UserIdentity
from timeclock_reports.breaks.service import BreakPolicyResolver


class InMemoryPolicies:
    def __init__(self, users: list[dict]):
        self._users = users
        self.calls = 0

    def find_user_fields(self, *, user_record_id=None, user_id=None, user_name=None) -> Optional[dict]:
        self.calls += 1
        for key, value in (("id", user_record_id), ("userId", user_id), ("name", user_name)):
            if not value:
                continue
            for u in self._users:
                if str(u.get(key)) == value:
                    return u
        return None


def test_standard_deduction_table():
    d = StandardBreakDeduction()

    assert d.net_minutes(0) == 0
    assert d.net_minutes(360) == 360
    assert d.net_minutes(361) == 360
    assert d.net_minutes(420) == 375
    assert d.net_minutes(480) == 435
    assert d.net_minutes(481) == 480
    assert d.net_minutes(510) == 480
    assert d.net_minutes(600) == 540
    assert d.net_minutes(-5) == 0


def test_standard_deduction_is_monotonic():
    d = StandardBreakDeduction()
    values = [d.net_minutes(m) for m in range(0, 900)]
    assert all(a <= b for a, b in zip(values, values[1:]))


def test_no_break_deduction_passes_gross_through():
    assert NoBreakDeduction().net_minutes(510) == 510


def test_resolver_reads_flag_first_identity_wins():
    repo = InMemoryPolicies(
        [
            {"id": "rec1", "userId": "7", "name": "山田", "excludeBreakDeduction": "true"},
            {"id": "rec2", "userId": "8", "name": "佐藤", "excludeBreakDeduction": False},
        ]
    )
    resolver = BreakPolicyResolver(repo, enabled=True)

    assert resolver.resolve(UserIdentity(user_record_id="rec1")).exclude_break_deduction is True
    assert resolver.resolve(UserIdentity(user_id="8", user_name="山田")).exclude_break_deduction is False
    assert resolver.resolve(UserIdentity(user_name="山田")).exclude_break_deduction is True
    assert resolver.resolve(UserIdentity(user_name="unknown")).exclude_break_deduction is False


def test_resolver_disabled_skips_lookup():
    repo = InMemoryPolicies([{"name": "山田", "excludeBreakDeduction": True}])
    resolver = BreakPolicyResolver(repo, enabled=False)

    assert resolver.resolve(UserIdentity(user_name="山田")) == BreakPolicy(exclude_break_deduction=False)
    assert repo.calls == 0


def test_net_minutes_respects_policy():
    resolver = BreakPolicyResolver(InMemoryPolicies([]))

    assert resolver.net_minutes(510, BreakPolicy(exclude_break_deduction=True)) == 510
    assert resolver.net_minutes(510, BreakPolicy(exclude_break_deduction=False)) == 480
