from __future__ import annotations

import logging
from typing import Optional

from ..common.lookup import parse_flag
from .deduction import BreakDeduction, StandardBreakDeduction
from .model import BreakPolicy, UserIdentity
from .repository import BreakPolicyRepository

logger = logging.getLogger(__name__)


class BreakPolicyResolver:
    """Use case: decide per user whether break time is deducted, and apply it."""

    def __init__(
        self,
        policies: BreakPolicyRepository,
        *,
        enabled: bool = True,
        deduction: Optional[BreakDeduction] = None,
    ):
        self._policies = policies
        self._enabled = bool(enabled)
        self._deduction = deduction or StandardBreakDeduction()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def resolve(self, identity: UserIdentity) -> BreakPolicy:
        # Feature off: exclusions are ignored and everyone gets the standard deduction.
        if not self._enabled or identity.is_empty():
            return BreakPolicy(exclude_break_deduction=False)

        fields = self._policies.find_user_fields(
            user_record_id=identity.user_record_id,
            user_id=identity.user_id,
            user_name=identity.user_name,
        )
        if not fields:
            logger.debug("no break policy found for %s", identity)
            return BreakPolicy(exclude_break_deduction=False)
        return BreakPolicy(exclude_break_deduction=parse_flag(fields.get("excludeBreakDeduction")))

    def net_minutes(self, gross_minutes: int, policy: BreakPolicy) -> int:
        gross = max(int(gross_minutes), 0)
        if policy.exclude_break_deduction:
            return gross
        return self._deduction.net_minutes(gross)

    @property
    def deduction(self) -> BreakDeduction:
        return self._deduction
