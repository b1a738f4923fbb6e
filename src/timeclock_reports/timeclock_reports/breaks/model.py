from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BreakPolicy:
    exclude_break_deduction: bool = False


@dataclass(frozen=True)
class UserIdentity:
    """Ways a user may be looked up; the first one present wins."""

    user_record_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.user_record_id or self.user_id or self.user_name)
