from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class BreakPolicyRepository(Protocol):
    def find_user_fields(
        self,
        *,
        user_record_id: Optional[str] = None,
        user_id: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> Optional[Mapping[str, Any]]:
        """Return the user's raw fields for the first identity that matches."""

        raise NotImplementedError
