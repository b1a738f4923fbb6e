from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence


class SessionRepository(Protocol):
    """Source of pre-built session payloads (``work_sessions``)."""

    def get_rows_by_user_name(self, user_name: str) -> Sequence[Mapping[str, Any]]:
        raise NotImplementedError

    def get_rows_between_dates(self, *, start_date: str, end_date: str) -> Sequence[Mapping[str, Any]]:
        raise NotImplementedError
