from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence


class PunchRepository(Protocol):
    """Source of raw punch payloads.

    Rows come back ordered by timestamp then id; callers still re-sort.
    """

    def get_payloads_between_dates(self, *, from_date: str, to_date_exclusive: str) -> Sequence[Mapping[str, Any]]:
        raise NotImplementedError

    def get_payloads_between_timestamps(self, *, start_utc_iso: str, end_utc_iso: str) -> Sequence[Mapping[str, Any]]:
        raise NotImplementedError
