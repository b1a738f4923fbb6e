from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...common.datetime_utils import minutes_between
from ...core.constants import WORK_DESCRIPTION_SEPARATOR
from ...core.enums import PunchType
from ...punches.model import PunchRecord
from ..model import Session, SessionAttrs, UnmatchedPunch


def join_descriptions(descriptions: Sequence[str]) -> Optional[str]:
    unique = list(dict.fromkeys(descriptions))
    return WORK_DESCRIPTION_SEPARATOR.join(unique) if unique else None


class PairingStrategy(ABC):
    """Strategy Pattern: how one user's sorted punches become sessions.

    ``punches`` is already sorted by (timestamp_ms, id) and belongs to a
    single user. Implementations return (sessions, unmatched) in emission
    order.
    """

    @abstractmethod
    def pair_user(self, punches: Sequence[PunchRecord]) -> tuple[list[Session], list[UnmatchedPunch]]:
        raise NotImplementedError

    @staticmethod
    def open_session(punch: PunchRecord) -> Session:
        return Session(
            user_key=punch.user_key,
            start_ms=punch.timestamp_ms,
            end_ms=None,
            start_id=punch.id,
            end_id=None,
            duration_minutes=None,
            attrs=SessionAttrs(
                site_name=punch.site_name,
                machine_id=punch.machine_id,
                machine_name=punch.machine_name,
                work_description=join_descriptions(punch.work_descriptions),
            ),
            user_id=punch.user_id,
            user_name=punch.user_name,
        )

    @staticmethod
    def completed_session(start: PunchRecord, end: PunchRecord, punches: Sequence[PunchRecord]) -> Session:
        return Session(
            user_key=start.user_key,
            start_ms=start.timestamp_ms,
            end_ms=end.timestamp_ms,
            start_id=start.id,
            end_id=end.id,
            duration_minutes=minutes_between(start.timestamp_ms, end.timestamp_ms),
            attrs=SessionAttrs(
                site_name=start.site_name or end.site_name,
                machine_id=start.machine_id or end.machine_id,
                machine_name=start.machine_name or end.machine_name,
                work_description=pick_work_description(punches, start.timestamp_ms, end.timestamp_ms, end),
            ),
            user_id=start.user_id or end.user_id,
            user_name=start.user_name or end.user_name,
        )

    @staticmethod
    def unmatched(punch: PunchRecord) -> UnmatchedPunch:
        return UnmatchedPunch(
            kind=punch.type,
            record_id=punch.id,
            user_key=punch.user_key,
            timestamp_ms=punch.timestamp_ms,
        )

    @staticmethod
    def closes(candidate: PunchRecord, open_punch: Optional[PunchRecord]) -> bool:
        return (
            candidate.type == PunchType.OUT
            and open_punch is not None
            and candidate.timestamp_ms > open_punch.timestamp_ms
        )


def pick_work_description(
    punches: Sequence[PunchRecord],
    start_ms: int,
    end_ms: int,
    fallback: PunchRecord,
) -> Optional[str]:
    """Most recent non-empty description inside [start_ms, end_ms], else the closing punch's."""
    for punch in reversed(punches):
        if punch.timestamp_ms < start_ms or punch.timestamp_ms > end_ms:
            continue
        if punch.work_descriptions:
            return join_descriptions(punch.work_descriptions)
    return join_descriptions(fallback.work_descriptions)
