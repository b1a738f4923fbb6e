from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..punches.model import PunchRecord
from .model import PairingResult, Session, UnmatchedPunch
from .strategies.base import PairingStrategy
from .strategies.single_slot_strategy import SingleSlotPairingStrategy

logger = logging.getLogger(__name__)


def punch_sort_key(punch: PunchRecord) -> tuple[int, str]:
    return punch.timestamp_ms, punch.id


class SessionPairer:
    """Rebuild sessions from an unordered punch stream.

    Punches are partitioned by ``user_key`` and each partition is paired
    independently in (timestamp_ms, id) order, so the result does not depend
    on input order and never pairs punches across users.
    """

    def __init__(self, strategy: Optional[PairingStrategy] = None):
        self._strategy = strategy or SingleSlotPairingStrategy()

    def pair(self, punches: Iterable[PunchRecord]) -> PairingResult:
        by_user: dict[str, list[PunchRecord]] = {}
        for punch in sorted(punches, key=punch_sort_key):
            by_user.setdefault(punch.user_key, []).append(punch)

        sessions: list[Session] = []
        unmatched: list[UnmatchedPunch] = []
        for user_key, user_punches in by_user.items():
            user_sessions, user_unmatched = self._strategy.pair_user(user_punches)
            sessions.extend(user_sessions)
            unmatched.extend(user_unmatched)
            if user_unmatched:
                logger.debug("user=%s unmatched punches=%d", user_key, len(user_unmatched))

        sessions.sort(key=lambda s: (s.start_ms, s.start_id, s.user_key))
        unmatched.sort(key=lambda u: (u.timestamp_ms, u.record_id, u.user_key))
        return PairingResult(sessions=tuple(sessions), unmatched=tuple(unmatched))
