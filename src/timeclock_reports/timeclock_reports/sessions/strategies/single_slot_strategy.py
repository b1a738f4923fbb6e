from __future__ import annotations

from typing import Optional, Sequence

from ...core.enums import PunchType
from ...punches.model import PunchRecord
from ..model import Session, UnmatchedPunch
from .base import PairingStrategy


class SingleSlotPairingStrategy(PairingStrategy):
    """One open IN per user; a second IN leaves the previous one as an open session."""

    def pair_user(self, punches: Sequence[PunchRecord]) -> tuple[list[Session], list[UnmatchedPunch]]:
        sessions: list[Session] = []
        unmatched: list[UnmatchedPunch] = []
        current: Optional[PunchRecord] = None

        for punch in punches:
            if punch.type == PunchType.IN:
                if current is not None:
                    sessions.append(self.open_session(current))
                current = punch
                continue

            if not self.closes(punch, current):
                unmatched.append(self.unmatched(punch))
                continue

            sessions.append(self.completed_session(current, punch, punches))
            current = None

        if current is not None:
            sessions.append(self.open_session(current))
        return sessions, unmatched
