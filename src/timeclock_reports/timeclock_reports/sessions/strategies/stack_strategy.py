from __future__ import annotations

from typing import Sequence

from ...core.enums import PunchType
from ...punches.model import PunchRecord
from ..model import Session, UnmatchedPunch
from .base import PairingStrategy


class StackPairingStrategy(PairingStrategy):
    """Nested INs: an OUT closes the most recent open IN (LIFO)."""

    def pair_user(self, punches: Sequence[PunchRecord]) -> tuple[list[Session], list[UnmatchedPunch]]:
        sessions: list[Session] = []
        unmatched: list[UnmatchedPunch] = []
        stack: list[PunchRecord] = []

        for punch in punches:
            if punch.type == PunchType.IN:
                stack.append(punch)
                continue

            top = stack[-1] if stack else None
            if not self.closes(punch, top):
                unmatched.append(self.unmatched(punch))
                continue

            stack.pop()
            sessions.append(self.completed_session(top, punch, punches))

        # Leftovers surface oldest first.
        sessions.extend(self.open_session(p) for p in stack)
        return sessions, unmatched
