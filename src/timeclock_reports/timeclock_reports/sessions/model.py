from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PunchType


@dataclass(frozen=True)
class SessionAttrs:
    site_name: Optional[str] = None
    machine_id: Optional[str] = None
    machine_name: Optional[str] = None
    work_description: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """A reconstructed work interval. ``end_ms`` is None for an open session."""

    user_key: str
    start_ms: int
    end_ms: Optional[int]
    start_id: str
    end_id: Optional[str]
    duration_minutes: Optional[int]
    attrs: SessionAttrs
    user_id: Optional[str] = None
    user_name: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.end_ms is not None


@dataclass(frozen=True)
class UnmatchedPunch:
    kind: PunchType
    record_id: str
    user_key: str
    timestamp_ms: int


@dataclass(frozen=True)
class PairingResult:
    sessions: tuple[Session, ...]
    unmatched: tuple[UnmatchedPunch, ...]

    @property
    def completed(self) -> list[Session]:
        return [s for s in self.sessions if s.is_completed]

    @property
    def open(self) -> list[Session]:
        return [s for s in self.sessions if not s.is_completed]
