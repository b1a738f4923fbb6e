from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..core.enums import PunchType


@dataclass(frozen=True)
class PunchRecord:
    """Domain entity: one normalized clock event."""

    id: str
    type: PunchType
    timestamp: str
    timestamp_ms: int
    user_key: str
    user_id: Optional[str] = None
    user_record_id: Optional[str] = None
    user_name: Optional[str] = None
    site_name: Optional[str] = None
    machine_id: Optional[str] = None
    machine_name: Optional[str] = None
    work_descriptions: tuple[str, ...] = ()
    raw_fields: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)
