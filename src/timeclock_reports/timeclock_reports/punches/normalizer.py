from __future__ import annotations

from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_timestamp_ms
from ..common.lookup import (
    extract_work_descriptions,
    normalize_lookup_text,
    normalize_machine_identifier,
    read_lookup,
    unwrap_fields,
)
from ..core.constants import UNKNOWN_USER_KEY
from ..core.enums import PunchType
from .model import PunchRecord

USER_NAME_KEYS = ("name (from user)", "userName (from user)", "userName", "username")
MACHINE_ID_KEYS = ("machineId", "machineid", "machineId (from machine)", "machineid (from machine)")
MACHINE_NAME_KEYS = ("machineName", "machinename", "machineName (from machine)", "machinename (from machine)")
SITE_NAME_KEYS = ("siteName", "sitename", "siteName (from site)")
USER_ID_KEYS = ("userId", "userid")
USER_RECORD_KEYS = ("user",)


def _read_type(fields: Mapping[str, Any]) -> Optional[PunchType]:
    value = fields.get("type")
    if value == PunchType.IN.value:
        return PunchType.IN
    if value == PunchType.OUT.value:
        return PunchType.OUT
    return None


def resolve_user_key(user_id: Optional[str], user_record_id: Optional[str], user_name: Optional[str]) -> str:
    return user_id or user_record_id or user_name or UNKNOWN_USER_KEY


def normalize_punch(payload: Mapping[str, Any]) -> Optional[PunchRecord]:
    """Map a raw punch payload to a :class:`PunchRecord`, or None when unusable."""
    fields = unwrap_fields(payload)

    punch_type = _read_type(fields)
    if punch_type is None:
        return None

    timestamp = fields.get("timestamp")
    if not isinstance(timestamp, str):
        return None
    timestamp_ms = parse_timestamp_ms(timestamp)
    if timestamp_ms is None:
        return None

    user_id = read_lookup(fields, USER_ID_KEYS)
    user_record_id = read_lookup(fields, USER_RECORD_KEYS)
    user_name = read_lookup(fields, USER_NAME_KEYS)

    machine_id = read_lookup(fields, MACHINE_ID_KEYS, normalize_machine_identifier) or normalize_machine_identifier(
        fields.get("machine_id")
    )

    return PunchRecord(
        id=normalize_lookup_text(fields.get("id"))
        or normalize_lookup_text(payload.get("id"))
        or f"{timestamp_ms}-{punch_type.value}",
        type=punch_type,
        timestamp=timestamp,
        timestamp_ms=timestamp_ms,
        user_key=resolve_user_key(user_id, user_record_id, user_name),
        user_id=user_id,
        user_record_id=user_record_id,
        user_name=user_name,
        site_name=read_lookup(fields, SITE_NAME_KEYS),
        machine_id=machine_id,
        machine_name=read_lookup(fields, MACHINE_NAME_KEYS),
        work_descriptions=tuple(extract_work_descriptions(fields.get("workDescription"))),
        raw_fields=fields,
    )


def normalize_punches(payloads) -> list[PunchRecord]:
    out = []
    for payload in payloads:
        record = normalize_punch(payload)
        if record is not None:
            out.append(record)
    return out
