"""Field lookups over heterogeneous upstream rows.

Upstream exports spell the same logical field several ways (``machineId``,
``machineid``, ``machineId (from machine)``) and wrap joined-table lookups in
arrays. Each logical field is read through an ordered tuple of candidate keys;
the first candidate present with a non-empty value wins.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional, Sequence


def _scalar_text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        text = str(int(value)) if value.is_integer() else str(value)
    elif isinstance(value, Mapping):
        inner = value.get("name", value.get("value"))
        return normalize_lookup_text(inner) if inner is not None else None
    else:
        text = str(value)
    text = text.strip()
    return text or None


def normalize_lookup_text(value: Any) -> Optional[str]:
    """Trimmed text of a value; arrays yield their first non-empty element."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        for entry in value:
            text = normalize_lookup_text(entry)
            if text:
                return text
        return None
    return _scalar_text(value)


def normalize_machine_identifier(value: Any) -> Optional[str]:
    """Like :func:`normalize_lookup_text`, unwrapping ``"[...]"`` and ``"a,b"`` exports."""
    text = normalize_lookup_text(value)
    if not text:
        return None

    if text.startswith("[") and text.endswith("]"):
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            for item in parsed:
                normalized = normalize_machine_identifier(item)
                if normalized:
                    return normalized

    first = text.split(",")[0].strip()
    return first or None


def read_lookup(
    fields: Optional[Mapping[str, Any]],
    keys: Sequence[str],
    normalizer: Callable[[Any], Optional[str]] = normalize_lookup_text,
) -> Optional[str]:
    if not fields:
        return None
    for key in keys:
        if key not in fields:
            continue
        normalized = normalizer(fields[key])
        if normalized:
            return normalized
    return None


def extract_work_descriptions(value: Any) -> list[str]:
    """Flatten nested description arrays into unique, ordered, non-empty strings."""
    found: list[str] = []

    def _walk(item: Any) -> None:
        if item is None:
            return
        if isinstance(item, (list, tuple)):
            for entry in item:
                _walk(entry)
            return
        text = _scalar_text(item)
        if text:
            found.append(text)

    _walk(value)
    return list(dict.fromkeys(found))


def unwrap_fields(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    """Rows exported from the table API nest their columns under ``fields``."""
    fields = payload.get("fields")
    if isinstance(fields, Mapping):
        return fields
    return payload


def parse_flag(value: Any) -> bool:
    text = normalize_lookup_text(value)
    if text is None:
        return False
    return text.lower() in {"true", "1", "yes", "y", "on"}
