from __future__ import annotations

from typing import Any, Dict, Optional

from ..common.lookup import unwrap_fields
from ..database.mysql_base import MySQLPayloadRepository
from .repository import BreakPolicyRepository

_LOOKUPS = (
    ("user_record_id", "COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.id')), '') = %s"),
    ("user_id", "COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.userId')), '') = %s"),
    (
        "user_name",
        "(COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.name')), '') = %s"
        " OR COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.username')), '') = %s)",
    ),
)


class MySQLBreakPolicyRepository(MySQLPayloadRepository, BreakPolicyRepository):
    def find_user_fields(
        self,
        *,
        user_record_id: Optional[str] = None,
        user_id: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        identity = {"user_record_id": user_record_id, "user_id": user_id, "user_name": user_name}
        for name, condition in _LOOKUPS:
            value = identity[name]
            if not value:
                continue
            params = (value,) * condition.count("%s")
            rows = self._query_payloads(f"SELECT payload FROM users WHERE {condition} LIMIT 1", params)
            if rows:
                return dict(unwrap_fields(rows[0]))
        return None
