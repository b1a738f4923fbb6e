from __future__ import annotations

from typing import Any, Dict, List

from ..database.mysql_base import MySQLPayloadRepository
from .repository import PunchRepository


class MySQLPunchRepository(MySQLPayloadRepository, PunchRepository):
    def get_payloads_between_dates(self, *, from_date: str, to_date_exclusive: str) -> List[Dict[str, Any]]:
        return self._query_payloads(
            """
            SELECT payload
            FROM punch_logs
            WHERE COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.date')), '') >= %s
              AND COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.date')), '') < %s
            ORDER BY
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.timestamp')), '') ASC,
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.id')), '') ASC
            """,
            (from_date, to_date_exclusive),
        )

    def get_payloads_between_timestamps(self, *, start_utc_iso: str, end_utc_iso: str) -> List[Dict[str, Any]]:
        return self._query_payloads(
            """
            SELECT payload
            FROM punch_logs
            WHERE COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.type')), '') IN ('IN', 'OUT')
              AND COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.timestamp')), '') >= %s
              AND COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.timestamp')), '') < %s
            ORDER BY
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.timestamp')), '') ASC,
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.id')), '') ASC
            """,
            (start_utc_iso, end_utc_iso),
        )
