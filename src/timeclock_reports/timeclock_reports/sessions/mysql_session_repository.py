from __future__ import annotations

from typing import Any, Dict, List

from ..database.mysql_base import MySQLPayloadRepository
from .repository import SessionRepository

_USER_NAME_SQL = """
COALESCE(
  JSON_UNQUOTE(JSON_EXTRACT(payload, '$."name (from user)"[0]')),
  JSON_UNQUOTE(JSON_EXTRACT(payload, '$."name (from user)"')),
  JSON_UNQUOTE(JSON_EXTRACT(payload, '$.userName')),
  JSON_UNQUOTE(JSON_EXTRACT(payload, '$.username')),
  ''
)
"""


class MySQLSessionRepository(MySQLPayloadRepository, SessionRepository):
    def get_rows_by_user_name(self, user_name: str) -> List[Dict[str, Any]]:
        return self._query_payloads(
            f"""
            SELECT payload
            FROM work_sessions
            WHERE TRIM({_USER_NAME_SQL}) = %s
            ORDER BY
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.date')), '') ASC,
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.start')), '') ASC,
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.id')), '') ASC
            """,
            (user_name.strip(),),
        )

    def get_rows_between_dates(self, *, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        return self._query_payloads(
            """
            SELECT payload
            FROM work_sessions
            WHERE COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.date')), '') >= %s
              AND COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.date')), '') <= %s
            ORDER BY
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.date')), '') ASC,
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.start')), '') ASC,
              COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.id')), '') ASC
            """,
            (start_date, end_date),
        )
