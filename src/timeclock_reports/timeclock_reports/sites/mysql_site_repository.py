from __future__ import annotations

from typing import Dict, Iterable, Optional

from ..database.mysql_base import MySQLPayloadRepository
from .repository import SiteRepository

_SITE_ID_SQL = (
    "COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.id')), JSON_UNQUOTE(JSON_EXTRACT(payload, '$.siteId')), '')"
)


class MySQLSiteRepository(MySQLPayloadRepository, SiteRepository):
    def get_client_names(self, site_ids: Iterable[str]) -> Dict[str, str]:
        ids = sorted({s for s in site_ids if s})
        if not ids:
            return {}

        placeholders = ", ".join(["%s"] * len(ids))
        rows = self._query(
            f"""
            SELECT
              {_SITE_ID_SQL} AS id,
              COALESCE(
                JSON_UNQUOTE(JSON_EXTRACT(payload, '$.clientName')),
                JSON_UNQUOTE(JSON_EXTRACT(payload, '$.client'))
              ) AS client_name
            FROM sites
            WHERE {_SITE_ID_SQL} IN ({placeholders})
            """,
            ids,
        )
        out: Dict[str, str] = {}
        for r in rows:
            if r.get("id") and r.get("client_name"):
                out[str(r["id"])] = str(r["client_name"])
        return out

    def get_site_name(self, site_id: str) -> Optional[str]:
        rows = self._query(
            f"""
            SELECT COALESCE(
              JSON_UNQUOTE(JSON_EXTRACT(payload, '$.name')),
              JSON_UNQUOTE(JSON_EXTRACT(payload, '$.siteName'))
            ) AS name
            FROM sites
            WHERE COALESCE(JSON_UNQUOTE(JSON_EXTRACT(payload, '$.siteId')), JSON_UNQUOTE(JSON_EXTRACT(payload, '$.id')), '') = %s
            ORDER BY {_SITE_ID_SQL} ASC
            LIMIT 1
            """,
            (site_id,),
        )
        name = rows[0].get("name") if rows else None
        if isinstance(name, str) and name.strip():
            return name.strip()
        return None
