from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..container import Container
from ..database.mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"ok": True, "break_policy_enabled": container.break_policy_resolver.enabled})

    @app.route("/api/health/db", methods=["GET"], endpoint="health_db")
    def health_db():
        try:
            with db_cursor(container.conn) as (_, cur):
                cur.execute("SELECT 1 AS ok")
                row = fetchone(cur)
        except Exception:
            logger.exception("database health check failed (%s)", container.conn.target)
            return jsonify({"ok": False, "error": "DB unavailable"}), 503
        return jsonify({"ok": bool(row and row.get("ok") == 1)})
