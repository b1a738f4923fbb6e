from __future__ import annotations

import logging
import time

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _bad_request(code: str, e: ValidationError):
        logger.warning("%s %s: %s", request.path, code, e)
        return jsonify({"ok": False, "error": code, "message": str(e)}), 400

    def _failed(message: str):
        logger.exception("%s failed", request.path)
        return jsonify({"ok": False, "error": message}), 500

    @app.route("/api/calendar/month", methods=["GET"], endpoint="calendar_month")
    def calendar_month():
        year = request.args.get("year")
        month = request.args.get("month")
        try:
            days = service.get_month_summary(year, month)
        except ValidationError as e:
            return _bad_request("INVALID_QUERY", e)
        except Exception:
            return _failed("DB query failed")
        return jsonify({"year": int(year), "month": int(month), "days": [d.to_dict() for d in days]})

    @app.route("/api/calendar/day", methods=["GET"], endpoint="calendar_day")
    def calendar_day():
        started = time.monotonic()
        date = request.args.get("date")
        logger.info("calendar day request date=%s", date)
        try:
            detail = service.get_day_detail(date)
        except ValidationError as e:
            return _bad_request("MISSING_DATE" if not date else "INVALID_DATE", e)
        except Exception:
            return _failed("Calendar fetch failed")

        logger.info(
            "calendar day ok date=%s sessions=%d duration_ms=%d",
            date,
            len(detail.sessions),
            int((time.monotonic() - started) * 1000),
        )
        return jsonify({"date": date, **detail.to_dict()})

    @app.route("/api/reports/work", methods=["GET"], endpoint="reports_work")
    def reports_work():
        try:
            report = service.get_work_report_by_month(
                request.args.get("year"),
                request.args.get("month"),
                user_key=request.args.get("user") or None,
                site_name=request.args.get("site") or None,
                machine_id=request.args.get("machine") or None,
            )
        except ValidationError as e:
            return _bad_request("INVALID_QUERY", e)
        except Exception:
            return _failed("Work report failed")
        return jsonify(report.to_dict())

    @app.route("/api/reports/rows", methods=["GET"], endpoint="reports_rows")
    def reports_rows():
        name = request.args.get("name", "")
        try:
            rows = service.get_report_rows_by_user_name(
                name,
                sort=request.args.get("sort") or None,
                order=request.args.get("order") or None,
            )
        except ValidationError as e:
            return _bad_request("INVALID_QUERY", e)
        except Exception:
            return _failed("Report rows failed")
        logger.info("report rows name=%s rows=%d", name, len(rows))
        return jsonify({"ok": True, "rows": [r.to_dict() for r in rows]})

    @app.route("/api/reports/search", methods=["GET"], endpoint="reports_search")
    def reports_search():
        try:
            records = service.search_sessions(
                request.args.get("year"),
                request.args.get("month"),
                site_name=request.args.get("sitename"),
                user_name=request.args.get("username"),
                machine_name=request.args.get("machinename"),
            )
        except ValidationError as e:
            return _bad_request("INVALID_QUERY", e)
        except Exception:
            return _failed("search failed")
        return jsonify({"ok": True, "records": [r.to_dict() for r in records]})
