from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar

from mysql.connector import errors as mysql_errors

from ..core.constants import DEFAULT_DB_RETRY_ATTEMPTS, DEFAULT_DB_RETRY_DELAY_SECONDS
from ..core.exceptions import DataSourceError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (mysql_errors.OperationalError, mysql_errors.InterfaceError)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def decode_payload(value: Any) -> Optional[Dict[str, Any]]:
    """JSON columns arrive as str, bytes or an already-decoded dict depending on the connector build."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        logger.warning("Skipping row with undecodable payload")
        return None
    return decoded if isinstance(decoded, dict) else None


def payload_rows(rows: List[Dict[str, Any]], column: str = "payload") -> List[Dict[str, Any]]:
    out = []
    for row in rows:
        payload = decode_payload(row.get(column))
        if payload is not None:
            out.append(payload)
    return out


def call_with_retry(
    fn: Callable[..., T],
    *args: Any,
    attempts: int = DEFAULT_DB_RETRY_ATTEMPTS,
    delay: float = DEFAULT_DB_RETRY_DELAY_SECONDS,
    **kwargs: Any,
) -> T:
    """Call ``fn`` retrying transient driver errors with exponential backoff.

    Once the attempts are used up the last driver error is raised as
    :class:`DataSourceError`.
    """
    attempts = max(1, int(attempts))
    wait = float(delay)
    for attempt in range(1, attempts + 1):
        try:
            return fn(*args, **kwargs)
        except TRANSIENT_ERRORS as exc:
            if attempt >= attempts:
                raise DataSourceError(f"{getattr(fn, '__name__', 'query')} failed after {attempts} attempts") from exc
            logger.warning(
                "%s failed (%s), retrying in %.2fs (%d attempts left)",
                getattr(fn, "__name__", "query"),
                exc,
                wait,
                attempts - attempt,
            )
            time.sleep(wait)
            wait *= 2
    raise DataSourceError("no attempts made")


class MySQLPayloadRepository:
    """Shared plumbing for tables that keep upstream rows in a JSON ``payload`` column."""

    def __init__(
        self,
        conn_factory: DatabaseConnection,
        *,
        retry_attempts: int = DEFAULT_DB_RETRY_ATTEMPTS,
        retry_delay: float = DEFAULT_DB_RETRY_DELAY_SECONDS,
    ):
        self._conn_factory = conn_factory
        self._retry_attempts = retry_attempts
        self._retry_delay = retry_delay

    def _fetch_rows(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return fetchall(cur)

    def _query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        return call_with_retry(
            self._fetch_rows,
            sql,
            params,
            attempts=self._retry_attempts,
            delay=self._retry_delay,
        )

    def _query_payloads(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        return payload_rows(self._query(sql, params))
