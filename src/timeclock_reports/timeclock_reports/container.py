from __future__ import annotations

from dataclasses import dataclass

from .breaks.mysql_break_policy_repository import MySQLBreakPolicyRepository
from .breaks.service import BreakPolicyResolver
from .common.collation import Collator
from .core.constants import (
    DEFAULT_COLLATION_LOCALE,
    DEFAULT_DB_RETRY_ATTEMPTS,
    DEFAULT_DB_RETRY_DELAY_SECONDS,
    DEFAULT_PAIRING_POLICY,
)
from .database.connection import DBConfig, DatabaseConnection
from .punches.mysql_punch_repository import MySQLPunchRepository
from .reports.service import ReportService
from .sessions.factory import PairingStrategyFactory
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.pairer import SessionPairer
from .sites.mysql_site_repository import MySQLSiteRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    punches_repo: MySQLPunchRepository
    sessions_repo: MySQLSessionRepository
    sites_repo: MySQLSiteRepository
    break_policy_repo: MySQLBreakPolicyRepository

    break_policy_resolver: BreakPolicyResolver
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    break_policy_enabled: bool = True,
    pairing_policy: str = DEFAULT_PAIRING_POLICY,
    collation_locale: str = DEFAULT_COLLATION_LOCALE,
    retry_attempts: int = DEFAULT_DB_RETRY_ATTEMPTS,
    retry_delay: float = DEFAULT_DB_RETRY_DELAY_SECONDS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection(config)

    retry = {"retry_attempts": int(retry_attempts), "retry_delay": float(retry_delay)}
    punches_repo = MySQLPunchRepository(conn, **retry)
    sessions_repo = MySQLSessionRepository(conn, **retry)
    sites_repo = MySQLSiteRepository(conn, **retry)
    break_policy_repo = MySQLBreakPolicyRepository(conn, **retry)

    break_policy_resolver = BreakPolicyResolver(break_policy_repo, enabled=break_policy_enabled)
    report_service = ReportService(
        punches_repo,
        sessions_repo,
        sites_repo,
        break_policy_resolver,
        pairer=SessionPairer(PairingStrategyFactory().for_policy(pairing_policy)),
        collator=Collator(collation_locale),
    )

    return Container(
        conn=conn,
        punches_repo=punches_repo,
        sessions_repo=sessions_repo,
        sites_repo=sites_repo,
        break_policy_repo=break_policy_repo,
        break_policy_resolver=break_policy_resolver,
        report_service=report_service,
    )
