from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .health.controller import register as register_health
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.ensure_ascii = False

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        container = build_container(
            db_config=db_config,
            break_policy_enabled=bool(getattr(settings, "BREAK_POLICY_ENABLED", True)),
            pairing_policy=getattr(settings, "PAIRING_POLICY", "single_slot"),
            collation_locale=getattr(settings, "COLLATION_LOCALE", "ja"),
            retry_attempts=int(getattr(settings, "DB_RETRY_ATTEMPTS", 3)),
            retry_delay=float(getattr(settings, "DB_RETRY_DELAY_SECONDS", 0.5)),
        )
        logger.info("settings=%s db=%s", settings_module, container.conn.target)

    register_health(app, container)
    register_reports(app, container)

    return app
