import os

from config.config import *  # noqa: F401,F403

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_test"),
}

DB_RETRY_ATTEMPTS = 1
DB_RETRY_DELAY_SECONDS = 0.0
