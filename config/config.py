import os

from config import env_flag


class Config:
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", os.environ.get("DB_DATABASE", "timeclock"))

    BREAK_POLICY_ENABLED = env_flag("BREAK_POLICY_ENABLED", True)
    PAIRING_POLICY = os.environ.get("PAIRING_POLICY", "single_slot")
    COLLATION_LOCALE = os.environ.get("COLLATION_LOCALE", "ja")

    DB_RETRY_ATTEMPTS = int(os.environ.get("DB_RETRY_ATTEMPTS", "3"))
    DB_RETRY_DELAY_SECONDS = float(os.environ.get("DB_RETRY_DELAY_SECONDS", "0.5"))


DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

BREAK_POLICY_ENABLED = Config.BREAK_POLICY_ENABLED
PAIRING_POLICY = Config.PAIRING_POLICY
COLLATION_LOCALE = Config.COLLATION_LOCALE
DB_RETRY_ATTEMPTS = Config.DB_RETRY_ATTEMPTS
DB_RETRY_DELAY_SECONDS = Config.DB_RETRY_DELAY_SECONDS
