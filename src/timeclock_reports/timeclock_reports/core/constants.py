"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Fixed civil offset for Japan Standard Time (no DST).
JST_OFFSET_MS = 9 * 60 * 60 * 1000
JST_TIMEZONE = "Asia/Tokyo"

STANDARD_WORK_MINUTES = 450

UNKNOWN_USER_KEY = "unknown-user"
UNREGISTERED_USER_NAME = "未登録ユーザー"

WORK_DESCRIPTION_SEPARATOR = " / "
BREAKDOWN_SEPARATOR = " / "
BREAKDOWN_PLACEHOLDER = "-"

DEFAULT_COLLATION_LOCALE = "ja"
# Languages whose CLDR ordering matches the untailored DUCET table.
SUPPORTED_COLLATION_LOCALES = ("ja", "en", "root")
DEFAULT_PAIRING_POLICY = "single_slot"
DEFAULT_DB_RETRY_ATTEMPTS = 3
DEFAULT_DB_RETRY_DELAY_SECONDS = 0.5
