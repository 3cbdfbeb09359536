"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

IMPORT_CHUNK_SIZE = 100
RAW_LINE_LIMIT = 500
IMPORT_LOG_LIMIT = 50
DEFAULT_IMPORT_NAME = "Importação Manual"
REVIEWED_IMPORT_NAME = "Importação manual (revisada)"
DEFAULT_CLOCK_ID = "1"

DEFAULT_TOLERANCE_MINUTES = 5
DEFAULT_DAILY_LOAD_MINUTES = 480
DEFAULT_EXPECTED_START = "08:00"
DEFAULT_WORK_DAYS = "1,2,3,4,5"

DEFAULT_TOKEN_MAX_AGE_SECONDS = 60 * 60 * 12
MIN_PASSWORD_LENGTH = 6

ERROR_MESSAGE_LIMIT = 2000
ERROR_STACK_LIMIT = 5000
ERROR_USER_AGENT_LIMIT = 500
FINGERPRINT_LIMIT = 500
