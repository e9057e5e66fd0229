# core/config.py

"""
Program-wide configuration for the student record store.

Holds the on-disk layout (counter file, records directory, record file naming),
the length bounds for free-text record fields, and environment-driven settings.

Environment variables:
- `STUDENT_RECORDS_DIR`: data root used when no directory is given explicitly.
- `STUDENT_RECORDS_LOG_LEVEL`: logging level name (defaults to WARNING).
"""

import os

# === on-disk layout ===

COUNTER_FILENAME = "next_id.txt"
RECORDS_DIRNAME = "students"
RECORD_FILENAME_PREFIX = "output_"
RECORD_FILENAME_SUFFIX = ".txt"

TEMP_FILE_SUFFIX = ".tmp"

# === record shape ===

SUBJECT_COUNT = 4

# decimal places kept for grades on disk
GRADE_DECIMALS = 2

# max characters, excluding any terminator
MAX_NAME_LENGTH = 49
MAX_DOB_LENGTH = 10
MAX_PHONE_LENGTH = 14

# === environment ===

DATA_DIR_ENV_VAR = "STUDENT_RECORDS_DIR"
LOG_LEVEL_ENV_VAR = "STUDENT_RECORDS_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def get_default_data_root() -> str:
    documents = os.path.join(os.path.expanduser("~"), "Documents")
    return os.path.join(documents, "StudentRecords")


def get_data_root() -> str:
    """
    Returns the configured data root, falling back to `~/Documents/StudentRecords`.
    """
    configured = os.getenv(DATA_DIR_ENV_VAR, "").strip()

    if configured:
        return os.path.abspath(os.path.expanduser(configured))

    return get_default_data_root()


def get_log_level() -> str:
    return os.getenv(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).strip().upper()


def record_filename(record_id: int) -> str:
    return f"{RECORD_FILENAME_PREFIX}{record_id}{RECORD_FILENAME_SUFFIX}"
