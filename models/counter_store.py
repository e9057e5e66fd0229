# models/counter_store.py

"""
Persists the next available student ID in a single small text file.

The file holds one integer followed by a newline and always reflects the ID that will
be handed out next, never the last one issued.

Notes:
- These functions do no locking; `RecordStore` calls them under its store lock.
- Corrupt content (non-numeric, negative, or zero) is healed to 1 rather than reported.
"""

import re

from core.logging_config import get_logger, log_with_context
from core.utils import atomic_write

logger = get_logger("counter")

INITIAL_ID = 1

COUNTER_PATTERN = re.compile(r"[0-9]+")


def parse_counter(raw: str) -> int | None:
    """
    Returns the counter value held in `raw`, or None if it is not an integer of at least 1.

    Only plain ASCII digits count; signs, underscores, and other numerals are corrupt.
    """
    digits = raw.strip()

    if COUNTER_PATTERN.fullmatch(digits) is None:
        return None

    value = int(digits)
    return value if value >= INITIAL_ID else None


def allocate_next_id(counter_path: str) -> int:
    """
    Reads the next available ID from the counter file.

    Args:
        counter_path (str): Path to the counter file.

    Returns:
        The next ID to hand out.

    Raises:
        OSError: If the file exists but cannot be read, or cannot be seeded when absent.

    Notes:
        - If the file is absent it is created, seeded at 1, and 1 is returned.
        - If the content is unparsable (undecodable bytes included) or less than 1, 1 is
          returned and the file is left for the following `commit_next_id()` to overwrite.
    """
    try:
        with open(counter_path, "r", encoding="utf-8", errors="replace") as f:
            raw = f.read()

    except FileNotFoundError:
        commit_next_id(counter_path, INITIAL_ID)
        log_with_context(
            logger,
            "INFO",
            "Counter file absent; seeded at 1.",
            extra_data={"path": counter_path},
        )
        return INITIAL_ID

    value = parse_counter(raw)

    if value is None:
        log_with_context(
            logger,
            "WARNING",
            "Counter file content is corrupt; resetting to 1.",
            extra_data={"path": counter_path, "content": raw[:32]},
        )
        return INITIAL_ID

    return value


def commit_next_id(counter_path: str, new_value: int) -> None:
    """
    Atomically persists `new_value` as the next ID to hand out.

    Raises:
        ValueError: If `new_value` is less than 1.
        OSError: If the counter file cannot be replaced.
    """
    if new_value < INITIAL_ID:
        raise ValueError(f"Counter value cannot be less than {INITIAL_ID}.")

    atomic_write(counter_path, f"{new_value}\n")

    log_with_context(
        logger,
        "DEBUG",
        "Counter committed.",
        context={"next_id": new_value},
        extra_data={"path": counter_path},
    )
