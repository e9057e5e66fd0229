# core/utils.py

"""
Repository for program-wide utilities.
"""

import os
import tempfile

from core.config import TEMP_FILE_SUFFIX
from core.logging_config import get_logger, log_with_context

logger = get_logger("io")


def atomic_write(target_path: str, content: str) -> None:
    """
    Replaces the contents of `target_path` without ever exposing a partially written file.

    The content is written to a uniquely named temporary file in the same directory,
    flushed and synced to disk, and then swapped over the target with `os.replace()`.

    Args:
        target_path (str): The file to create or replace.
        content (str): The full new content of the file.

    Raises:
        OSError: If the temporary file cannot be created or written, or the rename fails.

    Notes:
        - A failure before the rename leaves the original file untouched.
        - The temporary file is always removed on failure paths.
        - Line endings are written verbatim (no newline translation).
    """
    dir_path = os.path.dirname(os.path.abspath(target_path))
    base_name = os.path.basename(target_path)

    fd, temp_path = tempfile.mkstemp(
        prefix=f".{base_name}.",
        suffix=TEMP_FILE_SUFFIX,
        dir=dir_path,
    )

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, target_path)

    except BaseException:
        try:
            os.remove(temp_path)
        except FileNotFoundError:
            pass

        log_with_context(
            logger,
            "ERROR",
            "Atomic write failed; original left in place.",
            extra_data={"path": target_path, "temp_path": temp_path},
        )
        raise

    log_with_context(
        logger,
        "DEBUG",
        "File replaced atomically.",
        extra_data={"path": target_path, "bytes": len(content.encode("utf-8"))},
    )


def read_lines(file_path: str) -> list[str]:
    """
    Reads a text file into a list of lines, keeping each line's original terminator.
    """
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        return f.readlines()
