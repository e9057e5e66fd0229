# cli/path_utils.py

import os

from core.config import RECORDS_DIRNAME, get_data_root


def get_data_dir(user_input: str | None) -> str:
    """
    Resolves the data root for the record store based on user input or configuration.

    Args:
        user_input (str | None): An optional user-specified directory path. If None or blank, the configured default is used.

    Returns:
        An absolute path string. If user input is provided, it is expanded and returned.
        Otherwise, falls back to `STUDENT_RECORDS_DIR` or `~/Documents/StudentRecords`.
    """
    if user_input is not None and user_input.strip():
        return os.path.abspath(os.path.expanduser(user_input.strip()))
    else:
        return get_data_root()


def ensure_store_dirs(data_root: str) -> str:
    """
    Creates the data root and its records directory if they do not exist.

    Args:
        data_root (str): The data root path.

    Returns:
        The data root path, unchanged.
    """
    os.makedirs(os.path.join(data_root, RECORDS_DIRNAME), exist_ok=True)

    return data_root


def resolve_data_dir(dir_input: str | None) -> str:
    """
    Produces and ensures a valid data root for the record store.

    Notes:
        - Creates the records directory on disk (including parents) if it does not exist.
    """
    return ensure_store_dirs(get_data_dir(dir_input))
