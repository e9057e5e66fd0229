# cli/main.py

"""
Start Menu for the Student Records CLI.

Provides functions for opening a record store in the default or a chosen directory.
"""

import cli.menu_helpers as helpers
import cli.students_menu as students_menu
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from cli.path_utils import resolve_data_dir
from core.logging_config import get_logger, log_with_context, setup_logging
from models.record_store import RecordStore

logger = get_logger("cli")


def run_cli() -> None:
    """
    Top-level loop with dispatch for the Start menu.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    title = formatters.format_banner_text("STUDENT RECORDS MANAGER")
    options = [
        ("Open the default record store", open_default_store),
        ("Open a record store from a directory", open_store_from_directory),
    ]
    zero_option = "Exit Program"

    while True:
        menu_response = helpers.display_menu(title, options, zero_option)

        if menu_response is MenuSignal.EXIT:
            exit_program()

        elif callable(menu_response):
            store = menu_response()

            if store is not None:
                students_menu.run(store)

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")


def open_store(dir_input: str | None) -> RecordStore | None:
    """
    Resolves the data root, creates its directories if needed, and returns a `RecordStore`.

    Returns:
        RecordStore: The opened store.
        None: If the directories cannot be created.

    Notes:
        - A blank or None input falls back to `STUDENT_RECORDS_DIR`, then `~/Documents/StudentRecords`.
    """
    try:
        data_root = resolve_data_dir(dir_input)

    except OSError as e:
        print(f"\n[ERROR] Could not prepare the data directory: {e}")
        return None

    log_with_context(
        logger, "INFO", "Record store opened.", extra_data={"data_root": data_root}
    )
    print(f"\nUsing record store at: {data_root}")

    return RecordStore(data_root)


def open_default_store() -> RecordStore | None:
    return open_store(None)


def open_store_from_directory() -> RecordStore | None:
    dir_path = helpers.prompt_user_input_or_cancel(
        "Enter path to the record store directory (leave blank to cancel):"
    )

    if dir_path is MenuSignal.CANCEL:
        return None

    return open_store(dir_path)


def exit_program():
    """
    Displays an exit banner and terminates the CLI program.

    Raises:
        SystemExit: Always raised to immediately terminate execution.
    """
    exit_banner = formatters.format_banner_text("Exiting Program")
    print(f"\n{exit_banner}\n")

    raise SystemExit


def main() -> None:
    setup_logging()

    try:
        run_cli()

    except (KeyboardInterrupt, EOFError):
        print("\n\nInterrupted. Exiting.")
        raise SystemExit(130)


if __name__ == "__main__":
    main()
