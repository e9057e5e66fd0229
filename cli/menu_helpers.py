# cli/menu_helpers.py

"""
Console interaction shared by the Student Records menus.

Covers numbered menus and pick lists, free-text prompts with optional validation,
yes/no confirmation, and the standard one-line messages printed between screens.

Conventions:
- Every prompt goes through `prompt_user_input()`, which strips the answer.
- A blank answer means "cancel" for the `*_or_cancel` prompts.
- In numbered menus and lists, "0" backs out and anything else is a 1-based index.
"""

from enum import Enum
from typing import Any, Callable, Iterable, Sequence, TypeVar

import core.formatters as formatters
from core.response import Response

T = TypeVar("T")


class MenuSignal(Enum):
    CANCEL = "CANCEL"
    EXIT = "EXIT"


def parse_menu_index(choice: str, option_count: int) -> int:
    """
    Converts a 1-based menu answer into a list index.

    Raises:
        ValueError: If `choice` is not an integer or falls outside 1..option_count.
    """
    index = int(choice) - 1

    if not 0 <= index < option_count:
        raise ValueError(f"{choice} is not a listed option.")

    return index


# === display methods ===


def display_menu(
    title: str,
    options: list[tuple[str, Callable[..., Any]]],
    zero_option: str = "Return",
) -> MenuSignal | Callable[..., Any]:
    """
    Shows `title` above the numbered `options` and waits for a valid pick.

    Args:
        title (str): Heading printed above the options.
        options (list[tuple[str, Callable[..., Any]]]): (label, action) pairs, numbered from 1.
        zero_option (str, optional): Label shown next to "0". Defaults to "Return".

    Returns:
        The chosen action, or `MenuSignal.EXIT` when the user enters "0".
    """
    while True:
        print(f"\n{title}")
        display_results((label for label, _ in options), show_index=True)
        print(f" 0. {zero_option}")

        choice = prompt_user_input("Select an option:")

        if choice == "0":
            return MenuSignal.EXIT

        try:
            return options[parse_menu_index(choice, len(options))][1]

        except ValueError:
            print("Invalid selection. Please try again.")


def display_results(
    results: Iterable[Any],
    show_index: bool = False,
    formatter: Callable[[Any], str] = str,
) -> None:
    for i, result in enumerate(results, 1):
        prefix = f"{i:>2}. " if show_index else ""
        print(f"{prefix}{formatter(result)}")


# === prompt user input methods ===


def prompt_user_input(prompt: str) -> str:
    return input(f"\n{prompt}\n  >> ").strip()


def prompt_user_input_or_cancel(prompt: str) -> str | MenuSignal:
    answer = prompt_user_input(prompt)
    return answer or MenuSignal.CANCEL


def prompt_validated_input_or_cancel(
    prompt: str, validator: Callable[[str], T]
) -> T | MenuSignal:
    """
    Repeats `prompt` until `validator` accepts the answer or the user leaves it blank.

    The validator returns the normalized value or raises TypeError/ValueError; its
    message is shown before asking again.
    """
    while True:
        answer = prompt_user_input_or_cancel(prompt)

        if answer is MenuSignal.CANCEL:
            return answer

        try:
            return validator(answer)

        except (TypeError, ValueError) as e:
            print(f"\n[ERROR] {e}")
            print("Please try again.")


def confirm_action(prompt: str) -> bool:
    while True:
        answer = prompt_user_input(f"{prompt} (y/n): ").lower()

        if answer in ("y", "yes"):
            return True

        if answer in ("n", "no"):
            return False

        print("Please answer 'y' or 'n'.")


def confirm_make_change() -> bool:
    return confirm_action("Do you want to make this change?")


# === selection methods ===


def prompt_selection_from_list(
    list_data: Sequence[T],
    list_description: str,
    formatter: Callable[[T], str] = str,
) -> T | None:
    """
    Lets the user pick one entry of `list_data` by its number.

    Args:
        list_data (Sequence[T]): Entries shown in the given order.
        list_description (str): Banner text, also used when the list is empty (e.g. "fields").
        formatter (Callable[[T], str], optional): Renders one entry. Defaults to str().

    Returns:
        The picked entry, or None if the list is empty or the user enters "0".
    """
    if not list_data:
        print(f"\nThere are no {list_description.lower()}.")
        return None

    while True:
        print(f"\n{formatters.format_banner_text(list_description)}")
        display_results(list_data, True, formatter)

        choice = prompt_user_input("Select an option (0 to cancel):")

        if choice == "0":
            return None

        try:
            return list_data[parse_menu_index(choice, len(list_data))]

        except ValueError:
            print("\nInvalid selection. Please try again.")


# === often used messages ===


def returning_without_changes() -> None:
    print("\nReturning without changes.")


def returning_to(destination: str) -> None:
    print(f"\nReturning to {destination}.")


def caution_banner() -> None:
    print(f"\n{formatters.format_banner_text('CAUTION!')}")


def display_response_failure(response: Response) -> None:
    """
    Prints `[ERROR: <code>] <detail>` for a failed `Response`; successes print nothing.
    """
    if response.success:
        return

    if isinstance(response.error, Enum):
        code = response.error.name
    else:
        code = str(response.error)

    print(f"\n[ERROR: {code}] {response.detail}")
