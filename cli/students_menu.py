# cli/students_menu.py

"""
Manage Students menu for the Student Records CLI.

This module defines the full interface for managing student records, including:
- Creating new students (the record store assigns the next sequential ID)
- Editing a single field of an existing record
- Viewing one record or all records
- Resetting the whole record store

All operations are routed through the `RecordStore` API; this module only collects and
pre-validates input and renders the resulting `Response` objects.
"""

from functools import partial
from typing import cast

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from core.config import SUBJECT_COUNT
from models.record_codec import normalize_value
from models.record_store import RecordStore
from models.student import Student, Subject
from models.types import FieldSelector, RecordKey


def run(store: RecordStore) -> None:
    """
    Top-level loop with dispatch for the Manage Students menu.

    Args:
        store (RecordStore): The active `RecordStore`.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    title = formatters.format_banner_text("Manage Students")
    options = [
        ("Add Student", add_student),
        ("Edit Student", find_and_edit_student),
        ("View Student", view_student),
        ("View All Students", view_all_students),
        ("Reset Record Store", reset_store),
    ]
    zero_option = "Return to Start Menu"

    while True:
        menu_response = helpers.display_menu(title, options, zero_option)

        if menu_response is MenuSignal.EXIT:
            break

        elif callable(menu_response):
            menu_response(store)

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")

    helpers.returning_to("Start Menu")


# === add student ===


def add_student(store: RecordStore) -> None:
    """
    Loops a prompt to create a new student record.

    Args:
        store (RecordStore): The active `RecordStore`.

    Notes:
        - Each confirmed student is written to disk immediately.
    """
    while True:
        new_student = prompt_new_student()

        if new_student is not None and preview_and_confirm_student(new_student):
            store_response = store.create_student(new_student)

            if not store_response.success:
                helpers.display_response_failure(store_response)
                print(f"\n{new_student.full_name} was not added.")

            else:
                print(f"\n{store_response.detail}")
                print(f"Record written to: {store_response.data['path']}")

        if not helpers.confirm_action(
            "Would you like to continue adding new students?"
        ):
            break

    helpers.returning_to("Manage Students menu")


def prompt_new_student() -> Student | None:
    """
    Collects every field of a new student.

    Returns:
        A new `Student` object without an ID, or None if the user cancels.
    """
    identity_prompts = [
        ("name", RecordKey.NAME, "first name"),
        ("family_name", RecordKey.FAMILY_NAME, "family name"),
        ("date_of_birth", RecordKey.DOB, "date of birth (DD/MM/YYYY)"),
        ("father_name", RecordKey.FATHER_NAME, "father's name"),
        ("mother_name", RecordKey.MOTHER_NAME, "mother's name"),
        ("phone_number", RecordKey.PHONE_NUMBER, "phone number"),
        ("grade_level", RecordKey.GRADE, "grade level"),
    ]
    values = {}

    for attribute, key, description in identity_prompts:
        value = prompt_field_input_or_cancel(key, description)

        if value is MenuSignal.CANCEL:
            return None
        values[attribute] = value

    subjects = []

    for index in range(1, SUBJECT_COUNT + 1):
        subject_name = prompt_field_input_or_cancel(
            RecordKey.subject_name(index), f"subject {index} name"
        )

        if subject_name is MenuSignal.CANCEL:
            return None

        subject_grade = prompt_field_input_or_cancel(
            RecordKey.subject_grade(index), f"grade for {subject_name}"
        )

        if subject_grade is MenuSignal.CANCEL:
            return None

        subjects.append(Subject(cast(str, subject_name), cast(float, subject_grade)))

    try:
        return Student(subjects=subjects, **values)

    except (TypeError, ValueError) as e:
        print(f"\n[ERROR] Could not create student: {e}")
        return None


def preview_and_confirm_student(student: Student) -> bool:
    """
    Previews new student details and prompts the user for confirmation.

    Returns:
        True if the user confirms the details, and False otherwise.
    """
    print("\nYou are about to create the following student:")
    print(model_formatters.format_student_multiline(student))

    if helpers.confirm_action("Would you like to create this student?"):
        return True

    else:
        print(f"\nDiscarding student: {student.full_name}")
        return False


# === data input helpers ===


def prompt_field_input_or_cancel(
    key: RecordKey, description: str
) -> int | float | str | MenuSignal:
    """
    Solicits and validates input for a single record field, treating blank input as 'cancel'.

    Args:
        key (RecordKey): The key whose type and bounds the input must satisfy.
        description (str): A readable name for the field, used in the prompt.

    Returns:
        The normalized value, or `MenuSignal.CANCEL` if the user cancels input.

    Notes:
        - Whitespace inside free-text values is rejected and the user is prompted again.
    """
    return helpers.prompt_validated_input_or_cancel(
        f"Enter {description} (leave blank to cancel):",
        partial(normalize_value, key),
    )


def prompt_student_id_or_cancel() -> int | MenuSignal:
    return helpers.prompt_validated_input_or_cancel(
        "Enter the student ID (leave blank to cancel):",
        partial(normalize_value, RecordKey.STUDENT_ID),
    )


def find_student(store: RecordStore) -> Student | MenuSignal:
    """
    Prompts for a student ID and loads the matching record.

    Returns:
        The loaded `Student`, or `MenuSignal.CANCEL` if the user cancels or the lookup fails.
    """
    student_id = prompt_student_id_or_cancel()

    if student_id is MenuSignal.CANCEL:
        return MenuSignal.CANCEL

    store_response = store.load_student(student_id)

    if not store_response.success:
        helpers.display_response_failure(store_response)
        return MenuSignal.CANCEL

    return store_response.data["record"]


# === edit student ===


def format_selector_option(selector: FieldSelector) -> str:
    return f"{selector.label:<20} ({selector.field_type.value})"


def find_and_edit_student(store: RecordStore) -> None:
    """
    Prompts the user to find a student, pick a field, and enter its new value.

    Args:
        store (RecordStore): The active `RecordStore`.

    Notes:
        - Subject grade edits also refresh the average grade; a failed refresh is reported
          separately and does not undo the grade change.
    """
    student = find_student(store)

    if student is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    student = cast(Student, student)

    print(f"\n{model_formatters.format_student_multiline(student)}")

    selector = helpers.prompt_selection_from_list(
        list(FieldSelector), "Editable Fields", format_selector_option
    )

    if selector is None:
        helpers.returning_without_changes()
        return

    new_value = prompt_field_input_or_cancel(selector.key, f"new {selector.label.lower()}")

    if new_value is MenuSignal.CANCEL or not helpers.confirm_make_change():
        helpers.returning_without_changes()
        return

    store_response = store.edit_field(student.id, selector, new_value)

    if not store_response.success:
        helpers.display_response_failure(store_response)
        return

    print(f"\n{store_response.detail}")

    average_response = store_response.data["average_response"]

    if average_response is not None:
        helpers.display_response_failure(average_response)


# === view students ===


def view_student(store: RecordStore) -> None:
    student = find_student(store)

    if student is MenuSignal.CANCEL:
        return

    print(f"\n{model_formatters.format_student_multiline(cast(Student, student))}")


def view_all_students(store: RecordStore) -> None:
    """
    Displays a one-line summary of every student record in the store.

    Notes:
        - Records that fail to load are listed by ID after the summaries.
    """
    list_response = store.list_record_ids()

    if not list_response.success:
        helpers.display_response_failure(list_response)
        return

    record_ids = list_response.data["record_ids"]

    if not record_ids:
        print("\nThere are no student records.")
        return

    students = []
    unreadable = []

    for record_id in record_ids:
        store_response = store.load_student(record_id)

        if store_response.success:
            students.append(store_response.data["record"])
        else:
            unreadable.append(str(record_id))

    print(f"\n{formatters.format_banner_text('All Students')}")
    helpers.display_results(students, formatter=model_formatters.format_student_oneline)

    if unreadable:
        print(
            f"\nCould not read the records for IDs {formatters.format_list_with_and(unreadable)}."
        )


# === reset store ===


def reset_store(store: RecordStore) -> None:
    """
    Wipes every student record and resets the ID counter to 1, after confirmation.
    """
    helpers.caution_banner()
    print(
        "You are about to permanently delete every student record and restart IDs from 1."
    )

    if not helpers.confirm_action("Are you sure you want to reset the record store?"):
        helpers.returning_without_changes()
        return

    store_response = store.reset()

    if not store_response.success:
        helpers.display_response_failure(store_response)
        return

    print(f"\n{store_response.detail}")
