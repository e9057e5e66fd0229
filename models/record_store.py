# models/record_store.py

"""
The RecordStore is the handle through which every student record is created, edited,
read, and wiped. It is the "source of truth" for the on-disk store.

Layout inside the data root:
    next_id.txt                 the next ID to hand out
    students/output_<id>.txt    one `KEY = VALUE` record file per student

Every mutation (ID allocation, field edits, average recomputation, store reset) runs
under a single lock owned by the handle, and every file write goes through
`atomic_write()`, so no reader ever sees a half-written record or counter.

All public methods return a structured `Response` rather than raising.
"""

from __future__ import annotations

import os
import re
import shutil
import threading
from typing import Any

from core.config import (
    COUNTER_FILENAME,
    RECORD_FILENAME_PREFIX,
    RECORD_FILENAME_SUFFIX,
    RECORDS_DIRNAME,
    SUBJECT_COUNT,
    record_filename,
)
from core.logging_config import get_logger, log_with_context
from core.response import ErrorCode, Response
from core.utils import atomic_write, read_lines
from models.counter_store import INITIAL_ID, allocate_next_id, commit_next_id
from models.record_codec import (
    encode_record,
    line_key,
    normalize_value,
    read_record,
    serialize_line,
)
from models.student import Student
from models.types import FieldSelector, RecordKey

logger = get_logger("store")

RECORD_FILENAME_PATTERN = re.compile(
    rf"^{re.escape(RECORD_FILENAME_PREFIX)}(\d+){re.escape(RECORD_FILENAME_SUFFIX)}$"
)


class RecordStore:

    def __init__(self, data_root: str, lock: Any = None):
        self._data_root: str = os.path.abspath(os.path.expanduser(data_root))
        # any context manager with Lock semantics may be injected
        self._lock = lock if lock is not None else threading.Lock()

    # === properties ===

    @property
    def data_root(self) -> str:
        return self._data_root

    @property
    def counter_path(self) -> str:
        return os.path.join(self._data_root, COUNTER_FILENAME)

    @property
    def records_dir(self) -> str:
        return os.path.join(self._data_root, RECORDS_DIRNAME)

    def record_path(self, record_id: int) -> str:
        return os.path.join(self.records_dir, record_filename(record_id))

    # === create ===

    def create_student(self, student: Student) -> Response:
        """
        Assigns the next sequential ID to a new `Student` and writes its record file.

        Args:
            student (Student): A fully populated student without an ID.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the ID was allocated and the record file written.
                    - False if the input is invalid or any file operation fails.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a confirmation message with the new ID.
                - error (ErrorCode | str | None):
                    - `ErrorCode.VALIDATION_FAILED` if the input is not a new `Student`.
                    - `ErrorCode.IO_ERROR` if the counter or record file cannot be written.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 201 on success
                    - 400 on validation or unexpected failures
                    - 500 on I/O failures
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "student_id" (int): The assigned ID.
                        - "path" (str): The record file that was written.
                        - "record" (Student): The student, now carrying its ID.
                    - On failure:
                        - None

        Notes:
            - The counter is committed before the record file is written. If the record
              write fails, that ID is burned and never reissued.
            - The cached average is recalculated before writing, so a new record always
              satisfies the average invariant.
        """
        if not isinstance(student, Student) or student.id is not None:
            return Response.fail(
                detail="Only a new Student without an assigned ID can be created.",
                error=ErrorCode.VALIDATION_FAILED,
            )

        try:
            with self._lock:
                student_id = allocate_next_id(self.counter_path)
                commit_next_id(self.counter_path, student_id + 1)

                student.calculate_average()
                path = self.record_path(student_id)
                atomic_write(path, encode_record(student.to_record(student_id)))

                student.assign_id(student_id)

        except OSError as e:
            return self._fail_io("Failed to create student record", e)

        except Exception as e:
            return self._fail_unexpected(e)

        else:
            log_with_context(
                logger,
                "INFO",
                "Student record created.",
                context={"student_id": student_id},
                extra_data={"path": path},
            )

            return Response.succeed(
                detail=f"Student successfully created with ID {student_id}.",
                status_code=201,
                data={
                    "student_id": student_id,
                    "path": path,
                    "record": student,
                },
            )

    # === edit ===

    def edit_field(
        self, record_id: Any, selector: FieldSelector, new_value: Any
    ) -> Response:
        """
        Replaces a single field of an existing record file.

        Args:
            record_id (Any): The student ID (int or numeric string).
            selector (FieldSelector): The field to edit.
            new_value (Any): The new value, usually the raw string entered by the user.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the field was replaced and committed.
                    - False if validation fails, the record or field is absent, or I/O fails.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a confirmation message with the new value.
                - error (ErrorCode | str | None):
                    - `ErrorCode.VALIDATION_FAILED` if the ID, selector, or value is invalid.
                    - `ErrorCode.RECORD_NOT_FOUND` if no file exists for the ID.
                    - `ErrorCode.FIELD_NOT_FOUND` if the record lacks the targeted key.
                    - `ErrorCode.IO_ERROR` if the file cannot be read, decoded, or replaced.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 404 if the record or the field cannot be found
                    - 500 on I/O failures
                    - 400 for other failures
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "student_id" (int): The edited record's ID.
                        - "field" (FieldSelector): The edited field.
                        - "value" (int | float | str): The normalized value written.
                        - "path" (str): The record file.
                        - "average_response" (Response | None): The outcome of the average
                          recomputation for subject-grade edits, otherwise None.
                    - On failure:
                        - None

        Notes:
            - Validation happens before any file is touched.
            - Only the first line carrying the selector's key is replaced. Later lines with
              the same key pass through unchanged.
            - A failed average recomputation does not roll back the grade edit.
        """
        try:
            student_id = normalize_value(RecordKey.STUDENT_ID, record_id)

            if not isinstance(selector, FieldSelector):
                raise TypeError(f"Unrecognized field selector: {selector!r}")

            value = normalize_value(selector.key, new_value)

        except (TypeError, ValueError) as e:
            return Response.fail(
                detail=f"Validation failed: {e}",
                error=ErrorCode.VALIDATION_FAILED,
            )

        path = self.record_path(student_id)

        try:
            with self._lock:
                lines = read_lines(path)
                new_lines = replace_first_line(
                    lines, selector.key, serialize_line(selector.key, value)
                )

                if new_lines is None:
                    return self._fail_field_not_found(student_id, selector.key)

                atomic_write(path, "".join(new_lines))

        except FileNotFoundError:
            return self._fail_record_not_found(student_id)

        except UnicodeDecodeError as e:
            return self._fail_io("Student record is not valid UTF-8", e)

        except OSError as e:
            return self._fail_io("Failed to edit student record", e)

        except Exception as e:
            return self._fail_unexpected(e)

        log_with_context(
            logger,
            "INFO",
            "Student record field updated.",
            context={"student_id": student_id, "field": selector.key.value},
            extra_data={"path": path},
        )

        average_response = None
        detail = f"{selector.label} successfully updated to: {value}."

        if selector.is_subject_grade:
            average_response = self.recompute_average(path)

            if average_response.success:
                detail += f" Average grade is now {average_response.data['average']:.2f}."
            else:
                detail += f" Average grade was not updated: {average_response.detail}"

        return Response.succeed(
            detail=detail,
            data={
                "student_id": student_id,
                "field": selector,
                "value": value,
                "path": path,
                "average_response": average_response,
            },
        )

    # === derived values ===

    def recompute_average(self, record_path: str) -> Response:
        """
        Re-derives AVERAGE_GRADE from the four subject grades of a record file.

        Args:
            record_path (str): The record file to update.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the average line was rewritten (or appended).
                    - False if a grade is missing or unreadable, or I/O fails.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a confirmation message with the new average.
                - error (ErrorCode | str | None):
                    - `ErrorCode.MISSING_FIELDS` if any SUBJECTn_GRADE key is absent.
                    - `ErrorCode.VALIDATION_FAILED` if a present grade is not a valid number.
                    - `ErrorCode.RECORD_NOT_FOUND` if the file does not exist.
                    - `ErrorCode.IO_ERROR` if the file cannot be read, decoded, or replaced.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 404 if the record cannot be found
                    - 409 if grades are missing
                    - 500 on I/O failures
                    - 400 for other failures
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "average" (float): The new average, rounded to two decimals.
                    - On failure with `MISSING_FIELDS`:
                        - "missing" (list[str]): The absent keys.

        Notes:
            - The record is never repaired: on failure the file is left untouched.
            - The first AVERAGE_GRADE line is replaced in place; if none exists the line is
              appended, so legacy records gain one.
        """
        try:
            with self._lock:
                lines = read_lines(record_path)
                fields = read_record(lines)

                grade_keys = [
                    RecordKey.subject_grade(index)
                    for index in range(1, SUBJECT_COUNT + 1)
                ]
                missing = [key.value for key in grade_keys if key.value not in fields]

                if missing:
                    log_with_context(
                        logger,
                        "WARNING",
                        "Average not recomputed; subject grades missing.",
                        context={"missing": missing},
                        extra_data={"path": record_path},
                    )

                    return Response.fail(
                        detail=f"Cannot compute average, missing: {', '.join(missing)}.",
                        error=ErrorCode.MISSING_FIELDS,
                        status_code=409,
                        data={"missing": missing},
                    )

                grades = [normalize_value(key, fields[key.value]) for key in grade_keys]
                average = sum(grades) / float(SUBJECT_COUNT)

                average_line = serialize_line(RecordKey.AVERAGE_GRADE, average)
                new_lines = replace_first_line(
                    lines, RecordKey.AVERAGE_GRADE, average_line
                )

                if new_lines is None:
                    new_lines = append_line(lines, average_line)

                atomic_write(record_path, "".join(new_lines))

        except FileNotFoundError:
            return Response.fail(
                detail=f"No student record found at: {record_path}.",
                error=ErrorCode.RECORD_NOT_FOUND,
                status_code=404,
            )

        except UnicodeDecodeError as e:
            return self._fail_io("Student record is not valid UTF-8", e)

        except (TypeError, ValueError) as e:
            return Response.fail(
                detail=f"Cannot compute average: {e}",
                error=ErrorCode.VALIDATION_FAILED,
            )

        except OSError as e:
            return self._fail_io("Failed to recompute average", e)

        except Exception as e:
            return self._fail_unexpected(e)

        else:
            log_with_context(
                logger,
                "INFO",
                "Average grade recomputed.",
                context={"average": round(average, 2)},
                extra_data={"path": record_path},
            )

            return Response.succeed(
                detail=f"Average grade successfully updated to: {average:.2f}.",
                data={
                    "average": round(average, 2),
                },
            )

    # === reset ===

    def reset(self) -> Response:
        """
        Removes every record file and resets the counter to 1.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the records directory was emptied and the counter reset.
                    - False if any removal or the counter write fails.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a confirmation message with the number of removed entries.
                - error (ErrorCode | str | None):
                    - `ErrorCode.IO_ERROR` if an entry cannot be removed or the counter written.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 500 on I/O failures
                    - 400 for other failures
                - data (dict | None): Payload with the following keys:
                    - "removed" (int): The number of entries removed, also on failure.

        Notes:
            - Every entry of the records directory is removed, not only record files.
            - A missing records directory counts as already empty.
        """
        removed = 0

        try:
            with self._lock:
                if os.path.isdir(self.records_dir):
                    for entry in os.scandir(self.records_dir):
                        if entry.is_dir(follow_symlinks=False):
                            shutil.rmtree(entry.path)
                        else:
                            os.remove(entry.path)

                        removed += 1

                commit_next_id(self.counter_path, INITIAL_ID)

        except OSError as e:
            return self._fail_io("Failed to reset the record store", e, {"removed": removed})

        except Exception as e:
            return self._fail_unexpected(e)

        else:
            log_with_context(
                logger,
                "INFO",
                "Record store reset.",
                extra_data={"removed": removed, "data_root": self._data_root},
            )

            return Response.succeed(
                detail=f"Record store reset. {removed} entries removed.",
                data={
                    "removed": removed,
                },
            )

    # === data accessors ===

    def load_student(self, record_id: Any) -> Response:
        """
        Reads and decodes a record file into a `Student`.

        Args:
            record_id (Any): The student ID (int or numeric string).

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the record was read and decoded.
                    - False if the ID is invalid, the record is absent or malformed, or I/O fails.
                - error (ErrorCode | str | None):
                    - `ErrorCode.VALIDATION_FAILED` if the ID is invalid.
                    - `ErrorCode.RECORD_NOT_FOUND` if no file exists for the ID.
                    - `ErrorCode.INVALID_INPUT` if the file lacks keys or holds invalid values.
                    - `ErrorCode.IO_ERROR` if the file cannot be read or is not valid UTF-8.
                - status_code (int | None):
                    - 200 on success
                    - 404 if the record cannot be found
                    - 500 on I/O failures
                    - 400 for other failures
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (Student): The decoded student.

        Notes:
            - Reads take no lock; atomic replacement guarantees a complete file is seen.
        """
        try:
            student_id = normalize_value(RecordKey.STUDENT_ID, record_id)

        except (TypeError, ValueError) as e:
            return Response.fail(
                detail=f"Validation failed: {e}",
                error=ErrorCode.VALIDATION_FAILED,
            )

        try:
            fields = read_record(read_lines(self.record_path(student_id)))
            student = Student.from_record(fields)

        except FileNotFoundError:
            return self._fail_record_not_found(student_id)

        except UnicodeDecodeError as e:
            return self._fail_io("Student record is not valid UTF-8", e)

        except OSError as e:
            return self._fail_io("Failed to read student record", e)

        except KeyError as e:
            return Response.fail(
                detail=f"Student record {student_id} is missing required field: {e}",
                error=ErrorCode.INVALID_INPUT,
            )

        except (TypeError, ValueError) as e:
            return Response.fail(
                detail=f"Student record {student_id} holds an invalid value: {e}",
                error=ErrorCode.INVALID_INPUT,
            )

        else:
            return Response.succeed(
                data={
                    "record": student,
                },
            )

    def list_record_ids(self) -> Response:
        """
        Lists the IDs of every record file in the store, in ascending order.

        Returns:
            Response: On success, data holds "record_ids" (list[int]). Fails with
            `ErrorCode.IO_ERROR` if the records directory cannot be read.

        Notes:
            - Files not named `output_<id>.txt` are ignored.
            - A missing records directory yields an empty list.
        """
        try:
            filenames = os.listdir(self.records_dir)

        except FileNotFoundError:
            filenames = []

        except OSError as e:
            return self._fail_io("Failed to list student records", e)

        record_ids = sorted(
            int(match.group(1))
            for match in map(RECORD_FILENAME_PATTERN.match, filenames)
            if match is not None
        )

        return Response.succeed(
            data={
                "record_ids": record_ids,
            },
        )

    # === failure helpers ===

    def _fail_record_not_found(self, student_id: int) -> Response:
        response = Response.fail(
            detail=f"No student record found with ID {student_id}.",
            error=ErrorCode.RECORD_NOT_FOUND,
            status_code=404,
        )
        log_with_context(
            logger, "WARNING", "Student record not found.", extra_data=response.to_dict()
        )
        return response

    def _fail_field_not_found(self, student_id: int, key: RecordKey) -> Response:
        response = Response.fail(
            detail=f"Student record {student_id} has no {key.value} field. No changes made.",
            error=ErrorCode.FIELD_NOT_FOUND,
            status_code=404,
        )
        log_with_context(
            logger, "WARNING", "Record field not found.", extra_data=response.to_dict()
        )
        return response

    def _fail_io(
        self,
        message: str,
        error: OSError | UnicodeDecodeError,
        data: dict | None = None,
    ) -> Response:
        response = Response.fail(
            detail=f"{message}: {error}",
            error=ErrorCode.IO_ERROR,
            status_code=500,
            data=data,
        )
        log_with_context(logger, "ERROR", message, extra_data=response.to_dict())
        return response

    def _fail_unexpected(self, error: Exception) -> Response:
        logger.exception("Unexpected record store error.")
        return Response.fail(
            detail=f"Unexpected error: {error}",
            error=ErrorCode.INTERNAL_ERROR,
        )


# === line helpers ===


def replace_first_line(
    lines: list[str], key: RecordKey, new_line: str
) -> list[str] | None:
    """
    Returns a copy of `lines` with the first line keyed by `key` replaced by `new_line`.

    Args:
        lines (list[str]): The record lines, terminators included.
        key (RecordKey): The key to match.
        new_line (str): The serialized replacement, ending in a newline.

    Returns:
        The new list of lines, or None if no line carries `key`.

    Notes:
        - The replaced line keeps the original line's terminator (or lack of one).
        - Later lines with the same key are left untouched.
    """
    for index, line in enumerate(lines):
        if line_key(line) != key.value:
            continue

        body = new_line.rstrip("\r\n")
        terminator = line[len(line.rstrip("\r\n")) :]

        return lines[:index] + [body + terminator] + lines[index + 1 :]

    return None


def append_line(lines: list[str], new_line: str) -> list[str]:
    if lines and not lines[-1].endswith("\n"):
        return lines[:-1] + [lines[-1] + "\n", new_line]

    return lines + [new_line]
