# models/record_codec.py

"""
Line-oriented codec for student record files.

A record file is a sequence of `KEY = VALUE` lines, one field per line, for example:

    NAME = Ada
    STUDENT_ID = 7
    SUBJECT1_GRADE = 80.00

Values are formatted by the type of their key: integers as plain decimal, floats with
exactly two decimals, and free text as-is. Free-text values never contain whitespace.

Includes functionality for:
- Serializing a single field to a line and parsing a line back into `(key, raw_value)`
- Validating and normalizing values against a key's `FieldType` and length bound
- Encoding a full record in the canonical key order
- Reading the first occurrence of each key from a list of lines

Notes:
- Unknown keys still parse; callers decide whether they matter.
- When a key appears more than once, readers honour the first occurrence only.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable

from core.config import (
    GRADE_DECIMALS,
    MAX_DOB_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
)
from models.types import FieldType, RecordKey

LINE_PATTERN = re.compile(r"^\s*([A-Z][A-Z0-9_]*)\s*=\s*(.*?)\s*$")

RECORD_KEY_ORDER: list[RecordKey] = [
    RecordKey.NAME,
    RecordKey.FAMILY_NAME,
    RecordKey.DOB,
    RecordKey.STUDENT_ID,
    RecordKey.FATHER_NAME,
    RecordKey.MOTHER_NAME,
    RecordKey.PHONE_NUMBER,
    RecordKey.GRADE,
    RecordKey.SUBJECT1_NAME,
    RecordKey.SUBJECT1_GRADE,
    RecordKey.SUBJECT2_NAME,
    RecordKey.SUBJECT2_GRADE,
    RecordKey.SUBJECT3_NAME,
    RecordKey.SUBJECT3_GRADE,
    RecordKey.SUBJECT4_NAME,
    RecordKey.SUBJECT4_GRADE,
    RecordKey.AVERAGE_GRADE,
]

TEXT_LENGTH_BOUNDS: dict[RecordKey, int] = {
    RecordKey.DOB: MAX_DOB_LENGTH,
    RecordKey.PHONE_NUMBER: MAX_PHONE_LENGTH,
}


# === single line ===


def serialize_line(key: RecordKey | str, value: Any) -> str:
    record_key = RecordKey(key)
    return f"{record_key.value} = {format_value(record_key, value)}\n"


def parse_line(line: str) -> tuple[str, str] | None:
    """
    Splits a `KEY = VALUE` line into its key and raw value.

    Args:
        line (str): A single line, with or without its terminator.

    Returns:
        A `(key, raw_value)` tuple, or None if the line does not match the pattern.
    """
    match = LINE_PATTERN.match(line.rstrip("\r\n"))

    if match is None:
        return None

    return match.group(1), match.group(2)


def line_key(line: str) -> str | None:
    parsed = parse_line(line)
    return parsed[0] if parsed else None


# === value formatting and validation ===


def format_value(key: RecordKey, value: Any) -> str:
    field_type = key.field_type

    if field_type is FieldType.INTEGER:
        return str(int(value))

    if field_type is FieldType.FLOAT:
        return f"{float(value):.{GRADE_DECIMALS}f}"

    return str(value)


def normalize_value(key: RecordKey, value: Any) -> int | float | str:
    """
    Validates a value against the type and bounds of a record key and returns it normalized.

    Accepts native values or their string forms, and then:
        - TEXT: requires a non-empty string without whitespace, within the key's length bound.
        - INTEGER: casts to int and requires a non-negative value (positive for STUDENT_ID).
        - FLOAT: casts to float and requires a finite, non-negative value.

    Args:
        key (RecordKey): The key whose rules apply.
        value (Any): The input value.

    Returns:
        The normalized value (str, int, or float).

    Raises:
        TypeError: If the value has the wrong type or cannot be cast to a number.
        ValueError: If the value is empty, too long, contains whitespace, or is out of range.
    """
    field_type = key.field_type

    if field_type is FieldType.INTEGER:
        return _normalize_integer(key, value)

    if field_type is FieldType.FLOAT:
        return _normalize_float(key, value)

    return _normalize_text(key, value)


def max_length_for(key: RecordKey) -> int:
    return TEXT_LENGTH_BOUNDS.get(key, MAX_NAME_LENGTH)


def _normalize_text(key: RecordKey, value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Invalid input. {key.value} must be text.")

    if value == "":
        raise ValueError(f"Invalid input. {key.value} cannot be empty.")

    if any(ch.isspace() for ch in value):
        raise ValueError(f"Invalid input. {key.value} cannot contain whitespace.")

    max_length = max_length_for(key)

    if len(value) > max_length:
        raise ValueError(
            f"Invalid input. {key.value} cannot be longer than {max_length} characters."
        )

    return value


def _normalize_integer(key: RecordKey, value: Any) -> int:
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Invalid input. {key.value} must be a whole number.")

    try:
        number = int(value.strip()) if isinstance(value, str) else int(value)

    except (TypeError, ValueError):
        raise TypeError(f"Invalid input. {key.value} must be a whole number.") from None

    minimum = 1 if key is RecordKey.STUDENT_ID else 0

    if number < minimum:
        raise ValueError(
            f"Invalid input. {key.value} cannot be less than {minimum}."
        )

    return number


def _normalize_float(key: RecordKey, value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError(f"Invalid input. {key.value} must be a number.")

    try:
        number = float(value.strip()) if isinstance(value, str) else float(value)

    except (TypeError, ValueError):
        raise TypeError(f"Invalid input. {key.value} must be a number.") from None

    if not math.isfinite(number):
        raise ValueError(f"Invalid input. {key.value} must be a finite number.")

    if number < 0:
        raise ValueError(f"Invalid input. {key.value} cannot be less than zero.")

    return number


# === whole records ===


def encode_record(values: dict[RecordKey, Any]) -> str:
    """
    Serializes a full record in canonical key order.

    Raises:
        KeyError: If any key of `RECORD_KEY_ORDER` is missing from `values`.
    """
    return "".join(serialize_line(key, values[key]) for key in RECORD_KEY_ORDER)


def read_record(lines: Iterable[str]) -> dict[str, str]:
    """
    Maps each key to the raw value of its first occurrence; non-matching lines are skipped.
    """
    fields: dict[str, str] = {}

    for line in lines:
        parsed = parse_line(line)

        if parsed is None:
            continue

        key, raw_value = parsed
        fields.setdefault(key, raw_value)

    return fields
