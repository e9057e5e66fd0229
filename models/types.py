# models/types.py

"""
Holds the enumerations shared by the record codec, the record store, and the CLI.

- `FieldType`: the input type a value must satisfy (free text, integer, float).
- `RecordKey`: the closed set of keys that may appear in a serialized record.
- `FieldSelector`: the fields an edit may target, each mapped to one `RecordKey`.
"""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    TEXT = "Text"
    INTEGER = "Integer"
    FLOAT = "Float"


class RecordKey(str, Enum):
    # --- identity ---
    NAME = "NAME"
    FAMILY_NAME = "FAMILY_NAME"
    DOB = "DOB"
    STUDENT_ID = "STUDENT_ID"
    FATHER_NAME = "FATHER_NAME"
    MOTHER_NAME = "MOTHER_NAME"
    PHONE_NUMBER = "PHONE_NUMBER"

    # --- academic ---
    GRADE = "GRADE"

    # --- subjects ---
    SUBJECT1_NAME = "SUBJECT1_NAME"
    SUBJECT1_GRADE = "SUBJECT1_GRADE"
    SUBJECT2_NAME = "SUBJECT2_NAME"
    SUBJECT2_GRADE = "SUBJECT2_GRADE"
    SUBJECT3_NAME = "SUBJECT3_NAME"
    SUBJECT3_GRADE = "SUBJECT3_GRADE"
    SUBJECT4_NAME = "SUBJECT4_NAME"
    SUBJECT4_GRADE = "SUBJECT4_GRADE"

    # --- derived ---
    AVERAGE_GRADE = "AVERAGE_GRADE"

    @property
    def field_type(self) -> FieldType:
        if self in (RecordKey.STUDENT_ID, RecordKey.GRADE):
            return FieldType.INTEGER

        if self.value.endswith("_GRADE"):
            return FieldType.FLOAT

        return FieldType.TEXT

    @classmethod
    def subject_name(cls, index: int) -> RecordKey:
        return cls(f"SUBJECT{index}_NAME")

    @classmethod
    def subject_grade(cls, index: int) -> RecordKey:
        return cls(f"SUBJECT{index}_GRADE")


class FieldSelector(Enum):
    NAME = ("Name", RecordKey.NAME)
    GRADE_LEVEL = ("Grade Level", RecordKey.GRADE)
    PHONE = ("Phone Number", RecordKey.PHONE_NUMBER)
    FATHER_NAME = ("Father's Name", RecordKey.FATHER_NAME)
    MOTHER_NAME = ("Mother's Name", RecordKey.MOTHER_NAME)
    DATE_OF_BIRTH = ("Date of Birth", RecordKey.DOB)
    FAMILY_NAME = ("Family Name", RecordKey.FAMILY_NAME)
    SUBJECT1_GRADE = ("Subject 1 Grade", RecordKey.SUBJECT1_GRADE)
    SUBJECT2_GRADE = ("Subject 2 Grade", RecordKey.SUBJECT2_GRADE)
    SUBJECT3_GRADE = ("Subject 3 Grade", RecordKey.SUBJECT3_GRADE)
    SUBJECT4_GRADE = ("Subject 4 Grade", RecordKey.SUBJECT4_GRADE)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def key(self) -> RecordKey:
        return self.value[1]

    @property
    def field_type(self) -> FieldType:
        return self.key.field_type

    @property
    def is_subject_grade(self) -> bool:
        return self in SUBJECT_GRADE_SELECTORS


SUBJECT_GRADE_SELECTORS = frozenset(
    {
        FieldSelector.SUBJECT1_GRADE,
        FieldSelector.SUBJECT2_GRADE,
        FieldSelector.SUBJECT3_GRADE,
        FieldSelector.SUBJECT4_GRADE,
    }
)
