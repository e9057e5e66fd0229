# models/student.py

"""
Represents a student's academic record.

Stores identifying information (names, date of birth, phone number, a sequential ID
assigned by the record store) along with a grade level, four subjects, and a cached
average grade.

Includes functionality for:
- Validating and normalizing every field via property setters
- Recalculating the cached average from the four subject grades
- Converting to and from the key/value mapping used by the record codec

Notes:
- The `id` is None until the record store assigns one on creation.
- `average_grade` is a cached value. It is only refreshed by `calculate_average()`,
  never implicitly on read, mirroring how the value is kept on disk.
"""

from __future__ import annotations

from typing import Any

from core.config import GRADE_DECIMALS, SUBJECT_COUNT
from models.record_codec import normalize_value
from models.types import RecordKey


class Subject:

    def __init__(self, name: str, grade: float):
        self._name: str = Subject.validate_name_input(name)
        self._grade: float = Subject.validate_grade_input(grade)

    # === properties ===

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = Subject.validate_name_input(name)

    @property
    def grade(self) -> float:
        return self._grade

    @grade.setter
    def grade(self, grade: float) -> None:
        self._grade = Subject.validate_grade_input(grade)

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Subject({self._name}, {self._grade})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Subject):
            return NotImplemented
        return self._name == other._name and self._grade == other._grade

    # === data validators ===

    @staticmethod
    def validate_name_input(name: Any) -> str:
        return normalize_value(RecordKey.SUBJECT1_NAME, name)

    @staticmethod
    def validate_grade_input(grade: Any) -> float:
        # held at on-disk precision so the cached average matches a recompute
        return round(normalize_value(RecordKey.SUBJECT1_GRADE, grade), GRADE_DECIMALS)


class Student:

    def __init__(
        self,
        name: str,
        family_name: str,
        date_of_birth: str,
        father_name: str,
        mother_name: str,
        phone_number: str,
        grade_level: int,
        subjects: list[Subject],
        id: int | None = None,
        average_grade: float | None = None,
    ):
        self._id: int | None = None if id is None else normalize_value(
            RecordKey.STUDENT_ID, id
        )
        self.name = name
        self.family_name = family_name
        self.date_of_birth = date_of_birth
        self.father_name = father_name
        self.mother_name = mother_name
        self.phone_number = phone_number
        self.grade_level = grade_level
        self._subjects: list[Subject] = Student.validate_subjects_input(subjects)

        if average_grade is None:
            self.calculate_average()
        else:
            self._average_grade = normalize_value(
                RecordKey.AVERAGE_GRADE, average_grade
            )

    # === properties ===

    @property
    def id(self) -> int | None:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = normalize_value(RecordKey.NAME, name)

    @property
    def family_name(self) -> str:
        return self._family_name

    @family_name.setter
    def family_name(self, family_name: str) -> None:
        self._family_name = normalize_value(RecordKey.FAMILY_NAME, family_name)

    @property
    def full_name(self) -> str:
        return f"{self._name} {self._family_name}"

    @property
    def date_of_birth(self) -> str:
        return self._date_of_birth

    @date_of_birth.setter
    def date_of_birth(self, date_of_birth: str) -> None:
        self._date_of_birth = normalize_value(RecordKey.DOB, date_of_birth)

    @property
    def father_name(self) -> str:
        return self._father_name

    @father_name.setter
    def father_name(self, father_name: str) -> None:
        self._father_name = normalize_value(RecordKey.FATHER_NAME, father_name)

    @property
    def mother_name(self) -> str:
        return self._mother_name

    @mother_name.setter
    def mother_name(self, mother_name: str) -> None:
        self._mother_name = normalize_value(RecordKey.MOTHER_NAME, mother_name)

    @property
    def phone_number(self) -> str:
        return self._phone_number

    @phone_number.setter
    def phone_number(self, phone_number: str) -> None:
        self._phone_number = normalize_value(RecordKey.PHONE_NUMBER, phone_number)

    @property
    def grade_level(self) -> int:
        return self._grade_level

    @grade_level.setter
    def grade_level(self, grade_level: int) -> None:
        self._grade_level = normalize_value(RecordKey.GRADE, grade_level)

    @property
    def subjects(self) -> list[Subject]:
        return list(self._subjects)

    @property
    def average_grade(self) -> float:
        return self._average_grade

    # === derived values ===

    def calculate_average(self) -> float:
        total = sum(subject.grade for subject in self._subjects)
        self._average_grade = total / SUBJECT_COUNT
        return self._average_grade

    # === persistence and import ===

    def assign_id(self, student_id: int) -> None:
        """
        Sets the sequential ID handed out by the record store.

        Raises:
            ValueError: If an ID was already assigned; IDs are immutable.
        """
        if self._id is not None:
            raise ValueError(f"Student already has ID {self._id}.")

        self._id = normalize_value(RecordKey.STUDENT_ID, student_id)

    def to_record(self, student_id: int | None = None) -> dict[RecordKey, Any]:
        """
        Maps every record key to this student's value.

        Args:
            student_id (int | None): Overrides the assigned ID, for serializing before assignment.

        Raises:
            ValueError: If no ID is assigned and none is given.
        """
        record_id = self._id if student_id is None else student_id

        if record_id is None:
            raise ValueError("Cannot serialize a student without an assigned ID.")

        values: dict[RecordKey, Any] = {
            RecordKey.NAME: self._name,
            RecordKey.FAMILY_NAME: self._family_name,
            RecordKey.DOB: self._date_of_birth,
            RecordKey.STUDENT_ID: record_id,
            RecordKey.FATHER_NAME: self._father_name,
            RecordKey.MOTHER_NAME: self._mother_name,
            RecordKey.PHONE_NUMBER: self._phone_number,
            RecordKey.GRADE: self._grade_level,
            RecordKey.AVERAGE_GRADE: self._average_grade,
        }

        for index, subject in enumerate(self._subjects, 1):
            values[RecordKey.subject_name(index)] = subject.name
            values[RecordKey.subject_grade(index)] = subject.grade

        return values

    @classmethod
    def from_record(cls, fields: dict[str, str]) -> Student:
        """
        Builds a `Student` from the raw key/value mapping read from a record file.

        Args:
            fields (dict[str, str]): Raw values keyed by record key name.

        Returns:
            The decoded `Student`.

        Raises:
            KeyError: If a required key is missing.
            TypeError, ValueError: If a raw value fails validation.

        Notes:
            - A missing AVERAGE_GRADE (legacy records) is recalculated from the subjects.
        """
        subjects = [
            Subject(
                name=fields[RecordKey.subject_name(index).value],
                grade=fields[RecordKey.subject_grade(index).value],
            )
            for index in range(1, SUBJECT_COUNT + 1)
        ]

        return cls(
            id=fields[RecordKey.STUDENT_ID.value],
            name=fields[RecordKey.NAME.value],
            family_name=fields[RecordKey.FAMILY_NAME.value],
            date_of_birth=fields[RecordKey.DOB.value],
            father_name=fields[RecordKey.FATHER_NAME.value],
            mother_name=fields[RecordKey.MOTHER_NAME.value],
            phone_number=fields[RecordKey.PHONE_NUMBER.value],
            grade_level=fields[RecordKey.GRADE.value],
            subjects=subjects,
            average_grade=fields.get(RecordKey.AVERAGE_GRADE.value),
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Student({self._id}, {self._name}, {self._family_name}, {self._date_of_birth}, {self._grade_level})"

    def __str__(self) -> str:
        return f"STUDENT: {self.full_name} - (ID: {self._id})"

    # === data validators ===

    @staticmethod
    def validate_subjects_input(subjects: Any) -> list[Subject]:
        """
        Validates the subject list of a `Student`.

        Raises:
            TypeError: If any entry is not a `Subject`.
            ValueError: If the list does not hold exactly `SUBJECT_COUNT` subjects.
        """
        subjects = list(subjects)

        if not all(isinstance(subject, Subject) for subject in subjects):
            raise TypeError("Invalid input. Subjects must be Subject objects.")

        if len(subjects) != SUBJECT_COUNT:
            raise ValueError(
                f"Invalid input. A student must have exactly {SUBJECT_COUNT} subjects."
            )

        return subjects
