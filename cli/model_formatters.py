# cli/model_formatters.py

# anything that renders domain objects for the console
from textwrap import dedent

import core.formatters as formatters
from models.student import Student

# === student formatters ===


def format_student_oneline(student: Student) -> str:
    average = formatters.format_grade(student.average_grade)

    return f"{student.id:>4} | {student.full_name:<30} | Grade {student.grade_level:<2} | Avg {average}"


def format_student_multiline(student: Student) -> str:
    subject_lines = "\n".join(
        f"... Subject {index}: {subject.name:<20} {formatters.format_grade(subject.grade)}"
        for index, subject in enumerate(student.subjects, 1)
    )
    student_id = student.id if student.id is not None else "[UNASSIGNED]"

    return (
        dedent(
            f"""\
            Student record:
            ... ID: {student_id}
            ... Name: {student.full_name}
            ... Date of Birth: {student.date_of_birth}
            ... Father's Name: {student.father_name}
            ... Mother's Name: {student.mother_name}
            ... Phone Number: {student.phone_number}
            ... Grade Level: {student.grade_level}
            """
        )
        + subject_lines
        + f"\n... Average Grade: {formatters.format_grade(student.average_grade)}"
    )
