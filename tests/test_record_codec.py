# tests/test_record_codec.py

import pytest

from models.record_codec import (
    RECORD_KEY_ORDER,
    encode_record,
    normalize_value,
    parse_line,
    read_record,
    serialize_line,
)
from models.types import FieldSelector, FieldType, RecordKey


def test_serialize_line_formats_by_type():
    assert serialize_line(RecordKey.NAME, "Ada") == "NAME = Ada\n"
    assert serialize_line(RecordKey.GRADE, 9) == "GRADE = 9\n"
    assert serialize_line(RecordKey.SUBJECT1_GRADE, 80) == "SUBJECT1_GRADE = 80.00\n"
    assert serialize_line("AVERAGE_GRADE", 75.125) == "AVERAGE_GRADE = 75.12\n"


def test_serialize_line_rejects_unknown_key():
    with pytest.raises(ValueError):
        serialize_line("NICKNAME", "Ada")


def test_parse_line():
    assert parse_line("NAME = Ada\n") == ("NAME", "Ada")
    assert parse_line("SUBJECT3_GRADE = 70.00") == ("SUBJECT3_GRADE", "70.00")
    assert parse_line("GRADE = 9\r\n") == ("GRADE", "9")


def test_parse_line_rejects_non_matching_lines():
    assert parse_line("\n") is None
    assert parse_line("just some text\n") is None
    assert parse_line("= 12\n") is None


def test_read_record_keeps_first_occurrence():
    fields = read_record(["NAME = Ada\n", "garbage\n", "NAME = Grace\n"])

    assert fields == {"NAME": "Ada"}


def test_encode_record_uses_canonical_order(sample_student):
    content = encode_record(sample_student.to_record(student_id=1))
    keys = [parse_line(line)[0] for line in content.splitlines()]

    assert keys == [key.value for key in RECORD_KEY_ORDER]
    assert content.endswith("AVERAGE_GRADE = 75.00\n")


def test_normalize_value_accepts_strings():
    assert normalize_value(RecordKey.GRADE, " 10 ") == 10
    assert normalize_value(RecordKey.SUBJECT2_GRADE, "88.5") == 88.5
    assert normalize_value(RecordKey.PHONE_NUMBER, "5551234") == "5551234"


@pytest.mark.parametrize(
    "key, value, error",
    [
        (RecordKey.GRADE, "nine", TypeError),
        (RecordKey.GRADE, "-1", ValueError),
        (RecordKey.STUDENT_ID, 0, ValueError),
        (RecordKey.SUBJECT1_GRADE, "abc", TypeError),
        (RecordKey.SUBJECT1_GRADE, "nan", ValueError),
        (RecordKey.NAME, "", ValueError),
        (RecordKey.NAME, "Ada Byron", ValueError),
        (RecordKey.NAME, 12, TypeError),
        (RecordKey.DOB, "10/12/18150", ValueError),
        (RecordKey.PHONE_NUMBER, "1" * 15, ValueError),
    ],
)
def test_normalize_value_rejects_invalid_input(key, value, error):
    with pytest.raises(error):
        normalize_value(key, value)


def test_field_selector_mapping():
    assert FieldSelector.GRADE_LEVEL.key is RecordKey.GRADE
    assert FieldSelector.GRADE_LEVEL.field_type is FieldType.INTEGER
    assert FieldSelector.DATE_OF_BIRTH.field_type is FieldType.TEXT
    assert FieldSelector.SUBJECT3_GRADE.field_type is FieldType.FLOAT
    assert FieldSelector.SUBJECT3_GRADE.is_subject_grade
    assert not FieldSelector.NAME.is_subject_grade
