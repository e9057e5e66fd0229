# tests/conftest.py

import pytest

from cli.path_utils import ensure_store_dirs
from models.record_store import RecordStore
from models.student import Student, Subject


@pytest.fixture
def data_root(tmp_path):
    return ensure_store_dirs(str(tmp_path / "records"))


@pytest.fixture
def store(data_root):
    return RecordStore(data_root)


@pytest.fixture
def sample_subjects():
    return [
        Subject("Math", 80.0),
        Subject("English", 90.0),
        Subject("Science", 70.0),
        Subject("History", 60.0),
    ]


@pytest.fixture
def sample_student(sample_subjects):
    return Student(
        name="Ada",
        family_name="Lovelace",
        date_of_birth="10/12/1815",
        father_name="George",
        mother_name="Anne",
        phone_number="5551234",
        grade_level=9,
        subjects=sample_subjects,
    )


@pytest.fixture
def created_student(store, sample_student):
    response = store.create_student(sample_student)
    assert response.success
    return response.data["record"]


@pytest.fixture
def make_student(sample_subjects):
    def _make(name: str = "Ada") -> Student:
        return Student(
            name=name,
            family_name="Lovelace",
            date_of_birth="10/12/1815",
            father_name="George",
            mother_name="Anne",
            phone_number="5551234",
            grade_level=9,
            subjects=[Subject(s.name, s.grade) for s in sample_subjects],
        )

    return _make
