# tests/test_record_store.py

import os
import threading

from core.response import ErrorCode
from models.record_codec import read_record
from models.record_store import RecordStore, append_line, replace_first_line
from models.types import FieldSelector, RecordKey


def read_fields(path: str) -> dict[str, str]:
    with open(path) as f:
        return read_record(f)


# === create ===


def test_create_student(store, sample_student):
    response = store.create_student(sample_student)

    assert response.success
    assert response.status_code == 201
    assert response.data["student_id"] == 1
    assert response.data["path"] == os.path.join(store.records_dir, "output_1.txt")
    assert sample_student.id == 1

    fields = read_fields(response.data["path"])
    assert fields["STUDENT_ID"] == "1"
    assert fields["NAME"] == "Ada"
    assert fields["AVERAGE_GRADE"] == "75.00"

    with open(store.counter_path) as f:
        assert f.read() == "2\n"


def test_create_assigns_sequential_ids(store, make_student):
    with open(store.counter_path, "w") as f:
        f.write("5\n")

    ids = [store.create_student(make_student()).data["student_id"] for _ in range(4)]

    assert ids == [5, 6, 7, 8]

    with open(store.counter_path) as f:
        assert f.read() == "9\n"


def test_create_after_corrupt_counter_starts_at_one(store, make_student):
    with open(store.counter_path, "w") as f:
        f.write("abc\n")

    response = store.create_student(make_student())

    assert response.data["student_id"] == 1


def test_create_rejects_student_with_id(store, created_student):
    response = store.create_student(created_student)

    assert not response.success
    assert response.error is ErrorCode.VALIDATION_FAILED


def test_create_without_records_dir_is_io_error(tmp_path, make_student):
    store = RecordStore(str(tmp_path))

    response = store.create_student(make_student())

    assert not response.success
    assert response.error is ErrorCode.IO_ERROR
    assert response.status_code == 500


def test_concurrent_creates_issue_unique_ids(store, make_student):
    results = []
    results_lock = threading.Lock()

    def worker():
        response = store.create_student(make_student())
        with results_lock:
            results.append(response.data["student_id"])

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == list(range(1, 17))
    assert store.list_record_ids().data["record_ids"] == list(range(1, 17))


def test_create_average_matches_grades_on_disk(store, sample_student):
    for subject, grade in zip(sample_student.subjects, [0.006, 0.006, 0, 0]):
        subject.grade = grade

    response = store.create_student(sample_student)

    fields = read_fields(response.data["path"])
    stored = [float(fields[f"SUBJECT{i}_GRADE"]) for i in range(1, 5)]

    assert stored == [0.01, 0.01, 0.0, 0.0]
    assert fields["AVERAGE_GRADE"] == "0.01"
    assert float(fields["AVERAGE_GRADE"]) == round(sum(stored) / 4, 2)

    recomputed = store.recompute_average(response.data["path"])
    assert recomputed.data["average"] == 0.01


# === edit ===


def test_edit_text_field(store, created_student):
    path = store.record_path(created_student.id)
    with open(path) as f:
        before = f.readlines()

    response = store.edit_field(created_student.id, FieldSelector.PHONE, "5559999")

    assert response.success
    assert response.data["value"] == "5559999"
    assert response.data["average_response"] is None

    with open(path) as f:
        after = f.readlines()

    changed = [i for i, (a, b) in enumerate(zip(before, after)) if a != b]
    assert len(before) == len(after)
    assert changed == [before.index("PHONE_NUMBER = 5551234\n")]
    assert after[changed[0]] == "PHONE_NUMBER = 5559999\n"


def test_edit_accepts_string_record_id(store, created_student):
    response = store.edit_field("1", FieldSelector.GRADE_LEVEL, "10")

    assert response.success
    assert read_fields(store.record_path(1))["GRADE"] == "10"


def test_edit_subject_grade_recomputes_average(store, created_student):
    response = store.edit_field(created_student.id, FieldSelector.SUBJECT4_GRADE, "100")

    assert response.success
    assert response.data["average_response"].success
    assert response.data["average_response"].data["average"] == 85.0

    fields = read_fields(store.record_path(created_student.id))
    assert fields["SUBJECT4_GRADE"] == "100.00"
    assert fields["AVERAGE_GRADE"] == "85.00"


def test_average_matches_rounded_mean(store, created_student):
    grades = {
        FieldSelector.SUBJECT1_GRADE: "91.3",
        FieldSelector.SUBJECT2_GRADE: "77.7",
        FieldSelector.SUBJECT3_GRADE: "64.1",
        FieldSelector.SUBJECT4_GRADE: "88.9",
    }

    for selector, value in grades.items():
        assert store.edit_field(created_student.id, selector, value).success

    fields = read_fields(store.record_path(created_student.id))
    stored = [float(fields[f"SUBJECT{i}_GRADE"]) for i in range(1, 5)]

    assert float(fields["AVERAGE_GRADE"]) == round(sum(stored) / 4, 2)


def test_edit_missing_record(store):
    before = sorted(os.listdir(store.data_root))

    response = store.edit_field(99, FieldSelector.NAME, "Grace")

    assert not response.success
    assert response.error is ErrorCode.RECORD_NOT_FOUND
    assert response.status_code == 404
    assert sorted(os.listdir(store.data_root)) == before
    assert os.listdir(store.records_dir) == []


def test_edit_missing_field_leaves_file_unchanged(store):
    path = store.record_path(3)
    with open(path, "w") as f:
        f.write("NAME = Ada\nSTUDENT_ID = 3\n")
    with open(path, "rb") as f:
        before = f.read()

    response = store.edit_field(3, FieldSelector.PHONE, "5559999")

    assert not response.success
    assert response.error is ErrorCode.FIELD_NOT_FOUND
    with open(path, "rb") as f:
        assert f.read() == before


def test_edit_rejects_non_numeric_grade(store, created_student):
    path = store.record_path(created_student.id)
    with open(path, "rb") as f:
        before = f.read()

    response = store.edit_field(created_student.id, FieldSelector.SUBJECT1_GRADE, "A+")

    assert not response.success
    assert response.error is ErrorCode.VALIDATION_FAILED
    with open(path, "rb") as f:
        assert f.read() == before


def test_edit_rejects_invalid_record_id(store):
    response = store.edit_field("abc", FieldSelector.NAME, "Grace")

    assert response.error is ErrorCode.VALIDATION_FAILED


def test_edit_replaces_only_first_duplicate_key(store):
    path = store.record_path(4)
    with open(path, "w") as f:
        f.write("NAME = Ada\nGRADE = 9\nNAME = Shadow\n")

    response = store.edit_field(4, FieldSelector.NAME, "Grace")

    assert response.success
    with open(path) as f:
        assert f.read() == "NAME = Grace\nGRADE = 9\nNAME = Shadow\n"


def test_grade_edit_stands_when_average_fields_missing(store):
    path = store.record_path(5)
    with open(path, "w") as f:
        f.write("SUBJECT1_GRADE = 50.00\nSUBJECT2_GRADE = 60.00\nAVERAGE_GRADE = 55.00\n")

    response = store.edit_field(5, FieldSelector.SUBJECT1_GRADE, "70")

    assert response.success
    average_response = response.data["average_response"]
    assert not average_response.success
    assert average_response.error is ErrorCode.MISSING_FIELDS
    assert average_response.data["missing"] == ["SUBJECT3_GRADE", "SUBJECT4_GRADE"]

    with open(path) as f:
        assert f.read() == (
            "SUBJECT1_GRADE = 70.00\nSUBJECT2_GRADE = 60.00\nAVERAGE_GRADE = 55.00\n"
        )


def test_undecodable_record_is_io_error(store):
    path = store.record_path(3)
    with open(path, "wb") as f:
        f.write(b"NAME = \xff\xfe\n")

    responses = [
        store.edit_field(3, FieldSelector.NAME, "Grace"),
        store.recompute_average(path),
        store.load_student(3),
    ]

    assert [r.error for r in responses] == [ErrorCode.IO_ERROR] * 3
    assert {r.status_code for r in responses} == {500}
    with open(path, "rb") as f:
        assert f.read() == b"NAME = \xff\xfe\n"


# === recompute average ===


def test_recompute_appends_missing_average(store):
    path = store.record_path(6)
    with open(path, "w") as f:
        f.write(
            "SUBJECT1_GRADE = 80.00\nSUBJECT2_GRADE = 90.00\n"
            "SUBJECT3_GRADE = 70.00\nSUBJECT4_GRADE = 60.00"
        )

    response = store.recompute_average(path)

    assert response.success
    assert response.data["average"] == 75.0
    with open(path) as f:
        assert f.read().endswith("SUBJECT4_GRADE = 60.00\nAVERAGE_GRADE = 75.00\n")


def test_recompute_rejects_unreadable_grade(store):
    path = store.record_path(7)
    content = (
        "SUBJECT1_GRADE = 80.00\nSUBJECT2_GRADE = ninety\n"
        "SUBJECT3_GRADE = 70.00\nSUBJECT4_GRADE = 60.00\n"
    )
    with open(path, "w") as f:
        f.write(content)

    response = store.recompute_average(path)

    assert response.error is ErrorCode.VALIDATION_FAILED
    with open(path) as f:
        assert f.read() == content


def test_recompute_missing_file(store):
    response = store.recompute_average(store.record_path(42))

    assert response.error is ErrorCode.RECORD_NOT_FOUND


# === reset ===


def test_reset_store(store, make_student):
    for _ in range(3):
        store.create_student(make_student())

    with open(os.path.join(store.records_dir, "notes.txt"), "w") as f:
        f.write("stray\n")

    response = store.reset()

    assert response.success
    assert response.data["removed"] == 4
    assert os.listdir(store.records_dir) == []
    with open(store.counter_path) as f:
        assert f.read() == "1\n"

    assert store.create_student(make_student()).data["student_id"] == 1


def test_reset_without_records_dir(tmp_path):
    store = RecordStore(str(tmp_path))

    response = store.reset()

    assert response.success
    assert response.data["removed"] == 0
    assert (tmp_path / "next_id.txt").read_text() == "1\n"


# === load and list ===


def test_load_student(store, created_student):
    response = store.load_student(created_student.id)

    assert response.success
    student = response.data["record"]
    assert student.id == created_student.id
    assert student.full_name == "Ada Lovelace"
    assert student.average_grade == 75.0


def test_load_missing_student(store):
    response = store.load_student(12)

    assert response.error is ErrorCode.RECORD_NOT_FOUND


def test_load_malformed_student(store):
    with open(store.record_path(2), "w") as f:
        f.write("NAME = Ada\n")

    response = store.load_student(2)

    assert response.error is ErrorCode.INVALID_INPUT


def test_list_record_ids_ignores_other_files(store, make_student):
    store.create_student(make_student())
    store.create_student(make_student())
    with open(os.path.join(store.records_dir, "readme.txt"), "w") as f:
        f.write("x\n")

    assert store.list_record_ids().data["record_ids"] == [1, 2]


# === line helpers ===


def test_replace_first_line_keeps_terminator():
    lines = ["NAME = Ada\r\n", "GRADE = 9"]

    assert replace_first_line(lines, RecordKey.GRADE, "GRADE = 10\n") == [
        "NAME = Ada\r\n",
        "GRADE = 10",
    ]
    assert replace_first_line(lines, RecordKey.DOB, "DOB = x\n") is None


def test_append_line_adds_missing_newline():
    assert append_line(["A = 1"], "B = 2\n") == ["A = 1\n", "B = 2\n"]
    assert append_line([], "B = 2\n") == ["B = 2\n"]


def test_store_uses_injected_lock(data_root, make_student):
    lock = threading.RLock()
    store = RecordStore(data_root, lock=lock)

    with lock:
        response = store.create_student(make_student())

    assert response.success
    assert response.data["student_id"] == 1
