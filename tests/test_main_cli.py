# tests/test_main_cli.py

import os

import pytest

from cli.main import run_cli
from cli.menu_helpers import parse_menu_index
from core.config import DATA_DIR_ENV_VAR


def scripted_input(monkeypatch, answers):
    answers = iter(answers)

    def mock_input(prompt=""):
        # falls back to "0" so an unexpected prompt exits instead of hanging
        return next(answers, "0")

    monkeypatch.setattr("builtins.input", mock_input)


NEW_STUDENT_ANSWERS = [
    "Ada",
    "Lovelace",
    "10/12/1815",
    "George",
    "Anne",
    "5551234",
    "9",
    "Math",
    "80",
    "English",
    "90",
    "Science",
    "70",
    "History",
    "60",
]


def test_cli_create_and_view_student(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv(DATA_DIR_ENV_VAR, str(tmp_path))
    scripted_input(
        monkeypatch,
        ["1", "1", *NEW_STUDENT_ANSWERS, "y", "n", "4", "0", "0"],
    )

    with pytest.raises(SystemExit):
        run_cli()

    output = capsys.readouterr().out

    assert "Student successfully created with ID 1." in output
    assert "Ada Lovelace" in output
    assert "75.00" in output
    assert os.path.exists(tmp_path / "students" / "output_1.txt")
    assert (tmp_path / "next_id.txt").read_text() == "2\n"


def test_cli_edit_subject_grade(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv(DATA_DIR_ENV_VAR, str(tmp_path))
    scripted_input(
        monkeypatch,
        [
            "1",
            "1",
            *NEW_STUDENT_ANSWERS,
            "y",
            "n",
            # edit student 1, field 11 (Subject 4 Grade)
            "2",
            "1",
            "11",
            "100",
            "y",
            "0",
            "0",
        ],
    )

    with pytest.raises(SystemExit):
        run_cli()

    output = capsys.readouterr().out

    assert "Subject 4 Grade successfully updated to: 100.0." in output
    assert "Average grade is now 85.00." in output
    record = (tmp_path / "students" / "output_1.txt").read_text()
    assert "SUBJECT4_GRADE = 100.00\n" in record
    assert "AVERAGE_GRADE = 85.00\n" in record


def test_cli_rejects_whitespace_then_accepts(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv(DATA_DIR_ENV_VAR, str(tmp_path))
    scripted_input(
        monkeypatch,
        ["1", "1", "Ada Byron", *NEW_STUDENT_ANSWERS, "y", "n", "0", "0"],
    )

    with pytest.raises(SystemExit):
        run_cli()

    output = capsys.readouterr().out

    assert "cannot contain whitespace" in output
    assert "Student successfully created with ID 1." in output


def test_cli_reset_store(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv(DATA_DIR_ENV_VAR, str(tmp_path))
    scripted_input(
        monkeypatch,
        ["1", "1", *NEW_STUDENT_ANSWERS, "y", "n", "5", "y", "0", "0"],
    )

    with pytest.raises(SystemExit):
        run_cli()

    output = capsys.readouterr().out

    assert "Record store reset. 1 entries removed." in output
    assert os.listdir(tmp_path / "students") == []
    assert (tmp_path / "next_id.txt").read_text() == "1\n"


def test_parse_menu_index():
    assert parse_menu_index("3", 3) == 2

    for choice in ["0", "4", "-1", "x"]:
        with pytest.raises(ValueError):
            parse_menu_index(choice, 3)
