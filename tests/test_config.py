# tests/test_config.py

import json
import logging
import os

from cli.path_utils import get_data_dir, resolve_data_dir
from core.config import DATA_DIR_ENV_VAR, LOG_LEVEL_ENV_VAR, get_data_root, record_filename
from core.logging_config import CHANNELS, get_logger, log_with_context, setup_logging
from core.response import ErrorCode, Response


def test_record_filename():
    assert record_filename(12) == "output_12.txt"


def test_data_root_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv(DATA_DIR_ENV_VAR, str(tmp_path))

    assert get_data_root() == str(tmp_path)
    assert get_data_dir(None) == str(tmp_path)
    assert get_data_dir("   ") == str(tmp_path)


def test_data_root_default(monkeypatch):
    monkeypatch.delenv(DATA_DIR_ENV_VAR, raising=False)

    assert get_data_root().endswith(os.path.join("Documents", "StudentRecords"))


def test_resolve_data_dir_creates_records_dir(tmp_path):
    data_root = resolve_data_dir(str(tmp_path / "store"))

    assert os.path.isdir(os.path.join(data_root, "students"))


def test_setup_logging_emits_json(monkeypatch, capsys):
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "info")
    package_logger = setup_logging()

    try:
        log_with_context(
            get_logger("store"),
            "INFO",
            "Student record created.",
            context={"student_id": 3},
            extra_data={"path": "output_3.txt"},
        )

        entry = json.loads(capsys.readouterr().err.strip().splitlines()[-1])

        assert entry["level"] == "INFO"
        assert entry["channel"] == "store"
        assert entry["context"] == {"student_id": 3}
        assert entry["extra"] == {"path": "output_3.txt"}

    finally:
        package_logger.handlers = []
        package_logger.setLevel(logging.NOTSET)
        package_logger.propagate = True
        for channel in CHANNELS:
            get_logger(channel).setLevel(logging.NOTSET)


def test_response_to_dict():
    response = Response.fail(
        detail="No student record found with ID 9.",
        error=ErrorCode.RECORD_NOT_FOUND,
        status_code=404,
    )

    assert response.to_dict() == {
        "success": False,
        "error": "RECORD_NOT_FOUND",
        "detail": "No student record found with ID 9.",
        "status_code": 404,
    }
    assert str(response) == "Error: RECORD_NOT_FOUND"
