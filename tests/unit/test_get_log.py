import logging
import os

import pytest

from mercury_qa.utils.get_log import GetLog

RUN_ID = "3f2b9c1e-5d4a-4e8f-9b7c-2a1d0e6f8c3b"


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("MERCURY_TIMESTAMP", "2026-01-05_09-30-00")
    yield tmp_path
    GetLog.shutdown()


def read(path) -> str:
    for handler in GetLog.handlers:
        handler.flush()
    with open(path, encoding="utf-8") as f:
        return f.read()


def test_log_folder_is_keyed_by_run(log_dir) -> None:
    GetLog.get_log(session_id=RUN_ID, log_dir=str(log_dir))
    assert GetLog.log_folder == os.path.join(str(log_dir), "2026-01-05_09-30-00_3f2b9c1e")
    assert os.path.isfile(os.path.join(GetLog.log_folder, "log.log"))
    assert os.path.isfile(os.path.join(GetLog.log_folder, "error.log"))


def test_lines_carry_run_id_and_warnings_reach_error_log(log_dir) -> None:
    GetLog.get_log(session_id=RUN_ID, log_dir=str(log_dir))
    logging.getLogger("mercury_qa.pages").info("Clicking Next button")
    logging.getLogger("mercury_qa.pages").warning("Next button is still disabled")

    main_log = read(os.path.join(GetLog.log_folder, "log.log"))
    error_log = read(os.path.join(GetLog.log_folder, "error.log"))
    assert "INFO [run 3f2b9c1e] [mercury_qa.pages]" in main_log
    assert "Clicking Next button" in main_log
    assert "Clicking Next button" not in error_log
    assert "WARNING [run 3f2b9c1e]" in error_log


def test_configured_once(log_dir) -> None:
    logger = GetLog.get_log(session_id=RUN_ID, log_dir=str(log_dir))
    handlers = list(GetLog.handlers)
    assert GetLog.get_log(session_id="another-run", log_dir=str(log_dir)) is logger
    assert GetLog.handlers == handlers


def test_without_session_id(log_dir) -> None:
    GetLog.get_log(log_dir=str(log_dir))
    assert GetLog.log_folder.endswith("2026-01-05_09-30-00_cli")


def test_shutdown_detaches_handlers(log_dir) -> None:
    logger = GetLog.get_log(session_id=RUN_ID, log_dir=str(log_dir))
    handlers = list(GetLog.handlers)
    GetLog.shutdown()
    assert not any(handler in logger.handlers for handler in handlers)
    assert GetLog.logger is None
