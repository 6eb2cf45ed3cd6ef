import logging

import pytest

from s3manager import log


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    log._configured = False


def test_setup_logging_installs_single_handler(restore_root, monkeypatch):
    monkeypatch.setattr(log, "_configured", False)

    log.setup_logging("debug")
    log.setup_logging("info")

    assert len(restore_root.handlers) == 1
    assert restore_root.level == logging.INFO
    assert logging.getLogger("botocore").level == logging.WARNING


def test_get_logger_returns_named_logger():
    assert log.get_logger("s3manager.storage").name == "s3manager.storage"
