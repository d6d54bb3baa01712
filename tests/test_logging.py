import logging
from pathlib import Path

import pytest

from pi_remote.logging import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_configure_logging_adds_file_handler(tmp_path: Path, restore_root_logger):
    log_path = tmp_path / "logs" / "pi-remote.log"

    configure_logging("debug", log_path=log_path)
    logging.getLogger("pi_remote.test").debug("hello")

    assert restore_root_logger.level == logging.DEBUG
    assert log_path.exists()
    assert any(
        isinstance(handler, logging.FileHandler)
        for handler in restore_root_logger.handlers
    )
    assert logging.getLogger("aiohttp.client").level == logging.WARNING
    assert logging.getLogger("aiohttp.access").level == logging.WARNING


def test_unknown_level_defaults_to_info(restore_root_logger):
    configure_logging("chatty")

    assert restore_root_logger.level == logging.INFO
