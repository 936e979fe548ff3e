"""
Tests for logging setup.
"""

import logging

import pytest

from modelmap.utils.logging import _parse_level, get_logger, setup_logging, setup_logging_from_config


@pytest.fixture(autouse=True)
def restore_modelmap_logger():
    logger = logging.getLogger("modelmap")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


class TestParseLevel:
    @pytest.mark.parametrize(
        "value,expected",
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (logging.ERROR, logging.ERROR), ("loud", logging.INFO)],
    )
    def test_parse(self, value, expected):
        assert _parse_level(value) == expected


class TestSetupLogging:
    def test_plain_console_handler(self):
        logger = setup_logging(level="DEBUG", use_rich=False)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_repeat_setup_does_not_duplicate_handlers(self):
        setup_logging(use_rich=False)
        logger = setup_logging(use_rich=False)
        assert len(logger.handlers) == 1

    def test_file_handler_receives_child_logger_records(self, tmp_path):
        log_file = tmp_path / "logs" / "modelmap.log"
        setup_logging(level="DEBUG", log_file=log_file, console_enabled=False)

        get_logger("modelmap.store").debug("Added node node-1")
        for handler in logging.getLogger("modelmap").handlers:
            handler.flush()

        text = log_file.read_text()
        assert "modelmap.store" in text
        assert "Added node node-1" in text

    def test_from_config_file_opt_in(self, tmp_path):
        logger = setup_logging_from_config({"logging": {"level": "WARNING", "console_type": "plain"}})
        assert logger.level == logging.WARNING
        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)

        logger = setup_logging_from_config(
            {"logging": {"file_enabled": True, "file": "out.log", "console_enabled": False}},
            project_dir=tmp_path,
        )
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == str(tmp_path / "out.log")
