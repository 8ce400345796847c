"""
Tests for logging setup.
"""

import logging

from rich.logging import RichHandler

from contextizer.config.loader import Config
from contextizer.config.singleton import GlobalConfig
from contextizer.utils.logging import (
    ROOT_LOGGER,
    FileFormatter,
    PlainFormatter,
    _parse_level,
    get_logger,
    setup_logging,
    setup_logging_from_config,
)


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("WARNING") == logging.WARNING

    def test_int_passthrough(self):
        assert _parse_level(logging.ERROR) == logging.ERROR

    def test_unknown_defaults_to_info(self):
        assert _parse_level("chatty") == logging.INFO


class TestSetupLogging:
    def test_rich_console_by_default(self):
        logger = setup_logging(level="DEBUG")
        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_plain_console(self):
        logger = setup_logging(use_rich=False)
        (handler,) = logger.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, PlainFormatter)

    def test_custom_format(self):
        logger = setup_logging(use_rich=False, format_string="%(message)s")
        assert logger.handlers[0].formatter._fmt == "%(message)s"

    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_file_only(self, tmp_path):
        log_file = tmp_path / "logs" / "ctx.log"
        logger = setup_logging(level="INFO", log_file=log_file, console_enabled=False)
        (handler,) = logger.handlers
        assert isinstance(handler, logging.FileHandler)
        assert isinstance(handler.formatter, FileFormatter)

        logging.getLogger("contextizer.executor").info("hello from executor")
        handler.flush()
        content = log_file.read_text()
        assert "[INFO    ] contextizer.executor: hello from executor" in content


class TestSetupFromConfig:
    def test_relative_file_resolved_against_project(self, tmp_path):
        config = {"logging": {"level": "WARNING", "file": "logs/app.log", "console_enabled": False}}
        logger = setup_logging_from_config(config, project_dir=tmp_path)
        assert logger.level == logging.WARNING
        assert logger.handlers[0].baseFilename == str(tmp_path / "logs" / "app.log")

    def test_file_disabled(self, tmp_path):
        config = {"logging": {"file": "app.log", "file_enabled": False, "console_type": "plain"}}
        logger = setup_logging_from_config(config, project_dir=tmp_path)
        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_empty_config(self):
        logger = setup_logging_from_config({})
        assert logger.level == logging.INFO
        assert isinstance(logger.handlers[0], RichHandler)


class TestGetLogger:
    def test_no_global_config_installs_nothing(self):
        get_logger("contextizer.test")
        assert logging.getLogger(ROOT_LOGGER).handlers == []

    def test_auto_setup_from_global_config(self):
        GlobalConfig.set_config(Config({"logging": {"level": "ERROR", "console_type": "plain"}}))
        logger = get_logger("contextizer.test")
        assert logger.name == "contextizer.test"
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.ERROR
        assert len(root.handlers) == 1

    def test_explicit_setup_wins(self):
        setup_logging(level="DEBUG", use_rich=False)
        GlobalConfig.set_config(Config({"logging": {"level": "ERROR"}}))
        get_logger("contextizer.test")
        assert logging.getLogger(ROOT_LOGGER).level == logging.DEBUG

    def test_auto_setup_resolves_log_file_against_project(self, tmp_path):
        config = Config({"logging": {"file": "logs/auto.log", "console_enabled": False}})
        GlobalConfig.set_config(config, project_dir=tmp_path)
        get_logger("contextizer.test")
        (handler,) = logging.getLogger(ROOT_LOGGER).handlers
        assert handler.baseFilename == str(tmp_path / "logs" / "auto.log")
