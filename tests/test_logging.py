"""Tests for logger (ServiceLogging, level/output from settings)."""

import logging
import sys

from config import Settings
from logger import DEFAULT_FORMAT, DEFAULT_LEVEL, LEVELS, ServiceLogging, _resolve_level


def make_settings(**overrides) -> Settings:
    values = {"db_url": "postgres://localhost/test"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestConstants:
    """Module constants and level mapping."""

    def test_levels_has_four_levels(self) -> None:
        assert LEVELS == {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warn": logging.WARNING,
            "error": logging.ERROR,
        }

    def test_default_format_contains_placeholders(self) -> None:
        assert "%(levelname)s" in DEFAULT_FORMAT
        assert "%(message)s" in DEFAULT_FORMAT

    def test_default_level_is_info(self) -> None:
        assert DEFAULT_LEVEL == "info"


class TestResolveLevel:
    """_resolve_level maps level names to logging constants."""

    def test_known_levels(self) -> None:
        assert _resolve_level("debug") == logging.DEBUG
        assert _resolve_level("warn") == logging.WARNING
        assert _resolve_level("ERROR") == logging.ERROR
        assert _resolve_level("  info ") == logging.INFO

    def test_unknown_level_returns_info(self) -> None:
        assert _resolve_level("trace") == logging.INFO
        assert _resolve_level("") == logging.INFO


class TestServiceLogging:
    """ServiceLogging applies Settings to the root logger."""

    def test_setup_sets_root_level(self) -> None:
        for level_name, expected in LEVELS.items():
            ServiceLogging(make_settings(log_level=level_name)).setup()
            assert logging.root.level == expected

    def test_stdout_handler_by_default(self) -> None:
        ServiceLogging(make_settings()).setup()
        handler = logging.root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout
        assert handler.formatter._fmt == DEFAULT_FORMAT

    def test_file_output(self, tmp_path) -> None:
        path = tmp_path / "app.log"
        service_logging = ServiceLogging(make_settings(log_output="file", log_file_path=str(path)))
        service_logging.setup()

        service_logging.get_logger("pr.test").info("written to file")
        handler = logging.root.handlers[0]
        assert isinstance(handler, logging.FileHandler)
        handler.flush()
        handler.close()
        assert "written to file" in path.read_text(encoding="utf-8")

    def test_file_failure_falls_back_to_stdout(self, tmp_path) -> None:
        path = tmp_path / "missing" / "app.log"
        ServiceLogging(make_settings(log_output="FILE", log_file_path=str(path))).setup()

        handler = logging.root.handlers[0]
        assert not isinstance(handler, logging.FileHandler)
        assert handler.stream is sys.stdout
        assert not path.exists()

    def test_get_logger_returns_named_logger(self) -> None:
        log = ServiceLogging(make_settings()).get_logger("pr.test")
        assert log.name == "pr.test"
        assert isinstance(log, logging.Logger)
