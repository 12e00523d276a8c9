# tests/core/test_logging.py
"""Tests for structured logging configuration."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    """configure_logging wires structlog through stdlib logging."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        from chronicle.core.logging import configure_logging, get_logger

        configure_logging("INFO", json_output=True)
        get_logger("chronicle.test").info("Read plan built", row_cap=50)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "Read plan built"
        assert record["row_cap"] == 50
        assert record["level"] == "info"
        assert record["logger"] == "chronicle.test"
        assert "timestamp" in record

    def test_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        from chronicle.core.logging import configure_logging, get_logger

        configure_logging("INFO")
        get_logger("chronicle.test").warning("Malformed row", reason="short key")

        err = capsys.readouterr().err
        assert "Malformed row" in err
        assert "short key" in err

    def test_level_filters_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        from chronicle.core.logging import configure_logging, get_logger

        configure_logging("WARNING", json_output=True)
        get_logger("chronicle.test").debug("hidden")

        assert "hidden" not in capsys.readouterr().err

    def test_lowercase_level_accepted(self) -> None:
        from chronicle.core.logging import configure_logging

        configure_logging("debug")

    def test_unknown_level_rejected(self) -> None:
        from chronicle.core.logging import configure_logging

        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("LOUD")
