"""Tests for logging configuration module."""

from __future__ import annotations

import json
import logging
import os
from io import StringIO
from unittest.mock import patch

from linkfield.clock import ManualClock
from linkfield.config import SimulationConfig
from linkfield.engine import simulation
from linkfield.engine.simulation import create_simulation, tick_simulation
from linkfield.logging_config import (
    JSONFormatter,
    TextFormatter,
    configure_logging,
    get_log_format,
    get_log_level,
    get_logger,
    tick_fields,
)

TICK_EXTRA = {"tick": 100, "links": 12, "new_links": 2, "kept_links": 10, "dropped_links": 1}


def make_record(
    name: str = "linkfield.test",
    level: int = logging.INFO,
    msg: str = "Test message",
    args: tuple = (),
    extra: dict | None = None,
) -> logging.LogRecord:
    """Create a log record the way Logger.makeRecord does, extras included."""
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="/path/to/registry.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in (extra or {}).items():
        setattr(record, key, value)
    return record


class TestEnvironment:
    """Tests for LOG_LEVEL and LOG_FORMAT parsing."""

    def test_default_level_is_info(self) -> None:
        """Unset LOG_LEVEL means INFO."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_level() == logging.INFO

    def test_level_is_case_insensitive(self) -> None:
        """LOG_LEVEL=debug works like DEBUG."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            assert get_log_level() == logging.DEBUG

    def test_warn_alias(self) -> None:
        """LOG_LEVEL=WARN maps to WARNING."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARN"}):
            assert get_log_level() == logging.WARNING

    def test_invalid_level_defaults_to_info(self) -> None:
        """Unknown levels fall back to INFO."""
        with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}):
            assert get_log_level() == logging.INFO

    def test_format_selection(self) -> None:
        """LOG_FORMAT picks json case-insensitively and falls back to text."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_format() == "text"
        with patch.dict(os.environ, {"LOG_FORMAT": "JSON"}):
            assert get_log_format() == "json"
        with patch.dict(os.environ, {"LOG_FORMAT": "xml"}):
            assert get_log_format() == "text"


class TestTickFields:
    """Tests for tick_fields()."""

    def test_picks_known_fields_in_order(self) -> None:
        """Only simulation fields are returned, in display order."""
        record = make_record(extra={"dropped_links": 1, "request_id": "x", "tick": 7})
        assert list(tick_fields(record).items()) == [("tick", 7), ("dropped_links", 1)]

    def test_plain_record_has_none(self) -> None:
        """A record without extras has no tick fields."""
        assert tick_fields(make_record()) == {}


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_core_fields(self) -> None:
        """Output parses as JSON with the core fields."""
        data = json.loads(JSONFormatter().format(make_record(msg="links=%d", args=(12,))))
        assert data["message"] == "links=12"
        assert data["level"] == "INFO"
        assert data["logger"] == "linkfield.test"
        assert "timestamp" in data
        assert "tick_stats" not in data
        assert "extra" not in data

    def test_tick_stats_grouped(self) -> None:
        """Simulation fields land under 'tick_stats', other extras under 'extra'."""
        record = make_record(extra={**TICK_EXTRA, "client": "ws-1"})
        data = json.loads(JSONFormatter().format(record))
        assert data["tick_stats"] == TICK_EXTRA
        assert data["extra"] == {"client": "ws-1"}

    def test_source_only_for_errors(self) -> None:
        """Errors carry their source location, debug records do not."""
        debug = json.loads(JSONFormatter().format(make_record(level=logging.DEBUG)))
        error = json.loads(JSONFormatter().format(make_record(level=logging.ERROR)))
        assert "source" not in debug
        assert error["source"] == "/path/to/registry.py:42"


class TestTextFormatter:
    """Tests for text log formatter."""

    def test_shortens_package_logger_name(self) -> None:
        """The linkfield. prefix is dropped from logger names."""
        output = TextFormatter().format(make_record(name="linkfield.engine.registry"))
        assert "[engine.registry]" in output
        assert "linkfield.engine.registry" not in output

    def test_keeps_foreign_logger_name(self) -> None:
        """Loggers outside the package keep their full name."""
        output = TextFormatter().format(make_record(name="uvicorn.access"))
        assert "[uvicorn.access]" in output

    def test_appends_tick_fields(self) -> None:
        """Tick fields follow the message as key=value pairs."""
        output = TextFormatter().format(make_record(msg="Link set", extra=TICK_EXTRA))
        assert output.endswith("Link set tick=100 links=12 new_links=2 kept_links=10 dropped_links=1")

    def test_error_gets_location(self) -> None:
        """Errors get a file:line suffix."""
        record = make_record(level=logging.ERROR)
        record.filename = "registry.py"
        assert TextFormatter().format(record).endswith("(registry.py:42)")


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configures_package_logger(self) -> None:
        """The linkfield logger gets exactly one handler at the given level."""
        configure_logging(level=logging.DEBUG, format_type="text")
        logger = logging.getLogger("linkfield")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, TextFormatter)

    def test_repeat_calls_do_not_stack_handlers(self) -> None:
        """Calling twice still leaves one handler."""
        configure_logging(level=logging.INFO, format_type="text")
        configure_logging(level=logging.INFO, format_type="json")
        logger = logging.getLogger("linkfield")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_reads_from_environment(self) -> None:
        """Level and format come from the environment when not given."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING", "LOG_FORMAT": "json"}):
            configure_logging()
        logger = logging.getLogger("linkfield")
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_writes_to_given_stream(self) -> None:
        """Records from package loggers reach the configured stream."""
        buffer = StringIO()
        configure_logging(level=logging.INFO, format_type="json", stream=buffer)

        get_logger("test_stream").warning("stream message")

        data = json.loads(buffer.getvalue().strip())
        assert data["message"] == "stream message"
        assert data["logger"] == "linkfield.test_stream"


class TestGetLogger:
    """Tests for get_logger convenience function."""

    def test_prefixes_package_name(self) -> None:
        """Bare names, including __main__, go under the linkfield namespace."""
        assert get_logger("my_module").name == "linkfield.my_module"
        assert get_logger("__main__").name == "linkfield.__main__"

    def test_preserves_package_prefix(self) -> None:
        """Names already under linkfield are not double-prefixed."""
        assert get_logger("linkfield.server").name == "linkfield.server"
        assert get_logger("linkfield").name == "linkfield"
        assert get_logger("linkfieldx").name == "linkfield.linkfieldx"


class TestSimulationTickLog:
    """The periodic tick log carries link statistics."""

    def test_json_tick_log_has_link_stats(self) -> None:
        """Every LOG_INTERVAL ticks a JSON record reports the registry counts."""
        buffer = StringIO()
        configure_logging(level=logging.DEBUG, format_type="json", stream=buffer)
        clock = ManualClock()
        sim = create_simulation(
            SimulationConfig(world_radius=300.0, particle_count=15, target_radius=60.0, seed=3),
            clock=clock,
        )

        with patch.object(simulation, "LOG_INTERVAL", 2):
            for _ in range(2):
                clock.advance(0.1)
                result = tick_simulation(sim)

        records = [json.loads(line) for line in buffer.getvalue().splitlines()]
        tick_records = [r for r in records if "tick_stats" in r]
        assert len(tick_records) == 1
        stats = tick_records[0]["tick_stats"]
        assert stats["tick"] == 2
        assert stats["particles"] == 15
        assert stats["links"] == len(result.links)
        assert stats["new_links"] == result.stats.created
        assert stats["kept_links"] == result.stats.retained
        assert stats["dropped_links"] == result.stats.dropped
        assert stats["new_links"] + stats["kept_links"] == stats["links"]
