"""Tests for centralized logging configuration."""

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from tradeledger.system import LoggerFactory, LoggingConfig


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch, tmp_path):
    """Reset logging configuration before and after each test; default log files land in tmp_path."""
    monkeypatch.chdir(tmp_path)
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


def test_default_configuration():
    """Test logger factory with default configuration."""
    logger = LoggerFactory.get_logger()

    assert LoggerFactory.is_configured()
    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")

    config = LoggerFactory.get_config()
    assert config.level == "INFO"
    assert config.format == "console"
    assert config.enable_file is True
    assert config.file_level == "WARNING"


def test_explicit_configuration():
    """Test configuring logger factory explicitly."""
    config = LoggingConfig(level="DEBUG", format="json", enable_file=False)

    LoggerFactory.configure(config)

    assert LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "DEBUG"
    assert LoggerFactory.get_config().format == "json"


def test_auto_configure_on_first_use():
    """Test that logger auto-configures with defaults on first use."""
    assert not LoggerFactory.is_configured()

    LoggerFactory.get_logger()

    assert LoggerFactory.is_configured()


def test_file_logging_configuration(tmp_path):
    """Test configuring file output."""
    log_file = tmp_path / "test.log"

    config = LoggingConfig(
        level="INFO",
        enable_file=True,
        file_path=log_file,
        file_level="DEBUG",
        file_rotation=False,
    )

    LoggerFactory.configure(config)
    logger = LoggerFactory.get_logger()

    logger.info("portfolio.summary.computed", symbols=3)

    log_entry = json.loads(log_file.read_text().strip())
    assert log_entry["event"] == "portfolio.summary.computed"
    assert log_entry["symbols"] == 3


def test_file_logging_uses_default_path(tmp_path):
    """Test that enabling file logging without path uses the default."""
    config = LoggingConfig(level="INFO", enable_file=True, file_path=None)

    LoggerFactory.configure(config)

    result_config = LoggerFactory.get_config()
    assert str(result_config.file_path) == "logs/tradeledger.log"
    assert (tmp_path / "logs").is_dir()


def test_file_logging_creates_directory(tmp_path):
    """Test that file logging creates parent directories."""
    log_file = tmp_path / "logs" / "subdir" / "test.log"

    config = LoggingConfig(level="INFO", enable_file=True, file_path=log_file, file_rotation=False)

    LoggerFactory.configure(config)
    LoggerFactory.get_logger().warning("ledger.sell.exceeds_position")

    assert log_file.exists()


def test_rotating_file_handler(tmp_path):
    """Test rotating file handler configuration."""
    log_file = tmp_path / "rotating.log"

    config = LoggingConfig(
        level="INFO",
        enable_file=True,
        file_path=log_file,
        file_rotation=True,
        max_file_size_mb=1,
        backup_count=3,
    )

    LoggerFactory.configure(config)

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    handler = next((h for h in handlers if str(log_file) in str(h.baseFilename)), None)
    assert handler is not None
    assert handler.maxBytes == 1 * 1024 * 1024
    assert handler.backupCount == 3


@pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
def test_different_log_levels(level):
    """Test different log level configurations."""
    LoggerFactory.configure(LoggingConfig(level=level, enable_file=False))

    assert LoggerFactory.get_config().level == level


def test_reset_clears_configuration():
    """Test that reset clears configuration."""
    LoggerFactory.configure(LoggingConfig(level="DEBUG", enable_file=False))

    LoggerFactory.reset()

    assert not LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "INFO"
    assert logging.getLogger().handlers == []


def test_file_level_independent_from_console_level(tmp_path):
    """Test that file log level can be different from console level."""
    log_file = tmp_path / "debug.log"

    config = LoggingConfig(
        level="WARNING",
        enable_file=True,
        file_path=log_file,
        file_level="DEBUG",
        file_rotation=False,
    )

    LoggerFactory.configure(config)
    logger = LoggerFactory.get_logger()

    logger.debug("portfolio.backfill.day", date="2024-01-02")
    logger.warning("portfolio.price.missing", symbol="AAPL")

    entries = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    events = [entry["event"] for entry in entries]
    assert events == ["portfolio.backfill.day", "portfolio.price.missing"]


def test_file_level_filters_below_threshold(tmp_path):
    """WARNING file level drops info events."""
    log_file = tmp_path / "warn.log"

    LoggerFactory.configure(LoggingConfig(level="DEBUG", file_path=log_file, file_rotation=False))
    logger = LoggerFactory.get_logger()

    logger.info("portfolio.summary.computed")
    logger.warning("ledger.sell.exceeds_position", symbol="AAPL")

    events = [json.loads(line)["event"] for line in log_file.read_text().splitlines() if line.strip()]
    assert events == ["ledger.sell.exceeds_position"]


def test_file_logs_are_machine_readable_json(tmp_path):
    """File outputs use JSON so they are easy to parse programmatically."""
    log_file = tmp_path / "machine.jsonl"

    LoggerFactory.configure(LoggingConfig(enable_file=True, file_path=log_file, file_rotation=False))

    LoggerFactory.get_logger().error("portfolio.price_feed.quote_failed", symbol="MSFT", error="timeout")

    record = json.loads(log_file.read_text().strip())
    assert record["event"] == "portfolio.price_feed.quote_failed"
    assert record["error"] == "timeout"
    assert "log_timestamp" in record
    assert record["level"].upper() == "ERROR"


def test_console_renderer_formats_context():
    """Console lines carry level, event and sorted key=value context."""
    renderer = LoggerFactory._custom_console_renderer()

    line = renderer(
        None,
        "warning",
        {
            "log_timestamp": "240102-100000.00",
            "level": "warning",
            "event": "ledger.sell.exceeds_position",
            "symbol": "AAPL",
            "requested": "15",
            "filename": "service.py",
            "lineno": 42,
        },
    )

    assert line.startswith("240102-100000.00 ")
    assert "ledger.sell.exceeds_position" in line
    assert "requested=15 symbol=AAPL" in line
    assert "service:42" in line
