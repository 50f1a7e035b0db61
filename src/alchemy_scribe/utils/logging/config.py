# ABOUTME: Logging setup: structlog bound loggers rendered into loguru sinks
# ABOUTME: Interactive runs log to files under logs/, production runs emit JSON lines on stderr

import logging
import os
import sys
import time
from pathlib import Path
from typing import Any

import structlog
from loguru import logger

LOG_DIR = Path("logs")
LOG_FILES = {
    "main": "alchemy-scribe.log",
    "json": "alchemy-scribe.json",
    "errors": "errors.log",
}
SUPPRESSED_LOGGERS = ["httpx", "httpcore", "urllib3", "asyncio", "hpack"]

_TEXT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
_ROTATING = {"rotation": "10 MB", "retention": "7 days"}


class LoggingMode:
    """Where log output goes."""

    INTERACTIVE = "interactive"
    PRODUCTION = "production"


def detect_logging_mode() -> str:
    """``ALCHEMY_SCRIBE_LOG_MODE`` when valid, otherwise interactive only on a TTY."""
    requested = (os.getenv("ALCHEMY_SCRIBE_LOG_MODE") or "").lower()
    if requested in (LoggingMode.INTERACTIVE, LoggingMode.PRODUCTION):
        return requested
    return LoggingMode.INTERACTIVE if sys.stdout.isatty() else LoggingMode.PRODUCTION


def setup_third_party_logging() -> None:
    """Keep HTTP client chatter out of the CLI output."""
    for name in SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(logging.ERROR)


def _loguru_factory(*_args: Any) -> Any:
    return logger


def setup_structlog(log_level: str) -> None:
    """Filter by level in structlog, then hand the rendered line to loguru."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"], sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_numeric_level(log_level)),
        logger_factory=_loguru_factory,
        cache_logger_on_first_use=False,
    )


def _numeric_level(log_level: str) -> int:
    return getattr(logging, log_level.upper(), logging.INFO)


def _prepare_log_dir(attempts: int = 3) -> Path | None:
    """Create the log directory, or give up and return None."""
    for attempt in range(attempts):
        try:
            LOG_DIR.mkdir(exist_ok=True)
            return LOG_DIR
        except OSError:
            time.sleep(0.01 * (attempt + 1))
    return None


def _add_stderr_sink(log_level: str) -> None:
    logger.add(sys.stderr, level=log_level, format="{time} | {level} | {message}", serialize=True)


def _add_file_sinks(log_dir: Path, log_level: str, log_file: str | None) -> None:
    logger.add(log_file or str(log_dir / LOG_FILES["main"]), level=log_level, format=_TEXT_FORMAT, **_ROTATING)
    logger.add(
        log_dir / LOG_FILES["json"],
        level=log_level,
        format="{time} | {level} | {message}",
        serialize=True,
        **_ROTATING,
    )
    logger.add(log_dir / LOG_FILES["errors"], level="ERROR", format=_TEXT_FORMAT, backtrace=True, diagnose=True)


def configure_logging(mode: str | None = None, log_level: str = "INFO", log_file: str | None = None) -> None:
    """Install sinks for one CLI invocation.

    Args:
        mode: Logging mode (interactive/production), auto-detected if None
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Replaces the default human-readable log file in interactive mode
    """
    mode = mode or detect_logging_mode()

    setup_third_party_logging()
    setup_structlog(log_level)
    logging.getLogger().setLevel(_numeric_level(log_level))

    logger.remove()

    log_dir = _prepare_log_dir() if mode == LoggingMode.INTERACTIVE else None
    if log_dir is None:
        # Production, or interactive without a writable logs/ directory
        _add_stderr_sink(log_level)
        return

    _add_file_sinks(log_dir, log_level, log_file)


def get_logging_status() -> dict[str, Any]:
    """Mode, directory and file paths as the logging-status command shows them."""
    mode = detect_logging_mode()
    interactive = mode == LoggingMode.INTERACTIVE

    return {
        "mode": mode,
        "log_directory": str(LOG_DIR.absolute()) if LOG_DIR.exists() else None,
        "log_files": {key: str(LOG_DIR / filename) if interactive else None for key, filename in LOG_FILES.items()},
        "third_party_suppressed": SUPPRESSED_LOGGERS,
    }
