# ABOUTME: Simplified logging configuration using loguru with structlog events forwarded into it
# ABOUTME: Dual-mode operation: interactive CLI vs production JSON logging

import logging
import os
import sys
from pathlib import Path
from typing import Any

import structlog
from loguru import logger

THIRD_PARTY_LOGGERS = ["httpx", "httpcore", "urllib3", "asyncio"]

# structlog method names that loguru does not know under the same name
_LEVEL_NAMES = {"exception": "ERROR", "warn": "WARNING", "fatal": "CRITICAL", "msg": "INFO"}


class LoggingMode:
    """Logging mode constants."""

    INTERACTIVE = "interactive"
    PRODUCTION = "production"


def detect_logging_mode() -> str:
    """Detect whether we're running in interactive or production mode."""
    mode = os.getenv("WIKI_INFOBOXES_LOG_MODE")
    if mode and mode.lower() in [LoggingMode.INTERACTIVE, LoggingMode.PRODUCTION]:
        return mode.lower()

    return LoggingMode.INTERACTIVE if sys.stdout.isatty() else LoggingMode.PRODUCTION


def setup_third_party_logging() -> None:
    """Configure third-party library logging to avoid CLI interference."""
    for logger_name in THIRD_PARTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(logging.ERROR)


def forward_to_loguru(_logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor that hands the event to loguru and drops it from structlog."""
    event = str(event_dict.pop("event", ""))
    level = _LEVEL_NAMES.get(method_name, method_name.upper())
    logger.bind(**event_dict).log(level, event)
    raise structlog.DropEvent


def setup_structlog() -> None:
    """Route structlog events through loguru so both share the configured sinks."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.format_exc_info,
            forward_to_loguru,
        ],
        cache_logger_on_first_use=False,
    )


def configure_logging(mode: str | None = None, log_level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging using loguru.

    Args:
        mode: Logging mode (interactive/production), auto-detected if None
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Custom log file path, uses default if None
    """
    if mode is None:
        mode = detect_logging_mode()

    setup_third_party_logging()
    setup_structlog()

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(numeric_level)

    # Remove default loguru handler
    logger.remove()

    if mode == LoggingMode.INTERACTIVE:
        # Interactive mode: logs to files, no console interference
        log_dir = Path("logs")
        try:
            log_dir.mkdir(exist_ok=True)
        except OSError:
            # Can't write log files here, fall back to JSON on stdout
            mode = LoggingMode.PRODUCTION

    if mode == LoggingMode.PRODUCTION:
        logger.add(sys.stdout, level=log_level, format="{time} | {level} | {name} | {message}", serialize=True)
        return

    log_file_path = log_file or str(log_dir / "wiki-infoboxes.log")

    # Human-readable logs
    logger.add(
        log_file_path,
        level=log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}",
        rotation="10 MB",
        retention="7 days",
    )

    # JSON logs for machine processing
    logger.add(
        log_dir / "wiki-infoboxes.json",
        level=log_level,
        format="{time} | {level} | {name} | {message}",
        serialize=True,
        rotation="10 MB",
        retention="7 days",
    )

    # Errors only
    logger.add(
        log_dir / "errors.log",
        level="ERROR",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}",
        backtrace=True,
        diagnose=True,
    )


def get_logging_status() -> dict[str, Any]:
    """Get current logging configuration status."""
    mode = detect_logging_mode()
    log_dir = Path("logs")
    interactive = mode == LoggingMode.INTERACTIVE

    return {
        "mode": mode,
        "log_directory": str(log_dir.absolute()) if log_dir.exists() else None,
        "log_files": {
            "main": str(log_dir / "wiki-infoboxes.log") if interactive else None,
            "json": str(log_dir / "wiki-infoboxes.json") if interactive else None,
            "errors": str(log_dir / "errors.log") if interactive else None,
        },
        "third_party_suppressed": THIRD_PARTY_LOGGERS + ["py.warnings"],
    }
