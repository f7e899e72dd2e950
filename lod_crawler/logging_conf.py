"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path

import structlog

_LOGGING_INITIALISED = False


def _default_log_dir() -> Path:
    env_root = os.environ.get("LOD_CRAWLER_HOME")
    if env_root:
        return Path(env_root).expanduser().resolve() / "logs"
    return Path(__file__).resolve().parents[1] / "logs"


def crawler_log_path() -> Path:
    return _default_log_dir() / "crawler.log"


def configure_logging(verbose: bool = False) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return application logger."""

    global _LOGGING_INITIALISED
    log_dir = _default_log_dir()
    error_log = log_dir / "error.log"
    crawler_log = log_dir / "crawler.log"
    log_dir.mkdir(parents=True, exist_ok=True)
    error_log.touch(exist_ok=True)
    crawler_log.touch(exist_ok=True)

    if not _LOGGING_INITIALISED:
        level = "DEBUG" if verbose else "INFO"
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "plain": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": {
                    # Console only carries warnings unless verbose; facts go to stdout.
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level if verbose else "WARNING",
                        "formatter": "plain",
                    },
                    "crawler_file": {
                        "class": "logging.FileHandler",
                        "level": level,
                        "filename": str(crawler_log),
                        "formatter": "plain",
                    },
                    "error_file": {
                        "class": "logging.FileHandler",
                        "level": "ERROR",
                        "filename": str(error_log),
                        "formatter": "plain",
                    },
                },
                "loggers": {
                    "lod_crawler": {
                        "handlers": ["console", "crawler_file", "error_file"],
                        "level": level,
                        "propagate": False,
                    },
                },
            }
        )

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("lod_crawler")


def tail_log(path: Path, line_count: int = 100) -> list[str]:
    """Return the last N lines from a log file."""

    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as stream:
        lines = stream.readlines()
    return lines[-line_count:]


__all__ = ["configure_logging", "crawler_log_path", "tail_log"]
