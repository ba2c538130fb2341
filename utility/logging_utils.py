# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-07
# Updated: 2026-03-02
# Description: logging_utils.py
# -----------------------------------------------------------------------------
import logging
import os
import re
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path

import colorlog

BASE_LOGGER_NAME = "member_directory"

# sk-..., AIza... and "api_key=..." style fragments
_SECRET_PATTERNS = (
    re.compile(r"sk-[A-Za-z0-9_\-]{8,}"),
    re.compile(r"AIza[0-9A-Za-z_\-]{20,}"),
    re.compile(r"(?i)(api[_-]?key['\"]?\s*[:=]\s*['\"]?)[^\s'\",]+"),
)

_configure_lock = threading.Lock()


class RedactSecretsFilter(logging.Filter):
    """Mask credential-looking substrings before a record reaches any handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern in _SECRET_PATTERNS:
            if pattern.groups:
                redacted = pattern.sub(lambda m: m.group(1) + "***", redacted)
            else:
                redacted = pattern.sub("***", redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            fmt=(
                "%(log_color)s%(asctime)s [%(levelname)s] "
                "%(name)s:%(lineno)d:%(reset)s %(message_log_color)s%(message)s"
            ),
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
            secondary_log_colors={
                "message": {
                    "INFO": "white",
                    "WARNING": "yellow",
                    "ERROR": "light_red",
                    "CRITICAL": "red",
                }
            },
            style="%",
        )
    )
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=int(os.getenv("MDIR_LOG_MAX_BYTES", str(5 * 1024 * 1024))),  # 5MB
        backupCount=int(os.getenv("MDIR_LOG_BACKUP_COUNT", "5")),
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def _base_logger() -> logging.Logger:
    """
    Handlers live on the package base logger only; every service/class
    logger is a child that propagates to it, so one rotating file is shared.
    """
    base = logging.getLogger(BASE_LOGGER_NAME)
    if base.handlers:
        return base

    with _configure_lock:
        if base.handlers:
            return base

        redact = RedactSecretsFilter()

        console = _console_handler()
        console.addFilter(redact)
        base.addHandler(console)

        if os.getenv("MDIR_LOG_TO_FILE", "0").lower() in ("1", "true", "yes", "y"):
            file_handler = _file_handler(os.getenv("MDIR_LOG_FILE", "./logs/member_directory.log"))
            file_handler.addFilter(redact)
            base.addHandler(file_handler)

        level_name = os.getenv("MDIR_LOG_LEVEL", "INFO").upper()
        base.setLevel(getattr(logging, level_name, logging.INFO))
        # uvicorn / basicConfig root handlers would print everything twice
        base.propagate = False

    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Generic logger that does not include a class name.
    """
    base = _base_logger()
    return base.getChild(name) if name else base


def get_class_logger(cls: type) -> logging.Logger:
    """
    Returns a logger whose name includes module + class, e.g.:

      member_directory.services.MemberSearchService.MemberSearchService
      member_directory.providers.GeminiBackend.GeminiBackend
    """
    module = getattr(cls, "__module__", "unknown_module")
    classname = getattr(cls, "__name__", "UnknownClass")

    return _base_logger().getChild(f"{module}.{classname}")
