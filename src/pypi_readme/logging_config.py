# -*- coding: utf-8 -*-
"""
Logging configuration: JSON lines (default) or plain text for local runs.
"""
import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from .config import settings
from .middleware import get_request_id

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"

# Third-party loggers capped at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "aiosqlite", "uvicorn.access")


class RequestIDFilter(logging.Filter):
    """Stamp records with the ID of the request being served."""

    def filter(self, record):
        record.request_id = get_request_id() or "-"
        return True


class ServiceJsonFormatter(JsonFormatter):
    """Adds service, level, logger and request_id to every JSON record."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = settings.SERVICE_NAME
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["request_id"] = getattr(record, "request_id", "-")


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "text":
        return logging.Formatter(TEXT_FORMAT)
    return ServiceJsonFormatter(
        fmt="%(message)s",
        timestamp="@timestamp",
    )


def setup_logging(log_format: str | None = None) -> logging.Logger:
    """Replace root handlers with one stdout handler in the configured format."""
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(log_format or settings.LOG_FORMAT))
    handler.addFilter(RequestIDFilter())
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
