"""
Logging setup for the job board API.

JSON lines (python-json-logger) when JSON_LOGS is on, plain text otherwise.
Every JSON record is stamped with the service name and environment.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from app.core.config import settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

# Third-party loggers and the level they are capped at
LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
    "s3transfer": logging.WARNING,
    "multipart": logging.WARNING,
}


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service, environment and source location."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        log_record["level"] = record.levelname
        log_record["service"] = settings.PROJECT_NAME
        log_record["environment"] = settings.ENVIRONMENT

        if record.levelno >= logging.WARNING:
            log_record["location"] = f"{record.module}.{record.funcName}:{record.lineno}"


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        log_level: Root level name (DEBUG, INFO, WARNING, ERROR)
        json_logs: Emit JSON lines instead of plain text
    """
    if json_logs:
        formatter: logging.Formatter = ServiceJsonFormatter(JSON_FORMAT)
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)
