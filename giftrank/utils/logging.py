"""Structured logging for the API and the CLI"""

import logging
import sys
from typing import Any, Dict, TextIO
import structlog
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "giftrank"


def add_service(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag every structlog event with the service name"""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(log_level: str = "INFO", stream: TextIO = None) -> None:
    """
    Configure structlog JSON events and the stdlib root logger

    The API logs to stdout. The CLI passes stderr so that ranked tables and
    JSON reports on stdout stay machine readable.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        stream: Destination for log lines, stdout by default
    """
    stream = stream or sys.stdout
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=level
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            add_service,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """structlog logger for a module, e.g. get_logger(__name__)"""
    return structlog.get_logger(name)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Uvicorn log records in the same JSON shape as the structlog events"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['service'] = SERVICE_NAME
        log_record['logger_name'] = record.name

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


def configure_uvicorn_logging():
    """Send uvicorn access and error logs through CustomJsonFormatter"""

    formatter = CustomJsonFormatter(
        '%(timestamp)s %(levelname)s %(name)s %(message)s',
        timestamp=True
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    for name in ("uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = [handler]
