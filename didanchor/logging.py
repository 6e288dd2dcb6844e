import logging
import logging.config
from contextvars import ContextVar
from typing import Optional
from uuid import uuid4

from fastapi import Request

from didanchor.config import Settings

"""
Configures and provides logging for the application.

This module sets up structured JSON logging by default (or text logging if configured),
integrates with Uvicorn loggers, and provides a middleware helper for adding a unique
request ID to each log entry associated with a request.
"""

DEFAULT_LOGGER_NAME = "didanchor"

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Stamps the current request ID on every record so formatters can always reference it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = _request_id.get()
        return True


def configure_logging(settings: Settings):
    """Configures application-wide logging.

    Sets up logging format (JSON or text), level, and handlers based on `settings`.
    It configures handlers for the root logger, Uvicorn loggers (uvicorn, uvicorn.error,
    uvicorn.access) and the application logger.
    """
    log_format = settings.log_format.lower()
    if log_format not in ["json", "text"]:
        print(f"WARNING: Invalid log_format '{settings.log_format}' in settings. Falling back to 'text'.")
        log_format = "text"

    level = settings.log_level.upper()

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_id": {"()": RequestIdFilter},
        },
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s",
                "rename_fields": {"levelname": "level", "asctime": "timestamp"},
            },
            "text": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": log_format,
                "filters": ["request_id"],
                "level": level,
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            DEFAULT_LOGGER_NAME: {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            }
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        }
    }
    logging.config.dictConfig(logging_config)

def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance, defaulting to the application logger.

    Module loggers are named after their module (`didanchor.anchors.cord`, ...) so they
    inherit the handlers configured for the `didanchor` logger.
    """
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)

def request_id_middleware(request: Request) -> str:
    """Generates a unique request ID, binds it to the logging context and logs the request.

    Args:
        request: The incoming FastAPI `Request` object.

    Returns:
        str: The generated unique request ID (UUID4 string).
    """
    request_id = str(uuid4())
    _request_id.set(request_id)
    logger = get_logger()

    logger.info(
        f"Incoming request: {request.method} {request.url.path}",
        extra={
            "path": str(request.url.path),
            "method": request.method,
            "client_host": request.client.host if request.client else "unknown",
        }
    )
    return request_id
