import logging
from datetime import datetime, UTC
from typing import Any, Dict
from uuid import uuid4
from pythonjsonlogger.json import JsonFormatter
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from famcal.core.config import settings, MEMBER_HEADER
import time
import traceback

# Loggers that get the JSON handler attached directly
APP_LOGGERS = [
    "api.request",
    "api.events",
    "api.calendar",
    "api.members",
    "db",
    "famcal.engine",
    "uvicorn"
]

class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter for logs."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        """Add custom fields to the log record."""
        super().add_fields(log_record, record, message_dict)

        # Add timestamp in ISO format
        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["name"] = record.name

        # Add code location
        log_record["function"] = record.funcName
        log_record["module"] = record.module
        log_record["line"] = record.lineno

        # Add environment
        log_record["environment"] = settings.ENVIRONMENT

        # Add request context if available
        if hasattr(record, "request_id"):
            log_record["request_id"] = record.request_id
        if hasattr(record, "member_id"):
            log_record["member_id"] = record.member_id
        if hasattr(record, "duration"):
            log_record["duration"] = record.duration

def _configure(level: str | int, propagate: bool) -> None:
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(CustomJsonFormatter())

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    for logger_name in APP_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = propagate
        logger.addHandler(console_handler)

def setup_logging() -> None:
    """Configure logging for the application."""
    _configure(settings.LOG_LEVEL.upper(), propagate=False)

def setup_test_logging() -> None:
    """Configure logging for tests with propagation enabled."""
    _configure(logging.INFO, propagate=True)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests."""

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process the request and log details."""
        request_id = str(uuid4())
        start_time = time.time()

        # Add request ID to request state
        request.state.request_id = request_id

        extra = {
            "request_id": request_id,
            "member_id": request.headers.get(MEMBER_HEADER),
            "method": request.method,
            "path": request.url.path,
            "timestamp": datetime.now(UTC).isoformat(),
            "duration": None
        }

        request_logger.info("Incoming request", extra=extra)

        try:
            response = await call_next(request)

            extra["duration"] = time.time() - start_time
            extra["status_code"] = response.status_code

            request_logger.info("Request completed", extra=extra)

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            extra["duration"] = time.time() - start_time
            extra["error"] = str(e)
            extra["error_type"] = e.__class__.__name__
            extra["traceback"] = traceback.format_exc()

            request_logger.error(f"{e.__class__.__name__} occurred", extra=extra)
            raise

# Create specific loggers
request_logger = logging.getLogger("api.request")
events_logger = logging.getLogger("api.events")
calendar_logger = logging.getLogger("api.calendar")
members_logger = logging.getLogger("api.members")
db_logger = logging.getLogger("db")
