import logging
import logging.handlers
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from infrastructure.config import settings

_HANDLER_MARKER = "_drill_media_proxy_handler"

# Event keys whose values grant access to user media
SENSITIVE_KEYS = frozenset({"authorization", "token", "signed_url", "service_key", "apikey"})
REDACTED = "[redacted]"


def redact_secrets(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def setup_logging() -> None:
    """Configure unified logging for structlog, uvicorn, and standard library.

    Safe to call more than once; previously installed handlers are replaced.
    """
    # Ensure log directory exists
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = settings.log_dir / f"{settings.app_env}.log"

    common_processors = [
        structlog.contextvars.merge_contextvars,
        redact_secrets,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.app_env == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *common_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=common_processors,
        processor=renderer,
    )

    # Handlers
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        log_file,
        when="midnight",
        interval=1,
        backupCount=7,
    )
    file_handler.setFormatter(formatter)

    for handler in (stream_handler, file_handler):
        setattr(handler, _HANDLER_MARKER, True)

    # Root Logger
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            root_logger.removeHandler(existing)
            existing.close()
    root_logger.addHandler(stream_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(settings.log_level.upper())

    # Intercept Uvicorn/FastAPI/httpx logs
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [stream_handler, file_handler]
        logging_logger.propagate = False

    # httpx logs every request URL at INFO, and signed URLs carry credentials
    logging.getLogger("httpx").setLevel(logging.WARNING)
