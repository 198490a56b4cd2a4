"""structlog configuration module."""

import logging
import sys

import structlog
from structlog.typing import EventDict, WrappedLogger

# Event keys that carry a user's email address.
EMAIL_FIELDS = ("email",)


def mask_email(email: str | None) -> str:
    """Keep the first character and the domain: ``alice@x.com`` -> ``a***@x.com``."""
    if not email:
        return ""
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def mask_email_fields(_logger: WrappedLogger, _method_name: str, event_dict: EventDict) -> EventDict:
    """Processor that masks email fields so raw addresses never reach the log sink."""
    for key in EMAIL_FIELDS:
        if key in event_dict:
            value = event_dict[key]
            event_dict[key] = mask_email(value if isinstance(value, str) else None)
    return event_dict


def setup_logging(debug: bool = False) -> None:
    """
    Configure structlog and stdlib logging.

    In debug mode: colored, human-readable console output.
    In production mode: JSON output for log aggregation.
    Email addresses are masked in both modes.

    Args:
        debug: If True, use ConsoleRenderer; otherwise use JSONRenderer.
    """

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_email_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
