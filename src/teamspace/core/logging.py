"""Structured logging for the provisioning API.

Every line carries the request id, and once the caller is authenticated also
their user id, business and current role. Invitation tokens and passwords
never reach the output: the redaction processor masks them wherever they
appear in an event.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

from src.teamspace.core import config

# Event keys whose values are secrets
REDACTED_KEYS = frozenset(
    {"password", "hashed_password", "token", "token_hash", "access_token", "authorization"}
)
REDACTED = "[redacted]"

_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg", "httpx", "httpcore")


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    for key in REDACTED_KEYS.intersection(event_dict):
        if event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(debug: bool = False) -> None:
    """Route stdlib logging and structlog to stdout.

    Args:
        debug: Colored console output at DEBUG level. Otherwise JSON at INFO.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    renderer: structlog.typing.Processor = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            redact_secrets,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(
    user_id: UUID,
    business_id: UUID | None,
    role: str,
    email: str | None = None,
) -> None:
    """Attach the authenticated caller to every later log line of the request.

    role is the value just re-read from the database, so a role change shows
    up in the logs of the very next request. The email is only bound when
    log_user_emails is enabled.
    """
    bind_contextvars(
        user_id=str(user_id),
        business_id=str(business_id) if business_id else None,
        role=role,
    )
    if email and config.get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    clear_contextvars()
