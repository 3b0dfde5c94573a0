"""structlog over stdlib logging.

The middleware binds request_id, method and path through
structlog.contextvars; every event logged during the request carries them.
Stdlib loggers (uvicorn, sqlalchemy) are routed through the same formatter so
the process writes a single stream: JSON lines by default, colored key/value
pairs with LOG_FORMAT=console.
"""

import logging
import logging.config
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from structlog.stdlib import BoundLogger
from structlog.typing import Processor

from budget_tracker.config import Settings, settings

# Never written to the log, whatever the caller passes
SECRET_KEYS = frozenset({"password", "password_hash", "authorization", "access_token", "token"})
REDACTED = "[redacted]"


def redact_secrets(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    for key in SECRET_KEYS & event_dict.keys():
        event_dict[key] = REDACTED
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        redact_secrets,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(config: Settings) -> None:
    """Install the structlog pipeline and the root handler. Runs once at import."""
    shared = _shared_processors()
    renderer: Processor = (
        structlog.dev.ConsoleRenderer()
        if config.log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": renderer,
                    "foreign_pre_chain": shared,
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "structlog",
                    "stream": sys.stdout,
                },
            },
            "root": {"handlers": ["stdout"], "level": config.log_level.upper()},
            "loggers": {
                # request_completed already covers each request
                "uvicorn.access": {"level": "WARNING"},
                "sqlalchemy.engine": {"level": "INFO" if config.db_echo else "WARNING"},
            },
        }
    )


configure_logging(settings)


def get_logger(name: str) -> BoundLogger:
    """Return a structured logger; pass ``__name__``.

    Event names are snake_case, context goes in keyword arguments:
        logger.info("budget_created", budget_id=str(budget.id))
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
