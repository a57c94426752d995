"""Structlog setup for the Security Groups API.

Every probe logs through structlog; this module decides how those events
are rendered.
"""

import logging
import os
import sys

import structlog

SERVICE_NAME = "security-groups-api"


def _wants_colors() -> bool:
    # FORCE_COLOR=1 keeps colors in non-TTY environments such as Docker
    if os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes"):
        return True
    return sys.stdout.isatty()


def _add_service(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(debug: bool = False) -> None:
    """Configure structlog processors and the minimum level.

    Terminals get colored console output; everything else gets one JSON
    object per line. Debug events (cache hits, repository reads) are only
    emitted when ``debug`` is set.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_service,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if _wants_colors():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
