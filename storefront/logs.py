"""
Logging — structlog setup shared by the API and the CLI.

Modules log through `structlog.get_logger()` with snake_case event names:

    logger.info("transaction_recorded", transaction_id=7, buyer_id="u1")
"""

import logging

import structlog

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def level_from_name(name: str) -> int:
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {name!r}") from None


def configure_logging(level: str = "info", json: bool = True) -> None:
    """JSON lines for deployments, colored console output for local runs."""
    renderer = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_from_name(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


__all__ = ("configure_logging", "level_from_name")
