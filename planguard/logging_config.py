"""Logging configuration using structlog."""

import logging
import sys

import structlog


def configure_logging(level: str = "WARNING") -> None:
    """Route structured logs to stderr so stdout stays clean for reports."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # sys.stderr is looked up on every call.
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)
