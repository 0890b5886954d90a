"""Logging setup for the route simulator."""

import logging
import sys

from route_sim.sim_logging.context import ContextFilter, LogContext, log_context, log_run_context
from route_sim.sim_logging.filters import DefaultRunIdFilter
from route_sim.sim_logging.formatters import TEXT_FORMAT, JSONFormatter

__all__ = [
    "ContextFilter",
    "DefaultRunIdFilter",
    "JSONFormatter",
    "LogContext",
    "TEXT_FORMAT",
    "log_context",
    "log_run_context",
    "setup_logging",
]


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    environment: str = "development",
) -> None:
    """Configure root logger with appropriate formatting.

    Output goes to stderr so that the stdout position stream of the CLI
    stays machine-readable.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(ContextFilter())
    handler.addFilter(DefaultRunIdFilter())

    if json_output:
        handler.setFormatter(JSONFormatter(environment=environment))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))
