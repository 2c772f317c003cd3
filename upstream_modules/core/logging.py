"""Structured logging for the resolver: structlog rendered through one stderr handler."""

from __future__ import annotations

import logging
import os
import sys

import structlog


def setup_logging(level: str | None = None) -> None:
    """Route the ``upstream_modules`` loggers to stderr.

    ``UPSTREAM_MODULES_LOG_LEVEL`` sets the level (default INFO) unless *level*
    is given; ``UPSTREAM_MODULES_LOG_FORMAT=json`` switches to JSON lines.
    """
    log_level = (level or os.environ.get("UPSTREAM_MODULES_LOG_LEVEL", "INFO")).upper()
    as_json = os.environ.get("UPSTREAM_MODULES_LOG_FORMAT", "console").lower() == "json"

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    renderers: list[structlog.types.Processor] = (
        [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        if as_json
        else [structlog.dev.ConsoleRenderer()]
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
        )
    )

    package_logger = logging.getLogger("upstream_modules")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(log_level)
    package_logger.propagate = False
