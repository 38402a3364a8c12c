"""Logging configuration for casemap.

Interactive commands log human-readable lines to stderr. With --log-file the
same events are written to the file as JSON, one object per line.
"""

import logging
import sys
from pathlib import Path

import structlog

# Transport loggers that report every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    level: str = "warning",
    log_file: str | Path | None = None,
    json_output: bool | None = None,
) -> None:
    """Configure stdlib logging and structlog for a casemap command.

    Args:
        level: Log level (debug, info, warning, error, critical)
        log_file: Optional path to log file
        json_output: Render JSON; defaults to True exactly when log_file is set
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    if json_output is None:
        json_output = log_file is not None

    if log_file:
        handler: logging.Handler = logging.FileHandler(str(log_file), encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    logging.basicConfig(level=log_level, handlers=[handler], format="%(message)s", force=True)

    # Fetch URLs are already logged by the content client
    transport_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def verbosity_to_level(verbose: int) -> str:
    """Map a -v count to a log level name."""
    if verbose >= 2:
        return "debug"
    if verbose == 1:
        return "info"
    return "warning"


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to a casemap module name."""
    return structlog.get_logger(name)
