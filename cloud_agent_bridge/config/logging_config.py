import logging
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from cloud_agent_bridge.config.settings import DEFAULT_LOG_FORMAT

NO_CORRELATION_ID = "NO Correlation ID"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
QUIET_LOGGERS = ("httpx", "httpcore")

# Discord interaction id (or X-Correlation-ID) of the request being handled
correlation_id_var: ContextVar[str] = ContextVar(
    "correlation_id", default=NO_CORRELATION_ID
)


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the current correlation id."""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get()
        return True


class SafeFormatter(logging.Formatter):
    """Formatter that tolerates records emitted without the filter."""

    def format(self, record):
        record.__dict__.setdefault("correlation_id", NO_CORRELATION_ID)
        return super().format(record)


def _attach(root: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: str = DEFAULT_LOG_FORMAT,
) -> logging.Logger:
    """Route logs to stdout (and optionally a rotating file).

    Third-party loggers stay at WARNING; ``level`` applies to this package only.
    """
    root = logging.getLogger()
    root.setLevel(logging.WARNING)

    # Re-running setup replaces our handlers instead of stacking them
    for existing in list(root.handlers):
        if isinstance(existing.formatter, SafeFormatter):
            root.removeHandler(existing)

    formatter = SafeFormatter(log_format)
    _attach(root, logging.StreamHandler(sys.stdout), formatter)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        _attach(
            root,
            RotatingFileHandler(
                log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
            ),
            formatter,
        )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("cloud_agent_bridge").setLevel(
        getattr(logging, level.upper(), logging.INFO)
    )
    logging.getLogger(__name__).info(
        "Logging is set up: level=%s, log_file=%s", level, log_file
    )
    return root
