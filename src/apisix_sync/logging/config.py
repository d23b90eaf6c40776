"""Structured logging configuration using structlog.

Codec modules log through ``structlog.get_logger()``; the stdlib logger
factory names each logger after its module, so every event lands under the
``apisix_sync`` logger hierarchy. ``configure_logging`` attaches handlers to
that package logger only, leaving the root logger of the embedding tool
alone, and replaces its own handlers when called again.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

PACKAGE_LOGGER = "apisix_sync"

# Log file configuration
LOG_DIR = Path.home() / ".local" / "state" / "adc"
LOG_FILE = LOG_DIR / "adc.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
RETENTION_DAYS = 30

# Marks handlers owned by configure_logging
_HANDLER_FLAG = "_apisix_sync_handler"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _resolve_level(verbose: bool, debug: bool) -> int:
    """Map verbosity switches to a stdlib log level."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _cleanup_old_logs(log_file: Path) -> None:
    """Delete rotations of log_file older than RETENTION_DAYS."""
    log_dir = log_file.parent
    if not log_dir.exists():
        return
    cutoff = datetime.now() - timedelta(days=RETENTION_DAYS)
    for path in log_dir.glob(f"{log_file.name}*"):
        try:
            if datetime.fromtimestamp(path.stat().st_mtime) < cutoff:
                path.unlink()
        except OSError:
            pass  # best effort, a stale file is not worth failing startup


def _file_handler(log_file: Path) -> logging.Handler:
    """Build a rotating JSON file handler, pruning stale rotations first."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    _cleanup_old_logs(log_file)

    handler = RotatingFileHandler(log_file, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    return handler


def _console_handler(level: int, json_output: bool, debug: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
        )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    return handler


def _remove_owned_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
    log_file: Path | None = LOG_FILE,
) -> logging.Logger:
    """Route apisix_sync log events to the console and a log file.

    Calling this again swaps the previous handlers for new ones, so the
    level or output format can change without duplicating output. Handlers
    added to the package logger by anyone else are left in place.

    Args:
        verbose: Enable verbose (INFO level) output.
        debug: Enable debug mode (DEBUG level). Codec decode events are
            only visible at this level.
        json_output: Render console logs as JSON lines.
        log_file: Rotating JSON log file (10MB, 5 backups, pruned after
            30 days). ``None`` disables file logging.

    Returns:
        The configured ``apisix_sync`` stdlib logger.
    """
    log_level = _resolve_level(verbose, debug)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_owned_handlers(package_logger)

    handlers = [_console_handler(log_level, json_output, debug)]
    if log_file is not None:
        handlers.append(_file_handler(log_file))
    for handler in handlers:
        setattr(handler, _HANDLER_FLAG, True)
        package_logger.addHandler(handler)

    package_logger.setLevel(logging.DEBUG)  # handlers do the filtering
    # Events are fully rendered here; the host's root handlers would repeat them
    package_logger.propagate = False
    return package_logger


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a configured logger with optional initial context.

    Args:
        name: Logger name. If None, uses the calling module's name.
        **initial_context: Context variables bound to every event.

    Returns:
        A bound structlog logger.
    """
    logger: structlog.BoundLogger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
