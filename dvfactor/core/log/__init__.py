"""Logging for the service: rich console output plus an optional rotating file.

Records are handed to a background ``QueueListener`` so request handlers
never block on console or disk I/O. Every record carries the identifiers
bound through ``log_context`` (edition, user, participant, request).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from threading import RLock

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .timing import timeit

__all__ = [
    "LoggingConfig",
    "get_logger",
    "init_logging",
    "log_context",
    "set_level",
    "shutdown_logging",
    "timeit",
]

ROOT_LOGGER = "dvfactor"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(context)s%(message)s"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default) not in {"0", "false", "False", ""}


@dataclass
class LoggingConfig:
    """Logging options, read from ``LOG_*`` environment variables by default."""

    level: str | int = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_dir: Path | None = field(
        default_factory=lambda: Path(os.environ["LOG_DIR"]) if os.getenv("LOG_DIR") else None
    )
    backup_days: int = 14
    console: bool = True
    use_queue: bool = field(default_factory=lambda: _env_flag("LOG_QUEUE", "1"))


_lock = RLock()
_active: LoggingConfig | None = None
_listener: QueueListener | None = None
_handlers: list[logging.Handler] = []


def _level(value: str | int) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(str(value).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler() -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(context)s%(message)s"))
    return handler


def _file_handler(directory: Path, backup_days: int) -> logging.Handler:
    directory.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        directory / f"{ROOT_LOGGER}.log",
        when="midnight",
        backupCount=backup_days,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def init_logging(config: LoggingConfig | None = None) -> None:
    """Attach the service handlers to the ``dvfactor`` logger.

    Calling it again with an equal configuration is a no-op; a different
    configuration replaces the running handlers.
    """

    global _active, _listener
    cfg = config or LoggingConfig()
    with _lock:
        if _active == cfg:
            return
        _stop_locked()

        handlers: list[logging.Handler] = []
        if cfg.console:
            install_rich_traceback(show_locals=False)
            handlers.append(_console_handler())
        if cfg.log_dir is not None:
            handlers.append(_file_handler(cfg.log_dir, cfg.backup_days))

        context_filter = ContextFilter()
        for handler in handlers:
            handler.addFilter(context_filter)

        logger = logging.getLogger(ROOT_LOGGER)
        logger.setLevel(_level(cfg.level))
        logger.propagate = False
        if cfg.use_queue and handlers:
            queue: SimpleQueue = SimpleQueue()
            front = QueueHandler(queue)
            # The context lives in a contextvar, so it is resolved before the hop.
            front.addFilter(context_filter)
            logger.addHandler(front)
            _listener = QueueListener(queue, *handlers, respect_handler_level=True)
            _listener.start()
            _handlers[:] = [front, *handlers]
        else:
            for handler in handlers:
                logger.addHandler(handler)
            _handlers[:] = handlers
        _active = cfg


def _stop_locked() -> None:
    global _active, _listener
    if _listener is not None:
        _listener.stop()
        _listener = None
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in _handlers:
        logger.removeHandler(handler)
        handler.close()
    _handlers.clear()
    _active = None


def shutdown_logging() -> None:
    """Flush and detach every handler installed by ``init_logging``."""

    with _lock:
        _stop_locked()


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below ``dvfactor``, configuring logging on first use."""

    with _lock:
        if _active is None:
            init_logging()
    if not name or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_level(level: str | int) -> None:
    logging.getLogger(ROOT_LOGGER).setLevel(_level(level))
