"""Logging setup for modelbridge.

Two sources of ``key=value`` fields end up on a log line:

* fields pushed for a block of code with :func:`log_context` (kept in a
  ContextVar, so they follow the current thread or task), and
* fields bound to a logger with :func:`bind_logger`, carried on each record
  as ``record.log_fields``.

:class:`ContextualFormatter` renders both, record fields last.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, MutableMapping, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")

_fields: ContextVar[dict[str, Any]] = ContextVar("modelbridge_log_fields", default={})
_configured = False


class ContextualFormatter(logging.Formatter):
    """Formatter that appends ``[key=value ...]`` to every message."""

    def format(self, record: logging.LogRecord) -> str:
        fields = {**_fields.get(), **getattr(record, "log_fields", {})}
        text = super().format(record)
        if not fields:
            return text
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{text} [{rendered}]"


class FieldLogger(logging.LoggerAdapter):
    """Adapter that attaches fields to each record it emits.

    The record keeps the :func:`log_context` fields active at emit time as
    well as the adapter's own, so handlers that format later still see them.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["log_fields"] = {
            **_fields.get(),
            **extra.get("log_fields", {}),
            **self.extra,
        }
        kwargs["extra"] = extra
        return msg, kwargs


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Add ``fields`` to every log line emitted inside the block.

    Nested blocks merge their fields; the previous set is restored on exit.
    """
    token = _fields.set({**_fields.get(), **fields})
    try:
        yield
    finally:
        _fields.reset(token)


def current_log_context() -> dict[str, Any]:
    return dict(_fields.get())


def configure_logging(
    level: int = logging.INFO,
    third_party_level: int = logging.WARNING,
    stream: TextIO | None = None,
) -> None:
    """Install a single contextual stderr handler on the root logger.

    Only the first call has an effect, so the CLI and the web application
    can both call it at startup.
    """
    global _configured
    if _configured:
        return
    _configured = True

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ContextualFormatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, giving it a handler if nothing is configured."""
    logger = logging.getLogger(name)
    if _configured or logger.handlers or logging.getLogger().handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(ContextualFormatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger


def bind_logger(name: str, **fields: Any) -> FieldLogger:
    """Return a logger whose records always carry ``fields``."""
    return FieldLogger(get_logger(name), fields)
