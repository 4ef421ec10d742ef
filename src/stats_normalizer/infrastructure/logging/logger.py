# src/stats_normalizer/infrastructure/logging/logger.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""JSON log lines for decode diagnostics.

Mappers and the decode boundary log through plain ``logging.getLogger``
loggers. A host that wants those records (dropped items at DEBUG, unusable
payloads at WARNING) as one JSON object per line calls
:func:`configure_root_logging` once, or attaches :class:`JsonLineFormatter`
to a handler of its own.

Each line carries ``ts``, ``level``, ``logger`` and ``message``. Fields the
decoders pass as ``extra={"extra": {...}}`` (family, reason, code, ...) are
merged in at the top level. Wrapping a decode in :func:`request_context`
tags its lines with the ``request_id`` of the fetch that produced the payload.

Typical usage:
    configure_root_logging()
    with request_context("fetch-42"):
        decode_site_metrics(body, PeriodUnit.DAY)
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from stats_normalizer.config.settings import get_settings

__all__ = [
    "JsonLineFormatter",
    "configure_root_logging",
    "get_json_logger",
    "get_request_id",
    "request_context",
]

_REQUEST_ID_ENV_KEY = "REQUEST_ID"

_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("stats_request_id", default=None)


@contextmanager
def request_context(request_id: str) -> Iterator[None]:
    """Tag log lines emitted inside the block with ``request_id``."""
    token = _REQUEST_ID_CTX.set(request_id)
    try:
        yield
    finally:
        _REQUEST_ID_CTX.reset(token)


def get_request_id() -> str | None:
    return _REQUEST_ID_CTX.get()


class JsonLineFormatter(logging.Formatter):
    """Render a record as a compact single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Record attribute wins over the context, which wins over the env.
        request_id = (
            getattr(record, "request_id", None)
            or _REQUEST_ID_CTX.get()
            or os.getenv(_REQUEST_ID_ENV_KEY)
        )
        if request_id:
            line["request_id"] = request_id

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            line["exc_type"] = type(exc).__name__
            line["exc_message"] = str(exc)

        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            line.update(fields)

        return json.dumps(line, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Install a JSON stream handler on the root logger.

    The level comes from ``level``, else ``LOG_LEVEL``, else
    ``Settings.log_level``. Calling again only updates the level; a root
    logger that already has handlers keeps them.
    """
    root = logging.getLogger()

    if level is None:
        level = (os.getenv("LOG_LEVEL") or "").upper() or get_settings().log_level
    root.setLevel(level)

    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLineFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return the named logger; records reach whatever the root has installed."""
    log = logging.getLogger(name)
    log.propagate = True
    return log
