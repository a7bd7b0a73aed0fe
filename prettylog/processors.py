# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""structlog integration.

:class:`PrettyRenderer` is a final structlog processor that renders event
dicts in the pretty line format::

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            PrettyRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

The ``event`` key becomes the message, ``level`` (or the method name) the
level, ``timestamp`` the time; every other key is an attribute.
"""

from __future__ import annotations

import threading
from collections.abc import MutableMapping
from datetime import datetime
from typing import Any, BinaryIO, cast

import structlog

from prettylog.options import HandlerOptions
from prettylog.pretty import PrettyHandler
from prettylog.record import Attr, Level, Record, parse_level

__all__ = ["PrettyRenderer", "record_from_event_dict"]

_METHOD_LEVELS: dict[str, Level] = {
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "msg": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "exception": Level.ERROR,
    "critical": Level(Level.ERROR + 4),
    "fatal": Level(Level.ERROR + 4),
}


def _event_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return datetime.fromtimestamp(value).astimezone()
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    return datetime.now().astimezone()


def _event_level(value: Any) -> Level:
    if isinstance(value, int) and not isinstance(value, bool):
        return Level(value)
    name = str(value)
    if name.lower() in _METHOD_LEVELS:
        return _METHOD_LEVELS[name.lower()]
    try:
        return parse_level(name)
    except ValueError:
        return Level.INFO


def record_from_event_dict(method_name: str, event_dict: MutableMapping[str, Any]) -> Record:
    """Convert a structlog event dict without mutating it."""
    event = dict(event_dict)
    message = event.pop("event", "")
    level_name = event.pop("level", method_name)
    return Record(
        time=_event_time(event.pop("timestamp", None)),
        level=_event_level(level_name),
        message="" if message is None else str(message),
        attrs=tuple(Attr(k, v) for k, v in event.items()),
    )


class _ThreadLocalSink(threading.local):
    """Sink holding the last line written by the current thread."""

    data: bytes = b""

    def write(self, data: bytes) -> int:
        self.data = data
        return len(data)

    def flush(self) -> None:
        pass

    def pop(self) -> bytes:
        data, self.data = self.data, b""
        return data


class PrettyRenderer:
    """structlog processor returning the pretty line for an event.

    Events below the minimum level raise :class:`structlog.DropEvent`.

    Args:
        options: Same options as :class:`~prettylog.PrettyHandler`.
        output_empty_attrs: Render ``{}`` for events without attributes.

    """

    def __init__(self, options: HandlerOptions | None = None, *, output_empty_attrs: bool = False) -> None:
        """Create a renderer backed by its own :class:`PrettyHandler`."""
        self._sink = _ThreadLocalSink()
        self._handler = PrettyHandler(options, writer=cast(BinaryIO, self._sink), output_empty_attrs=output_empty_attrs)

    def __call__(self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> str:
        """Render *event_dict*; the returned line has no trailing newline."""
        record = record_from_event_dict(method_name, event_dict)
        if not self._handler.enabled(record.level):
            raise structlog.DropEvent
        self._handler.handle(record)
        return self._sink.pop().decode("utf-8").removesuffix("\n")
