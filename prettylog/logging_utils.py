# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Bridge from the standard library ``logging`` module.

Provides :class:`PrettyLoggingHandler`, a :class:`logging.Handler` that
converts each :class:`logging.LogRecord` into a :class:`~prettylog.Record`
and renders it with a :class:`~prettylog.PrettyHandler`.  All ``extra``
fields attached to a record (via ``LoggerAdapter`` or per-call ``extra``)
become attributes automatically, with no allowlist to maintain.

This module is **not** auto-imported by ``prettylog``; import it explicitly::

    from prettylog.logging_utils import PrettyLoggingHandler

    logging.getLogger().addHandler(PrettyLoggingHandler(PrettyHandler(writer=sys.stderr.buffer)))
"""

from __future__ import annotations

import logging
from datetime import datetime

from prettylog.pretty import PrettyHandler
from prettylog.record import Attr, Level, Record, Source

__all__ = ["PrettyLoggingHandler", "record_from_logging"]

# Build the set of attribute names that every LogRecord has by default.
# Anything *not* in this set was injected via ``extra``.
_DEFAULT_RECORD_ATTRS: frozenset[str] = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()) | {
    "message",
    "asctime",
    "taskName",
}

LOGGER_KEY = "logger"
EXCEPTION_KEY = "exception"
STACK_INFO_KEY = "stack_info"

_formatter = logging.Formatter()


def record_from_logging(record: logging.LogRecord) -> Record:
    """Convert a standard-library log record.

    The logger name comes first among the attributes, followed by every
    non-default attribute on the record in insertion order, then the
    formatted exception and stack when present.
    """
    attrs: list[Attr] = [Attr(LOGGER_KEY, record.name)]
    attrs.extend(Attr(k, v) for k, v in record.__dict__.items() if k not in _DEFAULT_RECORD_ATTRS)
    if record.exc_info and record.exc_info[1]:
        attrs.append(Attr(EXCEPTION_KEY, _formatter.formatException(record.exc_info)))
    if record.stack_info:
        attrs.append(Attr(STACK_INFO_KEY, _formatter.formatStack(record.stack_info)))
    return Record(
        time=datetime.fromtimestamp(record.created).astimezone(),
        level=Level.from_logging(record.levelno),
        message=record.getMessage(),
        attrs=tuple(attrs),
        source=Source(function=record.funcName, file=record.pathname, line=record.lineno),
    )


class PrettyLoggingHandler(logging.Handler):
    """``logging.Handler`` that renders records through a :class:`PrettyHandler`.

    A record is emitted only when it passes both this handler's own
    ``logging`` level and the pretty handler's minimum level.  Rendering
    failures go to :meth:`logging.Handler.handleError`, which reports them
    on ``stderr`` when ``logging.raiseExceptions`` is set.
    """

    def __init__(self, handler: PrettyHandler, level: int = logging.NOTSET) -> None:
        """Wrap *handler*."""
        super().__init__(level)
        self.pretty = handler

    def emit(self, record: logging.LogRecord) -> None:
        """Render *record* if the pretty handler's level admits it."""
        try:
            if not self.pretty.enabled(Level.from_logging(record.levelno)):
                return
            self.pretty.handle(record_from_logging(record))
        except Exception:
            self.handleError(record)
