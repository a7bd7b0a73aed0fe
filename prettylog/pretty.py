# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Human-readable line handler.

:class:`PrettyHandler` renders each record as::

    [10:30:45.123]   INFO: hello world {"count":42,"key":"value"}

The timestamp, level and message prefix is computed directly from the
record.  The attribute tail is produced by a :class:`~prettylog.JSONHandler`
writing into a private scratch buffer, decoded, and re-encoded compactly.
The backend is configured to drop the built-in ``time``/``level``/``msg``
keys so they are not rendered twice.

Every handler derived from one root construction shares the same scratch
buffer and lock, so at most one record's attributes are being serialized at
a time no matter which derived handler is used.
"""

from __future__ import annotations

import io
import json
import sys
import threading
from collections.abc import Sequence
from typing import Any, BinaryIO

from prettylog.errors import AttrsDecodeError, AttrsEncodeError, InnerHandlerError
from prettylog.json_handler import Handler, JSONHandler
from prettylog.options import HandlerOptions, ReplaceAttr, apply_replace_attr
from prettylog.record import LEVEL_KEY, MESSAGE_KEY, TIME_KEY, Attr, Record

__all__ = [
    "PrettyHandler",
    "new_handler",
]

_RESERVED_KEYS: frozenset[str] = frozenset({TIME_KEY, LEVEL_KEY, MESSAGE_KEY})

_LEVEL_WIDTH = 7


def _suppress_defaults(next_hook: ReplaceAttr | None) -> ReplaceAttr:
    """Wrap *next_hook* so the backend never emits the built-in fields."""

    def replace_attr(groups: Sequence[str], attr: Attr) -> Attr | None:
        if attr.key in _RESERVED_KEYS:
            return None
        if next_hook is None:
            return attr
        return next_hook(groups, attr)

    return replace_attr


def _format_time(record: Record) -> str:
    t = record.time
    return f"[{t.hour:02d}:{t.minute:02d}:{t.second:02d}.{t.microsecond // 1000:03d}]"


class _ScratchBuffer:
    """The backend's write target plus the lock that serializes its use."""

    __slots__ = ("buf", "lock")

    def __init__(self) -> None:
        self.buf = io.BytesIO()
        self.lock = threading.Lock()

    def reset(self) -> None:
        self.buf.seek(0)
        self.buf.truncate()


class PrettyHandler:
    """Handler that writes ``[time] LEVEL: message {attrs}`` lines.

    Args:
        options: Level threshold, ``add_source`` and ``replace_attr`` hook.
            The level and ``add_source`` go to the backend; ``replace_attr``
            is applied both by the backend and to the rendered prefix.
        writer: Binary sink receiving one ``write()`` per record.  When
            ``None``, standard output is looked up at write time.
        output_empty_attrs: Render ``{}`` for records without attributes
            instead of omitting the tail.

    """

    def __init__(
        self,
        options: HandlerOptions | None = None,
        *,
        writer: BinaryIO | None = None,
        output_empty_attrs: bool = False,
    ) -> None:
        """Create a root handler with a fresh scratch buffer."""
        if options is None:
            options = HandlerOptions()
        self._scratch = _ScratchBuffer()
        self._inner: Handler = JSONHandler(
            self._scratch.buf,
            HandlerOptions(
                level=options.level,
                add_source=options.add_source,
                replace_attr=_suppress_defaults(options.replace_attr),
            ),
        )
        self._replace_attr = options.replace_attr
        self._writer = writer
        self._output_empty_attrs = output_empty_attrs

    @property
    def writer(self) -> BinaryIO | None:
        """The sink given at construction, or ``None`` for standard output."""
        return self._writer

    @property
    def output_empty_attrs(self) -> bool:
        """Whether ``{}`` is rendered for records without attributes."""
        return self._output_empty_attrs

    def _derive(self, inner: Handler) -> PrettyHandler:
        h = object.__new__(PrettyHandler)
        h._scratch = self._scratch
        h._inner = inner
        h._replace_attr = self._replace_attr
        h._writer = self._writer
        h._output_empty_attrs = self._output_empty_attrs
        return h

    def enabled(self, level: int) -> bool:
        """Report whether records at *level* pass the minimum level."""
        return self._inner.enabled(level)

    def with_attrs(self, attrs: Sequence[Attr]) -> PrettyHandler:
        """Return a handler that adds *attrs* to every record it renders.

        The new handler shares this handler's scratch buffer, lock and sink.
        """
        if not attrs:
            return self
        return self._derive(self._inner.with_attrs(attrs))

    def with_group(self, name: str) -> PrettyHandler:
        """Return a handler that nests later attrs under *name*."""
        if not name:
            return self
        return self._derive(self._inner.with_group(name))

    def _field(self, attr: Attr) -> str | None:
        # Built-in fields are rewritten at the top level, with no groups.
        replaced = apply_replace_attr(self._replace_attr, (), attr)
        if replaced is None:
            return None
        return str(replaced.value)

    def _compute_attrs(self, record: Record) -> dict[str, Any]:
        scratch = self._scratch
        with scratch.lock:
            try:
                try:
                    self._inner.handle(record)
                except Exception as exc:
                    raise InnerHandlerError(exc) from exc
                try:
                    attrs = json.loads(scratch.buf.getvalue())
                except ValueError as exc:
                    raise AttrsDecodeError(exc) from exc
            finally:
                scratch.reset()
        if attrs is None:
            return {}
        if not isinstance(attrs, dict):
            raise AttrsDecodeError(f"expected a JSON object, got {type(attrs).__name__}")
        return attrs

    def handle(self, record: Record) -> None:
        """Render *record* and write it to the sink as one line.

        Raises:
            InnerHandlerError: The backend failed to serialize attributes.
            AttrsDecodeError: The backend's output was not a JSON object.
            AttrsEncodeError: The attributes could not be re-encoded.
            OSError: Writing to the sink failed.

        """
        level_text = self._field(Attr(LEVEL_KEY, record.level))
        level = "" if level_text is None else level_text + ":"
        timestamp = self._field(Attr(TIME_KEY, _format_time(record))) or ""
        msg = self._field(Attr(MESSAGE_KEY, record.message)) or ""

        attrs = self._compute_attrs(record)

        tail = ""
        if self._output_empty_attrs or attrs:
            try:
                tail = json.dumps(attrs, separators=(",", ":"), sort_keys=True, ensure_ascii=False, allow_nan=False)
            except (TypeError, ValueError) as exc:
                raise AttrsEncodeError(exc) from exc

        parts: list[str] = []
        if timestamp:
            parts.append(timestamp)
        if level:
            parts.append(f"{level:>{_LEVEL_WIDTH}}")
        if msg:
            parts.append(msg)
        if tail:
            parts.append(tail)

        writer = self._writer if self._writer is not None else sys.stdout.buffer
        writer.write((" ".join(parts) + "\n").encode("utf-8"))
        flush = getattr(writer, "flush", None)
        if flush is not None:
            flush()


def new_handler(options: HandlerOptions | None = None) -> PrettyHandler:
    """Create a handler writing to standard output that always renders the attribute tail."""
    return PrettyHandler(options, writer=sys.stdout.buffer, output_empty_attrs=True)
