# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""JSON handler: renders each record as one JSON object per line.

This is the structured backend the pretty handler delegates attribute
serialization to.  It builds the attribute tree (persistent attrs, groups,
record attrs), runs the ``replace_attr`` hook over every leaf and writes a
single ``{...}\\n`` line per record.

Output shape::

    {"time":"2024-01-15T10:30:45.123+00:00","level":"INFO","msg":"hi","req":{"id":7}}

Groups that end up with no members are omitted.  A group attribute with an
empty key has its members inlined into the enclosing object.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from datetime import time as dt_time
from enum import Enum
from typing import Any, BinaryIO, Protocol, runtime_checkable

from prettylog.options import HandlerOptions, apply_replace_attr
from prettylog.record import LEVEL_KEY, MESSAGE_KEY, SOURCE_KEY, TIME_KEY, Attr, Level, Record

__all__ = [
    "Handler",
    "JSONHandler",
]


@runtime_checkable
class Handler(Protocol):
    """Capabilities a backend must provide to be wrapped by the pretty handler."""

    def enabled(self, level: int) -> bool:
        """Report whether records at *level* should be handled."""
        ...

    def handle(self, record: Record) -> None:
        """Serialize *record*; raise on failure."""
        ...

    def with_attrs(self, attrs: Sequence[Attr]) -> Handler:
        """Return a handler that adds *attrs* to every record."""
        ...

    def with_group(self, name: str) -> Handler:
        """Return a handler that nests subsequent attrs under *name*."""
        ...


@dataclass(frozen=True)
class _GroupOrAttrs:
    """One ``with_group`` or ``with_attrs`` step, replayed on every record."""

    group: str = ""
    attrs: tuple[Attr, ...] = ()


def encode_value(value: Any) -> Any:
    """Convert an attribute value to something ``json.dumps`` accepts.

    Raises:
        ValueError: For NaN and infinite floats, which JSON cannot carry.

    """
    if value is None or isinstance(value, str | bool):
        return value
    if isinstance(value, Level):
        return str(value)
    if isinstance(value, Enum):
        return encode_value(value.value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"json: unsupported value: {value}")
        return value
    if isinstance(value, datetime):
        return value.isoformat(timespec="milliseconds")
    if isinstance(value, date | dt_time):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): encode_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [encode_value(v) for v in value]
    return str(value)


def _container(root: dict[str, Any], groups: Sequence[str]) -> dict[str, Any]:
    # Groups are created on first write so empty ones never appear.
    node = root
    for name in groups:
        child = node.get(name)
        if not isinstance(child, dict):
            child = node[name] = {}
        node = child
    return node


class JSONHandler:
    """Structured handler writing one JSON object per record.

    Derived handlers (``with_attrs``/``with_group``) share the writer and
    options of the handler they came from.
    """

    def __init__(self, writer: BinaryIO, options: HandlerOptions | None = None) -> None:
        """Create a handler writing UTF-8 JSON lines to *writer*."""
        self._writer = writer
        self._options = options if options is not None else HandlerOptions()
        self._steps: tuple[_GroupOrAttrs, ...] = ()

    @property
    def options(self) -> HandlerOptions:
        """Options the handler was built with."""
        return self._options

    def _derive(self, step: _GroupOrAttrs) -> JSONHandler:
        h = JSONHandler(self._writer, self._options)
        h._steps = (*self._steps, step)
        return h

    def enabled(self, level: int) -> bool:
        """Report whether *level* meets the configured minimum."""
        return level >= self._options.min_level()

    def with_attrs(self, attrs: Sequence[Attr]) -> JSONHandler:
        """Return a handler that adds *attrs* inside the currently open groups."""
        if not attrs:
            return self
        return self._derive(_GroupOrAttrs(attrs=tuple(attrs)))

    def with_group(self, name: str) -> JSONHandler:
        """Return a handler that nests all later attrs under *name*."""
        if not name:
            return self
        return self._derive(_GroupOrAttrs(group=name))

    def handle(self, record: Record) -> None:
        """Serialize *record* and write it as a single line.

        Raises:
            ValueError: If an attribute value cannot be encoded as JSON.

        """
        obj: dict[str, Any] = {}
        self._append(obj, (), Attr(TIME_KEY, record.time))
        self._append(obj, (), Attr(LEVEL_KEY, record.level))
        if self._options.add_source and record.source is not None:
            self._append(obj, (), Attr(SOURCE_KEY, record.source.as_dict()))
        self._append(obj, (), Attr(MESSAGE_KEY, record.message))

        groups: tuple[str, ...] = ()
        for step in self._steps:
            if step.group:
                groups = (*groups, step.group)
            for attr in step.attrs:
                self._append(obj, groups, attr)
        for attr in record.attrs:
            self._append(obj, groups, attr)

        line = json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        self._writer.write((line + "\n").encode("utf-8"))

    def _append(self, root: dict[str, Any], groups: tuple[str, ...], attr: Attr) -> None:
        if attr.is_group:
            sub = groups if not attr.key else (*groups, attr.key)
            for member in attr.value.attrs:
                self._append(root, sub, member)
            return
        if attr.is_zero():
            return
        replaced = apply_replace_attr(self._options.replace_attr, groups, attr)
        if replaced is None:
            return
        if replaced.is_group:
            sub = groups if not replaced.key else (*groups, replaced.key)
            for member in replaced.value.attrs:
                self._append(root, sub, member)
            return
        _container(root, groups)[replaced.key] = encode_value(replaced.value)
