# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Log record model: levels, attributes and records.

A :class:`Record` is an immutable snapshot of one emitted event.  Handlers
consume it once and never retain it.

CONVENIENCE CONSTRUCTORS
------------------------
Record provides factory methods for each named level; keyword arguments
become attributes in call order::

    Record.info("listening", port=8080)
    Record.error("request failed", Attr.group("http", method="GET", status=502))

LEVELS
------
Levels are plain integers with names attached.  The named levels are spaced
four apart so that intermediate severities get names relative to the nearest
lower one::

    str(Level(2))   # "INFO+2"
    str(Level(-5))  # "DEBUG-1"

KEY CLASSES
-----------
Level : int subclass with DEBUG, INFO, WARN, ERROR
LevelVar : Thread-safe mutable minimum level
Attr : Key/value pair, possibly a group of nested attrs
Source : Source code location of the call that emitted a record
Record : One log event

"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, ClassVar

__all__ = [
    "LEVEL_KEY",
    "MESSAGE_KEY",
    "SOURCE_KEY",
    "TIME_KEY",
    "Attr",
    "Group",
    "Level",
    "LevelVar",
    "Record",
    "Source",
    "parse_level",
]

# ---------------------------------------------------------------------------
# Keys of the built-in fields
# ---------------------------------------------------------------------------

TIME_KEY = "time"
LEVEL_KEY = "level"
MESSAGE_KEY = "msg"
SOURCE_KEY = "source"

_LEVEL_RE = re.compile(r"^(?P<name>[A-Za-z]+)(?P<offset>[+-]\d+)?$")


class Level(int):
    """Severity of a log record.

    Any integer is a valid level; higher is more severe.  ``str()`` gives the
    canonical name, which is what handlers render.

    Attributes:
        DEBUG: -4
        INFO: 0
        WARN: 4
        ERROR: 8

    """

    DEBUG: ClassVar[Level]
    INFO: ClassVar[Level]
    WARN: ClassVar[Level]
    ERROR: ClassVar[Level]

    def __str__(self) -> str:
        """Return the level name, e.g. ``"INFO"`` or ``"WARN+1"``."""
        value = int(self)
        if value < 0:
            return _offset_name("DEBUG", value + 4)
        if value < 4:
            return _offset_name("INFO", value)
        if value < 8:
            return _offset_name("WARN", value - 4)
        return _offset_name("ERROR", value - 8)

    def __repr__(self) -> str:
        """Return a representation suitable for debugging."""
        return f"Level({self})"

    @classmethod
    def from_logging(cls, levelno: int) -> Level:
        """Map a standard-library ``logging`` level onto this scale.

        The mapping is linear: ``logging.DEBUG`` -> DEBUG, ``logging.INFO`` ->
        INFO, ``logging.WARNING`` -> WARN, ``logging.ERROR`` -> ERROR and
        ``logging.CRITICAL`` -> ``ERROR+4``.
        """
        return cls((levelno - logging.INFO) * 2 // 5)


Level.DEBUG = Level(-4)
Level.INFO = Level(0)
Level.WARN = Level(4)
Level.ERROR = Level(8)

_NAMED_LEVELS: dict[str, Level] = {
    "DEBUG": Level.DEBUG,
    "INFO": Level.INFO,
    "WARN": Level.WARN,
    "WARNING": Level.WARN,
    "ERROR": Level.ERROR,
}


def _offset_name(base: str, offset: int) -> str:
    if offset == 0:
        return base
    return f"{base}{offset:+d}"


def parse_level(text: str) -> Level:
    """Parse a level name or integer.

    Accepts the names produced by ``str(Level)`` in any case (``"info"``,
    ``"WARN+2"``), ``"WARNING"`` as an alias for WARN, and bare integers.

    Raises:
        ValueError: If *text* is not a recognised level.

    """
    text = text.strip()
    try:
        return Level(int(text))
    except ValueError:
        pass
    m = _LEVEL_RE.match(text)
    if m is None or m.group("name").upper() not in _NAMED_LEVELS:
        raise ValueError(f"unknown level name: {text!r}")
    base = _NAMED_LEVELS[m.group("name").upper()]
    offset = int(m.group("offset")) if m.group("offset") else 0
    return Level(base + offset)


class LevelVar:
    """A minimum level that can be changed while handlers are in use.

    Handlers configured with a ``LevelVar`` read it on every ``enabled()``
    call, so :meth:`set` takes effect immediately for every handler derived
    from the same options.
    """

    def __init__(self, level: int = Level.INFO) -> None:
        """Create with an initial level (INFO by default)."""
        self._lock = threading.Lock()
        self._level = Level(level)

    def level(self) -> Level:
        """Return the current level."""
        with self._lock:
            return self._level

    def set(self, level: int) -> None:
        """Change the current level."""
        with self._lock:
            self._level = Level(level)

    def __repr__(self) -> str:
        """Return a representation suitable for debugging."""
        return f"LevelVar({self.level()})"


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Group:
    """Value of a group attribute: an ordered run of nested attrs."""

    attrs: tuple[Attr, ...] = ()


@dataclass(frozen=True)
class Attr:
    """A key/value pair attached to a record or a handler.

    ``Attr()`` (empty key, ``None`` value) is the zero attribute.  Handlers
    ignore it, and a ``replace_attr`` hook may return it to drop a field.

    Attributes:
        key: Attribute name.  Within a group path it names one member.
        value: Any value; a :class:`Group` makes this a group attribute.

    """

    key: str = ""
    value: Any = None

    @classmethod
    def group(cls, key: str, /, *attrs: Attr, **kwargs: Any) -> Attr:
        """Create a group attribute from attrs and keyword arguments."""
        return cls(key, Group((*attrs, *attrs_from_kwargs(kwargs))))

    @property
    def is_group(self) -> bool:
        """Whether the value is a :class:`Group`."""
        return isinstance(self.value, Group)

    def is_zero(self) -> bool:
        """Whether this is the zero attribute ``Attr()``."""
        return self.key == "" and self.value is None


def attrs_from_kwargs(kwargs: dict[str, Any]) -> tuple[Attr, ...]:
    """Convert keyword arguments to attrs, preserving call order."""
    return tuple(Attr(k, v) for k, v in kwargs.items())


@dataclass(frozen=True)
class Source:
    """Location of the call that emitted a record."""

    function: str
    file: str
    line: int

    def as_dict(self) -> dict[str, Any]:
        """Return the JSON form: ``{"function": ..., "file": ..., "line": ...}``."""
        return {"function": self.function, "file": self.file, "line": self.line}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Record:
    """One log event.

    Attributes:
        time: When the event happened.  Rendered in its own timezone.
        level: Severity; plain integers are coerced to :class:`Level`.
        message: Human-readable message text.
        attrs: Attributes in emission order.  Duplicate keys are kept.
        source: Optional call-site location.

    """

    time: datetime
    level: Level
    message: str
    attrs: tuple[Attr, ...] = ()
    source: Source | None = None

    def __post_init__(self) -> None:
        """Coerce ``level`` to :class:`Level` and ``attrs`` to a tuple."""
        if type(self.level) is not Level:
            object.__setattr__(self, "level", Level(self.level))
        if not isinstance(self.attrs, tuple):
            object.__setattr__(self, "attrs", tuple(self.attrs))

    @classmethod
    def new(cls, level: int, message: str, /, *attrs: Attr, time: datetime | None = None, **kwargs: Any) -> Record:
        """Create a record stamped with the current local time.

        Positional attrs come first, then keyword arguments in call order.
        """
        return cls(
            time=time if time is not None else datetime.now().astimezone(),
            level=Level(level),
            message=message,
            attrs=(*attrs, *attrs_from_kwargs(kwargs)),
        )

    @classmethod
    def debug(cls, message: str, /, *attrs: Attr, **kwargs: Any) -> Record:
        """Create a DEBUG level record."""
        return cls.new(Level.DEBUG, message, *attrs, **kwargs)

    @classmethod
    def info(cls, message: str, /, *attrs: Attr, **kwargs: Any) -> Record:
        """Create an INFO level record."""
        return cls.new(Level.INFO, message, *attrs, **kwargs)

    @classmethod
    def warn(cls, message: str, /, *attrs: Attr, **kwargs: Any) -> Record:
        """Create a WARN level record."""
        return cls.new(Level.WARN, message, *attrs, **kwargs)

    @classmethod
    def error(cls, message: str, /, *attrs: Attr, **kwargs: Any) -> Record:
        """Create an ERROR level record."""
        return cls.new(Level.ERROR, message, *attrs, **kwargs)

    def add_attrs(self, *attrs: Attr, **kwargs: Any) -> Record:
        """Return a copy with extra attrs appended."""
        return replace(self, attrs=(*self.attrs, *attrs, *attrs_from_kwargs(kwargs)))
