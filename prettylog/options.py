# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Handler configuration shared by the JSON backend and the pretty handler.

Provides :class:`HandlerOptions` and the ``replace_attr`` hook contract.

Logger: ``prettylog.config``. Options resolved from the environment are
logged at DEBUG level.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from prettylog.record import Attr, Level, LevelVar, parse_level

__all__ = [
    "HandlerOptions",
    "ReplaceAttr",
    "apply_replace_attr",
]

_logger = logging.getLogger("prettylog.config")

ReplaceAttr = Callable[[Sequence[str], Attr], Attr | None]
"""Hook called as ``replace_attr(groups, attr)`` for every non-group attribute.

Returns the attribute unchanged, a modified attribute, or ``None`` to drop
it.  Returning the zero attribute ``Attr()`` also drops it.  An attribute
whose value is merely empty (``Attr("msg", "")``) is kept.
"""

_TRUTHY = ("1", "true", "yes")
_FALSY = ("", "0", "false", "no")


@dataclass(frozen=True)
class HandlerOptions:
    """Options for :class:`~prettylog.JSONHandler` and :class:`~prettylog.PrettyHandler`.

    Attributes:
        level: Minimum level a record needs to be handled.  Either a fixed
            level or a :class:`~prettylog.LevelVar` read on every check.
        add_source: Whether the backend emits the record's source location
            under the ``"source"`` key.
        replace_attr: Optional hook that rewrites or drops attributes,
            including the built-in ``time``, ``level`` and ``msg`` fields.

    Raises:
        TypeError: If *level* is neither an integer nor a ``LevelVar``.

    """

    level: int | LevelVar = Level.INFO
    add_source: bool = False
    replace_attr: ReplaceAttr | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if isinstance(self.level, bool) or not isinstance(self.level, int | LevelVar):
            raise TypeError(f"level must be an int or LevelVar, got {type(self.level).__name__}")
        if self.replace_attr is not None and not callable(self.replace_attr):
            raise TypeError("replace_attr must be callable")

    def min_level(self) -> Level:
        """Return the current minimum level."""
        if isinstance(self.level, LevelVar):
            return self.level.level()
        return Level(self.level)

    @classmethod
    def from_env(cls, prefix: str = "PRETTYLOG_", replace_attr: ReplaceAttr | None = None) -> HandlerOptions:
        """Build options from environment variables.

        Reads ``{prefix}LEVEL`` (a level name such as ``debug`` or
        ``INFO+2``, or an integer) and ``{prefix}ADD_SOURCE``
        (``1``/``true``/``yes``).  Unset variables keep the defaults.

        Raises:
            ValueError: If either variable holds an unrecognised value.

        """
        raw_level = os.environ.get(f"{prefix}LEVEL")
        level = parse_level(raw_level) if raw_level else Level.INFO

        raw_source = os.environ.get(f"{prefix}ADD_SOURCE", "").strip().lower()
        if raw_source not in _TRUTHY and raw_source not in _FALSY:
            raise ValueError(f"{prefix}ADD_SOURCE must be a boolean flag, got {raw_source!r}")
        add_source = raw_source in _TRUTHY

        _logger.debug("Options from environment: level=%s add_source=%s", level, add_source)
        return cls(level=level, add_source=add_source, replace_attr=replace_attr)


def apply_replace_attr(hook: ReplaceAttr | None, groups: Sequence[str], attr: Attr) -> Attr | None:
    """Run *hook* over *attr*, returning ``None`` when the attribute is dropped."""
    if hook is None:
        return attr
    result = hook(groups, attr)
    if result is None or result.is_zero():
        return None
    return result
