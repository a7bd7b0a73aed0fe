# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Human-readable log lines with a compact JSON attribute tail.

Integrations live in their own modules and are imported explicitly:
``prettylog.logging_utils`` (standard library ``logging``) and
``prettylog.processors`` (structlog).
"""

import logging

from prettylog.errors import AttrsDecodeError, AttrsEncodeError, InnerHandlerError, PrettyLogError
from prettylog.json_handler import Handler, JSONHandler
from prettylog.options import HandlerOptions, ReplaceAttr
from prettylog.pretty import PrettyHandler, new_handler
from prettylog.record import (
    LEVEL_KEY,
    MESSAGE_KEY,
    SOURCE_KEY,
    TIME_KEY,
    Attr,
    Group,
    Level,
    LevelVar,
    Record,
    Source,
    parse_level,
)

__all__ = [
    # Handlers
    "PrettyHandler",
    "new_handler",
    "Handler",
    "JSONHandler",
    # Configuration
    "HandlerOptions",
    "ReplaceAttr",
    # Records
    "Attr",
    "Group",
    "Level",
    "LevelVar",
    "Record",
    "Source",
    "parse_level",
    # Built-in keys
    "LEVEL_KEY",
    "MESSAGE_KEY",
    "SOURCE_KEY",
    "TIME_KEY",
    # Errors
    "PrettyLogError",
    "InnerHandlerError",
    "AttrsDecodeError",
    "AttrsEncodeError",
]

# Attach NullHandler so library users don't get "No handler found"
# warnings for the prettylog.* loggers.
logging.getLogger("prettylog").addHandler(logging.NullHandler())
