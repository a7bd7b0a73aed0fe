"""Use prettylog as a handler for the standard ``logging`` module.

Run::

    python examples/stdlib_logging.py
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from prettylog import Attr, HandlerOptions, PrettyHandler
from prettylog.logging_utils import PrettyLoggingHandler


def redact(groups: Sequence[str], attr: Attr) -> Attr | None:
    """Hide passwords and drop the logger name."""
    if attr.key == "password":
        return Attr(attr.key, "***")
    if attr.key == "logger":
        return None
    return attr


def main() -> None:
    """Run the example."""
    pretty = PrettyHandler(HandlerOptions(replace_attr=redact), writer=sys.stdout.buffer)
    log = logging.getLogger("examples.stdlib")
    log.setLevel(logging.INFO)
    log.propagate = False
    handler = PrettyLoggingHandler(pretty)
    log.addHandler(handler)
    try:
        log.info("user login", extra={"user": "ann", "password": "hunter2"})
        log.warning("quota at %d%%", 91)
    finally:
        log.removeHandler(handler)


if __name__ == "__main__":
    main()
