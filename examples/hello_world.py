"""Minimal prettylog example: render a few records to standard output.

Run::

    python examples/hello_world.py
"""

from __future__ import annotations

from prettylog import Attr, HandlerOptions, Level, Record, new_handler


def main() -> None:
    """Run the example."""
    # 1. A handler on stdout that always shows the attribute tail.
    handler = new_handler(HandlerOptions(level=Level.DEBUG))

    # 2. Render records directly.
    handler.handle(Record.info("server started", port=8080))
    handler.handle(Record.debug("cache warm", entries=128))

    # 3. Derived handlers carry context and groups.
    req = handler.with_attrs([Attr("service", "api")]).with_group("request")
    req.handle(Record.warn("slow response", method="GET", ms=812))


if __name__ == "__main__":
    main()
