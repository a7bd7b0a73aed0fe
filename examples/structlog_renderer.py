"""Render structlog events in the pretty line format.

Run::

    python examples/structlog_renderer.py
"""

from __future__ import annotations

import sys

import structlog

from prettylog.processors import PrettyRenderer


def main() -> None:
    """Run the example."""
    log = structlog.wrap_logger(
        structlog.PrintLogger(file=sys.stdout),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            PrettyRenderer(),
        ],
        wrapper_class=structlog.BoundLogger,
    )
    log = log.bind(job="reindex")
    log.info("batch done", batch=3, docs=1000)
    log.error("batch failed", batch=4)


if __name__ == "__main__":
    main()
