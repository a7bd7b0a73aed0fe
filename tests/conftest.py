"""Shared test fixtures for prettylog tests."""

from __future__ import annotations

import io
from datetime import UTC, datetime

import pytest

from prettylog import Level, Record

FIXED_TIME = datetime(2024, 1, 15, 10, 30, 45, 123456, tzinfo=UTC)
"""Timestamp used by records whose rendered time is asserted exactly."""


def make_record(message: str = "msg", level: int = Level.INFO, **attrs: object) -> Record:
    """Build a record at ``FIXED_TIME`` with keyword attrs in call order."""
    return Record.new(level, message, time=FIXED_TIME, **attrs)


@pytest.fixture
def sink() -> io.BytesIO:
    """In-memory binary sink."""
    return io.BytesIO()


def lines(sink: io.BytesIO) -> list[str]:
    """Decode everything written to *sink* into lines (newlines kept)."""
    return sink.getvalue().decode("utf-8").splitlines(keepends=True)
