# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised while rendering a log record.

Every failure is local to a single ``handle()`` call; the handler that
raised stays usable for subsequent records.  The underlying cause is always
chained via ``__cause__``.
"""

from __future__ import annotations

__all__ = [
    "AttrsDecodeError",
    "AttrsEncodeError",
    "InnerHandlerError",
    "PrettyLogError",
]


class PrettyLogError(Exception):
    """Base class for rendering failures."""


class InnerHandlerError(PrettyLogError):
    """The backend handler failed to serialize the record's attributes."""

    def __init__(self, cause: BaseException) -> None:
        """Initialize with the exception raised by the backend."""
        super().__init__(f"inner handling failed: {cause}")


class AttrsDecodeError(PrettyLogError):
    """The backend's serialized attributes could not be decoded."""

    def __init__(self, cause: BaseException | str) -> None:
        """Initialize with the decode error or a description of it."""
        super().__init__(f"decoding attrs failed: {cause}")


class AttrsEncodeError(PrettyLogError):
    """The decoded attributes could not be re-encoded as compact JSON."""

    def __init__(self, cause: BaseException) -> None:
        """Initialize with the encoder error."""
        super().__init__(f"marshaling attrs failed: {cause}")
