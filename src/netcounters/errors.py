"""Exceptions raised by the sampler.

Every failure carries an :class:`ErrorKind` so callers can decide whether a
condition is fatal for them or something to degrade around.
"""

from __future__ import annotations

import enum
from pathlib import Path


class ErrorKind(enum.Enum):
    """Category of a sampler failure."""

    INTERFACE_NOT_FOUND = "interface_not_found"
    COUNTER_UNAVAILABLE = "counter_unavailable"
    READ_FAILED = "read_failed"
    PARSE_FAILED = "parse_failed"
    CLOSED = "closed"


class SamplerError(Exception):
    """Base class for all sampler failures."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        interface: str,
        counter: str | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.interface = interface
        self.counter = counter
        self.path = path


class InterfaceNotFoundError(SamplerError):
    """The interface directory is missing or cannot be opened."""

    kind = ErrorKind.INTERFACE_NOT_FOUND


class CounterUnavailableError(SamplerError):
    """A counter file could not be opened at selection time."""

    kind = ErrorKind.COUNTER_UNAVAILABLE


class CounterReadError(SamplerError):
    """Seeking or reading an open counter file failed."""

    kind = ErrorKind.READ_FAILED


class CounterParseError(SamplerError):
    """A counter file held something other than a decimal integer."""

    kind = ErrorKind.PARSE_FAILED


class SamplerClosedError(SamplerError):
    """The sampler has already released its handles."""

    kind = ErrorKind.CLOSED
