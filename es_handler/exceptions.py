"""Exception hierarchy for the handler.

Callers can catch :class:`EsError` for everything, or one of the
subclasses to tell transport, codec and decode failures apart.
"""

from __future__ import annotations

from typing import Any, Optional


class EsError(Exception):
    """Base class for all handler exceptions."""


class TransportError(EsError):
    """Raised when the HTTP round trip fails (connection or non-2xx status)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
        info: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.info = info


class CodecError(EsError):
    """Raised when JSON does not have the shape the codec expects."""


class DocumentDecodeError(EsError):
    """Raised when a hit's source document does not fit the requested type."""


class BuilderReuseError(EsError):
    """Raised when a builder is finalized, or an operation sent, twice."""
