"""HTTP boundary used by the operation builders.

Operations only need ``request(method, path, body)``. The default
implementation forwards to an opensearch-py client's low-level
``transport.perform_request`` and converts its failures to
:class:`es_handler.exceptions.TransportError`. Retries, TLS and
connection handling stay with the library client.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from opensearchpy import OpenSearch
from opensearchpy import exceptions as os_exceptions

from .exceptions import TransportError

logger = logging.getLogger(__name__)

METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


class Transport(Protocol):
    def request(self, method: str, path: str, body: Optional[Any] = None) -> Any:
        """Send one request and return the decoded JSON response body."""
        ...


class OpenSearchTransport:
    """Transport backed by an ``opensearchpy.OpenSearch`` client."""

    def __init__(self, client: OpenSearch) -> None:
        self.client = client

    def request(self, method: str, path: str, body: Optional[Any] = None) -> Any:
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method!r}")

        logger.debug("%s %s", method, path)
        try:
            return self.client.transport.perform_request(method, path, body=body)
        except os_exceptions.TransportError as exc:
            # ConnectionError reports status_code as the string "N/A".
            status = exc.status_code if isinstance(exc.status_code, int) else None
            raise TransportError(
                f"{method} {path} failed: {exc}",
                status_code=status,
                error=str(exc.error),
                info=exc.info,
            ) from exc
