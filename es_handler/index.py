"""Index-level operations."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .codec import decode_response, format_indexes_and_types
from .common import Operation
from .results import RefreshResult
from .transport import Transport


class RefreshOperation(Operation[RefreshResult]):
    """Refresh one or more indexes (all of them when none are given)."""

    def __init__(self, transport: Transport) -> None:
        super().__init__(transport)
        self._indexes: tuple[str, ...] = ()

    def with_indexes(self, indexes: Sequence[str]) -> "RefreshOperation":
        self._indexes = tuple(indexes)
        return self

    def _request(self) -> tuple[str, str, Optional[Any]]:
        return "POST", f"/{format_indexes_and_types(self._indexes)}/_refresh", None

    def _decode(self, response: Any) -> RefreshResult:
        return decode_response(RefreshResult, response)
