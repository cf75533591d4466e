"""JSON codec: clauses, request paths and response envelopes."""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence, TypeVar
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ValidationError

from .exceptions import CodecError
from .filters import Filter
from .query import Query

M = TypeVar("M", bound=BaseModel)


def dumps(value: Any) -> str:
    """Serialize a clause (or any JSON-ready value) to compact JSON text.

    Key order follows insertion order, so the same clause always gives the
    same bytes.
    """
    if isinstance(value, (Query, Filter)):
        value = value.to_dict()
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CodecError(f"Invalid JSON: {exc}") from exc


def encode_query(query: Query) -> dict[str, Any]:
    return query.to_dict()


def decode_query(data: Any) -> Query:
    """Rebuild a :class:`Query` from its dict form (or JSON text)."""
    if isinstance(data, str):
        data = loads(data)
    return Query.from_dict(data)


def encode_filter(flt: Filter) -> dict[str, Any]:
    return flt.to_dict()


def decode_filter(data: Any) -> Filter:
    """Rebuild a :class:`Filter` from its dict form (or JSON text)."""
    if isinstance(data, str):
        data = loads(data)
    return Filter.from_dict(data)


def decode_response(model: type[M], data: Any) -> M:
    """Validate a response body into *model*.

    Any structural mismatch (missing key, wrong JSON type) is reported as
    :class:`CodecError` with pydantic's error as the cause.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise CodecError(
            f"Unexpected {model.__name__} shape: {exc.error_count()} error(s)\n{exc}"
        ) from exc


# ============================================================================
# Request path helpers
# ============================================================================


def format_indexes_and_types(
    indexes: Sequence[str],
    doc_types: Sequence[str] = (),
) -> str:
    """Render the ``<indexes>[/<types>]`` path segment.

    No indexes means ``_all``. Names are joined by commas.
    """
    path = ",".join(quote(i, safe="*") for i in indexes) if indexes else "_all"
    if doc_types:
        path = f"{path}/{','.join(quote(t, safe='*') for t in doc_types)}"
    return path


def format_query_string(options: Sequence[tuple[str, str]]) -> str:
    """Render ``?k=v&k2=v2`` from ordered pairs, or ``""`` when empty."""
    if not options:
        return ""
    return "?" + urlencode(list(options))


def join_path(*segments: Optional[str]) -> str:
    """Join path segments with ``/``, skipping ``None`` and URL-quoting each."""
    return "/" + "/".join(quote(s, safe="") for s in segments if s is not None)
