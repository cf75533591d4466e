"""Typed response envelopes.

Metadata is validated eagerly when a response is decoded. A hit's
``_source`` is kept as the untouched structured value: documents in one
index may have different shapes, so typed decoding is an explicit,
per-hit call (:meth:`SearchHit.source_as`).
"""

from __future__ import annotations

import json
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .exceptions import DocumentDecodeError

T = TypeVar("T")


class _Envelope(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class _HasSource(_Envelope):
    # The model is frozen but `source` is the decoded JSON object as-is;
    # mutating it in place changes what later `source_as` calls see.
    source: Optional[dict[str, Any]] = Field(default=None, alias="_source")

    def source_as(self, target: type[T]) -> T:
        """Decode the source document into *target*.

        *target* is anything pydantic can validate: a ``BaseModel``
        subclass, a dataclass, a ``TypedDict``, ``dict[str, int]``...
        Validation is strict: a string where the target wants a number is
        a mismatch, never a conversion. Raises :class:`DocumentDecodeError`
        if the document does not fit, or if the source was not returned.
        The result is built from a fresh parse, so the hit is left unchanged
        and this can be called again with another target.
        """
        if self.source is None:
            raise DocumentDecodeError("No source field")
        try:
            return TypeAdapter(target).validate_json(json.dumps(self.source), strict=True)
        except ValidationError as exc:
            raise DocumentDecodeError(
                f"Source does not match {getattr(target, '__name__', target)!s}: {exc}"
            ) from exc


class ShardCountResult(_Envelope):
    total: int
    successful: int
    failed: int


class SearchHit(_HasSource):
    """One matched document. ``doc_type`` is the wire key ``_type``."""

    index: str = Field(alias="_index")
    doc_type: Optional[str] = Field(default=None, alias="_type")
    id: str = Field(alias="_id")
    score: Optional[float] = Field(default=None, alias="_score")
    fields: Optional[dict[str, Any]] = None


class SearchHits(_Envelope):
    total: int
    max_score: Optional[float] = None
    hits: list[SearchHit]

    @field_validator("total", mode="before")
    @classmethod
    def _total_value(cls, value: Any) -> Any:
        # 7.x and later report {"value": n, "relation": "eq"}.
        if isinstance(value, dict) and "value" in value:
            return value["value"]
        return value


class SearchResult(_Envelope):
    took: Optional[int] = None
    timed_out: Optional[bool] = None
    shards: ShardCountResult = Field(alias="_shards")
    hits: SearchHits


class IndexResult(_Envelope):
    index: str = Field(alias="_index")
    doc_type: Optional[str] = Field(default=None, alias="_type")
    id: str = Field(alias="_id")
    version: Optional[int] = Field(default=None, alias="_version")
    created: Optional[bool] = None
    result: Optional[str] = None


class GetResult(_HasSource):
    index: str = Field(alias="_index")
    doc_type: Optional[str] = Field(default=None, alias="_type")
    id: str = Field(alias="_id")
    version: Optional[int] = Field(default=None, alias="_version")
    found: bool
    fields: Optional[dict[str, Any]] = None


class DeleteResult(_Envelope):
    index: str = Field(alias="_index")
    doc_type: Optional[str] = Field(default=None, alias="_type")
    id: str = Field(alias="_id")
    version: Optional[int] = Field(default=None, alias="_version")
    found: Optional[bool] = None
    result: Optional[str] = None


class DeleteByQueryIndexResult(_Envelope):
    shards: ShardCountResult = Field(alias="_shards")

    def successful(self) -> bool:
        return self.shards.failed == 0


class DeleteByQueryResult(_Envelope):
    indices: dict[str, DeleteByQueryIndexResult] = Field(alias="_indices")

    def successful(self) -> bool:
        """True when no shard of any index reported a failure."""
        return all(index.successful() for index in self.indices.values())


class RefreshResult(_Envelope):
    shards: ShardCountResult = Field(alias="_shards")
