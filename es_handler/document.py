"""Document operations: index, get, delete and delete-by-query."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel

from .codec import decode_response, format_indexes_and_types, format_query_string, join_path
from .common import Operation, QuerySource, option
from .exceptions import TransportError
from .query import Query
from .results import DeleteByQueryResult, DeleteResult, GetResult, IndexResult
from .transport import Transport

logger = logging.getLogger(__name__)

Document = Union[dict[str, Any], BaseModel]


class IndexOperation(Operation[IndexResult]):
    """Index (insert or replace) a single document.

    With an id the request is ``PUT /<index>/<type>/<id>``; without one the
    engine assigns it via ``POST /<index>/<type>``.
    """

    def __init__(self, transport: Transport, index: str, doc_type: str) -> None:
        super().__init__(transport)
        self.index = index
        self.doc_type = doc_type
        self._id: Optional[str] = None
        self._document: Optional[dict[str, Any]] = None

    def with_id(self, doc_id: str) -> "IndexOperation":
        self._id = doc_id
        return self

    def with_doc(self, doc: Document) -> "IndexOperation":
        """Set the document body. Pydantic models are dumped in JSON mode."""
        if isinstance(doc, BaseModel):
            doc = doc.model_dump(mode="json")
        self._document = doc
        return self

    with_ttl = option("ttl")
    with_routing = option("routing")
    with_parent = option("parent")
    with_timestamp = option("timestamp")
    with_version = option("version")
    with_version_type = option("version_type")
    with_op_type = option("op_type")
    with_consistency = option("consistency")
    with_refresh = option("refresh")
    with_timeout = option("timeout")

    def _request(self) -> tuple[str, str, Optional[Any]]:
        body = self._document if self._document is not None else {}
        qs = format_query_string(self._options.items())
        if self._id is None:
            return "POST", join_path(self.index, self.doc_type) + qs, body
        return "PUT", join_path(self.index, self.doc_type, self._id) + qs, body

    def _decode(self, response: Any) -> IndexResult:
        return decode_response(IndexResult, response)


class GetOperation(Operation[GetResult]):
    """Retrieve a document by id.

    Without :meth:`with_doc_type` the type segment is ``_all``. A missing
    document is not an error: the result has ``found=False``.
    """

    def __init__(self, transport: Transport, index: str, doc_id: str) -> None:
        super().__init__(transport)
        self.index = index
        self.doc_id = doc_id
        self._doc_type: Optional[str] = None

    def with_doc_type(self, doc_type: str) -> "GetOperation":
        self._doc_type = doc_type
        return self

    def with_fields(self, fields: Sequence[str]) -> "GetOperation":
        return self._option("fields", list(fields))

    with_routing = option("routing")
    with_preference = option("preference")
    with_realtime = option("realtime")
    with_refresh = option("refresh")
    with_source = option("_source")

    def _request(self) -> tuple[str, str, Optional[Any]]:
        doc_type = self._doc_type if self._doc_type is not None else "_all"
        path = join_path(self.index, doc_type, self.doc_id)
        return "GET", path + format_query_string(self._options.items()), None

    def _decode(self, response: Any) -> GetResult:
        return decode_response(GetResult, response)

    def _on_transport_error(self, exc: TransportError) -> GetResult:
        # The engine answers a missing document with 404 and a normal body.
        if exc.status_code == 404 and isinstance(exc.info, dict) and "found" in exc.info:
            return self._decode(exc.info)
        raise exc


class DeleteOperation(Operation[DeleteResult]):
    """Delete a document by index, type and id."""

    def __init__(
        self,
        transport: Transport,
        index: str,
        doc_type: str,
        doc_id: str,
    ) -> None:
        super().__init__(transport)
        self.index = index
        self.doc_type = doc_type
        self.doc_id = doc_id

    with_version = option("version")
    with_routing = option("routing")
    with_parent = option("parent")
    with_consistency = option("consistency")
    with_refresh = option("refresh")
    with_timeout = option("timeout")

    def _request(self) -> tuple[str, str, Optional[Any]]:
        path = join_path(self.index, self.doc_type, self.doc_id)
        return "DELETE", path + format_query_string(self._options.items()), None

    def _decode(self, response: Any) -> DeleteResult:
        return decode_response(DeleteResult, response)


class DeleteByQueryOperation(Operation[Optional[DeleteByQueryResult]]):
    """Delete every document matching a query.

    The query is either a query string (sent as ``q=``) or a DSL
    :class:`Query` (sent as ``{"query": ...}``). Whichever is set last is
    used. ``send()`` returns ``None`` when the engine answers 404.
    """

    def __init__(self, transport: Transport) -> None:
        super().__init__(transport)
        self._indexes: tuple[str, ...] = ()
        self._doc_types: tuple[str, ...] = ()
        self._source = QuerySource()

    def with_indexes(self, indexes: Sequence[str]) -> "DeleteByQueryOperation":
        self._indexes = tuple(indexes)
        return self

    def with_doc_types(self, doc_types: Sequence[str]) -> "DeleteByQueryOperation":
        self._doc_types = tuple(doc_types)
        return self

    def with_query_string(self, query_string: str) -> "DeleteByQueryOperation":
        self._source.set_string(query_string)
        return self

    def with_query(self, query: Query) -> "DeleteByQueryOperation":
        self._source.set_query(query)
        return self

    with_df = option("df")
    with_analyzer = option("analyzer")
    with_default_operator = option("default_operator")
    with_routing = option("routing")
    with_consistency = option("consistency")
    with_timeout = option("timeout")

    def _request(self) -> tuple[str, str, Optional[Any]]:
        params = self._options.items()
        if self._source.query_string is not None:
            params.append(("q", self._source.query_string))
        path = "/{}/_query{}".format(
            format_indexes_and_types(self._indexes, self._doc_types),
            format_query_string(params),
        )
        return "DELETE", path, self._source.body()

    def _decode(self, response: Any) -> Optional[DeleteByQueryResult]:
        return decode_response(DeleteByQueryResult, response)

    def _on_transport_error(self, exc: TransportError) -> Optional[DeleteByQueryResult]:
        if exc.status_code == 404:
            logger.info("Delete by query: nothing to delete (404)")
            return None
        raise exc
