"""Search operations: URI search (query string) and DSL body search."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence, Union

from .clause import of_family
from .codec import decode_response, format_indexes_and_types, format_query_string
from .common import Operation, option
from .query import Query
from .results import SearchResult
from .transport import Transport


class SearchType(str, Enum):
    DFS_QUERY_THEN_FETCH = "dfs_query_then_fetch"
    DFS_QUERY_AND_FETCH = "dfs_query_and_fetch"
    QUERY_THEN_FETCH = "query_then_fetch"
    QUERY_AND_FETCH = "query_and_fetch"


def _search_path(indexes: Sequence[str], doc_types: Sequence[str]) -> str:
    return f"/{format_indexes_and_types(indexes, doc_types)}/_search"


class SearchURIOperation(Operation[SearchResult]):
    """Search with a Lucene query string passed as ``q=``."""

    def __init__(self, transport: Transport) -> None:
        super().__init__(transport)
        self._indexes: tuple[str, ...] = ()
        self._doc_types: tuple[str, ...] = ()

    def with_indexes(self, indexes: Sequence[str]) -> "SearchURIOperation":
        self._indexes = tuple(indexes)
        return self

    def with_types(self, doc_types: Sequence[str]) -> "SearchURIOperation":
        self._doc_types = tuple(doc_types)
        return self

    def with_query(self, query_string: str) -> "SearchURIOperation":
        return self._option("q", query_string)

    def with_fields(self, fields: Sequence[str]) -> "SearchURIOperation":
        return self._option("fields", list(fields))

    def with_search_type(self, search_type: Union[SearchType, str]) -> "SearchURIOperation":
        return self._option("search_type", SearchType(search_type).value)

    with_df = option("df")
    with_analyzer = option("analyzer")
    with_lowercase_expanded_terms = option("lowercase_expanded_terms")
    with_analyze_wildcard = option("analyze_wildcard")
    with_default_operator = option("default_operator")
    with_lenient = option("lenient")
    with_explain = option("explain")
    with_source = option("_source")
    with_sort = option("sort")
    with_routing = option("routing")
    with_track_scores = option("track_scores")
    with_timeout = option("timeout")
    with_terminate_after = option("terminate_after")
    with_from = option("from")
    with_size = option("size")

    def _request(self) -> tuple[str, str, Optional[Any]]:
        path = _search_path(self._indexes, self._doc_types)
        return "GET", path + format_query_string(self._options.items()), None

    def _decode(self, response: Any) -> SearchResult:
        return decode_response(SearchResult, response)


class SearchQueryOperation(Operation[SearchResult]):
    """Search with a DSL :class:`Query` sent in the request body.

    The body always carries ``from`` and ``size`` (defaults 0 and 10);
    everything else is omitted unless set.
    """

    def __init__(self, transport: Transport) -> None:
        super().__init__(transport)
        self._indexes: tuple[str, ...] = ()
        self._doc_types: tuple[str, ...] = ()
        self._query: Optional[Query] = None
        self._from = 0
        self._size = 10
        self._timeout: Optional[str] = None
        self._terminate_after: Optional[int] = None
        self._stats: Optional[list[str]] = None
        self._min_score: Optional[float] = None

    def with_indexes(self, indexes: Sequence[str]) -> "SearchQueryOperation":
        self._indexes = tuple(indexes)
        return self

    def with_types(self, doc_types: Sequence[str]) -> "SearchQueryOperation":
        self._doc_types = tuple(doc_types)
        return self

    def with_query(self, query: Query) -> "SearchQueryOperation":
        self._query = of_family(Query, query, "search.query")
        return self

    def with_timeout(self, timeout: str) -> "SearchQueryOperation":
        self._timeout = timeout
        return self

    def with_from(self, from_: int) -> "SearchQueryOperation":
        self._from = from_
        return self

    def with_size(self, size: int) -> "SearchQueryOperation":
        self._size = size
        return self

    def with_terminate_after(self, terminate_after: int) -> "SearchQueryOperation":
        self._terminate_after = terminate_after
        return self

    def with_stats(self, stats: Sequence[Any]) -> "SearchQueryOperation":
        self._stats = [str(s) for s in stats]
        return self

    def with_min_score(self, min_score: float) -> "SearchQueryOperation":
        self._min_score = min_score
        return self

    def with_search_type(self, search_type: Union[SearchType, str]) -> "SearchQueryOperation":
        return self._option("search_type", SearchType(search_type).value)

    with_routing = option("routing")
    with_query_cache = option("query_cache")

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"from": self._from, "size": self._size}
        if self._query is not None:
            body["query"] = self._query.to_dict()
        if self._timeout is not None:
            body["timeout"] = self._timeout
        if self._terminate_after is not None:
            body["terminate_after"] = self._terminate_after
        if self._stats is not None:
            body["stats"] = self._stats
        if self._min_score is not None:
            body["min_score"] = self._min_score
        return body

    def _request(self) -> tuple[str, str, Optional[Any]]:
        path = _search_path(self._indexes, self._doc_types)
        return "POST", path + format_query_string(self._options.items()), self.body()

    def _decode(self, response: Any) -> SearchResult:
        return decode_response(SearchResult, response)
