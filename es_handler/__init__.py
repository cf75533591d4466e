"""Typed Query DSL and operation builders for an Elasticsearch-style engine."""

from .client import Client, create_client
from .codec import decode_filter, decode_query, dumps, encode_filter, encode_query
from .connection_settings import ConnectionConfig, load_config
from .document import DeleteByQueryOperation, DeleteOperation, GetOperation, IndexOperation
from .exceptions import BuilderReuseError, CodecError, DocumentDecodeError, EsError, TransportError
from .filters import (
    BoolFilter,
    ExistsFilter,
    Filter,
    MatchAllFilter,
    MissingFilter,
    NotFilter,
    RangeFilter,
    TermFilter,
    TermsFilter,
)
from .index import RefreshOperation
from .query import (
    BoolQuery,
    ConstantScoreQuery,
    FilteredQuery,
    MatchAllQuery,
    MatchQuery,
    MultiMatchQuery,
    Query,
    QueryStringQuery,
    RangeQuery,
    TermQuery,
    TermsQuery,
)
from .results import (
    DeleteByQueryResult,
    DeleteResult,
    GetResult,
    IndexResult,
    RefreshResult,
    SearchHit,
    SearchHits,
    SearchResult,
    ShardCountResult,
)
from .search import SearchQueryOperation, SearchType, SearchURIOperation
from .transport import OpenSearchTransport, Transport

__all__ = [
    # client
    "Client",
    "create_client",
    # config
    "ConnectionConfig",
    "load_config",
    # transport
    "Transport",
    "OpenSearchTransport",
    # errors
    "EsError",
    "TransportError",
    "CodecError",
    "DocumentDecodeError",
    "BuilderReuseError",
    # query
    "Query",
    "MatchAllQuery",
    "MatchQuery",
    "MultiMatchQuery",
    "QueryStringQuery",
    "TermQuery",
    "TermsQuery",
    "RangeQuery",
    "BoolQuery",
    "FilteredQuery",
    "ConstantScoreQuery",
    # filter
    "Filter",
    "MatchAllFilter",
    "TermFilter",
    "TermsFilter",
    "RangeFilter",
    "ExistsFilter",
    "MissingFilter",
    "BoolFilter",
    "NotFilter",
    # codec
    "dumps",
    "encode_query",
    "decode_query",
    "encode_filter",
    "decode_filter",
    # results
    "ShardCountResult",
    "SearchHit",
    "SearchHits",
    "SearchResult",
    "IndexResult",
    "GetResult",
    "DeleteResult",
    "DeleteByQueryResult",
    "RefreshResult",
    # operations
    "IndexOperation",
    "GetOperation",
    "DeleteOperation",
    "DeleteByQueryOperation",
    "RefreshOperation",
    "SearchURIOperation",
    "SearchQueryOperation",
    "SearchType",
]
