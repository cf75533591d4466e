"""Client factory and the operation entry points."""

from typing import Any, Optional

from opensearchpy import OpenSearch

from .connection_settings import ConnectionConfig, load_config
from .document import DeleteByQueryOperation, DeleteOperation, GetOperation, IndexOperation
from .index import RefreshOperation
from .search import SearchQueryOperation, SearchURIOperation
from .transport import OpenSearchTransport, Transport


def create_client(
    config: Optional[ConnectionConfig] = None,
    **overrides,
) -> Any:
    """Create and return an opensearch-py client.

    Args:
        config: An explicit :class:`ConnectionConfig`.  When ``None``,
            one is built via :func:`load_config` (env vars + *overrides*).
        **overrides: Passed to :func:`load_config` when *config* is ``None``.

    Returns:
        A configured ``OpenSearch`` client instance.
    """
    if config is None:
        config = load_config(**overrides)

    kwargs: dict = {
        "hosts": config.hosts,
        "use_ssl": config.use_ssl,
        "verify_certs": config.verify_certs,
        "ssl_show_warn": config.ssl_show_warn,
        "timeout": config.timeout,
        "max_retries": config.max_retries,
        "retry_on_timeout": config.retry_on_timeout,
        "http_compress": config.http_compress,
    }

    http_auth = config.http_auth
    if http_auth:
        kwargs["http_auth"] = http_auth

    if config.ca_certs:
        kwargs["ca_certs"] = config.ca_certs

    return OpenSearch(**kwargs)


class Client:
    """Entry point for building operations against one transport.

    Holds no state between operations. Each method returns a fresh
    operation builder; nothing is sent until its ``send()`` is called.

    Example:
        client = Client.from_config(host="localhost", port=9200)
        result = (client.search_query()
            .with_indexes(["notes"])
            .with_query(Query.build_match("title", "hello").build())
            .send())
        for hit in result.hits.hits:
            note = hit.source_as(Note)
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        config: Optional[ConnectionConfig] = None,
        **overrides,
    ) -> "Client":
        return cls(OpenSearchTransport(create_client(config, **overrides)))

    def index(self, index: str, doc_type: str) -> IndexOperation:
        return IndexOperation(self.transport, index, doc_type)

    def get(self, index: str, doc_id: str) -> GetOperation:
        return GetOperation(self.transport, index, doc_id)

    def delete(self, index: str, doc_type: str, doc_id: str) -> DeleteOperation:
        return DeleteOperation(self.transport, index, doc_type, doc_id)

    def delete_by_query(self) -> DeleteByQueryOperation:
        return DeleteByQueryOperation(self.transport)

    def refresh(self) -> RefreshOperation:
        return RefreshOperation(self.transport)

    def search_uri(self) -> SearchURIOperation:
        return SearchURIOperation(self.transport)

    def search_query(self) -> SearchQueryOperation:
        return SearchQueryOperation(self.transport)
