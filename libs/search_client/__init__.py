"""Search client facade over OpenSearch.

Primary components:
- ``base``: query contract and the ``SearchClientError`` hierarchy.
- ``opensearch``: ``OpenSearchClient``, the facade itself.
- ``bulk``: ``BulkBatch`` accumulation of pending index actions.
- ``factory``: helpers to construct a client from arguments, config or env.

Guidance:
- Construct via ``factory.create_search_client_from_config`` and pass the
  handle to whatever needs it; there is no module-level client.
"""

from .base import (
    BulkWriteError,
    ConnectError,
    DocumentDecodeError,
    NotConnectedError,
    Query,
    SearchClientError,
    SearchError,
    SerializableQuery,
    WriteError,
)
from .bulk import BulkBatch
from .opensearch import OpenSearchClient, SearchPage
from .pagination import PAGE_SIZE, page_offset

__all__ = [
    "BulkBatch",
    "BulkWriteError",
    "ConnectError",
    "DocumentDecodeError",
    "NotConnectedError",
    "OpenSearchClient",
    "PAGE_SIZE",
    "Query",
    "SearchClientError",
    "SearchError",
    "SearchPage",
    "SerializableQuery",
    "WriteError",
    "page_offset",
]
