"""Query contract and exception taxonomy for the search client.

Queries are opaque to the facade: anything that can serialize itself to the
query DSL (``to_dict()``, as ``opensearchpy.helpers.query.Q`` objects do) or
a mapping already in DSL form is accepted and forwarded unchanged.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class SerializableQuery(Protocol):
    """A filter expression that knows how to render itself as query DSL."""

    def to_dict(self) -> Dict[str, Any]:
        ...


Query = Union[SerializableQuery, Mapping[str, Any]]

MATCH_ALL: Dict[str, Any] = {"match_all": {}}


def query_to_dict(query: Optional[Query]) -> Dict[str, Any]:
    """Render a caller-supplied query as a query-DSL dict.

    ``None`` selects every document.
    """
    if query is None:
        return dict(MATCH_ALL)
    if isinstance(query, SerializableQuery):
        return query.to_dict()
    if isinstance(query, Mapping):
        return dict(query)
    raise TypeError(
        f"Unsupported query type {type(query).__name__}; "
        "expected a mapping or an object with to_dict()"
    )


class SearchClientError(Exception):
    """Base exception for search client operations."""
    pass


class NotConnectedError(SearchClientError):
    """An operation was attempted before ``connect()`` succeeded."""
    pass


class ConnectError(SearchClientError):
    """Connection setup or index bootstrap failed."""
    pass


class SearchError(SearchClientError):
    """Query execution failed."""
    pass


class DocumentDecodeError(SearchError):
    """A hit's source payload could not be decoded into a document."""

    def __init__(self, message: str, hit_id: Optional[str] = None):
        super().__init__(message)
        self.hit_id = hit_id


class WriteError(SearchClientError):
    """Index, delete, flush or bulk submission failed."""
    pass


class BulkWriteError(WriteError):
    """A bulk request was accepted but some of its items failed."""

    def __init__(self, message: str, failed_items: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.failed_items = failed_items or []
