"""OpenSearch client facade.

Wraps a single ``opensearchpy.OpenSearch`` handle bound to one logical index
and exposes index / search / delete / bulk operations that forward to the
client and unwrap its response shapes. Retries and dead-connection handling
are left entirely to the opensearch-py transport.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type, Union

import structlog
from opensearchpy import OpenSearch, exceptions
from pydantic import BaseModel, ValidationError

from libs.common.logging import log_performance
from .base import (
    BulkWriteError,
    ConnectError,
    DocumentDecodeError,
    NotConnectedError,
    Query,
    SearchError,
    WriteError,
    query_to_dict,
)
from .bulk import BulkBatch
from .pagination import PAGE_SIZE, page_offset

logger = structlog.get_logger("search_client.opensearch")

Document = Union[Mapping[str, Any], BaseModel]


@dataclass
class SearchPage:
    """One page of decoded hits plus the engine's total match count.

    Unpacks as ``documents, total_hits``.
    """

    documents: List[Any] = field(default_factory=list)
    total_hits: int = 0
    took_ms: int = 0

    def __iter__(self) -> Iterator[Any]:
        yield self.documents
        yield self.total_hits


class OpenSearchClient:
    """Search client facade over a single OpenSearch index."""

    def __init__(
        self,
        endpoint: str,
        index_name: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        verify_certs: bool = False,
        timeout: int = 30,
        max_retries: int = 5,
        health_check_interval: float = 10.0,
        type_field: str = "doc_type",
        strict_index_ack: bool = False,
    ):
        """Store connection settings; no I/O happens until ``connect()``.

        Args:
            endpoint: OpenSearch URL, e.g. ``http://localhost:9200``
            index_name: Logical index every operation is scoped to
            username: Optional basic-auth username
            password: Optional basic-auth password
            verify_certs: Whether to verify SSL certificates
            timeout: Per-request timeout in seconds
            max_retries: Transport-level retries for transient failures
            health_check_interval: Seconds before a dead connection is retried
            type_field: Keyword field holding each document's type
            strict_index_ack: Treat an unacknowledged index creation as an error
        """
        self.endpoint = endpoint
        self.index_name = index_name
        self.username = username
        self.password = password
        self.verify_certs = verify_certs
        self.timeout = timeout
        self.max_retries = max_retries
        self.health_check_interval = health_check_interval
        self.type_field = type_field
        self.strict_index_ack = strict_index_ack

        self._client: Optional[OpenSearch] = None

    def __repr__(self) -> str:
        return (
            f"OpenSearchClient(endpoint={self.endpoint!r}, "
            f"index_name={self.index_name!r}, connected={self.connected})"
        )

    def __enter__(self) -> "OpenSearchClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _build_client(self) -> OpenSearch:
        return OpenSearch(
            hosts=[self.endpoint],
            http_auth=(self.username, self.password) if self.username and self.password else None,
            use_ssl=self.endpoint.startswith("https"),
            verify_certs=self.verify_certs,
            ssl_assert_hostname=False,
            ssl_show_warn=False,
            timeout=self.timeout,
            sniff_on_start=False,
            sniff_on_connection_fail=False,
            sniffer_timeout=None,
            dead_timeout=self.health_check_interval,
            max_retries=self.max_retries,
            retry_on_timeout=True,
        )

    def _index_body(self) -> Dict[str, Any]:
        return {"mappings": {"properties": {self.type_field: {"type": "keyword"}}}}

    def connect(self) -> None:
        """Open the connection and make sure the index exists.

        Raises ``ConnectError`` if the client cannot be built, the existence
        check fails, or the index cannot be created.
        """
        try:
            client = self._build_client()
        except (exceptions.OpenSearchException, ValueError) as e:
            logger.error("Failed to create OpenSearch client", endpoint=self.endpoint, error=str(e))
            raise ConnectError(f"Cannot connect to {self.endpoint}: {e}") from e

        try:
            self._ensure_index(client)
        except ConnectError:
            client.close()
            raise

        if self._client is not None:
            self._client.close()
        self._client = client
        logger.info("OpenSearch client connected", endpoint=self.endpoint, index_name=self.index_name)

    def _ensure_index(self, client: OpenSearch) -> None:
        try:
            if client.indices.exists(index=self.index_name):
                logger.debug("Index already exists", index_name=self.index_name)
                return
        except exceptions.OpenSearchException as e:
            logger.error("Index existence check failed", index_name=self.index_name, error=str(e))
            raise ConnectError(f"Cannot check index {self.index_name}: {e}") from e

        try:
            response = client.indices.create(index=self.index_name, body=self._index_body())
        except exceptions.RequestError as e:
            if e.error == "resource_already_exists_exception":
                logger.info("Index created concurrently", index_name=self.index_name)
                return
            logger.error("Failed to create index", index_name=self.index_name, error=str(e))
            raise ConnectError(f"Cannot create index {self.index_name}: {e}") from e
        except exceptions.OpenSearchException as e:
            logger.error("Failed to create index", index_name=self.index_name, error=str(e))
            raise ConnectError(f"Cannot create index {self.index_name}: {e}") from e

        if not response.get("acknowledged", False):
            if self.strict_index_ack:
                logger.error("Index creation not acknowledged", index_name=self.index_name)
                raise ConnectError(f"Creation of index {self.index_name} was not acknowledged")
            logger.warning("Index creation not acknowledged", index_name=self.index_name)
            return

        logger.info("OpenSearch index created", index_name=self.index_name)

    def close(self) -> None:
        """Close transport connections and return to the unconnected state."""
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()
        logger.info("OpenSearch client connection closed", index_name=self.index_name)

    def _require_client(self) -> OpenSearch:
        if self._client is None:
            raise NotConnectedError("connect() must succeed before issuing requests")
        return self._client

    def health_check(self) -> bool:
        """Check whether the cluster answers a ping."""
        if self._client is None:
            return False
        try:
            return bool(self._client.ping())
        except exceptions.OpenSearchException as e:
            logger.warning("OpenSearch health check failed", error=str(e))
            return False

    # Documents are tagged with their type so one index can hold several.
    def _scoped_query(self, document_type: str, query: Optional[Query]) -> Dict[str, Any]:
        return {
            "bool": {
                "must": [query_to_dict(query)],
                "filter": [{"term": {self.type_field: document_type}}],
            }
        }

    def _tagged(self, document_type: str, document: Document) -> Dict[str, Any]:
        if isinstance(document, BaseModel):
            body = document.model_dump(mode="json")
        else:
            body = dict(document)
        body[self.type_field] = document_type
        return body

    def _decode_hit(self, hit: Mapping[str, Any], document_class: Optional[Type[BaseModel]]) -> Any:
        source = hit.get("_source")
        if not isinstance(source, dict):
            raise DocumentDecodeError(
                f"Hit {hit.get('_id')} has no decodable source", hit_id=hit.get("_id")
            )

        document = dict(source)
        document.pop(self.type_field, None)

        if document_class is None:
            return document
        try:
            return document_class.model_validate(document)
        except ValidationError as e:
            raise DocumentDecodeError(
                f"Hit {hit.get('_id')} does not match {document_class.__name__}: {e}",
                hit_id=hit.get("_id"),
            ) from e

    @staticmethod
    def _total_hits(hits: Mapping[str, Any]) -> int:
        total = hits.get("total", 0)
        if isinstance(total, Mapping):
            return int(total.get("value", 0))
        return int(total or 0)

    def search(
        self,
        query: Optional[Query],
        document_type: str,
        page_number: Optional[int] = None,
        document_class: Optional[Type[BaseModel]] = None,
    ) -> SearchPage:
        """Run one page of ``query`` against documents of ``document_type``.

        Pages hold ``PAGE_SIZE`` hits; ``page_number`` is 1-based and values
        at or below 1 return the first page. Each hit's source is decoded
        into a dict, or into ``document_class`` when one is given. A single
        undecodable hit fails the whole call with ``DocumentDecodeError``.
        """
        client = self._require_client()
        body = {
            "query": self._scoped_query(document_type, query),
            "from": page_offset(page_number),
            "size": PAGE_SIZE,
            "track_total_hits": True,
        }

        try:
            response = client.search(index=self.index_name, body=body)
        except exceptions.OpenSearchException as e:
            logger.error(
                "OpenSearch search failed",
                index_name=self.index_name,
                document_type=document_type,
                error=str(e),
            )
            raise SearchError(f"Search on {self.index_name} failed: {e}") from e

        took_ms = int(response.get("took", 0))
        log_performance(
            "search",
            took_ms,
            index_name=self.index_name,
            document_type=document_type,
            page_number=page_number,
        )

        hits = response.get("hits") or {}
        try:
            documents = [self._decode_hit(hit, document_class) for hit in hits.get("hits", [])]
        except DocumentDecodeError as e:
            logger.error("Failed to decode search hit", index_name=self.index_name, hit_id=e.hit_id, error=str(e))
            raise

        return SearchPage(documents=documents, total_hits=self._total_hits(hits), took_ms=took_ms)

    def flush(self) -> None:
        """Make recent writes visible to subsequent searches."""
        client = self._require_client()
        try:
            client.indices.refresh(index=self.index_name)
        except exceptions.OpenSearchException as e:
            logger.error("Failed to flush index", index_name=self.index_name, error=str(e))
            raise WriteError(f"Flush of {self.index_name} failed: {e}") from e

    def insert(self, document_type: str, document: Document) -> None:
        """Index one document, then flush so it is immediately searchable."""
        client = self._require_client()
        try:
            client.index(index=self.index_name, body=self._tagged(document_type, document))
        except exceptions.OpenSearchException as e:
            logger.error(
                "Failed to index document",
                index_name=self.index_name,
                document_type=document_type,
                error=str(e),
            )
            raise WriteError(f"Indexing into {self.index_name} failed: {e}") from e

        self.flush()
        logger.debug("Document indexed", index_name=self.index_name, document_type=document_type)

    def delete(self, document_type: str, query: Optional[Query]) -> None:
        """Delete every document of ``document_type`` matching ``query``, then flush."""
        client = self._require_client()
        try:
            response = client.delete_by_query(
                index=self.index_name,
                body={"query": self._scoped_query(document_type, query)},
            )
        except exceptions.OpenSearchException as e:
            logger.error(
                "Delete by query failed",
                index_name=self.index_name,
                document_type=document_type,
                error=str(e),
            )
            raise WriteError(f"Delete by query on {self.index_name} failed: {e}") from e

        self.flush()
        logger.info(
            "Documents deleted",
            index_name=self.index_name,
            document_type=document_type,
            deleted=response.get("deleted"),
        )

    def delete_index(self, ignore_missing: bool = True) -> None:
        """Remove the whole index.

        A missing index is logged and ignored unless ``ignore_missing`` is
        false; every other failure raises ``WriteError``.
        """
        client = self._require_client()
        try:
            client.indices.delete(index=self.index_name)
        except exceptions.NotFoundError as e:
            if not ignore_missing:
                raise WriteError(f"Index {self.index_name} does not exist") from e
            logger.warning("Index to delete not found", index_name=self.index_name)
            return
        except exceptions.OpenSearchException as e:
            logger.error("Failed to delete index", index_name=self.index_name, error=str(e))
            raise WriteError(f"Deleting index {self.index_name} failed: {e}") from e

        logger.info("OpenSearch index deleted", index_name=self.index_name)

    def new_bulk(self) -> BulkBatch:
        """Start an empty bulk batch bound to this client."""
        self._require_client()
        return BulkBatch(owner=self)

    def add_to_bulk(self, batch: BulkBatch, document_type: str, document: Document) -> None:
        """Queue an index action for ``document``; no request is sent."""
        batch.add({
            "_op_type": "index",
            "_index": self.index_name,
            "_source": self._tagged(document_type, document),
        })

    def send_bulk(self, batch: BulkBatch) -> int:
        """Submit every queued action as a single bulk request.

        Returns the number of actions indexed and empties the batch. A
        request that fails outright raises ``WriteError`` and leaves the
        batch untouched, since nothing was written. A request whose items
        partly fail empties the batch and raises ``BulkWriteError`` with the
        failed items.
        """
        if batch.owner is not self:
            raise ValueError("Bulk batch belongs to a different client")
        client = self._require_client()

        if not len(batch):
            logger.debug("Skipping empty bulk batch", index_name=self.index_name)
            return 0

        body: List[Dict[str, Any]] = []
        for action in batch:
            body.append({action["_op_type"]: {"_index": action["_index"]}})
            body.append(action["_source"])

        try:
            response = client.bulk(body=body)
        except exceptions.OpenSearchException as e:
            logger.error(
                "Bulk submission failed",
                index_name=self.index_name,
                count=len(batch),
                error=str(e),
            )
            raise WriteError(f"Bulk submission to {self.index_name} failed: {e}") from e

        submitted = len(batch)
        batch.clear()

        items = response.get("items", [])
        failed = [item for item in items if any("error" in result for result in item.values())]
        if response.get("errors") or failed:
            logger.error(
                "Bulk items failed",
                index_name=self.index_name,
                count=submitted,
                failed_count=len(failed),
            )
            raise BulkWriteError(
                f"{len(failed)} of {submitted} bulk actions failed on {self.index_name}",
                failed_items=failed,
            )

        logger.info("Bulk batch submitted", index_name=self.index_name, count=submitted)
        return submitted
