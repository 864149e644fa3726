"""End-to-end checks of the search client against a real cluster."""

import os
import uuid

import pytest

from libs.search_client import OpenSearchClient, SearchClientError

ENDPOINT = os.environ.get("SEARCH_TEST_ENDPOINT")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not ENDPOINT, reason="SEARCH_TEST_ENDPOINT not set"),
]


@pytest.fixture
def client():
    """Connect to a throwaway index and drop it afterwards."""
    es = OpenSearchClient(ENDPOINT, f"search-client-test-{uuid.uuid4().hex[:8]}")
    try:
        es.connect()
    except SearchClientError as e:
        pytest.skip(f"OpenSearch not available: {e}")
    yield es
    es.delete_index()
    es.close()


def test_connect_creates_index_once(client):
    assert client._client.indices.exists(index=client.index_name)

    # Second connect against the existing index must not fail
    client.connect()
    assert client.connected


def test_insert_is_visible_to_search(client):
    client.insert("article", {"title": "sailing charts", "slug": "charts"})

    documents, total = client.search({"term": {"slug": "charts"}}, "article")

    assert total == 1
    assert documents == [{"title": "sailing charts", "slug": "charts"}]


def test_search_is_scoped_to_document_type(client):
    client.insert("article", {"slug": "shared"})
    client.insert("comment", {"slug": "shared"})

    _, total = client.search({"term": {"slug": "shared"}}, "comment")

    assert total == 1


def test_delete_removes_matches(client):
    client.insert("article", {"slug": "stale"})
    client.insert("article", {"slug": "fresh"})

    client.delete("article", {"term": {"slug": "stale"}})

    _, stale = client.search({"term": {"slug": "stale"}}, "article")
    _, fresh = client.search({"term": {"slug": "fresh"}}, "article")
    assert stale == 0
    assert fresh == 1


def test_bulk_pages_and_totals(client):
    batch = client.new_bulk()
    for i in range(45):
        client.add_to_bulk(batch, "article", {"n": i})

    assert client.send_bulk(batch) == 45
    client.flush()

    first, total = client.search(None, "article")
    third, _ = client.search(None, "article", 3)
    beyond, beyond_total = client.search(None, "article", 10)

    assert total == 45
    assert len(first) == 20
    assert len(third) == 5
    assert beyond == []
    assert beyond_total == 45


def test_no_matches(client):
    documents, total = client.search({"term": {"slug": "nothing"}}, "article")

    assert documents == []
    assert total == 0
