"""Integration tests against a live OpenSearch cluster.

Set ``SEARCH_TEST_ENDPOINT`` to run them; they are skipped otherwise.
"""
