"""Tests for the search client.

Unit tests mock the opensearch-py client; ``tests/integration`` exercises a
live cluster when one is configured.
"""
