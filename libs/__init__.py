"""Shared libraries for the search client facade.

Subpackages:
- ``libs.common``: configuration and logging.
- ``libs.search_client``: the OpenSearch facade, bulk batches and factories.

Usage:
- Import stable, reusable functionality from here to keep calling code lean.
"""
