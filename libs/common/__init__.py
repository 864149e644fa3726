"""Common utilities shared by the search client.

Includes:
- ``config``: Pydantic-based configuration from ``SEARCH_*`` environment variables.
- ``logging``: structured logging setup with structlog.

Import pattern:
- from libs.common.config import SearchClientConfig
- from libs.common.logging import configure_logging
"""
