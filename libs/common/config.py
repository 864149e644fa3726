"""Configuration management for the search client.

This module centralizes environment-driven configuration for the search
client facade. It builds on ``pydantic_settings.BaseSettings`` so
configuration can be provided via environment variables, ``.env`` files, or
defaults.

Highlights
- Strongly-typed settings with sensible defaults
- One place to discover the ``SEARCH_*`` environment variables

Usage
- ``config = SearchClientConfig()``
- Or override explicitly: ``SearchClientConfig(search_index="articles")``
"""

from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchClientConfig(BaseSettings):
    """Configuration for the search client facade.

    Each field is read from the upper-cased environment variable of the same
    name (``search_endpoint`` -> ``SEARCH_ENDPOINT``). Defaults keep local
    development convenient while still being explicit.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    search_env: str = Field(default="local")

    # Connection
    search_endpoint: str = Field(default="http://localhost:9200")
    search_index: str = Field(default="documents")
    search_username: Optional[str] = Field(default=None)
    search_password: Optional[str] = Field(default=None)
    search_verify_certs: bool = Field(default=False)
    search_timeout: int = Field(default=30, gt=0)

    # Transport behaviour
    search_max_retries: int = Field(default=5, ge=0)
    search_health_check_interval: float = Field(default=10.0, gt=0)

    # Index layout
    search_type_field: str = Field(default="doc_type", min_length=1)
    search_strict_index_ack: bool = Field(default=False)

    # Logging
    search_log_level: str = Field(default="INFO")
    search_log_format: str = Field(default="json")

    def client_options(self) -> Dict[str, Any]:
        """Keyword arguments accepted by ``OpenSearchClient``."""
        return {
            "username": self.search_username,
            "password": self.search_password,
            "verify_certs": self.search_verify_certs,
            "timeout": self.search_timeout,
            "max_retries": self.search_max_retries,
            "health_check_interval": self.search_health_check_interval,
            "type_field": self.search_type_field,
            "strict_index_ack": self.search_strict_index_ack,
        }
