"""Search client factory.

Centralizes creation of ``OpenSearchClient`` handles from explicit arguments,
typed config, or a flat environment mapping so callers don't depend on how
settings are sourced. Factories never connect; call ``connect()`` on the
returned handle.
"""

from typing import Any, Dict, Mapping, Optional
import structlog

from libs.common.config import SearchClientConfig
from .opensearch import OpenSearchClient

logger = structlog.get_logger("search_client.factory")


def _env_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def create_search_client(endpoint: str, index_name: str, **kwargs: Any) -> OpenSearchClient:
    """Create an unconnected client for ``index_name`` at ``endpoint``."""
    if not endpoint:
        raise ValueError("Search client requires an endpoint")
    if not index_name:
        raise ValueError("Search client requires an index name")
    return OpenSearchClient(endpoint=endpoint, index_name=index_name, **kwargs)


def create_search_client_from_config(config: Optional[SearchClientConfig] = None) -> OpenSearchClient:
    """Create a client from typed settings (read from the environment when omitted)."""
    config = config or SearchClientConfig()
    logger.debug(
        "Creating search client from config",
        endpoint=config.search_endpoint,
        index_name=config.search_index,
    )
    return create_search_client(
        config.search_endpoint,
        config.search_index,
        **config.client_options()
    )


def create_search_client_from_env(env_config: Mapping[str, str]) -> OpenSearchClient:
    """Create a client from a flat environment mapping.

    Parameters
    - env_config: A mapping of ``SEARCH_*`` variable names to string values

    Returns
    - An unconnected ``OpenSearchClient``
    """
    options: Dict[str, Any] = {
        "username": env_config.get("SEARCH_USERNAME"),
        "password": env_config.get("SEARCH_PASSWORD"),
        "verify_certs": _env_bool(env_config.get("SEARCH_VERIFY_CERTS")),
        "timeout": int(env_config.get("SEARCH_TIMEOUT", "30")),
        "max_retries": int(env_config.get("SEARCH_MAX_RETRIES", "5")),
        "health_check_interval": float(env_config.get("SEARCH_HEALTH_CHECK_INTERVAL", "10")),
        "type_field": env_config.get("SEARCH_TYPE_FIELD", "doc_type"),
        "strict_index_ack": _env_bool(env_config.get("SEARCH_STRICT_INDEX_ACK")),
    }

    return create_search_client(
        env_config.get("SEARCH_ENDPOINT", "http://localhost:9200"),
        env_config.get("SEARCH_INDEX", "documents"),
        **options
    )
