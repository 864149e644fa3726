"""Tests for common utilities and client factories."""

from unittest.mock import patch

import pytest
from libs.common.config import SearchClientConfig
from libs.common.logging import configure_logging, configure_logging_from_config, log_performance
from libs.search_client.factory import (
    create_search_client,
    create_search_client_from_config,
    create_search_client_from_env,
)
from libs.search_client.opensearch import OpenSearchClient


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer ``SEARCH_*`` variables out of default checks."""
    for name in list(SearchClientConfig.model_fields):
        monkeypatch.delenv(name.upper(), raising=False)


def test_config_loading():
    """Test configuration defaults."""
    config = SearchClientConfig(_env_file=None)
    assert config.search_env == "local"
    assert config.search_endpoint == "http://localhost:9200"
    assert config.search_max_retries == 5
    assert config.search_health_check_interval == 10.0
    assert config.search_type_field == "doc_type"
    assert config.search_strict_index_ack is False
    assert config.search_log_level == "INFO"


def test_config_from_environment(monkeypatch):
    """Test configuration overrides from environment variables."""
    monkeypatch.setenv("SEARCH_INDEX", "articles")
    monkeypatch.setenv("SEARCH_STRICT_INDEX_ACK", "true")
    monkeypatch.setenv("SEARCH_MAX_RETRIES", "2")

    config = SearchClientConfig(_env_file=None)
    assert config.search_index == "articles"
    assert config.search_strict_index_ack is True
    assert config.search_max_retries == 2


def test_config_reads_env_file(tmp_path):
    """Test dotenv support through pydantic-settings."""
    env_file = tmp_path / ".env"
    env_file.write_text("# comment\nSEARCH_INDEX=articles\n\nSEARCH_TIMEOUT=5\n")

    config = SearchClientConfig(_env_file=str(env_file))
    assert config.search_index == "articles"
    assert config.search_timeout == 5


def test_logging_from_config():
    """Test log settings are applied from config."""
    config = SearchClientConfig(_env_file=None, search_log_level="DEBUG", search_log_format="console")

    with patch("libs.common.logging.configure_logging") as configure:
        configure_logging_from_config(config)

    configure.assert_called_once_with("search-client", "DEBUG", "console")


def test_logging_configuration():
    """Test logging configuration."""
    # This should not raise an exception
    configure_logging("test-service", "INFO", "json")
    configure_logging("test-service", "debug", "console")
    log_performance("search", 3, index_name="articles")


def test_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        configure_logging("test-service", "LOUD")


def test_create_search_client():
    client = create_search_client("http://localhost:9200", "articles", max_retries=1)
    assert isinstance(client, OpenSearchClient)
    assert client.index_name == "articles"
    assert client.max_retries == 1
    assert not client.connected


def test_create_search_client_requires_index():
    with pytest.raises(ValueError):
        create_search_client("http://localhost:9200", "")


def test_create_search_client_from_config():
    config = SearchClientConfig(
        _env_file=None,
        search_endpoint="https://search:9200",
        search_index="articles",
        search_username="reader",
        search_password="secret",
    )

    client = create_search_client_from_config(config)
    assert client.endpoint == "https://search:9200"
    assert client.index_name == "articles"
    assert client.username == "reader"
    assert client.health_check_interval == 10.0


def test_create_search_client_from_env():
    env_config = {
        "SEARCH_ENDPOINT": "http://search:9200",
        "SEARCH_INDEX": "articles",
        "SEARCH_MAX_RETRIES": "3",
        "SEARCH_STRICT_INDEX_ACK": "yes",
        "SEARCH_TYPE_FIELD": "kind",
    }

    client = create_search_client_from_env(env_config)
    assert client.endpoint == "http://search:9200"
    assert client.max_retries == 3
    assert client.strict_index_ack is True
    assert client.type_field == "kind"
    assert client.verify_certs is False
