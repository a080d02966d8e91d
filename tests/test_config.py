"""Tests for application configuration."""

import os
from unittest.mock import patch

from simsearch.config import (
    DEFAULT_INDEXED_FIELDS,
    EmbeddingSettings,
    Environment,
    LLMSettings,
    SearchSettings,
    Settings,
    get_settings,
)


class TestSearchSettings:
    """Tests for search defaults."""

    def test_default_values(self) -> None:
        """Top five results above 0.1 by default."""
        settings = SearchSettings()
        assert settings.default_top_k == 5
        assert settings.default_threshold == 0.1
        assert settings.indexed_fields == DEFAULT_INDEXED_FIELDS

    def test_indexed_fields_not_shared(self) -> None:
        """Each instance gets its own field list."""
        settings = SearchSettings()
        settings.indexed_fields.append("rating")
        assert "rating" not in SearchSettings().indexed_fields

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(
            os.environ,
            {"SEARCH_DEFAULT_TOP_K": "10", "SEARCH_INDEXED_FIELDS": '["category", "rating"]'},
        ):
            settings = SearchSettings()
            assert settings.default_top_k == 10
            assert settings.indexed_fields == ["category", "rating"]


class TestLLMSettings:
    """Tests for completion service configuration."""

    def test_default_values(self) -> None:
        """Default values point to local Ollama."""
        settings = LLMSettings()
        assert settings.base_url == "http://localhost:11434/v1"
        assert settings.model == "llama3:8b"
        assert settings.timeout == 120.0
        assert settings.max_tokens == 1024
        assert settings.temperature == 0.3

    def test_api_key_is_secret(self) -> None:
        """API key should be masked when printed."""
        settings = LLMSettings()
        assert "not-required" not in str(settings.api_key)
        assert settings.api_key.get_secret_value() == "not-required"

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(os.environ, {"LLM_MODEL": "mistral:latest"}):
            settings = LLMSettings()
            assert settings.model == "mistral:latest"


class TestEmbeddingSettings:
    """Tests for embedding configuration."""

    def test_default_values(self) -> None:
        """Default values for embedding service."""
        settings = EmbeddingSettings()
        assert settings.base_url == "http://localhost:8080"
        assert settings.model == "BAAI/bge-small-en-v1.5"
        assert settings.batch_size == 32

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(os.environ, {"EMBEDDING_BATCH_SIZE": "64"}):
            settings = EmbeddingSettings()
            assert settings.batch_size == 64


class TestSettings:
    """Tests for main application settings."""

    def test_default_environment(self) -> None:
        """Default environment is development."""
        settings = Settings()
        assert settings.environment == Environment.DEVELOPMENT

    def test_default_api_settings(self) -> None:
        """Default API host and port."""
        settings = Settings()
        assert settings.api_host == "0.0.0.0"
        assert settings.api_port == 8000

    def test_nested_settings_loaded(self) -> None:
        """Nested settings are initialized."""
        settings = Settings()
        assert isinstance(settings.search, SearchSettings)
        assert isinstance(settings.llm, LLMSettings)
        assert isinstance(settings.embedding, EmbeddingSettings)

    def test_environment_enum(self) -> None:
        """Environment can be set via string."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            settings = Settings()
            assert settings.environment == Environment.PRODUCTION


class TestGetSettings:
    """Tests for settings singleton."""

    def test_returns_settings_instance(self) -> None:
        """get_settings returns a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_caching(self) -> None:
        """Settings are cached."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
