"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INDEXED_FIELDS = ["category", "location", "type", "price", "season"]


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class SearchSettings(BaseSettings):
    """Search defaults applied at the boundary.

    The similarity engine itself takes top_k and threshold explicitly;
    these values only fill in what a caller leaves unset.
    """

    model_config = SettingsConfigDict(env_prefix="SEARCH_")

    default_top_k: int = Field(
        default=5,
        ge=1,
        description="Results returned when the caller does not set top_k",
    )
    default_threshold: float = Field(
        default=0.1,
        description="Minimum score for thresholded modes",
    )
    indexed_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INDEXED_FIELDS),
        description="Metadata fields tracked by the metadata index",
    )


class EmbeddingSettings(BaseSettings):
    """Embedding service configuration."""

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_")

    base_url: str = Field(
        default="http://localhost:8080",
        description="Embedding service base URL",
    )
    model: str = Field(
        default="BAAI/bge-small-en-v1.5",
        description="Embedding model name",
    )
    batch_size: int = Field(
        default=32,
        description="Batch size for embedding requests",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )


class LLMSettings(BaseSettings):
    """Text completion service configuration.

    Any OpenAI-compatible chat completions endpoint works.
    """

    model_config = SettingsConfigDict(env_prefix="LLM_")

    base_url: str = Field(
        default="http://localhost:11434/v1",
        description="Completion API base URL (Ollama default)",
    )
    model: str = Field(
        default="llama3:8b",
        description="Model name to use for generation",
    )
    api_key: SecretStr = Field(
        default=SecretStr("not-required"),
        description="API key (not required for Ollama)",
    )
    timeout: float = Field(
        default=120.0,
        description="Request timeout in seconds",
    )
    max_tokens: int = Field(
        default=1024,
        description="Maximum tokens in response",
    )
    temperature: float = Field(
        default=0.3,
        description="Sampling temperature",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )

    search: SearchSettings = Field(default_factory=SearchSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
