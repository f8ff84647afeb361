"""Configuration settings for the curator service."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service identification
    service_name: str = "subgraph-curator"
    debug: bool = False

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8002

    # Database
    database_url: str = "sqlite:///./curator.db"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Timeouts (seconds)
    source_timeout: float = 10.0
    introspection_timeout: float = 15.0
    embedding_timeout: float = 30.0

    # Embedding provider
    embedding_api_key: str | None = None
    embedding_model: str = "text-embedding-004"
    embedding_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Similarity ranking
    similarity_threshold: float = 0.8
    semantic_candidate_limit: int = 100
    semantic_weight: float = 0.7
    lexical_weight: float = 0.3
    lexical_match_score: float = 0.8
    rank_top_k: int = 4

    # CORS configuration
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_prefix="CURATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
