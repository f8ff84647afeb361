"""Domain layer - exceptions shared across the curator service."""

from curator.domain.exceptions import (
    ConfigurationError,
    CuratorError,
    EmbeddingProviderError,
    MalformedResponseError,
    QuerySetNotFoundError,
    SchemaUnavailableError,
    SourceFetchError,
    SourceNotFoundError,
    SourceTimeoutError,
    SourceTransportError,
)

__all__ = [
    "ConfigurationError",
    "CuratorError",
    "EmbeddingProviderError",
    "MalformedResponseError",
    "QuerySetNotFoundError",
    "SchemaUnavailableError",
    "SourceFetchError",
    "SourceNotFoundError",
    "SourceTimeoutError",
    "SourceTransportError",
]
