"""Domain-specific exceptions."""

from __future__ import annotations


class CuratorError(Exception):
    """Base exception for curator errors."""

    def __init__(self, message: str, error_code: str = "CURATOR_ERROR"):
        """Initialize curator error."""
        self.message = message
        self.error_code = error_code
        super().__init__(message)


# ===========================================
# PER-SOURCE FETCH ERRORS
# ===========================================


class SourceFetchError(CuratorError):
    """Base exception for a failed fetch against one subgraph endpoint.

    These are contained by the execution coordinator and reported per source;
    they never abort sibling fetches.
    """

    status = "error"

    def __init__(self, message: str, error_code: str = "SOURCE_FETCH_ERROR"):
        """Initialize source fetch error."""
        super().__init__(message, error_code)


class SourceTimeoutError(SourceFetchError):
    """Raised when a subgraph does not answer within its timeout."""

    status = "timeout"

    def __init__(self, url: str, timeout: float):
        """Initialize source timeout error."""
        self.url = url
        self.timeout = timeout
        super().__init__(
            f"Request to {url} timed out after {timeout:g}s",
            "SOURCE_TIMEOUT",
        )


class SourceTransportError(SourceFetchError):
    """Raised on connection, DNS or non-2xx failures."""

    def __init__(self, message: str, status_code: int | None = None):
        """Initialize source transport error."""
        self.status_code = status_code
        super().__init__(message, "SOURCE_TRANSPORT_ERROR")


class MalformedResponseError(SourceFetchError):
    """Raised when a response violates the root entity list contract.

    This indicates a schema/query mismatch rather than a connectivity problem.
    """

    def __init__(self, message: str):
        """Initialize malformed response error."""
        super().__init__(message, "MALFORMED_RESPONSE")


# ===========================================
# FATAL ERRORS
# ===========================================


class SchemaUnavailableError(CuratorError):
    """Raised when a subgraph schema cannot be introspected."""

    def __init__(self, source_id: str, reason: str):
        """Initialize schema unavailable error."""
        self.source_id = source_id
        self.reason = reason
        super().__init__(
            f"Schema for subgraph '{source_id}' is unavailable: {reason}",
            "SCHEMA_UNAVAILABLE",
        )


class SourceNotFoundError(CuratorError):
    """Raised when a subgraph id is not in the registry."""

    def __init__(self, source_id: str):
        """Initialize source not found error."""
        self.source_id = source_id
        super().__init__(f"Subgraph '{source_id}' not found", "SOURCE_NOT_FOUND")


class QuerySetNotFoundError(CuratorError):
    """Raised when a stored query set id is unknown."""

    def __init__(self, query_set_id: str):
        """Initialize query set not found error."""
        self.query_set_id = query_set_id
        super().__init__(
            f"Stored query set '{query_set_id}' not found", "QUERY_SET_NOT_FOUND"
        )


class ConfigurationError(CuratorError):
    """Raised when required configuration is missing."""

    def __init__(self, message: str):
        """Initialize configuration error."""
        super().__init__(message, "CONFIGURATION_ERROR")


class EmbeddingProviderError(CuratorError):
    """Raised when the embedding provider rejects or fails a request."""

    def __init__(self, message: str, status_code: int | None = None):
        """Initialize embedding provider error."""
        self.status_code = status_code
        super().__init__(message, "EMBEDDING_PROVIDER_ERROR")
