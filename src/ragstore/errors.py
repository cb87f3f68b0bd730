"""
ragstore Unified Error Classification System.

Every failure raised by the package is a ``StoreError`` tagged with an
``ErrorKind``. The kind carries a stable machine-readable code, so callers
branch on ``error.kind`` instead of on exception classes.

Error Kinds:
------------
1. Retryable: transient failures a caller may choose to retry
   - CONNECTION (store or provider unreachable)
   - TIMEOUT (request exceeded the HTTP timeout)
   - RATE_LIMIT (HTTP 429)

2. Permanent: failures that need intervention
   - VALIDATION (bad collection name, metadata or options)
   - CONFIGURATION (bad or missing configuration)
   - EMBEDDING_NOT_CONFIGURED (text query without a provider)
   - COLLECTION_NOT_FOUND / DOCUMENT_NOT_FOUND

3. Operation failures
   - COLLECTION, DOCUMENT, EMBEDDING, SEARCH, GENERIC

Nothing inside ragstore retries; ``is_retryable`` only helps callers decide.

Usage:
------
    from ragstore.errors import ErrorKind, StoreError

    try:
        exists = await manager.collection_exists("notes")
    except StoreError as e:
        if e.kind is ErrorKind.CONNECTION:
            logger.warning(f"Store unreachable: {e}")
        raise
"""

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Kinds of failures, each with a stable code."""

    CONNECTION = "connection"
    COLLECTION = "collection"
    COLLECTION_NOT_FOUND = "collection_not_found"
    DOCUMENT = "document"
    DOCUMENT_NOT_FOUND = "document_not_found"
    EMBEDDING = "embedding"
    EMBEDDING_NOT_CONFIGURED = "embedding_not_configured"
    SEARCH = "search"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    GENERIC = "generic"

    @property
    def code(self) -> str:
        return f"RAGSTORE_{self.name}"


RETRYABLE_KINDS = frozenset({ErrorKind.CONNECTION, ErrorKind.TIMEOUT, ErrorKind.RATE_LIMIT})

_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.CONNECTION: "Failed to connect to the vector store",
    ErrorKind.EMBEDDING_NOT_CONFIGURED: "No embedding provider configured",
    ErrorKind.TIMEOUT: "Request timed out",
    ErrorKind.RATE_LIMIT: "API rate limit exceeded",
}


class StoreError(Exception):
    """
    Base and only exception type raised by ragstore.

    Attributes:
        kind: What went wrong (see ``ErrorKind``)
        message: Human-readable error description
        context: Structured context, e.g. collection or provider name
        cause: The underlying exception, also chained as ``__cause__``
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        message = message or _DEFAULT_MESSAGES.get(kind, f"{kind.value} error")
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.context = {k: v for k, v in (context or {}).items() if v is not None}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def code(self) -> str:
        return self.kind.code

    def __str__(self) -> str:
        base = self.message
        if self.context:
            base += f" | Details: {self.context}"
        if self.cause:
            base += f" | Caused by: {type(self.cause).__name__}: {self.cause}"
        return base

    def __repr__(self) -> str:
        return f"StoreError(kind={self.kind.value!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "code": self.code,
            "kind": self.kind.value,
            "message": self.message,
            "context": self.context,
            "cause": f"{type(self.cause).__name__}: {self.cause}" if self.cause else None,
        }

    # Shorthands for the kinds raised most often

    @classmethod
    def validation(cls, message: str, field: str | None = None, value: Any = None) -> "StoreError":
        return cls(ErrorKind.VALIDATION, message, {"field": field, "value": value})

    @classmethod
    def not_configured(cls, message: str | None = None, **context: Any) -> "StoreError":
        return cls(ErrorKind.EMBEDDING_NOT_CONFIGURED, message, context)

    @classmethod
    def collection_not_found(cls, name: str, cause: BaseException | None = None) -> "StoreError":
        return cls(
            ErrorKind.COLLECTION_NOT_FOUND,
            f"Collection '{name}' not found",
            {"collection_name": name},
            cause,
        )

    @classmethod
    def embedding(
        cls, message: str, provider: str | None = None, cause: BaseException | None = None, **context: Any
    ) -> "StoreError":
        return cls(ErrorKind.EMBEDDING, message, {"provider": provider, **context}, cause)


# =============================================================================
# Helper Functions
# =============================================================================

def is_kind(error: BaseException, *kinds: ErrorKind) -> bool:
    """Check whether ``error`` is a StoreError of one of ``kinds``."""
    return isinstance(error, StoreError) and error.kind in kinds


def is_retryable(error: BaseException) -> bool:
    """
    Check if an error is worth retrying.

    Args:
        error: The exception to check

    Returns:
        True for connection, timeout and rate-limit failures
    """
    return isinstance(error, StoreError) and error.kind in RETRYABLE_KINDS


def classify_http_error(
    status_code: int,
    message: str = "",
    headers: dict | None = None,
    context: dict[str, Any] | None = None,
    default_kind: ErrorKind = ErrorKind.EMBEDDING,
) -> StoreError:
    """
    Classify an HTTP error response from an external API.

    Args:
        status_code: HTTP status code
        message: Error message from response
        headers: Response headers (used to extract Retry-After)
        context: Extra context, e.g. the provider name
        default_kind: Kind used for statuses without a dedicated mapping

    Returns:
        StoreError carrying the status code in its context

    Example:
        if response.status_code >= 400:
            raise classify_http_error(
                response.status_code,
                response.text,
                dict(response.headers),
                {"provider": "openai"},
            )
    """
    headers = {str(k).lower(): v for k, v in (headers or {}).items()}
    details: dict[str, Any] = {**(context or {}), "status_code": status_code}

    if "retry-after" in headers:
        try:
            details["retry_after"] = float(headers["retry-after"])
        except (ValueError, TypeError):
            pass

    if status_code == 429:
        return StoreError(ErrorKind.RATE_LIMIT, message or "API rate limit exceeded", details)
    elif status_code in (401, 403):
        return StoreError(
            ErrorKind.CONFIGURATION,
            message or "Authentication failed - check the API key",
            details,
        )
    elif status_code in (408, 504):
        return StoreError(ErrorKind.TIMEOUT, message or f"Upstream timeout (HTTP {status_code})", details)
    elif status_code == 400:
        return StoreError(ErrorKind.VALIDATION, message or "Invalid request parameters", details)
    else:
        return StoreError(default_kind, message or f"HTTP error {status_code}", details)


def wrap_exception(
    error: BaseException,
    message: str = "",
    context: dict[str, Any] | None = None,
    default_kind: ErrorKind = ErrorKind.GENERIC,
) -> StoreError:
    """
    Wrap a foreign exception in a StoreError, keeping it as the cause.

    StoreErrors are returned unchanged. Otherwise the exception type and
    message are inspected to pick the most specific kind.

    Example:
        try:
            await collection.add(...)
        except Exception as e:
            raise wrap_exception(e, "Failed to add documents") from e
    """
    if isinstance(error, StoreError):
        return error

    error_str = str(error).lower()
    error_type = type(error).__name__
    text = f"{message}: {error}" if message else str(error)

    if "timeout" in error_str or "timed out" in error_str or "Timeout" in error_type:
        return StoreError(ErrorKind.TIMEOUT, text, context, error)

    if error_type in ("ConnectError", "ConnectionError", "ConnectionRefusedError") or any(
        x in error_str for x in ["could not connect", "connection refused", "network", "dns"]
    ):
        return StoreError(ErrorKind.CONNECTION, text, context, error)

    if any(x in error_str for x in ["rate limit", "too many requests"]):
        return StoreError(ErrorKind.RATE_LIMIT, text, context, error)

    return StoreError(default_kind, text, context, error)
