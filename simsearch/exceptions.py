"""Search engine exception hierarchy.

All custom exceptions inherit from SimSearchError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "SIM-1000"
    CONFIGURATION_ERROR = "SIM-1001"
    INVALID_ARGUMENT = "SIM-1002"

    # Document errors (2xxx)
    DOCUMENT_NOT_FOUND = "SIM-2000"
    DOCUMENT_EXISTS = "SIM-2001"

    # Embedding errors (3xxx)
    EMBEDDING_SERVICE_ERROR = "SIM-3000"
    EMBEDDING_UNAVAILABLE = "SIM-3001"

    # Vector errors (4xxx)
    DIMENSION_MISMATCH = "SIM-4001"

    # Completion errors (5xxx)
    COMPLETION_SERVICE_ERROR = "SIM-5000"
    COMPLETION_TIMEOUT = "SIM-5001"
    COMPLETION_RATE_LIMIT = "SIM-5002"


class SimSearchError(Exception):
    """Base exception for all search engine errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(SimSearchError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class InvalidArgumentError(SimSearchError):
    """Caller supplied an argument the engine rejects before doing any work."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_ARGUMENT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class DocumentNotFoundError(SimSearchError):
    """A document id was looked up at a boundary that treats absence as an error.

    The store itself reports absence as None.
    """

    def __init__(self, document_id: str) -> None:
        super().__init__(
            f"Document not found: {document_id}",
            ErrorCode.DOCUMENT_NOT_FOUND,
            {"document_id": document_id},
        )


class DocumentExistsError(InvalidArgumentError):
    """A document with the same id is already stored."""

    def __init__(
        self,
        document_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"Document already exists: {document_id}",
            ErrorCode.DOCUMENT_EXISTS,
            {"document_id": document_id, **(details or {})},
        )


class DimensionMismatchError(SimSearchError):
    """Two vectors of different lengths were compared or stored together.

    Never coerced: no padding, no truncation, no default score.
    """

    def __init__(
        self,
        expected: int,
        actual: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Vector dimension mismatch: expected {expected}, got {actual}",
            ErrorCode.DIMENSION_MISMATCH,
            {"expected": expected, "actual": actual, **(details or {})},
        )


class EmbeddingError(SimSearchError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class EmbeddingUnavailableError(EmbeddingError):
    """The embedding collaborator produced no usable vector."""

    def __init__(
        self,
        message: str = "Embedding service returned no usable vector",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.EMBEDDING_UNAVAILABLE, details)


class CompletionError(SimSearchError):
    """Text completion service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.COMPLETION_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)

