"""Tests for application exceptions."""

from simsearch.exceptions import (
    CompletionError,
    ConfigurationError,
    DimensionMismatchError,
    DocumentExistsError,
    DocumentNotFoundError,
    EmbeddingError,
    EmbeddingUnavailableError,
    ErrorCode,
    InvalidArgumentError,
    SimSearchError,
)


class TestErrorCode:
    """Tests for error codes."""

    def test_error_code_format(self) -> None:
        """Error codes follow SIM-XXXX format."""
        for code in ErrorCode:
            assert code.value.startswith("SIM-")
            assert len(code.value) == 8

    def test_error_code_uniqueness(self) -> None:
        """All error codes are unique."""
        codes = [code.value for code in ErrorCode]
        assert len(codes) == len(set(codes))


class TestSimSearchError:
    """Tests for base exception."""

    def test_basic_exception(self) -> None:
        """Base exception stores message and code."""
        error = SimSearchError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}
        assert str(error) == "Something went wrong"

    def test_to_dict(self) -> None:
        """Exception converts to API response dict."""
        error = InvalidArgumentError("Bad filter", details={"field": "rating"})

        assert error.to_dict() == {
            "error": {
                "code": "SIM-1002",
                "message": "Bad filter",
                "details": {"field": "rating"},
            }
        }


class TestSpecificExceptions:
    """Tests for specific exception types."""

    def test_configuration_error(self) -> None:
        """ConfigurationError has correct code."""
        assert ConfigurationError("bad").code == ErrorCode.CONFIGURATION_ERROR

    def test_document_not_found(self) -> None:
        """DocumentNotFoundError names the id."""
        error = DocumentNotFoundError("bali")
        assert error.code == ErrorCode.DOCUMENT_NOT_FOUND
        assert error.details == {"document_id": "bali"}

    def test_document_exists_is_invalid_argument(self) -> None:
        """A duplicate id is a kind of invalid argument."""
        error = DocumentExistsError("bali", details={"position": 3})
        assert isinstance(error, InvalidArgumentError)
        assert error.code == ErrorCode.DOCUMENT_EXISTS
        assert error.details == {"document_id": "bali", "position": 3}

    def test_dimension_mismatch(self) -> None:
        """DimensionMismatchError keeps both lengths."""
        error = DimensionMismatchError(expected=384, actual=768, details={"document_id": "a"})
        assert error.expected == 384
        assert error.actual == 768
        assert error.details == {"expected": 384, "actual": 768, "document_id": "a"}
        assert "384" in error.message

    def test_embedding_unavailable_is_embedding_error(self) -> None:
        """EmbeddingUnavailableError specializes EmbeddingError."""
        error = EmbeddingUnavailableError()
        assert isinstance(error, EmbeddingError)
        assert error.code == ErrorCode.EMBEDDING_UNAVAILABLE
        assert error.message

    def test_completion_error_codes(self) -> None:
        """CompletionError defaults to a service error."""
        assert CompletionError("down").code == ErrorCode.COMPLETION_SERVICE_ERROR
        assert (
            CompletionError("slow", code=ErrorCode.COMPLETION_TIMEOUT).code
            == ErrorCode.COMPLETION_TIMEOUT
        )

    def test_all_inherit_from_base(self) -> None:
        """All exceptions inherit from SimSearchError."""
        errors = [
            ConfigurationError("x"),
            InvalidArgumentError("x"),
            DocumentNotFoundError("x"),
            DocumentExistsError("x"),
            DimensionMismatchError(1, 2),
            EmbeddingError("x"),
            EmbeddingUnavailableError(),
            CompletionError("x"),
        ]
        for error in errors:
            assert isinstance(error, SimSearchError)
