"""Custom exceptions for resumescorer.

Errors raised by the request pipeline are instances of
:class:`ApiRequestError`. Each subclass carries an :class:`ErrorKind` tag,
which decides both whether the pipeline retries it and which message the
host application shows to the user.
"""

from enum import Enum
from typing import Any, ClassVar, Optional


class ErrorKind(str, Enum):
    """Kinds of failure the request pipeline can end with."""

    MISSING_CREDENTIAL = "missing_credential"
    INVALID_CREDENTIAL = "invalid_credential"
    RATE_LIMITED = "rate_limited"
    NETWORK_UNREACHABLE = "network_unreachable"
    MALFORMED_PROVIDER_RESPONSE = "malformed_provider_response"
    SCHEMA_VIOLATION = "schema_violation"
    UNKNOWN_PROVIDER_ERROR = "unknown_provider_error"


RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.RATE_LIMITED,
        ErrorKind.NETWORK_UNREACHABLE,
        ErrorKind.UNKNOWN_PROVIDER_ERROR,
    }
)

USER_MESSAGES = {
    ErrorKind.MISSING_CREDENTIAL: (
        "OpenAI API key not found. Please set your API key in settings."
    ),
    ErrorKind.INVALID_CREDENTIAL: (
        "Your OpenAI API key appears to be invalid or has expired. "
        "Please verify your API key in settings and try again."
    ),
    ErrorKind.RATE_LIMITED: (
        "You have exceeded the API rate limit. Please wait a moment and try again."
    ),
    ErrorKind.NETWORK_UNREACHABLE: (
        "Unable to connect to OpenAI servers. Please check your internet connection."
    ),
    ErrorKind.MALFORMED_PROVIDER_RESPONSE: (
        "The analysis service returned a response that could not be read. "
        "Please try again."
    ),
    ErrorKind.SCHEMA_VIOLATION: (
        "The analysis service returned an incomplete or invalid result. "
        "Please try again later."
    ),
    ErrorKind.UNKNOWN_PROVIDER_ERROR: "OpenAI API error: {message}",
}

RAW_SNIPPET_LENGTH = 200


class ResumeScorerError(Exception):
    """Base exception for all resumescorer errors."""

    @property
    def user_message(self) -> str:
        """Message suitable for showing to an end user."""
        return str(self)


class ApiRequestError(ResumeScorerError):
    """Terminal or retryable failure of a pipeline request.

    Attributes:
        status: HTTP status reported by the provider, if any.
        raw_payload: Raw provider payload related to the failure, if any.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN_PROVIDER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status: Optional[int] = None,
        raw_payload: Optional[str] = None,
    ) -> None:
        self.status = status
        self.raw_payload = raw_payload
        super().__init__(message or self._default_message())

    @classmethod
    def _default_message(cls) -> str:
        if cls.kind is ErrorKind.UNKNOWN_PROVIDER_ERROR:
            return "Unknown error occurred"
        return USER_MESSAGES[cls.kind]

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    @property
    def user_message(self) -> str:
        return USER_MESSAGES[self.kind].format(message=str(self))

    def describe(self, debug: bool = False) -> str:
        """Return the user message, with diagnostics appended when debugging."""
        if not debug:
            return self.user_message

        details = [f"kind={self.kind.value}"]
        if self.status is not None:
            details.append(f"status={self.status}")
        text = f"{self.user_message} ({', '.join(details)}): {self}"
        if self.raw_payload:
            text += f"\nResponse: {truncate_payload(self.raw_payload)}"
        return text

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value!r}, message={str(self)!r})"


class MissingCredentialError(ApiRequestError):
    """Raised when no API key is available at call time."""

    kind = ErrorKind.MISSING_CREDENTIAL


class InvalidCredentialError(ApiRequestError):
    """Raised when the provider rejects the API key (HTTP 401)."""

    kind = ErrorKind.INVALID_CREDENTIAL


class RateLimitedError(ApiRequestError):
    """Raised when the provider throttles the request (HTTP 429)."""

    kind = ErrorKind.RATE_LIMITED


class NetworkUnreachableError(ApiRequestError):
    """Raised when the provider cannot be reached."""

    kind = ErrorKind.NETWORK_UNREACHABLE


class MalformedProviderResponseError(ApiRequestError):
    """Raised when the provider response cannot be decoded or lacks a tool call."""

    kind = ErrorKind.MALFORMED_PROVIDER_RESPONSE


class SchemaViolationError(ApiRequestError):
    """Raised when a decoded response does not satisfy its response schema.

    Attributes:
        field: Name of the offending field, if the violation concerns one.
    """

    kind = ErrorKind.SCHEMA_VIOLATION

    def __init__(self, message: Optional[str] = None, *, field: Optional[str] = None, **kwargs: Any) -> None:
        self.field = field
        super().__init__(message, **kwargs)


class UnknownProviderError(ApiRequestError):
    """Raised for any provider failure not covered by another kind."""

    kind = ErrorKind.UNKNOWN_PROVIDER_ERROR


class InputValidationError(ResumeScorerError):
    """Raised when caller-supplied input is invalid."""


class FileValidationError(InputValidationError):
    """Raised when an uploaded resume file is rejected."""


class PDFExtractionError(ResumeScorerError):
    """Raised when text cannot be extracted from a PDF."""


class CredentialError(ResumeScorerError):
    """Raised when an API key cannot be stored or read."""


class ModelError(ResumeScorerError):
    """Base exception for model selection errors.

    Attributes:
        code: Short machine-readable reason, e.g. ``INVALID_MODEL``.
    """

    def __init__(self, message: str, code: str = "GENERAL_ERROR") -> None:
        self.code = code
        super().__init__(message)


class ModelValidationError(ModelError):
    """Raised when a model id is missing or not recognised."""


class ModelStorageError(ModelError):
    """Raised when the stored model selection is no longer usable."""


def truncate_payload(payload: str, length: int = RAW_SNIPPET_LENGTH) -> str:
    """Shorten a raw payload for inclusion in an error message."""
    if len(payload) <= length:
        return payload
    return payload[:length] + "..."
