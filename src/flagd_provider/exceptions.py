"""Exception classes for the flagd providers."""

from typing import Optional

from flagd_provider.models import ErrorCode


class FlagdProviderError(Exception):
    """Base exception for flag resolution failures.

    Attributes:
        message: Error message
        original_error: Original exception that caused this error (if any)
        error_code: Taxonomy tag callers can branch on
    """

    error_code: ErrorCode

    def __init__(
        self, message: str, original_error: Optional[BaseException] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (caused by: {self.original_error})"
        return self.message


class FlagNotFoundError(FlagdProviderError):
    """Raised when flagd reports that the flag key does not exist."""

    error_code = ErrorCode.FLAG_NOT_FOUND


class ProviderNotReadyError(FlagdProviderError):
    """Raised when the provider could not connect or was never initialized."""

    error_code = ErrorCode.PROVIDER_NOT_READY


class UnexpectedError(FlagdProviderError):
    """Raised for any other resolution failure."""

    error_code = ErrorCode.UNEXPECTED_ERROR


class RemoteEvaluationError(Exception):
    """Error payload returned by the flagd HTTP API."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
