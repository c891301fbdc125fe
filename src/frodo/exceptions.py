"""Exception classes for the Frodo library.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

HTTP_CLIENT_ERROR_CODE = "ERR_BAD_REQUEST"
HTTP_SERVER_ERROR_CODE = "ERR_BAD_RESPONSE"


class FrodoError(Exception):
    """Base exception for Frodo library errors.

    A ``FrodoError`` wraps zero or more original errors. When the first
    original error came from an HTTP response, its status and response body
    details are lifted onto the wrapping error so callers can branch on them
    without digging through the chain.
    """

    def __init__(
        self,
        message: str,
        original_errors: Exception | list[Exception] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if original_errors is None:
            self.original_errors: list[Exception] = []
        elif isinstance(original_errors, Exception):
            self.original_errors = [original_errors]
        else:
            self.original_errors = list(original_errors)

        self.is_http_error = False
        self.http_code: str | None = None
        self.http_status: int | None = None
        self.http_reason: str | None = None
        self.http_message: str | None = None
        self.http_detail: str | None = None
        self.http_error_message: str | None = None
        self.http_description: str | None = None

        first = self.original_errors[0] if self.original_errors else None
        if isinstance(first, FrodoError) and first.is_http_error:
            self._copy_http_details(first)

    def _copy_http_details(self, other: FrodoError) -> None:
        self.is_http_error = True
        self.http_code = other.http_code
        self.http_status = other.http_status
        self.http_reason = other.http_reason
        self.http_message = other.http_message
        self.http_detail = other.http_detail
        self.http_error_message = other.http_error_message
        self.http_description = other.http_description

    def get_combined_message(self) -> str:
        """Render this error and every nested original error.

        Returns:
            Multi-line message, nested errors indented below their parent.

        """
        combined = self.message or ""
        for error in self.original_errors:
            if isinstance(error, HttpError):
                combined += "\n  HTTP client error"
                combined += _http_lines(error)
            elif isinstance(error, FrodoError):
                combined += "\n  " + error.get_combined_message().replace(
                    "\n", "\n  "
                )
            else:
                combined += f"\n  {error}"
        return combined

    def __str__(self) -> str:
        return self.get_combined_message()


def _http_lines(error: FrodoError) -> str:
    lines = ""
    if error.http_code:
        lines += f"\n    Code: {error.http_code}"
    if error.http_status:
        lines += f"\n    Status: {error.http_status}"
    if error.http_error_message:
        lines += f"\n    Error: {error.http_error_message}"
    if error.http_message:
        lines += f"\n    Message: {error.http_message}"
    if error.http_detail:
        lines += f"\n    Detail: {error.http_detail}"
    if error.http_description:
        lines += f"\n    Description: {error.http_description}"
    return lines


class HttpError(FrodoError):
    """Raised when the platform answers with an error status."""

    def __init__(
        self,
        status_code: int,
        data: Any | None = None,
        reason: str | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message or f"Request failed with status code {status_code}")
        self.status_code = status_code
        self.data = data
        self.is_http_error = True
        self.http_status = status_code
        self.http_reason = reason
        self.http_code = (
            HTTP_SERVER_ERROR_CODE if status_code >= 500 else HTTP_CLIENT_ERROR_CODE
        )
        if isinstance(data, dict):
            self.http_message = data.get("message")
            self.http_detail = data.get("detail")
            self.http_error_message = data.get("error")
            self.http_description = data.get("error_description")

    @property
    def code(self) -> str | None:
        """Return the client/server error classification code."""
        return self.http_code

    def get_combined_message(self) -> str:
        return self.message + _http_lines(self)


class ValidationError(HttpError):
    """Raised when request validation fails."""


class AuthenticationError(HttpError):
    """Raised when authentication fails."""


class AuthorizationError(HttpError):
    """Raised when authorization fails."""


class NotFoundError(HttpError):
    """Raised when a resource is not found."""


class ConflictError(HttpError):
    """Raised when a resource conflict occurs."""


class RateLimitError(HttpError):
    """Raised when rate limit is exceeded."""

    def __init__(
        self,
        status_code: int = 429,
        data: Any | None = None,
        reason: str | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(status_code, data, reason)
        self.retry_after = retry_after


class ServerError(HttpError):
    """Raised when a server error occurs."""


class NetworkError(FrodoError):
    """Raised when a network error occurs."""

    def __init__(
        self, message: str = "Network error", original_errors: Any | None = None
    ) -> None:
        super().__init__(message, original_errors)


class TimeoutError(FrodoError):  # noqa: A001
    """Raised when a request times out."""

    def __init__(
        self, message: str = "Request timeout", original_errors: Any | None = None
    ) -> None:
        super().__init__(message, original_errors)


def create_error_from_response(
    status_code: int,
    data: Any | None = None,
    reason: str | None = None,
    retry_after: int | None = None,
) -> HttpError:
    """Create an appropriate error instance based on HTTP status code and response body."""
    if status_code == 400:
        return ValidationError(status_code, data, reason)
    elif status_code == 401:
        return AuthenticationError(status_code, data, reason)
    elif status_code == 403:
        return AuthorizationError(status_code, data, reason)
    elif status_code == 404:
        return NotFoundError(status_code, data, reason)
    elif status_code == 409:
        return ConflictError(status_code, data, reason)
    elif status_code == 429:
        return RateLimitError(status_code, data, reason, retry_after)
    elif status_code >= 500:
        return ServerError(status_code, data, reason)
    else:
        return HttpError(status_code, data, reason)


def is_retryable_error(error: Exception) -> bool:
    """Check if an error is retryable (network errors and 5xx server errors)."""
    if isinstance(error, (NetworkError, TimeoutError)):
        return True

    if isinstance(error, HttpError):
        return error.status_code >= 500

    return False


def http_status_of(error: Exception) -> int | None:
    """Return the HTTP status carried by an error, if any."""
    if isinstance(error, FrodoError) and error.is_http_error:
        return error.http_status
    return None
