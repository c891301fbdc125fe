"""Tests for error wrapping and classification.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import pytest

from frodo.exceptions import (
    HTTP_CLIENT_ERROR_CODE,
    HTTP_SERVER_ERROR_CODE,
    ConflictError,
    FrodoError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
    create_error_from_response,
    http_status_of,
    is_retryable_error,
)


@pytest.mark.parametrize(
    ("status", "error_class"),
    [
        (400, ValidationError),
        (404, NotFoundError),
        (409, ConflictError),
        (429, RateLimitError),
        (502, ServerError),
    ],
)
def test_create_error_from_response_maps_status(status: int, error_class: type) -> None:
    """Each status maps to its error class and client/server code."""
    error = create_error_from_response(status, {"message": "boom"})

    assert isinstance(error, error_class)
    assert error.http_status == status
    assert error.http_message == "boom"
    expected_code = HTTP_SERVER_ERROR_CODE if status >= 500 else HTTP_CLIENT_ERROR_CODE
    assert error.code == expected_code


def test_wrapping_error_lifts_http_details() -> None:
    """A FrodoError wrapping an HTTP error exposes its status and message."""
    cause = NotFoundError(404, {"message": "Not Found", "detail": "no such tree"})
    error = FrodoError("Error reading journey Login", cause)

    assert error.is_http_error
    assert error.http_status == 404
    assert error.http_message == "Not Found"
    assert error.http_detail == "no such tree"
    assert http_status_of(error) == 404


def test_nested_wrapping_keeps_http_details() -> None:
    """Details survive more than one level of wrapping."""
    inner = FrodoError("Error reading script", ConflictError(409))
    outer = FrodoError("Error importing scripts", [inner])

    assert outer.http_status == 409
    assert outer.http_code == HTTP_CLIENT_ERROR_CODE


def test_combined_message_indents_nested_errors() -> None:
    """The combined message lists every nested error below its parent."""
    error = FrodoError(
        "Error deleting agents",
        [FrodoError("Error deleting agent a", NotFoundError(404)), ValueError("bad")],
    )

    lines = str(error).split("\n")
    assert lines[0] == "Error deleting agents"
    assert "  Error deleting agent a" in lines
    assert "    HTTP client error" in lines
    assert "      Status: 404" in lines
    assert "  bad" in lines


def test_plain_error_has_no_http_status() -> None:
    """Errors without an HTTP cause report no status."""
    assert http_status_of(FrodoError("nope")) is None
    assert http_status_of(ValueError("nope")) is None


def test_retryable_errors() -> None:
    """Only network failures and server errors are retried."""
    assert is_retryable_error(NetworkError())
    assert is_retryable_error(ServerError(503))
    assert not is_retryable_error(NotFoundError(404))
    assert not is_retryable_error(ValueError("bad"))
