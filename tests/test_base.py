"""Tests for the HTTP transport.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import pytest

from frodo._base import BaseClient, RequestConfig
from frodo.exceptions import NetworkError, NotFoundError, ServerError, ValidationError

from .conftest import AM_REALM_URL, IDM_URL

if TYPE_CHECKING:
    from frodo.state import State


async def test_am_requests_carry_session_cookie(
    client: BaseClient, mock_responses: Any
) -> None:
    """AM calls send the session cookie, API version and transaction id."""
    route = mock_responses.get(f"{AM_REALM_URL}/scripts").mock(
        return_value=httpx.Response(200, json={"result": []})
    )

    data = await client.make_request(
        "GET",
        f"{AM_REALM_URL}/scripts",
        config=RequestConfig(api_version="protocol=2.0,resource=1.0"),
    )

    assert data == {"result": []}
    request = route.calls.last.request
    assert request.headers["Cookie"] == "iPlanetDirectoryPro=session-token"
    assert request.headers["Accept-API-Version"] == "protocol=2.0,resource=1.0"
    assert request.headers["X-ForgeRock-TransactionId"].startswith("frodo-")
    assert "Authorization" not in request.headers


async def test_am_requests_use_bearer_token_when_asked(
    state: State, client: BaseClient, mock_responses: Any
) -> None:
    """Service account sessions authenticate AM calls with the bearer token."""
    state.use_bearer_token_for_am_apis = True
    route = mock_responses.get(f"{AM_REALM_URL}/scripts").mock(
        return_value=httpx.Response(200, json={})
    )

    await client.make_request("GET", f"{AM_REALM_URL}/scripts")

    assert route.calls.last.request.headers["Authorization"] == "Bearer bearer-token"


async def test_idm_requests_use_bearer_token_and_overrides(
    state: State, client: BaseClient, mock_responses: Any
) -> None:
    """IDM calls send the bearer token; header overrides are applied last."""
    state.authentication_header_overrides = {"X-Custom": "yes"}
    route = mock_responses.get(f"{IDM_URL}/config").mock(
        return_value=httpx.Response(200, json={})
    )

    await client.make_request("GET", f"{IDM_URL}/config", config=RequestConfig(api="idm"))

    headers = route.calls.last.request.headers
    assert headers["Authorization"] == "Bearer bearer-token"
    assert headers["X-Custom"] == "yes"
    assert "Accept-API-Version" not in headers


async def test_query_parameters_are_sent(client: BaseClient, mock_responses: Any) -> None:
    """Request parameters end up in the query string."""
    route = mock_responses.get(
        f"{AM_REALM_URL}/scripts", params={"_queryFilter": "true"}
    ).mock(return_value=httpx.Response(200, json={"result": []}))

    await client.make_request(
        "GET", f"{AM_REALM_URL}/scripts", config=RequestConfig(params={"_queryFilter": "true"})
    )

    assert route.called


async def test_empty_body_returns_none(client: BaseClient, mock_responses: Any) -> None:
    """Responses without content parse to None."""
    mock_responses.delete(f"{AM_REALM_URL}/scripts/x").mock(
        return_value=httpx.Response(204)
    )

    assert await client.make_request("DELETE", f"{AM_REALM_URL}/scripts/x") is None


async def test_text_request(client: BaseClient, mock_responses: Any) -> None:
    """Text requests return the raw body."""
    mock_responses.get(f"{AM_REALM_URL}/metadata").mock(
        return_value=httpx.Response(200, text="<xml/>")
    )

    assert await client.make_text_request("GET", f"{AM_REALM_URL}/metadata") == "<xml/>"


async def test_error_status_raises_mapped_error(
    client: BaseClient, mock_responses: Any
) -> None:
    """Error statuses raise the matching error with the response body."""
    mock_responses.get(f"{AM_REALM_URL}/scripts/missing").mock(
        return_value=httpx.Response(404, json={"code": 404, "message": "Not Found"})
    )

    with pytest.raises(NotFoundError) as exc_info:
        await client.make_request("GET", f"{AM_REALM_URL}/scripts/missing")

    assert exc_info.value.http_message == "Not Found"
    assert exc_info.value.data == {"code": 404, "message": "Not Found"}


async def test_non_json_error_body_becomes_message(
    client: BaseClient, mock_responses: Any
) -> None:
    """Plain-text error bodies are kept as the message."""
    mock_responses.get(f"{AM_REALM_URL}/scripts").mock(
        return_value=httpx.Response(400, text="bad request")
    )

    with pytest.raises(ValidationError) as exc_info:
        await client.make_request("GET", f"{AM_REALM_URL}/scripts")

    assert exc_info.value.http_message == "bad request"


async def test_server_errors_are_retried(
    state: State, mock_responses: Any, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Server errors are retried with backoff until the budget is spent."""
    delays: list[float] = []

    async def fake_sleep(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr("frodo._base.asyncio.sleep", fake_sleep)
    route = mock_responses.get(f"{AM_REALM_URL}/scripts").mock(
        side_effect=[
            httpx.Response(503, json={"message": "busy"}),
            httpx.Response(502, json={"message": "busy"}),
            httpx.Response(200, json={"result": []}),
        ]
    )

    async with BaseClient(state, retries=2) as client:
        data = await client.make_request("GET", f"{AM_REALM_URL}/scripts")

    assert data == {"result": []}
    assert route.call_count == 3
    assert delays == [1, 2]


async def test_server_error_after_last_retry_is_raised(
    state: State, mock_responses: Any, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The last server error propagates once retries run out."""

    async def fake_sleep(delay: float) -> None:
        return None

    monkeypatch.setattr("frodo._base.asyncio.sleep", fake_sleep)
    route = mock_responses.get(f"{AM_REALM_URL}/scripts").mock(
        return_value=httpx.Response(500, json={"message": "down"})
    )

    async with BaseClient(state, retries=1) as client:
        with pytest.raises(ServerError):
            await client.make_request("GET", f"{AM_REALM_URL}/scripts")

    assert route.call_count == 2


async def test_client_errors_are_not_retried(
    state: State, mock_responses: Any
) -> None:
    """Client errors raise on the first attempt."""
    route = mock_responses.get(f"{AM_REALM_URL}/scripts").mock(
        return_value=httpx.Response(400, json={"message": "invalid"})
    )

    async with BaseClient(state, retries=3) as client:
        with pytest.raises(ValidationError):
            await client.make_request("GET", f"{AM_REALM_URL}/scripts")

    assert route.call_count == 1


async def test_network_errors_are_wrapped(client: BaseClient, mock_responses: Any) -> None:
    """Connection failures raise NetworkError."""
    mock_responses.get(f"{AM_REALM_URL}/scripts").mock(
        side_effect=httpx.ConnectError("refused")
    )

    with pytest.raises(NetworkError):
        await client.make_request("GET", f"{AM_REALM_URL}/scripts")


async def test_curlirize_masks_password(
    state: State, client: BaseClient, mock_responses: Any
) -> None:
    """Curl output is sent to the handler with the password suppressed."""
    lines: list[str] = []
    state.curlirize = True
    state.curlirize_handler = lines.append
    mock_responses.post(f"{AM_REALM_URL}/authenticate").mock(
        return_value=httpx.Response(200, json={"tokenId": "t"})
    )

    await client.make_request(
        "POST",
        f"{AM_REALM_URL}/authenticate",
        config=RequestConfig(
            json_data={}, headers={"X-OpenAM-Password": "secret"}
        ),
    )

    assert len(lines) == 1
    assert lines[0].startswith("curl -X POST")
    assert "secret" not in lines[0]
    assert '"X-OpenAM-Password:<suppressed>"' in lines[0]
