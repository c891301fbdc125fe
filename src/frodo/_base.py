"""Base HTTP client for platform API operations.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio
import json
import shlex
import uuid
from urllib.parse import urlencode
from typing import TYPE_CHECKING, Any, Callable, Literal, NamedTuple

import httpx

from .constants import USER_AGENT
from .exceptions import (
    FrodoError,
    NetworkError,
    TimeoutError as FrodoTimeoutError,
    create_error_from_response,
    is_retryable_error,
)
from .utils.console import curlirize_message, debug_message

if TYPE_CHECKING:
    from .state import State

# HTTP Error Status Constants
HTTP_SUCCESS_THRESHOLD = 400

ApiFlavor = Literal["am", "idm", "env", "none"]


class RequestConfig(NamedTuple):
    """Configuration for HTTP requests."""

    json_data: Any | None = None
    params: dict[str, Any] | None = None
    headers: dict[str, str] | None = None
    api_version: str | None = None
    api: ApiFlavor = "am"
    timeout: float | None = None
    retries: int | None = None
    form_data: dict[str, str] | None = None
    auth: tuple[str, str] | None = None


class BaseClient:
    """Base HTTP client for making platform API requests."""

    def __init__(
        self,
        state: State,
        timeout: float = 30.0,
        retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize base HTTP client.

        Args:
            state: Library state providing host, tokens and hooks
            timeout: Request timeout in seconds
            retries: Number of retry attempts for retryable failures
            transport: Optional httpx transport, mainly for tests

        """
        self.state = state
        self.timeout = timeout
        self.retries = retries
        self.transaction_id = f"frodo-{uuid.uuid4()}"

        headers = {
            "User-Agent": USER_AGENT,
            "X-ForgeRock-TransactionId": self.transaction_id,
            "Content-Type": "application/json",
        }

        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=headers,
            verify=not state.allow_insecure_connection,
            transport=transport,
        )

    async def __aenter__(self) -> BaseClient:
        """Async context manager entry.

        Returns:
            The client instance.

        """
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self._client.aclose()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def build_headers(self, config: RequestConfig) -> dict[str, str]:
        """Build the per-request authentication and version headers.

        Args:
            config: Request configuration naming the API flavour

        Returns:
            Headers to merge over the client defaults.

        """
        state = self.state
        headers: dict[str, str] = {}
        if config.api_version:
            headers["Accept-API-Version"] = config.api_version

        if config.api == "am":
            if state.use_bearer_token_for_am_apis and state.bearer_token:
                headers["Authorization"] = f"Bearer {state.bearer_token}"
            elif state.cookie_name and state.cookie_value:
                headers["Cookie"] = f"{state.cookie_name}={state.cookie_value}"
        elif config.api in ("idm", "env") and state.bearer_token:
            headers["Authorization"] = f"Bearer {state.bearer_token}"

        if config.headers:
            headers.update(config.headers)
        headers.update(state.authentication_header_overrides)
        return headers

    async def _make_request_generic(
        self,
        method: str,
        url: str,
        parser: Callable[[httpx.Response], Any],
        *,
        config: RequestConfig | None = None,
    ) -> Any:
        """Make an HTTP request with retry logic using a generic parser.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute request URL
            parser: Function to parse the response
            config: Request configuration

        Returns:
            Parsed response data.

        Raises:
            HttpError: For error responses from the platform
            NetworkError: For network-related errors
            FrodoTimeoutError: For timeout errors

        """
        if config is None:
            config = RequestConfig()

        request_timeout = config.timeout or self.timeout
        request_retries = config.retries if config.retries is not None else self.retries
        headers = self.build_headers(config)

        for attempt in range(request_retries + 1):
            try:
                return await self._attempt_request_generic(
                    method, url, headers, config, request_timeout, parser
                )
            except FrodoError as e:
                if attempt >= request_retries or not is_retryable_error(e):
                    raise
                debug_message(
                    self.state,
                    f"Retrying {method} {url} after {type(e).__name__} "
                    f"(attempt {attempt + 1} of {request_retries})",
                )

            # Exponential backoff for retries
            await asyncio.sleep(min(2**attempt, 10))

        retries_msg = "Max retries exceeded"
        raise FrodoError(retries_msg)

    async def make_request(
        self,
        method: str,
        url: str,
        *,
        config: RequestConfig | None = None,
    ) -> Any:
        """Make an HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute request URL
            config: Request configuration

        Returns:
            Parsed JSON response data, or None for an empty body.

        """
        return await self._make_request_generic(
            method, url, parser=_parse_json, config=config
        )

    async def make_text_request(
        self,
        method: str,
        url: str,
        *,
        config: RequestConfig | None = None,
    ) -> str:
        """Make an HTTP request expecting a text response.

        Returns:
            Text response content.

        """
        return await self._make_request_generic(
            method, url, parser=lambda r: r.text, config=config
        )

    async def make_raw_request(
        self,
        method: str,
        url: str,
        *,
        config: RequestConfig | None = None,
    ) -> httpx.Response:
        """Make an HTTP request and return the response itself.

        Redirects are not followed, so a ``3xx`` response and its
        ``Location`` header reach the caller.

        Returns:
            The successful response.

        """
        return await self._make_request_generic(
            method, url, parser=lambda r: r, config=config
        )

    async def _attempt_request_generic(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        config: RequestConfig,
        timeout: float,
        parser: Callable[[httpx.Response], Any],
    ) -> Any:
        """Attempt a single HTTP request with generic parser.

        Returns:
            Parsed response.

        Raises:
            HttpError: For error responses.

        """
        if self.state.get_debug() or self.state.curlirize:
            curlirize_message(
                self.state, self._to_curl(method, url, headers, config)
            )
        try:
            response = await self._client.request(
                method,
                url,
                json=config.json_data,
                data=config.form_data,
                params=config.params,
                headers=headers,
                auth=config.auth,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise FrodoTimeoutError("Request timeout", e) from e
        except httpx.NetworkError as e:
            raise NetworkError("Network error", e) from e

        if response.status_code < HTTP_SUCCESS_THRESHOLD:
            return parser(response)

        raise create_error_from_response(
            response.status_code,
            self._parse_error_response(response),
            response.reason_phrase,
            _retry_after(response),
        )

    def _to_curl(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        config: RequestConfig,
    ) -> str:
        parts = ["curl", "-k" if self.state.allow_insecure_connection else ""]
        parts += ["-X", method]
        for name, value in {**self._client.headers, **headers}.items():
            parts += ["-H", f'"{name}:{value}"']
        if config.json_data is not None:
            parts += ["--data", shlex.quote(json.dumps(config.json_data))]
        if config.form_data is not None:
            parts += ["--data", shlex.quote(urlencode(config.form_data))]
        target = httpx.URL(url, params=config.params) if config.params else url
        parts.append(f'"{target}"')
        return " ".join(p for p in parts if p)

    @staticmethod
    def _parse_error_response(response: httpx.Response) -> Any:
        """Parse error response from the API.

        Returns:
            Parsed error data.

        """
        try:
            return response.json()
        except ValueError:
            return {"message": response.text}


def _parse_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    return response.json()


def _retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("Retry-After")
    if value and value.isdigit():
        return int(value)
    return None
