"""Server info and authentication API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient, RequestConfig
from ..utils.forgerock import get_current_host, get_realm_path

SERVER_INFO_API_VERSION = "resource=1.1"
SERVER_VERSION_API_VERSION = "resource=1.0"
AUTHENTICATE_API_VERSION = "resource=2.0, protocol=1.0"


class ServerInfoApi:
    """Raw access to ``/json/serverinfo``."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    async def get_server_info(self) -> dict[str, Any]:
        """Get server information, including the session cookie name.

        Returns:
            Server info object.

        """
        config = RequestConfig(api_version=SERVER_INFO_API_VERSION)
        return await self._client.make_request(
            "GET", f"{get_current_host(self._state)}/json/serverinfo/*", config=config
        )

    async def get_server_version_info(self) -> dict[str, Any]:
        config = RequestConfig(api_version=SERVER_VERSION_API_VERSION)
        return await self._client.make_request(
            "GET",
            f"{get_current_host(self._state)}/json/serverinfo/version",
            config=config,
        )


class AuthenticateApi:
    """Raw access to ``/json/.../authenticate``."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    async def step(
        self,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        realm: str = "/",
        service: str | None = None,
    ) -> dict[str, Any]:
        """Submit one step of an authentication journey.

        Args:
            body: Callback payload from the previous step, empty to start
            headers: Extra headers, e.g. zero-page login credentials
            realm: Realm to authenticate in
            service: Journey to run; defaults to the state's authentication service

        Returns:
            Next callbacks, or the final ``tokenId`` on success.

        """
        params = None
        auth_service = service or self._state.get_authentication_service()
        if auth_service:
            params = {"authIndexType": "service", "authIndexValue": auth_service}
        config = RequestConfig(
            json_data=body or {},
            params=params,
            headers=headers,
            api_version=AUTHENTICATE_API_VERSION,
        )
        return await self._client.make_request(
            "POST",
            f"{get_current_host(self._state)}/json{get_realm_path(realm)}/authenticate",
            config=config,
        )
