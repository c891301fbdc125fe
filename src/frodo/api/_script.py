"""Script API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient, RequestConfig
from ..utils.forgerock import get_current_host, get_current_realm_path

API_VERSION = "protocol=2.0,resource=1.0"


class ScriptApi:
    """Raw access to the AM script endpoints."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _base_url(self) -> str:
        return (
            f"{get_current_host(self._state)}/json"
            f"{get_current_realm_path(self._state)}/scripts"
        )

    async def get_scripts(self) -> dict[str, Any]:
        """Get all scripts in the realm.

        Returns:
            Paged result of scripts.

        """
        config = RequestConfig(params={"_queryFilter": "true"}, api_version=API_VERSION)
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_script_by_name(self, script_name: str) -> dict[str, Any]:
        """Query scripts by exact name.

        Returns:
            Paged result; normally zero or one script.

        """
        config = RequestConfig(
            params={"_queryFilter": f'name eq "{script_name}"'},
            api_version=API_VERSION,
        )
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_script(self, script_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "GET", f"{self._base_url()}/{script_id}", config=config
        )

    async def put_script(self, script_id: str, script_data: dict[str, Any]) -> dict[str, Any]:
        """Create or replace a script.

        Args:
            script_id: Script id
            script_data: Script object with a base64 encoded ``script`` body

        Returns:
            The stored script.

        """
        config = RequestConfig(json_data=script_data, api_version=API_VERSION)
        return await self._client.make_request(
            "PUT", f"{self._base_url()}/{script_id}", config=config
        )

    async def delete_script(self, script_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/{script_id}", config=config
        )
