"""SAML2 circles of trust API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient, RequestConfig
from ..utils.forgerock import get_current_host, get_current_realm_path
from ..utils.json_utils import strip_keys

API_VERSION = "protocol=2.1,resource=1.0"


class CirclesOfTrustApi:
    """Raw access to the federation circle of trust endpoints."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _base_url(self) -> str:
        return (
            f"{get_current_host(self._state)}/json"
            f"{get_current_realm_path(self._state)}"
            "/realm-config/federation/circlesoftrust"
        )

    async def get_circles_of_trust(self) -> dict[str, Any]:
        """Get all circles of trust.

        Returns:
            Paged result of circles of trust.

        """
        config = RequestConfig(params={"_queryFilter": "true"}, api_version=API_VERSION)
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_circle_of_trust(self, cot_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "GET", f"{self._base_url()}/{cot_id}", config=config
        )

    async def create_circle_of_trust(
        self, cot_data: dict[str, Any], cot_id: str | None = None
    ) -> dict[str, Any]:
        """Create a circle of trust.

        Args:
            cot_data: Circle of trust object
            cot_id: Id to assign, overriding any ``_id`` in the data

        Returns:
            The created circle of trust.

        """
        body = dict(cot_data)
        if cot_id:
            body["_id"] = cot_id
        config = RequestConfig(
            json_data=body, params={"_action": "create"}, api_version=API_VERSION
        )
        return await self._client.make_request(
            "POST", f"{self._base_url()}/", config=config
        )

    async def update_circle_of_trust(
        self, cot_id: str, cot_data: dict[str, Any]
    ) -> dict[str, Any]:
        config = RequestConfig(
            json_data=strip_keys(cot_data, "_id", "_rev"), api_version=API_VERSION
        )
        return await self._client.make_request(
            "PUT", f"{self._base_url()}/{cot_id}", config=config
        )

    async def delete_circle_of_trust(self, cot_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/{cot_id}", config=config
        )
