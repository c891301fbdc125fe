"""IDM configuration API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient, RequestConfig
from ..utils.forgerock import get_idm_base_url


class IdmConfigApi:
    """Raw access to ``/openidm/config``."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _base_url(self) -> str:
        return f"{get_idm_base_url(self._state)}/config"

    async def get_config_stubs(self) -> dict[str, Any]:
        """Get the list of configuration entity stubs.

        Returns:
            Object with a ``configurations`` list of ``{_id, pid, factoryPid}``.

        """
        config = RequestConfig(api="idm")
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_config_entities(self) -> dict[str, Any]:
        config = RequestConfig(params={"_queryFilter": "true"}, api="idm")
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_config_entities_by_type(self, entity_type: str) -> dict[str, Any]:
        """Get configuration entities whose id starts with ``entity_type``."""
        config = RequestConfig(
            params={"_queryFilter": f"_id sw '{entity_type}'"}, api="idm"
        )
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_config_entity(self, entity_id: str) -> dict[str, Any]:
        config = RequestConfig(api="idm")
        return await self._client.make_request(
            "GET", f"{self._base_url()}/{entity_id}", config=config
        )

    async def put_config_entity(
        self, entity_id: str, entity_data: dict[str, Any], wait: bool = False
    ) -> dict[str, Any]:
        """Create or replace a configuration entity.

        Args:
            entity_id: Entity id, e.g. ``ui/themerealm``
            entity_data: Entity object
            wait: Ask IDM to finish applying the change before answering

        Returns:
            The stored entity.

        """
        config = RequestConfig(
            json_data=entity_data,
            params={"waitForCompletion": "true"} if wait else None,
            api="idm",
        )
        return await self._client.make_request(
            "PUT", f"{self._base_url()}/{entity_id}", config=config
        )

    async def delete_config_entity(self, entity_id: str) -> dict[str, Any]:
        config = RequestConfig(api="idm")
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/{entity_id}", config=config
        )
