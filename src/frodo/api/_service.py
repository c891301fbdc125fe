"""AM service API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient, RequestConfig
from ..utils.forgerock import (
    get_config_path,
    get_current_host,
    get_realm_path_global,
)
from ..utils.json_utils import strip_keys

API_VERSION = "protocol=2.0,resource=1.0"


class ServiceApi:
    """Raw access to realm and global service configuration."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _services_url(self, global_config: bool) -> str:
        return (
            f"{get_current_host(self._state)}/json"
            f"{get_realm_path_global(global_config, self._state)}"
            f"/{get_config_path(global_config)}/services"
        )

    async def get_list_of_services(self, global_config: bool = False) -> dict[str, Any]:
        """List configured services.

        Args:
            global_config: True for global services

        Returns:
            Result listing each service's ``_id`` and type.

        """
        config = RequestConfig(
            params={"_action": "nextdescendents"}, api_version=API_VERSION
        )
        return await self._client.make_request(
            "POST", self._services_url(global_config), config=config
        )

    async def get_service(self, service_id: str, global_config: bool = False) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "GET", f"{self._services_url(global_config)}/{service_id}", config=config
        )

    async def get_service_descendents(
        self, service_id: str, global_config: bool = False
    ) -> list[dict[str, Any]]:
        """Get the child configuration objects of a service.

        Returns:
            List of descendents, each carrying ``_type._id``.

        """
        config = RequestConfig(
            params={"_action": "nextdescendents"}, api_version=API_VERSION
        )
        data = await self._client.make_request(
            "POST", f"{self._services_url(global_config)}/{service_id}", config=config
        )
        return data["result"]

    async def put_service(
        self,
        service_id: str,
        service_data: dict[str, Any],
        global_config: bool = False,
    ) -> dict[str, Any]:
        config = RequestConfig(
            json_data=strip_keys(service_data, "_rev"), api_version=API_VERSION
        )
        return await self._client.make_request(
            "PUT", f"{self._services_url(global_config)}/{service_id}", config=config
        )

    async def put_service_next_descendent(
        self,
        service_id: str,
        service_type: str,
        service_name: str,
        service_next_descendent_data: dict[str, Any],
        global_config: bool = False,
    ) -> dict[str, Any]:
        """Create or update one descendent of a service.

        Args:
            service_id: Parent service id
            service_type: Descendent type id
            service_name: Descendent id
            service_next_descendent_data: Descendent object
            global_config: True for global services

        Returns:
            The stored descendent.

        """
        config = RequestConfig(
            json_data=strip_keys(service_next_descendent_data, "_rev"),
            api_version=API_VERSION,
        )
        return await self._client.make_request(
            "PUT",
            f"{self._services_url(global_config)}/{service_id}/{service_type}/{service_name}",
            config=config,
        )

    async def delete_service(
        self, service_id: str, global_config: bool = False
    ) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "DELETE", f"{self._services_url(global_config)}/{service_id}", config=config
        )

    async def delete_service_next_descendent(
        self,
        service_id: str,
        service_type: str,
        service_name: str,
        global_config: bool = False,
    ) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "DELETE",
            f"{self._services_url(global_config)}/{service_id}/{service_type}/{service_name}",
            config=config,
        )
