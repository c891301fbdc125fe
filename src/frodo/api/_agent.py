"""Agent API for Frodo.

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
from ..utils.json_utils import clone_deep, delete_deep_by_key

API_VERSION = "protocol=2.1,resource=1.0"

AGENT_TYPES: list[str] = [
    "2.2_Agent",
    "IdentityGatewayAgent",
    "J2EEAgent",
    "OAuth2Thing",
    "RemoteConsentAgent",
    "SharedAgent",
    "SoapSTSAgent",
    "SoftwarePublisher",
    "WebAgent",
]


class AgentApi:
    """Raw access to the AM agent endpoints."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _agents_url(self, global_config: bool = False) -> str:
        return (
            f"{get_current_host(self._state)}/json"
            f"{get_realm_path_global(global_config, self._state)}"
            f"/{get_config_path(global_config)}/agents"
        )

    async def get_agent_types(self) -> dict[str, Any]:
        """Get the agent types supported by the realm.

        Returns:
            Paged result listing agent types.

        """
        config = RequestConfig(params={"_action": "getAllTypes"}, api_version=API_VERSION)
        return await self._client.make_request(
            "POST", self._agents_url(), config=config
        )

    async def get_agents_by_type(self, agent_type: str) -> dict[str, Any]:
        """Get all agents of one type.

        Args:
            agent_type: Agent type, e.g. ``WebAgent``

        Returns:
            Paged result of agents.

        """
        config = RequestConfig(params={"_queryFilter": "true"}, api_version=API_VERSION)
        return await self._client.make_request(
            "GET", f"{self._agents_url()}/{agent_type}", config=config
        )

    async def get_agents(self, global_config: bool = False) -> dict[str, Any]:
        """Get all agents, or the global agent configuration."""
        config = RequestConfig(
            params={"_action": "nextdescendents"}, api_version=API_VERSION
        )
        return await self._client.make_request(
            "POST", self._agents_url(global_config), config=config
        )

    async def find_agent_by_id(self, agent_id: str) -> list[dict[str, Any]]:
        """Find agents of any type with the given id.

        Returns:
            Matching agents.

        """
        config = RequestConfig(
            params={"_queryFilter": f"_id eq '{agent_id}'"}, api_version=API_VERSION
        )
        data = await self._client.make_request(
            "GET", self._agents_url(), config=config
        )
        return data["result"]

    async def find_agent_by_type_and_id(
        self, agent_type: str, agent_id: str
    ) -> list[dict[str, Any]]:
        config = RequestConfig(
            params={"_queryFilter": f"_id eq '{agent_id}'"}, api_version=API_VERSION
        )
        data = await self._client.make_request(
            "GET", f"{self._agents_url()}/{agent_type}", config=config
        )
        return data["result"]

    async def get_agent_by_type_and_id(
        self, agent_type: str, agent_id: str, global_config: bool = False
    ) -> dict[str, Any]:
        """Get one agent.

        For global configuration pass the agent id as the type and an empty id.
        """
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "GET", self._agent_url(agent_type, agent_id, global_config), config=config
        )

    def _agent_url(self, agent_type: str, agent_id: str, global_config: bool) -> str:
        return f"{self._agents_url(global_config)}/{agent_type}/{agent_id}"

    async def put_agent_by_type_and_id(
        self,
        agent_type: str,
        agent_id: str,
        agent_data: dict[str, Any],
        global_config: bool = False,
    ) -> dict[str, Any]:
        """Create or update an agent.

        Encrypted attributes, ``_provider`` and ``_rev`` are stripped before
        sending.

        Args:
            agent_type: Agent type
            agent_id: Agent id
            agent_data: Agent object
            global_config: True to update the global agent configuration

        Returns:
            The stored agent.

        """
        clean = delete_deep_by_key(clone_deep(agent_data), "-encrypted")
        clean.pop("_provider", None)
        clean.pop("_rev", None)
        config = RequestConfig(json_data=clean, api_version=API_VERSION)
        return await self._client.make_request(
            "PUT", self._agent_url(agent_type, agent_id, global_config), config=config
        )

    async def delete_agent_by_type_and_id(
        self, agent_type: str, agent_id: str
    ) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "DELETE", f"{self._agents_url()}/{agent_type}/{agent_id}", config=config
        )

    async def get_agent_groups(self) -> dict[str, Any]:
        """Get all agent groups.

        Returns:
            Paged result of agent groups.

        """
        config = RequestConfig(
            params={"_action": "nextdescendents"}, api_version=API_VERSION
        )
        return await self._client.make_request(
            "POST", f"{self._agents_url()}/groups", config=config
        )

    async def get_agent_group_by_type_and_id(
        self, group_type: str, group_id: str
    ) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "GET", f"{self._agents_url()}/groups/{group_type}/{group_id}", config=config
        )

    async def put_agent_group_by_type_and_id(
        self, group_type: str, group_id: str, group_data: dict[str, Any]
    ) -> dict[str, Any]:
        clean = delete_deep_by_key(clone_deep(group_data), "-encrypted")
        clean.pop("_provider", None)
        clean.pop("_rev", None)
        config = RequestConfig(json_data=clean, api_version=API_VERSION)
        return await self._client.make_request(
            "PUT",
            f"{self._agents_url()}/groups/{group_type}/{group_id}",
            config=config,
        )

    async def delete_agent_group_by_type_and_id(
        self, group_type: str, group_id: str
    ) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "DELETE",
            f"{self._agents_url()}/groups/{group_type}/{group_id}",
            config=config,
        )
