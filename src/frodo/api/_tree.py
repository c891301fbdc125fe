"""Authentication tree and node API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient, RequestConfig
from ..utils.forgerock import get_current_host, get_current_realm_path
from ..utils.json_utils import clone_deep, delete_deep_by_key

API_VERSION = "protocol=2.1,resource=1.0"


class TreeApi:
    """Raw access to authentication trees and their nodes."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _base_url(self) -> str:
        return (
            f"{get_current_host(self._state)}/json"
            f"{get_current_realm_path(self._state)}"
            "/realm-config/authentication/authenticationtrees"
        )

    async def get_trees(self) -> dict[str, Any]:
        """Get all trees in the realm.

        Returns:
            Paged result of trees.

        """
        config = RequestConfig(params={"_queryFilter": "true"}, api_version=API_VERSION)
        return await self._client.make_request(
            "GET", f"{self._base_url()}/trees", config=config
        )

    async def get_tree(self, tree_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "GET", f"{self._base_url()}/trees/{tree_id}", config=config
        )

    async def put_tree(self, tree_id: str, tree_data: dict[str, Any]) -> dict[str, Any]:
        config = RequestConfig(json_data=tree_data, api_version=API_VERSION)
        return await self._client.make_request(
            "PUT", f"{self._base_url()}/trees/{tree_id}", config=config
        )

    async def delete_tree(self, tree_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/trees/{tree_id}", config=config
        )

    async def get_node(self, node_type: str, node_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "GET", f"{self._base_url()}/nodes/{node_type}/{node_id}", config=config
        )

    async def put_node(
        self, node_type: str, node_id: str, node_data: dict[str, Any]
    ) -> dict[str, Any]:
        """Create or update a node; encrypted attributes are stripped first."""
        clean = delete_deep_by_key(clone_deep(node_data), "-encrypted")
        config = RequestConfig(json_data=clean, api_version=API_VERSION)
        return await self._client.make_request(
            "PUT", f"{self._base_url()}/nodes/{node_type}/{node_id}", config=config
        )

    async def delete_node(self, node_type: str, node_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION)
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/nodes/{node_type}/{node_id}", config=config
        )
