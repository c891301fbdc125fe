"""IDM managed object API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient, RequestConfig
from ..utils.forgerock import get_idm_base_url

PAGE_SIZE = 10000


class ManagedObjectApi:
    """Raw access to ``/openidm/managed``."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _type_url(self, mo_type: str) -> str:
        return f"{get_idm_base_url(self._state)}/managed/{mo_type}"

    async def get_managed_object(
        self, mo_type: str, mo_id: str, fields: list[str] | None = None
    ) -> dict[str, Any]:
        config = RequestConfig(
            params={"_fields": ",".join(fields or ["*"])}, api="idm"
        )
        return await self._client.make_request(
            "GET", f"{self._type_url(mo_type)}/{mo_id}", config=config
        )

    async def create_managed_object(
        self, mo_type: str, mo_data: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a managed object with a server-generated id."""
        config = RequestConfig(json_data=mo_data, params={"_action": "create"}, api="idm")
        return await self._client.make_request(
            "POST", self._type_url(mo_type), config=config
        )

    async def put_managed_object(
        self,
        mo_type: str,
        mo_id: str,
        mo_data: dict[str, Any],
        fail_if_exists: bool = True,
    ) -> dict[str, Any]:
        """Create or replace a managed object with a client-assigned id.

        Args:
            mo_type: Managed object type, e.g. ``alpha_user``
            mo_id: Object id
            mo_data: Object body
            fail_if_exists: Send ``If-None-Match: *`` so an existing object is not replaced

        Returns:
            The stored object.

        """
        config = RequestConfig(
            json_data=mo_data,
            headers={"If-None-Match": "*"} if fail_if_exists else None,
            api="idm",
        )
        return await self._client.make_request(
            "PUT", f"{self._type_url(mo_type)}/{mo_id}", config=config
        )

    async def patch_managed_object(
        self, mo_type: str, mo_id: str, operations: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Apply CREST patch operations (``add``, ``remove``, ``replace``, ...)."""
        config = RequestConfig(json_data=operations, api="idm")
        return await self._client.make_request(
            "PATCH", f"{self._type_url(mo_type)}/{mo_id}", config=config
        )

    async def query_managed_objects(
        self, mo_type: str, query_filter: str, fields: list[str] | None = None
    ) -> dict[str, Any]:
        config = RequestConfig(
            params={
                "_queryFilter": query_filter,
                "_pageSize": PAGE_SIZE,
                "_fields": ",".join(fields or ["*"]),
            },
            api="idm",
        )
        return await self._client.make_request(
            "GET", self._type_url(mo_type), config=config
        )

    async def query_all_managed_objects_by_type(
        self,
        mo_type: str,
        fields: list[str] | None = None,
        page_cookie: str | None = None,
    ) -> dict[str, Any]:
        """Get one page of all objects of a type.

        Args:
            mo_type: Managed object type
            fields: Fields to return; only ``_id`` when empty
            page_cookie: ``pagedResultsCookie`` from the previous page

        Returns:
            Paged result with ``result`` and ``pagedResultsCookie``.

        """
        params: dict[str, Any] = {
            "_queryFilter": "true",
            "_pageSize": PAGE_SIZE,
            "_fields": ",".join(fields) if fields else "_id",
        }
        if page_cookie:
            params["_pagedResultsCookie"] = page_cookie
        config = RequestConfig(params=params, api="idm")
        return await self._client.make_request(
            "GET", self._type_url(mo_type), config=config
        )

    async def delete_managed_object(self, mo_type: str, mo_id: str) -> dict[str, Any]:
        config = RequestConfig(api="idm")
        return await self._client.make_request(
            "DELETE", f"{self._type_url(mo_type)}/{mo_id}", config=config
        )
