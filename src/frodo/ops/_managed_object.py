"""IDM managed object operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient
from ..api._managed_object import ManagedObjectApi
from ..exceptions import FrodoError
from ..utils.console import debug_message


class ManagedObjectOps:
    """Create, read, query, update and delete managed objects."""

    def __init__(self, client: BaseClient) -> None:
        self._api = ManagedObjectApi(client)
        self._state = client.state

    async def create_managed_object(
        self, mo_type: str, mo_data: dict[str, Any], mo_id: str | None = None
    ) -> dict[str, Any]:
        """Create a managed object.

        With an id the object is put with ``If-None-Match: *`` and the call
        fails when it exists; without one the server assigns the id.

        """
        try:
            if mo_id:
                return await self._api.put_managed_object(mo_type, mo_id, mo_data, True)
            return await self._api.create_managed_object(mo_type, mo_data)
        except FrodoError as e:
            msg = f"Error creating {mo_type} object {mo_id or ''}".rstrip()
            raise FrodoError(msg, e) from e

    async def read_managed_object(
        self, mo_type: str, mo_id: str, fields: list[str] | None = None
    ) -> dict[str, Any]:
        try:
            return await self._api.get_managed_object(mo_type, mo_id, fields)
        except FrodoError as e:
            msg = f"Error reading {mo_type} object {mo_id}"
            raise FrodoError(msg, e) from e

    async def read_managed_objects(
        self, mo_type: str, fields: list[str] | None = None
    ) -> list[dict[str, Any]]:
        """Read every object of a type, following the paged results cookie.

        Args:
            mo_type: Managed object type
            fields: Fields to return; only ``_id`` when omitted

        Returns:
            All objects of the type.

        """
        objects: list[dict[str, Any]] = []
        cookie = None
        try:
            while True:
                page = await self._api.query_all_managed_objects_by_type(
                    mo_type, fields, cookie
                )
                objects.extend(page.get("result", []))
                cookie = page.get("pagedResultsCookie")
                debug_message(
                    self._state,
                    f"ManagedObjectOps.read_managed_objects: {len(objects)} {mo_type} objects",
                )
                if not cookie:
                    break
        except FrodoError as e:
            msg = f"Error reading {mo_type} objects"
            raise FrodoError(msg, e) from e
        return objects

    async def update_managed_object(
        self, mo_type: str, mo_id: str, mo_data: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            return await self._api.put_managed_object(mo_type, mo_id, mo_data, False)
        except FrodoError as e:
            msg = f"Error updating {mo_type} object {mo_id}"
            raise FrodoError(msg, e) from e

    async def patch_managed_object(
        self, mo_type: str, mo_id: str, operations: list[dict[str, Any]]
    ) -> dict[str, Any]:
        try:
            return await self._api.patch_managed_object(mo_type, mo_id, operations)
        except FrodoError as e:
            msg = f"Error patching {mo_type} object {mo_id}"
            raise FrodoError(msg, e) from e

    async def delete_managed_object(self, mo_type: str, mo_id: str) -> dict[str, Any]:
        try:
            return await self._api.delete_managed_object(mo_type, mo_id)
        except FrodoError as e:
            msg = f"Error deleting {mo_type} object {mo_id}"
            raise FrodoError(msg, e) from e

    async def query_managed_objects(
        self, mo_type: str, query_filter: str, fields: list[str] | None = None
    ) -> list[dict[str, Any]]:
        try:
            return (
                await self._api.query_managed_objects(mo_type, query_filter, fields)
            )["result"]
        except FrodoError as e:
            msg = f"Error querying {mo_type} objects"
            raise FrodoError(msg, e) from e

    async def resolve_user_name(self, mo_type: str, mo_id: str) -> str:
        """Return the object's ``userName``, or the id when it cannot be read."""
        try:
            managed_object = await self._api.get_managed_object(mo_type, mo_id, ["userName"])
        except FrodoError as e:
            debug_message(self._state, f"ManagedObjectOps.resolve_user_name: {e.message}")
            return mo_id
        return managed_object.get("userName", mo_id)

    async def resolve_full_name(self, mo_type: str, mo_id: str) -> str:
        """Return ``"<givenName> <sn>"``, or the id when it cannot be read."""
        try:
            managed_object = await self._api.get_managed_object(
                mo_type, mo_id, ["givenName", "sn"]
            )
        except FrodoError as e:
            debug_message(self._state, f"ManagedObjectOps.resolve_full_name: {e.message}")
            return mo_id
        return f"{managed_object.get('givenName')} {managed_object.get('sn')}"
