"""Circle of trust operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .._base import BaseClient
from ..api._circles_of_trust import CirclesOfTrustApi
from ..exceptions import ConflictError, FrodoError
from ..models import CirclesOfTrustExport
from ..utils.console import (
    create_progress_indicator,
    debug_message,
    stop_progress_indicator,
    update_progress_indicator,
)
from ..utils.export_import import get_metadata
from ..utils.polling import gather_settled


def _provider_ids(cot: dict[str, Any]) -> set[str]:
    return {provider.split("|")[0] for provider in cot.get("trustedProviders", [])}


def _filter_by_providers(
    cots: list[dict[str, Any]], entity_providers: list[str] | None
) -> list[dict[str, Any]]:
    if not entity_providers:
        return cots
    wanted = set(entity_providers)
    return [cot for cot in cots if _provider_ids(cot) & wanted]


class CirclesOfTrustOps:
    """Manage SAML2 circles of trust."""

    def __init__(self, client: BaseClient) -> None:
        self._api = CirclesOfTrustApi(client)
        self._state = client.state

    def create_circles_of_trust_export_template(self) -> dict[str, Any]:
        return CirclesOfTrustExport(meta=get_metadata(self._state)).to_json_dict()

    async def read_circles_of_trust(
        self, entity_providers: list[str] | None = None
    ) -> list[dict[str, Any]]:
        """Read circles of trust.

        Args:
            entity_providers: Only return circles of trust trusting at least
                one of these entity ids

        Returns:
            Circles of trust sorted by ``_id``.

        """
        try:
            cots = (await self._api.get_circles_of_trust())["result"]
        except FrodoError as e:
            msg = "Error reading circles of trust"
            raise FrodoError(msg, e) from e
        cots = _filter_by_providers(cots, entity_providers)
        return sorted(cots, key=lambda cot: cot["_id"])

    async def read_circle_of_trust(self, cot_id: str) -> dict[str, Any]:
        try:
            return await self._api.get_circle_of_trust(cot_id)
        except FrodoError as e:
            msg = f"Error reading circle of trust {cot_id}"
            raise FrodoError(msg, e) from e

    async def create_circle_of_trust(
        self, cot_id: str | None = None, cot_data: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Create a circle of trust, updating it instead when it already exists.

        Args:
            cot_id: Circle of trust id; taken from ``cot_data`` when omitted
            cot_data: Circle of trust object

        Returns:
            The created or updated circle of trust.

        """
        cot_data = cot_data or {}
        cot_id = cot_id or cot_data.get("_id")
        debug_message(self._state, f"CirclesOfTrustOps.create_circle_of_trust: {cot_id}")
        try:
            return await self._api.create_circle_of_trust(cot_data, cot_id)
        except ConflictError:
            debug_message(
                self._state,
                f"CirclesOfTrustOps.create_circle_of_trust: {cot_id} exists, updating",
            )
        except FrodoError as e:
            msg = f"Error creating circle of trust {cot_id}"
            raise FrodoError(msg, e) from e
        return await self.update_circle_of_trust(cot_id, cot_data)

    async def update_circle_of_trust(
        self, cot_id: str, cot_data: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            return await self._api.update_circle_of_trust(cot_id, cot_data)
        except FrodoError as e:
            msg = f"Error updating circle of trust {cot_id}"
            raise FrodoError(msg, e) from e

    async def delete_circle_of_trust(self, cot_id: str) -> dict[str, Any]:
        try:
            return await self._api.delete_circle_of_trust(cot_id)
        except FrodoError as e:
            msg = f"Error deleting circle of trust {cot_id}"
            raise FrodoError(msg, e) from e

    async def delete_circles_of_trust(
        self, entity_providers: list[str] | None = None
    ) -> list[dict[str, Any]]:
        """Delete circles of trust concurrently.

        Raises:
            FrodoError: Aggregating every failed delete.

        """
        cots = await self.read_circles_of_trust(entity_providers)
        deleted, errors = await gather_settled(
            *(self.delete_circle_of_trust(cot["_id"]) for cot in cots)
        )
        if errors:
            msg = "Error deleting circles of trust"
            raise FrodoError(msg, errors)
        return deleted

    async def export_circle_of_trust(self, cot_id: str) -> dict[str, Any]:
        export_data = self.create_circles_of_trust_export_template()
        cot = await self.read_circle_of_trust(cot_id)
        cot.pop("_rev", None)
        export_data["saml"]["cot"][cot_id] = cot
        return export_data

    async def export_circles_of_trust(
        self, entity_providers: list[str] | None = None
    ) -> dict[str, Any]:
        """Export circles of trust.

        Returns:
            Envelope ``{meta, script, saml: {hosted, remote, metadata, cot}}``.

        """
        export_data = self.create_circles_of_trust_export_template()
        cots = await self.read_circles_of_trust(entity_providers)
        indicator = create_progress_indicator(
            self._state, len(cots), "Exporting circles of trust..."
        )
        for cot in cots:
            update_progress_indicator(
                self._state, indicator, f"Exporting circle of trust {cot['_id']}"
            )
            cot.pop("_rev", None)
            export_data["saml"]["cot"][cot["_id"]] = cot
        stop_progress_indicator(
            self._state, indicator, f"Exported {len(cots)} circles of trust.", "success"
        )
        return export_data

    async def import_circle_of_trust(
        self, cot_id: str, import_data: dict[str, Any]
    ) -> dict[str, Any]:
        cots = CirclesOfTrustExport.model_validate(import_data).saml.cot
        if cot_id not in cots:
            msg = f"Circle of trust {cot_id} not found in import data"
            raise FrodoError(msg)
        return await self.create_circle_of_trust(cot_id, cots[cot_id])

    async def import_first_circle_of_trust(self, import_data: dict[str, Any]) -> dict[str, Any]:
        cots = CirclesOfTrustExport.model_validate(import_data).saml.cot
        for cot_id, cot_data in cots.items():
            return await self.create_circle_of_trust(cot_id, cot_data)
        msg = "No circles of trust found in import data"
        raise FrodoError(msg)

    async def import_circles_of_trust(
        self, import_data: dict[str, Any], entity_providers: list[str] | None = None
    ) -> list[dict[str, Any]]:
        """Import circles of trust from an export envelope.

        Raises:
            FrodoError: Aggregating every failed import.

        """
        cots = CirclesOfTrustExport.model_validate(import_data).saml.cot
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for cot_id, cot_data in cots.items():
            if entity_providers and not _provider_ids(cot_data) & set(entity_providers):
                continue
            try:
                imported.append(await self.create_circle_of_trust(cot_id, cot_data))
            except FrodoError as e:
                errors.append(e)
        if errors:
            msg = "Error importing circles of trust"
            raise FrodoError(msg, errors)
        return imported
