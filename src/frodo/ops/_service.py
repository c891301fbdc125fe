"""AM service operations for Frodo.

A full service is the service object plus its ``nextDescendents``, the
child configuration objects that live under the service endpoint.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio
from typing import Any

from .._base import BaseClient
from ..api._service import ServiceApi
from ..exceptions import FrodoError
from ..models import ServiceExport
from ..utils.console import (
    create_progress_indicator,
    debug_message,
    print_error,
    print_message,
    stop_progress_indicator,
    update_progress_indicator,
)
from ..utils.export_import import get_metadata
from ..utils.json_utils import clone_deep
from ..utils.polling import gather_settled

NOT_AVAILABLE_MESSAGE = "This operation is not available in ForgeRock Identity Cloud."


def _not_available(error: FrodoError) -> bool:
    return error.http_status == 403 and error.http_message == NOT_AVAILABLE_MESSAGE


class ServiceOps:
    """Read, export, import and delete AM services with their descendents."""

    def __init__(self, client: BaseClient) -> None:
        self._api = ServiceApi(client)
        self._state = client.state

    def create_service_export_template(self) -> dict[str, Any]:
        return ServiceExport(meta=get_metadata(self._state)).to_json_dict()

    def _location(self, global_config: bool) -> str:
        return "global" if global_config else self._state.get_realm()

    async def get_list_of_services(self, global_config: bool = False) -> list[dict[str, Any]]:
        try:
            return (await self._api.get_list_of_services(global_config))["result"]
        except FrodoError as e:
            msg = "Error reading list of services"
            raise FrodoError(msg, e) from e

    async def _get_full_service(
        self, service_id: str, global_config: bool
    ) -> dict[str, Any]:
        service, descendents = await asyncio.gather(
            self._api.get_service(service_id, global_config),
            self._api.get_service_descendents(service_id, global_config),
        )
        service["nextDescendents"] = descendents
        return service

    async def get_full_services(self, global_config: bool = False) -> list[dict[str, Any]]:
        """Read every service together with its descendents.

        Services the platform refuses to expose are skipped silently, other
        failures are reported and skipped.

        Args:
            global_config: Read global services instead of realm services

        Returns:
            Full services.

        """
        debug_message(
            self._state, f"ServiceOps.get_full_services: start, global={global_config}"
        )
        service_list = await self.get_list_of_services(global_config)
        results = await asyncio.gather(
            *(
                self._get_full_service(item["_id"], global_config)
                for item in service_list
            ),
            return_exceptions=True,
        )
        services: list[dict[str, Any]] = []
        for item, result in zip(service_list, results):
            if isinstance(result, FrodoError):
                if not _not_available(result):
                    print_message(
                        self._state,
                        f"Unable to retrieve data for {item['_id']} with error: "
                        f"{result.http_message or result.message}",
                        "error",
                    )
                continue
            if isinstance(result, BaseException):
                raise result
            services.append(result)
        debug_message(self._state, "ServiceOps.get_full_services: end")
        return services

    async def delete_full_service(self, service_id: str, global_config: bool = False) -> None:
        """Delete a service after deleting all of its descendents."""
        try:
            descendents = await self._api.get_service_descendents(service_id, global_config)
            await asyncio.gather(
                *(
                    self._api.delete_service_next_descendent(
                        service_id,
                        descendent["_type"]["_id"],
                        descendent["_id"],
                        global_config,
                    )
                    for descendent in descendents
                )
            )
            await self._api.delete_service(service_id, global_config)
        except FrodoError as e:
            msg = f"Error deleting service {service_id}"
            raise FrodoError(msg, e) from e

    async def delete_full_services(self, global_config: bool = False) -> None:
        """Delete every service.

        Raises:
            FrodoError: Aggregating every failed delete other than services
                the platform does not allow to be deleted.

        """
        service_list = await self.get_list_of_services(global_config)
        _, rejected = await gather_settled(
            *(
                self.delete_full_service(item["_id"], global_config)
                for item in service_list
            )
        )
        errors = [
            error
            for error in rejected
            if not (isinstance(error, FrodoError) and _not_available(error))
        ]
        if errors:
            msg = "Error deleting services"
            raise FrodoError(msg, errors)

    async def export_service(
        self, service_id: str, global_config: bool = False
    ) -> dict[str, Any]:
        export_data = self.create_service_export_template()
        try:
            service = await self._get_full_service(service_id, global_config)
        except FrodoError as e:
            msg = f"Error exporting service {service_id}"
            raise FrodoError(msg, e) from e
        service["location"] = self._location(global_config)
        export_data["service"][service_id] = service
        return export_data

    async def export_services(self, global_config: bool = False) -> dict[str, Any]:
        """Export every service with its descendents.

        Each service is tagged with ``location``, either ``global`` or the
        current realm, so that imports can route it back.

        Returns:
            Envelope ``{meta, service: {type id: service}}``.

        """
        export_data = self.create_service_export_template()
        services = await self.get_full_services(global_config)
        indicator = create_progress_indicator(
            self._state, len(services), "Exporting services..."
        )
        for service in services:
            update_progress_indicator(self._state, indicator, f"Exporting service {service['_id']}")
            service["location"] = self._location(global_config)
            export_data["service"][service["_type"]["_id"]] = service
        stop_progress_indicator(
            self._state, indicator, f"Exported {len(services)} services.", "success"
        )
        return export_data

    async def _put_full_service(
        self,
        service_id: str,
        full_service: dict[str, Any],
        clean: bool,
        global_config: bool,
    ) -> dict[str, Any]:
        data = clone_deep(full_service)
        descendents = data.pop("nextDescendents", [])
        for key in ("_rev", "enabled", "location"):
            data.pop(key, None)
        if clean:
            try:
                await self.delete_full_service(service_id, global_config)
            except FrodoError as e:
                if e.http_status != 404:
                    print_error(
                        self._state, e, f"Error deleting service '{service_id}' before import: {e}"
                    )
        result = await self._api.put_service(service_id, data, global_config)
        _, errors = await gather_settled(
            *(
                self._api.put_service_next_descendent(
                    service_id,
                    descendent["_type"]["_id"],
                    descendent["_id"],
                    descendent,
                    global_config,
                )
                for descendent in descendents
            )
        )
        if errors:
            msg = f"Error putting descendents of service {service_id}"
            raise FrodoError(msg, errors)
        return result

    async def _import_one(
        self,
        service_id: str,
        service_data: dict[str, Any],
        clean: bool,
        global_config: bool,
        realm_config: bool,
    ) -> dict[str, Any] | None:
        location = service_data.get("location")
        result = None
        if global_config or (not realm_config and location == "global"):
            result = await self._put_full_service(service_id, service_data, clean, True)
        if realm_config or (not global_config and location == self._state.get_realm()):
            result = await self._put_full_service(service_id, service_data, clean, False)
        return result

    async def import_service(
        self,
        service_id: str,
        import_data: dict[str, Any],
        clean: bool = False,
        global_config: bool = False,
        realm_config: bool = False,
    ) -> dict[str, Any] | None:
        """Import one service.

        Without ``global_config`` or ``realm_config`` the service goes where
        its ``location`` says: global, or the current realm when it matches.

        Args:
            service_id: Service id in the import data
            import_data: Export envelope
            clean: Delete the existing service and descendents first
            global_config: Force import as a global service
            realm_config: Force import into the current realm

        Returns:
            The stored service, or None when its location matched neither target.

        """
        services = ServiceExport.model_validate(import_data).service
        if service_id not in services:
            msg = f"Service {service_id} not found in import data"
            raise FrodoError(msg)
        try:
            return await self._import_one(
                service_id, services[service_id], clean, global_config, realm_config
            )
        except FrodoError as e:
            msg = f"Error importing service {service_id}"
            raise FrodoError(msg, e) from e

    async def import_services(
        self,
        import_data: dict[str, Any],
        clean: bool = False,
        global_config: bool = False,
        realm_config: bool = False,
    ) -> list[dict[str, Any]]:
        """Import every service in an export envelope.

        Raises:
            FrodoError: Aggregating every failed import.

        """
        debug_message(self._state, "ServiceOps.import_services: start")
        services = ServiceExport.model_validate(import_data).service
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for service_id, service_data in services.items():
            try:
                result = await self._import_one(
                    service_id, service_data, clean, global_config, realm_config
                )
            except FrodoError as e:
                errors.append(FrodoError(f"Error importing service {service_id}", e))
                continue
            if result:
                imported.append(result)
            print_message(self._state, f"Imported: {service_id}", "info")
        if errors:
            msg = "Error importing services"
            raise FrodoError(msg, errors)
        debug_message(self._state, "ServiceOps.import_services: end")
        return imported
