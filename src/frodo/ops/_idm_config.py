"""IDM configuration entity operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from .._base import BaseClient
from ..api._idm_config import IdmConfigApi
from ..constants import CLOUD_DEPLOYMENT_TYPE_KEY
from ..exceptions import HTTP_CLIENT_ERROR_CODE, FrodoError, NotFoundError
from ..models import ConfigEntityExport
from ..utils.console import (
    create_progress_indicator,
    debug_message,
    print_error,
    stop_progress_indicator,
    update_progress_indicator,
)
from ..utils.export_import import get_metadata

# Cloud tenants refuse writes to these entities.
PROTECTED_CLOUD_ENTITIES = (
    "emailTemplate/frEmailUpdated",
    "emailTemplate/frForgotUsername",
    "emailTemplate/frOnboarding",
    "emailTemplate/frPasswordUpdated",
    "emailTemplate/frProfileUpdated",
    "emailTemplate/frResetPassword",
    "emailTemplate/frUsernameUpdated",
)

# Listed as stubs but not readable on every deployment.
UNAVAILABLE_ENTITIES = (
    "script",
    "notificationFactory",
    "apiVersion",
    "metrics",
    "repo.init",
    "endpoint/validateQueryFilter",
    "endpoint/oauthproxy",
    "external.rest",
    "scheduler",
    "org.apache.felix.fileinstall/openidm",
    "cluster",
    "endpoint/mappingDetails",
    "fieldPolicy/teammember",
)

NOT_AVAILABLE_MESSAGE = (
    "This operation is not available in PingOne Advanced Identity Cloud."
)

EnvReplaceParams = list[tuple[str, str]]


def substitute_env_params(
    entity: dict[str, Any], env_replace_params: EnvReplaceParams | None
) -> dict[str, Any]:
    """Replace literal values with ``${KEY}`` placeholders."""
    if not env_replace_params:
        return entity
    text = json.dumps(entity)
    for key, value in env_replace_params:
        text = text.replace(value, f"${{{key}}}")
    return json.loads(text)


def unsubstitute_env_params(
    entity: dict[str, Any], env_replace_params: EnvReplaceParams | None
) -> dict[str, Any]:
    """Replace ``${KEY}`` placeholders with their literal values."""
    if not env_replace_params:
        return entity
    text = json.dumps(entity)
    for key, value in env_replace_params:
        text = text.replace(f"${{{key}}}", value)
    return json.loads(text)


def _unavailable(entity_id: str, error: FrodoError) -> bool:
    if error.http_status == 403 and error.http_message == NOT_AVAILABLE_MESSAGE:
        return True
    return error.http_status == 404 and entity_id in UNAVAILABLE_ENTITIES


class IdmConfigOps:
    """Read, export, import and delete IDM configuration entities."""

    def __init__(self, client: BaseClient) -> None:
        self._api = IdmConfigApi(client)
        self._state = client.state

    def create_config_entity_export_template(self) -> dict[str, Any]:
        return ConfigEntityExport(meta=get_metadata(self._state)).to_json_dict()

    async def read_config_entity_stubs(self) -> list[dict[str, Any]]:
        try:
            return (await self._api.get_config_stubs())["configurations"]
        except FrodoError as e:
            msg = "Error reading config entity stubs"
            raise FrodoError(msg, e) from e

    async def read_config_entity_types(self) -> list[str]:
        """Read the distinct entity types, the id part before the first ``/``."""
        types: list[str] = []
        for stub in await self.read_config_entity_stubs():
            entity_type = stub["_id"].split("/")[0]
            if entity_type not in types:
                types.append(entity_type)
        return types

    async def read_config_entities(self) -> list[dict[str, Any]]:
        try:
            return (await self._api.get_config_entities())["result"]
        except FrodoError as e:
            msg = "Error reading config entities"
            raise FrodoError(msg, e) from e

    async def read_config_entities_by_type(self, entity_type: str) -> list[dict[str, Any]]:
        try:
            return (await self._api.get_config_entities_by_type(entity_type))["result"]
        except FrodoError as e:
            msg = "Error reading config entities by type"
            raise FrodoError(msg, e) from e

    async def read_config_entity(self, entity_id: str) -> dict[str, Any]:
        try:
            return await self._api.get_config_entity(entity_id)
        except FrodoError as e:
            msg = f"Error reading config entity {entity_id}"
            raise FrodoError(msg, e) from e

    async def export_config_entity(
        self, entity_id: str, env_replace_params: EnvReplaceParams | None = None
    ) -> dict[str, Any]:
        export_data = self.create_config_entity_export_template()
        entity = await self.read_config_entity(entity_id)
        export_data["idm"][entity["_id"]] = substitute_env_params(entity, env_replace_params)
        return export_data

    async def _read_exportable(
        self, entity_id: str, indicator: str | None = None
    ) -> dict[str, Any] | None:
        try:
            entity = await self.read_config_entity(entity_id)
        except FrodoError as e:
            if not _unavailable(entity_id, e):
                print_error(self._state, e, f"Error getting config entity {entity_id}: {e}")
            entity = None
        if indicator:
            update_progress_indicator(
                self._state, indicator, f"Exporting config entity {entity_id}"
            )
        return entity

    async def export_config_entities(
        self,
        entities_to_export: list[str] | None = None,
        env_replace_params: EnvReplaceParams | None = None,
    ) -> dict[str, Any]:
        """Export configuration entities.

        Entities the deployment does not expose are skipped. Other read
        failures are reported and skipped.

        Args:
            entities_to_export: Only export these entity ids
            env_replace_params: ``(key, value)`` pairs; each literal value is
                replaced with ``${key}`` in the export

        Returns:
            Envelope ``{meta, idm: {id: entity}}``.

        """
        debug_message(self._state, "IdmConfigOps.export_config_entities: start")
        configurations = await self.read_config_entities()
        if entities_to_export:
            configurations = [c for c in configurations if c["_id"] in entities_to_export]
        indicator = create_progress_indicator(
            self._state, len(configurations), "Exporting config entities..."
        )
        entities = await asyncio.gather(
            *(self._read_exportable(c["_id"], indicator) for c in configurations)
        )
        export_data = self.create_config_entity_export_template()
        for entity in entities:
            if entity:
                export_data["idm"][entity["_id"]] = substitute_env_params(
                    entity, env_replace_params
                )
        stop_progress_indicator(
            self._state,
            indicator,
            f"Exported {len(export_data['idm'])} config entities.",
            "success",
        )
        debug_message(self._state, "IdmConfigOps.export_config_entities: end")
        return export_data

    async def create_config_entity(
        self, entity_id: str, entity_data: dict[str, Any], wait: bool = False
    ) -> dict[str, Any]:
        """Create a configuration entity.

        Raises:
            FrodoError: If the entity already exists or creation fails.

        """
        try:
            await self._api.get_config_entity(entity_id)
        except NotFoundError:
            pass
        else:
            msg = f"Config entity {entity_id} already exists!"
            raise FrodoError(msg)
        try:
            return await self._api.put_config_entity(entity_id, entity_data, wait)
        except FrodoError as e:
            msg = f"Error creating config entity {entity_id}"
            raise FrodoError(msg, e) from e

    async def update_config_entity(
        self, entity_id: str, entity_data: dict[str, Any], wait: bool = False
    ) -> dict[str, Any]:
        try:
            return await self._api.put_config_entity(entity_id, entity_data, wait)
        except FrodoError as e:
            msg = f"Error updating config entity {entity_id}"
            raise FrodoError(msg, e) from e

    def _protected(self, entity_id: str, error: FrodoError) -> bool:
        return (
            self._state.get_deployment_type() == CLOUD_DEPLOYMENT_TYPE_KEY
            and entity_id in PROTECTED_CLOUD_ENTITIES
            and error.http_status == 403
            and error.http_code == HTTP_CLIENT_ERROR_CODE
        )

    async def import_config_entities(
        self,
        import_data: dict[str, Any],
        entity_id: str | None = None,
        entities_to_import: list[str] | None = None,
        env_replace_params: EnvReplaceParams | None = None,
    ) -> list[dict[str, Any]]:
        """Import configuration entities.

        Writes to entities a cloud tenant protects are tolerated.

        Args:
            import_data: Envelope ``{meta, idm: {id: entity}}``
            entity_id: Only import this entity
            entities_to_import: Only import these entity ids
            env_replace_params: ``(key, value)`` pairs; ``${key}`` placeholders
                are replaced with the value before import

        Returns:
            The stored entities.

        Raises:
            FrodoError: Aggregating every failed import.

        """
        entities = ConfigEntityExport.model_validate(import_data).idm
        ids = list(entities)
        if entities_to_import:
            ids = [i for i in ids if i in entities_to_import]
        if entity_id:
            ids = [i for i in ids if i == entity_id]
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for current_id in ids:
            debug_message(self._state, f"IdmConfigOps.import_config_entities: {current_id}")
            entity_data = unsubstitute_env_params(entities[current_id], env_replace_params)
            try:
                imported.append(await self.update_config_entity(current_id, entity_data))
            except FrodoError as e:
                if not self._protected(current_id, e):
                    errors.append(e)
        if errors:
            msg = "Error importing config entities"
            raise FrodoError(msg, errors)
        return imported

    async def delete_config_entity(self, entity_id: str) -> dict[str, Any]:
        try:
            return await self._api.delete_config_entity(entity_id)
        except FrodoError as e:
            msg = f"Error deleting config entity {entity_id}"
            raise FrodoError(msg, e) from e

    async def _delete_all(
        self, entities: list[dict[str, Any]], message: str
    ) -> list[dict[str, Any]]:
        deleted: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for entity in entities:
            try:
                deleted.append(await self._api.delete_config_entity(entity["_id"]))
            except FrodoError as e:
                errors.append(e)
        if errors:
            raise FrodoError(message, errors)
        return deleted

    async def delete_config_entities(self) -> list[dict[str, Any]]:
        """Delete every configuration entity listed by the stubs.

        Raises:
            FrodoError: Aggregating every failed delete.

        """
        stubs = await self.read_config_entity_stubs()
        return await self._delete_all(stubs, "Error deleting config entities")

    async def delete_config_entities_by_type(self, entity_type: str) -> list[dict[str, Any]]:
        entities = await self.read_config_entities_by_type(entity_type)
        return await self._delete_all(entities, "Error deleting config entities by type")
