"""Script operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import uuid
from typing import Any

from .._base import BaseClient
from ..api._script import ScriptApi
from ..exceptions import ConflictError, FrodoError, NotFoundError
from ..models import ScriptExport
from ..utils.console import (
    create_progress_indicator,
    debug_message,
    print_message,
    stop_progress_indicator,
    update_progress_indicator,
)
from ..utils.export_import import (
    convert_base64_text_to_array,
    convert_text_array_to_base64,
    get_metadata,
)
from ..utils.forgerock import apply_name_collision_policy
from ..utils.json_utils import clone_deep

MAX_RENAME_ATTEMPTS = 100


def _single_script(scripts: list[dict[str, Any]], script_name: str) -> dict[str, Any]:
    if not scripts:
        msg = f"Script '{script_name}' not found"
        raise FrodoError(msg)
    if len(scripts) > 1:
        msg = f"{len(scripts)} scripts '{script_name}' found"
        raise FrodoError(msg)
    return scripts[0]


class ScriptOps:
    """Manage AM scripts."""

    def __init__(self, client: BaseClient) -> None:
        self._api = ScriptApi(client)
        self._state = client.state

    def create_script_export_template(self) -> dict[str, Any]:
        return ScriptExport(meta=get_metadata(self._state)).to_json_dict()

    async def read_scripts(self) -> list[dict[str, Any]]:
        try:
            scripts = (await self._api.get_scripts())["result"]
        except FrodoError as e:
            msg = "Error reading scripts"
            raise FrodoError(msg, e) from e
        return sorted(scripts, key=lambda script: script["name"])

    async def read_script(self, script_id: str) -> dict[str, Any]:
        try:
            return await self._api.get_script(script_id)
        except FrodoError as e:
            msg = f"Error reading script {script_id}"
            raise FrodoError(msg, e) from e

    async def read_script_by_name(self, script_name: str) -> dict[str, Any]:
        """Read the one script with this name.

        Raises:
            FrodoError: If no script or more than one script has this name.

        """
        try:
            scripts = (await self._api.get_script_by_name(script_name))["result"]
            return _single_script(scripts, script_name)
        except FrodoError as e:
            msg = f"Error reading script {script_name}"
            raise FrodoError(msg, e) from e

    async def create_script(
        self, script_id: str, script_name: str, script_data: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a script.

        Raises:
            FrodoError: If a script with this id already exists.

        """
        try:
            await self._api.get_script(script_id)
        except NotFoundError:
            pass
        else:
            msg = f"Script with id '{script_id}' already exists."
            raise FrodoError(msg)
        data = dict(script_data)
        data["name"] = script_name
        return await self.put_script(script_id, data)

    async def update_script(
        self, script_id: str, script_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.put_script(script_id, script_data)

    async def put_script(
        self, script_id: str, script_data: dict[str, Any]
    ) -> dict[str, Any]:
        """Create or update a script, renaming it when its name is taken.

        A body given as a list of lines is encoded to base64 first. When the
        server rejects the name with a conflict, the name collision policy
        turns ``name`` into ``name - imported (n)`` and the put is retried.

        Args:
            script_id: Script id
            script_data: Script object

        Returns:
            The stored script.

        """
        data = clone_deep(script_data)
        if isinstance(data.get("script"), list):
            data["script"] = convert_text_array_to_base64(data["script"])
        for _ in range(MAX_RENAME_ATTEMPTS):
            try:
                return await self._api.put_script(script_id, data)
            except ConflictError:
                new_name = apply_name_collision_policy(data["name"])
                print_message(
                    self._state,
                    f"Script with name {data['name']} already exists, "
                    f"trying to save script as {new_name}",
                    "warn",
                )
                data["name"] = new_name
            except FrodoError as e:
                msg = f"Error putting script {script_id}"
                raise FrodoError(msg, e) from e
        msg = f"Error putting script {script_id}: no free name for {script_data.get('name')}"
        raise FrodoError(msg)

    async def delete_script(self, script_id: str) -> dict[str, Any]:
        try:
            return await self._api.delete_script(script_id)
        except FrodoError as e:
            msg = f"Error deleting script {script_id}"
            raise FrodoError(msg, e) from e

    async def delete_script_by_name(self, script_name: str) -> dict[str, Any]:
        try:
            scripts = (await self._api.get_script_by_name(script_name))["result"]
        except FrodoError as e:
            msg = f"Error deleting script {script_name}"
            raise FrodoError(msg, e) from e
        if not scripts:
            msg = f"Script with name {script_name} does not exist."
            raise FrodoError(msg)
        return await self.delete_script(scripts[0]["_id"])

    async def delete_scripts(self) -> list[dict[str, Any]]:
        """Delete every script except the default ones, which cannot be deleted.

        Raises:
            FrodoError: Aggregating every failed delete.

        """
        deleted: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for script in await self.read_scripts():
            if script.get("default"):
                continue
            try:
                deleted.append(await self._api.delete_script(script["_id"]))
            except FrodoError as e:
                errors.append(e)
        if errors:
            msg = "Error deleting scripts"
            raise FrodoError(msg, errors)
        return deleted

    def _to_export(self, script: dict[str, Any], use_string_arrays: bool) -> dict[str, Any]:
        script = dict(script)
        script.pop("_rev", None)
        if use_string_arrays and isinstance(script.get("script"), str):
            script["script"] = convert_base64_text_to_array(script["script"])
        return script

    async def export_script(
        self, script_id: str, use_string_arrays: bool = True
    ) -> dict[str, Any]:
        export_data = self.create_script_export_template()
        script = await self.read_script(script_id)
        export_data["script"][script_id] = self._to_export(script, use_string_arrays)
        return export_data

    async def export_script_by_name(
        self, script_name: str, use_string_arrays: bool = True
    ) -> dict[str, Any]:
        export_data = self.create_script_export_template()
        script = await self.read_script_by_name(script_name)
        export_data["script"][script["_id"]] = self._to_export(script, use_string_arrays)
        return export_data

    async def export_scripts(
        self, include_default: bool = False, use_string_arrays: bool = True
    ) -> dict[str, Any]:
        """Export scripts.

        Args:
            include_default: Also export the default scripts
            use_string_arrays: Export bodies as lists of lines instead of base64

        Returns:
            Envelope ``{meta, script: {id: script}}``.

        """
        debug_message(self._state, "ScriptOps.export_scripts: start")
        export_data = self.create_script_export_template()
        scripts = [
            script
            for script in await self.read_scripts()
            if include_default or not script.get("default")
        ]
        indicator = create_progress_indicator(
            self._state, len(scripts), "Exporting scripts..."
        )
        for script in scripts:
            update_progress_indicator(self._state, indicator, f"Exporting script {script['name']}")
            export_data["script"][script["_id"]] = self._to_export(script, use_string_arrays)
        stop_progress_indicator(
            self._state, indicator, f"Exported {len(scripts)} scripts.", "success"
        )
        debug_message(self._state, "ScriptOps.export_scripts: end")
        return export_data

    async def import_scripts(
        self,
        script_name: str | None,
        import_data: dict[str, Any],
        re_uuid: bool = False,
    ) -> list[dict[str, Any]]:
        """Import scripts from an export envelope.

        Args:
            script_name: Import only the first script, saved under this name
            import_data: Export envelope
            re_uuid: Assign new ids instead of the exported ones

        Returns:
            The stored scripts.

        Raises:
            FrodoError: Aggregating every failed import.

        """
        scripts = ScriptExport.model_validate(import_data).script
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for existing_id, script_data in scripts.items():
            data = clone_deep(script_data)
            script_id = existing_id
            if re_uuid:
                script_id = str(uuid.uuid4())
                data["_id"] = script_id
            if script_name:
                data["name"] = script_name
            debug_message(self._state, f"ScriptOps.import_scripts: {data.get('name')}")
            try:
                imported.append(await self.put_script(script_id, data))
            except FrodoError as e:
                errors.append(e)
            if script_name:
                break
        if errors:
            msg = "Error importing scripts"
            raise FrodoError(msg, errors)
        return imported
