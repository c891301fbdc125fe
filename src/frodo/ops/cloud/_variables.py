"""Environment variable operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from ..._base import BaseClient
from ...api.cloud._variables import VariableExpressionType, VariablesApi
from ...exceptions import FrodoError, NotFoundError
from ...models import VariablesExport
from ...utils.base64_utils import encode, safe_decode
from ...utils.console import debug_message
from ...utils.export_import import get_metadata


class VariablesOps:
    """Manage environment variables (ESVs)."""

    def __init__(self, client: BaseClient) -> None:
        self._api = VariablesApi(client)
        self._state = client.state

    def create_variables_export_template(self) -> dict[str, Any]:
        return VariablesExport(meta=get_metadata(self._state)).to_json_dict()

    async def read_variables(self) -> list[dict[str, Any]]:
        try:
            return (await self._api.get_variables())["result"]
        except FrodoError as e:
            msg = "Error reading variables"
            raise FrodoError(msg, e) from e

    async def read_variable(self, variable_id: str) -> dict[str, Any]:
        try:
            return await self._api.get_variable(variable_id)
        except FrodoError as e:
            msg = f"Error reading variable {variable_id}"
            raise FrodoError(msg, e) from e

    async def create_variable(
        self,
        variable_id: str,
        value: str,
        description: str = "",
        expression_type: VariableExpressionType = "string",
    ) -> dict[str, Any]:
        """Create a variable that does not exist yet.

        Args:
            variable_id: Variable id
            value: Clear text value
            description: Variable description
            expression_type: Type the value is coerced to in expressions

        Returns:
            The created variable.

        Raises:
            FrodoError: If the variable already exists or creation fails.

        """
        try:
            await self._api.get_variable(variable_id)
        except NotFoundError:
            pass
        else:
            msg = f"Variable with id '{variable_id}' already exists."
            raise FrodoError(msg)
        try:
            return await self._api.put_variable(
                variable_id, encode(value), description, expression_type
            )
        except FrodoError as e:
            msg = f"Error creating variable {variable_id}"
            raise FrodoError(msg, e) from e

    async def update_variable(
        self,
        variable_id: str,
        value: str,
        description: str = "",
        expression_type: VariableExpressionType = "string",
    ) -> dict[str, Any]:
        """Create or update a variable with a clear text value."""
        try:
            return await self._api.put_variable(
                variable_id, encode(value), description, expression_type
            )
        except FrodoError as e:
            msg = f"Error updating variable {variable_id}"
            raise FrodoError(msg, e) from e

    async def update_variable_description(self, variable_id: str, description: str) -> Any:
        try:
            return await self._api.set_variable_description(variable_id, description)
        except FrodoError as e:
            msg = f"Error updating description of variable {variable_id}"
            raise FrodoError(msg, e) from e

    async def delete_variable(self, variable_id: str) -> dict[str, Any]:
        try:
            return await self._api.delete_variable(variable_id)
        except FrodoError as e:
            msg = f"Error deleting variable {variable_id}"
            raise FrodoError(msg, e) from e

    async def export_variable(self, variable_id: str) -> dict[str, Any]:
        export_data = self.create_variables_export_template()
        variable = await self.read_variable(variable_id)
        variable["value"] = safe_decode(variable.get("valueBase64", ""))
        export_data["variables"][variable["_id"]] = variable
        return export_data

    async def export_variables(self) -> dict[str, Any]:
        """Export every variable, adding the decoded ``value`` next to ``valueBase64``.

        Returns:
            Envelope ``{meta, variables: {id: variable}}``.

        """
        debug_message(self._state, "VariablesOps.export_variables: start")
        export_data = self.create_variables_export_template()
        for variable in await self.read_variables():
            variable["value"] = safe_decode(variable.get("valueBase64", ""))
            export_data["variables"][variable["_id"]] = variable
        debug_message(self._state, "VariablesOps.export_variables: end")
        return export_data

    async def _import_one(self, variable: dict[str, Any]) -> dict[str, Any]:
        value = variable.get("value")
        if value is None:
            value = safe_decode(variable.get("valueBase64", ""))
        return await self.update_variable(
            variable["_id"],
            value,
            variable.get("description", ""),
            variable.get("expressionType", "string"),
        )

    async def import_variable(
        self, variable_id: str, import_data: dict[str, Any]
    ) -> dict[str, Any]:
        variables = VariablesExport.model_validate(import_data).variables
        if variable_id not in variables:
            msg = f"Variable {variable_id} not found in import data"
            raise FrodoError(msg)
        return await self._import_one(variables[variable_id])

    async def import_variables(self, import_data: dict[str, Any]) -> list[dict[str, Any]]:
        """Import every variable from an export envelope.

        Raises:
            FrodoError: Aggregating every failed import.

        """
        variables = VariablesExport.model_validate(import_data).variables
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for variable in variables.values():
            try:
                imported.append(await self._import_one(variable))
            except FrodoError as e:
                errors.append(e)
        if errors:
            msg = "Error importing variables"
            raise FrodoError(msg, errors)
        return imported
