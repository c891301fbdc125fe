"""Environment variables API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Literal

from ..._base import BaseClient, RequestConfig
from ...utils.forgerock import get_env_base_url

API_VERSION = "protocol=1.0,resource=1.0"

VariableExpressionType = Literal[
    "array",
    "base64encodedinlined",
    "bool",
    "int",
    "keyvaluelist",
    "list",
    "number",
    "object",
    "string",
]


class VariablesApi:
    """Raw access to ``/environment/variables``."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _base_url(self) -> str:
        return f"{get_env_base_url(self._state)}/variables"

    async def get_variables(self) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_variable(self, variable_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request(
            "GET", f"{self._base_url()}/{variable_id}", config=config
        )

    async def put_variable(
        self,
        variable_id: str,
        value: str,
        description: str = "",
        expression_type: VariableExpressionType = "string",
    ) -> dict[str, Any]:
        """Create or update a variable.

        Args:
            variable_id: Variable id, e.g. ``esv-my-variable``
            value: Base64 encoded value
            description: Variable description
            expression_type: Type the value is coerced to in expressions

        Returns:
            The stored variable.

        """
        body = {
            "valueBase64": value,
            "description": description,
            "expressionType": expression_type,
        }
        config = RequestConfig(json_data=body, api_version=API_VERSION, api="env")
        return await self._client.make_request(
            "PUT", f"{self._base_url()}/{variable_id}", config=config
        )

    async def set_variable_description(self, variable_id: str, description: str) -> Any:
        config = RequestConfig(
            json_data={"description": description},
            params={"_action": "setDescription"},
            api_version=API_VERSION,
            api="env",
        )
        return await self._client.make_request(
            "POST", f"{self._base_url()}/{variable_id}", config=config
        )

    async def delete_variable(self, variable_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/{variable_id}", config=config
        )
