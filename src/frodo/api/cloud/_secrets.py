"""Environment secrets API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Literal

from ..._base import BaseClient, RequestConfig
from ...utils.forgerock import get_env_base_url

API_VERSION = "protocol=1.0,resource=1.0"

SecretEncoding = Literal["generic", "pem", "base64hmac", "base64aes"]
VersionStatus = Literal["DISABLED", "ENABLED"]


class SecretsApi:
    """Raw access to ``/environment/secrets``."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _base_url(self) -> str:
        return f"{get_env_base_url(self._state)}/secrets"

    def _config(self, **kwargs: Any) -> RequestConfig:
        return RequestConfig(api_version=API_VERSION, api="env", **kwargs)

    async def get_secrets(self) -> dict[str, Any]:
        """Get all secrets.

        Returns:
            Paged result of secrets (values are never returned).

        """
        return await self._client.make_request(
            "GET", self._base_url(), config=self._config()
        )

    async def get_secret(self, secret_id: str) -> dict[str, Any]:
        return await self._client.make_request(
            "GET", f"{self._base_url()}/{secret_id}", config=self._config()
        )

    async def put_secret(
        self,
        secret_id: str,
        value: str,
        description: str,
        encoding: str = "generic",
        use_in_placeholders: bool = True,
    ) -> dict[str, Any]:
        """Create a secret.

        Args:
            secret_id: Secret id, e.g. ``esv-my-secret``
            value: Base64 encoded value
            description: Secret description
            encoding: Value encoding
            use_in_placeholders: Whether the secret may be used in placeholders

        Returns:
            The created secret.

        """
        body = {
            "valueBase64": value,
            "description": description,
            "encoding": encoding,
            "useInPlaceholders": use_in_placeholders,
        }
        return await self._client.make_request(
            "PUT",
            f"{self._base_url()}/{secret_id}",
            config=self._config(json_data=body),
        )

    async def set_secret_description(self, secret_id: str, description: str) -> Any:
        return await self._client.make_request(
            "POST",
            f"{self._base_url()}/{secret_id}",
            config=self._config(
                json_data={"description": description},
                params={"_action": "setDescription"},
            ),
        )

    async def delete_secret(self, secret_id: str) -> dict[str, Any]:
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/{secret_id}", config=self._config()
        )

    async def get_secret_versions(self, secret_id: str) -> list[dict[str, Any]]:
        return await self._client.make_request(
            "GET", f"{self._base_url()}/{secret_id}/versions", config=self._config()
        )

    async def create_new_version_of_secret(
        self, secret_id: str, value: str
    ) -> dict[str, Any]:
        """Add a version holding a new base64 encoded value."""
        return await self._client.make_request(
            "POST",
            f"{self._base_url()}/{secret_id}/versions",
            config=self._config(
                json_data={"valueBase64": value}, params={"_action": "create"}
            ),
        )

    async def get_version_of_secret(self, secret_id: str, version: str) -> dict[str, Any]:
        return await self._client.make_request(
            "GET",
            f"{self._base_url()}/{secret_id}/versions/{version}",
            config=self._config(),
        )

    async def set_status_of_version_of_secret(
        self, secret_id: str, version: str, status: VersionStatus
    ) -> dict[str, Any]:
        return await self._client.make_request(
            "POST",
            f"{self._base_url()}/{secret_id}/versions/{version}",
            config=self._config(
                json_data={"status": status}, params={"_action": "changestatus"}
            ),
        )

    async def delete_version_of_secret(self, secret_id: str, version: str) -> dict[str, Any]:
        return await self._client.make_request(
            "DELETE",
            f"{self._base_url()}/{secret_id}/versions/{version}",
            config=self._config(),
        )
