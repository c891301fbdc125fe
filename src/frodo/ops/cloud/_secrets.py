"""Environment secret operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import os
from typing import Any

from ..._base import BaseClient
from ...api.cloud._secrets import SecretsApi
from ...exceptions import FrodoError
from ...models import SecretsExport
from ...utils.base64_utils import decode, encode, is_base64_encoded
from ...utils.console import (
    create_progress_indicator,
    debug_message,
    stop_progress_indicator,
    update_progress_indicator,
)
from ...utils.export_import import get_metadata

SECRET_EXISTS_MESSAGE = "Failed to create secret, the secret already exists"
PLACEHOLDER_SECRET_VALUE = "placeholder secret value"


def get_encoded_value(value: str, encoding: str) -> str:
    """Encode a secret value the way the platform expects for ``encoding``.

    PEM values are sent base64 encoded once. HMAC and AES keys are already
    base64 encoded key material and are sent encoded a second time. Values
    already in the target form are passed through.
    """
    if encoding == "pem":
        return value if is_base64_encoded(value) else encode(value)
    if encoding in ("base64hmac", "base64aes"):
        if is_base64_encoded(value) and is_base64_encoded(_try_decode(value)):
            return value
        return encode(value)
    return encode(value)


def _try_decode(value: str) -> str:
    try:
        return decode(value)
    except (ValueError, UnicodeDecodeError):
        return ""


def resolve_secret_value(secret_data: dict[str, Any], include_active_values: bool) -> str:
    """Pick the value to import for a secret.

    An environment variable named after the secret id, with dashes replaced
    by underscores, wins over the exported ``activeValue``.
    """
    if not include_active_values:
        return PLACEHOLDER_SECRET_VALUE
    env_value = os.environ.get(secret_data["_id"].replace("-", "_"))
    if env_value:
        return env_value
    return secret_data.get("activeValue") or PLACEHOLDER_SECRET_VALUE


def _already_exists(error: FrodoError) -> bool:
    return error.http_status == 400 and error.http_message == SECRET_EXISTS_MESSAGE


class SecretsOps:
    """Manage environment secrets (ESVs) and their versions."""

    def __init__(self, client: BaseClient) -> None:
        self._api = SecretsApi(client)
        self._state = client.state

    def create_secrets_export_template(self) -> dict[str, Any]:
        return SecretsExport(meta=get_metadata(self._state)).to_json_dict()

    async def read_secrets(self) -> list[dict[str, Any]]:
        try:
            return (await self._api.get_secrets())["result"]
        except FrodoError as e:
            msg = "Error reading secrets"
            raise FrodoError(msg, e) from e

    async def read_secret(self, secret_id: str) -> dict[str, Any]:
        try:
            return await self._api.get_secret(secret_id)
        except FrodoError as e:
            msg = f"Error reading secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def create_secret(
        self,
        secret_id: str,
        value: str,
        description: str = "",
        encoding: str = "generic",
        use_in_placeholders: bool = True,
    ) -> dict[str, Any]:
        """Create a secret.

        Args:
            secret_id: Secret id
            value: Clear text value, or an already encoded value for pem and key encodings
            description: Secret description
            encoding: One of generic, pem, base64hmac, base64aes
            use_in_placeholders: Whether the secret may be used in placeholders

        Returns:
            The created secret.

        """
        debug_message(self._state, "SecretsOps.create_secret: start")
        try:
            response = await self._api.put_secret(
                secret_id,
                get_encoded_value(value, encoding),
                description,
                encoding,
                use_in_placeholders,
            )
        except FrodoError as e:
            msg = f"Error creating secret {secret_id}"
            raise FrodoError(msg, e) from e
        debug_message(self._state, "SecretsOps.create_secret: end")
        return response

    async def update_secret_description(self, secret_id: str, description: str) -> Any:
        try:
            return await self._api.set_secret_description(secret_id, description)
        except FrodoError as e:
            msg = f"Error updating description of secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def delete_secret(self, secret_id: str) -> dict[str, Any]:
        try:
            return await self._api.delete_secret(secret_id)
        except FrodoError as e:
            msg = f"Error deleting secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def read_versions_of_secret(self, secret_id: str) -> list[dict[str, Any]]:
        try:
            return await self._api.get_secret_versions(secret_id)
        except FrodoError as e:
            msg = f"Error reading versions of secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def read_version_of_secret(self, secret_id: str, version: str) -> dict[str, Any]:
        try:
            return await self._api.get_version_of_secret(secret_id, version)
        except FrodoError as e:
            msg = f"Error reading version {version} of secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def create_version_of_secret(self, secret_id: str, value: str) -> dict[str, Any]:
        """Add a new version, encoded according to the secret's encoding."""
        try:
            secret = await self._api.get_secret(secret_id)
            return await self._api.create_new_version_of_secret(
                secret_id, get_encoded_value(value, secret.get("encoding", "generic"))
            )
        except FrodoError as e:
            msg = f"Error creating new version of secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def enable_version_of_secret(self, secret_id: str, version: str) -> dict[str, Any]:
        try:
            return await self._api.set_status_of_version_of_secret(
                secret_id, version, "ENABLED"
            )
        except FrodoError as e:
            msg = f"Error enabling version {version} of secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def disable_version_of_secret(self, secret_id: str, version: str) -> dict[str, Any]:
        try:
            return await self._api.set_status_of_version_of_secret(
                secret_id, version, "DISABLED"
            )
        except FrodoError as e:
            msg = f"Error disabling version {version} of secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def delete_version_of_secret(self, secret_id: str, version: str) -> dict[str, Any]:
        try:
            return await self._api.delete_version_of_secret(secret_id, version)
        except FrodoError as e:
            msg = f"Error deleting version {version} of secret {secret_id}"
            raise FrodoError(msg, e) from e

    async def export_secret(self, secret_id: str) -> dict[str, Any]:
        export_data = self.create_secrets_export_template()
        secret = await self.read_secret(secret_id)
        export_data["secrets"][secret["_id"]] = secret
        return export_data

    async def export_secrets(self) -> dict[str, Any]:
        """Export every secret definition.

        Returns:
            Envelope ``{meta, secrets: {id: secret}}``.

        """
        export_data = self.create_secrets_export_template()
        secrets = await self.read_secrets()
        indicator = create_progress_indicator(
            self._state, len(secrets), "Exporting secrets..."
        )
        for secret in secrets:
            update_progress_indicator(self._state, indicator, f"Exporting secret {secret['_id']}")
            export_data["secrets"][secret["_id"]] = secret
        stop_progress_indicator(
            self._state, indicator, f"Exported {len(secrets)} secrets.", "success"
        )
        return export_data

    async def _import_one(
        self, secret_data: dict[str, Any], include_active_values: bool
    ) -> dict[str, Any]:
        secret_data = dict(secret_data)
        secret_data.pop("_rev", None)
        secret_id = secret_data["_id"]
        value = resolve_secret_value(secret_data, include_active_values)
        try:
            return await self.create_secret(
                secret_id,
                value,
                secret_data.get("description", ""),
                secret_data.get("encoding", "generic"),
                secret_data.get("useInPlaceholders", True),
            )
        except FrodoError as e:
            if not _already_exists(e):
                raise
        await self.update_secret_description(secret_id, secret_data.get("description", ""))
        if include_active_values:
            await self.create_version_of_secret(secret_id, value)
        return await self.read_secret(secret_id)

    async def import_secret(
        self,
        secret_id: str,
        import_data: dict[str, Any],
        include_active_values: bool = True,
    ) -> dict[str, Any]:
        """Import one secret from an export envelope.

        An existing secret gets its description updated and, when values are
        included, a new version.

        Raises:
            FrodoError: If the secret is not in the import data or the import fails.

        """
        secrets = SecretsExport.model_validate(import_data).secrets
        if secret_id not in secrets:
            msg = f"Secret {secret_id} not found in import data"
            raise FrodoError(msg)
        try:
            return await self._import_one(secrets[secret_id], include_active_values)
        except FrodoError as e:
            msg = f"Error importing secret {secret_id}"
            raise FrodoError(msg, [e]) from e

    async def import_secrets(
        self, import_data: dict[str, Any], include_active_values: bool = True
    ) -> list[dict[str, Any]]:
        """Import every secret from an export envelope.

        Raises:
            FrodoError: Aggregating every failed import.

        """
        secrets = SecretsExport.model_validate(import_data).secrets
        imported: list[dict[str, Any]] = []
        errors: list[Exception] = []
        for secret_data in secrets.values():
            try:
                imported.append(await self._import_one(secret_data, include_active_values))
            except FrodoError as e:
                errors.append(e)
        if errors:
            msg = "Error importing secrets"
            raise FrodoError(msg, errors)
        return imported
