"""Environment certificate signing request operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from ..._base import BaseClient
from ...api.cloud._env_csrs import EnvCSRsApi
from ...exceptions import FrodoError
from ...models import CSR, CSRResponse
from ...utils.console import debug_message


class EnvCSRsOps:
    """Manage certificate signing requests."""

    def __init__(self, client: BaseClient) -> None:
        self._api = EnvCSRsApi(client)
        self._state = client.state

    async def read_csr(self, csr_id: str) -> CSRResponse:
        try:
            return CSRResponse.model_validate(await self._api.get_csr(csr_id))
        except FrodoError as e:
            msg = f"Error reading CSR {csr_id}"
            raise FrodoError(msg, e) from e

    async def read_csrs(self) -> list[CSRResponse]:
        try:
            data = await self._api.get_csrs()
        except FrodoError as e:
            msg = "Error reading CSRs"
            raise FrodoError(msg, e) from e
        return [CSRResponse.model_validate(item) for item in data or []]

    async def create_csr(self, csr: CSR | dict[str, Any]) -> CSRResponse:
        """Create a CSR.

        Args:
            csr: Request parameters; ``common_name`` is required by the platform

        Returns:
            The CSR including the PEM encoded ``request``.

        """
        debug_message(self._state, "EnvCSRsOps.create_csr: start")
        body = CSR.model_validate(csr).to_json_dict()
        try:
            result = CSRResponse.model_validate(await self._api.create_csr(body))
        except FrodoError as e:
            msg = "Error creating CSR"
            raise FrodoError(msg, e) from e
        debug_message(self._state, "EnvCSRsOps.create_csr: end")
        return result

    async def update_csr(self, csr_id: str, certificate: str) -> CSRResponse:
        try:
            return CSRResponse.model_validate(
                await self._api.update_csr(csr_id, certificate)
            )
        except FrodoError as e:
            msg = f"Error updating CSR {csr_id}"
            raise FrodoError(msg, e) from e

    async def delete_csr(self, csr_id: str) -> CSRResponse:
        try:
            return CSRResponse.model_validate(await self._api.delete_csr(csr_id))
        except FrodoError as e:
            msg = f"Error deleting CSR {csr_id}"
            raise FrodoError(msg, e) from e

    async def delete_csrs(self) -> list[CSRResponse]:
        """Delete every CSR, one at a time.

        Raises:
            FrodoError: Aggregating every failed delete.

        """
        csrs = await self.read_csrs()
        deleted: list[CSRResponse] = []
        errors: list[Exception] = []
        for csr in csrs:
            try:
                await self._api.delete_csr(csr.id)
                deleted.append(csr)
            except FrodoError as e:
                errors.append(e)
        if errors:
            msg = "Error deleting CSRs"
            raise FrodoError(msg, errors)
        return deleted
