"""Environment certificate signing request API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from ..._base import BaseClient, RequestConfig
from ...utils.forgerock import get_env_base_url

API_VERSION = "protocol=1.0,resource=1.0"


class EnvCSRsApi:
    """Raw access to ``/environment/csrs``."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _base_url(self) -> str:
        return f"{get_env_base_url(self._state)}/csrs"

    async def get_csrs(self) -> list[dict[str, Any]]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_csr(self, csr_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request(
            "GET", f"{self._base_url()}/{csr_id}", config=config
        )

    async def create_csr(self, csr: dict[str, Any]) -> dict[str, Any]:
        config = RequestConfig(json_data=csr, api_version=API_VERSION, api="env")
        return await self._client.make_request("POST", self._base_url(), config=config)

    async def update_csr(self, csr_id: str, certificate: str) -> dict[str, Any]:
        """Complete a CSR by uploading the signed certificate."""
        config = RequestConfig(
            json_data={"certificate": certificate}, api_version=API_VERSION, api="env"
        )
        return await self._client.make_request(
            "PATCH", f"{self._base_url()}/{csr_id}", config=config
        )

    async def delete_csr(self, csr_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/{csr_id}", config=config
        )
