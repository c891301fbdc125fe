"""Environment certificates API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from ..._base import BaseClient, RequestConfig
from ...utils.forgerock import get_env_base_url

API_VERSION = "protocol=1.0,resource=1.0"


class EnvCertificatesApi:
    """Raw access to ``/environment/certificates``."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    def _base_url(self) -> str:
        return f"{get_env_base_url(self._state)}/certificates"

    async def get_certificates(self) -> list[dict[str, Any]]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request("GET", self._base_url(), config=config)

    async def get_certificate(self, cert_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request(
            "GET", f"{self._base_url()}/{cert_id}", config=config
        )

    async def create_certificate(
        self, active: bool, certificate: str, private_key: str
    ) -> dict[str, Any]:
        """Upload a certificate and its private key.

        Args:
            active: Whether the certificate should be activated
            certificate: PEM encoded certificate chain
            private_key: PEM encoded private key

        Returns:
            The created certificate, without the private key.

        """
        config = RequestConfig(
            json_data={
                "active": active,
                "certificate": certificate,
                "privateKey": private_key,
            },
            api_version=API_VERSION,
            api="env",
        )
        return await self._client.make_request("POST", self._base_url(), config=config)

    async def update_certificate(self, cert_id: str, active: bool) -> dict[str, Any]:
        config = RequestConfig(
            json_data={"active": active}, api_version=API_VERSION, api="env"
        )
        return await self._client.make_request(
            "PATCH", f"{self._base_url()}/{cert_id}", config=config
        )

    async def delete_certificate(self, cert_id: str) -> dict[str, Any]:
        config = RequestConfig(api_version=API_VERSION, api="env")
        return await self._client.make_request(
            "DELETE", f"{self._base_url()}/{cert_id}", config=config
        )
