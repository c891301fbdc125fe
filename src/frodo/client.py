"""Frodo library facade using service composition.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Self

import httpx

from ._base import BaseClient
from .ops import (
    AgentOps,
    AuthenticateOps,
    CirclesOfTrustOps,
    ConnectionProfileOps,
    EnvCertificatesOps,
    EnvCSRsOps,
    IdmConfigOps,
    JourneyOps,
    ManagedObjectOps,
    ScriptOps,
    SecretsOps,
    ServiceOps,
    ThemeOps,
    UtilsOps,
    VariablesOps,
)
from .state import State


class FrodoLib:
    """One tenant session with every resource operation attached."""

    def __init__(
        self,
        host: str | None = None,
        realm: str | None = None,
        username: str | None = None,
        password: str | None = None,
        *,
        deployment_type: str | None = None,
        timeout: float = 30.0,
        retries: int = 3,
        state: State | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **state_values: Any,
    ) -> None:
        """Initialize the library.

        Args:
            host: Tenant URL, e.g. ``https://openam-tenant.forgeblocks.com/am``
            realm: Realm to operate in
            username: Admin user name
            password: Admin password
            deployment_type: ``cloud``, ``forgeops`` or ``classic``
            timeout: Request timeout in seconds
            retries: Number of retry attempts for retryable failures
            state: Existing state to share; explicit arguments are applied to it
            transport: Optional httpx transport, mainly for tests
            **state_values: Any other :class:`State` field

        """
        self.state = state or State()
        explicit = {
            "host": host,
            "realm": realm,
            "username": username,
            "password": password,
            "deployment_type": deployment_type,
            **state_values,
        }
        for name, value in explicit.items():
            if value is None:
                continue
            if not hasattr(self.state, name):
                msg = f"Unknown state value: {name}"
                raise TypeError(msg)
            setattr(self.state, name, value)

        self._client = BaseClient(
            self.state, timeout=timeout, retries=retries, transport=transport
        )

        # Initialize ops
        self.login = AuthenticateOps(self._client)
        self.conn = ConnectionProfileOps(self._client)
        self.agent = AgentOps(self._client)
        self.cot = CirclesOfTrustOps(self._client)
        self.script = ScriptOps(self._client)
        self.service = ServiceOps(self._client)
        self.journey = JourneyOps(self._client)
        self.theme = ThemeOps(self._client)
        self.idm_config = IdmConfigOps(self._client)
        self.managed_object = ManagedObjectOps(self._client)
        self.secret = SecretsOps(self._client)
        self.variable = VariablesOps(self._client)
        self.cert = EnvCertificatesOps(self._client)
        self.csr = EnvCSRsOps(self._client)
        self.utils = UtilsOps(self._client)

    async def __aenter__(self) -> Self:
        await self._client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self._client.__aexit__(exc_type, exc_val, exc_tb)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.close()
