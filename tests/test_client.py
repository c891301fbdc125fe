"""Tests for the library facade.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from frodo import FrodoLib, State
from frodo.ops import (
    AgentOps,
    AuthenticateOps,
    ConnectionProfileOps,
    EnvCertificatesOps,
    JourneyOps,
    SecretsOps,
    UtilsOps,
)

from .conftest import AM_REALM_URL, HOST


def test_client_initialization() -> None:
    """Every resource group is attached to the facade."""
    frodo = FrodoLib(HOST, "alpha", "admin", "pw", deployment_type="cloud")
    assert isinstance(frodo.login, AuthenticateOps)
    assert isinstance(frodo.conn, ConnectionProfileOps)
    assert isinstance(frodo.agent, AgentOps)
    assert isinstance(frodo.journey, JourneyOps)
    assert isinstance(frodo.secret, SecretsOps)
    assert isinstance(frodo.cert, EnvCertificatesOps)
    assert isinstance(frodo.utils, UtilsOps)
    for name in (
        "cot",
        "script",
        "service",
        "theme",
        "idm_config",
        "managed_object",
        "variable",
        "csr",
    ):
        assert hasattr(frodo, name)


def test_explicit_values_set_state() -> None:
    """Constructor arguments land on the session state."""
    frodo = FrodoLib(
        HOST, "bravo", "admin", "pw", deployment_type="forgeops", curlirize=True
    )
    assert frodo.state.get_host() == HOST
    assert frodo.state.get_realm() == "bravo"
    assert frodo.state.get_username() == "admin"
    assert frodo.state.get_password() == "pw"
    assert frodo.state.get_deployment_type() == "forgeops"
    assert frodo.state.curlirize is True


def test_shared_state_keeps_unset_values() -> None:
    """A passed state is reused; only non-empty arguments override it."""
    state = State(host=HOST, realm="alpha", username="keep")
    frodo = FrodoLib(state=state, realm="bravo")
    assert frodo.state is state
    assert state.realm == "bravo"
    assert state.username == "keep"


def test_unknown_state_value() -> None:
    """Misspelled state values are rejected."""
    with pytest.raises(TypeError, match="Unknown state value: hots"):
        FrodoLib(hots=HOST)


def test_realm_defaults_by_deployment() -> None:
    """Without a realm, cloud tenants default to alpha and others to root."""
    assert FrodoLib(HOST, deployment_type="cloud").state.get_realm() == "alpha"
    assert FrodoLib(HOST, deployment_type="classic").state.get_realm() == "/"


async def test_client_context_manager() -> None:
    """The facade works as an async context manager over a custom transport."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"_id": "s1", "name": "Script"})

    state = State(
        host=HOST,
        realm="alpha",
        cookie_name="iPlanetDirectoryPro",
        cookie_value="session",
    )
    async with FrodoLib(
        state=state, transport=httpx.MockTransport(handler), retries=0
    ) as frodo:
        script: Any = await frodo.script.read_script("s1")
    assert script["name"] == "Script"
    assert str(seen[0].url).startswith(f"{AM_REALM_URL}/scripts/s1")
    assert seen[0].headers["Cookie"] == "iPlanetDirectoryPro=session"


async def test_close(state: State) -> None:
    """Closing the facade closes the HTTP client."""
    frodo = FrodoLib(state=state)
    await frodo.close()
    assert frodo._client._client.is_closed
