"""Test configuration and common utilities.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import respx

from frodo import FrodoLib, State
from frodo._base import BaseClient

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

HOST = "https://openam-frodo-dev.forgeblocks.com/am"
AM_REALM_URL = f"{HOST}/json/realms/root/realms/alpha"
AM_GLOBAL_URL = f"{HOST}/json"
IDM_URL = "https://openam-frodo-dev.forgeblocks.com/openidm"
ENV_URL = "https://openam-frodo-dev.forgeblocks.com/environment"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FRODO_* variables of the developer's shell out of the tests."""
    for name in (
        "FRODO_HOST",
        "FRODO_IDM_HOST",
        "FRODO_REALM",
        "FRODO_USERNAME",
        "FRODO_PASSWORD",
        "FRODO_DEPLOYMENT",
        "FRODO_AUTHENTICATION_SERVICE",
        "FRODO_CONNECTION_PROFILES_PATH",
        "FRODO_MASTER_KEY_PATH",
        "FRODO_MASTER_KEY",
        "FRODO_LOG_KEY",
        "FRODO_LOG_SECRET",
        "FRODO_SA_ID",
        "FRODO_SA_JWK",
        "FRODO_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def state() -> State:
    """Return a state for a logged-in cloud tenant session.

    Returns:
        State: Session state pointing at the fake tenant.

    """
    return State(
        host=HOST,
        realm="alpha",
        deployment_type="cloud",
        username="frodo-admin",
        cookie_name="iPlanetDirectoryPro",
        cookie_value="session-token",
        bearer_token="bearer-token",
        am_version="7.5.0",
    )


@pytest.fixture
async def client(state: State) -> AsyncGenerator[BaseClient, None]:
    """Create a transport client without retries.

    Yields:
        BaseClient: Configured test client.

    """
    async with BaseClient(state, timeout=5.0, retries=0) as client:
        yield client


@pytest.fixture
async def frodo(state: State) -> AsyncGenerator[FrodoLib, None]:
    """Create the library facade without retries.

    Yields:
        FrodoLib: Configured library instance.

    """
    async with FrodoLib(state=state, timeout=5.0, retries=0) as frodo:
        yield frodo


@pytest.fixture
def mock_responses() -> Generator[Any, None, None]:
    """Mock HTTP responses.

    Yields:
        The mock router for HTTP requests.

    """
    with respx.mock:
        yield respx
