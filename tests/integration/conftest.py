"""Fixtures for tests against a live tenant.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from frodo import FrodoLib

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Separate from the FRODO_* variables, which the unit tests clear.
TENANT_ENV = ("FRODO_TEST_HOST", "FRODO_TEST_USERNAME", "FRODO_TEST_PASSWORD")


@pytest.fixture
async def integration_frodo() -> AsyncGenerator[FrodoLib, None]:
    """Log in to the tenant named by ``FRODO_TEST_*``, or skip."""
    missing = [name for name in TENANT_ENV if not os.environ.get(name)]
    if missing:
        pytest.skip(f"Live tenant not configured: {', '.join(missing)}")
    async with FrodoLib(
        os.environ["FRODO_TEST_HOST"],
        os.environ.get("FRODO_TEST_REALM"),
        os.environ["FRODO_TEST_USERNAME"],
        os.environ["FRODO_TEST_PASSWORD"],
        deployment_type=os.environ.get("FRODO_TEST_DEPLOYMENT"),
        timeout=10.0,
        retries=2,
    ) as frodo:
        if not await frodo.login.get_tokens():
            pytest.fail("Unable to log in to the live tenant")
        yield frodo
