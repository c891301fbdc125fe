"""Connection profile models.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .base import FrodoModel


class SecureConnectionProfile(FrodoModel):
    """A tenant entry as persisted, with secrets encrypted."""

    tenant: str | None = Field(default=None, exclude=True)
    username: str | None = None
    encoded_password: str | None = None
    log_api_key: str | None = None
    encoded_log_api_secret: str | None = None
    authentication_service: str | None = None
    authentication_header_overrides: dict[str, str] | None = None
    deployment_type: str | None = None
    svcacct_id: str | None = None
    svcacct_name: str | None = None
    encoded_svcacct_jwk: str | None = None


class ConnectionProfile(FrodoModel):
    """A tenant entry with secrets decrypted for use."""

    tenant: str
    username: str | None = None
    password: str | None = None
    log_api_key: str | None = None
    log_api_secret: str | None = None
    authentication_service: str | None = None
    authentication_header_overrides: dict[str, str] = Field(default_factory=dict)
    deployment_type: str | None = None
    svcacct_id: str | None = None
    svcacct_name: str | None = None
    svcacct_jwk: dict[str, Any] | None = None
