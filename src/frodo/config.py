"""Environment-backed settings for the Frodo library.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_frodo_home() -> Path:
    """Return the per-user directory holding connection profiles and keys."""
    return Path.home() / ".frodo"


class FrodoSettings(BaseSettings):
    """Defaults read from ``FRODO_*`` environment variables.

    Values set explicitly on :class:`frodo.state.State` always win over these.
    """

    model_config = SettingsConfigDict(
        env_prefix="FRODO_",
        extra="ignore",
        case_sensitive=False,
    )

    host: str | None = None
    idm_host: str | None = None
    realm: str | None = None
    username: str | None = None
    password: str | None = None
    deployment: str | None = Field(
        default=None,
        description="Deployment type: classic, cloud or forgeops.",
    )
    authentication_service: str | None = None
    connection_profiles_path: str | None = None
    master_key_path: str | None = None
    master_key: str | None = None
    log_key: str | None = None
    sa_id: str | None = None
    sa_jwk: str | None = Field(
        default=None,
        description="Service account private key as a JSON Web Key.",
    )
    log_secret: str | None = None
    debug: bool = False


def get_settings() -> FrodoSettings:
    """Read the current environment into a fresh settings object."""
    return FrodoSettings()
